"""
Geo Time Series (GTS) list decoder for warp10-frames.

Handles the most common Warp 10 response: the stack holding GTS objects,
either directly or grouped in nested lists (a GTS list left by FETCH next
to single series, for instance):

  [{"c": "cpu", "l": {"host": "a"}, "a": {}, "v": [[1619784000000000, 42.5]]}]
  [[{"c": "cpu", ...}, {"c": "mem", ...}], {"c": "disk", ...}]

Input structure of one GTS:
  - c:  class name
  - l:  labels (string -> string)
  - a:  attributes (string -> string), unused for display
  - la: last activity (optional)
  - v:  samples ``[ts, value]``, ``[ts, elev, value]``,
        ``[ts, lat, lon, value]`` or ``[ts, lat, lon, elev, value]``;
        the timestamp is in microseconds, the value is always last

Output:
  One two-field frame per series, ``time`` then the series values, named
  ``class{labels}``. The frame name itself is left empty so the host does
  not render the series identity twice.

Series are converted in parallel. A series with an unusable sample is
dropped from the output and reported in ``FrameSet.series_errors``; the
other series are unaffected.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field as ModelField, ValidationError

from warp10_frames.assembler import ConcurrentFrameAssembler
from warp10_frames.decoders.base import BaseDecoder
from warp10_frames.exceptions import MalformedInputError, MalformedSampleError
from warp10_frames.frames import Field, Frame, FrameSet
from warp10_frames.labels import format_series_name
from warp10_frames.values import ValueKind, conform_values, infer_series_type, kind_of

logger = logging.getLogger(__name__)

TIME_FIELD_NAME = "time"
SERIES_FRAME_NAME = ""


class GeoTimeSeries(BaseModel):
    """One GTS as serialised by Warp 10."""

    model_config = ConfigDict(populate_by_name=True)

    class_name: str = ModelField(..., alias="c")
    labels: dict[str, str] = ModelField(default_factory=dict, alias="l")
    attributes: dict[str, str] = ModelField(default_factory=dict, alias="a")
    last_activity: int | None = ModelField(None, alias="la")
    values: list[list[Any]] = ModelField(..., alias="v")


def unwrap_series(document: Any) -> list[GeoTimeSeries]:
    """Flatten one level of nesting and validate every element as a GTS.

    ``[[a, b], c]`` and ``[a, b, c]`` both yield ``[a, b, c]``. The parsed
    values are used as-is, so large timestamps keep full precision.

    Raises:
        MalformedInputError: If *document* is not a list, or any element
            is not a GTS object.
    """
    if not isinstance(document, list):
        raise MalformedInputError("GTS list parsing error: response is not a list")

    flat: list[Any] = []
    for element in document:
        if isinstance(element, list):
            flat.extend(element)
        else:
            flat.append(element)

    try:
        return [GeoTimeSeries.model_validate(element) for element in flat]
    except ValidationError as exc:
        raise MalformedInputError(f"GTS list parsing error: {exc}") from exc


def _epoch_millis(stamp: Any) -> int:
    """Truncate a microsecond timestamp to whole milliseconds (toward zero)."""
    micros = int(stamp)
    return micros // 1000 if micros >= 0 else -(-micros // 1000)


def _is_epoch(stamp: Any) -> bool:
    """True for an int64 or a finite float (``isfinite`` overflows on huge ints)."""
    kind = kind_of(stamp)
    if kind is ValueKind.INT64:
        return True
    return isinstance(stamp, float) and math.isfinite(stamp)


def series_to_frame(gts: GeoTimeSeries, hide_labels: bool = False) -> Frame:
    """Convert one GTS into a ``time`` + values frame.

    Raises:
        MalformedSampleError: If a sample is empty, its timestamp is not
            an int64 or finite float, or a timestamp is outside the range
            a datetime can hold.
    """
    name = gts.class_name if hide_labels else format_series_name(gts.class_name, gts.labels)

    for position, sample in enumerate(gts.values):
        if not sample:
            raise MalformedSampleError(
                f"{name}: sample {position} is empty", series_name=name
            )
        stamp = sample[0]
        if not _is_epoch(stamp):
            raise MalformedSampleError(
                f"{name}: epoch read: {stamp!r} in sample {position}",
                series_name=name,
            )

    value_type = infer_series_type(sample[-1] for sample in gts.values)
    millis = [_epoch_millis(sample[0]) for sample in gts.values]
    values = conform_values(name, [sample[-1] for sample in gts.values], value_type)

    try:
        time_field = Field.from_epoch_millis(TIME_FIELD_NAME, millis)
    except (OverflowError, ValueError) as exc:
        raise MalformedSampleError(
            f"{name}: epoch out of range: {exc}", series_name=name
        ) from exc

    return Frame(
        SERIES_FRAME_NAME,
        [time_field, Field.from_values(name, value_type, values)],
    )


class SeriesListDecoder(BaseDecoder):
    """Decoder for lists (and lists of lists) of GTS objects."""

    shape_name = "gts list"

    def accepts(self, document: Any) -> bool:
        return isinstance(document, list)

    def decode(self, document: Any) -> FrameSet:
        series = unwrap_series(document)
        logger.debug("Decoding %d GTS", len(series))

        assembler = ConcurrentFrameAssembler(
            max_workers=self.options.max_workers,
            timeout=self.options.series_timeout,
        )
        indexed = list(enumerate(series))
        slots = assembler.map_ordered(self._convert_one, indexed)

        frames = [slot for slot in slots if isinstance(slot, Frame)]
        errors = [slot for slot in slots if isinstance(slot, MalformedSampleError)]
        return FrameSet(frames=frames, series_errors=errors)

    def _convert_one(self, indexed: tuple[int, GeoTimeSeries]) -> Frame | MalformedSampleError:
        index, gts = indexed
        try:
            return series_to_frame(gts, hide_labels=self.options.hide_labels)
        except MalformedSampleError as exc:
            exc.index = index
            logger.error("Skipping series %d: %s", index, exc)
            return exc
