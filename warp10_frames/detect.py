"""
Shape detection for Warp 10 responses.

Warp 10 returns its whole stack as JSON, with no tag saying what kind of
value sits on it. Detection runs an ordered chain of decoders against the
parsed response and keeps the first one that succeeds:
table -> gts list -> array -> scalar.

Design: Strategy Pattern
- Each decoder provides a cheap predicate (``accepts``) and a converter
  (``decode``). The chain is a static ordered tuple of decoder classes.
- New shapes are added by writing a decoder and inserting it in the
  chain -- no existing decoder changes.

Detection algorithm:
1. Parse the response once. Invalid JSON matches no shape.
2. For each decoder, in order:
   a. Skip it if ``accepts()`` is False.
   b. Call ``decode()``. A ``MalformedInputError`` means "not this shape
      after all": skip it.
   c. Otherwise return its FrameSet.
3. Fallback: raise UnsupportedShapeError.

Terminal errors (``UnsupportedValueTypeError`` from the scalar decoder,
``ConversionTimeoutError`` from the series fan-out) are not caught here.
"""

from __future__ import annotations

import logging
from typing import Sequence

from warp10_frames.decoders.array import ArrayDecoder
from warp10_frames.decoders.base import BaseDecoder, DecodeOptions, load_document
from warp10_frames.decoders.scalar import ScalarDecoder
from warp10_frames.decoders.series import SeriesListDecoder
from warp10_frames.decoders.table import TableDecoder
from warp10_frames.exceptions import MalformedInputError, UnsupportedShapeError
from warp10_frames.frames import FrameSet

logger = logging.getLogger(__name__)

# Order matters: a table is a list of objects, an array of primitives is
# a list, and every response is a non-empty list for the scalar decoder.
DECODER_CHAIN: tuple[type[BaseDecoder], ...] = (
    TableDecoder,
    SeriesListDecoder,
    ArrayDecoder,
    ScalarDecoder,
)


def build_decoders(options: DecodeOptions | None = None) -> list[BaseDecoder]:
    """Instantiate the default decoder chain with shared options."""
    return [decoder_cls(options) for decoder_cls in DECODER_CHAIN]


def classify_and_convert(
    raw: bytes | str,
    options: DecodeOptions | None = None,
    decoders: Sequence[BaseDecoder] | None = None,
) -> FrameSet:
    """Detect the shape of a Warp 10 response and convert it to frames.

    Args:
        raw: The response body.
        options: Decoder options (label display, series fan-out limits).
            Ignored when *decoders* is given.
        decoders: A custom chain to try instead of the default one.

    Returns:
        The FrameSet produced by the first decoder that succeeds.

    Raises:
        UnsupportedShapeError: If no decoder matches.
        UnsupportedValueTypeError: If the response is a scalar of an
            unsupported kind.
        ConversionTimeoutError: If series conversion misses its deadline.
    """
    try:
        document = load_document(raw)
    except MalformedInputError as exc:
        raise UnsupportedShapeError(f"No supported response type found: {exc}") from exc

    if decoders is None:
        decoders = build_decoders(options)

    for decoder in decoders:
        if not decoder.accepts(document):
            continue
        try:
            result = decoder.decode(document)
        except MalformedInputError as exc:
            logger.debug("Not a %s response: %s", decoder.shape_name, exc)
            continue
        logger.debug(
            "Detected %s response (%d frame(s))", decoder.shape_name, len(result.frames)
        )
        return result

    raise UnsupportedShapeError(
        f"No supported response type found. Tried {len(decoders)} decoder(s): "
        f"{[d.shape_name for d in decoders]}"
    )
