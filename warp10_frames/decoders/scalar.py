"""
Scalar decoder for warp10-frames.

Last resort for the stack: take the first element and emit it as a
one-row field whose name carries its type (``scalar_value_float64`` for
``[42.5]``). An element that is not a primitive ends the conversion with
``UnsupportedValueTypeError`` instead of falling through, since no later
shape could apply.
"""

from __future__ import annotations

import logging
from typing import Any

from warp10_frames.decoders.base import BaseDecoder
from warp10_frames.exceptions import UnsupportedValueTypeError
from warp10_frames.frames import Field, Frame, FrameSet, ValueType
from warp10_frames.values import ValueKind, kind_of

logger = logging.getLogger(__name__)

SCALAR_FRAME_NAME = "scalarResult"

# Maps the element's kind to (field name, field type)
_SCALAR_FIELDS: dict[ValueKind, tuple[str, ValueType]] = {
    ValueKind.STRING: ("scalar_value_string", ValueType.STRING),
    ValueKind.INT64: ("scalar_value_int64", ValueType.INT64),
    ValueKind.FLOAT64: ("scalar_value_float64", ValueType.FLOAT64),
    ValueKind.BOOL: ("scalar_value_bool", ValueType.BOOL),
}


class ScalarDecoder(BaseDecoder):
    """Decoder for ``[value, ...]`` responses (first element only)."""

    shape_name = "scalar"

    def accepts(self, document: Any) -> bool:
        return isinstance(document, list) and len(document) > 0

    def decode(self, document: Any) -> FrameSet:
        value = document[0]
        kind = kind_of(value)
        if kind not in _SCALAR_FIELDS:
            logger.debug("No response type found for scalar of kind %s", kind.value)
            raise UnsupportedValueTypeError(
                f"No response type found: unsupported scalar of kind '{kind.value}'"
            )

        name, value_type = _SCALAR_FIELDS[kind]
        if value_type is ValueType.FLOAT64:
            value = float(value)
        field = Field.from_values(name, value_type, [value])
        logger.debug("Decoded scalar as %s", name)
        return FrameSet(frames=[Frame(SCALAR_FRAME_NAME, [field])])
