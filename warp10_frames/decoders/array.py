"""
Array decoder for warp10-frames.

Handles a list of primitives left on top of the stack, which Warp 10
serialises as ``[[42.5, 43.2, 44.1]]``. Only the first inner list is
used; it becomes a single ``array_value`` field.
"""

from __future__ import annotations

from typing import Any

from warp10_frames.decoders.base import BaseDecoder
from warp10_frames.exceptions import MalformedInputError
from warp10_frames.frames import Frame, FrameSet
from warp10_frames.values import infer_field

ARRAY_FRAME_NAME = "arrayResults"
ARRAY_FIELD_NAME = "array_value"


class ArrayDecoder(BaseDecoder):
    """Decoder for ``[[v1, v2, ...]]`` responses."""

    shape_name = "array"

    def accepts(self, document: Any) -> bool:
        return (
            isinstance(document, list)
            and len(document) > 0
            and all(isinstance(element, list) for element in document)
        )

    def decode(self, document: Any) -> FrameSet:
        values = document[0]
        if not values:
            raise MalformedInputError("Array parsing error: first array is empty")
        field = infer_field(ARRAY_FIELD_NAME, values)
        return FrameSet(frames=[Frame(ARRAY_FRAME_NAME, [field])])
