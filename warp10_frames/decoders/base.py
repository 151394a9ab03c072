"""
Base decoder protocol / ABC for warp10-frames.

All shape-specific decoders implement this interface. The contract is:
1. ``accepts()`` is a cheap structural predicate on the parsed document.
2. ``decode()`` converts an accepted document into a complete FrameSet,
   or raises ``MalformedInputError`` so the dispatcher can try the next
   decoder. Nothing is committed on failure.

The JSON text is parsed once by ``load_document()``; decoders only ever
see Python values.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from warp10_frames.exceptions import MalformedInputError
from warp10_frames.frames import FrameSet


@dataclass(frozen=True)
class DecodeOptions:
    """Per-conversion knobs shared by every decoder.

    Attributes:
        hide_labels: Name series value fields by class name only, without
            the ``{label=value}`` suffix.
        max_workers: Thread pool size for per-series conversion.
        series_timeout: Seconds allowed for converting all series of one
            response. ``None`` means no deadline.
    """

    hide_labels: bool = False
    max_workers: int | None = None
    series_timeout: float | None = None


def load_document(raw: bytes | str) -> Any:
    """Parse a raw Warp 10 response body.

    Raises:
        MalformedInputError: If *raw* is not valid JSON (or not UTF-8).
    """
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedInputError(f"Response is not valid JSON: {exc}") from exc


class BaseDecoder(ABC):
    """Abstract base class for response shape decoders."""

    #: Short shape label used in logs.
    shape_name: str = ""

    def __init__(self, options: DecodeOptions | None = None) -> None:
        self.options = options or DecodeOptions()

    @abstractmethod
    def accepts(self, document: Any) -> bool:
        """Return True if *document* is structurally this decoder's shape."""

    @abstractmethod
    def decode(self, document: Any) -> FrameSet:
        """Convert an accepted document into frames.

        Raises:
            MalformedInputError: If the document turns out not to fit
                this shape after all.
        """

    def decode_raw(self, raw: bytes | str) -> FrameSet:
        """Parse, check and decode *raw* with this decoder alone."""
        document = load_document(raw)
        if not self.accepts(document):
            raise MalformedInputError(f"Response is not a {self.shape_name} response")
        return self.decode(document)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.options!r})"
