"""
Decoders sub-package for warp10-frames.

Contains shape-specific decoders that convert a parsed Warp 10 response
into typed frames.

Design: Strategy Pattern
- base.py defines the BaseDecoder ABC (accepts + decode) and the single
  JSON parsing boundary.
- table.py implements TableDecoder for ``[{"columns": ..., "rows": ...}]``.
- series.py implements SeriesListDecoder for GTS lists, nested or flat.
- array.py implements ArrayDecoder for ``[[v1, v2, ...]]``.
- scalar.py implements ScalarDecoder for ``[v]``.

The shape dispatcher (detect.py) tries them in that order, because the
shapes overlap: a table is also a list of objects, and every response is
a list.
"""

from warp10_frames.decoders.array import ArrayDecoder
from warp10_frames.decoders.base import BaseDecoder, DecodeOptions, load_document
from warp10_frames.decoders.scalar import ScalarDecoder
from warp10_frames.decoders.series import SeriesListDecoder
from warp10_frames.decoders.table import TableDecoder

__all__ = [
    "ArrayDecoder",
    "BaseDecoder",
    "DecodeOptions",
    "ScalarDecoder",
    "SeriesListDecoder",
    "TableDecoder",
    "load_document",
]
