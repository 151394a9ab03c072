"""
warp10-frames: convert Warp 10 query responses into typed data frames.

Public API surface:

- ``classify_and_convert(raw, ...)`` -- **recommended entry point**.
  Detects which shape a response body has (table, GTS list, array or
  scalar) and returns a ``FrameSet``.

- ``Datasource`` -- a configured datasource that builds the WarpScript
  context, runs queries in parallel through a caller-supplied transport,
  and returns one ``DataResponse`` per query.

- ``load_options(path)`` -- load a ``DatasourceOptions`` YAML file.

Example::

    import warp10_frames

    frames = warp10_frames.classify_and_convert(b'[[42.5, 43.2, 44.1]]')
    frames[0].name                    # 'arrayResults'
    frames[0].fields[0].to_list()     # [42.5, 43.2, 44.1]
"""

from __future__ import annotations

from warp10_frames.config import DatasourceOptions, load_options
from warp10_frames.datasource import DataQuery, DataResponse, Datasource
from warp10_frames.decoders.base import DecodeOptions
from warp10_frames.detect import classify_and_convert
from warp10_frames.frames import Field, Frame, FrameSet, ValueType

__all__ = [
    "classify_and_convert",
    "DataQuery",
    "DataResponse",
    "Datasource",
    "DatasourceOptions",
    "DecodeOptions",
    "Field",
    "Frame",
    "FrameSet",
    "ValueType",
    "load_options",
]
