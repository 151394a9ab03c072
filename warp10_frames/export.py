"""
Exporter for warp10-frames.

Hands decoded frames over as Arrow, which is how a dashboard host
consumes data frames, and optionally writes them to disk (CSV or Parquet)
for inspection.

- ``frame_to_arrow()`` -> ``pyarrow.Table``. The frame name is kept in the
  schema metadata (``name``) and each field's value type in its field
  metadata (``value_type``). Duplicate field names are allowed.
- ``frames_to_ipc()`` -> one Arrow IPC stream per frame.
- ``export_frames()`` writes ``{index:03d}_{name}.{format}`` files; series
  frames have no name and are written as ``{index:03d}_frame``.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Literal

import pyarrow as pa
import pyarrow.csv as pa_csv
import pyarrow.parquet as pq

from warp10_frames.exceptions import ExportError
from warp10_frames.frames import Frame

logger = logging.getLogger(__name__)

_SUPPORTED_FORMATS = {"csv", "parquet"}
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")


def frame_to_arrow(frame: Frame) -> pa.Table:
    """Convert a Frame to a pyarrow Table, preserving order and null masks."""
    arrays = [pa.Array.from_pandas(f.values) for f in frame.fields]
    fields = [
        pa.field(f.name, array.type, metadata={"value_type": f.value_type.value})
        for f, array in zip(frame.fields, arrays)
    ]
    schema = pa.schema(fields, metadata={"name": frame.name or ""})
    return pa.Table.from_arrays(arrays, schema=schema)


def frames_to_ipc(frames: Iterable[Frame]) -> list[bytes]:
    """Serialize each frame as a standalone Arrow IPC stream."""
    encoded: list[bytes] = []
    for frame in frames:
        table = frame_to_arrow(frame)
        sink = pa.BufferOutputStream()
        with pa.ipc.new_stream(sink, table.schema) as writer:
            writer.write_table(table)
        encoded.append(sink.getvalue().to_pybytes())
    return encoded


def _file_stem(index: int, frame: Frame) -> str:
    name = _UNSAFE_CHARS.sub("_", frame.name or "") or "frame"
    return f"{index:03d}_{name}"


def _write_table(table: pa.Table, path: Path, output_format: str) -> None:
    """Write one Arrow table to disk.

    Raises:
        ExportError: If writing fails for any reason.
    """
    try:
        if output_format == "csv":
            pa_csv.write_csv(table, path)
        else:  # parquet
            pq.write_table(table, path)
    except (pa.ArrowException, OSError) as exc:
        raise ExportError(
            f"Failed to write {path.name} as {output_format}: {exc}"
        ) from exc


def export_frames(
    frames: Iterable[Frame],
    output_dir: str | Path,
    output_format: Literal["csv", "parquet"] = "parquet",
) -> list[str]:
    """Write every frame to *output_dir*, one file per frame.

    The output directory is created recursively if it does not exist.

    Returns:
        List of file paths (as strings) that were written, in frame order.

    Raises:
        ExportError: If *output_format* is unsupported, or if any write fails.
    """
    if output_format not in _SUPPORTED_FORMATS:
        raise ExportError(
            f"Unsupported output format: '{output_format}'. "
            f"Supported formats: {sorted(_SUPPORTED_FORMATS)}"
        )

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    written: list[str] = []
    for index, frame in enumerate(frames):
        file_path = out / f"{_file_stem(index, frame)}.{output_format}"
        _write_table(frame_to_arrow(frame), file_path, output_format)
        written.append(str(file_path))
        logger.info(
            "Exported frame %d '%s' -> %s (%d rows, %d fields)",
            index,
            frame.name or "",
            file_path.name,
            frame.row_count,
            len(frame.fields),
        )

    return written
