"""
Table decoder for warp10-frames.

Handles the relational shape some WarpScript macros leave on the stack:

  [{"columns": [{"text": "columnA"}, {"text": "columnB"}],
    "rows": [[10, 20], [100, 200]]}]

Only the first stack element is used. Rows are transposed into one typed
field per column; a row shorter than the column list contributes nulls
for the missing cells.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ValidationError

from warp10_frames.decoders.base import BaseDecoder
from warp10_frames.exceptions import MalformedInputError
from warp10_frames.frames import Frame, FrameSet
from warp10_frames.values import infer_field

logger = logging.getLogger(__name__)

TABLE_FRAME_NAME = "tableResults"


class TableColumn(BaseModel):
    """One column header."""
    text: str
    type: str | None = None
    sort: bool | None = None
    desc: bool | None = None


class TableSpec(BaseModel):
    """The table object itself."""
    columns: list[TableColumn]
    rows: list[list[Any] | None]


def _column_values(rows: list[list[Any] | None], index: int) -> list[Any]:
    """Collect cell *index* of every row, padding short rows with None."""
    values: list[Any] = []
    for row in rows:
        row = row or []
        values.append(row[index] if index < len(row) else None)
    return values


class TableDecoder(BaseDecoder):
    """Decoder for ``[{"columns": [...], "rows": [...]}]`` responses."""

    shape_name = "table"

    def accepts(self, document: Any) -> bool:
        if not isinstance(document, list) or not document:
            return False
        if not all(isinstance(element, dict) for element in document):
            return False
        first = document[0]
        return first.get("columns") is not None and first.get("rows") is not None

    def decode(self, document: Any) -> FrameSet:
        try:
            table = TableSpec.model_validate(document[0])
        except ValidationError as exc:
            raise MalformedInputError(f"Table parsing error: {exc}") from exc

        fields = [
            infer_field(column.text, _column_values(table.rows, i))
            for i, column in enumerate(table.columns)
        ]
        logger.debug(
            "Table decoded: %d column(s) x %d row(s)", len(fields), len(table.rows)
        )
        return FrameSet(frames=[Frame(TABLE_FRAME_NAME, fields)])
