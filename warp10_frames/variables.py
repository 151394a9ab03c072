"""
Template variable values for warp10-frames.

Dashboard variables can be populated by a WarpScript query. The script
leaves its choices on the stack in one of three ways:

1. a list: each element is both the display text and the value,
2. a map: keys are display texts, values are what gets substituted,
3. bare strings or numbers: treated like case 1.

Only strings, numbers and booleans are used; nulls and nested structures
are skipped.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

from warp10_frames.decoders.base import load_document
from warp10_frames.exceptions import MalformedInputError, UnsupportedShapeError
from warp10_frames.values import ValueKind, kind_of

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VariableValue:
    """One entry of a variable's drop-down list."""
    text: str
    value: str


def _to_text(value: Any) -> str | None:
    """Render a primitive as the host displays it; None for anything else."""
    kind = kind_of(value)
    if kind is ValueKind.STRING:
        return value
    if kind is ValueKind.BOOL:
        return "true" if value else "false"
    if kind is ValueKind.INT64:
        return str(value)
    if kind is ValueKind.FLOAT64:
        if isinstance(value, int):
            return str(value)
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    return None


def decode_variable_values(raw: bytes | str) -> list[VariableValue]:
    """Turn a variable query response into drop-down entries, in stack order.

    Raises:
        UnsupportedShapeError: If the response is not a JSON list.
    """
    try:
        document = load_document(raw)
    except MalformedInputError as exc:
        raise UnsupportedShapeError(f"Variable query response is not JSON: {exc}") from exc
    if not isinstance(document, list):
        raise UnsupportedShapeError("Variable query response is not a list")

    entries: list[VariableValue] = []
    for element in document:
        kind = kind_of(element)
        if kind is ValueKind.ARRAY:
            for item in element:
                text = _to_text(item)
                if text is not None:
                    entries.append(VariableValue(text, text))
        elif kind is ValueKind.OBJECT:
            for key, item in element.items():
                text = _to_text(item)
                if text is not None:
                    entries.append(VariableValue(key, text))
        else:
            text = _to_text(element)
            if text is not None:
                entries.append(VariableValue(text, text))

    logger.debug("Variable query produced %d value(s)", len(entries))
    return entries
