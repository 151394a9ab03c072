"""
Value typing for warp10-frames.

Warp 10 responses are untyped JSON, so every column or series has to have
its type inferred from the values it carries. This module is the single
place that inspects raw Python values coming out of ``json.loads``:

- ``kind_of()`` tags one raw value with a ``ValueKind``. Everything else
  matches on kinds, never on ``isinstance`` checks of its own.
- ``infer_field()`` types a table column or a bare array (first non-null
  value wins, integers are widened to float64).
- ``infer_series_type()`` types a GTS from its sample values
  (string > int64 > float64 latch).
- ``conform()`` converts a raw value to the chosen type, or ``None`` when
  it does not fit; ``conform_values()`` does a whole field and logs the
  values it had to null.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Any, Iterable, Sequence

import numpy as np

from warp10_frames.exceptions import MalformedInputError
from warp10_frames.frames import Field, ValueType

logger = logging.getLogger(__name__)

_INT64 = np.iinfo(np.int64)


class ValueKind(Enum):
    """Tag for a raw JSON value."""

    NULL = "null"
    STRING = "string"
    INT64 = "int64"
    FLOAT64 = "float64"
    BOOL = "bool"
    OBJECT = "object"
    ARRAY = "array"


def kind_of(value: Any) -> ValueKind:
    """Tag a value produced by ``json.loads``.

    ``bool`` is checked before ``int`` (it is an ``int`` subclass).
    Integers that do not fit in 64 bits are tagged FLOAT64, which is how
    a float-only JSON decoder would have read them.
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int):
        if _INT64.min <= value <= _INT64.max:
            return ValueKind.INT64
        return ValueKind.FLOAT64
    if isinstance(value, float):
        return ValueKind.FLOAT64
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, dict):
        return ValueKind.OBJECT
    if isinstance(value, list):
        return ValueKind.ARRAY
    raise TypeError(f"Not a JSON value: {value!r}")


def is_number(kind: ValueKind) -> bool:
    return kind in (ValueKind.INT64, ValueKind.FLOAT64)


def conform(value: Any, value_type: ValueType) -> Any:
    """Convert *value* to *value_type*, or return ``None`` if it does not fit.

    - STRING keeps strings only.
    - INT64 keeps integers, and floats with no fractional part.
    - FLOAT64 keeps any number, widening integers.
    - BOOL keeps booleans only.
    """
    kind = kind_of(value)
    if value_type is ValueType.STRING:
        return value if kind is ValueKind.STRING else None
    if value_type is ValueType.INT64:
        if kind is ValueKind.INT64:
            return value
        if isinstance(value, float) and math.isfinite(value) and value.is_integer():
            as_int = int(value)
            if _INT64.min <= as_int <= _INT64.max:
                return as_int
        return None
    if value_type is ValueType.FLOAT64:
        return float(value) if is_number(kind) else None
    if value_type is ValueType.BOOL:
        return value if kind is ValueKind.BOOL else None
    raise ValueError(f"Cannot conform values to {value_type}")


def conform_values(name: str, values: Sequence[Any], value_type: ValueType) -> list[Any]:
    """``conform()`` every value of a field, logging values that became null."""
    conformed = [conform(v, value_type) for v in values]
    dropped = sum(1 for raw, v in zip(values, conformed) if raw is not None and v is None)
    if dropped:
        logger.debug(
            "%s: %d of %d value(s) do not fit %s and were stored as null",
            name, dropped, len(values), value_type.value,
        )
    return conformed


def infer_field(name: str, values: Sequence[Any]) -> Field:
    """Build a typed Field from a column of raw values.

    The first non-null value decides the type: string, float64 (for any
    number) or bool. A column that is empty or entirely null becomes a
    string field of nulls. Values that disagree with the chosen type are
    stored as null.

    Raises:
        MalformedInputError: If the deciding value is an object or array.
    """
    first = next((v for v in values if v is not None), None)
    kind = kind_of(first)

    if kind is ValueKind.NULL or kind is ValueKind.STRING:
        value_type = ValueType.STRING
    elif is_number(kind):
        value_type = ValueType.FLOAT64
    elif kind is ValueKind.BOOL:
        value_type = ValueType.BOOL
    else:
        raise MalformedInputError(f"Unsupported data type for '{name}': {kind.value}")

    return Field.from_values(name, value_type, conform_values(name, values, value_type))


def infer_series_type(values: Iterable[Any]) -> ValueType:
    """Type a series from all of its sample values.

    Any string makes the series a string series, and nothing downgrades
    it afterwards. Otherwise any integer makes it int64. Otherwise it is
    float64 (including a series with no samples).
    """
    value_type = ValueType.FLOAT64
    for value in values:
        kind = kind_of(value)
        if kind is ValueKind.STRING:
            return ValueType.STRING
        if kind is ValueKind.INT64:
            value_type = ValueType.INT64
    return value_type
