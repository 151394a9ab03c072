"""
Frame data model for warp10-frames.

A decoded response is a ``FrameSet``: an ordered list of ``Frame`` objects,
each holding an ordered list of equal-length typed ``Field`` columns.
This is the shape a dashboard host consumes.

Field values are stored as a pandas Series backed by a nullable extension
dtype, so a missing value is ``pd.NA`` rather than a coerced zero or empty
string:

  ValueType.STRING  -> "string"
  ValueType.INT64   -> "Int64"
  ValueType.FLOAT64 -> "Float64"
  ValueType.BOOL    -> "boolean"
  ValueType.TIME    -> "datetime64[ms, UTC]", only for series ``time`` fields
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence

import pandas as pd

from warp10_frames.exceptions import MalformedSampleError


class ValueType(str, Enum):
    """The single value type carried by a Field."""

    STRING = "string"
    INT64 = "int64"
    FLOAT64 = "float64"
    BOOL = "bool"
    TIME = "time"

    @property
    def pandas_dtype(self) -> str:
        return _PANDAS_DTYPES[self]


_PANDAS_DTYPES = {
    ValueType.STRING: "string",
    ValueType.INT64: "Int64",
    ValueType.FLOAT64: "Float64",
    ValueType.BOOL: "boolean",
    ValueType.TIME: "datetime64[ms, UTC]",
}


@dataclass(eq=False)
class Field:
    """A named, typed column.

    Attributes:
        name: Display name (column text, series name, ``time``, ...).
        value_type: The one type every non-null value conforms to.
        values: pandas Series with the nullable dtype of ``value_type``.
    """

    name: str
    value_type: ValueType
    values: pd.Series

    @classmethod
    def from_values(
        cls, name: str, value_type: ValueType, values: Sequence[Any]
    ) -> Field:
        """Build a Field from already-conforming Python values (``None`` = null)."""
        if value_type is ValueType.TIME:
            raise ValueError("Use Field.from_epoch_millis() for time fields")
        array = pd.array(list(values), dtype=value_type.pandas_dtype)
        return cls(name=name, value_type=value_type, values=pd.Series(array, name=name))

    @classmethod
    def from_epoch_millis(cls, name: str, millis: Sequence[int]) -> Field:
        """Build a UTC time Field from integer milliseconds since the epoch."""
        stamps = pd.to_datetime(list(millis), unit="ms", utc=True).as_unit("ms")
        return cls(
            name=name,
            value_type=ValueType.TIME,
            values=pd.Series(stamps, name=name),
        )

    def __len__(self) -> int:
        return len(self.values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Field):
            return NotImplemented
        return (
            self.name == other.name
            and self.value_type is other.value_type
            and self.values.equals(other.values)
        )

    def to_list(self) -> list[Any]:
        """Values as plain Python objects, with ``None`` for nulls."""
        return [None if pd.isna(v) else v for v in self.values.tolist()]


@dataclass
class Frame:
    """A unit of tabular output: ordered fields sharing one row count.

    Attributes:
        name: Frame name (``tableResults``, ``arrayResults``, ...). Series
            frames use ``""`` so the host does not repeat the series name.
        fields: Ordered fields; all must have the same length.
    """

    name: str | None
    fields: list[Field] = field(default_factory=list)

    def __post_init__(self) -> None:
        lengths = {len(f) for f in self.fields}
        if len(lengths) > 1:
            raise ValueError(
                f"Frame '{self.name}' has fields of unequal length: "
                f"{[(f.name, len(f)) for f in self.fields]}"
            )

    @property
    def row_count(self) -> int:
        return len(self.fields[0]) if self.fields else 0

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> Field:
        """Return the first field called *name*.

        Raises:
            KeyError: If no field has that name.
        """
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(name)

    def to_dataframe(self) -> pd.DataFrame:
        """Flatten into a DataFrame (column order preserved, names may repeat)."""
        if not self.fields:
            return pd.DataFrame()
        df = pd.concat([f.values.reset_index(drop=True) for f in self.fields], axis=1)
        df.columns = self.field_names
        return df


@dataclass
class FrameSet:
    """Everything one response decoded into.

    Attributes:
        frames: Frames in response order.
        series_errors: Series that were skipped because a sample was
            malformed. Empty for every shape except series lists.
    """

    frames: list[Frame] = field(default_factory=list)
    series_errors: list[MalformedSampleError] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.frames)

    def __iter__(self):
        return iter(self.frames)

    def __getitem__(self, index: int) -> Frame:
        return self.frames[index]
