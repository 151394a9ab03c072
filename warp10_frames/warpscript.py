"""
WarpScript query context for warp10-frames.

Before a dashboard query runs, the datasource stores a few values on the
WarpScript stack so scripts can refer to them by name:

- time variables for the panel's range (``$start``, ``$end``, ...),
- dashboard template variables,
- the datasource's configured constants and macros, followed by
  ``LINEON`` so error messages report line numbers.

All values are microseconds, like Warp 10 timestamps. The header is
plain text prepended to the user's script; the script itself is passed
through untouched.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, Mapping, Union

from warp10_frames.config import ConstProp

TemplateValue = Union[str, int, float, list]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class TimeRange:
    """A panel time range. Naive datetimes are taken as UTC."""

    start: datetime
    end: datetime


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _epoch_micros(moment: datetime) -> int:
    # Millisecond precision, as the host's clock reports it
    millis = (_as_utc(moment) - _EPOCH) // timedelta(milliseconds=1)
    return millis * 1000


def _iso(moment: datetime) -> str:
    return _as_utc(moment).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _looks_numeric(text: str) -> bool:
    try:
        return math.isfinite(float(text))
    except ValueError:
        return False


def _quote(text: str) -> str:
    return f"'{text}'"


def _literal(value: object) -> str:
    """Render a value the way WarpScript reads it: numbers bare, text quoted."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    text = str(value)
    return text if _looks_numeric(text) else _quote(text)


def time_variables_header(time_range: TimeRange, max_data_points: int | None = None) -> str:
    """Store the panel time range and derived intervals.

    Stores, in this order: ``start``, ``startISO``, ``end``, ``endISO``,
    ``interval`` (end - start), ``__interval`` (interval divided by the
    number of points the panel can draw) and ``__interval_ms``.
    """
    start = _epoch_micros(time_range.start)
    end = _epoch_micros(time_range.end)
    interval = end - start
    step = interval // (max_data_points or 1)

    stored = [
        ("start", str(start)),
        ("startISO", _quote(_iso(time_range.start))),
        ("end", str(end)),
        ("endISO", _quote(_iso(time_range.end))),
        ("interval", str(interval)),
        ("__interval", str(step)),
        ("__interval_ms", str(step // 1000)),
    ]
    return "".join(f"{value} '{name}' STORE " for name, value in stored)


def dashboard_variables_header(variables: Mapping[str, TemplateValue]) -> str:
    """Store dashboard template variables, one ``STORE`` line each.

    Multi-value variables become WarpScript lists: ``[ 1 'a' ]``.
    """
    lines = []
    for name, value in variables.items():
        if isinstance(value, list):
            items = " ".join(_literal(item) for item in value)
            rendered = f"[ {items} ]" if items else "[ ]"
        else:
            rendered = _literal(value)
        lines.append(f"{rendered} '{name}' STORE\n")
    return "".join(lines)


def context_header(
    constants: Iterable[ConstProp] = (),
    macros: Iterable[ConstProp] = (),
) -> str:
    """Store the datasource's constants (quoted) and macros (verbatim)."""
    header = "".join(f"'{c.value}' '{c.name}' STORE\n" for c in constants)
    header += "".join(f"{m.value} '{m.name}' STORE\n" for m in macros)
    return header + "LINEON\n"


def build_script(
    expr: str,
    *,
    time_range: TimeRange | None = None,
    max_data_points: int | None = None,
    variables: Mapping[str, TemplateValue] | None = None,
    constants: Iterable[ConstProp] = (),
    macros: Iterable[ConstProp] = (),
) -> str:
    """Prepend the query context to a user script.

    Order: time variables, dashboard variables, constants and macros,
    then *expr*.
    """
    parts = []
    if time_range is not None:
        parts.append(time_variables_header(time_range, max_data_points))
    if variables:
        parts.append(dashboard_variables_header(variables))
    parts.append(context_header(constants, macros))
    parts.append(expr)
    return "".join(parts)
