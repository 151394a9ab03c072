"""
Series naming for warp10-frames.

A GTS is identified by its class name plus its label set. The host shows
one legend entry per series, so the name must be deterministic: labels
are rendered sorted by key, regardless of the order Warp 10 emitted them.
"""

from __future__ import annotations

from typing import Mapping


def format_series_name(class_name: str, labels: Mapping[str, str]) -> str:
    """Compose ``class{k1=v1,k2=v2}`` with keys in ascending raw order.

    Keys are compared as-is: no case folding, and punctuation such as a
    leading ``.`` sorts before letters. Python's code point ordering is
    the same as UTF-8 byte ordering.

    Examples::

        >>> format_series_name("cpu", {"host": "a", "dc": "x"})
        'cpu{dc=x,host=a}'
        >>> format_series_name("cpu", {})
        'cpu{}'
    """
    pairs = ",".join(f"{key}={labels[key]}" for key in sorted(labels))
    return f"{class_name}{{{pairs}}}"
