"""
Shared test fixtures for warp10-frames tests.

The literal Warp 10 responses used across the suite live here, one per
supported shape. If the sample responses change, update this file.
"""

import pytest

# ---------------------------------------------------------------------------
# Sample responses -- one per shape
# ---------------------------------------------------------------------------
TABLE_RESPONSE = b"""[{
    "columns": [
        {"text": "columnA", "type": "number", "sort": true, "desc": true},
        {"text": "columnB", "type": "number"}
    ],
    "rows": [
        [10, 20],
        [100, 200]
    ]
}]"""

GTS_RESPONSE = b"""[
    {
        "c": "testClass",
        "l": {},
        "a": {},
        "v": [
            [1619784000000000, 42.5],
            [1619784001000000, 43.2]
        ]
    }
]"""

ARRAY_RESPONSE = b"[[42.5, 43.2, 44.1]]"

SCALAR_RESPONSE = b"[42]"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def table_response() -> bytes:
    return TABLE_RESPONSE


@pytest.fixture
def gts_response() -> bytes:
    return GTS_RESPONSE


@pytest.fixture
def array_response() -> bytes:
    return ARRAY_RESPONSE


@pytest.fixture
def scalar_response() -> bytes:
    return SCALAR_RESPONSE


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (exercises the full datasource path)",
    )
