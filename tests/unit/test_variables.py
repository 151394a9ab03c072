"""
Unit tests for template variable decoding (warp10_frames.variables).
"""

from __future__ import annotations

import pytest

from warp10_frames.exceptions import UnsupportedShapeError
from warp10_frames.variables import VariableValue, decode_variable_values


class TestDecodeVariableValues:
    """Tests for decode_variable_values()."""

    def test_list(self):
        values = decode_variable_values(b'[["server1", "server2"]]')
        assert values == [
            VariableValue("server1", "server1"),
            VariableValue("server2", "server2"),
        ]

    def test_map(self):
        values = decode_variable_values(b'[{"Paris": "fr-par", "Berlin": 3}]')
        assert values == [VariableValue("Paris", "fr-par"), VariableValue("Berlin", "3")]

    def test_bare_values(self):
        values = decode_variable_values(b'["a", 42, 1.5, true]')
        assert [v.text for v in values] == ["a", "42", "1.5", "true"]

    def test_integral_floats_have_no_decimal(self):
        assert decode_variable_values(b"[[2.0]]") == [VariableValue("2", "2")]

    def test_nulls_and_nested_values_skipped(self):
        values = decode_variable_values(b'[null, [null, "a", [1]], {"k": {"x": 1}}]')
        assert values == [VariableValue("a", "a")]

    def test_stack_order_kept(self):
        values = decode_variable_values(b'["z", ["y"], {"x": "1"}]')
        assert [v.text for v in values] == ["z", "y", "x"]

    def test_empty(self):
        assert decode_variable_values(b"[]") == []

    @pytest.mark.parametrize("raw", [b"not json", b'{"a": 1}', b"42"])
    def test_unsupported_responses(self, raw):
        with pytest.raises(UnsupportedShapeError):
            decode_variable_values(raw)
