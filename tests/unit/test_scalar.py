"""
Unit tests for the scalar decoder (warp10_frames.decoders.scalar).
"""

from __future__ import annotations

import pytest

from warp10_frames.decoders.scalar import SCALAR_FRAME_NAME, ScalarDecoder
from warp10_frames.exceptions import UnsupportedValueTypeError
from warp10_frames.frames import ValueType


class TestScalarDecoder:
    """Tests for ScalarDecoder."""

    @pytest.mark.parametrize(
        "raw, name, value_type, value",
        [
            (b"[42.5]", "scalar_value_float64", ValueType.FLOAT64, 42.5),
            (b"[42]", "scalar_value_int64", ValueType.INT64, 42),
            (b"[true]", "scalar_value_bool", ValueType.BOOL, True),
            (b'["hello"]', "scalar_value_string", ValueType.STRING, "hello"),
        ],
    )
    def test_supported_scalars(self, raw, name, value_type, value):
        frame = ScalarDecoder().decode_raw(raw)[0]
        assert frame.name == SCALAR_FRAME_NAME
        assert frame.field_names == [name]
        assert frame.fields[0].value_type is value_type
        assert frame.fields[0].to_list() == [value]

    def test_only_first_element_used(self):
        frame = ScalarDecoder().decode_raw(b'[1.5, "x", true]')[0]
        assert frame.row_count == 1
        assert frame.fields[0].to_list() == [1.5]

    def test_huge_integer_is_float(self):
        frame = ScalarDecoder().decode_raw(b"[18446744073709551616]")[0]
        assert frame.field_names == ["scalar_value_float64"]
        assert frame.fields[0].to_list() == [float(2**64)]

    @pytest.mark.parametrize("raw", [b'[{"a": 1}]', b"[null]", b"[[1, 2]]"])
    def test_unsupported_kinds(self, raw):
        with pytest.raises(UnsupportedValueTypeError, match="No response type found"):
            ScalarDecoder().decode_raw(raw)

    def test_rejects_empty_list(self):
        assert not ScalarDecoder().accepts([])
