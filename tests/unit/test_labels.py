"""
Unit tests for series naming (warp10_frames.labels).
"""

from __future__ import annotations

import itertools

from warp10_frames.labels import format_series_name


class TestFormatSeriesName:
    """Tests for format_series_name()."""

    def test_empty_labels(self):
        assert format_series_name("testClass", {}) == "testClass{}"

    def test_two_labels(self):
        name = format_series_name("testClass", {"key1": "value1", "key2": "value2"})
        assert name == "testClass{key1=value1,key2=value2}"

    def test_keys_sorted_with_punctuation_first(self):
        labels = {"aKey": "aValue", "cKey": "cValue", "bKey": "bValue", ".aKey": "aValue"}
        name = format_series_name("testClass", labels)
        assert name == "testClass{.aKey=aValue,aKey=aValue,bKey=bValue,cKey=cValue}"

    def test_no_case_folding(self):
        """Uppercase letters sort before lowercase (raw ordering)."""
        name = format_series_name("c", {"b": "1", "B": "2", "a": "3"})
        assert name == "c{B=2,a=3,b=1}"

    def test_values_are_not_sorted(self):
        name = format_series_name("c", {"a": "z", "b": "a"})
        assert name == "c{a=z,b=a}"

    def test_insertion_order_does_not_matter(self):
        items = [("host", "a"), ("dc", "x"), (".app", "web"), ("zone", "1")]
        names = {
            format_series_name("cpu", dict(permutation))
            for permutation in itertools.permutations(items)
        }
        assert names == {"cpu{.app=web,dc=x,host=a,zone=1}"}

    def test_stable_across_calls(self):
        labels = {"b": "2", "a": "1"}
        assert format_series_name("x", labels) == format_series_name("x", labels)
