"""
Unit tests for ordered parallel fan-out (warp10_frames.assembler).
"""

from __future__ import annotations

import random
import threading
import time

import pytest

from warp10_frames.assembler import ConcurrentFrameAssembler
from warp10_frames.exceptions import ConversionTimeoutError


class TestMapOrdered:
    """Tests for ConcurrentFrameAssembler.map_ordered()."""

    def test_empty(self):
        assert ConcurrentFrameAssembler().map_ordered(str, []) == []

    def test_results_follow_input_order(self):
        def jittered(i):
            time.sleep(random.uniform(0, 0.01))
            return i * 10

        results = ConcurrentFrameAssembler(max_workers=8).map_ordered(jittered, list(range(40)))
        assert results == [i * 10 for i in range(40)]

    def test_reverse_completion_order(self):
        def later_first(i):
            time.sleep(0.02 * (3 - i))
            return i

        results = ConcurrentFrameAssembler(max_workers=4).map_ordered(later_first, [0, 1, 2, 3])
        assert results == [0, 1, 2, 3]

    def test_exception_propagates(self):
        def boom(i):
            if i == 2:
                raise ValueError("bad item")
            return i

        with pytest.raises(ValueError, match="bad item"):
            ConcurrentFrameAssembler().map_ordered(boom, [0, 1, 2, 3])


class TestDeadline:
    """Tests for the optional timeout."""

    def test_timeout_raises_without_fallback(self):
        release = threading.Event()
        assembler = ConcurrentFrameAssembler(timeout=0.05)
        try:
            with pytest.raises(ConversionTimeoutError, match="did not finish"):
                assembler.map_ordered(lambda i: release.wait(5), [0])
        finally:
            release.set()

    def test_fallback_fills_missed_slots(self):
        release = threading.Event()

        def convert(i):
            if i == 1:
                release.wait(5)
            return f"done {i}"

        assembler = ConcurrentFrameAssembler(max_workers=3, timeout=0.2)
        try:
            results = assembler.map_ordered(convert, [0, 1, 2], fallback=lambda i: f"late {i}")
        finally:
            release.set()
        assert results == ["done 0", "late 1", "done 2"]

    def test_fast_tasks_meet_deadline(self):
        results = ConcurrentFrameAssembler(timeout=5).map_ordered(lambda i: i + 1, [1, 2])
        assert results == [2, 3]
