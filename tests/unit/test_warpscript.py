"""
Unit tests for the WarpScript query context (warp10_frames.warpscript).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from warp10_frames.config import ConstProp
from warp10_frames.warpscript import (
    TimeRange,
    build_script,
    context_header,
    dashboard_variables_header,
    time_variables_header,
)

START = datetime(2021, 4, 30, 12, 0, tzinfo=timezone.utc)
END = datetime(2021, 4, 30, 13, 0, tzinfo=timezone.utc)


class TestTimeVariables:
    """Tests for time_variables_header()."""

    def test_one_hour_range(self):
        header = time_variables_header(TimeRange(START, END), max_data_points=100)
        assert header == (
            "1619784000000000 'start' STORE "
            "'2021-04-30T12:00:00.000Z' 'startISO' STORE "
            "1619787600000000 'end' STORE "
            "'2021-04-30T13:00:00.000Z' 'endISO' STORE "
            "3600000000 'interval' STORE "
            "36000000 '__interval' STORE "
            "36000 '__interval_ms' STORE "
        )

    def test_without_max_data_points(self):
        header = time_variables_header(TimeRange(START, END))
        assert "3600000000 '__interval' STORE" in header

    def test_naive_datetimes_are_utc(self):
        naive = TimeRange(START.replace(tzinfo=None), END.replace(tzinfo=None))
        assert time_variables_header(naive) == time_variables_header(TimeRange(START, END))

    def test_other_timezones_converted(self):
        paris = timezone(timedelta(hours=2))
        shifted = TimeRange(START.astimezone(paris), END.astimezone(paris))
        header = time_variables_header(shifted)
        assert "1619784000000000 'start' STORE" in header
        assert "'2021-04-30T12:00:00.000Z' 'startISO'" in header

    def test_sub_millisecond_precision_dropped(self):
        header = time_variables_header(TimeRange(START + timedelta(microseconds=1500), END))
        assert "1619784000001000 'start' STORE" in header


class TestDashboardVariables:
    """Tests for dashboard_variables_header()."""

    def test_scalars(self):
        header = dashboard_variables_header({"host": "server1", "limit": 10, "ratio": "0.5"})
        assert header == (
            "'server1' 'host' STORE\n"
            "10 'limit' STORE\n"
            "0.5 'ratio' STORE\n"
        )

    def test_lists(self):
        header = dashboard_variables_header({"hosts": ["a", "b", 3], "none": []})
        assert header == "[ 'a' 'b' 3 ] 'hosts' STORE\n[ ] 'none' STORE\n"

    def test_booleans(self):
        assert dashboard_variables_header({"flag": True}) == "true 'flag' STORE\n"


class TestContextHeader:
    """Tests for context_header() and build_script()."""

    def test_constants_quoted_macros_verbatim(self):
        header = context_header(
            [ConstProp(name="token", value="abc")],
            [ConstProp(name="avg", value="<% MEAN %>")],
        )
        assert header == "'abc' 'token' STORE\n<% MEAN %> 'avg' STORE\nLINEON\n"

    def test_empty(self):
        assert context_header() == "LINEON\n"

    def test_build_script_order(self):
        script = build_script(
            "NOW",
            time_range=TimeRange(START, END),
            variables={"host": "a"},
            constants=[ConstProp(name="c", value="v")],
        )
        positions = [script.index(s) for s in ("'start'", "'host'", "'c'", "LINEON", "NOW")]
        assert positions == sorted(positions)
        assert script.endswith("LINEON\nNOW")

    def test_build_script_minimal(self):
        assert build_script("1 2 +") == "LINEON\n1 2 +"
