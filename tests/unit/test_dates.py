"""
Unit tests for date handling (trr_ingest.transforms.dates).
"""

from __future__ import annotations

import pandas as pd
import pytest

from tests.builders import make_row, make_trr_text
from trr_ingest import records
from trr_ingest.report import TransactionReport
from trr_ingest.transforms.dates import (
    REPORTING_WINDOWS,
    convert_date_columns,
    describe_reporting_window,
    generation_datetime,
    period_start_datetime,
    to_local_datetime,
)


class TestReportingWindows:
    """Tests for describe_reporting_window()."""

    def test_four_codes(self):
        assert sorted(REPORTING_WINDOWS) == ["A", "H", "R", "X"]

    def test_table_shared_with_parser(self):
        assert REPORTING_WINDOWS is records.REPORTING_WINDOWS

    def test_known_code(self):
        assert describe_reporting_window("X") == ("Europe/London", "America/New_York")

    def test_unknown_or_missing(self):
        assert describe_reporting_window("Q") is None
        assert describe_reporting_window(None) is None


class TestToLocalDatetime:
    """Tests for to_local_datetime()."""

    def test_offset_converted(self):
        ts = to_local_datetime("2016-09-09T06:04:52-07:00", "Europe/Berlin")
        assert ts == pd.Timestamp("2016-09-09 15:04:52", tz="Europe/Berlin")
        assert str(ts.tz) == "Europe/Berlin"

    def test_naive_read_as_utc(self):
        ts = to_local_datetime("2016-09-09 06:00:00", "Europe/Berlin")
        assert ts == pd.Timestamp("2016-09-09 06:00:00", tz="UTC")

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_is_nat(self, value):
        assert to_local_datetime(value, "UTC") is pd.NaT

    def test_garbage_raises(self):
        with pytest.raises(ValueError):
            to_local_datetime("not a date", "UTC")


class TestReportDates:
    """Tests for the report-level helpers."""

    def test_generation_and_period_start(self):
        report = TransactionReport().parse(make_trr_text([make_row()]))
        generated = generation_datetime(report, "UTC")
        start = period_start_datetime(report, "UTC")
        assert generated == pd.Timestamp("2016-09-09 13:04:52", tz="UTC")
        assert start == pd.Timestamp("2016-09-08 07:00:00", tz="UTC")

    def test_empty_report(self):
        assert generation_datetime(TransactionReport(), "UTC") is pd.NaT


class TestConvertDateColumns:
    """Tests for convert_date_columns()."""

    def test_converts_and_localizes(self):
        df = pd.DataFrame({"d": ["2016-09-08T10:15:00-07:00", ""]}, dtype=str)
        result = convert_date_columns(df, ["d"], "Europe/Berlin")
        assert str(result["d"].dt.tz) == "Europe/Berlin"
        assert result["d"].iloc[0] == pd.Timestamp("2016-09-08 17:15:00", tz="UTC")
        assert result["d"].isna().tolist() == [False, True]

    def test_unparseable_becomes_nat(self, caplog):
        df = pd.DataFrame({"d": ["2016-09-08T10:15:00-07:00", "garbage"]}, dtype=str)
        result = convert_date_columns(df, ["d"], "UTC")
        assert result["d"].isna().tolist() == [False, True]
        assert "not dates" in caplog.text

    def test_input_not_mutated(self):
        df = pd.DataFrame({"d": ["2016-09-08T10:15:00-07:00"]}, dtype=str)
        convert_date_columns(df, ["d"], "UTC")
        assert df["d"].iloc[0] == "2016-09-08T10:15:00-07:00"
