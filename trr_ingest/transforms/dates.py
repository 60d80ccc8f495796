"""
Date handling for TRR reports.

The parser keeps every date as the raw string from the file (e.g.
``2016/09/09 06:04:52 -0700``). This module turns those strings into
timezone-aware ``pandas.Timestamp`` values in a configured zone, and
describes the report's reporting window code.

Strings without a UTC offset are read as UTC.
"""

from __future__ import annotations

import logging

import pandas as pd

from trr_ingest.records import REPORTING_WINDOWS
from trr_ingest.report import TransactionReport

logger = logging.getLogger(__name__)


def describe_reporting_window(code: str | None) -> tuple[str, str] | None:
    """Return the (start zone, end zone) of a reporting window code."""
    if code is None:
        return None
    return REPORTING_WINDOWS.get(code.strip())


def to_local_datetime(value: str | None, timezone: str) -> pd.Timestamp:
    """Convert one TRR date string to a Timestamp in *timezone*.

    Returns ``NaT`` for a missing or blank value.

    Raises:
        ValueError: If the string is not a recognizable date.
    """
    if value is None or not value.strip():
        return pd.NaT
    ts = pd.Timestamp(value.strip())
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return ts.tz_convert(timezone)


def generation_datetime(report: TransactionReport, timezone: str) -> pd.Timestamp:
    """The report header's generation date in *timezone*."""
    return to_local_datetime(report.generation_date, timezone)


def period_start_datetime(report: TransactionReport, timezone: str) -> pd.Timestamp:
    """The current section's period start date in *timezone*."""
    return to_local_datetime(report.period_start_date, timezone)


def convert_date_columns(
    df: pd.DataFrame,
    columns: list[str],
    timezone: str,
) -> pd.DataFrame:
    """Convert date string columns to timezone-aware datetimes.

    Blank cells become ``NaT``. Non-blank cells that cannot be parsed
    also become ``NaT``, with a warning.

    Args:
        df: Row table with string date columns.
        columns: Columns to convert (all must exist in *df*).
        timezone: Target IANA zone name.

    Returns:
        A copy of *df* with the columns converted.
    """
    df = df.copy()
    for col in columns:
        raw = df[col].str.strip()
        blank = raw.isna() | (raw == "")
        parsed = pd.to_datetime(
            raw.where(~blank), utc=True, errors="coerce", format="mixed"
        )
        failed = int((parsed.isna() & ~blank).sum())
        if failed:
            logger.warning("Column '%s': %d value(s) are not dates", col, failed)
        df[col] = parsed.dt.tz_convert(timezone)
    return df
