"""
Record types and the tag dispatcher for TRR lines.

Every TRR line starts with a two-letter tag naming its record type.
``decode_record()`` checks the field count for that tag and decodes the
remaining fields into one of a closed set of frozen dataclasses, so the
report accumulator never compares tag strings itself.

Record layout (field counts include the tag):

    RH  report header         5   generation date, window, id type, version
    FH  file header           2   file sequence number
    SH  section header        5   period start, period end, id type, account
    CH  column header        68+  column names
    SB  section body         68+  row values, one per column name
    SF  section footer        2   count
    SC  section record count  2   count
    RF  report footer         2   count (last file only)
    RC  report record count   2   count (last file only)
    FF  file footer           2   count
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Union

from trr_ingest.exceptions import MalformedRecordError

logger = logging.getLogger(__name__)

# Fixed number of columns in the transaction record layout.
TRR_COLUMN_COUNT = 67

_INTEGER = re.compile(r"[+-]?\d+")
_LEADING_INTEGER = re.compile(r"\s*([+-]?\d+)")


class RecordTag(str, Enum):
    """Two-letter record type codes."""

    REPORT_HEADER = "RH"
    FILE_HEADER = "FH"
    SECTION_HEADER = "SH"
    COLUMN_HEADER = "CH"
    SECTION_BODY = "SB"
    SECTION_FOOTER = "SF"
    SECTION_RECORD_COUNT = "SC"
    REPORT_FOOTER = "RF"
    REPORT_RECORD_COUNT = "RC"
    FILE_FOOTER = "FF"


COUNTER_TAGS = frozenset({
    RecordTag.SECTION_FOOTER,
    RecordTag.SECTION_RECORD_COUNT,
    RecordTag.REPORT_FOOTER,
    RecordTag.REPORT_RECORD_COUNT,
    RecordTag.FILE_FOOTER,
})

# Minimum number of fields per record, including the tag itself.
MIN_FIELD_COUNTS: dict[RecordTag, int] = {
    RecordTag.REPORT_HEADER: 5,
    RecordTag.FILE_HEADER: 2,
    RecordTag.SECTION_HEADER: 5,
    RecordTag.COLUMN_HEADER: TRR_COLUMN_COUNT + 1,
    RecordTag.SECTION_BODY: TRR_COLUMN_COUNT + 1,
    **{tag: 2 for tag in COUNTER_TAGS},
}

# Reporting window code -> (window start zone, window end zone)
REPORTING_WINDOWS: dict[str, tuple[str, str]] = {
    "A": ("America/New_York", "America/Los_Angeles"),
    "H": ("America/Los_Angeles", "Asia/Hong_Kong"),
    "R": ("Asia/Hong_Kong", "Europe/London"),
    "X": ("Europe/London", "America/New_York"),
}


# ---------------------------------------------------------------------------
# Record payloads
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ReportHeader:
    generation_date: str
    reporting_window: str
    account_id_type: str
    report_version: str


@dataclass(frozen=True)
class FileHeader:
    file_index: int


@dataclass(frozen=True)
class SectionHeader:
    period_start_date: str
    period_end_date: str
    account_id_type: str
    partner_account_id: str


@dataclass(frozen=True)
class ColumnHeader:
    names: tuple[str, ...]


@dataclass(frozen=True)
class SectionBody:
    values: tuple[str, ...]


@dataclass(frozen=True)
class Counter:
    """Any of the single-integer closing records (SF, SC, RF, RC, FF)."""
    tag: RecordTag
    value: int


Record = Union[ReportHeader, FileHeader, SectionHeader, ColumnHeader, SectionBody, Counter]


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def coerce_counter(tag: str, value: str, strict: bool = False) -> int:
    """Parse a counter field as an integer.

    Clean integers (surrounding whitespace allowed) parse directly.
    Anything else is an error in *strict* mode; otherwise it degrades
    to its leading integer prefix, or 0 when there is none.
    """
    text = value.strip()
    if _INTEGER.fullmatch(text):
        return int(text)
    if strict:
        raise MalformedRecordError(tag, f"count is not an integer: {value!r}")
    match = _LEADING_INTEGER.match(value)
    coerced = int(match.group(1)) if match else 0
    logger.warning("%s count %r is not an integer, using %d", tag, value, coerced)
    return coerced


def decode_record(fields: list[str], strict_counters: bool = False) -> Record:
    """Decode one tokenized TRR line into its record type.

    Args:
        fields: The line's fields, tag first, values untrimmed.
        strict_counters: Reject non-numeric counters instead of
            coercing them.

    Returns:
        The decoded record.

    Raises:
        MalformedRecordError: On an unknown tag, too few fields, or
            duplicate column names.
    """
    raw_tag = fields[0].strip() if fields else ""
    try:
        tag = RecordTag(raw_tag)
    except ValueError:
        raise MalformedRecordError(raw_tag, "unknown record tag") from None

    minimum = MIN_FIELD_COUNTS[tag]
    if len(fields) < minimum:
        raise MalformedRecordError(
            tag.value,
            f"expected at least {minimum} fields, got {len(fields)}",
        )

    payload = fields[1:]

    if tag is RecordTag.REPORT_HEADER:
        return ReportHeader(*payload[:4])
    if tag is RecordTag.FILE_HEADER:
        return FileHeader(coerce_counter(tag.value, payload[0], strict_counters))
    if tag is RecordTag.SECTION_HEADER:
        return SectionHeader(*payload[:4])
    if tag is RecordTag.COLUMN_HEADER:
        names = tuple(name.strip() for name in payload)
        seen: set[str] = set()
        duplicates: list[str] = []
        for name in names:
            if name in seen and name not in duplicates:
                duplicates.append(name)
            seen.add(name)
        if duplicates:
            raise MalformedRecordError(tag.value, f"duplicate column names: {duplicates}")
        return ColumnHeader(names)
    if tag is RecordTag.SECTION_BODY:
        return SectionBody(tuple(value.strip() for value in payload))
    return Counter(tag, coerce_counter(tag.value, payload[0], strict_counters))
