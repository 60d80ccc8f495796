"""
Report state accumulator for TRR files.

``TransactionReport`` is the aggregate that TRR lines are applied to.
It holds the report/file/section framing fields and the growing table
of data rows. A logical report may span several files; the same
instance is fed each file in sequence (without flushing) and read
between files, while ``has_more_files`` tells the caller whether the
report's last file has been seen.

Usage::

    report = TransactionReport()
    for text in file_texts:
        report.parse(text)
        if not report.has_more_files:
            break
    rows = report.rows()
    assert report.record_count == report.declared_report_record_count

Known limitation of the continuation check: only the last file carries
the report footer (RF) and report record count (RC), and a count of 0
is treated like a missing one. A final file whose RF and RC are both 0
therefore still reports more files pending.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import pandas as pd

from trr_ingest.exceptions import MalformedRecordError
from trr_ingest.records import (
    ColumnHeader,
    Counter,
    FileHeader,
    Record,
    REPORTING_WINDOWS,
    RecordTag,
    ReportHeader,
    SectionBody,
    SectionHeader,
    decode_record,
)
from trr_ingest.tokenizer import repair_quotes, split_fields

logger = logging.getLogger(__name__)

# Counter record tag -> ReportState attribute
_COUNTER_FIELDS: dict[RecordTag, str] = {
    RecordTag.SECTION_FOOTER: "section_footer",
    RecordTag.SECTION_RECORD_COUNT: "section_record_count",
    RecordTag.REPORT_FOOTER: "report_footer",
    RecordTag.REPORT_RECORD_COUNT: "report_record_count",
    RecordTag.FILE_FOOTER: "file_footer",
}


@dataclass
class ReportState:
    """Everything accumulated from the lines parsed so far.

    ``None`` means the record has not been seen yet.
    """

    report_header: ReportHeader | None = None
    file_header: FileHeader | None = None
    section_header: SectionHeader | None = None
    column_header: tuple[str, ...] | None = None
    rows: list[dict[str, str]] = field(default_factory=list)
    section_footer: int | None = None
    section_record_count: int | None = None
    report_footer: int | None = None
    report_record_count: int | None = None
    file_footer: int | None = None


class TransactionReport:
    """Accumulates the records of one logical TRR report.

    Not thread-safe; parse independent reports with independent
    instances.

    Args:
        strict_counters: If ``True``, a non-numeric count field is a
            ``MalformedRecordError``. By default it is coerced to its
            leading integer (or 0) with a logged warning.
    """

    def __init__(self, strict_counters: bool = False) -> None:
        self.strict_counters = strict_counters
        self._state = ReportState()

    def __repr__(self) -> str:
        return (
            f"TransactionReport(file_index={self.file_index!r}, "
            f"record_count={self.record_count}, "
            f"has_more_files={self.has_more_files})"
        )

    # -- Parsing ------------------------------------------------------------

    def parse(self, text: str) -> TransactionReport:
        """Apply every line of one file's text to the report.

        Lines are separated by ``\\n``; blank lines are skipped. Carriage
        returns are not stripped here.

        Returns:
            ``self``, so calls can be chained.

        Raises:
            MalformedRecordError: On the first line that cannot be
                applied. Lines before it stay applied; discard the
                report or ``flush()`` it before retrying.
        """
        rows_before = len(self._state.rows)

        for line_number, line in enumerate(text.split("\n"), start=1):
            if not line.strip():
                continue
            try:
                fields = split_fields(repair_quotes(line))
                record = decode_record(fields, strict_counters=self.strict_counters)
                self.apply(record)
            except MalformedRecordError as exc:
                raise MalformedRecordError(
                    exc.tag, exc.reason, line_number=line_number, line=line
                ) from exc

        logger.info(
            "Parsed file %s: %d rows added (%d total), more files: %s",
            self.file_index,
            len(self._state.rows) - rows_before,
            len(self._state.rows),
            self.has_more_files,
        )
        return self

    def apply(self, record: Record) -> None:
        """Apply one decoded record to the report state.

        Raises:
            MalformedRecordError: If a data row arrives before the column
                header or does not match its length.
        """
        state = self._state

        if isinstance(record, SectionBody):
            self._append_row(record)
        elif isinstance(record, Counter):
            setattr(state, _COUNTER_FIELDS[record.tag], record.value)
        elif isinstance(record, ColumnHeader):
            state.column_header = record.names
            logger.debug("Column header set: %d columns", len(record.names))
        elif isinstance(record, SectionHeader):
            state.section_header = record
        elif isinstance(record, FileHeader):
            state.file_header = record
        elif isinstance(record, ReportHeader):
            if record.reporting_window not in REPORTING_WINDOWS:
                logger.warning("Unknown reporting window code: %r", record.reporting_window)
            state.report_header = record
        else:
            raise TypeError(f"Not a TRR record: {record!r}")

    def _append_row(self, record: SectionBody) -> None:
        header = self._state.column_header
        if header is None:
            raise MalformedRecordError(
                RecordTag.SECTION_BODY.value, "data row before column header"
            )
        if len(record.values) != len(header):
            raise MalformedRecordError(
                RecordTag.SECTION_BODY.value,
                f"{len(record.values)} values for {len(header)} columns",
            )
        self._state.rows.append(dict(zip(header, record.values)))

    def flush(self) -> TransactionReport:
        """Reset to the empty state.

        The state is replaced rather than cleared, so lists returned by
        ``rows()`` earlier are unaffected.
        """
        self._state = ReportState()
        return self

    # -- Row table ----------------------------------------------------------

    def rows(self) -> list[dict[str, str]]:
        """All data rows so far, each keyed by column header order."""
        return list(self._state.rows)

    def to_dataframe(self) -> pd.DataFrame:
        """The row table as a string-typed DataFrame.

        Columns follow the column header order; an empty frame (with the
        header's columns, if any) is returned when there are no rows.
        """
        columns = list(self._state.column_header or ())
        return pd.DataFrame(self._state.rows, columns=columns, dtype=str)

    @property
    def record_count(self) -> int:
        """Number of data rows accumulated."""
        return len(self._state.rows)

    @property
    def declared_report_record_count(self) -> int:
        """The RC count, or 0 until the report's last file is parsed."""
        return self._state.report_record_count or 0

    @property
    def has_more_files(self) -> bool:
        """Whether files of this report are still to come.

        True while neither the report footer nor the report record count
        has a (non-zero) value.
        """
        return not self._state.report_footer and not self._state.report_record_count

    @property
    def is_complete(self) -> bool:
        """Last file parsed and the row count matches the declared count."""
        return (
            not self.has_more_files
            and self.record_count == self.declared_report_record_count
        )

    # -- Report header (RH) -------------------------------------------------

    @property
    def generation_date(self) -> str | None:
        header = self._state.report_header
        return header.generation_date if header else None

    @property
    def reporting_window(self) -> str | None:
        header = self._state.report_header
        return header.reporting_window if header else None

    @property
    def account_id_type(self) -> str | None:
        header = self._state.report_header
        return header.account_id_type if header else None

    @property
    def report_version(self) -> str | None:
        header = self._state.report_header
        return header.report_version if header else None

    # -- File header (FH) ---------------------------------------------------

    @property
    def file_index(self) -> int | None:
        header = self._state.file_header
        return header.file_index if header else None

    # -- Section header (SH) ------------------------------------------------

    @property
    def period_start_date(self) -> str | None:
        header = self._state.section_header
        return header.period_start_date if header else None

    @property
    def period_end_date(self) -> str | None:
        header = self._state.section_header
        return header.period_end_date if header else None

    @property
    def section_account_id_type(self) -> str | None:
        header = self._state.section_header
        return header.account_id_type if header else None

    @property
    def partner_account_id(self) -> str | None:
        header = self._state.section_header
        return header.partner_account_id if header else None

    # -- Column header (CH) -------------------------------------------------

    @property
    def column_header(self) -> tuple[str, ...] | None:
        return self._state.column_header

    # -- Counters (SF, SC, RF, RC, FF) --------------------------------------

    @property
    def section_footer(self) -> int | None:
        return self._state.section_footer

    @property
    def section_record_count(self) -> int | None:
        return self._state.section_record_count

    @property
    def report_footer(self) -> int | None:
        return self._state.report_footer

    @property
    def report_record_count(self) -> int | None:
        return self._state.report_record_count

    @property
    def file_footer(self) -> int | None:
        return self._state.file_footer
