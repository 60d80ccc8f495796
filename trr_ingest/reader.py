"""
Source file reading for trr-ingest.

A logical TRR report is delivered as one or more files. This module
reads them in sequence order into a single ``TransactionReport``,
recording a ``FileSummary`` for each file so the lineage table can show
what every file contributed.

Files are opened in universal-newline mode, so ``\\r\\n`` line endings
reach the parser as plain ``\\n``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from trr_ingest.exceptions import IncompleteReportError
from trr_ingest.report import TransactionReport

logger = logging.getLogger(__name__)


@dataclass
class FileSummary:
    """What one source file contributed to the report."""

    path: str
    file_index: int | None
    rows: int
    file_footer: int | None
    period_start_date: str | None
    period_end_date: str | None
    partner_account_id: str | None
    section_footer: int | None
    section_record_count: int | None
    has_more_files: bool


@dataclass
class ReportReadResult:
    """A fully read report plus per-file summaries."""

    report: TransactionReport
    files: list[FileSummary] = field(default_factory=list)


def read_report_file(path: str | Path, encoding: str = "utf-8-sig") -> str:
    """Read one TRR file as text with normalized line endings."""
    with open(path, "r", encoding=encoding) as f:
        return f.read()


def read_report(
    paths: list[str] | list[Path],
    strict_counters: bool = False,
    encoding: str = "utf-8-sig",
) -> ReportReadResult:
    """Parse the files of one logical report in order.

    Parsing stops after the file that carries the report footer and
    report record count; any further paths are ignored with a warning.

    Args:
        paths: The report's files, in file sequence order.
        strict_counters: Passed to ``TransactionReport``.
        encoding: Text encoding of the files.

    Returns:
        ``ReportReadResult`` with the accumulated report.

    Raises:
        IncompleteReportError: If the paths run out before the last file.
        MalformedRecordError: If any file has a malformed line.
    """
    report = TransactionReport(strict_counters=strict_counters)
    result = ReportReadResult(report=report)

    for position, path in enumerate(paths):
        logger.info("Reading %s", path)
        rows_before = report.record_count
        report.parse(read_report_file(path, encoding=encoding))

        result.files.append(
            FileSummary(
                path=str(path),
                file_index=report.file_index,
                rows=report.record_count - rows_before,
                file_footer=report.file_footer,
                period_start_date=report.period_start_date,
                period_end_date=report.period_end_date,
                partner_account_id=report.partner_account_id,
                section_footer=report.section_footer,
                section_record_count=report.section_record_count,
                has_more_files=report.has_more_files,
            )
        )

        if not report.has_more_files:
            remaining = len(paths) - position - 1
            if remaining:
                logger.warning(
                    "Report ended at %s; ignoring %d further file(s)", path, remaining
                )
            break
    else:
        raise IncompleteReportError(
            f"Report is incomplete after {len(paths)} file(s): no report footer "
            "or report record count found. Are files missing?"
        )

    if report.record_count != report.declared_report_record_count:
        logger.warning(
            "Row count mismatch: parsed %d rows, report declares %d",
            report.record_count,
            report.declared_report_record_count,
        )
    else:
        logger.info("Report complete: %d rows", report.record_count)

    return result
