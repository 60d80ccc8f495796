"""
Meta table builder for trr-ingest.

Builds the flat _meta table that is output alongside the row table.
One row per source file of the report.

The _meta table is DESCRIPTIVE: it records which file contributed what
(framing fields, row counts) and whether the report was complete,
complementing trrconfig.yaml which is PRESCRIPTIVE.
"""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timezone
from pathlib import Path

import pandas as pd

from trr_ingest.reader import ReportReadResult

logger = logging.getLogger(__name__)

META_COLUMNS = [
    "source_file", "source_hash", "file_index", "generation_date",
    "reporting_window", "report_version", "period_start_date", "period_end_date",
    "partner_account_id", "file_footer", "section_footer", "section_record_count",
    "rows_in_file", "rows_total", "declared_report_record_count", "complete",
    "processed_at",
]


def _compute_file_hash(path: Path) -> str:
    """Compute SHA-256 hash of a file for reproducibility tracking."""
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)
    return h.hexdigest()


def build_meta_table(result: ReportReadResult) -> pd.DataFrame:
    """Build the flat _meta table.

    Report-level columns (``generation_date``, ``reporting_window``,
    ``report_version``, ``rows_total``, ``declared_report_record_count``,
    ``complete``) repeat on every row; the rest describe one file.

    Args:
        result: The output of ``reader.read_report()``.

    Returns:
        DataFrame with one row per parsed file, columns in ``META_COLUMNS``
        order.
    """
    report = result.report
    processed_at = datetime.now(timezone.utc).isoformat(timespec="seconds")

    rows: list[dict] = []
    for summary in result.files:
        source_path = Path(summary.path)
        try:
            source_hash = _compute_file_hash(source_path)
        except FileNotFoundError:
            logger.warning("Source file not found for hashing: %s", source_path)
            source_hash = ""

        rows.append(
            {
                "source_file": source_path.name,
                "source_hash": source_hash,
                "file_index": summary.file_index,
                "generation_date": report.generation_date,
                "reporting_window": report.reporting_window,
                "report_version": report.report_version,
                "period_start_date": summary.period_start_date,
                "period_end_date": summary.period_end_date,
                "partner_account_id": summary.partner_account_id,
                "file_footer": summary.file_footer,
                "section_footer": summary.section_footer,
                "section_record_count": summary.section_record_count,
                "rows_in_file": summary.rows,
                "rows_total": report.record_count,
                "declared_report_record_count": report.declared_report_record_count,
                "complete": report.is_complete,
                "processed_at": processed_at,
            }
        )

    logger.info("Built _meta table: %d rows", len(rows))
    return pd.DataFrame(rows, columns=META_COLUMNS)
