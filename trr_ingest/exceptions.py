"""
Custom exception hierarchy for trr-ingest.

Callers can catch a malformed report line (MalformedRecordError) apart
from configuration or export problems without relying on generic
ValueError/RuntimeError.
"""

from __future__ import annotations


class TrrIngestError(Exception):
    """Base exception for all trr-ingest errors."""


class MalformedRecordError(TrrIngestError):
    """Raised when a TRR line cannot be applied to the report.

    This covers:
    - An unknown record tag.
    - A record with fewer fields than its tag requires.
    - A data row (SB) before any column header, or whose field count
      differs from the column header.
    - A line the CSV tokenizer rejects.

    Attributes:
        tag: The record tag of the offending line (may be empty).
        reason: Short description of what was wrong.
        line_number: 1-based line number within the parsed text, if known.
        line: The raw line content, if known.
    """

    def __init__(
        self,
        tag: str,
        reason: str,
        line_number: int | None = None,
        line: str | None = None,
    ) -> None:
        self.tag = tag
        self.reason = reason
        self.line_number = line_number
        self.line = line
        message = f"Failed setting {tag!r}: {reason}"
        if line_number is not None:
            message += f" (line {line_number})"
        super().__init__(message)


class IncompleteReportError(TrrIngestError):
    """Raised when the input files end before the report's last file.

    Only the last file of a report carries the report footer and report
    record count; if neither has been seen after every given file was
    parsed, at least one file of the report is missing.
    """


class ConfigValidationError(TrrIngestError):
    """Raised when trrconfig.yaml fails validation.

    This can happen if:
    - The config file is empty.
    - Configured amount / date columns do not exist in the report's
      column header.
    """


class ExportError(TrrIngestError):
    """Raised when the exporter fails to write output files."""
