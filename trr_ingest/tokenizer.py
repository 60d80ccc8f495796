"""
Line tokenization for TRR files.

Two steps run on every line before dispatch:

1. ``repair_quotes()`` -- data rows (lines starting with ``"SB"``) carry
   free-text columns where end users may have typed bare double quotes.
   Those quotes are doubled so the CSV reader sees a valid escape.
2. ``split_fields()`` -- tokenizes the repaired line with the standard
   ``csv`` reader, using the quote character as its own escape.
"""

from __future__ import annotations

import csv

from trr_ingest.exceptions import MalformedRecordError

CSV_DELIMITER = ","
CSV_QUOTECHAR = '"'

_DATA_ROW_PREFIX = '"SB"'


def repair_quotes(
    line: str,
    delimiter: str = CSV_DELIMITER,
    quotechar: str = CSV_QUOTECHAR,
) -> str:
    """Double the interior quotes of every delimiter-separated part.

    Only lines beginning with ``"SB"`` are touched. The line is split on
    the delimiter without regard to quoting; in each part, a quote that
    is neither the first nor the last character becomes a doubled quote.

    Example::

        "SB","T1","he said "hi" today"
        -> "SB","T1","he said ""hi"" today"
    """
    if not line.startswith(_DATA_ROW_PREFIX):
        return line

    escaped = quotechar * 2
    parts = []
    for part in line.split(delimiter):
        if len(part) > 2:
            part = part[0] + part[1:-1].replace(quotechar, escaped) + part[-1]
        parts.append(part)
    return delimiter.join(parts)


def split_fields(
    line: str,
    delimiter: str = CSV_DELIMITER,
    quotechar: str = CSV_QUOTECHAR,
) -> list[str]:
    """Split one line into its fields.

    A doubled quote inside a quoted field is an escaped quote, and a
    fully quoted field may contain the delimiter. Values are returned
    untrimmed.

    Raises:
        MalformedRecordError: If the csv reader rejects the line.
    """
    try:
        reader = csv.reader(
            [line], delimiter=delimiter, quotechar=quotechar, doublequote=True
        )
        return next(reader, [])
    except csv.Error as exc:
        tag = line.split(delimiter, 1)[0].strip().strip(quotechar)
        raise MalformedRecordError(tag, f"cannot tokenize line: {exc}") from exc
