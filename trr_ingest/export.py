"""
Output writers for a parsed TRR report.

A report produces exactly two files in the output directory:

  {table_name}.{fmt}  -- the transaction rows, one per "SB" record
  _meta.{fmt}         -- one lineage row per source file

Parquet goes through pyarrow directly so the signed amounts and the
timezone-aware completion/initiation dates keep their types. CSV carries
a BOM for spreadsheet tools and writes dates as ISO-8601 with offset.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Literal

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from trr_ingest.exceptions import ExportError

logger = logging.getLogger(__name__)

META_TABLE_NAME = "_meta"


def _write_csv(df: pd.DataFrame, path: Path) -> None:
    df.to_csv(path, index=False, encoding="utf-8-sig", date_format="%Y-%m-%dT%H:%M:%S%z")


def _write_parquet(df: pd.DataFrame, path: Path) -> None:
    pq.write_table(pa.Table.from_pandas(df, preserve_index=False), path)


_WRITERS: dict[str, Callable[[pd.DataFrame, Path], None]] = {
    "csv": _write_csv,
    "parquet": _write_parquet,
}


def export_tables(
    df: pd.DataFrame,
    meta_df: pd.DataFrame,
    output_dir: str | Path,
    output_format: Literal["csv", "parquet"] = "parquet",
    table_name: str = "transactions",
) -> list[str]:
    """Write the row table and its _meta table.

    Args:
        df: The transformed row table.
        meta_df: Output of ``meta.build_meta_table()``.
        output_dir: Created if missing.
        output_format: "csv" or "parquet".
        table_name: File stem of the row table. Must not be ``_meta``.

    Returns:
        ``[row table path, _meta path]`` as strings.

    Raises:
        ExportError: Unsupported format, clashing table name, or a failed write.
    """
    writer = _WRITERS.get(output_format)
    if writer is None:
        raise ExportError(
            f"Unsupported output format: {output_format!r} "
            f"(expected one of {sorted(_WRITERS)})"
        )
    if table_name == META_TABLE_NAME:
        raise ExportError(f"Table name {table_name!r} is reserved for the lineage table")

    out = Path(output_dir)
    try:
        out.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ExportError(f"Cannot create output directory {out}: {exc}") from exc

    written: list[str] = []
    for stem, frame in ((table_name, df), (META_TABLE_NAME, meta_df)):
        path = out / f"{stem}.{output_format}"
        try:
            writer(frame, path)
        except (OSError, ValueError, pa.ArrowException) as exc:
            raise ExportError(f"Could not write {path}: {exc}") from exc
        logger.info("Wrote %s (%d rows)", path, len(frame))
        written.append(str(path))
    return written
