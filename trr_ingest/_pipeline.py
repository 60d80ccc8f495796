"""
Internal pipeline orchestration for trr-ingest.

Shared by the module-level ``init()`` and ``ingest()`` functions so both
run the same transform -> meta -> export sequence.

This module is **not** part of the public API.
"""

from __future__ import annotations

import logging

from trr_ingest.config import IngestConfig
from trr_ingest.export import export_tables
from trr_ingest.meta import build_meta_table
from trr_ingest.reader import ReportReadResult
from trr_ingest.transforms.pipeline import TransformPipeline

logger = logging.getLogger(__name__)


def run_pipeline_and_export(
    config: IngestConfig,
    read_result: ReportReadResult,
) -> list[str]:
    """Transform the row table, build ``_meta``, and export to disk.

    Args:
        config: The validated IngestConfig.
        read_result: Output of ``reader.read_report()``.

    Returns:
        List of output file paths that were written.
    """
    pipeline = TransformPipeline(config.output)
    pipeline_result = pipeline.run(read_result.report.to_dataframe())

    meta_df = build_meta_table(read_result)

    written = export_tables(
        df=pipeline_result.df,
        meta_df=meta_df,
        output_dir=config.output.output_dir,
        output_format=config.output.output_format,
        table_name=config.output.table_name,
    )

    logger.info("Pipeline complete: wrote %d files", len(written))
    return written
