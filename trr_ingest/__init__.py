"""
trr-ingest: Python library for parsing transaction detail reports (TRR).

Public API surface:

- ``TransactionReport`` -- the parser/accumulator. Feed it each file's
  text with ``parse()``; read ``rows()``, ``record_count`` and the
  framing fields; check ``has_more_files`` between files.

- ``read_report(paths)`` -- reads all files of one logical report in
  order into a single ``TransactionReport``.

- ``init(...)`` -- First-run workflow. Parses the report, generates
  ``trrconfig.yaml`` from its column header, and optionally exports the
  row table and ``_meta`` lineage table.

- ``ingest(...)`` -- Subsequent-run workflow. Loads and validates
  ``trrconfig.yaml``, re-parses the report, and rebuilds the outputs.
"""

from __future__ import annotations

import logging

from trr_ingest._pipeline import run_pipeline_and_export
from trr_ingest.config import (
    IngestConfig,
    generate_default_config,
    load_config,
    save_config,
    validate_columns_against_header,
)
from trr_ingest.exceptions import MalformedRecordError
from trr_ingest.reader import read_report
from trr_ingest.report import TransactionReport

__all__ = [
    "init",
    "ingest",
    "read_report",
    "TransactionReport",
    "MalformedRecordError",
]

logger = logging.getLogger(__name__)


def init(
    input_paths: list[str],
    output_dir: str = "outputs/",
    config_path: str = "trrconfig.yaml",
    run_immediately: bool = True,
) -> IngestConfig:
    """First-run entry point: parse, generate config, optionally export.

    Orchestration:
      1. ``read_report()`` -> ``ReportReadResult``
      2. ``generate_default_config()`` from the discovered column header
      3. ``save_config()`` to *config_path*
      4. If *run_immediately* is True, ``run_pipeline_and_export()``.

    Args:
        input_paths: The report's files, in file sequence order.
        output_dir: Directory where output tables will be written.
        config_path: Where to write the generated trrconfig.yaml.
        run_immediately: If True, also export after config generation.

    Returns:
        The generated ``IngestConfig``.

    Raises:
        MalformedRecordError: If any file has a malformed line.
        IncompleteReportError: If the report's last file is missing.
    """
    logger.info("init() -- %d input file(s), output_dir=%s", len(input_paths), output_dir)

    read_result = read_report(input_paths)
    report = read_result.report
    logger.info(
        "Parsed: %d rows, %d columns, %d file(s)",
        report.record_count,
        len(report.column_header or ()),
        len(read_result.files),
    )

    config = generate_default_config(
        input_paths=[str(p) for p in input_paths],
        column_header=report.column_header or (),
        output_dir=output_dir,
    )
    save_config(config, config_path)

    if run_immediately:
        logger.info("run_immediately=True -- running pipeline")
        run_pipeline_and_export(config, read_result)

    return config


def ingest(config_path: str = "trrconfig.yaml") -> list[str]:
    """Subsequent-run entry point: load config, validate, rebuild outputs.

    Orchestration:
      1. ``load_config()`` -> ``IngestConfig`` (Pydantic validation on load).
      2. ``read_report()`` over the configured input paths.
      3. ``validate_columns_against_header()`` -- configured columns must
         exist in the parsed column header.
      4. ``run_pipeline_and_export()`` -- transform, build meta, export.

    Args:
        config_path: Path to trrconfig.yaml (must already exist).

    Returns:
        List of output file paths that were written.

    Raises:
        FileNotFoundError: If *config_path* does not exist.
        pydantic.ValidationError: If config fails Pydantic validation.
        ConfigValidationError: If configured columns are not in the report.
        MalformedRecordError: If any file has a malformed line.
        IncompleteReportError: If the report's last file is missing.
    """
    logger.info("ingest() -- config_path=%s", config_path)

    config = load_config(config_path)
    read_result = read_report(
        config.source.input_paths,
        strict_counters=config.parser.strict_counters,
        encoding=config.source.encoding,
    )
    validate_columns_against_header(config, read_result.report.column_header or ())
    return run_pipeline_and_export(config, read_result)
