"""
Configuration models and YAML I/O for trr-ingest.

This module defines the Pydantic models that map 1:1 to trrconfig.yaml,
plus helper functions for loading, saving, and auto-generating the config.

Key models:
- IngestConfig: Top-level config (source + parser + output).
- SourceConfig: The files of one logical report, in sequence order.
- ParserConfig: Parser strictness toggles.
- OutputConfig: Output directory, format, and row transform settings.

Key functions:
- load_config(path) -> IngestConfig: Load and validate from YAML.
- save_config(config, path): Serialize to YAML.
- generate_default_config(...) -> IngestConfig: Build config from a parsed report.
- validate_columns_against_header(config, column_header): Cross-check config vs data.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, Field, field_validator

from trr_ingest.exceptions import ConfigValidationError

logger = logging.getLogger(__name__)

# Amount column -> its debit/credit indicator column
DEFAULT_AMOUNT_COLUMNS: dict[str, str | None] = {
    "Gross Transaction Amount": "Transaction Debit or Credit",
    "Fee Amount": "Fee Debit or Credit",
}

DEFAULT_DATE_COLUMNS: list[str] = [
    "Transaction Initiation Date",
    "Transaction Completion Date",
]


class SourceConfig(BaseModel):
    """Source files of one logical report."""

    input_paths: list[str] = Field(
        ...,
        min_length=1,
        description="TRR files of one report, in file sequence order",
    )
    encoding: str = Field("utf-8-sig", description="Text encoding of the files")


class ParserConfig(BaseModel):
    """Parser behaviour."""

    strict_counters: bool = Field(
        False,
        description="If True, non-numeric count fields are malformed records",
    )


class OutputConfig(BaseModel):
    """Output and row transform settings."""

    output_dir: str = Field("outputs/", description="Directory for output files")
    output_format: Literal["csv", "parquet"] = Field(
        "parquet", description="Output format"
    )
    table_name: str = Field("transactions", description="Name of the row table file")
    timezone: str = Field(
        "Europe/Berlin", description="IANA zone that date columns are converted to"
    )
    parse_amounts: bool = Field(
        True, description="If True, coerce amount columns to numbers"
    )
    apply_money_movement: bool = Field(
        True, description="If True, sign amounts by their CR/DR indicator column"
    )
    amount_columns: dict[str, str | None] = Field(
        default_factory=lambda: dict(DEFAULT_AMOUNT_COLUMNS),
        description="Amount column -> debit/credit indicator column (or null)",
    )
    date_columns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_DATE_COLUMNS),
        description="Columns converted to timezone-aware timestamps",
    )

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value!r}") from exc
        return value


class IngestConfig(BaseModel):
    """Top-level configuration for trr-ingest.

    Maps 1:1 to trrconfig.yaml.
    """

    source: SourceConfig
    parser: ParserConfig = Field(default_factory=ParserConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


def load_config(path: str | Path) -> IngestConfig:
    """Load and validate trrconfig.yaml into an IngestConfig model.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigValidationError: If the config file is empty.
        pydantic.ValidationError: If the YAML content fails schema validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise ConfigValidationError(f"Config file is empty: {path}")
    logger.info("Loaded config from %s", path)
    return IngestConfig.model_validate(raw)


def save_config(config: IngestConfig, path: str | Path) -> None:
    """Serialize an IngestConfig to YAML with a header comment."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        f.write("# trr-ingest configuration\n")
        f.write("# Edit this file to change amount/date columns, output format, etc.\n\n")
        yaml.dump(
            data,
            f,
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
        )
    logger.info("Saved config to %s", path)


def generate_default_config(
    input_paths: list[str],
    column_header: tuple[str, ...] | list[str],
    output_dir: str = "outputs/",
) -> IngestConfig:
    """Build an IngestConfig for a freshly parsed report (first run).

    Only the default amount and date columns that exist in the report's
    column header are kept, so the generated config always validates
    against the data it came from.
    """
    columns = set(column_header)
    amount_columns = {
        amount: indicator if indicator in columns else None
        for amount, indicator in DEFAULT_AMOUNT_COLUMNS.items()
        if amount in columns
    }
    date_columns = [c for c in DEFAULT_DATE_COLUMNS if c in columns]
    return IngestConfig(
        source=SourceConfig(input_paths=list(input_paths)),
        output=OutputConfig(
            output_dir=output_dir,
            amount_columns=amount_columns,
            date_columns=date_columns,
        ),
    )


def validate_columns_against_header(
    config: IngestConfig, column_header: tuple[str, ...] | list[str]
) -> None:
    """Check that every configured column exists in the report.

    Called on subsequent runs to catch stale or mistyped column names
    before any transform runs.

    Raises:
        ConfigValidationError: If any configured column is missing.
    """
    available = set(column_header)
    configured: list[str] = []
    for amount, indicator in config.output.amount_columns.items():
        configured.append(amount)
        if indicator is not None:
            configured.append(indicator)
    configured.extend(config.output.date_columns)

    missing = [c for c in configured if c not in available]
    if missing:
        raise ConfigValidationError(
            f"The following columns in trrconfig.yaml do not exist in the "
            f"report's column header: {missing}"
        )
    logger.info("Config validation passed: all %d columns found", len(configured))
