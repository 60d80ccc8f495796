"""
Transform pipeline orchestrator for trr-ingest.

Runs the configured sequence of transform steps on the row table:

1. **Amount parsing**: coerce amount columns to numbers.
2. **Money movement**: sign amounts by their CR/DR indicator column.
3. **Date conversion**: parse date columns into timezone-aware datetimes.

The pipeline receives the ``OutputConfig`` so each step can check its
flag (``parse_amounts``, ``apply_money_movement``). Configured columns
that the row table does not have are skipped with a warning.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import pandas as pd

from trr_ingest.config import OutputConfig
from trr_ingest.transforms.amounts import apply_money_movement, parse_amounts
from trr_ingest.transforms.dates import convert_date_columns

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Output of the transform pipeline.

    Attributes:
        df: The transformed row table.
        amount_columns: Amount columns that were converted to numbers.
        signed_columns: Amount columns that were signed by an indicator.
        date_columns: Columns converted to datetimes.
    """

    df: pd.DataFrame
    amount_columns: list[str] = field(default_factory=list)
    signed_columns: list[str] = field(default_factory=list)
    date_columns: list[str] = field(default_factory=list)


class TransformPipeline:
    """Orchestrates the sequence of row transforms.

    Stateless: each call to ``run()`` processes a fresh DataFrame.
    """

    def __init__(self, config: OutputConfig) -> None:
        self.config = config

    def run(self, df: pd.DataFrame) -> PipelineResult:
        """Run all enabled transforms on a string-typed row table."""
        result = PipelineResult(df=df)

        # -- Step 1: Amount parsing (configurable) ------------------------
        if self.config.parse_amounts:
            amounts = self._present(df, list(self.config.amount_columns))
            logger.info("Step 1/3: Parsing %d amount column(s)", len(amounts))
            result.df = parse_amounts(result.df, amounts)
            result.amount_columns = amounts
        else:
            logger.info("Step 1/3: Amount parsing SKIPPED (disabled in config)")

        # -- Step 2: Money movement (needs parsed amounts) ----------------
        if self.config.apply_money_movement and self.config.parse_amounts:
            pairs = {
                amount: indicator
                for amount, indicator in self.config.amount_columns.items()
                if amount in result.amount_columns
                and indicator is not None
                and self._present(df, [indicator])
            }
            logger.info("Step 2/3: Signing %d amount column(s)", len(pairs))
            result.df = apply_money_movement(result.df, pairs)
            result.signed_columns = list(pairs)
        else:
            logger.info("Step 2/3: Money movement SKIPPED")

        # -- Step 3: Date conversion (always runs) ------------------------
        dates = self._present(df, self.config.date_columns)
        logger.info(
            "Step 3/3: Converting %d date column(s) to %s", len(dates), self.config.timezone
        )
        result.df = convert_date_columns(result.df, dates, self.config.timezone)
        result.date_columns = dates

        return result

    @staticmethod
    def _present(df: pd.DataFrame, columns: list[str]) -> list[str]:
        """Filter *columns* to those in *df*, warning about the rest."""
        missing = [c for c in columns if c not in df.columns]
        if missing:
            logger.warning("Columns not found in row table, skipping: %s", missing)
        return [c for c in columns if c in df.columns]
