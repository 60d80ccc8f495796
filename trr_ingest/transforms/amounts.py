"""
Amount transforms for trr-ingest.

TRR amounts are unsigned digit strings; the direction of the money
movement is a separate indicator column holding ``CR`` (credit) or
``DR`` (debit). This module:

1. Coerces amount columns to numbers (``parse_amounts``).
2. Signs each amount from its indicator column (``apply_money_movement``).
"""

from __future__ import annotations

import logging

import pandas as pd

logger = logging.getLogger(__name__)

# Debit/credit indicator -> sign
MONEY_MOVEMENT: dict[str, int] = {
    "CR": 1,
    "DR": -1,
}


def parse_amounts(df: pd.DataFrame, columns: list[str]) -> pd.DataFrame:
    """Coerce amount columns to numeric dtype.

    Whitespace is stripped first; empty and non-numeric strings become
    ``NaN`` (``pd.to_numeric(errors='coerce')``).

    Args:
        df: Row table with string values.
        columns: Amount columns to convert (all must exist in *df*).

    Returns:
        A copy of *df* with the columns converted.
    """
    df = df.copy()
    for col in columns:
        cleaned = df[col].str.strip()
        df[col] = pd.to_numeric(cleaned, errors="coerce")
    return df


def apply_money_movement(
    df: pd.DataFrame,
    amount_columns: dict[str, str],
) -> pd.DataFrame:
    """Sign amounts by their debit/credit indicator.

    ``CR`` keeps the amount positive and ``DR`` negates it. Rows with any
    other indicator (including blank) keep the amount unchanged and are
    counted in a warning.

    Args:
        df: Row table whose amount columns are already numeric.
        amount_columns: Amount column -> indicator column.

    Returns:
        A copy of *df* with signed amounts.
    """
    df = df.copy()
    for amount_col, indicator_col in amount_columns.items():
        indicator = df[indicator_col].str.strip().str.upper()
        sign = indicator.map(MONEY_MOVEMENT)
        unknown = int(sign.isna().sum())
        if unknown:
            logger.warning(
                "Column '%s': %d row(s) with unknown debit/credit indicator, left unsigned",
                indicator_col,
                unknown,
            )
        df[amount_col] = df[amount_col] * sign.fillna(1)
    return df
