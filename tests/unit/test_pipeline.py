"""
Unit tests for the transform pipeline (trr_ingest.transforms.pipeline).

Tests step toggling via OutputConfig and skipping of configured columns
that the row table does not have.
"""

from __future__ import annotations

import logging

import pandas as pd
import pytest

from tests.builders import make_row, make_trr_text
from trr_ingest.config import OutputConfig
from trr_ingest.report import TransactionReport
from trr_ingest.transforms.pipeline import TransformPipeline


@pytest.fixture()
def rows_df() -> pd.DataFrame:
    text = make_trr_text([
        make_row(),
        make_row(Transaction_Debit_or_Credit="DR", Gross_Transaction_Amount="250"),
    ])
    return TransactionReport().parse(text).to_dataframe()


class TestTransformPipeline:
    """Tests for TransformPipeline.run()."""

    def test_all_steps(self, rows_df: pd.DataFrame):
        result = TransformPipeline(OutputConfig(timezone="UTC")).run(rows_df)

        assert result.df["Gross Transaction Amount"].tolist() == [1000, -250]
        assert result.df["Fee Amount"].tolist() == [-59, -59]
        assert result.amount_columns == ["Gross Transaction Amount", "Fee Amount"]
        assert result.signed_columns == ["Gross Transaction Amount", "Fee Amount"]
        assert result.date_columns == [
            "Transaction Initiation Date", "Transaction Completion Date",
        ]
        assert result.df["Transaction Initiation Date"].iloc[0] == pd.Timestamp(
            "2016-09-08 17:15:00", tz="UTC"
        )

    def test_amount_parsing_disabled(self, rows_df: pd.DataFrame):
        cfg = OutputConfig(parse_amounts=False)
        result = TransformPipeline(cfg).run(rows_df)
        assert result.df["Gross Transaction Amount"].tolist() == ["1000", "250"]
        assert result.amount_columns == []
        assert result.signed_columns == []

    def test_money_movement_disabled(self, rows_df: pd.DataFrame):
        cfg = OutputConfig(apply_money_movement=False)
        result = TransformPipeline(cfg).run(rows_df)
        assert result.df["Gross Transaction Amount"].tolist() == [1000, 250]
        assert result.signed_columns == []

    def test_amount_without_indicator(self, rows_df: pd.DataFrame):
        cfg = OutputConfig(amount_columns={"Fee Amount": None})
        result = TransformPipeline(cfg).run(rows_df)
        assert result.df["Fee Amount"].tolist() == [59, 59]
        assert result.signed_columns == []

    def test_missing_columns_skipped(self, rows_df: pd.DataFrame, caplog):
        cfg = OutputConfig(
            amount_columns={"Missing Amount": "Missing Sign"},
            date_columns=["Missing Date"],
        )
        with caplog.at_level(logging.WARNING, logger="trr_ingest.transforms.pipeline"):
            result = TransformPipeline(cfg).run(rows_df)
        assert result.amount_columns == []
        assert result.date_columns == []
        assert "Missing Amount" in caplog.text
        assert "Missing Date" in caplog.text

    def test_empty_table(self):
        df = TransactionReport().parse(make_trr_text([])).to_dataframe()
        result = TransformPipeline(OutputConfig()).run(df)
        assert result.df.empty
