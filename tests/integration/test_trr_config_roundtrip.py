"""
Integration tests: config round-trip workflow.

Tests the full cycle: init() -> edit trrconfig.yaml -> ingest() rebuild,
and verifies that edits are reflected in the rebuilt output.
"""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest
from pydantic import ValidationError

from trr_ingest import init, ingest
from trr_ingest.config import load_config, save_config
from trr_ingest.exceptions import ConfigValidationError


@pytest.fixture()
def initialized(single_file_report: Path, tmp_path: Path) -> str:
    """Run init() without export and return the config path."""
    config_path = str(tmp_path / "trrconfig.yaml")
    init(
        [str(single_file_report)],
        output_dir=str(tmp_path / "out"),
        config_path=config_path,
        run_immediately=False,
    )
    return config_path


@pytest.mark.integration
class TestConfigRoundtrip:
    """Tests for the config-first workflow."""

    def test_generated_config_is_valid(self, initialized: str, single_file_report: Path):
        cfg = load_config(initialized)
        assert cfg.source.input_paths == [str(single_file_report)]
        assert cfg.output.amount_columns == {
            "Gross Transaction Amount": "Transaction Debit or Credit",
            "Fee Amount": "Fee Debit or Credit",
        }

    def test_switch_to_csv(self, initialized: str, tmp_path: Path):
        cfg = load_config(initialized)
        cfg.output.output_format = "csv"
        cfg.output.table_name = "trr_rows"
        save_config(cfg, initialized)

        written = ingest(config_path=initialized)

        assert [Path(p).name for p in written] == ["trr_rows.csv", "_meta.csv"]
        df = pd.read_csv(tmp_path / "out" / "trr_rows.csv", encoding="utf-8-sig")
        assert df["Gross Transaction Amount"].tolist() == [1000, -250]

    def test_disable_money_movement(self, initialized: str, tmp_path: Path):
        cfg = load_config(initialized)
        cfg.output.apply_money_movement = False
        save_config(cfg, initialized)

        ingest(config_path=initialized)

        df = pd.read_parquet(tmp_path / "out" / "transactions.parquet")
        assert df["Gross Transaction Amount"].tolist() == [1000, 250]

    def test_unknown_column_rejected(self, initialized: str):
        cfg = load_config(initialized)
        cfg.output.date_columns = ["No Such Column"]
        save_config(cfg, initialized)

        with pytest.raises(ConfigValidationError, match="No Such Column"):
            ingest(config_path=initialized)

    def test_bad_timezone_rejected(self, initialized: str):
        text = Path(initialized).read_text(encoding="utf-8")
        Path(initialized).write_text(
            text.replace("Europe/Berlin", "Mars/Olympus"), encoding="utf-8"
        )

        with pytest.raises(ValidationError, match="Unknown timezone"):
            ingest(config_path=initialized)

    def test_missing_config(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            ingest(config_path=str(tmp_path / "nope.yaml"))
