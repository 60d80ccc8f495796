"""
Shared test fixtures for trr-ingest tests.

Report text is synthesized by ``tests.builders``; file-based fixtures
write it under ``tmp_path`` so nothing touches the workspace.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.builders import make_row, make_trr_text, write_trr_file


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def single_file_report(tmp_path: Path) -> Path:
    """A one-file report with two rows (a payment and a refund)."""
    rows = [
        make_row(),
        make_row(
            Transaction_ID="9ZX98765YW432109V",
            Transaction_Event_Code="T1107",
            Transaction_Debit_or_Credit="DR",
            Gross_Transaction_Amount="250",
            Fee_Debit_or_Credit="CR",
            Fee_Amount="15",
        ),
    ]
    return write_trr_file(tmp_path / "TRR-20160908.01.004.CSV", make_trr_text(rows))


@pytest.fixture()
def multi_file_report(tmp_path: Path) -> list[Path]:
    """A report split across two files (1 row + 2 rows)."""
    first = make_trr_text([make_row()], file_index=1, last=False)
    second = make_trr_text(
        [make_row(Transaction_ID="A2"), make_row(Transaction_ID="A3")],
        file_index=2,
        last=True,
        report_total=3,
    )
    return [
        write_trr_file(tmp_path / "TRR-20160908.01.004.CSV", first),
        write_trr_file(tmp_path / "TRR-20160908.02.004.CSV", second),
    ]


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (runs the full init/ingest workflow)",
    )
