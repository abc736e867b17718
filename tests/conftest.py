"""Shared fixtures: a small sample system, in memory and on disk."""

from __future__ import annotations

from pathlib import Path

import pytest

from jdindex.models import JDNumber
from jdindex.system import JDSystem

SAMPLE_FOLDERS = [
    "10-19_finance/12_payroll/12.01_sept_payroll",
    "10-19_finance/12_payroll/12.02_oct_payroll",
    "20-29_admin/22_contracts/22.01_cleaning_contract",
    "20-29_admin/22_contracts/22.02_office_lease",
]

FULL_SYSTEM = """  10-19_finance
    12_payroll
      12.01_sept_payroll
      12.02_oct_payroll
  20-29_admin
    22_contracts
      22.01_cleaning_contract
      22.02_office_lease
"""

PROJECT_OUTLINE = """100-199_project_area_name
101_project_name
10-19_finance
12_payroll
101.12.01_oct_payroll
20-29_admin
22_contracts
101.22.01_cleaning_contract
101.22.02_office_lease"""


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Never read the developer's own jd config during tests."""
    monkeypatch.setenv("JD_CONFIG", str(tmp_path / "no-such-config.yaml"))
    monkeypatch.delenv("JD_INDEX_FILENAME", raising=False)


@pytest.fixture
def sample_system() -> JDSystem:
    system = JDSystem("jd")
    for folder in SAMPLE_FOLDERS:
        system.add_id(JDNumber.from_path(f"jd/{folder}"))
    return system


@pytest.fixture
def jd_root(tmp_path: Path) -> Path:
    """The sample system as real folders, plus some noise the indexer must skip."""
    root = tmp_path / "jd"
    for folder in SAMPLE_FOLDERS:
        (root / folder).mkdir(parents=True)
    (root / "10-19_finance/12_payroll/12.01_sept_payroll/attachments").mkdir()
    (root / ".git/10-19_hidden/12_hidden/12.05_hidden").mkdir(parents=True)
    (root / "notes").mkdir()
    (root / "10-19_finance/12_payroll/12.03_a_file.txt").write_text("not a folder")
    return root.resolve()
