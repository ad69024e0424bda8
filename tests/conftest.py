"""
Pytest configuration and fixtures for society fund tests.
"""

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from society_fund.api.main import create_app
from society_fund.config import SocietyConfig
from society_fund.ledger.entries import ExpenseEntry, FundEntry, FundStatus
from society_fund.ledger.store import EntryStore

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Return the directory exports are written to."""
    return tmp_path / "output"


@pytest.fixture
def config_dir(tmp_path: Path, output_dir: Path) -> Path:
    """Create a config directory whose exports land in tmp_path."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "society_config.yaml").write_text(f"""
society:
  name: "Green Park Society"

reports:
  file_prefix: "society-fund"
  output_dir: "{output_dir.as_posix()}"
  currency_prefix: "Rs "
  status_tokens:
    paid: "Yes"
    unpaid: "No"
""")
    return config_dir


@pytest.fixture
def society_config(config_dir: Path) -> SocietyConfig:
    """Load the test configuration."""
    return SocietyConfig(config_dir)


@pytest.fixture
def store(tmp_path: Path) -> Generator[EntryStore, None, None]:
    """Entry store backed by a SQLite file in tmp_path."""
    store = EntryStore(f"sqlite:///{(tmp_path / 'society.db').as_posix()}")
    store.ensure_schema()
    yield store
    store.dispose()


@pytest.fixture
def client(store: EntryStore, society_config: SocietyConfig) -> Generator[TestClient, None, None]:
    """API client wired to the test store and configuration."""
    app = create_app(store=store, config=society_config)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def sample_funds() -> list[FundEntry]:
    """Fund entries across two blocks plus a shop, in no particular order."""
    return [
        FundEntry(name="Ravi Kumar", block="C", unit="2", amount=Decimal("500"), status=FundStatus.PAID),
        FundEntry(name="Anita Shah", block="A", unit="2", amount=Decimal("200"), status=FundStatus.UNPAID),
        FundEntry(name="Meera Iyer", block="Shop", unit="12", amount=Decimal("1000"), status=FundStatus.PAID),
        FundEntry(name="John D'Souza", block="A", unit="1", amount=Decimal("100"), status=FundStatus.PAID),
        FundEntry(
            name="Farhan Ali",
            block="C",
            unit="10",
            amount=Decimal("750.50"),
            status=FundStatus.UNPAID,
            comment="Will pay next month",
        ),
    ]


@pytest.fixture
def sample_expenses() -> list[ExpenseEntry]:
    """Expenses, newest first as the store returns them."""
    return [
        ExpenseEntry(details="Garden maintenance", amount=Decimal("20"), date=date(2024, 1, 2)),
        ExpenseEntry(details="Lift repair", amount=Decimal("30"), date=date(2024, 1, 1)),
    ]
