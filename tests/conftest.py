"""Shared pytest fixtures for chaintrack tests."""

import json
import os
import tempfile
from pathlib import Path

import pytest

from chaintrack.database.factories import create_sqlite_database
from chaintrack.domain.chains import ChainContext
from chaintrack.domain.entities import AccountingModel
from chaintrack.logging_setup import reset_logging

CELO_USER = "0x1111111111111111111111111111111111111111"
KASPA_USER = "kaspa:qr" + "a" * 59
KASPA_OTHER = "kaspa:qq" + "b" * 59
FUEL_USER = "0x" + "f" * 64
FUEL_OTHER = "0x" + "e" * 64


@pytest.fixture(autouse=True)
def clean_logging():
    """Undo any logging configuration a CLI invocation installed."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def eth_chain():
    """A plain 18-decimal EVM chain with native asset ETH."""
    return ChainContext(
        key="testnet",
        name="Test Network",
        model=AccountingModel.ACCOUNT,
        native_symbol="ETH",
        native_decimals=18,
        explorer_tx_url="https://explorer.test/tx/{hash}",
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def celo_records(fixtures_dir):
    """Raw Celo txlist items."""
    return json.loads((fixtures_dir / "celo_txlist.json").read_text())["result"]


@pytest.fixture
def kaspa_records(fixtures_dir):
    """Raw Kaspa API transactions."""
    return json.loads((fixtures_dir / "kaspa_transactions.json").read_text())


@pytest.fixture
def fuel_nodes(fixtures_dir):
    """Raw Fuel transactionsByOwner nodes."""
    payload = json.loads((fixtures_dir / "fuel_transactions.json").read_text())
    return payload["data"]["transactionsByOwner"]["nodes"]
