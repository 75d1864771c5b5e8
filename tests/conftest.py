"""Shared pytest fixtures for ledgerlink tests."""

import logging
from datetime import date
from pathlib import Path

import pytest

from ledgerlink.domain.entities import Account, AccountType, Split, Transaction
from ledgerlink.domain.model import Model
from ledgerlink.logging_config import HANDLER_NAME
from ledgerlink.utils.date_parser import to_epoch_second


def epoch(year: int, month: int, day: int) -> int:
    """Epoch seconds at midnight UTC, for building test transactions."""
    return to_epoch_second(date(year, month, day))


@pytest.fixture(autouse=True)
def remove_cli_log_handler():
    """Drop the stderr handler a CLI invocation installs on the root logger."""
    yield
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        if handler.get_name() == HANDLER_NAME:
            root_logger.removeHandler(handler)


@pytest.fixture
def checking():
    return Account.named("Assets:Bank:Checking", type=AccountType.ASSET)


@pytest.fixture
def groceries():
    return Account.named("Expenses:Groceries", type=AccountType.EXPENSE)


@pytest.fixture
def restaurants():
    return Account.named("Expenses:Restaurants", type=AccountType.EXPENSE)


@pytest.fixture
def historical_model(checking, groceries, restaurants):
    """Two grocery purchases and a restaurant visit paid from checking."""
    transactions = [
        Transaction("t1", epoch(2020, 10, 1), "Whole Foods Market"),
        Transaction("t2", epoch(2020, 10, 15), "Chipotle Mexican Grill"),
        Transaction("t3", epoch(2020, 11, 2), "Whole Foods Market"),
    ]
    splits = [
        Split.with_amount(54, groceries.id, "t1"),
        Split.with_amount(-54, checking.id, "t1"),
        Split.with_amount(12, restaurants.id, "t2"),
        Split.with_amount(-12, checking.id, "t2"),
        Split.with_amount(80, groceries.id, "t3"),
        Split.with_amount(-80, checking.id, "t3"),
    ]
    return Model.create([checking, groceries, restaurants], transactions, splits)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
