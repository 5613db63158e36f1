"""Shared pytest fixtures for bankimport tests."""

import tempfile
import os
from datetime import datetime, timedelta, UTC
import pytest

from bankimport.config import ImportSettings
from bankimport.database.factories import create_sqlite_database
from bankimport.domain.account import AccountService
from bankimport.domain.category import CategoryService
from bankimport.domain.csv_import import CSVImportService
from bankimport.domain.mapping_template import MappingTemplateService
from bankimport.domain.session_store import ImportSessionStore
from bankimport.domain.transaction import TransactionService


class FakeClock:
    """Manually advanced clock for session expiry tests."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 3, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


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
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def template_service(temp_db):
    """Create a MappingTemplateService with a temporary database."""
    return MappingTemplateService(temp_db)


@pytest.fixture
def clock():
    """Create a fake clock."""
    return FakeClock()


@pytest.fixture
def session_store(clock):
    """Create a session store driven by the fake clock."""
    return ImportSessionStore(ttl=timedelta(minutes=30), clock=clock)


@pytest.fixture
def import_service(temp_db, session_store):
    """Create a CSVImportService with default settings."""
    return CSVImportService(temp_db, store=session_store, settings=ImportSettings())


@pytest.fixture
def sample_account(account_service):
    """Create a sample account for testing."""
    account_id = account_service.create_account(name="Test Account", bank_name="Test Bank")
    return account_service.get_account(account_id)


@pytest.fixture
def sample_categories(category_service):
    """Create a few categories and return their IDs by name."""
    return {
        name: category_service.create_category(name)
        for name in ("Groceries", "Salary", "Utilities")
    }


@pytest.fixture
def signed_csv():
    """Statement with a single signed amount column."""
    return (
        b"Date,Description,Amount,Category\n"
        b"2024-01-15,Coffee Shop,-4.50,Groceries\n"
        b"2024-01-16,Salary,2500.00,Salary\n"
        b"2024-01-17,Power Company,-80.25,\n"
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
