"""Shared pytest fixtures for all tests."""

import sqlite3
import pytest
from pathlib import Path

from config import Config, get_migrations_dir
from db.manager import DatabaseManager
from services.base import Services
from tests.helpers import run_migrations


@pytest.fixture
def test_db():
    """Create an in-memory SQLite database for testing.

    Yields:
        sqlite3.Connection: Connection to in-memory database.
    """
    conn = sqlite3.connect(":memory:", check_same_thread=False)
    yield conn
    conn.close()


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration pointing to a temporary directory.

    Args:
        tmp_path: pytest tmp_path fixture for temporary directory.

    Returns:
        Config: Test configuration object.
    """
    return Config(
        base_dir=tmp_path / "purse",
        db_data_dir=tmp_path / "purse" / "db",
        db_filename="test.db",
        log_level="DEBUG",
        log_dir=tmp_path / "purse" / "logs",
    )


@pytest.fixture
def db_manager_with_schema(test_db, test_config):
    """Create a DatabaseManager with schema already set up.

    This fixture provides a DatabaseManager that uses an in-memory database
    with all migrations already applied.
    """
    run_migrations(test_db, get_migrations_dir())

    class TestDatabaseManager(DatabaseManager):
        """Test database manager that uses the in-memory connection."""

        def __init__(self, conn):
            super().__init__(test_config)
            self.conn = conn

        def connect(self):
            """Return a context manager for the test connection."""
            return _TestConnectionContext(self.conn)

        def get_db_path(self):
            """Return a fake path for the test database."""
            return Path(":memory:")

    class _TestConnectionContext:
        """Context manager for test database connections."""

        def __init__(self, conn):
            self.conn = conn

        def __enter__(self):
            return self.conn

        def __exit__(self, exc_type, exc_val, exc_tb):
            # Don't close the connection - let the fixture handle it
            pass

    return TestDatabaseManager(test_db)


@pytest.fixture
def services(test_config, db_manager_with_schema):
    """Create a Services container with test database."""
    return Services(test_config, db_manager=db_manager_with_schema)


@pytest.fixture
def user():
    """ID of the acting user."""
    return "user_1"


@pytest.fixture
def ledger(services, user):
    """A user with a Cash account and one category of each type.

    Returns:
        SimpleLedger with ``cash``, ``groceries`` and ``salary`` attributes.
    """
    from tests.helpers import SimpleLedger

    return SimpleLedger(
        cash=services.accounts.create(user, "Cash", "1000"),
        groceries=services.categories.create(user, "expense", "Groceries"),
        salary=services.categories.create(user, "income", "Salary"),
    )
