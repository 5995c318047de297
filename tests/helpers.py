"""Helper utilities for tests."""

from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
import sqlite3

from models.account import Account
from models.category import Category


def run_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> None:
    """Run all SQL migrations in order.

    Args:
        conn: SQLite connection to run migrations against.
        migrations_dir: Path to directory containing .sql migration files.
    """
    for migration_file in sorted(migrations_dir.glob("*.sql")):
        conn.executescript(migration_file.read_text())

    conn.commit()


@dataclass
class SimpleLedger:
    cash: Account
    groceries: Category
    salary: Category


def expected_balance(services, user_id: str, account: Account) -> Decimal:
    """Initial balance plus the signed sum of the account's current transactions."""
    current = services.accounts.find(user_id, account.id)
    return current.initial_balance + sum(
        (
            t.signed_amount
            for t in services.transactions.find_all(user_id, account_id=account.id)
        ),
        Decimal("0"),
    )


class InterleavingDatabaseManager:
    """Wraps a database manager and runs a callback right after the next read.

    The callback fires once the SELECT of a cold-cache read has finished and
    before the store files its result, which lets a test commit a write in
    between.
    """

    def __init__(self, inner):
        self.inner = inner
        self.after_next_read = None

    @contextmanager
    def connect(self):
        with self.inner.connect() as conn:
            yield conn
        callback, self.after_next_read = self.after_next_read, None
        if callback is not None:
            callback()

    def transaction(self):
        return self.inner.transaction()
