"""Transaction service.

The only place transactions are created, changed or removed. Each operation
touches two collections (transactions and accounts) and is observed as all
or nothing:

* create persists the transaction first, then the balance change; if the
  balance change cannot be applied the transaction list is restored.
* update computes the new balances in memory first and writes both
  collections in one database transaction.
* delete reverses the balance effect and removes the transaction in one
  database transaction; a missing account never blocks the deletion.
"""

import sqlite3
from datetime import date, datetime, time, timezone
from typing import List, Optional
from uuid import uuid4

from errors import (
    AccountNotFound,
    InvalidAccount,
    InvalidCategory,
    NotFoundError,
    ReconciliationFailure,
    ValidationError,
)
from logger import get_logger
from models.account import Account
from models.money import TRANSACTION_TYPES, ZERO, to_money
from models.transaction import Transaction, TransactionListing, parse_timestamp

logger = get_logger()


class TransactionService:
    """Service for managing transactions and keeping balances in step."""

    def __init__(self, store, reconciler, categories):
        """Initialize the transaction service.

        Args:
            store: LedgerStore holding the per-user collections.
            reconciler: BalanceReconciler computing balance changes.
            categories: CategoryService used to validate and describe categories.
        """
        self.store = store
        self.reconciler = reconciler
        self.categories = categories

    def create(
        self,
        user_id: str,
        type: str,
        amount,
        category_id: str,
        account_id: str,
        date,
        comment: Optional[str] = "",
    ) -> Transaction:
        """Record a new transaction and apply it to its account balance.

        Returns:
            The created Transaction.

        Raises:
            ValidationError: If type, amount or date is malformed.
            InvalidCategory: If the category is missing or of another type.
            InvalidAccount: If the account does not exist.
            ReconciliationFailure: If the balance could not be updated; the
                transaction is rolled back before this is raised.
        """
        with self.store.lock(user_id):
            transaction = self._build(
                user_id,
                f"txn_{uuid4().hex[:12]}",
                type,
                amount,
                category_id,
                account_id,
                date,
                comment,
            )

            previous = self.store.load_all(user_id, "transactions")
            self.store.save_all(
                user_id, "transactions", previous + [transaction.to_dict()]
            )

            try:
                accounts = self.reconciler.apply_create(
                    self._load_accounts(user_id), transaction
                )
                self._save_accounts(user_id, accounts)
            except (AccountNotFound, sqlite3.Error) as e:
                self.store.save_all(user_id, "transactions", previous)
                logger.error(
                    f"Rolled back transaction {transaction.id} for {user_id}: {e}"
                )
                raise ReconciliationFailure(
                    "Could not update the account balance; the transaction was not saved"
                ) from e

        logger.info(
            f"Created {transaction.type} {transaction.id} of {transaction.amount} "
            f"on {transaction.account_id} for {user_id}"
        )
        return transaction

    def update(
        self,
        user_id: str,
        transaction_id: str,
        type: str,
        amount,
        category_id: str,
        account_id: str,
        date,
        comment: Optional[str] = "",
    ) -> Transaction:
        """Replace every field of a transaction and move its balance effect.

        Returns:
            The updated Transaction.

        Raises:
            ValidationError, InvalidCategory, InvalidAccount: As for create.
            NotFoundError: If the transaction does not exist.
            ReconciliationFailure: If an affected account has vanished; nothing
                is persisted in that case.
        """
        with self.store.lock(user_id):
            updated = self._build(
                user_id,
                transaction_id,
                type,
                amount,
                category_id,
                account_id,
                date,
                comment,
            )

            stored = self.store.load_all(user_id, "transactions")
            index = _index_of(stored, transaction_id)
            if index is None:
                raise NotFoundError(f"Transaction with ID {transaction_id} not found")
            original = Transaction.from_dict(stored[index])

            try:
                accounts = self.reconciler.apply_update(
                    self._load_accounts(user_id), original, updated
                )
            except AccountNotFound as e:
                raise ReconciliationFailure(
                    f"Could not move the balance effect of {transaction_id}; nothing was changed"
                ) from e

            stored[index] = updated.to_dict()
            documents = {"transactions": stored}
            if not original.affects_balance_like(updated):
                documents["accounts"] = [a.to_dict() for a in accounts]
            self.store.save_many(user_id, documents)

        logger.info(f"Updated transaction {transaction_id} for {user_id}")
        return updated

    def delete(self, user_id: str, transaction_id: str) -> None:
        """Remove a transaction and reverse its balance effect.

        Raises:
            NotFoundError: If the transaction does not exist.
        """
        with self.store.lock(user_id):
            stored = self.store.load_all(user_id, "transactions")
            index = _index_of(stored, transaction_id)
            if index is None:
                raise NotFoundError(f"Transaction with ID {transaction_id} not found")
            transaction = Transaction.from_dict(stored.pop(index))

            documents = {"transactions": stored}
            accounts = self._load_accounts(user_id)
            if any(a.id == transaction.account_id for a in accounts):
                accounts = self.reconciler.apply_delete(accounts, transaction)
                documents["accounts"] = [a.to_dict() for a in accounts]
            else:
                logger.warning(
                    f"Account {transaction.account_id} no longer exists; "
                    f"deleting {transaction_id} without a balance change"
                )
            self.store.save_many(user_id, documents)

        logger.info(f"Deleted transaction {transaction_id} for {user_id}")

    def find(self, user_id: str, transaction_id: str) -> Optional[Transaction]:
        """Get a single transaction by ID, or None."""
        stored = self.store.load_all(user_id, "transactions")
        index = _index_of(stored, transaction_id)
        return Transaction.from_dict(stored[index]) if index is not None else None

    def find_all(
        self,
        user_id: str,
        start=None,
        end=None,
        *,
        type: Optional[str] = None,
        account_id: Optional[str] = None,
        category_id: Optional[str] = None,
    ) -> List[Transaction]:
        """Get a user's transactions, newest first.

        Args:
            user_id: Owner of the transactions.
            start: Optional inclusive lower bound (date, datetime or ISO string).
                A plain date or a date-only string such as "2025-01-31"
                covers the whole day.
            end: Optional inclusive upper bound, same forms as ``start``.
            type: Optional "income" or "expense" filter.
            account_id: Optional account filter.
            category_id: Optional category filter.
        """
        lower = _lower_bound(start) if start is not None else None
        upper = _upper_bound(end) if end is not None else None

        transactions = []
        for item in self.store.load_all(user_id, "transactions"):
            t = Transaction.from_dict(item)
            if lower is not None and t.date < lower:
                continue
            if upper is not None and t.date > upper:
                continue
            if type is not None and t.type != type:
                continue
            if account_id is not None and t.account_id != account_id:
                continue
            if category_id is not None and t.category_id != category_id:
                continue
            transactions.append(t)

        return sorted(transactions, key=lambda t: (t.date, t.id), reverse=True)

    def list_enriched(self, user_id: str, start=None, end=None, **filters) -> List[TransactionListing]:
        """Like find_all, with each transaction's category name, colour and icon."""
        categories = self.categories.find_all(user_id)
        listings = []
        for t in self.find_all(user_id, start, end, **filters):
            name, color, icon = self.categories.describe(categories, t.category_id)
            listings.append(
                TransactionListing(
                    transaction=t,
                    category_name=name,
                    category_color=color,
                    category_icon=icon,
                )
            )
        return listings

    def _build(
        self,
        user_id,
        transaction_id,
        type,
        amount,
        category_id,
        account_id,
        date,
        comment,
    ) -> Transaction:
        """Validate input and return the Transaction it describes."""
        if type not in TRANSACTION_TYPES:
            raise ValidationError(f"Invalid transaction type: {type!r}")

        amount = to_money(amount)
        if amount <= ZERO:
            raise ValidationError("Amount must be a positive number")

        timestamp = parse_timestamp(date)

        if not category_id:
            raise ValidationError("Category is required")
        if self.categories.resolve(user_id, category_id, type) is None:
            raise InvalidCategory(
                f"Category {category_id} does not exist or is not of type {type}"
            )

        if not account_id:
            raise ValidationError("Account is required")
        if not any(a.id == account_id for a in self._load_accounts(user_id)):
            raise InvalidAccount(f"Account with ID {account_id} not found")

        if comment is not None and not isinstance(comment, str):
            raise ValidationError("Comment must be text")

        return Transaction(
            id=transaction_id,
            type=type,
            amount=amount,
            category_id=category_id,
            account_id=account_id,
            date=timestamp,
            comment=comment or "",
        )

    def _load_accounts(self, user_id: str) -> List[Account]:
        return [Account.from_dict(a) for a in self.store.load_all(user_id, "accounts")]

    def _save_accounts(self, user_id: str, accounts: List[Account]) -> None:
        self.store.save_all(user_id, "accounts", [a.to_dict() for a in accounts])


def _index_of(stored: list, transaction_id: str) -> Optional[int]:
    for index, item in enumerate(stored):
        if item.get("id") == transaction_id:
            return index
    return None


def _as_day(value) -> Optional[date]:
    """Return the calendar day for a date or a date-only ISO string, else None."""
    if isinstance(value, datetime):
        return None
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def _lower_bound(value) -> datetime:
    day = _as_day(value)
    if day is not None:
        return datetime.combine(day, time.min, tzinfo=timezone.utc)
    return parse_timestamp(value)


def _upper_bound(value) -> datetime:
    day = _as_day(value)
    if day is not None:
        return datetime.combine(day, time.max, tzinfo=timezone.utc)
    return parse_timestamp(value)
