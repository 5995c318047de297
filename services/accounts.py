"""Account service."""

from typing import List, Optional
from uuid import uuid4

from errors import AccountInUse, DuplicateAccountName, NotFoundError, ValidationError
from logger import get_logger
from models.account import Account
from models.money import to_money
from models.transaction import Transaction

logger = get_logger()


class AccountService:
    """Service for managing accounts."""

    def __init__(self, store, reconciler):
        """Initialize the account service.

        Args:
            store: LedgerStore holding the per-user collections.
            reconciler: BalanceReconciler used for full recomputes.
        """
        self.store = store
        self.reconciler = reconciler

    def find_all(self, user_id: str) -> List[Account]:
        """Get all accounts of a user, in creation order."""
        return self._load(user_id)

    def find(self, user_id: str, account_id: str) -> Optional[Account]:
        """Get a single account by ID, or None."""
        for account in self._load(user_id):
            if account.id == account_id:
                return account
        return None

    def find_by_name(self, user_id: str, name: str) -> Optional[Account]:
        """Get a single account by name (case-insensitive), or None."""
        for account in self._load(user_id):
            if account.name.lower() == name.strip().lower():
                return account
        return None

    def create(self, user_id: str, name: str, initial_balance=0) -> Account:
        """Create a new account whose balance starts at its initial balance.

        Raises:
            ValidationError: If the name is empty or the balance is not a number.
            DuplicateAccountName: If the name is already used (case-insensitive).
        """
        name = _clean_name(name)
        initial = to_money(initial_balance)

        with self.store.lock(user_id):
            accounts = self._load(user_id)
            if _name_taken(accounts, name):
                raise DuplicateAccountName(f"Account '{name}' already exists")

            account = Account(
                id=f"acc_{uuid4().hex[:12]}",
                name=name,
                initial_balance=initial,
                balance=initial,
            )
            accounts.append(account)
            self._save(user_id, accounts)

        logger.info(f"Created account '{name}' ({account.id}) for {user_id}")
        return account

    def update(
        self,
        user_id: str,
        account_id: str,
        name: Optional[str] = None,
        balance_adjustment=None,
        initial_balance=None,
    ) -> Account:
        """Rename an account or correct its balance directly.

        A ``balance_adjustment`` moves both the initial balance and the
        balance by the same amount. A new ``initial_balance`` recomputes the
        balance from the account's transactions.

        Raises:
            NotFoundError: If the account does not exist.
            DuplicateAccountName: If another account has the new name.
            ValidationError: If a money value is malformed.
        """
        with self.store.lock(user_id):
            accounts = self._load(user_id)
            account = next((a for a in accounts if a.id == account_id), None)
            if account is None:
                raise NotFoundError(f"Account with ID {account_id} not found")

            if name is not None:
                name = _clean_name(name)
                if _name_taken(accounts, name, exclude_id=account_id):
                    raise DuplicateAccountName(f"Account '{name}' already exists")
                account.name = name

            if balance_adjustment is not None:
                delta = to_money(balance_adjustment)
                account.initial_balance += delta
                account.balance += delta
                logger.info(f"Adjusted balance of {account_id} by {delta}")

            if initial_balance is not None:
                account.initial_balance = to_money(initial_balance)
                account.balance = self.reconciler.recompute(
                    account.id, self._load_transactions(user_id), account.initial_balance
                )
                logger.info(
                    f"Reset initial balance of {account_id} to {account.initial_balance}, "
                    f"balance recomputed to {account.balance}"
                )

            self._save(user_id, accounts)

        return account

    def delete(self, user_id: str, account_id: str) -> None:
        """Delete an account that no transaction references.

        Raises:
            NotFoundError: If the account does not exist.
            AccountInUse: If any transaction references the account.
        """
        with self.store.lock(user_id):
            accounts = self._load(user_id)
            remaining = [a for a in accounts if a.id != account_id]
            if len(remaining) == len(accounts):
                raise NotFoundError(f"Account with ID {account_id} not found")

            in_use = sum(
                1 for t in self._load_transactions(user_id) if t.account_id == account_id
            )
            if in_use:
                raise AccountInUse(
                    f"Account {account_id} is used by {in_use} transaction(s)"
                )

            self._save(user_id, remaining)

        logger.info(f"Deleted account {account_id} for {user_id}")

    def reconcile(self, user_id: str) -> list:
        """Recompute every balance of a user from transaction history.

        Returns:
            The BalanceDrift entries that were corrected (empty if none).
        """
        with self.store.lock(user_id):
            accounts, drifts = self.reconciler.repair(
                self._load(user_id), self._load_transactions(user_id)
            )
            if drifts:
                self._save(user_id, accounts)

        for drift in drifts:
            logger.warning(
                f"Corrected balance of '{drift.account_name}' ({drift.account_id}): "
                f"{drift.stored} -> {drift.expected}"
            )
        return drifts

    def _load(self, user_id: str) -> List[Account]:
        return [Account.from_dict(a) for a in self.store.load_all(user_id, "accounts")]

    def _load_transactions(self, user_id: str) -> List[Transaction]:
        return [
            Transaction.from_dict(t)
            for t in self.store.load_all(user_id, "transactions")
        ]

    def _save(self, user_id: str, accounts: List[Account]) -> None:
        self.store.save_all(user_id, "accounts", [a.to_dict() for a in accounts])


def _clean_name(name) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Account name cannot be empty")
    return name.strip()


def _name_taken(accounts, name, exclude_id=None) -> bool:
    return any(
        a.name.lower() == name.lower() and a.id != exclude_id for a in accounts
    )
