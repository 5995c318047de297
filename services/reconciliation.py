"""Balance reconciliation for transaction changes.

Every account satisfies::

    balance == initial_balance + sum(signed amount of its transactions)

where income counts as ``+amount`` and expense as ``-amount``. The normal
write path keeps that true incrementally: each transaction event is turned
into per-account deltas which are applied in one step. ``recompute`` and
``repair`` rebuild balances from history and are only used to correct drift.

The reconciler works on in-memory lists and never touches storage; the
transaction service decides when results are persisted.
"""

from collections import defaultdict
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from errors import AccountNotFound
from models.account import Account
from models.money import ZERO, to_money
from models.transaction import Transaction


@dataclass
class BalanceDrift:
    """An account whose stored balance disagrees with its history."""

    account_id: str
    account_name: str
    stored: Decimal
    expected: Decimal

    @property
    def difference(self) -> Decimal:
        return self.expected - self.stored


class BalanceReconciler:
    """Computes account balances in response to transaction events.

    All ``apply_*`` methods return a new list of accounts and leave their
    input untouched, so a failure can never leave half-applied balances behind.
    """

    def apply_create(
        self, accounts: List[Account], transaction: Transaction
    ) -> List[Account]:
        """Add the effect of a new transaction to its account.

        Raises:
            AccountNotFound: If the transaction's account is not in ``accounts``.
        """
        return self._apply(
            accounts, {transaction.account_id: transaction.signed_amount}
        )

    def apply_update(
        self, accounts: List[Account], old: Transaction, new: Transaction
    ) -> List[Account]:
        """Replace the effect of ``old`` with the effect of ``new``.

        Covers an amount change, a type change and a move to another account
        in one step. Changes that leave account, type and amount as they were
        return the balances unchanged.

        Raises:
            AccountNotFound: If either the old or the new account is missing.
        """
        if old.affects_balance_like(new):
            return [replace(account) for account in accounts]

        deltas: Dict[str, Decimal] = defaultdict(Decimal)
        deltas[old.account_id] -= old.signed_amount
        deltas[new.account_id] += new.signed_amount
        return self._apply(accounts, deltas)

    def apply_delete(
        self, accounts: List[Account], transaction: Transaction
    ) -> List[Account]:
        """Reverse the effect of a removed transaction.

        Raises:
            AccountNotFound: If the transaction's account is not in ``accounts``.
        """
        return self._apply(
            accounts, {transaction.account_id: -transaction.signed_amount}
        )

    def recompute(
        self,
        account_id: str,
        transactions: Iterable[Transaction],
        initial_balance,
    ) -> Decimal:
        """Rebuild a balance from scratch.

        Only transactions whose ``account_id`` matches are counted, so the
        full transaction list of a user can be passed in.
        """
        total = sum(
            (t.signed_amount for t in transactions if t.account_id == account_id),
            ZERO,
        )
        return to_money(initial_balance) + total

    def find_drift(
        self, accounts: List[Account], transactions: List[Transaction]
    ) -> List[BalanceDrift]:
        """List accounts whose stored balance disagrees with their history."""
        drifts = []
        for account in accounts:
            expected = self.recompute(
                account.id, transactions, account.initial_balance
            )
            if expected != account.balance:
                drifts.append(
                    BalanceDrift(
                        account_id=account.id,
                        account_name=account.name,
                        stored=account.balance,
                        expected=expected,
                    )
                )
        return drifts

    def repair(
        self, accounts: List[Account], transactions: List[Transaction]
    ) -> Tuple[List[Account], List[BalanceDrift]]:
        """Recompute every balance.

        Returns:
            The corrected accounts and the drifts that were fixed.
        """
        drifts = self.find_drift(accounts, transactions)
        corrected = {drift.account_id: drift.expected for drift in drifts}
        repaired = [
            replace(account, balance=corrected.get(account.id, account.balance))
            for account in accounts
        ]
        return repaired, drifts

    def _apply(
        self, accounts: List[Account], deltas: Dict[str, Decimal]
    ) -> List[Account]:
        known = {account.id for account in accounts}
        for account_id in deltas:
            if account_id not in known:
                raise AccountNotFound(account_id)

        return [
            replace(account, balance=account.balance + deltas.get(account.id, ZERO))
            for account in accounts
        ]
