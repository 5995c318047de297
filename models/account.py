from dataclasses import dataclass
from decimal import Decimal

from models.money import to_money


@dataclass
class Account:
    id: str  # e.g. "acc_3f9c0a1b2c4d"
    name: str  # unique per user, case-insensitive
    initial_balance: Decimal
    balance: Decimal  # initial_balance + signed sum of the account's transactions

    def to_dict(self) -> dict:
        """Convert account to dictionary for storage."""
        return {
            "id": self.id,
            "name": self.name,
            "initialBalance": str(self.initial_balance),
            "balance": str(self.balance),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Account":
        """Build an account from its stored form.

        Records written before balances were tracked fall back to the
        initial balance (and vice versa).
        """
        initial = data.get("initialBalance", data.get("balance", 0))
        balance = data.get("balance", initial)
        return cls(
            id=data["id"],
            name=data["name"],
            initial_balance=to_money(initial),
            balance=to_money(balance),
        )
