from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Optional

from errors import ValidationError
from models.money import to_money, signed_amount


@dataclass
class Transaction:
    id: str  # e.g. "txn_5e1f2a3b4c6d"
    type: str  # 'income' or 'expense'
    amount: Decimal  # always positive
    category_id: str
    account_id: str
    date: datetime  # timezone-aware, UTC
    comment: str = ""

    @property
    def signed_amount(self) -> Decimal:
        """Balance effect of this transaction on its account."""
        return signed_amount(self.type, self.amount)

    def affects_balance_like(self, other: "Transaction") -> bool:
        """True if both transactions have the same effect on the same account."""
        return (
            self.account_id == other.account_id
            and self.type == other.type
            and self.amount == other.amount
        )

    def to_dict(self) -> dict:
        """Convert transaction to dictionary for storage."""
        return {
            "id": self.id,
            "type": self.type,
            "amount": str(self.amount),
            "categoryId": self.category_id,
            "accountId": self.account_id,
            "date": self.date.isoformat(),
            "comment": self.comment,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Transaction":
        return cls(
            id=data["id"],
            type=data["type"],
            amount=to_money(data["amount"]),
            category_id=data.get("categoryId"),
            account_id=data.get("accountId"),
            date=parse_timestamp(data["date"]),
            comment=data.get("comment") or "",
        )


@dataclass
class TransactionListing:
    """A transaction together with the display data of its category."""

    transaction: Transaction
    category_name: str
    category_color: str
    category_icon: str

    def to_dict(self) -> dict:
        data = self.transaction.to_dict()
        data.update(
            {
                "categoryName": self.category_name,
                "categoryColor": self.category_color,
                "categoryIcon": self.category_icon,
            }
        )
        return data


def parse_timestamp(value) -> datetime:
    """Parse a transaction date into an aware UTC datetime.

    Accepts datetimes, dates (taken as midnight) and ISO 8601 strings,
    including a trailing ``Z``. Naive values are taken as UTC.

    Raises:
        ValidationError: If the value cannot be parsed.
    """
    parsed: Optional[datetime] = None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(f"Invalid date: {value!r}")

    if parsed is None:
        raise ValidationError(f"Invalid date: {value!r}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
