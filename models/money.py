"""Decimal helpers for currency amounts."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from errors import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

INCOME = "income"
EXPENSE = "expense"
TRANSACTION_TYPES = (INCOME, EXPENSE)


def to_money(value) -> Decimal:
    """Parse a currency value into a Decimal with two places.

    Floats are converted through ``str`` so 0.1 stays 0.1.

    Raises:
        ValidationError: If the value is missing, not numeric, not finite,
            or too large to hold in cents.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"Invalid amount: {value!r}")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value) if not isinstance(value, Decimal) else value
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise ValidationError(f"Amount must be a finite number: {value!r}")
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(f"Amount is too large: {value!r}")


def signed_amount(transaction_type: str, amount: Decimal) -> Decimal:
    """Return the balance effect of a transaction: +amount for income, -amount for expense."""
    if transaction_type == INCOME:
        return amount
    if transaction_type == EXPENSE:
        return -amount
    raise ValidationError(f"Invalid transaction type: {transaction_type!r}")
