"""Statistics and dashboard summaries."""

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Tuple

from errors import ValidationError
from models.account import Account
from models.money import EXPENSE, INCOME, ZERO
from models.transaction import TransactionListing

PERIODS = ("week", "month", "year", "custom")


@dataclass
class CategoryTotal:
    category_id: str
    name: str
    color: str
    amount: Decimal
    percent: Decimal  # share of total expense, one decimal place


@dataclass
class DailyTotals:
    day: date
    income: Decimal = ZERO
    expense: Decimal = ZERO


@dataclass
class PeriodSummary:
    start: date
    end: date
    total_income: Decimal
    total_expense: Decimal
    expense_by_category: List[CategoryTotal] = field(default_factory=list)
    by_day: List[DailyTotals] = field(default_factory=list)

    @property
    def net(self) -> Decimal:
        return self.total_income - self.total_expense


@dataclass
class Dashboard:
    total_balance: Decimal
    accounts: List[Account]
    month_income: Decimal
    month_expense: Decimal
    recent: List[TransactionListing]


def period_range(
    period: str,
    today: date,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> Tuple[date, date]:
    """Resolve a named period to an inclusive (start, end) date range.

    ``week``, ``month`` and ``year`` run from the start of the current
    period up to ``today``. ``custom`` uses the given dates, swapping them if
    reversed, and falls back to the whole current month when one is missing.

    Raises:
        ValidationError: If the period name is unknown.
    """
    if period not in PERIODS:
        raise ValidationError(f"Invalid period: {period!r}")

    if period == "week":
        return today - timedelta(days=today.weekday()), today
    if period == "month":
        return today.replace(day=1), today
    if period == "year":
        return date(today.year, 1, 1), today

    if start is None or end is None:
        first = today.replace(day=1)
        next_month = (first + timedelta(days=32)).replace(day=1)
        return first, next_month - timedelta(days=1)
    if start > end:
        start, end = end, start
    return start, end


class StatsService:
    """Read-only summaries over accounts and transactions."""

    def __init__(self, accounts, transactions, categories):
        self.accounts = accounts
        self.transactions = transactions
        self.categories = categories

    def summary(
        self,
        user_id: str,
        period: str = "month",
        start: Optional[date] = None,
        end: Optional[date] = None,
        today: Optional[date] = None,
    ) -> PeriodSummary:
        """Income, expense and per-category/per-day breakdowns for a period.

        Args:
            user_id: Owner of the data.
            period: One of "week", "month", "year", "custom".
            start: First day for a custom period.
            end: Last day for a custom period.
            today: Reference day; defaults to the current date.
        """
        first, last = period_range(period, today or date.today(), start, end)
        listings = self.transactions.list_enriched(user_id, first, last)

        total_income = ZERO
        total_expense = ZERO
        by_category = {}
        by_day = {}
        day = first
        while day <= last:
            by_day[day] = DailyTotals(day=day)
            day += timedelta(days=1)

        for listing in listings:
            t = listing.transaction
            totals = by_day[t.date.date()]
            if t.type == INCOME:
                total_income += t.amount
                totals.income += t.amount
            elif t.type == EXPENSE:
                total_expense += t.amount
                totals.expense += t.amount
                entry = by_category.setdefault(
                    t.category_id,
                    CategoryTotal(
                        category_id=t.category_id,
                        name=listing.category_name,
                        color=listing.category_color,
                        amount=ZERO,
                        percent=ZERO,
                    ),
                )
                entry.amount += t.amount

        for entry in by_category.values():
            entry.percent = (entry.amount * 100 / total_expense).quantize(
                Decimal("0.1"), rounding=ROUND_HALF_UP
            )

        return PeriodSummary(
            start=first,
            end=last,
            total_income=total_income,
            total_expense=total_expense,
            expense_by_category=sorted(
                by_category.values(), key=lambda c: (-c.amount, c.name)
            ),
            by_day=list(by_day.values()),
        )

    def dashboard(
        self, user_id: str, today: Optional[date] = None, recent: int = 5
    ) -> Dashboard:
        """Overall balance, this month's totals and the latest transactions."""
        today = today or date.today()
        accounts = self.accounts.find_all(user_id)
        month = self.summary(user_id, "month", today=today)
        return Dashboard(
            total_balance=sum((a.balance for a in accounts), ZERO),
            accounts=accounts,
            month_income=month.total_income,
            month_expense=month.total_expense,
            recent=self.transactions.list_enriched(user_id)[:recent],
        )
