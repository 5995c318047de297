from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from errors import ValidationError
from models.category import UNCATEGORIZED
from services.stats import period_range

TODAY = date(2025, 3, 12)  # a Wednesday


class TestPeriodRange:
    def test_week_starts_on_monday(self):
        assert period_range("week", TODAY) == (date(2025, 3, 10), TODAY)

    def test_month(self):
        assert period_range("month", TODAY) == (date(2025, 3, 1), TODAY)

    def test_year(self):
        assert period_range("year", TODAY) == (date(2025, 1, 1), TODAY)

    def test_custom(self):
        assert period_range("custom", TODAY, date(2025, 1, 5), date(2025, 2, 1)) == (
            date(2025, 1, 5),
            date(2025, 2, 1),
        )

    def test_custom_reversed_dates_are_swapped(self):
        assert period_range("custom", TODAY, date(2025, 2, 1), date(2025, 1, 5)) == (
            date(2025, 1, 5),
            date(2025, 2, 1),
        )

    def test_custom_without_dates_is_whole_month(self):
        assert period_range("custom", TODAY) == (date(2025, 3, 1), date(2025, 3, 31))

    def test_custom_without_dates_in_december(self):
        assert period_range("custom", date(2024, 12, 31)) == (
            date(2024, 12, 1),
            date(2024, 12, 31),
        )

    def test_unknown_period(self):
        with pytest.raises(ValidationError):
            period_range("decade", TODAY)


class TestStatsService:
    """Tests for StatsService."""

    @pytest.fixture
    def rent(self, services, user):
        return services.categories.create(user, "expense", "Rent", color="#ef4444")

    @pytest.fixture
    def populated(self, services, user, ledger, rent):
        def add(type, amount, category, day, month=3):
            services.transactions.create(
                user,
                type,
                amount,
                category.id,
                ledger.cash.id,
                datetime(2025, month, day, 12, 0, tzinfo=timezone.utc),
            )

        add("income", "2000", ledger.salary, 1)
        add("expense", "300", rent, 2)
        add("expense", "50.50", ledger.groceries, 2)
        add("expense", "49.50", ledger.groceries, 11)
        add("expense", "999", ledger.groceries, 28, month=2)
        add("expense", "1", ledger.groceries, 13)  # after "today"

    def test_summary_month_totals(self, services, user, populated):
        summary = services.stats.summary(user, "month", today=TODAY)

        assert summary.start == date(2025, 3, 1)
        assert summary.end == TODAY
        assert summary.total_income == Decimal("2000.00")
        assert summary.total_expense == Decimal("400.00")
        assert summary.net == Decimal("1600.00")

    def test_summary_expense_by_category(self, services, user, populated, rent):
        summary = services.stats.summary(user, "month", today=TODAY)

        by_name = [(c.name, c.amount, c.percent) for c in summary.expense_by_category]

        assert by_name == [
            ("Rent", Decimal("300.00"), Decimal("75.0")),
            ("Groceries", Decimal("100.00"), Decimal("25.0")),
        ]
        assert summary.expense_by_category[0].color == "bg-red-500"

    def test_summary_by_day_covers_every_day(self, services, user, populated):
        summary = services.stats.summary(user, "month", today=TODAY)

        assert len(summary.by_day) == 12
        assert summary.by_day[0].day == date(2025, 3, 1)
        assert summary.by_day[0].income == Decimal("2000.00")
        assert summary.by_day[1].expense == Decimal("350.50")
        assert summary.by_day[2].expense == Decimal("0")

    def test_summary_custom_range(self, services, user, populated):
        summary = services.stats.summary(
            user, "custom", start=date(2025, 2, 1), end=date(2025, 2, 28), today=TODAY
        )

        assert summary.total_income == Decimal("0")
        assert summary.total_expense == Decimal("999.00")
        assert summary.expense_by_category[0].percent == Decimal("100.0")

    def test_summary_empty(self, services, user):
        summary = services.stats.summary(user, "week", today=TODAY)

        assert summary.total_income == Decimal("0")
        assert summary.total_expense == Decimal("0")
        assert summary.expense_by_category == []
        assert len(summary.by_day) == 3

    def test_summary_with_deleted_category(self, services, user, ledger):
        services.transactions.create(
            user, "expense", "10", ledger.groceries.id, ledger.cash.id, date(2025, 3, 3)
        )
        services.store.save_all(user, "categories", [])

        summary = services.stats.summary(user, "month", today=TODAY)

        assert summary.expense_by_category[0].name == UNCATEGORIZED

    def test_dashboard(self, services, user, ledger, populated):
        services.accounts.create(user, "Bank", "-100")

        dashboard = services.stats.dashboard(user, today=TODAY, recent=3)

        # Cash: 1000 + 2000 - 300 - 50.50 - 49.50 - 999 - 1
        assert dashboard.total_balance == Decimal("1500.00")
        assert [a.name for a in dashboard.accounts] == ["Cash", "Bank"]
        assert dashboard.month_income == Decimal("2000.00")
        assert dashboard.month_expense == Decimal("400.00")
        assert len(dashboard.recent) == 3
        assert dashboard.recent[0].transaction.date.day == 13
