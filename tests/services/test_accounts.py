from datetime import date
from decimal import Decimal

import pytest

from errors import AccountInUse, DuplicateAccountName, NotFoundError, ValidationError


class TestAccountService:
    """Tests for AccountService."""

    def test_create_account(self, services, user):
        """Test creating a new account."""
        account = services.accounts.create(user, "Cash", "1000")

        assert account.id.startswith("acc_")
        assert account.name == "Cash"
        assert account.initial_balance == Decimal("1000.00")
        assert account.balance == Decimal("1000.00")

    def test_create_default_initial_balance(self, services, user):
        account = services.accounts.create(user, "Wallet")

        assert account.balance == Decimal("0.00")

    def test_create_negative_initial_balance(self, services, user):
        """Credit accounts may start below zero."""
        account = services.accounts.create(user, "Card", "-250.50")

        assert account.balance == Decimal("-250.50")

    def test_create_strips_name(self, services, user):
        account = services.accounts.create(user, "  Bank  ", 0)

        assert account.name == "Bank"

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_create_empty_name_raises(self, services, user, name):
        with pytest.raises(ValidationError):
            services.accounts.create(user, name, 0)

    @pytest.mark.parametrize("balance", ["lots", "1e27"])
    def test_create_invalid_balance_raises(self, services, user, balance):
        with pytest.raises(ValidationError):
            services.accounts.create(user, "Cash", balance)

        assert services.accounts.find_all(user) == []

    def test_create_duplicate_name_case_insensitive(self, services, user):
        services.accounts.create(user, "Cash", 0)

        with pytest.raises(DuplicateAccountName):
            services.accounts.create(user, "cASH", 0)

    def test_same_name_allowed_for_other_user(self, services, user):
        services.accounts.create(user, "Cash", 0)

        other = services.accounts.create("user_2", "Cash", 0)

        assert other.name == "Cash"
        assert len(services.accounts.find_all(user)) == 1

    def test_find_account_by_id(self, services, user):
        created = services.accounts.create(user, "Cash", 10)

        found = services.accounts.find(user, created.id)

        assert found == created

    def test_find_account_not_found(self, services, user):
        assert services.accounts.find(user, "acc_missing") is None

    def test_find_account_of_other_user(self, services, user):
        created = services.accounts.create(user, "Cash", 10)

        assert services.accounts.find("user_2", created.id) is None

    def test_find_by_name_case_insensitive(self, services, user):
        services.accounts.create(user, "Savings", 10)

        found = services.accounts.find_by_name(user, "savings")

        assert found is not None
        assert found.name == "Savings"

    def test_find_all_in_creation_order(self, services, user):
        services.accounts.create(user, "Zebra", 0)
        services.accounts.create(user, "Alpha", 0)

        names = [a.name for a in services.accounts.find_all(user)]

        assert names == ["Zebra", "Alpha"]

    def test_find_all_empty(self, services, user):
        assert services.accounts.find_all(user) == []

    def test_rename(self, services, user):
        account = services.accounts.create(user, "Cash", 0)

        updated = services.accounts.update(user, account.id, name="Wallet")

        assert updated.name == "Wallet"
        assert services.accounts.find(user, account.id).name == "Wallet"

    def test_rename_to_own_name_in_other_case(self, services, user):
        account = services.accounts.create(user, "Cash", 0)

        updated = services.accounts.update(user, account.id, name="CASH")

        assert updated.name == "CASH"

    def test_rename_to_taken_name_raises(self, services, user):
        services.accounts.create(user, "Cash", 0)
        bank = services.accounts.create(user, "Bank", 0)

        with pytest.raises(DuplicateAccountName):
            services.accounts.update(user, bank.id, name="cash")

    def test_update_missing_account_raises(self, services, user):
        with pytest.raises(NotFoundError):
            services.accounts.update(user, "acc_missing", name="X")

    def test_balance_adjustment_keeps_invariant(self, services, user, ledger):
        services.transactions.create(
            user, "expense", "100", ledger.groceries.id, ledger.cash.id, date(2025, 1, 5)
        )

        updated = services.accounts.update(user, ledger.cash.id, balance_adjustment="-50")

        assert updated.balance == Decimal("850.00")
        assert updated.initial_balance == Decimal("950.00")
        assert services.accounts.reconcile(user) == []

    def test_initial_balance_change_recomputes(self, services, user, ledger):
        services.transactions.create(
            user, "income", "300", ledger.salary.id, ledger.cash.id, date(2025, 1, 5)
        )
        services.transactions.create(
            user, "expense", "20", ledger.groceries.id, ledger.cash.id, date(2025, 1, 6)
        )

        updated = services.accounts.update(user, ledger.cash.id, initial_balance="0")

        assert updated.initial_balance == Decimal("0.00")
        assert updated.balance == Decimal("280.00")

    def test_delete_account(self, services, user):
        account = services.accounts.create(user, "Temp", 0)

        services.accounts.delete(user, account.id)

        assert services.accounts.find(user, account.id) is None

    def test_delete_missing_account_raises(self, services, user):
        with pytest.raises(NotFoundError):
            services.accounts.delete(user, "acc_missing")

    def test_delete_referenced_account_raises(self, services, user, ledger):
        transaction = services.transactions.create(
            user, "expense", "5", ledger.groceries.id, ledger.cash.id, date(2025, 1, 5)
        )

        with pytest.raises(AccountInUse):
            services.accounts.delete(user, ledger.cash.id)
        assert services.accounts.find(user, ledger.cash.id) is not None

        services.transactions.delete(user, transaction.id)
        services.accounts.delete(user, ledger.cash.id)

        assert services.accounts.find(user, ledger.cash.id) is None

    def test_delete_does_not_affect_other_accounts(self, services, user):
        keep = services.accounts.create(user, "Keep", 1)
        drop = services.accounts.create(user, "Drop", 2)

        services.accounts.delete(user, drop.id)

        assert services.accounts.find_all(user) == [keep]

    def test_reconcile_fixes_drift(self, services, user, ledger):
        services.transactions.create(
            user, "expense", "200", ledger.groceries.id, ledger.cash.id, date(2025, 1, 5)
        )
        stored = services.store.load_all(user, "accounts")
        stored[0]["balance"] = "123.45"
        services.store.save_all(user, "accounts", stored)

        drifts = services.accounts.reconcile(user)

        assert len(drifts) == 1
        assert drifts[0].stored == Decimal("123.45")
        assert drifts[0].expected == Decimal("800.00")
        assert services.accounts.find(user, ledger.cash.id).balance == Decimal("800.00")
        assert services.accounts.reconcile(user) == []
