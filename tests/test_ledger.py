"""
Tests for the expense ledger.

Most tests run two users against one store to check that nothing leaks
between them.
"""

from datetime import date
from decimal import Decimal

import pytest

from expense_tracker.ledger import ExpenseLedger
from expense_tracker.models import Expense, PaymentMethod
from expense_tracker.services.storage import (
    InMemoryRecordStore,
    JsonFileRecordStore,
    StorageWriteError,
)


class FailingExpenseStore(InMemoryRecordStore):
    """Accepts reads, rejects every expense and category write."""

    def save_expense(self, expense):
        raise StorageWriteError("disk full")

    def update_expense(self, expense):
        raise StorageWriteError("disk full")

    def delete_expense(self, expense_id, username):
        raise StorageWriteError("disk full")

    def save_category(self, category):
        raise StorageWriteError("disk full")


class TestAddExpense:
    """Tests for add_expense() and id assignment."""

    def test_first_id_is_one(self, alice_ledger):
        assert alice_ledger.add_expense("Coffee", 4.50, 1, date(2024, 3, 1)) is True
        assert [e.id for e in alice_ledger.get_expenses()] == [1]

    def test_ids_increase_from_max(self, alice_ledger):
        for title in ("a", "b", "c"):
            alice_ledger.add_expense(title, 1, 1, date(2024, 3, 1))
        assert [e.id for e in alice_ledger.get_expenses()] == [1, 2, 3]

    def test_id_follows_max_not_count(self, alice_ledger):
        """Deleting a middle expense does not cause id reuse."""
        for title in ("a", "b", "c"):
            alice_ledger.add_expense(title, 1, 1, date(2024, 3, 1))
        alice_ledger.delete_expense(2)
        alice_ledger.add_expense("d", 1, 1, date(2024, 3, 1))
        assert [e.id for e in alice_ledger.get_expenses()] == [1, 3, 4]

    def test_ids_are_per_user(self, alice_ledger, bob_ledger):
        """Two users can both own an expense with id 1."""
        alice_ledger.add_expense("Coffee", 4.50, 1, date(2024, 3, 1))
        bob_ledger.add_expense("Tea", 3.00, 1, date(2024, 3, 1))

        alice_expense = alice_ledger.get_expenses()[0]
        bob_expense = bob_ledger.get_expenses()[0]
        assert alice_expense.id == bob_expense.id == 1
        assert alice_expense.key != bob_expense.key

    def test_unknown_category_rejected(self, alice_ledger):
        assert alice_ledger.add_expense("Coffee", 4.50, 99, date(2024, 3, 1)) is False
        assert alice_ledger.get_expenses() == []

    def test_fields_are_stored(self, alice_ledger):
        alice_ledger.add_expense(
            "Train",
            "12.40",
            2,
            date(2024, 3, 2),
            description="Return ticket",
            payment_method=PaymentMethod.DEBIT_CARD,
            is_recurring=True,
        )
        expense = alice_ledger.get_expense(1)
        assert expense.username == "alice"
        assert expense.amount == Decimal("12.40")
        assert expense.description == "Return ticket"
        assert expense.payment_method == PaymentMethod.DEBIT_CARD
        assert expense.is_recurring is True

    def test_amount_positivity_is_not_enforced(self, alice_ledger):
        """Callers validate amounts; the ledger stores what it is given."""
        assert alice_ledger.add_expense("Refund", -5, 1, date(2024, 3, 1)) is True
        assert alice_ledger.get_total_expenses() == Decimal("-5")

    def test_write_failure_returns_false(self, fixed_today):
        ledger = ExpenseLedger(FailingExpenseStore(), "alice", today=fixed_today)
        assert ledger.add_expense("Coffee", 4.50, 1, date(2024, 3, 1)) is False


class TestUpdateAndDelete:
    """Tests for update_expense() and delete_expense()."""

    def test_update_is_persisted(self, alice_ledger):
        """Regression: the update must be visible through get_expenses()."""
        alice_ledger.add_expense("Coffee", 4.50, 1, date(2024, 3, 1))

        assert alice_ledger.update_expense(
            1, "Large coffee", 5.25, 3, date(2024, 3, 2), "with oat milk"
        ) is True

        expense = alice_ledger.get_expenses()[0]
        assert expense.title == "Large coffee"
        assert expense.amount == Decimal("5.25")
        assert expense.category_id == 3
        assert expense.expense_date == date(2024, 3, 2)
        assert expense.description == "with oat milk"

    def test_update_survives_reload(self, alice_ledger, json_store):
        alice_ledger.add_expense("Coffee", 4.50, 1, date(2024, 3, 1))
        alice_ledger.update_expense(1, "Tea", 3, 1, date(2024, 3, 1))

        reloaded = JsonFileRecordStore(json_store.data_dir)
        assert reloaded.get_user_expenses("alice")[0].title == "Tea"

    def test_update_keeps_untouched_fields(self, alice_ledger):
        alice_ledger.add_expense(
            "Gym", 30, 4, date(2024, 3, 1),
            payment_method=PaymentMethod.CREDIT_CARD, is_recurring=True,
        )
        created_at = alice_ledger.get_expense(1).created_at

        alice_ledger.update_expense(1, "Gym", 35, 4, date(2024, 3, 1))

        expense = alice_ledger.get_expense(1)
        assert expense.payment_method == PaymentMethod.CREDIT_CARD
        assert expense.is_recurring is True
        assert expense.created_at == created_at
        assert expense.id == 1

    def test_update_unknown_expense(self, alice_ledger):
        assert alice_ledger.update_expense(7, "x", 1, 1, date(2024, 3, 1)) is False

    def test_update_unknown_category(self, alice_ledger):
        alice_ledger.add_expense("Coffee", 4.50, 1, date(2024, 3, 1))
        assert alice_ledger.update_expense(1, "Coffee", 4.50, 42, date(2024, 3, 1)) is False
        assert alice_ledger.get_expense(1).category_id == 1

    def test_update_does_not_touch_other_users(self, alice_ledger, bob_ledger):
        alice_ledger.add_expense("Coffee", 4.50, 1, date(2024, 3, 1))
        bob_ledger.add_expense("Tea", 3.00, 1, date(2024, 3, 1))

        bob_ledger.update_expense(1, "Green tea", 3.50, 1, date(2024, 3, 1))

        assert alice_ledger.get_expense(1).title == "Coffee"
        assert bob_ledger.get_expense(1).title == "Green tea"

    def test_delete_is_scoped(self, alice_ledger, bob_ledger):
        alice_ledger.add_expense("Coffee", 4.50, 1, date(2024, 3, 1))
        bob_ledger.add_expense("Tea", 3.00, 1, date(2024, 3, 1))

        assert alice_ledger.delete_expense(1) is True
        assert alice_ledger.delete_expense(1) is False
        assert len(bob_ledger.get_expenses()) == 1

    def test_write_failures_return_false(self, fixed_today):
        store = FailingExpenseStore()
        store.initialize()
        InMemoryRecordStore.save_expense(store, _expense())
        ledger = ExpenseLedger(store, "alice", today=fixed_today)

        assert ledger.update_expense(1, "x", 1, 1, date(2024, 3, 1)) is False
        assert ledger.delete_expense(1) is False
        assert ledger.set_category_budget_limit(1, 100) is False


class TestQueries:
    """Tests for the filtered reads."""

    @pytest.fixture
    def populated(self, alice_ledger, bob_ledger):
        alice_ledger.add_expense("Coffee", "4.50", 1, date(2024, 3, 1))
        alice_ledger.add_expense("Bus", "2.00", 2, date(2024, 3, 1))
        alice_ledger.add_expense("Dinner", "30.00", 1, date(2024, 3, 10))
        alice_ledger.add_expense("Books", "25.00", 7, date(2024, 2, 28))
        alice_ledger.add_expense("Flight", "200.00", 2, date(2023, 3, 5))
        bob_ledger.add_expense("Rent", "900.00", 5, date(2024, 3, 1))
        return alice_ledger

    def test_get_expenses_by_category(self, populated):
        titles = [e.title for e in populated.get_expenses_by_category(1)]
        assert titles == ["Coffee", "Dinner"]
        assert populated.get_expenses_by_category(5) == []

    def test_get_expenses_by_month_matches_year_and_month(self, populated):
        titles = [e.title for e in populated.get_expenses_by_month(2024, 3)]
        assert titles == ["Coffee", "Bus", "Dinner"]
        assert [e.title for e in populated.get_expenses_by_month(2023, 3)] == ["Flight"]

    def test_get_all_categories(self, populated):
        assert len(populated.get_all_categories()) == 8


class TestAggregations:
    """Tests for totals and groupings."""

    def test_scenario_coffee_and_bus(self, alice_ledger):
        alice_ledger.add_expense("Coffee", 4.50, 1, date(2024, 3, 1))
        alice_ledger.add_expense("Bus", 2.00, 2, date(2024, 3, 1))

        assert alice_ledger.get_total_expenses() == Decimal("6.50")
        assert alice_ledger.get_monthly_total(2024, 3) == Decimal("6.50")
        assert alice_ledger.get_daily_expenses(2024, 3) == {"2024-03-01": Decimal("6.50")}

    def test_totals_are_isolated_per_user(self, alice_ledger, bob_ledger):
        alice_ledger.add_expense("Coffee", "4.50", 1, date(2024, 3, 1))
        alice_ledger.add_expense("Lunch", "11.25", 1, date(2024, 3, 2))
        bob_ledger.add_expense("Coffee", "4.50", 1, date(2024, 3, 1))
        bob_ledger.add_expense("Laptop", "999.99", 3, date(2024, 3, 2))

        assert alice_ledger.get_total_expenses() == Decimal("15.75")
        assert bob_ledger.get_total_expenses() == Decimal("1004.49")
        assert alice_ledger.get_monthly_total(2024, 3) == Decimal("15.75")

    def test_empty_ledger_totals(self, alice_ledger):
        assert alice_ledger.get_total_expenses() == Decimal("0")
        assert alice_ledger.get_monthly_total(2024, 3) == Decimal("0")
        assert alice_ledger.get_category_wise_expenses() == {}
        assert alice_ledger.get_daily_expenses(2024, 3) == {}

    def test_category_wise_sums_to_total(self, alice_ledger, bob_ledger, json_store):
        alice_ledger.add_expense("Coffee", "4.50", 1, date(2024, 3, 1))
        alice_ledger.add_expense("Dinner", "30.00", 1, date(2024, 3, 10))
        alice_ledger.add_expense("Bus", "2.00", 2, date(2024, 3, 1))
        bob_ledger.add_expense("Rent", "900.00", 5, date(2024, 3, 1))

        totals = alice_ledger.get_category_wise_expenses()
        by_id = {category.id: amount for category, amount in totals.items()}

        assert by_id == {1: Decimal("34.50"), 2: Decimal("2.00")}
        assert sum(totals.values()) == alice_ledger.get_total_expenses()
        assert json_store.get_category_by_id(1) in totals

    def test_category_wise_skips_missing_categories(self, fixed_today):
        store = InMemoryRecordStore()
        store.initialize()
        ledger = ExpenseLedger(store, "alice", today=fixed_today)
        ledger.add_expense("Coffee", "4.50", 1, date(2024, 3, 1))
        InMemoryRecordStore.save_expense(store, _expense(expense_id=2, category_id=77))

        totals = ledger.get_category_wise_expenses()
        assert [c.id for c in totals] == [1]
        assert ledger.get_total_expenses() == Decimal("14.50")

    def test_daily_expenses_sorted_and_complete(self, alice_ledger):
        alice_ledger.add_expense("c", "3", 1, date(2024, 3, 20))
        alice_ledger.add_expense("a", "1", 1, date(2024, 3, 2))
        alice_ledger.add_expense("b", "2", 1, date(2024, 3, 11))
        alice_ledger.add_expense("a2", "5", 1, date(2024, 3, 2))
        alice_ledger.add_expense("other month", "9", 1, date(2024, 4, 2))

        daily = alice_ledger.get_daily_expenses(2024, 3)
        keys = list(daily)
        assert keys == sorted(keys)
        assert keys == ["2024-03-02", "2024-03-11", "2024-03-20"]
        assert daily["2024-03-02"] == Decimal("6")

    def test_recent_expenses_newest_first(self, alice_ledger):
        alice_ledger.add_expense("old", "1", 1, date(2024, 1, 5))
        alice_ledger.add_expense("new", "1", 1, date(2024, 3, 5))
        alice_ledger.add_expense("mid", "1", 1, date(2024, 2, 5))
        alice_ledger.add_expense("new too", "1", 1, date(2024, 3, 5))

        recent = alice_ledger.get_recent_expenses(3)
        assert [e.title for e in recent] == ["new too", "new", "mid"]

        all_ids = {e.id for e in alice_ledger.get_expenses()}
        assert {e.id for e in recent} <= all_ids

    def test_recent_expenses_limits(self, alice_ledger):
        alice_ledger.add_expense("only", "1", 1, date(2024, 1, 5))
        assert len(alice_ledger.get_recent_expenses(10)) == 1
        assert alice_ledger.get_recent_expenses(0) == []
        assert alice_ledger.get_recent_expenses(-1) == []


class TestBudget:
    """Tests for budget utilization and category budget limits."""

    def test_zero_budget_is_zero_utilization(self, alice_ledger):
        alice_ledger.add_expense("Coffee", "25.00", 1, date(2024, 3, 1))
        assert alice_ledger.get_budget_utilization(0) == 0
        assert alice_ledger.get_budget_utilization(-10) == 0

    def test_utilization_uses_current_month(self, alice_ledger):
        """The fixed clock says March 2024; other months do not count."""
        alice_ledger.add_expense("Coffee", "25.00", 1, date(2024, 3, 1))
        alice_ledger.add_expense("Last month", "70.00", 1, date(2024, 2, 1))

        assert alice_ledger.get_budget_utilization(100) == pytest.approx(25.0)

    def test_utilization_follows_the_clock(self, json_store):
        ledger = ExpenseLedger(json_store, "alice", today=lambda: date(2024, 2, 10))
        ledger.add_expense("Last month", "70.00", 1, date(2024, 2, 1))
        assert ledger.get_budget_utilization(200) == pytest.approx(35.0)

    def test_utilization_can_exceed_100(self, alice_ledger):
        alice_ledger.add_expense("TV", "150.00", 3, date(2024, 3, 3))
        assert alice_ledger.get_budget_utilization(100) == pytest.approx(150.0)

    def test_set_category_budget_limit(self, alice_ledger, bob_ledger):
        assert alice_ledger.set_category_budget_limit(1, "150.00") is True
        food = next(c for c in bob_ledger.get_all_categories() if c.id == 1)
        assert food.budget_limit == Decimal("150.00")

    def test_set_category_budget_limit_rejects_bad_input(self, alice_ledger):
        assert alice_ledger.set_category_budget_limit(99, 10) is False
        assert alice_ledger.set_category_budget_limit(1, -1) is False


def _expense(expense_id=1, category_id=1, amount="10.00"):
    return Expense(
        id=expense_id,
        username="alice",
        title="Seeded",
        amount=Decimal(amount),
        category_id=category_id,
        expense_date=date(2024, 3, 1),
    )


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
