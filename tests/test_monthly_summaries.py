"""Mini README: Tests for monthly summaries, category rankings and trends.

The store clock is pinned to January 2024 so the trend window crosses a
year boundary.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from spendlog.ledger import ExpenseCategory, LedgerStore

NOW = datetime(2024, 1, 15, 9, 30)


@pytest.fixture()
def store() -> LedgerStore:
    return LedgerStore(seed_demo=False, clock=lambda: NOW)


@pytest.fixture()
def alice(store: LedgerStore) -> int:
    """Alice spends 30 on food and 20 on transport this month, 50 on food last month."""

    user = store.create_user("alice", "secret")
    store.create_expense(
        user.user_id, amount=Decimal("30"), category=ExpenseCategory.FOOD, occurred_on=date(2024, 1, 3)
    )
    store.create_expense(
        user.user_id, amount=Decimal("20"), category=ExpenseCategory.TRANSPORT, occurred_on=date(2024, 1, 10)
    )
    store.create_expense(
        user.user_id, amount=Decimal("50"), category=ExpenseCategory.FOOD, occurred_on=date(2023, 12, 20)
    )
    store.create_or_update_budget(user.user_id, amount=Decimal("100"), month=1, year=2024)
    return user.user_id


def test_monthly_summary_for_example_scenario(store: LedgerStore, alice: int) -> None:
    summary = store.get_monthly_expense_summary(alice, 1, 2024)

    assert summary.total_spent == Decimal("50")
    assert summary.budget == Decimal("100")
    assert summary.budget_remaining == Decimal("50")
    assert summary.budget_percentage == 50
    assert [(s.category, s.total, s.percentage) for s in summary.categories] == [
        (ExpenseCategory.FOOD, Decimal("30"), 60),
        (ExpenseCategory.TRANSPORT, Decimal("20"), 40),
    ]


def test_summary_without_budget_reports_zero_percentage(store: LedgerStore, alice: int) -> None:
    """December has spend but no budget."""

    summary = store.get_monthly_expense_summary(alice, 12, 2023)

    assert summary.total_spent == Decimal("50")
    assert summary.budget == 0
    assert summary.budget_remaining == 0
    assert summary.budget_percentage == 0


def test_overspending_clamps_remaining_and_percentage(store: LedgerStore) -> None:
    user = store.create_user("spender", "secret")
    store.create_or_update_budget(user.user_id, amount=Decimal("100"), month=1, year=2024)
    for amount in ("100", "50"):
        store.create_expense(
            user.user_id, amount=Decimal(amount), category=ExpenseCategory.HOUSING, occurred_on=date(2024, 1, 2)
        )

    summary = store.get_monthly_expense_summary(user.user_id, 1, 2024)
    assert summary.total_spent == Decimal("150")
    assert summary.budget_remaining == 0
    assert summary.budget_percentage == 100


def test_summary_for_unknown_user_is_empty(store: LedgerStore) -> None:
    summary = store.get_monthly_expense_summary(404, 1, 2024)

    assert summary.total_spent == 0
    assert summary.budget_percentage == 0
    assert summary.categories == []


def test_budget_percentage_rounds_half_up(store: LedgerStore) -> None:
    user = store.create_user("rounder", "secret")
    store.create_or_update_budget(user.user_id, amount=Decimal("200"), month=1, year=2024)
    store.create_expense(
        user.user_id, amount=Decimal("1"), category=ExpenseCategory.OTHER, occurred_on=date(2024, 1, 1)
    )

    # 1 / 200 = 0.5%
    assert store.get_monthly_expense_summary(user.user_id, 1, 2024).budget_percentage == 1


def test_category_breakdown_is_ranked_and_sums_to_about_100(store: LedgerStore) -> None:
    user = store.create_user("ranker", "secret")
    for amount, category in (
        ("10", ExpenseCategory.FOOD),
        ("45", ExpenseCategory.HOUSING),
        ("12.5", ExpenseCategory.ENTERTAINMENT),
        ("5", ExpenseCategory.FOOD),
        ("27.5", ExpenseCategory.UTILITIES),
    ):
        store.create_expense(
            user.user_id, amount=Decimal(amount), category=category, occurred_on=date(2024, 1, 8)
        )

    breakdown = store.get_category_expenses(user.user_id, 1, 2024)

    totals = [summary.total for summary in breakdown]
    assert totals == sorted(totals, reverse=True)
    assert breakdown[0].category is ExpenseCategory.HOUSING
    assert {s.category: s.total for s in breakdown}[ExpenseCategory.FOOD] == Decimal("15")
    assert abs(sum(s.percentage for s in breakdown) - 100) <= len(breakdown)


def test_category_breakdown_for_empty_month(store: LedgerStore, alice: int) -> None:
    assert store.get_category_expenses(alice, 6, 2023) == []


def test_food_trend_walks_back_across_year_boundary(store: LedgerStore, alice: int) -> None:
    points = store.get_monthly_totals_by_category(alice, ExpenseCategory.FOOD, 3)

    assert [(p.month, p.year, p.total) for p in points] == [
        (11, 2023, Decimal("0")),
        (12, 2023, Decimal("50")),
        (1, 2024, Decimal("30")),
    ]


def test_trend_zero_fills_long_windows(store: LedgerStore, alice: int) -> None:
    points = store.get_monthly_totals_by_category(alice, ExpenseCategory.TRANSPORT, 25)

    assert len(points) == 25
    assert (points[0].month, points[0].year) == (1, 2022)
    assert points[-1].total == Decimal("20")
    assert sum(p.total for p in points) == Decimal("20")


def test_trend_with_zero_months_is_empty(store: LedgerStore, alice: int) -> None:
    assert store.get_monthly_totals_by_category(alice, ExpenseCategory.FOOD, 0) == []


def test_summary_as_dict_is_json_friendly(store: LedgerStore, alice: int) -> None:
    payload = store.get_monthly_expense_summary(alice, 1, 2024).as_dict()

    assert payload["total_spent"] == pytest.approx(50.0)
    assert payload["categories"][0] == {"category": "food", "total": 30.0, "percentage": 60}


def test_tiny_budget_reports_full_usage_instead_of_failing(store: LedgerStore) -> None:
    """A spend many orders of magnitude above the budget still caps at 100%."""

    user = store.create_user("tiny", "secret")
    store.create_or_update_budget(user.user_id, amount=Decimal("1e-26"), month=1, year=2024)
    store.create_expense(
        user.user_id, amount=Decimal("5"), category=ExpenseCategory.FOOD, occurred_on=date(2024, 1, 4)
    )

    summary = store.get_monthly_expense_summary(user.user_id, 1, 2024)
    assert summary.budget_percentage == 100
    assert summary.budget_remaining == 0


def test_spend_equal_to_budget_is_exactly_full(store: LedgerStore) -> None:
    user = store.create_user("exact", "secret")
    store.create_or_update_budget(user.user_id, amount=Decimal("80"), month=1, year=2024)
    store.create_expense(
        user.user_id, amount=Decimal("80"), category=ExpenseCategory.FOOD, occurred_on=date(2024, 1, 4)
    )

    summary = store.get_monthly_expense_summary(user.user_id, 1, 2024)
    assert summary.budget_percentage == 100
    assert summary.budget_remaining == 0
