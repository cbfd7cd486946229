"""Mini README: Records held by the ledger store and the summaries it derives.

Structure:
    * ExpenseCategory - closed enumeration shared with callers.
    * User, Expense, Budget - stored records.
    * ExpenseSummary, MonthlyExpenseSummary, MonthlyCategoryTotal - derived,
      never stored.
    * parse_amount / parse_date - coerce raw request values for callers.

Amounts are ``Decimal`` so currency sums stay exact. ``as_dict`` methods
convert to JSON friendly values for the web interface.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Dict, List

MAX_AMOUNT = Decimal("1000000000")
CENT = Decimal("0.01")


class ExpenseCategory(str, Enum):
    """Enumerate the categories an expense can be filed under."""

    FOOD = "food"
    TRANSPORT = "transport"
    HOUSING = "housing"
    UTILITIES = "utilities"
    ENTERTAINMENT = "entertainment"
    OTHER = "other"

    @classmethod
    def from_str(cls, value: str) -> "ExpenseCategory":
        """Coerce arbitrary casing into a known category."""

        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unsupported expense category: {value}") from error


@dataclass(slots=True, frozen=True)
class User:
    user_id: int
    username: str
    password: str

    def as_dict(self) -> Dict[str, object]:
        """Export the public fields; the password never leaves the store."""

        return {"user_id": self.user_id, "username": self.username}


@dataclass(slots=True, frozen=True)
class Expense:
    """A single spend recorded against a user."""

    expense_id: int
    user_id: int
    amount: Decimal
    category: ExpenseCategory
    occurred_on: date
    description: str
    created_at: datetime

    def as_dict(self) -> Dict[str, object]:
        return {
            "expense_id": self.expense_id,
            "user_id": self.user_id,
            "amount": float(self.amount),
            "category": self.category.value,
            "occurred_on": self.occurred_on.isoformat(),
            "description": self.description,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(slots=True)
class Budget:
    """Spending limit for one user in one calendar month."""

    budget_id: int
    user_id: int
    amount: Decimal
    month: int
    year: int

    def as_dict(self) -> Dict[str, object]:
        return {
            "budget_id": self.budget_id,
            "user_id": self.user_id,
            "amount": float(self.amount),
            "month": self.month,
            "year": self.year,
        }


@dataclass(slots=True)
class ExpenseSummary:
    """Total spend for one category and its share of the period."""

    category: ExpenseCategory
    total: Decimal
    percentage: int

    def as_dict(self) -> Dict[str, object]:
        return {
            "category": self.category.value,
            "total": float(self.total),
            "percentage": self.percentage,
        }


@dataclass(slots=True)
class MonthlyExpenseSummary:
    """Spend against budget for one period, with the category breakdown."""

    total_spent: Decimal
    budget: Decimal
    budget_remaining: Decimal
    budget_percentage: int
    categories: List[ExpenseSummary] = field(default_factory=list)

    def as_dict(self) -> Dict[str, object]:
        return {
            "total_spent": float(self.total_spent),
            "budget": float(self.budget),
            "budget_remaining": float(self.budget_remaining),
            "budget_percentage": self.budget_percentage,
            "categories": [summary.as_dict() for summary in self.categories],
        }


@dataclass(slots=True)
class MonthlyCategoryTotal:
    """One point of a category trend line."""

    month: int
    year: int
    total: Decimal

    def as_dict(self) -> Dict[str, object]:
        return {"month": self.month, "year": self.year, "total": float(self.total)}


def parse_amount(value: object) -> Decimal:
    """Parse a positive currency amount from strings or numbers."""

    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as error:
        raise ValueError(f"Invalid amount: {value!r}") from error
    if not amount.is_finite() or amount <= 0:
        raise ValueError(f"Amount must be a positive number, got {value!r}")
    if amount > MAX_AMOUNT:
        raise ValueError(f"Amount must not exceed {MAX_AMOUNT}, got {value!r}")
    amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    if amount <= 0:
        raise ValueError(f"Amount must be at least {CENT}, got {value!r}")
    return amount


def parse_date(value: object) -> date:
    """Parse ISO formatted strings or date objects safely."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip())
    raise ValueError("Dates must be provided as ISO strings or date/datetime instances.")
