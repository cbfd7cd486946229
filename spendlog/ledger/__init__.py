"""Mini README: Expense ledger package.

``store`` holds the in-memory ``LedgerStore``; ``models`` defines the
records it keeps, the summaries it derives and the category enumeration
shared with callers.
"""

from .models import (
    Budget,
    Expense,
    ExpenseCategory,
    ExpenseSummary,
    MonthlyCategoryTotal,
    MonthlyExpenseSummary,
    User,
    parse_amount,
    parse_date,
)
from .store import DEMO_BUDGET_AMOUNT, DEMO_USERNAME, LedgerStore

__all__ = [
    "Budget",
    "DEMO_BUDGET_AMOUNT",
    "DEMO_USERNAME",
    "Expense",
    "ExpenseCategory",
    "ExpenseSummary",
    "LedgerStore",
    "MonthlyCategoryTotal",
    "MonthlyExpenseSummary",
    "User",
    "parse_amount",
    "parse_date",
]
