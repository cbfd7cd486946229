"""Mini README: In-memory ledger of users, expenses and monthly budgets.

Structure:
    * LedgerStore - CRUD over the three collections plus monthly summaries.

Lookups return ``None`` (or an empty list) for unknown ids, users and
periods instead of raising, and ``delete_expense`` reports its outcome as
a bool. Identifiers come from per-collection counters that never reuse a
value. Budgets are keyed by ``(user_id, month, year)`` so a second write
for the same period updates the existing record in place.

The store owns the session store handed to the web interface and, unless
told otherwise, seeds a ``demo`` user with a budget for the current month.
"""

from __future__ import annotations

import threading
from collections import defaultdict
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Dict, List, Optional, Tuple

from ..logging_utils import get_logger
from ..sessions import MemorySessionStore
from .models import (
    Budget,
    Expense,
    ExpenseCategory,
    ExpenseSummary,
    MonthlyCategoryTotal,
    MonthlyExpenseSummary,
    User,
)

LOGGER = get_logger(__name__)

DEMO_USERNAME = "demo"
DEMO_BUDGET_AMOUNT = Decimal("2000")
ZERO = Decimal("0")

BudgetKey = Tuple[int, int, int]


def _round_percentage(value: Decimal) -> int:
    """Round half up to the nearest whole percent."""

    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _months_back(month: int, year: int, offset: int) -> Tuple[int, int]:
    """Return the (month, year) that lies ``offset`` months before the given one."""

    index = year * 12 + (month - 1) - offset
    return index % 12 + 1, index // 12


class LedgerStore:
    """Hold expense tracking data for the lifetime of the process."""

    def __init__(
        self,
        *,
        seed_demo: bool = True,
        demo_password: str = "password",
        clock: Callable[[], datetime] = datetime.now,
        session_ttl: timedelta = timedelta(days=1),
        session_check_period: timedelta = timedelta(days=1),
    ) -> None:
        self._clock = clock
        self._lock = threading.RLock()
        self._users: Dict[int, User] = {}
        self._expenses: Dict[int, Expense] = {}
        self._budgets: Dict[BudgetKey, Budget] = {}
        self._next_user_id = 1
        self._next_expense_id = 1
        self._next_budget_id = 1
        self.session_store = MemorySessionStore(
            ttl=session_ttl,
            check_period=session_check_period,
            clock=clock,
        )
        if seed_demo:
            self._seed_demo_data(demo_password)
        LOGGER.debug(
            "Ledger store initialised users=%s budgets=%s",
            len(self._users),
            len(self._budgets),
        )

    def _seed_demo_data(self, demo_password: str) -> None:
        """Create the demo account and a budget for the current month."""

        today = self._clock().date()
        demo_user = self.create_user(DEMO_USERNAME, demo_password)
        self.create_or_update_budget(
            demo_user.user_id,
            amount=DEMO_BUDGET_AMOUNT,
            month=today.month,
            year=today.year,
        )

    def today(self) -> date:
        """Current calendar date according to the store clock."""

        return self._clock().date()

    # Users

    def get_user(self, user_id: int) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        """Return the first user whose username matches exactly."""

        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return user
        return None

    def create_user(self, username: str, password: str) -> User:
        """Register a user; username uniqueness is the caller's concern."""

        with self._lock:
            user = User(user_id=self._next_user_id, username=username, password=password)
            self._next_user_id += 1
            self._users[user.user_id] = user
        LOGGER.info("Created user %s (%s)", user.user_id, username)
        return user

    # Expenses

    def get_expense(self, expense_id: int) -> Optional[Expense]:
        with self._lock:
            return self._expenses.get(expense_id)

    def list_expenses_by_user(self, user_id: int, limit: Optional[int] = None) -> List[Expense]:
        """Return a user's expenses, most recent date first."""

        with self._lock:
            expenses = [expense for expense in self._expenses.values() if expense.user_id == user_id]
        expenses.sort(key=lambda expense: expense.occurred_on, reverse=True)
        if limit is not None:
            expenses = expenses[:limit]
        return expenses

    def list_expenses_by_month(self, user_id: int, month: int, year: int) -> List[Expense]:
        """Return a user's expenses dated within one calendar month."""

        return [
            expense
            for expense in self.list_expenses_by_user(user_id)
            if expense.occurred_on.month == month and expense.occurred_on.year == year
        ]

    def create_expense(
        self,
        user_id: int,
        *,
        amount: Decimal,
        category: ExpenseCategory,
        occurred_on: date,
        description: str = "",
    ) -> Expense:
        """Record an expense and stamp its creation time."""

        with self._lock:
            expense = Expense(
                expense_id=self._next_expense_id,
                user_id=user_id,
                amount=Decimal(str(amount)),
                category=category,
                occurred_on=occurred_on,
                description=description,
                created_at=self._clock(),
            )
            self._next_expense_id += 1
            self._expenses[expense.expense_id] = expense
        LOGGER.info(
            "Created expense %s for user %s: %s %s on %s",
            expense.expense_id,
            user_id,
            expense.amount,
            category.value,
            occurred_on.isoformat(),
        )
        return expense

    def delete_expense(self, expense_id: int) -> bool:
        """Remove an expense; ``False`` when nothing was stored under the id."""

        with self._lock:
            removed = self._expenses.pop(expense_id, None) is not None
        if removed:
            LOGGER.info("Deleted expense %s", expense_id)
        else:
            LOGGER.debug("Delete requested for unknown expense %s", expense_id)
        return removed

    # Budgets

    def get_budget(self, user_id: int, month: int, year: int) -> Optional[Budget]:
        with self._lock:
            return self._budgets.get((user_id, month, year))

    def create_or_update_budget(
        self,
        user_id: int,
        *,
        amount: Decimal,
        month: int,
        year: int,
    ) -> Budget:
        """Set the budget for a period, keeping the id of an existing record."""

        key = (user_id, month, year)
        with self._lock:
            budget = self._budgets.get(key)
            if budget is not None:
                budget.amount = Decimal(str(amount))
                LOGGER.info("Updated budget %s for user %s %02d/%s", budget.budget_id, user_id, month, year)
                return budget
            budget = Budget(
                budget_id=self._next_budget_id,
                user_id=user_id,
                amount=Decimal(str(amount)),
                month=month,
                year=year,
            )
            self._next_budget_id += 1
            self._budgets[key] = budget
        LOGGER.info("Created budget %s for user %s %02d/%s", budget.budget_id, user_id, month, year)
        return budget

    # Summaries

    def get_monthly_expense_summary(self, user_id: int, month: int, year: int) -> MonthlyExpenseSummary:
        """Compare a period's spend with its budget."""

        expenses = self.list_expenses_by_month(user_id, month, year)
        budget_record = self.get_budget(user_id, month, year)

        total_spent = sum((expense.amount for expense in expenses), ZERO)
        budget = budget_record.amount if budget_record is not None else ZERO
        budget_remaining = max(ZERO, budget - total_spent)
        if budget > 0 and total_spent >= budget:
            budget_percentage = 100
        elif budget > 0:
            budget_percentage = _round_percentage(total_spent / budget * 100)
        else:
            budget_percentage = 0

        return MonthlyExpenseSummary(
            total_spent=total_spent,
            budget=budget,
            budget_remaining=budget_remaining,
            budget_percentage=budget_percentage,
            categories=self._summarise_categories(expenses),
        )

    def get_category_expenses(self, user_id: int, month: int, year: int) -> List[ExpenseSummary]:
        """Rank a period's categories by how much was spent on them."""

        return self._summarise_categories(self.list_expenses_by_month(user_id, month, year))

    def get_monthly_totals_by_category(
        self,
        user_id: int,
        category: ExpenseCategory,
        months: int,
    ) -> List[MonthlyCategoryTotal]:
        """Return one total per month for ``category``, oldest month first.

        The window ends at the current month. Months without matching
        expenses contribute a zero point.
        """

        today = self.today()
        totals: Dict[Tuple[int, int], Decimal] = defaultdict(lambda: ZERO)
        for expense in self.list_expenses_by_user(user_id):
            if expense.category == category:
                period = (expense.occurred_on.month, expense.occurred_on.year)
                totals[period] += expense.amount

        points: List[MonthlyCategoryTotal] = []
        for offset in range(months):
            month, year = _months_back(today.month, today.year, offset)
            points.append(MonthlyCategoryTotal(month=month, year=year, total=totals.get((month, year), ZERO)))
        points.reverse()
        return points

    @staticmethod
    def _summarise_categories(expenses: List[Expense]) -> List[ExpenseSummary]:
        totals: Dict[ExpenseCategory, Decimal] = {}
        for expense in expenses:
            totals[expense.category] = totals.get(expense.category, ZERO) + expense.amount

        grand_total = sum(totals.values(), ZERO)
        summaries = [
            ExpenseSummary(
                category=category,
                total=total,
                percentage=_round_percentage(total / grand_total * 100) if grand_total > 0 else 0,
            )
            for category, total in totals.items()
        ]
        summaries.sort(key=lambda summary: summary.total, reverse=True)
        return summaries
