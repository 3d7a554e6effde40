# expense_tracker/dashboard.py

"""Dashboard aggregation.

``compute_dashboard`` turns one user's income and expense records into the
summary shown on the dashboard: overall totals and balance, the income of the
last 60 days, the expenses of the last 30 calendar days, a merged feed of the
most recent activity and the full expense list. It is a pure function over the
records it is given and never touches the store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from typing import Iterable, List

from expense_tracker.core.models import Transaction

INCOME_WINDOW_DAYS = 60
EXPENSE_WINDOW_DAYS = 30
RECENT_PER_KIND = 5


@dataclass
class Window:
    total: float = 0.0
    transactions: List[Transaction] = field(default_factory=list)

    def to_dict(self, tagged: bool = False) -> dict:
        return {
            "total": self.total,
            "transactions": [tx.to_dict(tagged=tagged) for tx in self.transactions],
        }


@dataclass
class DashboardSummary:
    total_income: float
    total_expense: float
    last_60_days_income: Window
    last_30_days_expense: Window
    recent_transactions: List[Transaction]
    all_expenses: List[Transaction]

    @property
    def total_balance(self) -> float:
        return self.total_income - self.total_expense

    def to_dict(self) -> dict:
        return {
            "totalBalance": self.total_balance,
            "totalIncome": self.total_income,
            "totalExpense": self.total_expense,
            "last30DaysExpense": self.last_30_days_expense.to_dict(tagged=True),
            "last60DaysIncome": self.last_60_days_income.to_dict(),
            "lastTransactions": [tx.to_dict(tagged=True) for tx in self.recent_transactions],
            "allExpenses": [tx.to_dict(tagged=True) for tx in self.all_expenses],
        }


def newest_first(transactions: Iterable[Transaction]) -> List[Transaction]:
    # sorted() is stable, so equal dates keep their incoming order
    return sorted(transactions, key=lambda tx: tx.date, reverse=True)


def _total(transactions: Iterable[Transaction]) -> float:
    return sum((tx.amount for tx in transactions), 0.0)


def _window(transactions: Iterable[Transaction], start: datetime, end: datetime | None = None) -> Window:
    selected = [
        tx for tx in transactions
        if tx.date >= start and (end is None or tx.date <= end)
    ]
    selected = newest_first(selected)
    return Window(total=_total(selected), transactions=selected)


def compute_dashboard(
    user_id: int,
    incomes: Iterable[Transaction],
    expenses: Iterable[Transaction],
    now: datetime | None = None,
) -> DashboardSummary:
    """Aggregate a user's records into a ``DashboardSummary``.

    The income window is open-ended: anything dated on or after
    ``now - 60 days`` counts. The expense window runs from midnight 30 days
    ago through the last microsecond of today, inclusive on both ends.
    Records belonging to another user are ignored.
    """
    now = now or datetime.now()
    incomes = [tx for tx in incomes if tx.user_id == user_id]
    expenses = [tx for tx in expenses if tx.user_id == user_id]

    income_start = now - timedelta(days=INCOME_WINDOW_DAYS)
    expense_start = datetime.combine((now - timedelta(days=EXPENSE_WINDOW_DAYS)).date(), time.min)
    expense_end = datetime.combine(now.date(), time.max)

    sorted_incomes = newest_first(incomes)
    sorted_expenses = newest_first(expenses)
    recent = newest_first(
        sorted_incomes[:RECENT_PER_KIND] + sorted_expenses[:RECENT_PER_KIND]
    )

    return DashboardSummary(
        total_income=_total(incomes),
        total_expense=_total(expenses),
        last_60_days_income=_window(incomes, income_start),
        last_30_days_expense=_window(expenses, expense_start, expense_end),
        recent_transactions=recent,
        all_expenses=sorted_expenses,
    )
