"""Month-level budget summary and per-category spending.

These functions derive everything shown on the dashboard for one month
from the raw ledger records.  Nothing here is stored; callers recompute
after every ledger change.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List

from ...models import Expense, Income, MonthlyCategory, SavingsContribution
from ...settings import get_config_value


class SpendingStatus(str, Enum):
    HEALTHY = 'healthy'
    WARNING = 'warning'
    DANGER = 'danger'


@dataclass(frozen=True)
class BudgetSummary:
    total_income: float = 0.0
    total_budgeted: float = 0.0
    total_spent: float = 0.0
    remaining: float = 0.0
    net_disposable_income: float = 0.0
    savings_balance: float = 0.0


@dataclass(frozen=True)
class CategorySpending:
    category_id: str
    category_name: str
    budget: float
    spent: float
    remaining: float
    percentage: float
    status: SpendingStatus


@dataclass(frozen=True)
class IncomeBreakdown:
    source_id: str
    source_name: str
    amount: float
    percentage: float


def _in_month(records, month: str) -> list:
    return [r for r in records if r.date.startswith(month)]


def _sum_amounts(records: Iterable) -> float:
    return float(sum(r.amount for r in records))


def spending_status(percentage: float) -> SpendingStatus:
    """Bucket a percentage of budget used; both bounds are inclusive."""
    exceeded = get_config_value('budget', 'alerts', 'exceeded_percentage', default=100)
    warning = get_config_value('budget', 'alerts', 'warning_percentage', default=80)
    if percentage >= exceeded:
        return SpendingStatus.DANGER
    if percentage >= warning:
        return SpendingStatus.WARNING
    return SpendingStatus.HEALTHY


def calculate_budget_summary(
    incomes: Iterable[Income],
    expenses: Iterable[Expense],
    monthly_categories: Iterable[MonthlyCategory],
    savings_contributions: Iterable[SavingsContribution],
    month: str,
) -> BudgetSummary:
    """Totals for ``month``.

    ``remaining`` is income left after spending and savings;
    ``net_disposable_income`` is income left after the full budget and
    savings.  Budgets include carry-over.
    """
    total_income = _sum_amounts(_in_month(incomes, month))
    total_budgeted = float(sum(mc.available for mc in monthly_categories if mc.month == month))
    total_spent = _sum_amounts(_in_month(expenses, month))
    total_savings = _sum_amounts(_in_month(savings_contributions, month))

    return BudgetSummary(
        total_income=total_income,
        total_budgeted=total_budgeted,
        total_spent=total_spent,
        remaining=total_income - total_spent - total_savings,
        net_disposable_income=total_income - total_budgeted - total_savings,
        savings_balance=total_savings,
    )


def calculate_category_spending(
    monthly_categories: Iterable[MonthlyCategory],
    expenses: Iterable[Expense],
    month: str,
) -> List[CategorySpending]:
    """Spend, remaining budget and status for each category of ``month``.

    Percentage is 0 when a category has no budget.
    """
    month_expenses = _in_month(expenses, month)
    results: List[CategorySpending] = []

    for row in monthly_categories:
        if row.month != month:
            continue
        spent = _sum_amounts(e for e in month_expenses if e.category_id == row.category_id)
        budget = row.available
        percentage = (spent / budget * 100) if budget > 0 else 0.0
        results.append(CategorySpending(
            category_id=row.category_id,
            category_name=row.category_name,
            budget=budget,
            spent=spent,
            remaining=budget - spent,
            percentage=percentage,
            status=spending_status(percentage),
        ))

    return results


def calculate_income_breakdown(incomes: Iterable[Income], month: str) -> List[IncomeBreakdown]:
    """Income per source for ``month`` with its share of the month total."""
    month_incomes = _in_month(incomes, month)
    total = _sum_amounts(month_incomes)

    grouped: Dict[str, Dict[str, object]] = {}
    for income in month_incomes:
        entry = grouped.setdefault(income.source_id, {'name': income.source_name, 'amount': 0.0})
        entry['amount'] += income.amount

    return [
        IncomeBreakdown(
            source_id=source_id,
            source_name=entry['name'],
            amount=entry['amount'],
            percentage=(entry['amount'] / total * 100) if total > 0 else 0.0,
        )
        for source_id, entry in grouped.items()
    ]


def calculate_savings_progress(target_amount: float, current_amount: float) -> float:
    """Percentage of a savings goal reached, capped at 100."""
    if target_amount <= 0:
        return 0.0
    return min(current_amount / target_amount * 100, 100.0)

