"""Month-by-month trend series over a range of months.

Every function enumerates the months from ``start_month`` to
``end_month`` inclusive and reports each of them, including months with
no records.  A reversed range yields an empty series.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from ...data_processing import expenses_frame, incomes_frame, monthly_totals, restrict_to_months
from ...models import Category, Expense, Income
from ...months import month_list


@dataclass(frozen=True)
class SpendingTrend:
    month: str
    total_spent: float
    needs_spent: float
    wants_spent: float


@dataclass(frozen=True)
class IncomeTrend:
    month: str
    total_income: float
    by_source: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class CategoryTrend:
    category_id: str
    category_name: str
    monthly_data: Tuple[Tuple[str, float], ...]


@dataclass(frozen=True)
class MonthComparison:
    month: str
    income: float
    spent: float
    saved: float
    savings_rate: float


def calculate_spending_trends(
    expenses: Iterable[Expense], start_month: str, end_month: str
) -> List[SpendingTrend]:
    """Total, needs and wants spending per month."""
    months = month_list(start_month, end_month)
    df = restrict_to_months(expenses_frame(expenses), months)

    total = monthly_totals(df, months)
    needs = monthly_totals(df[df['needs_or_wants'] == 'needs'], months)
    wants = monthly_totals(df[df['needs_or_wants'] == 'wants'], months)

    return [
        SpendingTrend(
            month=month,
            total_spent=float(total[month]),
            needs_spent=float(needs[month]),
            wants_spent=float(wants[month]),
        )
        for month in months
    ]


def calculate_income_trends(
    incomes: Iterable[Income], start_month: str, end_month: str
) -> List[IncomeTrend]:
    """Total income per month with a breakdown by source name."""
    months = month_list(start_month, end_month)
    df = restrict_to_months(incomes_frame(incomes), months)

    total = monthly_totals(df, months)
    by_source = df.groupby(['month', 'source_name'], sort=False)['amount'].sum()

    trends = []
    for month in months:
        sources = {
            source: float(amount)
            for (row_month, source), amount in by_source.items()
            if row_month == month
        }
        trends.append(IncomeTrend(month=month, total_income=float(total[month]), by_source=sources))
    return trends


def calculate_category_trends(
    expenses: Iterable[Expense],
    categories: Iterable[Category],
    start_month: str,
    end_month: str,
) -> List[CategoryTrend]:
    """Monthly spend series for every category, zero-spend categories included."""
    months = month_list(start_month, end_month)
    df = restrict_to_months(expenses_frame(expenses), months)
    spent = df.groupby(['category_id', 'month'])['amount'].sum().to_dict()

    return [
        CategoryTrend(
            category_id=category.id,
            category_name=category.name,
            monthly_data=tuple((month, float(spent.get((category.id, month), 0.0))) for month in months),
        )
        for category in categories
    ]


def calculate_month_over_month_comparison(
    expenses: Iterable[Expense],
    incomes: Iterable[Income],
    start_month: str,
    end_month: str,
) -> List[MonthComparison]:
    """Income, spending, savings and savings rate per month.

    The savings rate is 0 for months without income.
    """
    months = month_list(start_month, end_month)
    income = monthly_totals(restrict_to_months(incomes_frame(incomes), months), months)
    spent = monthly_totals(restrict_to_months(expenses_frame(expenses), months), months)

    rows = []
    for month in months:
        month_income = float(income[month])
        month_spent = float(spent[month])
        saved = month_income - month_spent
        rows.append(MonthComparison(
            month=month,
            income=month_income,
            spent=month_spent,
            saved=saved,
            savings_rate=(saved / month_income * 100) if month_income > 0 else 0.0,
        ))
    return rows
