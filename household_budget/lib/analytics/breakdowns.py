"""Spending breakdowns over a range of months.

Each function keeps only the expenses dated inside the range, then splits
their total by member, by needs/wants or by category.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from ...data_processing import expenses_frame, grouped_totals, restrict_to_months, share_of_total
from ...models import Expense, Member
from ...months import month_list
from ...settings import get_config_value


@dataclass(frozen=True)
class UserSpending:
    user_id: str
    user_name: str
    total_spent: float
    percentage: float


@dataclass(frozen=True)
class NeedsWantsBreakdown:
    needs: float
    wants: float
    needs_percentage: float
    wants_percentage: float


@dataclass(frozen=True)
class TopCategory:
    category_id: str
    category_name: str
    total_spent: float
    percentage: float


@dataclass(frozen=True)
class CategoryAverage:
    category_id: str
    category_name: str
    avg_spent: float
    total_spent: float
    month_count: int


def _range_expenses(expenses: Iterable[Expense], start_month: str, end_month: str):
    return restrict_to_months(expenses_frame(expenses), month_list(start_month, end_month))


def calculate_spending_by_user(
    expenses: Iterable[Expense],
    users: Iterable[Member],
    start_month: str,
    end_month: str,
) -> List[UserSpending]:
    """Spend per member, in member order, with each member's share."""
    df = _range_expenses(expenses, start_month, end_month)
    total = float(df['amount'].sum())
    per_user = df.groupby('user_id')['amount'].sum()

    users = list(users)
    spent = [float(per_user.get(user.id, 0.0)) for user in users]
    shares = share_of_total(spent, total)

    return [
        UserSpending(user_id=user.id, user_name=user.name, total_spent=amount, percentage=float(share))
        for user, amount, share in zip(users, spent, shares)
    ]


def calculate_spending_by_needs_wants(
    expenses: Iterable[Expense], start_month: str, end_month: str
) -> NeedsWantsBreakdown:
    df = _range_expenses(expenses, start_month, end_month)
    needs = float(df.loc[df['needs_or_wants'] == 'needs', 'amount'].sum())
    wants = float(df.loc[df['needs_or_wants'] == 'wants', 'amount'].sum())
    needs_pct, wants_pct = share_of_total([needs, wants], needs + wants)
    return NeedsWantsBreakdown(
        needs=needs,
        wants=wants,
        needs_percentage=float(needs_pct),
        wants_percentage=float(wants_pct),
    )


def calculate_top_spending_categories(
    expenses: Iterable[Expense],
    start_month: str,
    end_month: str,
    limit: Optional[int] = None,
) -> List[TopCategory]:
    """Categories ranked by total spend, highest first.

    Ties keep the order in which the categories first appear among the
    expenses.  ``limit`` defaults to the configured top-category count.
    """
    if limit is None:
        limit = get_config_value('budget', 'analytics', 'top_categories_limit', default=5)
    df = _range_expenses(expenses, start_month, end_month)
    total = float(df['amount'].sum())

    grouped = grouped_totals(df, 'category_id', 'category_name')
    grouped = grouped.sort_values('total', ascending=False, kind='stable').head(limit)
    shares = share_of_total(grouped['total'].to_numpy(), total)

    return [
        TopCategory(
            category_id=row.category_id,
            category_name=row.category_name,
            total_spent=float(row.total),
            percentage=float(share),
        )
        for row, share in zip(grouped.itertuples(index=False), shares)
    ]


def calculate_category_averages(
    expenses: Iterable[Expense], start_month: str, end_month: str
) -> List[CategoryAverage]:
    """Total and average spend per category, highest total first.

    The average divides by the number of months in which the category has
    at least one expense, not by the length of the range.
    """
    df = _range_expenses(expenses, start_month, end_month)
    if df.empty:
        return []

    grouped = df.groupby('category_id', sort=False).agg(
        category_name=('category_name', 'first'),
        total=('amount', 'sum'),
        month_count=('month', 'nunique'),
    ).reset_index()
    grouped = grouped.sort_values('total', ascending=False, kind='stable')

    return [
        CategoryAverage(
            category_id=row.category_id,
            category_name=row.category_name,
            avg_spent=float(row.total) / int(row.month_count) if row.month_count else 0.0,
            total_spent=float(row.total),
            month_count=int(row.month_count),
        )
        for row in grouped.itertuples(index=False)
    ]
