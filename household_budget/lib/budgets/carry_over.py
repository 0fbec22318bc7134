"""Carry-over of unused category budget into the next month."""

from __future__ import annotations

from typing import Dict, Iterable, Sequence

from ...models import Category, Expense, MonthlyCategory
from ...months import previous_month


def calculate_carry_overs(
    month: str,
    monthly_categories: Sequence[MonthlyCategory],
    expenses: Iterable[Expense],
    categories: Iterable[Category],
) -> Dict[str, float]:
    """Amount each category carries into ``month``.

    A category carries its unused previous-month balance only when its
    template has carry-over enabled and the balance is positive.  Overspending
    never reduces the next month's fresh budget, and a category with no row
    in the previous month carries nothing.

    Args:
        month: Month being materialized
        monthly_categories: All materialized month rows
        expenses: Full expense history
        categories: Category templates

    Returns:
        Mapping of category id to carry-over amount (0.0 when nothing carries)

    Example:
        >>> calculate_carry_overs('2025-02', rows, expenses, categories)
        {'c1': 40.0, 'c2': 0.0}
    """
    prior = previous_month(month)
    expenses = list(expenses)
    carry_overs: Dict[str, float] = {}

    for category in categories:
        prev_row = next(
            (mc for mc in monthly_categories if mc.category_id == category.id and mc.month == prior),
            None,
        )
        if prev_row is None:
            carry_overs[category.id] = 0.0
            continue

        spent = sum(
            e.amount for e in expenses if e.category_id == category.id and e.date.startswith(prior)
        )
        remaining = prev_row.monthly_budget + prev_row.carry_over_amount - spent

        if category.carry_over_enabled and remaining > 0:
            carry_overs[category.id] = float(remaining)
        else:
            carry_overs[category.id] = 0.0

    return carry_overs
