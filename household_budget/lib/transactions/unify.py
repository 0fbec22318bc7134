"""Unified view over incomes and expenses."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from ...models import Expense, Income, NeedsOrWants, to_jsonable


class TransactionType(str, Enum):
    INCOME = 'income'
    EXPENSE = 'expense'


@dataclass(frozen=True)
class UnifiedTransaction:
    """An income or expense in one shape.

    ``category_or_source`` holds the category name for expenses and the
    source name for incomes; ``needs_or_wants`` is only set on expenses.
    """

    id: str
    type: TransactionType
    amount: float
    category_or_source: str
    category_or_source_id: str
    user_id: str
    user_name: str
    date: str
    notes: Optional[str] = None
    needs_or_wants: Optional[NeedsOrWants] = None
    created_at: str = ''

    def to_dict(self) -> dict:
        return to_jsonable(self)


def combine_transactions(
    incomes: Iterable[Income], expenses: Iterable[Expense]
) -> List[UnifiedTransaction]:
    """All incomes followed by all expenses, each in input order."""
    unified = [
        UnifiedTransaction(
            id=income.id,
            type=TransactionType.INCOME,
            amount=income.amount,
            category_or_source=income.source_name,
            category_or_source_id=income.source_id,
            user_id=income.user_id,
            user_name=income.user_name,
            date=income.date,
            notes=income.notes,
            created_at=income.created_at,
        )
        for income in incomes
    ]
    unified.extend(
        UnifiedTransaction(
            id=expense.id,
            type=TransactionType.EXPENSE,
            amount=expense.amount,
            category_or_source=expense.category_name,
            category_or_source_id=expense.category_id,
            user_id=expense.user_id,
            user_name=expense.user_name,
            date=expense.date,
            notes=expense.notes,
            needs_or_wants=expense.needs_or_wants,
            created_at=expense.created_at,
        )
        for expense in expenses
    )
    return unified
