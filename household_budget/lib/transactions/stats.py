"""Summary statistics over a list of unified transactions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence

from ...models import Category, Expense, Income, IncomeSource, Member
from .unify import TransactionType, UnifiedTransaction


@dataclass(frozen=True)
class TransactionStats:
    total_count: int = 0
    total_income: float = 0.0
    total_expense: float = 0.0
    net_amount: float = 0.0
    average_amount: float = 0.0
    date_range: Dict[str, str] = field(default_factory=lambda: {'start': '', 'end': ''})


def calculate_transaction_stats(transactions: Sequence[UnifiedTransaction]) -> TransactionStats:
    """Counts, totals and the covered date span of ``transactions``."""
    transactions = list(transactions)
    total_income = float(sum(t.amount for t in transactions if t.type == TransactionType.INCOME))
    total_expense = float(sum(t.amount for t in transactions if t.type == TransactionType.EXPENSE))
    count = len(transactions)
    dates = sorted(t.date for t in transactions)

    return TransactionStats(
        total_count=count,
        total_income=total_income,
        total_expense=total_expense,
        net_amount=total_income - total_expense,
        average_amount=(total_income + total_expense) / count if count else 0.0,
        date_range={'start': dates[0] if dates else '', 'end': dates[-1] if dates else ''},
    )


def get_filter_options(
    incomes: Iterable[Income],
    expenses: Iterable[Expense],
    categories: Sequence[Category],
    income_sources: Sequence[IncomeSource],
    users: Sequence[Member],
) -> Dict[str, object]:
    """Choices for a transaction filter form plus the earliest and latest dates."""
    dates: List[str] = sorted(
        [i.date for i in incomes if i.date] + [e.date for e in expenses if e.date]
    )
    return {
        'categories': list(categories),
        'income_sources': list(income_sources),
        'users': list(users),
        'date_range': {
            'min': dates[0] if dates else '',
            'max': dates[-1] if dates else '',
        },
    }
