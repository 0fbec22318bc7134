"""DataFrame builders over ledger records.

The analytics functions work on pandas frames with one row per income or
expense and a ``month`` column holding the ``YYYY-MM`` token of the row's
date.  These helpers are pure and operate independently of any storage so
they can be unit tested on small, controlled inputs.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

import numpy as np
import pandas as pd

from .models import Expense, Income

EXPENSE_COLUMNS = [
    'id', 'amount', 'category_id', 'category_name', 'needs_or_wants',
    'user_id', 'user_name', 'date', 'notes', 'month',
]
INCOME_COLUMNS = [
    'id', 'amount', 'source_id', 'source_name',
    'user_id', 'user_name', 'date', 'notes', 'month',
]


def _frame(rows: List[dict], columns: Sequence[str]) -> pd.DataFrame:
    df = pd.DataFrame(rows, columns=list(columns))
    df['amount'] = pd.to_numeric(df['amount'], errors='coerce').fillna(0.0).astype(float)
    return df


def expenses_frame(expenses: Iterable[Expense]) -> pd.DataFrame:
    """One row per expense, in input order."""
    rows = [
        {
            'id': e.id,
            'amount': e.amount,
            'category_id': e.category_id,
            'category_name': e.category_name,
            'needs_or_wants': getattr(e.needs_or_wants, 'value', e.needs_or_wants),
            'user_id': e.user_id,
            'user_name': e.user_name,
            'date': e.date,
            'notes': e.notes or '',
            'month': e.date[:7],
        }
        for e in expenses
    ]
    return _frame(rows, EXPENSE_COLUMNS)


def incomes_frame(incomes: Iterable[Income]) -> pd.DataFrame:
    """One row per income, in input order.  Blank source names read ``Unknown``."""
    rows = [
        {
            'id': i.id,
            'amount': i.amount,
            'source_id': i.source_id,
            'source_name': i.source_name or 'Unknown',
            'user_id': i.user_id,
            'user_name': i.user_name,
            'date': i.date,
            'notes': i.notes or '',
            'month': i.date[:7],
        }
        for i in incomes
    ]
    return _frame(rows, INCOME_COLUMNS)


def restrict_to_months(df: pd.DataFrame, months: Sequence[str]) -> pd.DataFrame:
    """Rows whose month is one of ``months``."""
    return df[df['month'].isin(list(months))]


def monthly_totals(df: pd.DataFrame, months: Sequence[str]) -> pd.Series:
    """Sum of ``amount`` per month, with every month of ``months`` present.

    Example:
        >>> monthly_totals(expenses_frame(expenses), ['2025-01', '2025-02'])
        month
        2025-01    120.0
        2025-02      0.0
        Name: amount, dtype: float64
    """
    totals = df.groupby('month', sort=False)['amount'].sum()
    return totals.reindex(list(months), fill_value=0.0).astype(float)


def grouped_totals(df: pd.DataFrame, key: str, label: str) -> pd.DataFrame:
    """Total ``amount`` per ``key`` in order of first appearance.

    The result has columns ``key``, ``label`` (first label seen for the
    key) and ``total``.
    """
    if df.empty:
        return pd.DataFrame(columns=[key, label, 'total'])
    grouped = df.groupby(key, sort=False).agg(
        **{label: (label, 'first'), 'total': ('amount', 'sum')}
    )
    return grouped.reset_index()


def share_of_total(values, total: float) -> np.ndarray:
    """Percentage each value contributes to ``total``; zeros when total is 0."""
    values = np.asarray(values, dtype=float)
    if total <= 0:
        return np.zeros_like(values)
    return values / total * 100
