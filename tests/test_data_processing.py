"""Unit tests for household_budget.data_processing."""

from __future__ import annotations

import pandas as pd

from household_budget import data_processing as dp

from conftest import make_expense, make_income


def test_expenses_frame_columns_and_month() -> None:
    df = dp.expenses_frame([make_expense('e1', 12.5, '2025-03-04')])
    assert list(df.columns) == dp.EXPENSE_COLUMNS
    assert df.loc[0, 'month'] == '2025-03'
    assert df.loc[0, 'needs_or_wants'] == 'needs'


def test_empty_frame_keeps_columns() -> None:
    df = dp.incomes_frame([])
    assert df.empty
    assert list(df.columns) == dp.INCOME_COLUMNS


def test_monthly_totals_fill_missing_months() -> None:
    df = dp.incomes_frame([make_income('i1', 10.0, '2025-01-02'), make_income('i2', 5.0, '2025-01-20')])
    totals = dp.monthly_totals(df, ['2025-01', '2025-02'])
    assert totals.to_dict() == {'2025-01': 15.0, '2025-02': 0.0}


def test_grouped_totals_first_appearance_order() -> None:
    df = dp.expenses_frame([
        make_expense('e1', 1.0, '2025-01-01', 'c2', 'Fun'),
        make_expense('e2', 2.0, '2025-01-02', 'c1', 'Groceries'),
        make_expense('e3', 3.0, '2025-01-03', 'c2', 'Fun'),
    ])
    grouped = dp.grouped_totals(df, 'category_id', 'category_name')
    assert grouped['category_id'].tolist() == ['c2', 'c1']
    assert grouped['total'].tolist() == [4.0, 2.0]


def test_share_of_total() -> None:
    assert dp.share_of_total([25, 75], 100).tolist() == [25.0, 75.0]
    assert dp.share_of_total([1, 2], 0).tolist() == [0.0, 0.0]


def test_restrict_to_months() -> None:
    df = dp.expenses_frame([make_expense('e1', 1.0, '2025-01-01'), make_expense('e2', 1.0, '2025-02-01')])
    assert isinstance(dp.restrict_to_months(df, ['2025-02']), pd.DataFrame)
    assert dp.restrict_to_months(df, ['2025-02'])['id'].tolist() == ['e2']
