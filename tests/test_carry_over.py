from __future__ import annotations

import pytest

from household_budget import ledger as ops
from household_budget.exceptions import LedgerValidationError
from household_budget.lib.budgets import calculate_carry_overs
from household_budget.models import Category

from conftest import make_expense, make_monthly


def test_unused_budget_carries_into_next_month() -> None:
    categories = [Category(id='c1', name='Groceries', monthly_budget=100.0, carry_over_enabled=True)]
    rows = [make_monthly('c1', 100.0, '2025-01')]
    expenses = [make_expense('e1', 60.0, '2025-01-10')]

    assert calculate_carry_overs('2025-02', rows, expenses, categories) == {'c1': 40.0}


def test_disabled_category_never_carries() -> None:
    categories = [Category(id='c1', name='Groceries', monthly_budget=100.0, carry_over_enabled=False)]
    rows = [make_monthly('c1', 100.0, '2025-01')]

    assert calculate_carry_overs('2025-02', rows, [], categories) == {'c1': 0.0}


def test_overspent_category_carries_zero() -> None:
    categories = [Category(id='c1', name='Groceries', monthly_budget=100.0, carry_over_enabled=True)]
    rows = [make_monthly('c1', 100.0, '2025-01')]
    expenses = [make_expense('e1', 130.0, '2025-01-10')]

    assert calculate_carry_overs('2025-02', rows, expenses, categories) == {'c1': 0.0}


def test_previous_carry_over_counts_toward_remaining() -> None:
    categories = [Category(id='c1', name='Groceries', monthly_budget=100.0, carry_over_enabled=True)]
    rows = [make_monthly('c1', 100.0, '2025-01', carry_over=25.0)]
    expenses = [make_expense('e1', 100.0, '2025-01-10')]

    assert calculate_carry_overs('2025-02', rows, expenses, categories) == {'c1': 25.0}


def test_missing_previous_row_carries_zero() -> None:
    categories = [Category(id='c1', name='Groceries', monthly_budget=100.0, carry_over_enabled=True)]

    assert calculate_carry_overs('2025-02', [], [], categories) == {'c1': 0.0}


def test_only_previous_month_expenses_count() -> None:
    categories = [Category(id='c1', name='Groceries', monthly_budget=100.0, carry_over_enabled=True)]
    rows = [make_monthly('c1', 100.0, '2024-12')]
    expenses = [
        make_expense('e1', 30.0, '2024-12-31'),
        make_expense('e2', 50.0, '2025-01-01'),
        make_expense('e3', 20.0, '2024-12-05', category_id='c2'),
    ]

    assert calculate_carry_overs('2025-01', rows, expenses, categories) == {'c1': 70.0}


def test_materialized_month_budget_includes_carry_over(onboarded) -> None:
    ledger = ops.add_expense(onboarded, 60, 'c1', 'needs', 'u1', '2025-01-15')
    ledger = ops.create_monthly_budgets(ledger, '2025-02')

    february = {mc.category_id: mc for mc in ledger.monthly_categories if mc.month == '2025-02'}
    assert february['c1'].carry_over_amount == 40.0
    assert february['c1'].available == 140.0
    # c2 has carry-over disabled
    assert february['c2'].carry_over_amount == 0.0


def test_materializing_twice_is_rejected(onboarded) -> None:
    ledger = ops.create_monthly_budgets(onboarded, '2025-02')
    with pytest.raises(LedgerValidationError):
        ops.create_monthly_budgets(ledger, '2025-02')
