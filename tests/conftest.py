"""Shared builders for the test suite."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from household_budget import ledger as ops
from household_budget.ledger import Ledger
from household_budget.models import (
    Category,
    Expense,
    Household,
    Income,
    IncomeSource,
    Member,
    MonthlyCategory,
    NeedsOrWants,
    Role,
)


def make_expense(id, amount, date, category_id='c1', category_name='Groceries',
                 needs_or_wants=NeedsOrWants.NEEDS, user_id='u1', user_name='Alex', notes=None):
    return Expense(
        id=id,
        amount=amount,
        category_id=category_id,
        category_name=category_name,
        needs_or_wants=NeedsOrWants(needs_or_wants),
        user_id=user_id,
        user_name=user_name,
        date=date,
        notes=notes,
    )


def make_income(id, amount, date, source_id='s1', source_name='Salary',
                user_id='u1', user_name='Alex', notes=None):
    return Income(
        id=id,
        amount=amount,
        source_id=source_id,
        source_name=source_name,
        user_id=user_id,
        user_name=user_name,
        date=date,
        notes=notes,
    )


def make_monthly(category_id, budget, month, carry_over=0.0, name='Groceries'):
    return MonthlyCategory(
        id=f"mc-{category_id}-{month}",
        category_id=category_id,
        category_name=name,
        monthly_budget=budget,
        carry_over_amount=carry_over,
        month=month,
    )


@pytest.fixture
def onboarded() -> Ledger:
    """Ledger for a two-member household in January 2025."""
    household = Household(id='h1', name='Home')
    users = [
        Member(id='u1', name='Alex', email='alex@example.com', role=Role.PRIMARY, household_id='h1'),
        Member(id='u2', name='Sam', email='sam@example.com', household_id='h1'),
    ]
    sources = [IncomeSource(id='s1', name='Salary')]
    categories = [
        Category(id='c1', name='Groceries', monthly_budget=100.0, carry_over_enabled=True),
        Category(id='c2', name='Fun', monthly_budget=50.0),
    ]
    return ops.complete_onboarding(Ledger(current_month='2025-01'), household, users, sources, categories)
