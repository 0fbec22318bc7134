from __future__ import annotations

import pytest

from household_budget.lib.analytics import (
    HealthStatus,
    calculate_budget_health_score,
    calculate_category_averages,
    calculate_category_trends,
    calculate_income_trends,
    calculate_month_over_month_comparison,
    calculate_spending_by_needs_wants,
    calculate_spending_by_user,
    calculate_spending_trends,
    calculate_top_spending_categories,
)
from household_budget.lib.budgets import BudgetSummary, CategorySpending, SpendingStatus
from household_budget.models import Category, Member

from conftest import make_expense, make_income


def sample_expenses():
    return [
        make_expense('e1', 100.0, '2025-01-05', 'c1', 'Groceries', 'needs', 'u1', 'Alex'),
        make_expense('e2', 50.0, '2025-01-20', 'c2', 'Fun', 'wants', 'u2', 'Sam'),
        make_expense('e3', 30.0, '2025-03-02', 'c1', 'Groceries', 'needs', 'u2', 'Sam'),
        make_expense('e4', 999.0, '2024-12-30', 'c3', 'Travel', 'wants', 'u1', 'Alex'),
    ]


def _cat(category_id, spent, budget):
    return CategorySpending(category_id, category_id, budget, spent, budget - spent,
                            spent / budget * 100, SpendingStatus.HEALTHY)


def test_spending_trends_cover_every_month() -> None:
    trends = calculate_spending_trends(sample_expenses(), '2025-01', '2025-03')

    assert [t.month for t in trends] == ['2025-01', '2025-02', '2025-03']
    assert [t.total_spent for t in trends] == [150.0, 0.0, 30.0]
    assert trends[0].needs_spent == 100.0
    assert trends[0].wants_spent == 50.0


def test_reversed_range_is_empty() -> None:
    assert calculate_spending_trends(sample_expenses(), '2025-03', '2025-01') == []


def test_income_trends_by_source() -> None:
    incomes = [
        make_income('i1', 1000.0, '2025-01-01'),
        make_income('i2', 200.0, '2025-01-10', source_id='s2', source_name='Freelance'),
        make_income('i3', 300.0, '2025-02-10', source_name=''),
    ]

    trends = calculate_income_trends(incomes, '2025-01', '2025-02')

    assert trends[0].total_income == 1200.0
    assert trends[0].by_source == {'Salary': 1000.0, 'Freelance': 200.0}
    assert trends[1].by_source == {'Unknown': 300.0}


def test_category_trends_include_idle_categories() -> None:
    categories = [Category(id='c1', name='Groceries', monthly_budget=100.0),
                  Category(id='c9', name='Pets', monthly_budget=20.0)]

    trends = calculate_category_trends(sample_expenses(), categories, '2025-01', '2025-02')

    assert trends[0].monthly_data == (('2025-01', 100.0), ('2025-02', 0.0))
    assert trends[1].monthly_data == (('2025-01', 0.0), ('2025-02', 0.0))


def test_month_over_month_comparison() -> None:
    incomes = [make_income('i1', 300.0, '2025-01-01')]

    rows = calculate_month_over_month_comparison(sample_expenses(), incomes, '2025-01', '2025-02')

    assert rows[0].saved == 150.0
    assert rows[0].savings_rate == pytest.approx(50.0)
    assert rows[1].savings_rate == 0.0


def test_spending_by_user_keeps_member_order() -> None:
    users = [Member(id='u1', name='Alex', email='a@x.io'), Member(id='u2', name='Sam', email='s@x.io'),
             Member(id='u3', name='Kim', email='k@x.io')]

    spending = calculate_spending_by_user(sample_expenses(), users, '2025-01', '2025-03')

    assert [(s.user_name, s.total_spent) for s in spending] == [('Alex', 100.0), ('Sam', 80.0), ('Kim', 0.0)]
    assert spending[0].percentage == pytest.approx(100 / 180 * 100)


def test_needs_wants_with_no_spending() -> None:
    breakdown = calculate_spending_by_needs_wants([], '2025-01', '2025-01')
    assert breakdown.needs_percentage == 0.0
    assert breakdown.wants_percentage == 0.0


def test_needs_wants_split() -> None:
    breakdown = calculate_spending_by_needs_wants(sample_expenses(), '2025-01', '2025-03')
    assert breakdown.needs == 130.0
    assert breakdown.wants == 50.0


def test_top_categories_ties_keep_first_appearance() -> None:
    expenses = [
        make_expense('e1', 40.0, '2025-01-01', 'c2', 'Fun'),
        make_expense('e2', 40.0, '2025-01-02', 'c1', 'Groceries'),
        make_expense('e3', 90.0, '2025-01-03', 'c3', 'Rent'),
    ]

    top = calculate_top_spending_categories(expenses, '2025-01', '2025-01', limit=2)

    assert [t.category_id for t in top] == ['c3', 'c2']
    assert top[0].percentage == pytest.approx(90 / 170 * 100)


def test_category_averages_use_active_months() -> None:
    averages = calculate_category_averages(sample_expenses(), '2025-01', '2025-03')

    groceries = averages[0]
    assert groceries.category_id == 'c1'
    assert groceries.total_spent == 130.0
    assert groceries.month_count == 2
    assert groceries.avg_spent == 65.0


def test_health_score_excellent() -> None:
    summary = BudgetSummary(total_income=1000.0, total_budgeted=500.0, total_spent=400.0, remaining=600.0)

    health = calculate_budget_health_score(summary, [_cat('c1', 50.0, 100.0)])

    assert health.score == 100
    assert health.status == HealthStatus.EXCELLENT
    assert health.factors == ['Within budget', 'Good savings rate (20%+)']


def test_health_score_penalties_and_clamp() -> None:
    summary = BudgetSummary(total_income=1000.0, total_budgeted=500.0, total_spent=950.0, remaining=50.0)
    overspent = [_cat(f"c{i}", 120.0, 100.0) for i in range(6)]

    health = calculate_budget_health_score(summary, overspent)

    # 100 - 30 - 60 - 25 clamps to 0
    assert health.score == 0
    assert health.status == HealthStatus.POOR
    assert health.factors == ['Over budget', '6 categories over budget', 'Poor savings rate (<10%)']


def test_health_score_bands() -> None:
    summary = BudgetSummary(total_income=1000.0, total_budgeted=1000.0, total_spent=950.0, remaining=150.0)

    health = calculate_budget_health_score(summary, [])

    # approaching limit (-15) and low savings (-10)
    assert health.score == 75
    assert health.status == HealthStatus.GOOD
