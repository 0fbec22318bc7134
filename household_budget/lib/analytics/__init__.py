"""Analytics over a range of months.

This module provides trend series (spending, income, category, month
comparison), spending breakdowns (by member, needs vs wants, top
categories, category averages) and the budget health score.
"""

from .trends import (
    CategoryTrend,
    IncomeTrend,
    MonthComparison,
    SpendingTrend,
    calculate_category_trends,
    calculate_income_trends,
    calculate_month_over_month_comparison,
    calculate_spending_trends,
)
from .breakdowns import (
    CategoryAverage,
    NeedsWantsBreakdown,
    TopCategory,
    UserSpending,
    calculate_category_averages,
    calculate_spending_by_needs_wants,
    calculate_spending_by_user,
    calculate_top_spending_categories,
)
from .health import BudgetHealth, HealthStatus, calculate_budget_health_score

__all__ = [
    # Trends
    'CategoryTrend',
    'IncomeTrend',
    'MonthComparison',
    'SpendingTrend',
    'calculate_category_trends',
    'calculate_income_trends',
    'calculate_month_over_month_comparison',
    'calculate_spending_trends',
    # Breakdowns
    'CategoryAverage',
    'NeedsWantsBreakdown',
    'TopCategory',
    'UserSpending',
    'calculate_category_averages',
    'calculate_spending_by_needs_wants',
    'calculate_spending_by_user',
    'calculate_top_spending_categories',
    # Health
    'BudgetHealth',
    'HealthStatus',
    'calculate_budget_health_score',
]
