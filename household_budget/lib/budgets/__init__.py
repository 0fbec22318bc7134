"""Budget lifecycle calculations.

This module provides:
- Carry-over of unused budget between months
- Monthly budget summary and per-category spending
- Income breakdown and savings progress
- Alert generation from the month aggregates
"""

from .carry_over import calculate_carry_overs
from .calculations import (
    BudgetSummary,
    CategorySpending,
    IncomeBreakdown,
    SpendingStatus,
    calculate_budget_summary,
    calculate_category_spending,
    calculate_income_breakdown,
    calculate_savings_progress,
    spending_status,
)
from .alerts import check_and_create_alerts

__all__ = [
    # Carry-over
    'calculate_carry_overs',
    # Calculations
    'BudgetSummary',
    'CategorySpending',
    'IncomeBreakdown',
    'SpendingStatus',
    'calculate_budget_summary',
    'calculate_category_spending',
    'calculate_income_breakdown',
    'calculate_savings_progress',
    'spending_status',
    # Alerts
    'check_and_create_alerts',
]
