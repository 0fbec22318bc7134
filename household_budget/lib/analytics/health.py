"""Overall budget health score."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List

from ...settings import get_config_value
from ..budgets.calculations import BudgetSummary, CategorySpending


class HealthStatus(str, Enum):
    EXCELLENT = 'excellent'
    GOOD = 'good'
    FAIR = 'fair'
    POOR = 'poor'


@dataclass(frozen=True)
class BudgetHealth:
    score: int
    status: HealthStatus
    factors: List[str] = field(default_factory=list)


def _weight(key: str, default):
    return get_config_value('budget', 'health', key, default=default)


def health_status(score: float) -> HealthStatus:
    bands = _weight('bands', {}) or {}
    if score >= bands.get('excellent', 80):
        return HealthStatus.EXCELLENT
    if score >= bands.get('good', 60):
        return HealthStatus.GOOD
    if score >= bands.get('fair', 40):
        return HealthStatus.FAIR
    return HealthStatus.POOR


def calculate_budget_health_score(
    budget_summary: BudgetSummary,
    category_spending: Iterable[CategorySpending],
) -> BudgetHealth:
    """Score budget adherence from 0 to 100 with the reasons behind it.

    Starting from 100 the score loses 30 when total spending is over
    budget (15 when above 90% of it), 10 per category spent past its own
    budget, and 25 or 10 for a savings rate under 10% or under 20%.
    ``factors`` lists one line per check in that order.
    """
    factors: List[str] = []
    score = _weight('starting_score', 100)

    if budget_summary.total_budgeted > 0:
        spent_pct = budget_summary.total_spent / budget_summary.total_budgeted * 100
        if spent_pct > 100:
            score -= _weight('over_budget_penalty', 30)
            factors.append('Over budget')
        elif spent_pct > _weight('approaching_limit_percentage', 90):
            score -= _weight('approaching_limit_penalty', 15)
            factors.append('Approaching budget limit')
        else:
            factors.append('Within budget')

    overspent = [cs for cs in category_spending if cs.spent > cs.budget]
    if overspent:
        score -= len(overspent) * _weight('overspent_category_penalty', 10)
        factors.append(f"{len(overspent)} categories over budget")

    if budget_summary.total_income > 0:
        savings_rate = budget_summary.remaining / budget_summary.total_income * 100
        good = _weight('good_savings_rate', 20)
        low = _weight('low_savings_rate', 10)
        if savings_rate >= good:
            factors.append(f"Good savings rate ({good}%+)")
        elif savings_rate >= low:
            score -= _weight('low_savings_penalty', 10)
            factors.append(f"Low savings rate ({low}-{good}%)")
        else:
            score -= _weight('poor_savings_penalty', 25)
            factors.append(f"Poor savings rate (<{low}%)")

    score = int(max(0, min(100, score)))
    return BudgetHealth(score=score, status=health_status(score), factors=factors)
