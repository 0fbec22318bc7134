"""Budget alert generation.

:func:`check_and_create_alerts` is meant to run after every recompute of
the month aggregates.  It only returns alerts that are not already live
in ``existing_alerts``; the caller appends the result to the ledger before
the next call so alerts are not duplicated.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence
from uuid import uuid4

from ...models import Alert, AlertType, Currency, Severity
from ...settings import currency_symbol, get_config_value
from ..common.formatting import format_currency
from .calculations import BudgetSummary, CategorySpending


def _has_live(alerts: Iterable[Alert], alert_type: AlertType, category_id: Optional[str]) -> bool:
    return any(a.blocks(alert_type, category_id) for a in alerts)


def _total_live(alerts: Iterable[Alert]) -> bool:
    return any(a.type == AlertType.TOTAL_EXCEEDED and not a.dismissed for a in alerts)


def _new_alert(alert_type: AlertType, severity: Severity, message: str,
               category_id: Optional[str] = None) -> Alert:
    return Alert(
        id=uuid4().hex,
        type=alert_type,
        severity=severity,
        message=message,
        category_id=category_id,
        dismissed=False,
        created_at=datetime.now(timezone.utc).isoformat(),
    )


def check_and_create_alerts(
    category_spending: Sequence[CategorySpending],
    budget_summary: BudgetSummary,
    existing_alerts: Sequence[Alert],
    currency: Currency | str | None = None,
) -> List[Alert]:
    """Return the alerts the current aggregates call for.

    A category at or over 100% gets a ``category_exceeded`` alert.  A
    category at or over 80% gets a ``category_warning`` unless it already
    has a live warning or exceeded alert.  Total spending above the total
    budget gets one household-wide ``total_exceeded`` alert.
    """
    symbol = currency_symbol(currency.value if isinstance(currency, Currency) else currency)
    exceeded_at = get_config_value('budget', 'alerts', 'exceeded_percentage', default=100)
    warning_at = get_config_value('budget', 'alerts', 'warning_percentage', default=80)
    new_alerts: List[Alert] = []

    for cat in category_spending:
        warning_exists = _has_live(existing_alerts, AlertType.CATEGORY_WARNING, cat.category_id)
        exceeded_exists = _has_live(existing_alerts, AlertType.CATEGORY_EXCEEDED, cat.category_id)

        if cat.percentage >= exceeded_at:
            if not exceeded_exists:
                new_alerts.append(_new_alert(
                    AlertType.CATEGORY_EXCEEDED,
                    Severity.DANGER,
                    f"You've exceeded your budget for {cat.category_name}. "
                    f"Spent {format_currency(cat.spent, symbol=symbol)} "
                    f"of {format_currency(cat.budget, symbol=symbol)}.",
                    cat.category_id,
                ))
        elif cat.percentage >= warning_at and not warning_exists and not exceeded_exists:
            new_alerts.append(_new_alert(
                AlertType.CATEGORY_WARNING,
                Severity.WARNING,
                f"You're approaching your budget limit for {cat.category_name}. "
                f"{format_currency(cat.remaining, symbol=symbol)} remaining.",
                cat.category_id,
            ))

    if budget_summary.total_spent > budget_summary.total_budgeted and not _total_live(existing_alerts):
        new_alerts.append(_new_alert(
            AlertType.TOTAL_EXCEEDED,
            Severity.DANGER,
            'Total spending has exceeded your planned monthly budget. '
            'Consider adjusting expenses or increasing budgets.',
        ))

    return new_alerts
