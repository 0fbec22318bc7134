"""Session-level access to the ledger.

A :class:`LedgerService` is constructed once per process or session and
passed to whatever needs the ledger.  It holds the current snapshot,
applies mutations from :mod:`household_budget.ledger`, refreshes alerts
after each change and writes the result to the record store.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

from . import ledger as ops
from .config import STORAGE_KEY
from .ledger import Ledger
from .lib.budgets import (
    BudgetSummary,
    CategorySpending,
    IncomeBreakdown,
    calculate_budget_summary,
    calculate_category_spending,
    calculate_income_breakdown,
    check_and_create_alerts,
)
from .models import Alert
from .storage import LedgerStore

logger = logging.getLogger(__name__)


class LedgerService:
    """Owns the current ledger snapshot for one household.

    Every mutation method returns the new snapshot.  Snapshots handed out
    earlier are never modified.
    """

    def __init__(
        self,
        store: Optional[LedgerStore] = None,
        key: str = STORAGE_KEY,
        ledger: Optional[Ledger] = None,
    ):
        self.store = store
        self.key = key
        self.last_save_ok = True
        if ledger is not None:
            self._ledger = ledger
        elif store is not None:
            self._ledger = store.load(key)
        else:
            self._ledger = Ledger()
        logger.debug("Ledger service ready at revision %d", self._ledger.revision)

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    def reload(self) -> Ledger:
        if self.store is not None:
            self._ledger = self.store.load(self.key)
        return self._ledger

    def apply(self, mutation: Callable[..., Ledger], *args: Any, **kwargs: Any) -> Ledger:
        """Run a ledger mutation, refresh alerts and persist.

        Validation and guard errors propagate and leave the current
        snapshot in place.
        """
        return self._apply(mutation, args, kwargs)

    def _apply(self, mutation, args, kwargs, refresh_alerts: bool = True) -> Ledger:
        updated = mutation(self._ledger, *args, **kwargs)
        if updated is self._ledger:
            return updated
        if refresh_alerts:
            updated = self._with_alerts(updated)
        self._persist(updated)
        self._ledger = updated
        return updated

    def _with_alerts(self, ledger: Ledger) -> Ledger:
        if not ledger.onboarding_completed:
            return ledger
        new_alerts = check_and_create_alerts(
            self._category_spending(ledger, ledger.current_month),
            self._summary(ledger, ledger.current_month),
            ledger.alerts,
            ledger.household.currency if ledger.household else None,
        )
        if new_alerts:
            logger.info("Raised %d new alert(s) for %s", len(new_alerts), ledger.current_month)
        return ops.append_alerts(ledger, new_alerts)

    def _persist(self, ledger: Ledger) -> None:
        if self.store is None:
            return
        # StaleLedgerError propagates before the snapshot is swapped in
        self.last_save_ok = self.store.save(ledger, self.key)
        if not self.last_save_ok:
            logger.warning(
                "Ledger revision %d kept in memory only; changes may not survive a reload",
                ledger.revision,
            )

    # -- aggregates -------------------------------------------------------

    @staticmethod
    def _summary(ledger: Ledger, month: str) -> BudgetSummary:
        return calculate_budget_summary(
            ledger.incomes,
            ledger.expenses,
            ledger.monthly_categories,
            ledger.savings_contributions,
            month,
        )

    @staticmethod
    def _category_spending(ledger: Ledger, month: str) -> List[CategorySpending]:
        return calculate_category_spending(ledger.monthly_categories, ledger.expenses, month)

    def budget_summary(self, month: Optional[str] = None) -> BudgetSummary:
        return self._summary(self._ledger, month or self._ledger.current_month)

    def category_spending(self, month: Optional[str] = None) -> List[CategorySpending]:
        return self._category_spending(self._ledger, month or self._ledger.current_month)

    def income_breakdown(self, month: Optional[str] = None) -> List[IncomeBreakdown]:
        return calculate_income_breakdown(self._ledger.incomes, month or self._ledger.current_month)

    def active_alerts(self) -> List[Alert]:
        return ops.active_alerts(self._ledger)

    # -- mutations --------------------------------------------------------

    def set_household(self, name, currency='USD') -> Ledger:
        return self.apply(ops.set_household, name, currency)

    def add_member(self, name, email, role='member') -> Ledger:
        return self.apply(ops.add_member, name, email, role)

    def update_member(self, member_id, **updates) -> Ledger:
        return self.apply(ops.update_member, member_id, **updates)

    def delete_member(self, member_id) -> Ledger:
        return self.apply(ops.delete_member, member_id)

    def add_income_source(self, name, description=None) -> Ledger:
        return self.apply(ops.add_income_source, name, description)

    def update_income_source(self, source_id, **updates) -> Ledger:
        return self.apply(ops.update_income_source, source_id, **updates)

    def delete_income_source(self, source_id) -> Ledger:
        return self.apply(ops.delete_income_source, source_id)

    def add_income(self, amount, source_id, user_id, date, notes=None) -> Ledger:
        return self.apply(ops.add_income, amount, source_id, user_id, date, notes)

    def update_income(self, income_id, **updates) -> Ledger:
        return self.apply(ops.update_income, income_id, **updates)

    def delete_income(self, income_id) -> Ledger:
        return self.apply(ops.delete_income, income_id)

    def add_expense(self, amount, category_id, needs_or_wants, user_id, date, notes=None) -> Ledger:
        return self.apply(ops.add_expense, amount, category_id, needs_or_wants, user_id, date, notes)

    def update_expense(self, expense_id, **updates) -> Ledger:
        return self.apply(ops.update_expense, expense_id, **updates)

    def delete_expense(self, expense_id) -> Ledger:
        return self.apply(ops.delete_expense, expense_id)

    def add_category(self, name, monthly_budget, carry_over_enabled=False, icon=None, color=None) -> Ledger:
        return self.apply(ops.add_category, name, monthly_budget, carry_over_enabled, icon, color)

    def update_category(self, category_id, **updates) -> Ledger:
        return self.apply(ops.update_category, category_id, **updates)

    def update_monthly_category(self, monthly_category_id, monthly_budget) -> Ledger:
        return self.apply(ops.update_monthly_category, monthly_category_id, monthly_budget)

    def create_monthly_budgets(self, month) -> Ledger:
        return self.apply(ops.create_monthly_budgets, month)

    def add_savings_goal(self, name, target_amount, deadline=None, icon=None, color=None) -> Ledger:
        return self.apply(ops.add_savings_goal, name, target_amount, deadline, icon, color)

    def add_savings_contribution(self, goal_id, amount, user_id, date, notes=None) -> Ledger:
        return self.apply(ops.add_savings_contribution, goal_id, amount, user_id, date, notes)

    def dismiss_alert(self, alert_id) -> Ledger:
        """Dismiss an alert.

        Alerts are not re-checked here; a dismissed alert comes back only
        after a later change still leaves the category over its limit.
        """
        return self._apply(ops.dismiss_alert, (alert_id,), {}, refresh_alerts=False)

    def complete_onboarding(self, household, users, income_sources, categories) -> Ledger:
        return self.apply(ops.complete_onboarding, household, users, income_sources, categories)

    def set_current_month(self, month) -> Ledger:
        return self.apply(ops.set_current_month, month)
