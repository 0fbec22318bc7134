"""The budget ledger snapshot and its mutation operations.

A :class:`Ledger` is an immutable value holding every record of one
household.  Mutation functions take the current ledger and return a new
one with ``revision`` incremented; the input is never modified.  Input is
validated and referential guards are checked before anything changes, so a
rejected mutation leaves the caller's ledger exactly as it was.

Denormalized names (``source_name``, ``category_name``, ``user_name``) are
snapshots taken when a record is written.  Renaming a category later does
not rewrite the labels of old transactions.
"""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass, field, replace
from datetime import date as _date
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, TypeVar

from .exceptions import DeleteGuardError, LedgerValidationError, RecordNotFoundError
from .lib.budgets.carry_over import calculate_carry_overs
from .models import (
    Alert,
    AlertType,
    Category,
    Currency,
    Expense,
    Household,
    Income,
    IncomeSource,
    Member,
    MonthlyCategory,
    NeedsOrWants,
    Role,
    SavingsContribution,
    SavingsGoal,
    Severity,
    to_jsonable,
)
from .months import current_month, parse_month

logger = logging.getLogger(__name__)

STORAGE_VERSION = 1

# Baseline for forward-compatible reads: any key missing from a stored
# record is taken from here.  ``None`` months are filled with the current
# month at load time.
INITIAL_STORAGE: Dict[str, Any] = {
    'version': STORAGE_VERSION,
    'revision': 0,
    'household': None,
    'users': [],
    'income_sources': [],
    'incomes': [],
    'categories': [],
    'monthly_categories': [],
    'expenses': [],
    'savings_goals': [],
    'savings_contributions': [],
    'alerts': [],
    'onboarding_completed': False,
    'current_month': None,
    'last_month_check': None,
}

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

T = TypeVar('T')


def generate_id() -> str:
    return uuid.uuid4().hex


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Ledger:
    """Snapshot of every record owned by one household."""

    version: int = STORAGE_VERSION
    revision: int = 0
    household: Optional[Household] = None
    users: Tuple[Member, ...] = ()
    income_sources: Tuple[IncomeSource, ...] = ()
    incomes: Tuple[Income, ...] = ()
    categories: Tuple[Category, ...] = ()
    monthly_categories: Tuple[MonthlyCategory, ...] = ()
    expenses: Tuple[Expense, ...] = ()
    savings_goals: Tuple[SavingsGoal, ...] = ()
    savings_contributions: Tuple[SavingsContribution, ...] = ()
    alerts: Tuple[Alert, ...] = ()
    onboarding_completed: bool = False
    current_month: str = field(default_factory=current_month)
    last_month_check: str = field(default_factory=_now)

    def to_dict(self) -> Dict[str, Any]:
        return to_jsonable(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Ledger':
        """Build a ledger from a stored record, defaulting absent keys."""
        merged = dict(INITIAL_STORAGE)
        merged.update({k: v for k, v in data.items() if k in INITIAL_STORAGE})
        household = merged['household']
        return cls(
            version=int(merged['version']),
            revision=int(merged['revision']),
            household=Household.from_dict(household) if household else None,
            users=tuple(Member.from_dict(u) for u in merged['users'] or ()),
            income_sources=tuple(IncomeSource.from_dict(s) for s in merged['income_sources'] or ()),
            incomes=tuple(Income.from_dict(i) for i in merged['incomes'] or ()),
            categories=tuple(Category.from_dict(c) for c in merged['categories'] or ()),
            monthly_categories=tuple(
                MonthlyCategory.from_dict(mc) for mc in merged['monthly_categories'] or ()
            ),
            expenses=tuple(Expense.from_dict(e) for e in merged['expenses'] or ()),
            savings_goals=tuple(SavingsGoal.from_dict(g) for g in merged['savings_goals'] or ()),
            savings_contributions=tuple(
                SavingsContribution.from_dict(c) for c in merged['savings_contributions'] or ()
            ),
            alerts=tuple(Alert.from_dict(a) for a in merged['alerts'] or ()),
            onboarding_completed=bool(merged['onboarding_completed']),
            current_month=merged['current_month'] or current_month(),
            last_month_check=merged['last_month_check'] or _now(),
        )

    def member(self, member_id: str) -> Member:
        return _find(self.users, member_id, 'Member')

    def income_source(self, source_id: str) -> IncomeSource:
        return _find(self.income_sources, source_id, 'Income source')

    def category(self, category_id: str) -> Category:
        return _find(self.categories, category_id, 'Category')

    def savings_goal(self, goal_id: str) -> SavingsGoal:
        return _find(self.savings_goals, goal_id, 'Savings goal')

    def is_month_materialized(self, month: str) -> bool:
        return any(mc.month == month for mc in self.monthly_categories)


def _find(items: Iterable[T], record_id: str, label: str) -> T:
    for item in items:
        if item.id == record_id:
            return item
    raise RecordNotFoundError(f"{label} '{record_id}' not found")


def _replace_by_id(items: Sequence[T], record_id: str, updated: T) -> Tuple[T, ...]:
    return tuple(updated if item.id == record_id else item for item in items)


def _without_id(items: Sequence[T], record_id: str, label: str) -> Tuple[T, ...]:
    _find(items, record_id, label)
    return tuple(item for item in items if item.id != record_id)


def _commit(ledger: Ledger, **changes: Any) -> Ledger:
    return replace(ledger, revision=ledger.revision + 1, **changes)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _require_text(value: Optional[str], label: str) -> str:
    if value is None or not str(value).strip():
        raise LedgerValidationError(f"{label} is required")
    return str(value).strip()


def _require_amount(value: Any, label: str = 'Amount') -> float:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise LedgerValidationError(f"{label} must be a number") from None
    if amount <= 0:
        raise LedgerValidationError(f"{label} must be greater than zero")
    return amount


def _require_budget(value: Any) -> float:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise LedgerValidationError("Monthly budget must be a number") from None
    if amount < 0:
        raise LedgerValidationError("Monthly budget cannot be negative")
    return amount


def _require_date(value: Optional[str]) -> str:
    text = _require_text(value, 'Date')
    try:
        _date.fromisoformat(text)
    except ValueError:
        raise LedgerValidationError(f"Date '{text}' must be YYYY-MM-DD") from None
    return text


def _require_email(value: Optional[str]) -> str:
    email = _require_text(value, 'Email')
    if not EMAIL_PATTERN.match(email):
        raise LedgerValidationError(f"Email '{email}' is not valid")
    return email


def _require_enum(enum_cls, value: Any, label: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ', '.join(item.value for item in enum_cls)
        raise LedgerValidationError(f"{label} must be one of: {allowed}") from None


def _clean_notes(notes: Optional[str]) -> Optional[str]:
    if notes is None:
        return None
    notes = notes.strip()
    return notes or None


def _check_unknown(updates: Mapping[str, Any], allowed: Iterable[str]) -> None:
    unknown = set(updates) - set(allowed)
    if unknown:
        raise LedgerValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")


# ---------------------------------------------------------------------------
# Household and members
# ---------------------------------------------------------------------------


def set_household(ledger: Ledger, name: str, currency: Currency | str = Currency.USD) -> Ledger:
    """Create the household or edit its name and currency."""
    name = _require_text(name, 'Household name')
    currency = _require_enum(Currency, currency, 'Currency')
    timestamp = _now()
    if ledger.household is None:
        household = Household(
            id=generate_id(), name=name, currency=currency, created_at=timestamp, updated_at=timestamp
        )
    else:
        household = replace(ledger.household, name=name, currency=currency, updated_at=timestamp)
    return _commit(ledger, household=household)


def add_member(ledger: Ledger, name: str, email: str, role: Role | str = Role.MEMBER) -> Ledger:
    member = Member(
        id=generate_id(),
        name=_require_text(name, 'Member name'),
        email=_require_email(email),
        role=_require_enum(Role, role, 'Role'),
        household_id=ledger.household.id if ledger.household else '',
        created_at=_now(),
    )
    return _commit(ledger, users=ledger.users + (member,))


def update_member(ledger: Ledger, member_id: str, **updates: Any) -> Ledger:
    """Edit a member's name, email or role.

    Demoting the only primary member is rejected.
    """
    _check_unknown(updates, {'name', 'email', 'role'})
    member = ledger.member(member_id)
    changes: Dict[str, Any] = {}
    if 'name' in updates:
        changes['name'] = _require_text(updates['name'], 'Member name')
    if 'email' in updates:
        changes['email'] = _require_email(updates['email'])
    if 'role' in updates:
        changes['role'] = _require_enum(Role, updates['role'], 'Role')
        if member.role == Role.PRIMARY and changes['role'] != Role.PRIMARY:
            others = [u for u in ledger.users if u.id != member_id and u.role == Role.PRIMARY]
            if not others:
                raise DeleteGuardError(
                    'Cannot remove the primary role from the only primary member. '
                    'Assign the primary role to another member first.'
                )
    return _commit(ledger, users=_replace_by_id(ledger.users, member_id, replace(member, **changes)))


def delete_member(ledger: Ledger, member_id: str) -> Ledger:
    member = ledger.member(member_id)
    if len(ledger.users) <= 1:
        logger.info("Rejected delete of last member %s", member_id)
        raise DeleteGuardError('Cannot delete the last member. At least one member is required.')
    if member.role == Role.PRIMARY:
        logger.info("Rejected delete of primary member %s", member_id)
        raise DeleteGuardError(
            'Cannot delete the primary member. Please assign primary role to another member first.'
        )
    return _commit(ledger, users=_without_id(ledger.users, member_id, 'Member'))


# ---------------------------------------------------------------------------
# Income sources
# ---------------------------------------------------------------------------


def _check_source_name_unique(ledger: Ledger, name: str, exclude_id: Optional[str] = None) -> None:
    lowered = name.lower()
    for source in ledger.income_sources:
        if source.id != exclude_id and source.name.lower() == lowered:
            raise LedgerValidationError('An income source with this name already exists')


def add_income_source(ledger: Ledger, name: str, description: Optional[str] = None) -> Ledger:
    name = _require_text(name, 'Income source name')
    _check_source_name_unique(ledger, name)
    source = IncomeSource(
        id=generate_id(), name=name, description=_clean_notes(description), created_at=_now()
    )
    return _commit(ledger, income_sources=ledger.income_sources + (source,))


def update_income_source(ledger: Ledger, source_id: str, **updates: Any) -> Ledger:
    _check_unknown(updates, {'name', 'description'})
    source = ledger.income_source(source_id)
    changes: Dict[str, Any] = {}
    if 'name' in updates:
        changes['name'] = _require_text(updates['name'], 'Income source name')
        _check_source_name_unique(ledger, changes['name'], exclude_id=source_id)
    if 'description' in updates:
        changes['description'] = _clean_notes(updates['description'])
    updated = replace(source, **changes)
    return _commit(ledger, income_sources=_replace_by_id(ledger.income_sources, source_id, updated))


def delete_income_source(ledger: Ledger, source_id: str) -> Ledger:
    ledger.income_source(source_id)
    related = [i for i in ledger.incomes if i.source_id == source_id]
    if related:
        raise DeleteGuardError(
            f"Cannot delete this income source. It has {len(related)} income record(s) "
            "associated with it. Please delete those records first."
        )
    return _commit(ledger, income_sources=_without_id(ledger.income_sources, source_id, 'Income source'))


# ---------------------------------------------------------------------------
# Income and expenses
# ---------------------------------------------------------------------------


def add_income(
    ledger: Ledger,
    amount: float,
    source_id: str,
    user_id: str,
    date: str,
    notes: Optional[str] = None,
    created_by: Optional[str] = None,
) -> Ledger:
    source = ledger.income_source(_require_text(source_id, 'Income source'))
    member = ledger.member(_require_text(user_id, 'Member'))
    income = Income(
        id=generate_id(),
        amount=_require_amount(amount),
        source_id=source.id,
        source_name=source.name,
        user_id=member.id,
        user_name=member.name,
        date=_require_date(date),
        notes=_clean_notes(notes),
        created_at=_now(),
        created_by=created_by or member.id,
    )
    return _commit(ledger, incomes=ledger.incomes + (income,))


def update_income(ledger: Ledger, income_id: str, **updates: Any) -> Ledger:
    """Edit an income in place.  Revisions are left untouched."""
    _check_unknown(updates, {'amount', 'source_id', 'user_id', 'date', 'notes'})
    income = _find(ledger.incomes, income_id, 'Income')
    changes: Dict[str, Any] = {}
    if 'amount' in updates:
        changes['amount'] = _require_amount(updates['amount'])
    if 'source_id' in updates:
        source = ledger.income_source(updates['source_id'])
        changes.update(source_id=source.id, source_name=source.name)
    if 'user_id' in updates:
        member = ledger.member(updates['user_id'])
        changes.update(user_id=member.id, user_name=member.name)
    if 'date' in updates:
        changes['date'] = _require_date(updates['date'])
    if 'notes' in updates:
        changes['notes'] = _clean_notes(updates['notes'])
    updated = replace(income, **changes)
    return _commit(ledger, incomes=_replace_by_id(ledger.incomes, income_id, updated))


def delete_income(ledger: Ledger, income_id: str) -> Ledger:
    return _commit(ledger, incomes=_without_id(ledger.incomes, income_id, 'Income'))


def add_expense(
    ledger: Ledger,
    amount: float,
    category_id: str,
    needs_or_wants: NeedsOrWants | str,
    user_id: str,
    date: str,
    notes: Optional[str] = None,
    created_by: Optional[str] = None,
) -> Ledger:
    category = ledger.category(_require_text(category_id, 'Category'))
    member = ledger.member(_require_text(user_id, 'Member'))
    expense = Expense(
        id=generate_id(),
        amount=_require_amount(amount),
        category_id=category.id,
        category_name=category.name,
        needs_or_wants=_require_enum(NeedsOrWants, needs_or_wants, 'Needs or wants'),
        user_id=member.id,
        user_name=member.name,
        date=_require_date(date),
        notes=_clean_notes(notes),
        created_at=_now(),
        created_by=created_by or member.id,
    )
    return _commit(ledger, expenses=ledger.expenses + (expense,))


def update_expense(ledger: Ledger, expense_id: str, **updates: Any) -> Ledger:
    """Edit an expense in place.  Revisions are left untouched."""
    _check_unknown(updates, {'amount', 'category_id', 'needs_or_wants', 'user_id', 'date', 'notes'})
    expense = _find(ledger.expenses, expense_id, 'Expense')
    changes: Dict[str, Any] = {}
    if 'amount' in updates:
        changes['amount'] = _require_amount(updates['amount'])
    if 'category_id' in updates:
        category = ledger.category(updates['category_id'])
        changes.update(category_id=category.id, category_name=category.name)
    if 'needs_or_wants' in updates:
        changes['needs_or_wants'] = _require_enum(NeedsOrWants, updates['needs_or_wants'], 'Needs or wants')
    if 'user_id' in updates:
        member = ledger.member(updates['user_id'])
        changes.update(user_id=member.id, user_name=member.name)
    if 'date' in updates:
        changes['date'] = _require_date(updates['date'])
    if 'notes' in updates:
        changes['notes'] = _clean_notes(updates['notes'])
    updated = replace(expense, **changes)
    return _commit(ledger, expenses=_replace_by_id(ledger.expenses, expense_id, updated))


def delete_expense(ledger: Ledger, expense_id: str) -> Ledger:
    return _commit(ledger, expenses=_without_id(ledger.expenses, expense_id, 'Expense'))


# ---------------------------------------------------------------------------
# Categories and monthly budgets
# ---------------------------------------------------------------------------


def add_category(
    ledger: Ledger,
    name: str,
    monthly_budget: float,
    carry_over_enabled: bool = False,
    icon: Optional[str] = None,
    color: Optional[str] = None,
) -> Ledger:
    category = Category(
        id=generate_id(),
        name=_require_text(name, 'Category name'),
        monthly_budget=_require_budget(monthly_budget),
        carry_over_enabled=bool(carry_over_enabled),
        icon=icon,
        color=color,
        created_at=_now(),
    )
    return _commit(ledger, categories=ledger.categories + (category,))


def update_category(ledger: Ledger, category_id: str, **updates: Any) -> Ledger:
    """Edit a category template.

    Already materialized months keep their own budget and name snapshot.
    """
    _check_unknown(updates, {'name', 'monthly_budget', 'carry_over_enabled', 'icon', 'color'})
    category = ledger.category(category_id)
    changes: Dict[str, Any] = {}
    if 'name' in updates:
        changes['name'] = _require_text(updates['name'], 'Category name')
    if 'monthly_budget' in updates:
        changes['monthly_budget'] = _require_budget(updates['monthly_budget'])
    if 'carry_over_enabled' in updates:
        changes['carry_over_enabled'] = bool(updates['carry_over_enabled'])
    for key in ('icon', 'color'):
        if key in updates:
            changes[key] = updates[key]
    updated = replace(category, **changes)
    return _commit(ledger, categories=_replace_by_id(ledger.categories, category_id, updated))


def update_monthly_category(ledger: Ledger, monthly_category_id: str, monthly_budget: float) -> Ledger:
    """Change one month's budget without touching the template."""
    row = _find(ledger.monthly_categories, monthly_category_id, 'Monthly category')
    updated = replace(row, monthly_budget=_require_budget(monthly_budget))
    return _commit(
        ledger,
        monthly_categories=_replace_by_id(ledger.monthly_categories, monthly_category_id, updated),
    )


def create_monthly_budgets_from_templates(
    ledger: Ledger,
    month: str,
    carry_over_amounts: Mapping[str, float],
) -> Ledger:
    parse_month(month)
    timestamp = _now()
    rows = tuple(
        MonthlyCategory(
            id=generate_id(),
            category_id=category.id,
            category_name=category.name,
            monthly_budget=category.monthly_budget,
            carry_over_amount=float(carry_over_amounts.get(category.id, 0.0)),
            month=month,
            created_at=timestamp,
        )
        for category in ledger.categories
    )
    return _commit(ledger, monthly_categories=ledger.monthly_categories + rows)


def create_monthly_budgets(ledger: Ledger, month: str) -> Ledger:
    """Materialize ``month`` from the category templates with carry-over."""
    parse_month(month)
    if ledger.is_month_materialized(month):
        raise LedgerValidationError(f"Budgets for {month} already exist")
    carry_overs = calculate_carry_overs(
        month, ledger.monthly_categories, ledger.expenses, ledger.categories
    )
    logger.info(
        "Materialized %d categories for %s (carry-over total %.2f)",
        len(ledger.categories), month, sum(carry_overs.values()),
    )
    return create_monthly_budgets_from_templates(ledger, month, carry_overs)


# ---------------------------------------------------------------------------
# Savings
# ---------------------------------------------------------------------------


def add_savings_goal(
    ledger: Ledger,
    name: str,
    target_amount: float,
    deadline: Optional[str] = None,
    icon: Optional[str] = None,
    color: Optional[str] = None,
) -> Ledger:
    timestamp = _now()
    goal = SavingsGoal(
        id=generate_id(),
        name=_require_text(name, 'Goal name'),
        target_amount=_require_amount(target_amount, 'Target amount'),
        current_amount=0.0,
        deadline=_require_date(deadline) if deadline else None,
        icon=icon,
        color=color,
        created_at=timestamp,
        updated_at=timestamp,
    )
    return _commit(ledger, savings_goals=ledger.savings_goals + (goal,))


def add_savings_contribution(
    ledger: Ledger,
    goal_id: str,
    amount: float,
    user_id: str,
    date: str,
    notes: Optional[str] = None,
) -> Ledger:
    """Record a contribution and raise the goal's current amount with it."""
    goal = ledger.savings_goal(goal_id)
    member = ledger.member(user_id)
    amount = _require_amount(amount)
    timestamp = _now()
    contribution = SavingsContribution(
        id=generate_id(),
        goal_id=goal.id,
        amount=amount,
        user_id=member.id,
        user_name=member.name,
        date=_require_date(date),
        notes=_clean_notes(notes),
        created_at=timestamp,
    )
    updated_goal = replace(goal, current_amount=goal.current_amount + amount, updated_at=timestamp)
    return _commit(
        ledger,
        savings_contributions=ledger.savings_contributions + (contribution,),
        savings_goals=_replace_by_id(ledger.savings_goals, goal.id, updated_goal),
    )


# ---------------------------------------------------------------------------
# Alerts
# ---------------------------------------------------------------------------


def add_alert(
    ledger: Ledger,
    alert_type: AlertType | str,
    severity: Severity | str,
    message: str,
    category_id: Optional[str] = None,
) -> Ledger:
    """Add an alert unless a live one with the same type and category exists."""
    alert_type = _require_enum(AlertType, alert_type, 'Alert type')
    if any(a.blocks(alert_type, category_id) for a in ledger.alerts):
        return ledger
    alert = Alert(
        id=generate_id(),
        type=alert_type,
        severity=_require_enum(Severity, severity, 'Severity'),
        message=_require_text(message, 'Message'),
        category_id=category_id,
        created_at=_now(),
    )
    return _commit(ledger, alerts=ledger.alerts + (alert,))


def append_alerts(ledger: Ledger, alerts: Sequence[Alert]) -> Ledger:
    """Store alerts returned by the alert engine."""
    if not alerts:
        return ledger
    return _commit(ledger, alerts=ledger.alerts + tuple(alerts))


def dismiss_alert(ledger: Ledger, alert_id: str) -> Ledger:
    alert = _find(ledger.alerts, alert_id, 'Alert')
    return _commit(ledger, alerts=_replace_by_id(ledger.alerts, alert_id, replace(alert, dismissed=True)))


def active_alerts(ledger: Ledger) -> List[Alert]:
    return [a for a in ledger.alerts if not a.dismissed]


# ---------------------------------------------------------------------------
# Onboarding and navigation
# ---------------------------------------------------------------------------


def complete_onboarding(
    ledger: Ledger,
    household: Household,
    users: Sequence[Member],
    income_sources: Sequence[IncomeSource],
    categories: Sequence[Category],
) -> Ledger:
    """Install the onboarding records and materialize the current month.

    The first month starts without carry-over.
    """
    if not users:
        raise LedgerValidationError('At least one member is required')
    if not any(u.role == Role.PRIMARY for u in users):
        raise LedgerValidationError('At least one member must have the primary role')
    timestamp = _now()
    rows = tuple(
        MonthlyCategory(
            id=generate_id(),
            category_id=category.id,
            category_name=category.name,
            monthly_budget=category.monthly_budget,
            carry_over_amount=0.0,
            month=ledger.current_month,
            created_at=timestamp,
        )
        for category in categories
    )
    return _commit(
        ledger,
        household=household,
        users=tuple(users),
        income_sources=tuple(income_sources),
        categories=tuple(categories),
        monthly_categories=ledger.monthly_categories + rows,
        onboarding_completed=True,
    )


def set_current_month(ledger: Ledger, month: str) -> Ledger:
    parse_month(month)
    return _commit(ledger, current_month=month, last_month_check=_now())


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


def get_monthly_data(ledger: Ledger, month: str) -> Dict[str, List[Any]]:
    """Incomes, expenses and monthly categories belonging to ``month``."""
    return {
        'incomes': [i for i in ledger.incomes if i.date.startswith(month)],
        'expenses': [e for e in ledger.expenses if e.date.startswith(month)],
        'categories': [c for c in ledger.monthly_categories if c.month == month],
    }


def select_records(
    ledger: Ledger,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    category_id: Optional[str] = None,
    user_id: Optional[str] = None,
) -> Dict[str, List[Any]]:
    """Incomes and expenses matching optional date, category and member bounds.

    The category bound only applies to expenses.
    """
    incomes = list(ledger.incomes)
    expenses = list(ledger.expenses)
    if start_date:
        incomes = [i for i in incomes if i.date >= start_date]
        expenses = [e for e in expenses if e.date >= start_date]
    if end_date:
        incomes = [i for i in incomes if i.date <= end_date]
        expenses = [e for e in expenses if e.date <= end_date]
    if category_id:
        expenses = [e for e in expenses if e.category_id == category_id]
    if user_id:
        incomes = [i for i in incomes if i.user_id == user_id]
        expenses = [e for e in expenses if e.user_id == user_id]
    return {'incomes': incomes, 'expenses': expenses}


def check_invariants(ledger: Ledger) -> List[str]:
    """Describe every invariant the ledger violates; empty when consistent."""
    problems: List[str] = []

    if ledger.onboarding_completed:
        if not ledger.users:
            problems.append('No members')
        elif not any(u.role == Role.PRIMARY for u in ledger.users):
            problems.append('No member holds the primary role')

    seen_names: Dict[str, str] = {}
    for source in ledger.income_sources:
        lowered = source.name.lower()
        if lowered in seen_names:
            problems.append(f"Duplicate income source name '{source.name}'")
        seen_names[lowered] = source.id

    source_ids = {s.id for s in ledger.income_sources}
    for income in ledger.incomes:
        if income.source_id not in source_ids:
            problems.append(f"Income {income.id} references missing income source {income.source_id}")
        if income.amount <= 0:
            problems.append(f"Income {income.id} has non-positive amount {income.amount}")
    for expense in ledger.expenses:
        if expense.amount <= 0:
            problems.append(f"Expense {expense.id} has non-positive amount {expense.amount}")

    materialized = set()
    for row in ledger.monthly_categories:
        try:
            parse_month(row.month)
        except ValueError:
            problems.append(f"Monthly category {row.id} has invalid month {row.month!r}")
        pair = (row.category_id, row.month)
        if pair in materialized:
            problems.append(f"Category {row.category_id} materialized twice for {row.month}")
        materialized.add(pair)

    for goal in ledger.savings_goals:
        contributed = sum(c.amount for c in ledger.savings_contributions if c.goal_id == goal.id)
        if abs(contributed - goal.current_amount) > 0.005:
            problems.append(
                f"Savings goal '{goal.name}' has current amount {goal.current_amount:.2f} "
                f"but contributions total {contributed:.2f}"
            )

    live = set()
    for alert in ledger.alerts:
        if alert.dismissed:
            continue
        pair = (alert.type, alert.category_id)
        if pair in live:
            problems.append(f"Duplicate live {alert.type.value} alert for {alert.category_id or 'household'}")
        live.add(pair)

    return problems
