"""Domain records owned by the budget ledger.

All records are frozen dataclasses; a change always produces a new record
via :func:`dataclasses.replace`.  Collections inside records are tuples so
that snapshots can be shared safely.  Each record maps to and from the
JSON shape stored in the record store through ``to_dict``/``from_dict``.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, is_dataclass
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Tuple


class Currency(str, Enum):
    USD = 'USD'
    EUR = 'EUR'
    GBP = 'GBP'
    NGN = 'NGN'
    CAD = 'CAD'
    AUD = 'AUD'


class Role(str, Enum):
    PRIMARY = 'primary'
    MEMBER = 'member'


class NeedsOrWants(str, Enum):
    NEEDS = 'needs'
    WANTS = 'wants'


class AlertType(str, Enum):
    CATEGORY_WARNING = 'category_warning'
    CATEGORY_EXCEEDED = 'category_exceeded'
    TOTAL_EXCEEDED = 'total_exceeded'
    INFO = 'info'


class Severity(str, Enum):
    INFO = 'info'
    WARNING = 'warning'
    DANGER = 'danger'


def to_jsonable(value: Any) -> Any:
    """Convert records, enums and tuples into plain JSON types."""
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {key: to_jsonable(item) for key, item in value.items()}
    return value


def _optional(convert: Callable[[Any], Any]) -> Callable[[Any], Any]:
    return lambda value: None if value is None else convert(value)


class Record:
    """Mixin adding JSON mapping to the record dataclasses.

    ``_converters`` maps field names to callables applied to raw JSON
    values in :meth:`from_dict`.  Unknown keys are ignored so that older
    code can read records written by newer versions.
    """

    _converters: ClassVar[Dict[str, Callable[[Any], Any]]] = {}

    def to_dict(self) -> Dict[str, Any]:
        return to_jsonable(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]):
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for name, value in data.items():
            if name not in known:
                continue
            convert = cls._converters.get(name)
            kwargs[name] = convert(value) if convert else value
        return cls(**kwargs)


@dataclass(frozen=True)
class Household(Record):
    id: str
    name: str
    currency: Currency = Currency.USD
    created_at: str = ''
    updated_at: str = ''

    _converters: ClassVar[Dict[str, Callable[[Any], Any]]] = {'currency': Currency}


@dataclass(frozen=True)
class Member(Record):
    id: str
    name: str
    email: str
    role: Role = Role.MEMBER
    household_id: str = ''
    created_at: str = ''

    _converters: ClassVar[Dict[str, Callable[[Any], Any]]] = {'role': Role}


@dataclass(frozen=True)
class IncomeSource(Record):
    id: str
    name: str
    description: Optional[str] = None
    created_at: str = ''


@dataclass(frozen=True)
class Category(Record):
    """Recurring budget template applied when a month is materialized."""

    id: str
    name: str
    monthly_budget: float
    carry_over_enabled: bool = False
    icon: Optional[str] = None
    color: Optional[str] = None
    created_at: str = ''

    _converters: ClassVar[Dict[str, Callable[[Any], Any]]] = {
        'monthly_budget': float,
        'carry_over_enabled': bool,
    }


@dataclass(frozen=True)
class MonthlyCategory(Record):
    """One category's budget for one month."""

    id: str
    category_id: str
    category_name: str
    monthly_budget: float
    carry_over_amount: float = 0.0
    month: str = ''
    created_at: str = ''

    _converters: ClassVar[Dict[str, Callable[[Any], Any]]] = {
        'monthly_budget': float,
        'carry_over_amount': float,
    }

    @property
    def available(self) -> float:
        return self.monthly_budget + self.carry_over_amount


@dataclass(frozen=True)
class Revision(Record):
    """A prior version of an income or expense.

    Nothing populates revisions yet; the slot is kept so stored records
    round-trip unchanged.
    """

    id: str
    original_id: str
    amount: float
    reference_id: str
    date: str
    notes: Optional[str] = None
    needs_or_wants: Optional[NeedsOrWants] = None
    edited_at: str = ''
    edited_by: str = ''

    _converters: ClassVar[Dict[str, Callable[[Any], Any]]] = {
        'amount': float,
        'needs_or_wants': _optional(NeedsOrWants),
    }


def _revisions(values: Any) -> Tuple[Revision, ...]:
    return tuple(Revision.from_dict(item) for item in values or ())


@dataclass(frozen=True)
class Income(Record):
    id: str
    amount: float
    source_id: str
    source_name: str
    user_id: str
    user_name: str
    date: str
    notes: Optional[str] = None
    created_at: str = ''
    created_by: str = ''
    revisions: Tuple[Revision, ...] = ()

    _converters: ClassVar[Dict[str, Callable[[Any], Any]]] = {
        'amount': float,
        'revisions': _revisions,
    }


@dataclass(frozen=True)
class Expense(Record):
    id: str
    amount: float
    category_id: str
    category_name: str
    needs_or_wants: NeedsOrWants
    user_id: str
    user_name: str
    date: str
    notes: Optional[str] = None
    created_at: str = ''
    created_by: str = ''
    revisions: Tuple[Revision, ...] = ()

    _converters: ClassVar[Dict[str, Callable[[Any], Any]]] = {
        'amount': float,
        'needs_or_wants': NeedsOrWants,
        'revisions': _revisions,
    }


@dataclass(frozen=True)
class SavingsGoal(Record):
    id: str
    name: str
    target_amount: float
    current_amount: float = 0.0
    deadline: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    created_at: str = ''
    updated_at: str = ''

    _converters: ClassVar[Dict[str, Callable[[Any], Any]]] = {
        'target_amount': float,
        'current_amount': float,
    }


@dataclass(frozen=True)
class SavingsContribution(Record):
    id: str
    goal_id: str
    amount: float
    user_id: str
    user_name: str
    date: str
    notes: Optional[str] = None
    created_at: str = ''

    _converters: ClassVar[Dict[str, Callable[[Any], Any]]] = {'amount': float}


@dataclass(frozen=True)
class Alert(Record):
    id: str
    type: AlertType
    severity: Severity
    message: str
    category_id: Optional[str] = None
    dismissed: bool = False
    created_at: str = ''

    _converters: ClassVar[Dict[str, Callable[[Any], Any]]] = {
        'type': AlertType,
        'severity': Severity,
        'dismissed': bool,
    }

    def blocks(self, alert_type: AlertType, category_id: Optional[str]) -> bool:
        """True when this alert is a live duplicate of ``(alert_type, category_id)``."""
        return not self.dismissed and self.type == alert_type and self.category_id == category_id
