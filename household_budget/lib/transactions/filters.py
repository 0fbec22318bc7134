"""Filtering and sorting of unified transactions.

:class:`TransactionFilters` turns each of its set fields into one
predicate and :func:`filter_transactions` keeps the transactions that pass
all of them.  Unset fields add no predicate, so an empty filter keeps
everything.  Sorting uses a fixed key table per :class:`SortField`.
"""

from __future__ import annotations

import locale
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from ...models import NeedsOrWants
from .unify import TransactionType, UnifiedTransaction

Predicate = Callable[[UnifiedTransaction], bool]


@dataclass(frozen=True)
class DateRange:
    """Inclusive ISO date bounds; either side may be open."""

    start: Optional[str] = None
    end: Optional[str] = None


@dataclass(frozen=True)
class AmountRange:
    """Inclusive amount bounds; either side may be open."""

    min: Optional[float] = None
    max: Optional[float] = None


@dataclass(frozen=True)
class TransactionFilters:
    type: Optional[TransactionType] = None
    date_range: Optional[DateRange] = None
    category_or_source_ids: Sequence[str] = ()
    user_ids: Sequence[str] = ()
    amount_range: Optional[AmountRange] = None
    needs_or_wants: Optional[NeedsOrWants] = None
    search_text: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TransactionFilters':
        """Build filters from loosely typed input; ``'all'`` means unset."""
        tx_type = data.get('type')
        needs = data.get('needs_or_wants')
        date_range = data.get('date_range')
        amount_range = data.get('amount_range')
        return cls(
            type=TransactionType(tx_type) if tx_type and tx_type != 'all' else None,
            date_range=DateRange(**date_range) if date_range else None,
            category_or_source_ids=tuple(data.get('category_or_source_ids') or ()),
            user_ids=tuple(data.get('user_ids') or ()),
            amount_range=AmountRange(**amount_range) if amount_range else None,
            needs_or_wants=NeedsOrWants(needs) if needs and needs != 'all' else None,
            search_text=data.get('search_text'),
        )

    def predicates(self) -> List[Predicate]:
        checks: List[Predicate] = []

        if self.type is not None:
            checks.append(lambda t: t.type == self.type)

        if self.date_range is not None:
            start, end = self.date_range.start, self.date_range.end
            if start:
                checks.append(lambda t: t.date >= start)
            if end:
                checks.append(lambda t: t.date <= end)

        if self.category_or_source_ids:
            ids = set(self.category_or_source_ids)
            checks.append(lambda t: t.category_or_source_id in ids)

        if self.user_ids:
            users = set(self.user_ids)
            checks.append(lambda t: t.user_id in users)

        if self.amount_range is not None:
            low, high = self.amount_range.min, self.amount_range.max
            if low is not None:
                checks.append(lambda t: t.amount >= low)
            if high is not None:
                checks.append(lambda t: t.amount <= high)

        if self.needs_or_wants is not None:
            # incomes carry no needs/wants and always pass
            checks.append(
                lambda t: t.type != TransactionType.EXPENSE or t.needs_or_wants == self.needs_or_wants
            )

        search = (self.search_text or '').lower().strip()
        if search:
            checks.append(lambda t: search in _searchable_text(t))

        return checks


def _searchable_text(transaction: UnifiedTransaction) -> str:
    return ' '.join(
        [transaction.category_or_source, transaction.user_name, transaction.notes or '']
    ).lower()


def filter_transactions(
    transactions: Iterable[UnifiedTransaction], filters: TransactionFilters
) -> List[UnifiedTransaction]:
    checks = filters.predicates()
    return [t for t in transactions if all(check(t) for check in checks)]


class SortField(str, Enum):
    DATE = 'date'
    AMOUNT = 'amount'
    CATEGORY_OR_SOURCE = 'category_or_source'
    USER_NAME = 'user_name'


class SortDirection(str, Enum):
    ASC = 'asc'
    DESC = 'desc'


@dataclass(frozen=True)
class TransactionSort:
    field: SortField = SortField.DATE
    direction: SortDirection = SortDirection.DESC


def _collate(text: str) -> str:
    return locale.strxfrm(text.casefold())


SORT_KEYS: Dict[SortField, Callable[[UnifiedTransaction], Any]] = {
    SortField.DATE: lambda t: t.date,
    SortField.AMOUNT: lambda t: t.amount,
    SortField.CATEGORY_OR_SOURCE: lambda t: _collate(t.category_or_source),
    SortField.USER_NAME: lambda t: _collate(t.user_name),
}


def sort_transactions(
    transactions: Iterable[UnifiedTransaction], sort: TransactionSort
) -> List[UnifiedTransaction]:
    """Stable sort by one field; tied transactions keep their input order."""
    key = SORT_KEYS[SortField(sort.field)]
    descending = SortDirection(sort.direction) == SortDirection.DESC
    return sorted(transactions, key=key, reverse=descending)
