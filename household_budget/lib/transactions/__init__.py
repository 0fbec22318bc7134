"""Transaction history utilities.

This module provides:
- A unified transaction shape over incomes and expenses
- Composable filters and a fixed sort key table
- Summary statistics and filter-form options
"""

from .unify import TransactionType, UnifiedTransaction, combine_transactions
from .filters import (
    AmountRange,
    DateRange,
    SortDirection,
    SortField,
    TransactionFilters,
    TransactionSort,
    filter_transactions,
    sort_transactions,
)
from .stats import TransactionStats, calculate_transaction_stats, get_filter_options

__all__ = [
    # Unify
    'TransactionType',
    'UnifiedTransaction',
    'combine_transactions',
    # Filters and sorting
    'AmountRange',
    'DateRange',
    'SortDirection',
    'SortField',
    'TransactionFilters',
    'TransactionSort',
    'filter_transactions',
    'sort_transactions',
    # Stats
    'TransactionStats',
    'calculate_transaction_stats',
    'get_filter_options',
]
