"""Derived calculations over ledger records.

The subpackages hold pure functions only; none of them read or write
storage:

- ``budgets`` - carry-over, monthly summary, category spending and alerts
- ``analytics`` - trends and breakdowns over a range of months
- ``transactions`` - unified transaction list, filtering, sorting and stats
- ``common`` - formatting and filename helpers
"""
