"""Top-level package for the household budget engine.

The primary modules are:

* ``ledger`` – the immutable ledger snapshot and its mutation functions
* ``service`` – ``LedgerService``, the session object holding the current
  ledger, refreshing alerts and persisting changes
* ``storage`` – JSON record store for the persisted ledger
* ``lib`` – budget, analytics and transaction calculations
* ``export`` – CSV report builders
* ``visualization`` – functions that generate Plotly figures

A typical session:

```python
from household_budget import LedgerService, LedgerStore

service = LedgerService(LedgerStore())
service.add_category('Groceries', 400, carry_over_enabled=True)
print(service.budget_summary())
```
"""

from . import data_processing  # noqa: F401  # re-exported for convenience
from . import visualization  # noqa: F401  # re-exported for convenience
from .exceptions import (
    BudgetError,
    DeleteGuardError,
    InvalidMonthError,
    LedgerValidationError,
    RecordNotFoundError,
    StaleLedgerError,
)
from .ledger import Ledger
from .service import LedgerService
from .storage import LedgerStore

__version__ = "0.1.0"

__all__ = [
    "data_processing",
    "visualization",
    "Ledger",
    "LedgerService",
    "LedgerStore",
    "BudgetError",
    "DeleteGuardError",
    "InvalidMonthError",
    "LedgerValidationError",
    "RecordNotFoundError",
    "StaleLedgerError",
]
