"""Engine settings files and loaders.

Settings are stored in JSON files next to this module so thresholds and
weights can be tuned without code changes.
"""

from .defaults import (
    clear_config_cache,
    currency_symbol,
    get_budget_config,
    get_config_value,
    load_config,
)

__all__ = ['load_config', 'clear_config_cache', 'get_budget_config', 'get_config_value', 'currency_symbol']
