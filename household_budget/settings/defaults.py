"""Engine settings read from the JSON files next to this module.

``budget.json`` holds the alert thresholds, the health-score weights and
bands, the analytics defaults and the currency symbols.  Parsed files are
cached per path; call :func:`clear_config_cache` after editing one.
"""

from __future__ import annotations

import copy
import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

CONFIG_DIR = Path(__file__).parent


@lru_cache(maxsize=None)
def _read_settings_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")
    with path.open('r', encoding='utf-8') as handle:
        return json.load(handle)


def clear_config_cache() -> None:
    _read_settings_file.cache_clear()


def load_config(config_name: str) -> Dict[str, Any]:
    """Return a copy of the settings stored in ``<config_name>.json``.

    Raises:
        FileNotFoundError: If there is no such settings file
        json.JSONDecodeError: If the file is not valid JSON
    """
    return copy.deepcopy(_read_settings_file(CONFIG_DIR / f"{config_name}.json"))


def get_budget_config() -> Dict[str, Any]:
    return load_config('budget')


def get_config_value(config_name: str, *keys: str, default: Any = None) -> Any:
    """Look up a nested setting, falling back to ``default``.

    Example:
        >>> get_config_value('budget', 'analytics', 'top_categories_limit')
        5
    """
    try:
        value = _read_settings_file(CONFIG_DIR / f"{config_name}.json")
    except FileNotFoundError:
        return default
    for key in keys:
        if not isinstance(value, dict) or key not in value:
            return default
        value = value[key]
    return copy.deepcopy(value)


def currency_symbol(currency: str | None) -> str:
    """Display symbol for a currency code; ``$`` when the code is unknown."""
    symbols = get_config_value('budget', 'currency_symbols', default={}) or {}
    return symbols.get(currency or '', '$')
