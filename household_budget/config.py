"""Configuration management for the household budget engine.

This module centralizes all configuration values including paths,
defaults, and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

# Base project root - assumes this file is in household_budget/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("HOUSEHOLD_BUDGET_DATA_DIR", _PROJECT_ROOT / "data"))
STORE_DIR = Path(os.getenv("HOUSEHOLD_BUDGET_STORE_DIR", DATA_DIR / "store"))
REPORTS_DIR = DATA_DIR / "reports"

# Single constant key the ledger record is stored under
STORAGE_KEY = os.getenv("HOUSEHOLD_BUDGET_STORAGE_KEY", "household-budget-data")


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, STORE_DIR, REPORTS_DIR]:
        directory.mkdir(parents=True, exist_ok=True)
