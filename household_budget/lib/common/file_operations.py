"""Filesystem helpers for record keys and report directories."""

from __future__ import annotations

import re
from pathlib import Path

_UNSAFE = re.compile(r'[^\w\- ]')


def safe_filename(name: str, default: str = 'file') -> str:
    """Turn a record key into a file stem.

    Letters, digits, ``_`` and ``-`` are kept, runs of spaces and
    underscores collapse to one ``_``, anything else is dropped.

    Example:
        >>> safe_filename("My Budget 2024!")
        'My_Budget_2024'
        >>> safe_filename("../", default="ledger")
        'ledger'
    """
    stem = re.sub(r'[\s_]+', '_', _UNSAFE.sub('', name or '').strip())
    return stem.strip('_') or default


def ensure_directory(path: Path) -> Path:
    """Create ``path`` and its parents if needed; returns ``path``."""
    path.mkdir(parents=True, exist_ok=True)
    return path
