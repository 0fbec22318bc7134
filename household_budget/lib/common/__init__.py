"""Common utilities shared across the engine.

This module provides formatting and file helpers used by storage, alerts
and export.
"""

from .formatting import format_amount, format_currency, format_percentage
from .file_operations import ensure_directory, safe_filename

__all__ = [
    'format_amount',
    'format_currency',
    'format_percentage',
    'ensure_directory',
    'safe_filename',
]
