"""Formatting utilities for currency and percentage display."""

from __future__ import annotations

from typing import Union


def format_currency(amount: Union[float, int], include_sign: bool = True, symbol: str = '$') -> str:
    """Format a currency amount with thousands separators and two decimals.
    
    Args:
        amount: The amount to format
        include_sign: Whether to prefix the currency symbol
        symbol: Currency symbol to use
        
    Returns:
        Formatted currency string (e.g., "$1,234.56" or "1,234.56")
        
    Example:
        >>> format_currency(1234.56)
        '$1,234.56'
        >>> format_currency(1234.56, symbol='₦')
        '₦1,234.56'
        >>> format_currency(1234.56, include_sign=False)
        '1,234.56'
    """
    formatted = f"{amount:,.2f}"
    return f"{symbol}{formatted}" if include_sign else formatted


def format_amount(amount: Union[float, int]) -> str:
    """Plain two-decimal amount for machine-readable output such as CSV."""
    return f"{amount:.2f}"


def format_percentage(value: Union[float, int]) -> str:
    """One-decimal percentage without the sign.

    Example:
        >>> format_percentage(12.345)
        '12.3'
    """
    return f"{value:.1f}"
