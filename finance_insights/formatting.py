"""Formatting utilities for currency and percentage display."""

from __future__ import annotations

from typing import Union


def format_currency(amount: Union[float, int], include_sign: bool = True) -> str:
    """Format a currency amount with proper formatting.

    Args:
        amount: The amount to format
        include_sign: Whether to include the dollar sign

    Returns:
        Formatted currency string (e.g., "$1,234.56" or "1,234.56")

    Example:
        >>> format_currency(1234.56)
        '$1,234.56'
        >>> format_currency(-20)
        '-$20.00'
    """
    formatted = f"{abs(amount):,.2f}"
    prefix = '-' if amount < 0 else ''
    return f"{prefix}${formatted}" if include_sign else f"{prefix}{formatted}"


def format_signed_currency(amount: Union[float, int]) -> str:
    """Format a delta with an explicit sign.

    Example:
        >>> format_signed_currency(150)
        '+$150.00'
        >>> format_signed_currency(-75.5)
        '-$75.50'
    """
    if amount > 0:
        return f"+{format_currency(amount)}"
    return format_currency(amount)


def format_percentage(value: float) -> str:
    """Format a percentage value with one decimal place.

    Example:
        >>> format_percentage(42.345)
        '42.3%'
    """
    return f"{value:.1f}%"
