"""
Interest Calculation Module

Simple (non-compounding) annual interest on a principal balance.
"""

from decimal import Decimal

from .currency import Amount, to_decimal


def calculate_simple_interest(principal: Amount, annual_rate: Amount, years: int) -> Decimal:
    """
    Simple interest: principal * rate * years / 100

    Args:
        principal: Balance interest is earned on
        annual_rate: Annual rate in percent (4.0 means 4%)
        years: Whole years; zero or negative earns nothing

    Returns:
        Interest amount (unrounded)
    """
    if years <= 0:
        return Decimal('0')
    return to_decimal(principal) * to_decimal(annual_rate) * Decimal(years) / Decimal('100')
