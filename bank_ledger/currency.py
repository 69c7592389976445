"""
Currency Support Module

Currency codes, display symbols and Decimal conversion helpers. Amounts are
carried as Decimal; rounding to the currency precision happens only when an
amount is surfaced for display.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from enum import Enum
from typing import Union

Amount = Union[Decimal, int, float, str]


class Currency(Enum):
    """ISO 4217 currency codes with precision and display symbol"""
    INR = ("INR", 2, "₹")  # Indian Rupee
    USD = ("USD", 2, "$")  # US Dollar
    EUR = ("EUR", 2, "€")  # Euro
    GBP = ("GBP", 2, "£")  # British Pound
    
    def __init__(self, code: str, precision: int, symbol: str):
        self.code = code
        self.precision = precision
        self.symbol = symbol


DEFAULT_CURRENCY = Currency.INR


def to_decimal(value: Amount) -> Decimal:
    """
    Convert a numeric value to Decimal
    
    Floats go through their string form so 0.1 stays 0.1.
    
    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise ValueError(f"Cannot convert {value!r} to Decimal")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            raise ValueError(f"Cannot convert '{value}' to Decimal") from None
    else:
        raise ValueError(f"Cannot convert {value!r} to Decimal")
    
    if not result.is_finite():
        raise ValueError(f"Amount must be a finite number, got '{value}'")
    return result


def round_amount(amount: Decimal, currency: Currency = DEFAULT_CURRENCY) -> Decimal:
    """Round to currency precision"""
    return amount.quantize(
        Decimal('0.1') ** currency.precision,
        rounding=ROUND_HALF_UP
    )


def format_amount(amount: Amount, currency: Currency = DEFAULT_CURRENCY) -> str:
    """Format an amount to the currency precision, without symbol"""
    rounded = round_amount(to_decimal(amount), currency)
    return f"{rounded:.{currency.precision}f}"


def format_money(amount: Amount, currency: Currency = DEFAULT_CURRENCY) -> str:
    """Format an amount for display, e.g. ₹1080.00"""
    return f"{currency.symbol}{format_amount(amount, currency)}"


def currency_from_code(code: str) -> Currency:
    """Look up a currency by its ISO code"""
    try:
        return Currency[code.upper()]
    except KeyError:
        raise ValueError(f"Unsupported currency code: {code}") from None
