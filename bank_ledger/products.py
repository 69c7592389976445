"""
Account Product Module

Policy objects that distinguish Savings from Current accounts: the
withdrawal constraint each enforces and whether the account earns
interest. Accounts hold one variant, fixed at creation.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from .config import BankLedgerConfig, get_config
from .currency import Amount, Currency, DEFAULT_CURRENCY, format_money, to_decimal
from .interest import calculate_simple_interest


class ProductType(Enum):
    """Banking product types"""
    SAVINGS = "savings"    # Minimum balance, earns interest
    CURRENT = "current"    # Overdraft facility, no interest

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_choice(cls, choice: Union[str, "ProductType"]) -> "ProductType":
        """
        Resolve a menu choice ("1"/"2") or a product name

        Raises:
            ValueError: If the choice names no product
        """
        if isinstance(choice, cls):
            return choice
        normalized = str(choice).strip().lower()
        by_menu = {"1": cls.SAVINGS, "2": cls.CURRENT}
        if normalized in by_menu:
            return by_menu[normalized]
        for product in cls:
            if product.value == normalized:
                return product
        raise ValueError(f"Unknown account type: {choice}")


class AccountVariant(ABC):
    """Withdrawal and interest policy for one product type"""

    product_type: ProductType

    def __init__(self, currency: Currency = DEFAULT_CURRENCY):
        self.currency = currency

    @property
    def display_name(self) -> str:
        return self.product_type.display_name

    @property
    def supports_interest(self) -> bool:
        return False

    @abstractmethod
    def withdrawal_allowed(self, balance: Decimal, amount: Decimal) -> bool:
        """Check whether withdrawing amount from balance respects the product's floor"""

    @abstractmethod
    def denial_message(self) -> str:
        """Explanation shown when a withdrawal is refused"""

    def calculate_interest(self, balance: Decimal, years: int) -> Decimal:
        """Interest earned over whole years; zero for products without interest"""
        return Decimal('0')

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class SavingsVariant(AccountVariant):
    """Savings account: minimum balance floor and simple annual interest"""

    product_type = ProductType.SAVINGS

    def __init__(
        self,
        minimum_balance: Amount = Decimal('500.00'),
        interest_rate: Amount = Decimal('4.0'),
        currency: Currency = DEFAULT_CURRENCY
    ):
        super().__init__(currency)
        self.minimum_balance = to_decimal(minimum_balance)
        self.interest_rate = to_decimal(interest_rate)

    @property
    def supports_interest(self) -> bool:
        return True

    def withdrawal_allowed(self, balance: Decimal, amount: Decimal) -> bool:
        return balance - amount >= self.minimum_balance

    def denial_message(self) -> str:
        return ("Withdrawal denied. Savings account must maintain minimum balance of "
                f"{format_money(self.minimum_balance, self.currency)}")

    def calculate_interest(self, balance: Decimal, years: int) -> Decimal:
        return calculate_simple_interest(balance, self.interest_rate, years)

    def __repr__(self) -> str:
        return (f"SavingsVariant(minimum_balance={self.minimum_balance}, "
                f"interest_rate={self.interest_rate})")


class CurrentVariant(AccountVariant):
    """Current account: may overdraw down to the overdraft limit"""

    product_type = ProductType.CURRENT

    def __init__(
        self,
        overdraft_limit: Amount = Decimal('5000.00'),
        currency: Currency = DEFAULT_CURRENCY
    ):
        super().__init__(currency)
        self.overdraft_limit = to_decimal(overdraft_limit)

    def withdrawal_allowed(self, balance: Decimal, amount: Decimal) -> bool:
        return balance - amount >= -self.overdraft_limit

    def denial_message(self) -> str:
        return ("Withdrawal denied. Exceeds overdraft limit of "
                f"{format_money(self.overdraft_limit, self.currency)}")

    def __repr__(self) -> str:
        return f"CurrentVariant(overdraft_limit={self.overdraft_limit})"


def create_variant(
    product_type: Union[ProductType, str],
    config: Optional[BankLedgerConfig] = None,
    currency: Currency = DEFAULT_CURRENCY
) -> AccountVariant:
    """Build the variant for a product type from configured business rules"""
    config = config or get_config()
    product_type = ProductType.from_choice(product_type)

    if product_type == ProductType.SAVINGS:
        return SavingsVariant(
            minimum_balance=config.savings_minimum_balance,
            interest_rate=config.savings_interest_rate,
            currency=currency
        )
    return CurrentVariant(overdraft_limit=config.current_overdraft_limit, currency=currency)
