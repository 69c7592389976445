"""
Account Management Module

The account entity: identity, balance, credentials and transaction ledger.
Deposit and withdrawal logic is shared by every product type; the account's
variant supplies the withdrawal floor and interest behaviour. Every rejected
operation is reported through an OperationResult, never raised.
"""

from decimal import Decimal
from datetime import date, datetime, timezone
from dataclasses import dataclass, field
from typing import List, Optional

from .currency import Amount, Currency, format_amount, format_money, to_decimal
from .ledger import LedgerEventType, TransactionHistory, TransactionLedger, format_timestamp
from .logging_config import get_logger, log_action
from .products import AccountVariant
from .validators import (
    PasswordPolicy, PinPolicy, calculate_age, format_date_of_birth,
    is_valid_pin, password_violations
)

logger = get_logger("bank_ledger.accounts")


@dataclass(frozen=True)
class Guardian:
    """Adult responsible for a minor's account"""
    name: str
    relation: str


@dataclass
class OperationResult:
    """Outcome of an account operation"""
    success: bool
    message: str
    balance: Optional[Decimal] = None
    amount: Optional[Decimal] = None

    @property
    def error_message(self) -> Optional[str]:
        return None if self.success else self.message


@dataclass(frozen=True)
class AccountSnapshot:
    """
    Read-only view of an account for display
    Only the first name is exposed, never the full name
    """
    account_number: int
    first_name: str
    date_of_birth: str
    age: int
    account_type: str
    balance: Decimal
    currency: Currency
    guardian: Optional[Guardian] = None

    @property
    def formatted_balance(self) -> str:
        return format_money(self.balance, self.currency)

    def lines(self) -> List[str]:
        lines = [
            "=== Account Details ===",
            f"Account Number: {self.account_number}",
            f"Name (Displayed): {self.first_name}",
            f"Account Type: {self.account_type}",
            f"DOB: {self.date_of_birth}",
            f"Age: {self.age}",
        ]
        if self.guardian:
            lines.append(f"Guardian: {self.guardian.name} ({self.guardian.relation})")
        lines.append(f"Balance: {self.formatted_balance}")
        return lines


@dataclass
class Account:
    """
    Bank account holding its own balance and ledger
    """
    account_number: int
    full_name: str
    date_of_birth: date
    variant: AccountVariant
    guardian: Optional[Guardian] = None
    ledger: TransactionLedger = field(default_factory=TransactionLedger, repr=False)
    password_policy: PasswordPolicy = field(default_factory=PasswordPolicy, repr=False)
    pin_policy: PinPolicy = field(default_factory=PinPolicy, repr=False)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    first_name: str = field(init=False)
    balance: Decimal = field(default=Decimal('0'), init=False)
    password: Optional[str] = field(default=None, init=False, repr=False)
    pin: Optional[str] = field(default=None, init=False, repr=False)
    first_login_at: Optional[datetime] = field(default=None, init=False, repr=False)

    def __post_init__(self):
        self.full_name = self.full_name.strip()
        if not self.full_name:
            raise ValueError("Full name must not be blank")
        self.first_name = self.full_name.split()[0]

    @property
    def currency(self) -> Currency:
        return self.variant.currency

    @property
    def account_type(self) -> str:
        return self.variant.display_name

    @property
    def age(self) -> int:
        return calculate_age(self.date_of_birth)

    @property
    def is_minor(self) -> bool:
        return self.age < 18

    @property
    def credentials_complete(self) -> bool:
        return self.password is not None and self.pin is not None

    @property
    def has_logged_in(self) -> bool:
        return self.first_login_at is not None

    # Helpers

    def _money(self, amount: Decimal) -> str:
        return format_money(amount, self.currency)

    def _amount(self, amount: Decimal) -> str:
        return format_amount(amount, self.currency)

    def _log(self, level: str, message: str, action: str, extra: Optional[dict] = None) -> None:
        log_action(logger, level, message, action=action,
                   resource=self.account_number, extra=extra)

    def _setup_incomplete(self) -> Optional[OperationResult]:
        if self.credentials_complete:
            return None
        return OperationResult(
            success=False,
            message="Account setup incomplete. Set a password and PIN first.",
            balance=self.balance
        )

    def _reject_amount(self, verb: str, amount: Amount) -> Optional[OperationResult]:
        if to_decimal(amount) <= 0:
            self._log("warning", f"{verb} rejected: non-positive amount", action=verb.lower(),
                      extra={"amount": str(amount)})
            return OperationResult(
                success=False,
                message=f"{verb} amount must be positive.",
                balance=self.balance
            )
        return None

    # Balance operations

    def deposit(self, amount: Amount, description: Optional[str] = None) -> OperationResult:
        """
        Deposit funds

        A non-blank description records a second ledger entry for the same
        deposit, carrying the description.
        """
        rejected = self._setup_incomplete() or self._reject_amount("Deposit", amount)
        if rejected:
            return rejected

        amount = to_decimal(amount)
        self.balance += amount
        now = self.ledger.now()
        self.ledger.record(
            LedgerEventType.DEPOSIT,
            f"Deposit: {self._amount(amount)} | Date: {format_timestamp(now)}",
            amount=amount, timestamp=now
        )
        if description and description.strip():
            self.ledger.record(
                LedgerEventType.DEPOSIT,
                f"Deposit: {self._amount(amount)} {description.strip()} | Date: {format_timestamp(now)}",
                amount=amount, timestamp=now
            )

        self._log("info", "Deposit posted", action="deposit",
                  extra={"amount": str(amount), "balance": str(self.balance)})
        return OperationResult(
            success=True,
            message=f"{self._money(amount)} deposited. New balance: {self._money(self.balance)}",
            balance=self.balance,
            amount=amount
        )

    def withdraw(self, amount: Amount, purpose: Optional[str] = None) -> OperationResult:
        """
        Withdraw funds subject to the variant's withdrawal floor

        A non-blank purpose records a second ledger entry for the same
        withdrawal, carrying the purpose.
        """
        rejected = self._setup_incomplete() or self._reject_amount("Withdraw", amount)
        if rejected:
            return rejected

        amount = to_decimal(amount)
        if not self.variant.withdrawal_allowed(self.balance, amount):
            self._log("warning", "Withdrawal denied", action="withdraw",
                      extra={"amount": str(amount), "balance": str(self.balance)})
            return OperationResult(
                success=False,
                message=self.variant.denial_message(),
                balance=self.balance
            )

        self.balance -= amount
        now = self.ledger.now()
        self.ledger.record(
            LedgerEventType.WITHDRAWAL,
            f"Withdraw: {self._amount(amount)} | Date: {format_timestamp(now)}",
            amount=amount, timestamp=now
        )
        if purpose and purpose.strip():
            self.ledger.record(
                LedgerEventType.WITHDRAWAL,
                f"Withdraw: {self._amount(amount)} | Purpose: {purpose.strip()} | Date: {format_timestamp(now)}",
                amount=amount, timestamp=now
            )

        self._log("info", "Withdrawal posted", action="withdraw",
                  extra={"amount": str(amount), "balance": str(self.balance)})
        return OperationResult(
            success=True,
            message=f"{self._money(amount)} withdrawn. New balance: {self._money(self.balance)}",
            balance=self.balance,
            amount=amount
        )

    def check_balance(self) -> OperationResult:
        """Report the balance; the inquiry itself is a ledger event"""
        rejected = self._setup_incomplete()
        if rejected:
            return rejected

        now = self.ledger.now()
        self.ledger.record(
            LedgerEventType.BALANCE_INQUIRY,
            f"Balance inquiry on {format_timestamp(now)}",
            timestamp=now
        )
        self._log("info", "Balance inquiry", action="check_balance")
        label = "Savings Balance" if self.variant.supports_interest else "Account Balance"
        return OperationResult(
            success=True,
            message=f"Current {label}: {self._money(self.balance)}",
            balance=self.balance
        )

    def apply_interest(self, years: int) -> OperationResult:
        """Credit simple interest for a number of years (Savings only)"""
        rejected = self._setup_incomplete()
        if rejected:
            return rejected

        if not self.variant.supports_interest:
            return OperationResult(
                success=False,
                message="Interest application is only for Savings Account.",
                balance=self.balance
            )
        if years <= 0:
            return OperationResult(
                success=False,
                message="Number of years must be positive. No interest applied.",
                balance=self.balance
            )

        interest = self.variant.calculate_interest(self.balance, years)
        self.balance += interest
        self.ledger.record(
            LedgerEventType.INTEREST_APPLIED,
            f"Interest applied: {self._amount(interest)} for {years} years",
            amount=interest
        )

        self._log("info", "Interest applied", action="apply_interest",
                  extra={"interest": str(interest), "years": years, "balance": str(self.balance)})
        return OperationResult(
            success=True,
            message=f"Interest {self._money(interest)} added. New balance: {self._money(self.balance)}",
            balance=self.balance,
            amount=interest
        )

    # Credentials

    def password_problem(self, password: Optional[str]) -> Optional[str]:
        violations = password_violations(password, self.password_policy)
        if violations:
            return "Password does not meet complexity requirements: " + "; ".join(violations)
        return None

    def pin_problem(self, pin: Optional[str]) -> Optional[str]:
        if not is_valid_pin(pin, self.date_of_birth, self.pin_policy):
            return "Invalid PIN. It must be 4 digits and not match DOB patterns (DDMM, MMDD, YYYY)."
        return None

    def _setup_closed(self, what: str) -> Optional[OperationResult]:
        if self.has_logged_in:
            return OperationResult(
                success=False,
                message=f"{what} can only be set before first login. Use change instead."
            )
        return None

    def set_password(self, password: str) -> OperationResult:
        """Set the initial password (only before first authenticated use)"""
        rejected = self._setup_closed("Password")
        if rejected:
            return rejected
        problem = self.password_problem(password)
        if problem:
            return OperationResult(success=False, message=problem)
        self.password = password
        return OperationResult(success=True, message="Password set.")

    def set_pin(self, pin: str) -> OperationResult:
        """Set the initial PIN (only before first authenticated use)"""
        rejected = self._setup_closed("PIN")
        if rejected:
            return rejected
        problem = self.pin_problem(pin)
        if problem:
            return OperationResult(success=False, message=problem)
        self.pin = pin
        return OperationResult(success=True, message="PIN set.")

    def change_password(self, new_password: str) -> OperationResult:
        rejected = self._setup_incomplete()
        if rejected:
            return rejected
        problem = self.password_problem(new_password)
        if problem:
            self._log("warning", "Password change rejected", action="change_password")
            return OperationResult(success=False, message=problem)

        self.password = new_password
        now = self.ledger.now()
        self.ledger.record(
            LedgerEventType.PASSWORD_CHANGED,
            f"Password changed on {format_timestamp(now)}",
            timestamp=now
        )
        self._log("info", "Password changed", action="change_password")
        return OperationResult(success=True, message="Password updated successfully.")

    def change_pin(self, new_pin: str) -> OperationResult:
        rejected = self._setup_incomplete()
        if rejected:
            return rejected
        problem = self.pin_problem(new_pin)
        if problem:
            self._log("warning", "PIN change rejected", action="change_pin")
            return OperationResult(success=False, message=problem)

        self.pin = new_pin
        now = self.ledger.now()
        self.ledger.record(
            LedgerEventType.PIN_CHANGED,
            f"PIN changed on {format_timestamp(now)}",
            timestamp=now
        )
        self._log("info", "PIN changed", action="change_pin")
        return OperationResult(success=True, message="PIN updated successfully.")

    def credentials_match(self, password: str, pin: str) -> bool:
        """Plain equality on both credentials; unset credentials never match"""
        if not self.credentials_complete:
            return False
        return password == self.password and pin == self.pin

    def mark_authenticated(self) -> None:
        if self.first_login_at is None:
            self.first_login_at = self.ledger.now()

    # Projections

    def display_snapshot(self) -> AccountSnapshot:
        age = self.age
        return AccountSnapshot(
            account_number=self.account_number,
            first_name=self.first_name,
            date_of_birth=format_date_of_birth(self.date_of_birth),
            age=age,
            account_type=self.account_type,
            balance=self.balance,
            currency=self.currency,
            guardian=self.guardian if age < 18 else None
        )

    def last_n_transactions(self, n: int) -> TransactionHistory:
        return TransactionHistory(
            requested=n,
            entries=self.ledger.last(n),
            ledger_size=len(self.ledger)
        )

    @property
    def transactions(self) -> List[str]:
        return self.ledger.messages()
