"""
Account Registry Module

In-memory collection of accounts keyed by account number. Generates unique
8-digit account numbers, runs the account-opening checks and keeps a count
of every account ever created.
"""

import random
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .accounts import Account, Guardian, OperationResult
from .auth import AuthSession
from .config import BankLedgerConfig, get_config
from .currency import currency_from_code
from .ledger import LedgerEventType, format_timestamp
from .logging_config import get_logger, log_action
from .products import ProductType, create_variant
from .validators import (
    PasswordPolicy, PinPolicy, calculate_age, is_valid_date_of_birth,
    parse_date_of_birth
)


@dataclass
class CreationResult:
    """Outcome of opening an account"""
    success: bool
    account: Optional[Account] = None
    error_message: Optional[str] = None


class AccountRegistry:
    """
    Creates, stores and looks up accounts
    """

    def __init__(
        self,
        config: Optional[BankLedgerConfig] = None,
        rng: Optional[random.Random] = None
    ):
        self.config = config or get_config()
        self.rng = rng or random.Random(self.config.account_number_seed)
        self.currency = currency_from_code(self.config.currency_code)
        self.password_policy = PasswordPolicy(min_length=self.config.password_min_length)
        self.pin_policy = PinPolicy(reject_two_digit_year=self.config.pin_reject_two_digit_year)
        self.logger = get_logger("bank_ledger.registry")

        self._accounts: Dict[int, Account] = {}
        self._created_count = 0

    def create_account(
        self,
        full_name: str,
        dob: Union[str, date],
        product_type: Union[ProductType, str],
        guardian: Optional[Union[Guardian, Tuple[str, str]]] = None
    ) -> CreationResult:
        """
        Open a new account

        Args:
            full_name: Holder's full name
            dob: Date of birth, dd/MM/yyyy text or a date
            product_type: ProductType or a menu choice ("1" savings, "2" current)
            guardian: Guardian (or (name, relation) pair); required for minors,
                ignored for adults

        Returns:
            CreationResult carrying the account, or the reason it was refused
        """
        if not full_name or not full_name.strip():
            return CreationResult(success=False, error_message="Full name is required.")

        if not is_valid_date_of_birth(dob):
            return CreationResult(
                success=False,
                error_message="Invalid DOB format or unrealistic date."
            )
        if isinstance(dob, datetime):
            birth = dob.date()
        elif isinstance(dob, date):
            birth = dob
        else:
            birth = parse_date_of_birth(dob)

        try:
            product_type = ProductType.from_choice(product_type)
        except ValueError as e:
            return CreationResult(success=False, error_message=str(e))

        age = calculate_age(birth)
        if age < 18:
            guardian = self._normalize_guardian(guardian)
            if guardian is None:
                return CreationResult(
                    success=False,
                    error_message=f"Applicant is a minor (age {age}). Guardian details required."
                )
        else:
            guardian = None

        account = Account(
            account_number=self._generate_account_number(),
            full_name=full_name,
            date_of_birth=birth,
            variant=create_variant(product_type, self.config, self.currency),
            guardian=guardian,
            password_policy=self.password_policy,
            pin_policy=self.pin_policy
        )

        self._accounts[account.account_number] = account
        self._created_count += 1

        now = account.ledger.now()
        account.ledger.record(
            LedgerEventType.ACCOUNT_CREATED,
            f"Account created on {format_timestamp(now)}",
            timestamp=now
        )

        log_action(
            self.logger, "info", "Account created", action="create_account",
            resource=account.account_number,
            extra={"product_type": product_type.value, "minor": guardian is not None}
        )
        return CreationResult(success=True, account=account)

    def set_credentials(self, account: Account, password: str, pin: str) -> OperationResult:
        """
        Required setup step after creation: set password and PIN together

        Nothing is stored unless both credentials are acceptable.
        """
        problem = account.password_problem(password) or account.pin_problem(pin)
        if problem:
            log_action(self.logger, "warning", "Credential setup rejected",
                       action="set_credentials", resource=account.account_number)
            return OperationResult(success=False, message=problem)

        for result in (account.set_password(password), account.set_pin(pin)):
            if not result.success:
                return result

        log_action(self.logger, "info", "Credentials set", action="set_credentials",
                   resource=account.account_number)
        return OperationResult(success=True, message="Account successfully created!")

    def find_by_number(self, account_number: Union[int, str]) -> Optional[Account]:
        """Look up an account; None when there is no such account"""
        if isinstance(account_number, str):
            account_number = account_number.strip()
            if not account_number.isdecimal():
                return None
            account_number = int(account_number)
        return self._accounts.get(account_number)

    def total_created(self) -> int:
        return self._created_count

    def start_session(self, account: Account) -> AuthSession:
        return AuthSession(account, max_attempts=self.config.max_login_attempts)

    def accounts(self) -> List[Account]:
        return list(self._accounts.values())

    def _generate_account_number(self) -> int:
        """Draw random account numbers until one is not already taken"""
        while True:
            candidate = self.rng.randint(
                self.config.account_number_min,
                self.config.account_number_max
            )
            if candidate not in self._accounts:
                return candidate
            self.logger.debug("Account number collision on %s, retrying", candidate)

    @staticmethod
    def _normalize_guardian(
        guardian: Optional[Union[Guardian, Tuple[str, str]]]
    ) -> Optional[Guardian]:
        if guardian is None:
            return None
        if not isinstance(guardian, Guardian):
            try:
                name, relation = guardian
            except (TypeError, ValueError):
                return None
            guardian = Guardian(name=name, relation=relation)
        if not isinstance(guardian.name, str) or not isinstance(guardian.relation, str):
            return None
        name = guardian.name.strip()
        relation = guardian.relation.strip()
        if not name or not relation:
            return None
        return Guardian(name=name, relation=relation)

    def __len__(self) -> int:
        return len(self._accounts)

    def __contains__(self, account_number: int) -> bool:
        return account_number in self._accounts

    def __iter__(self) -> Iterator[Account]:
        return iter(self.accounts())
