"""
Console Front End

Text menus over the account registry. This layer owns prompting, parsing
and re-prompting; the ledger core only returns results and status text,
which are printed here unchanged.
"""

import argparse
import sys
from typing import Callable, List, Optional

from .accounts import Account, Guardian
from .config import get_config
from .currency import to_decimal
from .logging_config import get_logger, setup_logging
from .products import ProductType
from .registry import AccountRegistry
from .validators import calculate_age, is_valid_date_of_birth, parse_date_of_birth

logger = get_logger("bank_ledger.cli")

MAIN_MENU = [
    "",
    "Main Menu:",
    "1. Create Account",
    "2. Login to Account",
    "3. Show total accounts created",
    "4. Exit",
]

TRANSACTION_MENU = [
    "",
    "=== Transaction Menu ===",
    "1. Deposit",
    "2. Withdraw",
    "3. Check Balance",
    "4. Change Password",
    "5. Change PIN",
    "6. View Account Details (first name shown)",
    "7. Show last {n} transactions",
    "8. Apply interest (Savings only)",
    "9. Exit",
]


class BankApp:
    """
    Interactive menu loop bound to one registry

    Input and output are injectable so sessions can be scripted.
    """

    def __init__(
        self,
        registry: AccountRegistry,
        input_func: Callable[[str], str] = input,
        output: Callable[[str], None] = print
    ):
        self.registry = registry
        self.input_func = input_func
        self.output = output
        self.history_size = registry.config.transaction_history_size

    # I/O helpers

    def say(self, *lines: str) -> None:
        for line in lines:
            self.output(line)

    def ask(self, prompt: str) -> str:
        return self.input_func(prompt)

    def read_non_empty(self, prompt: str) -> str:
        while True:
            line = self.ask(prompt).strip()
            if line:
                return line

    # Main menu

    def run(self) -> None:
        self.say("Welcome to the Bank Account Management System (Demo)", "")
        try:
            while self.main_menu_step():
                pass
        except (EOFError, KeyboardInterrupt):
            self.say("", "Input closed. Goodbye.")

    def main_menu_step(self) -> bool:
        """Handle one main menu choice; False when the user exits"""
        self.say(*MAIN_MENU)
        choice = self.ask("Choose option: ").strip()
        if choice == "1":
            self.create_account_flow()
        elif choice == "2":
            self.login_flow()
        elif choice == "3":
            self.say(f"Total accounts created: {self.registry.total_created()}")
        elif choice == "4":
            self.say("Application terminating. Goodbye.")
            return False
        else:
            self.say("Invalid option. Try again.")
        return True

    def create_account_flow(self) -> Optional[Account]:
        self.say("=== Create New Account ===")
        full_name = self.read_non_empty("Enter full name: ")

        while True:
            dob = self.read_non_empty("Enter Date of Birth (dd/MM/yyyy): ")
            if is_valid_date_of_birth(dob):
                break
            self.say("Invalid DOB format or unrealistic date. Please enter again.")

        while True:
            choice = self.ask("Choose account type (1. Savings, 2. Current): ").strip()
            try:
                product_type = ProductType.from_choice(choice)
                break
            except ValueError:
                self.say("Invalid option.")

        guardian = None
        age = calculate_age(parse_date_of_birth(dob))
        if age < 18:
            self.say(f"Applicant is a minor (age {age}). Guardian details required.")
            guardian = Guardian(
                name=self.read_non_empty("Enter Guardian/Adult Name: "),
                relation=self.read_non_empty("Enter relation with guardian/adult: ")
            )

        created = self.registry.create_account(full_name, dob, product_type, guardian)
        if not created.success:
            self.say(created.error_message)
            return None
        account = created.account

        while True:
            password = self.ask(
                "Set a password (min 8 chars, 1 uppercase, 1 lowercase, 1 digit, 1 special): "
            )
            problem = account.password_problem(password)
            if not problem:
                break
            self.say(problem + " Try again.")

        while True:
            pin = self.ask("Set a 4-digit PIN (must not equal DDMM, MMDD, or YYYY of DOB): ").strip()
            if not account.pin_problem(pin):
                break
            self.say("Invalid PIN. It cannot be DOB patterns. Try again.")

        result = self.registry.set_credentials(account, password, pin)
        self.say(result.message)
        self.say(*account.display_snapshot().lines())
        return account

    def login_flow(self) -> None:
        if len(self.registry) == 0:
            self.say("No accounts found. Please create an account first.")
            return

        number = self.ask("Enter account number to login: ").strip()
        if not number.isdecimal():
            self.say("Invalid account number format.")
            return
        account = self.registry.find_by_number(number)
        if account is None:
            self.say("Account not found.")
            return

        if self.authenticate(account):
            self.transaction_menu(account)

    def authenticate(self, account: Account) -> bool:
        session = self.registry.start_session(account)
        while True:
            password = self.ask("Enter password: ")
            pin = self.ask("Enter 4-digit PIN: ").strip()
            outcome = session.attempt(password, pin)
            if outcome.success:
                return True
            self.say(outcome.message)
            if session.is_locked:
                return False

    # Transaction menu

    def transaction_menu(self, account: Account) -> None:
        menu = [line.format(n=self.history_size) for line in TRANSACTION_MENU]
        while True:
            self.say(*menu)
            option = self.ask("Choose option: ").strip()
            if option == "9":
                self.say("Exiting. Thank you!")
                return
            handler = self._transaction_handlers().get(option)
            if handler is None:
                self.say("Invalid menu option.")
            else:
                handler(account)

    def _transaction_handlers(self):
        return {
            "1": self.deposit,
            "2": self.withdraw,
            "3": lambda account: self.say(account.check_balance().message),
            "4": self.change_password,
            "5": self.change_pin,
            "6": lambda account: self.say(*account.display_snapshot().lines()),
            "7": lambda account: self.say(
                *account.last_n_transactions(self.history_size).lines()
            ),
            "8": self.apply_interest,
        }

    def deposit(self, account: Account) -> None:
        try:
            amount = to_decimal(self.ask("Enter amount to deposit: "))
        except ValueError:
            self.say("Invalid amount.")
            return
        description = self.ask("Optional description (press enter to skip): ")
        self.say(account.deposit(amount, description).message)

    def withdraw(self, account: Account) -> None:
        try:
            amount = to_decimal(self.ask("Enter amount to withdraw: "))
        except ValueError:
            self.say("Invalid amount.")
            return
        purpose = self.ask("Optional purpose (press enter to skip): ")
        self.say(account.withdraw(amount, purpose).message)

    def change_password(self, account: Account) -> None:
        self.say("Change Password:")
        while True:
            result = account.change_password(self.ask("Enter new password: "))
            self.say(result.message if result.success else result.message + " Try again.")
            if result.success:
                return

    def change_pin(self, account: Account) -> None:
        self.say("Change PIN:")
        while True:
            result = account.change_pin(self.ask("Enter new 4-digit PIN: ").strip())
            self.say(result.message if result.success else result.message + " Try again.")
            if result.success:
                return

    def apply_interest(self, account: Account) -> None:
        if not account.variant.supports_interest:
            self.say("Interest application is only for Savings Account.")
            return
        try:
            years = int(self.ask("Enter number of years to apply simple interest: ").strip())
        except ValueError:
            self.say("Invalid number.")
            return
        result = account.apply_interest(years)
        if result.success:
            self.say(result.message)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bank-ledger",
        description="Interactive in-memory bank account ledger"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level for structured logs on stderr (default: from configuration)"
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "text"],
        help="Log format (default: from configuration)"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = get_config()
    setup_logging(args.log_level or config.log_level,
                  log_format=args.log_format or config.log_format)

    registry = AccountRegistry(config)
    logger.info("Starting bank ledger console")
    BankApp(registry).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
