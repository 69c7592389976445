"""
Test suite for the console front end

Drives BankApp through scripted input and checks the printed output.
"""

import io
import logging
import pytest
from datetime import date

from bank_ledger.cli import BankApp, build_parser, main
from bank_ledger import config as config_module
from bank_ledger.config import BankLedgerConfig, reload_config
from bank_ledger.registry import AccountRegistry

PASSWORD = "Secure#123"
PIN = "1234"


class FixedRandom:
    """Random stand-in always drawing the same account number"""
    
    def randint(self, low, high):
        return 12345678


class Script:
    """Feeds prepared answers to prompts; closes input when they run out"""
    
    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts = []
    
    def __call__(self, prompt):
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


@pytest.fixture
def registry():
    """Create a registry that numbers its first account 12345678"""
    return AccountRegistry(BankLedgerConfig(), rng=FixedRandom())


@pytest.fixture
def restore_config():
    """Restore the global configuration and logger after a test reloads them"""
    original = config_module.config
    logger = logging.getLogger("bank_ledger")
    level, handlers = logger.level, logger.handlers[:]
    yield
    config_module.config = original
    logger.setLevel(level)
    logger.handlers[:] = handlers


def run_app(registry, *answers):
    output = []
    script = Script(*answers)
    BankApp(registry, input_func=script, output=output.append).run()
    return output, script


def open_account(registry, name="Asha Rao Kumar", dob="02/03/1999", choice="1"):
    account = registry.create_account(name, dob, choice).account
    registry.set_credentials(account, PASSWORD, PIN)
    return account


class TestMainMenu:
    """Test main menu handling"""
    
    def test_exit(self, registry):
        output, _ = run_app(registry, "4")
        
        assert output[0] == "Welcome to the Bank Account Management System (Demo)"
        assert "Main Menu:" in output
        assert output[-1] == "Application terminating. Goodbye."
    
    def test_invalid_option(self, registry):
        output, _ = run_app(registry, "x", "4")
        
        assert "Invalid option. Try again." in output
    
    def test_total_accounts(self, registry):
        open_account(registry)
        
        output, _ = run_app(registry, "3", "4")
        
        assert "Total accounts created: 1" in output
    
    def test_closed_input(self, registry):
        output, _ = run_app(registry)
        
        assert output[-1] == "Input closed. Goodbye."


class TestCreateAccountFlow:
    """Test the account-opening dialogue"""
    
    def test_adult_savings(self, registry):
        output, _ = run_app(
            registry,
            "1", "Asha Rao Kumar", "99/99/1999", "02/03/1999", "7", "1",
            "weak", PASSWORD, "0203", PIN,
            "4"
        )
        
        assert "Invalid DOB format or unrealistic date. Please enter again." in output
        assert "Invalid option." in output
        assert any(line.startswith("Password does not meet complexity requirements")
                   and line.endswith(" Try again.") for line in output)
        assert "Invalid PIN. It cannot be DOB patterns. Try again." in output
        assert "Account successfully created!" in output
        assert "Account Number: 12345678" in output
        assert "Name (Displayed): Asha" in output
        assert "Account Type: Savings" in output
        
        account = registry.find_by_number(12345678)
        assert account.credentials_complete
        assert account.transactions[0].startswith("Account created on ")
    
    def test_minor_current(self, registry):
        dob = date(date.today().year - 10, 1, 1).strftime("%d/%m/%Y")
        
        output, _ = run_app(
            registry,
            "1", "Kid Rao", dob, "2", "Ravi Rao", "Father", PASSWORD, PIN,
            "4"
        )
        
        assert "Applicant is a minor (age 10). Guardian details required." in output
        assert "Account Type: Current" in output
        assert "Guardian: Ravi Rao (Father)" in output


class TestLoginFlow:
    """Test login and lockout"""
    
    def test_no_accounts(self, registry):
        output, _ = run_app(registry, "2", "4")
        
        assert "No accounts found. Please create an account first." in output
    
    def test_bad_account_number(self, registry):
        open_account(registry)
        
        output, _ = run_app(registry, "2", "12ab", "2", "87654321", "4")
        
        assert "Invalid account number format." in output
        assert "Account not found." in output
    
    def test_lockout(self, registry):
        account = open_account(registry)
        
        output, _ = run_app(
            registry,
            "2", "12345678",
            "wrong", PIN, PASSWORD, "0000", "wrong", "0000",
            "4"
        )
        
        assert "Invalid credentials. Attempts left: 2" in output
        assert "Invalid credentials. Attempts left: 1" in output
        assert "Account locked due to 3 failed attempts." in output
        assert "=== Transaction Menu ===" not in output
        assert account.transactions[-1].startswith("Account locked after 3 failed attempts on ")


class TestTransactionMenu:
    """Test a full session through the transaction menu"""
    
    def test_savings_session(self, registry):
        account = open_account(registry)
        
        output, _ = run_app(
            registry,
            "2", "12345678", PASSWORD, PIN,
            "1", "1000", "",
            "2", "600", "Rent",
            "2", "abc",
            "3",
            "8", "2",
            "7",
            "0",
            "9",
            "4"
        )
        
        assert "₹1000.00 deposited. New balance: ₹1000.00" in output
        assert "Withdrawal denied. Savings account must maintain minimum balance of ₹500.00" in output
        assert "Invalid amount." in output
        assert "Current Savings Balance: ₹1000.00" in output
        assert "Interest ₹80.00 added. New balance: ₹1080.00" in output
        assert "7. Show last 5 transactions" in output
        assert "=== Last 5 Transactions ===" in output
        assert "Interest applied: 80.00 for 2 years" in output
        assert "Invalid menu option." in output
        assert "Exiting. Thank you!" in output
        assert output[-1] == "Application terminating. Goodbye."
        assert account.balance == 1080
    
    def test_current_account_interest(self, registry):
        open_account(registry, choice="2")
        
        output, script = run_app(registry, "2", "12345678", PASSWORD, PIN, "8", "9", "4")
        
        assert "Interest application is only for Savings Account." in output
        assert not any("number of years" in prompt for prompt in script.prompts)
    
    def test_change_credentials(self, registry):
        account = open_account(registry)
        
        output, _ = run_app(
            registry,
            "2", "12345678", PASSWORD, PIN,
            "4", "weak", "N3w!Password",
            "5", "1999", "4321",
            "9", "4"
        )
        
        assert "Password updated successfully." in output
        assert "PIN updated successfully." in output
        assert any(line.endswith(" Try again.") and "PIN" in line for line in output)
        assert account.credentials_match("N3w!Password", "4321")
    
    def test_view_details(self, registry):
        open_account(registry)
        
        output, _ = run_app(registry, "2", "12345678", PASSWORD, PIN, "6", "9", "4")
        
        assert "=== Account Details ===" in output
        assert "Name (Displayed): Asha" in output
        assert all("Kumar" not in line for line in output)


class TestEntryPoint:
    """Test argument parsing and the main entry point"""
    
    def test_parser_defaults(self):
        args = build_parser().parse_args([])
        
        assert args.log_level is None
        assert args.log_format is None
    
    def test_parser_options(self):
        args = build_parser().parse_args(["--log-level", "DEBUG", "--log-format", "text"])
        
        assert args.log_level == "DEBUG"
        assert args.log_format == "text"
    
    def test_parser_rejects_unknown_level(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--log-level", "LOUD"])
    
    def test_main_runs_until_exit(self, monkeypatch, capsys, restore_config):
        monkeypatch.setattr("sys.stdin", io.StringIO("3\n4\n"))
        
        assert main(["--log-level", "ERROR"]) == 0
        
        out = capsys.readouterr().out
        assert "Total accounts created: 0" in out
        assert "Application terminating. Goodbye." in out
    
    def test_log_level_from_environment(self, monkeypatch, restore_config):
        monkeypatch.setenv("BANK_LEDGER_LOG_LEVEL", "DEBUG")
        reload_config()
        monkeypatch.setattr("sys.stdin", io.StringIO("4\n"))
        
        assert main([]) == 0
        
        assert logging.getLogger("bank_ledger").level == logging.DEBUG
    
    def test_log_level_option_overrides_environment(self, monkeypatch, restore_config):
        monkeypatch.setenv("BANK_LEDGER_LOG_LEVEL", "DEBUG")
        reload_config()
        monkeypatch.setattr("sys.stdin", io.StringIO("4\n"))
        
        assert main(["--log-level", "ERROR"]) == 0
        
        assert logging.getLogger("bank_ledger").level == logging.ERROR
