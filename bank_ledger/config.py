"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class BankLedgerConfig(BaseSettings):
    """Bank ledger configuration"""
    
    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    
    # Display configuration
    currency_code: str = "INR"
    transaction_history_size: int = 5
    
    # Business rules configuration
    savings_minimum_balance: str = "500.00"
    savings_interest_rate: str = "4.0"  # Annual simple interest, percent
    current_overdraft_limit: str = "5000.00"
    
    # Security configuration
    max_login_attempts: int = 3
    password_min_length: int = 8
    pin_reject_two_digit_year: bool = False
    
    # Account numbering
    account_number_min: int = 10_000_000
    account_number_max: int = 99_999_999
    account_number_seed: Optional[int] = None  # Fixed seed for reproducible numbering
    
    class Config:
        env_prefix = "BANK_LEDGER_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = BankLedgerConfig()


def get_config() -> BankLedgerConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> BankLedgerConfig:
    """Reload configuration from environment"""
    global config
    config = BankLedgerConfig()
    return config
