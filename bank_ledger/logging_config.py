"""
Structured Logging Configuration Module

Every ledger operation is logged through log_action with two structured
fields on top of the message:

    action    what was attempted. Accounts emit deposit, withdraw,
              check_balance, apply_interest, change_password and
              change_pin; the auth session emits login, login_failed and
              lock; the registry emits create_account and set_credentials.
    resource  the account number the action touched.

Amounts and balances travel in ``extra`` as strings. Passwords and PINs are
never logged. Output is one JSON object per line (default) or a plain text
line carrying the same action and account number.
"""

import logging
import json
from datetime import datetime, timezone
from typing import Optional, Union


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "action": getattr(record, 'action', None),
            "resource": getattr(record, 'resource', None),
            "extra": getattr(record, 'extra', None)
        }

        # Remove None values
        log_entry = {k: v for k, v in log_entry.items() if v is not None}

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


class TextFormatter(logging.Formatter):
    """Plain line format; appends action and account number when present"""

    def __init__(self):
        super().__init__(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record):
        line = super().format(record)
        action = getattr(record, 'action', None)
        if action:
            line += f" | {action}"
            resource = getattr(record, 'resource', None)
            if resource:
                line += f" #{resource}"
        return line


def setup_logging(level: str = "INFO", logger_name: str = "bank_ledger",
                  log_format: str = "json") -> logging.Logger:
    """
    Attach a single stderr handler to the package logger.

    Calling it again replaces the handler, so the console entry point and
    tests can reconfigure freely.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        logger_name: Name of the logger
        log_format: "json" for structured output, "text" for a plain line format

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(logger_name)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(TextFormatter() if log_format == "text" else JSONFormatter())

    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Keep console output free of duplicates from the root logger
    logger.propagate = False

    return logger


def get_logger(name: str = "bank_ledger") -> logging.Logger:
    """Get logger instance"""
    return logging.getLogger(name)


def log_action(logger: logging.Logger, level: str, message: str,
               action: Optional[str] = None,
               resource: Optional[Union[int, str]] = None,
               extra: Optional[dict] = None):
    """
    Log a ledger action with structured data.

    Args:
        logger: Logger instance
        level: Log level (info, warning, error, etc.)
        message: Log message
        action: Action name, see the module docstring
        resource: Account number acted upon
        extra: Additional structured data (amounts, balances, counters)
    """
    levelno = getattr(logging, level.upper())
    if not logger.isEnabledFor(levelno):
        return

    record = logger.makeRecord(
        logger.name, levelno, __name__, 0, message, (), None
    )

    if action:
        record.action = action
    if resource is not None:
        record.resource = str(resource)
    if extra:
        record.extra = extra

    logger.handle(record)
