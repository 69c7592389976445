"""
Authentication Module

Bounded-attempt login protocol guarding an account. A session accepts a
password and PIN pair; three consecutive mismatches lock the session.
The lock is scoped to the session: the account itself is not marked, and a
fresh session starts with a full set of attempts.
"""

from dataclasses import dataclass
from enum import Enum

from .accounts import Account
from .ledger import LedgerEventType, format_timestamp
from .logging_config import get_logger, log_action

DEFAULT_MAX_ATTEMPTS = 3


class AuthState(Enum):
    """Login session states"""
    AWAITING_CREDENTIALS = "awaiting_credentials"
    AUTHENTICATED = "authenticated"
    LOCKED = "locked"


class AuthStatus(Enum):
    """Outcome of a single login attempt"""
    AUTHENTICATED = "authenticated"
    REJECTED = "rejected"
    LOCKED = "locked"


@dataclass
class AuthOutcome:
    """Result of a login attempt; never says which credential was wrong"""
    status: AuthStatus
    attempts_left: int
    message: str

    @property
    def success(self) -> bool:
        return self.status == AuthStatus.AUTHENTICATED


class AuthSession:
    """
    Login session for one account
    """

    def __init__(self, account: Account, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.account = account
        self.max_attempts = max_attempts
        self.failed_attempts = 0
        self.state = AuthState.AWAITING_CREDENTIALS
        self.logger = get_logger("bank_ledger.auth")

    @property
    def attempts_left(self) -> int:
        return max(0, self.max_attempts - self.failed_attempts)

    @property
    def is_authenticated(self) -> bool:
        return self.state == AuthState.AUTHENTICATED

    @property
    def is_locked(self) -> bool:
        return self.state == AuthState.LOCKED

    def attempt(self, password: str, pin: str) -> AuthOutcome:
        """
        Check a password and PIN pair against the account

        Returns:
            AuthOutcome with status AUTHENTICATED, REJECTED or LOCKED
        """
        if self.state == AuthState.LOCKED:
            return self._locked_outcome()
        if self.state == AuthState.AUTHENTICATED:
            return AuthOutcome(AuthStatus.AUTHENTICATED, self.attempts_left, "Already logged in.")

        ledger = self.account.ledger
        resource = self.account.account_number
        now = ledger.now()

        if self.account.credentials_match(password, pin):
            self.state = AuthState.AUTHENTICATED
            self.account.mark_authenticated()
            ledger.record(
                LedgerEventType.LOGIN_SUCCESS,
                f"Successful login on {format_timestamp(now)}",
                timestamp=now
            )
            log_action(self.logger, "info", "Login succeeded", action="login", resource=resource)
            return AuthOutcome(AuthStatus.AUTHENTICATED, self.attempts_left, "Login successful.")

        self.failed_attempts += 1
        ledger.record(
            LedgerEventType.LOGIN_FAILED,
            f"Failed login attempt on {format_timestamp(now)}",
            timestamp=now
        )
        log_action(self.logger, "warning", "Login failed", action="login_failed",
                   resource=resource, extra={"failed_attempts": self.failed_attempts})

        if self.failed_attempts >= self.max_attempts:
            self.state = AuthState.LOCKED
            ledger.record(
                LedgerEventType.ACCOUNT_LOCKED,
                f"Account locked after {self.max_attempts} failed attempts on {format_timestamp(now)}",
                timestamp=now
            )
            log_action(self.logger, "warning", "Session locked", action="lock", resource=resource)
            return self._locked_outcome()

        return AuthOutcome(
            AuthStatus.REJECTED,
            self.attempts_left,
            f"Invalid credentials. Attempts left: {self.attempts_left}"
        )

    def _locked_outcome(self) -> AuthOutcome:
        return AuthOutcome(
            AuthStatus.LOCKED,
            0,
            f"Account locked due to {self.max_attempts} failed attempts."
        )
