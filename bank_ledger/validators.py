"""
Credential and Identity Validation Module

Stateless checks for password complexity, PIN collisions with the date of
birth, and date-of-birth plausibility. Dates of birth travel as dd/MM/yyyy
text at the edges and as datetime.date inside the ledger.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional, Union

DOB_FORMAT = "%d/%m/%Y"
MIN_BIRTH_YEAR = 1900

_DOB_PATTERN = re.compile(r"[0-9]{2}/[0-9]{2}/[0-9]{4}")
_PIN_PATTERN = re.compile(r"[0-9]{4}")


@dataclass
class PasswordPolicy:
    """Password complexity policy"""
    min_length: int = 8
    require_uppercase: bool = True
    require_lowercase: bool = True
    require_digit: bool = True
    require_special: bool = True


@dataclass
class PinPolicy:
    """PIN collision policy"""
    reject_two_digit_year: bool = False


DEFAULT_PASSWORD_POLICY = PasswordPolicy()
DEFAULT_PIN_POLICY = PinPolicy()


def password_violations(password: Optional[str],
                        policy: Optional[PasswordPolicy] = None) -> List[str]:
    """
    Validate a password against the policy

    Every character falls into exactly one class: uppercase, lowercase,
    decimal digit, or special (anything else, whitespace included).

    Returns:
        Human-readable violations, empty when the password is acceptable
    """
    policy = policy or DEFAULT_PASSWORD_POLICY
    if password is None:
        return ["Password is required"]

    violations = []
    if len(password) < policy.min_length:
        violations.append(f"Minimum length {policy.min_length}")

    upper = lower = digit = special = False
    for char in password:
        if char.isupper():
            upper = True
        elif char.islower():
            lower = True
        elif char.isdecimal():
            digit = True
        else:
            special = True

    if policy.require_uppercase and not upper:
        violations.append("Must contain uppercase letter")
    if policy.require_lowercase and not lower:
        violations.append("Must contain lowercase letter")
    if policy.require_digit and not digit:
        violations.append("Must contain digit")
    if policy.require_special and not special:
        violations.append("Must contain special character")

    return violations


def is_valid_password(password: Optional[str],
                      policy: Optional[PasswordPolicy] = None) -> bool:
    """Check password complexity"""
    return not password_violations(password, policy)


def format_date_of_birth(dob: date) -> str:
    return dob.strftime(DOB_FORMAT)


def parse_date_of_birth(value: str) -> date:
    """
    Parse a dd/MM/yyyy date of birth

    Raises:
        ValueError: If the text is not a real calendar date in that form
    """
    text = value.strip() if isinstance(value, str) else value
    if not isinstance(text, str) or not _DOB_PATTERN.fullmatch(text):
        raise ValueError(f"Date of birth must be in dd/MM/yyyy form, got {value!r}")
    return datetime.strptime(text, DOB_FORMAT).date()


def is_valid_date_of_birth(value: Union[str, date], today: Optional[date] = None) -> bool:
    """Check that a date of birth parses, is not in the future and is after 1900"""
    today = today or date.today()
    if isinstance(value, datetime):
        birth = value.date()
    elif isinstance(value, date):
        birth = value
    else:
        try:
            birth = parse_date_of_birth(value)
        except ValueError:
            return False
    return birth <= today and birth.year > MIN_BIRTH_YEAR


def calculate_age(dob: date, today: Optional[date] = None) -> int:
    """Whole years elapsed since the date of birth"""
    today = today or date.today()
    years = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        years -= 1
    return years


def forbidden_pins(dob: Union[str, date, None],
                   policy: Optional[PinPolicy] = None) -> List[str]:
    """
    PINs derived from the date of birth: DDMM, MMDD and YYYY

    A bare two-digit year can never equal a four-digit PIN, so when the
    policy rejects the two-digit year it is checked in its day and month
    pairings (DDYY, MMYY). Returns an empty list when the date of birth is
    unknown or not in dd/MM/yyyy form.
    """
    policy = policy or DEFAULT_PIN_POLICY
    if isinstance(dob, date):
        dob = format_date_of_birth(dob)
    if not dob or not _DOB_PATTERN.fullmatch(dob):
        return []

    dd, mm, yyyy = dob[0:2], dob[3:5], dob[6:10]
    pins = [dd + mm, mm + dd, yyyy]
    if policy.reject_two_digit_year:
        yy = yyyy[2:]
        pins.extend([dd + yy, mm + yy])
    return pins


def is_valid_pin(pin: Optional[str], dob: Union[str, date, None] = None,
                 policy: Optional[PinPolicy] = None) -> bool:
    """
    Check that a PIN is exactly four digits and does not repeat the
    date of birth
    """
    if pin is None or not _PIN_PATTERN.fullmatch(pin):
        return False
    return pin not in forbidden_pins(dob, policy)
