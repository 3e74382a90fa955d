"""Shared validation utilities"""

import re
from typing import Optional

from .time_window import normalize_time


def validate_br_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize a Brazilian phone number to E.164 format.

    Accepts landlines (10 digits) and mobiles (11 digits) with area code,
    with or without the +55 country prefix.

    Returns:
        Normalized phone number (+55XXXXXXXXXXX)

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return phone

    digits = re.sub(r"\D", "", phone)

    if digits.startswith("55") and len(digits) in (12, 13):
        digits = digits[2:]

    if len(digits) not in (10, 11):
        raise ValueError("Phone number must have 10 or 11 digits including area code")

    return f"+55{digits}"


def validate_cpf(cpf: Optional[str]) -> Optional[str]:
    """
    Validate a CPF (Brazilian taxpayer id) and return its 11 digits.

    Raises:
        ValueError: If the CPF has the wrong length or bad check digits
    """
    if not cpf:
        return cpf

    digits = re.sub(r"\D", "", cpf)
    if len(digits) != 11 or digits == digits[0] * 11:
        raise ValueError("Invalid CPF")

    for position in (9, 10):
        total = sum(int(digits[i]) * (position + 1 - i) for i in range(position))
        check = (total * 10) % 11 % 10
        if check != int(digits[position]):
            raise ValueError("Invalid CPF")

    return digits


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_time(value: Optional[str]) -> Optional[str]:
    """Validate a wall-clock time and normalize it to HH:MM."""
    if value is None:
        return value
    return normalize_time(value)


def validate_required(value: Optional[str]) -> str:
    """Reject empty or whitespace-only strings."""
    if value is None or not str(value).strip():
        raise ValueError("Field is required")
    return value.strip()
