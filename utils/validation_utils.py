"""
utils/validation_utils.py

Purpose: Input validation

- Recipient phone normalization for SMS dispatch
- Local-to-international phone coercion for form submissions
- Account number and phone format checks
- Input sanitization
"""

import re
from typing import Any

from app.core.exceptions import InvalidInputError


_NON_DIGITS = re.compile(r"[^0-9]")
_PHONE_SEPARATORS = re.compile(r"[\s\-\(\)]", re.ASCII)


def normalize_recipient(phone: Any) -> str:
    """
    Normalizes a recipient phone number for the SMS provider.

    Keeps a single leading '+' and strips every character other than
    ASCII 0-9, so fullwidth or Arabic-Indic digits are dropped.
    Never introduces a '+'.

    Examples:
        "+234 (808) 222-5459" -> "+2348082225459"
        "0808-222-5459"       -> "08082225459"

    Args:
        phone: Raw recipient as supplied by the caller

    Returns:
        Normalized recipient

    Raises:
        InvalidInputError: If the input is empty, not a string, or has no digits
    """
    if not phone or not isinstance(phone, str):
        raise InvalidInputError("Phone number must be a non-empty string")

    phone = phone.strip()

    if phone.startswith("+"):
        normalized = "+" + _NON_DIGITS.sub("", phone[1:])
    else:
        normalized = _NON_DIGITS.sub("", phone)

    if not normalized or normalized == "+":
        raise InvalidInputError("Invalid phone number format", details=phone)

    return normalized


def to_international(phone: str, country_code: str) -> str:
    """
    Coerces a locally written number toward E.164 using a default
    country code.

    - "0XXXXXXXXXX"  -> "+<cc>XXXXXXXXXX"
    - "<cc>XXXXXXXX" -> "+<cc>XXXXXXXX"
    - "XXXXXXXXXX"   -> "+<cc>XXXXXXXXXX"
    - "+..."         -> unchanged

    Spaces, dashes and parentheses are dropped first.

    Args:
        phone: Phone number as typed into the form
        country_code: Calling code without '+', e.g. "234"

    Returns:
        Phone number with a leading '+'
    """
    phone = _PHONE_SEPARATORS.sub("", phone)

    if phone.startswith("+"):
        return phone
    if phone.startswith("0"):
        return f"+{country_code}{phone[1:]}"
    if phone.startswith(country_code):
        return f"+{phone}"
    return f"+{country_code}{phone}"


def validate_phone_number(phone: str) -> bool:
    """
    Validates a form phone number: optional '+' then 10-15 digits,
    once spaces, dashes and parentheses are removed.

    Args:
        phone: Phone number string

    Returns:
        True if acceptable
    """
    if not phone:
        return False

    phone = _PHONE_SEPARATORS.sub("", phone)
    return bool(re.fullmatch(r"\+?[0-9]{10,15}", phone))


def validate_account_number(account_number: str) -> bool:
    """Account numbers are exactly 10 digits."""
    if not account_number:
        return False
    return bool(re.fullmatch(r"[0-9]{10}", account_number.strip()))


def sanitize_input(text: str, max_length: int = 1000) -> str:
    """
    Sanitizes user input before it is echoed into a receipt.

    Args:
        text: Input text
        max_length: Maximum allowed length

    Returns:
        Sanitized text
    """
    if not text:
        return ""

    text = text[:max_length]

    # Remove potentially dangerous characters
    text = re.sub(r"[<>{}\[\]]", "", text)

    # Normalize whitespace
    text = " ".join(text.split())

    return text.strip()
