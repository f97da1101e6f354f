"""
utils/sms_utils.py

Purpose: Demo receipt SMS builders

- Formats the bank-style credit alert text
- Masks account numbers
- Generates demo reference numbers and balances
"""

import random
import string
from datetime import datetime
from typing import Optional


REFERENCE_ALPHABET = string.ascii_uppercase + string.digits
REFERENCE_LENGTH = 12
MAX_DEMO_BALANCE_TOP_UP = 50000
RECEIPT_FOOTER = "Dial *966# for quick airtime/Data purchase"


def generate_reference_number(rng: Optional[random.Random] = None) -> str:
    """
    Generates a demo transaction reference, e.g. "K3J9X0PLQ2ZT".

    Not unique and not meant to be; it only decorates the receipt.
    """
    rng = rng or random
    return "".join(rng.choices(REFERENCE_ALPHABET, k=REFERENCE_LENGTH))


def mask_account_number(account_number: str) -> str:
    """
    Masks everything but the first and last three digits.

    "0123456789" -> "012****789"
    """
    return f"{account_number[:3]}****{account_number[-3:]}"


def format_amount(amount: float) -> str:
    """1234.5 -> "1,234.50" """
    return f"{amount:,.2f}"


def format_receipt_datetime(value: datetime) -> str:
    # The PM suffix is fixed, regardless of the 24h hour.
    return value.strftime("%d/%m/%Y %H:%M:%S") + " PM"


def demo_balance(amount: float, rng: Optional[random.Random] = None) -> float:
    """
    Fabricates a plausible post-credit balance.

    Args:
        amount: Credited amount
        rng: Optional random source (for deterministic tests)

    Returns:
        amount plus a random top-up in [0, 50000), rounded to 2 places
    """
    rng = rng or random
    return round(amount + rng.random() * MAX_DEMO_BALANCE_TOP_UP, 2)


def build_receipt_sms(
    account_name: str,
    account_number: str,
    amount: float,
    transaction_date: datetime,
    balance: Optional[float] = None,
    rng: Optional[random.Random] = None
) -> str:
    """
    Builds the demo credit alert text.

    Format:
        Acct:012****789
        DT:18/10/2026 14:30:00 PM
        CIP/CR//Transfer from JOHN DOE
        CR Amt:1,500.00
        Bal:23,873.42
        Dial *966# for quick airtime/Data purchase

    Args:
        account_name: Sender account name
        account_number: 10-digit account number
        amount: Credited amount
        transaction_date: Transaction timestamp
        balance: Balance to show; fabricated when omitted
        rng: Optional random source for the fabricated balance

    Returns:
        Receipt SMS text
    """
    if balance is None:
        balance = demo_balance(amount, rng)

    lines = [
        f"Acct:{mask_account_number(account_number)}",
        f"DT:{format_receipt_datetime(transaction_date)}",
        f"CIP/CR//Transfer from {account_name.upper()}",
        f"CR Amt:{format_amount(amount)}",
        f"Bal:{format_amount(balance)}",
        RECEIPT_FOOTER,
    ]
    return "\n".join(lines)
