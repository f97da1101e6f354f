"""
app/schemas/transaction.py

Purpose: Demo transaction form schemas

- Validates submitted transfer details
- Defines the record kept in the session
- Keeps the camelCase field names the form posts
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime, timedelta, timezone

from utils.validation_utils import validate_account_number, validate_phone_number, sanitize_input


EARLIEST_TRANSACTION_DATE = datetime(2020, 1, 1)
MAX_DAYS_AHEAD = 30


class TransactionForm(BaseModel):
    """
    Transfer details as submitted from the form.
    """
    model_config = ConfigDict(populate_by_name=True)

    account_name: str = Field(..., alias="accountName", description="Sender account name")
    bank_name: str = Field(..., alias="bankName", description="Sender bank name")
    account_number: str = Field(..., alias="accountNumber", description="10-digit account number")
    phone_number: Optional[str] = Field(None, alias="phoneNumber", description="Receipt SMS recipient")
    amount: float = Field(..., gt=0, description="Credited amount")
    narration: str = Field(..., description="Transfer narration")
    transaction_date: datetime = Field(..., alias="transactionDate")

    @field_validator("account_name", "bank_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = sanitize_input(v, max_length=100)
        if len(v) < 2:
            raise ValueError("must be at least 2 characters")
        return v

    @field_validator("account_number")
    @classmethod
    def validate_account(cls, v: str) -> str:
        v = v.strip()
        if not validate_account_number(v):
            raise ValueError("account number must be exactly 10 digits")
        return v

    @field_validator("phone_number")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        if not validate_phone_number(v):
            raise ValueError("phone number must be 10-15 digits, optionally starting with +")
        return v.strip()

    @field_validator("narration")
    @classmethod
    def validate_narration(cls, v: str) -> str:
        v = sanitize_input(v, max_length=200)
        if not v:
            raise ValueError("narration is required")
        return v

    @field_validator("transaction_date")
    @classmethod
    def validate_transaction_date(cls, v: datetime) -> datetime:
        if v.tzinfo is not None:
            now = datetime.now(timezone.utc)
            earliest = EARLIEST_TRANSACTION_DATE.replace(tzinfo=timezone.utc)
        else:
            now = datetime.now()
            earliest = EARLIEST_TRANSACTION_DATE

        if v < earliest or v > now + timedelta(days=MAX_DAYS_AHEAD):
            raise ValueError(f"date must be between 2020 and {MAX_DAYS_AHEAD} days from now")
        return v


class TransactionRecord(TransactionForm):
    """
    Transaction as stored in the session, with server-generated fields.
    """
    reference_number: str = Field(..., alias="referenceNumber")
    submitted_at: datetime = Field(..., alias="submittedAt")
    receipt_sms: str = Field(..., alias="receiptSms")

    def to_session(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
