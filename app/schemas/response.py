from pydantic import BaseModel
from typing import Optional, Any
from datetime import datetime


class ErrorResponse(BaseModel):
    """
    Standard error response structure.
    """
    error: str
    code: str
    details: Optional[Any] = None


class TransactionDetails(BaseModel):
    """
    Details view of the session transaction.
    """
    reference_number: str
    account_name: str
    bank_name: str
    masked_account_number: str
    amount: float
    narration: str
    transaction_date: datetime
    submitted_at: datetime
    sms_recipient: Optional[str] = None
