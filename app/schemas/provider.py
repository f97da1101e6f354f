"""
app/schemas/provider.py

Purpose: Africa's Talking SMS response envelope

- Validates the raw JSON returned by the messaging endpoint
- Decodes it into exactly one of three variants:
  RejectedEnvelope, FailedRecipient, AcceptedRecipient
- Any other shape raises InvalidProviderResponseError
"""

from dataclasses import dataclass
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from typing import Any, List, Optional, Union

from app.core.exceptions import InvalidProviderResponseError


SUCCESS_STATUS = "Success"
UNKNOWN_PROVIDER_ERROR = "Unknown API error"


class RecipientEntry(BaseModel):
    """Per-recipient delivery report."""
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    number: Optional[str] = None
    status: str
    cost: Optional[str] = None
    message_id: Optional[str] = Field(default=None, alias="messageId")
    status_code: Optional[int] = Field(default=None, alias="statusCode")


class MessageData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: Optional[str] = Field(default=None, alias="Message")
    recipients: Optional[List[RecipientEntry]] = Field(default=None, alias="Recipients")


class ProviderEnvelope(BaseModel):
    """
    Top-level response:

        {"SMSMessageData": {"Message": "...", "Recipients": [...]}}
    """
    model_config = ConfigDict(populate_by_name=True)

    sms_message_data: MessageData = Field(..., alias="SMSMessageData")


@dataclass(frozen=True)
class RejectedEnvelope:
    """Provider processed no recipients."""
    reason: str


@dataclass(frozen=True)
class FailedRecipient:
    """Provider processed the recipient but reported a non-success status."""
    status: str
    number: Optional[str] = None


@dataclass(frozen=True)
class AcceptedRecipient:
    number: str
    message_id: str
    cost: str


ProviderReport = Union[RejectedEnvelope, FailedRecipient, AcceptedRecipient]


def decode_envelope(payload: Any) -> ProviderReport:
    """
    Decodes a provider response into a ProviderReport variant.

    Only the first recipient entry is inspected; dispatch is
    single-recipient.

    Args:
        payload: Parsed JSON body returned by the transport

    Returns:
        RejectedEnvelope, FailedRecipient or AcceptedRecipient

    Raises:
        InvalidProviderResponseError: If the payload does not match the envelope
    """
    if not isinstance(payload, dict):
        raise InvalidProviderResponseError(
            "Invalid API response structure",
            details=f"expected JSON object, got {type(payload).__name__}"
        )

    try:
        envelope = ProviderEnvelope.model_validate(payload)
    except ValidationError as e:
        raise InvalidProviderResponseError(
            "Invalid API response structure",
            details=e.errors(include_url=False)
        ) from e

    data = envelope.sms_message_data

    if not data.recipients:
        return RejectedEnvelope(reason=data.message or UNKNOWN_PROVIDER_ERROR)

    entry = data.recipients[0]

    if entry.status != SUCCESS_STATUS:
        return FailedRecipient(number=entry.number, status=entry.status)

    if not entry.number or not entry.message_id or entry.cost is None:
        raise InvalidProviderResponseError(
            "Successful recipient entry is missing number, messageId or cost",
            details=entry.model_dump(by_alias=True)
        )

    return AcceptedRecipient(
        number=entry.number,
        message_id=entry.message_id,
        cost=entry.cost
    )
