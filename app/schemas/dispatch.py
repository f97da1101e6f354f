"""
app/schemas/dispatch.py

Purpose: SMS dispatch request and outcome schemas

- ProviderRequest: the payload handed to the SMS transport
- Delivered / Failed: tagged dispatch outcomes returned to callers
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, List, Literal, Optional, Union

from app.core.exceptions import FailureReason


class ProviderRequest(BaseModel):
    """
    Outbound SMS request in the provider's shape.
    `from` is a Python keyword, so the field is aliased.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    to: List[str] = Field(..., min_length=1, description="Normalized recipient numbers")
    message: str = Field(..., description="Message body, passed through verbatim")
    sender: str = Field(..., alias="from", description="Sender token")

    def as_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class Delivered(BaseModel):
    """
    Provider accepted the message for the recipient.
    """
    model_config = ConfigDict(frozen=True)

    outcome: Literal["delivered"] = "delivered"
    recipient: str
    provider_message_id: str
    cost: str

    @property
    def success(self) -> bool:
        return True


class Failed(BaseModel):
    """
    Dispatch did not deliver. `detail` carries the provider's reason
    string for ProviderRejected and the status for DeliveryFailed.
    """
    model_config = ConfigDict(frozen=True)

    outcome: Literal["failed"] = "failed"
    reason: FailureReason
    detail: Optional[str] = None

    @property
    def success(self) -> bool:
        return False


DispatchOutcome = Annotated[Union[Delivered, Failed], Field(discriminator="outcome")]
