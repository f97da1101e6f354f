"""
app/services/sms_service.py

Purpose: Outbound SMS dispatch

- Normalizes the recipient and builds the provider request
- Calls the SMS transport exactly once (no retries)
- Interprets the provider envelope
- Classifies every failure into a Failed outcome
"""

import asyncio
import httpx

from app.core.config import ProviderConfig, SANDBOX_SENDER
from app.core.exceptions import (
    DispatchError,
    FailureReason,
    InvalidInputError,
    MissingSenderConfigurationError,
    ProviderNetworkError,
    ProviderRejectedError,
    ProviderTimeoutError,
)
from app.core.logging import get_logger
from app.schemas.dispatch import Delivered, DispatchOutcome, Failed, ProviderRequest
from app.schemas.provider import (
    AcceptedRecipient,
    FailedRecipient,
    ProviderReport,
    RejectedEnvelope,
    decode_envelope,
)
from app.services.sms_transport import SmsTransport
from utils.validation_utils import normalize_recipient

logger = get_logger(__name__)


def resolve_sender(config: ProviderConfig) -> str:
    """
    Returns the sender token for the configured mode.

    Raises:
        MissingSenderConfigurationError: Production mode without a sender id
    """
    if config.is_sandbox:
        return SANDBOX_SENDER
    if not config.sender_id:
        raise MissingSenderConfigurationError(
            "AT_SENDER is required for production mode"
        )
    return config.sender_id


def build_provider_request(recipient: str, body: str, config: ProviderConfig) -> ProviderRequest:
    """
    Builds the provider request for a single normalized recipient.
    Recipient and body are passed through unchanged.
    """
    sender = resolve_sender(config)
    return ProviderRequest(to=[recipient], message=body, sender=sender)


def classify_transport_error(exc: Exception) -> DispatchError:
    """
    Maps an exception raised by a transport onto the dispatch taxonomy.
    Timeouts are checked first: builtin TimeoutError is an OSError.
    """
    if isinstance(exc, DispatchError):
        return exc
    if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)):
        return ProviderTimeoutError("SMS service request timed out", details=str(exc))
    if isinstance(exc, (httpx.TransportError, OSError)):
        return ProviderNetworkError("Unable to connect to SMS service", details=str(exc))

    return DispatchError(f"SMS sending failed: {exc}", details=type(exc).__name__)


def failure_from_error(error: DispatchError) -> Failed:
    detail = error.details if isinstance(error, ProviderRejectedError) else error.message
    return Failed(reason=error.reason, detail=detail)


def outcome_from_report(report: ProviderReport) -> DispatchOutcome:
    if isinstance(report, RejectedEnvelope):
        return Failed(reason=FailureReason.PROVIDER_REJECTED, detail=report.reason)
    if isinstance(report, FailedRecipient):
        return Failed(reason=FailureReason.DELIVERY_FAILED, detail=report.status)
    if isinstance(report, AcceptedRecipient):
        return Delivered(
            recipient=report.number,
            provider_message_id=report.message_id,
            cost=report.cost
        )
    raise TypeError(f"Unhandled provider report: {report!r}")


class MessageDispatcher:
    """
    One-shot SMS dispatcher.

    Holds only immutable configuration and the transport, so a single
    instance may serve concurrent dispatches.
    """

    def __init__(self, config: ProviderConfig, transport: SmsTransport):
        self.config = config
        self.transport = transport

    def prepare(self, recipient: str, body: str) -> ProviderRequest:
        """
        Validates input, normalizes the recipient and builds the request.

        Raises:
            InvalidInputError: Empty or non-string recipient/body, or no digits
            MissingSenderConfigurationError: Production mode without sender id
        """
        if not recipient or not isinstance(recipient, str):
            raise InvalidInputError("Recipient phone number is required and must be a string")
        if not body or not isinstance(body, str):
            raise InvalidInputError("Message is required and must be a string")

        normalized = normalize_recipient(recipient)
        logger.info(f"📱 Normalized phone number: {recipient} → {normalized}")

        request = build_provider_request(normalized, body, self.config)
        logger.debug(
            "📤 SMS request prepared",
            extra={"recipient": normalized, "mode": self.config.mode}
        )
        return request

    async def dispatch(self, recipient: str, body: str) -> DispatchOutcome:
        """
        Sends one SMS and reports the outcome. Never raises for
        dispatch failures; they are returned as Failed.

        Args:
            recipient: Raw recipient phone number
            body: Message text

        Returns:
            Delivered or Failed
        """
        try:
            request = self.prepare(recipient, body)
        except DispatchError as e:
            logger.warning(f"SMS not sent: {e.message}", extra={"reason": e.reason.value})
            return failure_from_error(e)

        try:
            payload = await self.transport.send(request)
        except Exception as e:
            error = classify_transport_error(e)
            if error.reason is FailureReason.UNEXPECTED_ERROR:
                logger.error(f"💥 Unexpected SMS error: {e}", exc_info=True)
            else:
                logger.error(f"❌ SMS transport failed: {error.message}", extra={"reason": error.reason.value})
            return failure_from_error(error)

        logger.debug(f"📥 Raw API response: {payload}")

        try:
            report = decode_envelope(payload)
        except DispatchError as e:
            logger.error(f"❌ {e.message}", extra={"reason": e.reason.value})
            return failure_from_error(e)

        outcome = outcome_from_report(report)

        if isinstance(outcome, Delivered):
            logger.info(
                f"✅ SMS sent successfully to {outcome.recipient} (cost: {outcome.cost})",
                extra={"provider_message_id": outcome.provider_message_id}
            )
        else:
            logger.error(
                f"❌ SMS failed: {outcome.reason.value} ({outcome.detail})",
                extra={"reason": outcome.reason.value}
            )

        return outcome
