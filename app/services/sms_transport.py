"""
app/services/sms_transport.py

Purpose: Africa's Talking SMS transport

- Sends one SMS request to the Africa's Talking messaging API
- Returns the parsed JSON envelope without interpreting it
- Converts httpx transport failures into dispatch errors
"""

import httpx
from typing import Any, Dict, Optional, Protocol

from app.core.config import ProviderConfig
from app.core.exceptions import (
    InvalidProviderResponseError,
    ProviderNetworkError,
    ProviderRejectedError,
    ProviderTimeoutError,
)
from app.core.logging import get_logger
from app.schemas.dispatch import ProviderRequest

logger = get_logger(__name__)

MESSAGING_PATH = "/version1/messaging"


class SmsTransport(Protocol):
    """Narrow boundary around the provider call."""

    async def send(self, request: ProviderRequest) -> Any:
        ...


class AfricasTalkingTransport:
    """Transport for the Africa's Talking bulk SMS endpoint"""

    def __init__(self, config: ProviderConfig, client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self.url = f"{config.base_url}{MESSAGING_PATH}"
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=config.timeout)

    def _headers(self) -> Dict[str, str]:
        return {
            "apiKey": self.config.api_key,
            "Accept": "application/json",
        }

    def _form(self, request: ProviderRequest) -> Dict[str, str]:
        return {
            "username": self.config.username,
            "to": ",".join(request.to),
            "message": request.message,
            "from": request.sender,
        }

    async def send(self, request: ProviderRequest) -> Any:
        """
        Posts the request to the messaging endpoint.

        Args:
            request: Built provider request

        Returns:
            Parsed JSON response body

        Raises:
            ProviderTimeoutError: Request exceeded the configured timeout
            ProviderNetworkError: Host unreachable, connection refused, etc.
            ProviderRejectedError: Non-2xx HTTP status
            InvalidProviderResponseError: Body is not JSON
        """
        logger.info(f"🔄 Calling Africa's Talking SMS API ({self.config.mode})")

        try:
            response = await self._client.post(
                self.url,
                data=self._form(request),
                headers=self._headers(),
                timeout=self.config.timeout,
            )
        except httpx.TimeoutException as e:
            logger.error("⏰ Africa's Talking API request timed out")
            raise ProviderTimeoutError("SMS service request timed out", details=str(e)) from e
        except httpx.TransportError as e:
            logger.error(f"🌐 Unable to connect to Africa's Talking API: {e}")
            raise ProviderNetworkError("Unable to connect to SMS service", details=str(e)) from e

        if response.status_code not in (200, 201):
            error_text = response.text.strip()
            logger.error(f"❌ Africa's Talking API error: {response.status_code} - {error_text}")
            raise ProviderRejectedError(
                f"SMS API error: HTTP {response.status_code}",
                details=error_text or f"HTTP {response.status_code}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise InvalidProviderResponseError(
                "SMS API returned a non-JSON body",
                details=response.text[:200]
            ) from e

    async def close(self):
        """Closes the underlying HTTP client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()
