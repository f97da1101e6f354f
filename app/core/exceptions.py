from enum import Enum
from typing import Optional, Any


class FailureReason(str, Enum):
    """
    Classification of a failed SMS dispatch.
    """
    INVALID_INPUT = "InvalidInput"
    MISSING_SENDER_CONFIGURATION = "MissingSenderConfiguration"
    NETWORK_ERROR = "NetworkError"
    TIMEOUT_ERROR = "TimeoutError"
    INVALID_PROVIDER_RESPONSE = "InvalidProviderResponse"
    PROVIDER_REJECTED = "ProviderRejected"
    DELIVERY_FAILED = "DeliveryFailed"
    UNEXPECTED_ERROR = "UnexpectedError"


class TxnAlertError(Exception):
    """
    Base exception for the TxnAlert application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class ResourceNotFoundError(TxnAlertError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)

class ConfigurationError(TxnAlertError):
    """
    Raised at startup when required configuration is missing or invalid.
    """
    def __init__(self, message: str = "Invalid configuration", details: Optional[Any] = None):
        super().__init__(message, code="CONFIGURATION_ERROR", status_code=500, details=details)


class DispatchError(TxnAlertError):
    """
    Base for SMS dispatch failures. Never escapes the dispatcher;
    it is converted into a Failed outcome carrying `reason`.
    """
    reason: FailureReason = FailureReason.UNEXPECTED_ERROR

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, code=self.reason.value, status_code=502, details=details)

class InvalidInputError(DispatchError):
    """
    Raised when the recipient or message body is unusable.
    """
    reason = FailureReason.INVALID_INPUT

class MissingSenderConfigurationError(DispatchError):
    """
    Raised when production mode has no sender id configured.
    """
    reason = FailureReason.MISSING_SENDER_CONFIGURATION

class ProviderNetworkError(DispatchError):
    """
    Raised when the provider host cannot be reached.
    """
    reason = FailureReason.NETWORK_ERROR

class ProviderTimeoutError(DispatchError):
    """
    Raised when the provider request exceeds its deadline.
    """
    reason = FailureReason.TIMEOUT_ERROR

class InvalidProviderResponseError(DispatchError):
    """
    Raised when the provider response does not match the expected envelope.
    """
    reason = FailureReason.INVALID_PROVIDER_RESPONSE

class ProviderRejectedError(DispatchError):
    """
    Raised when the provider refuses the request outright (e.g. HTTP 401).
    """
    reason = FailureReason.PROVIDER_REJECTED
