"""Error types for carrier adapters."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for carrier errors."""

    UNKNOWN = "unknown"
    MISSING_CREDENTIALS = "missing_credentials"
    INVALID_REQUEST = "invalid_request"
    AUTHENTICATION = "authentication"
    RATE_LIMIT = "rate_limit"
    NETWORK = "network"
    PARSE = "parse"
    SERVICE_UNAVAILABLE = "service_unavailable"
    UNSUPPORTED_PROVIDER = "unsupported_provider"
    PROVIDER_NOT_FOUND = "provider_not_found"
    PROVIDER_INACTIVE = "provider_inactive"


CLIENT_ERROR_CODES = frozenset(
    {
        ErrorCode.MISSING_CREDENTIALS,
        ErrorCode.INVALID_REQUEST,
        ErrorCode.AUTHENTICATION,
        ErrorCode.UNSUPPORTED_PROVIDER,
        ErrorCode.PROVIDER_INACTIVE,
    }
)


@dataclass(frozen=True, slots=True)
class ProviderError:
    """
    Failure reported by a real-time carrier collaborator.

    Attributes:
        code: Error code identifying the type of error.
        message: Human-readable error message.
        carrier_code: Carrier that produced the error.
        details: Additional error details (optional).
        retry_after: Seconds to wait before retrying (for rate limits).
    """

    code: ErrorCode
    message: str
    carrier_code: str
    details: str | None = None
    retry_after: int | None = None

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"[{self.carrier_code}] {self.code.value}: {self.message}"

    @property
    def is_client_error(self) -> bool:
        """True when the request or configuration is at fault (render as 400)."""
        return self.code in CLIENT_ERROR_CODES

    @property
    def is_retryable(self) -> bool:
        """Check if this error type is retryable."""
        return self.code in {
            ErrorCode.RATE_LIMIT,
            ErrorCode.NETWORK,
            ErrorCode.SERVICE_UNAVAILABLE,
        }


def MissingCredentialsError(
    carrier_code: str,
    missing: tuple[str, ...],
) -> ProviderError:
    """Create a missing credentials error."""
    return ProviderError(
        code=ErrorCode.MISSING_CREDENTIALS,
        message=f"Missing {carrier_code} credentials",
        carrier_code=carrier_code,
        details=", ".join(missing),
    )


def InvalidRequestError(
    carrier_code: str,
    message: str = "Invalid rate request",
    details: str | None = None,
) -> ProviderError:
    """Create an invalid request error."""
    return ProviderError(
        code=ErrorCode.INVALID_REQUEST,
        message=message,
        carrier_code=carrier_code,
        details=details,
    )


def AuthenticationError(
    carrier_code: str,
    message: str = "Authentication failed",
    details: str | None = None,
) -> ProviderError:
    """Create an authentication error."""
    return ProviderError(
        code=ErrorCode.AUTHENTICATION,
        message=message,
        carrier_code=carrier_code,
        details=details,
    )


def RateLimitError(
    carrier_code: str,
    message: str = "Rate limit exceeded",
    retry_after: int | None = None,
) -> ProviderError:
    """Create a rate limit error."""
    return ProviderError(
        code=ErrorCode.RATE_LIMIT,
        message=message,
        carrier_code=carrier_code,
        retry_after=retry_after,
    )


def NetworkError(
    carrier_code: str,
    message: str = "Network error",
    details: str | None = None,
) -> ProviderError:
    """Create a network error."""
    return ProviderError(
        code=ErrorCode.NETWORK,
        message=message,
        carrier_code=carrier_code,
        details=details,
    )


def ServiceUnavailableError(
    carrier_code: str,
    message: str = "Carrier service unavailable",
    details: str | None = None,
) -> ProviderError:
    """Create a service unavailable error."""
    return ProviderError(
        code=ErrorCode.SERVICE_UNAVAILABLE,
        message=message,
        carrier_code=carrier_code,
        details=details,
    )


def ParseError(
    carrier_code: str,
    message: str = "Failed to parse response",
    details: str | None = None,
) -> ProviderError:
    """Create a parse error."""
    return ProviderError(
        code=ErrorCode.PARSE,
        message=message,
        carrier_code=carrier_code,
        details=details,
    )


def UnsupportedProviderError(carrier_code: str) -> ProviderError:
    """Create an error for a provider type without an adapter."""
    return ProviderError(
        code=ErrorCode.UNSUPPORTED_PROVIDER,
        message=f"No adapter registered for carrier: {carrier_code}",
        carrier_code=carrier_code,
    )


def ProviderNotFoundError(provider_id: str) -> ProviderError:
    """Create an error for an unknown provider id."""
    return ProviderError(
        code=ErrorCode.PROVIDER_NOT_FOUND,
        message=f"Shipping provider not found: {provider_id}",
        carrier_code="unknown",
    )


def ProviderInactiveError(carrier_code: str, provider_id: str) -> ProviderError:
    """Create an error for a provider that is switched off."""
    return ProviderError(
        code=ErrorCode.PROVIDER_INACTIVE,
        message=f"Shipping provider is inactive: {provider_id}",
        carrier_code=carrier_code,
    )
