"""Shared OAuth HTTP client for carrier rating APIs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx

from core.logging import get_logger
from core.result import Failure, Result, failure, success
from services.shipping.carriers.errors import (
    AuthenticationError,
    InvalidRequestError,
    NetworkError,
    ParseError,
    ProviderError,
    RateLimitError,
    ServiceUnavailableError,
)

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0

# Refresh tokens this long before the carrier says they expire
TOKEN_EXPIRY_BUFFER = timedelta(seconds=60)


class CarrierClient(ABC):
    """
    HTTP client for a carrier API using the OAuth client-credentials flow.

    Subclasses provide the token request and the API paths; this class
    handles token caching, transport errors and status-code mapping.

    Attributes:
        carrier_code: Carrier the client talks to.
        base_url: API root (production or sandbox).
        timeout: Request timeout in seconds.
    """

    token_path: str = "/oauth/token"

    def __init__(
        self,
        carrier_code: str,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """
        Initialize the client.

        Args:
            carrier_code: Carrier code used in errors and logs.
            base_url: API root without trailing slash.
            timeout: Request timeout in seconds.
        """
        self.carrier_code = carrier_code
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self._client: httpx.AsyncClient | None = None
        self._access_token: str | None = None
        self._token_expires_at: datetime | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    @abstractmethod
    def _token_request(self) -> dict[str, Any]:
        """Return keyword arguments for the token POST (headers, data)."""

    def _is_token_valid(self) -> bool:
        """Check if current access token is valid."""
        if self._access_token is None or self._token_expires_at is None:
            return False
        return datetime.now(UTC) < (self._token_expires_at - TOKEN_EXPIRY_BUFFER)

    async def authenticate(self) -> Result[str, ProviderError]:
        """
        Get a valid access token, fetching a new one when needed.

        Returns:
            Result containing the access token or ProviderError.
        """
        if self._is_token_valid() and self._access_token is not None:
            return success(self._access_token)
        return await self._fetch_new_token()

    async def _fetch_new_token(self) -> Result[str, ProviderError]:
        client = await self._get_client()
        try:
            response = await client.post(
                f"{self.base_url}{self.token_path}",
                **self._token_request(),
            )
        except httpx.TimeoutException:
            logger.error("Carrier auth request timeout", carrier=self.carrier_code)
            return failure(
                NetworkError(self.carrier_code, message="Authentication request timeout")
            )
        except httpx.RequestError as e:
            logger.error("Carrier auth request error", carrier=self.carrier_code, error=str(e))
            return failure(
                NetworkError(
                    self.carrier_code,
                    message="Authentication request failed",
                    details=str(e),
                )
            )
        return self._handle_token_response(response)

    def _handle_token_response(self, response: httpx.Response) -> Result[str, ProviderError]:
        if response.status_code in (400, 401, 403):
            logger.error(
                "Carrier authentication failed",
                carrier=self.carrier_code,
                status_code=response.status_code,
            )
            return failure(AuthenticationError(self.carrier_code, message="Invalid credentials"))

        if response.status_code >= 400:
            logger.error(
                "Carrier token request failed",
                carrier=self.carrier_code,
                status_code=response.status_code,
                response_text=response.text[:500],
            )
            return failure(
                ServiceUnavailableError(
                    self.carrier_code,
                    message=f"Token request failed with status {response.status_code}",
                )
            )

        try:
            data = response.json()
            token = str(data["access_token"])
            expires_in = int(data.get("expires_in", 3600))
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Failed to parse carrier auth response", carrier=self.carrier_code)
            return failure(
                ParseError(
                    self.carrier_code,
                    message="Failed to parse authentication response",
                    details=str(e),
                )
            )

        self._access_token = token
        self._token_expires_at = datetime.now(UTC) + timedelta(seconds=expires_in)
        logger.info("Carrier access token obtained", carrier=self.carrier_code, expires_in=expires_in)
        return success(token)

    async def post_json(
        self,
        path: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> Result[dict[str, Any], ProviderError]:
        """
        Make an authenticated JSON POST.

        Args:
            path: API path below ``base_url``.
            payload: JSON body.
            headers: Extra headers.

        Returns:
            Result containing the decoded response or ProviderError.
        """
        token_result = await self.authenticate()
        if isinstance(token_result, Failure):
            return failure(token_result.error)

        client = await self._get_client()
        try:
            response = await client.post(
                f"{self.base_url}{path}",
                json=payload,
                headers={
                    "Authorization": f"Bearer {token_result.value}",
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                    **(headers or {}),
                },
            )
        except httpx.TimeoutException:
            logger.error("Carrier request timeout", carrier=self.carrier_code, path=path)
            return failure(NetworkError(self.carrier_code, message="Request timeout"))
        except httpx.RequestError as e:
            logger.error("Carrier request error", carrier=self.carrier_code, path=path)
            return failure(
                NetworkError(self.carrier_code, message="Request failed", details=str(e))
            )
        return self._handle_api_response(response)

    def _handle_api_response(
        self, response: httpx.Response
    ) -> Result[dict[str, Any], ProviderError]:
        """Map the API response to a Result."""
        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            retry_seconds = int(retry_after) if retry_after and retry_after.isdigit() else 60
            logger.warning(
                "Rate limited by carrier",
                carrier=self.carrier_code,
                retry_after=retry_seconds,
            )
            return failure(RateLimitError(self.carrier_code, retry_after=retry_seconds))

        if response.status_code == 401:
            self._access_token = None
            self._token_expires_at = None
            return failure(
                AuthenticationError(self.carrier_code, message="Access token expired or invalid")
            )

        if 400 <= response.status_code < 500:
            logger.warning(
                "Carrier rejected request",
                carrier=self.carrier_code,
                status_code=response.status_code,
            )
            return failure(
                InvalidRequestError(
                    self.carrier_code,
                    message=f"Carrier rejected the request with status {response.status_code}",
                    details=response.text[:500],
                )
            )

        if response.status_code >= 500:
            logger.error(
                "Carrier API error",
                carrier=self.carrier_code,
                status_code=response.status_code,
            )
            return failure(
                ServiceUnavailableError(
                    self.carrier_code,
                    message=f"API returned status {response.status_code}",
                    details=response.text[:500],
                )
            )

        try:
            data: dict[str, Any] = response.json()
        except ValueError as e:
            logger.error("Failed to parse carrier response", carrier=self.carrier_code)
            return failure(ParseError(self.carrier_code, details=str(e)))
        return success(data)
