"""HTTP client for the FedEx Rate API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from services.shipping.carriers.client import DEFAULT_TIMEOUT, CarrierClient

if TYPE_CHECKING:
    from core.result import Result
    from services.shipping.carriers.errors import ProviderError

FEDEX_PRODUCTION_URL = "https://apis.fedex.com"
FEDEX_SANDBOX_URL = "https://apis-sandbox.fedex.com"

FEDEX_RATES_PATH = "/rate/v1/rates/quotes"


class FedexClient(CarrierClient):
    """FedEx API client using the client-credentials grant."""

    token_path = "/oauth/token"

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        sandbox: bool = True,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(
            carrier_code="fedex",
            base_url=FEDEX_SANDBOX_URL if sandbox else FEDEX_PRODUCTION_URL,
            timeout=timeout,
        )
        self.api_key = api_key
        self.api_secret = api_secret

    def _token_request(self) -> dict[str, Any]:
        return {
            "headers": {"Content-Type": "application/x-www-form-urlencoded"},
            "data": {
                "grant_type": "client_credentials",
                "client_id": self.api_key,
                "client_secret": self.api_secret,
            },
        }

    async def rate_quotes(self, payload: dict[str, Any]) -> Result[dict[str, Any], ProviderError]:
        """Request rate quotes; returns the raw response document."""
        return await self.post_json(FEDEX_RATES_PATH, payload, headers={"X-locale": "en_US"})
