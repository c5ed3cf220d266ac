"""HTTP client for the UPS Rating API."""

from __future__ import annotations

import base64
from typing import TYPE_CHECKING, Any

from services.shipping.carriers.client import DEFAULT_TIMEOUT, CarrierClient

if TYPE_CHECKING:
    from core.result import Result
    from services.shipping.carriers.errors import ProviderError

UPS_PRODUCTION_URL = "https://onlinetools.ups.com"
UPS_SANDBOX_URL = "https://wwwcie.ups.com"

UPS_RATING_PATH = "/api/rating/v2403/Shop"


class UpsClient(CarrierClient):
    """
    UPS API client.

    Authenticates with the client-credentials grant using the account's
    API key and password; the UPS account number travels as the merchant id.
    """

    token_path = "/security/v1/oauth/token"

    def __init__(
        self,
        api_key: str,
        password: str,
        user_id: str,
        sandbox: bool = True,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """
        Initialize UPS client.

        Args:
            api_key: UPS client id.
            password: UPS client secret.
            user_id: UPS account (shipper) number.
            sandbox: Use the customer integration environment.
            timeout: Request timeout in seconds.
        """
        super().__init__(
            carrier_code="ups",
            base_url=UPS_SANDBOX_URL if sandbox else UPS_PRODUCTION_URL,
            timeout=timeout,
        )
        self.api_key = api_key
        self.password = password
        self.user_id = user_id

    def _token_request(self) -> dict[str, Any]:
        raw = f"{self.api_key}:{self.password}".encode()
        return {
            "headers": {
                "Authorization": f"Basic {base64.b64encode(raw).decode()}",
                "Content-Type": "application/x-www-form-urlencoded",
                "x-merchant-id": self.user_id,
            },
            "data": {"grant_type": "client_credentials"},
        }

    async def shop_rates(self, payload: dict[str, Any]) -> Result[dict[str, Any], ProviderError]:
        """
        Request rates for every UPS service.

        Args:
            payload: ``RateRequest`` body.

        Returns:
            Result containing the raw ``RateResponse`` document.
        """
        return await self.post_json(
            UPS_RATING_PATH,
            payload,
            headers={"transactionSrc": "ecommerce-backoffice"},
        )
