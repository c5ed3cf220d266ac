"""FedEx carrier adapter."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from core.logging import get_logger
from core.result import Failure, Result, failure, success
from services.shipping.carriers.base import (
    SANDBOX_KEY,
    CarrierRate,
    CarrierType,
    ConnectionTestResult,
    missing_credentials,
)
from services.shipping.carriers.client import DEFAULT_TIMEOUT
from services.shipping.carriers.errors import (
    InvalidRequestError,
    MissingCredentialsError,
    ParseError,
    ProviderError,
)
from services.shipping.carriers.fedex.client import FedexClient
from services.shipping.types import EstimatedDays

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from services.locations import Address
    from services.shipping.carriers.base import CarrierRateRequest

logger = get_logger(__name__)

REQUIRED_CREDENTIALS = ("api_key", "api_secret", "account_number", "meter_number")

TRANSIT_DAYS = {
    "ONE_DAY": 1,
    "TWO_DAYS": 2,
    "THREE_DAYS": 3,
    "FOUR_DAYS": 4,
    "FIVE_DAYS": 5,
    "SIX_DAYS": 6,
    "SEVEN_DAYS": 7,
    "EIGHT_DAYS": 8,
    "NINE_DAYS": 9,
    "TEN_DAYS": 10,
}

_WEIGHT_UNITS = {"LBS": "LB", "KGS": "KG"}


def _fedex_address(address: Address) -> dict[str, Any]:
    fields: dict[str, Any] = {"countryCode": address.country_code}
    if address.address_lines:
        fields["streetLines"] = list(address.address_lines)
    if address.city:
        fields["city"] = address.city
    if address.state:
        fields["stateOrProvinceCode"] = address.state.rsplit("-", 1)[-1].upper()
    if address.postal_code:
        fields["postalCode"] = address.postal_code
    return fields


def _parse_transit(detail: Mapping[str, Any]) -> EstimatedDays | None:
    operational = detail.get("operationalDetail") or {}
    days = TRANSIT_DAYS.get(str(operational.get("transitTime", "")).upper())
    if days is None:
        return None
    return EstimatedDays(min=days, max=days)


class FedexAdapter:
    """
    Adapter for FedEx real-time rating.

    Implements the CarrierAdapter protocol.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        client_factory: Callable[[Mapping[str, Any]], FedexClient] | None = None,
    ) -> None:
        """
        Initialize FedEx adapter.

        Args:
            timeout: Request timeout in seconds.
            client_factory: Optional client builder for testing.
        """
        self._timeout = timeout
        self._client_factory = client_factory or self._build_client
        self._clients: dict[tuple[Any, ...], FedexClient] = {}

    @property
    def carrier_code(self) -> str:
        """Return the carrier code."""
        return CarrierType.FEDEX.value

    @property
    def carrier_name(self) -> str:
        """Return the carrier display name."""
        return "FedEx"

    def _build_client(self, credentials: Mapping[str, Any]) -> FedexClient:
        return FedexClient(
            api_key=credentials["api_key"],
            api_secret=credentials["api_secret"],
            sandbox=bool(credentials.get(SANDBOX_KEY, True)),
            timeout=self._timeout,
        )

    def _client_for(self, credentials: Mapping[str, Any]) -> FedexClient:
        key = (
            credentials["api_key"],
            credentials["api_secret"],
            bool(credentials.get(SANDBOX_KEY, True)),
        )
        if key not in self._clients:
            self._clients[key] = self._client_factory(credentials)
        return self._clients[key]

    def _check_credentials(self, credentials: Mapping[str, Any]) -> ProviderError | None:
        missing = missing_credentials(credentials, REQUIRED_CREDENTIALS)
        if missing:
            logger.warning("FedEx credentials incomplete", missing=list(missing))
            return MissingCredentialsError(self.carrier_code, missing)
        return None

    async def test_connection(
        self,
        credentials: Mapping[str, Any],
    ) -> Result[ConnectionTestResult, ProviderError]:
        """
        Authenticate against FedEx with ``credentials``.

        Returns:
            Result containing the test outcome, or a missing-credentials error.
        """
        error = self._check_credentials(credentials)
        if error is not None:
            return failure(error)

        token = await self._client_for(credentials).authenticate()
        if isinstance(token, Failure):
            return success(ConnectionTestResult(success=False, message=token.error.message))
        return success(
            ConnectionTestResult(success=True, message="Successfully connected to FedEx")
        )

    async def get_rates(
        self,
        credentials: Mapping[str, Any],
        request: CarrierRateRequest,
    ) -> Result[tuple[CarrierRate, ...], ProviderError]:
        """
        Quote FedEx services for ``request``.

        Args:
            credentials: api_key, api_secret, account_number, meter_number
                and the sandbox flag.
            request: Origin, destination and packages.

        Returns:
            Result containing quoted rates or ProviderError.
        """
        error = self._check_credentials(credentials)
        if error is not None:
            return failure(error)
        if not request.is_complete:
            return failure(
                InvalidRequestError(
                    self.carrier_code,
                    message="Rate request needs both addresses and at least one package",
                )
            )

        payload = self._build_payload(credentials, request)
        result = await self._client_for(credentials).rate_quotes(payload)
        if isinstance(result, Failure):
            return failure(result.error)

        try:
            rates = self._parse_rates(result.value)
        except (KeyError, IndexError, TypeError, ValueError, AttributeError, InvalidOperation) as e:
            logger.error("Failed to parse FedEx rates", error=str(e))
            return failure(
                ParseError(
                    self.carrier_code,
                    message="Failed to parse rate response",
                    details=str(e),
                )
            )

        if request.services:
            wanted = set(request.services)
            rates = [rate for rate in rates if rate.service_code in wanted]

        logger.info("FedEx rates retrieved", count=len(rates))
        return success(tuple(rates))

    def _build_payload(
        self,
        credentials: Mapping[str, Any],
        request: CarrierRateRequest,
    ) -> dict[str, Any]:
        """Build the FedEx rate quote body."""
        packages = []
        for package in request.packages:
            unit = package.weight_unit.upper()
            item: dict[str, Any] = {
                "weight": {
                    "units": _WEIGHT_UNITS.get(unit, unit),
                    "value": float(package.weight),
                }
            }
            if package.has_dimensions:
                item["dimensions"] = {
                    "length": float(package.length or 0),
                    "width": float(package.width or 0),
                    "height": float(package.height or 0),
                    "units": package.dimension_unit.upper(),
                }
            packages.append(item)

        return {
            "accountNumber": {"value": credentials["account_number"]},
            "requestedShipment": {
                "shipper": {"address": _fedex_address(request.from_address)},
                "recipient": {"address": _fedex_address(request.to_address)},
                "pickupType": "DROPOFF_AT_FEDEX_LOCATION",
                "rateRequestType": ["ACCOUNT"],
                "requestedPackageLineItems": packages,
            },
        }

    def _parse_rates(self, data: dict[str, Any]) -> list[CarrierRate]:
        details = data["output"].get("rateReplyDetails", [])
        rates: list[CarrierRate] = []
        for detail in details:
            shipment = detail["ratedShipmentDetails"][0]
            code = str(detail["serviceType"])
            rates.append(
                CarrierRate(
                    service_code=code,
                    service_name=detail.get("serviceName") or code.replace("_", " ").title(),
                    cost=Decimal(str(shipment["totalNetCharge"])),
                    currency=shipment.get("currency", "USD"),
                    estimated_days=_parse_transit(detail),
                )
            )
        return rates

    async def close(self) -> None:
        """Close every cached client."""
        for client in self._clients.values():
            await client.close()
        self._clients.clear()
