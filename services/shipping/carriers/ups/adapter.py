"""UPS carrier adapter."""

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
from services.shipping.carriers.ups.client import UpsClient
from services.shipping.types import EstimatedDays

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from services.locations import Address
    from services.shipping.carriers.base import CarrierRateRequest, Package

logger = get_logger(__name__)

REQUIRED_CREDENTIALS = ("api_key", "password", "user_id")

UPS_SERVICES = {
    "01": "UPS Next Day Air",
    "02": "UPS 2nd Day Air",
    "03": "UPS Ground",
    "07": "UPS Worldwide Express",
    "08": "UPS Worldwide Expedited",
    "11": "UPS Standard",
    "12": "UPS 3 Day Select",
    "13": "UPS Next Day Air Saver",
    "14": "UPS Next Day Air Early",
    "59": "UPS 2nd Day Air A.M.",
    "65": "UPS Saver",
}

_WEIGHT_UNITS = {"LB": "LBS", "KG": "KGS"}

# Customer supplied package
PACKAGING_TYPE = "02"


def _ups_address(address: Address) -> dict[str, Any]:
    fields: dict[str, Any] = {"CountryCode": address.country_code}
    if address.address_lines:
        fields["AddressLine"] = list(address.address_lines)
    if address.city:
        fields["City"] = address.city
    if address.state:
        # UPS expects the bare state code, not the ISO 3166-2 form
        fields["StateProvinceCode"] = address.state.rsplit("-", 1)[-1].upper()
    if address.postal_code:
        fields["PostalCode"] = address.postal_code
    return fields


def _ups_package(package: Package) -> dict[str, Any]:
    unit = _WEIGHT_UNITS.get(package.weight_unit.upper(), package.weight_unit.upper())
    data: dict[str, Any] = {
        "PackagingType": {"Code": PACKAGING_TYPE},
        "PackageWeight": {
            "UnitOfMeasurement": {"Code": unit},
            "Weight": str(package.weight),
        },
    }
    if package.has_dimensions:
        data["Dimensions"] = {
            "UnitOfMeasurement": {"Code": package.dimension_unit.upper()},
            "Length": str(package.length),
            "Width": str(package.width),
            "Height": str(package.height),
        }
    return data


class UpsAdapter:
    """
    Adapter for UPS real-time rating.

    Implements the CarrierAdapter protocol. One HTTP client is kept per
    distinct credential set so tokens are reused across requests.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        client_factory: Callable[[Mapping[str, Any]], UpsClient] | None = None,
    ) -> None:
        """
        Initialize UPS adapter.

        Args:
            timeout: Request timeout in seconds.
            client_factory: Optional client builder for testing.
        """
        self._timeout = timeout
        self._client_factory = client_factory or self._build_client
        self._clients: dict[tuple[Any, ...], UpsClient] = {}

    @property
    def carrier_code(self) -> str:
        """Return the carrier code."""
        return CarrierType.UPS.value

    @property
    def carrier_name(self) -> str:
        """Return the carrier display name."""
        return "UPS"

    def _build_client(self, credentials: Mapping[str, Any]) -> UpsClient:
        return UpsClient(
            api_key=credentials["api_key"],
            password=credentials["password"],
            user_id=credentials["user_id"],
            sandbox=bool(credentials.get(SANDBOX_KEY, True)),
            timeout=self._timeout,
        )

    def _client_for(self, credentials: Mapping[str, Any]) -> UpsClient:
        key = (
            *(credentials[name] for name in REQUIRED_CREDENTIALS),
            bool(credentials.get(SANDBOX_KEY, True)),
        )
        if key not in self._clients:
            self._clients[key] = self._client_factory(credentials)
        return self._clients[key]

    def _check_credentials(self, credentials: Mapping[str, Any]) -> ProviderError | None:
        missing = missing_credentials(credentials, REQUIRED_CREDENTIALS)
        if missing:
            logger.warning("UPS credentials incomplete", missing=list(missing))
            return MissingCredentialsError(self.carrier_code, missing)
        return None

    async def test_connection(
        self,
        credentials: Mapping[str, Any],
    ) -> Result[ConnectionTestResult, ProviderError]:
        """
        Authenticate against UPS with ``credentials``.

        Args:
            credentials: api_key, password, user_id and the sandbox flag.

        Returns:
            Result containing the test outcome, or a missing-credentials error.
        """
        error = self._check_credentials(credentials)
        if error is not None:
            return failure(error)

        token = await self._client_for(credentials).authenticate()
        if isinstance(token, Failure):
            return success(ConnectionTestResult(success=False, message=token.error.message))
        return success(ConnectionTestResult(success=True, message="Successfully connected to UPS"))

    async def get_rates(
        self,
        credentials: Mapping[str, Any],
        request: CarrierRateRequest,
    ) -> Result[tuple[CarrierRate, ...], ProviderError]:
        """
        Quote UPS services for ``request``.

        Args:
            credentials: api_key, password, user_id and the sandbox flag.
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
        result = await self._client_for(credentials).shop_rates(payload)
        if isinstance(result, Failure):
            return failure(result.error)

        try:
            rates = self._parse_rates(result.value)
        except (KeyError, TypeError, ValueError, AttributeError, InvalidOperation) as e:
            logger.error("Failed to parse UPS rates", error=str(e))
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

        logger.info("UPS rates retrieved", count=len(rates))
        return success(tuple(rates))

    def _build_payload(
        self,
        credentials: Mapping[str, Any],
        request: CarrierRateRequest,
    ) -> dict[str, Any]:
        """Build the UPS ``RateRequest`` body."""
        shipper = _ups_address(request.from_address)
        return {
            "RateRequest": {
                "Request": {"RequestOption": "Shop"},
                "Shipment": {
                    "Shipper": {
                        "ShipperNumber": credentials["user_id"],
                        "Address": shipper,
                    },
                    "ShipTo": {"Address": _ups_address(request.to_address)},
                    "ShipFrom": {"Address": shipper},
                    "NumOfPieces": str(len(request.packages)),
                    "Package": [_ups_package(p) for p in request.packages],
                }
            }
        }

    def _parse_rates(self, data: dict[str, Any]) -> list[CarrierRate]:
        """Parse ``RatedShipment`` entries, which UPS sends as a list or a single object."""
        rated = data["RateResponse"].get("RatedShipment", [])
        if isinstance(rated, dict):
            rated = [rated]

        rates: list[CarrierRate] = []
        for shipment in rated:
            code = str(shipment["Service"]["Code"])
            charges = shipment["TotalCharges"]
            transit = (shipment.get("GuaranteedDelivery") or {}).get("BusinessDaysInTransit")
            estimated = None
            if transit:
                days = int(transit)
                estimated = EstimatedDays(min=days, max=days)
            rates.append(
                CarrierRate(
                    service_code=code,
                    service_name=UPS_SERVICES.get(code, f"UPS Service {code}"),
                    cost=Decimal(str(charges["MonetaryValue"])),
                    currency=charges.get("CurrencyCode", "USD"),
                    estimated_days=estimated,
                )
            )
        return rates

    async def close(self) -> None:
        """Close every cached client."""
        for client in self._clients.values():
            await client.close()
        self._clients.clear()
