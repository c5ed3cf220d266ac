"""Tests for the FedEx carrier adapter."""

from __future__ import annotations

from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from core.result import Failure, Success, failure, success
from services.locations import Address
from services.shipping.carriers.base import SANDBOX_KEY, CarrierRateRequest, Package
from services.shipping.carriers.errors import AuthenticationError, ErrorCode
from services.shipping.carriers.fedex import FedexAdapter
from services.shipping.carriers.fedex.client import FedexClient

CREDENTIALS = {
    "api_key": "fx-key",
    "api_secret": "fx-secret",
    "account_number": "510087020",
    "meter_number": "119000001",
    SANDBOX_KEY: True,
}


@pytest.fixture()
def mock_client() -> MagicMock:
    """A FedEx client double."""
    client = MagicMock(spec=FedexClient)
    client.authenticate = AsyncMock(return_value=success("token"))
    client.rate_quotes = AsyncMock()
    client.close = AsyncMock()
    return client


@pytest.fixture()
def adapter(mock_client: MagicMock) -> FedexAdapter:
    """Adapter that always hands out the client double."""
    return FedexAdapter(client_factory=lambda _credentials: mock_client)


@pytest.fixture()
def rate_request() -> CarrierRateRequest:
    """A one-package request in kilograms."""
    return CarrierRateRequest(
        from_address=Address(country="US", state="TN", postal_code="38118"),
        to_address=Address(country="CA", state="ON", city="Toronto", postal_code="M5V2T6"),
        packages=(Package(weight=Decimal("2"), weight_unit="KG"),),
    )


def _detail(service: str, amount: float, transit: str | None = None) -> dict[str, Any]:
    detail: dict[str, Any] = {
        "serviceType": service,
        "ratedShipmentDetails": [{"totalNetCharge": amount, "currency": "USD"}],
    }
    if transit is not None:
        detail["operationalDetail"] = {"transitTime": transit}
    return detail


class TestFedexConnection:
    """Tests for test_connection."""

    @pytest.mark.asyncio
    async def test_success(self, adapter: FedexAdapter) -> None:
        """A token means the connection works."""
        result = await adapter.test_connection(CREDENTIALS)

        assert isinstance(result, Success)
        assert result.value.success is True
        assert result.value.message == "Successfully connected to FedEx"

    @pytest.mark.asyncio
    async def test_rejected_credentials(
        self, adapter: FedexAdapter, mock_client: MagicMock
    ) -> None:
        """Rejected credentials give an unsuccessful test result."""
        mock_client.authenticate.return_value = failure(
            AuthenticationError("fedex", message="Invalid credentials")
        )

        result = await adapter.test_connection(CREDENTIALS)

        assert isinstance(result, Success)
        assert result.value.success is False
        assert result.value.message == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_meter_number_required(self, adapter: FedexAdapter) -> None:
        """All four credential fields are required."""
        credentials = {k: v for k, v in CREDENTIALS.items() if k != "meter_number"}

        result = await adapter.test_connection(credentials)

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.MISSING_CREDENTIALS
        assert result.error.details == "meter_number"


class TestFedexRates:
    """Tests for get_rates."""

    @pytest.mark.asyncio
    async def test_payload_shape(
        self,
        adapter: FedexAdapter,
        mock_client: MagicMock,
        rate_request: CarrierRateRequest,
    ) -> None:
        """The quote body carries the account and package line items."""
        mock_client.rate_quotes.return_value = success({"output": {"rateReplyDetails": []}})

        await adapter.get_rates(CREDENTIALS, rate_request)

        payload = mock_client.rate_quotes.call_args.args[0]
        assert payload["accountNumber"] == {"value": "510087020"}
        shipment = payload["requestedShipment"]
        assert shipment["recipient"]["address"] == {
            "countryCode": "CA",
            "city": "Toronto",
            "stateOrProvinceCode": "ON",
            "postalCode": "M5V2T6",
        }
        assert shipment["requestedPackageLineItems"] == [{"weight": {"units": "KG", "value": 2.0}}]
        assert shipment["rateRequestType"] == ["ACCOUNT"]

    @pytest.mark.asyncio
    async def test_parses_rate_reply_details(
        self,
        adapter: FedexAdapter,
        mock_client: MagicMock,
        rate_request: CarrierRateRequest,
    ) -> None:
        """Rate reply details become carrier rates with transit estimates."""
        mock_client.rate_quotes.return_value = success(
            {
                "output": {
                    "rateReplyDetails": [
                        _detail("FEDEX_GROUND", 18.75, "THREE_DAYS"),
                        {**_detail("PRIORITY_OVERNIGHT", 64.1), "serviceName": "FedEx Priority"},
                    ]
                }
            }
        )

        result = await adapter.get_rates(CREDENTIALS, rate_request)

        assert isinstance(result, Success)
        ground, overnight = result.value
        assert ground.service_name == "Fedex Ground"
        assert ground.cost == Decimal("18.75")
        assert ground.estimated_days is not None
        assert ground.estimated_days.max == 3
        assert overnight.service_name == "FedEx Priority"
        assert overnight.cost == Decimal("64.1")
        assert overnight.estimated_days is None

    @pytest.mark.asyncio
    async def test_missing_rated_details(
        self,
        adapter: FedexAdapter,
        mock_client: MagicMock,
        rate_request: CarrierRateRequest,
    ) -> None:
        """A detail without rated shipments is a parse error."""
        mock_client.rate_quotes.return_value = success(
            {"output": {"rateReplyDetails": [{"serviceType": "X", "ratedShipmentDetails": []}]}}
        )

        result = await adapter.get_rates(CREDENTIALS, rate_request)

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.PARSE

    @pytest.mark.asyncio
    async def test_service_filter(
        self,
        adapter: FedexAdapter,
        mock_client: MagicMock,
        rate_request: CarrierRateRequest,
    ) -> None:
        """Only requested service types are kept."""
        details = [_detail("FEDEX_GROUND", 10), _detail("FEDEX_2_DAY", 20)]
        mock_client.rate_quotes.return_value = success({"output": {"rateReplyDetails": details}})
        filtered = CarrierRateRequest(
            from_address=rate_request.from_address,
            to_address=rate_request.to_address,
            packages=rate_request.packages,
            services=("FEDEX_2_DAY",),
        )

        result = await adapter.get_rates(CREDENTIALS, filtered)

        assert isinstance(result, Success)
        assert [r.service_code for r in result.value] == ["FEDEX_2_DAY"]

    @pytest.mark.asyncio
    async def test_close(self, adapter: FedexAdapter, mock_client: MagicMock) -> None:
        """close releases the cached client."""
        await adapter.test_connection(CREDENTIALS)

        await adapter.close()

        mock_client.close.assert_awaited_once()
