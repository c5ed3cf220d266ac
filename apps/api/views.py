"""API views for tax, shipping and order tax endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.dependencies import (
    build_carrier_service,
    build_order_tax_service,
    build_shipping_service,
    build_tax_service,
)
from apps.api.serializers import (
    CarrierRateInputSerializer,
    CoverageInputSerializer,
    ErrorSerializer,
    OrderTaxInputSerializer,
    OrderTaxSerializer,
    RegionTaxInputSerializer,
    ShippingRateInputSerializer,
    TaxCalculationInputSerializer,
    TaxCalculationResultSerializer,
    TaxExemptionInputSerializer,
    TaxRegionLookupSerializer,
    TaxRegionSerializer,
)
from apps.tax.repositories import DjangoTaxRegionStore
from core.logging import get_logger
from core.result import Failure
from services.locations import Address
from services.orders import MissingShippingAddressError, OrderNotFoundError
from services.shipping import ShippingValidationError
from services.shipping.carriers.errors import ErrorCode
from services.tax import TaxCalculationRequest, TaxValidationError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from rest_framework.request import Request

    from services.shipping.carriers.errors import ProviderError

logger = get_logger(__name__)

NO_REGION_MESSAGE = "No tax region found for this location"


def _error(message: str, status_code: int) -> Response:
    return Response({"error": message}, status=status_code)


def _provider_error_response(error: ProviderError) -> Response:
    """Render a carrier error: 404 unknown provider, 400 client error, else 502."""
    if error.code is ErrorCode.PROVIDER_NOT_FOUND:
        status_code = status.HTTP_404_NOT_FOUND
    elif error.is_client_error:
        status_code = status.HTTP_400_BAD_REQUEST
    else:
        status_code = status.HTTP_502_BAD_GATEWAY
    payload = {"error": error.message, "code": error.code.value, "details": error.details}
    headers = {"Retry-After": str(error.retry_after)} if error.retry_after else None
    return Response(payload, status=status_code, headers=headers)


class TaxCalculateView(APIView):
    """Calculate tax for a product shipped to a destination."""

    permission_classes = []

    @extend_schema(
        request=TaxCalculationInputSerializer,
        responses={200: TaxCalculationResultSerializer, 404: ErrorSerializer},
    )
    def post(self, request: Request) -> Response:
        """Resolve the region for the destination and calculate tax."""
        serializer = TaxCalculationInputSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data

        try:
            tax_request = TaxCalculationRequest(
                country_code=data["country_code"],
                amount=data["amount"],
                subdivision_code=data.get("subdivision_code") or None,
                product_id=data.get("product_id"),
                product_type=data.get("product_type"),
                shipping_address=serializer.shipping_address_value(),
            )
            result = async_to_sync(build_tax_service().calculate_tax)(tax_request)
        except TaxValidationError as e:
            return _error(str(e), status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            logger.error("Tax calculation error", error=str(e))
            return _error("Failed to calculate tax", status.HTTP_500_INTERNAL_SERVER_ERROR)

        if result is None:
            return _error(NO_REGION_MESSAGE, status.HTTP_404_NOT_FOUND)
        return Response(TaxCalculationResultSerializer(result).data)


class TaxRegionListView(APIView):
    """List the active tax regions of a country."""

    permission_classes = []

    @extend_schema(
        parameters=[OpenApiParameter("country_code", str, required=True)],
        responses={200: TaxRegionSerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        """Return regions, country level first."""
        serializer = TaxRegionLookupSerializer(data=request.query_params)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        regions = async_to_sync(build_tax_service().get_tax_regions_for_country)(
            serializer.validated_data["country_code"]
        )
        return Response(TaxRegionSerializer(regions, many=True).data)


class TaxRegionLookupView(APIView):
    """Find the region that applies to a destination."""

    permission_classes = []

    @extend_schema(
        parameters=[
            OpenApiParameter("country_code", str, required=True),
            OpenApiParameter("subdivision_code", str, required=False),
        ],
        responses={200: TaxRegionSerializer, 404: ErrorSerializer},
    )
    def get(self, request: Request) -> Response:
        """Return the most specific active region, or 404."""
        serializer = TaxRegionLookupSerializer(data=request.query_params)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data

        region = async_to_sync(build_tax_service().find_applicable_tax_region)(
            data["country_code"],
            data.get("subdivision_code") or None,
        )
        if region is None:
            return _error(NO_REGION_MESSAGE, status.HTTP_404_NOT_FOUND)
        return Response(TaxRegionSerializer(region).data)


class TaxRegionDefaultView(APIView):
    """Return the default country-level region of a country."""

    permission_classes = []

    @extend_schema(
        parameters=[OpenApiParameter("country_code", str, required=True)],
        responses={200: TaxRegionSerializer, 404: ErrorSerializer},
    )
    def get(self, request: Request) -> Response:
        """Return the default region, or 404."""
        serializer = TaxRegionLookupSerializer(data=request.query_params)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        region = async_to_sync(build_tax_service().get_default_tax_region)(
            serializer.validated_data["country_code"]
        )
        if region is None:
            return _error(NO_REGION_MESSAGE, status.HTTP_404_NOT_FOUND)
        return Response(TaxRegionSerializer(region).data)


class TaxRegionCalculateView(APIView):
    """Calculate tax against a specific region."""

    permission_classes = []

    @extend_schema(
        request=RegionTaxInputSerializer,
        responses={200: TaxCalculationResultSerializer, 404: ErrorSerializer},
    )
    def post(self, request: Request, region_id: str) -> Response:
        """Calculate tax for the region identified in the URL."""
        serializer = RegionTaxInputSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data
        if data["amount"] < 0:
            return _error("Amount must be non-negative", status.HTTP_400_BAD_REQUEST)

        region = async_to_sync(DjangoTaxRegionStore().get_tax_region_by_id)(region_id)
        if region is None:
            return _error("Tax region not found", status.HTTP_404_NOT_FOUND)

        result = async_to_sync(build_tax_service().calculate_tax_for_region)(
            region,
            product_id=data.get("product_id"),
            product_type=data.get("product_type"),
            amount=data["amount"],
        )
        return Response(TaxCalculationResultSerializer(result).data)


class ShippingRatesView(APIView):
    """Price the shipping options for a cart."""

    permission_classes = []

    @extend_schema(request=ShippingRateInputSerializer)
    def post(self, request: Request) -> Response:
        """Return rates sorted cheapest first, or a message when none apply."""
        serializer = ShippingRateInputSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data

        try:
            quote = async_to_sync(build_shipping_service().calculate_shipping_rates)(
                Address.from_mapping(data["shipping_address"]),
                serializer.cart_items(),
                data["subtotal"],
                data.get("weight"),
            )
        except ShippingValidationError as e:
            return _error(str(e), status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            logger.error("Shipping rate calculation error", error=str(e))
            return _error(
                "Failed to calculate shipping rates", status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        payload: dict[str, object] = {"rates": [rate.to_dict() for rate in quote.rates]}
        if quote.message:
            payload["message"] = quote.message
        return Response(payload)


class CoverageView(APIView):
    """Check whether any zone ships to an address."""

    permission_classes = []

    @extend_schema(request=CoverageInputSerializer)
    def post(self, request: Request) -> Response:
        """Return the coverage flag and the matching zones."""
        serializer = CoverageInputSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            coverage = async_to_sync(build_shipping_service().check_coverage)(
                Address.from_mapping(serializer.validated_data["shipping_address"])
            )
        except ShippingValidationError as e:
            return _error(str(e), status.HTTP_400_BAD_REQUEST)

        return Response(
            {
                "covered": coverage.covered,
                "zones": [{"id": zone.id, "name": zone.name} for zone in coverage.zones],
            }
        )


class ProviderConnectionTestView(APIView):
    """Check a shipping provider's stored credentials."""

    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={404: ErrorSerializer})
    def post(self, request: Request, provider_id: str) -> Response:
        """Authenticate against the provider's carrier."""
        service = build_carrier_service()
        try:
            result = async_to_sync(service.test_connection)(provider_id)
        finally:
            async_to_sync(service.close)()

        if isinstance(result, Failure):
            return _provider_error_response(result.error)
        return Response({"success": result.value.success, "message": result.value.message})


class ProviderRatesView(APIView):
    """Quote a shipping provider in real time."""

    permission_classes = [IsAuthenticated]

    @extend_schema(request=CarrierRateInputSerializer, responses={404: ErrorSerializer})
    def post(self, request: Request, provider_id: str) -> Response:
        """Return the carrier's quoted services."""
        serializer = CarrierRateInputSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data

        service = build_carrier_service()
        try:
            result = async_to_sync(service.get_rates)(
                provider_id,
                Address.from_mapping(data["to_address"]),
                serializer.packages_value(),
                data.get("services", []),
                serializer.from_address_value(),
            )
        finally:
            async_to_sync(service.close)()

        if isinstance(result, Failure):
            return _provider_error_response(result.error)
        return Response({"rates": [rate.to_dict() for rate in result.value]})


class _OrderTaxView(APIView):
    """Shared error handling for order tax endpoints."""

    permission_classes = [IsAuthenticated]

    def _render(self, value: Any) -> Response:
        return Response(OrderTaxSerializer(value).data)

    def _run(self, operation: Callable[..., Awaitable[Any]], *args: Any) -> Response:
        try:
            value = async_to_sync(operation)(*args)
        except OrderNotFoundError as e:
            return _error(str(e), status.HTTP_404_NOT_FOUND)
        except (MissingShippingAddressError, TaxValidationError) as e:
            return _error(str(e), status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            logger.error("Order tax error", error=str(e))
            return _error("Failed to update order tax", status.HTTP_500_INTERNAL_SERVER_ERROR)

        return self._render(value)


class OrderTaxView(_OrderTaxView):
    """Calculate and store tax on an order."""

    @extend_schema(request=OrderTaxInputSerializer, responses={200: OrderTaxSerializer})
    def post(self, request: Request, order_id: str) -> Response:
        """Tax the order subtotal, or each line when ``item_level`` is set."""
        serializer = OrderTaxInputSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        service = build_order_tax_service()
        if serializer.validated_data["item_level"]:
            return self._run(service.calculate_item_level_tax, order_id)
        return self._run(service.calculate_order_tax, order_id)


class OrderTaxExemptionView(_OrderTaxView):
    """Apply or remove an order's tax exemption."""

    @extend_schema(request=TaxExemptionInputSerializer, responses={200: OrderTaxSerializer})
    def post(self, request: Request, order_id: str) -> Response:
        """Mark the order tax exempt."""
        serializer = TaxExemptionInputSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        service = build_order_tax_service()
        return self._run(service.apply_tax_exemption, order_id, serializer.validated_data["reason"])

    @extend_schema(request=None, responses={200: OrderTaxSerializer})
    def delete(self, request: Request, order_id: str) -> Response:
        """Remove the exemption and recalculate tax."""
        return self._run(build_order_tax_service().remove_tax_exemption, order_id)


class OrderTaxSummaryView(_OrderTaxView):
    """Tax reporting view of an order."""

    def _render(self, value: Any) -> Response:
        return Response(value.to_dict())

    @extend_schema(responses={404: ErrorSerializer})
    def get(self, request: Request, order_id: str) -> Response:
        """Return the order's tax summary."""
        return self._run(build_order_tax_service().get_order_tax_summary, order_id)
