"""Applies tax calculation results to stored orders."""

from __future__ import annotations

from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from core.logging import get_logger
from services.orders.types import (
    ZERO,
    MissingShippingAddressError,
    OrderNotFoundError,
    OrderTaxSummary,
)
from services.tax.types import TaxBreakdownEntry, TaxCalculationRequest, TaxSource

if TYPE_CHECKING:
    from core.config import TaxSettings
    from services.locations import Address
    from services.orders.types import OrderRecord, OrderStore
    from services.tax.service import TaxCalculationService

logger = get_logger(__name__)


class OrderTaxService:
    """
    Calculates, stores and reports tax on orders.

    Amounts written to an order are rounded to ``settings.quantum`` with
    ROUND_HALF_UP; breakdown entries are rounded the same way. Tax-exempt
    orders always carry zero tax.
    """

    def __init__(
        self,
        tax_service: TaxCalculationService,
        store: OrderStore,
        settings: TaxSettings,
    ) -> None:
        self._tax_service = tax_service
        self._store = store
        self._quantum = settings.quantum

    def _round(self, amount: Decimal) -> Decimal:
        return amount.quantize(self._quantum, rounding=ROUND_HALF_UP)

    def _round_entry(self, entry: TaxBreakdownEntry) -> TaxBreakdownEntry:
        return replace(entry, amount=self._round(entry.amount))

    async def _load(self, order_id: str) -> OrderRecord:
        order = await self._store.get_order(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    @staticmethod
    def _require_address(order: OrderRecord) -> Address:
        if order.shipping_address is None:
            raise MissingShippingAddressError(order.id)
        return order.shipping_address

    async def _save_zero_tax(
        self,
        order: OrderRecord,
        tax_region_id: str | None = None,
    ) -> OrderRecord:
        updated = replace(
            order,
            tax_amount=ZERO,
            tax_region_id=tax_region_id,
            tax_breakdown=(),
            total=order.compute_total(ZERO),
        )
        return await self._store.save_order(updated)

    async def calculate_order_tax(self, order_id: str) -> OrderRecord:
        """
        Calculate tax on the order subtotal and store it on the order.

        Args:
            order_id: Order to tax.

        Returns:
            The saved order.

        Raises:
            OrderNotFoundError: If the order does not exist.
            MissingShippingAddressError: If the order has no shipping address.
        """
        order = await self._load(order_id)
        return await self._tax_order(order)

    async def _tax_order(self, order: OrderRecord) -> OrderRecord:
        order_id = order.id
        address = self._require_address(order)

        if order.tax_exempt:
            logger.info("Order is tax exempt", order_id=order_id)
            return await self._save_zero_tax(order)

        result = await self._tax_service.calculate_tax(
            TaxCalculationRequest(
                country_code=address.country,
                subdivision_code=address.state,
                amount=order.subtotal,
                shipping_address=address,
            )
        )
        if result is None:
            logger.info("No tax region for order", order_id=order_id, country=address.country)
            return await self._save_zero_tax(order)

        tax_amount = self._round(result.tax_amount)
        updated = replace(
            order,
            tax_amount=tax_amount,
            tax_region_id=result.region_id,
            tax_breakdown=tuple(self._round_entry(e) for e in result.breakdown),
            total=order.compute_total(tax_amount),
        )
        logger.info(
            "Order tax calculated",
            order_id=order_id,
            region_id=result.region_id,
            tax_amount=tax_amount,
        )
        return await self._store.save_order(updated)

    async def calculate_item_level_tax(self, order_id: str) -> OrderRecord:
        """
        Calculate tax line by line so product overrides apply per item.

        Each line contributes one breakdown entry named after its title.

        Raises:
            OrderNotFoundError: If the order does not exist.
            MissingShippingAddressError: If the order has no shipping address.
        """
        order = await self._load(order_id)
        address = self._require_address(order)

        if order.tax_exempt:
            return await self._save_zero_tax(order)

        region = await self._tax_service.find_applicable_tax_region(
            address.country, address.state
        )
        if region is None:
            return await self._save_zero_tax(order)

        total_tax = ZERO
        breakdown: list[TaxBreakdownEntry] = []
        for line in order.items:
            line_result = await self._tax_service.calculate_tax_for_region(
                region,
                product_id=line.product_id or line.id,
                product_type=line.product_type,
                amount=line.total,
            )
            total_tax += line_result.tax_amount
            breakdown.append(
                TaxBreakdownEntry(
                    name=f"{line.title} Tax",
                    rate=line_result.tax_rate,
                    amount=self._round(line_result.tax_amount),
                    source=TaxSource.OVERRIDE if line_result.has_override else TaxSource.DEFAULT,
                )
            )

        tax_amount = self._round(total_tax)
        updated = replace(
            order,
            tax_amount=tax_amount,
            tax_region_id=region.id,
            tax_breakdown=tuple(breakdown),
            total=order.compute_total(tax_amount),
        )
        logger.info(
            "Item level tax calculated",
            order_id=order_id,
            region_id=region.id,
            lines=len(order.items),
            tax_amount=tax_amount,
        )
        return await self._store.save_order(updated)

    async def apply_tax_exemption(self, order_id: str, reason: str) -> OrderRecord:
        """
        Mark an order tax exempt and clear its tax.

        Raises:
            OrderNotFoundError: If the order does not exist.
        """
        order = await self._load(order_id)
        updated = replace(
            order,
            tax_exempt=True,
            tax_exempt_reason=reason,
            tax_amount=ZERO,
            tax_breakdown=(),
            total=order.compute_total(ZERO),
        )
        logger.info("Tax exemption applied", order_id=order_id, reason=reason)
        return await self._store.save_order(updated)

    async def remove_tax_exemption(self, order_id: str) -> OrderRecord:
        """
        Clear an order's exemption and recalculate its tax.

        Raises:
            OrderNotFoundError: If the order does not exist.
            MissingShippingAddressError: If the order has no shipping address.
        """
        order = await self._load(order_id)
        updated = await self._tax_order(
            replace(order, tax_exempt=False, tax_exempt_reason=None)
        )
        logger.info("Tax exemption removed", order_id=order_id)
        return updated

    async def get_order_tax_summary(self, order_id: str) -> OrderTaxSummary:
        """
        Return the tax reporting view of an order.

        Raises:
            OrderNotFoundError: If the order does not exist.
        """
        order = await self._load(order_id)
        return OrderTaxSummary(
            order_id=order.id,
            order_number=order.order_number,
            subtotal=order.subtotal,
            tax_amount=order.tax_amount,
            tax_region_id=order.tax_region_id,
            tax_exempt=order.tax_exempt,
            tax_exempt_reason=order.tax_exempt_reason,
            tax_breakdown=order.tax_breakdown,
            shipping_address=order.shipping_address,
            currency=order.currency,
        )
