"""Django ORM implementation of the order store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.core.exceptions import ValidationError
from django.utils import timezone

from apps.orders.models import Order, OrderItem

if TYPE_CHECKING:
    from services.orders.types import OrderRecord


class DjangoOrderStore:
    """OrderStore backed by the ``Order`` and ``OrderItem`` models."""

    async def get_order(self, order_id: str) -> OrderRecord | None:
        """Return the order with its lines; malformed ids resolve to None."""
        try:
            order = await Order.objects.filter(pk=order_id).afirst()
        except ValidationError:
            return None
        if order is None:
            return None
        items = [item async for item in OrderItem.objects.filter(order_id=order.pk)]
        return order.to_record(items)

    async def save_order(self, order: OrderRecord) -> OrderRecord:
        """Write the tax fields and total of ``order``."""
        await Order.objects.filter(pk=order.id).aupdate(
            tax_amount=order.tax_amount,
            tax_region_id=order.tax_region_id,
            tax_breakdown=[entry.to_dict() for entry in order.tax_breakdown],
            tax_exempt=order.tax_exempt,
            tax_exempt_reason=order.tax_exempt_reason or "",
            total=order.total,
            updated_at=timezone.now(),
        )
        return order
