"""Types for applying tax to orders."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from services.locations import Address
    from services.tax.types import TaxBreakdownEntry

ZERO = Decimal("0")


class OrderNotFoundError(LookupError):
    """Raised when an order id does not resolve."""

    def __init__(self, order_id: str) -> None:
        """Initialize with the missing order id."""
        self.order_id = order_id
        super().__init__(f"Order not found: {order_id}")


class MissingShippingAddressError(ValueError):
    """Raised when tax is requested for an order without a shipping address."""

    def __init__(self, order_id: str) -> None:
        """Initialize with the order id."""
        self.order_id = order_id
        super().__init__("Shipping address is required for tax calculation")


@dataclass(frozen=True, slots=True)
class OrderLine:
    """
    An order item as seen by tax calculation.

    Attributes:
        id: Line identifier.
        product_id: Product the line refers to, if known.
        product_type: Product type used for type-targeted overrides.
        title: Product title at purchase time.
        total: Line total (unit price times quantity).
    """

    id: str
    title: str
    total: Decimal
    product_id: str | None = None
    product_type: str | None = None


@dataclass(frozen=True, slots=True)
class OrderRecord:
    """
    The tax-relevant view of an order.

    ``total`` is always ``subtotal + tax_amount + shipping_amount -
    discount_amount`` after any tax operation.
    """

    id: str
    order_number: str
    subtotal: Decimal
    shipping_amount: Decimal = ZERO
    discount_amount: Decimal = ZERO
    tax_amount: Decimal = ZERO
    total: Decimal = ZERO
    currency: str = "USD"
    shipping_address: Address | None = None
    tax_region_id: str | None = None
    tax_breakdown: tuple[TaxBreakdownEntry, ...] = ()
    tax_exempt: bool = False
    tax_exempt_reason: str | None = None
    items: tuple[OrderLine, ...] = ()

    def compute_total(self, tax_amount: Decimal) -> Decimal:
        """Return the order total for ``tax_amount``."""
        return self.subtotal + tax_amount + self.shipping_amount - self.discount_amount


@dataclass(frozen=True, slots=True)
class OrderTaxSummary:
    """Tax reporting view of an order."""

    order_id: str
    order_number: str
    subtotal: Decimal
    tax_amount: Decimal
    tax_region_id: str | None
    tax_exempt: bool
    tax_exempt_reason: str | None
    tax_breakdown: tuple[TaxBreakdownEntry, ...]
    shipping_address: Address | None
    currency: str

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation."""
        return {
            "order_id": self.order_id,
            "order_number": self.order_number,
            "subtotal": str(self.subtotal),
            "tax_amount": str(self.tax_amount),
            "tax_region_id": self.tax_region_id,
            "tax_exempt": self.tax_exempt,
            "tax_exempt_reason": self.tax_exempt_reason,
            "tax_breakdown": [entry.to_dict() for entry in self.tax_breakdown],
            "shipping_address": (
                self.shipping_address.to_dict() if self.shipping_address else None
            ),
            "currency": self.currency,
        }


class OrderStore(Protocol):
    """Order persistence, provided by the storage layer."""

    async def get_order(self, order_id: str) -> OrderRecord | None:
        """Return the order with its lines, or None."""
        ...

    async def save_order(self, order: OrderRecord) -> OrderRecord:
        """Persist the tax fields and total of ``order`` and return it."""
        ...
