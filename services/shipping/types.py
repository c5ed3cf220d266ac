"""Types for shipping zone matching and rate calculation."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from services.locations import Address


class ShippingValidationError(ValueError):
    """Raised for malformed shipping requests or rate records."""


class ShippingRateType(str, Enum):
    """Mutually exclusive pricing strategies of a shipping rate."""

    FLAT_RATE = "FLAT_RATE"
    WEIGHT_BASED = "WEIGHT_BASED"
    PRICE_BASED = "PRICE_BASED"
    FREE = "FREE"
    # Real-time carrier pricing; never priced by the rate engine
    CALCULATED = "CALCULATED"


@dataclass(frozen=True, slots=True)
class ShippingZone:
    """
    A geographic match pattern used to select candidate rates.

    Empty ``states``, ``cities`` or ``postal_codes`` match anything for that
    dimension; ``countries`` must always contain the destination country.
    """

    id: str
    name: str
    countries: tuple[str, ...]
    states: tuple[str, ...] = ()
    cities: tuple[str, ...] = ()
    postal_codes: tuple[str, ...] = ()
    is_active: bool = True
    priority: int = 0
    description: str = ""


@dataclass(frozen=True, slots=True)
class ShippingRate:
    """
    A priced shipping option attached to a zone.

    Only the strategy parameters relevant to ``type`` are expected to be set.
    ``price_rate`` is a percentage of the subtotal (5 = 5%).
    """

    id: str
    name: str
    shipping_zone_id: str
    type: ShippingRateType = ShippingRateType.FLAT_RATE
    shipping_provider_id: str | None = None
    description: str = ""
    flat_rate: Decimal | None = None
    weight_rate: Decimal | None = None
    min_weight: Decimal | None = None
    max_weight: Decimal | None = None
    price_rate: Decimal | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    free_shipping_threshold: Decimal | None = None
    min_delivery_days: int | None = None
    max_delivery_days: int | None = None
    is_active: bool = True
    priority: int = 0

    def __post_init__(self) -> None:
        """Reject negative strategy parameters."""
        for name in (
            "flat_rate",
            "weight_rate",
            "min_weight",
            "max_weight",
            "price_rate",
            "min_price",
            "max_price",
            "free_shipping_threshold",
        ):
            value = getattr(self, name)
            if value is not None and value < 0:
                msg = f"{name} cannot be negative"
                raise ShippingValidationError(msg)


@dataclass(frozen=True, slots=True)
class RateContext:
    """
    What a rate is evaluated against.

    Attributes:
        subtotal: Order/cart subtotal.
        weight: Total weight, or None when unknown.
    """

    subtotal: Decimal
    weight: Decimal | None = None

    def __post_init__(self) -> None:
        """Validate the context."""
        if self.subtotal < 0:
            msg = "subtotal cannot be negative"
            raise ShippingValidationError(msg)
        if self.weight is not None and self.weight < 0:
            msg = "weight cannot be negative"
            raise ShippingValidationError(msg)


@dataclass(frozen=True, slots=True)
class EstimatedDays:
    """Delivery estimate range in days."""

    min: int | None = None
    max: int | None = None


@dataclass(frozen=True, slots=True)
class PricedRate:
    """An eligible rate with its computed cost."""

    rate_id: str
    name: str
    cost: Decimal
    estimated_days: EstimatedDays
    type: ShippingRateType
    shipping_zone_id: str
    shipping_provider_id: str | None = None
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation."""
        return {
            "id": self.rate_id,
            "name": self.name,
            "description": self.description,
            "cost": str(self.cost),
            "estimated_days": {"min": self.estimated_days.min, "max": self.estimated_days.max},
            "type": self.type.value,
            "shipping_zone_id": self.shipping_zone_id,
            "shipping_provider_id": self.shipping_provider_id,
        }


@dataclass(frozen=True, slots=True)
class CartItem:
    """
    A cart/order line as seen by shipping.

    Attributes:
        product_id: Product identifier.
        quantity: Units ordered.
        weight: Weight of one unit, when known.
    """

    product_id: str
    quantity: int = 1
    weight: Decimal | None = None

    def __post_init__(self) -> None:
        """Validate the line."""
        if self.quantity < 1:
            msg = "quantity must be at least 1"
            raise ShippingValidationError(msg)
        if self.weight is not None and self.weight < 0:
            msg = "weight cannot be negative"
            raise ShippingValidationError(msg)

    @property
    def total_weight(self) -> Decimal | None:
        if self.weight is None:
            return None
        return self.weight * self.quantity


@dataclass(frozen=True, slots=True)
class ShippingQuote:
    """
    Priced options for a destination.

    ``message`` explains an empty result (e.g. no zone covers the address).
    """

    rates: tuple[PricedRate, ...]
    message: str | None = None

    @property
    def is_available(self) -> bool:
        return bool(self.rates)

    @property
    def cheapest(self) -> PricedRate | None:
        return self.rates[0] if self.rates else None


@dataclass(frozen=True, slots=True)
class CoverageResult:
    """Whether any active zone covers an address, and which ones."""

    covered: bool
    zones: tuple[ShippingZone, ...]


@dataclass(frozen=True, slots=True)
class ShippingProviderConfig:
    """
    A configured carrier account.

    Attributes:
        id: Provider identifier.
        name: Display name.
        type: Carrier code (``ups``, ``fedex``, ...).
        credentials: Carrier-specific credential fields.
        is_active: Whether the provider may be used.
        is_test_mode: Use the carrier sandbox.
    """

    id: str
    name: str
    type: str
    credentials: dict[str, str]
    is_active: bool = True
    is_test_mode: bool = True


class ShippingStore(Protocol):
    """Read access to zones, rates and providers, provided by the storage layer."""

    async def list_shipping_zones(self, country_code: str) -> list[ShippingZone]:
        """Return active zones whose countries contain ``country_code``."""
        ...

    async def list_shipping_rates(self, zone_ids: Sequence[str]) -> list[ShippingRate]:
        """Return active rates attached to any of ``zone_ids``."""
        ...

    async def get_shipping_provider(self, provider_id: str) -> ShippingProviderConfig | None:
        """Return a configured provider or None."""
        ...
