"""Base types and protocols for real-time carrier adapters."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from services.shipping.types import EstimatedDays

if TYPE_CHECKING:
    from datetime import date

    from core.result import Result
    from services.locations import Address
    from services.shipping.carriers.errors import ProviderError

# Credential key carrying the provider's test-mode flag
SANDBOX_KEY = "sandbox"


class CarrierType(str, Enum):
    """Carriers with a real-time rating adapter."""

    UPS = "ups"
    FEDEX = "fedex"


@dataclass(frozen=True, slots=True)
class Package:
    """
    One parcel in a rate request.

    Attributes:
        weight: Parcel weight.
        weight_unit: ``LB`` or ``KG``.
        length: Optional length.
        width: Optional width.
        height: Optional height.
        dimension_unit: ``IN`` or ``CM``.
    """

    weight: Decimal
    weight_unit: str = "LB"
    length: Decimal | None = None
    width: Decimal | None = None
    height: Decimal | None = None
    dimension_unit: str = "IN"

    def __post_init__(self) -> None:
        """Validate the package weight."""
        if self.weight <= 0:
            msg = "Package weight must be positive"
            raise ValueError(msg)

    @property
    def has_dimensions(self) -> bool:
        return None not in (self.length, self.width, self.height)


@dataclass(frozen=True, slots=True)
class CarrierRateRequest:
    """
    A real-time rate request.

    Attributes:
        from_address: Origin (warehouse) address.
        to_address: Destination address.
        packages: Parcels to ship.
        services: Service codes to keep; empty keeps every quoted service.
    """

    from_address: Address
    to_address: Address
    packages: tuple[Package, ...]
    services: tuple[str, ...] = ()

    @property
    def is_complete(self) -> bool:
        """True when both addresses have a country and there is a package."""
        return bool(self.from_address.country and self.to_address.country and self.packages)


@dataclass(frozen=True, slots=True)
class CarrierRate:
    """A service quoted by a carrier."""

    service_code: str
    service_name: str
    cost: Decimal
    currency: str
    estimated_days: EstimatedDays | None = None
    delivery_date: date | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation."""
        return {
            "service_code": self.service_code,
            "service_name": self.service_name,
            "cost": str(self.cost),
            "currency": self.currency,
            "estimated_days": (
                {"min": self.estimated_days.min, "max": self.estimated_days.max}
                if self.estimated_days
                else None
            ),
            "delivery_date": self.delivery_date.isoformat() if self.delivery_date else None,
        }


@dataclass(frozen=True, slots=True)
class ConnectionTestResult:
    """Outcome of a carrier connection test."""

    success: bool
    message: str


def missing_credentials(
    credentials: Mapping[str, Any],
    required: tuple[str, ...],
) -> tuple[str, ...]:
    """Return the names of required credential fields that are empty."""
    return tuple(name for name in required if not credentials.get(name))


@runtime_checkable
class CarrierAdapter(Protocol):
    """
    Protocol every carrier adapter conforms to.

    Credentials are passed per call because one adapter serves every
    configured account of its carrier.
    """

    @property
    def carrier_code(self) -> str:
        """Return the unique code for this carrier."""
        ...

    @property
    def carrier_name(self) -> str:
        """Return the display name for this carrier."""
        ...

    async def test_connection(
        self,
        credentials: Mapping[str, Any],
    ) -> Result[ConnectionTestResult, ProviderError]:
        """
        Check that the credentials can authenticate against the carrier.

        Returns:
            Result with the test outcome, or ProviderError when the
            credentials are incomplete.
        """
        ...

    async def get_rates(
        self,
        credentials: Mapping[str, Any],
        request: CarrierRateRequest,
    ) -> Result[tuple[CarrierRate, ...], ProviderError]:
        """
        Quote every service the carrier offers for ``request``.

        Returns:
            Result containing the quoted rates or a ProviderError.
        """
        ...

    async def close(self) -> None:
        """Release HTTP resources held by the adapter."""
        ...
