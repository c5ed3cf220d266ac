"""Types for the tax resolution engine."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

from services.locations import is_valid_country_code

if TYPE_CHECKING:
    from services.locations import Address


class TaxValidationError(ValueError):
    """Raised for malformed tax requests or region records."""


class RegionStatus(str, Enum):
    """Lifecycle status of a tax region."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class TargetType(str, Enum):
    """What an override target points at."""

    PRODUCT = "product"
    PRODUCT_TYPE = "product_type"


class TaxSource(str, Enum):
    """Where a breakdown entry's rate came from."""

    DEFAULT = "default"
    OVERRIDE = "override"
    PARENT = "parent"


@dataclass(frozen=True, slots=True)
class ProductTarget:
    """Override target matching a single product id."""

    product_id: str

    @property
    def type(self) -> TargetType:
        return TargetType.PRODUCT

    @property
    def target_id(self) -> str:
        return self.product_id


@dataclass(frozen=True, slots=True)
class ProductTypeTarget:
    """Override target matching every product of a product type."""

    product_type: str

    @property
    def type(self) -> TargetType:
        return TargetType.PRODUCT_TYPE

    @property
    def target_id(self) -> str:
        return self.product_type


type OverrideTarget = ProductTarget | ProductTypeTarget


def target_matches(
    target: OverrideTarget,
    product_id: str | None,
    product_type: str | None,
) -> bool:
    """Return True if ``target`` selects the given product or product type."""
    match target:
        case ProductTarget(product_id=target_id):
            return product_id is not None and target_id == product_id
        case ProductTypeTarget(product_type=target_type):
            return product_type is not None and target_type == product_type


def parse_target(data: Mapping[str, Any]) -> OverrideTarget:
    """
    Build an override target from its stored form.

    Accepts ``{"type": "product", "target_id": "..."}``; ``targetId`` is also
    read for records imported from the storefront admin.

    Raises:
        TaxValidationError: If the type is unknown or the id is missing.
    """
    raw_type = data.get("type")
    target_id = data.get("target_id", data.get("targetId"))
    if not target_id:
        msg = "Override target requires a target_id"
        raise TaxValidationError(msg)
    try:
        target_type = TargetType(raw_type)
    except ValueError as e:
        msg = f"Unknown override target type: {raw_type!r}"
        raise TaxValidationError(msg) from e

    match target_type:
        case TargetType.PRODUCT:
            return ProductTarget(product_id=str(target_id))
        case TargetType.PRODUCT_TYPE:
            return ProductTypeTarget(product_type=str(target_id))


@dataclass(frozen=True, slots=True)
class TaxOverride:
    """
    A rate that replaces the region default for specific products.

    Attributes:
        name: Display name used in breakdowns.
        rate: Rate as a fraction (0.10 = 10%).
        targets: Products/product types the override applies to.
        code: Optional tax code.
        combinable: Stored flag; overrides currently replace the default rate
            whatever its value.
        id: Stable identifier inside the region's override list.
    """

    name: str
    rate: Decimal
    targets: tuple[OverrideTarget, ...] = ()
    code: str | None = None
    combinable: bool = False
    id: str | None = None

    def __post_init__(self) -> None:
        """Validate the override rate."""
        if self.rate < 0 or self.rate > 1:
            msg = f"Override rate must be between 0 and 1, got {self.rate}"
            raise TaxValidationError(msg)

    def applies_to(self, product_id: str | None, product_type: str | None) -> bool:
        """Return True if any target matches the product or its type."""
        return any(target_matches(t, product_id, product_type) for t in self.targets)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TaxOverride:
        """Parse the JSON representation stored on a region."""
        return cls(
            id=str(data["id"]) if data.get("id") else None,
            name=str(data.get("name", "")),
            rate=Decimal(str(data.get("rate", "0"))),
            code=data.get("code") or None,
            combinable=bool(data.get("combinable", False)),
            targets=tuple(parse_target(t) for t in data.get("targets", ())),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON representation stored on a region."""
        return {
            "id": self.id,
            "name": self.name,
            "rate": str(self.rate),
            "code": self.code,
            "combinable": self.combinable,
            "targets": [{"type": t.type.value, "target_id": t.target_id} for t in self.targets],
        }


@dataclass(frozen=True, slots=True)
class TaxRegion:
    """
    A country or country subdivision carrying a default rate and overrides.

    Subregions (``parent_region_id`` set) always carry a subdivision code
    and country-level regions never do.
    """

    id: str
    name: str
    country_code: str
    subdivision_code: str | None = None
    status: RegionStatus = RegionStatus.ACTIVE
    is_default: bool = False
    parent_region_id: str | None = None
    default_tax_rate_name: str | None = None
    default_tax_rate: Decimal | None = None
    default_tax_code: str | None = None
    default_combinable_with_parent: bool = False
    tax_overrides: tuple[TaxOverride, ...] = ()

    def __post_init__(self) -> None:
        """Validate the parent and subdivision pairing and the default rate."""
        if (self.subdivision_code is None) != (self.parent_region_id is None):
            msg = "subdivision_code must be set if and only if parent_region_id is set"
            raise TaxValidationError(msg)
        if self.default_tax_rate is not None and not (0 <= self.default_tax_rate <= 1):
            msg = f"default_tax_rate must be between 0 and 1, got {self.default_tax_rate}"
            raise TaxValidationError(msg)

    @property
    def is_subregion(self) -> bool:
        """Return True for state/province level regions."""
        return self.parent_region_id is not None

    @property
    def is_active(self) -> bool:
        return self.status is RegionStatus.ACTIVE

    @property
    def has_default_tax_rate(self) -> bool:
        return self.default_tax_rate is not None

    def find_override(
        self,
        product_id: str | None,
        product_type: str | None,
    ) -> TaxOverride | None:
        """Return the first override, in declaration order, matching the product."""
        for override in self.tax_overrides:
            if override.applies_to(product_id, product_type):
                return override
        return None


@dataclass(frozen=True, slots=True)
class TaxRegionFilter:
    """
    Lookup criteria passed to a ``TaxRegionStore``.

    Attributes:
        country_code: Normalized country code.
        subdivision_code: Qualified subdivision code, or None to ignore it.
        status: Required status, or None for any.
        is_default: Required default flag, or None for any.
        country_level: Only regions without a parent.
    """

    country_code: str
    subdivision_code: str | None = None
    status: RegionStatus | None = RegionStatus.ACTIVE
    is_default: bool | None = None
    country_level: bool = False

    def matches(self, region: TaxRegion) -> bool:
        """Return True if ``region`` satisfies every criterion."""
        if region.country_code != self.country_code:
            return False
        if self.subdivision_code is not None and region.subdivision_code != self.subdivision_code:
            return False
        if self.status is not None and region.status is not self.status:
            return False
        if self.is_default is not None and region.is_default != self.is_default:
            return False
        return not (self.country_level and region.is_subregion)


class TaxRegionStore(Protocol):
    """Read access to tax regions, provided by the storage layer."""

    async def get_tax_region(self, criteria: TaxRegionFilter) -> TaxRegion | None:
        """Return one region matching ``criteria`` or None."""
        ...

    async def get_tax_region_by_id(self, region_id: str) -> TaxRegion | None:
        """Return the region with ``region_id`` or None."""
        ...

    async def list_tax_regions(self, country_code: str) -> list[TaxRegion]:
        """Return active regions of a country, country level first."""
        ...


@dataclass(frozen=True, slots=True)
class TaxBreakdownEntry:
    """One contribution to the total tax rate."""

    name: str
    rate: Decimal
    amount: Decimal
    source: TaxSource

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation."""
        return {
            "name": self.name,
            "rate": str(self.rate),
            "amount": str(self.amount),
            "source": self.source.value,
        }


@dataclass(frozen=True, slots=True)
class TaxCalculationResult:
    """
    Outcome of a tax calculation for one region.

    Attributes:
        region_id: Region that supplied the rates.
        region_name: Region display name.
        tax_rate: Combined rate (fraction).
        tax_amount: ``amount * tax_rate``.
        total_amount: ``amount + tax_amount``.
        breakdown: Contributions in evaluation order (parent first).
    """

    region_id: str
    region_name: str
    tax_rate: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    breakdown: tuple[TaxBreakdownEntry, ...] = field(default_factory=tuple)

    @property
    def tax_rate_percentage(self) -> Decimal:
        """Return the combined rate as a percentage."""
        return self.tax_rate * 100

    @property
    def has_override(self) -> bool:
        """Return True if an override supplied one of the rates."""
        return any(entry.source is TaxSource.OVERRIDE for entry in self.breakdown)


@dataclass(frozen=True, slots=True)
class TaxCalculationRequest:
    """
    Request for a tax calculation.

    ``subdivision_code`` falls back to the shipping address state/province
    when omitted.

    Raises:
        TaxValidationError: If the country code is not two letters or the
            amount is negative.
    """

    country_code: str
    amount: Decimal
    subdivision_code: str | None = None
    product_id: str | None = None
    product_type: str | None = None
    shipping_address: Address | None = None

    def __post_init__(self) -> None:
        """Validate the request shape."""
        if not self.country_code:
            msg = "Country code is required"
            raise TaxValidationError(msg)
        if not is_valid_country_code(self.country_code):
            msg = "Country code must be a valid ISO 3166-1 alpha-2 code"
            raise TaxValidationError(msg)
        if self.amount < 0:
            msg = "Amount must be non-negative"
            raise TaxValidationError(msg)

    @property
    def effective_subdivision(self) -> str | None:
        """Return the explicit subdivision, else the shipping address state."""
        if self.subdivision_code:
            return self.subdivision_code
        if self.shipping_address is not None and self.shipping_address.state:
            return self.shipping_address.state
        return None
