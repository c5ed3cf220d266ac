"""Addresses and ISO code normalization shared by tax and shipping."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

COUNTRY_CODE_PATTERN = re.compile(r"^[A-Z]{2}$")


def normalize_country_code(country_code: str) -> str:
    """Upper-case and strip an ISO 3166-1 alpha-2 country code."""
    return country_code.strip().upper()


def is_valid_country_code(country_code: str | None) -> bool:
    """Return True if the code is two letters once normalized."""
    if not country_code:
        return False
    return COUNTRY_CODE_PATTERN.match(normalize_country_code(country_code)) is not None


def normalize_subdivision_code(country_code: str, subdivision_code: str) -> str:
    """
    Qualify a subdivision code as ``{country}-{state}``.

    ``("us", "ca")`` and ``("US", "US-CA")`` both give ``"US-CA"``.
    """
    country = normalize_country_code(country_code)
    subdivision = subdivision_code.strip().upper()
    if "-" in subdivision:
        return subdivision
    return f"{country}-{subdivision}"


@dataclass(frozen=True, slots=True)
class Address:
    """
    A destination (or origin) address.

    Only the fields used for tax region and shipping zone matching are
    modelled; ``state`` holds a state or province code.

    Attributes:
        country: ISO 3166-1 alpha-2 country code.
        state: State/province code (optional).
        city: City name (optional).
        postal_code: Postal/ZIP code (optional).
        address_lines: Street lines, used only by carrier quotes.
    """

    country: str
    state: str | None = None
    city: str | None = None
    postal_code: str | None = None
    address_lines: tuple[str, ...] = ()

    @property
    def country_code(self) -> str:
        """Return the normalized country code."""
        return normalize_country_code(self.country)

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> Address:
        """
        Build an address from a loosely shaped mapping.

        Accepts ``state`` or ``province``, ``postal_code``/``postalCode``/``zip``
        and ``address1``/``address2`` street lines, which covers the shapes
        stored on orders and sent by storefronts.
        """
        state = data.get("state") or data.get("province")
        postal_code = data.get("postal_code") or data.get("postalCode") or data.get("zip")
        lines = data.get("address_lines") or [
            line for line in (data.get("address1"), data.get("address2")) if line
        ]
        return cls(
            country=str(data.get("country", "")),
            state=str(state) if state else None,
            city=str(data["city"]) if data.get("city") else None,
            postal_code=str(postal_code) if postal_code else None,
            address_lines=tuple(str(line) for line in lines),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation."""
        return {
            "country": self.country,
            "state": self.state,
            "city": self.city,
            "postal_code": self.postal_code,
            "address_lines": list(self.address_lines),
        }
