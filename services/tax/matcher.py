"""Resolution of the most specific tax region for a destination."""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.logging import get_logger
from services.locations import normalize_country_code, normalize_subdivision_code
from services.tax.types import RegionStatus, TaxRegionFilter

if TYPE_CHECKING:
    from services.tax.types import TaxRegion, TaxRegionStore

logger = get_logger(__name__)


class TaxRegionMatcher:
    """
    Finds the tax region that applies to a country and optional subdivision.

    The hierarchy is two levels deep: an active subdivision region wins,
    otherwise the country's active default region is used.
    """

    def __init__(self, store: TaxRegionStore) -> None:
        """
        Initialize the matcher.

        Args:
            store: Storage collaborator used for region lookups.
        """
        self._store = store

    async def find_applicable_tax_region(
        self,
        country_code: str,
        subdivision_code: str | None = None,
    ) -> TaxRegion | None:
        """
        Find the most specific active tax region.

        Args:
            country_code: ISO 3166-1 alpha-2 country code (any case).
            subdivision_code: State/province code, bare (``"CA"``) or
                qualified (``"US-CA"``).

        Returns:
            The subdivision region, else the country default region, else None.
        """
        country = normalize_country_code(country_code)

        if subdivision_code:
            subdivision = normalize_subdivision_code(country, subdivision_code)
            subregion = await self._store.get_tax_region(
                TaxRegionFilter(
                    country_code=country,
                    subdivision_code=subdivision,
                    status=RegionStatus.ACTIVE,
                )
            )
            if subregion is not None:
                logger.debug(
                    "Matched subdivision tax region",
                    region_id=subregion.id,
                    subdivision_code=subdivision,
                )
                return subregion

        region = await self._store.get_tax_region(
            TaxRegionFilter(
                country_code=country,
                status=RegionStatus.ACTIVE,
                is_default=True,
                country_level=True,
            )
        )
        if region is None:
            logger.info(
                "No tax region for destination",
                country_code=country,
                subdivision_code=subdivision_code,
            )
        return region
