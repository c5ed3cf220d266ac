"""Order tax binding package."""

from services.orders.service import OrderTaxService
from services.orders.types import (
    MissingShippingAddressError,
    OrderLine,
    OrderNotFoundError,
    OrderRecord,
    OrderStore,
    OrderTaxSummary,
)

__all__ = [
    "MissingShippingAddressError",
    "OrderLine",
    "OrderNotFoundError",
    "OrderRecord",
    "OrderStore",
    "OrderTaxSummary",
    "OrderTaxService",
]
