"""UPS carrier adapter package."""

from services.shipping.carriers.ups.adapter import UpsAdapter
from services.shipping.carriers.ups.client import UpsClient

__all__ = ["UpsAdapter", "UpsClient"]
