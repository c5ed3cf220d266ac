"""FedEx carrier adapter package."""

from services.shipping.carriers.fedex.adapter import FedexAdapter
from services.shipping.carriers.fedex.client import FedexClient

__all__ = ["FedexAdapter", "FedexClient"]
