"""Entity package: FlashSale."""

from .entity import FlashSale
from .repository import FlashSaleRepository
from .table import FlashSaleTable

__all__ = ["FlashSale", "FlashSaleRepository", "FlashSaleTable"]
