"""Entity package: CompareItem."""

from .entity import CompareItem
from .repository import CompareItemRepository
from .table import CompareItemTable

__all__ = ["CompareItem", "CompareItemRepository", "CompareItemTable"]
