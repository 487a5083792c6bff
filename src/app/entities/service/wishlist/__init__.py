"""Entity package: WishlistItem."""

from .entity import WishlistItem
from .repository import WishlistItemRepository
from .table import WishlistItemTable

__all__ = ["WishlistItem", "WishlistItemRepository", "WishlistItemTable"]
