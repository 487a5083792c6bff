from .list_service import (
    COMPARISON_FIELDS,
    CompareService,
    ListedProduct,
    ProductComparison,
    WishlistService,
)

__all__ = [
    "COMPARISON_FIELDS",
    "CompareService",
    "ListedProduct",
    "ProductComparison",
    "WishlistService",
]
