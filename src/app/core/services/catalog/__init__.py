"""Catalog services: categories, products, reviews and flash sales."""

from .category_service import CategoryService
from .flash_sale_service import FlashSaleService
from .product_service import ProductDetail, ProductService
from .review_service import ReviewPage, ReviewService, ReviewWithReply

__all__ = [
    "CategoryService",
    "FlashSaleService",
    "ProductDetail",
    "ProductService",
    "ReviewPage",
    "ReviewService",
    "ReviewWithReply",
]
