"""Shared service-layer models."""

from .pagination import MAX_PAGE_SIZE, PageParams, Pagination

__all__ = ["MAX_PAGE_SIZE", "PageParams", "Pagination"]
