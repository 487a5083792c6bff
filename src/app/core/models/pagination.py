"""Pagination models shared by services and routers."""

import math

from pydantic import BaseModel, Field

MAX_PAGE_SIZE = 100


class PageParams(BaseModel):
    """A normalized ``page``/``limit`` pair.

    ``page`` is at least 1 and ``limit`` is clamped to ``1..max_limit``.
    """

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)

    @classmethod
    def of(cls, page: int | None, limit: int | None, max_limit: int = MAX_PAGE_SIZE) -> "PageParams":
        return cls(
            page=max(1, page or 1),
            limit=min(max(1, limit or 10), max_limit),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class Pagination(BaseModel):
    """Pagination metadata returned next to a page of results."""

    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, params: PageParams, total: int) -> "Pagination":
        return cls(
            page=params.page,
            limit=params.limit,
            total=total,
            pages=math.ceil(total / params.limit) if total else 0,
        )
