"""Entity: Review."""

from pydantic import Field

from src.app.entities.core._base import Entity


class Review(Entity):
    """A customer rating of a product."""

    product_id: str = Field(description="Reviewed product")
    user_id: str = Field(description="Author")
    rate: int = Field(ge=1, le=5, description="Star rating")
    message: str = Field(default="", description="Review text")
    colors: list[str] = Field(default_factory=list, description="Colors purchased")
    sizes: list[str] = Field(default_factory=list, description="Sizes purchased")
    likes: int = Field(default=0, ge=0, description="Helpful votes")


class Reply(Entity):
    """The single store reply to a review."""

    review_id: str = Field(description="Review being answered")
    user_id: str = Field(description="Admin who replied")
    message: str = Field(min_length=1, description="Reply text")
