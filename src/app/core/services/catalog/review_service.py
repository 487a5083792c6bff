"""Product reviews and store replies."""

from loguru import logger
from pydantic import BaseModel
from sqlmodel import Session

from src.app.core.errors import NotFoundError
from src.app.core.models import PageParams
from src.app.entities.service.product.repository import ProductRepository
from src.app.entities.service.review.entity import Reply, Review
from src.app.entities.service.review.repository import ReplyRepository, ReviewRepository


class ReviewWithReply(BaseModel):
    review: Review
    reply: Reply | None = None


class ReviewPage(BaseModel):
    reviews: list[ReviewWithReply]
    total: int
    avg_rating: float
    total_likes: int


class ReviewService:
    def __init__(self, db_session: Session):
        self._reviews = ReviewRepository(db_session)
        self._replies = ReplyRepository(db_session)
        self._products = ProductRepository(db_session)

    def list_reviews(self, product_id: str, params: PageParams) -> ReviewPage:
        if self._products.get(product_id) is None:
            raise NotFoundError("Product not found")
        reviews, total = self._reviews.list_page(
            product_id, offset=params.offset, limit=params.limit
        )
        replies = self._replies.for_reviews([r.id for r in reviews])
        avg_rating, _, likes = self._reviews.rating_summary(product_id)
        return ReviewPage(
            reviews=[ReviewWithReply(review=r, reply=replies.get(r.id)) for r in reviews],
            total=total,
            avg_rating=avg_rating,
            total_likes=likes,
        )

    def add_review(
        self,
        user_id: str,
        product_id: str,
        rate: int,
        message: str = "",
        colors: list[str] | None = None,
        sizes: list[str] | None = None,
    ) -> Review:
        if self._products.get(product_id) is None:
            raise NotFoundError("Product not found")
        review = self._reviews.create(
            Review(
                product_id=product_id,
                user_id=user_id,
                rate=rate,
                message=message,
                colors=colors or [],
                sizes=sizes or [],
            )
        )
        logger.bind(review_id=review.id, product_id=product_id, rate=rate).info("review.created")
        return review

    def reply_to_review(self, admin_id: str, review_id: str, message: str) -> Reply:
        if self._reviews.get(review_id) is None:
            raise NotFoundError("Review not found")
        existing = self._replies.get_for_review(review_id)
        if existing is None:
            return self._replies.create(Reply(review_id=review_id, user_id=admin_id, message=message))
        existing.message = message
        existing.user_id = admin_id
        return self._replies.update(existing)
