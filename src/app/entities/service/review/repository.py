"""Review and reply repositories."""

from sqlalchemy import delete
from sqlmodel import col, func, select

from src.app.entities.core._base import Repository
from src.app.entities.service.review.entity import Reply, Review
from src.app.entities.service.review.table import ReplyTable, ReviewTable


class ReviewRepository(Repository[Review, ReviewTable]):
    """Data-access layer for product reviews."""

    entity_cls = Review
    table_cls = ReviewTable

    def list_page(
        self, product_id: str, *, offset: int, limit: int
    ) -> tuple[list[Review], int]:
        statement = (
            select(ReviewTable)
            .where(ReviewTable.product_id == product_id)
            .order_by(col(ReviewTable.created_at).desc())
            .offset(offset)
            .limit(limit)
        )
        rows = self._session.exec(statement).all()
        return self._to_entities(rows), self.count(ReviewTable.product_id == product_id)

    def rating_summary(self, product_id: str) -> tuple[float, int, int]:
        """Return ``(average rating, review count, total likes)`` for a product."""
        statement = select(
            func.avg(ReviewTable.rate),
            func.count(),
            func.coalesce(func.sum(ReviewTable.likes), 0),
        ).where(ReviewTable.product_id == product_id)
        average, total, likes = self._session.exec(statement).one()
        return round(float(average or 0), 2), int(total), int(likes)

    def ratings_by_product(self, product_ids: set[str]) -> dict[str, tuple[float, int]]:
        if not product_ids:
            return {}
        statement = (
            select(ReviewTable.product_id, func.avg(ReviewTable.rate), func.count())
            .where(col(ReviewTable.product_id).in_(product_ids))
            .group_by(ReviewTable.product_id)
        )
        return {
            product_id: (round(float(average or 0), 2), int(total))
            for product_id, average, total in self._session.exec(statement).all()
        }

    def rating_distribution(self) -> dict[int, int]:
        statement = select(ReviewTable.rate, func.count()).group_by(ReviewTable.rate)
        return {int(rate): int(total) for rate, total in self._session.exec(statement).all()}

    def ids_for_product(self, product_id: str) -> list[str]:
        statement = select(ReviewTable.id).where(ReviewTable.product_id == product_id)
        return list(self._session.exec(statement).all())

    def delete_for_product(self, product_id: str) -> None:
        self._session.exec(  # type: ignore[call-overload]
            delete(ReviewTable).where(ReviewTable.product_id == product_id)
        )


class ReplyRepository(Repository[Reply, ReplyTable]):
    """Data-access layer for review replies."""

    entity_cls = Reply
    table_cls = ReplyTable

    def get_for_review(self, review_id: str) -> Reply | None:
        statement = select(ReplyTable).where(ReplyTable.review_id == review_id)
        row = self._session.exec(statement).first()
        return self._to_entity(row) if row is not None else None

    def for_reviews(self, review_ids: list[str]) -> dict[str, Reply]:
        if not review_ids:
            return {}
        statement = select(ReplyTable).where(col(ReplyTable.review_id).in_(review_ids))
        return {row.review_id: self._to_entity(row) for row in self._session.exec(statement).all()}

    def delete_for_reviews(self, review_ids: list[str]) -> None:
        if review_ids:
            self._session.exec(  # type: ignore[call-overload]
                delete(ReplyTable).where(col(ReplyTable.review_id).in_(review_ids))
            )
