"""WishlistItem repository."""

from sqlalchemy import delete
from sqlmodel import col, select

from src.app.entities.core._base import Repository
from src.app.entities.service.wishlist.entity import WishlistItem
from src.app.entities.service.wishlist.table import WishlistItemTable


class WishlistItemRepository(Repository[WishlistItem, WishlistItemTable]):
    """Data-access layer for wishlist entries."""

    entity_cls = WishlistItem
    table_cls = WishlistItemTable

    def list_for_user(self, user_id: str) -> list[WishlistItem]:
        statement = (
            select(WishlistItemTable)
            .where(WishlistItemTable.user_id == user_id)
            .order_by(col(WishlistItemTable.created_at).desc())
        )
        return self._to_entities(self._session.exec(statement).all())

    def find(self, user_id: str, product_id: str) -> WishlistItem | None:
        statement = select(WishlistItemTable).where(
            WishlistItemTable.user_id == user_id, WishlistItemTable.product_id == product_id
        )
        row = self._session.exec(statement).first()
        return self._to_entity(row) if row is not None else None

    def count_for_user(self, user_id: str) -> int:
        return self.count(WishlistItemTable.user_id == user_id)

    def delete_for_user(self, user_id: str) -> int:
        result = self._session.exec(  # type: ignore[call-overload]
            delete(WishlistItemTable).where(WishlistItemTable.user_id == user_id)
        )
        return int(result.rowcount or 0)

    def delete_for_product(self, product_id: str) -> None:
        self._session.exec(  # type: ignore[call-overload]
            delete(WishlistItemTable).where(WishlistItemTable.product_id == product_id)
        )
