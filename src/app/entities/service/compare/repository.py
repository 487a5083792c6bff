"""CompareItem repository."""

from sqlalchemy import delete
from sqlmodel import col, select

from src.app.entities.core._base import Repository
from src.app.entities.service.compare.entity import CompareItem
from src.app.entities.service.compare.table import CompareItemTable


class CompareItemRepository(Repository[CompareItem, CompareItemTable]):
    """Data-access layer for compare entries."""

    entity_cls = CompareItem
    table_cls = CompareItemTable

    def list_for_user(self, user_id: str) -> list[CompareItem]:
        statement = (
            select(CompareItemTable)
            .where(CompareItemTable.user_id == user_id)
            .order_by(col(CompareItemTable.created_at).desc())
        )
        return self._to_entities(self._session.exec(statement).all())

    def find(self, user_id: str, product_id: str) -> CompareItem | None:
        statement = select(CompareItemTable).where(
            CompareItemTable.user_id == user_id, CompareItemTable.product_id == product_id
        )
        row = self._session.exec(statement).first()
        return self._to_entity(row) if row is not None else None

    def count_for_user(self, user_id: str) -> int:
        return self.count(CompareItemTable.user_id == user_id)

    def delete_for_user(self, user_id: str) -> int:
        result = self._session.exec(  # type: ignore[call-overload]
            delete(CompareItemTable).where(CompareItemTable.user_id == user_id)
        )
        return int(result.rowcount or 0)

    def delete_for_product(self, product_id: str) -> None:
        self._session.exec(  # type: ignore[call-overload]
            delete(CompareItemTable).where(CompareItemTable.product_id == product_id)
        )
