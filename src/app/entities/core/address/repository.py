"""Address repository for data access operations."""

from sqlalchemy import delete, update
from sqlmodel import col, select

from src.app.entities.core._base import Repository
from src.app.entities.core.address.entity import Address
from src.app.entities.core.address.table import AddressTable


class AddressRepository(Repository[Address, AddressTable]):
    """Data-access layer for user addresses."""

    entity_cls = Address
    table_cls = AddressTable

    def list_for_user(self, user_id: str) -> list[Address]:
        statement = (
            select(AddressTable)
            .where(AddressTable.user_id == user_id)
            .order_by(col(AddressTable.is_default).desc(), col(AddressTable.created_at))
        )
        return self._to_entities(self._session.exec(statement).all())

    def get_default(self, user_id: str) -> Address | None:
        statement = select(AddressTable).where(
            AddressTable.user_id == user_id, col(AddressTable.is_default).is_(True)
        )
        row = self._session.exec(statement).first()
        return self._to_entity(row) if row is not None else None

    def clear_default(self, user_id: str, keep_id: str | None = None) -> None:
        statement = update(AddressTable).where(AddressTable.user_id == user_id)
        if keep_id is not None:
            statement = statement.where(AddressTable.id != keep_id)
        self._session.exec(statement.values(is_default=False))  # type: ignore[call-overload]

    def delete_for_user(self, user_id: str) -> None:
        self._session.exec(delete(AddressTable).where(AddressTable.user_id == user_id))  # type: ignore[call-overload]
