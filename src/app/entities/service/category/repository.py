"""Category repository for data access operations."""

from sqlmodel import col, func, select

from src.app.entities.core._base import Repository
from src.app.entities.service.category.entity import Category
from src.app.entities.service.category.table import CategoryTable


class CategoryRepository(Repository[Category, CategoryTable]):
    """Data-access layer for categories."""

    entity_cls = Category
    table_cls = CategoryTable

    def get_by_name(self, name: str) -> Category | None:
        statement = select(CategoryTable).where(
            func.lower(CategoryTable.name) == name.strip().lower()
        )
        row = self._session.exec(statement).first()
        return self._to_entity(row) if row is not None else None

    def list_ordered(self) -> list[Category]:
        statement = select(CategoryTable).order_by(col(CategoryTable.name))
        return self._to_entities(self._session.exec(statement).all())

    def names_by_id(self, category_ids: set[str]) -> dict[str, str]:
        if not category_ids:
            return {}
        statement = select(CategoryTable.id, CategoryTable.name).where(
            col(CategoryTable.id).in_(category_ids)
        )
        return dict(self._session.exec(statement).all())
