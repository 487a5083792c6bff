"""Category management."""

from typing import Any

from loguru import logger
from sqlmodel import Session

from src.app.core.errors import ConflictError, NotFoundError
from src.app.entities.service.category.entity import Category
from src.app.entities.service.category.repository import CategoryRepository
from src.app.entities.service.product.entity import slugify
from src.app.entities.service.product.repository import ProductRepository


class CategoryService:
    def __init__(self, db_session: Session):
        self._categories = CategoryRepository(db_session)
        self._products = ProductRepository(db_session)

    def list_all(self) -> list[Category]:
        return self._categories.list_ordered()

    def get(self, category_id: str) -> Category:
        category = self._categories.get(category_id)
        if category is None:
            raise NotFoundError("Category not found")
        return category

    def create(
        self, name: str, description: str | None = None, image: str | None = None
    ) -> Category:
        if self._categories.get_by_name(name) is not None:
            raise ConflictError("Category already exists")
        category = self._categories.create(
            Category(name=name.strip(), slug=slugify(name), description=description, image=image)
        )
        logger.bind(category_id=category.id).info("category.created")
        return category

    def update(self, category_id: str, changes: dict[str, Any]) -> Category:
        category = self.get(category_id)
        name = changes.get("name")
        if name and name.strip().lower() != category.name.lower():
            if self._categories.get_by_name(name) is not None:
                raise ConflictError("Category already exists")
            category.name = name.strip()
            category.slug = slugify(name)
        for field_name in ("description", "image"):
            if field_name in changes:
                setattr(category, field_name, changes[field_name])
        return self._categories.update(category)

    def delete(self, category_id: str) -> None:
        self.get(category_id)
        if self._products.count_for_category(category_id) > 0:
            raise ConflictError("Category has products and cannot be deleted")
        self._categories.delete(category_id)
        logger.bind(category_id=category_id).info("category.deleted")
