"""Category API router."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlmodel import Session

from src.app.api.http.deps import get_db_session, require_admin
from src.app.api.http.schemas import ApiResponse, ok
from src.app.core.services.catalog import CategoryService
from src.app.entities.core.user import User
from src.app.entities.service.category import Category

router = APIRouter(prefix="/categories", tags=["categories"])


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    image: str | None = None


class CategoryUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    image: str | None = None


@router.get("", response_model=ApiResponse[list[Category]])
def list_categories(session: Session = Depends(get_db_session)) -> ApiResponse[list[Category]]:
    return ok(CategoryService(session).list_all())


@router.get("/{category_id}", response_model=ApiResponse[Category])
def get_category(
    category_id: str, session: Session = Depends(get_db_session)
) -> ApiResponse[Category]:
    return ok(CategoryService(session).get(category_id))


@router.post("", status_code=201, response_model=ApiResponse[Category])
def create_category(
    payload: CategoryCreate,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[Category]:
    category = CategoryService(session).create(payload.name, payload.description, payload.image)
    session.commit()
    return ok(category, "Category created")


@router.put("/{category_id}", response_model=ApiResponse[Category])
def update_category(
    category_id: str,
    payload: CategoryUpdate,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[Category]:
    category = CategoryService(session).update(category_id, payload.model_dump(exclude_unset=True))
    session.commit()
    return ok(category, "Category updated")


@router.delete("/{category_id}", response_model=ApiResponse[None])
def delete_category(
    category_id: str,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[None]:
    CategoryService(session).delete(category_id)
    session.commit()
    return ok(message="Category deleted")
