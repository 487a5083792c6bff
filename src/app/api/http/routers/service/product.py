"""Product catalog API router: products, variants, inventory and reviews."""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlmodel import Session

from src.app.api.http.deps import get_current_user, get_db_session, require_admin
from src.app.api.http.schemas import ApiResponse, ok, paginated
from src.app.core.models import PageParams, Pagination
from src.app.core.services.catalog import (
    FlashSaleService,
    ProductDetail,
    ProductService,
    ReviewPage,
    ReviewService,
)
from src.app.entities.core.user import User
from src.app.entities.service.flash_sale import FlashSale
from src.app.entities.service.product import Inventory, Product, ProductVariant
from src.app.entities.service.product.repository import ProductFilter, SortField
from src.app.entities.service.review import Reply, Review

router = APIRouter(prefix="/products", tags=["products"])


class VariantInput(BaseModel):
    color_name: str | None = None
    color: str | None = None
    color_code: str | None = None
    size: str | None = None
    image: str | None = None
    quantity: int = Field(default=0, ge=0)


class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    about_product: list[str] = Field(default_factory=list)
    price: float = Field(gt=0)
    origin_price: float | None = Field(default=None, gt=0)
    brand: str | None = None
    gender: str | None = None
    product_type: str | None = None
    category_id: str | None = None
    thumb_image: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    sizes: list[str] = Field(default_factory=list)
    colors: list[str] = Field(default_factory=list)
    weight: float | None = None
    is_new: bool = False
    is_sale: bool = False
    variants: list[VariantInput] = Field(default_factory=list)
    inventory_quantity: int | None = Field(default=None, ge=0)


class ProductUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    about_product: list[str] | None = None
    price: float | None = Field(default=None, gt=0)
    origin_price: float | None = None
    brand: str | None = None
    gender: str | None = None
    product_type: str | None = None
    category_id: str | None = None
    thumb_image: list[str] | None = None
    images: list[str] | None = None
    sizes: list[str] | None = None
    colors: list[str] | None = None
    weight: float | None = None


class InventoryUpdate(BaseModel):
    quantity: int = Field(ge=0)


class SalesUpdate(BaseModel):
    sold: int = Field(default=0, ge=0)
    quantity_purchase: int = Field(default=0, ge=0)


class ReviewCreate(BaseModel):
    rate: int = Field(ge=1, le=5)
    message: str = ""
    colors: list[str] = Field(default_factory=list)
    sizes: list[str] = Field(default_factory=list)


class ReplyCreate(BaseModel):
    message: str = Field(min_length=1)


class ProductFlashSaleInput(BaseModel):
    discount: float
    start_date: datetime
    end_date: datetime


@router.get("", response_model=ApiResponse[list[Product]])
def list_products(
    page: int = Query(1),
    limit: int = Query(10),
    sort_by: SortField = Query("created_at"),
    category_id: str | None = None,
    gender: str | None = None,
    brand: str | None = None,
    is_new: bool | None = None,
    is_sale: bool | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
    session: Session = Depends(get_db_session),
) -> ApiResponse[list[Product]]:
    params = PageParams.of(page, limit)
    filters = ProductFilter(
        category_id=category_id,
        gender=gender,
        brand=brand,
        is_new=is_new,
        is_sale=is_sale,
        min_price=min_price,
        max_price=max_price,
    )
    items, total = ProductService(session).list_products(filters, params, sort_by)
    return paginated(items, total, params)


@router.get("/search", response_model=ApiResponse[list[Product]])
def search_products(
    q: str = Query(..., min_length=1),
    limit: int = Query(10),
    session: Session = Depends(get_db_session),
) -> ApiResponse[list[Product]]:
    return ok(ProductService(session).search(q, limit))


@router.get("/{product_id}", response_model=ApiResponse[ProductDetail])
def get_product(
    product_id: str, session: Session = Depends(get_db_session)
) -> ApiResponse[ProductDetail]:
    return ok(ProductService(session).get_product(product_id))


@router.post("", status_code=201, response_model=ApiResponse[ProductDetail])
def create_product(
    payload: ProductCreate,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[ProductDetail]:
    data = payload.model_dump(exclude={"variants", "inventory_quantity"})
    detail = ProductService(session).create_product(
        data,
        variants=[v.model_dump() for v in payload.variants],
        inventory_quantity=payload.inventory_quantity,
    )
    session.commit()
    return ok(detail, "Product created")


@router.put("/{product_id}", response_model=ApiResponse[Product])
def update_product(
    product_id: str,
    payload: ProductUpdate,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[Product]:
    product = ProductService(session).update_product(
        product_id, payload.model_dump(exclude_unset=True)
    )
    session.commit()
    return ok(product, "Product updated")


@router.delete("/{product_id}", response_model=ApiResponse[None])
def delete_product(
    product_id: str,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[None]:
    ProductService(session).delete_product(product_id)
    session.commit()
    return ok(message="Product deleted")


# --- Variants and inventory ---


@router.get("/{product_id}/variants", response_model=ApiResponse[list[ProductVariant]])
def list_variants(
    product_id: str, session: Session = Depends(get_db_session)
) -> ApiResponse[list[ProductVariant]]:
    return ok(ProductService(session).list_variants(product_id))


@router.put("/{product_id}/variants", response_model=ApiResponse[list[ProductVariant]])
def replace_variants(
    product_id: str,
    payload: list[VariantInput],
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[list[ProductVariant]]:
    variants = ProductService(session).replace_variants(
        product_id, [v.model_dump() for v in payload]
    )
    session.commit()
    return ok(variants, "Variants updated")


@router.get("/{product_id}/inventory", response_model=ApiResponse[Inventory])
def get_inventory(
    product_id: str, session: Session = Depends(get_db_session)
) -> ApiResponse[Inventory]:
    return ok(ProductService(session).get_inventory(product_id))


@router.put("/{product_id}/inventory", response_model=ApiResponse[Inventory])
def set_inventory(
    product_id: str,
    payload: InventoryUpdate,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[Inventory]:
    inventory = ProductService(session).set_inventory(product_id, payload.quantity)
    session.commit()
    return ok(inventory, "Inventory updated")


@router.patch("/{product_id}/status", response_model=ApiResponse[Product])
def update_status(
    product_id: str,
    payload: dict[str, Any],
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[Product]:
    product = ProductService(session).update_status(product_id, payload)
    session.commit()
    return ok(product, "Product status updated")


@router.patch("/{product_id}/sales", response_model=ApiResponse[Product])
def update_sales(
    product_id: str,
    payload: SalesUpdate,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[Product]:
    product = ProductService(session).update_sales(
        product_id, payload.sold, payload.quantity_purchase
    )
    session.commit()
    return ok(product, "Product sales updated")


@router.put("/{product_id}/flash-sale", response_model=ApiResponse[FlashSale])
def set_product_flash_sale(
    product_id: str,
    payload: ProductFlashSaleInput,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[FlashSale]:
    sale = FlashSaleService(session).upsert_for_product(
        product_id, payload.discount, payload.start_date, payload.end_date
    )
    session.commit()
    return ok(sale, "Flash sale saved")


# --- Reviews ---


@router.get("/{product_id}/reviews", response_model=ApiResponse[ReviewPage])
def list_reviews(
    product_id: str,
    page: int = Query(1),
    limit: int = Query(10),
    session: Session = Depends(get_db_session),
) -> ApiResponse[ReviewPage]:
    params = PageParams.of(page, limit)
    result = ReviewService(session).list_reviews(product_id, params)
    return ApiResponse[ReviewPage](data=result, pagination=Pagination.build(params, result.total))


@router.post("/{product_id}/reviews", status_code=201, response_model=ApiResponse[Review])
def add_review(
    product_id: str,
    payload: ReviewCreate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[Review]:
    review = ReviewService(session).add_review(
        user.id, product_id, payload.rate, payload.message, payload.colors, payload.sizes
    )
    session.commit()
    return ok(review, "Review added")


@router.put("/reviews/{review_id}/reply", response_model=ApiResponse[Reply])
def reply_to_review(
    review_id: str,
    payload: ReplyCreate,
    admin: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[Reply]:
    reply = ReviewService(session).reply_to_review(admin.id, review_id, payload.message)
    session.commit()
    return ok(reply, "Reply saved")
