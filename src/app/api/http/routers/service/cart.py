"""Cart API router."""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlmodel import Session

from src.app.api.http.deps import get_current_user, get_db_session
from src.app.api.http.schemas import ApiResponse, ok
from src.app.core.services.commerce import CartService, CartSummary
from src.app.entities.core.user import User
from src.app.entities.service.cart import CartItem
from src.app.entities.service.cart.entity import ShippingMethod
from src.app.entities.service.payment.entity import PaymentMethod

router = APIRouter(prefix="/cart", tags=["cart"])


class AddItemRequest(BaseModel):
    product_id: str
    variant_id: str
    quantity: int = Field(default=1, ge=1)


class QuantityUpdate(BaseModel):
    quantity: int = Field(ge=1)


class ItemDetailsUpdate(BaseModel):
    is_gift: bool | None = None
    gift_message: str | None = None
    customization: dict[str, Any] | None = None


class CartSettingsUpdate(BaseModel):
    payment_method: PaymentMethod | None = None
    shipping_method: ShippingMethod | None = None
    shipping_address: dict[str, Any] | None = None
    notes: str | None = None
    estimated_delivery: datetime | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)


class CouponRequest(BaseModel):
    code: str = Field(min_length=1)


@router.get("", response_model=ApiResponse[CartSummary])
def get_cart(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[CartSummary]:
    return ok(CartService(session).get_cart(user.id))


@router.post("/items", status_code=201, response_model=ApiResponse[CartSummary])
def add_to_cart(
    payload: AddItemRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[CartSummary]:
    summary = CartService(session).add_to_cart(
        user.id, payload.product_id, payload.variant_id, payload.quantity
    )
    session.commit()
    return ok(summary, "Item added to cart")


@router.patch("/items/{item_id}", response_model=ApiResponse[CartSummary])
def update_item_quantity(
    item_id: str,
    payload: QuantityUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[CartSummary]:
    summary = CartService(session).update_item_quantity(user.id, item_id, payload.quantity)
    session.commit()
    return ok(summary, "Cart updated")


@router.patch("/items/{item_id}/details", response_model=ApiResponse[CartItem])
def update_item_details(
    item_id: str,
    payload: ItemDetailsUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[CartItem]:
    item = CartService(session).update_item_details(
        user.id,
        item_id,
        is_gift=payload.is_gift,
        gift_message=payload.gift_message,
        customization=payload.customization,
    )
    session.commit()
    return ok(item, "Item updated")


@router.delete("/items/{item_id}", response_model=ApiResponse[CartSummary])
def remove_item(
    item_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[CartSummary]:
    summary = CartService(session).remove_item(user.id, item_id)
    session.commit()
    return ok(summary, "Item removed from cart")


@router.delete("", response_model=ApiResponse[CartSummary])
def clear_cart(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[CartSummary]:
    summary = CartService(session).clear_cart(user.id)
    session.commit()
    return ok(summary, "Cart cleared")


@router.patch("/settings", response_model=ApiResponse[CartSummary])
def update_settings(
    payload: CartSettingsUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[CartSummary]:
    summary = CartService(session).update_settings(user.id, **payload.model_dump(exclude_unset=True))
    session.commit()
    return ok(summary, "Cart settings updated")


@router.post("/coupon", response_model=ApiResponse[CartSummary])
def apply_coupon(
    payload: CouponRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[CartSummary]:
    summary = CartService(session).apply_coupon(user.id, payload.code)
    session.commit()
    return ok(summary, "Coupon applied")


@router.delete("/coupon", response_model=ApiResponse[CartSummary])
def remove_coupon(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[CartSummary]:
    summary = CartService(session).remove_coupon(user.id)
    session.commit()
    return ok(summary, "Coupon removed")
