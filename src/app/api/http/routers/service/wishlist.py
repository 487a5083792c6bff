"""Wishlist API router."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session

from src.app.api.http.deps import get_current_user, get_db_session
from src.app.api.http.schemas import ApiResponse, ok
from src.app.core.services.lists import ListedProduct, WishlistService
from src.app.entities.core.user import User

router = APIRouter(prefix="/wishlist", tags=["wishlist"])


class ListItemRequest(BaseModel):
    product_id: str


class MembershipCheck(BaseModel):
    product_id: str
    in_list: bool


@router.get("", response_model=ApiResponse[list[ListedProduct]])
def get_wishlist(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[list[ListedProduct]]:
    return ok(WishlistService(session).list_for_user(user.id))


@router.post("", status_code=201, response_model=ApiResponse[ListedProduct])
def add_to_wishlist(
    payload: ListItemRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[ListedProduct]:
    listed = WishlistService(session).add(user.id, payload.product_id)
    session.commit()
    return ok(listed, "Product added to wishlist")


@router.get("/check/{product_id}", response_model=ApiResponse[MembershipCheck])
def check_wishlist(
    product_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[MembershipCheck]:
    in_list = WishlistService(session).contains(user.id, product_id)
    return ok(MembershipCheck(product_id=product_id, in_list=in_list))


@router.delete("/{product_id}", response_model=ApiResponse[None])
def remove_from_wishlist(
    product_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[None]:
    WishlistService(session).remove(user.id, product_id)
    session.commit()
    return ok(message="Product removed from wishlist")


@router.delete("", response_model=ApiResponse[None])
def clear_wishlist(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[None]:
    WishlistService(session).clear(user.id)
    session.commit()
    return ok(message="Wishlist cleared")
