"""Product compare API router."""

from fastapi import APIRouter, Depends
from sqlmodel import Session

from src.app.api.http.deps import get_current_user, get_db_session
from src.app.api.http.routers.service.wishlist import ListItemRequest, MembershipCheck
from src.app.api.http.schemas import ApiResponse, ok
from src.app.core.services.lists import CompareService, ListedProduct, ProductComparison
from src.app.entities.core.user import User

router = APIRouter(prefix="/compare", tags=["compare"])


@router.get("", response_model=ApiResponse[list[ListedProduct]])
def get_compare_list(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[list[ListedProduct]]:
    return ok(CompareService(session).list_for_user(user.id))


@router.get("/matrix", response_model=ApiResponse[ProductComparison])
def compare_products(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[ProductComparison]:
    return ok(CompareService(session).comparison(user.id))


@router.post("", status_code=201, response_model=ApiResponse[ListedProduct])
def add_to_compare(
    payload: ListItemRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[ListedProduct]:
    listed = CompareService(session).add(user.id, payload.product_id)
    session.commit()
    return ok(listed, "Product added to compare list")


@router.get("/check/{product_id}", response_model=ApiResponse[MembershipCheck])
def check_compare(
    product_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[MembershipCheck]:
    in_list = CompareService(session).contains(user.id, product_id)
    return ok(MembershipCheck(product_id=product_id, in_list=in_list))


@router.delete("/{product_id}", response_model=ApiResponse[None])
def remove_from_compare(
    product_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[None]:
    CompareService(session).remove(user.id, product_id)
    session.commit()
    return ok(message="Product removed from compare list")


@router.delete("", response_model=ApiResponse[None])
def clear_compare(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[None]:
    CompareService(session).clear(user.id)
    session.commit()
    return ok(message="Compare list cleared")
