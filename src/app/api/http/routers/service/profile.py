"""Profile and address book endpoints for the signed-in user."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlmodel import Session

from src.app.api.http.deps import get_current_user, get_db_session
from src.app.api.http.schemas import ApiResponse, UserPublic, ok
from src.app.core.services import ProfileService
from src.app.entities.core.address import Address
from src.app.entities.core.user import User

router = APIRouter(prefix="/profile", tags=["profile"])


class ProfileUpdate(BaseModel):
    name: str | None = None
    phone: str | None = None
    avatar: str | None = None


class AddressCreate(BaseModel):
    full_name: str | None = None
    phone: str | None = None
    address_line_one: str = Field(min_length=1)
    address_line_two: str | None = None
    city: str = Field(min_length=1)
    state: str | None = None
    zip_code: str = Field(min_length=1)
    country: str = Field(min_length=1)
    is_default: bool = False


class AddressUpdate(BaseModel):
    full_name: str | None = None
    phone: str | None = None
    address_line_one: str | None = None
    address_line_two: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None
    is_default: bool | None = None


@router.get("", response_model=ApiResponse[UserPublic])
def get_profile(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[UserPublic]:
    return ok(UserPublic.of(ProfileService(session).get_profile(user.id)))


@router.patch("", response_model=ApiResponse[UserPublic])
def update_profile(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[UserPublic]:
    updated = ProfileService(session).update_profile(user.id, payload.model_dump(exclude_unset=True))
    session.commit()
    return ok(UserPublic.of(updated), "Profile updated")


@router.get("/addresses", response_model=ApiResponse[list[Address]])
def list_addresses(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[list[Address]]:
    return ok(ProfileService(session).list_addresses(user.id))


@router.post("/addresses", status_code=201, response_model=ApiResponse[Address])
def create_address(
    payload: AddressCreate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[Address]:
    address = ProfileService(session).create_address(user.id, payload.model_dump())
    session.commit()
    return ok(address, "Address created")


@router.patch("/addresses/{address_id}", response_model=ApiResponse[Address])
def update_address(
    address_id: str,
    payload: AddressUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[Address]:
    address = ProfileService(session).update_address(
        user.id, address_id, payload.model_dump(exclude_unset=True)
    )
    session.commit()
    return ok(address, "Address updated")


@router.delete("/addresses/{address_id}", response_model=ApiResponse[None])
def delete_address(
    address_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[None]:
    ProfileService(session).delete_address(user.id, address_id)
    session.commit()
    return ok(message="Address deleted")
