"""Profile and address book operations."""

from typing import Any

from loguru import logger
from sqlmodel import Session

from src.app.core.errors import NotFoundError
from src.app.entities.core.address.entity import Address
from src.app.entities.core.address.repository import AddressRepository
from src.app.entities.core.user.entity import User
from src.app.entities.core.user.repository import UserRepository

PROFILE_FIELDS = frozenset({"name", "phone", "avatar"})


class ProfileService:
    def __init__(self, db_session: Session):
        self._users = UserRepository(db_session)
        self._addresses = AddressRepository(db_session)

    def get_profile(self, user_id: str) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def update_profile(self, user_id: str, changes: dict[str, Any]) -> User:
        user = self.get_profile(user_id)
        for field_name, value in changes.items():
            if field_name in PROFILE_FIELDS:
                setattr(user, field_name, value)
        return self._users.update(user)

    def list_addresses(self, user_id: str) -> list[Address]:
        return self._addresses.list_for_user(user_id)

    def create_address(self, user_id: str, data: dict[str, Any]) -> Address:
        address = Address(user_id=user_id, **data)
        if self._addresses.get_default(user_id) is None:
            address.is_default = True
        created = self._addresses.create(address)
        if created.is_default:
            self._addresses.clear_default(user_id, keep_id=created.id)
        logger.bind(user_id=user_id, address_id=created.id).info("address.created")
        return created

    def update_address(self, user_id: str, address_id: str, changes: dict[str, Any]) -> Address:
        address = self._owned_address(user_id, address_id)
        updated = self._addresses.update(address.model_copy(update=changes))
        if updated.is_default:
            self._addresses.clear_default(user_id, keep_id=updated.id)
        return updated

    def delete_address(self, user_id: str, address_id: str) -> None:
        address = self._owned_address(user_id, address_id)
        self._addresses.delete(address.id)
        if address.is_default:
            remaining = self._addresses.list_for_user(user_id)
            if remaining:
                remaining[0].is_default = True
                self._addresses.update(remaining[0])

    def _owned_address(self, user_id: str, address_id: str) -> Address:
        address = self._addresses.get(address_id)
        if address is None or address.user_id != user_id:
            raise NotFoundError("Address not found")
        return address
