"""Address database table model."""

from sqlmodel import Field

from src.app.entities.core._base import EntityTable


class AddressTable(EntityTable, table=True):
    """Database persistence model for addresses."""

    __tablename__ = "addresses"

    user_id: str = Field(foreign_key="users.id", index=True)
    full_name: str | None = None
    phone: str | None = None
    address_line_one: str
    address_line_two: str | None = None
    city: str
    state: str | None = None
    zip_code: str
    country: str
    is_default: bool = False
