"""Address domain entity."""

from pydantic import Field

from src.app.entities.core._base import Entity


class Address(Entity):
    """A saved postal address belonging to a user."""

    user_id: str = Field(description="Owning user")
    full_name: str | None = Field(default=None, description="Recipient name")
    phone: str | None = Field(default=None, description="Recipient phone")
    address_line_one: str = Field(description="Street address")
    address_line_two: str | None = Field(default=None, description="Apartment, suite")
    city: str = Field(description="City")
    state: str | None = Field(default=None, description="State or region")
    zip_code: str = Field(description="Postal code")
    country: str = Field(description="Country")
    is_default: bool = Field(default=False, description="Default shipping address")

    def as_shipping_address(self) -> dict[str, str]:
        """Shape used on orders and carts."""
        street = self.address_line_one
        if self.address_line_two:
            street = f"{street}, {self.address_line_two}"
        return {
            "address": street,
            "city": self.city,
            "postal_code": self.zip_code,
            "country": self.country,
        }
