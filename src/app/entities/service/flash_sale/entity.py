"""Entity: FlashSale."""

from datetime import datetime

from pydantic import Field

from src.app.entities.core._base import Entity, as_utc, utc_now


def discounted_price(price: float, discount: float) -> float:
    """Price after taking ``discount`` percent off."""
    return round(price - price * discount / 100, 2)


class FlashSale(Entity):
    """A time-boxed percentage discount on one product."""

    product_id: str = Field(description="Discounted product")
    discount: float = Field(description="Discount percentage in (0, 100]")
    start_date: datetime = Field(description="Sale start (UTC)")
    end_date: datetime = Field(description="Sale end (UTC)")
    base_price: float = Field(description="Product price when the sale was created")
    price: float = Field(description="Sale price computed from the base price")

    def is_running(self, at: datetime | None = None) -> bool:
        moment = as_utc(at) if at else utc_now()
        return self.start_date <= moment <= self.end_date
