"""Cart and cart item repositories."""

from sqlalchemy import delete
from sqlmodel import col, select

from src.app.entities.core._base import Repository
from src.app.entities.service.cart.entity import Cart, CartItem, CartStatus
from src.app.entities.service.cart.table import CartItemTable, CartTable


class CartRepository(Repository[Cart, CartTable]):
    """Data-access layer for carts."""

    entity_cls = Cart
    table_cls = CartTable

    def get_active_for_user(self, user_id: str) -> Cart | None:
        statement = (
            select(CartTable)
            .where(CartTable.user_id == user_id, CartTable.status == CartStatus.ACTIVE)
            .order_by(col(CartTable.created_at).desc())
        )
        row = self._session.exec(statement).first()
        return self._to_entity(row) if row is not None else None

    def count_by_status(self, status: CartStatus) -> int:
        return self.count(CartTable.status == status)


class CartItemRepository(Repository[CartItem, CartItemTable]):
    """Data-access layer for cart lines."""

    entity_cls = CartItem
    table_cls = CartItemTable

    def list_for_cart(self, cart_id: str) -> list[CartItem]:
        statement = (
            select(CartItemTable)
            .where(CartItemTable.cart_id == cart_id)
            .order_by(col(CartItemTable.created_at))
        )
        return self._to_entities(self._session.exec(statement).all())

    def find_line(self, cart_id: str, product_id: str, variant_id: str) -> CartItem | None:
        statement = select(CartItemTable).where(
            CartItemTable.cart_id == cart_id,
            CartItemTable.product_id == product_id,
            CartItemTable.variant_id == variant_id,
        )
        row = self._session.exec(statement).first()
        return self._to_entity(row) if row is not None else None

    def delete_for_cart(self, cart_id: str) -> None:
        self._session.exec(  # type: ignore[call-overload]
            delete(CartItemTable).where(CartItemTable.cart_id == cart_id)
        )

    def delete_for_product(self, product_id: str) -> None:
        self._session.exec(  # type: ignore[call-overload]
            delete(CartItemTable).where(CartItemTable.product_id == product_id)
        )
