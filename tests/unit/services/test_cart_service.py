"""Unit tests for CartService stock reservation and totals."""

import pytest
from sqlmodel import Session

from src.app.core.errors import NotFoundError, PermissionDeniedError, ValidationError
from src.app.core.services.commerce import CartService
from src.app.entities.service.product import ProductVariantRepository


def _stock(session: Session, variant_id: str) -> int:
    return ProductVariantRepository(session).get(variant_id).quantity


class TestAddToCart:
    def test_add_reserves_stock_and_prices_cart(self, session, user, product):
        variant = product.variants[0]
        summary = CartService(session).add_to_cart(user.id, product.product.id, variant.id, 2)

        assert summary.item_count == 2
        assert summary.subtotal == 80.0
        assert summary.tax == 8.0
        assert summary.shipping == 10.0
        assert summary.total == 98.0
        assert _stock(session, variant.id) == 8

    def test_adding_same_variant_merges_line(self, session, user, product):
        service = CartService(session)
        variant = product.variants[0]
        service.add_to_cart(user.id, product.product.id, variant.id, 1)
        summary = service.add_to_cart(user.id, product.product.id, variant.id, 2)

        assert len(summary.items) == 1
        assert summary.items[0].quantity == 3
        assert summary.items[0].total_price == 120.0

    def test_add_beyond_stock_fails_and_leaves_stock(self, session, user, make_product):
        detail = make_product(stock=2)
        variant = detail.variants[0]

        with pytest.raises(ValidationError, match="Not enough quantity in stock"):
            CartService(session).add_to_cart(user.id, detail.product.id, variant.id, 3)

        assert _stock(session, variant.id) == 2

    def test_variant_must_belong_to_product(self, session, user, product, make_product):
        other = make_product(name="Other Shoe")
        with pytest.raises(ValidationError):
            CartService(session).add_to_cart(
                user.id, product.product.id, other.variants[0].id, 1
            )

    def test_unknown_product(self, session, user, product):
        with pytest.raises(NotFoundError):
            CartService(session).add_to_cart(user.id, "missing", product.variants[0].id, 1)

    def test_quantity_must_be_positive(self, session, user, product):
        with pytest.raises(ValidationError):
            CartService(session).add_to_cart(
                user.id, product.product.id, product.variants[0].id, 0
            )


class TestCartLines:
    def test_update_quantity_moves_reservation(self, session, user, product):
        service = CartService(session)
        variant = product.variants[0]
        summary = service.add_to_cart(user.id, product.product.id, variant.id, 2)
        item_id = summary.items[0].id

        service.update_item_quantity(user.id, item_id, 5)
        assert _stock(session, variant.id) == 5

        service.update_item_quantity(user.id, item_id, 1)
        assert _stock(session, variant.id) == 9

    def test_update_quantity_cannot_exceed_stock(self, session, user, product):
        service = CartService(session)
        variant = product.variants[0]
        summary = service.add_to_cart(user.id, product.product.id, variant.id, 2)

        with pytest.raises(ValidationError):
            service.update_item_quantity(user.id, summary.items[0].id, 11)
        assert _stock(session, variant.id) == 8

    def test_remove_item_releases_stock(self, session, user, product):
        service = CartService(session)
        variant = product.variants[0]
        summary = service.add_to_cart(user.id, product.product.id, variant.id, 4)

        summary = service.remove_item(user.id, summary.items[0].id)

        assert summary.items == []
        assert summary.total == 0.0
        assert _stock(session, variant.id) == 10

    def test_clear_cart_releases_all_stock(self, session, user, product):
        service = CartService(session)
        variant = product.variants[0]
        service.add_to_cart(user.id, product.product.id, variant.id, 3)

        summary = service.clear_cart(user.id)

        assert summary.item_count == 0
        assert _stock(session, variant.id) == 10

    def test_other_users_item_is_forbidden(self, session, user, make_user, product):
        service = CartService(session)
        summary = service.add_to_cart(
            user.id, product.product.id, product.variants[0].id, 1
        )
        stranger = make_user(email="stranger@example.com")

        with pytest.raises(PermissionDeniedError):
            service.remove_item(stranger.id, summary.items[0].id)

    def test_gift_details(self, session, user, product):
        service = CartService(session)
        summary = service.add_to_cart(
            user.id, product.product.id, product.variants[0].id, 1
        )
        item = service.update_item_details(
            user.id, summary.items[0].id, is_gift=True, gift_message="Happy birthday"
        )
        assert item.is_gift
        assert item.gift_message == "Happy birthday"


class TestCartCoupon:
    def test_apply_and_remove_coupon(self, session, user, product, make_coupon):
        make_coupon("TENOFF", value=10)
        service = CartService(session)
        service.add_to_cart(user.id, product.product.id, product.variants[0].id, 1)

        summary = service.apply_coupon(user.id, "tenoff")
        assert summary.coupon_code == "TENOFF"
        assert summary.discount == 4.0
        assert summary.total == 50.0

        summary = service.remove_coupon(user.id)
        assert summary.coupon_code is None
        assert summary.total == 54.0

    def test_coupon_on_empty_cart(self, session, user, product, make_coupon):
        make_coupon()
        service = CartService(session)
        summary = service.add_to_cart(
            user.id, product.product.id, product.variants[0].id, 1
        )
        service.remove_item(user.id, summary.items[0].id)

        with pytest.raises(ValidationError, match="Cart is empty"):
            service.apply_coupon(user.id, "SAVE10")

    def test_settings_require_cart(self, session, user):
        with pytest.raises(NotFoundError):
            CartService(session).update_settings(user.id, notes="leave at door")
