"""Unit tests for coupon management and redemption rules."""

from datetime import timedelta

import pytest

from src.app.core.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from src.app.core.services.commerce import CouponService, OrderService
from src.app.entities.core._base import utc_now


class TestCouponManagement:
    def test_code_is_stored_uppercased(self, session, make_coupon):
        coupon = make_coupon("  spring  ")
        assert coupon.code == "SPRING"

    def test_duplicate_code(self, session, make_coupon):
        make_coupon("DUP")
        with pytest.raises(ConflictError, match="Coupon code already exists"):
            make_coupon("dup")

    def test_invalid_percentage(self, session, make_coupon):
        with pytest.raises(ValidationError, match="cannot exceed 100"):
            make_coupon("TOOMUCH", value=150)

    def test_end_before_start(self, session, make_coupon):
        now = utc_now()
        with pytest.raises(ValidationError, match="End date must be after start date"):
            make_coupon("BACKWARDS", start_date=now, end_date=now - timedelta(days=1))

    def test_update_rejects_taken_code(self, session, make_coupon):
        make_coupon("FIRST")
        second = make_coupon("SECOND")
        with pytest.raises(ConflictError):
            CouponService(session).update(second.id, {"code": "first"})

    def test_update_keeps_used_count(self, session, make_coupon):
        coupon = make_coupon("KEEP")
        updated = CouponService(session).update(coupon.id, {"value": 20, "used_count": 99})
        assert updated.value == 20
        assert updated.used_count == 0

    def test_delete_in_use_coupon(self, session, user, product, place_order, make_coupon):
        coupon = make_coupon("INUSE")
        place_order(user, product, coupon_code="INUSE")

        with pytest.raises(ValidationError, match="used by active orders"):
            CouponService(session).delete(coupon.id)

    def test_delete_unknown(self, session):
        with pytest.raises(NotFoundError):
            CouponService(session).delete("missing")

    def test_public_listing_hides_private_coupons(self, session, make_coupon):
        make_coupon("PUBLIC")
        make_coupon("HIDDEN", is_public=False)
        codes = [coupon.code for coupon in CouponService(session).list_public()]
        assert "PUBLIC" in codes
        assert "HIDDEN" not in codes

    def test_public_listing_hides_coupons_not_started(self, session, make_coupon):
        make_coupon("LIVE")
        make_coupon(
            "FUTURE",
            start_date=utc_now() + timedelta(days=2),
            end_date=utc_now() + timedelta(days=10),
        )
        codes = [coupon.code for coupon in CouponService(session).list_public()]
        assert codes == ["LIVE"]


class TestCouponValidation:
    def test_percentage_discount(self, session, user, make_coupon):
        make_coupon("TEN")
        result = CouponService(session).validate("ten", user.id, 200.0)

        assert result.discount_amount == 20.0
        assert result.final_amount == 180.0
        assert result.savings == 20.0

    def test_percentage_discount_is_capped(self, session, user, make_coupon):
        make_coupon("CAPPED", value=50, max_discount=15)
        result = CouponService(session).validate("CAPPED", user.id, 100.0)
        assert result.discount_amount == 15.0

    def test_fixed_discount_never_exceeds_total(self, session, user, make_coupon):
        make_coupon("FLAT", type="FIXED", value=30)
        result = CouponService(session).validate("FLAT", user.id, 20.0)
        assert result.discount_amount == 20.0
        assert result.final_amount == 0.0

    def test_unknown_code(self, session, user):
        with pytest.raises(NotFoundError):
            CouponService(session).validate("NOPE", user.id, 10.0)

    def test_inactive(self, session, user, make_coupon):
        make_coupon("OFF", is_active=False)
        with pytest.raises(ValidationError, match="not active"):
            CouponService(session).validate("OFF", user.id, 10.0)

    def test_not_started(self, session, user, make_coupon):
        now = utc_now()
        make_coupon("LATER", start_date=now + timedelta(days=1), end_date=now + timedelta(days=2))
        with pytest.raises(ValidationError, match="not yet valid"):
            CouponService(session).validate("LATER", user.id, 10.0)

    def test_expired(self, session, user, make_coupon):
        now = utc_now()
        make_coupon("OLD", start_date=now - timedelta(days=5), end_date=now - timedelta(days=1))
        with pytest.raises(ValidationError, match="expired"):
            CouponService(session).validate("OLD", user.id, 10.0)

    def test_minimum_order_value(self, session, user, make_coupon):
        make_coupon("BIGSPEND", min_order_value=100)
        with pytest.raises(ValidationError, match="Minimum order value of 100.00"):
            CouponService(session).validate("BIGSPEND", user.id, 99.99)

    def test_private_coupon_requires_allowed_user(self, session, user, make_user, make_coupon):
        make_coupon("VIP", is_public=False, allowed_user_ids=[user.id])
        outsider = make_user(email="outsider@example.com")

        assert CouponService(session).validate("VIP", user.id, 50.0).discount_amount == 5.0
        with pytest.raises(PermissionDeniedError):
            CouponService(session).validate("VIP", outsider.id, 50.0)

    def test_excluded_product(self, session, user, product, make_coupon):
        make_coupon("NOTTHIS", excluded_product_ids=[product.product.id])
        with pytest.raises(ValidationError, match="not eligible"):
            CouponService(session).validate("NOTTHIS", user.id, 40.0, [product.product.id])

    def test_category_restriction(self, session, user, product, make_coupon):
        make_coupon("OTHERCAT", category_ids=["another-category"])
        with pytest.raises(ValidationError, match="not applicable to these products"):
            CouponService(session).validate("OTHERCAT", user.id, 40.0, [product.product.id])

    def test_cancelled_orders_do_not_count(self, session, user, product, place_order, make_coupon):
        make_coupon("AGAIN")
        order = place_order(user, product, coupon_code="AGAIN").order
        OrderService(session).cancel_order(user, order.id)

        assert CouponService(session).validate("AGAIN", user.id, 40.0).discount_amount == 4.0

    def test_apply_skips_per_user_checks(self, session, make_coupon):
        make_coupon("ANYONE", is_public=False)
        result = CouponService(session).apply("ANYONE", 80.0)
        assert result.final_amount == 72.0
