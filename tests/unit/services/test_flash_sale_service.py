"""Unit tests for flash sale scheduling and product pricing."""

from datetime import timedelta

import pytest

from src.app.core.errors import ConflictError, NotFoundError, ValidationError
from src.app.core.services.catalog.flash_sale_service import FlashSaleService
from src.app.entities.core._base import utc_now
from src.app.entities.service.product import ProductRepository


@pytest.fixture
def window():
    now = utc_now()
    return now + timedelta(hours=1), now + timedelta(days=1)


class TestCreateFlashSale:
    def test_discounts_product_price(self, session, product, window):
        start, end = window
        sale = FlashSaleService(session).create(product.product.id, 25, start, end)

        assert sale.price == 30.0
        saved = ProductRepository(session).get(product.product.id)
        assert saved.price == 30.0
        assert saved.origin_price == 40.0
        assert saved.is_flash_sale
        assert saved.is_sale

    def test_one_sale_per_product(self, session, product, window):
        start, end = window
        service = FlashSaleService(session)
        service.create(product.product.id, 10, start, end)
        with pytest.raises(ConflictError):
            service.create(product.product.id, 20, start, end)

    def test_start_must_precede_end(self, session, product, window):
        start, end = window
        with pytest.raises(ValidationError, match="Start date must be before end date"):
            FlashSaleService(session).create(product.product.id, 10, end, start)

    @pytest.mark.parametrize("discount", [0, -5, 100.5])
    def test_discount_bounds(self, session, product, window, discount):
        start, end = window
        with pytest.raises(ValidationError, match="Discount must be greater than 0"):
            FlashSaleService(session).create(product.product.id, discount, start, end)

    def test_already_discounted_product_is_not_raised(self, session, make_product, window):
        start, end = window
        detail = make_product(name="Marked Down", price=80.0, origin_price=100.0)

        sale = FlashSaleService(session).create(detail.product.id, 10, start, end)

        assert sale.price == 72.0
        assert sale.base_price == 80.0
        saved = ProductRepository(session).get(detail.product.id)
        assert saved.price == 72.0
        assert saved.origin_price == 100.0

    def test_unknown_product(self, session, window):
        start, end = window
        with pytest.raises(NotFoundError):
            FlashSaleService(session).create("missing", 10, start, end)


class TestUpdateFlashSale:
    def test_update_recomputes_from_base_price(self, session, product, window):
        start, end = window
        service = FlashSaleService(session)
        sale = service.create(product.product.id, 25, start, end)

        updated = service.update(sale.id, discount=50)

        assert updated.price == 20.0
        assert ProductRepository(session).get(product.product.id).price == 20.0

    def test_upsert_rejects_past_start(self, session, product):
        now = utc_now()
        with pytest.raises(ValidationError, match="past"):
            FlashSaleService(session).upsert_for_product(
                product.product.id, 10, now - timedelta(hours=1), now + timedelta(days=1)
            )

    def test_upsert_replaces_existing(self, session, product, window):
        start, end = window
        service = FlashSaleService(session)
        first = service.upsert_for_product(product.product.id, 10, start, end)
        second = service.upsert_for_product(product.product.id, 20, start, end)

        assert second.id == first.id
        assert second.price == 32.0
        assert len(service.list_all()) == 1


class TestDeleteFlashSale:
    def test_delete_restores_price(self, session, product, window):
        start, end = window
        service = FlashSaleService(session)
        sale = service.create(product.product.id, 25, start, end)

        service.delete(sale.id)

        saved = ProductRepository(session).get(product.product.id)
        assert saved.price == 40.0
        assert not saved.is_flash_sale
        with pytest.raises(NotFoundError):
            service.get(sale.id)

    def test_delete_restores_pre_sale_price(self, session, make_product, window):
        start, end = window
        detail = make_product(name="Marked Down", price=80.0, origin_price=100.0)
        service = FlashSaleService(session)
        sale = service.create(detail.product.id, 10, start, end)

        service.delete(sale.id)

        assert ProductRepository(session).get(detail.product.id).price == 80.0
