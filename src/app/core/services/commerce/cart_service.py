"""Shopping cart operations with stock reservation.

Adding a line reserves variant stock immediately; removing or shrinking the
line releases it. Order placement therefore never touches variant stock again.
"""

from datetime import datetime
from typing import Any

from loguru import logger
from pydantic import BaseModel
from sqlmodel import Session

from src.app.core.errors import NotFoundError, PermissionDeniedError, ValidationError
from src.app.core.services.commerce.coupon_service import CouponService
from src.app.entities.service.cart.entity import (
    Cart,
    CartItem,
    CartStatus,
    PricingRules,
    ShippingMethod,
)
from src.app.entities.service.cart.repository import CartItemRepository, CartRepository
from src.app.entities.service.coupon.repository import CouponRepository
from src.app.entities.service.payment.entity import PaymentMethod
from src.app.entities.service.product.repository import (
    ProductRepository,
    ProductVariantRepository,
)
from src.app.runtime.config.config_data import CommerceConfig
from src.app.runtime.context import get_config

OUT_OF_STOCK = "Not enough quantity in stock"


def pricing_rules(config: CommerceConfig | None = None) -> PricingRules:
    commerce = config or get_config().commerce
    return PricingRules(
        tax_rate=commerce.tax_rate,
        free_shipping_threshold=commerce.free_shipping_threshold,
        shipping_fee=commerce.shipping_fee,
    )


class CartSummary(BaseModel):
    """The active cart and its lines; all zeros when the user has no cart."""

    cart: Cart | None = None
    items: list[CartItem] = []
    item_count: int = 0
    subtotal: float = 0.0
    tax: float = 0.0
    shipping: float = 0.0
    discount: float = 0.0
    total: float = 0.0
    coupon_code: str | None = None

    @classmethod
    def of(
        cls, cart: Cart | None, items: list[CartItem], coupon_code: str | None = None
    ) -> "CartSummary":
        if cart is None:
            return cls()
        return cls(
            cart=cart,
            items=items,
            item_count=sum(item.quantity for item in items),
            subtotal=cart.subtotal,
            tax=cart.tax,
            shipping=cart.shipping,
            discount=cart.discount,
            total=cart.total,
            coupon_code=coupon_code,
        )


class CartService:
    def __init__(self, db_session: Session, rules: PricingRules | None = None):
        self._rules = rules or pricing_rules()
        self._carts = CartRepository(db_session)
        self._items = CartItemRepository(db_session)
        self._products = ProductRepository(db_session)
        self._variants = ProductVariantRepository(db_session)
        self._coupons = CouponRepository(db_session)
        self._db_session = db_session

    def get_cart(self, user_id: str) -> CartSummary:
        cart = self._carts.get_active_for_user(user_id)
        if cart is None:
            return CartSummary()
        return self._summary(cart)

    def add_to_cart(
        self, user_id: str, product_id: str, variant_id: str, quantity: int = 1
    ) -> CartSummary:
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")
        product = self._products.get(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        variant = self._variants.get(variant_id)
        if variant is None:
            raise NotFoundError("Product variant not found")
        if variant.product_id != product.id:
            raise ValidationError("Variant does not belong to this product")
        if variant.quantity < quantity:
            raise ValidationError(OUT_OF_STOCK)

        if self._variants.adjust_stock(variant.id, -quantity) is None:
            raise ValidationError(OUT_OF_STOCK)

        cart = self._carts.get_active_for_user(user_id)
        if cart is None:
            cart = self._carts.create(
                Cart(user_id=user_id, currency=get_config().commerce.currency)
            )

        line = self._items.find_line(cart.id, product.id, variant.id)
        if line is not None:
            line.price = product.price
            line.original_price = product.list_price
            line.set_quantity(line.quantity + quantity)
            self._items.update(line)
        else:
            line = CartItem(
                cart_id=cart.id,
                product_id=product.id,
                variant_id=variant.id,
                name=product.name,
                image=variant.image or (product.thumb_image[0] if product.thumb_image else None),
                color=variant.color,
                size=variant.size,
                sku=f"{product.id}-{variant.id}",
                quantity=quantity,
                price=product.price,
                original_price=product.list_price,
            )
            line.set_quantity(quantity)
            self._items.create(line)

        logger.bind(
            cart_id=cart.id, product_id=product.id, variant_id=variant.id, quantity=quantity
        ).info("cart.item_added")
        return self._recalculate(cart)

    def update_item_quantity(self, user_id: str, item_id: str, quantity: int) -> CartSummary:
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")
        cart, item = self._owned_item(user_id, item_id)
        delta = quantity - item.quantity
        if delta:
            variant = self._variants.get(item.variant_id)
            if variant is None:
                raise NotFoundError("Product variant not found")
            if variant.quantity + item.quantity < quantity:
                raise ValidationError(OUT_OF_STOCK)
            if self._variants.adjust_stock(variant.id, -delta) is None:
                raise ValidationError(OUT_OF_STOCK)
            item.set_quantity(quantity)
            self._items.update(item)
        return self._recalculate(cart)

    def update_item_details(
        self,
        user_id: str,
        item_id: str,
        *,
        is_gift: bool | None = None,
        gift_message: str | None = None,
        customization: dict[str, Any] | None = None,
    ) -> CartItem:
        _, item = self._owned_item(user_id, item_id)
        if is_gift is not None:
            item.is_gift = is_gift
        if gift_message is not None:
            item.gift_message = gift_message
        if customization is not None:
            item.customization = customization
        return self._items.update(item)

    def remove_item(self, user_id: str, item_id: str) -> CartSummary:
        cart, item = self._owned_item(user_id, item_id)
        self._variants.adjust_stock(item.variant_id, item.quantity)
        self._items.delete(item.id)
        logger.bind(cart_id=cart.id, item_id=item_id).info("cart.item_removed")
        return self._recalculate(cart)

    def clear_cart(self, user_id: str) -> CartSummary:
        cart = self._carts.get_active_for_user(user_id)
        if cart is None:
            return CartSummary()
        for item in self._items.list_for_cart(cart.id):
            self._variants.adjust_stock(item.variant_id, item.quantity)
        self._items.delete_for_cart(cart.id)
        cart.reset_totals()
        cart = self._carts.update(cart)
        logger.bind(cart_id=cart.id).info("cart.cleared")
        return self._summary(cart)

    def update_settings(
        self,
        user_id: str,
        *,
        payment_method: PaymentMethod | None = None,
        shipping_method: ShippingMethod | None = None,
        shipping_address: dict[str, Any] | None = None,
        notes: str | None = None,
        estimated_delivery: datetime | None = None,
        currency: str | None = None,
    ) -> CartSummary:
        cart = self._require_active_cart(user_id)
        if payment_method is not None:
            cart.payment_method = payment_method
        if shipping_method is not None:
            cart.shipping_method = shipping_method
        if shipping_address is not None:
            cart.shipping_address = shipping_address
        if notes is not None:
            cart.notes = notes
        if estimated_delivery is not None:
            cart.estimated_delivery = estimated_delivery
        if currency is not None:
            cart.currency = currency.upper()
        return self._summary(self._carts.update(cart))

    def apply_coupon(self, user_id: str, code: str) -> CartSummary:
        cart = self._require_active_cart(user_id)
        items = self._items.list_for_cart(cart.id)
        if not items:
            raise ValidationError("Cart is empty")
        subtotal = round(sum(item.price * item.quantity for item in items), 2)
        validation = CouponService(self._db_session).validate(
            code, user_id, subtotal, [item.product_id for item in items]
        )
        cart.coupon_id = validation.coupon.id
        logger.bind(cart_id=cart.id, code=validation.coupon.code).info("cart.coupon_applied")
        return self._recalculate(cart)

    def remove_coupon(self, user_id: str) -> CartSummary:
        cart = self._require_active_cart(user_id)
        cart.coupon_id = None
        return self._recalculate(cart)

    def _recalculate(self, cart: Cart) -> CartSummary:
        items = self._items.list_for_cart(cart.id)
        subtotal = round(sum(item.price * item.quantity for item in items), 2)
        discount = 0.0
        if cart.coupon_id:
            coupon = self._coupons.get(cart.coupon_id)
            if coupon is None or subtotal < coupon.min_order_value or not items:
                cart.coupon_id = None
            else:
                discount = coupon.compute_discount(subtotal)
        cart.apply_totals(items, self._rules, discount)
        cart = self._carts.update(cart)
        return self._summary(cart, items)

    def _summary(self, cart: Cart, items: list[CartItem] | None = None) -> CartSummary:
        if items is None:
            items = self._items.list_for_cart(cart.id)
        coupon_code = None
        if cart.coupon_id:
            coupon = self._coupons.get(cart.coupon_id)
            coupon_code = coupon.code if coupon else None
        return CartSummary.of(cart, items, coupon_code)

    def _require_active_cart(self, user_id: str) -> Cart:
        cart = self._carts.get_active_for_user(user_id)
        if cart is None:
            raise NotFoundError("Cart not found")
        return cart

    def _owned_item(self, user_id: str, item_id: str) -> tuple[Cart, CartItem]:
        item = self._items.get(item_id)
        if item is None:
            raise NotFoundError("Cart item not found")
        cart = self._carts.get(item.cart_id)
        if cart is None or cart.user_id != user_id:
            raise PermissionDeniedError("You do not have access to this cart item")
        if cart.status != CartStatus.ACTIVE:
            raise ValidationError("Cart is no longer active")
        return cart, item
