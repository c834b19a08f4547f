"""Pricing for carts: subtotal, delivery fee and promo discount."""

import logging
from decimal import Decimal

from food_ordering_service.models.catalog_models import Restaurant
from food_ordering_service.models.order_models import CartItem, OrderTotals
from food_ordering_service.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class PricingService:
    """Service computing the totals of a cart.

    The discount applies to subtotal plus delivery fee. An unknown or
    inactive promo code prices the cart without a discount instead of
    failing.
    """

    def __init__(self, catalog_service: CatalogService) -> None:
        """Initialize the PricingService.

        Args:
            catalog_service: Catalog used to resolve restaurants and promo codes
        """
        self.catalog_service = catalog_service

    @staticmethod
    def compute_totals(
        cart: list[CartItem],
        restaurant: Restaurant | None,
        promo_percentage: int | None = None,
    ) -> OrderTotals:
        """Price a cart.

        Args:
            cart: Cart lines (prices already size-adjusted)
            restaurant: Restaurant the cart belongs to, None when unresolved
            promo_percentage: Validated discount percentage, if any

        Returns:
            OrderTotals: Subtotal, delivery fee, discount and final amount
        """
        subtotal = sum((line.price * line.quantity for line in cart), ZERO)
        delivery_fee = restaurant.delivery_fee if restaurant is not None else ZERO

        discount_amount = ZERO
        if promo_percentage:
            discount_amount = (subtotal + delivery_fee) * Decimal(promo_percentage) / 100

        return OrderTotals(
            subtotal=subtotal,
            delivery_fee=delivery_fee,
            discount_amount=discount_amount,
            final_amount=subtotal + delivery_fee - discount_amount,
        )

    def price_cart(self, cart: list[CartItem], promo_code: str | None = None) -> OrderTotals:
        """Price a cart, resolving its restaurant and promo code from the catalog.

        Args:
            cart: Cart lines
            promo_code: Promo code as entered; upper-cased before lookup

        Returns:
            OrderTotals for the cart
        """
        restaurant = None
        if cart:
            restaurant = self.catalog_service.find_restaurant(cart[0].restaurant_id)

        percentage = None
        if promo_code:
            percentage = self.catalog_service.validate_promo_code(promo_code.strip().upper())
            if percentage is None:
                logger.info(f"Promo code {promo_code!r} not applied")

        return self.compute_totals(cart, restaurant, percentage)
