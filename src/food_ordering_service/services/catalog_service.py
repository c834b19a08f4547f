"""Catalog service for restaurants, menu items and promo codes."""

import logging

from food_ordering_service.errors import (
    DuplicateDiscountCode,
    InvalidPromoCode,
    RestaurantNotFound,
)
from food_ordering_service.models.catalog_models import (
    DiscountCode,
    MenuItem,
    Restaurant,
    RestaurantUpdate,
)
from food_ordering_service.observability.metrics import record_promo_rejected
from food_ordering_service.repositories.memory_repositories import (
    DiscountCodeRepository,
    MenuItemRepository,
    RestaurantRepository,
)

logger = logging.getLogger(__name__)


class CatalogService:
    """Service owning the restaurant, menu and discount collections.

    Deleting a restaurant cascades to its menu items. Menu items must
    reference an existing restaurant when they are added.
    """

    def __init__(
        self,
        restaurant_repository: RestaurantRepository,
        menu_item_repository: MenuItemRepository,
        discount_repository: DiscountCodeRepository,
    ) -> None:
        """Initialize the CatalogService.

        Args:
            restaurant_repository: Repository for restaurants
            menu_item_repository: Repository for menu items
            discount_repository: Repository for discount codes
        """
        self.restaurant_repository = restaurant_repository
        self.menu_item_repository = menu_item_repository
        self.discount_repository = discount_repository

    # Restaurants

    def add_restaurant(self, restaurant: Restaurant) -> Restaurant:
        self.restaurant_repository.save_restaurant(restaurant)
        logger.info(f"Added restaurant {restaurant.id}")
        return restaurant

    def update_restaurant(self, restaurant_id: str, update: RestaurantUpdate) -> Restaurant:
        """Apply a partial update to a restaurant.

        Args:
            restaurant_id: Restaurant to update
            update: Fields to change; unset fields are left alone

        Returns:
            Restaurant: The updated restaurant

        Raises:
            RestaurantNotFound: If the restaurant does not exist
        """
        restaurant = self.get_restaurant(restaurant_id)
        changes = update.model_dump(exclude_unset=True, exclude_none=True)
        updated = Restaurant.model_validate({**restaurant.model_dump(), **changes})
        self.restaurant_repository.save_restaurant(updated)
        logger.info(f"Updated restaurant {restaurant_id}: {sorted(changes)}")
        return updated

    def delete_restaurant(self, restaurant_id: str) -> bool:
        """Delete a restaurant and every menu item that references it.

        Args:
            restaurant_id: Restaurant to delete

        Returns:
            bool: True if the restaurant existed, False otherwise
        """
        removed = self.restaurant_repository.delete_restaurant(restaurant_id)
        item_count = self.menu_item_repository.delete_items_for_restaurant(restaurant_id)
        if removed:
            logger.info(f"Deleted restaurant {restaurant_id} and {item_count} menu item(s)")
        return removed

    def get_restaurant(self, restaurant_id: str) -> Restaurant:
        """Get a restaurant by id.

        Raises:
            RestaurantNotFound: If the restaurant does not exist
        """
        restaurant = self.restaurant_repository.get_restaurant(restaurant_id)
        if restaurant is None:
            raise RestaurantNotFound(f"Restaurant {restaurant_id} not found")
        return restaurant

    def find_restaurant(self, restaurant_id: str) -> Restaurant | None:
        return self.restaurant_repository.get_restaurant(restaurant_id)

    def list_restaurants(self) -> list[Restaurant]:
        return self.restaurant_repository.list_restaurants()

    # Menu items

    def add_menu_item(self, item: MenuItem) -> MenuItem:
        """Add a menu item to an existing restaurant.

        Args:
            item: Menu item to add

        Returns:
            MenuItem: The stored item

        Raises:
            RestaurantNotFound: If item.restaurant_id matches no restaurant
        """
        if self.restaurant_repository.get_restaurant(item.restaurant_id) is None:
            raise RestaurantNotFound(
                f"Cannot add item {item.id}: restaurant {item.restaurant_id} not found"
            )
        self.menu_item_repository.save_item(item)
        logger.info(f"Added menu item {item.id} to restaurant {item.restaurant_id}")
        return item

    def delete_menu_item(self, item_id: str) -> bool:
        removed = self.menu_item_repository.delete_item(item_id)
        if removed:
            logger.info(f"Deleted menu item {item_id}")
        return removed

    def get_menu_item(self, item_id: str) -> MenuItem | None:
        return self.menu_item_repository.get_item(item_id)

    def list_menu(self, restaurant_id: str, available_only: bool = True) -> list[MenuItem]:
        """List a restaurant's menu.

        Args:
            restaurant_id: Restaurant whose menu to list
            available_only: Hide items customers cannot order (default: True)

        Returns:
            List of MenuItem, empty list if none found
        """
        items = self.menu_item_repository.list_items_for_restaurant(restaurant_id)
        if available_only:
            items = [i for i in items if i.available]
        return items

    # Discount codes

    def add_discount_code(self, discount: DiscountCode) -> DiscountCode:
        """Add a discount code.

        Raises:
            DuplicateDiscountCode: If another discount already uses the code
        """
        if self.discount_repository.find_by_code(discount.code) is not None:
            raise DuplicateDiscountCode(f"Discount code {discount.code} already exists")
        self.discount_repository.save_code(discount)
        logger.info(f"Added discount code {discount.code} ({discount.percentage}%)")
        return discount

    def delete_discount_code(self, discount_id: str) -> bool:
        return self.discount_repository.delete_code(discount_id)

    def list_discount_codes(self) -> list[DiscountCode]:
        return self.discount_repository.list_codes()

    def validate_promo_code(self, code: str) -> int | None:
        """Look up the percentage for an active promo code.

        The code is compared exactly; callers upper-case user input first.

        Args:
            code: Promo code text

        Returns:
            The discount percentage, or None if no active discount matches
        """
        discount = self.discount_repository.find_by_code(code)
        if discount is None or not discount.active:
            return None
        return discount.percentage

    def apply_promo_code(self, code: str) -> int:
        """Check a promo code typed by a customer before checkout.

        Args:
            code: Promo code as typed (any case)

        Returns:
            int: The discount percentage

        Raises:
            InvalidPromoCode: If the code is blank, unknown or inactive
        """
        percentage = self.validate_promo_code(code.strip().upper()) if code else None
        if not percentage:
            record_promo_rejected()
            raise InvalidPromoCode()
        return percentage
