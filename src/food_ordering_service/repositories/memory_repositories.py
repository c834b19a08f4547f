"""In-memory repository classes for catalog, user and order models.

State lives for the lifetime of the process. Following the repository
pattern used across the service, expected misses return None/False rather
than raising; the services decide what a miss means.
"""

from food_ordering_service.models.catalog_models import DiscountCode, MenuItem, Restaurant
from food_ordering_service.models.order_models import Order
from food_ordering_service.models.user_models import User


class UserRepository:
    """Repository for user records keyed by user id."""

    def __init__(self) -> None:
        self._users: dict[str, User] = {}

    def save_user(self, user: User) -> bool:
        """Insert or replace a user.

        Args:
            user: User to save

        Returns:
            bool: True once stored
        """
        self._users[user.id] = user
        return True

    def get_user(self, user_id: str) -> User | None:
        """Retrieve a user by id.

        Args:
            user_id: User identifier

        Returns:
            User if found, None otherwise
        """
        return self._users.get(user_id)

    def find_by_email(self, email: str) -> User | None:
        """Find the first user whose email matches exactly.

        Args:
            email: Email to look up (case-sensitive)

        Returns:
            User if found, None otherwise
        """
        return next((u for u in self._users.values() if u.email == email), None)

    def list_users(self) -> list[User]:
        """List all users in insertion order."""
        return list(self._users.values())

    def delete_user(self, user_id: str) -> bool:
        """Delete a user.

        Args:
            user_id: User identifier

        Returns:
            bool: True if a user was removed, False if none matched
        """
        return self._users.pop(user_id, None) is not None


class RestaurantRepository:
    """Repository for restaurant records keyed by restaurant id."""

    def __init__(self) -> None:
        self._restaurants: dict[str, Restaurant] = {}

    def save_restaurant(self, restaurant: Restaurant) -> bool:
        self._restaurants[restaurant.id] = restaurant
        return True

    def get_restaurant(self, restaurant_id: str) -> Restaurant | None:
        return self._restaurants.get(restaurant_id)

    def list_restaurants(self) -> list[Restaurant]:
        return list(self._restaurants.values())

    def delete_restaurant(self, restaurant_id: str) -> bool:
        return self._restaurants.pop(restaurant_id, None) is not None


class MenuItemRepository:
    """Repository for menu item records keyed by item id."""

    def __init__(self) -> None:
        self._items: dict[str, MenuItem] = {}

    def save_item(self, item: MenuItem) -> bool:
        self._items[item.id] = item
        return True

    def get_item(self, item_id: str) -> MenuItem | None:
        return self._items.get(item_id)

    def list_items(self) -> list[MenuItem]:
        return list(self._items.values())

    def list_items_for_restaurant(self, restaurant_id: str) -> list[MenuItem]:
        """List all items that reference a restaurant.

        Args:
            restaurant_id: Restaurant identifier

        Returns:
            list: Matching MenuItem objects (empty list if none found)
        """
        return [i for i in self._items.values() if i.restaurant_id == restaurant_id]

    def delete_item(self, item_id: str) -> bool:
        return self._items.pop(item_id, None) is not None

    def delete_items_for_restaurant(self, restaurant_id: str) -> int:
        """Delete every item that references a restaurant.

        Args:
            restaurant_id: Restaurant identifier

        Returns:
            int: Number of items removed
        """
        doomed = [i.id for i in self.list_items_for_restaurant(restaurant_id)]
        for item_id in doomed:
            del self._items[item_id]
        return len(doomed)


class DiscountCodeRepository:
    """Repository for discount codes keyed by discount id."""

    def __init__(self) -> None:
        self._codes: dict[str, DiscountCode] = {}

    def save_code(self, code: DiscountCode) -> bool:
        self._codes[code.id] = code
        return True

    def find_by_code(self, code: str) -> DiscountCode | None:
        """Find the first discount whose code matches exactly.

        Args:
            code: Code text, compared without normalization

        Returns:
            DiscountCode if found, None otherwise
        """
        return next((d for d in self._codes.values() if d.code == code), None)

    def list_codes(self) -> list[DiscountCode]:
        return list(self._codes.values())

    def delete_code(self, discount_id: str) -> bool:
        return self._codes.pop(discount_id, None) is not None


class OrderRepository:
    """Repository for orders keyed by order id."""

    def __init__(self) -> None:
        self._orders: dict[str, Order] = {}

    def save_order(self, order: Order) -> bool:
        """Insert or replace an order.

        Args:
            order: Order to save

        Returns:
            bool: True once stored
        """
        self._orders[order.id] = order
        return True

    def get_order(self, order_id: str) -> Order | None:
        return self._orders.get(order_id)

    def list_orders(self) -> list[Order]:
        """List all orders, most recent first."""
        return list(reversed(self._orders.values()))
