"""Domain errors raised by the ordering services.

Every error is local and recoverable. The API handler maps each one to an
HTTP status code.
"""


class FoodOrderingError(Exception):
    """Base class for all ordering domain errors."""

    default_message = "Ordering operation failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthError(FoodOrderingError):
    """Authentication failed."""


class UserNotFound(AuthError):
    default_message = "Invalid user name (email not found)"


class WrongPassword(AuthError):
    default_message = "Wrong password"


class NoUser(FoodOrderingError):
    default_message = "No authenticated user for this session"


class EmptyCart(FoodOrderingError):
    default_message = "Cart is empty"


class NoAgentSelected(FoodOrderingError):
    default_message = "Please select a delivery agent!"


class AgentNotFound(FoodOrderingError):
    default_message = "Delivery agent not found"


class InvalidPromoCode(FoodOrderingError):
    default_message = "Invalid Code"


class InvalidTransition(FoodOrderingError):
    """Order status change not allowed from the current status."""

    def __init__(self, current: str, requested: str) -> None:
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move order from {current} to {requested}")


class OrderNotFound(FoodOrderingError):
    default_message = "Order not found"


class RestaurantNotFound(FoodOrderingError):
    default_message = "Restaurant not found"


class MenuItemNotFound(FoodOrderingError):
    default_message = "Menu item not found"


class NoPendingSwitch(FoodOrderingError):
    default_message = "No restaurant switch is waiting for confirmation"


class CartIndexError(FoodOrderingError, IndexError):
    """Cart line index out of range."""

    def __init__(self, index: int, size: int) -> None:
        self.index = index
        super().__init__(f"Cart has {size} line(s); index {index} is out of range")


class DuplicateDiscountCode(FoodOrderingError):
    default_message = "A discount with this code already exists"
