"""Cart service: building a single-restaurant cart line by line."""

import logging
from dataclasses import dataclass

from food_ordering_service.errors import CartIndexError, MenuItemNotFound, NoPendingSwitch
from food_ordering_service.models.catalog_models import MenuItem
from food_ordering_service.models.order_models import CartItem, Size
from food_ordering_service.services.catalog_service import CatalogService
from food_ordering_service.services.session_service import PendingRestaurantSwitch, Session

logger = logging.getLogger(__name__)


@dataclass
class AddItemResult:
    """Outcome of an add-to-cart request.

    Attributes:
        added: The new cart line, None if the add is waiting on confirmation
        pending_switch: Set when the item belongs to another restaurant
    """

    added: CartItem | None
    pending_switch: PendingRestaurantSwitch | None = None

    @property
    def needs_confirmation(self) -> bool:
        return self.pending_switch is not None


class CartService:
    """Service for editing the cart held on a session.

    Every add creates its own line with quantity 1; repeated adds of the same
    item are not merged. A cart only ever holds items from one restaurant.
    Adding an item from another restaurant is a two-step operation: the add
    is parked on the session and the cart stays unchanged until the customer
    confirms (cart is replaced) or cancels.
    """

    def __init__(self, catalog_service: CatalogService) -> None:
        """Initialize the CartService.

        Args:
            catalog_service: Catalog used to re-check parked items on confirmation
        """
        self.catalog_service = catalog_service

    @staticmethod
    def build_line(item: MenuItem, size: Size, note: str = "") -> CartItem:
        """Price a menu item at a size.

        Args:
            item: Menu item being added
            size: Portion size
            note: Kitchen note

        Returns:
            CartItem: Line priced at item.price times the size multiplier
        """
        return CartItem(
            item_id=item.id,
            name=item.name,
            price=item.price * size.multiplier,
            quantity=1,
            size=size,
            note=note,
            restaurant_id=item.restaurant_id,
        )

    def add_item(
        self, session: Session, item: MenuItem, size: Size = Size.S, note: str = ""
    ) -> AddItemResult:
        """Add one unit of a menu item to the cart.

        Args:
            session: Session whose cart to edit
            item: Menu item to add
            size: Portion size
            note: Kitchen note

        Returns:
            AddItemResult with the added line, or with a pending switch when
            the cart holds items from a different restaurant
        """
        current = session.cart_restaurant_id
        if current is not None and current != item.restaurant_id:
            session.pending_switch = PendingRestaurantSwitch(
                item=item, size=size, note=note, current_restaurant_id=current
            )
            logger.info(
                f"Cart switch from {current} to {item.restaurant_id} awaiting confirmation"
            )
            return AddItemResult(added=None, pending_switch=session.pending_switch)

        line = self.build_line(item, size, note)
        session.cart.append(line)
        session.pending_switch = None
        return AddItemResult(added=line)

    def confirm_restaurant_switch(self, session: Session) -> CartItem:
        """Replace the cart with the parked item.

        The item is looked up again so a line is never built from a menu item
        deleted or made unavailable while the switch was waiting.

        Raises:
            NoPendingSwitch: If nothing is waiting for confirmation
            MenuItemNotFound: If the parked item is gone or unavailable; the
                pending switch is dropped and the cart is left as it was
        """
        pending = session.pending_switch
        if pending is None:
            raise NoPendingSwitch()

        item = self.catalog_service.get_menu_item(pending.item.id)
        if item is None or not item.available:
            session.pending_switch = None
            raise MenuItemNotFound(f"Menu item {pending.item.id} is not available")

        logger.info(
            f"Clearing {len(session.cart)} cart line(s) from {pending.current_restaurant_id}"
        )
        session.cart.clear()
        line = self.build_line(item, pending.size, pending.note)
        session.cart.append(line)
        session.pending_switch = None
        return line

    def cancel_restaurant_switch(self, session: Session) -> bool:
        """Drop the parked item and keep the cart as it is.

        Returns:
            bool: True if a pending switch was discarded
        """
        had_pending = session.pending_switch is not None
        session.pending_switch = None
        return had_pending

    def remove_item(self, session: Session, index: int) -> CartItem:
        """Remove a cart line by position.

        Args:
            session: Session whose cart to edit
            index: Zero-based line index

        Returns:
            CartItem: The removed line

        Raises:
            CartIndexError: If index is outside the cart
        """
        if not 0 <= index < len(session.cart):
            raise CartIndexError(index, len(session.cart))
        return session.cart.pop(index)

    def clear(self, session: Session) -> None:
        session.cart.clear()
        session.pending_switch = None
