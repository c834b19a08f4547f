"""Order service for checkout, status changes and agent assignment."""

import logging
import uuid
from datetime import UTC, datetime

from food_ordering_service.errors import (
    AgentNotFound,
    EmptyCart,
    InvalidTransition,
    NoAgentSelected,
    NoUser,
    OrderNotFound,
)
from food_ordering_service.models.order_models import ORDER_TRANSITIONS, Order, OrderStatus
from food_ordering_service.models.user_models import Role
from food_ordering_service.observability.decorators import traced
from food_ordering_service.observability.metrics import (
    record_order_placed,
    record_status_transition,
)
from food_ordering_service.repositories.memory_repositories import OrderRepository
from food_ordering_service.services.cart_service import CartService
from food_ordering_service.services.catalog_service import CatalogService
from food_ordering_service.services.pricing_service import PricingService
from food_ordering_service.services.session_service import Session
from food_ordering_service.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)


class OrderService:
    """Service for turning carts into orders and moving orders through their lifecycle.

    This service coordinates pricing the session's cart, snapshotting it into
    an order, clearing the cart, and later status changes and agent
    reassignment. With strict_transitions (the default) status changes follow
    ORDER_TRANSITIONS; otherwise any status may be set from any status.
    """

    def __init__(
        self,
        order_repository: OrderRepository,
        pricing_service: PricingService,
        catalog_service: CatalogService,
        cart_service: CartService,
        user_directory: UserDirectory,
        strict_transitions: bool = True,
    ) -> None:
        """Initialize the OrderService.

        Args:
            order_repository: Repository holding orders
            pricing_service: Service used to price the cart at checkout
            catalog_service: Catalog used to resolve the order's restaurant
            cart_service: Service used to clear the cart after checkout
            user_directory: Directory used to check delivery agents
            strict_transitions: Reject status changes outside ORDER_TRANSITIONS
        """
        self.order_repository = order_repository
        self.pricing_service = pricing_service
        self.catalog_service = catalog_service
        self.cart_service = cart_service
        self.user_directory = user_directory
        self.strict_transitions = strict_transitions

    @traced("place_order")
    def place_order(
        self,
        session: Session,
        assigned_admin_id: str | None,
        promo_code: str | None = None,
    ) -> Order:
        """Commit the session's cart as a new PENDING order.

        Checkout flow:
        1. Check the session has a user, a non-empty cart and a valid agent
        2. Price the cart (an invalid promo code just means no discount)
        3. Store a snapshot of the cart as the order
        4. Clear the cart

        Args:
            session: Session placing the order
            assigned_admin_id: Delivery agent (ADMIN user) to assign
            promo_code: Optional promo code as entered

        Returns:
            Order: The newly created order

        Raises:
            NoUser: If the session is not signed in
            EmptyCart: If the cart has no lines
            NoAgentSelected: If no agent id was given
            AgentNotFound: If the agent id is not an ADMIN user
        """
        user = session.user
        if user is None:
            raise NoUser()
        if not session.cart:
            raise EmptyCart()
        self._require_agent(assigned_admin_id)

        totals = self.pricing_service.price_cart(session.cart, promo_code)
        restaurant_id = session.cart[0].restaurant_id
        restaurant = self.catalog_service.find_restaurant(restaurant_id)

        order = Order(
            id=f"ORD-{uuid.uuid4().hex[:12].upper()}",
            user_id=user.id,
            restaurant_id=restaurant.id if restaurant else restaurant_id,
            restaurant_name=restaurant.name if restaurant else "Unknown",
            items=[line.model_copy(deep=True) for line in session.cart],
            total_amount=totals.total_amount,
            discount_amount=totals.discount_amount,
            final_amount=totals.final_amount,
            status=OrderStatus.PENDING,
            created_at=datetime.now(UTC),
            assigned_admin_id=assigned_admin_id,
        )

        self.order_repository.save_order(order)
        self.cart_service.clear(session)

        record_order_placed(order.restaurant_id, order.final_amount, order.discount_amount > 0)
        logger.info(
            f"Order {order.id} placed by {user.id} at {order.restaurant_id} "
            f"for {order.final_amount}, assigned to {assigned_admin_id}"
        )
        return order

    def get_order(self, order_id: str) -> Order:
        """Get an order by id.

        Raises:
            OrderNotFound: If the order does not exist
        """
        order = self.order_repository.get_order(order_id)
        if order is None:
            raise OrderNotFound(f"Order {order_id} not found")
        return order

    @traced("update_order_status")
    def update_status(self, order_id: str, status: OrderStatus) -> Order:
        """Move an order to a new status.

        Args:
            order_id: Order to update
            status: Target status

        Returns:
            Order: The updated order

        Raises:
            OrderNotFound: If the order does not exist
            InvalidTransition: If strict and the move is not allowed
        """
        order = self.get_order(order_id)
        previous = order.status

        if self.strict_transitions and status not in ORDER_TRANSITIONS[previous]:
            raise InvalidTransition(previous.value, status.value)

        updated = order.model_copy(update={"status": status})
        self.order_repository.save_order(updated)

        record_status_transition(previous.value, status.value)
        logger.info(f"Order {order_id} moved from {previous.value} to {status.value}")
        return updated

    def assign_order(self, order_id: str, admin_id: str | None) -> Order:
        """Reassign an order to another delivery agent.

        Reassignment is allowed at every status, including terminal ones.

        Raises:
            OrderNotFound: If the order does not exist
            NoAgentSelected: If no agent id was given
            AgentNotFound: If the agent id is not an ADMIN user
        """
        order = self.get_order(order_id)
        self._require_agent(admin_id)

        updated = order.model_copy(update={"assigned_admin_id": admin_id})
        self.order_repository.save_order(updated)

        logger.info(f"Order {order_id} reassigned from {order.assigned_admin_id} to {admin_id}")
        return updated

    def _require_agent(self, admin_id: str | None) -> None:
        if not admin_id:
            raise NoAgentSelected()
        agent = self.user_directory.get_user(admin_id)
        if agent is None or agent.role != Role.ADMIN:
            raise AgentNotFound(f"No delivery agent with id {admin_id}")
