"""Role-scoped order views and dashboard statistics."""

from decimal import Decimal

from food_ordering_service.models.order_models import AgentStats, Order, OrderStatus, OwnerStats
from food_ordering_service.repositories.memory_repositories import OrderRepository
from food_ordering_service.services.user_directory import UserDirectory


class ViewService:
    """Read-only projections of the order collection.

    Customers see the orders they placed, agents see the orders assigned to
    them, and the owner sees everything. Revenue sums each order's final
    amount. Whether CANCELLED orders count toward revenue is controlled by
    include_cancelled_in_revenue; order counts always include them.
    """

    def __init__(
        self,
        order_repository: OrderRepository,
        user_directory: UserDirectory,
        include_cancelled_in_revenue: bool = True,
    ) -> None:
        """Initialize the ViewService.

        Args:
            order_repository: Repository holding orders
            user_directory: Directory used for the user count
            include_cancelled_in_revenue: Count CANCELLED orders toward revenue
        """
        self.order_repository = order_repository
        self.user_directory = user_directory
        self.include_cancelled_in_revenue = include_cancelled_in_revenue

    def orders_for_customer(self, user_id: str) -> list[Order]:
        return [o for o in self.order_repository.list_orders() if o.user_id == user_id]

    def orders_for_agent(self, admin_id: str) -> list[Order]:
        return [o for o in self.order_repository.list_orders() if o.assigned_admin_id == admin_id]

    def all_orders(self) -> list[Order]:
        return self.order_repository.list_orders()

    def owner_stats(self) -> OwnerStats:
        """Compute store-wide revenue, order count and user count."""
        orders = self.all_orders()
        return OwnerStats(
            total_revenue=self._revenue(orders),
            total_orders=len(orders),
            total_users=len(self.user_directory.list_users()),
        )

    def agent_stats(self, admin_id: str) -> AgentStats:
        """Compute revenue and order count for one agent's assigned orders."""
        orders = self.orders_for_agent(admin_id)
        return AgentStats(revenue=self._revenue(orders), count=len(orders))

    def _revenue(self, orders: list[Order]) -> Decimal:
        return sum(
            (
                o.final_amount
                for o in orders
                if self.include_cancelled_in_revenue or o.status != OrderStatus.CANCELLED
            ),
            Decimal("0"),
        )
