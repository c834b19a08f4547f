"""Custom metrics for the food ordering service."""

from decimal import Decimal

from opentelemetry import metrics

# Get meter for ordering service
meter = metrics.get_meter("food-ordering-svc")

orders_placed_counter = meter.create_counter(
    name="orders_placed_total",
    description="Total number of orders placed by restaurant",
    unit="1",
)

# Charged amount per order, after discount
order_value_histogram = meter.create_histogram(
    name="order_final_amount",
    description="Final amount charged per order",
    unit="USD",
)

status_transition_counter = meter.create_counter(
    name="order_status_transitions_total",
    description="Order status changes by source and target status",
    unit="1",
)

promo_rejected_counter = meter.create_counter(
    name="promo_code_rejections_total",
    description="Promo codes that did not match an active discount",
    unit="1",
)

login_counter = meter.create_counter(
    name="login_attempts_total",
    description="Login attempts by outcome",
    unit="1",
)


def record_order_placed(restaurant_id: str, final_amount: Decimal, discounted: bool) -> None:
    """Record a newly placed order.

    Args:
        restaurant_id: Restaurant the order was placed with
        final_amount: Amount charged after discount
        discounted: Whether a promo code reduced the price
    """
    attributes = {"restaurant_id": restaurant_id, "discounted": discounted}
    orders_placed_counter.add(1, attributes)
    order_value_histogram.record(float(final_amount), attributes)


def record_status_transition(from_status: str, to_status: str) -> None:
    """Record an order status change.

    Args:
        from_status: Status before the change
        to_status: Status after the change
    """
    status_transition_counter.add(1, {"from_status": from_status, "to_status": to_status})


def record_promo_rejected() -> None:
    """Record a promo code that failed validation."""
    promo_rejected_counter.add(1)


def record_login_attempt(success: bool, reason: str | None = None) -> None:
    """Record a login attempt.

    Args:
        success: Whether the credentials were accepted
        reason: Failure reason (e.g., "user_not_found", "wrong_password")
    """
    attributes: dict[str, str | bool] = {"success": success}
    if reason:
        attributes["reason"] = reason
    login_counter.add(1, attributes)
