"""Cart, order and reporting models.

An order is a priced snapshot of a cart. Only its status and assigned agent
change after creation.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Size(str, Enum):
    """Enumeration of portion sizes."""

    S = "S"
    M = "M"
    L = "L"

    @property
    def multiplier(self) -> Decimal:
        """Price multiplier applied to the base item price."""
        return SIZE_MULTIPLIERS[self]


SIZE_MULTIPLIERS: dict[Size, Decimal] = {
    Size.S: Decimal("1"),
    Size.M: Decimal("1.2"),
    Size.L: Decimal("1.5"),
}


class OrderStatus(str, Enum):
    """Enumeration of order lifecycle states."""

    PENDING = "PENDING"
    PREPARING = "PREPARING"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# Legal moves; DELIVERED and CANCELLED are terminal.
ORDER_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


class CartItem(BaseModel):
    """One line of a cart. The price is already size-adjusted."""

    model_config = ConfigDict(json_encoders={Decimal: str})

    item_id: str = Field(..., description="Menu item this line was built from")
    name: str = Field(..., description="Menu item name at the time of adding")
    price: Decimal = Field(..., description="Size-adjusted unit price", ge=0)
    quantity: int = Field(default=1, description="Units on this line", ge=1)
    size: Size = Field(default=Size.S, description="Chosen portion size")
    note: str = Field(default="", description="Free-text kitchen note")
    restaurant_id: str = Field(..., description="Restaurant the item belongs to")


class OrderTotals(BaseModel):
    """Priced breakdown of a cart."""

    model_config = ConfigDict(json_encoders={Decimal: str})

    subtotal: Decimal
    delivery_fee: Decimal
    discount_amount: Decimal = Field(..., ge=0)
    final_amount: Decimal

    @property
    def total_amount(self) -> Decimal:
        """Pre-discount total (subtotal plus delivery fee)."""
        return self.subtotal + self.delivery_fee


class Order(BaseModel):
    """Order snapshot committed from a cart."""

    model_config = ConfigDict(json_encoders={Decimal: str})

    id: str = Field(..., description="Unique order identifier")
    user_id: str = Field(..., description="Customer who placed the order")
    restaurant_id: str = Field(..., description="Restaurant the order is for")
    restaurant_name: str = Field(..., description="Restaurant name at order time")
    items: list[CartItem] = Field(..., description="Copy of the cart lines")
    total_amount: Decimal = Field(..., description="Subtotal plus delivery fee")
    discount_amount: Decimal = Field(default=Decimal("0"), ge=0)
    final_amount: Decimal = Field(..., description="Amount charged after discount")
    status: OrderStatus = Field(default=OrderStatus.PENDING)
    created_at: datetime = Field(..., description="Order creation timestamp")
    assigned_admin_id: str = Field(..., description="Delivery agent handling the order")

    @model_validator(mode="after")
    def validate_final_amount(self) -> "Order":
        """Validate that final_amount equals total_amount minus discount_amount."""
        if self.final_amount != self.total_amount - self.discount_amount:
            raise ValueError("final_amount must equal total_amount - discount_amount")
        return self


class OwnerStats(BaseModel):
    """Store-wide figures shown on the owner dashboard."""

    model_config = ConfigDict(json_encoders={Decimal: str})

    total_revenue: Decimal
    total_orders: int
    total_users: int


class AgentStats(BaseModel):
    """Figures for the orders assigned to one agent."""

    model_config = ConfigDict(json_encoders={Decimal: str})

    revenue: Decimal
    count: int
