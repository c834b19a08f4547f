"""Catalog data models.

These models represent the restaurants, menu items and discount codes that the
owner manages and customers browse.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Restaurant(BaseModel):
    """Restaurant model."""

    model_config = ConfigDict(json_encoders={Decimal: str})

    id: str = Field(..., description="Unique identifier for the restaurant")
    name: str = Field(..., description="Restaurant name")
    description: str = Field(default="", description="Restaurant description")
    image: str = Field(default="", description="URL to restaurant image")
    delivery_fee: Decimal = Field(..., description="Flat delivery fee", ge=0)
    rating: float = Field(default=0.0, description="Average customer rating", ge=0)


class RestaurantUpdate(BaseModel):
    """Partial restaurant update. Only fields that are set get applied."""

    name: str | None = None
    description: str | None = None
    image: str | None = None
    delivery_fee: Decimal | None = Field(None, ge=0)
    rating: float | None = Field(None, ge=0)


class MenuItem(BaseModel):
    """Menu item model."""

    model_config = ConfigDict(json_encoders={Decimal: str})

    id: str = Field(..., description="Unique identifier for the menu item")
    restaurant_id: str = Field(..., description="Restaurant this item belongs to")
    name: str = Field(..., description="Item name")
    description: str = Field(default="", description="Item description")
    price: Decimal = Field(..., description="Base price for size S", gt=0)
    category: str = Field(default="", description="Menu category label")
    available: bool = Field(default=True, description="Whether item is currently offered")


class DiscountCode(BaseModel):
    """Percentage-off promo code.

    Codes are stored upper-cased; lookups compare them exactly.
    """

    id: str = Field(..., description="Unique identifier for the discount code")
    code: str = Field(..., description="Promo code customers type at checkout", min_length=1)
    percentage: int = Field(..., description="Discount percentage", ge=0, le=100)
    active: bool = Field(default=True, description="Whether the code can be redeemed")

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        """Store codes upper-cased."""
        return v.strip().upper()
