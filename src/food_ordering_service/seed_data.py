"""Initial catalog, users and promo codes loaded at startup."""

import logging
from decimal import Decimal

from food_ordering_service.models.catalog_models import DiscountCode, MenuItem, Restaurant
from food_ordering_service.models.user_models import Role
from food_ordering_service.services.catalog_service import CatalogService
from food_ordering_service.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)

# Raw passwords; the user directory hashes them on insert.
INITIAL_USERS: list[dict] = [
    {
        "user_id": "u1",
        "name": "System Owner",
        "email": "owner@system.com",
        "phone": "123-456-7890",
        "password": "123",
        "role": Role.OWNER,
    },
    {
        "user_id": "u2",
        "name": "Admin Burger",
        "email": "admin@burger.com",
        "phone": "987-654-3210",
        "password": "123",
        "role": Role.ADMIN,
        "assigned_restaurant_id": "r1",
    },
    {
        "user_id": "u3",
        "name": "John Doe",
        "email": "user@gmail.com",
        "phone": "555-555-5555",
        "password": "123",
        "role": Role.USER,
    },
]

INITIAL_RESTAURANTS: list[Restaurant] = [
    Restaurant(
        id="r1",
        name="Burger Kingpin",
        description="The best flame-grilled burgers in town.",
        image="https://picsum.photos/800/600?random=1",
        delivery_fee=Decimal("2.99"),
        rating=4.5,
    ),
    Restaurant(
        id="r2",
        name="Sushi Master",
        description="Fresh japanese cuisine and rolls.",
        image="https://picsum.photos/800/600?random=2",
        delivery_fee=Decimal("4.99"),
        rating=4.8,
    ),
    Restaurant(
        id="r3",
        name="Pizza Palace",
        description="Authentic Italian stone-baked pizza.",
        image="https://picsum.photos/800/600?random=3",
        delivery_fee=Decimal("1.99"),
        rating=4.2,
    ),
]

INITIAL_MENU: list[MenuItem] = [
    MenuItem(
        id="m1",
        restaurant_id="r1",
        name="Classic Cheese",
        description="Beef patty, cheddar, lettuce.",
        price=Decimal("8.99"),
        category="Burgers",
    ),
    MenuItem(
        id="m2",
        restaurant_id="r1",
        name="Bacon Deluxe",
        description="Double beef, bacon, bbq sauce.",
        price=Decimal("12.99"),
        category="Burgers",
    ),
    MenuItem(
        id="m3",
        restaurant_id="r2",
        name="Salmon Roll",
        description="Fresh salmon, avocado, rice.",
        price=Decimal("6.50"),
        category="Sushi",
    ),
    MenuItem(
        id="m4",
        restaurant_id="r3",
        name="Pepperoni",
        description="Mozzarella and spicy pepperoni.",
        price=Decimal("14.00"),
        category="Pizza",
    ),
]

INITIAL_PROMOS: list[DiscountCode] = [
    DiscountCode(id="p1", code="WELCOME10", percentage=10, active=True),
    DiscountCode(id="p2", code="SAVE20", percentage=20, active=True),
]


def bootstrap_stores(user_directory: UserDirectory, catalog_service: CatalogService) -> None:
    """Load the initial users, restaurants, menu items and promo codes.

    Args:
        user_directory: Directory to populate
        catalog_service: Catalog to populate
    """
    for user_data in INITIAL_USERS:
        user_directory.add_user(**user_data)

    for restaurant in INITIAL_RESTAURANTS:
        catalog_service.add_restaurant(restaurant.model_copy())

    for item in INITIAL_MENU:
        catalog_service.add_menu_item(item.model_copy())

    for promo in INITIAL_PROMOS:
        catalog_service.add_discount_code(promo.model_copy())

    logger.info(
        f"Seeded {len(INITIAL_USERS)} users, {len(INITIAL_RESTAURANTS)} restaurants, "
        f"{len(INITIAL_MENU)} menu items and {len(INITIAL_PROMOS)} promo codes"
    )
