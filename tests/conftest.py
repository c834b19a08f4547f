"""Shared pytest fixtures and configuration for all tests."""

import os
from decimal import Decimal

import pytest

# Keeps src/main.py from building the real app at import time
os.environ.setdefault("ENVIRONMENT", "test")

from food_ordering_service.auth.password_hasher import PlaintextPasswordHasher  # noqa: E402
from food_ordering_service.models.catalog_models import (  # noqa: E402
    DiscountCode,
    MenuItem,
    Restaurant,
)
from food_ordering_service.models.user_models import Role, User  # noqa: E402
from food_ordering_service.repositories.memory_repositories import (  # noqa: E402
    DiscountCodeRepository,
    MenuItemRepository,
    OrderRepository,
    RestaurantRepository,
    UserRepository,
)
from food_ordering_service.services.cart_service import CartService  # noqa: E402
from food_ordering_service.services.catalog_service import CatalogService  # noqa: E402
from food_ordering_service.services.order_service import OrderService  # noqa: E402
from food_ordering_service.services.pricing_service import PricingService  # noqa: E402
from food_ordering_service.services.session_service import (  # noqa: E402
    Session,
    SessionManager,
)
from food_ordering_service.services.user_directory import UserDirectory  # noqa: E402
from food_ordering_service.services.view_service import ViewService  # noqa: E402


@pytest.fixture
def burger_restaurant() -> Restaurant:
    """Fixture providing a restaurant with a 2.99 delivery fee."""
    return Restaurant(
        id="r1",
        name="Burger Kingpin",
        description="The best flame-grilled burgers in town.",
        delivery_fee=Decimal("2.99"),
        rating=4.5,
    )


@pytest.fixture
def sushi_restaurant() -> Restaurant:
    """Fixture providing a second restaurant."""
    return Restaurant(id="r2", name="Sushi Master", delivery_fee=Decimal("4.99"), rating=4.8)


@pytest.fixture
def cheeseburger() -> MenuItem:
    """Fixture providing an 8.99 menu item at restaurant r1."""
    return MenuItem(
        id="m1",
        restaurant_id="r1",
        name="Classic Cheese",
        description="Beef patty, cheddar, lettuce.",
        price=Decimal("8.99"),
        category="Burgers",
    )


@pytest.fixture
def salmon_roll() -> MenuItem:
    """Fixture providing a menu item at restaurant r2."""
    return MenuItem(
        id="m3",
        restaurant_id="r2",
        name="Salmon Roll",
        price=Decimal("6.50"),
        category="Sushi",
    )


@pytest.fixture
def user_directory() -> UserDirectory:
    """Fixture providing a directory with an owner, an agent and a customer."""
    directory = UserDirectory(
        user_repository=UserRepository(), password_hasher=PlaintextPasswordHasher()
    )
    directory.add_user(
        user_id="u1", name="System Owner", email="owner@system.com", password="123", role=Role.OWNER
    )
    directory.add_user(
        user_id="u2",
        name="Admin Burger",
        email="admin@burger.com",
        password="123",
        role=Role.ADMIN,
        assigned_restaurant_id="r1",
    )
    directory.add_user(
        user_id="u3", name="John Doe", email="user@gmail.com", password="123", role=Role.USER
    )
    return directory


@pytest.fixture
def catalog_service(
    burger_restaurant: Restaurant,
    sushi_restaurant: Restaurant,
    cheeseburger: MenuItem,
    salmon_roll: MenuItem,
) -> CatalogService:
    """Fixture providing a catalog with two restaurants, their items and two promos."""
    catalog = CatalogService(
        restaurant_repository=RestaurantRepository(),
        menu_item_repository=MenuItemRepository(),
        discount_repository=DiscountCodeRepository(),
    )
    catalog.add_restaurant(burger_restaurant)
    catalog.add_restaurant(sushi_restaurant)
    catalog.add_menu_item(cheeseburger)
    catalog.add_menu_item(salmon_roll)
    catalog.add_discount_code(DiscountCode(id="p1", code="WELCOME10", percentage=10))
    catalog.add_discount_code(DiscountCode(id="p2", code="SAVE20", percentage=20))
    return catalog


@pytest.fixture
def cart_service(catalog_service: CatalogService) -> CartService:
    return CartService(catalog_service=catalog_service)


@pytest.fixture
def pricing_service(catalog_service: CatalogService) -> PricingService:
    return PricingService(catalog_service=catalog_service)


@pytest.fixture
def order_repository() -> OrderRepository:
    return OrderRepository()


@pytest.fixture
def order_service(
    order_repository: OrderRepository,
    pricing_service: PricingService,
    catalog_service: CatalogService,
    cart_service: CartService,
    user_directory: UserDirectory,
) -> OrderService:
    """Fixture providing an OrderService with strict transitions."""
    return OrderService(
        order_repository=order_repository,
        pricing_service=pricing_service,
        catalog_service=catalog_service,
        cart_service=cart_service,
        user_directory=user_directory,
    )


@pytest.fixture
def view_service(order_repository: OrderRepository, user_directory: UserDirectory) -> ViewService:
    return ViewService(order_repository=order_repository, user_directory=user_directory)


@pytest.fixture
def session_manager(user_directory: UserDirectory) -> SessionManager:
    return SessionManager(user_directory=user_directory)


@pytest.fixture
def customer(user_directory: UserDirectory) -> User:
    user = user_directory.get_user("u3")
    assert user is not None
    return user


@pytest.fixture
def customer_session(customer: User) -> Session:
    """Fixture providing a signed-in customer session with an empty cart."""
    return Session(token="tok_customer", user=customer)
