"""Main application entry point for the food ordering service.

This module provides the FastAPI application factory and configuration
for running the service locally or in production.
"""

import logging
import os

from fastapi import FastAPI

from food_ordering_service.auth.password_hasher import create_password_hasher
from food_ordering_service.handlers.api_handler import create_app
from food_ordering_service.observability import configure_logging, setup_observability
from food_ordering_service.repositories.memory_repositories import (
    DiscountCodeRepository,
    MenuItemRepository,
    OrderRepository,
    RestaurantRepository,
    UserRepository,
)
from food_ordering_service.seed_data import bootstrap_stores
from food_ordering_service.services.cart_service import CartService
from food_ordering_service.services.catalog_service import CatalogService
from food_ordering_service.services.order_service import OrderService
from food_ordering_service.services.pricing_service import PricingService
from food_ordering_service.services.session_service import SessionManager
from food_ordering_service.services.user_directory import UserDirectory
from food_ordering_service.services.view_service import ViewService

logger = logging.getLogger(__name__)


def env_flag(name: str, default: bool) -> bool:
    """Read a boolean environment variable ("true"/"false", case-insensitive).

    Args:
        name: Environment variable name
        default: Value used when the variable is unset or empty

    Returns:
        bool: Parsed flag
    """
    value = os.getenv(name, "")
    if not value:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Configures logging
    2. Creates in-memory repositories
    3. Creates services
    4. Loads seed data
    5. Creates FastAPI app with storefront and dashboard endpoints
    6. Sets up observability

    Returns:
        Configured FastAPI application instance
    """
    log_level = os.getenv("LOG_LEVEL", "INFO")
    configure_logging(log_level)

    logger.info("Initializing food ordering service...")

    user_repository = UserRepository()
    restaurant_repository = RestaurantRepository()
    menu_item_repository = MenuItemRepository()
    discount_repository = DiscountCodeRepository()
    order_repository = OrderRepository()

    hasher_name = os.getenv("PASSWORD_HASHER", "pbkdf2_sha256")
    password_hasher = create_password_hasher(hasher_name)
    logger.info(f"Password hasher configured: {hasher_name}")

    user_directory = UserDirectory(
        user_repository=user_repository, password_hasher=password_hasher
    )
    catalog_service = CatalogService(
        restaurant_repository=restaurant_repository,
        menu_item_repository=menu_item_repository,
        discount_repository=discount_repository,
    )
    cart_service = CartService(catalog_service=catalog_service)
    pricing_service = PricingService(catalog_service=catalog_service)

    strict_transitions = env_flag("STRICT_ORDER_TRANSITIONS", True)
    order_service = OrderService(
        order_repository=order_repository,
        pricing_service=pricing_service,
        catalog_service=catalog_service,
        cart_service=cart_service,
        user_directory=user_directory,
        strict_transitions=strict_transitions,
    )

    include_cancelled = env_flag("INCLUDE_CANCELLED_IN_REVENUE", True)
    view_service = ViewService(
        order_repository=order_repository,
        user_directory=user_directory,
        include_cancelled_in_revenue=include_cancelled,
    )
    session_manager = SessionManager(
        user_directory=user_directory, max_sessions=int(os.getenv("MAX_SESSIONS", "10000"))
    )

    logger.info(
        f"Services initialized - strict transitions: {strict_transitions}, "
        f"cancelled orders in revenue: {include_cancelled}"
    )

    if env_flag("SEED_DATA", True):
        bootstrap_stores(user_directory, catalog_service)
    else:
        logger.warning("SEED_DATA disabled - starting with an empty catalog and no users")

    app = create_app(
        session_manager=session_manager,
        user_directory=user_directory,
        catalog_service=catalog_service,
        cart_service=cart_service,
        pricing_service=pricing_service,
        order_service=order_service,
        view_service=view_service,
    )

    setup_observability(app)

    logger.info("Food ordering service initialized successfully")

    return app


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    # Create a placeholder app for test imports
    app = FastAPI()


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    port = int(os.getenv("PORT", "8000"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}")
    logger.info(f"API documentation available at http://{host}:{port}/docs")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
