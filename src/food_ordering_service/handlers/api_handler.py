"""FastAPI application exposing the storefront and dashboards."""

import logging
import uuid
from decimal import Decimal

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from food_ordering_service.auth.api_dependencies import get_session_from_header, require_user
from food_ordering_service.errors import (
    AuthError,
    CartIndexError,
    DuplicateDiscountCode,
    FoodOrderingError,
    InvalidTransition,
    MenuItemNotFound,
    NoUser,
    OrderNotFound,
    RestaurantNotFound,
)
from food_ordering_service.models.catalog_models import (
    DiscountCode,
    MenuItem,
    Restaurant,
    RestaurantUpdate,
)
from food_ordering_service.models.order_models import (
    AgentStats,
    CartItem,
    Order,
    OrderStatus,
    OrderTotals,
    OwnerStats,
    Size,
)
from food_ordering_service.models.user_models import PublicUser, Role
from food_ordering_service.services.cart_service import CartService
from food_ordering_service.services.catalog_service import CatalogService
from food_ordering_service.services.order_service import OrderService
from food_ordering_service.services.pricing_service import PricingService
from food_ordering_service.services.session_service import Session, SessionManager
from food_ordering_service.services.user_directory import UserDirectory
from food_ordering_service.services.view_service import ViewService

logger = logging.getLogger(__name__)

# First match wins; anything else is a 400.
ERROR_STATUS_CODES: list[tuple[type[FoodOrderingError], int]] = [
    (AuthError, 401),
    (NoUser, 401),
    (OrderNotFound, 404),
    (RestaurantNotFound, 404),
    (MenuItemNotFound, 404),
    (CartIndexError, 404),
    (InvalidTransition, 409),
    (DuplicateDiscountCode, 409),
]


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


class SessionResponse(BaseModel):
    """Session token and the user signed into it, if any."""

    token: str
    user: PublicUser | None = None


class LoginRequest(BaseModel):
    email: str
    password: str


class SignupRequest(BaseModel):
    name: str
    email: str
    password: str
    phone: str = ""


class AddCartItemRequest(BaseModel):
    item_id: str
    size: Size = Size.S
    note: str = ""


class PendingSwitchResponse(BaseModel):
    """Add-to-cart waiting for the customer to confirm replacing the cart."""

    item_id: str
    item_name: str
    current_restaurant_id: str
    new_restaurant_id: str
    message: str = (
        "Start a new basket? Adding items from a new restaurant will clear your current cart."
    )


class CartResponse(BaseModel):
    """Current cart contents."""

    restaurant_id: str | None
    items: list[CartItem]
    pending_switch: PendingSwitchResponse | None = None


class AddCartItemResponse(BaseModel):
    """Response model for add-to-cart."""

    added: CartItem | None
    needs_confirmation: bool
    cart: CartResponse


class PromoRequest(BaseModel):
    code: str


class PromoResponse(BaseModel):
    code: str
    percentage: int


class PlaceOrderRequest(BaseModel):
    assigned_admin_id: str | None = None
    promo_code: str | None = None


class StatusUpdateRequest(BaseModel):
    status: OrderStatus


class AssignmentRequest(BaseModel):
    admin_id: str | None = None


class CreateUserRequest(BaseModel):
    name: str
    email: str
    password: str
    phone: str = ""
    role: Role = Role.USER
    assigned_restaurant_id: str | None = None


class CreateRestaurantRequest(BaseModel):
    name: str
    description: str = ""
    image: str = ""
    delivery_fee: Decimal = Field(..., ge=0)
    rating: float = Field(default=0.0, ge=0)


class CreateMenuItemRequest(BaseModel):
    restaurant_id: str
    name: str
    description: str = ""
    price: Decimal = Field(..., gt=0)
    category: str = ""
    available: bool = True


class CreateDiscountCodeRequest(BaseModel):
    code: str
    percentage: int = Field(..., ge=0, le=100)
    active: bool = True


def _cart_response(session: Session) -> CartResponse:
    pending = None
    if session.pending_switch is not None:
        pending = PendingSwitchResponse(
            item_id=session.pending_switch.item.id,
            item_name=session.pending_switch.item.name,
            current_restaurant_id=session.pending_switch.current_restaurant_id,
            new_restaurant_id=session.pending_switch.item.restaurant_id,
        )
    return CartResponse(
        restaurant_id=session.cart_restaurant_id,
        items=list(session.cart),
        pending_switch=pending,
    )


def create_app(
    session_manager: SessionManager,
    user_directory: UserDirectory,
    catalog_service: CatalogService,
    cart_service: CartService,
    pricing_service: PricingService,
    order_service: OrderService,
    view_service: ViewService,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        session_manager: Holds visitor sessions
        user_directory: User lookup and management
        catalog_service: Restaurants, menus and promo codes
        cart_service: Cart editing
        pricing_service: Cart pricing
        order_service: Checkout and order lifecycle
        view_service: Role-scoped order views and stats

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Food Ordering Service API",
        description="Storefront, agent and owner endpoints for restaurant food ordering",
        version="1.0.0",
    )

    # Store services in app state for access in route handlers
    app.state.session_manager = session_manager
    app.state.user_directory = user_directory
    app.state.catalog_service = catalog_service
    app.state.cart_service = cart_service
    app.state.pricing_service = pricing_service
    app.state.order_service = order_service
    app.state.view_service = view_service

    @app.exception_handler(FoodOrderingError)
    async def handle_domain_error(_request: Request, exc: FoodOrderingError) -> JSONResponse:
        status_code = next(
            (code for error_type, code in ERROR_STATUS_CODES if isinstance(exc, error_type)), 400
        )
        logger.info(f"{type(exc).__name__}: {exc.message}")
        return JSONResponse(
            status_code=status_code,
            content={"detail": exc.message, "error": type(exc).__name__},
        )

    def current_session(x_session_token: str | None = Header(None)) -> Session:
        """Dependency to resolve the caller's session."""
        return get_session_from_header(
            x_session_token=x_session_token, session_manager=app.state.session_manager
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy")

    # Sessions and authentication

    @app.post("/sessions", response_model=SessionResponse, tags=["Auth"])
    async def start_session() -> SessionResponse:
        """Start an anonymous session."""
        session = app.state.session_manager.start_session()
        return SessionResponse(token=session.token)

    @app.post("/auth/login", response_model=SessionResponse, tags=["Auth"])
    async def login(
        payload: LoginRequest, session: Session = Depends(current_session)
    ) -> SessionResponse:
        """Sign into the current session.

        Returns:
            The session with its signed-in user

        Raises:
            UserNotFound / WrongPassword: Mapped to 401
        """
        user = app.state.session_manager.login(session, payload.email, payload.password)
        return SessionResponse(token=session.token, user=PublicUser.from_user(user))

    @app.post("/auth/signup", response_model=SessionResponse, tags=["Auth"])
    async def signup(
        payload: SignupRequest, session: Session = Depends(current_session)
    ) -> SessionResponse:
        """Register a customer account and sign into it."""
        user = app.state.session_manager.signup(
            session, payload.name, payload.email, payload.password, payload.phone
        )
        return SessionResponse(token=session.token, user=PublicUser.from_user(user))

    @app.post("/auth/logout", status_code=204, tags=["Auth"])
    async def logout(session: Session = Depends(current_session)) -> None:
        """Sign out; the cart is emptied and the token stops working."""
        app.state.session_manager.logout(session)

    @app.delete("/sessions", status_code=204, tags=["Auth"])
    async def end_session(session: Session = Depends(current_session)) -> None:
        """End the current session, signed in or not."""
        app.state.session_manager.end_session(session.token)

    # Catalog browsing

    @app.get("/restaurants", response_model=list[Restaurant], tags=["Catalog"])
    async def list_restaurants() -> list[Restaurant]:
        restaurants: list[Restaurant] = app.state.catalog_service.list_restaurants()
        return restaurants

    @app.get("/restaurants/{restaurant_id}/menu", response_model=list[MenuItem], tags=["Catalog"])
    async def get_menu(restaurant_id: str) -> list[MenuItem]:
        """List the items customers can order from a restaurant."""
        app.state.catalog_service.get_restaurant(restaurant_id)
        items: list[MenuItem] = app.state.catalog_service.list_menu(restaurant_id)
        return items

    @app.get("/agents", response_model=list[PublicUser], tags=["Catalog"])
    async def list_agents() -> list[PublicUser]:
        """List delivery agents selectable at checkout."""
        return [PublicUser.from_user(u) for u in app.state.user_directory.list_agents()]

    # Cart

    @app.get("/cart", response_model=CartResponse, tags=["Cart"])
    async def get_cart(session: Session = Depends(current_session)) -> CartResponse:
        return _cart_response(session)

    @app.post("/cart/items", response_model=AddCartItemResponse, tags=["Cart"])
    async def add_cart_item(
        payload: AddCartItemRequest, session: Session = Depends(current_session)
    ) -> AddCartItemResponse:
        """Add one unit of a menu item to the cart.

        When the cart holds items from another restaurant nothing is added;
        the response asks for confirmation via /cart/switch/confirm.
        """
        item = app.state.catalog_service.get_menu_item(payload.item_id)
        if item is None or not item.available:
            raise MenuItemNotFound(f"Menu item {payload.item_id} is not available")

        result = app.state.cart_service.add_item(session, item, payload.size, payload.note)
        return AddCartItemResponse(
            added=result.added,
            needs_confirmation=result.needs_confirmation,
            cart=_cart_response(session),
        )

    @app.post("/cart/switch/confirm", response_model=CartResponse, tags=["Cart"])
    async def confirm_switch(session: Session = Depends(current_session)) -> CartResponse:
        """Replace the cart with the item waiting for confirmation."""
        app.state.cart_service.confirm_restaurant_switch(session)
        return _cart_response(session)

    @app.post("/cart/switch/cancel", response_model=CartResponse, tags=["Cart"])
    async def cancel_switch(session: Session = Depends(current_session)) -> CartResponse:
        app.state.cart_service.cancel_restaurant_switch(session)
        return _cart_response(session)

    @app.delete("/cart/items/{index}", response_model=CartResponse, tags=["Cart"])
    async def remove_cart_item(
        index: int, session: Session = Depends(current_session)
    ) -> CartResponse:
        app.state.cart_service.remove_item(session, index)
        return _cart_response(session)

    @app.delete("/cart", response_model=CartResponse, tags=["Cart"])
    async def clear_cart(session: Session = Depends(current_session)) -> CartResponse:
        app.state.cart_service.clear(session)
        return _cart_response(session)

    @app.post("/cart/promo", response_model=PromoResponse, tags=["Cart"])
    async def apply_promo(
        payload: PromoRequest, _session: Session = Depends(current_session)
    ) -> PromoResponse:
        """Check a promo code before checkout.

        Raises:
            InvalidPromoCode: Mapped to 400
        """
        percentage = app.state.catalog_service.apply_promo_code(payload.code)
        return PromoResponse(code=payload.code.strip().upper(), percentage=percentage)

    @app.get("/cart/totals", response_model=OrderTotals, tags=["Cart"])
    async def get_cart_totals(
        promo_code: str | None = None, session: Session = Depends(current_session)
    ) -> OrderTotals:
        totals: OrderTotals = app.state.pricing_service.price_cart(session.cart, promo_code)
        return totals

    # Orders

    @app.post("/orders", response_model=Order, status_code=201, tags=["Orders"])
    async def place_order(
        payload: PlaceOrderRequest, session: Session = Depends(current_session)
    ) -> Order:
        """Check out the session's cart."""
        order: Order = app.state.order_service.place_order(
            session, payload.assigned_admin_id, payload.promo_code
        )
        return order

    @app.get("/orders/mine", response_model=list[Order], tags=["Orders"])
    async def my_orders(session: Session = Depends(current_session)) -> list[Order]:
        user = require_user(session)
        orders: list[Order] = app.state.view_service.orders_for_customer(user.id)
        return orders

    @app.get("/orders/assigned", response_model=list[Order], tags=["Orders"])
    async def assigned_orders(session: Session = Depends(current_session)) -> list[Order]:
        user = require_user(session, Role.ADMIN)
        orders: list[Order] = app.state.view_service.orders_for_agent(user.id)
        return orders

    @app.get("/orders", response_model=list[Order], tags=["Orders"])
    async def all_orders(session: Session = Depends(current_session)) -> list[Order]:
        require_user(session, Role.OWNER)
        orders: list[Order] = app.state.view_service.all_orders()
        return orders

    @app.patch("/orders/{order_id}/status", response_model=Order, tags=["Orders"])
    async def update_order_status(
        order_id: str,
        payload: StatusUpdateRequest,
        session: Session = Depends(current_session),
    ) -> Order:
        """Change an order's status.

        Agents may only update orders assigned to them. The owner may update
        any order, which the storefront dashboards do not offer.

        Raises:
            InvalidTransition: Mapped to 409
        """
        user = require_user(session, Role.ADMIN, Role.OWNER)
        if user.role == Role.ADMIN:
            existing = app.state.order_service.get_order(order_id)
            if existing.assigned_admin_id != user.id:
                raise HTTPException(status_code=403, detail="Order is not assigned to you")

        order: Order = app.state.order_service.update_status(order_id, payload.status)
        return order

    @app.patch("/orders/{order_id}/assignment", response_model=Order, tags=["Orders"])
    async def assign_order(
        order_id: str,
        payload: AssignmentRequest,
        session: Session = Depends(current_session),
    ) -> Order:
        require_user(session, Role.OWNER)
        order: Order = app.state.order_service.assign_order(order_id, payload.admin_id)
        return order

    # Dashboards

    @app.get("/owner/stats", response_model=OwnerStats, tags=["Dashboards"])
    async def owner_stats(session: Session = Depends(current_session)) -> OwnerStats:
        require_user(session, Role.OWNER)
        stats: OwnerStats = app.state.view_service.owner_stats()
        return stats

    @app.get("/admin/stats", response_model=AgentStats, tags=["Dashboards"])
    async def agent_stats(session: Session = Depends(current_session)) -> AgentStats:
        user = require_user(session, Role.ADMIN)
        stats: AgentStats = app.state.view_service.agent_stats(user.id)
        return stats

    # Owner catalog and user management

    @app.get("/owner/users", response_model=list[PublicUser], tags=["Owner"])
    async def list_users(session: Session = Depends(current_session)) -> list[PublicUser]:
        require_user(session, Role.OWNER)
        return [PublicUser.from_user(u) for u in app.state.user_directory.list_users()]

    @app.post("/owner/users", response_model=PublicUser, status_code=201, tags=["Owner"])
    async def create_user(
        payload: CreateUserRequest, session: Session = Depends(current_session)
    ) -> PublicUser:
        require_user(session, Role.OWNER)
        user = app.state.user_directory.add_user(**payload.model_dump())
        return PublicUser.from_user(user)

    @app.delete("/owner/users/{user_id}", status_code=204, tags=["Owner"])
    async def delete_user(user_id: str, session: Session = Depends(current_session)) -> None:
        """Remove a user. The OWNER account cannot be removed."""
        require_user(session, Role.OWNER)
        target = app.state.user_directory.get_user(user_id)
        if target is None:
            raise HTTPException(status_code=404, detail=f"User {user_id} not found")
        if target.role == Role.OWNER:
            raise HTTPException(status_code=403, detail="The owner account cannot be removed")
        app.state.user_directory.remove_user(user_id)

    @app.post("/owner/restaurants", response_model=Restaurant, status_code=201, tags=["Owner"])
    async def create_restaurant(
        payload: CreateRestaurantRequest, session: Session = Depends(current_session)
    ) -> Restaurant:
        require_user(session, Role.OWNER)
        restaurant = Restaurant(id=f"rest_{uuid.uuid4().hex[:12]}", **payload.model_dump())
        created: Restaurant = app.state.catalog_service.add_restaurant(restaurant)
        return created

    @app.patch("/owner/restaurants/{restaurant_id}", response_model=Restaurant, tags=["Owner"])
    async def update_restaurant(
        restaurant_id: str,
        payload: RestaurantUpdate,
        session: Session = Depends(current_session),
    ) -> Restaurant:
        require_user(session, Role.OWNER)
        updated: Restaurant = app.state.catalog_service.update_restaurant(restaurant_id, payload)
        return updated

    @app.delete("/owner/restaurants/{restaurant_id}", status_code=204, tags=["Owner"])
    async def delete_restaurant(
        restaurant_id: str, session: Session = Depends(current_session)
    ) -> None:
        """Delete a restaurant together with its menu items."""
        require_user(session, Role.OWNER)
        if not app.state.catalog_service.delete_restaurant(restaurant_id):
            raise RestaurantNotFound(f"Restaurant {restaurant_id} not found")

    @app.get(
        "/owner/restaurants/{restaurant_id}/menu", response_model=list[MenuItem], tags=["Owner"]
    )
    async def get_full_menu(
        restaurant_id: str, session: Session = Depends(current_session)
    ) -> list[MenuItem]:
        """List every menu item of a restaurant, including unavailable ones."""
        require_user(session, Role.OWNER)
        items: list[MenuItem] = app.state.catalog_service.list_menu(
            restaurant_id, available_only=False
        )
        return items

    @app.post("/owner/menu-items", response_model=MenuItem, status_code=201, tags=["Owner"])
    async def create_menu_item(
        payload: CreateMenuItemRequest, session: Session = Depends(current_session)
    ) -> MenuItem:
        require_user(session, Role.OWNER)
        item = MenuItem(id=f"item_{uuid.uuid4().hex[:12]}", **payload.model_dump())
        created: MenuItem = app.state.catalog_service.add_menu_item(item)
        return created

    @app.delete("/owner/menu-items/{item_id}", status_code=204, tags=["Owner"])
    async def delete_menu_item(item_id: str, session: Session = Depends(current_session)) -> None:
        require_user(session, Role.OWNER)
        if not app.state.catalog_service.delete_menu_item(item_id):
            raise MenuItemNotFound(f"Menu item {item_id} not found")

    @app.get("/owner/discount-codes", response_model=list[DiscountCode], tags=["Owner"])
    async def list_discount_codes(
        session: Session = Depends(current_session),
    ) -> list[DiscountCode]:
        require_user(session, Role.OWNER)
        codes: list[DiscountCode] = app.state.catalog_service.list_discount_codes()
        return codes

    @app.post(
        "/owner/discount-codes", response_model=DiscountCode, status_code=201, tags=["Owner"]
    )
    async def create_discount_code(
        payload: CreateDiscountCodeRequest, session: Session = Depends(current_session)
    ) -> DiscountCode:
        require_user(session, Role.OWNER)
        discount = DiscountCode(id=f"promo_{uuid.uuid4().hex[:12]}", **payload.model_dump())
        created: DiscountCode = app.state.catalog_service.add_discount_code(discount)
        return created

    @app.delete("/owner/discount-codes/{discount_id}", status_code=204, tags=["Owner"])
    async def delete_discount_code(
        discount_id: str, session: Session = Depends(current_session)
    ) -> None:
        require_user(session, Role.OWNER)
        if not app.state.catalog_service.delete_discount_code(discount_id):
            raise HTTPException(status_code=404, detail=f"Discount code {discount_id} not found")

    return app
