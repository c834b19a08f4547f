"""Unit tests for FastAPI storefront and dashboard endpoints."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from food_ordering_service.handlers.api_handler import create_app
from food_ordering_service.models.catalog_models import MenuItem
from food_ordering_service.models.user_models import Role
from food_ordering_service.services.cart_service import CartService
from food_ordering_service.services.catalog_service import CatalogService
from food_ordering_service.services.order_service import OrderService
from food_ordering_service.services.pricing_service import PricingService
from food_ordering_service.services.session_service import SessionManager
from food_ordering_service.services.user_directory import UserDirectory
from food_ordering_service.services.view_service import ViewService


@pytest.fixture
def client(
    session_manager: SessionManager,
    user_directory: UserDirectory,
    catalog_service: CatalogService,
    cart_service: CartService,
    pricing_service: PricingService,
    order_service: OrderService,
    view_service: ViewService,
) -> TestClient:
    """Create a test client backed by in-memory services."""
    app = create_app(
        session_manager=session_manager,
        user_directory=user_directory,
        catalog_service=catalog_service,
        cart_service=cart_service,
        pricing_service=pricing_service,
        order_service=order_service,
        view_service=view_service,
    )
    return TestClient(app)


def start_session(client: TestClient) -> dict[str, str]:
    response = client.post("/sessions")
    assert response.status_code == 200
    return {"X-Session-Token": response.json()["token"]}


def login(client: TestClient, email: str, password: str = "123") -> dict[str, str]:
    headers = start_session(client)
    response = client.post(
        "/auth/login", json={"email": email, "password": password}, headers=headers
    )
    assert response.status_code == 200
    return headers


@pytest.mark.unit
class TestHealthEndpoint:
    """Test suite for health check endpoint."""

    def test_health_check(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


@pytest.mark.unit
class TestAuthEndpoints:
    """Test suite for session and login endpoints."""

    def test_start_session_is_anonymous(self, client: TestClient) -> None:
        response = client.post("/sessions")

        assert response.status_code == 200
        assert response.json()["user"] is None

    def test_login_success(self, client: TestClient) -> None:
        headers = start_session(client)

        response = client.post(
            "/auth/login", json={"email": "owner@system.com", "password": "123"}, headers=headers
        )

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["id"] == "u1"
        assert user["role"] == "OWNER"
        assert "password" not in user

    def test_login_wrong_password(self, client: TestClient) -> None:
        headers = start_session(client)

        response = client.post(
            "/auth/login",
            json={"email": "owner@system.com", "password": "wrongpass"},
            headers=headers,
        )

        assert response.status_code == 401
        assert response.json()["error"] == "WrongPassword"
        assert response.json()["detail"] == "Wrong password"

    def test_login_unknown_user(self, client: TestClient) -> None:
        headers = start_session(client)

        response = client.post(
            "/auth/login", json={"email": "nobody@x.com", "password": "any"}, headers=headers
        )

        assert response.status_code == 401
        assert response.json()["error"] == "UserNotFound"

    def test_login_without_session(self, client: TestClient) -> None:
        response = client.post("/auth/login", json={"email": "owner@system.com", "password": "123"})
        assert response.status_code == 401

    def test_signup_creates_customer(self, client: TestClient) -> None:
        headers = start_session(client)

        response = client.post(
            "/auth/signup",
            json={"name": "Jane", "email": "jane@x.com", "password": "pw", "phone": "555"},
            headers=headers,
        )

        assert response.status_code == 200
        assert response.json()["user"]["role"] == "USER"

    def test_logout_clears_cart(
        self, client: TestClient, session_manager: SessionManager
    ) -> None:
        headers = login(client, "user@gmail.com")
        client.post("/cart/items", json={"item_id": "m1"}, headers=headers)
        session = session_manager.get_session(headers["X-Session-Token"])
        assert session is not None

        response = client.post("/auth/logout", headers=headers)

        assert response.status_code == 204
        assert session.user is None
        assert session.cart == []

    def test_logged_out_token_is_rejected(self, client: TestClient) -> None:
        headers = login(client, "user@gmail.com")

        client.post("/auth/logout", headers=headers)

        assert client.get("/cart", headers=headers).status_code == 401
        assert client.get("/orders/mine", headers=headers).status_code == 401

    def test_logout_does_not_grow_sessions(
        self, client: TestClient, session_manager: SessionManager
    ) -> None:
        before = session_manager.session_count

        for _ in range(50):
            client.post("/auth/logout", headers=start_session(client))

        assert session_manager.session_count == before

    def test_end_anonymous_session(
        self, client: TestClient, session_manager: SessionManager
    ) -> None:
        headers = start_session(client)

        response = client.delete("/sessions", headers=headers)

        assert response.status_code == 204
        assert session_manager.get_session(headers["X-Session-Token"]) is None
        assert client.get("/cart", headers=headers).status_code == 401


@pytest.mark.unit
class TestCatalogEndpoints:
    """Test suite for catalog browsing endpoints."""

    def test_list_restaurants(self, client: TestClient) -> None:
        response = client.get("/restaurants")

        assert response.status_code == 200
        assert [r["id"] for r in response.json()] == ["r1", "r2"]

    def test_menu_shows_available_items(
        self, client: TestClient, catalog_service: CatalogService
    ) -> None:
        catalog_service.add_menu_item(
            MenuItem(id="m2", restaurant_id="r1", name="Gone", price=Decimal("3"), available=False)
        )

        response = client.get("/restaurants/r1/menu")

        assert response.status_code == 200
        assert [i["id"] for i in response.json()] == ["m1"]

    def test_menu_unknown_restaurant(self, client: TestClient) -> None:
        assert client.get("/restaurants/r9/menu").status_code == 404

    def test_list_agents(self, client: TestClient) -> None:
        response = client.get("/agents")
        assert [a["id"] for a in response.json()] == ["u2"]


@pytest.mark.unit
class TestCartEndpoints:
    """Test suite for cart endpoints."""

    def test_add_item_with_size(self, client: TestClient) -> None:
        headers = login(client, "user@gmail.com")

        response = client.post(
            "/cart/items", json={"item_id": "m1", "size": "M", "note": "extra pickles"}, headers=headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["needs_confirmation"] is False
        assert Decimal(data["added"]["price"]) == Decimal("10.788")
        assert data["cart"]["restaurant_id"] == "r1"

    def test_add_unknown_item(self, client: TestClient) -> None:
        headers = start_session(client)
        response = client.post("/cart/items", json={"item_id": "nope"}, headers=headers)
        assert response.status_code == 404

    def test_restaurant_switch_flow(self, client: TestClient) -> None:
        """Test that switching restaurants needs an explicit confirmation."""
        headers = start_session(client)
        client.post("/cart/items", json={"item_id": "m1"}, headers=headers)

        response = client.post("/cart/items", json={"item_id": "m3"}, headers=headers)

        data = response.json()
        assert data["needs_confirmation"] is True
        assert data["added"] is None
        assert data["cart"]["pending_switch"]["new_restaurant_id"] == "r2"
        assert [i["item_id"] for i in data["cart"]["items"]] == ["m1"]

        confirmed = client.post("/cart/switch/confirm", headers=headers)

        assert confirmed.status_code == 200
        assert [i["item_id"] for i in confirmed.json()["items"]] == ["m3"]
        assert confirmed.json()["pending_switch"] is None

    def test_confirm_switch_after_restaurant_deleted(self, client: TestClient) -> None:
        """Test that a parked item removed from the catalog cannot be confirmed."""
        headers = login(client, "user@gmail.com")
        client.post("/cart/items", json={"item_id": "m1"}, headers=headers)
        client.post("/cart/items", json={"item_id": "m3"}, headers=headers)
        owner = login(client, "owner@system.com")
        assert client.delete("/owner/restaurants/r2", headers=owner).status_code == 204

        confirmed = client.post("/cart/switch/confirm", headers=headers)

        assert confirmed.status_code == 404
        assert confirmed.json()["error"] == "MenuItemNotFound"
        cart = client.get("/cart", headers=headers).json()
        assert [i["item_id"] for i in cart["items"]] == ["m1"]
        assert cart["pending_switch"] is None

        order = client.post("/orders", json={"assigned_admin_id": "u2"}, headers=headers).json()
        assert order["restaurant_name"] == "Burger Kingpin"

    def test_cancel_switch(self, client: TestClient) -> None:
        headers = start_session(client)
        client.post("/cart/items", json={"item_id": "m1"}, headers=headers)
        client.post("/cart/items", json={"item_id": "m3"}, headers=headers)

        response = client.post("/cart/switch/cancel", headers=headers)

        assert [i["item_id"] for i in response.json()["items"]] == ["m1"]

    def test_confirm_without_pending_switch(self, client: TestClient) -> None:
        headers = start_session(client)
        assert client.post("/cart/switch/confirm", headers=headers).status_code == 400

    def test_remove_item(self, client: TestClient) -> None:
        headers = start_session(client)
        client.post("/cart/items", json={"item_id": "m1", "size": "S"}, headers=headers)
        client.post("/cart/items", json={"item_id": "m1", "size": "L"}, headers=headers)

        response = client.delete("/cart/items/0", headers=headers)

        assert [i["size"] for i in response.json()["items"]] == ["L"]

    def test_remove_item_out_of_range(self, client: TestClient) -> None:
        headers = start_session(client)
        response = client.delete("/cart/items/3", headers=headers)
        assert response.status_code == 404
        assert response.json()["error"] == "CartIndexError"

    def test_clear_cart(self, client: TestClient) -> None:
        headers = start_session(client)
        client.post("/cart/items", json={"item_id": "m1"}, headers=headers)

        response = client.delete("/cart", headers=headers)

        assert response.json()["items"] == []

    def test_apply_promo(self, client: TestClient) -> None:
        headers = start_session(client)

        response = client.post("/cart/promo", json={"code": "welcome10"}, headers=headers)

        assert response.status_code == 200
        assert response.json() == {"code": "WELCOME10", "percentage": 10}

    def test_apply_invalid_promo(self, client: TestClient) -> None:
        headers = start_session(client)

        response = client.post("/cart/promo", json={"code": "BOGUS"}, headers=headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid Code"

    def test_cart_totals(self, client: TestClient) -> None:
        headers = start_session(client)
        client.post("/cart/items", json={"item_id": "m1", "size": "M"}, headers=headers)

        response = client.get("/cart/totals", params={"promo_code": "WELCOME10"}, headers=headers)

        data = response.json()
        assert Decimal(data["subtotal"]) == Decimal("10.788")
        assert Decimal(data["delivery_fee"]) == Decimal("2.99")
        assert Decimal(data["discount_amount"]) == Decimal("1.3778")
        assert Decimal(data["final_amount"]) == Decimal("12.4002")


@pytest.mark.unit
class TestOrderEndpoints:
    """Test suite for order endpoints."""

    def place(self, client: TestClient, headers: dict[str, str], **payload: str) -> dict:
        client.post("/cart/items", json={"item_id": "m1"}, headers=headers)
        response = client.post("/orders", json={"assigned_admin_id": "u2", **payload}, headers=headers)
        assert response.status_code == 201
        return response.json()

    def test_place_order(self, client: TestClient) -> None:
        headers = login(client, "user@gmail.com")

        order = self.place(client, headers, promo_code="SAVE20")

        assert order["status"] == "PENDING"
        assert order["assigned_admin_id"] == "u2"
        assert Decimal(order["final_amount"]) == Decimal("9.584")
        assert client.get("/cart", headers=headers).json()["items"] == []

    def test_place_order_empty_cart(self, client: TestClient) -> None:
        headers = login(client, "user@gmail.com")

        response = client.post("/orders", json={"assigned_admin_id": "u2"}, headers=headers)

        assert response.status_code == 400
        assert response.json()["error"] == "EmptyCart"

    def test_place_order_without_agent(self, client: TestClient) -> None:
        headers = login(client, "user@gmail.com")
        client.post("/cart/items", json={"item_id": "m1"}, headers=headers)

        response = client.post("/orders", json={}, headers=headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Please select a delivery agent!"

    def test_place_order_anonymous(self, client: TestClient) -> None:
        headers = start_session(client)
        client.post("/cart/items", json={"item_id": "m1"}, headers=headers)

        response = client.post("/orders", json={"assigned_admin_id": "u2"}, headers=headers)

        assert response.status_code == 401
        assert response.json()["error"] == "NoUser"

    def test_role_scoped_order_lists(self, client: TestClient) -> None:
        customer = login(client, "user@gmail.com")
        order = self.place(client, customer)
        agent = login(client, "admin@burger.com")
        owner = login(client, "owner@system.com")

        assert [o["id"] for o in client.get("/orders/mine", headers=customer).json()] == [order["id"]]
        assert [o["id"] for o in client.get("/orders/assigned", headers=agent).json()] == [order["id"]]
        assert [o["id"] for o in client.get("/orders", headers=owner).json()] == [order["id"]]
        assert client.get("/orders/mine", headers=owner).json() == []

    def test_order_lists_enforce_roles(self, client: TestClient) -> None:
        customer = login(client, "user@gmail.com")

        assert client.get("/orders", headers=customer).status_code == 403
        assert client.get("/orders/assigned", headers=customer).status_code == 403
        assert client.get("/orders/mine", headers=start_session(client)).status_code == 401

    def test_agent_updates_status(self, client: TestClient) -> None:
        order = self.place(client, login(client, "user@gmail.com"))
        agent = login(client, "admin@burger.com")

        response = client.patch(
            f"/orders/{order['id']}/status", json={"status": "PREPARING"}, headers=agent
        )

        assert response.status_code == 200
        assert response.json()["status"] == "PREPARING"

    def test_invalid_transition_conflict(self, client: TestClient) -> None:
        order = self.place(client, login(client, "user@gmail.com"))
        agent = login(client, "admin@burger.com")

        response = client.patch(
            f"/orders/{order['id']}/status", json={"status": "DELIVERED"}, headers=agent
        )

        assert response.status_code == 409
        assert response.json()["error"] == "InvalidTransition"

    def test_agent_cannot_update_unassigned_order(
        self, client: TestClient, user_directory: UserDirectory
    ) -> None:
        user_directory.add_user(
            user_id="u4", name="Other Agent", email="other@x.com", password="123", role=Role.ADMIN
        )
        order = self.place(client, login(client, "user@gmail.com"))
        other = login(client, "other@x.com")

        response = client.patch(
            f"/orders/{order['id']}/status", json={"status": "PREPARING"}, headers=other
        )

        assert response.status_code == 403

    def test_owner_updates_any_order_status(self, client: TestClient) -> None:
        order = self.place(client, login(client, "user@gmail.com"))
        owner = login(client, "owner@system.com")

        response = client.patch(
            f"/orders/{order['id']}/status", json={"status": "CANCELLED"}, headers=owner
        )

        assert response.status_code == 200
        assert response.json()["status"] == "CANCELLED"
        assert response.json()["assigned_admin_id"] == "u2"

    def test_customer_cannot_update_status(self, client: TestClient) -> None:
        customer = login(client, "user@gmail.com")
        order = self.place(client, customer)

        response = client.patch(
            f"/orders/{order['id']}/status", json={"status": "CANCELLED"}, headers=customer
        )

        assert response.status_code == 403

    def test_owner_reassigns_order(self, client: TestClient, user_directory: UserDirectory) -> None:
        user_directory.add_user(
            user_id="u4", name="Other Agent", email="other@x.com", password="123", role=Role.ADMIN
        )
        order = self.place(client, login(client, "user@gmail.com"))
        owner = login(client, "owner@system.com")

        response = client.patch(
            f"/orders/{order['id']}/assignment", json={"admin_id": "u4"}, headers=owner
        )

        assert response.status_code == 200
        assert response.json()["assigned_admin_id"] == "u4"

    def test_agent_cannot_reassign(self, client: TestClient) -> None:
        order = self.place(client, login(client, "user@gmail.com"))
        agent = login(client, "admin@burger.com")

        response = client.patch(
            f"/orders/{order['id']}/assignment", json={"admin_id": "u2"}, headers=agent
        )

        assert response.status_code == 403

    def test_unknown_order(self, client: TestClient) -> None:
        owner = login(client, "owner@system.com")

        response = client.patch("/orders/ORD-NOPE/status", json={"status": "PREPARING"}, headers=owner)

        assert response.status_code == 404


@pytest.mark.unit
class TestOwnerEndpoints:
    """Test suite for owner management endpoints."""

    def test_stats(self, client: TestClient) -> None:
        customer = login(client, "user@gmail.com")
        client.post("/cart/items", json={"item_id": "m1"}, headers=customer)
        client.post("/orders", json={"assigned_admin_id": "u2"}, headers=customer)

        owner_stats = client.get("/owner/stats", headers=login(client, "owner@system.com")).json()
        agent_stats = client.get("/admin/stats", headers=login(client, "admin@burger.com")).json()

        assert Decimal(owner_stats["total_revenue"]) == Decimal("11.98")
        assert owner_stats["total_orders"] == 1
        assert owner_stats["total_users"] == 3
        assert Decimal(agent_stats["revenue"]) == Decimal("11.98")
        assert agent_stats["count"] == 1

    def test_owner_endpoints_require_owner(self, client: TestClient) -> None:
        agent = login(client, "admin@burger.com")

        assert client.get("/owner/stats", headers=agent).status_code == 403
        assert client.get("/owner/users", headers=agent).status_code == 403
        assert client.get("/admin/stats", headers=login(client, "owner@system.com")).status_code == 403

    def test_create_and_remove_user(self, client: TestClient) -> None:
        owner = login(client, "owner@system.com")

        created = client.post(
            "/owner/users",
            json={"name": "Agent Two", "email": "a2@x.com", "password": "pw", "role": "ADMIN"},
            headers=owner,
        )

        assert created.status_code == 201
        user_id = created.json()["id"]
        assert user_id in [a["id"] for a in client.get("/agents").json()]

        assert client.delete(f"/owner/users/{user_id}", headers=owner).status_code == 204
        assert client.delete(f"/owner/users/{user_id}", headers=owner).status_code == 404

    def test_owner_account_cannot_be_removed(self, client: TestClient) -> None:
        owner = login(client, "owner@system.com")

        response = client.delete("/owner/users/u1", headers=owner)

        assert response.status_code == 403
        assert "u1" in [u["id"] for u in client.get("/owner/users", headers=owner).json()]

    def test_restaurant_crud_with_cascade(self, client: TestClient) -> None:
        owner = login(client, "owner@system.com")

        created = client.post(
            "/owner/restaurants",
            json={"name": "Pizza Palace", "delivery_fee": "1.99", "rating": 4.2},
            headers=owner,
        )
        assert created.status_code == 201
        restaurant_id = created.json()["id"]

        item = client.post(
            "/owner/menu-items",
            json={"restaurant_id": restaurant_id, "name": "Pepperoni", "price": "14.00"},
            headers=owner,
        )
        assert item.status_code == 201

        updated = client.patch(
            f"/owner/restaurants/{restaurant_id}", json={"delivery_fee": "0.99"}, headers=owner
        )
        assert Decimal(updated.json()["delivery_fee"]) == Decimal("0.99")
        assert updated.json()["name"] == "Pizza Palace"

        assert client.delete(f"/owner/restaurants/{restaurant_id}", headers=owner).status_code == 204
        assert client.get(f"/restaurants/{restaurant_id}/menu").status_code == 404
        full_menu = client.get(f"/owner/restaurants/{restaurant_id}/menu", headers=owner)
        assert full_menu.json() == []

    def test_menu_item_for_unknown_restaurant(self, client: TestClient) -> None:
        owner = login(client, "owner@system.com")

        response = client.post(
            "/owner/menu-items",
            json={"restaurant_id": "r9", "name": "Orphan", "price": "1.00"},
            headers=owner,
        )

        assert response.status_code == 404

    def test_delete_menu_item(self, client: TestClient) -> None:
        owner = login(client, "owner@system.com")

        assert client.delete("/owner/menu-items/m1", headers=owner).status_code == 204
        assert client.delete("/owner/menu-items/m1", headers=owner).status_code == 404

    def test_discount_code_crud(self, client: TestClient) -> None:
        owner = login(client, "owner@system.com")

        created = client.post(
            "/owner/discount-codes", json={"code": "summer15", "percentage": 15}, headers=owner
        )
        assert created.status_code == 201
        assert created.json()["code"] == "SUMMER15"

        duplicate = client.post(
            "/owner/discount-codes", json={"code": "SUMMER15", "percentage": 5}, headers=owner
        )
        assert duplicate.status_code == 409

        codes = client.get("/owner/discount-codes", headers=owner).json()
        assert [c["code"] for c in codes] == ["WELCOME10", "SAVE20", "SUMMER15"]

        discount_id = created.json()["id"]
        assert client.delete(f"/owner/discount-codes/{discount_id}", headers=owner).status_code == 204
        assert client.delete(f"/owner/discount-codes/{discount_id}", headers=owner).status_code == 404
