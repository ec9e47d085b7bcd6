"""
Tests for the HTTP API
"""

from datetime import date, timedelta

from orderflow.app import app
from orderflow.config import settings
from orderflow.dependencies import get_catalog
from orderflow.query import build_catalog

from conftest import CPF_BRUCE, CPF_JOAO, CPF_MARIA


def register_bruce(client):
    return client.post(
        "/clients",
        json={
            "name": "Bruce Wayne",
            "email": "b@w.com",
            "cpf": "401.777.150-57",
            "birth_date": "1972-02-19",
        },
    )


def register_belt(client):
    return client.post(
        "/products",
        json={
            "name": "Utility Belt",
            "sku": "AB12CD34",
            "price": 79.99,
            "expiration_date": (date.today() + timedelta(days=30)).isoformat(),
        },
    )


class TestHealthEndpoint:
    """Test health check endpoint"""

    def test_health_check(self, client):
        """Test health check returns healthy status"""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "connected"
        assert data["service"] == settings.APP_NAME

    def test_request_id_header(self, client):
        """Test the request id is echoed back"""
        response = client.get("/health", headers={"X-Request-ID": "req-42"})
        assert response.headers["X-Request-ID"] == "req-42"


class TestClientEndpoints:
    """Test client endpoints"""

    def test_register_client(self, client):
        """Test successful registration"""
        response = register_bruce(client)

        assert response.status_code == 201
        data = response.json()
        assert data["cpf"] == CPF_BRUCE
        assert data["name"] == "Bruce Wayne"
        assert isinstance(data["id"], int)

    def test_duplicate_cpf_returns_400(self, client):
        """Test business errors come back as 400 with a message"""
        register_bruce(client)
        response = client.post(
            "/clients",
            json={
                "name": "Bruce Wayne",
                "email": "other@w.com",
                "cpf": CPF_BRUCE,
                "birth_date": "1972-02-19",
            },
        )

        assert response.status_code == 400
        data = response.json()
        assert data["message"] == f"Client already registered with cpf: {CPF_BRUCE}"
        assert data["details"]["key"] == "cpf"

    def test_missing_fields_are_business_errors(self, client):
        """Test an empty body fails on the first rule"""
        response = client.post("/clients", json={})
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "name"

    def test_lookup_update_delete(self, client):
        """Test the CPF addressed endpoints"""
        register_bruce(client)

        assert client.get("/clients/cpf/401.777.150-57").json()["email"] == "b@w.com"
        assert client.get("/clients/email/b@w.com").json()["cpf"] == CPF_BRUCE

        response = client.put(
            f"/clients/cpf/{CPF_BRUCE}",
            json={"name": "Batman", "email": "bat@cave.com", "birth_date": "1972-02-19"},
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Batman"

        response = client.delete(f"/clients/cpf/{CPF_BRUCE}")
        assert response.status_code == 200
        assert response.json() == {"message": "Client deleted successfully."}
        assert client.get(f"/clients/cpf/{CPF_BRUCE}").status_code == 400

    def test_paginated_listing(self, client):
        """Test total and items of a page"""
        register_bruce(client)
        client.post(
            "/clients",
            json={
                "name": "Maria Silva",
                "email": "maria@example.com",
                "cpf": CPF_MARIA,
                "birth_date": "1990-05-17",
            },
        )

        response = client.get(
            "/clients", params={"lines_per_page": 1, "page": 1, "order_by": "name"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [item["name"] for item in data["items"]] == ["Maria Silva"]

    def test_configured_page_size_applies(self, client):
        """Test listings without lines_per_page use the catalog page size"""
        app.dependency_overrides[get_catalog] = lambda: build_catalog(2)
        for name, email, cpf in (
            ("Bruce Wayne", "b@w.com", CPF_BRUCE),
            ("Maria Silva", "maria@example.com", CPF_MARIA),
            ("Joao Souza", "joao@example.com", CPF_JOAO),
        ):
            client.post(
                "/clients",
                json={"name": name, "email": email, "cpf": cpf, "birth_date": "1990-05-17"},
            )

        data = client.get("/clients").json()
        assert data["total"] == 3
        assert len(data["items"]) == 2
        assert len(client.get("/clients", params={"lines_per_page": 3}).json()["items"]) == 3

    def test_unknown_sort_key_falls_back(self, client):
        """Test an unknown order_by is not an error"""
        register_bruce(client)
        response = client.get("/clients", params={"order_by": "password", "direction": "up"})
        assert response.status_code == 200
        assert response.json()["total"] == 1


class TestProductEndpoints:
    """Test product endpoints"""

    def test_register_and_find(self, client):
        """Test registration and SKU lookup"""
        assert register_belt(client).status_code == 201
        response = client.get("/products/sku/AB12CD34")
        assert response.status_code == 200
        assert response.json()["price"] == 79.99

    def test_invalid_sku(self, client):
        """Test a 7 character SKU"""
        response = client.post(
            "/products",
            json={
                "name": "Utility Belt",
                "sku": "AB12CD3",
                "price": 79.99,
                "expiration_date": (date.today() + timedelta(days=1)).isoformat(),
            },
        )
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "sku"

    def test_inverted_price_range(self, client):
        """Test min_price greater than max_price"""
        response = client.get("/products", params={"min_price": 10, "max_price": 5})
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "min_price"


class TestOrderEndpoints:
    """Test order and order item endpoints"""

    def test_order_lifecycle(self, client):
        """Test placing an order, adding a line and completing it"""
        client_id = register_bruce(client).json()["id"]
        product_id = register_belt(client).json()["id"]

        response = client.post("/orders", json={"client_id": client_id, "status": "pending"})
        assert response.status_code == 201
        order = response.json()
        assert order["status"] == "PENDING"

        response = client.post(
            "/order-items",
            json={"order_id": order["id"], "product_id": product_id, "quantity": 2},
        )
        assert response.status_code == 201
        assert response.json()["price"] == 79.99

        response = client.patch(f"/orders/{order['id']}/status", json={"status": "completed"})
        assert response.status_code == 200
        assert response.json()["status"] == "COMPLETED"

        response = client.patch(f"/orders/{order['id']}/status", json={"status": "cancelled"})
        assert response.status_code == 400
        assert response.json()["message"] == (
            "Order status cannot change from COMPLETED to CANCELLED"
        )

    def test_listings(self, client):
        """Test the order, details, sales report and item detail listings"""
        client_id = register_bruce(client).json()["id"]
        product_id = register_belt(client).json()["id"]
        order_id = client.post(
            "/orders", json={"client_id": client_id, "status": "PENDING"}
        ).json()["id"]
        client.post(
            "/order-items", json={"order_id": order_id, "product_id": product_id, "quantity": 3}
        )

        orders = client.get("/orders", params={"status": "pending"}).json()
        assert orders["total"] == 1

        details = client.get("/orders/details").json()
        assert details["items"][0]["total_amount"] == 239.97

        report = client.get("/orders/sales-report").json()
        assert report["items"][0]["total_orders"] == 1

        items = client.get("/order-items/details", params={"client_id": client_id}).json()
        assert items["items"][0]["product"]["sku"] == "AB12CD34"

    def test_unknown_order(self, client):
        """Test a malformed order id"""
        response = client.get("/orders/not-a-uuid")
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "order_id"

    def test_timezone_aware_date_filter(self, client):
        """Test an ISO date with an offset is accepted by the order listings"""
        client_id = register_bruce(client).json()["id"]
        client.post("/orders", json={"client_id": client_id, "status": "PENDING"})

        response = client.get("/orders", params={"date_start": "2024-01-01T00:00:00Z"})
        assert response.status_code == 200
        assert response.json()["total"] == 1

        response = client.get(
            "/orders/sales-report", params={"date_end": "2024-01-01T00:00:00-03:00"}
        )
        assert response.status_code == 200
        assert response.json()["total"] == 0

    def test_fractional_quantity_rejected(self, client):
        """Test an order line with a fractional quantity is not stored"""
        client_id = register_bruce(client).json()["id"]
        product_id = register_belt(client).json()["id"]
        order_id = client.post(
            "/orders", json={"client_id": client_id, "status": "PENDING"}
        ).json()["id"]

        response = client.post(
            "/order-items", json={"order_id": order_id, "product_id": product_id, "quantity": 0.5}
        )
        assert response.status_code == 422
        assert client.get("/order-items").json()["total"] == 0
