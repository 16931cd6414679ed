"""Tests for FastAPI endpoints."""

import pytest
from fastapi.testclient import TestClient

import run
from shipdesk.config import get_settings
from shipdesk.main import app
from shipdesk.services.shipment_pool import get_shipment_pool
from shipdesk.storage.database import Database, get_database

API = get_settings().api_prefix


class TestRootEndpoint:
    """Tests for root and health endpoints."""

    def test_root_endpoint(self, client):
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "ShipDesk Admin API"
        assert data["api_prefix"] == API

    def test_health_endpoint(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "database": "ok"}

    def test_security_headers(self, client):
        response = client.get("/")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"


class TestAuthGate:
    """Tests for token and role checks on admin routes."""

    def test_missing_token(self, client):
        response = client.get(f"{API}/users")

        assert response.status_code == 401
        assert response.json() == {"msg": "Not authenticated"}

    def test_invalid_token(self, client):
        response = client.get(f"{API}/users", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401
        assert "msg" in response.json()

    @pytest.mark.parametrize("method, path, body", [
        ("get", "/users", None),
        ("put", "/users/any/status", {"status": "blocked"}),
        ("put", "/users/any/balance", {"availableBalance": 10}),
        ("put", "/any/carriers", {"allowedCarriers": []}),
        ("post", "/add-carrier", {"userId": "any", "carrier": "UPS"}),
        ("post", "/add-vendor", {"userId": "any", "carrier": "UPS", "vendor": "Acme"}),
        ("put", "/update-carrier-status", {"userId": "any", "carrier": "UPS", "status": True}),
        ("put", "/update-vendor-status", {"userId": "any", "carrier": "UPS", "vendor": "Acme", "status": True}),
    ])
    def test_non_admin_forbidden(self, client, user_headers, method, path, body):
        """Test a valid token without the admin role gets 403."""
        kwargs = {"headers": user_headers}
        if body is not None:
            kwargs["json"] = body

        response = getattr(client, method)(f"{API}{path}", **kwargs)

        assert response.status_code == 403
        assert response.json() == {"msg": "Access denied"}

    def test_non_admin_rejected_before_body_validation(self, client, user_headers):
        """Test a non-admin with a malformed body still gets 403, not field errors."""
        response = client.post(f"{API}/add-carrier", json={"carrier": 42}, headers=user_headers)

        assert response.status_code == 403
        assert response.json() == {"msg": "Access denied"}

    def test_malformed_body_without_token(self, client):
        response = client.put(f"{API}/users/any/balance", json={})

        assert response.status_code == 401


class TestUserManagement:
    """Tests for user list, status, balance and dealer endpoints."""

    def test_list_users_hides_password(self, client, admin_headers, user):
        response = client.get(f"{API}/users", headers=admin_headers)

        assert response.status_code == 200
        users = response.json()
        assert len(users) == 1
        assert users[0]["id"] == user.id
        assert users[0]["email"] == "dealer@example.com"
        assert users[0]["availableBalance"] == 25.0
        assert users[0]["isDealer"] is False
        assert users[0]["allowedCarriers"] == []
        assert "passwordHash" not in users[0]
        assert "password_hash" not in users[0]

    def test_block_user(self, client, admin_headers, user):
        response = client.put(f"{API}/users/{user.id}/status", json={"status": "blocked"}, headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["msg"] == "User status updated successfully"
        assert data["updatedUser"]["status"] == "blocked"

    def test_invalid_status(self, client, admin_headers, user):
        response = client.put(f"{API}/users/{user.id}/status", json={"status": "deleted"}, headers=admin_headers)

        assert response.status_code == 400

    def test_status_unknown_user(self, client, admin_headers):
        response = client.put(f"{API}/users/missing/status", json={"status": "active"}, headers=admin_headers)

        assert response.status_code == 404
        assert response.json() == {"msg": "User not found"}

    def test_negative_balance(self, client, admin_headers, user):
        response = client.put(
            f"{API}/users/{user.id}/balance",
            json={"availableBalance": -12.5},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["msg"] == "User balance updated successfully"
        assert data["updatedUser"]["availableBalance"] == -12.5

    @pytest.mark.parametrize("literal", ["Infinity", "-Infinity", "NaN"])
    def test_non_finite_balance_rejected(self, client, admin_headers, user, literal):
        """Test non-finite JSON numbers are refused and the stored balance is untouched."""
        response = client.put(
            f"{API}/users/{user.id}/balance",
            content=f'{{"availableBalance": {literal}}}',
            headers={**admin_headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert "msg" in response.json()

        users = client.get(f"{API}/users", headers=admin_headers).json()
        assert users[0]["availableBalance"] == 25.0

    def test_balance_unknown_user(self, client, admin_headers):
        response = client.put(f"{API}/users/missing/balance", json={"availableBalance": 1}, headers=admin_headers)

        assert response.status_code == 404

    def test_set_dealer(self, client, user):
        response = client.put(f"{API}/{user.id}/is-dealer", json={"isDealer": True})

        assert response.status_code == 200
        data = response.json()
        assert data["msg"] == "User updated successfully"
        assert data["user"]["isDealer"] is True

    def test_dealer_flag_must_be_boolean(self, client, user):
        response = client.put(f"{API}/{user.id}/is-dealer", json={"isDealer": "yes"})

        assert response.status_code == 400
        assert response.json()["msg"] == "isDealer must be a boolean value (true or false)."

    def test_dealer_unknown_user(self, client):
        response = client.put(f"{API}/missing/is-dealer", json={"isDealer": False})

        assert response.status_code == 404


class TestPermissionEndpoints:
    """Tests for carrier and vendor permission endpoints."""

    def test_carrier_and_vendor_flow(self, client, admin_headers, user):
        add = client.post(f"{API}/add-carrier", json={"userId": user.id, "carrier": "FedEx"}, headers=admin_headers)
        assert add.status_code == 200
        assert add.json()["msg"] == "Carrier added successfully"

        vendor = client.post(
            f"{API}/add-vendor",
            json={"userId": user.id, "carrier": "FedEx", "vendor": "Acme"},
            headers=admin_headers,
        )
        assert vendor.status_code == 200

        status_resp = client.put(
            f"{API}/update-carrier-status",
            json={"userId": user.id, "carrier": "FedEx", "status": True},
            headers=admin_headers,
        )
        assert status_resp.json()["msg"] == "Carrier status updated"

        vendor_status = client.put(
            f"{API}/update-vendor-status",
            json={"userId": user.id, "carrier": "FedEx", "vendor": "Acme", "status": False},
            headers=admin_headers,
        )
        assert vendor_status.status_code == 200
        assert vendor_status.json()["user"]["allowedCarriers"] == [
            {"carrier": "FedEx", "status": True, "allowedVendors": [{"name": "Acme", "status": False}]},
        ]

    def test_duplicate_carrier(self, client, admin_headers, user):
        body = {"userId": user.id, "carrier": "FedEx"}
        client.post(f"{API}/add-carrier", json=body, headers=admin_headers)

        response = client.post(f"{API}/add-carrier", json=body, headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"msg": "Carrier already exists"}

    def test_vendor_on_unknown_carrier(self, client, admin_headers, user):
        response = client.post(
            f"{API}/add-vendor",
            json={"userId": user.id, "carrier": "DHL", "vendor": "Acme"},
            headers=admin_headers,
        )

        assert response.status_code == 404
        assert response.json() == {"msg": "Carrier not found"}

    def test_replace_carriers(self, client, admin_headers, user):
        response = client.put(
            f"{API}/{user.id}/carriers",
            json={"allowedCarriers": [
                {"carrier": "UPS", "status": True, "allowedVendors": ["Acme"]},
                {"carrier": "DHL"},
            ]},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["msg"] == "Carriers updated successfully!"
        assert data["user"]["allowedCarriers"] == [
            {"carrier": "UPS", "status": True, "allowedVendors": [{"name": "Acme", "status": True}]},
            {"carrier": "DHL", "status": False, "allowedVendors": []},
        ]

    def test_replace_carriers_unknown_user(self, client, admin_headers):
        response = client.put(f"{API}/missing/carriers", json={"allowedCarriers": []}, headers=admin_headers)

        assert response.status_code == 404


class TestShipmentEndpoints:
    """Tests for the shipment pool endpoints."""

    ROWS = [
        {"Carrier": "UPS", "tracking": "1Z1", "labelType": "thermal"},
        {"Carrier": "UPS", "tracking": "1Z2", "labelType": "thermal"},
    ]

    def test_upload_read_pull(self, client):
        upload = client.post(f"{API}/upload-shipments", json={"rows": self.ROWS})
        assert upload.status_code == 200
        assert upload.json() == {"msg": "Shipments saved successfully", "count": 2}

        listing = client.get(f"{API}/read/shipts")
        assert listing.status_code == 200
        assert sorted(s["tracking"] for s in listing.json()) == ["1Z1", "1Z2"]
        assert listing.json()[0]["labelType"] == "thermal"

        pulled = []
        for _ in range(2):
            response = client.post(f"{API}/pull/shipts", json={"carrier": "UPS", "labelType": "thermal"})
            assert response.status_code == 200
            assert response.json()["msg"] == "Shipment retrieved and deleted successfully"
            pulled.append(response.json()["shipment"]["tracking"])
        assert sorted(pulled) == ["1Z1", "1Z2"]

        exhausted = client.post(f"{API}/pull/shipts", json={"carrier": "UPS", "labelType": "thermal"})
        assert exhausted.status_code == 404
        assert exhausted.json() == {"msg": "No matching shipment found"}
        assert client.get(f"{API}/read/shipts").json() == []

    def test_upload_without_rows(self, client):
        response = client.post(f"{API}/upload-shipments", json={"data": []})

        assert response.status_code == 400
        assert response.json()["msg"] == "No rows provided"

    def test_upload_with_bad_row(self, client):
        response = client.post(
            f"{API}/upload-shipments",
            json={"rows": self.ROWS + [{"Carrier": "UPS", "labelType": "thermal"}]},
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["row"] == 2
        assert client.get(f"{API}/read/shipts").json() == []

    def test_pull_requires_fields(self, client):
        response = client.post(f"{API}/pull/shipts", json={"carrier": "UPS"})

        assert response.status_code == 400
        assert response.json()["msg"] == "labelType and carrier are required"


class TestServerErrors:
    """Tests that internal failures answer with a generic message."""

    def test_storage_failure(self, tmp_path):
        """Test a store error maps to 500 without leaking details."""
        uninitialized = Database(tmp_path / "empty.db")
        app.dependency_overrides[get_database] = lambda: uninitialized
        try:
            response = TestClient(app).get(f"{API}/read/shipts")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {"msg": "Server error"}

    def test_unexpected_exception(self, client):
        class BrokenPool:
            async def list_all(self):
                raise RuntimeError("disk on fire")

        app.dependency_overrides[get_shipment_pool] = lambda: BrokenPool()
        response = TestClient(app, raise_server_exceptions=False).get(f"{API}/read/shipts")

        assert response.status_code == 500
        assert response.json() == {"msg": "Server error"}
        assert "disk on fire" not in response.text


def test_health_reports_unavailable_database(tmp_path):
    """Test /health degrades instead of failing when the database is unreachable."""
    target = tmp_path / "as-directory.db"
    target.mkdir()
    db = Database(target)
    app.dependency_overrides[get_database] = lambda: db
    try:
        response = TestClient(app).get("/health")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json()["database"] == "unavailable"


class TestStartup:
    """Tests for the application lifespan checks."""

    @pytest.fixture
    def production_env(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.delenv("JWT_SECRET", raising=False)
        get_settings.cache_clear()
        yield
        monkeypatch.undo()
        get_settings.cache_clear()

    def test_default_secret_refused_in_production(self, production_env):
        assert get_settings().is_production

        with pytest.raises(RuntimeError, match="JWT_SECRET"):
            with TestClient(app):
                pass

    def test_run_uses_configured_address(self, monkeypatch):
        """Test run.py serves on HOST and PORT from the environment."""
        monkeypatch.setenv("HOST", "127.0.0.1")
        monkeypatch.setenv("PORT", "9123")
        get_settings.cache_clear()
        calls = []
        monkeypatch.setattr(run.uvicorn, "run", lambda target, **kwargs: calls.append((target, kwargs)))
        try:
            run.main()
        finally:
            monkeypatch.undo()
            get_settings.cache_clear()

        target, kwargs = calls[0]
        assert target == "shipdesk.main:app"
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9123
