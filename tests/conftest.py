"""Pytest configuration and shared fixtures."""

import asyncio

import pytest
from fastapi.testclient import TestClient

from shipdesk.auth.security import create_access_token, hash_password
from shipdesk.main import app
from shipdesk.middleware.rate_limit import limiter
from shipdesk.models.user import User
from shipdesk.storage.database import Database, get_database
from shipdesk.storage.shipment_store import ShipmentStore
from shipdesk.storage.user_store import UserStore

# Cheap bcrypt cost for fixtures
TEST_BCRYPT_ROUNDS = 4


@pytest.fixture
def database(tmp_path) -> Database:
    """Fresh, initialized SQLite database per test."""
    db = Database(tmp_path / "shipdesk-test.db")
    asyncio.run(db.initialize())
    return db


@pytest.fixture
def user_store(database) -> UserStore:
    return UserStore(database)


@pytest.fixture
def shipment_store(database) -> ShipmentStore:
    return ShipmentStore(database)


@pytest.fixture
def client(database):
    """Test client bound to the per-test database."""
    app.dependency_overrides[get_database] = lambda: database
    limiter.reset()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def user(user_store) -> User:
    """A plain customer account."""
    return asyncio.run(
        user_store.create_user(
            email="dealer@example.com",
            password_hash=hash_password("customer-password", rounds=TEST_BCRYPT_ROUNDS),
            name="Dana Dealer",
            available_balance=25.0,
        )
    )


@pytest.fixture
def admin_headers() -> dict:
    token = create_access_token("admin-under-test", "admin")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers() -> dict:
    """Valid token that lacks the admin role."""
    token = create_access_token("customer-under-test", "user")
    return {"Authorization": f"Bearer {token}"}
