import os
import tempfile
from collections.abc import Generator

# Configure a throwaway database before the application is imported
_TEST_DIR = tempfile.mkdtemp(prefix="pizza-test-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/pizza_test.db"
os.environ["ENV_MODE"] = "development"
os.environ["JWT_SECRET"] = "test-jwt-secret-for-the-pizza-service-suite"
os.environ["FACTORY_MOCK_FAILURE_RATE"] = "0"
os.environ.pop("FACTORY_API_KEY", None)
os.environ["DEFAULT_ADMIN_EMAIL"] = "a@jwt.com"
os.environ["DEFAULT_ADMIN_PASSWORD"] = "admin"

import pytest
from fastapi.testclient import TestClient

from pizza_service.main import app
from tests.utils import auth_headers, random_name, register_diner


@pytest.fixture(scope="module")
def client() -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="module")
def admin(client: TestClient) -> dict:
    """The seeded admin, logged in."""
    res = client.put("/api/auth", json={"email": "a@jwt.com", "password": "admin"})
    assert res.status_code == 200
    body = res.json()
    return {**body["user"], "token": body["token"], "headers": auth_headers(body["token"])}


@pytest.fixture(scope="module")
def admin_headers(admin: dict) -> dict[str, str]:
    return admin["headers"]


@pytest.fixture(scope="module")
def diner(client: TestClient) -> dict:
    """A freshly registered diner, logged in."""
    return register_diner(client)


@pytest.fixture(scope="module")
def diner_headers(diner: dict) -> dict[str, str]:
    return diner["headers"]


@pytest.fixture
def franchise(client: TestClient, admin: dict) -> Generator[dict, None, None]:
    """A franchise administered by the seeded admin, removed afterwards."""
    res = client.post(
        "/api/franchise",
        headers=admin["headers"],
        json={"name": random_name() + "franchise", "admins": [{"email": admin["email"]}]},
    )
    assert res.status_code == 200
    created = res.json()
    yield created
    client.delete(f"/api/franchise/{created['id']}", headers=admin["headers"])


@pytest.fixture
def store(client: TestClient, admin_headers: dict, franchise: dict) -> dict:
    res = client.post(
        f"/api/franchise/{franchise['id']}/store",
        headers=admin_headers,
        json={"name": random_name() + "store"},
    )
    assert res.status_code == 200
    return res.json()


@pytest.fixture
def menu_item(client: TestClient, admin_headers: dict) -> dict:
    description = random_name()
    res = client.put(
        "/api/order/menu",
        headers=admin_headers,
        json={"title": "Veggie", "description": description, "image": "pizza1.png", "price": 0.0038},
    )
    assert res.status_code == 200
    return next(item for item in res.json() if item["description"] == description)
