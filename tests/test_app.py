import pytest
from fastapi.testclient import TestClient

from pizza_service.main import app, settings
from pizza_service.repositories import orders


def test_root(client: TestClient) -> None:
    res = client.get("/")

    assert res.status_code == 200
    assert res.json()["message"] == "welcome to JWT Pizza"
    assert res.json()["version"]


def test_api_docs(client: TestClient) -> None:
    res = client.get("/api/docs")

    assert res.status_code == 200
    body = res.json()
    paths = {(e["method"], e["path"]) for e in body["endpoints"]}
    assert ("POST", "/api/auth") in paths
    assert ("PUT", "/api/order/menu") in paths
    assert ("DELETE", "/api/franchise/:franchiseId/store/:storeId") in paths
    assert all("requiresAuth" in e for e in body["endpoints"])
    assert set(body["config"]) == {"factory", "db"}


def test_unknown_endpoint(client: TestClient) -> None:
    res = client.get("/api/nothing-here")

    assert res.status_code == 404
    assert res.json()["message"] == "unknown endpoint"


def test_health(client: TestClient) -> None:
    res = client.get("/health")

    assert res.status_code == 200
    body = res.json()
    assert body["database"] == "healthy"
    assert body["factory_service"] == "mock: healthy"
    assert body["status"] == "operational"


def test_invalid_body_is_bad_request(client: TestClient) -> None:
    res = client.put("/api/auth", content="not json", headers={"Content-Type": "application/json"})

    assert res.status_code == 400
    assert "message" in res.json()


def _failing_get_menu(db):
    raise RuntimeError("menu table on fire")


def test_unhandled_error_hides_details(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(orders, "get_menu", _failing_get_menu)
    monkeypatch.setattr(settings, "debug", False)

    res = TestClient(app, raise_server_exceptions=False).get("/api/order/menu")

    assert res.status_code == 500
    assert res.json() == {"message": "An unexpected error occurred"}


def test_unhandled_error_details_in_debug(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(orders, "get_menu", _failing_get_menu)
    monkeypatch.setattr(settings, "debug", True)

    res = TestClient(app, raise_server_exceptions=False).get("/api/order/menu")

    assert res.status_code == 500
    assert res.json() == {"message": "menu table on fire"}
