import logging

import pytest
from fastapi.testclient import TestClient

from pizza_service.main import app
from pizza_service.services.factory import MockFactoryService, get_factory_service
from tests.utils import assert_valid_jwt, random_name, register_diner


def test_get_menu(client: TestClient, menu_item: dict) -> None:
    res = client.get("/api/order/menu")

    assert res.status_code == 200
    assert isinstance(res.json(), list)
    assert menu_item in res.json()


def test_add_menu_item_as_admin(client: TestClient, admin_headers: dict) -> None:
    new_item = {"title": random_name(), "description": random_name(), "image": "none.png", "price": 1.5}

    res = client.put("/api/order/menu", headers=admin_headers, json=new_item)

    assert res.status_code == 200
    added = next(item for item in res.json() if item["description"] == new_item["description"])
    assert added["price"] == 1.5
    assert added["title"] == new_item["title"]
    assert added["image"] == "none.png"
    assert isinstance(added["id"], int)


def test_add_menu_item_non_admin(client: TestClient, diner_headers: dict) -> None:
    new_item = {"title": random_name(), "description": random_name(), "image": "none.png", "price": 1.5}

    res = client.put("/api/order/menu", headers=diner_headers, json=new_item)

    assert res.status_code == 403
    assert res.json()["message"] == "unable to add menu item"


def test_add_menu_item_invalid(client: TestClient, admin_headers: dict) -> None:
    res = client.put("/api/order/menu", headers=admin_headers, json={"title": "no price"})

    assert res.status_code == 400


def test_create_order(
    client: TestClient,
    diner_headers: dict,
    franchise: dict,
    store: dict,
    menu_item: dict,
) -> None:
    order = {
        "franchiseId": franchise["id"],
        "storeId": store["id"],
        "items": [{"menuId": menu_item["id"], "description": "Veggie", "price": 0.05}],
    }

    res = client.post("/api/order", headers=diner_headers, json=order)

    assert res.status_code == 200
    body = res.json()
    assert isinstance(body["order"]["id"], int)
    assert body["order"]["franchiseId"] == franchise["id"]
    assert body["order"]["storeId"] == store["id"]
    assert len(body["order"]["items"]) == 1
    assert body["order"]["items"][0]["description"] == "Veggie"
    assert body["order"]["items"][0]["menuId"] == menu_item["id"]
    assert body["followLinkToEndChaos"]
    assert_valid_jwt(body["jwt"])


def test_create_order_factory_failure(
    client: TestClient,
    franchise: dict,
    store: dict,
    menu_item: dict,
) -> None:
    user = register_diner(client)
    order = {
        "franchiseId": franchise["id"],
        "storeId": store["id"],
        "items": [{"menuId": menu_item["id"], "description": "Veggie", "price": 0.05}],
    }

    app.dependency_overrides[get_factory_service] = lambda: MockFactoryService(failure_rate=1.0)
    try:
        res = client.post("/api/order", headers=user["headers"], json=order)
    finally:
        app.dependency_overrides.pop(get_factory_service, None)

    assert res.status_code == 500
    assert res.json()["message"] == "Failed to fulfill order at factory"
    assert res.json()["followLinkToEndChaos"].startswith(MockFactoryService.REPORT_URL)

    # The order is kept even though the factory failed
    history = client.get("/api/order", headers=user["headers"]).json()
    assert len(history["orders"]) == 1


def test_create_order_logs_factory_time(
    client: TestClient,
    diner_headers: dict,
    franchise: dict,
    store: dict,
    menu_item: dict,
    caplog: pytest.LogCaptureFixture,
) -> None:
    order = {
        "franchiseId": franchise["id"],
        "storeId": store["id"],
        "items": [{"menuId": menu_item["id"], "description": "Veggie", "price": 0.05}],
    }
    caplog.set_level(logging.INFO, logger="pizza_service.routers.order")

    res = client.post("/api/order", headers=diner_headers, json=order)

    assert res.status_code == 200
    assert f"Order #{res.json()['order']['id']} fulfilled by factory in" in caplog.text


def test_create_order_unknown_menu_item(
    client: TestClient,
    diner_headers: dict,
    franchise: dict,
    store: dict,
) -> None:
    order = {
        "franchiseId": franchise["id"],
        "storeId": store["id"],
        "items": [{"menuId": 999999, "description": "Ghost", "price": 1.0}],
    }

    res = client.post("/api/order", headers=diner_headers, json=order)

    assert res.status_code == 404
    assert res.json()["message"] == "unknown menu item 999999"


def test_create_order_store_not_in_franchise(
    client: TestClient,
    diner_headers: dict,
    franchise: dict,
    store: dict,
    menu_item: dict,
) -> None:
    order = {
        "franchiseId": franchise["id"] + 1000,
        "storeId": store["id"],
        "items": [{"menuId": menu_item["id"], "description": "Veggie", "price": 0.05}],
    }

    res = client.post("/api/order", headers=diner_headers, json=order)

    assert res.status_code == 404
    assert res.json()["message"] == "unknown store"


def test_create_order_requires_auth(client: TestClient) -> None:
    order = {
        "franchiseId": 1,
        "storeId": 1,
        "items": [{"menuId": 1, "description": "Veggie", "price": 0.05}],
    }

    res = client.post("/api/order", json=order)

    assert res.status_code == 401


def test_get_orders(
    client: TestClient,
    franchise: dict,
    store: dict,
    menu_item: dict,
) -> None:
    user = register_diner(client)
    order = {
        "franchiseId": franchise["id"],
        "storeId": store["id"],
        "items": [
            {"menuId": menu_item["id"], "description": "Veggie", "price": 0.05},
            {"menuId": menu_item["id"], "description": "Veggie", "price": 0.05},
        ],
    }
    client.post("/api/order", headers=user["headers"], json=order)

    res = client.get("/api/order", headers=user["headers"])

    assert res.status_code == 200
    body = res.json()
    assert body["dinerId"] == user["id"]
    assert body["page"] == 1
    assert len(body["orders"]) == 1
    placed = body["orders"][0]
    assert placed["franchiseId"] == franchise["id"]
    assert placed["storeId"] == store["id"]
    assert "date" in placed
    assert [item["description"] for item in placed["items"]] == ["Veggie", "Veggie"]


def test_get_orders_pages(
    client: TestClient,
    franchise: dict,
    store: dict,
    menu_item: dict,
) -> None:
    user = register_diner(client)
    order = {
        "franchiseId": franchise["id"],
        "storeId": store["id"],
        "items": [{"menuId": menu_item["id"], "description": "Veggie", "price": 0.05}],
    }
    for _ in range(11):
        client.post("/api/order", headers=user["headers"], json=order)

    first = client.get("/api/order?page=1", headers=user["headers"]).json()
    second = client.get("/api/order?page=2", headers=user["headers"]).json()

    assert len(first["orders"]) == 10
    assert len(second["orders"]) == 1
    assert second["page"] == 2
    assert second["orders"][0]["id"] > first["orders"][-1]["id"]


def test_get_orders_other_diners_are_private(client: TestClient, diner_headers: dict) -> None:
    user = register_diner(client)

    res = client.get("/api/order", headers=user["headers"])

    assert res.json()["orders"] == []
