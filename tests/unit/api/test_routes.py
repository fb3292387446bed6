from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

import tableside.api.routes.admin as admin_routes
import tableside.api.routes.menu as menu_routes
import tableside.api.routes.orders as orders_routes
import tableside.api.routes.tables as tables_routes
from tableside.api.main import app
from tableside.application.use_cases.create_order import CreateOrder
from tableside.application.use_cases.end_table_session import EndTableSession
from tableside.application.use_cases.get_menu import GetMenu
from tableside.application.use_cases.get_order import GetOrder
from tableside.application.use_cases.list_tables import ListTables
from tableside.application.use_cases.menu_admin import AddCategory, AddMenuItem, UpdateMenuItem
from tableside.application.use_cases.table_orders import TableOrders
from tableside.application.use_cases.update_order_status import UpdateOrderStatus


@pytest.fixture
def client(monkeypatch, store, uow_factory, cache) -> TestClient:
    category = store.add_category("Coffee")
    store.add_item(category.category_id, "Latte", 400, preparation_time=6)
    store.add_item(category.category_id, "Mocha", 450, is_available=False)

    monkeypatch.setattr(menu_routes, "_get_menu_use_case", lambda: GetMenu(uow_factory, cache))
    monkeypatch.setattr(orders_routes, "_create_order_use_case", lambda: CreateOrder(uow_factory))
    monkeypatch.setattr(orders_routes, "_get_order_use_case", lambda: GetOrder(uow_factory))
    monkeypatch.setattr(
        orders_routes,
        "_update_order_status_use_case",
        lambda: UpdateOrderStatus(uow_factory),
    )
    monkeypatch.setattr(tables_routes, "_list_tables_use_case", lambda: ListTables(uow_factory))
    monkeypatch.setattr(tables_routes, "_table_orders_use_case", lambda: TableOrders(uow_factory))
    monkeypatch.setattr(
        tables_routes,
        "_end_table_session_use_case",
        lambda: EndTableSession(uow_factory),
    )
    monkeypatch.setattr(
        admin_routes,
        "_add_category_use_case",
        lambda: AddCategory(uow_factory, cache),
    )
    monkeypatch.setattr(
        admin_routes,
        "_add_menu_item_use_case",
        lambda: AddMenuItem(uow_factory, cache),
    )
    monkeypatch.setattr(
        admin_routes,
        "_update_menu_item_use_case",
        lambda: UpdateMenuItem(uow_factory, cache),
    )
    return TestClient(app)


def test_menu_endpoint(client: TestClient) -> None:
    response = client.get("/v1/menu", params={"table": 4})

    assert response.status_code == 200
    body = response.json()
    assert body["tableNumber"] == 4
    assert [item["name"] for item in body["categories"][0]["items"]] == ["Latte", "Mocha"]
    assert body["categories"][0]["items"][0]["preparationTime"] == 6


def test_menu_endpoint_rejects_bad_table(client: TestClient) -> None:
    response = client.get("/v1/menu", params={"table": 0})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_TABLE_NUMBER"

    response = client.get("/v1/menu", params={"table": "abc"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"


def test_order_lifecycle_over_http(client: TestClient) -> None:
    created = client.post(
        "/v1/orders",
        json={"table": 4, "items": [{"menuItemId": 1, "quantity": 2}]},
        headers={"X-Request-Id": "req-123"},
    )
    assert created.status_code == 201
    assert created.headers["X-Request-Id"] == "req-123"
    receipt = created.json()
    assert receipt["status"] == "pending"
    assert (receipt["subtotal"], receipt["tax"], receipt["total"]) == (800, 40, 840)
    assert receipt["guestToken"].startswith("guest_")
    order_id = receipt["orderId"]

    detail = client.get(f"/v1/orders/{order_id}")
    assert detail.status_code == 200
    assert detail.json()["tableNumber"] == 4
    assert detail.json()["items"][0] == {
        "menuItemId": 1,
        "name": "Latte",
        "quantity": 2,
        "price": 400,
        "total": 800,
    }

    updated = client.patch(f"/v1/orders/{order_id}/status", json={"status": "ready"})
    assert updated.status_code == 200
    assert updated.json() == {"id": order_id, "status": "ready"}

    listed = client.get("/v1/tables/4/orders", params={"guestToken": receipt["guestToken"]})
    assert listed.status_code == 200
    assert [summary["id"] for summary in listed.json()] == [order_id]
    assert listed.json()[0]["itemCount"] == 2

    ended = client.post("/v1/tables/4/end-session")
    assert ended.status_code == 200
    assert ended.json() == {"success": True}
    assert client.get("/v1/tables/4/orders").json() == []

    tables = client.get("/v1/tables")
    assert tables.status_code == 200
    assert tables.json()[0]["tableNumber"] == 4


def test_unavailable_item_maps_to_400(client: TestClient, store) -> None:
    response = client.post(
        "/v1/orders",
        json={"table": 4, "items": [{"menuItemId": 2, "quantity": 1}]},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"]["code"] == "MENU_ITEM_UNAVAILABLE"
    assert body["error"]["details"] == {"menuItemIds": [2]}
    assert "requestId" in body
    assert store.orders == {}


def test_empty_cart_maps_to_400(client: TestClient) -> None:
    response = client.post("/v1/orders", json={"table": 4, "items": []})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "EMPTY_CART"


def test_out_of_range_numbers_map_to_400(client: TestClient, store) -> None:
    too_big = 2**31

    response = client.post(
        "/v1/orders",
        json={"table": 4, "items": [{"menuItemId": 1, "quantity": too_big}]},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_CART_LINE"

    response = client.get(f"/v1/tables/{too_big}/orders")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_TABLE_NUMBER"

    response = client.get("/v1/menu", params={"table": too_big})
    assert response.json()["error"]["code"] == "INVALID_TABLE_NUMBER"

    response = client.delete(f"/v1/admin/categories/{too_big}")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"

    response = client.post(
        "/v1/orders",
        json={
            "table": 4,
            "items": [{"menuItemId": 1, "quantity": 1}],
            "guestToken": "g" * 256,
        },
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_GUEST_TOKEN"
    assert store.orders == {}


def test_unknown_order_maps_to_404(client: TestClient) -> None:
    response = client.get("/v1/orders/ord_missing")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "ORDER_NOT_FOUND"


def test_unknown_table_maps_to_404(client: TestClient) -> None:
    assert client.get("/v1/tables/77/orders").status_code == 404
    response = client.post("/v1/tables/77/end-session")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "TABLE_NOT_FOUND"


def test_status_errors(client: TestClient) -> None:
    order_id = client.post(
        "/v1/orders",
        json={"table": 4, "items": [{"menuItemId": 1, "quantity": 1}]},
    ).json()["orderId"]

    bogus = client.patch(f"/v1/orders/{order_id}/status", json={"status": "bogus"})
    assert bogus.status_code == 400
    assert bogus.json()["error"]["code"] == "INVALID_ORDER_STATUS"

    rejected = client.patch(f"/v1/orders/{order_id}/status", json={"status": "rejected"})
    assert rejected.status_code == 200
    reopened = client.patch(f"/v1/orders/{order_id}/status", json={"status": "pending"})
    assert reopened.status_code == 409
    assert reopened.json()["error"]["code"] == "INVALID_ORDER_TRANSITION"


def test_admin_endpoints(client: TestClient, cache) -> None:
    cache.values["menu:catalog"] = "{}"

    category = client.post("/v1/admin/categories", json={"name": "Tea"})
    assert category.status_code == 201
    category_id = category.json()["id"]

    item = client.post(
        "/v1/admin/menu-items",
        json={"categoryId": category_id, "name": "Sencha", "price": 300},
    )
    assert item.status_code == 201
    assert item.json()["isAvailable"] is True

    patched = client.patch(f"/v1/admin/menu-items/{item.json()['id']}", json={"price": 320})
    assert patched.status_code == 200
    assert patched.json()["price"] == 320

    missing = client.post(
        "/v1/admin/menu-items",
        json={"categoryId": 999, "name": "Ghost", "price": 1},
    )
    assert missing.status_code == 400
    assert missing.json()["error"]["code"] == "INVALID_MENU_CATEGORY"
    assert "menu:catalog" not in cache.values
