"""Integration tests for the HTTP endpoints via TestClient."""

import asyncio
from datetime import datetime

import pytest

from food_ordering.main import run_status_ticker


def _create_cart(client):
    """Helper: POST /carts and return the cart body."""
    response = client.post("/carts")
    assert response.status_code == 201
    return response.json()


def _add_item(client, cart_id, item_id="i101", qty=1, options=None):
    """Helper: POST /carts/{cart_id}/items."""
    body = {"itemId": item_id, "qty": qty}
    if options is not None:
        body["options"] = options
    return client.post(f"/carts/{cart_id}/items", json=body)


def _parse(ts):
    return datetime.fromisoformat(ts.replace("Z", "+00:00"))


class TestRootEndpoints:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["documentation"] == "/docs"

    def test_health(self, client):
        _create_cart(client)
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "operational"
        assert body["carts"] == 1
        assert body["orders"] == 0


class TestCatalogEndpoints:
    def test_list_outlets(self, client):
        response = client.get("/outlets")
        assert response.status_code == 200
        outlets = response.json()
        assert [o["id"] for o in outlets] == ["o1", "o2"]
        assert outlets[0]["etaMinutes"] == 15
        assert outlets[0]["isOpen"] is True
        assert outlets[0]["location"] == {"lat": 12.97, "lng": 77.59}
        assert outlets[0]["menus"] == [{"id": "m1", "title": "Breakfast"}]

    def test_get_outlet(self, client):
        response = client.get("/outlets/o2")
        assert response.status_code == 200
        assert response.json()["name"] == "Riverside Deli"

    def test_get_unknown_outlet(self, client):
        response = client.get("/outlets/o9")
        assert response.status_code == 404
        assert response.content == b""

    def test_get_menu(self, client):
        menu = client.get("/menus/m1").json()
        pancakes, omelette = menu["items"]
        assert pancakes["optionGroups"][0]["options"][0] == {
            "id": "op1", "name": "Maple Syrup", "price": 0.5,
        }
        assert pancakes["desc"] == "Fluffy stack with butter"
        assert "optionGroups" not in omelette
        assert "desc" not in omelette

    def test_unknown_menu_falls_back_to_first(self, client):
        response = client.get("/menus/zzz")
        assert response.status_code == 200
        assert response.json()["id"] == "m1"


class TestCartEndpoints:
    def test_create_cart(self, client):
        cart = _create_cart(client)
        assert cart["id"].startswith("c_")
        assert cart["currency"] == "USD"
        assert cart["lines"] == []
        assert cart["totals"] == {"subtotal": 0.0, "tax": 0.0, "deliveryFee": 0.0, "total": 0.0}

    def test_get_cart(self, client):
        cart = _create_cart(client)
        response = client.get(f"/carts/{cart['id']}")
        assert response.status_code == 200
        assert response.json() == cart

    def test_get_unknown_cart(self, client):
        response = client.get("/carts/c_nope")
        assert response.status_code == 404
        assert response.content == b""

    def test_add_item(self, client):
        cart = _create_cart(client)
        response = _add_item(client, cart["id"], "i101", 2, [{"id": "op1", "price": 0.5}])

        assert response.status_code == 201
        body = response.json()
        line = body["lines"][0]
        assert line["id"].startswith("l_")
        assert line["itemId"] == "i101"
        assert line["name"] == "Pancakes"
        assert line["unitPrice"] == 5.5
        assert line["qty"] == 2
        assert line["options"][0]["id"] == "op1"
        assert body["totals"] == {"subtotal": 12.0, "tax": 1.08, "deliveryFee": 2.0, "total": 15.08}

    def test_add_item_without_qty(self, client):
        cart = _create_cart(client)
        response = client.post(f"/carts/{cart['id']}/items", json={"itemId": "i102"})
        assert response.status_code == 201
        assert response.json()["lines"][0]["qty"] == 1

    def test_add_invalid_item(self, client):
        cart = _create_cart(client)
        response = _add_item(client, cart["id"], "i999")
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid itemId"}
        assert client.get(f"/carts/{cart['id']}").json()["lines"] == []

    def test_add_without_body(self, client):
        cart = _create_cart(client)
        response = client.post(f"/carts/{cart['id']}/items")
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid itemId"}

    def test_non_string_item_id_is_invalid(self, client):
        cart = _create_cart(client)
        response = client.post(f"/carts/{cart['id']}/items", json={"itemId": 101})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid itemId"}

    def test_non_object_body_is_invalid_item(self, client):
        cart = _create_cart(client)
        response = client.post(f"/carts/{cart['id']}/items", json=["i101"])
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid itemId"}

    def test_malformed_json_is_400(self, client):
        cart = _create_cart(client)
        response = client.post(
            f"/carts/{cart['id']}/items",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body"}

    def test_option_echoed_as_sent(self, client):
        cart = _create_cart(client)
        response = _add_item(client, cart["id"], "i101", 1, [{"price": 0.5}, {"id": "op2", "price": 1}])

        assert response.status_code == 201
        body = response.json()
        assert body["lines"][0]["options"] == [{"price": 0.5}, {"id": "op2", "price": 1.0}]
        assert body["totals"]["subtotal"] == 7.0

    def test_malformed_options_are_dropped(self, client):
        cart = _create_cart(client)
        response = _add_item(client, cart["id"], "i102", 1, "op1")
        assert response.status_code == 201
        assert response.json()["lines"][0]["options"] == []

    def test_add_to_unknown_cart_is_404_first(self, client):
        response = _add_item(client, "c_nope", "i999")
        assert response.status_code == 404
        assert response.content == b""

    def test_update_qty(self, client):
        cart = _create_cart(client)
        line_id = _add_item(client, cart["id"], "i102").json()["lines"][0]["id"]

        response = client.patch(f"/carts/{cart['id']}/items/{line_id}", json={"qty": "3"})

        assert response.status_code == 200
        body = response.json()
        assert body["lines"][0]["qty"] == 3
        assert body["totals"]["subtotal"] == 19.5

    @pytest.mark.parametrize(
        "qty, expected",
        [
            (-2, 1),
            (0.5, 1),
            ("0.5", 1),
            ("0", 1),
            (0, 2),
            ("", 2),
            (False, 2),
            ("many", 2),
            (None, 2),
        ],
    )
    def test_update_qty_edge_cases(self, client, qty, expected):
        cart = _create_cart(client)
        line_id = _add_item(client, cart["id"], "i102", 2).json()["lines"][0]["id"]

        response = client.patch(f"/carts/{cart['id']}/items/{line_id}", json={"qty": qty})

        assert response.status_code == 200
        assert response.json()["lines"][0]["qty"] == expected

    def test_update_unknown_line(self, client):
        cart = _create_cart(client)
        response = client.patch(f"/carts/{cart['id']}/items/l_nope", json={"qty": 2})
        assert response.status_code == 404

    def test_update_unknown_cart(self, client):
        response = client.patch("/carts/c_nope/items/l_nope", json={"qty": 2})
        assert response.status_code == 404

    def test_remove_line(self, client):
        cart = _create_cart(client)
        line_id = _add_item(client, cart["id"]).json()["lines"][0]["id"]

        response = client.delete(f"/carts/{cart['id']}/items/{line_id}")

        assert response.status_code == 204
        assert response.content == b""
        body = client.get(f"/carts/{cart['id']}").json()
        assert body["lines"] == []
        assert body["totals"]["total"] == 0.0

    def test_remove_absent_line_still_succeeds(self, client):
        cart = _create_cart(client)
        response = client.delete(f"/carts/{cart['id']}/items/l_nope")
        assert response.status_code == 204

    def test_remove_from_unknown_cart(self, client):
        response = client.delete("/carts/c_nope/items/l_nope")
        assert response.status_code == 404


class TestOrderEndpoints:
    def test_full_flow_until_delivered(self, client, clock):
        cart = _create_cart(client)
        _add_item(client, cart["id"], "i101", 2, [{"id": "op1", "price": 0.5}])

        response = client.post("/orders", json={"cartId": cart["id"], "outletId": "o1"})

        assert response.status_code == 201
        order = response.json()
        assert order["id"].startswith("ord_")
        assert order["cartId"] == cart["id"]
        assert order["outletId"] == "o1"
        assert order["status"] == "created"
        assert order["amount"] == {
            "currency": "USD", "subtotal": 12.0, "tax": 1.08, "deliveryFee": 2.0, "total": 15.08,
        }
        assert order["payment"] == {"method": "dummy", "status": "pending"}
        assert order["fulfillment"] == {"type": "delivery"}
        assert list(order["timeline"]) == ["createdAt"]

        clock.advance(2)
        assert client.get(f"/orders/{order['id']}").json()["status"] == "preparing"
        clock.advance(3)
        assert client.get(f"/orders/{order['id']}").json()["status"] == "out_for_delivery"
        clock.advance(4)
        delivered = client.get(f"/orders/{order['id']}").json()

        assert delivered["status"] == "delivered"
        timeline = delivered["timeline"]
        assert set(timeline) == {"createdAt", "confirmedAt", "dispatchedAt", "deliveredAt"}
        assert (_parse(timeline["deliveredAt"]) - _parse(timeline["createdAt"])).total_seconds() == 9
        assert delivered["amount"]["total"] == 15.08

    def test_payment_and_fulfillment_are_passed_through(self, client):
        cart = _create_cart(client)
        response = client.post("/orders", json={
            "cartId": cart["id"],
            "fulfillment": {"type": "pickup"},
            "payment": {"method": "card"},
        })
        order = response.json()
        assert order["fulfillment"] == {"type": "pickup"}
        assert order["payment"] == {"method": "card", "status": "pending"}

    def test_invalid_cart_id(self, client):
        response = client.post("/orders", json={"cartId": "c_never"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid cartId"}
        assert client.get("/health").json()["orders"] == 0

    def test_non_string_cart_id_is_invalid(self, client):
        response = client.post("/orders", json={"cartId": 5})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid cartId"}

    def test_malformed_payment_and_fulfillment_fall_back(self, client):
        cart = _create_cart(client)
        response = client.post("/orders", json={
            "cartId": cart["id"],
            "fulfillment": "pickup",
            "payment": "card",
        })
        assert response.status_code == 201
        order = response.json()
        assert order["fulfillment"] == {"type": "delivery"}
        assert order["payment"] == {"method": "dummy", "status": "pending"}

    def test_order_without_body(self, client):
        response = client.post("/orders")
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid cartId"}

    def test_get_unknown_order(self, client):
        response = client.get("/orders/ord_nope")
        assert response.status_code == 404
        assert response.content == b""

    def test_cart_changes_do_not_touch_order(self, client):
        cart = _create_cart(client)
        _add_item(client, cart["id"], "i102")
        order = client.post("/orders", json={"cartId": cart["id"]}).json()

        _add_item(client, cart["id"], "i101", 3)

        assert client.get(f"/orders/{order['id']}").json()["amount"] == order["amount"]


def test_status_ticker_fires_due_transitions(cart_service, order_service, clock):
    cart = cart_service.create_cart()
    order_service.create_order(cart.id)
    clock.advance(10)

    with pytest.raises(asyncio.TimeoutError):
        asyncio.run(asyncio.wait_for(run_status_ticker(order_service, 0.01), timeout=0.2))

    assert len(order_service.scheduler) == 0
