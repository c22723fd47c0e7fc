"""Tests for the /api/cart endpoints"""
from datetime import timedelta

from app.schemas.cart import MAX_QUANTITY
from app.utils.security import create_access_token


def items(cart_json):
    return [(i["productId"], i["variantId"], i["quantity"]) for i in cart_json["items"]]


def test_requires_token(client):
    response = client.get("/api/cart")
    assert response.status_code == 401
    assert response.json()["detail"] == "Access denied. No token provided."


def test_rejects_garbage_token(client):
    response = client.get("/api/cart", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_rejects_expired_token(client, sample_user):
    token = create_access_token(subject=sample_user.email, expires_delta=timedelta(minutes=-5))
    response = client.get("/api/cart", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_rejects_token_for_unknown_user(client):
    token = create_access_token(subject="ghost@mirakle.in")
    response = client.get("/api/cart", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid user"


def test_get_without_cart_returns_empty_list(client, auth_headers):
    response = client.get("/api/cart", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == []


def test_save_merges_into_existing_cart(client, auth_headers, sample_user):
    first = client.post("/api/cart", json={"items": [{"productId": 1, "variantId": 1, "quantity": 2}]}, headers=auth_headers)
    assert first.status_code == 200

    response = client.post(
        "/api/cart",
        json={"items": [{"productId": 1, "variantId": 1, "quantity": 3}, {"productId": 2, "variantId": 2}]},
        headers=auth_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Cart saved successfully"
    assert body["cart"]["userId"] == sample_user.id
    assert items(body["cart"]) == [(1, 1, 5), (2, 2, 1)]

    listed = client.get("/api/cart", headers=auth_headers).json()
    assert listed == [
        {"productId": 1, "variantId": 1, "quantity": 5},
        {"productId": 2, "variantId": 2, "quantity": 1},
    ]


def test_save_rejects_malformed_items(client, auth_headers):
    response = client.post("/api/cart", json={"items": [{"variantId": 1}]}, headers=auth_headers)
    assert response.status_code == 422
    response = client.post("/api/cart", json={"items": [{"productId": 1, "quantity": 0}]}, headers=auth_headers)
    assert response.status_code == 422
    response = client.post("/api/cart", json={"items": [{"productId": 1, "quantity": 2 ** 63}]}, headers=auth_headers)
    assert response.status_code == 422
    response = client.post("/api/cart", json={"items": [{"productId": 1, "quantity": True}]}, headers=auth_headers)
    assert response.status_code == 422
    assert client.get("/api/cart", headers=auth_headers).json() == []


def test_save_beyond_quantity_cap(client, auth_headers):
    client.post("/api/cart", json={"items": [{"productId": 1, "quantity": MAX_QUANTITY}]}, headers=auth_headers)
    response = client.post("/api/cart", json={"items": [{"productId": 1}]}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == f"Quantity cannot exceed {MAX_QUANTITY}"
    assert client.get("/api/cart", headers=auth_headers).json()[0]["quantity"] == MAX_QUANTITY


def test_replace_overwrites(client, auth_headers):
    client.post("/api/cart", json={"items": [{"productId": 1, "quantity": 4}]}, headers=auth_headers)
    response = client.put("/api/cart", json={"items": [{"productId": 9, "variantId": 3, "quantity": 2}]}, headers=auth_headers)
    assert response.status_code == 200
    assert items(response.json()["cart"]) == [(9, 3, 2)]


def test_replace_rejects_duplicate_lines(client, auth_headers):
    response = client.put(
        "/api/cart",
        json={"items": [{"productId": 9, "variantId": 3}, {"productId": 9, "variantId": 3}]},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert "Duplicate" in response.json()["detail"]


def test_clear_is_idempotent(client, auth_headers):
    client.post("/api/cart", json={"items": [{"productId": 1}]}, headers=auth_headers)
    for _ in range(2):
        response = client.delete("/api/cart", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {"message": "Cart cleared"}
    assert client.get("/api/cart", headers=auth_headers).json() == []


def test_carts_are_per_user(client, make_user, headers_for):
    alice = make_user(email="alice@mirakle.in")
    bob = make_user(email="bob@mirakle.in")
    client.post("/api/cart", json={"items": [{"productId": 1}]}, headers=headers_for(alice))
    assert client.get("/api/cart", headers=headers_for(bob)).json() == []
    client.delete("/api/cart", headers=headers_for(bob))
    assert len(client.get("/api/cart", headers=headers_for(alice)).json()) == 1


def test_add_single_item(client, auth_headers, sample_product):
    variant_id = sample_product.variants[1].id
    payload = {"productId": sample_product.id, "variantId": variant_id}
    client.post("/api/cart/items", json=payload, headers=auth_headers)
    response = client.post("/api/cart/items", json=payload, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Added to cart"
    assert items(response.json()["cart"]) == [(sample_product.id, variant_id, 2)]


def test_add_single_item_unknown_product(client, auth_headers):
    response = client.post("/api/cart/items", json={"productId": 404, "variantId": 1}, headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Product not found"
