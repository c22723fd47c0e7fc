"""Tests for payment and geocoding pass-throughs (outbound HTTP mocked)"""
from unittest.mock import patch

import httpx


def _response(status_code, payload, url="https://example.invalid"):
    return httpx.Response(status_code, json=payload, request=httpx.Request("POST", url))


def test_create_order(client):
    order = {"id": "order_123", "amount": 49900, "currency": "INR", "status": "created"}
    with patch("app.services.payments.httpx.post", return_value=_response(200, order)) as mock_post:
        response = client.post("/api/payment/create-order", json={"amount": 499})
    assert response.status_code == 200
    assert response.json() == order

    kwargs = mock_post.call_args.kwargs
    assert mock_post.call_args.args[0] == "https://api.razorpay.com/v1/orders"
    assert kwargs["json"]["amount"] == 49900
    assert kwargs["json"]["currency"] == "INR"
    assert kwargs["json"]["receipt"].startswith("receipt_")
    assert kwargs["auth"] == ("rzp_test_key", "rzp_test_secret")


def test_create_order_converts_fractional_rupees(client):
    with patch("app.services.payments.httpx.post", return_value=_response(200, {"id": "o"})) as mock_post:
        client.post("/api/payment/create-order", json={"amount": 19.99})
    assert mock_post.call_args.kwargs["json"]["amount"] == 1999


def test_create_order_gateway_error(client):
    with patch("app.services.payments.httpx.post", return_value=_response(401, {"error": "bad key"})):
        response = client.post("/api/payment/create-order", json={"amount": 10})
    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to create Razorpay order"}


def test_create_order_network_error(client):
    with patch("app.services.payments.httpx.post", side_effect=httpx.ConnectError("refused")):
        response = client.post("/api/payment/create-order", json={"amount": 10})
    assert response.status_code == 500


def test_create_order_rejects_non_positive_amount(client):
    assert client.post("/api/payment/create-order", json={"amount": 0}).status_code == 422


def test_reverse_geocode(client):
    payload = {"status": "OK", "results": [{"formatted_address": "Kochi, Kerala"}]}
    with patch("app.services.geocoding.httpx.get", return_value=_response(200, payload)) as mock_get:
        response = client.get("/api/location/reverse-geocode", params={"lat": 9.93, "lng": 76.26})
    assert response.status_code == 200
    assert response.json() == payload
    assert mock_get.call_args.kwargs["params"] == {"latlng": "9.93,76.26", "key": "test_maps_key"}


def test_reverse_geocode_failure(client):
    with patch("app.services.geocoding.httpx.get", side_effect=httpx.ReadTimeout("slow")):
        response = client.get("/api/location/reverse-geocode", params={"lat": 1, "lng": 2})
    assert response.status_code == 500
    assert response.json() == {"detail": "Reverse geocoding failed"}


def test_reverse_geocode_requires_coordinates(client):
    assert client.get("/api/location/reverse-geocode").status_code == 422


def test_health(client):
    response = client.get("/api/test")
    assert response.status_code == 200
    assert response.json()["message"] == "Server is working"
