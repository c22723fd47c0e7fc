"""Tests for the address book"""

HOME = {"name": "Asha", "phone": "9876543210", "line1": "12 MG Road", "city": "Kochi", "pincode": "682001"}


def test_empty_address_book(client, auth_headers):
    response = client.get("/api/user/address", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["addresses"] == []


def test_add_and_list(client, auth_headers):
    response = client.post("/api/user/address", json=HOME, headers=auth_headers)
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Address added"
    assert len(body["addresses"]) == 1
    assert body["addresses"][0]["type"] == "HOME"
    assert body["addresses"][0]["city"] == "Kochi"


def test_phone_required(client, auth_headers):
    payload = {k: v for k, v in HOME.items() if k != "phone"}
    assert client.post("/api/user/address", json=payload, headers=auth_headers).status_code == 422


def test_single_default(client, auth_headers):
    client.post("/api/user/address", json={**HOME, "isDefault": True}, headers=auth_headers)
    body = client.post(
        "/api/user/address", json={**HOME, "city": "Chennai", "type": "WORK", "isDefault": True}, headers=auth_headers
    ).json()
    defaults = [a for a in body["addresses"] if a["isDefault"]]
    assert [a["city"] for a in defaults] == ["Chennai"]
    # Default address is listed first
    assert body["addresses"][0]["city"] == "Chennai"


def test_update_keeps_default_flag(client, auth_headers):
    body = client.post("/api/user/address", json={**HOME, "isDefault": True}, headers=auth_headers).json()
    address_id = body["addresses"][0]["id"]
    body = client.put(
        f"/api/user/address/{address_id}", json={**HOME, "landmark": "Near park", "isDefault": True}, headers=auth_headers
    ).json()
    assert body["addresses"][0]["isDefault"] is True
    assert body["addresses"][0]["landmark"] == "Near park"


def test_delete(client, auth_headers):
    body = client.post("/api/user/address", json=HOME, headers=auth_headers).json()
    address_id = body["addresses"][0]["id"]
    response = client.delete(f"/api/user/address/{address_id}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Address deleted", "addresses": []}


def test_cannot_touch_other_users_address(client, auth_headers, make_user, headers_for):
    other = make_user(email="other@mirakle.in")
    body = client.post("/api/user/address", json=HOME, headers=headers_for(other)).json()
    address_id = body["addresses"][0]["id"]
    response = client.delete(f"/api/user/address/{address_id}", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Address not found"
