"""Tests for contact messages"""
from unittest.mock import patch

from app.utils import security

MESSAGE = {"name": "Ravi", "email": "ravi@gmail.com", "message": "Do you ship to Pune?"}


def test_submit_saves_and_notifies(client, admin_headers):
    with patch("app.routers.contact.notify") as mock_notify:
        response = client.post("/api/contact", json=MESSAGE)
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Message saved successfully"}
    mock_notify.assert_called_once()
    assert mock_notify.call_args.args[0] == "shop@mirakle.in"
    assert mock_notify.call_args.kwargs["reply_to"] == "ravi@gmail.com"

    inbox = client.get("/api/contact", headers=admin_headers).json()
    assert inbox["success"] is True
    assert inbox["messages"][0]["status"] == "unread"


def test_email_failure_does_not_fail_submission(client):
    smtp_settings = {"EMAIL_BACKEND": "smtp", "CONTACT_EMAIL": "shop@mirakle.in", "CONTACT_PASSWORD": "pw"}
    with patch.multiple(security.settings, **smtp_settings), \
            patch("app.utils.security.smtplib.SMTP", side_effect=OSError("down")) as mock_smtp:
        response = client.post("/api/contact", json=MESSAGE)
    assert response.status_code == 200
    mock_smtp.assert_called_once()


def test_missing_fields(client):
    assert client.post("/api/contact", json={"name": "Ravi"}).status_code == 422


def test_inbox_is_admin_only(client, auth_headers):
    assert client.get("/api/contact", headers=auth_headers).status_code == 403


def test_update_status(client, admin_headers):
    client.post("/api/contact", json=MESSAGE)
    message_id = client.get("/api/contact", headers=admin_headers).json()["messages"][0]["id"]
    response = client.put(f"/api/contact/{message_id}/status", json={"status": "responded"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "responded"

    bad = client.put(f"/api/contact/{message_id}/status", json={"status": "archived"}, headers=admin_headers)
    assert bad.status_code == 422
