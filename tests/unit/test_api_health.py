"""Tests for health check endpoint."""
import requests


def test_health_ok(fake_idp, client):
    fake_idp.reply("GET", fake_idp.urls.health(), 200, text="")

    response = client.get("/health")

    assert response.status_code == 200
    assert response.data == b""
    assert response.content_type == "application/json"


def test_health_repeatable_without_auth(fake_idp, client):
    fake_idp.reply("GET", fake_idp.urls.health(), 200, text="")

    statuses = [client.get("/health").status_code for _ in range(3)]

    assert statuses == [200, 200, 200]
    assert len(fake_idp.calls) == 3
    assert all("Authorization" not in c["headers"] for c in fake_idp.calls)


def test_health_idp_error(fake_idp, client):
    fake_idp.reply("GET", fake_idp.urls.health(), 503, text="Service Unavailable")

    response = client.get("/health")

    assert response.status_code == 500
    assert response.get_json() == {"code": "10000", "message": "Service Unavailable"}


def test_health_idp_unreachable(fake_idp, client):
    def unreachable(_request):
        raise requests.ConnectionError("connection refused")

    fake_idp.on("GET", fake_idp.urls.health(), unreachable)

    response = client.get("/health")

    assert response.status_code == 500
    assert response.get_json()["code"] == "10000"
