"""Application-level behaviour: health, root, envelope for unknown routes, headers."""


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert body["database"] == "connected"
    assert set(body["caches"]) == {"geolocation", "qrCode"}


def test_root(client):
    body = client.get("/").json()
    assert body["success"] is True
    assert body["data"]["endpoints"]["pets"] == "/api/pets"


def test_unknown_route_envelope(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Endpoint no encontrado", "data": None}


def test_security_and_request_id_headers(client):
    resp = client.get("/")
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert "Content-Security-Policy" in resp.headers
    assert "Strict-Transport-Security" in resp.headers
    assert resp.headers.get("X-Request-ID")
