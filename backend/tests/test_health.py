def test_health_endpoints(client):
    assert client.get("/api/health").json() == {"status": "ok"}

    live = client.get("/api/health/live")
    assert live.status_code == 200
    assert live.json()["status"] == "ok"

    ready = client.get("/api/health/ready")
    assert ready.status_code in {200, 503}
    payload = ready.json()
    assert "database" in payload
    assert "missing_tables" in payload["database"]


def test_security_headers_are_set(client):
    response = client.get("/api/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


def test_request_id_is_echoed_or_generated(client):
    echoed = client.get("/api/health", headers={"X-Request-ID": "abc123"})
    assert echoed.headers["X-Request-ID"] == "abc123"

    generated = client.get("/api/health")
    assert len(generated.headers["X-Request-ID"]) == 32


def test_oversized_request_is_rejected(client, editor_headers):
    from timetable.main import settings

    response = client.post(
        "/api/teachers/",
        content=b"x",
        headers={**editor_headers, "Content-Length": str(settings.max_request_size_bytes + 1)},
    )
    assert response.status_code == 413
    assert response.json()["message"] == "Request body too large"
