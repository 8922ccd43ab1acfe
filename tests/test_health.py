def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "OK"
    assert isinstance(body["uptime"], int)
    assert body["timestamp"]


def test_api_health_reports_database(client):
    body = client.get("/api/health").json()
    assert body["status"] == "OK"
    assert body["database"] == "Connected"


def test_root_lists_endpoints(client):
    assert "POST /api/requests" in client.get("/").json()["endpoints"]
