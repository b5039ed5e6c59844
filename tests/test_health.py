def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200

    payload = response.json()
    assert payload["status_code"] == 200
    assert payload["status"] == "success"
    assert payload["message"] == "Service is healthy"
    assert payload["data"] == {"status": "ok", "service": "SEO Page Analyzer"}


def test_root_info(client):
    response = client.get("/")
    assert response.status_code == 200
    payload = response.json()
    assert payload["app_name"] == "SEO Page Analyzer"
    assert payload["version"] == "1.0.0"
    assert payload["docs_url"] == "/docs"
    assert payload["api_base"] == "/api/v1"


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


def test_request_id_is_generated(client):
    response = client.get("/health")
    assert response.headers.get("X-Request-ID")
