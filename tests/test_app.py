# =============================================================================
# INTEGRATION TESTS - application shell: root, health, middleware, errors
# =============================================================================

from conftest import API


class TestRootAndHealth:
    def test_root_welcome(self, client):
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Welcome to TechQuiz"
        assert data["health"] == f"{API}/health"

    def test_health(self, client):
        response = client.get(f"{API}/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_detailed_health(self, client):
        response = client.get(f"{API}/health/detailed")

        assert response.status_code == 200
        checks = response.json()["checks"]
        assert checks["database"]["status"] == "healthy"
        assert checks["redis"] == "disabled"
        assert "memory_percent" in checks["resources"]


class TestMiddleware:
    def test_request_id_is_generated(self, client):
        response = client.get(f"{API}/health")

        assert len(response.headers["X-Request-ID"]) == 32

    def test_request_id_is_echoed(self, client):
        response = client.get(f"{API}/quizzes", headers={"X-Request-ID": "trace-123"})

        assert response.headers["X-Request-ID"] == "trace-123"

    def test_unsafe_request_id_is_replaced(self, client):
        response = client.get(f"{API}/quizzes", headers={"X-Request-ID": "bad id with spaces"})

        assert response.headers["X-Request-ID"] != "bad id with spaces"

    def test_security_headers(self, client):
        response = client.get(f"{API}/quizzes")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "Content-Security-Policy" in response.headers
        assert "X-Process-Time" in response.headers


class TestErrorEnvelope:
    def test_unknown_route(self, client):
        response = client.get(f"{API}/nowhere")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "API endpoint not found"
        assert body["error"]["path"] == f"{API}/nowhere"
        assert body["error"]["method"] == "GET"

    def test_error_carries_request_id(self, client):
        response = client.get(f"{API}/quizzes/bad-id", headers={"X-Request-ID": "req-42"})

        assert response.status_code == 400
        assert response.json()["error"]["request_id"] == "req-42"

    def test_malformed_json_body(self, client):
        response = client.post(
            f"{API}/auth/login",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
