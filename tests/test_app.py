async def test_health_reports_database(client):
    response = await client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["checks"]["database"] == "connected"


async def test_root_lists_endpoints(client):
    body = (await client.get("/")).json()
    assert body["endpoints"]["reports"] == "/api/reports"


async def test_correlation_id_is_generated_when_absent(client):
    response = await client.get("/health")
    assert response.headers["X-Correlation-ID"]


async def test_errors_carry_envelope(client):
    response = await client.get("/api/projects/12345", headers={"X-Correlation-ID": "trace-1"})

    assert response.status_code == 404
    body = response.json()
    assert body["detail"] == "Project with id '12345' not found"
    assert body["correlation_id"] == "trace-1"
    assert "timestamp" in body
    assert response.headers["X-Correlation-ID"] == "trace-1"


async def test_body_validation_errors_carry_envelope(client):
    response = await client.post(
        "/api/companies", json={"name": "Acme", "email": "bad"}, headers={"X-Correlation-ID": "trace-9"}
    )

    assert response.status_code == 422
    body = response.json()
    assert body["detail"] == "Request validation failed"
    assert body["correlation_id"] == "trace-9"
    assert "timestamp" in body
    assert body["errors"][0]["loc"] == ["body", "email"]


async def test_path_parsing_errors_carry_envelope(client):
    response = await client.get("/api/companies/abc", headers={"X-Correlation-ID": "trace-10"})

    assert response.status_code == 422
    body = response.json()
    assert body["correlation_id"] == "trace-10"
    assert body["errors"][0]["loc"] == ["path", "company_id"]


async def test_unknown_route_and_method_carry_envelope(client):
    response = await client.get("/api/nowhere")
    assert response.status_code == 404
    assert response.json()["detail"] == "Not Found"
    assert response.json()["correlation_id"]

    response = await client.patch("/api/companies")
    assert response.status_code == 405
    assert "timestamp" in response.json()
    assert "GET" in response.headers["allow"]


async def test_cors_does_not_allow_credentials_by_default(client):
    response = await client.get("/health", headers={"Origin": "https://evil.example.com"})

    assert response.headers["access-control-allow-origin"] == "*"
    assert "access-control-allow-credentials" not in response.headers
