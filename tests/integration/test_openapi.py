"""
Integration tests for OpenAPI documentation.

Verifies OpenAPI schema is correctly generated for all endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from src.api.main import app


@pytest.fixture
def client() -> TestClient:
    """Create test client for the application."""
    return TestClient(app)


@pytest.fixture
def schema(client: TestClient) -> dict:
    response = client.get("/openapi.json")
    assert response.status_code == 200
    return response.json()


class TestOpenAPISchema:
    """Tests for OpenAPI schema generation."""

    def test_openapi_title_and_description(self, schema: dict) -> None:
        assert schema["info"]["title"] == "namereg"
        assert "Escrowed Name Registry" in schema["info"]["description"]
        assert schema["info"]["version"] == "0.1.0"

    @pytest.mark.parametrize(
        ("path", "method"),
        [
            ("/v1/names/register", "post"),
            ("/v1/names/renew", "post"),
            ("/v1/names/transfer", "post"),
            ("/v1/names/withdraw", "post"),
            ("/v1/names/{name}", "get"),
            ("/v1/names/{name}/price", "get"),
            ("/v1/names/{name}/hash", "get"),
            ("/v1/names/{name}/pay-hash", "get"),
            ("/v1/names/{name}/receipt-hash", "get"),
            ("/v1/names/{name}/escrow", "get"),
            ("/v1/tx-counter", "get"),
            ("/v1/receipts", "get"),
            ("/v1/receipts/{receipt_id}", "get"),
        ],
    )
    def test_endpoint_documented(self, schema: dict, path: str, method: str) -> None:
        assert path in schema["paths"]
        assert method in schema["paths"][path]
        assert "v1" in schema["paths"][path][method].get("tags", [])

    def test_register_summary(self, schema: dict) -> None:
        assert schema["paths"]["/v1/names/register"]["post"]["summary"] == "Register a name"

    def test_register_request_schema(self, schema: dict) -> None:
        props = schema["components"]["schemas"]["RegisterRequest"]["properties"]
        assert {"name", "observed_counter", "value"} <= set(props)

    def test_caller_identity_security_scheme(self, schema: dict) -> None:
        """The caller identity header is documented as an API key scheme."""
        schemes = schema["components"]["securitySchemes"]
        header_schemes = [s for s in schemes.values() if s.get("in") == "header"]
        assert any(s["name"] == "X-Caller-Identity" for s in header_schemes)

    def test_v1_tag_in_schema(self, schema: dict) -> None:
        tag_names = [t["name"] for t in schema.get("tags", [])]
        assert "v1" in tag_names


class TestSwaggerUI:
    """Tests for Swagger UI availability."""

    def test_docs_endpoint_accessible(self, client: TestClient) -> None:
        response = client.get("/docs")
        assert response.status_code == 200
        assert "swagger" in response.text.lower()
