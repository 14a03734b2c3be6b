"""
Spacetime Backend: Exception Handler Tests
===========================================

What:  Error bodies produced outside the route-level handlers.
How:   A fresh app with one route that raises an unexpected exception.
"""

import pytest
from httpx import AsyncClient, ASGITransport

from app.main import create_app


@pytest.fixture
def failing_app():
    app = create_app()

    async def explode():
        raise RuntimeError("boom")

    app.add_api_route("/explode", explode, methods=["GET"])
    return app


class TestUnexpectedError:

    @pytest.mark.asyncio
    async def test_body_carries_request_id(self, failing_app):
        transport = ASGITransport(app=failing_app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/explode", headers={"X-Request-ID": "trace123"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "internal_server_error"
        assert body["request_id"] == "trace123"
        assert "boom" not in response.text
        assert response.headers["X-Request-ID"] == "trace123"

    @pytest.mark.asyncio
    async def test_generated_request_id(self, failing_app):
        transport = ASGITransport(app=failing_app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/explode")

        assert response.status_code == 500
        assert len(response.json()["request_id"]) == 8
