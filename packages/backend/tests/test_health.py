"""Health endpoint and unknown-route tests."""

import pytest


@pytest.mark.asyncio
async def test_health_returns_ok(client):
    """Health endpoint should return server status, version and DB state."""
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["message"] == "Server is running"
    assert data["database"] == "ok"
    assert "version" in data
    assert "timestamp" in data


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(client):
    resp = await client.get("/api/nowhere")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Route /api/nowhere not found"}


@pytest.mark.asyncio
async def test_health_hides_database_error_text(client):
    from sqlalchemy.exc import OperationalError

    from realfolio.db.engine import get_db
    from realfolio.main import app

    class BrokenSession:
        async def execute(self, *args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("password authentication failed for user realfolio"))

    async def broken_db():
        yield BrokenSession()

    app.dependency_overrides[get_db] = broken_db
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["database"] == "error"
    assert "password" not in resp.text
