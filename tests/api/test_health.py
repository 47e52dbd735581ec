import pytest
from sqlalchemy.exc import OperationalError
from unittest.mock import AsyncMock

from tuning_backend.boundary.db import get_async_db


@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Server Healthy"}


@pytest.mark.asyncio
async def test_health_check_db(client):
    response = await client.get("/api/v1/health/db")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Database connection OK"}


@pytest.mark.asyncio
async def test_health_check_db_unavailable(app, client):
    broken = AsyncMock()
    broken.execute.side_effect = OperationalError("SELECT 1", {}, Exception("down"))
    app.dependency_overrides[get_async_db] = lambda: broken

    response = await client.get("/api/v1/health/db")

    assert response.status_code == 503


@pytest.mark.asyncio
async def test_correlation_id_is_echoed(client):
    response = await client.get("/api/v1/health", headers={"X-Correlation-ID": "corr-123"})

    assert response.headers["X-Correlation-ID"] == "corr-123"
