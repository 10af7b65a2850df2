import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession


@pytest.mark.asyncio
async def test_unknown_route(async_client: AsyncClient):
    response = await async_client.get("/api/unknown")

    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "error": "Route not found",
        "message": "The route GET /api/unknown does not exist",
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("url", ["/api/products", "/api/products/top-rated"])
async def test_data_access_fault_is_a_server_error(async_client: AsyncClient, monkeypatch, url):
    async def mock_execute(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection reset"))

    monkeypatch.setattr(AsyncSession, "execute", mock_execute)

    response = await async_client.get(url)

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "Internal server error",
        "message": "Something went wrong, please try again later",
    }


@pytest.mark.asyncio
async def test_malformed_json_body(async_client: AsyncClient):
    response = await async_client.post(
        "/api/products",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Validation error"
