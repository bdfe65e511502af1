"""Request id propagation, access-log levels and the error envelope for 5xx."""

import logging
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from artfolio.exceptions import DatabaseError
from artfolio.middleware.logging import level_for_status
from artfolio.middleware.request_id import new_request_id


class TestLogLevels:

    @pytest.mark.parametrize(
        "status, level",
        [(200, logging.INFO), (302, logging.INFO), (404, logging.WARNING), (503, logging.ERROR)],
    )
    def test_level_for_status(self, status, level):
        assert level_for_status(status) == level

    def test_request_ids_are_short_and_unique(self):
        ids = {new_request_id() for _ in range(50)}
        assert len(ids) == 50
        assert all(len(i) == 8 for i in ids)


class TestServerErrors:

    @pytest.mark.asyncio
    async def test_database_error_is_generic_500(self, test_client):
        failure = DatabaseError(context={"query": "SELECT secret FROM internals"})
        with patch(
            "artfolio.routes.categories.category_service.list_categories",
            new=AsyncMock(side_effect=failure),
        ):
            response = await test_client.get("/categories", headers={"X-Request-ID": "abc12345"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert body["request_id"] == "abc12345"
        assert "SELECT" not in response.text

    @pytest.mark.asyncio
    async def test_access_log_line(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger="artfolio.access"):
            await test_client.get("/categories")
        records = [r for r in caplog.records if r.name == "artfolio.access"]
        assert records and records[-1].path == "/categories"
        assert records[-1].status == 200

    @pytest.mark.asyncio
    async def test_unexpected_error_keeps_request_id(self, test_client):
        from artfolio.main import app

        # Unhandled exceptions are re-raised after the response is sent
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        with patch(
            "artfolio.routes.categories.category_service.list_categories",
            new=AsyncMock(side_effect=RuntimeError("boom")),
        ):
            async with AsyncClient(transport=transport, base_url="http://test") as raw_client:
                response = await raw_client.get("/categories", headers={"X-Request-ID": "crash123"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "internal_server_error"
        assert body["request_id"] == "crash123"
        assert response.headers["X-Request-ID"] == "crash123"
        assert "boom" not in response.text
