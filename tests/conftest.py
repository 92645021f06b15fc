"""Pytest configuration and fixtures."""
from __future__ import annotations

import asyncio

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from config import settings
from services.storage import RecordRepository

ADMIN_TOKEN = "test_admin_token"


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch) -> None:
    """Set up test environment variables"""
    monkeypatch.setenv('ADMIN_TOKEN', ADMIN_TOKEN)
    monkeypatch.setenv('REQUEST_TIMEOUT_MS', '2000')
    monkeypatch.setenv('CONCURRENCY', '6')
    monkeypatch.setenv('CHECK_INTERVAL_MINUTES', '15')
    monkeypatch.delenv('ALLOWED_DOMAINS', raising=False)
    settings.reload()


@pytest.fixture
def temp_db(tmp_path, monkeypatch):
    """Point the record store at a throwaway sqlite file"""
    db_path = tmp_path / "keepalive.db"
    monkeypatch.setenv('DB_PATH', str(db_path))
    settings.reload()
    return db_path


@pytest.fixture
def store(temp_db) -> RecordRepository:
    return RecordRepository(db_path=temp_db)


@pytest_asyncio.fixture
async def target_server():
    """Local HTTP server with fast, slow, failing and redirecting pages"""

    release = asyncio.Event()

    async def ok(request: web.Request) -> web.Response:
        return web.Response(text="hello " + "x" * 500)

    async def hang(request: web.Request) -> web.Response:
        await release.wait()
        return web.Response(text="too late")

    async def slow_body(request: web.Request) -> web.StreamResponse:
        response = web.StreamResponse()
        await response.prepare(request)
        await response.write(b"partial")
        await release.wait()
        return response

    async def long_body(request: web.Request) -> web.StreamResponse:
        response = web.StreamResponse()
        await response.prepare(request)
        await response.write(b"y" * 4096)
        await release.wait()
        return response

    async def broken(request: web.Request) -> web.Response:
        return web.Response(status=503, text="down")

    async def redirect(request: web.Request) -> web.Response:
        raise web.HTTPFound("/ok")

    app = web.Application()
    app.router.add_get("/ok", ok)
    app.router.add_get("/hang", hang)
    app.router.add_get("/slow-body", slow_body)
    app.router.add_get("/broken", broken)
    app.router.add_get("/long-body", long_body)
    app.router.add_get("/redirect", redirect)

    server = TestServer(app)
    await server.start_server()
    try:
        yield server
    finally:
        release.set()
        await server.close()
