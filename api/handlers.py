"""HTTP handlers for the management API."""
from __future__ import annotations

import functools
import json
import logging
from typing import Any

from aiohttp import web

from api.filters import admin_required
from services.monitor import Monitor
from services.registry import DomainNotAllowedError, UrlRegistry, ValidationError

logger = logging.getLogger(__name__)
routes = web.RouteTableDef()

REGISTRY_KEY = web.AppKey("registry", UrlRegistry)
MONITOR_KEY = web.AppKey("monitor", Monitor)

_dumps = functools.partial(json.dumps, indent=2, ensure_ascii=False)


def _json(data: Any, status: int = 200) -> web.Response:
    return web.json_response(data, status=status, dumps=_dumps)


def _validation_error(exc: ValidationError) -> web.Response:
    payload: dict[str, Any] = {"error": str(exc), "category": exc.category}
    if isinstance(exc, DomainNotAllowedError):
        payload["host"] = exc.host
        return _json(payload, status=403)
    return _json(payload, status=400)


async def _read_body(request: web.Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        body = None
    if not isinstance(body, dict):
        raise ValidationError("invalid json body")
    return body


@routes.get("/")
async def index(request: web.Request) -> web.Response:
    return web.Response(text="KeepAlive service running.")


@routes.post("/add-url")
@admin_required
async def add_url(request: web.Request) -> web.Response:
    registry = request.app[REGISTRY_KEY]
    try:
        body = await _read_body(request)
        record = registry.add_url(body.get("url"))
    except ValidationError as exc:
        return _validation_error(exc)
    return _json({"ok": True, "added": {"key": record.key, "record": record.to_dict()}})


@routes.get("/list")
@admin_required
async def list_urls(request: web.Request) -> web.Response:
    records = request.app[REGISTRY_KEY].list_urls()
    return _json({"count": len(records), "items": [record.to_dict() for record in records]})


@routes.post("/delete")
@admin_required
async def delete_url(request: web.Request) -> web.Response:
    registry = request.app[REGISTRY_KEY]
    try:
        body = await _read_body(request)
        key = body.get("key")
        deleted = registry.delete_url(key)
    except ValidationError as exc:
        return _validation_error(exc)
    return _json({"ok": True, "deleted": deleted, "key": key.strip()})


@routes.post("/visit-now")
@admin_required
async def visit_now(request: web.Request) -> web.Response:
    monitor = request.app[MONITOR_KEY]
    try:
        body = await _read_body(request)
        url = body.get("url")
        result = await monitor.visit_now(url)
    except ValidationError as exc:
        return _validation_error(exc)
    return _json({"url": url.strip(), "result": result.to_dict()})


def create_app(registry: UrlRegistry, monitor: Monitor) -> web.Application:
    app = web.Application()
    app[REGISTRY_KEY] = registry
    app[MONITOR_KEY] = monitor
    app.add_routes(routes)
    return app
