"""
Filters for API handlers
"""
import functools
import hmac
from typing import Awaitable, Callable

from aiohttp import web

from config import settings

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def _extract_token(request: web.Request) -> str:
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip()
    return request.query.get("token", "")


def is_admin(request: web.Request) -> bool:
    """
    Check if the caller presents the admin credential

    Args:
        request: incoming request; the credential is read from a bearer
            ``Authorization`` header or the ``token`` query parameter

    Returns:
        True if the credential matches, False otherwise (always False
        when no admin token is configured)
    """
    expected = settings.ADMIN_TOKEN
    if not expected:
        return False
    supplied = _extract_token(request)
    return hmac.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))


def admin_required(handler: Handler) -> Handler:
    @functools.wraps(handler)
    async def wrapper(request: web.Request) -> web.StreamResponse:
        if not is_admin(request):
            return web.json_response(
                {"error": "Unauthorized", "category": "authorization"},
                status=401,
            )
        return await handler(request)

    return wrapper
