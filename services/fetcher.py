"""Timed HTTP fetcher used for every check attempt."""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Mapping, Optional

import aiohttp

from config import settings
from models import FetchResult

logger = logging.getLogger(__name__)
SNIPPET_LENGTH = 120


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def _describe(exc: BaseException) -> str:
    message = str(exc).strip()
    name = type(exc).__name__
    return f"{name}: {message}" if message else name


class TimedFetcher:
    """Issue single GET requests bounded by a hard deadline."""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        headers: Optional[Mapping[str, str]] = None,
        snippet_length: int = SNIPPET_LENGTH,
    ) -> None:
        self.headers = dict(headers if headers is not None else settings.HEADERS)
        self.session = session
        self._owns_session = session is None
        self.snippet_length = snippet_length

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(headers=self.headers)
            self._owns_session = True
        return self.session

    async def close(self) -> None:
        """Close the session if we own it."""
        if self._owns_session and self.session is not None:
            await self.session.close()
            self.session = None

    async def __call__(self, url: str, timeout_ms: int) -> FetchResult:
        return await self.fetch(url, timeout_ms)

    async def fetch(self, url: str, timeout_ms: int) -> FetchResult:
        """GET ``url`` and normalize the outcome; never raises.

        The deadline covers connecting, redirects, headers and reading the
        body prefix kept as the snippet. A non-positive ``timeout_ms`` fails
        at once, since aiohttp would read it as no deadline. aiohttp cancels
        the request and releases its timer when the deadline expires or the
        response context exits.
        """
        if timeout_ms <= 0:
            logger.warning("Refusing to fetch %s without a deadline (%s ms)", url, timeout_ms)
            return FetchResult.failure(f"timeout after {timeout_ms} ms (no time budget)", elapsed_ms=0)

        timeout = aiohttp.ClientTimeout(total=timeout_ms / 1000)
        started = time.perf_counter()
        try:
            session = await self._get_session()
            async with session.get(url, timeout=timeout, allow_redirects=True) as response:
                snippet = await self._read_snippet(response)
                elapsed = _elapsed_ms(started)
                if response.ok:
                    logger.debug("GET %s -> %s in %d ms", url, response.status, elapsed)
                    return FetchResult.success(response.status, snippet, elapsed)
                reason = response.reason or ""
                error = f"HTTP {response.status} {reason}".strip()
                logger.warning("GET %s returned %s", url, error)
                return FetchResult.failure(error, status=response.status, elapsed_ms=elapsed)
        except asyncio.TimeoutError:
            logger.warning("Timeout fetching %s after %d ms", url, timeout_ms)
            return FetchResult.failure(
                f"timeout after {timeout_ms} ms (request cancelled)",
                elapsed_ms=_elapsed_ms(started),
            )
        except aiohttp.InvalidURL as exc:
            logger.warning("Invalid URL %s: %s", url, exc)
            return FetchResult.failure(f"invalid url: {exc}", elapsed_ms=_elapsed_ms(started))
        except aiohttp.ClientConnectionError as exc:
            logger.warning("Connection error fetching %s: %s", url, exc)
            logger.debug("Connection error details", exc_info=True)
            return FetchResult.failure(_describe(exc), elapsed_ms=_elapsed_ms(started))
        except aiohttp.ClientError as exc:
            logger.error("Error fetching %s: %s", url, exc)
            logger.debug("Unhandled request exception", exc_info=True)
            return FetchResult.failure(_describe(exc), elapsed_ms=_elapsed_ms(started))
        except ValueError as exc:
            logger.warning("Rejected request to %s: %s", url, exc)
            return FetchResult.failure(_describe(exc), elapsed_ms=_elapsed_ms(started))
        except Exception as exc:
            logger.exception("Unexpected error fetching %s", url)
            return FetchResult.failure(_describe(exc), elapsed_ms=_elapsed_ms(started))

    async def _read_snippet(self, response: aiohttp.ClientResponse) -> str:
        """Read just enough of the body for the snippet; empty if the read fails.

        The unread remainder is dropped when the response is released.
        """
        limit = self.snippet_length * 4
        body = b""
        try:
            while len(body) < limit:
                chunk = await response.content.read(limit - len(body))
                if not chunk:
                    break
                body += chunk
        except asyncio.TimeoutError:
            raise
        except aiohttp.ClientError:
            logger.debug("Body read failed for %s", response.url, exc_info=True)
            return ""

        encoding = response.charset or "utf-8"
        try:
            text = body.decode(encoding, errors="replace")
        except LookupError:
            text = body.decode("utf-8", errors="replace")
        return text[: self.snippet_length]


__all__ = ["SNIPPET_LENGTH", "TimedFetcher"]
