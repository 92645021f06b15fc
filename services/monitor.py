"""Monitoring service running check passes over stored URLs."""
from __future__ import annotations

import asyncio
import logging

from config import settings
from models import FetchResult
from services.dispatcher import BatchSummary, run_batch
from services.fetcher import TimedFetcher
from services.registry import validate_url
from services.storage import RecordRepository

logger = logging.getLogger(__name__)


class Monitor:
    """Entry point for scheduled passes and ad-hoc visits."""

    def __init__(
        self,
        store: RecordRepository | None = None,
        fetcher: TimedFetcher | None = None,
    ) -> None:
        self.store = store or RecordRepository()
        self.fetcher = fetcher or TimedFetcher()

    async def check_all(self) -> BatchSummary:
        """Visit every stored URL once and persist the updated records."""
        logger.info("Starting monitoring check…")

        loop = asyncio.get_running_loop()
        records = await loop.run_in_executor(None, self.store.list_records)
        if not records:
            logger.info("No URLs to check")
            return BatchSummary()

        summary = await run_batch(
            records,
            concurrency=settings.CONCURRENCY,
            timeout_ms=settings.REQUEST_TIMEOUT_MS,
            fetch=self.fetcher.fetch,
            store=self.store,
        )

        logger.info(
            "Monitoring check completed: %d total, %d successful, %d failed",
            summary.total, summary.succeeded, summary.failed
        )
        if summary.persist_errors:
            logger.error(
                "%d check results could not be saved and were dropped",
                summary.persist_errors,
            )
        return summary

    async def visit_now(self, url: str) -> FetchResult:
        """Fetch ``url`` once with the configured timeout; nothing is stored."""
        normalized_url = validate_url(url)
        logger.info("Visiting %s on demand", normalized_url)
        return await self.fetcher.fetch(normalized_url, settings.REQUEST_TIMEOUT_MS)

    async def close(self) -> None:
        await self.fetcher.close()
