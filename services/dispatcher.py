"""Bounded-concurrency batch pass over monitoring records."""
from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Awaitable, Callable, Sequence

from models import FetchResult, MonitoringRecord
from services.storage import RecordStore
from services.updater import apply_result

logger = logging.getLogger(__name__)

FetchFunc = Callable[[str, int], Awaitable[FetchResult]]
UpdateFunc = Callable[[MonitoringRecord, FetchResult, datetime], MonitoringRecord]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class CheckState(enum.Enum):
    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(slots=True)
class BatchSummary:
    total: int = 0
    succeeded: int = 0
    failed: int = 0
    persist_errors: int = 0
    discarded: int = 0


class WorkList:
    """Immutable sequence of records handed out one at a time.

    ``claim`` does not await, so on a single event loop it runs without
    interleaving: every record is handed to exactly one worker.
    """

    def __init__(self, records: Sequence[MonitoringRecord]) -> None:
        self._records = tuple(records)
        self._next_index = 0

    def __len__(self) -> int:
        return len(self._records)

    def claim(self) -> MonitoringRecord | None:
        if self._next_index >= len(self._records):
            return None
        record = self._records[self._next_index]
        self._next_index += 1
        return record


async def run_batch(
    records: Sequence[MonitoringRecord],
    *,
    concurrency: int,
    timeout_ms: int,
    fetch: FetchFunc,
    store: RecordStore,
    update: UpdateFunc = apply_result,
    clock: Callable[[], datetime] = _utcnow,
) -> BatchSummary:
    """Visit every record once with at most ``concurrency`` checks in flight.

    Each record is fetched, folded with ``update`` and written back through
    ``store`` independently of the others. Only records that still exist
    are written; one deleted or re-added mid-pass keeps its new state.
    Fetch failures become failed attempts; a failed write is logged and
    only loses that record's update.
    """
    if concurrency < 1:
        raise ValueError("concurrency must be at least 1")
    if timeout_ms < 1:
        raise ValueError("timeout_ms must be at least 1")

    work = WorkList(records)
    summary = BatchSummary(total=len(work))
    if not work:
        return summary

    loop = asyncio.get_running_loop()

    async def worker(worker_id: int) -> None:
        while (record := work.claim()) is not None:
            logger.debug("[worker %d] %s %s", worker_id, CheckState.IN_FLIGHT.value, record.url)
            try:
                result = await fetch(record.url, timeout_ms)
            except Exception as exc:
                logger.exception("Fetch raised for %s", record.url)
                result = FetchResult.failure(f"{type(exc).__name__}: {exc}")
            state = CheckState.SUCCEEDED if result.ok else CheckState.FAILED
            if result.ok:
                summary.succeeded += 1
            else:
                summary.failed += 1
            logger.debug(
                "[worker %d] %s %s: %s", worker_id, state.value, record.url, result.outcome
            )

            updated = update(record, result, clock())
            try:
                written = await loop.run_in_executor(None, store.update, updated)
            except Exception:
                summary.persist_errors += 1
                logger.exception("Failed to persist check result for %s", record.url)
                continue
            if not written:
                summary.discarded += 1
                logger.debug("Record %s was removed or re-added during the pass", record.key)

    worker_count = min(concurrency, len(work))
    await asyncio.gather(*(worker(worker_id) for worker_id in range(worker_count)))

    return summary


__all__ = ["BatchSummary", "CheckState", "WorkList", "run_batch"]
