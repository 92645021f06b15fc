"""Fold a fetch outcome into a monitoring record."""
from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from models import FetchResult, MonitoringRecord


def apply_result(record: MonitoringRecord, result: FetchResult, now: datetime) -> MonitoringRecord:
    """Return the next state of ``record`` after one completed check attempt."""
    return replace(
        record,
        last_visited=now,
        last_status=result.outcome,
        success_count=record.success_count + (1 if result.ok else 0),
        fail_count=record.fail_count + (0 if result.ok else 1),
    )


__all__ = ["apply_result"]
