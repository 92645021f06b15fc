"""Data model for monitored URLs and their check history."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Mapping


def _parse_timestamp(value: Any) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


@dataclass(slots=True, frozen=True)
class MonitoringRecord:
    """Persisted state of one tracked URL.

    ``key`` and ``url`` never change for the life of a record; a different
    URL is a different record. ``last_status`` holds the HTTP status of the
    latest successful attempt or the error descriptor of the latest failed
    one, and stays ``None`` until the first attempt completes.
    """

    key: str
    url: str
    added_at: datetime
    last_visited: datetime | None = None
    last_status: int | str | None = None
    success_count: int = 0
    fail_count: int = 0

    @classmethod
    def create(cls, key: str, url: str, now: datetime | None = None) -> MonitoringRecord:
        return cls(key=key, url=url, added_at=now or datetime.now(UTC))

    @property
    def attempts(self) -> int:
        return self.success_count + self.fail_count

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "url": self.url,
            "added_at": self.added_at.isoformat(),
            "last_visited": self.last_visited.isoformat() if self.last_visited else None,
            "last_status": self.last_status,
            "success_count": self.success_count,
            "fail_count": self.fail_count,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], key: str | None = None) -> MonitoringRecord:
        """Build a record from its stored mapping.

        ``key`` overrides the mapping's own key, since the store key is the
        authoritative identity of a record.
        """
        added_at = _parse_timestamp(data.get("added_at"))
        if added_at is None:
            raise ValueError("record is missing added_at")
        return cls(
            key=key or data["key"],
            url=data["url"],
            added_at=added_at,
            last_visited=_parse_timestamp(data.get("last_visited")),
            last_status=data.get("last_status"),
            success_count=int(data.get("success_count", 0)),
            fail_count=int(data.get("fail_count", 0)),
        )
