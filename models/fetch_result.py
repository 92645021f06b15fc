"""Outcome of a single timed fetch."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True, frozen=True)
class FetchResult:
    """Normalized result of one outbound GET.

    Failures never raise; they are reported with ``ok=False`` and a
    human-readable ``error``. ``status`` is kept for HTTP error responses.
    """

    ok: bool
    status: int | None = None
    snippet: str = ""
    error: str | None = None
    elapsed_ms: int | None = None

    @classmethod
    def success(cls, status: int, snippet: str = "", elapsed_ms: int | None = None) -> FetchResult:
        return cls(ok=True, status=status, snippet=snippet, elapsed_ms=elapsed_ms)

    @classmethod
    def failure(
        cls,
        error: str,
        status: int | None = None,
        elapsed_ms: int | None = None,
    ) -> FetchResult:
        return cls(ok=False, status=status, error=error, elapsed_ms=elapsed_ms)

    @property
    def outcome(self) -> int | str | None:
        """Value recorded as a record's ``last_status``."""
        return self.status if self.ok else self.error

    def to_dict(self) -> dict[str, Any]:
        if self.ok:
            return {
                "ok": True,
                "status": self.status,
                "snippet": self.snippet,
                "elapsed_ms": self.elapsed_ms,
            }
        payload: dict[str, Any] = {"ok": False, "error": self.error, "elapsed_ms": self.elapsed_ms}
        if self.status is not None:
            payload["status"] = self.status
        return payload
