"""Management operations on the set of monitored URLs."""
from __future__ import annotations

import logging
from typing import Sequence
from urllib.parse import urlparse

from config import settings
from models import MonitoringRecord
from services.fingerprint import fingerprint
from services.storage import RecordRepository

logger = logging.getLogger(__name__)


class ValidationError(ValueError):
    """Client supplied a malformed or disallowed value."""

    category = "validation"


class DomainNotAllowedError(ValidationError):
    def __init__(self, host: str) -> None:
        super().__init__("domain not allowed")
        self.host = host


def validate_url(url: object, allowed_domains: Sequence[str] = ()) -> str:
    """Return the stripped ``url`` or raise ``ValidationError``."""
    if not isinstance(url, str) or not url.strip():
        raise ValidationError("missing url")

    normalized_url = url.strip()
    try:
        parsed = urlparse(normalized_url)
        host = parsed.hostname
    except ValueError as exc:
        raise ValidationError("invalid url") from exc

    if parsed.scheme not in ("http", "https") or not host:
        raise ValidationError("invalid url")

    allowed = {domain.strip().lower() for domain in allowed_domains if domain.strip()}
    if allowed and host.lower() not in allowed:
        raise DomainNotAllowedError(host.lower())
    return normalized_url


class UrlRegistry:
    def __init__(self, store: RecordRepository | None = None) -> None:
        self.store = store or RecordRepository()

    def add_url(self, url: object) -> MonitoringRecord:
        """Validate ``url`` and store a fresh record for it.

        Adding a URL that is already tracked resets its history.
        """
        normalized_url = validate_url(url, settings.ALLOWED_DOMAINS)
        record = MonitoringRecord.create(fingerprint(normalized_url), normalized_url)
        self.store.put(record)
        logger.info("Added %s as %s", normalized_url, record.key)
        return record

    def list_urls(self) -> list[MonitoringRecord]:
        return self.store.list_records()

    def delete_url(self, key: object) -> bool:
        if not isinstance(key, str) or not key.strip():
            raise ValidationError("missing key")
        removed = self.store.delete(key.strip())
        if removed:
            logger.info("Deleted record %s", key)
        return removed


__all__ = ["DomainNotAllowedError", "UrlRegistry", "ValidationError", "validate_url"]
