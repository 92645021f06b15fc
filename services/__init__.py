"""Services package initialization"""
from .fetcher import TimedFetcher
from .fingerprint import fingerprint
from .monitor import Monitor
from .registry import UrlRegistry
from .storage import RecordRepository

__all__ = ["Monitor", "RecordRepository", "TimedFetcher", "UrlRegistry", "fingerprint"]
