"""Configuration helpers for environment-driven settings."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

if os.getenv("PYTEST_CURRENT_TEST") is None:
    load_dotenv()


def _split_csv(value: str) -> Tuple[str, ...]:
    return tuple(entry.strip() for entry in value.split(",") if entry.strip())


def _positive_int(name: str, default: str) -> int:
    try:
        value = int(os.getenv(name, default))
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive")
    return value


@dataclass(slots=True)
class Settings:
    """Runtime application settings sourced from environment variables."""

    ADMIN_TOKEN: str = field(init=False)
    REQUEST_TIMEOUT_MS: int = field(init=False)
    ALLOWED_DOMAINS: Tuple[str, ...] = field(init=False)
    CONCURRENCY: int = field(init=False)
    CHECK_INTERVAL_MINUTES: int = field(init=False)
    HEADERS: dict[str, str] = field(init=False)
    DB_PATH: Path = field(init=False)
    HOST: str = field(init=False)
    PORT: int = field(init=False)
    RUN_ON_START: bool = field(init=False)

    def __post_init__(self) -> None:
        self.reload()

    def reload(self) -> None:
        self.ADMIN_TOKEN = os.getenv("ADMIN_TOKEN", "").strip()
        self.REQUEST_TIMEOUT_MS = _positive_int("REQUEST_TIMEOUT_MS", "10000")
        self.ALLOWED_DOMAINS = tuple(
            domain.lower() for domain in _split_csv(os.getenv("ALLOWED_DOMAINS", ""))
        )
        self.CONCURRENCY = _positive_int("CONCURRENCY", "6")
        self.CHECK_INTERVAL_MINUTES = _positive_int("CHECK_INTERVAL_MINUTES", "15")

        self.HEADERS = {
            "User-Agent": "keepalive-pinger/1.0 (+scheduled health check)"
        }

        db_path_value = os.getenv("DB_PATH", "data/keepalive.db").strip()
        db_path = Path(db_path_value)
        if not db_path.is_absolute():
            db_path = Path.cwd() / db_path
        self.DB_PATH = db_path

        self.HOST = os.getenv("HOST", "0.0.0.0").strip() or "0.0.0.0"
        try:
            port = int(os.getenv("PORT", "8080"))
        except ValueError as exc:
            raise ValueError("PORT must be an integer") from exc
        if not 0 < port < 65536:
            raise ValueError("PORT must be between 1 and 65535")
        self.PORT = port

        self.RUN_ON_START = os.getenv("RUN_ON_START", "true").strip().lower() in {
            "1",
            "true",
            "yes",
            "on",
        }

    def validate(self) -> list[str]:
        """Return configuration warnings that do not prevent startup."""
        problems: list[str] = []
        if not self.ADMIN_TOKEN:
            problems.append(
                "ADMIN_TOKEN is not set; management API will refuse every request"
            )
        return problems

settings = Settings()
