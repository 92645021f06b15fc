import asyncio
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

from aiohttp import web

from api import create_app
from config import settings
from services import Monitor, RecordRepository, UrlRegistry
from services.runtime import build_scheduler

# ensure logs are recorded both to stdout and to a rotating file
def configure_logging() -> None:
    log_dir = Path(os.getenv("LOG_DIR", "logs"))
    if not log_dir.is_absolute():
        log_dir = Path.cwd() / log_dir
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / "keepalive.log"

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        handlers=[
            logging.StreamHandler(),
            RotatingFileHandler(
                log_file,
                maxBytes=5 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            ),
        ],
        force=True,
    )


configure_logging()
logger = logging.getLogger("keepalive")


async def main() -> None:
    for problem in settings.validate():
        logger.warning(problem)

    store = RecordRepository()
    monitor = Monitor(store)
    registry = UrlRegistry(store)

    scheduler, _ = build_scheduler(monitor)
    scheduler.start()

    runner = web.AppRunner(create_app(registry, monitor))
    await runner.setup()
    site = web.TCPSite(runner, settings.HOST, settings.PORT)
    await site.start()

    logger.info(
        "KeepAlive started on %s:%s. Checking every %s minutes for %s URLs",
        settings.HOST,
        settings.PORT,
        settings.CHECK_INTERVAL_MINUTES,
        store.count(),
    )

    try:
        if settings.RUN_ON_START:
            await monitor.check_all()
        await asyncio.Event().wait()
    finally:
        scheduler.shutdown(wait=False)
        await runner.cleanup()
        await monitor.close()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("KeepAlive stopped by user")
    except Exception:
        logger.exception("Fatal error")
