"""Run the biodata API with uvicorn.

Host, port and reload come from ``settings``; set ``DEBUG=true`` to
reload on changes under ``biodata/``.
"""
import logging

import uvicorn

from biodata.api import app
from biodata.config import settings
from biodata.logging_config import setup_logging

logger = logging.getLogger("biodata.main")


def _database_label(url: str) -> str:
    # Never log credentials
    return url.split("@")[-1] if "@" in url else url


if __name__ == "__main__":
    setup_logging()
    logger.info(f"Starting {settings.app_name} v{settings.version} ({settings.environment.value})")
    logger.info(f"Database: {_database_label(settings.db.url)}")
    logger.info(f"Listening on {settings.server.host}:{settings.server.port}, reload={settings.debug}")

    uvicorn.run(
        "biodata.api:app" if settings.debug else app,
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.debug,
        reload_dirs=["biodata"] if settings.debug else None,
        log_level=settings.logging.level.lower(),
    )
