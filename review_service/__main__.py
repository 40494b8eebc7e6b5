"""Run the review service with uvicorn: ``python -m review_service``."""

from __future__ import annotations

import logging

import uvicorn

from review_service.config import Settings

logger = logging.getLogger(__name__)


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    settings = Settings.from_env()
    logger.info("Server is running on http://%s:%d", settings.host, settings.port)
    uvicorn.run("review_service.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
