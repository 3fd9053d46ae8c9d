"""
Process entry point: `tasks-api` (or `python server.py` from `api/`).
"""

from __future__ import annotations

import logging

import uvicorn

from core.config import load_settings
from core.logging_setup import setup_logging
from main import create_app

logger = logging.getLogger(__name__)


def main() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)

    app = create_app(settings)
    logger.info("services_starting port=%d env=%s", settings.port, settings.env)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
