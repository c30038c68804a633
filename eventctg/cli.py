"""Command line entry for EventCTG."""

from __future__ import annotations

import logging
import signal
import sys

import uvicorn
from fastapi import FastAPI

from eventctg.api.main import create_app
from eventctg.core.config import load_settings
from eventctg.core.exceptions import StartupConfigError
from eventctg.core.lifecycle import EXIT_FAILURE
from eventctg.core.observability import configure_logging

logger = logging.getLogger(__name__)


class Server(uvicorn.Server):
    """uvicorn server that remembers which signal stopped it."""

    def __init__(self, config: uvicorn.Config, app: FastAPI) -> None:
        super().__init__(config)
        self.application = app

    def handle_exit(self, sig: int, frame) -> None:
        self.application.state.shutdown_signal = signal.Signals(sig).name
        super().handle_exit(sig, frame)


def run_server() -> int:
    try:
        settings = load_settings()
    except StartupConfigError as exc:
        configure_logging()
        logger.error("%s", exc)
        return EXIT_FAILURE

    configure_logging(settings.LOG_LEVEL)
    app = create_app(settings)
    config = uvicorn.Config(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
    server = Server(config, app)
    logger.info("Server running on port %s", settings.PORT)
    server.run()
    return app.state.exit_code


def main() -> None:
    sys.exit(run_server())


if __name__ == "__main__":
    main()
