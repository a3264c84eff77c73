"""Entry point for the search API server."""

import asyncio
import contextlib
import signal
import sys

import structlog
import uvicorn

from inventory_search.app import create_app
from inventory_search.config import Settings
from inventory_search.logging import configure_logging

logger = structlog.get_logger()


async def serve(settings: Settings) -> None:
    """Run uvicorn until SIGTERM or SIGINT.

    The application lifespan drains the indexing pipeline before the
    process exits.

    Args:
        settings: Server configuration.
    """
    app = create_app(settings)

    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_level="warning",
        access_log=False,
    )
    server = uvicorn.Server(config)

    def request_exit() -> None:
        logger.info("shutdown_triggered")
        server.should_exit = True

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, request_exit)

    await server.serve()


def main() -> None:
    """Entry point for python -m inventory_search."""
    settings = Settings()
    configure_logging(debug=settings.debug)

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(serve(settings))

    sys.exit(0)


if __name__ == "__main__":
    main()
