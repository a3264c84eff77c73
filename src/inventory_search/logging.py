"""Structured logging for the search service.

Events are snake_case names grouped by prefix: ``search_index_*`` and
``search_document_*`` for index storage, ``reindex_*`` for full rebuilds
and their scheduler, ``indexing_pipeline_*`` for the change queue, and
``http_request`` from the request middleware. Rebuild failures are logged
with ``logger.exception``, so tracebacks are rendered into the JSON line.
"""

import logging
import sys

import structlog


def configure_logging(debug: bool = False) -> None:
    """Configure structlog for JSON output on stdout.

    Index, pipeline and request events all go through the same processor
    chain; uvicorn's stdlib loggers are routed to the root handler.

    Args:
        debug: Enable debug-level logging (document upserts, rebuild
            progress) when True.
    """
    level = logging.DEBUG if debug else logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=level,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).handlers = []
        logging.getLogger(name).propagate = True
