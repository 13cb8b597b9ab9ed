"""structlog configuration shared by the console and the API server.

Everything goes to stderr so stdout stays clean for query output. The
API server can switch to one JSON object per line for log shippers.
"""

import logging
import sys
from typing import Any

import structlog


class _StderrLoggerFactory:
    # Looks sys.stderr up per logger; CliRunner swaps it between invocations.
    def __call__(self, *args: Any) -> structlog.PrintLogger:
        return structlog.PrintLogger(file=sys.stderr)


def _level_number(name: str) -> int:
    level = logging.getLevelNamesMapping().get(name.upper())
    return level if level is not None else logging.INFO


def setup_logging(
    verbose: bool = False, level: str | None = None, json_format: bool = False
) -> None:
    """Configure structlog.

    ``level`` is a level name ("debug", "warning", ...) and wins over
    ``verbose``. Unknown names mean INFO.
    """
    threshold = _level_number(level or ("debug" if verbose else "info"))
    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_format
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        context_class=dict,
        logger_factory=_StderrLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Any:
    """structlog logger, bound to ``name`` when given.

    Call inside functions, after setup_logging() has run.
    """
    log = structlog.get_logger()
    return log.bind(logger=name) if name else log
