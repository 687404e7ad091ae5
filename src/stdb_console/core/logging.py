"""structlog setup for stdb-console.

Log lines go to stderr so stdout carries only query and table output. The
level comes from --verbose, then STDB_CONSOLE_LOG_LEVEL, then INFO. Bearer
tokens are masked before rendering.
"""

import logging
import os
import re
import sys
from typing import Any

import structlog

from stdb_console.core.exceptions import ConfigError

LOG_LEVEL_ENV = "STDB_CONSOLE_LOG_LEVEL"

_SECRET_KEYS = frozenset({"token", "authorization"})
_BEARER = re.compile(r"(Bearer\s+)\S+", re.IGNORECASE)
_MASK = "***"


class _LazyStderrFactory:
    """Resolve sys.stderr when a logger is created, not at configure() time.

    CliRunner swaps sys.stderr between invocations, so a handle captured
    once by PrintLoggerFactory goes stale.
    """

    def __call__(self, *args: Any, **kwargs: Any) -> structlog.PrintLogger:
        return structlog.PrintLogger(file=sys.stderr)


def redact_secrets(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Mask token-bearing fields and inline bearer credentials."""
    for key, value in event_dict.items():
        if key.lower() in _SECRET_KEYS and value:
            event_dict[key] = _MASK
        elif isinstance(value, str) and "bearer" in value.lower():
            event_dict[key] = _BEARER.sub(rf"\g<1>{_MASK}", value)
    return event_dict


def _level(verbose: bool) -> int:
    if verbose:
        return logging.DEBUG
    name = os.environ.get(LOG_LEVEL_ENV)
    if not name:
        return logging.INFO
    level = logging.getLevelNamesMapping().get(name.strip().upper())
    if level is None:
        msg = f"Invalid {LOG_LEVEL_ENV}: {name!r}. Use debug, info, warning or error"
        raise ConfigError(msg)
    return level


def setup_logging(verbose: bool = False) -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_secrets,
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_level(verbose)),
        context_class=dict,
        logger_factory=_LazyStderrFactory(),
        cache_logger_on_first_use=False,
    )
