"""Sentry integration for error tracking and request tracing.

Reporting is opt-in: nothing is sent unless STDB_CONSOLE_SENTRY_DSN is set.
"""

import os

import sentry_sdk

from stdb_console.__about__ import __version__

SENTRY_DSN_ENV = "STDB_CONSOLE_SENTRY_DSN"


def setup_sentry(environment: str = "local") -> bool:
    """Initialize Sentry if a DSN is configured. Returns True when enabled."""
    dsn = os.environ.get(SENTRY_DSN_ENV)
    if not dsn:
        return False
    sentry_sdk.init(
        dsn=dsn,
        traces_sample_rate=0.03,
        environment=os.environ.get("STDB_CONSOLE_ENVIRONMENT", environment),
        release=__version__,
        attach_stacktrace=True,
        send_default_pii=False,
    )
    return True
