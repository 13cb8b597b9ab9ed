"""Sentry integration for error tracking and performance monitoring.

Sentry stays disabled unless a DSN is configured.
"""

from __future__ import annotations

import sentry_sdk

from pg_console.__about__ import __version__


def setup_sentry(dsn: str | None, environment: str = "local") -> bool:
    """Initialize Sentry when a DSN is available. Returns True if enabled.

    A client set up earlier in the process (the console callback before
    `serve` builds the app) is kept as is.
    """
    if not dsn:
        return False
    if sentry_sdk.get_client().is_active():
        return True
    sentry_sdk.init(
        dsn=dsn,
        traces_sample_rate=0.03,
        environment=environment,
        release=__version__,
        attach_stacktrace=True,
        send_default_pii=False,
    )
    return True
