"""Exception hierarchy for pg-console.

Every exception carries an exit_code for the console and a status_code
for the HTTP API. Validation and connectivity problems are the caller's
to fix (400); anything else is reported as a server error (500).
"""

from pg_console.core.exit_codes import ExitCode


class PgConsoleError(Exception):
    """Base exception for all pg-console errors."""

    exit_code: int = ExitCode.GENERAL_ERROR
    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InputError(PgConsoleError):
    """Missing or invalid request fields, unreadable query files."""

    exit_code: int = ExitCode.INPUT_ERROR
    status_code: int = 400


class NotConnectedError(InputError):
    """No database connection has been established yet."""


class PreviewModeError(InputError):
    """Operation needs a live database but the server runs in preview mode."""


class NetworkError(PgConsoleError):
    """Connection failures, rejected credentials, unreachable host."""

    exit_code: int = ExitCode.NETWORK_ERROR
    status_code: int = 400


class TimeoutError(NetworkError):
    """Query timeout, connection timeout."""

    exit_code: int = ExitCode.TIMEOUT


class QueryError(PgConsoleError):
    """The database rejected a statement."""


class ConfigError(PgConsoleError):
    """Malformed config, missing profile."""

    exit_code: int = ExitCode.CONFIG_ERROR


class ApiError(PgConsoleError):
    """The console server answered with an error payload."""

    exit_code: int = ExitCode.API_ERROR

    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.status_code = status_code
