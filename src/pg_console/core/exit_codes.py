"""Process exit statuses of the pg-console command line."""

from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    GENERAL_ERROR = 1
    # Bad flags, empty query, unreadable file, no table selected.
    INPUT_ERROR = 3
    # Server unreachable or the database refused the connection.
    NETWORK_ERROR = 5
    TIMEOUT = 6
    CONFIG_ERROR = 7
    # The API answered with an {"error": ...} payload.
    API_ERROR = 8
    INTERRUPTED = 130
