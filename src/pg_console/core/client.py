"""PostgreSQL client for pg-console.

Wraps a psycopg v3 connection pool with query execution, statement
timeout, and exception mapping to the PgConsoleError hierarchy. Also
holds the one-shot connection test used before a pool is created.
"""

from __future__ import annotations

import contextlib
import time
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

import psycopg
import psycopg.errors
import sentry_sdk
import structlog
from psycopg_pool import ConnectionPool

from pg_console.core.config import APPLICATION_NAME, ServerSettings
from pg_console.core.exceptions import NetworkError, QueryError, TimeoutError
from pg_console.core.models import (
    ColumnMeta,
    ConnectionConfig,
    ConnectionTestResult,
    QueryResult,
    type_name,
)

if TYPE_CHECKING:
    from psycopg import Cursor

Params = Sequence[Any] | Mapping[str, Any]

# Hosts served through a pooler that negotiates TLS itself.
_SSL_PREFER_HOSTS = ("supabase.com", "neon.tech")

AUTH_FAILED_MESSAGE = "Authentication failed. Please check your username and password."
MISSING_DATABASE_MESSAGE = "Database does not exist. Please check the database name."
POOLER_REJECTED_MESSAGE = (
    "Connection rejected by database. If using Supabase, try the direct "
    "connection string (not pooler). Check that your password is correct "
    "and database allows connections."
)
GENERIC_CONNECT_MESSAGE = "Failed to connect to database"


def choose_sslmode(config: ConnectionConfig) -> str:
    """Pick the SSL mode for a pooled connection.

    An explicit sslmode wins. Otherwise known managed hosts get "prefer"
    and everything else "require".
    """
    if config.sslmode:
        return config.sslmode
    if any(marker in config.host for marker in _SSL_PREFER_HOSTS):
        return "prefer"
    return "require"


def describe_connect_error(error: BaseException) -> str:
    """Map a driver error raised while connecting to a fixed message.

    libpq does not always report a SQLSTATE for startup failures, so the
    message text is matched as well.
    """
    sqlstate = getattr(error, "sqlstate", None)
    message = str(error).strip()
    lowered = message.lower()

    if sqlstate == "XX000" or "db_termination" in lowered:
        return POOLER_REJECTED_MESSAGE
    if sqlstate == "28P01" or "password authentication failed" in lowered:
        return AUTH_FAILED_MESSAGE
    if sqlstate == "3D000" or ("database" in lowered and "does not exist" in lowered):
        return MISSING_DATABASE_MESSAGE
    return message or GENERIC_CONNECT_MESSAGE


def test_connection(
    config: ConnectionConfig, connect_timeout: int = 30
) -> ConnectionTestResult:
    """Open one connection, run SELECT 1, close it."""
    log = structlog.get_logger()
    log.info("testing connection", **config.describe())
    if "pooler.supabase.com" in config.host:
        log.warning(
            "supabase pooler detected; if the connection fails use the direct "
            "connection string (port 5432 without the pooler subdomain)",
            host=config.host,
        )

    conn: psycopg.Connection[Any] | None = None
    try:
        conn = psycopg.connect(
            host=config.host,
            port=config.port,
            dbname=config.database,
            user=config.user,
            password=config.password,
            sslmode=config.sslmode or "prefer",
            connect_timeout=connect_timeout,
            application_name=f"{APPLICATION_NAME}-test",
            autocommit=True,
            prepare_threshold=None,
        )
        conn.execute("SELECT 1 AS test")
    except psycopg.Error as e:
        log.error(
            "connection test failed",
            host=config.host,
            sqlstate=getattr(e, "sqlstate", None),
            error=str(e),
        )
        return ConnectionTestResult(success=False, error=describe_connect_error(e))
    finally:
        if conn is not None:
            with contextlib.suppress(Exception):
                conn.close()

    log.info("connection test succeeded", host=config.host)
    return ConnectionTestResult(success=True)


class PgClient:
    """PostgreSQL client backed by a psycopg_pool.ConnectionPool."""

    def __init__(
        self, config: ConnectionConfig, settings: ServerSettings | None = None
    ) -> None:
        self.config = config
        self.settings = settings or ServerSettings()
        self._pool: ConnectionPool | None = None

    def __enter__(self) -> PgClient:
        self.open()
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._pool is not None and not self._pool.closed

    def open(self) -> None:
        """Create the pool and wait for its first connection."""
        if self.is_open:
            return

        sslmode = choose_sslmode(self.config)
        pool = ConnectionPool(
            kwargs={
                "host": self.config.host,
                "port": self.config.port,
                "dbname": self.config.database,
                "user": self.config.user,
                "password": self.config.password,
                "sslmode": sslmode,
                "connect_timeout": self.settings.connect_timeout,
                "application_name": APPLICATION_NAME,
                "autocommit": True,
                # Transaction poolers reject named prepared statements.
                "prepare_threshold": None,
            },
            min_size=1,
            max_size=self.settings.pool_max_size,
            max_idle=self.settings.idle_timeout,
            timeout=self.settings.connect_timeout,
            name=APPLICATION_NAME,
            open=False,
        )
        try:
            pool.open(wait=True, timeout=self.settings.connect_timeout)
        except psycopg.OperationalError as e:
            with contextlib.suppress(Exception):
                pool.close()
            msg = (
                f"Connection failed to {self.config.host}:{self.config.port} "
                f"database '{self.config.database}': {describe_connect_error(e)}"
            )
            raise NetworkError(msg) from e

        structlog.get_logger().info(
            "connection pool opened",
            sslmode=sslmode,
            max_size=self.settings.pool_max_size,
            **self.config.describe(),
        )
        self._pool = pool

    def _require_pool(self) -> ConnectionPool:
        if self._pool is None or self._pool.closed:
            self.open()
        assert self._pool is not None
        return self._pool

    @staticmethod
    def _read_result(
        cur: Cursor[Any],
    ) -> tuple[list[ColumnMeta], list[tuple[Any, ...]]]:
        columns: list[ColumnMeta] = []
        rows: list[tuple[Any, ...]] = []
        if cur.description:
            for desc in cur.description:
                columns.append(
                    ColumnMeta(
                        name=desc.name,
                        type_oid=desc.type_code,
                        type_name=type_name(desc.type_code),
                    )
                )
            rows = cur.fetchall()
        return columns, rows

    def execute_query(self, sql: str, params: Params | None = None) -> QueryResult:
        """Execute SQL and return a QueryResult.

        Multi-statement text returns the result of the last statement.
        """
        log = structlog.get_logger()
        pool = self._require_pool()
        timeout_ms = int(self.settings.statement_timeout * 1000)

        sql_normalized = " ".join(sql.split())
        span_description = sql_normalized[:100]
        log.debug("executing query", sql=sql_normalized)
        with sentry_sdk.start_span(op="db.query", description=span_description) as span:
            start_time = time.monotonic()
            try:
                with pool.connection() as conn, conn.cursor() as cur:
                    cur.execute(f"SET statement_timeout = {timeout_ms}")
                    cur.execute(sql, params)

                    columns, rows = self._read_result(cur)
                    while cur.nextset():
                        columns, rows = self._read_result(cur)

                    if columns:
                        row_count = len(rows)
                    else:
                        row_count = max(cur.rowcount, 0)

                    duration_ms = (time.monotonic() - start_time) * 1000
                    span.set_data("row_count", row_count)
                    span.set_data("duration_ms", duration_ms)
                    log.debug(
                        "query complete",
                        duration_ms=f"{duration_ms:.1f}",
                        row_count=row_count,
                    )

                    return QueryResult(
                        columns=columns,
                        rows=rows,
                        row_count=row_count,
                        status_message=cur.statusmessage or "",
                    )

            except psycopg.errors.QueryCanceled as e:
                duration_ms = (time.monotonic() - start_time) * 1000
                span.set_data("duration_ms", duration_ms)
                span.set_status("deadline_exceeded")
                log.error(
                    "query timeout",
                    sql=sql_normalized,
                    duration_ms=f"{duration_ms:.1f}",
                )
                msg = f"Query timed out after {self.settings.statement_timeout}s: {e}"
                raise TimeoutError(msg) from e
            except psycopg.OperationalError as e:
                span.set_status("unavailable")
                log.error("database error", sql=sql_normalized, error=str(e))
                raise NetworkError(f"Database error: {e}") from e
            except psycopg.Error as e:
                span.set_status("invalid_argument")
                log.error("query error", sql=sql_normalized, error=str(e))
                raise QueryError(str(e) or type(e).__name__) from e

    def close(self) -> None:
        """Close the connection pool."""
        if self._pool is not None:
            self._pool.close()
            self._pool = None
