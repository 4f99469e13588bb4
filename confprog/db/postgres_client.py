"""PostgreSQL connection manager for program sessions and faculty."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any

from psycopg_pool import ConnectionPool

from confprog.utils.config import DatabaseConfig, config


def build_conninfo(db: DatabaseConfig) -> str:
    """Build a libpq connection string from database config."""
    return (
        f"host={db.postgres_host} "
        f"port={db.postgres_port} "
        f"dbname={db.postgres_database} "
        f"user={db.postgres_user} "
        f"password={db.postgres_password}"
    )


class PostgresClient:
    """Pooled PostgreSQL access used by the program ingestor."""

    def __init__(
        self,
        conninfo: str | None = None,
        min_size: int = 1,
        max_size: int = 5,
    ):
        self.conninfo = conninfo or build_conninfo(config.database)
        # open=False so the pool is opened explicitly (and only once).
        self.pool = ConnectionPool(
            conninfo=self.conninfo, min_size=min_size, max_size=max_size, open=False
        )
        self.pool.open()

    @contextmanager
    def get_cursor(self):
        """Yield a cursor; commit on success, roll back and re-raise on error."""
        with self.pool.connection() as conn:
            cursor = conn.cursor()
            try:
                yield cursor
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                cursor.close()

    def execute_query(
        self, query: str, params: tuple[Any, ...] | None = None
    ) -> list[tuple[Any, ...]]:
        """Run a SELECT and return all rows."""
        with self.get_cursor() as cursor:
            cursor.execute(query, params or ())
            return cursor.fetchall()

    def execute_update(self, query: str, params: tuple[Any, ...] | None = None) -> int:
        """Run an INSERT/UPDATE/DELETE/DDL statement and return affected rows."""
        with self.get_cursor() as cursor:
            cursor.execute(query, params or ())
            return cursor.rowcount

    def execute_batch(
        self, query: str, params_list: list[tuple], page_size: int = 100
    ) -> int:
        """Run one statement for many parameter tuples, one transaction per page.

        Returns the number of parameter tuples sent.
        """
        sent = 0
        for start in range(0, len(params_list), page_size):
            page = params_list[start : start + page_size]
            if not page:
                continue
            with self.get_cursor() as cursor:
                cursor.executemany(query, page)
            sent += len(page)
        return sent

    def close(self):
        """Close the connection pool."""
        if getattr(self, "pool", None) is not None:
            self.pool.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
