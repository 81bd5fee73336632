"""Scoped PostgreSQL transactions.

A Transaction rolls back on every exit from its ``with`` block unless
``commit()`` succeeded first, so no operation can leak an open transaction.
"""

from typing import Any

import psycopg2
from loguru import logger

from .errors import CommitError


class Transaction:
    """Single transaction on a psycopg2 connection."""

    def __init__(self, conn: Any, database: str) -> None:
        self._conn = conn
        self._database = database
        self._committed = False
        self._closed = False

    @property
    def database(self) -> str:
        """Get the database this transaction runs in."""
        return self._database

    @property
    def committed(self) -> bool:
        return self._committed

    def execute(self, statement: str, params: tuple[Any, ...] | None = None) -> None:
        """Execute a statement inside the transaction.

        Raises:
            psycopg2.Error: If the server rejects the statement
        """
        with self._conn.cursor() as cur:
            cur.execute(statement, params)

    def fetch_scalar(
        self, query: str, params: tuple[Any, ...] | None = None
    ) -> Any | None:
        """Run a query and return the first column of its first row.

        Returns:
            The value, or None when the query returns no row

        Raises:
            psycopg2.Error: If the query fails
        """
        with self._conn.cursor() as cur:
            cur.execute(query, params)
            row = cur.fetchone()
        if row is None:
            return None
        return row[0]

    def commit(self) -> None:
        """Commit the transaction.

        Raises:
            CommitError: If the server fails to commit
        """
        try:
            self._conn.commit()
        except psycopg2.Error as e:
            raise CommitError(
                f"Error committing transaction on database {self._database}: {e}"
            ) from e
        self._committed = True
        self._closed = True
        logger.debug(f"Committed transaction on database {self._database}")

    def rollback(self) -> None:
        """Roll back the transaction.

        Safe to call more than once and after commit, where it does nothing.
        """
        if self._closed:
            return
        self._closed = True
        try:
            self._conn.rollback()
            logger.debug(f"Rolled back transaction on database {self._database}")
        except psycopg2.Error as e:
            # Do not mask an error already propagating out of the block
            logger.warning(
                f"Rollback failed on database {self._database}: {e}"
            )

    def __enter__(self) -> "Transaction":
        return self

    def __exit__(self, *args: Any) -> None:
        self.rollback()
