"""PostgreSQL connection management.

Provides centralized database settings, connection utilities and the
transaction/feature-gate contract used by the comment resource.
"""

from contextlib import closing
from typing import Any

import psycopg2
from loguru import logger
from pydantic import BaseModel

from src.app.runtime.config.config_data import DatabaseConfig, SslMode
from src.cli.shared.secrets import get_password

from .errors import TransactionError
from .features import Feature, feature_supported, format_server_version
from .transaction import Transaction


class DbSettings(BaseModel):
    """Connection settings for the managed PostgreSQL server.

    ``database`` is the default database, used for statements that are not
    scoped to a particular database (database and role comments).
    """

    host: str = "localhost"
    port: int = 5432
    database: str = "postgres"
    username: str = "postgres"
    password: str | None = None
    sslmode: SslMode = "prefer"
    connect_timeout: int = 5

    def ensure_password(self) -> "DbSettings":
        """Ensure the connection password is set.

        Falls back to PGPASSWORD, then to an interactive prompt.
        """
        if not self.password:
            self.password = get_password(
                f"PostgreSQL user ({self.username}) password: ",
                "PGPASSWORD",
            )
        return self

    @classmethod
    def load(cls, db_config: DatabaseConfig) -> "DbSettings":
        """Load settings from application config.

        Args:
            db_config: The ``database`` section of config.yaml

        Returns:
            DbSettings populated from ConfigData.database
        """
        return cls(
            host=db_config.host or "localhost",
            port=db_config.port or 5432,
            database=db_config.database,
            username=db_config.username,
            password=db_config.password or None,
            sslmode=db_config.sslmode,
            connect_timeout=db_config.connect_timeout,
        )


class PostgresConnection:
    """PostgreSQL connection manager.

    Uses psycopg2 for database operations. A single connection is kept open
    and transparently replaced when an operation targets another database.
    """

    def __init__(self, settings: DbSettings) -> None:
        self._settings = settings
        self._conn: Any | None = None
        self._current_database: str | None = None  # Track connected database

    def get_dsn(self, database: str | None = None) -> dict[str, Any]:
        """Get connection parameters for psycopg2.connect().

        Args:
            database: Override database name

        Returns:
            Dict of connection parameters
        """
        return {
            "host": self._settings.host,
            "port": self._settings.port,
            "dbname": database or self._settings.database,
            "user": self._settings.username,
            "password": self._settings.password or "",
            "sslmode": self._settings.sslmode,
            "connect_timeout": self._settings.connect_timeout,
        }

    def ensure_connected(self, database: str | None = None) -> Any:
        """Ensure a connection exists, creating one if needed.

        Args:
            database: Override database name

        Returns:
            Active connection
        """
        target_db = database or self._settings.database
        # Reconnect if connection is closed or we need a different database
        if (
            self._conn is None
            or self._conn.closed
            or self._current_database != target_db
        ):
            self.close()  # Close existing connection if any
            logger.debug(f"Connecting to database {target_db} on {self._settings.host}")
            self._conn = psycopg2.connect(**self.get_dsn(target_db))
            self._current_database = target_db
        return self._conn

    def close(self) -> None:
        """Close the current connection if open."""
        if self._conn and not self._conn.closed:
            self._conn.close()
        self._conn = None
        self._current_database = None

    def test_connection(self, database: str | None = None) -> tuple[bool, str]:
        """Test database connectivity.

        Creates a separate test connection without affecting the main connection.

        Returns:
            Tuple of (success, message)
        """
        try:
            with closing(psycopg2.connect(**self.get_dsn(database))) as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT version()")
                    row = cur.fetchone()
                    if row:
                        return True, f"Connected: {row[0]}"
                    return True, "Connected"
        except psycopg2.OperationalError as e:
            return False, f"Connection failed: {e}"
        except psycopg2.Error as e:
            return False, f"Error: {e}"

    def start_transaction(self, database: str | None = None) -> Transaction:
        """Open a transaction on the given database.

        Args:
            database: Target database; empty or None uses the default database

        Returns:
            A Transaction to be used as a context manager

        Raises:
            TransactionError: If the connection cannot be established
        """
        target_db = database or self._settings.database
        try:
            conn = self.ensure_connected(target_db)
        except psycopg2.Error as e:
            raise TransactionError(
                f"Error connecting to database {target_db}: {e}"
            ) from e
        logger.debug(f"Starting transaction on database {target_db}")
        return Transaction(conn, target_db)

    @property
    def server_version(self) -> int:
        """Get the libpq version number of the connected server.

        Raises:
            TransactionError: If the connection cannot be established
        """
        try:
            conn = self.ensure_connected(self._current_database)
        except psycopg2.Error as e:
            raise TransactionError(f"Error connecting to PostgreSQL: {e}") from e
        return conn.server_version

    @property
    def version(self) -> str:
        """Get the connected server version as a dotted string."""
        return format_server_version(self.server_version)

    def feature_supported(self, feature: Feature) -> bool:
        """Check whether the connected server supports a feature."""
        return feature_supported(feature, self.server_version)

    @property
    def settings(self) -> DbSettings:
        """Get the database settings."""
        return self._settings

    def __enter__(self) -> "PostgresConnection":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

