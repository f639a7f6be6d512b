"""
Database helper functions for the batcher.
Configuration and the single psycopg connection shared by the store handlers.
"""

import os
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import psycopg
from psycopg import Connection

from .error import BatcherError
from .logging import BatcherLogger, get_logger


# Environment variable and fallback of each configuration field.
ENV_VARIABLES: Dict[str, Tuple[str, str]] = {
    "host": ("BATCHER_DB_HOST", "localhost"),
    "port": ("BATCHER_DB_PORT", "5432"),
    "database": ("BATCHER_DB_DATABASE", "batcher"),
    "username": ("BATCHER_DB_USERNAME", "postgres"),
    "password": ("BATCHER_DB_PASSWORD", ""),
    "schema": ("BATCHER_DB_SCHEMA", "public"),
    "sslmode": ("BATCHER_DB_SSLMODE", "require"),
    "with_table_drop": ("BATCHER_DB_WITH_TABLE_DROP", "false"),
}


@dataclass
class DatabaseConfiguration:
    """
    Connection settings of the PostgreSQL database holding checkpoints and queues.
    with_table_drop recreates the batcher tables on startup, for tests only.
    """

    host: str
    port: int
    database: str
    username: str
    password: str
    schema: str = "public"
    sslmode: str = "require"
    with_table_drop: bool = False

    @classmethod
    def from_env(cls) -> "DatabaseConfiguration":
        """
        Create configuration from the BATCHER_DB_* environment variables.
        Unset variables fall back to a local development database.

        :raises ValueError: If a required value is set but blank or the port is not a number.
        """
        values = {
            field: os.getenv(variable, default)
            for field, (variable, default) in ENV_VARIABLES.items()
        }

        missing = [
            ENV_VARIABLES[field][0]
            for field in ("host", "database", "username")
            if not values[field].strip()
        ]
        if missing:
            raise ValueError(
                f"Required environment variables missing: {', '.join(missing)}"
            )

        try:
            port = int(values["port"])
        except ValueError:
            raise ValueError(f"BATCHER_DB_PORT must be a number, got {values['port']}")

        return cls(
            host=values["host"],
            port=port,
            database=values["database"],
            username=values["username"],
            password=values["password"],
            schema=values["schema"] or "public",
            sslmode=values["sslmode"] or "require",
            with_table_drop=values["with_table_drop"].lower() == "true",
        )

    def connection_string(self) -> str:
        """Get connection string for psycopg3."""
        return (
            f"host={self.host} port={self.port} dbname={self.database} "
            f"user={self.username} password={self.password} sslmode={self.sslmode} "
            f"application_name=batcher options='-c search_path={self.schema}'"
        )


class Database:
    """
    Database service wrapper around one psycopg connection.
    Handlers commit or roll back on it themselves.
    """

    def __init__(
        self,
        name: str,
        config: DatabaseConfiguration,
        logger: Optional[BatcherLogger] = None,
        auto_connect: bool = True,
    ):
        self.name = name
        self.config = config
        self.logger = logger or get_logger(__name__)
        self.instance: Optional[Connection] = None

        if auto_connect:
            self.connect_to_database()

    def connect_to_database(self) -> None:
        """
        Open the connection and check it with a trivial query.

        :raises BatcherError: If the database can not be reached.
        """
        try:
            self.instance = psycopg.connect(
                self.config.connection_string(), autocommit=False
            )
            self.instance.execute("SELECT 1")
            self.instance.commit()
        except Exception as e:
            self.instance = None
            raise BatcherError(f"connecting to database {self.config.database}", e)

        self.logger.info(
            "Connected to database", name=self.name, database=self.config.database
        )

    def check_table_existence(self, table_name: str) -> bool:
        """
        Check if a table exists in the current schema.
        """
        if not self.instance:
            raise BatcherError(
                "check table existence",
                ConnectionError("Database connection not established"),
            )

        try:
            with self.instance.cursor() as cur:
                cur.execute(
                    "SELECT EXISTS (SELECT 1 FROM information_schema.tables "
                    "WHERE table_schema = current_schema() AND table_name = %s);",
                    (table_name,),
                )
                result = cur.fetchone()
            self.instance.commit()
        except Exception as e:
            self.instance.rollback()
            raise BatcherError(f"checking table {table_name}", e)

        return bool(result[0]) if result else False

    def close(self) -> None:
        """Close the database connection."""
        if self.instance:
            self.instance.close()
            self.instance = None
            self.logger.info("Database connection closed", name=self.name)


def new_database(
    name: str,
    config: DatabaseConfiguration,
    logger: Optional[BatcherLogger] = None,
) -> Database:
    """
    Create a new Database instance connected with the given configuration.
    """
    return Database(name, config, logger)
