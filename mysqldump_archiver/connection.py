"""
Live database access for MySQL Dump Archiver.

Only used to resolve table name patterns; the dump itself goes through
mysqldump.
"""

import logging
from typing import Optional

import mysql.connector
from mysql.connector import Error as MySQLError

from .models import ConnectionParams


class DatabaseConnection:
    """Manages MySQL database connections with context manager support."""

    DEFAULT_PORT = 3306
    DEFAULT_CHARSET = 'utf8mb4'

    def __init__(
        self,
        host: Optional[str],
        port: Optional[int],
        user: Optional[str],
        password: Optional[str],
        database: Optional[str] = None
    ):
        self.host = host or 'localhost'
        self.port = port or self.DEFAULT_PORT
        self.user = user
        self.password = password
        self.database = database
        self.connection = None

    @classmethod
    def from_params(cls, params: ConnectionParams) -> "DatabaseConnection":
        return cls(
            host=params.host,
            port=params.port,
            user=params.user,
            password=params.password,
            database=params.dbname
        )

    def __enter__(self) -> "DatabaseConnection":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.disconnect()

    def connect(self) -> None:
        """Establish database connection."""
        try:
            self.connection = mysql.connector.connect(
                host=self.host,
                port=self.port,
                user=self.user,
                password=self.password,
                database=self.database,
                charset=self.DEFAULT_CHARSET,
                use_unicode=True
            )
            logging.debug(f"Connected to {self.host}:{self.port}/{self.database or 'N/A'}")
        except MySQLError as e:
            logging.error(f"Failed to connect to database: {e}")
            raise

    def disconnect(self) -> None:
        if self.connection and self.connection.is_connected():
            self.connection.close()
            logging.debug("Database connection closed")

    def get_tables(self) -> list[str]:
        """Get list of all tables in the current database."""
        cursor = self.connection.cursor()
        try:
            cursor.execute("SHOW TABLES")
            return [row[0] for row in cursor.fetchall()]
        finally:
            cursor.close()
