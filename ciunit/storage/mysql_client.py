# ==============================================
# MySQLClient
# ==============================================
#
# PURPOSE:
#   Manages the MySQL connection used by table fixtures.
#   Inserts fixture rows, clears tables and runs small queries
#   that tests use to check what ended up in the database.
#
# CLASS: MySQLClient
# ------------------
#   Stateful — holds connection to MySQL.
#
#   Constructor:
#   ------------
#   - __init__(host, port, user, password, database)
#       Store connection params. Don't connect yet.
#
#   Methods:
#   --------
#   - connect() -> None
#       Establish connection. Create database if it doesn't exist.
#
#   - disconnect() -> None
#       Close connection cleanly.
#
#   - insert_rows(table_name: str, rows: list[dict]) -> int
#       Insert rows in one transaction. Return count inserted.
#       Rolls back and re-raises on the first failure.
#
#   - clear_table(table_name: str) -> int
#       DELETE every row. Return count removed.
#
#   - foreign_key_checks(enabled: bool) -> None
#       Toggle FOREIGN_KEY_CHECKS for this session.
#
#   - count_rows(table_name: str) -> int
#
#   - execute(query: str, params: tuple = None) -> None
#       Execute a raw SQL query (for flexibility).
#
#   - fetch_all(query: str, params: tuple = None) -> list[dict]
#       Execute SELECT and return rows as dicts.
#
#   Context Manager:
#   ----------------
#   - __enter__ / __exit__ for `with MySQLClient(...) as db:` usage.
#
# ==============================================

import logging
from typing import Any, cast

import pymysql
import pymysql.cursors

logger = logging.getLogger(__name__)


def quote_identifier(name: str) -> str:
    """Backtick-quote a table or column name."""
    return "`" + str(name).replace("`", "``") + "`"


class MySQLClient:
    def __init__(self, host, port, user, password, database):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.connection = None

    @classmethod
    def from_config(cls, config) -> "MySQLClient":
        return cls(
            host=config.host,
            port=config.port,
            user=config.user,
            password=config.password,
            database=config.database,
        )

    def connect(self) -> None:
        # Establish connection to MySQL, create database if it doesn't exist
        self.connection = pymysql.connect(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
        )
        cursor = self.connection.cursor()
        cursor.execute(f"CREATE DATABASE IF NOT EXISTS {quote_identifier(self.database)}")
        cursor.execute(f"USE {quote_identifier(self.database)}")
        cursor.close()
        logger.info("Connected to MySQL database '%s'", self.database)

    def disconnect(self) -> None:
        if self.connection:
            self.connection.close()
            self.connection = None
            logger.info("Disconnected from MySQL")

    def _require_connection(self):
        if self.connection is None:
            raise RuntimeError("Not connected to MySQL")
        return self.connection

    def insert_rows(self, table_name: str, rows: list[dict]) -> int:
        # All rows go in together; a failing row undoes the whole fixture
        connection = self._require_connection()
        if not rows:
            return 0
        cursor = connection.cursor()
        inserted = 0
        try:
            for row in rows:
                columns = list(row.keys())
                column_names = ", ".join(quote_identifier(col) for col in columns)
                placeholders = ", ".join(["%s"] * len(columns))
                query = f"INSERT INTO {quote_identifier(table_name)} ({column_names}) VALUES ({placeholders})"
                cursor.execute(query, tuple(row.values()))
                inserted += 1
            connection.commit()
        except pymysql.MySQLError:
            connection.rollback()
            raise
        finally:
            cursor.close()
        return inserted

    def clear_table(self, table_name: str) -> int:
        # DELETE rather than TRUNCATE: TRUNCATE refuses tables that are
        # referenced by a foreign key even when the child table is empty
        connection = self._require_connection()
        cursor = connection.cursor()
        try:
            removed = cursor.execute(f"DELETE FROM {quote_identifier(table_name)}")
            connection.commit()
        except pymysql.MySQLError:
            connection.rollback()
            raise
        finally:
            cursor.close()
        return removed

    def foreign_key_checks(self, enabled: bool) -> None:
        self.execute(f"SET FOREIGN_KEY_CHECKS = {1 if enabled else 0}")

    def count_rows(self, table_name: str) -> int:
        rows = self.fetch_all(f"SELECT COUNT(*) AS n FROM {quote_identifier(table_name)}")
        return int(rows[0]["n"]) if rows else 0

    def execute(self, query: str, params: tuple | None = None) -> None:
        connection = self._require_connection()
        cursor = connection.cursor()
        if params:
            cursor.execute(query, params)
        else:
            cursor.execute(query)
        connection.commit()
        cursor.close()

    def fetch_all(self, query: str, params: tuple | None = None) -> list[dict]:
        # Execute SELECT and return rows as dicts
        connection = self._require_connection()
        cursor = connection.cursor(pymysql.cursors.DictCursor)
        if params is not None:
            cursor.execute(query, params)
        else:
            cursor.execute(query)
        results = cast(list[dict[str, Any]], cursor.fetchall())
        cursor.close()
        return results

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
