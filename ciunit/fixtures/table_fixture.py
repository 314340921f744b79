# ==============================================
# TableFixtureService
# ==============================================
#
# PURPOSE:
#   Reads <name>_fixt.yml files and writes their rows into MySQL
#   tables, and empties those tables again afterwards.
#
# FILE FORMAT:
# ------------
#   user_1:            # row label, not inserted
#     id: 1
#     name: alice
#   user_2:
#     id: 2
#     name: bob
#
#   A top-level list of row mappings works too. An empty file
#   means no rows. Empty-string values are left out of the
#   INSERT so the column default applies.
#
# CLASS: TableFixtureService
# --------------------------
#   Constructor:
#   ------------
#   - __init__(mysql_client, foreign_key_checks: bool = True)
#       With foreign_key_checks=False, FOREIGN_KEY_CHECKS is turned
#       off around every load/unload so tables can be reloaded in
#       any order.
#
#   Methods:
#   --------
#   - load_file(path) -> Any            (PyYAML safe_load)
#   - rows(data) -> list[dict]
#   - load(table, data, fixture=None) -> int
#       Clear the table, insert all rows. Return count inserted.
#   - unload(table) -> int
#       Delete all rows. Return count removed.
#
# ==============================================

import logging
from collections.abc import Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Optional, Union

import pymysql
import yaml

from ciunit.errors import FixtureLoadError, InvalidFixtureData

logger = logging.getLogger(__name__)


class TableFixtureService:
    def __init__(self, mysql_client, foreign_key_checks: bool = True):
        self.mysql_client = mysql_client
        self.foreign_key_checks = foreign_key_checks

    def load_file(self, path: Union[str, Path]) -> Any:
        try:
            with open(path, encoding="utf-8") as f:
                return yaml.safe_load(f)
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            raise InvalidFixtureData(f"Fixture file {path} is not valid YAML: {e}", str(path)) from e

    @staticmethod
    def rows(data: Any, path: Optional[str] = None) -> list[dict]:
        if data is None:
            return []
        if isinstance(data, Mapping):
            records = list(data.values())
        elif isinstance(data, list):
            records = data
        else:
            label = f"Fixture {path}" if path else "Fixture"
            raise InvalidFixtureData(
                f"{label} must be a mapping of rows or a list of rows, got {type(data).__name__}",
                path,
            )

        rows = []
        for record in records:
            if not isinstance(record, Mapping):
                raise InvalidFixtureData(
                    f"Fixture row must be a mapping of column -> value, got {record!r}", path
                )
            rows.append({column: value for column, value in record.items() if value != ""})
        return rows

    @contextmanager
    def _constraints(self):
        if self.foreign_key_checks:
            yield
            return
        self.mysql_client.foreign_key_checks(False)
        try:
            yield
        finally:
            self.mysql_client.foreign_key_checks(True)

    def load(self, table: str, data: Any, fixture: Optional[str] = None) -> int:
        rows = self.rows(data, fixture)
        try:
            with self._constraints():
                self.mysql_client.clear_table(table)
                inserted = self.mysql_client.insert_rows(table, rows)
        except pymysql.MySQLError as e:
            raise FixtureLoadError(table, fixture, str(e)) from e
        logger.debug("Data fixture for db table '%s' loaded - %d rows", table, inserted)
        return inserted

    def unload(self, table: str) -> int:
        with self._constraints():
            removed = self.mysql_client.clear_table(table)
        logger.debug("Data fixture for db table '%s' unloaded - %d rows", table, removed)
        return removed
