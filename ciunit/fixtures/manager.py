# ==============================================
# FixtureManager — Fixture Lifecycle
# ==============================================
#
# PURPOSE:
#   Puts test data in place before a test and takes it away
#   afterwards. Two kinds of fixtures:
#
#   1. Table fixtures: <name>_fixt.yml files, one per table,
#      loaded in the given order and unloaded in reverse order
#      so foreign keys are never left dangling.
#
#   2. Document fixtures: JSON files saved as one MongoDB
#      document addressed by (ref, doc_type). Any document left
#      over at that address is removed first, so re-running a
#      test never trips on a duplicate key.
#
# CLASS: FixtureManager
# ---------------------
#   Constructor:
#   ------------
#   - __init__(table_service, document_store=None,
#              fixtures_dir="tests/fixtures/")
#
#   Methods:
#   --------
#   - read_fixtures(table_spec) -> FixtureSpec
#       Resolve and parse every file; cache the parsed content.
#   - load_fixtures(table_spec) -> FixtureSpec
#   - unload_fixtures(table_spec, reverse=True) -> FixtureSpec
#   - dbfixt(*table_fixtures) -> FixtureSpec
#   - fixt(*names) -> FixtureSpec
#   - add_document_fixture(file_path, ref, doc_type) -> MongoDoc
#   - delete_document_fixture(ref, doc_type) -> MongoDoc
#   - delete_document_fixtures() -> int
#   - reset() -> None
#
#   Attributes:
#   -----------
#   - loaded: dict[str, Any]            parsed YAML per fixture name
#   - documents: list[tuple[ref, type]] documents added so far
#
# FUNCTION:
# ---------
# - connected_manager(config, documents=False) -> context manager
#     Connect MySQL (and MongoDB) from config, yield a FixtureManager,
#     disconnect on exit.
#
# ==============================================

import json
import logging
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import Any, Union

from ciunit.errors import (
    FixtureConfigurationError,
    FixtureDeleteFailed,
    FixtureFileNotFound,
    FixtureLoadError,
    FixtureSaveFailed,
    InvalidFixtureJSON,
    MissingFixtureFile,
)
from ciunit.fixtures.spec import FixtureSpec, fixture_path
from ciunit.fixtures.table_fixture import TableFixtureService
from ciunit.storage.document import DocumentStore, MongoDoc, StoreResponse
from ciunit.storage.mongo_client import MongoClient
from ciunit.storage.mysql_client import MySQLClient

logger = logging.getLogger(__name__)


class FixtureManager:
    """
    Loads and unloads table fixtures and manages document fixtures.

    All collaborators are passed in; nothing is looked up globally.
    """

    def __init__(
        self,
        table_service,
        document_store=None,
        fixtures_dir: Union[str, Path] = "tests/fixtures/",
    ):
        """
        Args:
            table_service: Reads fixture files and writes rows
                (see TableFixtureService)
            document_store: Hands out document handles (see DocumentStore).
                Only needed for document fixtures.
            fixtures_dir: Directory holding the <name>_fixt.yml files
        """
        self.table_service = table_service
        self.document_store = document_store
        self.fixtures_dir = Path(fixtures_dir)
        self.loaded: dict[str, Any] = {}
        self.documents: list[tuple[Any, str]] = []

    @classmethod
    def from_config(cls, config, table_service, document_store=None) -> "FixtureManager":
        return cls(table_service, document_store, config.fixtures.fixtures_dir)

    # ==============================================
    # Table fixtures
    # ==============================================

    def fixture_path(self, fixture: str) -> Path:
        return fixture_path(self.fixtures_dir, fixture)

    def read_fixtures(self, table_spec) -> FixtureSpec:
        """
        Parse the fixture files named in table_spec into self.loaded.

        Every path is checked before anything is parsed, and every file
        is parsed and its rows checked before anything is cached, so a
        bad last entry fails before the first one is touched.

        Raises:
            MissingFixtureFile: A <name>_fixt.yml file does not exist
            InvalidFixtureData: A file is not valid YAML or does not
                hold rows
        """
        spec = FixtureSpec.parse(table_spec)
        paths = []
        for entry in spec:
            path = self.fixture_path(entry.fixture)
            if not path.is_file():
                raise MissingFixtureFile(str(path))
            paths.append(path)

        parsed = {}
        for entry, path in zip(spec, paths):
            data = self.table_service.load_file(path)
            self.table_service.rows(data, str(path))
            parsed[entry.fixture] = data

        self.loaded.update(parsed)
        return spec

    def load_fixtures(self, table_spec) -> FixtureSpec:
        """
        Load fixtures into their tables, in the order given.

        Args:
            table_spec: Fixture name, list of names / (table, fixture)
                pairs, or mapping of table -> fixture

        Returns:
            The normalized FixtureSpec, ready to hand to unload_fixtures()

        Raises:
            FixtureConfigurationError: A file is missing or malformed.
                No rows have been inserted.
            FixtureLoadError: The database refused a fixture. Tables
                earlier in the spec stay loaded.
        """
        spec = self.read_fixtures(table_spec)

        for entry in spec:
            try:
                self.table_service.load(entry.table, self.loaded[entry.fixture], entry.fixture)
            except FixtureLoadError:
                self.loaded.pop(entry.fixture, None)
                raise

        logger.debug(
            "Table fixtures %s loaded",
            ", ".join(f'"{fixture}"' for fixture in spec.fixtures)
        )
        return spec

    def unload_fixtures(self, table_spec, reverse: bool = True) -> FixtureSpec:
        """
        Empty the tables named in table_spec.

        Tables are emptied in reverse order by default: the load order
        already put parents before children, so walking it backwards
        removes children first.

        Errors from the database propagate unchanged.
        """
        spec = FixtureSpec.parse(table_spec)
        if reverse:
            spec = spec.reversed()

        for entry in spec:
            self.table_service.unload(entry.table)
            self.loaded.pop(entry.fixture, None)
            logger.debug('Table fixture "%s" unloaded', entry.fixture)
        return spec

    def dbfixt(self, *table_fixtures) -> FixtureSpec:
        """
        dbfixt("users", "items", "prices")
        dbfixt(["users", ("items", "items_02")])
        dbfixt({"users": "users", "items": "items_02"})
        """
        return self.load_fixtures(FixtureSpec.from_args(*table_fixtures))

    def fixt(self, *names: str) -> FixtureSpec:
        # each name is both table and fixture
        return self.load_fixtures(names)

    def reset(self) -> None:
        self.loaded.clear()

    # ==============================================
    # Document fixtures
    # ==============================================

    def _store(self):
        if self.document_store is None:
            raise FixtureConfigurationError("No document store configured for document fixtures")
        return self.document_store

    def add_document_fixture(self, file_path: Union[str, Path], ref: Any, doc_type: str) -> MongoDoc:
        """
        Save the JSON document in file_path at (ref, doc_type).

        Args:
            file_path: JSON file holding one object
            ref: Document _id
            doc_type: Type tag (PROJECT, BOM-ITEM-QTY, ...); picks the collection

        Returns:
            MongoDoc handle of the newly created document

        Raises:
            FixtureFileNotFound: file_path does not exist
            InvalidFixtureJSON: file_path is not a JSON object
            FixtureSaveFailed: The store refused the document
        """
        # a previous run may have left this document behind
        self.delete_document_fixture(ref, doc_type)

        path = Path(file_path)
        if not path.is_file():
            raise FixtureFileNotFound(str(path))
        try:
            content = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidFixtureJSON(str(path), str(e)) from e

        doc = self._store().document(ref, doc_type)
        try:
            doc.set_doc(content)
        except TypeError as e:
            raise InvalidFixtureJSON(str(path), str(e)) from e

        response = doc.save(StoreResponse())
        if not response.ok:
            raise FixtureSaveFailed(str(path), response.message)

        if (ref, doc_type) not in self.documents:
            self.documents.append((ref, doc_type))
        logger.debug('Document fixture "%s" saved as %s [%s]', path, doc_type, ref)
        return doc

    def delete_document_fixture(self, ref: Any, doc_type: str) -> MongoDoc:
        """
        Remove the document at (ref, doc_type) if there is one.

        Returns the handle either way.

        Raises:
            FixtureDeleteFailed: The document exists but the store refused
                to delete it
        """
        doc = self._store().document(ref, doc_type)
        if doc.exists():
            response = doc.delete(StoreResponse())
            if not response.ok:
                raise FixtureDeleteFailed(str(ref), response.message)
            logger.debug("Document fixture %s [%s] deleted", doc_type, ref)
        if (ref, doc_type) in self.documents:
            self.documents.remove((ref, doc_type))
        return doc

    def delete_document_fixtures(self) -> int:
        """Delete every document added through this manager, newest first."""
        removed = 0
        for ref, doc_type in reversed(list(self.documents)):
            self.delete_document_fixture(ref, doc_type)
            removed += 1
        return removed


@contextmanager
def connected_manager(config, documents: bool = False, foreign_key_checks: bool = True):
    """
    Open the configured stores and yield a FixtureManager using them.

    Args:
        config: AppConfig
        documents: Also connect to MongoDB for document fixtures
        foreign_key_checks: Passed on to TableFixtureService

    Usage:
        with connected_manager(get_config()) as fixtures:
            fixtures.load_fixtures(["users", "items"])
    """
    with ExitStack() as stack:
        mysql_client = stack.enter_context(MySQLClient.from_config(config.mysql))
        document_store = None
        if documents:
            mongo_client = stack.enter_context(MongoClient.from_config(config.mongo))
            document_store = DocumentStore(mongo_client)
        table_service = TableFixtureService(mysql_client, foreign_key_checks=foreign_key_checks)
        yield FixtureManager.from_config(config, table_service, document_store)
