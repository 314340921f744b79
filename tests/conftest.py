# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# Shared fixtures for all tests. No live MySQL or MongoDB is
# needed: FakeMySQLClient and FakeMongoClient keep everything in
# memory and record the calls made against them.
#
# FIXTURES:
# ---------
# - fixtures_dir       → tests/fixtures (sample YAML/JSON files)
# - mysql_client       → FakeMySQLClient
# - table_service      → TableFixtureService over mysql_client
# - mongo_client       → FakeMongoClient
# - document_store     → DocumentStore over mongo_client
# - manager            → FixtureManager wired to all of the above
# - resolver           → SiteUrlResolver for http://example.test/
#
# ==============================================

from collections import defaultdict
from pathlib import Path
from types import SimpleNamespace

import pymysql
import pytest
from pymongo.errors import DuplicateKeyError, OperationFailure

from ciunit.config import reset_config
from ciunit.fixtures.manager import FixtureManager
from ciunit.fixtures.table_fixture import TableFixtureService
from ciunit.storage.document import DocumentStore
from ciunit.testing.assertions import SiteUrlResolver

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class FakeMySQLClient:
    def __init__(self):
        self.tables = defaultdict(list)
        self.calls = []
        self.fail_tables = set()
        self.fail_clear = set()
        self.fk_checks = True

    def insert_rows(self, table_name, rows):
        self.calls.append(("insert", table_name))
        if table_name in self.fail_tables:
            raise pymysql.err.IntegrityError(1452, "Cannot add or update a child row")
        self.tables[table_name].extend(dict(row) for row in rows)
        return len(rows)

    def clear_table(self, table_name):
        self.calls.append(("clear", table_name))
        if table_name in self.fail_clear:
            raise pymysql.err.OperationalError(2013, "Lost connection to MySQL server")
        removed = len(self.tables[table_name])
        self.tables[table_name] = []
        return removed

    def foreign_key_checks(self, enabled):
        self.calls.append(("fk", enabled))
        self.fk_checks = enabled

    def inserted_tables(self):
        return [table for op, table in self.calls if op == "insert"]

    def cleared_tables(self):
        return [table for op, table in self.calls if op == "clear"]


class FakeCollection:
    def __init__(self):
        self.docs = {}
        self.fail_insert = None
        self.fail_delete = None

    def count_documents(self, query, limit=0):
        return 1 if query["_id"] in self.docs else 0

    def find_one(self, query):
        doc = self.docs.get(query["_id"])
        return dict(doc) if doc is not None else None

    def insert_one(self, document):
        if self.fail_insert:
            raise OperationFailure(self.fail_insert)
        if document["_id"] in self.docs:
            raise DuplicateKeyError(f"E11000 duplicate key error: {document['_id']}")
        self.docs[document["_id"]] = dict(document)
        return SimpleNamespace(inserted_id=document["_id"])

    def delete_one(self, query):
        if self.fail_delete:
            raise OperationFailure(self.fail_delete)
        removed = self.docs.pop(query["_id"], None)
        return SimpleNamespace(deleted_count=0 if removed is None else 1)


class FakeMongoClient:
    def __init__(self):
        self.collections = defaultdict(FakeCollection)

    def collection(self, name):
        return self.collections[name]


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Keep get_config() from leaking between tests."""
    reset_config()
    monkeypatch.setenv("SITE_URL", "http://example.test/")
    monkeypatch.setenv("INDEX_PAGE", "")
    yield
    reset_config()


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def mysql_client():
    return FakeMySQLClient()


@pytest.fixture
def table_service(mysql_client):
    return TableFixtureService(mysql_client)


@pytest.fixture
def mongo_client():
    return FakeMongoClient()


@pytest.fixture
def document_store(mongo_client):
    return DocumentStore(mongo_client)


@pytest.fixture
def manager(table_service, document_store, fixtures_dir):
    return FixtureManager(table_service, document_store, fixtures_dir)


@pytest.fixture
def resolver():
    return SiteUrlResolver("http://example.test/")
