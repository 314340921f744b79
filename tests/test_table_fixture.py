# ==============================================
# Tests for TableFixtureService
# ==============================================

import pytest

from ciunit.errors import FixtureLoadError, InvalidFixtureData
from ciunit.fixtures.table_fixture import TableFixtureService


class TestLoadFile:
    def test_label_mapping_keeps_order(self, table_service, fixtures_dir):
        data = table_service.load_file(fixtures_dir / "users_fixt.yml")
        assert list(data) == ["alice", "bob"]
        assert data["alice"]["email"] == "alice@example.test"

    def test_list_form(self, table_service, fixtures_dir):
        data = table_service.load_file(fixtures_dir / "users_02_fixt.yml")
        assert data == [{"id": 10, "name": "carol", "email": "carol@example.test", "locked": True}]

    def test_invalid_yaml(self, table_service, tmp_path):
        path = tmp_path / "broken_fixt.yml"
        path.write_text("alice:\n  id: [1, 2\n")
        with pytest.raises(InvalidFixtureData) as exc_info:
            table_service.load_file(path)
        assert exc_info.value.path == str(path)

    def test_not_utf8(self, table_service, tmp_path):
        path = tmp_path / "latin1_fixt.yml"
        path.write_bytes(b"alice:\n  name: Ren\xe9\n")
        with pytest.raises(InvalidFixtureData) as exc_info:
            table_service.load_file(path)
        assert exc_info.value.path == str(path)


class TestRows:
    def test_empty_file_has_no_rows(self):
        assert TableFixtureService.rows(None) == []

    def test_empty_strings_are_left_out(self, table_service, fixtures_dir):
        rows = TableFixtureService.rows(table_service.load_file(fixtures_dir / "users_fixt.yml"))
        assert rows[0] == {"id": 1, "name": "alice", "email": "alice@example.test"}
        assert rows[1]["nickname"] == "bobby"

    def test_scalar_document_is_rejected(self):
        with pytest.raises(InvalidFixtureData):
            TableFixtureService.rows("just a string", "users")

    def test_scalar_row_is_rejected(self):
        with pytest.raises(InvalidFixtureData):
            TableFixtureService.rows({"alice": 1})


class TestLoadUnload:
    def test_load_clears_then_inserts(self, table_service, mysql_client):
        mysql_client.tables["groups"] = [{"id": 99}]
        count = table_service.load("groups", {"a": {"id": 1}, "b": {"id": 2}})
        assert count == 2
        assert mysql_client.calls == [("clear", "groups"), ("insert", "groups")]
        assert mysql_client.tables["groups"] == [{"id": 1}, {"id": 2}]

    def test_database_error_becomes_load_error(self, table_service, mysql_client):
        mysql_client.fail_tables.add("user_groups")
        with pytest.raises(FixtureLoadError) as exc_info:
            table_service.load("user_groups", [{"user_id": 7}], "user_groups")
        assert exc_info.value.table == "user_groups"
        assert "user_groups_fixt" in str(exc_info.value)

    def test_unload_returns_removed_count(self, table_service, mysql_client):
        mysql_client.tables["groups"] = [{"id": 1}, {"id": 2}]
        assert table_service.unload("groups") == 2
        assert mysql_client.tables["groups"] == []

    def test_foreign_key_checks_untouched_by_default(self, table_service, mysql_client):
        table_service.load("groups", [{"id": 1}])
        table_service.unload("groups")
        assert ("fk", False) not in mysql_client.calls

    def test_foreign_key_checks_toggled_when_disabled(self, mysql_client):
        service = TableFixtureService(mysql_client, foreign_key_checks=False)
        service.load("groups", [{"id": 1}])
        assert mysql_client.calls == [
            ("fk", False), ("clear", "groups"), ("insert", "groups"), ("fk", True)
        ]

    def test_foreign_key_checks_restored_after_failure(self, mysql_client):
        mysql_client.fail_tables.add("groups")
        service = TableFixtureService(mysql_client, foreign_key_checks=False)
        with pytest.raises(FixtureLoadError):
            service.load("groups", [{"id": 1}])
        assert mysql_client.fk_checks is True
