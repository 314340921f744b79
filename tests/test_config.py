# ==============================================
# Tests for Configuration
# ==============================================

from ciunit.config import get_config, reset_config


class TestGetConfig:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("MYSQL_PORT", "3307")
        monkeypatch.setenv("MYSQL_DATABASE", "shop_test")
        monkeypatch.setenv("MONGO_USER", "")
        monkeypatch.setenv("FIXTURES_DIR", "acceptance/fixtures/")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        config = get_config()
        assert config.mysql.port == 3307
        assert config.mysql.database == "shop_test"
        assert config.mongo.user is None
        assert config.fixtures.fixtures_dir == "acceptance/fixtures/"
        assert config.fixtures.site_url == "http://example.test/"
        assert config.log_level == "DEBUG"

    def test_singleton_until_reset(self, monkeypatch):
        first = get_config()
        assert get_config() is first

        monkeypatch.setenv("MONGO_PORT", "27018")
        reset_config()
        assert get_config() is not first
        assert get_config().mongo.port == 27018
