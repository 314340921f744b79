# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load all configuration from environment variables / .env file.
#   Provides typed config objects to the clients, the fixture
#   manager and the CLI.
#
# CLASSES:
# --------
# - MySQLConfig (dataclass)
#     host: str          (default "localhost")
#     port: int          (default 3306)
#     user: str          (default "root")
#     password: str      (default "root")
#     database: str      (default "ciunit_test")
#
# - MongoConfig (dataclass)
#     host: str          (default "localhost")
#     port: int          (default 27017)
#     user: str | None   (default None)
#     password: str | None (default None)
#     database: str      (default "ciunit_test")
#
# - FixtureConfig (dataclass)
#     fixtures_dir: str  (default "tests/fixtures/")
#     site_url: str      (default "http://localhost/")
#     index_page: str    (default "")
#
# - AppConfig (dataclass)
#     mysql: MySQLConfig
#     mongo: MongoConfig
#     fixtures: FixtureConfig
#     log_level: str     (default "WARNING")
#
# FUNCTIONS:
# ----------
# - get_config() -> AppConfig
#     Load .env using python-dotenv, construct AppConfig.
#     Returns the same singleton on repeated calls.
#
# - reset_config() -> None
#     Drop the singleton so the next get_config() re-reads the env.
#
# USAGE:
# ------
#   from ciunit.config import get_config
#   config = get_config()
#   print(config.mysql.host)
#   print(config.fixtures.fixtures_dir)
#
# ==============================================

import os
from dataclasses import dataclass
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv


@dataclass
class MySQLConfig:
    """MySQL database configuration."""
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = "root"
    database: str = "ciunit_test"


@dataclass
class MongoConfig:
    """MongoDB database configuration."""
    host: str = "localhost"
    port: int = 27017
    user: Optional[str] = None
    password: Optional[str] = None
    database: str = "ciunit_test"


@dataclass
class FixtureConfig:
    """Where fixture files live and how site URLs are built."""
    fixtures_dir: str = "tests/fixtures/"
    site_url: str = "http://localhost/"
    index_page: str = ""


@dataclass
class AppConfig:
    """Main application configuration."""
    mysql: MySQLConfig
    mongo: MongoConfig
    fixtures: FixtureConfig
    log_level: str = "WARNING"


# Singleton instance
_config_instance: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Returns:
        AppConfig: Application configuration
    """
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    mysql_config = MySQLConfig(
        host=os.getenv("MYSQL_HOST", "localhost"),
        port=int(os.getenv("MYSQL_PORT", "3306")),
        user=os.getenv("MYSQL_USER", "root"),
        password=os.getenv("MYSQL_PASSWORD", "root"),
        database=os.getenv("MYSQL_DATABASE", "ciunit_test")
    )

    mongo_config = MongoConfig(
        host=os.getenv("MONGO_HOST", "localhost"),
        port=int(os.getenv("MONGO_PORT", "27017")),
        user=os.getenv("MONGO_USER") or None,
        password=os.getenv("MONGO_PASSWORD") or None,
        database=os.getenv("MONGO_DATABASE", "ciunit_test")
    )

    fixture_config = FixtureConfig(
        fixtures_dir=os.getenv("FIXTURES_DIR", "tests/fixtures/"),
        site_url=os.getenv("SITE_URL", "http://localhost/"),
        index_page=os.getenv("INDEX_PAGE", "")
    )

    _config_instance = AppConfig(
        mysql=mysql_config,
        mongo=mongo_config,
        fixtures=fixture_config,
        log_level=os.getenv("LOG_LEVEL", "WARNING").upper()
    )

    return _config_instance


def reset_config() -> None:
    """Forget the cached configuration (used by tests)."""
    global _config_instance
    _config_instance = None
