# ==============================================
# FIXTURES (Lifecycle of test data)
# ==============================================
#
# Modules:
# --------
# - spec.py            → (table, fixture) pairs, file naming convention
# - table_fixture.py   → YAML fixture files → MySQL tables
# - manager.py         → Load/unload order, document fixtures
#
# ==============================================

from .spec import FixtureEntry, FixtureSpec, cache_name, fixture_filename, fixture_path
from .table_fixture import TableFixtureService
from .manager import FixtureManager, connected_manager

__all__ = [
    "FixtureEntry",
    "FixtureSpec",
    "FixtureManager",
    "TableFixtureService",
    "connected_manager",
    "cache_name",
    "fixture_filename",
    "fixture_path"
]
