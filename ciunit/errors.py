# ==============================================
# Fixture Errors
# ==============================================
#
# PURPOSE:
#   One exception hierarchy for everything that can go wrong while
#   preparing test data. Callers catch FixtureError to handle all
#   of them, or a subclass for a specific case.
#
# HIERARCHY:
# ----------
#   FixtureError
#   ├── FixtureConfigurationError   → the test environment is broken
#   │   ├── MissingFixtureFile      → <name>_fixt.yml not found
#   │   ├── FixtureFileNotFound     → JSON document file not found
#   │   ├── InvalidFixtureJSON      → JSON document file unparsable
#   │   └── InvalidFixtureData      → YAML unparsable or wrong shape
#   └── FixtureStoreError           → a backend refused the data
#       ├── FixtureLoadError        → rows could not be inserted
#       ├── FixtureSaveFailed       → document could not be saved
#       └── FixtureDeleteFailed     → document could not be deleted
#
# ==============================================

from typing import Optional


class FixtureError(Exception):
    """Base class for all fixture errors."""


class FixtureConfigurationError(FixtureError):
    """A fixture file is missing or malformed."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class MissingFixtureFile(FixtureConfigurationError):
    def __init__(self, path: str):
        super().__init__(f"The file {path} doesn't exist.", path)


class FixtureFileNotFound(FixtureConfigurationError):
    def __init__(self, path: str):
        super().__init__(
            f"Can not add fixture; did not find fixture JSON doc [{path}]", path
        )


class InvalidFixtureJSON(FixtureConfigurationError):
    def __init__(self, path: str, detail: str = ""):
        message = f"Can not add fixture; given JSON doc [{path}] contains invalid JSON"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, path)


class InvalidFixtureData(FixtureConfigurationError):
    pass


class FixtureStoreError(FixtureError):
    """A backend rejected fixture data."""


class FixtureLoadError(FixtureStoreError):
    def __init__(self, table: str, fixture: Optional[str] = None, detail: str = ""):
        fixture = fixture or table
        message = f"The fixture {fixture}_fixt failed to load properly into table '{table}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.table = table
        self.fixture = fixture


class FixtureSaveFailed(FixtureStoreError):
    def __init__(self, path: str, store_message: str):
        super().__init__(f"Could not save fixture file [{path}]: {store_message}")
        self.path = path
        self.store_message = store_message


class FixtureDeleteFailed(FixtureStoreError):
    def __init__(self, ref: str, store_message: str):
        super().__init__(f"Could not delete fixture document [{ref}]: {store_message}")
        self.ref = ref
        self.store_message = store_message
