# ==============================================
# Fixture Specs and Naming
# ==============================================
#
# PURPOSE:
#   Turn whatever the caller wrote ("users", ["users", "items"],
#   {"user": "user_02"}, [("user", "user_02")]) into one ordered
#   sequence of (table, fixture) pairs, and map fixture names to
#   files by convention.
#
# NAMING CONVENTION:
# ------------------
#   fixture "users"  → file  <fixtures_dir>/users_fixt.yml
#                    → cache name  users_fixt
#   A bare name is both the table name and the fixture name.
#
# ORDER:
# ------
#   Entry order is load order. Parents come before children so
#   foreign keys resolve; unloading walks the entries backwards.
#
# ==============================================

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Union

FIXTURE_SUFFIX = "_fixt"
FIXTURE_EXTENSION = ".yml"


def cache_name(fixture: str) -> str:
    """'users' -> 'users_fixt'"""
    return f"{fixture}{FIXTURE_SUFFIX}"


def fixture_filename(fixture: str) -> str:
    """'users' -> 'users_fixt.yml'"""
    return f"{cache_name(fixture)}{FIXTURE_EXTENSION}"


def fixture_path(fixtures_dir: Union[str, Path], fixture: str) -> Path:
    return Path(fixtures_dir) / fixture_filename(fixture)


def _check_name(value, what: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{what} must be a string, got {type(value).__name__}: {value!r}")
    if not value.strip():
        raise ValueError(f"{what} must not be empty")
    return value


@dataclass(frozen=True)
class FixtureEntry:
    table: str
    fixture: str

    @property
    def cache_name(self) -> str:
        return cache_name(self.fixture)


@dataclass(frozen=True)
class FixtureSpec:
    """Ordered (table, fixture) pairs."""
    entries: tuple[FixtureEntry, ...] = ()

    @classmethod
    def parse(cls, table_spec) -> "FixtureSpec":
        """
        Accepts:
            - a FixtureSpec (returned as-is)
            - a single fixture name
            - a mapping of table name -> fixture name
            - an iterable of fixture names and/or (table, fixture) pairs
        """
        if isinstance(table_spec, FixtureSpec):
            return table_spec
        if table_spec is None:
            return cls()
        if isinstance(table_spec, str):
            name = _check_name(table_spec, "Fixture name")
            return cls((FixtureEntry(name, name),))
        if isinstance(table_spec, Mapping):
            return cls(tuple(
                FixtureEntry(_check_name(table, "Table name"), _check_name(fixture, "Fixture name"))
                for table, fixture in table_spec.items()
            ))
        if not isinstance(table_spec, Iterable):
            raise TypeError(f"Cannot read fixtures from {type(table_spec).__name__}")

        entries = []
        for item in table_spec:
            if isinstance(item, FixtureEntry):
                entries.append(item)
            elif isinstance(item, str):
                name = _check_name(item, "Fixture name")
                entries.append(FixtureEntry(name, name))
            elif isinstance(item, (tuple, list)) and len(item) == 2:
                table, fixture = item
                entries.append(FixtureEntry(
                    _check_name(table, "Table name"),
                    _check_name(fixture, "Fixture name"),
                ))
            else:
                raise TypeError(
                    f"Fixture entries must be names or (table, fixture) pairs, got {item!r}"
                )
        return cls(tuple(entries))

    @classmethod
    def from_args(cls, *args) -> "FixtureSpec":
        """from_args("a", "b") == from_args(["a", "b"]) == parse(["a", "b"])"""
        if len(args) == 1 and not isinstance(args[0], str):
            return cls.parse(args[0])
        return cls.parse(args)

    @property
    def tables(self) -> list[str]:
        return [entry.table for entry in self.entries]

    @property
    def fixtures(self) -> list[str]:
        return [entry.fixture for entry in self.entries]

    def reversed(self) -> "FixtureSpec":
        return FixtureSpec(tuple(reversed(self.entries)))

    def __iter__(self):
        return iter(self.entries)

    def __len__(self):
        return len(self.entries)

    def __bool__(self):
        return bool(self.entries)
