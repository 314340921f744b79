# ==============================================
# CLI — Command Line Entry Point
# ==============================================
#
# PURPOSE:
#   Use the same fixture files the tests use to seed or clear a
#   development database by hand.
#
# COMMANDS:
# ---------
# 1. Load fixtures (table = fixture name, or TABLE=FIXTURE):
#    python -m ciunit.cli load groups users=users_02
#
# 2. Empty the tables again, in reverse order:
#    python -m ciunit.cli unload groups users=users_02
#
# 3. Check fixture files exist and parse, without a database:
#    python -m ciunit.cli check groups users
#
# OPTIONS:
# --------
#   --fixtures-dir DIR   override FIXTURES_DIR
#   --no-fk-checks       turn FOREIGN_KEY_CHECKS off while writing
#   -v / --verbose       DEBUG logging
#
# Exit status is 1 when any fixture error occurs.
#
# ==============================================

import argparse
import dataclasses
import logging
import sys
from typing import Optional

from ciunit.config import get_config
from ciunit.errors import FixtureError
from ciunit.fixtures.manager import FixtureManager, connected_manager
from ciunit.fixtures.spec import FixtureSpec
from ciunit.fixtures.table_fixture import TableFixtureService

logger = logging.getLogger(__name__)


def parse_fixture_args(values: list[str]) -> FixtureSpec:
    """["users", "items=items_02"] -> (users, users), (items, items_02)"""
    pairs = []
    for value in values:
        table, sep, fixture = value.partition("=")
        pairs.append((table, fixture) if sep else value)
    return FixtureSpec.parse(pairs)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ciunit",
        description="Load, unload and check YAML table fixtures"
    )
    parser.add_argument("--fixtures-dir", help="Directory holding <name>_fixt.yml files")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)
    for name, help_text in (
        ("load", "Load fixtures into their tables"),
        ("unload", "Empty the tables of the given fixtures, in reverse order"),
        ("check", "Verify fixture files exist and parse"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("fixtures", nargs="+", metavar="FIXTURE", help="NAME or TABLE=FIXTURE")
        if name != "check":
            sub.add_argument("--no-fk-checks", action="store_true",
                             help="Disable FOREIGN_KEY_CHECKS while writing")
    return parser


def run_check(manager: FixtureManager, spec: FixtureSpec) -> None:
    manager.read_fixtures(spec)
    for entry in spec:
        rows = TableFixtureService.rows(manager.loaded[entry.fixture], entry.fixture)
        print(f"✓ {manager.fixture_path(entry.fixture)} → {entry.table}: {len(rows)} rows")


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = get_config()
    if args.fixtures_dir:
        config = dataclasses.replace(
            config, fixtures=dataclasses.replace(config.fixtures, fixtures_dir=args.fixtures_dir)
        )

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    try:
        spec = parse_fixture_args(args.fixtures)
        if args.command == "check":
            run_check(FixtureManager.from_config(config, TableFixtureService(None)), spec)
            return 0

        with connected_manager(config, foreign_key_checks=not args.no_fk_checks) as manager:
            if args.command == "load":
                manager.load_fixtures(spec)
                print(f"✓ Loaded {len(spec)} fixtures: {', '.join(spec.fixtures)}")
            else:
                manager.unload_fixtures(spec)
                print(f"✓ Unloaded {len(spec)} tables: {', '.join(reversed(spec.tables))}")
    except (FixtureError, TypeError, ValueError) as e:
        logger.debug("Fixture command failed", exc_info=True)
        print(f"✗ {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
