# ==============================================
# ciunit — Fixture Loading for Test Suites
# ==============================================
#
# Package Structure:
#
# ciunit/
# ├── storage/     # MySQL + MongoDB clients, document handles
# ├── fixtures/    # Fixture lifecycle: spec, YAML table loader, manager
# ├── testing/     # TestCase base class and redirect assertion
# ├── config.py    # Configuration management
# ├── errors.py    # Fixture error taxonomy
# └── cli.py       # Command line entry point
#
# ==============================================

__version__ = "0.1.0"
