# ==============================================
# TESTING (Test runner integration)
# ==============================================
#
# Modules:
# --------
# - case.py        → FixtureTestCase: fixtures loaded around each test
# - assertions.py  → assert_redirects, SiteUrlResolver
#
# ==============================================

from .assertions import CapturedOutput, SiteUrlResolver, assert_redirects
from .case import FixtureTestCase

__all__ = [
    "CapturedOutput",
    "FixtureTestCase",
    "SiteUrlResolver",
    "assert_redirects"
]
