"""Data sources for test results and repository metadata."""

from .base import RepositoryProvider, TestResultSource
from .playwright import PlaywrightIntegration, find_flaky_tests, map_status, parse_report
from .repository import RepositoryAnalyzer

__all__ = [
    "TestResultSource",
    "RepositoryProvider",
    "PlaywrightIntegration",
    "RepositoryAnalyzer",
    "parse_report",
    "find_flaky_tests",
    "map_status",
]
