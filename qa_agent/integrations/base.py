"""Interfaces the facade reads test data and repository metadata through."""

from typing import Any, Protocol, runtime_checkable

from ..models import FlakyTest, RepositoryStructure, TestResult


@runtime_checkable
class TestResultSource(Protocol):
    """Read-only access to the latest run and the test sources.

    Every method may raise DataSourceError when its data is unavailable.
    """

    async def get_latest_test_results(self) -> list[TestResult]: ...

    async def get_existing_tests(self) -> list[str]: ...

    async def get_all_test_files(self) -> list[str]: ...

    async def get_flaky_tests(self) -> list[FlakyTest]: ...

    async def get_existing_helpers(self) -> list[str]: ...

    async def analyze_current_reporting(self) -> dict[str, Any]: ...

    async def analyze_data_usage(self) -> list[dict[str, Any]]: ...

    async def analyze_test_patterns(self) -> list[dict[str, Any]]: ...


@runtime_checkable
class RepositoryProvider(Protocol):
    async def analyze_repository_structure(self) -> RepositoryStructure: ...
