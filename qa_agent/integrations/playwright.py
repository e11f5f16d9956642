"""Test report and test tree reader.

Reads ``<test_results_path>/<results_file>``, either as written by
Playwright's JSON reporter (nested suites) or by the generated pytest
reporter plugin (a flat ``results`` list), and scans the test directory for
sources. All paths are resolved against ``root``.
"""

import json
import re
from pathlib import Path
from typing import Any, Optional

import structlog

from ..config import Settings, get_settings
from ..errors import DataSourceError
from ..models import FlakyTest, TestResult, TestStatus, TestSummary

logger = structlog.get_logger()

# Attempt and final statuses as reported by Playwright, lower-cased
STATUS_MAP = {
    "passed": TestStatus.PASSED,
    "expected": TestStatus.PASSED,
    "flaky": TestStatus.PASSED,
    "failed": TestStatus.FAILED,
    "unexpected": TestStatus.FAILED,
    "interrupted": TestStatus.FAILED,
    "skipped": TestStatus.SKIPPED,
    "timedout": TestStatus.TIMEDOUT,
}

EXISTING_TEST_LIMIT = 3
CONFIG_FILES = ["pytest.ini", "pyproject.toml", "setup.cfg", "tox.ini", "conftest.py"]

_TEST_DEF = re.compile(r"^[ \t]*(?:async\s+)?def\s+test_\w*\s*\(", re.MULTILINE)
_TEST_CLASS = re.compile(r"^class\s+Test\w*", re.MULTILINE)
_EXPECT = re.compile(r"\bexpect\s*\(")
_QUOTED = re.compile(r"\"[^\"\n]{3,}\"|'[^'\n]{3,}'")
_EMAIL = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
_URL = re.compile(r"https?://[^\s\"']+")


def map_status(status: Optional[str]) -> TestStatus:
    """Unknown or missing statuses count as failures."""
    return STATUS_MAP.get(str(status or "").lower(), TestStatus.FAILED)


def count_hardcoded_data(content: str) -> int:
    """Rough count of literal strings, emails and URLs in a test file."""
    return len(_QUOTED.findall(content)) + len(_EMAIL.findall(content)) + len(_URL.findall(content))


def _error_message(result: dict) -> Optional[str]:
    error = result.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str) and error:
        return error
    for item in result.get("errors") or []:
        if isinstance(item, dict) and item.get("message"):
            return str(item["message"])
    return None


def _screenshot(result: dict) -> Optional[str]:
    if result.get("screenshot"):
        return str(result["screenshot"])
    for attachment in result.get("attachments") or []:
        if attachment.get("name") == "screenshot" and attachment.get("path"):
            return str(attachment["path"])
    return None


def _iter_tests(suite: dict, file: Optional[str] = None):
    """Yield ``(title, file, test)`` for every test under a suite, depth first."""
    file = suite.get("file") or file

    # Flat layout: tests directly under the suite
    for test in suite.get("tests") or []:
        yield test.get("title") or "Unknown test", file, test

    for spec in suite.get("specs") or []:
        for test in spec.get("tests") or []:
            title = spec.get("title") or test.get("title") or "Unknown test"
            yield title, spec.get("file") or file, test

    for child in suite.get("suites") or []:
        yield from _iter_tests(child, file)


def _iter_report(report: dict):
    """Yield ``(title, file, test)`` for every test in a report.

    Accepts the Playwright JSON reporter's nested ``suites`` and the flat
    ``results`` list written by the generated pytest reporter plugin.
    """
    for suite in report.get("suites") or []:
        yield from _iter_tests(suite)

    for test in report.get("results") or []:
        if isinstance(test, dict):
            yield test.get("title") or "Unknown test", test.get("file"), test


def parse_report(report: dict) -> list[TestResult]:
    """Flatten a test report into one TestResult per test, using the last attempt."""
    results: list[TestResult] = []

    for title, file, test in _iter_report(report):
        attempts = [a for a in test.get("results") or [] if isinstance(a, dict)]
        last = attempts[-1] if attempts else test
        status = last.get("status") or test.get("status")

        results.append(TestResult(
            title=title,
            status=map_status(status),
            error=_error_message(last),
            screenshot=_screenshot(last) or _screenshot(test),
            duration=int(last.get("duration") or 0),
            file=file or "unknown",
        ))

    return results


def summarize_results(results: list[TestResult]) -> TestSummary:
    return TestSummary(
        total=len(results),
        passed=sum(1 for r in results if r.status == TestStatus.PASSED),
        failed=sum(1 for r in results if r.status == TestStatus.FAILED),
        skipped=sum(1 for r in results if r.status == TestStatus.SKIPPED),
    )


def find_flaky_tests(report: dict) -> list[FlakyTest]:
    """Tests that both passed and failed across retries, or were reported flaky."""
    flaky: list[FlakyTest] = []

    for title, file, test in _iter_report(report):
        attempts = [a for a in test.get("results") or [] if isinstance(a, dict)]
        statuses = [map_status(a.get("status")) for a in attempts]
        failed = [a for a, s in zip(attempts, statuses) if s in (TestStatus.FAILED, TestStatus.TIMEDOUT)]
        passed = TestStatus.PASSED in statuses

        if not ((passed and failed) or str(test.get("status", "")).lower() == "flaky"):
            continue

        pattern = next((m for m in map(_error_message, failed) if m), None)
        flaky.append(FlakyTest(
            name=title,
            file=file or "unknown",
            failure_pattern=pattern or "Unknown failure",
            failure_rate=len(failed) / len(attempts) if attempts else None,
        ))

    return flaky


class PlaywrightIntegration:
    """Test result source backed by the JSON test report and the local test tree."""

    def __init__(self, settings: Optional[Settings] = None, root: Optional[Path] = None):
        self.settings = settings or get_settings()
        self.root = Path(root) if root is not None else Path(".")
        self.log = logger.bind(component="playwright_integration")

    @property
    def results_path(self) -> Path:
        return self.root / self.settings.test_results_path / self.settings.results_file

    @property
    def test_directory(self) -> Path:
        return self.root / self.settings.test_directory

    def _load_report(self) -> dict:
        """Read and decode the JSON report.

        Raises:
            DataSourceError: If the report is missing or malformed
        """
        if not self.results_path.exists():
            raise DataSourceError(
                "No test results found",
                details={"path": str(self.results_path)},
            )

        try:
            report = json.loads(self.results_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise DataSourceError(
                f"Failed to read test results: {e}",
                details={"path": str(self.results_path)},
            ) from e

        if not isinstance(report, dict):
            raise DataSourceError("Test results are not a JSON object")
        return report

    def _read(self, file: str) -> Optional[str]:
        try:
            return Path(file).read_text(encoding="utf-8")
        except OSError as e:
            self.log.warning("Could not read test file", file=file, error=str(e))
            return None

    async def get_latest_test_results(self) -> list[TestResult]:
        results = parse_report(self._load_report())
        self.log.info("Loaded test results", count=len(results))
        return results

    async def get_flaky_tests(self) -> list[FlakyTest]:
        flaky = find_flaky_tests(self._load_report())
        self.log.info("Identified flaky tests", count=len(flaky))
        return flaky

    async def get_all_test_files(self) -> list[str]:
        """Test files under the test directory, sorted.

        Raises:
            DataSourceError: If the test directory does not exist
        """
        if not self.test_directory.is_dir():
            raise DataSourceError(
                "Test directory not found",
                details={"path": str(self.test_directory)},
            )

        files: set[Path] = set()
        for pattern in self.settings.test_file_patterns:
            files.update(p for p in self.test_directory.glob(pattern) if p.is_file())
        return sorted(str(p) for p in files)

    async def get_existing_tests(self) -> list[str]:
        """Contents of the first few readable test files."""
        contents: list[str] = []
        for file in await self.get_all_test_files():
            content = self._read(file)
            if content is not None:
                contents.append(content)
            if len(contents) >= EXISTING_TEST_LIMIT:
                break
        return contents

    async def get_existing_helpers(self) -> list[str]:
        helpers_dir = self.root / self.settings.helpers_dir
        if not helpers_dir.is_dir():
            return []
        return sorted(
            str(p) for p in helpers_dir.glob("*.py")
            if p.is_file() and p.name != "__init__.py"
        )

    async def analyze_test_patterns(self) -> list[dict[str, Any]]:
        patterns = []
        for file in await self.get_all_test_files():
            content = self._read(file)
            if content is None:
                continue
            patterns.append({
                "file": file,
                "test_count": len(_TEST_DEF.findall(content)),
                "class_count": len(_TEST_CLASS.findall(content)),
                "expect_count": len(_EXPECT.findall(content)),
                "has_page_object": "Page" in content,
                "has_locators": "locator(" in content,
                "has_waits": "wait_for" in content,
                "has_screenshots": "screenshot" in content,
                "size": len(content),
            })
        return patterns

    async def analyze_current_reporting(self) -> dict[str, Any]:
        """Reporter and artifact options found in the pytest configuration files."""
        found = [self.root / name for name in CONFIG_FILES if (self.root / name).is_file()]
        if not found:
            return {"has_config": False, "message": "No pytest configuration found"}

        content = "\n".join(p.read_text(encoding="utf-8") for p in found)
        return {
            "has_config": True,
            "config_files": [p.name for p in found],
            "has_html_reporter": "--html" in content or "pytest-html" in content,
            "has_json_reporter": "json" in content,
            "has_junit_reporter": "junit" in content,
            "has_allure_reporter": "allure" in content,
            "has_screenshots": "screenshot" in content,
            "has_video": "video" in content,
            "has_trace": "tracing" in content,
        }

    async def analyze_data_usage(self) -> list[dict[str, Any]]:
        usage = []
        for file in await self.get_all_test_files():
            content = self._read(file)
            if content is None:
                continue
            usage.append({
                "file": file,
                "uses_test_data": "test_data" in content or "fixture" in content,
                "uses_faker": "faker" in content.lower(),
                "uses_json_files": ".json" in content,
                "uses_environment_vars": "os.environ" in content or "getenv" in content,
                "uses_database": "db." in content or "database" in content,
                "uses_api": "api." in content or "request." in content,
                "hardcoded_data": count_hardcoded_data(content),
            })
        return usage
