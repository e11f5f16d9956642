"""Static scaffolding for reporting, helpers, architecture and test data.

These builders do not call the API. They render fixed Python and HTML
templates for a pytest-playwright suite, parameterized by domain name or by
what the repository already contains.
"""

import re
from pathlib import PurePath
from typing import Optional

from ..models import (
    ArchitectureOptimization,
    DataManagementSystem,
    HelperCategory,
    HelperClassSuggestion,
    ReportEnhancement,
    RepositoryStructure,
)

REPORT_FEATURES = [
    "Interactive charts and graphs",
    "Performance metrics tracking",
    "Screenshot/video integration",
    "Failure analysis",
    "Historical trends",
    "Email/Slack notifications",
    "Executive dashboard",
]

# Estimated percent speedup per recommended improvement
GAIN_PER_IMPROVEMENT = 7


def snake_case(name: str) -> str:
    """``LeaveRequest`` -> ``leave_request``"""
    name = re.sub(r"[^0-9A-Za-z]+", "_", name.strip())
    name = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", name)
    return name.strip("_").lower()


def class_prefix(domain: str) -> str:
    """``leave request`` -> ``LeaveRequest``"""
    parts = re.split(r"[^0-9A-Za-z]+", domain.strip())
    return "".join(p[:1].upper() + p[1:] for p in parts if p)


# =============================================================================
# Reporting
# =============================================================================

def reporter_plugin() -> str:
    return '''"""pytest plugin collecting per-test outcomes for the HTML report."""

import json
import time
from pathlib import Path

import pytest


class AdvancedReporter:
    def __init__(self, output_dir: str = "test-results"):
        self.output_dir = Path(output_dir)
        self.start_time = time.time()
        self.results: list[dict] = []
        self.reruns: dict[str, list[dict]] = {}

    def pytest_sessionstart(self, session):
        self.start_time = time.time()

    @pytest.hookimpl(hookwrapper=True)
    def pytest_runtest_makereport(self, item, call):
        outcome = yield
        report = outcome.get_result()
        attempt = {
            "status": "failed" if report.outcome == "rerun" else report.outcome,
            "duration": int(report.duration * 1000),
            "error": str(report.longrepr) if report.outcome in ("failed", "rerun") else None,
        }
        # Attempts retried by pytest-rerunfailures
        if report.outcome == "rerun":
            self.reruns.setdefault(item.nodeid, []).append(attempt)
        elif report.when == "call" or report.outcome == "skipped":
            self.results.append({
                "title": item.name,
                "file": str(item.path),
                **attempt,
                "results": self.reruns.pop(item.nodeid, []) + [attempt],
            })

    def pytest_sessionfinish(self, session, exitstatus):
        self.output_dir.mkdir(parents=True, exist_ok=True)
        total = len(self.results)
        passed = sum(1 for r in self.results if r["status"] == "passed")
        summary = {
            "total": total,
            "passed": passed,
            "failed": sum(1 for r in self.results if r["status"] == "failed"),
            "pass_rate": round(passed / total * 100) if total else 0,
            "duration": int((time.time() - self.start_time) * 1000),
            "results": self.results,
        }
        (self.output_dir / "results.json").write_text(json.dumps(summary, indent=2))


def pytest_configure(config):
    config.pluginmanager.register(AdvancedReporter(), "advanced-reporter")
'''


def html_template() -> str:
    return """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Advanced Test Report</title>
    <script src="https://cdn.jsdelivr.net/npm/chart.js"></script>
    <style>
        body { font-family: Arial, sans-serif; margin: 20px; }
        .metrics { display: flex; gap: 20px; margin-bottom: 30px; }
        .metric { padding: 20px; border-radius: 8px; background: #f5f5f5; }
        .chart-container { width: 100%; height: 400px; margin: 20px 0; }
    </style>
</head>
<body>
    <h1>Test Execution Report</h1>
    <div class="metrics">
        <div class="metric"><h3>Total Tests</h3><p id="total-tests">{{ total }}</p></div>
        <div class="metric"><h3>Passed</h3><p id="passed-tests">{{ passed }}</p></div>
        <div class="metric"><h3>Failed</h3><p id="failed-tests">{{ failed }}</p></div>
        <div class="metric"><h3>Pass Rate</h3><p id="pass-rate">{{ pass_rate }}%</p></div>
    </div>
    <div class="chart-container">
        <canvas id="results-chart"></canvas>
    </div>
</body>
</html>"""


def notifier_module() -> str:
    return '''"""Email notification of test run summaries."""

import os
import smtplib
from email.message import EmailMessage


class TestNotifier:
    def __init__(self):
        self.host = os.environ.get("SMTP_HOST", "localhost")
        self.port = int(os.environ.get("SMTP_PORT", "587"))
        self.user = os.environ.get("EMAIL_USER")
        self.password = os.environ.get("EMAIL_PASS")
        self.recipients = os.environ.get("EMAIL_RECIPIENTS", "").split(",")

    def send_test_results(self, results: dict) -> None:
        message = EmailMessage()
        message["From"] = self.user
        message["To"] = ", ".join(self.recipients)
        message["Subject"] = f"Test Results - {results['pass_rate']}% Pass Rate"
        message.add_alternative(self._email_body(results), subtype="html")

        with smtplib.SMTP(self.host, self.port) as smtp:
            smtp.starttls()
            if self.user and self.password:
                smtp.login(self.user, self.password)
            smtp.send_message(message)

    def _email_body(self, results: dict) -> str:
        return (
            "<h2>Test Execution Summary</h2>"
            f"<p>Total Tests: {results['total']}</p>"
            f"<p>Passed: {results['passed']}</p>"
            f"<p>Failed: {results['failed']}</p>"
            f"<p>Pass Rate: {results['pass_rate']}%</p>"
        )
'''


def dashboard_template() -> str:
    return """<div class="dashboard">
  <h1>Test Dashboard</h1>
  <div class="overview">
    <div class="stat-card">
      <h3>Recent Runs</h3>
      <div id="recent-runs"></div>
    </div>
    <div class="stat-card">
      <h3>Flaky Tests</h3>
      <div id="flaky-tests"></div>
    </div>
    <div class="stat-card">
      <h3>Performance Trends</h3>
      <canvas id="perf-chart"></canvas>
    </div>
  </div>
</div>"""


def build_report_enhancement(current_reporting: Optional[dict] = None) -> ReportEnhancement:
    """Reporting scaffolding; artifact capture the suite lacks is listed as extra features."""
    features = list(REPORT_FEATURES)
    current = current_reporting or {}
    if current.get("has_config"):
        if not current.get("has_trace"):
            features.append("Trace capture on failure")
        if not current.get("has_video"):
            features.append("Video capture on failure")

    return ReportEnhancement(
        reporter_code=reporter_plugin(),
        html_template=html_template(),
        notification_code=notifier_module(),
        dashboard_code=dashboard_template(),
        features=features,
    )


def failed_report_enhancement(error: str) -> ReportEnhancement:
    return ReportEnhancement(
        reporter_code=f"# Report enhancement failed: {error}",
        html_template=f"<!-- Report enhancement failed: {error} -->",
        notification_code=f"# Report enhancement failed: {error}",
        dashboard_code=f"<!-- Report enhancement failed: {error} -->",
        features=["Error: Enhancement failed"],
    )


# =============================================================================
# Helpers
# =============================================================================

WAIT_HELPER_METHOD = '''
    def wait_for_element(self, selector: str, timeout: int = 10000) -> None:
        expect(self.page.locator(selector)).to_be_visible(timeout=timeout)
'''


def domain_helper(domain: str, with_waits: bool = False) -> str:
    """Helper class source; ``with_waits`` adds an auto-waiting element wait."""
    name = class_prefix(domain)
    code = f'''from playwright.sync_api import Page, expect


class {name}Helper:
    """Common {domain} actions shared by tests."""

    def __init__(self, page: Page):
        self.page = page

    def perform_common_action(self) -> None:
        self.page.wait_for_load_state("networkidle")

    def validate_business_rule(self) -> None:
        expect(self.page.locator("body")).to_be_visible()

    def setup_test_data(self) -> dict:
        return {{"data": "sample"}}

    def cleanup(self) -> None:
        self.page.context.clear_cookies()
'''
    return code + WAIT_HELPER_METHOD if with_waits else code


def data_factory(domain: str) -> str:
    name = class_prefix(domain)
    snake = snake_case(name)
    return f'''from faker import Faker

fake = Faker()


class {name}DataFactory:
    """Random {domain} records for tests."""

    @staticmethod
    def generate_{snake}_data() -> dict:
        return {{
            "id": fake.uuid4(),
            "name": fake.name(),
            "email": fake.email(),
            "created_at": fake.date_time_this_month().isoformat(),
        }}

    @classmethod
    def generate_multiple_{snake}_data(cls, count: int = 5) -> list[dict]:
        return [cls.generate_{snake}_data() for _ in range(count)]
'''


def helper_tests(domain: str) -> str:
    name = class_prefix(domain)
    return f'''from playwright.sync_api import Page

from helpers.{snake_case(name)}_helper import {name}Helper


class Test{name}Helper:
    def test_perform_common_action(self, page: Page):
        helper = {name}Helper(page)
        helper.perform_common_action()

    def test_validate_business_rule(self, page: Page):
        helper = {name}Helper(page)
        helper.validate_business_rule()
'''


def factory_tests(domain: str) -> str:
    name = class_prefix(domain)
    snake = snake_case(name)
    return f'''from helpers.{snake}_data_factory import {name}DataFactory


class Test{name}DataFactory:
    def test_generates_valid_{snake}_data(self):
        data = {name}DataFactory.generate_{snake}_data()

        assert {{"id", "name", "email"}} <= data.keys()
        assert "@" in data["email"]

    def test_generates_multiple_entries(self):
        data = {name}DataFactory.generate_multiple_{snake}_data(3)

        assert len(data) == 3
        assert "id" in data[0]
'''


def build_helper_suggestions(
    domain: str,
    existing_helpers: list[str],
    test_patterns: Optional[list[dict]] = None,
) -> list[HelperClassSuggestion]:
    """Helper and data factory suggestions, skipping modules the helpers dir already has.

    When ``test_patterns`` show test files with explicit waits, the helper
    gets a ``wait_for_element`` method to replace them.
    """
    name = class_prefix(domain)
    waiting_files = sum(1 for p in test_patterns or [] if p.get("has_waits"))
    description = f"Helper class for {domain} testing operations"
    if waiting_files:
        description += f"; replaces explicit waits found in {waiting_files} test file(s)"

    candidates = [
        HelperClassSuggestion(
            class_name=f"{name}Helper",
            description=description,
            code=domain_helper(domain, with_waits=bool(waiting_files)),
            test_code=helper_tests(domain),
            category=HelperCategory.UTILS,
        ),
        HelperClassSuggestion(
            class_name=f"{name}DataFactory",
            description=f"Test data factory for {domain} domain",
            code=data_factory(domain),
            test_code=factory_tests(domain),
            category=HelperCategory.DATABASE,
        ),
    ]
    existing = {PurePath(path).stem for path in existing_helpers}
    return [c for c in candidates if snake_case(c.class_name) not in existing]


def failed_helper_suggestion(error: str) -> HelperClassSuggestion:
    return HelperClassSuggestion(
        class_name="ErrorHelper",
        description=f"Helper generation failed: {error}",
        code=f"# Helper generation failed: {error}",
        test_code=f"# Helper generation failed: {error}",
        category=HelperCategory.UTILS,
    )


# =============================================================================
# Architecture
# =============================================================================

def build_architecture_optimization(structure: RepositoryStructure) -> ArchitectureOptimization:
    """Recommend what the repository lacks; always-on items come last."""
    improvements: list[str] = []
    files: list[str] = []
    config_changes: list[str] = []

    if not structure.has_page_objects:
        improvements.append("Implement Page Object Model pattern consistently")
        files.append("pages/base_page.py")
    if not structure.has_helpers:
        improvements.append("Add comprehensive test data management")
        files.append("helpers/test_data_factory.py")
    if not structure.has_tests:
        improvements.append("Add a smoke test suite covering login and navigation")
        files.append("tests/test_smoke.py")
    if not structure.has_config:
        improvements.append("Add environment-specific configuration")
        files.append("config/environments.py")
        config_changes.append("Added pytest.ini with base URL and browser options")

    improvements.extend([
        "Enhance error handling and logging",
        "Optimize parallel execution configuration",
        "Implement advanced reporting features",
    ])
    files.extend(["utils/logger.py", "reports/advanced_reporter.py"])
    config_changes.extend([
        "Enabled pytest-xdist workers for parallel execution",
        "Added environment-specific configurations",
    ])

    return ArchitectureOptimization(
        improvements=improvements,
        files_created=files,
        performance_gain=GAIN_PER_IMPROVEMENT * len(improvements),
        config_changes=config_changes,
    )


def failed_architecture_optimization(error: str) -> ArchitectureOptimization:
    return ArchitectureOptimization(improvements=[f"Optimization failed: {error}"])


# =============================================================================
# Test data
# =============================================================================

DATA_CONFIG = '''import os

DATA_CONFIG = {
    "environment": os.environ.get("TEST_ENV", "test"),
    "database": {
        "host": os.environ.get("DB_HOST", "localhost"),
        "port": int(os.environ.get("DB_PORT", "5432")),
        "name": os.environ.get("DB_NAME", "test_db"),
    },
    "api": {
        "base_url": os.environ.get("API_BASE_URL", "http://localhost:3000/api"),
        "timeout": 30,
    },
}
'''


def build_data_management(data_usage: list[dict]) -> DataManagementSystem:
    """Factories, providers and cleanup scripts for the data sources tests already touch.

    Args:
        data_usage: Per-file usage flags as returned by ``analyze_data_usage``
    """
    def any_file(flag: str) -> bool:
        return any(usage.get(flag) for usage in data_usage)

    providers = ["FileProvider"]
    cleanup_scripts = ["cleanup_test_data.py"]
    if any_file("uses_database") or not data_usage:
        providers.append("DatabaseProvider")
        cleanup_scripts.append("reset_database.py")
    if any_file("uses_api") or not data_usage:
        providers.append("APIProvider")

    factories = ["UserDataFactory", "EmployeeDataFactory", "LeaveRequestDataFactory"]
    if sum(usage.get("hardcoded_data", 0) for usage in data_usage) > 0:
        factories.append("CredentialsDataFactory")

    return DataManagementSystem(
        factories=factories,
        providers=providers,
        cleanup_scripts=cleanup_scripts,
        configuration=DATA_CONFIG,
    )


def failed_data_management(error: str) -> DataManagementSystem:
    return DataManagementSystem(configuration=f"Error: {error}")
