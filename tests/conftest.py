"""Shared fixtures for qa-agent tests."""

import json
import os
from unittest.mock import AsyncMock, MagicMock

import pytest


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test requiring real API keys"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# Set test environment variables before importing modules
os.environ.setdefault("ANTHROPIC_API_KEY", "sk-ant-test-key-12345")


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Set up test environment variables."""
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test-key-12345")
    monkeypatch.delenv("DEFAULT_MODEL", raising=False)
    monkeypatch.delenv("PAGE_OBJECTS_DIR", raising=False)
    monkeypatch.delenv("TEST_RESULTS_PATH", raising=False)


def _response(text: str, input_tokens: int = 100, output_tokens: int = 50):
    response = MagicMock()
    response.content = [MagicMock(type="text", text=text)]
    response.usage = MagicMock(input_tokens=input_tokens, output_tokens=output_tokens)
    return response


@pytest.fixture
def make_response():
    """Factory for mock Messages API responses with a single text block."""
    return _response


@pytest.fixture
def mock_async_anthropic_client():
    """Create a mock AsyncAnthropic client."""
    mock_client = AsyncMock()
    mock_client.messages.create = AsyncMock(return_value=_response('{"result": "success"}'))
    return mock_client


@pytest.fixture
def settings(mock_env_vars, tmp_path):
    """Settings with every output and input path under tmp_path."""
    from qa_agent.config import Settings

    return Settings(
        test_results_path=str(tmp_path / "test-results"),
        test_directory=str(tmp_path / "tests"),
        helpers_dir=str(tmp_path / "helpers"),
        page_objects_dir=str(tmp_path / "pages"),
    )


@pytest.fixture
def sample_failures():
    """Two failed test results."""
    from qa_agent.models import TestResult, TestStatus

    return [
        TestResult(
            title="should show error with invalid credentials",
            status=TestStatus.FAILED,
            error="Timeout: element not visible within 10000ms",
            duration=10000,
            file="tests/test_login.py",
        ),
        TestResult(
            title="should add employee",
            status=TestStatus.FAILED,
            error="locator.click: Target closed",
            screenshot="test-results/add-employee.png",
            duration=4200,
            file="tests/test_pim.py",
        ),
    ]


@pytest.fixture
def sample_flaky_test():
    from qa_agent.models import FlakyTest

    return FlakyTest(
        name="login should work with valid credentials",
        file="tests/auth/test_login.py",
        failure_pattern="Timeout waiting for element to be visible",
        failure_rate=0.15,
    )


@pytest.fixture
def playwright_report():
    """Playwright JSON report with nested suites, a retry and a flaky test."""
    return {
        "suites": [
            {
                "title": "test_login.py",
                "file": "tests/test_login.py",
                "specs": [
                    {
                        "title": "should login with valid credentials",
                        "file": "tests/test_login.py",
                        "tests": [
                            {
                                "status": "expected",
                                "results": [{"status": "passed", "duration": 2500}],
                            }
                        ],
                    },
                    {
                        "title": "should show error with invalid credentials",
                        "file": "tests/test_login.py",
                        "tests": [
                            {
                                "status": "unexpected",
                                "results": [
                                    {
                                        "status": "failed",
                                        "duration": 10000,
                                        "error": {"message": "Timeout: element not visible"},
                                        "attachments": [
                                            {"name": "screenshot", "path": "test-results/login-error.png"}
                                        ],
                                    }
                                ],
                            }
                        ],
                    },
                ],
                "suites": [
                    {
                        "title": "leave",
                        "specs": [
                            {
                                "title": "should apply for leave",
                                "tests": [
                                    {
                                        "status": "flaky",
                                        "results": [
                                            {
                                                "status": "timedOut",
                                                "duration": 30000,
                                                "errors": [{"message": "Test timeout of 30000ms exceeded"}],
                                            },
                                            {"status": "passed", "duration": 3100},
                                        ],
                                    }
                                ],
                            },
                            {
                                "title": "should skip on mobile",
                                "tests": [
                                    {"status": "skipped", "results": [{"status": "skipped", "duration": 0}]}
                                ],
                            },
                        ],
                    }
                ],
            }
        ]
    }


@pytest.fixture
def write_report(settings, playwright_report):
    """Write the sample report where the settings expect it."""
    def _write(report=None):
        from pathlib import Path

        results_dir = Path(settings.test_results_path)
        results_dir.mkdir(parents=True, exist_ok=True)
        path = results_dir / settings.results_file
        path.write_text(json.dumps(playwright_report if report is None else report))
        return path

    return _write
