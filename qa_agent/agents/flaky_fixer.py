"""Flaky Test Fixer - remediation suggestions for unreliable tests.

Every flaky test gets exactly one FixResult. The reply is kept as free text;
confidence is a fixed value that drops when the API call fails.
"""

from ..models import FixResult, FlakyTest
from ..utils.prompts import build_flaky_fix_prompt
from .base import BaseAgent

DEFAULT_CONFIDENCE = 0.8
FALLBACK_CONFIDENCE = 0.3


class FlakyTestFixer(BaseAgent):
    """Agent that suggests fixes for flaky Playwright tests."""

    MAX_TOKENS = 1000

    def _get_system_prompt(self) -> str:
        return """You are an expert in stabilizing flaky browser tests written with Playwright for Python.

Common causes of flakiness:
- Fixed sleeps instead of auto-waiting locators and expect() assertions
- Selectors tied to layout or generated class names
- Shared state between tests
- Network and animation timing

Show the corrected code and explain why it is more reliable."""

    async def generate_flakiness_fixes(self, tests: list[FlakyTest]) -> list[FixResult]:
        """Suggest one fix per flaky test, in input order."""
        fixes: list[FixResult] = []

        for test in tests:
            try:
                text = await self._complete(build_flaky_fix_prompt(test), self.MAX_TOKENS)
                fixes.append(FixResult(
                    test_file=test.file,
                    issue=test.failure_pattern,
                    suggested_fix=text,
                    confidence=DEFAULT_CONFIDENCE,
                ))
            except Exception as e:
                self.log.error("Error generating fix for flaky test", test=test.name, error=str(e))
                fixes.append(FixResult(
                    test_file=test.file,
                    issue=test.failure_pattern,
                    suggested_fix=(
                        f"Error generating fix: {e}. "
                        "Consider adding explicit waits and improving selectors."
                    ),
                    confidence=FALLBACK_CONFIDENCE,
                ))

        return fixes
