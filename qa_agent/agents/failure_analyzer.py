"""Failure Analyzer - explains a batch of failed Playwright tests.

One batched prompt carries every failure; the JSON reply is decoded into an
AnalysisResult. Malformed replies and API errors degrade the result instead
of raising.
"""

from typing import Any

from ..core.response import decode_or_default, parse_json
from ..errors import ResponseParseError
from ..models import AnalysisResult, TestResult
from ..utils.prompts import PromptBuilder, build_failure_analysis_prompt
from .base import BaseAgent

NO_FAILURES_MESSAGE = "No test failures found!"


def _string_list(data: dict, *keys: str) -> list[str] | None:
    for key in keys:
        if key in data and data[key] is not None:
            value = data[key]
            if not isinstance(value, list):
                raise ResponseParseError(f"'{key}' must be a list")
            return [str(item) for item in value]
    return None


def decode_analysis(text: str) -> AnalysisResult:
    """Strictly decode an analysis reply.

    Raises:
        ResponseParseError: If the reply is not an analysis object
    """
    data: Any = parse_json(text)
    if not isinstance(data, dict):
        raise ResponseParseError("Analysis reply is not a JSON object")

    message = data.get("message")
    if not isinstance(message, str) or not message.strip():
        raise ResponseParseError("Analysis reply has no message")

    suggestions = _string_list(data, "suggestions")
    if suggestions is None:
        raise ResponseParseError("Analysis reply has no suggestions")

    confidence = data.get("confidence")
    if confidence is not None:
        confidence = min(1.0, max(0.0, float(confidence)))

    return AnalysisResult(
        message=message,
        suggestions=suggestions,
        root_causes=_string_list(data, "rootCauses", "root_causes"),
        affected_tests=_string_list(data, "affectedTests", "affected_tests"),
        confidence=confidence,
    )


class FailureAnalyzer(BaseAgent):
    """Agent that analyzes failed tests for common patterns and root causes."""

    MAX_TOKENS = 2000

    def _get_system_prompt(self) -> str:
        return (
            PromptBuilder()
            .add_context("You are an expert Playwright test engineer diagnosing end-to-end test failures.")
            .add_list("RULES", [
                "Group failures that share a root cause",
                "Prefer concrete fixes over general advice",
                "Respond with valid JSON only",
            ])
            .build()
        )

    async def analyze_failures(self, failures: list[TestResult]) -> AnalysisResult:
        """Analyze a batch of failures.

        An empty batch is answered without calling the API.
        """
        if not failures:
            return AnalysisResult(
                message=NO_FAILURES_MESSAGE,
                suggestions=["All tests are passing. Great job!"],
            )

        titles = [f.title for f in failures]
        self.log.info("Analyzing failures", failure_count=len(failures))

        try:
            text = await self._complete(build_failure_analysis_prompt(failures), self.MAX_TOKENS)
        except Exception as e:
            self.log.error("Failure analysis call failed", error=str(e))
            return AnalysisResult(
                message=f"Analysis failed: {e}",
                suggestions=["Please check your API configuration and try again"],
                root_causes=["API or configuration error"],
                affected_tests=titles,
            )

        def parse_fallback(raw: str) -> AnalysisResult:
            return AnalysisResult(
                message="Analysis completed, but response format was unexpected",
                suggestions=[raw],
                root_causes=["Parse error occurred"],
                affected_tests=titles,
            )

        result = decode_or_default(text, decode_analysis, parse_fallback)
        self.log.info(
            "Failure analysis complete",
            root_causes=len(result.root_causes or []),
            suggestions=len(result.suggestions),
        )
        return result
