"""Improvement Suggester - per-file review of existing tests."""

from pathlib import Path
from typing import Any

from ..core.response import decode_or_default, parse_json
from ..errors import ResponseParseError
from ..models import Priority, Suggestion, SuggestionType
from ..utils.prompts import build_improvement_prompt
from .base import BaseAgent

DESCRIPTION_PREVIEW_CHARS = 200


def _truncate(text: str, limit: int = DESCRIPTION_PREVIEW_CHARS) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def normalize_suggestion(data: dict, file_path: str) -> Suggestion:
    """Fill defaults for a suggestion object; the file is always ``file_path``."""
    try:
        suggestion_type = SuggestionType(data.get("type"))
    except ValueError:
        suggestion_type = SuggestionType.MAINTAINABILITY

    try:
        priority = Priority(data.get("priority"))
    except ValueError:
        priority = Priority.MEDIUM

    line = data.get("line")
    code = data.get("code")

    return Suggestion(
        type=suggestion_type,
        description=str(data.get("description") or "No description provided"),
        file=file_path,
        line=line if isinstance(line, int) and not isinstance(line, bool) else None,
        code=code if isinstance(code, str) and code else None,
        priority=priority,
    )


def decode_suggestions(text: str, file_path: str) -> list[Suggestion]:
    """Strictly decode a suggestion array; non-object elements are dropped.

    Raises:
        ResponseParseError: If the reply is not a suggestion array
    """
    data: Any = parse_json(text)
    if isinstance(data, dict) and isinstance(data.get("suggestions"), list):
        data = data["suggestions"]
    if not isinstance(data, list):
        raise ResponseParseError("Suggestions reply is not a JSON array")

    return [normalize_suggestion(item, file_path) for item in data if isinstance(item, dict)]


class ImprovementSuggester(BaseAgent):
    """Agent that reviews test files for reliability, speed and coverage."""

    MAX_TOKENS = 1500

    def _get_system_prompt(self) -> str:
        return """You are a senior test automation reviewer for a Playwright for Python suite.

Review test files for:
1. Flaky waits and brittle locators
2. Slow or redundant steps
3. Duplicated setup that belongs in fixtures or page objects
4. Missing negative and edge-case coverage

Output must be valid JSON."""

    async def suggest_improvements(self, files: list[str]) -> list[Suggestion]:
        """Review each file in order; missing files are skipped."""
        suggestions: list[Suggestion] = []

        for test_file in files:
            path = Path(test_file)
            if not path.exists():
                self.log.warning("File not found", file=test_file)
                continue

            try:
                content = path.read_text(encoding="utf-8")
                text = await self._complete(build_improvement_prompt(test_file, content), self.MAX_TOKENS)
            except Exception as e:
                self.log.error("Error analyzing file", file=test_file, error=str(e))
                suggestions.append(Suggestion(
                    type=SuggestionType.MAINTAINABILITY,
                    description=f"Failed to analyze file: {e}",
                    file=test_file,
                    priority=Priority.LOW,
                ))
                continue

            file_suggestions = decode_or_default(
                text,
                lambda raw: decode_suggestions(raw, test_file),
                lambda raw: [Suggestion(
                    type=SuggestionType.MAINTAINABILITY,
                    description=_truncate(raw),
                    file=test_file,
                    line=1,
                )],
            )
            self.log.info("File reviewed", file=test_file, suggestions=len(file_suggestions))
            suggestions.extend(file_suggestions)

        return suggestions
