"""Tests for the improvement suggester agent."""

import json
from unittest.mock import AsyncMock

import pytest


def _suggester(client):
    from qa_agent.agents.improvement_suggester import ImprovementSuggester

    return ImprovementSuggester(client=client)


@pytest.fixture
def review_files(tmp_path):
    first = tmp_path / "test_login.py"
    first.write_text("def test_login(page):\n    page.wait_for_timeout(5000)\n")
    second = tmp_path / "test_pim.py"
    second.write_text("def test_add_employee(page):\n    ...\n")
    return [str(first), str(second)]


class TestNormalizeSuggestion:
    """Tests for normalize_suggestion."""

    def test_valid_suggestion(self):
        from qa_agent.agents.improvement_suggester import normalize_suggestion
        from qa_agent.models import Priority, SuggestionType

        suggestion = normalize_suggestion({
            "type": "reliability",
            "description": "Replace fixed wait",
            "line": 2,
            "code": "expect(page.get_by_role('button')).to_be_visible()",
            "priority": "high",
        }, "tests/test_login.py")

        assert suggestion.type == SuggestionType.RELIABILITY
        assert suggestion.priority == Priority.HIGH
        assert suggestion.line == 2
        assert suggestion.file == "tests/test_login.py"

    def test_defaults_for_invalid_fields(self):
        """Test unknown enum values and bad field types fall back to defaults."""
        from qa_agent.agents.improvement_suggester import normalize_suggestion
        from qa_agent.models import Priority, SuggestionType

        suggestion = normalize_suggestion(
            {"type": "style", "priority": "urgent", "line": "12", "code": ""},
            "tests/test_login.py",
        )

        assert suggestion.type == SuggestionType.MAINTAINABILITY
        assert suggestion.priority == Priority.MEDIUM
        assert suggestion.description == "No description provided"
        assert suggestion.line is None
        assert suggestion.code is None

    def test_file_always_overridden(self):
        from qa_agent.agents.improvement_suggester import normalize_suggestion

        suggestion = normalize_suggestion({"file": "other.py", "description": "d"}, "tests/test_login.py")

        assert suggestion.file == "tests/test_login.py"


class TestDecodeSuggestions:
    """Tests for decode_suggestions."""

    def test_wrapped_object_accepted(self):
        from qa_agent.agents.improvement_suggester import decode_suggestions

        suggestions = decode_suggestions('{"suggestions": [{"description": "a"}, "junk"]}', "f.py")

        assert [s.description for s in suggestions] == ["a"]

    def test_code_field_with_fence(self):
        """Test a fenced snippet in the code field does not break decoding."""
        from qa_agent.agents.improvement_suggester import decode_suggestions
        from qa_agent.models import SuggestionType

        snippet = "```python\nexpect(page.locator('.oxd-alert')).to_be_visible()\n```"
        reply = json.dumps([{
            "type": "reliability",
            "description": "Replace the fixed timeout with an assertion",
            "line": 2,
            "code": snippet,
            "priority": "high",
        }])

        suggestions = decode_suggestions(reply, "a.py")

        assert len(suggestions) == 1
        assert suggestions[0].type == SuggestionType.RELIABILITY
        assert suggestions[0].code == snippet

    def test_non_array_raises(self):
        from qa_agent.agents.improvement_suggester import decode_suggestions
        from qa_agent.errors import ResponseParseError

        with pytest.raises(ResponseParseError):
            decode_suggestions('{"description": "a"}', "f.py")


class TestImprovementSuggester:
    """Tests for ImprovementSuggester.suggest_improvements."""

    @pytest.mark.asyncio
    async def test_one_call_per_file(self, mock_env_vars, make_response, review_files):
        """Test each file is reviewed and tagged with its own path."""
        reply = json.dumps([
            {"type": "reliability", "description": "Remove fixed wait", "line": 2, "priority": "high"},
            {"type": "coverage", "description": "Add negative test", "priority": "low"},
        ])
        client = AsyncMock()
        client.messages.create = AsyncMock(return_value=make_response(reply))
        suggester = _suggester(client)

        suggestions = await suggester.suggest_improvements(review_files)

        assert client.messages.create.await_count == 2
        assert [s.file for s in suggestions] == [review_files[0]] * 2 + [review_files[1]] * 2
        first_prompt = client.messages.create.call_args_list[0].kwargs["messages"][0]["content"]
        assert "page.wait_for_timeout(5000)" in first_prompt

    @pytest.mark.asyncio
    async def test_missing_file_skipped(self, mock_env_vars, make_response, review_files, tmp_path):
        """Test missing files produce no suggestion and no call."""
        client = AsyncMock()
        client.messages.create = AsyncMock(return_value=make_response('[{"description": "d"}]'))
        suggester = _suggester(client)

        suggestions = await suggester.suggest_improvements([str(tmp_path / "missing.py"), review_files[0]])

        assert client.messages.create.await_count == 1
        assert [s.file for s in suggestions] == [review_files[0]]

    @pytest.mark.asyncio
    async def test_unparseable_reply_wrapped(self, mock_env_vars, make_response, review_files):
        """Test a prose reply becomes one truncated maintainability suggestion."""
        from qa_agent.models import Priority, SuggestionType

        client = AsyncMock()
        client.messages.create = AsyncMock(return_value=make_response("x" * 500))
        suggester = _suggester(client)

        suggestions = await suggester.suggest_improvements(review_files[:1])

        assert len(suggestions) == 1
        assert suggestions[0].type == SuggestionType.MAINTAINABILITY
        assert suggestions[0].priority == Priority.MEDIUM
        assert suggestions[0].description == "x" * 200 + "..."
        assert suggestions[0].line == 1

    @pytest.mark.asyncio
    async def test_api_error_per_file(self, mock_env_vars, make_response, review_files):
        """Test a failed call yields a low-priority record for that file only."""
        from qa_agent.models import Priority

        client = AsyncMock()
        client.messages.create = AsyncMock(side_effect=[
            RuntimeError("overloaded"),
            make_response('[{"type": "performance", "description": "Reuse login state"}]'),
        ])
        suggester = _suggester(client)

        suggestions = await suggester.suggest_improvements(review_files)

        assert len(suggestions) == 2
        assert suggestions[0].description == "Failed to analyze file: overloaded"
        assert suggestions[0].priority == Priority.LOW
        assert suggestions[0].file == review_files[0]
        assert suggestions[1].description == "Reuse login state"
