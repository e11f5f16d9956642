"""Tests for the failure analyzer agent."""

import json
from unittest.mock import AsyncMock

import pytest


def _analyzer(client):
    from qa_agent.agents.failure_analyzer import FailureAnalyzer

    return FailureAnalyzer(client=client)


class TestDecodeAnalysis:
    """Tests for decode_analysis."""

    def test_full_reply(self):
        from qa_agent.agents.failure_analyzer import decode_analysis

        result = decode_analysis(json.dumps({
            "message": "Login page loads slowly",
            "rootCauses": ["Slow backend"],
            "suggestions": ["Wait for the form"],
            "affectedTests": ["login"],
            "confidence": 0.8,
        }))

        assert result.message == "Login page loads slowly"
        assert result.root_causes == ["Slow backend"]
        assert result.suggestions == ["Wait for the form"]
        assert result.affected_tests == ["login"]
        assert result.confidence == 0.8

    def test_confidence_clamped(self):
        from qa_agent.agents.failure_analyzer import decode_analysis

        result = decode_analysis('{"message": "m", "suggestions": [], "confidence": 3}')

        assert result.confidence == 1.0

    @pytest.mark.parametrize("reply", [
        "[]",
        '{"suggestions": []}',
        '{"message": "", "suggestions": []}',
        '{"message": "m"}',
        '{"message": "m", "suggestions": "not a list"}',
        '{"message": "m", "suggestions": [], "rootCauses": "x"}',
    ])
    def test_wrong_shape_raises(self, reply):
        from qa_agent.agents.failure_analyzer import decode_analysis
        from qa_agent.errors import ResponseParseError

        with pytest.raises(ResponseParseError):
            decode_analysis(reply)


class TestFailureAnalyzer:
    """Tests for FailureAnalyzer.analyze_failures."""

    @pytest.mark.asyncio
    async def test_empty_input_skips_api(self, mock_env_vars, mock_async_anthropic_client):
        """Test no call is made when nothing failed."""
        analyzer = _analyzer(mock_async_anthropic_client)

        result = await analyzer.analyze_failures([])

        assert result.message == "No test failures found!"
        assert result.suggestions == ["All tests are passing. Great job!"]
        mock_async_anthropic_client.messages.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_single_batched_call(self, mock_env_vars, make_response, sample_failures):
        """Test all failures go into one prompt and the reply is decoded."""
        client = AsyncMock()
        client.messages.create = AsyncMock(return_value=make_response(
            '```json\n{"message": "Two timing issues", "rootCauses": ["Slow load"], '
            '"suggestions": ["Use expect()"], "affectedTests": ["should add employee"], '
            '"confidence": 0.7}\n```'
        ))
        analyzer = _analyzer(client)

        result = await analyzer.analyze_failures(sample_failures)

        assert client.messages.create.await_count == 1
        prompt = client.messages.create.call_args.kwargs["messages"][0]["content"]
        assert "should show error with invalid credentials" in prompt
        assert "should add employee" in prompt
        assert client.messages.create.call_args.kwargs["max_tokens"] == 2000
        assert result.message == "Two timing issues"
        assert result.confidence == 0.7

    @pytest.mark.asyncio
    async def test_unparseable_reply_wrapped(self, mock_env_vars, make_response, sample_failures):
        """Test a prose reply becomes the single suggestion."""
        client = AsyncMock()
        client.messages.create = AsyncMock(return_value=make_response("The login button is slow."))
        analyzer = _analyzer(client)

        result = await analyzer.analyze_failures(sample_failures)

        assert result.message == "Analysis completed, but response format was unexpected"
        assert result.suggestions == ["The login button is slow."]
        assert result.root_causes == ["Parse error occurred"]
        assert result.affected_tests == [f.title for f in sample_failures]

    @pytest.mark.asyncio
    async def test_api_error_degrades(self, mock_env_vars, sample_failures):
        """Test a failed call yields the error record instead of raising."""
        client = AsyncMock()
        client.messages.create = AsyncMock(side_effect=RuntimeError("connection reset"))
        analyzer = _analyzer(client)

        result = await analyzer.analyze_failures(sample_failures)

        assert result.message == "Analysis failed: connection reset"
        assert result.suggestions == ["Please check your API configuration and try again"]
        assert result.root_causes == ["API or configuration error"]
        assert result.affected_tests == [f.title for f in sample_failures]
