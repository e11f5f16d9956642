"""Tests for the data models."""


class TestTestResult:
    """Tests for TestResult dataclass."""

    def test_to_dict_serializes_status(self):
        """Test status enum is rendered as its value."""
        from qa_agent.models import TestResult, TestStatus

        result = TestResult(title="login", status=TestStatus.TIMEDOUT, duration=30000)
        data = result.to_dict()

        assert data["status"] == "timedout"
        assert data["duration"] == 30000
        assert data["error"] is None


class TestSuggestion:
    """Tests for Suggestion dataclass."""

    def test_default_priority_is_medium(self):
        """Test the default priority."""
        from qa_agent.models import Priority, Suggestion, SuggestionType

        suggestion = Suggestion(
            type=SuggestionType.RELIABILITY,
            description="Use expect() instead of sleep",
            file="tests/test_login.py",
        )

        assert suggestion.priority == Priority.MEDIUM
        assert suggestion.to_dict()["type"] == "reliability"
        assert suggestion.to_dict()["priority"] == "medium"


class TestHelperClassSuggestion:
    """Tests for HelperClassSuggestion dataclass."""

    def test_to_dict_category_value(self):
        """Test category is rendered as its value."""
        from qa_agent.models import HelperCategory, HelperClassSuggestion

        helper = HelperClassSuggestion(
            class_name="LeaveHelper",
            description="Leave helpers",
            code="class LeaveHelper: ...",
            test_code="",
            category=HelperCategory.DATABASE,
        )

        assert helper.to_dict()["category"] == "database"


class TestTestSummary:
    """Tests for TestSummary dataclass."""

    def test_pass_rate_computed_and_rounded(self):
        """Test pass rate is derived from the counts."""
        from qa_agent.models import TestSummary

        summary = TestSummary(total=3, passed=2, failed=1)

        assert summary.pass_rate == 67

    def test_empty_summary(self):
        """Test an empty run has a zero pass rate."""
        from qa_agent.models import TestSummary

        summary = TestSummary()

        assert summary.total == 0
        assert summary.pass_rate == 0

    def test_explicit_pass_rate_kept(self):
        """Test an explicit pass rate is not recomputed."""
        from qa_agent.models import TestSummary

        assert TestSummary(total=4, passed=1, pass_rate=50).pass_rate == 50
