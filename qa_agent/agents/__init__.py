"""Agent implementations for the test automation assistant.

Architecture:
    BaseAgent -> Specialized Agents -> TestAutomationAgent facade

Each agent owns one prompt family and turns the model's reply into records,
degrading to fallback records when the call or the parse fails.
"""

from .base import BaseAgent, UsageStats
from .failure_analyzer import FailureAnalyzer
from .improvement_suggester import ImprovementSuggester
from .flaky_fixer import FlakyTestFixer
from .page_object_generator import PageObjectGenerator
from .test_generator import TestGenerator

__all__ = [
    # Base
    "BaseAgent",
    "UsageStats",
    # Agents
    "FailureAnalyzer",
    "ImprovementSuggester",
    "FlakyTestFixer",
    "PageObjectGenerator",
    "TestGenerator",
]
