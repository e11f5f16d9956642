"""Utility modules for the test automation assistant.

Provides:
- Structured logging configuration
- Reusable prompt templates
"""

from .logging import configure_from_settings, configure_logging, get_logger, log_operation
from .prompts import PromptBuilder, PromptTemplate, get_prompt, PROMPTS

__all__ = [
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "log_operation",
    # Prompts
    "PromptBuilder",
    "PromptTemplate",
    "get_prompt",
    "PROMPTS",
]
