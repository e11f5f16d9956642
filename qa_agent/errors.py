"""Exceptions raised by the QA automation agent."""

from typing import Any, Optional


class AIAgentError(Exception):
    """Base exception for agent operations."""

    code = "AGENT_ERROR"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class APIError(AIAgentError):
    """Raised when the model API call fails."""

    code = "API_ERROR"


class ConfigurationError(AIAgentError):
    """Raised when a required setting is missing."""

    code = "CONFIG_ERROR"


class ResponseParseError(AIAgentError):
    """Raised when a model reply does not have the requested structure."""

    code = "PARSE_ERROR"


class DataSourceError(AIAgentError):
    """Raised when test results or test files cannot be read."""

    code = "DATA_SOURCE_ERROR"
