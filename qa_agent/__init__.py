"""AI helpers for a Playwright for Python end-to-end test suite."""

from .agent import TestAutomationAgent
from .config import EnvironmentConfig, ModelName, Settings, get_settings
from .errors import (
    AIAgentError,
    APIError,
    ConfigurationError,
    DataSourceError,
    ResponseParseError,
)

__version__ = "0.1.0"

__all__ = [
    "TestAutomationAgent",
    "Settings",
    "EnvironmentConfig",
    "ModelName",
    "get_settings",
    "AIAgentError",
    "APIError",
    "ConfigurationError",
    "DataSourceError",
    "ResponseParseError",
]
