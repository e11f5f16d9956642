"""Configuration management for the QA automation agent."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ModelName(str, Enum):
    """Available Claude models."""
    OPUS = "claude-opus-4-5"
    SONNET = "claude-sonnet-4-5"
    HAIKU = "claude-haiku-4-5"


class EnvironmentConfig(BaseModel):
    """Settings of the environment the suite under test runs against."""

    name: str = Field("dev", description="Environment name (dev, staging, prod)")
    base_url: str = Field(
        "https://opensource-demo.orangehrmlive.com",
        description="Base URL of the HR application",
    )
    timeout_ms: int = Field(30000, description="Default action timeout")
    retries: int = Field(1, description="Retries for failed tests")
    browser: str = Field("chromium", description="Browser to run tests in")
    workers: int = Field(3, description="Parallel test workers")
    headless: bool = Field(True, description="Run browsers headless")
    ai_enabled: bool = Field(False, description="Enable AI helpers during test runs")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore"
    )

    # Required by every agent; checked when an agent is constructed
    anthropic_api_key: Optional[SecretStr] = Field(None, description="Anthropic API key")

    default_model: ModelName = Field(ModelName.SONNET, description="Model used by all agents")
    request_timeout: float = Field(120.0, description="Anthropic client timeout in seconds")

    # Test suite layout
    test_results_path: str = Field("test-results", description="Directory of Playwright reports")
    results_file: str = Field("results.json", description="JSON report file name")
    test_directory: str = Field("tests", description="Root directory of the test suite")
    test_file_patterns: list[str] = Field(
        default_factory=lambda: ["**/test_*.py", "**/*_test.py"],
        description="Glob patterns matching test files",
    )
    helpers_dir: str = Field("helpers", description="Directory of helper modules")
    page_objects_dir: str = Field("pages", description="Output directory for generated page objects")

    # Logging
    log_level: str = Field("INFO", description="Log level")
    log_json: bool = Field(False, description="Render logs as JSON")

    environment: EnvironmentConfig = Field(default_factory=EnvironmentConfig)


class AgentConfig(BaseSettings):
    """Configuration for individual agents."""

    model_config = SettingsConfigDict(extra="ignore")

    name: str = Field("default_agent", description="Agent name for logging")
    max_tokens: int = Field(4096, description="Maximum response tokens")
    temperature: float = Field(0.0, description="Sampling temperature")
    max_retries: int = Field(2, description="Retries on rate limits and server errors")
    retry_delay: float = Field(1.0, description="Base delay between retries in seconds")


# Model pricing (per million tokens)
MODEL_PRICING = {
    ModelName.OPUS: {"input": 15.00, "output": 75.00},
    ModelName.SONNET: {"input": 3.00, "output": 15.00},
    ModelName.HAIKU: {"input": 0.80, "output": 4.00},
}


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
