"""Tests for configuration module."""

import pytest


class TestSettings:
    """Tests for Settings class."""

    def test_settings_loads_from_env(self, mock_env_vars):
        """Test that settings loads from environment variables."""
        from qa_agent.config import Settings

        settings = Settings()
        assert settings.anthropic_api_key.get_secret_value() == "sk-ant-test-key-12345"

    def test_settings_default_values(self, mock_env_vars):
        """Test default values are set correctly."""
        from qa_agent.config import ModelName, Settings

        settings = Settings()
        assert settings.default_model == ModelName.SONNET
        assert settings.test_results_path == "test-results"
        assert settings.results_file == "results.json"
        assert settings.page_objects_dir == "pages"
        assert settings.test_file_patterns == ["**/test_*.py", "**/*_test.py"]

    def test_api_key_optional_at_load_time(self, monkeypatch):
        """Test that settings load without an API key."""
        from qa_agent.config import Settings

        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)

        settings = Settings(_env_file=None)
        assert settings.anthropic_api_key is None

    def test_environment_defaults(self, mock_env_vars):
        """Test the nested environment block defaults."""
        from qa_agent.config import Settings

        settings = Settings()
        assert settings.environment.base_url == "https://opensource-demo.orangehrmlive.com"
        assert settings.environment.browser == "chromium"
        assert settings.environment.workers == 3
        assert settings.environment.ai_enabled is False

    def test_environment_nested_env_vars(self, mock_env_vars, monkeypatch):
        """Test nested environment values from double-underscore variables."""
        from qa_agent.config import Settings

        monkeypatch.setenv("ENVIRONMENT__BASE_URL", "https://staging.example.com")
        monkeypatch.setenv("ENVIRONMENT__WORKERS", "6")

        settings = Settings()
        assert settings.environment.base_url == "https://staging.example.com"
        assert settings.environment.workers == 6

    def test_get_settings_returns_fresh_value(self, mock_env_vars):
        """Test that get_settings builds a new value each call."""
        from qa_agent.config import get_settings

        assert get_settings() is not get_settings()


class TestAgentConfig:
    """Tests for AgentConfig class."""

    def test_agent_config_defaults(self, mock_env_vars):
        """Test AgentConfig with default values."""
        from qa_agent.config import AgentConfig

        config = AgentConfig()
        assert config.name == "default_agent"
        assert config.max_tokens == 4096
        assert config.temperature == 0.0
        assert config.max_retries == 2
        assert config.retry_delay == 1.0

    def test_agent_config_custom_values(self, mock_env_vars):
        """Test AgentConfig with custom values."""
        from qa_agent.config import AgentConfig

        config = AgentConfig(name="test_agent", max_tokens=8192, max_retries=5)
        assert config.name == "test_agent"
        assert config.max_tokens == 8192
        assert config.max_retries == 5


class TestModelPricing:
    """Tests for model pricing constants."""

    def test_model_pricing_exists(self, mock_env_vars):
        """Test that pricing exists for all models."""
        from qa_agent.config import MODEL_PRICING, ModelName

        for model in ModelName:
            assert model in MODEL_PRICING
            assert MODEL_PRICING[model]["input"] < MODEL_PRICING[model]["output"]


class TestErrors:
    """Tests for the error hierarchy."""

    @pytest.mark.parametrize("name,code", [
        ("APIError", "API_ERROR"),
        ("ConfigurationError", "CONFIG_ERROR"),
        ("ResponseParseError", "PARSE_ERROR"),
        ("DataSourceError", "DATA_SOURCE_ERROR"),
    ])
    def test_error_codes(self, name, code):
        """Test each error carries its code and derives from AIAgentError."""
        from qa_agent import errors

        error = getattr(errors, name)("boom", details={"k": "v"})
        assert isinstance(error, errors.AIAgentError)
        assert error.code == code
        assert error.message == "boom"
        assert error.details == {"k": "v"}
        assert str(error) == "boom"
