"""
Tests for Configuration Module (studyscribe/config.py)

Tests cover:
- Config dataclass creation and validation
- Configuration file I/O
- Environment variable handling
- Data directory resolution
"""

import pytest
from pathlib import Path
import yaml

from studyscribe.config import (
    Config,
    DEFAULT_MODEL,
    config_exists,
    load_config,
    save_config,
    get_default_config,
    get_api_key_from_env,
    ensure_data_dir,
)


# ============================================================================
# Config Creation and Validation Tests
# ============================================================================

@pytest.mark.unit
class TestConfigCreation:
    """Test Config dataclass creation and defaults."""

    def test_default_config(self, default_config):
        """Test default configuration values."""
        assert default_config.api_key == ""
        assert default_config.model == DEFAULT_MODEL
        assert default_config.data_dir == ""
        assert default_config.verbose is False

    def test_resolve_data_dir_default(self, temp_config_dir):
        """Empty data_dir falls back to the module data directory."""
        import studyscribe.config as config_module

        assert Config().resolve_data_dir() == config_module.DATA_DIR

    def test_resolve_data_dir_custom(self, temp_dir):
        """An explicit data_dir is used as given."""
        config = Config(data_dir=str(temp_dir / "custom"))
        assert config.resolve_data_dir() == temp_dir / "custom"


@pytest.mark.unit
class TestConfigValidation:
    """Test configuration validation."""

    def test_valid_config(self, valid_config):
        """Test validation of valid configuration."""
        is_valid, error = valid_config.validate()
        assert is_valid is True
        assert error is None

    def test_missing_api_key(self):
        """Test validation fails without API key."""
        is_valid, error = Config(api_key="").validate()
        assert is_valid is False
        assert "API key is required" in error

    def test_blank_api_key(self):
        """Whitespace is not a key."""
        is_valid, error = Config(api_key="   ").validate()
        assert is_valid is False
        assert "API key is required" in error

    def test_missing_model(self):
        """Test validation fails without a model."""
        is_valid, error = Config(api_key="key", model="").validate()
        assert is_valid is False
        assert "Model" in error

    def test_data_dir_is_file(self, temp_dir):
        """Test validation fails when data_dir points to a file."""
        file_path = temp_dir / "not_a_dir"
        file_path.write_text("x")

        is_valid, error = Config(api_key="key", data_dir=str(file_path)).validate()
        assert is_valid is False
        assert "Not a directory" in error

    def test_data_dir_may_not_exist_yet(self, temp_dir):
        """A missing data_dir is created later, so it is valid."""
        config = Config(api_key="key", data_dir=str(temp_dir / "later"))
        assert config.validate() == (True, None)


# ============================================================================
# Config Serialization Tests
# ============================================================================

@pytest.mark.unit
class TestConfigSerialization:
    """Test Config to/from dictionary conversion."""

    def test_to_dict(self, valid_config):
        """Test Config to dictionary conversion."""
        config_dict = valid_config.to_dict()

        assert isinstance(config_dict, dict)
        assert config_dict["api_key"] == "test-gemini-key-1234567890"
        assert config_dict["model"] == "gemini-1.5-flash"

    def test_from_dict(self, config_dict):
        """Test Config from dictionary creation."""
        config = Config.from_dict(config_dict)

        assert config.api_key == config_dict["api_key"]
        assert config.model == config_dict["model"]
        assert config.verbose is True

    def test_from_dict_filters_invalid_keys(self):
        """Test that from_dict filters out invalid keys."""
        data = {
            "api_key": "key",
            "llm_provider": "openai",
            "another_invalid": 123,
        }

        config = Config.from_dict(data)

        assert config.api_key == "key"
        assert not hasattr(config, "llm_provider")


# ============================================================================
# Config File I/O Tests
# ============================================================================

@pytest.mark.unit
class TestConfigIO:
    """Test configuration file loading and saving."""

    def test_config_exists_false(self, temp_config_dir):
        """Test config_exists returns False when no config."""
        assert config_exists() is False

    def test_config_exists_true(self, temp_config_dir, valid_config):
        """Test config_exists returns True after saving."""
        save_config(valid_config)
        assert config_exists() is True

    def test_save_and_load_config(self, temp_config_dir, valid_config, clean_env):
        """Test saving and loading configuration."""
        save_config(valid_config)

        loaded_config = load_config()

        assert loaded_config == valid_config

    def test_saved_file_is_yaml(self, temp_config_dir, valid_config):
        """The saved file is plain YAML in field order."""
        import studyscribe.config as config_module

        save_config(valid_config)
        data = yaml.safe_load(config_module.CONFIG_FILE.read_text())

        assert list(data.keys()) == ["api_key", "model", "data_dir", "verbose"]

    def test_save_invalid_config_fails(self, temp_config_dir):
        """Test that saving invalid config raises error."""
        with pytest.raises(ValueError, match="Cannot save invalid configuration"):
            save_config(Config(api_key=""))

    def test_load_nonexistent_config_fails(self, temp_config_dir):
        """Test loading nonexistent config raises error."""
        with pytest.raises(FileNotFoundError):
            load_config()

    def test_load_invalid_yaml_fails(self, temp_config_dir):
        """Test loading invalid YAML raises error."""
        import studyscribe.config as config_module

        config_module.CONFIG_FILE.write_text("invalid: yaml: content: [")

        with pytest.raises(ValueError, match="Invalid YAML"):
            load_config()

    def test_load_empty_config_fails(self, temp_config_dir):
        """Test loading empty config raises error."""
        import studyscribe.config as config_module

        config_module.CONFIG_FILE.write_text("")

        with pytest.raises(ValueError, match="empty"):
            load_config()

    def test_load_fills_api_key_from_env(self, temp_config_dir, mock_gemini_env):
        """A config without a key picks it up from the environment."""
        import studyscribe.config as config_module

        config_module.CONFIG_FILE.write_text("model: gemini-1.5-pro\n")

        config = load_config()

        assert config.api_key == mock_gemini_env
        assert config.model == "gemini-1.5-pro"

    def test_load_without_any_key_fails(self, temp_config_dir, clean_env):
        """No key in file or environment is an invalid configuration."""
        import studyscribe.config as config_module

        config_module.CONFIG_FILE.write_text("model: gemini-1.5-pro\n")

        with pytest.raises(ValueError, match="API key is required"):
            load_config()


# ============================================================================
# Environment Variable Tests
# ============================================================================

@pytest.mark.unit
class TestEnvironmentVariables:
    """Test environment variable handling."""

    def test_get_api_key_from_google_env(self, mock_gemini_env):
        """Test getting Gemini API key from GOOGLE_API_KEY."""
        assert get_api_key_from_env() == mock_gemini_env

    def test_get_api_key_from_gemini_env(self, clean_env, monkeypatch):
        """GEMINI_API_KEY is used when GOOGLE_API_KEY is absent."""
        monkeypatch.setenv("GEMINI_API_KEY", "gemini-only-key")
        assert get_api_key_from_env() == "gemini-only-key"

    def test_google_env_takes_precedence(self, clean_env, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "google-key")
        monkeypatch.setenv("GEMINI_API_KEY", "gemini-key")
        assert get_api_key_from_env() == "google-key"

    def test_get_api_key_from_env_none(self, clean_env):
        """Test getting API key returns None when not set."""
        assert get_api_key_from_env() is None


# ============================================================================
# Utility Function Tests
# ============================================================================

@pytest.mark.unit
class TestUtilities:
    """Test utility functions."""

    def test_get_default_config(self):
        """Test getting default configuration."""
        config = get_default_config()

        assert isinstance(config, Config)
        assert config.api_key == ""

    def test_ensure_data_dir(self, temp_config_dir):
        """Test data directory creation."""
        import studyscribe.config as config_module

        assert not config_module.DATA_DIR.exists()

        data_dir = ensure_data_dir()

        assert data_dir.exists()
        assert data_dir.is_dir()

    def test_ensure_data_dir_from_config(self, temp_dir):
        """The configured data_dir is created, including parents."""
        config = Config(api_key="key", data_dir=str(temp_dir / "a" / "b"))

        data_dir = ensure_data_dir(config)

        assert data_dir == Path(temp_dir / "a" / "b")
        assert data_dir.is_dir()

    def test_ensure_data_dir_idempotent(self, temp_config_dir):
        """Test that ensure_data_dir can be called multiple times."""
        dir1 = ensure_data_dir()
        dir2 = ensure_data_dir()

        assert dir1 == dir2
        assert dir1.exists()
