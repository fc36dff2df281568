"""
Configuration Module - Application configuration management

This module handles loading, saving, and validating application configuration.
Configuration is stored in YAML format and includes:
- Gemini API key and model
- Data directory holding the local record store
- Logging verbosity
"""

import os
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass, asdict

import yaml


# ============================================================================
# Constants
# ============================================================================

PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_FILE = PROJECT_ROOT / "config.yaml"
DATA_DIR = PROJECT_ROOT / "data"

DEFAULT_MODEL = "gemini-1.5-flash"
API_KEY_ENV_VARS = ["GOOGLE_API_KEY", "GEMINI_API_KEY"]


# ============================================================================
# Configuration Data Class
# ============================================================================

@dataclass
class Config:
    """
    Application configuration.

    Attributes:
        api_key: Credential for the Gemini API
        model: Gemini model used for every generation request
        data_dir: Directory holding the local record store
            (empty string means the project's data/ directory)
        verbose: Enable debug logging
    """

    api_key: str = ""
    model: str = DEFAULT_MODEL
    data_dir: str = ""
    verbose: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert configuration to dictionary.

        Returns:
            Dictionary representation of configuration
        """
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """
        Create configuration from dictionary.

        Unknown keys are ignored so older config files keep loading.

        Args:
            data: Dictionary containing configuration values

        Returns:
            Config instance
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered_data = {k: v for k, v in data.items() if k in valid_keys}

        return cls(**filtered_data)

    def resolve_data_dir(self) -> Path:
        """Directory the record store lives in."""
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return DATA_DIR

    def validate(self) -> tuple[bool, Optional[str]]:
        """
        Validate configuration.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if not self.api_key or not self.api_key.strip():
            return False, "API key is required"

        if not self.model or not self.model.strip():
            return False, "Model name is required"

        if self.data_dir:
            path = Path(self.data_dir).expanduser()
            if path.exists() and not path.is_dir():
                return False, f"Not a directory: {self.data_dir}"

        return True, None


# ============================================================================
# Configuration I/O
# ============================================================================

def config_exists() -> bool:
    """
    Check if a configuration file exists.

    Returns:
        True if config file exists, False otherwise
    """
    return CONFIG_FILE.exists()


def load_config() -> Config:
    """
    Load configuration from file.

    A missing API key in the file is filled from the environment.

    Returns:
        Config instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is invalid
    """
    if not config_exists():
        raise FileNotFoundError(f"Configuration file not found: {CONFIG_FILE}")

    try:
        with open(CONFIG_FILE, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in configuration file: {e}")

    if data is None:
        raise ValueError("Configuration file is empty")
    if not isinstance(data, dict):
        raise ValueError("Configuration file must contain a mapping")

    config = Config.from_dict(data)
    if not config.api_key:
        config.api_key = get_api_key_from_env() or ""

    is_valid, error = config.validate()
    if not is_valid:
        raise ValueError(f"Invalid configuration: {error}")

    return config


def save_config(config: Config) -> None:
    """
    Save configuration to file.

    Args:
        config: Configuration to save

    Raises:
        ValueError: If configuration is invalid
    """
    is_valid, error = config.validate()
    if not is_valid:
        raise ValueError(f"Cannot save invalid configuration: {error}")

    with open(CONFIG_FILE, "w") as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)


def get_default_config() -> Config:
    """
    Get a default configuration instance.

    Returns:
        Config with default values
    """
    return Config()


# ============================================================================
# Environment Variables
# ============================================================================

def get_api_key_from_env() -> Optional[str]:
    """
    Attempt to get the Gemini API key from environment variables.

    Returns:
        API key if found, None otherwise
    """
    for var_name in API_KEY_ENV_VARS:
        api_key = os.environ.get(var_name)
        if api_key:
            return api_key

    return None


# ============================================================================
# Utility Functions
# ============================================================================

def ensure_data_dir(config: Optional[Config] = None) -> Path:
    """
    Ensure the data directory exists.

    Args:
        config: Configuration whose data_dir to create (default data/ otherwise)

    Returns:
        Path to data directory
    """
    data_dir = config.resolve_data_dir() if config else DATA_DIR
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir
