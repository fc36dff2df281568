"""
Pytest Configuration and Shared Fixtures

This module contains pytest fixtures that are shared across all test files.
Fixtures defined here are automatically available in all test modules.
"""

import tempfile
from pathlib import Path
from typing import Generator, List, Optional, Tuple
import pytest

from studyscribe.config import Config
from studyscribe.gateway import AIGateway
from studyscribe.llm_providers import ChatMessage, LLMProvider
from studyscribe.notifications import NotificationLevel, Notifier
from studyscribe.panels import DoubtResolver, NoteEditor, PYQAnalyzer, TaskManager
from studyscribe.storage import LocalStorage, RecordStore


# ============================================================================
# Fakes
# ============================================================================

class FakeProvider(LLMProvider):
    """
    Deterministic LLM provider for unit tests.

    - Captures every request for assertions
    - Returns next_text, or raises `error` when it is set
    """

    def __init__(self, next_text: Optional[str] = "ok", error: Optional[Exception] = None):
        super().__init__(model="fake-model")
        self.next_text = next_text
        self.error = error
        self.calls: List[List[ChatMessage]] = []

    def generate(self, messages: List[ChatMessage]) -> Optional[str]:
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        return self.next_text

    @property
    def last_prompt(self) -> str:
        return self.calls[-1][-1].content


class CollectingNotifier(Notifier):
    """Notifier that records every message instead of printing it."""

    def __init__(self):
        self.messages: List[Tuple[NotificationLevel, str]] = []

    def notify(self, level: NotificationLevel, message: str) -> None:
        self.messages.append((level, message))

    def of_level(self, level: NotificationLevel) -> List[str]:
        return [message for lvl, message in self.messages if lvl == level]

    @property
    def errors(self) -> List[str]:
        return self.of_level(NotificationLevel.ERROR)


# ============================================================================
# Temporary Directory Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Automatically removed after test
    """
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def temp_config_dir(temp_dir: Path, monkeypatch) -> Path:
    """
    Create a temporary directory and set it as the config location.

    Args:
        temp_dir: Temporary directory fixture
        monkeypatch: Pytest monkeypatch fixture

    Returns:
        Path to temporary config directory
    """
    import studyscribe.config as config_module

    config_file = temp_dir / "config.yaml"
    data_dir = temp_dir / "data"

    monkeypatch.setattr(config_module, "CONFIG_FILE", config_file)
    monkeypatch.setattr(config_module, "DATA_DIR", data_dir)

    return temp_dir


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def default_config() -> Config:
    """
    Create a default configuration for testing.

    Returns:
        Config instance with default values
    """
    return Config()


@pytest.fixture
def valid_config(temp_dir: Path) -> Config:
    """
    Create a valid configuration for testing.

    Args:
        temp_dir: Temporary directory fixture

    Returns:
        Valid Config instance storing data under temp_dir
    """
    return Config(
        api_key="test-gemini-key-1234567890",
        model="gemini-1.5-flash",
        data_dir=str(temp_dir / "data"),
    )


@pytest.fixture
def config_dict() -> dict:
    """
    Create a configuration dictionary for testing.

    Returns:
        Dictionary with valid configuration
    """
    return {
        "api_key": "test-gemini-key-1234567890",
        "model": "gemini-1.5-pro",
        "data_dir": "",
        "verbose": True,
    }


# ============================================================================
# Environment Fixtures
# ============================================================================

@pytest.fixture
def clean_env(monkeypatch) -> None:
    """
    Clean environment variables that might interfere with tests.

    Args:
        monkeypatch: Pytest monkeypatch fixture
    """
    for var in ["GOOGLE_API_KEY", "GEMINI_API_KEY"]:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def mock_gemini_env(clean_env, monkeypatch) -> str:
    """
    Set up mock Gemini API key in environment.

    Args:
        monkeypatch: Pytest monkeypatch fixture

    Returns:
        The mock API key
    """
    api_key = "test-gemini-key"
    monkeypatch.setenv("GOOGLE_API_KEY", api_key)
    return api_key


# ============================================================================
# Store and Gateway Fixtures
# ============================================================================

@pytest.fixture
def storage_path(temp_dir: Path) -> Path:
    return temp_dir / "local_storage.json"


@pytest.fixture
def local_storage(storage_path: Path) -> LocalStorage:
    return LocalStorage(storage_path)


@pytest.fixture
def store(local_storage: LocalStorage) -> RecordStore:
    """Empty record store backed by a temporary file."""
    return RecordStore(local_storage)


@pytest.fixture
def notifier() -> CollectingNotifier:
    return CollectingNotifier()


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def gateway(provider: FakeProvider, notifier: CollectingNotifier) -> AIGateway:
    return AIGateway(provider, notifier)


@pytest.fixture
def task_manager(store, gateway, notifier) -> TaskManager:
    return TaskManager(store, gateway, notifier)


@pytest.fixture
def note_editor(store, gateway, notifier) -> NoteEditor:
    return NoteEditor(store, gateway, notifier)


@pytest.fixture
def pyq_analyzer(gateway, notifier) -> PYQAnalyzer:
    return PYQAnalyzer(gateway, notifier)


@pytest.fixture
def doubt_resolver(store, gateway, notifier) -> DoubtResolver:
    return DoubtResolver(store, gateway, notifier)


# ============================================================================
# Mock Fixtures
# ============================================================================

@pytest.fixture
def mock_console(mocker):
    """
    Mock Rich console for testing CLI output.

    Args:
        mocker: pytest-mock fixture

    Returns:
        Mock console object
    """
    return mocker.patch("studyscribe.cli.console")


@pytest.fixture
def mock_prompt(mocker):
    """
    Mock Rich Prompt for testing user input.

    Args:
        mocker: pytest-mock fixture

    Returns:
        Mock Prompt object
    """
    return mocker.patch("studyscribe.setup_wizard.Prompt")


@pytest.fixture
def mock_confirm(mocker):
    """
    Mock Rich Confirm for testing yes/no prompts.

    Args:
        mocker: pytest-mock fixture

    Returns:
        Mock Confirm object
    """
    return mocker.patch("studyscribe.setup_wizard.Confirm")
