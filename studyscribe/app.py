"""
Application context.

Creates the one RecordStore, AIGateway and set of panels that the Shell
shares between its tabs.
"""

from dataclasses import dataclass
from typing import Optional
import logging

from studyscribe.config import Config, ensure_data_dir
from studyscribe.gateway import AIGateway
from studyscribe.llm_providers import LLMProvider, create_provider
from studyscribe.notifications import Notifier
from studyscribe.panels import DoubtResolver, NoteEditor, PYQAnalyzer, TaskManager
from studyscribe.storage import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class StudyApp:
    """Central container for shared app resources."""
    config: Config
    store: RecordStore
    gateway: AIGateway
    notifier: Notifier
    tasks: TaskManager
    notes: NoteEditor
    pyq: PYQAnalyzer
    doubts: DoubtResolver

    @classmethod
    def create(
        cls,
        config: Config,
        notifier: Notifier,
        provider: Optional[LLMProvider] = None,
    ) -> "StudyApp":
        """
        Build the store, gateway and panels.

        Args:
            config: Application configuration
            notifier: Notification channel shared by all panels
            provider: LLM provider to use (created from config if omitted)

        Returns:
            Initialized StudyApp
        """
        data_dir = ensure_data_dir(config)
        store = RecordStore.open(data_dir)
        if provider is None:
            provider = create_provider(api_key=config.api_key, model=config.model)
        gateway = AIGateway(provider, notifier)

        logger.info(f"StudyApp initialized with data_dir={data_dir}, model={config.model}")
        return cls(
            config=config,
            store=store,
            gateway=gateway,
            notifier=notifier,
            tasks=TaskManager(store, gateway, notifier),
            notes=NoteEditor(store, gateway, notifier),
            pyq=PYQAnalyzer(gateway, notifier),
            doubts=DoubtResolver(store, gateway, notifier),
        )
