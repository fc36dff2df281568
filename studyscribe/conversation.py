"""
Conversation transcript for the doubt resolver.

Stores the chat shown in the Assistant tab as an ordered list of turns,
optionally capped to the most recent N messages.
"""

from dataclasses import dataclass, field
from typing import List, Optional
from datetime import datetime

from studyscribe.llm_providers import MODEL_ROLE, USER_ROLE


GREETING = "Hi! I'm your AI study assistant. How can I help you with your studies today?"


@dataclass
class ChatTurn:
    """Single message in the transcript."""
    role: str
    content: str
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def is_user(self) -> bool:
        return self.role == USER_ROLE


class ChatTranscript:
    """
    Ordered chat transcript that starts with the assistant's greeting.

    When max_messages is set, the oldest messages are dropped once the
    limit is exceeded.
    """

    def __init__(self, max_messages: Optional[int] = None, greeting: str = GREETING):
        """
        Initialize the transcript.

        Args:
            max_messages: Maximum number of messages to keep (None for no limit)
            greeting: Opening message from the model
        """
        self.max_messages = max_messages
        self.greeting = greeting
        self.turns: List[ChatTurn] = []
        self.clear()

    def _append(self, turn: ChatTurn) -> ChatTurn:
        self.turns.append(turn)
        if self.max_messages is not None and len(self.turns) > self.max_messages:
            self.turns.pop(0)
        return turn

    def add_user(self, content: str) -> ChatTurn:
        return self._append(ChatTurn(role=USER_ROLE, content=content))

    def add_model(self, content: str) -> ChatTurn:
        return self._append(ChatTurn(role=MODEL_ROLE, content=content))

    def clear(self) -> None:
        """Reset the transcript to just the greeting."""
        self.turns = []
        if self.greeting:
            self.turns.append(ChatTurn(role=MODEL_ROLE, content=self.greeting))

    def __len__(self) -> int:
        return len(self.turns)
