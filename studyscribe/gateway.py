"""
AI Gateway

Formats the study prompts and forwards them to the LLM provider. Every
remote failure collapses into one user notification and a None result:
callers treat None as "no update" and leave their state unchanged.
"""

from typing import List, Optional, Sequence
import logging

from google.api_core.exceptions import GoogleAPICallError

from studyscribe.llm_providers import ChatMessage, LLMProvider, USER_ROLE
from studyscribe.models import Note
from studyscribe.notifications import Notifier

logger = logging.getLogger(__name__)


REMOTE_ERROR_MESSAGE = "Failed to get a response from Gemini"
EMPTY_RESPONSE_MESSAGE = "Received empty response from Gemini"
TRANSPORT_ERROR_MESSAGE = "Failed to communicate with Gemini API"


class AIGateway:
    """
    Single entry point for every AI feature.

    Issues exactly one provider call per request. There is no retry,
    backoff, or timeout of its own.
    """

    def __init__(self, provider: LLMProvider, notifier: Notifier):
        """
        Initialize the gateway.

        Args:
            provider: LLM provider that performs the request
            notifier: Channel for failure notifications
        """
        self.provider = provider
        self.notifier = notifier

    def chat(self, messages: List[ChatMessage]) -> Optional[str]:
        """
        Send a multi-turn conversation.

        Args:
            messages: Ordered conversation turns

        Returns:
            Generated text, or None on any failure
        """
        try:
            text = self.provider.generate(messages)
        except GoogleAPICallError as e:
            logger.error(f"Gemini API error: {e}")
            self.notifier.error(REMOTE_ERROR_MESSAGE)
            return None
        except Exception as e:
            logger.error(f"Error communicating with Gemini: {e}")
            self.notifier.error(TRANSPORT_ERROR_MESSAGE)
            return None

        if text is None:
            logger.error("Gemini returned no usable candidate")
            self.notifier.error(EMPTY_RESPONSE_MESSAGE)
            return None

        return text

    def generate(self, prompt: str) -> Optional[str]:
        """Send a single user message."""
        return self.chat([ChatMessage(role=USER_ROLE, content=prompt)])

    # ------------------------------------------------------------------
    # Prompt templates
    # ------------------------------------------------------------------

    def generate_summary(self, text: str) -> Optional[str]:
        return self.generate(
            "Summarize the following study notes concisely, highlighting "
            "the key concepts and important points:\n\n"
            f"{text}"
        )

    def analyze_pyqs(self, questions: str, subject: str) -> Optional[str]:
        return self.generate(
            f"Analyze these previous year questions for {subject} exam. "
            "For each question:\n"
            "1. Identify the topic/concept being tested\n"
            "2. Suggest the best approach to solve it\n"
            "3. Highlight any common patterns or tricks\n"
            "4. Rate difficulty from 1-5\n\n"
            f"Questions:\n{questions}"
        )

    def resolve_doubt(self, doubt: str, subject: str) -> Optional[str]:
        return self.generate(
            f"I'm studying {subject} and have the following doubt:\n\n"
            f"{doubt}\n\n"
            "Please explain this concept clearly and thoroughly, "
            "with examples if possible."
        )

    def generate_study_tasks(self, notes: Sequence[Note]) -> Optional[str]:
        """
        Ask for one study task per note.

        Only the title and subject of each note are sent. The reply is
        expected to hold one task per line, in note order.
        """
        note_lines = "\n".join(
            f"{i}. {note.title} ({note.subject})" for i, note in enumerate(notes, 1)
        )
        return self.generate(
            "Create a study plan from these notes. Write exactly one short, "
            f"actionable study task for each of the {len(notes)} notes below, "
            "in the same order.\n"
            "Reply with plain text only: one task per line, no numbering, "
            "no bullets, no blank lines.\n\n"
            f"Notes:\n{note_lines}"
        )
