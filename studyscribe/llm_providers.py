"""
LLM Provider Layer

This module wraps the Google Gemini API behind a small provider interface.
A provider sends one generateContent request with fixed generation
parameters and returns the first candidate's text. Transport and remote
errors are raised to the caller untouched; no retry is attempted.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


# Fixed for every request
GENERATION_CONFIG: Dict[str, Any] = {
    "temperature": 0.7,
    "top_k": 40,
    "top_p": 0.95,
    "max_output_tokens": 8192,
}

USER_ROLE = "user"
MODEL_ROLE = "model"


@dataclass
class ChatMessage:
    """One conversation turn sent to the model."""
    role: str
    content: str

    def to_content(self) -> Dict[str, Any]:
        """Gemini wire format for this turn."""
        return {"role": self.role, "parts": [{"text": self.content}]}


def extract_candidate_text(response: Any) -> Optional[str]:
    """
    Pull the first candidate's first text part out of a response.

    Any other response shape counts as empty.

    Args:
        response: generateContent response object

    Returns:
        Candidate text, or None when there is no usable candidate
    """
    candidates = getattr(response, "candidates", None)
    if not candidates:
        return None

    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None)
    if not parts:
        return None

    text = getattr(parts[0], "text", None)
    if not isinstance(text, str) or not text:
        return None
    return text


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    def __init__(self, model: str):
        """
        Initialize the LLM provider.

        Args:
            model: Model identifier (e.g., "gemini-1.5-flash")
        """
        self.model = model

    @abstractmethod
    def generate(self, messages: List[ChatMessage]) -> Optional[str]:
        """
        Send one generation request.

        Args:
            messages: Ordered conversation turns

        Returns:
            First candidate's text, or None if the response had none

        Raises:
            Exception: Whatever the transport raises on failure
        """
        pass


class GeminiProvider(LLMProvider):
    """Google Gemini API provider implementation."""

    def __init__(self, api_key: str, model: str = "gemini-1.5-flash"):
        """
        Initialize Gemini provider.

        Args:
            api_key: Google API key
            model: Model identifier
        """
        super().__init__(model)

        try:
            import google.generativeai as genai
            genai.configure(api_key=api_key)
            self.model_obj = genai.GenerativeModel(model)
        except ImportError:
            raise ImportError(
                "Google Generative AI package not installed. "
                "Install with: pip install google-generativeai>=0.8.0"
            )

    def generate(self, messages: List[ChatMessage]) -> Optional[str]:
        """Generate a response with a single generateContent call."""
        contents = [message.to_content() for message in messages]
        logger.debug(f"Sending {len(contents)} turn(s) to {self.model}")

        response = self.model_obj.generate_content(
            contents,
            generation_config=GENERATION_CONFIG,
        )
        return extract_candidate_text(response)


def create_provider(api_key: str, model: str) -> LLMProvider:
    """
    Create the configured LLM provider.

    Args:
        api_key: API key for Gemini
        model: Model identifier

    Returns:
        Initialized provider instance

    Raises:
        ValueError: If no API key is given
    """
    if not api_key:
        raise ValueError("An API key is required to create the Gemini provider")
    return GeminiProvider(api_key=api_key, model=model)
