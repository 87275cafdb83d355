"""
Abstract base class for coach answer providers.

All providers must implement this interface to be chainable.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class CoachAnswer:
    """Answer returned to the chat"""
    text: str
    provider: str        # Provider name ("gemini", "local", "quick_action", ...)
    is_local: bool       # True if produced without an external call


class ProviderError(Exception):
    """Provider could not produce an answer (next provider should be tried)"""


class AnswerProvider(ABC):
    """
    Abstract base class for answer providers.

    Providers either return a CoachAnswer or raise ProviderError.
    """

    name: str = "provider"

    @abstractmethod
    async def answer(self, question: str, user_name: str = "") -> CoachAnswer:
        """
        Answer a coaching question.

        Args:
            question: User's free-text question
            user_name: Display name used to personalize the answer

        Raises:
            ProviderError: If no answer could be produced
        """
        pass

    @abstractmethod
    def get_model_info(self) -> dict:
        """
        Get information about the provider.

        Returns:
            Dict with keys: name, type, ...
        """
        pass

    def close(self):
        """Optional cleanup (close API clients, etc.)"""
        pass
