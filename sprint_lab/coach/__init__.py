"""
Sales coach for the chat.

Answers come from the first provider that succeeds: Gemini (when configured),
then local keyword retrieval over the campaign knowledge base.
"""

from .base import AnswerProvider, CoachAnswer, ProviderError
from .chain import Coach, CoachChain
from .factory import create_coach
from .gemini import GeminiAnswerProvider
from .local import LocalAnswerProvider

__all__ = [
    "AnswerProvider",
    "CoachAnswer",
    "ProviderError",
    "Coach",
    "CoachChain",
    "create_coach",
    "GeminiAnswerProvider",
    "LocalAnswerProvider",
]
