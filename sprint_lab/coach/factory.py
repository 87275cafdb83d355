"""
Factory to create the coach based on configuration.
"""

import logging
import os
from typing import List, Optional

from ..rag import LocalRetrievalEngine
from .base import AnswerProvider
from .chain import Coach
from .gemini import GeminiAnswerProvider

logger = logging.getLogger(__name__)

DEFAULT_COACH_MODEL = "gemini-2.5-flash"


def create_coach(engine: Optional[LocalRetrievalEngine] = None) -> Coach:
    """
    Create the coach from environment configuration.

    Config (env vars):
        GEMINI_API_KEY: Enables the Gemini provider when set
        COACH_MODEL: Gemini model (default: gemini-2.5-flash)

    Without GEMINI_API_KEY, or if the Gemini client cannot be built, the coach
    answers from local retrieval only.
    """
    engine = engine or LocalRetrievalEngine.from_document()
    providers: List[AnswerProvider] = []

    api_key = os.getenv("GEMINI_API_KEY", "")
    if api_key:
        model = os.getenv("COACH_MODEL", DEFAULT_COACH_MODEL)
        try:
            providers.append(GeminiAnswerProvider(api_key=api_key, model_name=model))
        except Exception as e:
            logger.error(f"Gemini coach unavailable, using local retrieval only: {e}")
    else:
        logger.info("GEMINI_API_KEY not set: coach running in local retrieval mode")

    return Coach(engine=engine, providers=providers)
