"""
Local retrieval answer provider.

Wraps LocalRetrievalEngine. Never raises: the engine always returns text
(answer, guidance or not-found message), so this provider closes every chain.
"""

import logging

from ..rag import LocalRetrievalEngine
from .base import AnswerProvider, CoachAnswer

logger = logging.getLogger(__name__)


class LocalAnswerProvider(AnswerProvider):
    """Keyword retrieval over the built-in knowledge base"""

    name = "local"

    def __init__(self, engine: LocalRetrievalEngine):
        self.engine = engine

    async def answer(self, question: str, user_name: str = "") -> CoachAnswer:
        return CoachAnswer(text=self.engine.respond(question), provider=self.name, is_local=True)

    def get_model_info(self) -> dict:
        return {
            "name": "keyword-retrieval",
            "type": "local_rag",
            "chunks": len(self.engine.chunks),
        }
