"""
Ordered provider chain and the chat-facing Coach.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from ..rag import LocalRetrievalEngine
from ..rag.knowledge import DIAGNOSTIC_QUESTIONS, QUICK_ACTIONS, QuickAction
from .base import AnswerProvider, CoachAnswer, ProviderError
from .local import LocalAnswerProvider

logger = logging.getLogger(__name__)

DIAGNOSTIC_COMMAND = "/test"


class CoachChain:
    """
    Tries providers in order and returns the first answer.

    A LocalAnswerProvider is appended when the given providers do not end
    with one, so `answer()` always produces text.
    """

    def __init__(self, providers: Sequence[AnswerProvider], engine: LocalRetrievalEngine):
        self.providers: List[AnswerProvider] = list(providers)
        if not self.providers or not isinstance(self.providers[-1], LocalAnswerProvider):
            self.providers.append(LocalAnswerProvider(engine))

    async def answer(self, question: str, user_name: str = "") -> CoachAnswer:
        for provider in self.providers:
            try:
                return await provider.answer(question, user_name)
            except ProviderError as e:
                logger.warning(f"Provider '{provider.name}' failed, falling back: {e}")

        # Unreachable while the local provider closes the chain
        raise ProviderError("No provider produced an answer")

    def get_info(self) -> List[dict]:
        return [provider.get_model_info() for provider in self.providers]

    def close(self):
        for provider in self.providers:
            provider.close()


class Coach:
    """Chat entry point: free questions, the /test command and quick actions"""

    def __init__(
        self,
        engine: LocalRetrievalEngine,
        providers: Sequence[AnswerProvider] = (),
        quick_actions: Sequence[QuickAction] = QUICK_ACTIONS,
    ):
        self.engine = engine
        self.chain = CoachChain(providers, engine)
        self.quick_actions = tuple(quick_actions)
        self._rotation: Dict[str, int] = defaultdict(int)

    async def ask(self, question: str, user_name: str = "") -> CoachAnswer:
        if question.strip().lower() == DIAGNOSTIC_COMMAND:
            return CoachAnswer(text=self.run_diagnostic(), provider="diagnostic", is_local=True)
        return await self.chain.answer(question, user_name)

    def run_diagnostic(self) -> str:
        """Runs every diagnostic question through local retrieval"""
        lines = ["**DIAGNÓSTICO DO MOTOR LOCAL**", ""]
        for number, question in enumerate(DIAGNOSTIC_QUESTIONS, start=1):
            ranked = self.engine.rank(question)
            best = ranked[0] if ranked else None
            if best is not None and best.score > 0:
                lines.append(f"{number}. {question} → {best.chunk.title} (score {best.score})")
            else:
                lines.append(f"{number}. {question} → sem resultado")
        logger.info(f"Diagnostic run over {len(DIAGNOSTIC_QUESTIONS)} questions")
        return "\n".join(lines)

    def find_quick_action(self, label: str) -> Optional[QuickAction]:
        for action in self.quick_actions:
            if action.label == label:
                return action
        return None

    def quick_action(self, label: str) -> Optional[CoachAnswer]:
        """
        Scripted answer for a quick action.

        Successive calls for the same label cycle through its variations.
        Returns None for an unknown label.
        """
        action = self.find_quick_action(label)
        if action is None or not action.variations:
            return None

        position = self._rotation[label] % len(action.variations)
        self._rotation[label] += 1
        return CoachAnswer(text=action.variations[position], provider="quick_action", is_local=True)

    def close(self):
        self.chain.close()
