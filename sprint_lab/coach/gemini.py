"""
Gemini LLM answer provider using Google GenAI SDK.

Sends the campaign knowledge base with the question and asks for a short,
motivating, bullet-point answer. Any failure (API error, empty response)
raises ProviderError so the chain falls back to local retrieval.
"""

import logging

from google import genai

from ..rag.knowledge import KNOWLEDGE_BASE
from .base import AnswerProvider, CoachAnswer, ProviderError

logger = logging.getLogger(__name__)


class GeminiAnswerProvider(AnswerProvider):
    """
    LLM-based sales coach using Gemini models.

    The knowledge base is embedded in every prompt (it is small), so the
    model answers from campaign facts instead of general knowledge.
    """

    name = "gemini"

    COACH_PROMPT_TEMPLATE = """Você é um Coach de Vendas especialista na campanha Sprint Final All-In.
Baseie-se nestes dados: {knowledge}
Usuário: {user_name}.
Responda em TÓPICOS curtos (bullet points).
Use negrito para destacar valores e metas.
Seja motivador estilo "treinador de elite".

Pergunta do usuário: {question}"""

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-2.5-flash",
        temperature: float = 0.7,
        knowledge: str = KNOWLEDGE_BASE,
        client=None,
    ):
        """
        Initialize Gemini coach.

        Args:
            api_key: Gemini API key
            model_name: Gemini model to use (default: gemini-2.5-flash)
            temperature: Model temperature
            knowledge: Knowledge document embedded in the prompt
            client: Pre-built genai client (tests)
        """
        if not api_key and client is None:
            raise ValueError("Gemini API key required. Set GEMINI_API_KEY env var or pass api_key parameter.")

        self.model_name = model_name
        self.temperature = temperature
        self.knowledge = knowledge

        try:
            self.client = client or genai.Client(api_key=api_key)
            logger.info(f"Gemini coach initialized: {model_name}")
        except Exception as e:
            logger.error(f"Failed to initialize Gemini client: {e}")
            raise

    def build_prompt(self, question: str, user_name: str = "") -> str:
        return self.COACH_PROMPT_TEMPLATE.format(
            knowledge=self.knowledge,
            user_name=user_name or "Distribuidor",
            question=question,
        )

    async def answer(self, question: str, user_name: str = "") -> CoachAnswer:
        prompt = self.build_prompt(question, user_name)

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config={"temperature": self.temperature},
            )
        except Exception as e:
            logger.warning(f"Gemini request failed: {e}")
            raise ProviderError(f"Gemini request failed: {e}") from e

        text = getattr(response, "text", None)
        if not text or not text.strip():
            logger.warning("Gemini returned an empty response")
            raise ProviderError("Empty response from Gemini")

        return CoachAnswer(text=text.strip(), provider=self.name, is_local=False)

    def get_model_info(self) -> dict:
        return {
            "name": self.model_name,
            "type": "llm_coach",
            "provider": "google-genai",
            "temperature": self.temperature,
        }
