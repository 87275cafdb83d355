"""
Unit tests for the sales coach

All tests use mocks to avoid API calls: Gemini responses are AsyncMocks.
"""

from unittest.mock import AsyncMock, Mock, patch

import pytest

from sprint_lab.coach import (
    AnswerProvider,
    Coach,
    CoachAnswer,
    CoachChain,
    GeminiAnswerProvider,
    LocalAnswerProvider,
    ProviderError,
    create_coach,
)
from sprint_lab.rag import LocalRetrievalEngine
from sprint_lab.rag.knowledge import DIAGNOSTIC_QUESTIONS, QUICK_ACTIONS

pytestmark = pytest.mark.unit


@pytest.fixture(scope="module")
def engine():
    return LocalRetrievalEngine.from_document()


def _gemini(response=None, error=None):
    client = Mock()
    client.aio.models.generate_content = AsyncMock(return_value=response, side_effect=error)
    return GeminiAnswerProvider(api_key="", client=client), client


class FailingProvider(AnswerProvider):
    name = "failing"

    async def answer(self, question, user_name=""):
        raise ProviderError("boom")

    def get_model_info(self):
        return {"name": "failing", "type": "test"}


class TestGeminiProvider:

    @pytest.mark.asyncio
    async def test_answer(self):
        provider, client = _gemini(response=Mock(text="  **Meta:** 3 pares por dia  "))
        answer = await provider.answer("Qual a meta?", "Ana")

        assert answer == CoachAnswer(text="**Meta:** 3 pares por dia", provider="gemini", is_local=False)
        kwargs = client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert "Usuário: Ana." in kwargs["contents"]
        assert "Pergunta do usuário: Qual a meta?" in kwargs["contents"]

    def test_prompt_embeds_knowledge(self):
        provider, _ = _gemini()
        prompt = provider.build_prompt("Oi")
        assert "Os 4 Pilares da Venda" in prompt
        assert "treinador de elite" in prompt
        assert "Usuário: Distribuidor." in prompt

    @pytest.mark.asyncio
    async def test_empty_response(self):
        provider, _ = _gemini(response=Mock(text="   "))
        with pytest.raises(ProviderError):
            await provider.answer("Qual a meta?")

    @pytest.mark.asyncio
    async def test_api_error(self):
        provider, _ = _gemini(error=RuntimeError("quota exceeded"))
        with pytest.raises(ProviderError, match="quota exceeded"):
            await provider.answer("Qual a meta?")

    def test_requires_api_key(self):
        with pytest.raises(ValueError):
            GeminiAnswerProvider(api_key="")

    def test_model_info(self):
        provider, _ = _gemini()
        info = provider.get_model_info()
        assert info["type"] == "llm_coach"
        assert info["provider"] == "google-genai"


class TestCoachChain:

    @pytest.mark.asyncio
    async def test_falls_back_to_local(self, engine):
        chain = CoachChain([FailingProvider()], engine)
        answer = await chain.answer("Quais são os 4 pilares?")

        assert answer.is_local
        assert answer.provider == "local"
        assert answer.text.startswith("**OS 4 PILARES DA VENDA**")

    @pytest.mark.asyncio
    async def test_first_success_wins(self, engine):
        provider, _ = _gemini(response=Mock(text="Resposta da IA"))
        chain = CoachChain([provider], engine)
        answer = await chain.answer("Qual a meta?")
        assert answer.provider == "gemini"

    def test_local_provider_always_last(self, engine):
        chain = CoachChain([], engine)
        assert [p.name for p in chain.providers] == ["local"]

        local = LocalAnswerProvider(engine)
        chain = CoachChain([FailingProvider(), local], engine)
        assert chain.providers[-1] is local
        assert len(chain.providers) == 2

    def test_get_info(self, engine):
        info = CoachChain([], engine).get_info()
        assert info[0]["type"] == "local_rag"
        assert info[0]["chunks"] == 5


class TestCoach:

    @pytest.mark.asyncio
    async def test_diagnostic_command(self, engine):
        coach = Coach(engine)
        answer = await coach.ask("  /TEST ")

        assert answer.provider == "diagnostic"
        lines = answer.text.splitlines()
        assert len([line for line in lines if line[:1].isdigit()]) == len(DIAGNOSTIC_QUESTIONS)
        assert "Quais são os 4 pilares? → Os 4 Pilares da Venda" in answer.text

    @pytest.mark.asyncio
    async def test_diagnostic_skips_llm(self, engine):
        provider, client = _gemini(response=Mock(text="nunca"))
        coach = Coach(engine, [provider])
        await coach.ask("/test")
        client.aio.models.generate_content.assert_not_called()

    @pytest.mark.asyncio
    async def test_question_goes_through_chain(self, engine):
        coach = Coach(engine, [FailingProvider()])
        answer = await coach.ask("xyzzy")
        assert answer.is_local
        assert "Não encontrei" in answer.text

    def test_quick_action_rotation(self, engine):
        coach = Coach(engine)
        action = QUICK_ACTIONS[0]
        texts = [coach.quick_action(action.label).text for _ in range(len(action.variations) + 1)]

        assert texts[:-1] == list(action.variations)
        assert texts[-1] == action.variations[0]

    def test_quick_action_counters_are_per_label(self, engine):
        coach = Coach(engine)
        coach.quick_action(QUICK_ACTIONS[0].label)
        answer = coach.quick_action(QUICK_ACTIONS[1].label)
        assert answer.text == QUICK_ACTIONS[1].variations[0]
        assert answer.provider == "quick_action"

    def test_unknown_quick_action(self, engine):
        assert Coach(engine).quick_action("Inexistente") is None


class TestCreateCoach:

    def test_local_only_without_key(self, engine, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        coach = create_coach(engine)
        assert [p.name for p in coach.chain.providers] == ["local"]

    def test_gemini_first_with_key(self, engine, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        monkeypatch.setenv("COACH_MODEL", "gemini-test")
        with patch("sprint_lab.coach.gemini.genai.Client") as mock_client:
            coach = create_coach(engine)

        mock_client.assert_called_once_with(api_key="test-key")
        assert [p.name for p in coach.chain.providers] == ["gemini", "local"]
        assert coach.chain.providers[0].model_name == "gemini-test"

    def test_client_failure_degrades_to_local(self, engine, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        with patch("sprint_lab.coach.gemini.genai.Client", side_effect=RuntimeError("no network")):
            coach = create_coach(engine)
        assert [p.name for p in coach.chain.providers] == ["local"]
