"""
Unit tests for knowledge chunking and local retrieval.
"""

import pytest

from sprint_lab.rag import LocalRetrievalEngine, chunk_knowledge
from sprint_lab.rag.chunker import DEFAULT_TITLE
from sprint_lab.rag.engine import format_answer
from sprint_lab.rag.knowledge import (
    EMPTY_QUERY_MESSAGE,
    KNOWLEDGE_BASE,
    NOT_FOUND_MESSAGE,
    SOURCE_SUFFIX,
)

pytestmark = pytest.mark.unit


class TestChunker:
    """Heading-based section split"""

    def test_builtin_knowledge_sections(self):
        titles = [c.title for c in chunk_knowledge(KNOWLEDGE_BASE)]
        assert titles == [
            "Meta Financeira",
            "Os 4 Pilares da Venda",
            "Rotina Sugerida",
            "Argumentos de Venda",
            "Prêmio Extra",
        ]

    def test_document_without_headings(self):
        chunks = chunk_knowledge("Texto sem nenhum titulo por aqui")
        assert len(chunks) == 1
        assert chunks[0].title == DEFAULT_TITLE
        assert chunks[0].content == "Texto sem nenhum titulo por aqui"

    def test_empty_document(self):
        assert chunk_knowledge("") == []
        assert chunk_knowledge("\n\n   \n") == []

    def test_short_section_dropped_when_followed_by_heading(self):
        chunks = chunk_knowledge("# Titulo\ncurto\n# Outro\nconteudo suficiente aqui")
        assert [c.title for c in chunks] == ["Outro"]

    def test_last_section_only_needs_content(self):
        chunks = chunk_knowledge("# A\nconteudo longo o bastante\n# B\nok")
        assert [c.title for c in chunks] == ["A", "B"]
        assert chunks[1].content == "ok"

    def test_heading_markers_stripped(self):
        chunks = chunk_knowledge("### Sub Titulo\nalgum conteudo relevante")
        assert chunks[0].title == "Sub Titulo"
        assert chunks[0].original_text.startswith("### Sub Titulo\n")

    def test_tokens_include_title(self):
        chunk = chunk_knowledge("# Pilares\nconteudo sobre vendas")[0]
        assert chunk.title_tokens == ("pilar",)
        assert chunk.tokens[0] == "pilar"
        assert "vend" in chunk.tokens


class TestRetrievalEngine:
    """Keyword scoring and answer formatting"""

    @pytest.fixture(scope="class")
    def engine(self):
        return LocalRetrievalEngine.from_document()

    def test_pillars_question(self, engine):
        answer = engine.respond("Quais são os 4 pilares?")
        assert answer.startswith("**OS 4 PILARES DA VENDA**\n\n")
        assert "Ativação (Clientes Antigos):" in answer
        assert answer.endswith(SOURCE_SUFFIX)

    def test_bold_markers_removed_from_body(self, engine):
        answer = engine.respond("Quais são os 4 pilares?")
        body = answer.split("\n\n", 1)[1]
        assert "**" not in body

    def test_title_match_wins(self, engine):
        ranked = engine.rank("meta financeira")
        assert ranked[0].chunk.title == "Meta Financeira"
        assert ranked[0].score >= 20

    def test_routine_question(self, engine):
        assert engine.rank("Rotina da manhã")[0].chunk.title == "Rotina Sugerida"

    def test_stopword_only_query(self, engine):
        assert engine.respond("de que com para") == EMPTY_QUERY_MESSAGE
        assert engine.respond("?!") == EMPTY_QUERY_MESSAGE

    def test_no_match(self, engine):
        assert engine.respond("xyzzy") == NOT_FOUND_MESSAGE

    def test_empty_engine(self):
        assert LocalRetrievalEngine([]).respond("pilares") == NOT_FOUND_MESSAGE

    def test_score_points(self):
        engine = LocalRetrievalEngine.from_document("# Vendas\nvendas vendas e mais conteudo")
        scored = engine.rank("vendas")[0]
        # title hit (10) + three body hits counting the title token (3 x 2)
        assert scored.score == 16
        assert scored.matched_terms == 2

    def test_ties_keep_document_order(self):
        engine = LocalRetrievalEngine.from_document(
            "# Alfa\nconteudo repetido aqui\n# Beta\nconteudo repetido aqui"
        )
        ranked = engine.rank("conteudo")
        assert [s.chunk.title for s in ranked] == ["Alfa", "Beta"]
        assert ranked[0].score == ranked[1].score

    def test_format_answer_converts_inline_headings(self):
        chunk = chunk_knowledge("# Dicas\nVeja ## Item um\nTexto **forte** aqui")[0]
        answer = format_answer(chunk)
        assert answer.startswith("**DICAS**\n\n")
        assert "Veja • Item um" in answer
        assert "Texto forte aqui" in answer
