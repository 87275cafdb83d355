"""
Local retrieval engine - keyword scoring over knowledge chunks.

Scoring (per chunk, summed over query tokens):
    +10            if the token appears in the chunk title
    +2 × count     occurrences of the token in the chunk tokens

Title and body matches are counted independently, so a title word also
contributes its body bonus (chunk tokens include the title).

The engine is a pure function of (query, chunks): no learning, no external
calls, no randomness. Chunks are built once and shared read-only.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .chunker import KnowledgeChunk, chunk_knowledge
from .knowledge import EMPTY_QUERY_MESSAGE, KNOWLEDGE_BASE, NOT_FOUND_MESSAGE, SOURCE_SUFFIX
from .tokenizer import tokenize

logger = logging.getLogger(__name__)

TITLE_MATCH_POINTS = 10
BODY_MATCH_POINTS = 2

_INLINE_HEADING = re.compile(r'#{1,3}\s')
_BOLD_MARKER = '**'
_BULLET = '• '


@dataclass(frozen=True)
class ScoredChunk:
    chunk: KnowledgeChunk
    score: int
    matched_terms: int


class LocalRetrievalEngine:
    """
    Keyword retrieval over a fixed knowledge base.

    Usage:
        engine = LocalRetrievalEngine.from_document(KNOWLEDGE_BASE)
        answer = engine.respond("Quais são os 4 pilares?")
    """

    def __init__(self, chunks: Sequence[KnowledgeChunk]):
        self.chunks = tuple(chunks)

    @classmethod
    def from_document(cls, document: Optional[str] = None) -> "LocalRetrievalEngine":
        """Chunk a knowledge document (default: built-in campaign manual)"""
        chunks = chunk_knowledge(KNOWLEDGE_BASE if document is None else document)
        logger.info(f"Local retrieval engine ready: {len(chunks)} chunks")
        return cls(chunks)

    def score(self, query_tokens: List[str], chunk: KnowledgeChunk) -> ScoredChunk:
        score = 0
        matched_terms = 0

        for token in query_tokens:
            if token in chunk.title_tokens:
                score += TITLE_MATCH_POINTS
                matched_terms += 1

            count = chunk.tokens.count(token)
            if count > 0:
                score += count * BODY_MATCH_POINTS
                matched_terms += 1

        return ScoredChunk(chunk=chunk, score=score, matched_terms=matched_terms)

    def rank(self, query: str) -> List[ScoredChunk]:
        """
        Score every chunk against the query.

        Returns:
            Scored chunks sorted by score (descending). The sort is stable,
            so equal scores keep document order.
        """
        query_tokens = tokenize(query)
        if not query_tokens:
            return []

        scored = [self.score(query_tokens, chunk) for chunk in self.chunks]
        return sorted(scored, key=lambda s: s.score, reverse=True)

    def respond(self, query: str) -> str:
        """
        Answer a question from the knowledge base.

        Never fails: returns guidance text for empty queries and a fallback
        message when nothing matches.
        """
        if not tokenize(query):
            return EMPTY_QUERY_MESSAGE

        ranked = self.rank(query)
        if not ranked or ranked[0].score == 0:
            logger.debug(f"No knowledge match for query: {query!r}")
            return NOT_FOUND_MESSAGE

        best = ranked[0]
        logger.debug(f"Best match '{best.chunk.title}' (score={best.score}) for query: {query!r}")
        return format_answer(best.chunk)


def format_answer(chunk: KnowledgeChunk) -> str:
    """Bold upper-cased title, cleaned body, source attribution"""
    body = _INLINE_HEADING.sub(_BULLET, chunk.content)
    body = body.replace(_BOLD_MARKER, '').strip()
    return f"**{chunk.title.upper()}**\n\n{body}{SOURCE_SUFFIX}"
