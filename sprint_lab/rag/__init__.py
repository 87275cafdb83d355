"""
Local RAG (keyword retrieval) for the sales coach.

Components:
- stemmer: fixed-order Portuguese suffix stripping
- tokenizer: accent/punctuation/stopword normalization + stemming
- chunker: heading-based split of the knowledge document
- engine: title/body keyword scoring and answer formatting
- knowledge: campaign manual, quick actions, diagnostic questions

No embeddings and no external calls: the whole knowledge base is a few
sections, so a linear scan is enough.
"""

from .tokenizer import tokenize
from .stemmer import stem
from .chunker import KnowledgeChunk, chunk_knowledge
from .engine import LocalRetrievalEngine, ScoredChunk

__all__ = [
    "tokenize",
    "stem",
    "KnowledgeChunk",
    "chunk_knowledge",
    "LocalRetrievalEngine",
    "ScoredChunk",
]
