"""
Knowledge chunker - splits the knowledge document into titled sections.

Lines starting with '#' are headings; everything else is body text of the
current section. Each section is pre-tokenized once so scoring never has to
touch the raw text again.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Tuple

from .tokenizer import tokenize

logger = logging.getLogger(__name__)

HEADING_MARKER = '#'
DEFAULT_TITLE = 'Geral'

# Sections whose trimmed body is this short are noise (e.g. a document title
# directly followed by a sub-heading) and are dropped.
MIN_BODY_LENGTH = 10

_HEADING_PREFIX = re.compile(r'^#+\s*')


@dataclass(frozen=True)
class KnowledgeChunk:
    """Titled section of the knowledge document"""
    title: str
    content: str              # Trimmed body text
    tokens: Tuple[str, ...]   # tokenize(title + " " + content)
    original_text: str        # Heading line + raw body lines
    title_tokens: Tuple[str, ...] = field(default=())


def _build_chunk(title: str, content: str, original_text: str) -> KnowledgeChunk:
    return KnowledgeChunk(
        title=title,
        content=content.strip(),
        tokens=tuple(tokenize(title + ' ' + content)),
        original_text=original_text,
        title_tokens=tuple(tokenize(title)),
    )


def chunk_knowledge(document: str) -> List[KnowledgeChunk]:
    """
    Split a markdown-like document into KnowledgeChunks.

    Args:
        document: Flat text using '#'-prefixed heading lines

    Returns:
        Chunks in document order

    Example:
        >>> chunks = chunk_knowledge("# Metas\\nVender 3 pares por dia.\\n# Lucro\\nR$ 244,50 por par.")
        >>> [c.title for c in chunks]
        ['Metas', 'Lucro']
    """
    chunks: List[KnowledgeChunk] = []

    title = DEFAULT_TITLE
    content = ''
    original_text = ''

    for line in document.split('\n'):
        if line.startswith(HEADING_MARKER):
            if len(content.strip()) > MIN_BODY_LENGTH:
                chunks.append(_build_chunk(title, content, original_text))
            elif content.strip():
                logger.debug(f"Dropping short section '{title}' ({len(content.strip())} chars)")

            title = _HEADING_PREFIX.sub('', line)
            content = ''
            original_text = line + '\n'
        else:
            content += line + '\n'
            original_text += line + '\n'

    # Last section only needs to be non-empty
    if content.strip():
        chunks.append(_build_chunk(title, content, original_text))

    logger.debug(f"Built {len(chunks)} knowledge chunks from {len(document)} chars")

    return chunks
