"""
Tokenizer for local retrieval over the Portuguese knowledge base.

Tokenization pipeline:
1. Lowercase conversion
2. Accent removal (NFD decomposition, combining marks dropped)
3. Punctuation removal (anything that is not a word or space character)
4. Whitespace split
5. Filter short words (length <= 2) and stopwords
6. Apply stemming (see stemmer.py)
"""

import re
import unicodedata
from typing import List

from .stemmer import stem

# Portuguese grammatical words. Matched after accent removal, so the
# accented entries ("é", "são", "não", ...) never filter anything.
STOPWORDS = frozenset([
    'a', 'o', 'as', 'os', 'um', 'uma', 'uns', 'umas', 'de', 'do', 'da', 'dos', 'das',
    'em', 'no', 'na', 'nos', 'nas',
    'por', 'pelo', 'pela', 'pelos', 'pelas', 'para', 'com', 'sem', 'e', 'ou', 'mas', 'que', 'se', 'como', 'quando',
    'onde', 'quem', 'qual', 'quais', 'quanto', 'quantos', 'é', 'são', 'foi', 'foram', 'ser', 'estar', 'ter', 'haver',
    'eu', 'tu', 'ele', 'ela', 'nós', 'vós', 'eles', 'elas', 'meu', 'teu', 'seu', 'nosso', 'vosso', 'isso', 'aquilo',
    'este', 'esta', 'esse', 'essa', 'aquele', 'aquela', 'muito', 'pouco', 'mais', 'menos', 'não', 'sim', 'então', 'logo'
])

MIN_TOKEN_LENGTH = 3

_COMBINING_MARKS = re.compile(r"[\u0300-\u036f]")
_PUNCTUATION = re.compile(r'[^A-Za-z0-9_\s]')


def strip_accents(text: str) -> str:
    return _COMBINING_MARKS.sub('', unicodedata.normalize('NFD', text))


def tokenize(text: str) -> List[str]:
    """
    Tokenize text into stemmed, stopword-filtered terms.

    Args:
        text: Free text (query or knowledge content)

    Returns:
        Ordered list of stems (duplicates preserved)

    Examples:
        >>> tokenize("Quais são os 4 pilares?")
        ['sa', 'pilar']

        >>> tokenize("Rotina da manhã")
        ['rotin', 'manh']

        >>> tokenize("   ")
        []
    """
    if not text:
        return []

    text = strip_accents(text.lower())
    text = _PUNCTUATION.sub('', text)

    words = [
        w for w in text.split()
        if len(w) >= MIN_TOKEN_LENGTH and w not in STOPWORDS
    ]

    return [stem(w) for w in words]
