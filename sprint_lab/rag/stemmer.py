"""
Rule-based Portuguese suffix stripper.

A fixed pipeline of six suffix rules, applied in order, each at most once:

1. Verb infinitive:  ar | er | ir | or
2. Plural:           s | es
3. Gerund:           indo | endo | ando
4. Adverb:           mente
5. Adjective:        oso | osa
6. Theme vowel:      a | o | e

Every rule runs regardless of whether the previous one matched. This is not
iterative stripping: "pilares" -> "pilar" (rule 2 only), while "pilar" ->
"pil" (rule 1). Retrieval scoring relies on these exact stems, so the rules
must not be "improved".

Examples:
- "vendas" → "vend"
- "clientes" → "client"
- "rapidamente" → "rapid"
- "usando" → "us"
"""

import re
from typing import Pattern, Tuple

SUFFIX_RULES: Tuple[Pattern[str], ...] = (
    re.compile(r"(ar|er|ir|or)$"),
    re.compile(r"(s|es)$"),
    re.compile(r"(indo|endo|ando)$"),
    re.compile(r"(mente)$"),
    re.compile(r"(oso|osa)$"),
    re.compile(r"(a|o|e)$"),
)


def stem(word: str) -> str:
    """
    Reduce a single word to its stem.

    Args:
        word: Word to stem (case is folded first)

    Returns:
        Stemmed word (may be shorter than 3 characters)

    Examples:
        >>> stem("pilares")
        'pilar'
        >>> stem("vendas")
        'vend'
        >>> stem("Presencial")
        'presencial'
    """
    result = word.lower()
    for rule in SUFFIX_RULES:
        result = rule.sub("", result, count=1)
    return result
