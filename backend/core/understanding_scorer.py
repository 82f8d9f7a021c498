"""
Lexical understanding scorer.

Turns one student utterance into a bounded score delta by matching weighted
phrases. Longer phrases take precedence over the words they contain, so
"ok got it" scores as one phrase rather than as "ok" + "got it" + "ok got it".
"""

import re
from typing import Dict, FrozenSet, Iterable, List, Set, Tuple
from models import MIN_DELTA, MAX_DELTA

POSITIVE_PHRASES: Dict[str, int] = {
    "ok": 8,
    "okay": 8,
    "k": 6,
    "got it": 10,
    "i understand": 12,
    "understood": 12,
    "makes sense": 10,
    "i see": 10,
    "clear now": 12,
    "thanks": 3,
    "thank you": 7,
    "that helps": 7,
    "helpful": 7,
    "great": 10,
    "awesome": 10,
    "perfect": 10,
    "nice": 6,
    "cool": 6,
    "works": 5,
    "resolved": 6,
    "solved": 6,
    "yes that helps": 6,
    "yup": 5,
    "yep": 5,
    "ok got it": 7,
}

NEGATIVE_PHRASES: Dict[str, int] = {
    "confused": -6,
    "dont understand": -7,
    "what do you mean": -5,
    "can you explain": -5,
    "im lost": -7,
    "unclear": -5,
    "not sure": -4,
    "unsure": -4,
    "explain again": -5,
    "simplify": -4,
    "too hard": -6,
    "too difficult": -6,
    "slow down": -4,
    "still confused": -6,
    "no": -3,
    "nah": -3,
}

# Widest phrase in either table; "what do you mean" needs 4-grams
MAX_NGRAM = max(len(phrase.split()) for phrase in {**POSITIVE_PHRASES, **NEGATIVE_PHRASES})

_APOSTROPHES = re.compile(r"['‘’`]")
_SYMBOLS = re.compile(r"[^\w\s]|_")
_WHITESPACE = re.compile(r"\s+")


def normalize(text: str) -> str:
    """Lowercase, collapse contractions, turn symbols into spaces."""
    text = _APOSTROPHES.sub("", text.lower())
    text = _SYMBOLS.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def ngrams(words: List[str], max_n: int = MAX_NGRAM) -> Set[str]:
    """All contiguous 1..max_n word phrases in ``words``."""
    phrases = set()
    for n in range(1, max_n + 1):
        for start in range(len(words) - n + 1):
            phrases.add(" ".join(words[start:start + n]))
    return phrases


def _sub_phrases(phrase: str) -> Set[str]:
    return ngrams(phrase.split(), max_n=MAX_NGRAM)


def _ordered(table: Dict[str, int]) -> List[Tuple[str, int]]:
    # Longest first, then strongest
    return sorted(
        table.items(),
        key=lambda item: (-len(item[0].split()), -abs(item[1]))
    )


def _score_table(present: FrozenSet[str], ordered: Iterable[Tuple[str, int]]) -> int:
    subtotal = 0
    consumed: Set[str] = set()
    for phrase, weight in ordered:
        if phrase in present and phrase not in consumed:
            subtotal += weight
            consumed |= _sub_phrases(phrase)
    return subtotal


_POSITIVE_ORDER = _ordered(POSITIVE_PHRASES)
_NEGATIVE_ORDER = _ordered(NEGATIVE_PHRASES)


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def score_delta(text: str) -> int:
    """
    Compute the understanding delta for one utterance.

    Args:
        text: Raw user message

    Returns:
        Integer in [MIN_DELTA, MAX_DELTA]; 0 when nothing matches
    """
    words = normalize(text).split()
    if not words:
        return 0

    present = frozenset(ngrams(words))
    raw = _score_table(present, _POSITIVE_ORDER) + _score_table(present, _NEGATIVE_ORDER)
    return clamp(raw, MIN_DELTA, MAX_DELTA)
