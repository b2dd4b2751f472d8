"""Text helpers shared by the analyzers.

Normalisation, tokenising and keyword matching live here so every analyzer
sees the same view of a message.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Optional

_WHITESPACE = re.compile(r"\s+")
_DANDA = re.compile(r"[।॥]")
_TOKEN = re.compile(r"[\w']+")


def normalize(text: Any) -> str:
    """Trim, collapse whitespace and map Devanagari sentence marks to '.'.

    Non-string input normalises to the empty string.
    """
    if not isinstance(text, str):
        return ""
    return _DANDA.sub(".", _WHITESPACE.sub(" ", text.strip()))


def tokenize(text: str) -> list[str]:
    """Lowercase word tokens, apostrophes kept (``"I'm"`` -> ``"i'm"``)."""
    return _TOKEN.findall(text.lower())


def compile_patterns(patterns: Iterable[str]) -> list[re.Pattern]:
    return [re.compile(p, re.IGNORECASE) for p in patterns]


class KeywordMatcher:
    """Case-insensitive, word-bounded matcher for a list of terms.

    A trailing plural ``s`` or ``es`` is tolerated, so ``"competitor"``
    also matches ``"competitors"``. Multi-word terms match as phrases.

    Example:
        >>> matcher = KeywordMatcher(["bug", "system design"])
        >>> matcher.matches("Two bugs in my System Design doc")
        ['bug', 'system design']
    """

    def __init__(self, terms: Iterable[str]) -> None:
        self._patterns: list[tuple[str, re.Pattern]] = [
            (term, re.compile(rf"\b{re.escape(term)}(?:s|es)?\b", re.IGNORECASE))
            for term in terms
        ]

    def matches(self, text: str) -> list[str]:
        """Return the terms found in ``text``, in table order."""
        if not text:
            return []
        return [term for term, pattern in self._patterns if pattern.search(text)]

    def any(self, text: str) -> bool:
        return bool(text) and any(pattern.search(text) for _, pattern in self._patterns)

    def __len__(self) -> int:
        return len(self._patterns)


def first_match(patterns: Iterable[re.Pattern], text: str) -> Optional[re.Pattern]:
    """Return the first pattern that matches ``text``, or None."""
    for pattern in patterns:
        if pattern.search(text):
            return pattern
    return None


__all__ = ["normalize", "tokenize", "compile_patterns", "KeywordMatcher", "first_match"]
