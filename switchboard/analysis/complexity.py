"""Depth assessment for user messages.

Greetings, acknowledgements and bare "what is X?" questions short-circuit to
SIMPLE. Everything else accumulates a score from complex phrasing, domain
vocabulary, multiple questions and code blocks; long messages are always
COMPLEX.

Example:
    >>> ComplexityAnalyzer().analyze("thanks!").level
    <ComplexityLevel.SIMPLE: 'SIMPLE'>
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from switchboard.analysis.text import KeywordMatcher, compile_patterns, first_match
from switchboard.lexicon.tables import Lexicon, get_lexicon
from switchboard.schemas import ComplexityDescriptor, ComplexityLevel

if TYPE_CHECKING:
    from switchboard.config.settings import ComplexitySettings


logger = logging.getLogger(__name__)

COMPLEX_PATTERN_POINTS = 1.0
DOMAIN_KEYWORD_POINTS = 0.5
MULTI_QUESTION_POINTS = 1.0
CODE_BLOCK_POINTS = 1.0

COMPLEX_SCORE = 2.0
MODERATE_SCORE = 1.0


class ComplexityAnalyzer:
    """Classifies a message as SIMPLE, MODERATE or COMPLEX."""

    def __init__(
        self,
        lexicon: Optional[Lexicon] = None,
        settings: Optional["ComplexitySettings"] = None,
    ) -> None:
        self.lexicon = lexicon or get_lexicon()
        self.short_word_limit = settings.short_word_limit if settings else 8
        self.long_word_limit = settings.long_word_limit if settings else 24
        self._simple_patterns = compile_patterns(self.lexicon.simple_patterns)
        self._complex_patterns = compile_patterns(self.lexicon.complex_patterns)
        self._domain_keywords = KeywordMatcher(self.lexicon.complex_keywords)

    def analyze(self, text: str) -> ComplexityDescriptor:
        """Assess a normalised message.

        Args:
            text: Normalised message text.

        Returns:
            ComplexityDescriptor with at most three contributing factors.
        """
        if not text:
            return ComplexityDescriptor(ComplexityLevel.SIMPLE, ("Empty message",))

        if first_match(self._simple_patterns, text) is not None:
            return ComplexityDescriptor(ComplexityLevel.SIMPLE, ("Matches simple message pattern",))

        factors: list[str] = []
        word_count = len(text.split())
        is_long = word_count > self.long_word_limit

        if word_count <= self.short_word_limit:
            factors.append(f"Short message ({word_count} words)")
        if is_long:
            factors.append(f"Long message ({word_count} words)")

        score = 0.0
        for pattern in self._complex_patterns:
            if pattern.search(text):
                score += COMPLEX_PATTERN_POINTS
                factors.append("Complex phrasing detected")

        for keyword in self._domain_keywords.matches(text):
            score += DOMAIN_KEYWORD_POINTS
            factors.append(f"Domain keyword: {keyword}")

        question_marks = text.count("?")
        if question_marks > 1:
            score += MULTI_QUESTION_POINTS
            factors.append(f"Multiple questions ({question_marks})")

        if "```" in text:
            score += CODE_BLOCK_POINTS
            factors.append("Contains code block")

        if score >= COMPLEX_SCORE or is_long:
            level = ComplexityLevel.COMPLEX
        elif score >= MODERATE_SCORE or word_count > self.short_word_limit:
            level = ComplexityLevel.MODERATE
        else:
            level = ComplexityLevel.SIMPLE

        logger.debug("Complexity score=%.1f words=%d level=%s", score, word_count, level.value)
        return ComplexityDescriptor(level=level, factors=tuple(factors))


__all__ = ["ComplexityAnalyzer"]
