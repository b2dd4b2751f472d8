"""Ambiguity scoring for user messages.

A message is ambiguous when its meaning cannot be pinned down without more
context: it uses a homonym ("python", "bank"), it points at something that
was never introduced ("uska", "this"), or it is too short to carry a subject.
Each signal adds a fixed weight to a score which is then bucketed into an
AmbiguityLevel. Conversation history lowers the score for pronouns, since
the previous turns usually supply the referent.

Key Components:
    AmbiguityAnalyzer: Scores a message and returns an AmbiguityDescriptor.

Example:
    >>> analyzer = AmbiguityAnalyzer()
    >>> analyzer.analyze("uska price kya hai").level
    <AmbiguityLevel.HIGH: 'HIGH'>
    >>> analyzer.analyze("hi").level
    <AmbiguityLevel.NONE: 'NONE'>
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Optional, Sequence

from switchboard.analysis.text import tokenize
from switchboard.lexicon.tables import Lexicon, get_lexicon
from switchboard.schemas import AmbiguityDescriptor, AmbiguityLevel, HistoryTurn

if TYPE_CHECKING:
    from switchboard.config.settings import AmbiguitySettings


logger = logging.getLogger(__name__)


# =============================================================================
# Signal Weights
# =============================================================================

AMBIGUOUS_TERM_WEIGHT = 0.4
SHORT_MESSAGE_WEIGHT = 0.3
UNRESOLVED_PRONOUN_WEIGHT = 0.5
VAGUE_QUESTION_WEIGHT = 0.4
SINGLE_TOKEN_WEIGHT = 0.3
SINGLE_AMBIGUOUS_TOKEN_WEIGHT = 0.2
RESOLVED_PRONOUN_CREDIT = 0.3

SHORT_MESSAGE_TOKENS = 2


class AmbiguityAnalyzer:
    """Scores how underspecified a message is.

    Attributes:
        lexicon: Vocabulary tables in use.
        high_threshold: Minimum score for HIGH.
        medium_threshold: Minimum score for MEDIUM.
        low_threshold: Minimum score for LOW.
    """

    def __init__(
        self,
        lexicon: Optional[Lexicon] = None,
        settings: Optional["AmbiguitySettings"] = None,
    ) -> None:
        self.lexicon = lexicon or get_lexicon()
        self.high_threshold = settings.high_threshold if settings else 0.7
        self.medium_threshold = settings.medium_threshold if settings else 0.4
        self.low_threshold = settings.low_threshold if settings else 0.2
        self._vague_question = re.compile(self.lexicon.vague_question_pattern, re.IGNORECASE)

    def analyze(
        self,
        text: str,
        history: Sequence[HistoryTurn] = (),
    ) -> AmbiguityDescriptor:
        """Score a normalised message.

        Args:
            text: Normalised message text.
            history: Prior turns; only their presence matters here.

        Returns:
            AmbiguityDescriptor with level, reasons, candidate meanings and score.
        """
        tokens = tokenize(text)
        if not tokens:
            return AmbiguityDescriptor()

        lexicon = self.lexicon
        has_history = bool(history)
        score = 0.0
        reasons: list[str] = []
        possible_intents: list[str] = []

        for token in tokens:
            meanings = lexicon.ambiguous_terms.get(token)
            if meanings:
                score += AMBIGUOUS_TERM_WEIGHT
                reasons.append(f'"{token}" has multiple meanings')
                possible_intents.extend(meanings)

        is_pleasantry = len(tokens) <= SHORT_MESSAGE_TOKENS and tokens[0] in lexicon.pleasantries

        if len(tokens) <= SHORT_MESSAGE_TOKENS and not has_history and not is_pleasantry:
            score += SHORT_MESSAGE_WEIGHT
            reasons.append("Very short message without context")

        has_pronoun = any(token in lexicon.pronouns for token in tokens)
        if has_pronoun and not has_history:
            score += UNRESOLVED_PRONOUN_WEIGHT
            reasons.append("Contains a pronoun but no conversation context")

        if self._vague_question.match(text):
            score += VAGUE_QUESTION_WEIGHT
            reasons.append("Vague question without a clear subject")

        if len(tokens) == 1 and not is_pleasantry:
            score += SINGLE_TOKEN_WEIGHT
            reasons.append("Single word message")
            if tokens[0] in lexicon.ambiguous_terms:
                score += SINGLE_AMBIGUOUS_TOKEN_WEIGHT

        if has_pronoun and has_history:
            score -= RESOLVED_PRONOUN_CREDIT

        # Sums of tenths drift (0.4 + 0.3 == 0.7000000000000001).
        score = round(max(score, 0.0), 4)
        level = self.level_for(score)

        logger.debug("Ambiguity score=%.2f level=%s tokens=%d", score, level.value, len(tokens))
        return AmbiguityDescriptor(
            level=level,
            reasons=tuple(reasons),
            possible_intents=tuple(possible_intents),
            score=score,
        )

    def level_for(self, score: float) -> AmbiguityLevel:
        """Map a raw score onto an AmbiguityLevel."""
        if score >= self.high_threshold:
            return AmbiguityLevel.HIGH
        if score >= self.medium_threshold:
            return AmbiguityLevel.MEDIUM
        if score >= self.low_threshold:
            return AmbiguityLevel.LOW
        return AmbiguityLevel.NONE


__all__ = ["AmbiguityAnalyzer"]
