"""Conversation-context signals and the suggested next action.

Detects whether a message continues an earlier exchange ("and what about
pricing?", "why?"), infers the topic of the recent history, extracts content
keywords, and turns those signals plus the ambiguity level into a
QueryAction telling the conversation layer whether to answer directly or ask
the user something first.

Key Components:
    ContextAnalyzer: Produces ContextDescriptor and QueryAction values.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Sequence

from switchboard.analysis.text import KeywordMatcher, compile_patterns, first_match, tokenize
from switchboard.lexicon.tables import Lexicon, get_lexicon
from switchboard.schemas import (
    AmbiguityDescriptor,
    AmbiguityLevel,
    ContextDescriptor,
    HistoryTurn,
    Intent,
    QueryAction,
    SuggestedAction,
    dedupe,
)


logger = logging.getLogger(__name__)

MAX_KEYWORDS = 10
MIN_KEYWORD_LENGTH = 3

CONTEXT_QUESTION = "Could you tell me what you're referring to? A little context will help."
GENERIC_CLARIFICATION = "Could you add a bit more detail about what you need?"

_NON_WORD = re.compile(r"[^\w\s]")


class ContextAnalyzer:
    """Follow-up detection, topic inference and action suggestion.

    Attributes:
        lexicon: Vocabulary tables in use.
        topic_history_turns: Trailing turns inspected for the topic.
    """

    def __init__(self, lexicon: Optional[Lexicon] = None, topic_history_turns: int = 3) -> None:
        self.lexicon = lexicon or get_lexicon()
        self.topic_history_turns = topic_history_turns
        self._follow_up_patterns = compile_patterns(self.lexicon.follow_up_patterns)
        self._topic_matchers = {
            intent: KeywordMatcher(terms) for intent, terms in self.lexicon.intent_terms.items()
        }

    def is_follow_up(self, text: str) -> bool:
        """Whether the message reads as a continuation of an earlier turn."""
        return bool(text) and first_match(self._follow_up_patterns, text) is not None

    def analyze(self, text: str, history: Sequence[HistoryTurn] = ()) -> ContextDescriptor:
        """Collect context signals for a normalised message."""
        follow_up = self.is_follow_up(text)
        has_pronoun = any(token in self.lexicon.pronouns for token in tokenize(text))
        return ContextDescriptor(
            is_follow_up=follow_up,
            requires_context=follow_up or has_pronoun,
            detected_topic=self.detect_topic(history),
            keywords=self.extract_keywords(text),
        )

    def detect_topic(self, history: Sequence[HistoryTurn]) -> Optional[Intent]:
        """Infer the dominant intent of the most recent turns.

        Returns:
            The intent with the highest weighted keyword score over the last
            ``topic_history_turns`` turns, or None when nothing matches.
        """
        if not history or self.topic_history_turns <= 0:
            return None
        recent = " ".join(turn.text for turn in history[-self.topic_history_turns:])
        best: Optional[Intent] = None
        best_score = 0
        for intent, matcher in self._topic_matchers.items():
            score = len(matcher.matches(recent)) * self.lexicon.intent_weights[intent]
            if score > best_score:
                best, best_score = intent, score
        return best

    def extract_keywords(self, text: str) -> tuple[str, ...]:
        """Content words of the message, stop words removed, at most ten."""
        words = _NON_WORD.sub(" ", text.lower()).split()
        return dedupe(
            (w for w in words if len(w) >= MIN_KEYWORD_LENGTH and w not in self.lexicon.stop_words),
            MAX_KEYWORDS,
        )

    def suggest_action(
        self,
        ambiguity: AmbiguityDescriptor,
        context: ContextDescriptor,
        has_history: bool,
    ) -> QueryAction:
        """Decide how the conversation layer should handle the message.

        A reference with nothing to refer to is checked first, so a message
        like "uska price kya hai" on an empty conversation asks for context
        rather than offering homonym meanings.
        """
        if context.requires_context and not has_history and context.detected_topic is None:
            return QueryAction(SuggestedAction.ASK_FOR_CONTEXT, CONTEXT_QUESTION)
        if ambiguity.level == AmbiguityLevel.HIGH:
            return QueryAction(
                SuggestedAction.ASK_FOR_CLARIFICATION,
                self.clarification_question(ambiguity.possible_intents),
            )
        if ambiguity.level == AmbiguityLevel.MEDIUM:
            return QueryAction(SuggestedAction.PROCEED_WITH_ASSUMPTION)
        return QueryAction(SuggestedAction.PROCEED)

    @staticmethod
    def clarification_question(possible_intents: Sequence[str]) -> str:
        if len(possible_intents) >= 2:
            return f"Did you mean {possible_intents[0]} or {possible_intents[1]}?"
        return GENERIC_CLARIFICATION


__all__ = ["ContextAnalyzer", "CONTEXT_QUESTION", "GENERIC_CLARIFICATION"]
