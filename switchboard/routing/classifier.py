"""Intent classification for Switchboard.

Classification runs in three stages:

1. Fast path: a short message with no depth-request term ("explain", "why",
   "compare", ...) is QUICK with a fixed high confidence. Most chat traffic
   ends here.
2. Weighted scoring: each intent sums a fixed weight per keyword hit from its
   own, disjoint term list. Long messages get a bonus point for ANALYTICAL.
3. Priority resolution: the PRIORITY_RULES table is walked in order. A rule
   wins when its intent clears the rule's minimum score, has the highest
   score of every intent still in contention, and beats the rule's rival by
   the required margin. A rule that fails drops its intent from contention.
   When no rule wins the message is QUICK.

Key Components:
    PriorityRule: One row of the resolution table.
    PRIORITY_RULES: The ordered resolution table.
    IntentVerdict: Result of intent scoring and resolution.
    IntentClassifier: Scoring and resolution over a lexicon.
    MessageClassifier: Runs every analyzer and assembles a ClassificationResult.

Example:
    >>> classifier = MessageClassifier()
    >>> result = classifier.classify("hi")
    >>> result.intent, result.confidence
    (<Intent.QUICK: 'QUICK'>, 90)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, Optional

from switchboard.analysis.ambiguity import AmbiguityAnalyzer
from switchboard.analysis.complexity import ComplexityAnalyzer
from switchboard.analysis.context import ContextAnalyzer
from switchboard.analysis.nudge import NudgeDetector
from switchboard.analysis.text import KeywordMatcher, normalize
from switchboard.lexicon.tables import Lexicon, get_lexicon
from switchboard.schemas import (
    ClassificationResult,
    Intent,
    SessionContext,
    clamp_confidence,
    coerce_history,
)

if TYPE_CHECKING:
    from switchboard.config.settings import ClassifierSettings, SwitchboardSettings


logger = logging.getLogger(__name__)


# =============================================================================
# Priority Rules
# =============================================================================


@dataclass(frozen=True)
class PriorityRule:
    """One row of the priority resolution table.

    Attributes:
        intent: Intent this rule can select.
        min_score: Score the intent must reach.
        margin_over: Rival intent that must be beaten by ``margin``.
        margin: Required lead over ``margin_over``.
        base: Confidence base value.
        scale: Confidence added per score point.
        cap: Maximum confidence for this intent.
    """

    intent: Intent
    min_score: float
    margin_over: Optional[Intent] = None
    margin: float = 0.0
    base: int = 75
    scale: float = 2.0
    cap: int = 90

    def confidence(self, score: float) -> int:
        return clamp_confidence(min(self.base + self.scale * score, self.cap))


PRIORITY_RULES: tuple[PriorityRule, ...] = (
    PriorityRule(Intent.PERSONAL, 4, base=80, scale=2, cap=95),
    PriorityRule(Intent.TECHNICAL, 3, base=80, scale=2, cap=92),
    PriorityRule(Intent.STRATEGIC, 4, margin_over=Intent.CREATIVE, margin=2, base=82, scale=1, cap=92),
    PriorityRule(Intent.CREATIVE, 4, margin_over=Intent.STRATEGIC, margin=2, base=80, scale=1, cap=90),
    PriorityRule(Intent.LEARNING, 2, base=78, scale=2, cap=90),
    PriorityRule(Intent.ANALYTICAL, 2, base=75, scale=2, cap=88),
)

# Deployments that only provision five tiers fold these intents into neighbours.
COMPACT_INTENT_MAP: dict[Intent, Intent] = {
    Intent.STRATEGIC: Intent.ANALYTICAL,
    Intent.TECHNICAL: Intent.CREATIVE,
}

CROSS_DOMAIN_POINTS = 3

# Clears the ANALYTICAL minimum on its own, so long messages without keyword
# hits still resolve to ANALYTICAL.
LONG_MESSAGE_POINTS = 2.0


def resolve_priority(
    scores: dict[Intent, float],
    rules: Iterable[PriorityRule] = PRIORITY_RULES,
) -> Optional[PriorityRule]:
    """Walk the rule table and return the winning rule, or None.

    Args:
        scores: Raw score per intent. Missing intents count as 0.

    Returns:
        The first rule that clears its minimum, leads every intent still in
        contention and satisfies its margin; None when no rule does.
    """
    contention = {intent: scores.get(intent, 0.0) for intent in scores}
    for rule in rules:
        score = scores.get(rule.intent, 0.0)
        leads = all(score >= other for other in contention.values())
        has_margin = (
            rule.margin_over is None
            or score - scores.get(rule.margin_over, 0.0) >= rule.margin
        )
        if score >= rule.min_score and leads and has_margin:
            return rule
        contention.pop(rule.intent, None)
    return None


# =============================================================================
# Intent Classifier
# =============================================================================


@dataclass
class IntentVerdict:
    """Outcome of intent scoring for a single message."""

    intent: Intent
    confidence: int
    scores: dict[Intent, float] = field(default_factory=dict)
    matched_keywords: tuple[str, ...] = ()
    requires_synthesis: bool = False
    requires_tools: bool = False
    fast_path: bool = False


class IntentClassifier:
    """Keyword-weighted intent classifier with ordered priority resolution.

    Attributes:
        lexicon: Vocabulary tables in use.
        compact: Collapse STRATEGIC and TECHNICAL after resolution.
        quick_max_length: Fast-path length limit.
        analytical_min_length: Length above which ANALYTICAL gets a bonus.
        quick_confidence: Fast-path confidence.
        fallback_confidence: Confidence when no rule wins.
        synthesis_min_score: Cross-domain score that flags synthesis.
    """

    def __init__(
        self,
        lexicon: Optional[Lexicon] = None,
        settings: Optional["ClassifierSettings"] = None,
        compact: bool = False,
    ) -> None:
        self.lexicon = lexicon or get_lexicon()
        self.compact = compact
        self.quick_max_length = settings.quick_max_length if settings else 80
        self.analytical_min_length = settings.analytical_min_length if settings else 150
        self.quick_confidence = settings.quick_confidence if settings else 90
        self.fallback_confidence = settings.fallback_confidence if settings else 70
        self.synthesis_min_score = settings.synthesis_min_score if settings else CROSS_DOMAIN_POINTS

        self._intent_matchers = {
            intent: KeywordMatcher(terms) for intent, terms in self.lexicon.intent_terms.items()
        }
        self._depth = KeywordMatcher(self.lexicon.depth_terms)
        self._cross_domain = KeywordMatcher(self.lexicon.cross_domain_terms)
        self._tools = KeywordMatcher(self.lexicon.tool_terms)
        self._data_context = KeywordMatcher(self.lexicon.data_context_terms)

    def is_fast_path(self, text: str) -> bool:
        return len(text) < self.quick_max_length and not self._depth.any(text)

    def score(self, text: str) -> tuple[dict[Intent, float], dict[Intent, list[str]]]:
        """Weighted keyword scores and the terms that produced them."""
        scores: dict[Intent, float] = {}
        matched: dict[Intent, list[str]] = {}
        for intent, matcher in self._intent_matchers.items():
            hits = matcher.matches(text)
            matched[intent] = hits
            scores[intent] = float(len(hits) * self.lexicon.intent_weights[intent])
        if len(text) > self.analytical_min_length:
            scores[Intent.ANALYTICAL] = scores.get(Intent.ANALYTICAL, 0.0) + LONG_MESSAGE_POINTS
        return scores, matched

    def requires_synthesis(self, text: str, scores: dict[Intent, float]) -> bool:
        """Cross-domain vocabulary alongside strategic or analytical intent."""
        cross_score = len(self._cross_domain.matches(text)) * CROSS_DOMAIN_POINTS
        return cross_score >= self.synthesis_min_score and (
            scores.get(Intent.STRATEGIC, 0.0) > 0 or scores.get(Intent.ANALYTICAL, 0.0) > 0
        )

    def requires_tools(self, text: str) -> bool:
        return self._tools.any(text) and self._data_context.any(text)

    def classify(self, text: str) -> IntentVerdict:
        """Classify a normalised message.

        Never raises; empty text is QUICK at the fallback confidence.
        """
        tools = self.requires_tools(text)
        if not text:
            return IntentVerdict(Intent.QUICK, self.fallback_confidence)

        if self.is_fast_path(text):
            logger.debug("Fast path: QUICK (length=%d)", len(text))
            return IntentVerdict(
                Intent.QUICK,
                self.quick_confidence,
                requires_tools=tools,
                fast_path=True,
            )

        scores, matched = self.score(text)
        rule = resolve_priority(scores)
        if rule is None:
            intent, confidence, keywords = Intent.QUICK, self.fallback_confidence, ()
        else:
            intent = rule.intent
            confidence = rule.confidence(scores[rule.intent])
            keywords = tuple(matched.get(rule.intent, ()))

        if self.compact:
            intent = COMPACT_INTENT_MAP.get(intent, intent)

        synthesis = self.requires_synthesis(text, scores)
        logger.debug(
            "Classified intent=%s confidence=%d synthesis=%s scores=%s",
            intent.value,
            confidence,
            synthesis,
            {k.value: v for k, v in scores.items() if v},
        )
        return IntentVerdict(
            intent=intent,
            confidence=confidence,
            scores=scores,
            matched_keywords=keywords,
            requires_synthesis=synthesis,
            requires_tools=tools,
        )


# =============================================================================
# Message Classifier
# =============================================================================


class MessageClassifier:
    """Runs every analyzer over a message and builds a ClassificationResult.

    The analyzers have no data dependency on each other; each sees the same
    normalised text and the same trailing window of history.

    Attributes:
        intents: Intent scoring and resolution.
        ambiguity: Ambiguity analyzer.
        complexity: Complexity analyzer.
        context: Follow-up and topic analyzer.
        nudges: Nudge detector.
        max_history_turns: Trailing history turns considered.
    """

    def __init__(
        self,
        settings: Optional["SwitchboardSettings"] = None,
        lexicon: Optional[Lexicon] = None,
    ) -> None:
        lexicon = lexicon or get_lexicon()
        self.lexicon = lexicon
        self.intents = IntentClassifier(
            lexicon,
            settings.classifier if settings else None,
            compact=settings.compact_intents if settings else False,
        )
        self.ambiguity = AmbiguityAnalyzer(lexicon, settings.ambiguity if settings else None)
        self.complexity = ComplexityAnalyzer(lexicon, settings.complexity if settings else None)
        self.context = ContextAnalyzer(
            lexicon,
            topic_history_turns=settings.routing.topic_history_turns if settings else 3,
        )
        self.nudges = NudgeDetector(lexicon, settings.nudge_priority if settings else None)
        self.max_history_turns = settings.routing.max_history_turns if settings else 5

    def classify(
        self,
        message: Any,
        history: Optional[Iterable[Any]] = None,
        session: Optional[SessionContext] = None,
    ) -> ClassificationResult:
        """Analyse one message.

        Args:
            message: Raw message. Anything other than a string is treated
                as an empty message.
            history: Prior turns, oldest first, as HistoryTurn values or
                ``{"role", "text"|"content"}`` mappings.
            session: Accepted for interface symmetry with routing; the lock
                is applied by the router, not here.

        Returns:
            A ClassificationResult. Never raises for message content.
        """
        started = time.perf_counter()
        text = normalize(message)
        turns = coerce_history(history)
        turns = turns[-self.max_history_turns:] if self.max_history_turns else ()

        verdict = self.intents.classify(text)
        ambiguity = self.ambiguity.analyze(text, turns)
        complexity = self.complexity.analyze(text)
        context = self.context.analyze(text, turns)
        action = self.context.suggest_action(ambiguity, context, has_history=bool(turns))
        nudge = self.nudges.detect(text)

        elapsed_ms = round((time.perf_counter() - started) * 1000, 3)
        return ClassificationResult(
            intent=verdict.intent,
            confidence=verdict.confidence,
            ambiguity=ambiguity,
            complexity=complexity,
            nudge=nudge,
            nudge_text=self.nudges.text_for(nudge),
            requires_tools=verdict.requires_tools,
            requires_synthesis=verdict.requires_synthesis,
            context=context,
            action=action,
            matched_keywords=verdict.matched_keywords,
            scores={intent.value: score for intent, score in verdict.scores.items()},
            elapsed_ms=elapsed_ms,
        )


__all__ = [
    "PriorityRule",
    "PRIORITY_RULES",
    "COMPACT_INTENT_MAP",
    "resolve_priority",
    "IntentVerdict",
    "IntentClassifier",
    "MessageClassifier",
]
