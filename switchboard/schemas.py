"""Value types for the Switchboard classification and routing engine.

Inputs (InboundMessage, HistoryTurn, SessionContext) are frozen dataclasses:
the engine treats them as read-only and hands back new values instead of
mutating them. Outputs (ClassificationResult, RoutingDecision) validate their
own invariants in ``__post_init__`` in the same way the rest of the package
validates configuration.

Classes:
    Intent: Closed set of request categories.
    AmbiguityLevel, ComplexityLevel, NudgeType, Role, OutputType,
    SuggestedAction, Tier: Supporting enumerations.
    HistoryTurn: One prior conversation turn.
    InboundMessage: A raw user message plus its optional context.
    SessionContext: Caller-owned per-conversation routing state.
    AmbiguityDescriptor, ComplexityDescriptor, ContextDescriptor, QueryAction:
        Analyzer outputs.
    ClassificationResult: Everything known about a message after analysis.
    ChainStep, ResponseShape, RoutingDecision: Router outputs.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Union


# =============================================================================
# Enumerations
# =============================================================================


class Intent(str, Enum):
    """Coarse category assigned to a user message.

    Attributes:
        QUICK: Short, direct request answered by a fast backend.
        ANALYTICAL: Reasoning, evaluation and explanation of trade-offs.
        STRATEGIC: Business or long-term planning.
        CREATIVE: Writing, design, branding and ideation.
        TECHNICAL: Code, infrastructure and system questions.
        LEARNING: Teaching and concept explanations.
        PERSONAL: Emotionally loaded or personal-life requests.
    """

    QUICK = "QUICK"
    ANALYTICAL = "ANALYTICAL"
    STRATEGIC = "STRATEGIC"
    CREATIVE = "CREATIVE"
    TECHNICAL = "TECHNICAL"
    LEARNING = "LEARNING"
    PERSONAL = "PERSONAL"


class AmbiguityLevel(str, Enum):
    NONE = "NONE"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class ComplexityLevel(str, Enum):
    SIMPLE = "SIMPLE"
    MODERATE = "MODERATE"
    COMPLEX = "COMPLEX"


class NudgeType(str, Enum):
    """UI hint surfaced next to the answer."""

    SIMPLIFY = "SIMPLIFY"
    DECIDE = "DECIDE"
    ACTION = "ACTION"


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class OutputType(str, Enum):
    """What a chain step contributes to the final answer."""

    ANALYSIS = "analysis"
    SYNTHESIS = "synthesis"
    CREATIVE = "creative"
    VALIDATION = "validation"


class SuggestedAction(str, Enum):
    """What the conversation layer should do before answering."""

    PROCEED = "proceed"
    PROCEED_WITH_ASSUMPTION = "proceed_with_assumption"
    ASK_FOR_CLARIFICATION = "ask_for_clarification"
    ASK_FOR_CONTEXT = "ask_for_context"


class Tier(str, Enum):
    """Functional group of interchangeable backends."""

    FAST = "fast"
    DEEP = "deep"
    CREATIVE = "creative"
    TECHNICAL = "technical"
    LEARNING = "learning"
    PERSONAL = "personal"
    SYNTHESIS = "synthesis"


def clamp_confidence(value: Any) -> int:
    """Clamp a confidence value into the integer range 0-100."""
    try:
        number = int(round(float(value)))
    except (TypeError, ValueError):
        return 0
    return max(0, min(100, number))


def dedupe(items: Iterable[str], limit: int) -> tuple[str, ...]:
    """Deduplicate preserving first-seen order, then truncate."""
    seen: list[str] = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return tuple(seen[:limit])


def coerce_intent(value: Any) -> Optional[Intent]:
    """Map an Intent or its label (any case) to an Intent; None when unknown."""
    if isinstance(value, Intent):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Intent(value.strip().upper())
    except ValueError:
        return None


# =============================================================================
# Inputs
# =============================================================================


@dataclass(frozen=True)
class HistoryTurn:
    """One prior conversation turn.

    Attributes:
        role: Who produced the turn.
        text: The turn's text.
        timestamp: Optional time the turn was produced.
    """

    role: Role
    text: str
    timestamp: Optional[datetime] = None

    @classmethod
    def coerce(cls, value: Union["HistoryTurn", Mapping[str, Any]]) -> "HistoryTurn":
        """Build a turn from a HistoryTurn or a ``{"role", "text"|"content"}`` mapping.

        Unknown roles are treated as user turns and missing text as empty, so
        loosely shaped history never stops a request from being routed.
        """
        if isinstance(value, HistoryTurn):
            return value
        if not isinstance(value, Mapping):
            return cls(role=Role.USER, text=str(value))
        raw_role = str(value.get("role", "user")).lower()
        role = Role.ASSISTANT if raw_role == Role.ASSISTANT.value else Role.USER
        text = value.get("text", value.get("content", "")) or ""
        timestamp = value.get("timestamp")
        if not isinstance(timestamp, datetime):
            timestamp = None
        return cls(role=role, text=str(text), timestamp=timestamp)


def coerce_history(history: Optional[Iterable[Any]]) -> tuple[HistoryTurn, ...]:
    """Normalise an optional history iterable into a tuple of turns."""
    if not history:
        return ()
    return tuple(HistoryTurn.coerce(turn) for turn in history)


@dataclass(frozen=True)
class InboundMessage:
    """A raw user message and everything supplied alongside it.

    Attributes:
        text: Raw message text.
        history: Ordered prior turns, oldest first.
        user_id: Optional user identifier (makes routing user-sticky).
        region: Optional region code.
        locked_intent: Intent locked by a previous turn, if any.
    """

    text: str
    history: tuple[HistoryTurn, ...] = ()
    user_id: Optional[str] = None
    region: Optional[str] = None
    locked_intent: Optional[Intent] = None

    @classmethod
    def build(
        cls,
        message: Any,
        history: Optional[Iterable[Any]] = None,
        session: Optional["SessionContext"] = None,
        region: Optional[str] = None,
    ) -> "InboundMessage":
        """Create a message from loosely typed caller input.

        Non-string messages become the empty string.
        """
        text = message if isinstance(message, str) else ""
        return cls(
            text=text,
            history=coerce_history(history),
            user_id=session.user_id if session else None,
            region=region or (session.region if session else None),
            locked_intent=session.locked_intent if session and session.is_locked else None,
        )


@dataclass(frozen=True)
class SessionContext:
    """Per-conversation routing state, owned and carried by the caller.

    Attributes:
        turn_number: 1-based turn counter.
        locked_intent: Intent locked by a previous turn.
        intent_locked: Whether the locked intent should override classification.
        region: Region code for availability lookups.
        user_id: Optional user identifier.

    Example:
        >>> session = SessionContext(region="IN", user_id="u-1")
        >>> session.turn_number
        1
    """

    turn_number: int = 1
    locked_intent: Optional[Intent] = None
    intent_locked: bool = False
    region: Optional[str] = None
    user_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.turn_number < 1:
            raise ValueError(f"turn_number must be >= 1, got {self.turn_number}")
        # locked_intent may arrive as a plain label; unknown labels drop the lock.
        intent = coerce_intent(self.locked_intent)
        object.__setattr__(self, "locked_intent", intent)
        if intent is None:
            object.__setattr__(self, "intent_locked", False)

    @property
    def is_locked(self) -> bool:
        return self.intent_locked and self.locked_intent is not None

    def advance(self, result: "ClassificationResult", lock_threshold: int = 70) -> "SessionContext":
        """Return the context for the next turn.

        Locks the classified intent when its confidence reaches
        ``lock_threshold`` and nothing is locked yet. An existing lock is
        carried forward unchanged.
        """
        if self.is_locked or result.confidence < lock_threshold:
            return replace(self, turn_number=self.turn_number + 1)
        return replace(
            self,
            turn_number=self.turn_number + 1,
            locked_intent=result.intent,
            intent_locked=True,
        )

    def unlock(self) -> "SessionContext":
        """Return a copy with no locked intent."""
        return replace(self, locked_intent=None, intent_locked=False)


# =============================================================================
# Analyzer outputs
# =============================================================================


@dataclass
class AmbiguityDescriptor:
    """How underspecified a message is without further context."""

    level: AmbiguityLevel = AmbiguityLevel.NONE
    reasons: tuple[str, ...] = ()
    possible_intents: tuple[str, ...] = ()
    score: float = 0.0

    def __post_init__(self) -> None:
        self.reasons = dedupe(self.reasons, 3)
        self.possible_intents = dedupe(self.possible_intents, 4)

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level.value,
            "reasons": list(self.reasons),
            "possible_intents": list(self.possible_intents),
            "score": round(self.score, 2),
        }


@dataclass
class ComplexityDescriptor:
    """How much depth a message requires."""

    level: ComplexityLevel = ComplexityLevel.SIMPLE
    factors: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        self.factors = tuple(self.factors)[:3]

    def to_dict(self) -> dict[str, Any]:
        return {"level": self.level.value, "factors": list(self.factors)}


@dataclass
class ContextDescriptor:
    """Conversation-context signals for a message."""

    is_follow_up: bool = False
    requires_context: bool = False
    detected_topic: Optional[Intent] = None
    keywords: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_follow_up": self.is_follow_up,
            "requires_context": self.requires_context,
            "detected_topic": self.detected_topic.value if self.detected_topic else None,
            "keywords": list(self.keywords),
        }


@dataclass
class QueryAction:
    """Recommended handling before the message reaches a backend."""

    action: SuggestedAction = SuggestedAction.PROCEED
    clarification_question: Optional[str] = None

    @property
    def needs_clarification(self) -> bool:
        return self.action in (
            SuggestedAction.ASK_FOR_CLARIFICATION,
            SuggestedAction.ASK_FOR_CONTEXT,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action.value,
            "needs_clarification": self.needs_clarification,
            "clarification_question": self.clarification_question,
        }


@dataclass
class ClassificationResult:
    """Complete analysis of one message.

    Attributes:
        intent: Primary intent label.
        confidence: Integer confidence, always clamped to 0-100.
        ambiguity: Ambiguity descriptor.
        complexity: Complexity descriptor.
        nudge: Optional UI nudge.
        nudge_text: UI text for the nudge ("" when there is none).
        requires_tools: Whether external data or tools are likely needed.
        requires_synthesis: Whether the request spans several domains and
            benefits from a multi-model chain.
        context: Conversation-context signals.
        action: Suggested handling.
        matched_keywords: Lexicon terms that fired for the winning intent.
        scores: Raw per-intent scores.
        elapsed_ms: Analysis time in milliseconds.
    """

    intent: Intent
    confidence: int
    ambiguity: AmbiguityDescriptor = field(default_factory=AmbiguityDescriptor)
    complexity: ComplexityDescriptor = field(default_factory=ComplexityDescriptor)
    nudge: Optional[NudgeType] = None
    nudge_text: str = ""
    requires_tools: bool = False
    requires_synthesis: bool = False
    context: ContextDescriptor = field(default_factory=ContextDescriptor)
    action: QueryAction = field(default_factory=QueryAction)
    matched_keywords: tuple[str, ...] = ()
    scores: dict[str, float] = field(default_factory=dict)
    elapsed_ms: float = 0.0

    def __post_init__(self) -> None:
        self.confidence = clamp_confidence(self.confidence)

    def to_dict(self) -> dict[str, Any]:
        return {
            "intent": self.intent.value,
            "confidence": self.confidence,
            "ambiguity": self.ambiguity.to_dict(),
            "complexity": self.complexity.to_dict(),
            "nudge": self.nudge.value if self.nudge else None,
            "nudge_text": self.nudge_text,
            "requires_tools": self.requires_tools,
            "requires_synthesis": self.requires_synthesis,
            "context": self.context.to_dict(),
            "action": self.action.to_dict(),
            "matched_keywords": list(self.matched_keywords),
            "scores": dict(self.scores),
            "elapsed_ms": self.elapsed_ms,
        }


# =============================================================================
# Router outputs
# =============================================================================


@dataclass(frozen=True)
class ChainStep:
    """One backend call in a multi-model chain."""

    position: int
    backend: str
    display_name: str
    purpose: str
    output_type: OutputType

    def to_dict(self) -> dict[str, Any]:
        return {
            "position": self.position,
            "backend": self.backend,
            "display_name": self.display_name,
            "purpose": self.purpose,
            "output_type": self.output_type.value,
        }


@dataclass(frozen=True)
class ResponseShape:
    """Hints for the shape of the generated answer."""

    max_tokens: int
    length: str
    style: str

    def to_dict(self) -> dict[str, Any]:
        return {"max_tokens": self.max_tokens, "length": self.length, "style": self.style}


@dataclass
class RoutingDecision:
    """Which backend(s) serve a message, and how.

    Attributes:
        primary: Backend that authors the user-facing answer.
        display_name: Human-readable name of ``primary``.
        classification: The ClassificationResult the decision is based on.
        is_multi_model: Whether ``chain`` should be executed.
        chain: Ordered chain steps (empty for single-model decisions).
        is_follow_up: Whether this turn continues a locked conversation.
        routing_seed: Deterministic seed value (0-99) used for selection.
        effective_intent: Intent after the session lock was applied.
        tier: Tier the route was drawn from (synthesis for synthesis chains).
        region: Region code used for the lookup.
        instruction: Auxiliary per-intent instruction text.
        response_shape: Token budget and style hints.
        fallback_applied: Whether the global fallback backend was used.
        fallback_reason: Why the fallback was applied.
        elapsed_ms: Total processing time in milliseconds.
    """

    primary: str
    display_name: str
    classification: ClassificationResult
    is_multi_model: bool = False
    chain: tuple[ChainStep, ...] = ()
    is_follow_up: bool = False
    routing_seed: int = 0
    effective_intent: Intent = Intent.QUICK
    tier: Tier = Tier.FAST
    region: Optional[str] = None
    instruction: str = ""
    response_shape: Optional[ResponseShape] = None
    fallback_applied: bool = False
    fallback_reason: Optional[str] = None
    elapsed_ms: float = 0.0

    def __post_init__(self) -> None:
        """Validate chain invariants after initialization."""
        self.chain = tuple(self.chain)
        if self.is_multi_model != bool(self.chain):
            raise ValueError("chain must be non-empty if and only if is_multi_model is true")
        if self.is_multi_model:
            if len(self.chain) < 2:
                raise ValueError(f"multi-model chain needs at least 2 steps, got {len(self.chain)}")
            positions = [step.position for step in self.chain]
            if positions != list(range(1, len(self.chain) + 1)):
                raise ValueError(f"chain positions must be 1..N without gaps, got {positions}")
        if not 0 <= self.routing_seed < 100:
            raise ValueError(f"routing_seed must be 0-99, got {self.routing_seed}")

    @property
    def backends(self) -> list[str]:
        """Every backend this decision references, in call order."""
        if self.chain:
            return [step.backend for step in self.chain]
        return [self.primary]

    def to_dict(self) -> dict[str, Any]:
        return {
            "primary": self.primary,
            "display_name": self.display_name,
            "is_multi_model": self.is_multi_model,
            "chain": [step.to_dict() for step in self.chain],
            "is_follow_up": self.is_follow_up,
            "routing_seed": self.routing_seed,
            "effective_intent": self.effective_intent.value,
            "tier": self.tier.value,
            "region": self.region,
            "instruction": self.instruction,
            "response_shape": self.response_shape.to_dict() if self.response_shape else None,
            "fallback_applied": self.fallback_applied,
            "fallback_reason": self.fallback_reason,
            "elapsed_ms": self.elapsed_ms,
            "classification": self.classification.to_dict(),
        }


__all__ = [
    "Intent",
    "AmbiguityLevel",
    "ComplexityLevel",
    "NudgeType",
    "Role",
    "OutputType",
    "SuggestedAction",
    "Tier",
    "clamp_confidence",
    "dedupe",
    "coerce_intent",
    "HistoryTurn",
    "coerce_history",
    "InboundMessage",
    "SessionContext",
    "AmbiguityDescriptor",
    "ComplexityDescriptor",
    "ContextDescriptor",
    "QueryAction",
    "ClassificationResult",
    "ChainStep",
    "ResponseShape",
    "RoutingDecision",
]
