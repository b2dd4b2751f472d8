"""Routing decision builder for Switchboard.

The router turns a message into a RoutingDecision in five steps:

    CLASSIFY -> LOCK_CHECK -> SELECT -> CHAIN_OR_SINGLE -> EMIT

- CLASSIFY runs every analyzer (see ``routing.classifier``).
- LOCK_CHECK lets an intent locked earlier in the conversation override the
  fresh classification, so a thread does not bounce between backends.
- SELECT maps the effective intent to a tier and picks a backend from the
  region/plan availability table. PERSONAL is pinned to the region's first
  personal backend, STRATEGIC to the region's advisor (or its documented
  fallback pair), everything else is picked by the deterministic selector.
- CHAIN_OR_SINGLE upgrades cross-domain requests to a three-step synthesis
  chain and a deterministic share of CREATIVE requests to an ideate/validate
  chain, when the plan allows multi-model routing.
- EMIT attaches the instruction text, response shape, seed and timing.

Nothing in this module raises for message content, region or plan: anything
that cannot be resolved falls back to the global fast backend and the
decision records why.

Usage:
    from switchboard.routing import Router
    from switchboard.schemas import SessionContext

    router = Router()
    decision = router.route("compare AWS vs GCP for our startup", SessionContext(region="IN"))
    print(decision.primary, decision.is_multi_model)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, Optional

from switchboard.config.settings import get_settings
from switchboard.core.exceptions import RoutingError
from switchboard.lexicon.tables import Lexicon, get_lexicon
from switchboard.routing.availability import AvailabilityTable, load_availability
from switchboard.routing.classifier import COMPACT_INTENT_MAP, MessageClassifier
from switchboard.routing.instructions import instruction_for, shape_for
from switchboard.routing.selector import routing_seed, select
from switchboard.schemas import (
    ChainStep,
    ClassificationResult,
    InboundMessage,
    Intent,
    OutputType,
    RoutingDecision,
    SessionContext,
    Tier,
)
from switchboard.telemetry.logging import log_routing_decision

if TYPE_CHECKING:
    from switchboard.config.settings import SwitchboardSettings


logger = logging.getLogger(__name__)


# =============================================================================
# Routing Tables
# =============================================================================

TIER_BY_INTENT: dict[Intent, Tier] = {
    Intent.QUICK: Tier.FAST,
    Intent.ANALYTICAL: Tier.DEEP,
    Intent.STRATEGIC: Tier.DEEP,
    Intent.CREATIVE: Tier.CREATIVE,
    Intent.TECHNICAL: Tier.TECHNICAL,
    Intent.LEARNING: Tier.LEARNING,
    Intent.PERSONAL: Tier.PERSONAL,
}

# Intents whose cross-domain requests are answered by a synthesis chain.
SYNTHESIS_INTENTS = frozenset({Intent.ANALYTICAL, Intent.STRATEGIC, Intent.TECHNICAL})

SYNTHESIS_STEPS: tuple[tuple[str, OutputType], ...] = (
    ("initial analysis & structure", OutputType.ANALYSIS),
    ("deep reasoning / trade-offs", OutputType.ANALYSIS),
    ("synthesis into actionable output", OutputType.SYNTHESIS),
)

CREATIVE_STEPS: tuple[tuple[str, OutputType], ...] = (
    ("ideate: generate original options", OutputType.CREATIVE),
    ("validate: critique and refine the strongest option", OutputType.VALIDATION),
)


@dataclass(frozen=True)
class Selection:
    """Outcome of the SELECT step."""

    backend: str
    tier: Tier
    fallback_reason: Optional[str] = None

    @property
    def fallback_applied(self) -> bool:
        return self.fallback_reason is not None


# =============================================================================
# Router
# =============================================================================


class Router:
    """Classifies messages and decides which backend(s) serve them.

    A Router is immutable after construction and safe to share between
    threads. To pick up a new availability table build a new Router with
    ``with_availability``; decisions from the old instance stay valid.

    Attributes:
        settings: SwitchboardSettings in use.
        availability: Region/plan availability table.
        lexicon: Vocabulary tables.
        classifier: MessageClassifier running every analyzer.

    Example:
        >>> router = Router()
        >>> decision = router.route("hi")
        >>> decision.effective_intent
        <Intent.QUICK: 'QUICK'>
        >>> decision.tier
        <Tier.FAST: 'fast'>
    """

    def __init__(
        self,
        settings: Optional["SwitchboardSettings"] = None,
        availability: Optional[AvailabilityTable] = None,
        lexicon: Optional[Lexicon] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.availability = availability or load_availability(self.settings)
        self.lexicon = lexicon or get_lexicon()
        self.classifier = MessageClassifier(self.settings, self.lexicon)
        logger.debug(
            "Router initialized: lexicon=%s intent_set=%s default_region=%s regions=%s",
            self.lexicon.version,
            self.settings.intent_set,
            self.settings.default_region,
            sorted(self.availability.regions),
        )

    def with_availability(self, table: AvailabilityTable) -> "Router":
        """Return a new Router using ``table``; this instance is unchanged."""
        return Router(self.settings, table, self.lexicon)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def classify(
        self,
        message: Any,
        history: Optional[Iterable[Any]] = None,
        session: Optional[SessionContext] = None,
    ) -> ClassificationResult:
        """Classify a message without routing it.

        Args:
            message: Raw user message.
            history: Prior turns, oldest first.
            session: Optional session context.

        Returns:
            ClassificationResult for the message.
        """
        return self.classifier.classify(message, history, self._coerce_session(session))

    def route(
        self,
        message: Any,
        session: Optional[SessionContext] = None,
        region: Optional[str] = None,
        *,
        history: Optional[Iterable[Any]] = None,
        plan: Optional[str] = None,
    ) -> RoutingDecision:
        """Route a message to a backend or a chain of backends.

        Args:
            message: Raw user message. Non-string input routes as empty.
            session: Caller-owned session context; never mutated.
            region: Region code. Defaults to the session region, then to
                ``settings.default_region``.
            history: Prior turns, oldest first.
            plan: Subscription plan. Defaults to ``settings.default_plan``;
                None means unrestricted.

        Returns:
            A RoutingDecision. Never raises for message content, region or plan.

        Raises:
            RoutingError: If ``session`` is not a SessionContext.
        """
        started = time.perf_counter()
        session = self._coerce_session(session)
        inbound = InboundMessage.build(message, history, session, region)

        # CLASSIFY
        classification = self.classifier.classify(inbound.text, inbound.history, session)

        # LOCK_CHECK
        effective = classification.intent
        if inbound.locked_intent is not None:
            effective = inbound.locked_intent
            if self.settings.compact_intents:
                effective = COMPACT_INTENT_MAP.get(effective, effective)
        is_follow_up = session.turn_number > 1 and session.is_locked

        region_code = (inbound.region or self.settings.default_region).strip().upper()
        plan_name = plan if plan is not None else self.settings.default_plan
        seed = routing_seed(inbound.text, inbound.user_id)

        # SELECT
        selection = self._select(effective, region_code, plan_name, seed)

        # CHAIN_OR_SINGLE
        chain: tuple[ChainStep, ...] = ()
        tier = selection.tier
        if not selection.fallback_applied:
            chain, chain_tier = self._build_chain(effective, classification, region_code, plan_name, seed)
            tier = chain_tier or tier
        primary = chain[-1].backend if chain else selection.backend

        # EMIT
        decision = RoutingDecision(
            primary=primary,
            display_name=self.availability.display_name(primary),
            classification=classification,
            is_multi_model=bool(chain),
            chain=chain,
            is_follow_up=is_follow_up,
            routing_seed=seed,
            effective_intent=effective,
            tier=tier,
            region=region_code,
            instruction=instruction_for(effective, bool(chain)),
            response_shape=shape_for(effective, classification.complexity.level),
            fallback_applied=selection.fallback_applied,
            fallback_reason=selection.fallback_reason,
            elapsed_ms=round((time.perf_counter() - started) * 1000, 3),
        )
        log_routing_decision(logger, decision)
        return decision

    # -------------------------------------------------------------------------
    # SELECT
    # -------------------------------------------------------------------------

    def _select(self, intent: Intent, region: str, plan: Optional[str], seed: int) -> Selection:
        table = self.availability

        if intent == Intent.PERSONAL:
            personal = table.candidates(region, Tier.PERSONAL, plan)
            if personal:
                return Selection(personal[0], Tier.PERSONAL)

        elif intent == Intent.STRATEGIC:
            advisor = table.advisor(region, plan)
            if advisor:
                return Selection(advisor, Tier.DEEP)
            pair = table.advisor_fallback(region, plan)
            if pair:
                return Selection(select(seed, pair), Tier.DEEP)
            deep = table.candidates(region, Tier.DEEP, plan)
            if deep:
                return Selection(select(seed, deep), Tier.DEEP)

        else:
            tier = TIER_BY_INTENT[intent]
            candidates = table.candidates(region, tier, plan)
            if candidates:
                return Selection(select(seed, candidates), tier)

        reason = self._fallback_reason(intent, region, plan)
        logger.info(
            "Routing fallback to %s: %s",
            table.fallback_backend,
            reason,
            extra={"event": "routing_fallback", "region": region, "plan": plan, "intent": intent.value},
        )
        return Selection(table.fallback_backend, Tier.FAST, reason)

    def _fallback_reason(self, intent: Intent, region: str, plan: Optional[str]) -> str:
        table = self.availability
        if not table.has_region(region):
            return f"unknown region '{region}'"
        if not table.is_known_plan(plan):
            return f"unknown plan '{plan}'"
        tier = TIER_BY_INTENT[intent].value
        if plan is None:
            return f"no {tier} backend configured for region {region}"
        return f"no {tier} backend for region {region} allowed by plan '{plan}'"

    # -------------------------------------------------------------------------
    # CHAIN_OR_SINGLE
    # -------------------------------------------------------------------------

    def _build_chain(
        self,
        intent: Intent,
        classification: ClassificationResult,
        region: str,
        plan: Optional[str],
        seed: int,
    ) -> tuple[tuple[ChainStep, ...], Optional[Tier]]:
        """Build a chain when one applies, else ``((), None)``."""
        table = self.availability
        if not table.allows_multi_model(plan):
            return (), None

        if classification.requires_synthesis and intent in SYNTHESIS_INTENTS:
            backends = table.candidates(region, Tier.SYNTHESIS, plan)
            if len(backends) < len(SYNTHESIS_STEPS):
                logger.debug("Synthesis chain collapsed: region %s has %d backends", region, len(backends))
                return (), None
            return self._steps(zip(backends, SYNTHESIS_STEPS)), Tier.SYNTHESIS

        if intent == Intent.CREATIVE and seed < self.settings.routing.creative_chain_ratio:
            creative = table.candidates(region, Tier.CREATIVE, plan)
            deep = table.candidates(region, Tier.DEEP, plan)
            if not creative or not deep:
                return (), None
            ideate = select(seed, creative)
            validate = self._pick_distinct(seed, deep, exclude=ideate)
            return self._steps(zip((ideate, validate), CREATIVE_STEPS)), Tier.CREATIVE

        return (), None

    def _steps(self, pairs: Iterable[tuple[str, tuple[str, OutputType]]]) -> tuple[ChainStep, ...]:
        return tuple(
            ChainStep(
                position=position,
                backend=backend,
                display_name=self.availability.display_name(backend),
                purpose=purpose,
                output_type=output_type,
            )
            for position, (backend, (purpose, output_type)) in enumerate(pairs, start=1)
        )

    @staticmethod
    def _pick_distinct(seed: int, candidates: list[str], exclude: str) -> str:
        """Seeded pick from ``candidates`` that avoids ``exclude`` when possible."""
        others = [backend for backend in candidates if backend != exclude]
        return select(seed, others) if others else select(seed, candidates)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _coerce_session(session: Optional[SessionContext]) -> SessionContext:
        if session is None:
            return SessionContext()
        if not isinstance(session, SessionContext):
            raise RoutingError(
                f"session must be a SessionContext, got {type(session).__name__}",
                argument="session",
            )
        return session


# =============================================================================
# Shared Instance
# =============================================================================

_router_instance: Optional[Router] = None


def get_router() -> Router:
    """Return the process-wide Router, creating it from current settings."""
    global _router_instance
    if _router_instance is None:
        _router_instance = Router()
    return _router_instance


def reset_router() -> None:
    """Drop the shared Router so the next ``get_router`` rebuilds it."""
    global _router_instance
    _router_instance = None


__all__ = [
    "TIER_BY_INTENT",
    "SYNTHESIS_INTENTS",
    "SYNTHESIS_STEPS",
    "CREATIVE_STEPS",
    "Selection",
    "Router",
    "get_router",
    "reset_router",
]
