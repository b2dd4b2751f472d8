"""Switchboard: intent classification and model routing for multi-backend LLM chat.

Switchboard decides, per user message, what kind of request it is, how
ambiguous and complex it is, and which backend model (or ordered chain of
backends) should serve it. It is a pure, synchronous library: no network
calls, no persistence, no shared mutable state.

Usage:
    from switchboard import Router, SessionContext

    router = Router()
    session = SessionContext(region="IN", user_id="user-42")
    decision = router.route("compare AWS vs GCP vs Azure for our startup", session)
    for step in decision.chain:
        print(step.position, step.backend, step.purpose)
"""

from switchboard.config.settings import SwitchboardSettings, get_settings
from switchboard.core.exceptions import (
    AvailabilityError,
    ConfigurationError,
    RoutingError,
    SwitchboardError,
)
from switchboard.lexicon.tables import LEXICON_VERSION
from switchboard.routing.availability import DEFAULT_AVAILABILITY, AvailabilityTable
from switchboard.routing.router import Router, get_router, reset_router
from switchboard.schemas import (
    AmbiguityLevel,
    ChainStep,
    ClassificationResult,
    ComplexityLevel,
    HistoryTurn,
    InboundMessage,
    Intent,
    NudgeType,
    OutputType,
    Role,
    RoutingDecision,
    SessionContext,
    SuggestedAction,
    Tier,
)

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "LEXICON_VERSION",
    # Entry points
    "Router",
    "get_router",
    "reset_router",
    "SwitchboardSettings",
    "get_settings",
    "AvailabilityTable",
    "DEFAULT_AVAILABILITY",
    # Value types
    "Intent",
    "AmbiguityLevel",
    "ComplexityLevel",
    "NudgeType",
    "Role",
    "OutputType",
    "SuggestedAction",
    "Tier",
    "HistoryTurn",
    "InboundMessage",
    "SessionContext",
    "ClassificationResult",
    "ChainStep",
    "RoutingDecision",
    # Errors
    "SwitchboardError",
    "ConfigurationError",
    "AvailabilityError",
    "RoutingError",
]
