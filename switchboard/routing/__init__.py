"""Routing module for Switchboard.

Intent classification, deterministic backend selection, the region/plan
availability table and the routing decision builder.

Usage:
    from switchboard.routing import Router

    router = Router()
    decision = router.route("Write a tagline for our coffee brand")
    print(decision.primary)
"""

from switchboard.routing.availability import (
    DEFAULT_AVAILABILITY,
    AvailabilityTable,
    BackendSpec,
    PlanAvailability,
    RegionAvailability,
    load_availability,
)
from switchboard.routing.classifier import (
    PRIORITY_RULES,
    IntentClassifier,
    MessageClassifier,
    PriorityRule,
    resolve_priority,
)
from switchboard.routing.router import Router, get_router, reset_router
from switchboard.routing.selector import routing_seed, select, string_hash

__all__ = [
    # Availability
    "BackendSpec",
    "RegionAvailability",
    "PlanAvailability",
    "AvailabilityTable",
    "DEFAULT_AVAILABILITY",
    "load_availability",
    # Classification
    "PriorityRule",
    "PRIORITY_RULES",
    "resolve_priority",
    "IntentClassifier",
    "MessageClassifier",
    # Selection
    "string_hash",
    "routing_seed",
    "select",
    # Router
    "Router",
    "get_router",
    "reset_router",
]
