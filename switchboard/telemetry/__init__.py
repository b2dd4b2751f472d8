"""Logging setup for Switchboard."""

from switchboard.telemetry.logging import (
    RoutingLogFormatter,
    decision_log_fields,
    log_routing_decision,
    setup_logging,
)

__all__ = [
    "RoutingLogFormatter",
    "setup_logging",
    "decision_log_fields",
    "log_routing_decision",
]
