"""Structured logging for Switchboard.

Every module logs through ``logging.getLogger(__name__)``; routing decisions
go out at DEBUG and fallbacks at INFO. This module provides the formatter and
setup helper that turn those records into JSON Lines, one object per line,
with routing fields lifted from the record's ``extra`` dict.

Key Components:
    - RoutingLogFormatter: JSON Lines formatter for routing records
    - setup_logging: Attach a handler to the ``switchboard`` logger
    - log_routing_decision: Emit one structured record per decision

Example:
    {"timestamp":"2026-01-12T10:30:45.123+00:00","level":"DEBUG","logger":"switchboard.routing.router","event":"route_decision","intent":"TECHNICAL","primary":"claude-sonnet-4-5","is_multi_model":true,"elapsed_ms":0.84}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Optional, TextIO

if TYPE_CHECKING:
    from switchboard.config.settings import SwitchboardSettings
    from switchboard.schemas import RoutingDecision


# =============================================================================
# Constants
# =============================================================================

ROOT_LOGGER_NAME = "switchboard"

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

TEXT_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Fields copied from ``extra`` into the JSON entry when present.
ROUTING_FIELDS = (
    "event",
    "intent",
    "effective_intent",
    "confidence",
    "ambiguity",
    "complexity",
    "nudge",
    "action",
    "primary",
    "tier",
    "chain",
    "region",
    "plan",
    "routing_seed",
    "is_multi_model",
    "is_follow_up",
    "fallback_applied",
    "fallback_reason",
    "elapsed_ms",
)


# =============================================================================
# Formatter
# =============================================================================


class RoutingLogFormatter(logging.Formatter):
    """JSON Lines formatter for Switchboard records.

    Example:
        >>> handler = logging.StreamHandler()
        >>> handler.setFormatter(RoutingLogFormatter())
        >>> logging.getLogger("switchboard").addHandler(handler)
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a record as one JSON object.

        Args:
            record: The log record to format.

        Returns:
            JSON string (single line).
        """
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
        }

        message = record.getMessage()
        if message:
            entry["message"] = message

        for field_name in ROUTING_FIELDS:
            value = getattr(record, field_name, None)
            if value is not None:
                if isinstance(value, float):
                    value = round(value, 3)
                entry[field_name] = value

        if record.exc_info and record.exc_info[0] is not None:
            entry["error_type"] = record.exc_info[0].__name__
            entry["error"] = str(record.exc_info[1])

        return json.dumps(entry, separators=(",", ":"), default=str)


# =============================================================================
# Setup
# =============================================================================


def setup_logging(
    settings: Optional["SwitchboardSettings"] = None,
    stream: Optional[TextIO] = None,
    json_format: bool = True,
) -> logging.Logger:
    """Configure the ``switchboard`` logger.

    Replaces any handlers previously attached to the package logger, so
    calling this twice does not duplicate output.

    Args:
        settings: Source of ``log_level`` and ``debug``. Debug forces DEBUG.
        stream: Output stream (default: stderr).
        json_format: JSON Lines when True, a bracketed text format otherwise.

    Returns:
        The configured package logger.
    """
    level = logging.INFO
    if settings is not None:
        level = logging.DEBUG if settings.debug else LOG_LEVELS.get(settings.log_level, logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    if json_format:
        handler.setFormatter(RoutingLogFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def decision_log_fields(decision: "RoutingDecision") -> dict[str, Any]:
    """Flatten a decision into ``extra`` fields for a log record."""
    classification = decision.classification
    return {
        "event": "route_decision",
        "intent": classification.intent.value,
        "effective_intent": decision.effective_intent.value,
        "confidence": classification.confidence,
        "ambiguity": classification.ambiguity.level.value,
        "complexity": classification.complexity.level.value,
        "nudge": classification.nudge.value if classification.nudge else None,
        "action": classification.action.action.value,
        "primary": decision.primary,
        "tier": decision.tier.value,
        "chain": [step.backend for step in decision.chain] or None,
        "region": decision.region,
        "routing_seed": decision.routing_seed,
        "is_multi_model": decision.is_multi_model,
        "is_follow_up": decision.is_follow_up,
        "fallback_applied": decision.fallback_applied,
        "fallback_reason": decision.fallback_reason,
        "elapsed_ms": decision.elapsed_ms,
    }


def log_routing_decision(logger: logging.Logger, decision: "RoutingDecision") -> None:
    """Log a routing decision at DEBUG with structured fields."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug(
        "Route decision: intent=%s primary=%s multi_model=%s",
        decision.effective_intent.value,
        decision.primary,
        decision.is_multi_model,
        extra=decision_log_fields(decision),
    )


__all__ = [
    "ROOT_LOGGER_NAME",
    "LOG_LEVELS",
    "RoutingLogFormatter",
    "setup_logging",
    "decision_log_fields",
    "log_routing_decision",
]
