"""Tests for structured logging of routing decisions."""

from __future__ import annotations

import io
import json
import logging
import sys

import pytest

from switchboard.config.settings import SwitchboardSettings
from switchboard.telemetry.logging import (
    ROOT_LOGGER_NAME,
    RoutingLogFormatter,
    decision_log_fields,
    log_routing_decision,
    setup_logging,
)

from tests.sample_messages import CLOUD_COMPARISON


@pytest.fixture
def package_logger():
    """Restore the package logger after setup_logging reconfigures it."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


def make_record(msg="hello", **extra):
    record = logging.LogRecord("switchboard.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestRoutingLogFormatter:
    """Tests for RoutingLogFormatter."""

    def test_basic_entry(self):
        entry = json.loads(RoutingLogFormatter().format(make_record()))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "switchboard.test"
        assert entry["message"] == "hello"
        assert entry["timestamp"].endswith("+00:00")

    def test_routing_fields_copied(self):
        record = make_record(event="route_decision", primary="gpt-5.1", elapsed_ms=1.234567, chain=["a", "b"])
        entry = json.loads(RoutingLogFormatter().format(record))
        assert entry["event"] == "route_decision"
        assert entry["primary"] == "gpt-5.1"
        assert entry["elapsed_ms"] == 1.235
        assert entry["chain"] == ["a", "b"]

    def test_none_and_unknown_fields_omitted(self):
        entry = json.loads(RoutingLogFormatter().format(make_record(nudge=None, secret="x")))
        assert "nudge" not in entry
        assert "secret" not in entry

    def test_exception_info(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord(
                "switchboard.test", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )
        entry = json.loads(RoutingLogFormatter().format(record))
        assert entry["error_type"] == "ValueError"
        assert entry["error"] == "boom"


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_json_output(self, package_logger):
        stream = io.StringIO()
        logger = setup_logging(stream=stream)
        logging.getLogger("switchboard.routing").info("ready", extra={"region": "IN"})
        entry = json.loads(stream.getvalue().strip())
        assert logger is package_logger
        assert entry["message"] == "ready"
        assert entry["region"] == "IN"
        assert package_logger.propagate is False

    def test_no_duplicate_handlers(self, package_logger):
        setup_logging(stream=io.StringIO())
        setup_logging(stream=io.StringIO())
        assert len(package_logger.handlers) == 1

    def test_level_from_settings(self, package_logger, clean_env):
        setup_logging(SwitchboardSettings(log_level="warning"), stream=io.StringIO())
        assert package_logger.level == logging.WARNING

    def test_debug_forces_debug_level(self, package_logger, clean_env):
        setup_logging(SwitchboardSettings(debug=True, log_level="ERROR"), stream=io.StringIO())
        assert package_logger.level == logging.DEBUG

    def test_text_format(self, package_logger):
        stream = io.StringIO()
        setup_logging(stream=stream, json_format=False)
        logging.getLogger("switchboard.x").warning("plain")
        assert "[WARNING] [switchboard.x] plain" in stream.getvalue()


class TestDecisionLogging:
    """Tests for decision_log_fields and log_routing_decision."""

    def test_fields(self, router):
        decision = router.route(CLOUD_COMPARISON)
        fields = decision_log_fields(decision)
        assert fields["event"] == "route_decision"
        assert fields["intent"] == "TECHNICAL"
        assert fields["tier"] == "synthesis"
        assert fields["chain"] == [step.backend for step in decision.chain]
        assert fields["routing_seed"] == decision.routing_seed

    def test_single_model_chain_is_none(self, router):
        assert decision_log_fields(router.route("hi"))["chain"] is None

    def test_router_logs_at_debug(self, router, package_logger):
        stream = io.StringIO()
        setup_logging(SwitchboardSettings(log_level="DEBUG"), stream=stream)
        router.route("hi")
        entries = [json.loads(line) for line in stream.getvalue().splitlines()]
        decisions = [e for e in entries if e.get("event") == "route_decision"]
        assert len(decisions) == 1
        assert decisions[0]["primary"] == "moonshotai/kimi-k2-thinking"
        assert decisions[0]["effective_intent"] == "QUICK"

    def test_skipped_when_debug_disabled(self, router, package_logger):
        stream = io.StringIO()
        setup_logging(SwitchboardSettings(log_level="INFO"), stream=stream)
        router.route("hi")
        assert "route_decision" not in stream.getvalue()


    def test_log_routing_decision_respects_logger_level(self, router):
        records = []
        handler = logging.Handler()
        handler.emit = records.append
        logger = logging.getLogger("switchboard.test.quiet")
        logger.addHandler(handler)
        try:
            logger.setLevel(logging.WARNING)
            log_routing_decision(logger, router.route("hi"))
            assert records == []
            logger.setLevel(logging.DEBUG)
            log_routing_decision(logger, router.route("hi"))
            assert records[0].event == "route_decision"
        finally:
            logger.removeHandler(handler)
