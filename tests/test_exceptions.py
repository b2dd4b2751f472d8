"""Tests for the Switchboard exception hierarchy."""

from __future__ import annotations

import pytest

from switchboard.core.exceptions import (
    AvailabilityError,
    ConfigurationError,
    RoutingError,
    SwitchboardError,
)


class TestSwitchboardError:
    """Tests for the base exception."""

    def test_defaults(self):
        error = SwitchboardError("something broke")
        assert error.message == "something broke"
        assert error.code == "SWITCHBOARD_ERROR"
        assert error.context == {}
        assert error.recoverable is False
        assert str(error) == "[SWITCHBOARD_ERROR] something broke"

    def test_to_log_dict(self):
        error = SwitchboardError("bad", code="X", context={"k": 1}, recoverable=True)
        assert error.to_log_dict() == {
            "error_type": "SwitchboardError",
            "error_code": "X",
            "message": "bad",
            "recoverable": True,
            "context": {"k": 1},
        }


class TestConfigurationError:
    """Tests for ConfigurationError."""

    def test_context(self):
        error = ConfigurationError("invalid", config_key="log_level", validation_details="LOUD")
        assert error.code == "CONFIG_ERROR"
        assert error.config_key == "log_level"
        assert error.context == {"config_key": "log_level", "validation_details": "LOUD"}

    def test_extra_context_merged(self):
        error = ConfigurationError("invalid", config_key="a", context={"source": "file.json"})
        assert error.context == {"source": "file.json", "config_key": "a"}


class TestAvailabilityError:
    """Tests for AvailabilityError."""

    def test_hierarchy(self):
        error = AvailabilityError("unknown", source="t.json", unknown_backends=["z", "a"])
        assert isinstance(error, ConfigurationError)
        assert isinstance(error, SwitchboardError)
        assert error.code == "AVAILABILITY_ERROR"
        assert error.context["unknown_backends"] == ["a", "z"]
        assert error.context["source"] == "t.json"

    def test_without_details(self):
        error = AvailabilityError("unknown")
        assert error.unknown_backends == []
        assert error.source is None


class TestRoutingError:
    """Tests for RoutingError."""

    def test_argument(self):
        error = RoutingError("bad session", argument="session")
        assert error.code == "ROUTING_ERROR"
        assert error.argument == "session"
        assert error.context == {"argument": "session"}

    def test_catchable_as_base(self):
        with pytest.raises(SwitchboardError):
            raise RoutingError("bad")
