"""Tests for the region/plan availability table.

Test Coverage:
- Built-in table lookups per region, tier and plan
- Plan filtering and multi-model permission
- Validation of backend references
- Loading from JSON files and error reporting
"""

from __future__ import annotations

import json

import pytest

from switchboard.config.settings import SwitchboardSettings
from switchboard.core.exceptions import AvailabilityError, ConfigurationError
from switchboard.routing.availability import (
    DEFAULT_AVAILABILITY,
    AvailabilityTable,
    PlanAvailability,
    load_availability,
)
from switchboard.schemas import Tier


def minimal_table(**overrides):
    """A small valid table as a plain dict."""
    data = {
        "backends": {
            "fast-a": {"display_name": "Fast A", "cost_per_1m": 10},
            "deep-a": {"display_name": "Deep A", "cost_per_1m": 100},
        },
        "regions": {
            "us": {"tiers": {"fast": ["fast-a"], "deep": ["deep-a"]}},
        },
        "plans": {"Basic": {"allowed_backends": ["fast-a"]}},
        "global_fast": ["fast-a"],
    }
    data.update(overrides)
    return data


class TestDefaultTable:
    """Lookups against the built-in table."""

    @pytest.fixture
    def table(self):
        return DEFAULT_AVAILABILITY

    def test_regions(self, table):
        assert set(table.regions) == {"IN", "INTL", "EU"}

    def test_fallback_backend(self, table):
        assert table.fallback_backend == "gemini-2.5-flash"

    def test_candidates_ordered(self, table):
        assert table.candidates("INTL", Tier.FAST) == ["gemini-2.5-flash", "moonshotai/kimi-k2-thinking"]
        assert table.candidates("INTL", Tier.SYNTHESIS) == [
            "moonshotai/kimi-k2-thinking",
            "gpt-5.1",
            "claude-sonnet-4-5",
        ]

    def test_region_code_case_insensitive(self, table):
        assert table.candidates(" intl ", Tier.FAST) == table.candidates("INTL", Tier.FAST)

    def test_unknown_region(self, table):
        assert table.candidates("MARS", Tier.FAST) == []
        assert table.has_region("MARS") is False
        assert table.advisor("MARS") is None
        assert table.advisor_fallback("MARS") == []
        assert table.available_backends("MARS") == []

    def test_plan_filters_candidates(self, table):
        assert table.candidates("INTL", Tier.DEEP, "plus") == ["gemini-2.5-pro"]
        assert table.candidates("INTL", Tier.DEEP, "starter") == []
        assert table.candidates("INTL", Tier.DEEP, "pro") == ["gpt-5.1", "gemini-2.5-pro"]

    def test_unknown_plan_yields_nothing(self, table):
        assert table.candidates("INTL", Tier.FAST, "platinum") == []
        assert table.is_known_plan("platinum") is False

    def test_no_plan_is_unrestricted(self, table):
        assert table.is_known_plan(None) is True
        assert table.candidates("IN", Tier.DEEP, None) == ["gpt-5.1", "gemini-2.5-pro"]

    def test_advisor(self, table):
        assert table.advisor("IN") == "gpt-5.1"
        assert table.advisor("EU") is None
        assert table.advisor("IN", "starter") is None
        assert table.advisor_fallback("EU") == ["claude-sonnet-4-5", "gemini-2.5-pro"]
        assert table.advisor_fallback("EU", "plus") == ["gemini-2.5-pro"]

    @pytest.mark.parametrize(
        "plan,expected",
        [(None, True), ("pro", True), ("APEX", True), ("starter", False), ("plus", False), ("nope", False)],
    )
    def test_allows_multi_model(self, table, plan, expected):
        assert table.allows_multi_model(plan) is expected

    def test_display_name_and_cost(self, table):
        assert table.display_name("gpt-5.1") == "GPT-5.1"
        assert table.display_name("unknown-model") == "unknown-model"
        assert table.cost_per_1m("mistral-large-3") == 125
        assert table.cost_per_1m("unknown-model") is None

    def test_available_backends(self, table):
        assert table.available_backends("EU", "starter") == ["gemini-2.5-flash", "mistral-large-3"]
        assert "claude-sonnet-4-5" in table.available_backends("EU")

    def test_table_is_frozen(self, table):
        with pytest.raises(Exception):
            table.global_fast = ["other"]


class TestPlanAvailability:
    """Tests for PlanAvailability.allows."""

    def test_unrestricted(self):
        assert PlanAvailability().allows("anything") is True

    def test_allow_list(self):
        plan = PlanAvailability(allowed_backends=["a"])
        assert plan.allows("a") is True
        assert plan.allows("b") is False


class TestValidation:
    """Tests for table validation."""

    def test_keys_normalised(self):
        table = AvailabilityTable.from_dict(minimal_table())
        assert "US" in table.regions
        assert "basic" in table.plans
        assert table.candidates("us", Tier.FAST, "BASIC") == ["fast-a"]

    def test_unknown_backend_reference(self):
        data = minimal_table(global_fast=["ghost"])
        with pytest.raises(AvailabilityError) as exc_info:
            AvailabilityTable.from_dict(data, source="test.json")
        error = exc_info.value
        assert error.unknown_backends == ["ghost"]
        assert error.source == "test.json"
        assert error.context["source"] == "test.json"
        assert error.code == "AVAILABILITY_ERROR"

    def test_unknown_backend_in_plan(self):
        data = minimal_table(plans={"basic": {"allowed_backends": ["fast-a", "zzz", "aaa"]}})
        with pytest.raises(AvailabilityError) as exc_info:
            AvailabilityTable.from_dict(data)
        assert exc_info.value.context["unknown_backends"] == ["aaa", "zzz"]

    def test_availability_error_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            AvailabilityTable.from_dict(minimal_table(global_fast=["ghost"]))

    def test_schema_error(self):
        data = minimal_table(regions={"US": {"tiers": {"warp": ["fast-a"]}}})
        with pytest.raises(ConfigurationError) as exc_info:
            AvailabilityTable.from_dict(data)
        assert not isinstance(exc_info.value, AvailabilityError)
        assert exc_info.value.config_key == "availability_path"

    def test_empty_global_fast_rejected(self):
        with pytest.raises(ConfigurationError):
            AvailabilityTable.from_dict(minimal_table(global_fast=[]))


class TestLoading:
    """Tests for from_file and load_availability."""

    def test_from_file(self, tmp_path):
        path = tmp_path / "availability.json"
        path.write_text(json.dumps(minimal_table()))
        table = AvailabilityTable.from_file(path)
        assert table.fallback_backend == "fast-a"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Cannot read"):
            AvailabilityTable.from_file(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError, match="not valid JSON"):
            AvailabilityTable.from_file(path)

    def test_non_object_json(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]")
        with pytest.raises(ConfigurationError, match="JSON object"):
            AvailabilityTable.from_file(path)

    def test_load_default(self, settings):
        assert load_availability(settings) is DEFAULT_AVAILABILITY

    def test_load_from_settings_path(self, clean_env):
        path = clean_env / "availability.json"
        path.write_text(json.dumps(minimal_table()))
        settings = SwitchboardSettings(availability_path=path)
        table = load_availability(settings)
        assert table.has_region("US")
