"""Region and plan availability table.

Which backends may serve a request depends on where the user is (not every
provider is offered in every region) and what they pay for (lower plans are
limited to cheaper backends and cannot run multi-model chains). This module
models that table with pydantic, validates it once at load time, and answers
lookups without ever raising: a missing region, tier or plan simply yields an
empty candidate list and the router falls back to ``fallback_backend``.

Classes:
    BackendSpec: Display name and price of one backend.
    RegionAvailability: Per-tier candidate lists plus the advisor backend.
    PlanAvailability: Backend allow-list and multi-model permission.
    AvailabilityTable: The full table with lookup helpers.

Constants:
    DEFAULT_AVAILABILITY: Built-in table with regions IN, INTL and EU.

Example:
    >>> table = DEFAULT_AVAILABILITY
    >>> table.candidates("IN", Tier.FAST)
    ['gemini-2.5-flash', 'moonshotai/kimi-k2-thinking']
    >>> table.candidates("MARS", Tier.FAST)
    []
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from switchboard.core.exceptions import AvailabilityError, ConfigurationError
from switchboard.schemas import Tier

if TYPE_CHECKING:
    from switchboard.config.settings import SwitchboardSettings


logger = logging.getLogger(__name__)


# =============================================================================
# Table Models
# =============================================================================


class BackendSpec(BaseModel):
    """Catalog entry for one backend.

    Attributes:
        display_name: Human readable name shown in the UI.
        cost_per_1m: Blended price per million tokens, in the billing currency.
    """

    model_config = {"frozen": True}

    display_name: str = Field(..., min_length=1, description="Human readable name")
    cost_per_1m: float = Field(default=0.0, ge=0.0, description="Price per 1M tokens")


class RegionAvailability(BaseModel):
    """Backends offered in one region.

    Attributes:
        tiers: Ordered candidate lists per tier.
        advisor: Designated advisor-grade backend for STRATEGIC requests.
        advisor_fallback: Pair used for STRATEGIC when ``advisor`` is unset.
    """

    model_config = {"frozen": True}

    tiers: dict[Tier, list[str]] = Field(default_factory=dict, description="Candidates per tier")
    advisor: Optional[str] = Field(default=None, description="Advisor-grade backend")
    advisor_fallback: list[str] = Field(default_factory=list, description="Fallback when no advisor")

    def referenced_backends(self) -> set[str]:
        referenced = {backend for backends in self.tiers.values() for backend in backends}
        referenced.update(self.advisor_fallback)
        if self.advisor:
            referenced.add(self.advisor)
        return referenced


class PlanAvailability(BaseModel):
    """What a subscription plan may use.

    Attributes:
        allowed_backends: Allow-list of backend ids; None means unrestricted.
        multi_model: Whether multi-model chains may be built for this plan.
    """

    model_config = {"frozen": True}

    allowed_backends: Optional[list[str]] = Field(default=None, description="None = any backend")
    multi_model: bool = Field(default=False, description="Chains allowed")

    def allows(self, backend: str) -> bool:
        return self.allowed_backends is None or backend in self.allowed_backends


class AvailabilityTable(BaseModel):
    """Complete (region, tier, plan) -> backend availability table.

    Attributes:
        backends: Catalog of every known backend id.
        regions: Region code -> RegionAvailability. Codes are upper-cased.
        plans: Plan name -> PlanAvailability. Names are lower-cased.
        global_fast: Backends used when nothing else resolves; the first one
            is the fallback backend.
    """

    model_config = {"frozen": True}

    backends: dict[str, BackendSpec] = Field(..., min_length=1, description="Backend catalog")
    regions: dict[str, RegionAvailability] = Field(default_factory=dict, description="Regions")
    plans: dict[str, PlanAvailability] = Field(default_factory=dict, description="Plans")
    global_fast: list[str] = Field(..., min_length=1, description="Global fast fallback list")

    @field_validator("regions", mode="before")
    @classmethod
    def normalize_region_codes(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {str(code).strip().upper(): entry for code, entry in v.items()}
        return v

    @field_validator("plans", mode="before")
    @classmethod
    def normalize_plan_names(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {str(name).strip().lower(): entry for name, entry in v.items()}
        return v

    @model_validator(mode="after")
    def validate_backend_references(self) -> "AvailabilityTable":
        """Every referenced backend id must exist in the catalog.

        Raises:
            AvailabilityError: If any region, plan or the global list names
                an undeclared backend.
        """
        referenced = set(self.global_fast)
        for region in self.regions.values():
            referenced.update(region.referenced_backends())
        for plan in self.plans.values():
            referenced.update(plan.allowed_backends or [])
        unknown = referenced - set(self.backends)
        if unknown:
            raise AvailabilityError(
                f"Availability table references unknown backends: {', '.join(sorted(unknown))}",
                unknown_backends=sorted(unknown),
            )
        return self

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: str = "<inline>") -> "AvailabilityTable":
        """Validate a plain mapping into a table.

        Raises:
            AvailabilityError: If backend references are inconsistent.
            ConfigurationError: If the mapping does not match the schema.
        """
        try:
            table = cls.model_validate(data)
        except AvailabilityError as exc:
            exc.source = source
            exc.context["source"] = source
            raise
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid availability table from {source}",
                config_key="availability_path",
                validation_details=str(exc),
                context={"source": source},
            ) from exc
        logger.debug(
            "Loaded availability table from %s: %d backends, regions=%s, plans=%s",
            source,
            len(table.backends),
            sorted(table.regions),
            sorted(table.plans),
        )
        return table

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "AvailabilityTable":
        """Load a table from a JSON file.

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid.
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ConfigurationError(
                f"Cannot read availability table: {path}",
                config_key="availability_path",
                validation_details=str(exc),
            ) from exc
        except json.JSONDecodeError as exc:
            raise ConfigurationError(
                f"Availability table is not valid JSON: {path}",
                config_key="availability_path",
                validation_details=str(exc),
            ) from exc
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Availability table must be a JSON object: {path}",
                config_key="availability_path",
            )
        return cls.from_dict(data, source=str(path))

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    @property
    def fallback_backend(self) -> str:
        """The cheapest always-available backend."""
        return self.global_fast[0]

    def region(self, code: Optional[str]) -> Optional[RegionAvailability]:
        if not code:
            return None
        return self.regions.get(code.strip().upper())

    def plan(self, name: Optional[str]) -> Optional[PlanAvailability]:
        if not name:
            return None
        return self.plans.get(name.strip().lower())

    def has_region(self, code: Optional[str]) -> bool:
        return self.region(code) is not None

    def is_known_plan(self, name: Optional[str]) -> bool:
        """True for None (unrestricted) or a plan present in the table."""
        return name is None or self.plan(name) is not None

    def _plan_filter(self, backends: list[str], plan: Optional[str]) -> list[str]:
        if plan is None:
            return list(backends)
        entry = self.plan(plan)
        if entry is None:
            return []
        return [backend for backend in backends if entry.allows(backend)]

    def candidates(self, region: Optional[str], tier: Tier, plan: Optional[str] = None) -> list[str]:
        """Ordered backends legal for (region, tier, plan).

        Returns an empty list when the region, tier or plan is unknown or the
        plan excludes every candidate.
        """
        entry = self.region(region)
        if entry is None:
            return []
        return self._plan_filter(entry.tiers.get(tier, []), plan)

    def advisor(self, region: Optional[str], plan: Optional[str] = None) -> Optional[str]:
        entry = self.region(region)
        if entry is None or entry.advisor is None:
            return None
        allowed = self._plan_filter([entry.advisor], plan)
        return allowed[0] if allowed else None

    def advisor_fallback(self, region: Optional[str], plan: Optional[str] = None) -> list[str]:
        entry = self.region(region)
        if entry is None:
            return []
        return self._plan_filter(entry.advisor_fallback, plan)

    def allows_multi_model(self, plan: Optional[str]) -> bool:
        """None (no plan restriction) allows chains; unknown plans do not."""
        if plan is None:
            return True
        entry = self.plan(plan)
        return entry is not None and entry.multi_model

    def display_name(self, backend: str) -> str:
        spec = self.backends.get(backend)
        return spec.display_name if spec else backend

    def cost_per_1m(self, backend: str) -> Optional[float]:
        spec = self.backends.get(backend)
        return spec.cost_per_1m if spec else None

    def available_backends(self, region: Optional[str], plan: Optional[str] = None) -> list[str]:
        """Every backend usable in a region (optionally under a plan), sorted."""
        entry = self.region(region)
        if entry is None:
            return []
        return sorted(self._plan_filter(sorted(entry.referenced_backends()), plan))


# =============================================================================
# Built-in Table
# =============================================================================

FLASH = "gemini-2.5-flash"
KIMI = "moonshotai/kimi-k2-thinking"
GPT = "gpt-5.1"
GEMINI_PRO = "gemini-2.5-pro"
CLAUDE = "claude-sonnet-4-5"
GEMINI_3 = "gemini-3-pro"
MISTRAL = "mistral-large-3"

_DEFAULT_TABLE: dict[str, Any] = {
    "backends": {
        FLASH: {"display_name": "Gemini Flash", "cost_per_1m": 210},
        KIMI: {"display_name": "Kimi K2", "cost_per_1m": 207},
        GPT: {"display_name": "GPT-5.1", "cost_per_1m": 810},
        GEMINI_PRO: {"display_name": "Gemini Pro", "cost_per_1m": 810},
        CLAUDE: {"display_name": "Claude Sonnet 4.5", "cost_per_1m": 1218},
        GEMINI_3: {"display_name": "Gemini 3 Pro", "cost_per_1m": 982},
        MISTRAL: {"display_name": "Mistral Large 3", "cost_per_1m": 125},
    },
    "regions": {
        "IN": {
            "tiers": {
                "fast": [FLASH, KIMI],
                "deep": [GPT, GEMINI_PRO],
                "creative": [GEMINI_3, GPT],
                "technical": [GPT, GEMINI_PRO],
                "learning": [GEMINI_PRO, GPT],
                "personal": [GEMINI_PRO],
                "synthesis": [KIMI, GPT, GEMINI_3],
            },
            "advisor": GPT,
        },
        "INTL": {
            "tiers": {
                "fast": [FLASH, KIMI],
                "deep": [GPT, GEMINI_PRO],
                "creative": [CLAUDE, GEMINI_3],
                "technical": [GPT, CLAUDE],
                "learning": [CLAUDE, GEMINI_PRO],
                "personal": [CLAUDE],
                "synthesis": [KIMI, GPT, CLAUDE],
            },
            "advisor": GPT,
        },
        "EU": {
            "tiers": {
                "fast": [FLASH, MISTRAL],
                "deep": [GEMINI_PRO, MISTRAL],
                "creative": [CLAUDE, GEMINI_3],
                "technical": [CLAUDE, GEMINI_PRO],
                "learning": [CLAUDE, GEMINI_PRO],
                "personal": [CLAUDE],
                "synthesis": [MISTRAL, GEMINI_PRO, CLAUDE],
            },
            "advisor": None,
            "advisor_fallback": [CLAUDE, GEMINI_PRO],
        },
    },
    "plans": {
        "starter": {"allowed_backends": [FLASH, KIMI, MISTRAL], "multi_model": False},
        "plus": {"allowed_backends": [FLASH, KIMI, MISTRAL, GEMINI_PRO], "multi_model": False},
        "pro": {"allowed_backends": None, "multi_model": True},
        "apex": {"allowed_backends": None, "multi_model": True},
    },
    "global_fast": [FLASH],
}

DEFAULT_AVAILABILITY = AvailabilityTable.from_dict(_DEFAULT_TABLE, source="<builtin>")


def load_availability(settings: "SwitchboardSettings") -> AvailabilityTable:
    """Return the table named by ``settings.availability_path`` or the built-in one."""
    if settings.availability_path is None:
        return DEFAULT_AVAILABILITY
    table = AvailabilityTable.from_file(settings.availability_path)
    logger.info("Using availability table from %s", settings.availability_path)
    return table


__all__ = [
    "BackendSpec",
    "RegionAvailability",
    "PlanAvailability",
    "AvailabilityTable",
    "DEFAULT_AVAILABILITY",
    "load_availability",
]
