"""
Rules Config Store — loads rule tables from an optional JSON overrides file.

Thresholds, weights and lookup tables live here rather than in the rule
functions. The file named by RULES_CONFIG_PATH may override any section;
sections it does not mention fall back to the defaults below.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from space_compliance.config import get_settings

logger = logging.getLogger(__name__)


# ── Config models ────────────────────────────────────────

class ScoringConfig(BaseModel):
    """Weights and credits used by the compliance scoring engine."""
    severity_weights: dict[str, float] = {"critical": 3, "major": 2, "minor": 1}
    status_credit: dict[str, float] = {
        "compliant": 1.0,
        "partial": 0.5,
        "non_compliant": 0.0,
        "not_assessed": 0.0,
    }
    vacuous_score: int = 100  # empty or fully not-applicable group
    recommended_levels: list[str] = ["recommended", "best_practice", "guidance"]


class RiskConfig(BaseModel):
    """Risk band thresholds (scores strictly below the value fall in the band)."""
    licensing_floor: int = 50
    critical_below: int = 50
    high_below: int = 70
    medium_below: int = 85
    # Per-agency bands also look at the number of non-compliant items
    agency_critical_non_compliant: int = 3  # more than this → critical
    agency_high_non_compliant: int = 1  # more than this → high


class EffortTable(BaseModel):
    high: list[str] = []
    low: list[str] = []


class DependencyHint(BaseModel):
    text: str
    unless_requires_propulsion: bool = False


class GapConfig(BaseModel):
    """Per-framework effort and dependency lookup tables keyed by category."""
    effort: dict[str, EffortTable] = {
        "copuos": EffortTable(
            high=["design_passivation", "disposal"],
            low=["policy_regulatory", "international_cooperation"],
        ),
        "uk_space_act": EffortTable(
            high=["safety", "liability_insurance"],
            low=["registration", "informed_consent"],
        ),
        "us_regulatory": EffortTable(
            high=["launch_safety", "financial_responsibility"],
            low=["reporting", "coordination"],
        ),
        "eu_space_act": EffortTable(
            high=["debris", "insurance"],
            low=["registration", "regulatory_intelligence"],
        ),
        "national_space_law": EffortTable(
            high=["insurance", "financial_guarantee", "safety_assessment"],
            low=["notification", "corporate_governance"],
        ),
    }
    dependencies: dict[str, dict[str, list[DependencyHint]]] = {
        "copuos": {
            "collision_avoidance": [
                DependencyHint(text="Propulsion system capability", unless_requires_propulsion=True),
            ],
            "disposal": [DependencyHint(text="Passivation capability (IADC 5.3.1)")],
        },
        "uk_space_act": {
            "operator_licensing": [
                DependencyHint(text="Technical capability demonstration"),
                DependencyHint(text="Financial capability demonstration"),
            ],
            "liability_insurance": [
                DependencyHint(text="Maximum probable loss assessment"),
                DependencyHint(text="CAA insurance amount determination"),
            ],
            "safety": [DependencyHint(text="Hazard identification and risk assessment")],
        },
        "us_regulatory": {
            "licensing": [
                DependencyHint(text="Complete application package"),
                DependencyHint(text="Financial responsibility documentation"),
            ],
            "orbital_debris": [
                DependencyHint(text="Orbital lifetime analysis"),
                DependencyHint(text="Disposal capability design"),
            ],
            "launch_safety": [
                DependencyHint(text="Flight safety analysis"),
                DependencyHint(text="Environmental documentation"),
            ],
        },
        "eu_space_act": {
            "authorization": [
                DependencyHint(text="Technical capability demonstration"),
                DependencyHint(text="Financial capability demonstration"),
            ],
            "debris": [DependencyHint(text="Debris mitigation plan")],
            "insurance": [DependencyHint(text="Third-party liability risk assessment")],
        },
        "national_space_law": {
            "insurance": [DependencyHint(text="Third-party liability risk assessment")],
            "debris_plan": [DependencyHint(text="Orbital lifetime analysis")],
            "end_of_life_plan": [DependencyHint(text="Disposal capability design")],
        },
    }
    default_effort: str = "medium"


class IncidentRule(BaseModel):
    severity: str
    deadline_hours: int
    requires_nca: bool
    requires_euspa: bool
    articles: str


class IncidentConfig(BaseModel):
    """Incident category table and severity scoring increments."""
    categories: dict[str, IncidentRule] = {
        "loss_of_contact": IncidentRule(
            severity="critical", deadline_hours=4, requires_nca=True, requires_euspa=True,
            articles="Art. 33-34",
        ),
        "debris_generation": IncidentRule(
            severity="critical", deadline_hours=4, requires_nca=True, requires_euspa=True,
            articles="Art. 58-72",
        ),
        "cyber_incident": IncidentRule(
            severity="critical", deadline_hours=4, requires_nca=True, requires_euspa=True,
            articles="Art. 74-95",
        ),
        "spacecraft_anomaly": IncidentRule(
            severity="high", deadline_hours=24, requires_nca=True, requires_euspa=False,
            articles="Art. 33",
        ),
        "conjunction_event": IncidentRule(
            severity="high", deadline_hours=72, requires_nca=True, requires_euspa=True,
            articles="Art. 55-57",
        ),
        "regulatory_breach": IncidentRule(
            severity="medium", deadline_hours=72, requires_nca=True, requires_euspa=False,
            articles="Art. 26-31",
        ),
        "other": IncidentRule(
            severity="low", deadline_hours=168, requires_nca=False, requires_euspa=False,
            articles="Art. 33",
        ),
    }
    severity_scores: dict[str, float] = {"low": 1, "medium": 2, "high": 3, "critical": 4}
    multiple_assets_increment: float = 0.5  # more than 1 asset
    many_assets_threshold: int = 5
    many_assets_increment: float = 0.5  # more than many_assets_threshold
    debris_increment: float = 1.0
    data_breach_increment: float = 1.0
    third_party_increment: float = 0.5
    media_increment: float = 0.5
    recurring_increment: float = 0.5
    financial_notable_eur: float = 100_000
    financial_notable_increment: float = 0.5
    financial_severe_eur: float = 1_000_000
    financial_severe_increment: float = 1.0
    critical_at: float = 4
    high_at: float = 3
    medium_at: float = 2


class JurisdictionConfig(BaseModel):
    """Favorability points and advice thresholds for national jurisdictions."""
    base_score: int = 50
    no_law_score: int = 20
    fast_weeks: float = 10  # average processing weeks at or below
    fast_points: int = 15
    moderate_weeks: float = 16
    moderate_points: int = 8
    slow_points: int = -5
    indemnification_points: int = 10
    liability_points: dict[str, int] = {"capped": 8, "negotiable": 5}
    mature_year: int = 2010  # enacted at or before
    mature_points: int = 10
    established_year: int = 2018
    established_points: int = 5
    registry_points: int = 3
    reference_year: int = 2026  # for the age of a law in the comparison matrix
    non_eu_codes: list[str] = ["UK", "NO"]
    blanket_license_fleet: int = 9  # constellations larger than this
    max_recommendations: int = 6


# ── Store class ──────────────────────────────────────────

class RulesConfigStore:
    """
    Loads rule configs from the JSON overrides file. Falls back to defaults
    when no file is configured or a section is missing.
    Cached after first load for the lifetime of the store.
    """

    def __init__(self, path: str | None = None):
        self.settings = get_settings()
        self._path = Path(path) if path else (
            Path(self.settings.rules_config_path) if self.settings.rules_config_path else None
        )
        self._cache: dict[str, Any] = {}

    def _read_file(self) -> dict[str, Any]:
        if self._path is None or not self._path.exists():
            return {}
        with open(self._path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _load_config(self, rule_type: str, model_cls: type[BaseModel]) -> BaseModel:
        """Load from the overrides file or return defaults."""
        if rule_type in self._cache:
            return self._cache[rule_type]

        overrides = self._read_file().get(rule_type)
        if overrides:
            config = model_cls(**overrides)
            logger.info(f"Loaded {rule_type} rules from {self._path}")
        else:
            config = model_cls()
        self._cache[rule_type] = config
        return config

    def get_scoring_config(self) -> ScoringConfig:
        return self._load_config("scoring", ScoringConfig)  # type: ignore[return-value]

    def get_risk_config(self) -> RiskConfig:
        return self._load_config("risk", RiskConfig)  # type: ignore[return-value]

    def get_gap_config(self) -> GapConfig:
        return self._load_config("gap", GapConfig)  # type: ignore[return-value]

    def get_incident_config(self) -> IncidentConfig:
        return self._load_config("incident", IncidentConfig)  # type: ignore[return-value]

    def get_jurisdiction_config(self) -> JurisdictionConfig:
        return self._load_config("jurisdiction", JurisdictionConfig)  # type: ignore[return-value]

    def update_config(self, rule_type: str, config_dict: dict[str, Any]) -> bool:
        """Admin: save/update a rule config section in the overrides file."""
        if self._path is None:
            logger.error("Cannot update config — RULES_CONFIG_PATH is not set")
            return False

        document = self._read_file()
        document[rule_type] = config_dict
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2)
        # Invalidate cache
        self._cache.pop(rule_type, None)
        logger.info(f"Updated {rule_type} config in {self._path}")
        return True


_default_store: RulesConfigStore | None = None


def get_rules_store() -> RulesConfigStore:
    """Process-wide store used when a rule function is not given one."""
    global _default_store
    if _default_store is None:
        _default_store = RulesConfigStore()
    return _default_store
