"""
Risk Rules — maps scores and override conditions to a risk band.
Evaluated as a decision list: the first rule that fires decides.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from space_compliance.models.enums import AssessmentStatus, RiskLevel, Severity
from space_compliance.models.schemas import ComplianceScore, Requirement, RequirementAssessment
from space_compliance.rules.rules_config import RulesConfigStore, get_rules_store
from space_compliance.rules.scoring import assessment_map, status_of

logger = logging.getLogger(__name__)


class RiskRules:
    """Overall and per-agency risk classification."""

    def __init__(self, config_store: Optional[RulesConfigStore] = None):
        self._config_store = config_store or get_rules_store()

    def classify_risk(
        self,
        score: ComplianceScore,
        requirements: list[Requirement],
        assessments: Iterable[RequirementAssessment],
        licensing_category: Optional[str] = None,
    ) -> RiskLevel:
        config = self._config_store.get_risk_config()
        amap = assessment_map(assessments)

        # ── Critical non-compliance ──────────────────────
        for requirement in requirements:
            if (
                requirement.severity == Severity.CRITICAL
                and status_of(requirement, amap) == AssessmentStatus.NON_COMPLIANT
            ):
                logger.debug(f"Critical override: {requirement.id} is non-compliant")
                return RiskLevel.CRITICAL

        # ── Licensing failure ────────────────────────────
        if licensing_category:
            licensing_score = score.by_category.get(licensing_category, 100)
            if licensing_score < config.licensing_floor:
                logger.debug(f"Licensing override: {licensing_category} at {licensing_score}")
                return RiskLevel.CRITICAL

        # ── Mandatory score bands ────────────────────────
        return self.band(score.mandatory)

    def band(self, value: int) -> RiskLevel:
        config = self._config_store.get_risk_config()
        if value < config.critical_below:
            return RiskLevel.CRITICAL
        if value < config.high_below:
            return RiskLevel.HIGH
        if value < config.medium_below:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    def agency_risk(self, agency_score: int, non_compliant_count: int) -> RiskLevel:
        """Agency band: score thresholds, tightened by the non-compliant count."""
        config = self._config_store.get_risk_config()
        if agency_score < config.critical_below or non_compliant_count > config.agency_critical_non_compliant:
            return RiskLevel.CRITICAL
        if agency_score < config.high_below or non_compliant_count > config.agency_high_non_compliant:
            return RiskLevel.HIGH
        if agency_score < config.medium_below:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW


def classify_risk(
    score: ComplianceScore,
    requirements: list[Requirement],
    assessments: Iterable[RequirementAssessment],
    licensing_category: Optional[str] = None,
) -> RiskLevel:
    return RiskRules().classify_risk(score, requirements, assessments, licensing_category)
