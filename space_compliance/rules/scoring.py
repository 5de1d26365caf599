"""
Compliance Scoring Engine — weighted scores over a requirement group.

Each requirement weighs by severity. Compliant items earn their full
weight, partial items half of it, non-compliant and unassessed items
nothing, and not-applicable items leave the group entirely. A group with no
remaining weight scores 100.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Optional

from space_compliance.models.enums import AssessmentStatus, BindingLevel
from space_compliance.models.schemas import (
    Catalog,
    ComplianceScore,
    Requirement,
    RequirementAssessment,
)
from space_compliance.rules.rules_config import RulesConfigStore, get_rules_store

logger = logging.getLogger(__name__)


def assessment_map(
    assessments: Iterable[RequirementAssessment],
) -> dict[str, RequirementAssessment]:
    """Index assessments by requirement id; a later record for the same id wins."""
    return {a.requirement_id: a for a in assessments}


def status_of(
    requirement: Requirement, assessments: dict[str, RequirementAssessment]
) -> AssessmentStatus:
    found = assessments.get(requirement.id)
    return found.status if found else AssessmentStatus.NOT_ASSESSED


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class ScoringRules:
    """Weighted compliance scores at every aggregation level."""

    def __init__(self, config_store: Optional[RulesConfigStore] = None):
        self._config_store = config_store or get_rules_store()

    def group_score(
        self,
        requirements: Iterable[Requirement],
        assessments: dict[str, RequirementAssessment],
    ) -> int:
        config = self._config_store.get_scoring_config()
        achieved = 0.0
        total = 0.0

        for requirement in requirements:
            status = status_of(requirement, assessments)
            if status == AssessmentStatus.NOT_APPLICABLE:
                continue
            weight = config.severity_weights.get(requirement.severity.value, 1)
            total += weight
            achieved += weight * config.status_credit.get(status.value, 0.0)

        if total <= 0:
            return config.vacuous_score
        return round_half_up(achieved / total * 100)

    def score(
        self,
        requirements: list[Requirement],
        assessments: Iterable[RequirementAssessment] | dict[str, RequirementAssessment],
        catalog: Optional[Catalog] = None,
    ) -> ComplianceScore:
        """Overall, per-dimension, mandatory and recommended scores."""
        config = self._config_store.get_scoring_config()
        amap = assessments if isinstance(assessments, dict) else assessment_map(assessments)

        # ── Dimensions ───────────────────────────────────
        categories = list(catalog.categories) if catalog else []
        for r in requirements:
            if r.category not in categories:
                categories.append(r.category)

        license_types: list[str] = []
        for r in requirements:
            for lt in r.license_types:
                if lt not in license_types:
                    license_types.append(lt)

        agencies = list(catalog.agencies) if catalog else []
        for r in requirements:
            if r.agency and r.agency not in agencies:
                agencies.append(r.agency)

        sources = list(catalog.sources) if catalog else []
        for r in requirements:
            if r.source and r.source not in sources:
                sources.append(r.source)

        recommended_levels = {BindingLevel(level) for level in config.recommended_levels}

        return ComplianceScore(
            overall=self.group_score(requirements, amap),
            by_category={
                c: self.group_score([r for r in requirements if r.category == c], amap)
                for c in categories
            },
            by_license_type={
                lt: self.group_score([r for r in requirements if lt in r.license_types], amap)
                for lt in license_types
            },
            by_agency={
                a: self.group_score([r for r in requirements if r.agency == a], amap)
                for a in agencies
            },
            by_source={
                s: self.group_score([r for r in requirements if r.source == s], amap)
                for s in sources
            },
            mandatory=self.group_score(
                [r for r in requirements if r.binding_level == BindingLevel.MANDATORY], amap
            ),
            recommended=self.group_score(
                [r for r in requirements if r.binding_level in recommended_levels], amap
            ),
        )


def score(
    requirements: list[Requirement],
    assessments: Iterable[RequirementAssessment],
    catalog: Optional[Catalog] = None,
) -> ComplianceScore:
    return ScoringRules().score(requirements, assessments, catalog)
