"""
National space laws — licensing under the laws of individual European
states (France, UK, Belgium, Netherlands, Luxembourg, Austria, Denmark,
Germany, Italy, Norway).

The profile selects the jurisdictions to compare through ``jurisdictions``.
Requirements are matched per jurisdiction like any other catalog; the
extras rank the selected jurisdictions by favorability, compare them on ten
criteria and preview how the EU Space Act will change each regime.
"""

from __future__ import annotations

import logging
from typing import Optional

from space_compliance.frameworks.base_framework import BaseFramework, address_high_priority
from space_compliance.models.enums import Framework
from space_compliance.models.schemas import (
    AssessmentResult,
    Jurisdiction,
    JurisdictionResult,
    OperatorProfile,
    Requirement,
    RequirementAssessment,
)
from space_compliance.rules.jurisdiction_rules import (
    JurisdictionRules,
    check_applicability,
    eu_space_act_preview,
    format_cost,
)
from space_compliance.rules.rules_config import RulesConfigStore
from space_compliance.rules.scoring import assessment_map

logger = logging.getLogger(__name__)


class NationalSpaceLawFramework(BaseFramework):
    framework = Framework.NATIONAL_SPACE_LAW
    max_recommendations = 8

    def __init__(self, config_store: Optional[RulesConfigStore] = None):
        super().__init__(config_store)
        self.jurisdiction_rules = JurisdictionRules(self.config_store)

    def selected_jurisdictions(self, profile: OperatorProfile) -> list[Jurisdiction]:
        """Catalog entries for the profile's jurisdiction codes, unknown codes skipped."""
        selected = []
        for code in dict.fromkeys(c.upper() for c in profile.jurisdictions):
            jurisdiction = self.catalog.jurisdiction(code)
            if jurisdiction is None:
                logger.warning(f"No national space law data for '{code}'")
                continue
            selected.append(jurisdiction)
        return selected

    def required_agencies(self, profile: OperatorProfile) -> list[str]:
        return [j.authority.name for j in self.selected_jurisdictions(profile)]

    def _real_process(self, result: AssessmentResult) -> AssessmentResult:
        selected = self.selected_jurisdictions(result.profile)
        result.jurisdiction_results = [
            self.jurisdiction_result(j, result.profile, result.applicable_requirements, result.assessments)
            for j in selected
        ]
        result.comparison_matrix = self.jurisdiction_rules.comparison_matrix(selected)
        result.eu_space_act_preview = eu_space_act_preview(selected)

        recs = self.jurisdiction_rules.recommendations(result.jurisdiction_results, result.profile)
        recs.extend(address_high_priority(result.gap_analysis))
        result.recommendations = recs
        return result

    def jurisdiction_result(
        self,
        jurisdiction: Jurisdiction,
        profile: OperatorProfile,
        applicable: list[Requirement],
        assessments: list[RequirementAssessment],
    ) -> JurisdictionResult:
        scoped = [r for r in applicable if r.jurisdiction == jurisdiction.code]
        is_applicable, reason = check_applicability(jurisdiction, profile, covered=bool(scoped))

        favorability = self.jurisdiction_rules.favorability(jurisdiction, profile)
        insurance = jurisdiction.insurance
        debris = jurisdiction.debris

        return JurisdictionResult(
            code=jurisdiction.code,
            name=jurisdiction.name,
            is_applicable=is_applicable,
            applicability_reason=reason,
            total_requirements=len(scoped),
            mandatory_requirements=sum(1 for r in scoped if r.is_mandatory),
            requirement_ids=[r.id for r in scoped],
            compliance_score=self.scoring.group_score(scoped, assessment_map(assessments)),
            authority=jurisdiction.authority.name,
            authority_website=jurisdiction.authority.website,
            estimated_timeline=jurisdiction.timeline.processing_weeks,
            estimated_cost=format_cost(jurisdiction),
            insurance_mandatory=insurance.mandatory,
            minimum_coverage=insurance.minimum_coverage or "Case-by-case",
            government_indemnification=insurance.government_indemnification,
            deorbit_required=debris.deorbit_required,
            deorbit_timeline=debris.deorbit_timeline or "Not specified",
            legislation=jurisdiction.legislation.name,
            legislation_status=jurisdiction.legislation.status,
            year_enacted=jurisdiction.legislation.year_enacted,
            favorability_score=favorability.score,
            favorability_factors=favorability.factors,
        )
