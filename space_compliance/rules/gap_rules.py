"""
Gap Rules — remediation list for every applicable requirement that is not
yet fully compliant. Skips compliant and not-applicable items; sorts the
rest high → medium → low priority.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from space_compliance.models.enums import (
    AssessmentStatus,
    BindingLevel,
    Effort,
    Framework,
    Priority,
    Severity,
)
from space_compliance.models.schemas import GapAnalysisResult, Requirement, RequirementAssessment
from space_compliance.rules.rules_config import RulesConfigStore, get_rules_store
from space_compliance.rules.scoring import assessment_map, status_of

logger = logging.getLogger(__name__)

PRIORITY_ORDER = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}

_SKIPPED = (AssessmentStatus.COMPLIANT, AssessmentStatus.NOT_APPLICABLE)


def gap_text(status: AssessmentStatus, requirement: Requirement) -> str:
    if status == AssessmentStatus.NON_COMPLIANT:
        return f"Non-compliant with {requirement.reference}: {requirement.title}"
    if status == AssessmentStatus.PARTIAL:
        return f"Partially compliant with {requirement.reference}: {requirement.title}"
    return f"Not yet assessed: {requirement.reference}: {requirement.title}"


def priority_for(requirement: Requirement) -> Priority:
    mandatory = requirement.binding_level == BindingLevel.MANDATORY
    critical = requirement.severity == Severity.CRITICAL
    if mandatory and critical:
        return Priority.HIGH
    if mandatory or critical:
        return Priority.MEDIUM
    return Priority.LOW


def recommendation_for(requirement: Requirement) -> str:
    if requirement.implementation_guidance:
        return requirement.implementation_guidance[0]
    return f"Review and implement {requirement.title}"


class GapRules:
    """Gap analysis with effort and dependency hints per framework."""

    def __init__(self, config_store: Optional[RulesConfigStore] = None):
        self._config_store = config_store or get_rules_store()

    def effort_for(self, requirement: Requirement, framework: Optional[Framework] = None) -> Effort:
        config = self._config_store.get_gap_config()
        table = config.effort.get((framework or requirement.framework).value)
        if table is not None:
            if requirement.category in table.high:
                return Effort.HIGH
            if requirement.category in table.low:
                return Effort.LOW
        return Effort(config.default_effort)

    def dependencies_for(
        self, requirement: Requirement, framework: Optional[Framework] = None
    ) -> list[str]:
        config = self._config_store.get_gap_config()
        fw = (framework or requirement.framework).value
        hints = config.dependencies.get(fw, {}).get(requirement.category, [])
        return [
            h.text
            for h in hints
            if not (h.unless_requires_propulsion and requirement.applicability.requires_propulsion)
        ]

    def analyze_gaps(
        self,
        requirements: list[Requirement],
        assessments: Iterable[RequirementAssessment],
        framework: Optional[Framework] = None,
    ) -> list[GapAnalysisResult]:
        amap = assessment_map(assessments)
        gaps: list[GapAnalysisResult] = []

        for requirement in requirements:
            status = status_of(requirement, amap)
            if status in _SKIPPED:
                continue
            gaps.append(GapAnalysisResult(
                requirement_id=requirement.id,
                reference=requirement.reference,
                title=requirement.title,
                status=status,
                priority=priority_for(requirement),
                gap=gap_text(status, requirement),
                recommendation=recommendation_for(requirement),
                estimated_effort=self.effort_for(requirement, framework),
                dependencies=self.dependencies_for(requirement, framework),
                guidance_ref=requirement.guidance_ref,
                agency=requirement.agency,
                potential_penalty=requirement.penalty.description if requirement.penalty else None,
                cross_references={fw: list(refs) for fw, refs in requirement.cross_references.items()},
            ))

        # Stable: catalog order survives within equal keys
        gaps.sort(key=lambda g: (PRIORITY_ORDER[g.priority], g.agency or ""))
        logger.debug(f"{len(gaps)} gaps from {len(requirements)} requirements")
        return gaps


def analyze_gaps(
    requirements: list[Requirement],
    assessments: Iterable[RequirementAssessment],
    framework: Optional[Framework] = None,
) -> list[GapAnalysisResult]:
    return GapRules().analyze_gaps(requirements, assessments, framework)
