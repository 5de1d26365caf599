"""
Assessment Orchestrator — entry points used by the CLI, the HTTP layer and
library callers.

    result = perform_assessment("uk_space_act", profile_dict, assessments)

Profiles are validated (and framework defaults applied) before anything is
scored; each call is independent and holds no state.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from space_compliance.catalog.loader import load_catalog, resolve_framework
from space_compliance.frameworks import get_framework
from space_compliance.models.enums import AssessmentStatus, Framework, Severity
from space_compliance.models.schemas import (
    AssessmentResult,
    ComplianceSummary,
    OperatorProfile,
    Requirement,
    RequirementAssessment,
    StatusCounts,
)
from space_compliance.rules.applicability import match
from space_compliance.rules.profile_validation import validate_profile
from space_compliance.rules.rules_config import RulesConfigStore
from space_compliance.rules.scoring import assessment_map, status_of

logger = logging.getLogger(__name__)

_GAP_STATUSES = (
    AssessmentStatus.PARTIAL,
    AssessmentStatus.NON_COMPLIANT,
    AssessmentStatus.NOT_ASSESSED,
)


def _coerce_assessments(
    assessments: Optional[Iterable[RequirementAssessment | dict[str, Any]]],
) -> list[RequirementAssessment]:
    return [
        a if isinstance(a, RequirementAssessment) else RequirementAssessment(**a)
        for a in (assessments or [])
    ]


def perform_assessment(
    framework: Framework | str,
    profile: OperatorProfile | dict[str, Any],
    assessments: Optional[Iterable[RequirementAssessment | dict[str, Any]]] = None,
    config_store: Optional[RulesConfigStore] = None,
) -> AssessmentResult:
    """Match, score, classify and analyse one operator against one framework."""
    fw = resolve_framework(framework)
    validated = validate_profile(profile, fw)
    return get_framework(fw, config_store).assess(validated, _coerce_assessments(assessments))


def _count(counts: StatusCounts, status: AssessmentStatus) -> None:
    counts.total += 1
    setattr(counts, status.value, getattr(counts, status.value) + 1)


def generate_compliance_summary(
    framework: Framework | str,
    profile: OperatorProfile | dict[str, Any],
    requirements: Optional[list[Requirement]] = None,
    assessments: Optional[Iterable[RequirementAssessment | dict[str, Any]]] = None,
) -> ComplianceSummary:
    """
    Status counts over ``requirements`` (the applicable set when omitted).

    The five status counts always add up to ``applicable``. Partial,
    non-compliant and unassessed items count as gaps by severity.
    """
    fw = resolve_framework(framework)
    validated = validate_profile(profile, fw)
    impl = get_framework(fw)
    if requirements is None:
        requirements = match(validated, impl.catalog)

    amap = assessment_map(_coerce_assessments(assessments))
    overall = StatusCounts()
    by_agency: dict[str, StatusCounts] = {}
    critical_gaps = 0
    major_gaps = 0

    for requirement in requirements:
        status = status_of(requirement, amap)
        _count(overall, status)
        if requirement.agency:
            _count(by_agency.setdefault(requirement.agency, StatusCounts()), status)
        if status in _GAP_STATUSES:
            if requirement.severity == Severity.CRITICAL:
                critical_gaps += 1
            elif requirement.severity == Severity.MAJOR:
                major_gaps += 1

    summary = ComplianceSummary(
        framework=fw,
        total_requirements=len(load_catalog(fw).requirements),
        applicable=len(requirements),
        compliant=overall.compliant,
        partial=overall.partial,
        non_compliant=overall.non_compliant,
        not_assessed=overall.not_assessed,
        not_applicable=overall.not_applicable,
        critical_gaps=critical_gaps,
        major_gaps=major_gaps,
        required_licenses=impl.required_licenses(validated),
        required_agencies=impl.required_agencies(validated),
        by_agency=by_agency,
    )
    logger.info(
        f"[{fw.value}] summary: {summary.compliant}/{summary.applicable} compliant, "
        f"{critical_gaps} critical and {major_gaps} major gaps"
    )
    return summary
