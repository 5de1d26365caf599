"""
UK Space Industry Act 2018 and Space Industry Regulations 2021.

Licences follow from operator and activity types. Extras: per-licence
requirement summaries, the UK–EU comparison and the CAA documentation
checklist.
"""

from __future__ import annotations

import re

from space_compliance.frameworks.base_framework import (
    BaseFramework,
    address_high_priority,
    documentation_checklist,
)
from space_compliance.models.enums import Framework
from space_compliance.models.schemas import (
    AssessmentResult,
    ComparisonSummary,
    OperatorProfile,
    Requirement,
)

LICENSE_BY_OPERATOR: dict[str, str] = {
    "launch_operator": "launch_licence",
    "return_operator": "return_licence",
    "satellite_operator": "orbital_operator_licence",
    "spaceport_operator": "spaceport_licence",
    "range_control": "range_control_licence",
}

LICENSE_BY_ACTIVITY: dict[str, str] = {
    "launch": "launch_licence",
    "return": "return_licence",
    "orbital_operations": "orbital_operator_licence",
    "spaceport_operations": "spaceport_licence",
    "range_services": "range_control_licence",
}

# Licence → recommendation when that licence's score drops below 70
LICENSE_RECOMMENDATIONS: dict[str, str] = {
    "launch_licence": (
        "Engage with CAA Spaceflight Team early regarding launch licence requirements (CAP 2210)"
    ),
    "orbital_operator_licence": (
        "Prepare orbital operator licence package including debris mitigation plan and insurance"
    ),
    "spaceport_licence": (
        "Complete environmental impact assessment and safety case for spaceport licence"
    ),
}


def _cites(text: str, reference: str) -> bool:
    """Any part of ``SIA s.38 / SIR Part 7`` appears in ``text`` (``SIA s.3`` never matches ``SIA s.36``)."""
    return any(
        re.search(re.escape(part.strip()) + r"(?!\d)", text) is not None
        for part in reference.split("/")
        if part.strip()
    )


class UkSpaceFramework(BaseFramework):
    framework = Framework.UK_SPACE_ACT
    max_recommendations = 10

    def required_licenses(self, profile: OperatorProfile) -> list[str]:
        licenses: list[str] = []
        for operator_type in profile.operator_types:
            lt = LICENSE_BY_OPERATOR.get(operator_type)
            if lt and lt not in licenses:
                licenses.append(lt)
        for activity in profile.activity_types:
            lt = LICENSE_BY_ACTIVITY.get(activity)
            if lt and lt not in licenses:
                licenses.append(lt)
        return licenses

    def _real_process(self, result: AssessmentResult) -> AssessmentResult:
        result.recommendations = self._recommendations(result)
        result.license_summaries = [
            self.license_summary(result, lt) for lt in result.required_licenses
        ]
        result.comparison = self.comparison_summary(result.applicable_requirements)
        result.documentation_checklist = documentation_checklist(
            result.applicable_requirements, result.assessments
        )
        return result

    def _recommendations(self, result: AssessmentResult) -> list[str]:
        profile = result.profile
        by_category = result.score.by_category
        recs: list[str] = []

        if by_category.get("operator_licensing", 100) < 80:
            recs.append(
                "Priority: Complete CAA licence application process - allow minimum 6 months lead time"
            )

        for lt in result.required_licenses:
            licence_score = result.score.by_license_type.get(lt)
            if licence_score is not None and licence_score < 70 and lt in LICENSE_RECOMMENDATIONS:
                recs.append(LICENSE_RECOMMENDATIONS[lt])

        if by_category.get("safety", 100) < 70:
            recs.append(
                "Develop comprehensive safety case demonstrating risks are ALARP "
                "(As Low As Reasonably Practicable)"
            )

        if by_category.get("liability_insurance", 100) < 80:
            recs.append(
                "Obtain third party liability insurance - minimum typically EUR 60M for orbital activities"
            )
            recs.append(
                "Submit maximum probable loss assessment to CAA for insurance amount determination"
            )

        if profile.launch_to_orbit and by_category.get("environmental", 100) < 80:
            recs.append("Develop debris mitigation plan per ISO 24113 and IADC guidelines")
            recs.append("Ensure 25-year post-mission deorbit compliance demonstration")

        if by_category.get("security", 100) < 70:
            recs.append("Implement cyber security measures per NCSC guidance for space sector")

        if profile.involves_people and by_category.get("informed_consent", 100) < 80:
            recs.append("Develop comprehensive informed consent process for spaceflight participants")

        if profile.launch_from_uk and by_category.get("emergency_response", 100) < 80:
            recs.append(
                "Coordinate emergency response planning with local authorities and emergency services"
            )

        if profile.launch_to_orbit and by_category.get("registration", 100) < 80:
            recs.append("Register space object in UK Register of Space Objects through UK Space Agency")

        recs.extend(address_high_priority(result.gap_analysis))

        if profile.has_uk_nexus and result.overlaps.get(Framework.EU_SPACE_ACT):
            recs.append(
                "Review EU Space Act requirements for potential dual compliance needs post-Brexit"
            )
        return recs

    def comparison_summary(self, applicable: list[Requirement]) -> ComparisonSummary:
        """Overlapping vs UK-only requirements and the post-Brexit points they raise."""
        with_eu = [r for r in applicable if r.cross_references.get(Framework.EU_SPACE_ACT)]
        considerations: list[str] = []
        for comparison in self.catalog.comparisons:
            if any(_cites(comparison.requirement, r.reference) for r in with_eu):
                if comparison.implications and comparison.implications not in considerations:
                    considerations.append(comparison.implications)
        return ComparisonSummary(
            overlapping_requirements=len(with_eu),
            unique_requirements=len(applicable) - len(with_eu),
            considerations=considerations,
        )
