"""
US multi-agency regime — FCC (spectrum, debris), FAA/AST (launch and
re-entry), NOAA (commercial remote sensing).

Extras: per-agency status with its own risk band, the FCC 5-year deorbit
check, licence summaries with the governing CFR part and per-agency
documentation checklists. `calculate_deorbit` turns the same rule into a
dated disposal deadline when launch or mission-end dates are known.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import NamedTuple, Optional

from space_compliance.frameworks.base_framework import (
    BaseFramework,
    address_high_priority,
    documentation_checklist,
)
from space_compliance.models.enums import AssessmentStatus, DeorbitCompliance, Framework, OrbitRegime
from space_compliance.models.schemas import (
    AgencyStatus,
    AssessmentResult,
    ChecklistItem,
    DeorbitCalculation,
    DeorbitCheck,
    OperatorProfile,
)
from space_compliance.rules.profile_validation import us_agencies_for
from space_compliance.rules.scoring import assessment_map


class AgencyInfo(NamedTuple):
    full_name: str
    license_prefix: str
    low_score_recommendation: str


AGENCIES: dict[str, AgencyInfo] = {
    "FCC": AgencyInfo(
        "Federal Communications Commission",
        "fcc_",
        "Priority: Address FCC licensing and debris mitigation requirements before filing applications",
    ),
    "FAA": AgencyInfo(
        "Federal Aviation Administration - Office of Commercial Space Transportation",
        "faa_",
        "Priority: Complete FAA flight safety analysis and financial responsibility documentation",
    ),
    "NOAA": AgencyInfo(
        "National Oceanic and Atmospheric Administration",
        "noaa_",
        "Priority: Prepare NOAA remote sensing license application with tier classification",
    ),
}

CFR_PARTS: dict[str, str] = {
    "fcc_space_station": "47 CFR Part 25",
    "fcc_earth_station": "47 CFR Part 25",
    "fcc_spectrum": "47 CFR Part 2/25",
    "fcc_experimental": "47 CFR Part 5",
    "faa_launch": "14 CFR Part 450",
    "faa_reentry": "14 CFR Part 450",
    "faa_spaceport": "14 CFR Part 420",
    "faa_safety_approval": "14 CFR Part 414",
    "noaa_remote_sensing": "15 CFR Part 960",
}

LEO_DISPOSAL_YEARS = 5
DEFAULT_DISPOSAL_YEARS = 25
LEO_CEILING_KM = 2000
LARGE_FLEET_SIZE = 10


def agency_of_license(license_type: str) -> str | None:
    for agency, info in AGENCIES.items():
        if license_type.startswith(info.license_prefix):
            return agency
    return None


def check_deorbit(profile: OperatorProfile) -> DeorbitCheck:
    """FCC 5-year post-mission disposal rule for LEO, 25 years elsewhere."""
    is_leo = profile.orbit_regime == OrbitRegime.LEO
    required = LEO_DISPOSAL_YEARS if is_leo else DEFAULT_DISPOSAL_YEARS
    planned = profile.planned_disposal_years
    warnings: list[str] = []
    compliant = True

    if planned is not None:
        if planned > required:
            compliant = False
            warnings.append(f"Planned disposal of {planned:g} years exceeds {required}-year limit")
    elif is_leo:
        warnings.append("No disposal timeline specified for LEO satellite - 5-year rule applies")

    if is_leo and not profile.has_propulsion and not profile.has_maneuverability:
        warnings.append("LEO satellite without propulsion may not meet 5-year disposal requirement")

    if is_leo and profile.is_constellation:
        warnings.append("Large LEO constellation subject to enhanced debris mitigation scrutiny")

    return DeorbitCheck(
        is_leo=is_leo,
        required_disposal_years=required,
        planned_disposal_years=planned,
        compliant=compliant,
        warnings=warnings,
    )


def add_years(start: date, years: float) -> date:
    """Calendar years, then the fractional remainder as days. 29 February falls back to the 28th."""
    whole = int(years)
    try:
        shifted = start.replace(year=start.year + whole)
    except ValueError:
        shifted = start.replace(year=start.year + whole, day=28)
    return shifted + timedelta(days=round((years - whole) * 365.25))


def calculate_deorbit(
    profile: OperatorProfile,
    launch_date: Optional[date] = None,
    mission_end_date: Optional[date] = None,
    planned_disposal_date: Optional[date] = None,
    today: Optional[date] = None,
) -> DeorbitCalculation:
    """
    Dated FCC disposal deadline for a satellite.

    LEO (or any altitude below 2,000 km) must dispose within 5 years of
    mission end. The mission end is taken from ``mission_end_date`` or
    derived from the launch date and ``mission_duration_years``; without
    either the compliance is unknown. Other orbits fall under the 25-year
    guideline and are reported compliant.
    """
    is_leo = profile.orbit_regime == OrbitRegime.LEO or (
        profile.altitude_km is not None and profile.altitude_km < LEO_CEILING_KM
    )
    if not is_leo:
        return DeorbitCalculation(
            is_leo=False,
            required_disposal_years=DEFAULT_DISPOSAL_YEARS,
            launch_date=launch_date,
            compliance=DeorbitCompliance.COMPLIANT,
            recommendations=[
                "Non-LEO satellites subject to 25-year disposal guideline",
                "Consider FCC debris mitigation plan requirements",
            ],
        )

    today = today or date.today()
    if mission_end_date is None and launch_date is not None and profile.mission_duration_years:
        mission_end_date = add_years(launch_date, profile.mission_duration_years)

    deadline: Optional[date] = None
    days_remaining: Optional[int] = None
    compliance = DeorbitCompliance.UNKNOWN
    message = "Mission end date unknown - provide a launch date and mission duration"
    recommendations: list[str] = []

    if mission_end_date is not None:
        deadline = add_years(mission_end_date, LEO_DISPOSAL_YEARS)
        days_remaining = (deadline - today).days
        if planned_disposal_date is not None:
            if planned_disposal_date <= deadline:
                compliance = DeorbitCompliance.COMPLIANT
                message = f"Planned disposal on {planned_disposal_date.isoformat()} meets the {deadline.isoformat()} deadline"
            else:
                compliance = DeorbitCompliance.NON_COMPLIANT
                message = (
                    f"Planned disposal date exceeds 5-year deadline by "
                    f"{(planned_disposal_date - deadline).days} days"
                )
        elif days_remaining <= 0:
            compliance = DeorbitCompliance.NON_COMPLIANT
            message = "Disposal deadline has passed - immediate action required"
        elif days_remaining < 365:
            compliance = DeorbitCompliance.AT_RISK
            message = "Less than 1 year remaining until disposal deadline"
        else:
            compliance = DeorbitCompliance.AT_RISK
            message = f"{days_remaining // 365} years remaining - ensure disposal plan is in place"
        recommendations.append(message)

    if not profile.has_propulsion:
        recommendations.append("Satellite lacks propulsion - verify passive decay meets 5-year requirement")
    if profile.is_constellation and (profile.constellation_size or 0) > LARGE_FLEET_SIZE:
        recommendations.append("Large constellation requires comprehensive fleet disposal planning")
    recommendations.append("FCC 5-year rule applies to applications filed after September 2024")

    return DeorbitCalculation(
        is_leo=True,
        required_disposal_years=LEO_DISPOSAL_YEARS,
        launch_date=launch_date,
        mission_end_date=mission_end_date,
        disposal_deadline=deadline,
        planned_disposal_date=planned_disposal_date,
        days_remaining=days_remaining,
        compliance=compliance,
        message=message,
        recommendations=recommendations,
    )


class UsRegulatoryFramework(BaseFramework):
    framework = Framework.US_REGULATORY
    max_recommendations = 12

    def required_agencies(self, profile: OperatorProfile) -> list[str]:
        if profile.agencies:
            return list(profile.agencies)
        return us_agencies_for(profile.operator_types, bool(profile.provides_remote_sensing))

    def required_licenses(self, profile: OperatorProfile) -> list[str]:
        types = set(profile.operator_types)
        licenses: list[str] = []
        if types & {"satellite_operator", "spectrum_user"}:
            licenses += ["fcc_space_station", "fcc_spectrum"]
        if "launch_operator" in types:
            licenses.append("faa_launch")
        if "reentry_operator" in types:
            licenses.append("faa_reentry")
        if "spaceport_operator" in types:
            licenses.append("faa_spaceport")
        if "remote_sensing_operator" in types or profile.provides_remote_sensing:
            licenses.append("noaa_remote_sensing")
        return licenses

    def _real_process(self, result: AssessmentResult) -> AssessmentResult:
        result.agency_statuses = [self.agency_status(result, a) for a in result.required_agencies]
        if "satellite_operator" in result.profile.operator_types:
            result.deorbit = check_deorbit(result.profile)
        result.license_summaries = [
            self.license_summary(result, lt, agency_of_license(lt), CFR_PARTS.get(lt))
            for lt in result.required_licenses
        ]
        result.documentation_checklist = self.documentation_checklist(result)
        result.recommendations = self._recommendations(result)
        return result

    def agency_status(self, result: AssessmentResult, agency: str) -> AgencyStatus:
        scoped = [r for r in result.applicable_requirements if r.agency == agency]
        amap = assessment_map(result.assessments)
        assessed = [amap[r.id] for r in scoped if r.id in amap]
        non_compliant = sum(1 for a in assessed if a.status == AssessmentStatus.NON_COMPLIANT)
        agency_score = self.scoring.group_score(scoped, amap)
        info = AGENCIES.get(agency)

        return AgencyStatus(
            agency=agency,
            full_name=info.full_name if info else agency,
            requirement_ids=[r.id for r in scoped],
            assessed_count=len(assessed),
            compliant_count=sum(1 for a in assessed if a.status == AssessmentStatus.COMPLIANT),
            partial_count=sum(1 for a in assessed if a.status == AssessmentStatus.PARTIAL),
            non_compliant_count=non_compliant,
            score=agency_score,
            risk_level=self.risk.agency_risk(agency_score, non_compliant),
            gaps=self.gaps.analyze_gaps(scoped, result.assessments, self.framework),
            required_licenses=[
                lt for lt in result.required_licenses if info and lt.startswith(info.license_prefix)
            ],
        )

    def documentation_checklist(self, result: AssessmentResult) -> list[ChecklistItem]:
        items: list[ChecklistItem] = []
        for agency in result.required_agencies:
            scoped = [r for r in result.applicable_requirements if r.agency == agency]
            items.extend(documentation_checklist(scoped, result.assessments, agency=agency))
        return items

    def _recommendations(self, result: AssessmentResult) -> list[str]:
        profile = result.profile
        score = result.score
        by_category = score.by_category
        recs: list[str] = []

        for agency in result.required_agencies:
            info = AGENCIES.get(agency)
            if info and score.by_agency.get(agency, 100) < 70:
                recs.append(info.low_score_recommendation)

        if profile.orbit_regime == OrbitRegime.LEO and by_category.get("orbital_debris", 100) < 80:
            recs.append("Critical: Ensure 5-year post-mission disposal capability per FCC 2024 rule")
            recs.append(
                "Design satellite with active deorbit capability or demonstrate passive decay compliance"
            )

        if profile.is_ngso and by_category.get("spectrum", 100) < 80:
            recs.append("Complete spectrum sharing analysis for NGSO operations")
            recs.append("Ensure GSO protection measures are documented and implemented")

        if "launch_operator" in profile.operator_types and by_category.get("launch_safety", 100) < 80:
            recs.append("Conduct comprehensive flight safety analysis demonstrating EC < 1:10,000")
            recs.append("Engage FAA/AST early in vehicle development process")

        if by_category.get("financial_responsibility", 100) < 80:
            recs.append("Obtain required third-party liability insurance coverage")
            if "faa_launch" in result.required_licenses:
                recs.append("Request Maximum Probable Loss (MPL) determination from FAA")

        if profile.provides_remote_sensing and by_category.get("remote_sensing", 100) < 80:
            recs.append("Determine NOAA tier classification based on system capabilities")
            recs.append("Establish data distribution procedures compliant with license conditions")

        recs.append("Review ITAR/EAR classification for all space system components")
        recs.extend(address_high_priority(result.gap_analysis, with_agency=True))

        if result.overlaps.get(Framework.EU_SPACE_ACT):
            recs.append("Consider EU Space Act requirements if planning operations in EU jurisdiction")
        return recs
