"""
Tests: End-to-end assessments per framework and the compliance summary.

Run with:
    pytest space_compliance/tests/test_assessment.py -v
"""

from datetime import date

import pytest

from space_compliance.exceptions import ProfileValidationError, UnknownFrameworkError
from space_compliance.frameworks import get_framework
from space_compliance.frameworks.base_framework import documentation_checklist
from space_compliance.frameworks.copuos import EU_DEBRIS_ARTICLES
from space_compliance.frameworks.us_regulatory import add_years, calculate_deorbit
from space_compliance.models.enums import (
    AssessmentStatus,
    DeorbitCompliance,
    DocumentStatus,
    Framework,
    ModuleStatusType,
    Nis2Classification,
    RiskLevel,
)
from space_compliance.models.schemas import Requirement, RequirementAssessment
from space_compliance.orchestration.runner import generate_compliance_summary, perform_assessment
from space_compliance.rules.profile_validation import validate_profile

EU_PROFILE = {
    "operator_types": ["spacecraft_operator"],
    "activity_types": ["spacecraft_operation"],
    "orbit_regime": "LEO",
    "mass_kg": 550,
    "has_propulsion": True,
    "is_constellation": False,
    "entity_size": "medium",
    "establishment": "eu",
}

COPUOS_PROFILE = {
    "operator_types": ["satellite_operator"],
    "activity_types": ["orbital_operations"],
    "orbit_regime": "LEO",
    "mass_kg": 550,
    "mission_type": "commercial",
}

UK_PROFILE = {
    "operator_types": ["satellite_operator"],
    "activity_types": ["orbital_operations"],
    "launch_to_orbit": True,
}

US_PROFILE = {
    "operator_types": ["satellite_operator"],
    "activity_types": ["satellite_communications"],
    "orbit_regime": "GEO",
}


def _all(result, status: str, **overrides):
    """One assessment per applicable requirement, with per-id overrides."""
    return [
        {"requirement_id": r.id, "status": overrides.get(r.id, status)}
        for r in result.applicable_requirements
    ]


class TestEuSpaceAct:
    def test_unassessed_operator(self):
        result = perform_assessment("eu_space_act", EU_PROFILE)
        assert result.framework == Framework.EU_SPACE_ACT
        assert len(result.applicable_requirements) == 62
        assert result.score.overall == 0
        assert result.risk_level == RiskLevel.CRITICAL
        assert len(result.gap_analysis) == 62
        assert len(result.module_statuses) == 8
        assert len(result.recommendations) == 8
        assert all(rec.startswith("Priority: Close") for rec in result.recommendations)

    def test_debris_module_required(self):
        result = perform_assessment("eu_space_act", EU_PROFILE)
        debris = next(m for m in result.module_statuses if m.id == "05")
        assert debris.status == ModuleStatusType.REQUIRED

    def test_regime_and_nis2(self):
        result = perform_assessment("eu_space_act", EU_PROFILE)
        assert result.regime.regime == "standard"
        assert result.regime.total_articles == 119
        assert result.regime.applicable_percentage == 52
        assert result.regime.authorization_path == "National Authority (NCA) → URSO Registration"
        assert result.regime.estimated_authorization_cost == "~€100,000 per satellite platform"
        assert result.nis2.classification == Nis2Classification.IMPORTANT

    def test_light_regime_key_dates(self):
        result = perform_assessment("eu_space_act", {**EU_PROFILE, "entity_size": "small"})
        assert result.regime.regime == "light"
        assert len(result.regime.key_dates) == 4
        debris = next(m for m in result.module_statuses if m.id == "05")
        assert debris.status == ModuleStatusType.SIMPLIFIED

    def test_fully_compliant(self):
        first = perform_assessment("eu_space_act", EU_PROFILE)
        result = perform_assessment("eu_space_act", EU_PROFILE, _all(first, "compliant"))
        assert result.score.overall == 100
        assert result.risk_level == RiskLevel.LOW
        assert result.gap_analysis == []
        assert result.recommendations == [
            "Align cybersecurity measures with NIS2 obligations as important entity (NIS2 Art. 3(2))"
        ]

    def test_overlaps_collected(self):
        result = perform_assessment("eu_space_act", EU_PROFILE)
        for refs in result.overlaps.values():
            assert refs == sorted(set(refs))

    def test_spacecraft_operator_checklist(self):
        checklist = perform_assessment("eu_space_act", EU_PROFILE).operator_checklist
        assert checklist.operator_type == "spacecraft_operator_eu"
        assert list(checklist.phases) == ["pre_authorization", "ongoing", "end_of_life"]
        assert checklist.phases["pre_authorization"][0].article_reference == "Art. 6"

    def test_launch_operator_checklist(self):
        profile = {**EU_PROFILE, "operator_types": ["launch_site_operator"]}
        checklist = perform_assessment("eu_space_act", profile).operator_checklist
        assert checklist.operator_type == "launch_operator_eu"
        assert list(checklist.phases) == ["pre_authorization", "operational"]

    def test_third_country_checklist(self):
        profile = {**EU_PROFILE, "establishment": "third_country_eu_services"}
        result = perform_assessment("eu_space_act", profile)
        checklist = result.operator_checklist
        assert checklist.operator_type == "third_country_operator"
        actions = [a.action for phase in checklist.phases.values() for a in phase]
        assert any("register" in a.lower() for a in actions)
        assert result.regime.offers_eu_services is True

    def test_other_operator_types_skip_end_of_life(self):
        profile = {**EU_PROFILE, "operator_types": ["isos_provider"]}
        checklist = perform_assessment("eu_space_act", profile).operator_checklist
        assert checklist.operator_type == "spacecraft_operator_eu"
        assert list(checklist.phases) == ["pre_authorization", "ongoing"]

    def test_offers_eu_services_reported(self):
        assert perform_assessment("eu_space_act", EU_PROFILE).regime.offers_eu_services is False
        result = perform_assessment("eu_space_act", {**EU_PROFILE, "offers_eu_services": True})
        assert result.regime.offers_eu_services is True


class TestCopuos:
    def test_leo_without_propulsion(self):
        result = perform_assessment("copuos", COPUOS_PROFILE)
        ids = {r.id for r in result.applicable_requirements}
        assert "iadc-5.3.2-leo" in ids
        assert "iadc-5.3.2-geo" not in ids
        assert "copuos-lts-b5" not in ids
        assert "iadc-5.3.4" in ids
        assert result.required_licenses == []
        assert result.risk_level == RiskLevel.CRITICAL
        assert result.recommendations[0].startswith("Priority: Develop 25-year deorbit")
        assert len(result.recommendations) <= 8

    def test_registration_gap(self):
        first = perform_assessment("copuos", COPUOS_PROFILE)
        result = perform_assessment(
            "copuos", COPUOS_PROFILE, _all(first, "compliant", **{"copuos-lts-a5": "non_compliant"})
        )
        assert result.risk_level == RiskLevel.CRITICAL
        assert [g.requirement_id for g in result.gap_analysis] == ["copuos-lts-a5"]
        assert "Complete UN space object registration through UNOOSA" in result.recommendations

    def test_fully_compliant(self):
        first = perform_assessment("copuos", COPUOS_PROFILE)
        result = perform_assessment("copuos", COPUOS_PROFILE, _all(first, "compliant"))
        assert result.risk_level == RiskLevel.LOW
        assert result.recommendations == []
        assert set(result.score.by_source) == {"COPUOS", "IADC", "ISO"}

    def test_eu_debris_mapping(self):
        mapping = get_framework("copuos").eu_debris_module_mapping()
        assert list(mapping) == list(EU_DEBRIS_ARTICLES)
        ids = [r.id for r in mapping["Art. 66"]]
        assert ids == ["copuos-lts-b4", "copuos-lts-b5", "iadc-5.2.2", "iso-24113-6.3.2"]

    def test_guidelines_grouped_by_source(self):
        grouped = get_framework("copuos").guidelines_for_article("Art. 72")
        assert list(grouped) == ["COPUOS", "IADC", "ISO"]
        assert [r.id for r in grouped["COPUOS"]] == ["copuos-lts-b9"]
        assert all(r.source == "ISO" for r in grouped["ISO"])


class TestUkSpaceAct:
    def test_orbital_operator(self):
        result = perform_assessment("uk_space_act", UK_PROFILE)
        assert len(result.applicable_requirements) == 17
        assert result.required_licenses == ["orbital_operator_licence"]
        assert result.risk_level == RiskLevel.CRITICAL
        assert len(result.recommendations) <= 10

    def test_not_orbital_excludes_orbital_only(self):
        result = perform_assessment("uk_space_act", {**UK_PROFILE, "launch_to_orbit": False})
        ids = {r.id for r in result.applicable_requirements}
        assert "uk-sia-s7-orbital" not in ids
        assert "uk-sia-s34-liability" in ids

    def test_license_summary(self):
        result = perform_assessment("uk_space_act", UK_PROFILE)
        summary = result.license_summaries[0]
        assert summary.license_type == "orbital_operator_licence"
        assert summary.requirement_ids
        assert summary.compliance_score == 0
        assert len(summary.gaps) == len(summary.requirement_ids)

    def test_comparison(self):
        result = perform_assessment("uk_space_act", UK_PROFILE)
        comparison = result.comparison
        assert comparison.overlapping_requirements + comparison.unique_requirements == 17
        assert len(comparison.considerations) == 6

    def test_documentation_checklist(self):
        first = perform_assessment("uk_space_act", UK_PROFILE)
        result = perform_assessment(
            "uk_space_act", UK_PROFILE, _all(first, "compliant", **{"uk-sia-s7-orbital": "partial"})
        )
        checklist = result.documentation_checklist
        assert checklist
        documents = [item.document for item in checklist]
        assert len(documents) == len(set(documents))
        keys = [(not item.required, item.status != DocumentStatus.MISSING) for item in checklist]
        assert [k[0] for k in keys] == sorted(k[0] for k in keys)

    def test_single_partial_gap(self):
        first = perform_assessment("uk_space_act", UK_PROFILE)
        result = perform_assessment(
            "uk_space_act", UK_PROFILE, _all(first, "compliant", **{"uk-sia-s7-orbital": "partial"})
        )
        assert [g.requirement_id for g in result.gap_analysis] == ["uk-sia-s7-orbital"]
        assert result.gap_analysis[0].status == AssessmentStatus.PARTIAL
        assert result.risk_level == RiskLevel.LOW
        assert result.score.by_category["operator_licensing"] == 88


class TestUsRegulatory:
    def test_geo_satellite(self):
        result = perform_assessment("us_regulatory", US_PROFILE)
        ids = {r.id for r in result.applicable_requirements}
        assert len(ids) == 18
        assert "fcc-debris-5year-rule" not in ids
        assert "fcc-part25-ngso-processing" not in ids
        assert result.required_agencies == ["FCC"]
        assert result.required_licenses == ["fcc_space_station", "fcc_spectrum"]
        assert result.recommendations[0].startswith("Priority: Address FCC")
        assert "Review ITAR/EAR classification for all space system components" in result.recommendations
        assert len(result.recommendations) <= 12

    def test_deorbit_geo(self):
        result = perform_assessment("us_regulatory", US_PROFILE)
        assert result.deorbit.is_leo is False
        assert result.deorbit.required_disposal_years == 25
        assert result.deorbit.compliant

    def test_deorbit_leo_too_slow(self):
        profile = {**US_PROFILE, "orbit_regime": "LEO", "planned_disposal_years": 8, "has_propulsion": True}
        result = perform_assessment("us_regulatory", profile)
        assert result.deorbit.required_disposal_years == 5
        assert not result.deorbit.compliant
        assert "Planned disposal of 8 years exceeds 5-year limit" in result.deorbit.warnings
        assert "fcc-debris-5year-rule" in {r.id for r in result.applicable_requirements}

    def test_agency_status(self):
        first = perform_assessment("us_regulatory", US_PROFILE)
        assessments = _all(first, "compliant", **{
            "fcc-part25-coordination": "non_compliant",
            "fcc-debris-passivation": "non_compliant",
        })
        result = perform_assessment("us_regulatory", US_PROFILE, assessments)
        fcc = result.agency_statuses[0]
        assert fcc.agency == "FCC"
        assert fcc.full_name == "Federal Communications Commission"
        assert fcc.non_compliant_count == 2
        assert fcc.risk_level == RiskLevel.HIGH
        assert fcc.required_licenses == ["fcc_space_station", "fcc_spectrum"]

    def test_license_summaries_carry_cfr_part(self):
        result = perform_assessment("us_regulatory", US_PROFILE)
        parts = {s.license_type: (s.agency, s.cfr_part) for s in result.license_summaries}
        assert parts["fcc_space_station"] == ("FCC", "47 CFR Part 25")
        assert parts["fcc_spectrum"] == ("FCC", "47 CFR Part 2/25")

    def test_checklist_per_agency(self):
        result = perform_assessment("us_regulatory", US_PROFILE)
        assert result.documentation_checklist
        assert all(item.agency == "FCC" for item in result.documentation_checklist)

    def test_multi_agency(self):
        profile = {
            "operator_types": ["satellite_operator", "launch_operator"],
            "activity_types": ["earth_observation", "commercial_launch"],
            "orbit_regime": "LEO",
            "provides_remote_sensing": True,
        }
        result = perform_assessment("us_regulatory", profile)
        assert result.required_agencies == ["FCC", "FAA", "NOAA"]
        assert [s.agency for s in result.agency_statuses] == ["FCC", "FAA", "NOAA"]
        assert "noaa_remote_sensing" in result.required_licenses


    def test_no_orbit_counts_as_ngso(self):
        profile = {k: v for k, v in US_PROFILE.items() if k != "orbit_regime"}
        result = perform_assessment("us_regulatory", profile)
        ids = {r.id for r in result.applicable_requirements}
        assert result.profile.is_ngso is True
        assert {"fcc-part25-ngso-processing", "fcc-part25-bond-requirement", "fcc-spectrum-interference"} <= ids


class TestDeorbitCalculator:
    LEO = {**US_PROFILE, "orbit_regime": "LEO", "has_propulsion": True}
    TODAY = date(2026, 10, 19)

    def _profile(self, **fields):
        return validate_profile({**self.LEO, **fields}, "us_regulatory")

    def test_non_leo_uses_25_years(self):
        calc = calculate_deorbit(validate_profile(US_PROFILE, "us_regulatory"), today=self.TODAY)
        assert calc.is_leo is False
        assert calc.required_disposal_years == 25
        assert calc.compliance == DeorbitCompliance.COMPLIANT
        assert calc.recommendations[0] == "Non-LEO satellites subject to 25-year disposal guideline"

    def test_low_altitude_counts_as_leo(self):
        profile = validate_profile({**US_PROFILE, "orbit_regime": None, "altitude_km": 1200}, "us_regulatory")
        assert calculate_deorbit(profile, today=self.TODAY).is_leo is True

    def test_unknown_without_dates(self):
        calc = calculate_deorbit(self._profile(), today=self.TODAY)
        assert calc.compliance == DeorbitCompliance.UNKNOWN
        assert calc.disposal_deadline is None
        assert calc.recommendations == ["FCC 5-year rule applies to applications filed after September 2024"]

    def test_deadline_from_launch_and_duration(self):
        calc = calculate_deorbit(
            self._profile(mission_duration_years=7), launch_date=date(2027, 3, 1), today=self.TODAY,
        )
        assert calc.mission_end_date == date(2034, 3, 1)
        assert calc.disposal_deadline == date(2039, 3, 1)
        assert calc.compliance == DeorbitCompliance.AT_RISK
        assert calc.message == "12 years remaining - ensure disposal plan is in place"

    def test_planned_disposal_within_deadline(self):
        calc = calculate_deorbit(
            self._profile(),
            mission_end_date=date(2030, 1, 1),
            planned_disposal_date=date(2034, 12, 31),
            today=self.TODAY,
        )
        assert calc.compliance == DeorbitCompliance.COMPLIANT

    def test_deadline_passed(self):
        calc = calculate_deorbit(self._profile(), mission_end_date=date(2020, 1, 1), today=self.TODAY)
        assert calc.days_remaining < 0
        assert calc.compliance == DeorbitCompliance.NON_COMPLIANT
        assert calc.message == "Disposal deadline has passed - immediate action required"

    def test_less_than_a_year_left(self):
        calc = calculate_deorbit(self._profile(), mission_end_date=date(2022, 6, 1), today=self.TODAY)
        assert calc.days_remaining == 225
        assert calc.compliance == DeorbitCompliance.AT_RISK
        assert calc.message == "Less than 1 year remaining until disposal deadline"

    def test_capability_recommendations(self):
        profile = self._profile(has_propulsion=False, is_constellation=True, constellation_size=24)
        recs = calculate_deorbit(profile, today=self.TODAY).recommendations
        assert recs == [
            "Satellite lacks propulsion - verify passive decay meets 5-year requirement",
            "Large constellation requires comprehensive fleet disposal planning",
            "FCC 5-year rule applies to applications filed after September 2024",
        ]

    def test_add_years_leap_day_and_fraction(self):
        assert add_years(date(2028, 2, 29), 5) == date(2033, 2, 28)
        assert add_years(date(2030, 1, 1), 1.5) == date(2031, 7, 3)


class TestOrchestration:
    def test_invalid_profile_halts(self):
        with pytest.raises(ProfileValidationError):
            perform_assessment("uk_space_act", {"activity_types": ["launch"]})

    def test_unknown_framework(self):
        with pytest.raises(UnknownFrameworkError):
            perform_assessment("lunar_code", UK_PROFILE)

    def test_stateless(self):
        first = perform_assessment("us_regulatory", US_PROFILE)
        second = perform_assessment("us_regulatory", US_PROFILE)
        assert first.score == second.score
        assert first.recommendations == second.recommendations


class TestComplianceSummary:
    def test_counts_sum_to_applicable(self):
        first = perform_assessment("us_regulatory", US_PROFILE)
        ids = [r.id for r in first.applicable_requirements]
        assessments = [
            {"requirement_id": ids[0], "status": "compliant"},
            {"requirement_id": ids[1], "status": "partial"},
            {"requirement_id": ids[2], "status": "non_compliant"},
            {"requirement_id": ids[3], "status": "not_applicable"},
            {"requirement_id": "stale-id", "status": "compliant"},
        ]
        summary = generate_compliance_summary("us_regulatory", US_PROFILE, assessments=assessments)
        assert summary.applicable == 18
        assert summary.total_requirements == 41
        assert (
            summary.compliant + summary.partial + summary.non_compliant
            + summary.not_assessed + summary.not_applicable
        ) == summary.applicable
        assert (summary.compliant, summary.partial, summary.non_compliant, summary.not_applicable) == (1, 1, 1, 1)
        assert summary.not_assessed == 14
        assert sum(c.total for c in summary.by_agency.values()) == 18

    def test_explicit_requirement_list(self):
        first = perform_assessment("copuos", COPUOS_PROFILE)
        subset = first.applicable_requirements[:5]
        summary = generate_compliance_summary("copuos", COPUOS_PROFILE, requirements=subset)
        assert summary.applicable == 5
        assert summary.not_assessed == 5

    def test_gap_counts_by_severity(self):
        first = perform_assessment("uk_space_act", UK_PROFILE)
        summary = generate_compliance_summary(
            "uk_space_act", UK_PROFILE,
            assessments=_all(first, "compliant", **{"uk-sir-reg62-registration-info": "partial"}),
        )
        assert summary.critical_gaps == 0
        assert summary.major_gaps == 1
        assert summary.required_licenses == ["orbital_operator_licence"]


class TestDocumentationChecklist:
    @staticmethod
    def _req(req_id, binding_level, evidence):
        return Requirement(
            id=req_id, reference=req_id, title=req_id, framework=Framework.UK_SPACE_ACT,
            category="safety", binding_level=binding_level, severity="major",
            evidence_required=evidence,
        )

    def test_required_if_any_mandatory_requirement_cites_it(self):
        reqs = [
            self._req("a", "guidance", ["Safety case"]),
            self._req("b", "mandatory", ["Safety case"]),
        ]
        checklist = documentation_checklist(reqs, [])
        assert len(checklist) == 1
        assert checklist[0].required

    def test_status_upgrades_from_missing_only(self):
        reqs = [
            self._req("a", "mandatory", ["Safety case"]),
            self._req("b", "mandatory", ["Safety case"]),
            self._req("c", "mandatory", ["Safety case"]),
        ]
        assessments = [
            RequirementAssessment(requirement_id="b", status="partial"),
            RequirementAssessment(requirement_id="c", status="compliant"),
        ]
        assert documentation_checklist(reqs, assessments)[0].status == DocumentStatus.PARTIAL

    def test_sort_order(self):
        reqs = [
            self._req("a", "recommended", ["Optional memo"]),
            self._req("b", "mandatory", ["Insurance certificate"]),
            self._req("c", "mandatory", ["Licence form"]),
        ]
        assessments = [RequirementAssessment(requirement_id="b", status="compliant")]
        checklist = documentation_checklist(reqs, assessments, agency="CAA")
        assert [i.document for i in checklist] == ["Licence form", "Insurance certificate", "Optional memo"]
        assert all(i.agency == "CAA" for i in checklist)
