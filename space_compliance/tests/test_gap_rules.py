"""
Tests: Gap analysis.

Run with:
    pytest space_compliance/tests/test_gap_rules.py -v
"""

from space_compliance.models.enums import AssessmentStatus, Effort, Framework, Priority
from space_compliance.models.schemas import Requirement, RequirementAssessment
from space_compliance.rules.gap_rules import GapRules, analyze_gaps, gap_text, priority_for


def _req(req_id: str, binding_level: str = "mandatory", severity: str = "critical", **fields) -> Requirement:
    data = {
        "id": req_id,
        "reference": f"Ref {req_id}",
        "title": f"Title {req_id}",
        "framework": Framework.COPUOS,
        "category": "space_debris",
        "binding_level": binding_level,
        "severity": severity,
    }
    data.update(fields)
    return Requirement(**data)


def _a(req_id: str, status: str) -> RequirementAssessment:
    return RequirementAssessment(requirement_id=req_id, status=status)


class TestPriority:
    def test_mandatory_critical_is_high(self):
        assert priority_for(_req("a", "mandatory", "critical")) == Priority.HIGH

    def test_one_of_mandatory_or_critical_is_medium(self):
        assert priority_for(_req("a", "mandatory", "minor")) == Priority.MEDIUM
        assert priority_for(_req("a", "recommended", "critical")) == Priority.MEDIUM

    def test_neither_is_low(self):
        assert priority_for(_req("a", "guidance", "major")) == Priority.LOW


class TestAnalyzeGaps:
    def test_skips_compliant_and_not_applicable(self):
        reqs = [_req("a"), _req("b"), _req("c"), _req("d")]
        gaps = analyze_gaps(reqs, [_a("a", "compliant"), _a("b", "not_applicable"), _a("c", "partial")])
        assert [g.requirement_id for g in gaps] == ["c", "d"]
        assert gaps[1].status == AssessmentStatus.NOT_ASSESSED

    def test_sorted_high_to_low_and_stable(self):
        reqs = [
            _req("low", "guidance", "minor"),
            _req("high1", "mandatory", "critical"),
            _req("medium", "mandatory", "major"),
            _req("high2", "mandatory", "critical"),
        ]
        gaps = analyze_gaps(reqs, [])
        assert [g.requirement_id for g in gaps] == ["high1", "high2", "medium", "low"]

    def test_agency_breaks_ties_within_priority(self):
        reqs = [
            _req("noaa", agency="NOAA", framework=Framework.US_REGULATORY),
            _req("faa", agency="FAA", framework=Framework.US_REGULATORY),
            _req("fcc", agency="FCC", framework=Framework.US_REGULATORY),
        ]
        gaps = analyze_gaps(reqs, [])
        assert [g.agency for g in gaps] == ["FAA", "FCC", "NOAA"]

    def test_recommendation_uses_first_guidance_entry(self):
        req = _req("a", implementation_guidance=["Subscribe to a CA service", "Document procedures"])
        gaps = analyze_gaps([req], [])
        assert gaps[0].recommendation == "Subscribe to a CA service"

    def test_recommendation_fallback(self):
        gaps = analyze_gaps([_req("a")], [])
        assert gaps[0].recommendation == "Review and implement Title a"

    def test_gap_text_differs_by_status(self):
        req = _req("a")
        texts = {
            gap_text(AssessmentStatus.NON_COMPLIANT, req),
            gap_text(AssessmentStatus.PARTIAL, req),
            gap_text(AssessmentStatus.NOT_ASSESSED, req),
        }
        assert len(texts) == 3

    def test_carries_penalty_and_cross_references(self):
        req = _req(
            "a",
            penalty={"description": "Licence revocation"},
            cross_references={"eu_space_act": ["Art. 67"]},
        )
        gap = analyze_gaps([req], [_a("a", "non_compliant")])[0]
        assert gap.potential_penalty == "Licence revocation"
        assert gap.cross_references == {Framework.EU_SPACE_ACT: ["Art. 67"]}


class TestEffortAndDependencies:
    def test_effort_lookup(self):
        gr = GapRules()
        assert gr.effort_for(_req("a", category="disposal")) == Effort.HIGH
        assert gr.effort_for(_req("a", category="policy_regulatory")) == Effort.LOW
        assert gr.effort_for(_req("a", category="space_weather")) == Effort.MEDIUM

    def test_effort_is_per_framework(self):
        gr = GapRules()
        req = _req("a", category="safety", framework=Framework.UK_SPACE_ACT)
        assert gr.effort_for(req) == Effort.HIGH
        assert gr.effort_for(req, Framework.COPUOS) == Effort.MEDIUM

    def test_licensing_dependencies(self):
        req = _req("a", category="operator_licensing", framework=Framework.UK_SPACE_ACT)
        assert GapRules().dependencies_for(req) == [
            "Technical capability demonstration",
            "Financial capability demonstration",
        ]

    def test_propulsion_hint_dropped_when_required(self):
        gr = GapRules()
        plain = _req("a", category="collision_avoidance")
        needs_propulsion = _req("b", category="collision_avoidance", applicability={"requires_propulsion": True})
        assert gr.dependencies_for(plain) == ["Propulsion system capability"]
        assert gr.dependencies_for(needs_propulsion) == []

    def test_no_dependencies_for_unlisted_category(self):
        assert GapRules().dependencies_for(_req("a", category="space_weather")) == []
