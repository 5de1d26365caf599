"""
Tests: Compliance scoring engine.

Run with:
    pytest space_compliance/tests/test_scoring.py -v
"""

import json

from space_compliance.models.enums import Framework
from space_compliance.models.schemas import Requirement, RequirementAssessment
from space_compliance.rules.rules_config import RulesConfigStore
from space_compliance.rules.scoring import ScoringRules, assessment_map, round_half_up, score


def _req(req_id: str, severity: str = "major", **fields) -> Requirement:
    data = {
        "id": req_id,
        "reference": req_id.upper(),
        "title": req_id,
        "framework": Framework.US_REGULATORY,
        "category": "licensing",
        "binding_level": "mandatory",
        "severity": severity,
    }
    data.update(fields)
    return Requirement(**data)


def _a(req_id: str, status: str) -> RequirementAssessment:
    return RequirementAssessment(requirement_id=req_id, status=status)


class TestGroupScore:
    def test_all_compliant_is_100(self):
        reqs = [_req("a", "critical"), _req("b", "minor")]
        result = score(reqs, [_a("a", "compliant"), _a("b", "compliant")])
        assert result.overall == 100

    def test_all_non_compliant_is_0(self):
        reqs = [_req("a", "critical"), _req("b", "minor")]
        result = score(reqs, [_a("a", "non_compliant"), _a("b", "non_compliant")])
        assert result.overall == 0

    def test_all_partial_is_50(self):
        reqs = [_req("a", "critical"), _req("b", "major"), _req("c", "minor")]
        result = score(reqs, [_a("a", "partial"), _a("b", "partial"), _a("c", "partial")])
        assert result.overall == 50

    def test_unassessed_counts_as_zero(self):
        reqs = [_req("a", "critical"), _req("b", "critical")]
        assert score(reqs, [_a("a", "compliant")]).overall == 50

    def test_severity_weighting(self):
        # 3 + 0 + 0.5 achieved of 3 + 2 + 1
        reqs = [_req("a", "critical"), _req("b", "major"), _req("c", "minor")]
        result = score(reqs, [_a("a", "compliant"), _a("b", "non_compliant"), _a("c", "partial")])
        assert result.overall == 58

    def test_empty_group_is_vacuously_100(self):
        result = score([], [])
        assert result.overall == 100
        assert result.mandatory == 100
        assert result.recommended == 100

    def test_not_applicable_leaves_the_group(self):
        reqs = [_req("a", "critical"), _req("b", "minor")]
        with_na = score(reqs, [_a("a", "compliant"), _a("b", "not_applicable")])
        without = score([reqs[0]], [_a("a", "compliant")])
        assert with_na.overall == without.overall == 100

    def test_all_not_applicable_is_100(self):
        reqs = [_req("a", "critical"), _req("b", "minor")]
        assert score(reqs, [_a("a", "not_applicable"), _a("b", "not_applicable")]).overall == 100

    def test_rounds_half_up(self):
        # 0.5 of 4 → 12.5
        reqs = [_req("a", "minor"), _req("b", "critical")]
        assert score(reqs, [_a("a", "partial"), _a("b", "non_compliant")]).overall == 13

    def test_round_half_up_helper(self):
        assert round_half_up(12.5) == 13
        assert round_half_up(0.5) == 1
        assert round_half_up(2.4999) == 2

    def test_stale_assessments_ignored(self):
        reqs = [_req("a", "critical")]
        assert score(reqs, [_a("a", "compliant"), _a("gone", "non_compliant")]).overall == 100

    def test_last_duplicate_assessment_wins(self):
        amap = assessment_map([_a("a", "non_compliant"), _a("a", "compliant")])
        assert amap["a"].status.value == "compliant"
        assert score([_req("a")], [_a("a", "non_compliant"), _a("a", "compliant")]).overall == 100


class TestDimensions:
    def test_by_category_and_agency(self):
        reqs = [
            _req("a", "critical", category="licensing", agency="FCC"),
            _req("b", "critical", category="orbital_debris", agency="FCC"),
            _req("c", "major", category="launch_safety", agency="FAA"),
        ]
        result = score(reqs, [_a("a", "compliant"), _a("b", "non_compliant"), _a("c", "partial")])
        assert result.by_category == {"licensing": 100, "orbital_debris": 0, "launch_safety": 50}
        assert result.by_agency == {"FCC": 50, "FAA": 50}

    def test_by_license_type(self):
        reqs = [
            _req("a", license_types=["fcc_space_station", "fcc_spectrum"]),
            _req("b", license_types=["fcc_space_station"]),
        ]
        result = score(reqs, [_a("a", "compliant"), _a("b", "non_compliant")])
        assert result.by_license_type == {"fcc_space_station": 50, "fcc_spectrum": 100}

    def test_by_source(self):
        reqs = [_req("a", source="IADC"), _req("b", source="ISO")]
        result = score(reqs, [_a("a", "compliant")])
        assert result.by_source == {"IADC": 100, "ISO": 0}

    def test_mandatory_and_recommended(self):
        reqs = [
            _req("a", binding_level="mandatory"),
            _req("b", binding_level="recommended"),
            _req("c", binding_level="guidance"),
            _req("d", binding_level="best_practice"),
        ]
        result = score(reqs, [_a("a", "compliant"), _a("b", "non_compliant"), _a("c", "compliant")])
        assert result.mandatory == 100
        # b, c, d folded together: 2 of 6
        assert result.recommended == 33


class TestScoringConfig:
    def test_weights_from_overrides_file(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"scoring": {"severity_weights": {"critical": 1, "major": 1, "minor": 1}}}))
        rules = ScoringRules(RulesConfigStore(str(path)))
        reqs = [_req("a", "critical"), _req("b", "minor")]
        amap = assessment_map([_a("a", "compliant")])
        assert rules.group_score(reqs, amap) == 50

    def test_update_config_invalidates_cache(self, tmp_path):
        store = RulesConfigStore(str(tmp_path / "rules.json"))
        rules = ScoringRules(store)
        reqs = [_req("a", "critical"), _req("b", "minor")]
        amap = assessment_map([_a("a", "compliant")])
        assert rules.group_score(reqs, amap) == 75
        assert store.update_config("scoring", {"severity_weights": {"critical": 1, "minor": 3}})
        assert rules.group_score(reqs, amap) == 25
