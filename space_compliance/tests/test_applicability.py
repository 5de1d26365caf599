"""
Tests: Applicability matcher.

Run with:
    pytest space_compliance/tests/test_applicability.py -v
"""

import random

import pytest

from space_compliance.catalog.loader import load_catalog
from space_compliance.models.enums import Framework, OrbitRegime
from space_compliance.models.schemas import OperatorProfile, Requirement
from space_compliance.rules.applicability import failed_constraints, is_applicable, match
from space_compliance.rules.profile_validation import validate_profile


def _req(req_id: str, **applicability) -> Requirement:
    return Requirement(
        id=req_id,
        reference=f"REF {req_id}",
        title=f"Requirement {req_id}",
        framework=Framework.COPUOS,
        category="space_debris",
        binding_level="mandatory",
        severity="major",
        applicability=applicability,
    )


def _profile(**fields) -> OperatorProfile:
    data = {"operator_types": ["spacecraft_operator"], "activity_types": ["spacecraft_operation"]}
    data.update(fields)
    return OperatorProfile(**data)


class TestConstraints:
    def test_unconstrained_requirement_always_applies(self):
        assert is_applicable(_req("r1"), _profile())

    def test_orbit_regime_membership(self):
        req = _req("r1", orbit_regimes=["LEO", "MEO"])
        assert is_applicable(req, _profile(orbit_regime="LEO"))
        assert not is_applicable(req, _profile(orbit_regime="GEO"))

    def test_operator_types_any_of(self):
        req = _req("r1", operator_types=["launch_operator", "spacecraft_operator"])
        assert is_applicable(req, _profile())
        assert not is_applicable(req, _profile(operator_types=["launch_site_operator"]))

    def test_jurisdictions_any_of(self):
        req = _req("r1", jurisdictions=["FR"])
        assert is_applicable(req, _profile(jurisdictions=["BE", "FR"]))
        assert not is_applicable(req, _profile(jurisdictions=["BE"]))
        assert not is_applicable(req, _profile())
        assert failed_constraints(req, _profile()) == ["jurisdictions"]

    def test_excluded_operator_types(self):
        req = _req("r1", excluded_operator_types=["primary_data_provider"])
        assert is_applicable(req, _profile())
        assert not is_applicable(
            req, _profile(operator_types=["spacecraft_operator", "primary_data_provider"])
        )

    def test_third_country_role_is_matched(self):
        req = _req("r1", operator_types=["third_country_operator"])
        profile = _profile(establishment="third_country_eu_services")
        assert is_applicable(req, profile)

    def test_mass_thresholds(self):
        req = _req("r1", min_mass_kg=100, max_mass_kg=1000)
        assert is_applicable(req, _profile(mass_kg=100))
        assert is_applicable(req, _profile(mass_kg=1000))
        assert not is_applicable(req, _profile(mass_kg=99.9))
        assert not is_applicable(req, _profile(mass_kg=1500))

    def test_missing_numeric_value_does_not_restrict(self):
        req = _req("r1", min_mass_kg=100, max_altitude_km=2000)
        assert is_applicable(req, _profile())

    def test_missing_orbit_regime_does_not_restrict_membership(self):
        assert is_applicable(_req("r1", orbit_regimes=["GEO"]), _profile())

    def test_missing_capability_fails_flag(self):
        req = _req("r1", requires_propulsion=True)
        assert not is_applicable(req, _profile())
        assert not is_applicable(req, _profile(has_propulsion=False))
        assert is_applicable(req, _profile(has_propulsion=True))

    def test_leo_only_needs_known_leo_orbit(self):
        req = _req("r1", leo_only=True)
        assert is_applicable(req, _profile(orbit_regime=OrbitRegime.LEO))
        assert not is_applicable(req, _profile(orbit_regime=OrbitRegime.MEO))
        assert not is_applicable(req, _profile())

    def test_ngso_only_uses_derived_flag(self):
        req = _req("r1", ngso_only=True)
        assert is_applicable(req, _profile(orbit_regime="MEO"))
        assert not is_applicable(req, _profile(orbit_regime="GEO"))

    def test_constellation_tier_and_size(self):
        req = _req("r1", constellations_only=True, constellation_tiers=["large", "mega"], min_constellation_size=100)
        assert is_applicable(req, _profile(is_constellation=True, constellation_size=120))
        assert not is_applicable(req, _profile(is_constellation=True, constellation_size=50))
        assert not is_applicable(req, _profile(is_constellation=False))

    def test_failed_constraints_lists_each_failure(self):
        req = _req("r1", orbit_regimes=["GEO"], requires_propulsion=True, min_mass_kg=10)
        failed = failed_constraints(req, _profile(orbit_regime="LEO", mass_kg=500))
        assert failed == ["orbit_regimes", "requires_propulsion"]


class TestMatch:
    def test_preserves_catalog_order(self):
        reqs = [_req("c"), _req("a", orbit_regimes=["GEO"]), _req("b")]
        matched = match(_profile(orbit_regime="LEO"), reqs)
        assert [r.id for r in matched] == ["c", "b"]

    def test_no_duplicates(self):
        reqs = [_req("a"), _req("b"), _req("a")]
        matched = match(_profile(), reqs)
        assert [r.id for r in matched] == ["a", "b"]

    def test_result_is_subset_of_catalog(self):
        catalog = load_catalog(Framework.COPUOS)
        profile = validate_profile(
            {"operator_types": ["satellite_operator"], "activity_types": ["orbital_operations"],
             "orbit_regime": "LEO", "mass_kg": 250},
            Framework.COPUOS,
        )
        ids = {r.id for r in catalog.requirements}
        matched = match(profile, catalog)
        assert matched
        assert all(r.id in ids for r in matched)

    def test_operator_type_order_does_not_change_result(self):
        catalog = load_catalog(Framework.UK_SPACE_ACT)
        first = validate_profile(
            {"operator_types": ["launch_operator", "satellite_operator"],
             "activity_types": ["launch", "orbital_operations"], "launch_to_orbit": True},
            Framework.UK_SPACE_ACT,
        )
        second = validate_profile(
            {"operator_types": ["satellite_operator", "launch_operator"],
             "activity_types": ["orbital_operations", "launch"], "launch_to_orbit": True},
            Framework.UK_SPACE_ACT,
        )
        assert [r.id for r in match(first, catalog)] == [r.id for r in match(second, catalog)]

    @pytest.mark.parametrize("seed", [1, 7, 42])
    def test_catalog_order_does_not_change_matched_set(self, seed):
        catalog = load_catalog(Framework.EU_SPACE_ACT)
        profile = validate_profile(
            {"operator_types": ["spacecraft_operator"], "activity_types": ["spacecraft_operation"],
             "orbit_regime": "LEO", "mass_kg": 550, "has_propulsion": True, "entity_size": "medium",
             "establishment": "eu"},
            Framework.EU_SPACE_ACT,
        )
        shuffled = list(catalog.requirements)
        random.Random(seed).shuffle(shuffled)
        expected = {r.id for r in match(profile, catalog)}
        assert {r.id for r in match(profile, shuffled)} == expected
        assert [r.id for r in match(profile, shuffled)] == [r.id for r in shuffled if r.id in expected]

    def test_no_match_is_empty_not_error(self):
        catalog = load_catalog(Framework.US_REGULATORY)
        profile = validate_profile(
            {"operator_types": ["ground_segment_operator"], "activity_types": ["tracking"]}
        )
        assert match(profile, catalog) == []


class TestEuLeoScenario:
    """Single 550 kg LEO satellite with propulsion, EU-established, standard regime."""

    @pytest.fixture
    def matched(self):
        profile = validate_profile(
            {
                "operator_types": ["spacecraft_operator"],
                "activity_types": ["spacecraft_operation"],
                "orbit_regime": "LEO",
                "mass_kg": 550,
                "has_propulsion": True,
                "is_constellation": False,
                "entity_size": "medium",
                "establishment": "eu",
            },
            Framework.EU_SPACE_ACT,
        )
        return match(profile, load_catalog(Framework.EU_SPACE_ACT))

    def test_only_leo_or_unrestricted_orbits(self, matched):
        for r in matched:
            regimes = r.applicability.orbit_regimes
            assert regimes is None or OrbitRegime.LEO in regimes

    def test_excludes_constellation_only_requirements(self, matched):
        ids = {r.id for r in matched}
        assert not any(r.applicability.constellations_only for r in matched)
        assert "eu-debris-light-pollution" not in ids
        assert "eu-debris-large-constellation-management" not in ids

    def test_includes_core_debris_requirements(self, matched):
        ids = {r.id for r in matched}
        assert {"eu-art-62", "eu-debris-trackability", "eu-debris-end-of-life-leo", "eu-art-101"} <= ids

    def test_maneuverability_defaults_to_absent(self, matched):
        assert "eu-debris-maneuverability" not in {r.id for r in matched}
