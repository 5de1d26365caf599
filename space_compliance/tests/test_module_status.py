"""
Tests: EU Space Act module status.

Run with:
    pytest space_compliance/tests/test_module_status.py -v
"""

from space_compliance.catalog.loader import load_catalog
from space_compliance.models.enums import Framework, ModuleStatusType
from space_compliance.models.schemas import Requirement
from space_compliance.rules.applicability import match
from space_compliance.rules.module_status import (
    MODULES,
    compute_module_status,
    compute_module_statuses,
    normalize_compliance_type,
)
from space_compliance.rules.profile_validation import validate_profile

DEBRIS = next(m for m in MODULES if m.slug == "debris")


def _article(number: int, compliance_type: str) -> Requirement:
    return Requirement(
        id=f"eu-art-{number}",
        reference=f"Art. {number}",
        title=f"Article {number}",
        framework=Framework.EU_SPACE_ACT,
        category="debris",
        binding_level="mandatory",
        severity="major",
        article_number=number,
        compliance_type=compliance_type,
    )


def _eu_profile(entity_size: str):
    return validate_profile(
        {
            "operator_types": ["spacecraft_operator"],
            "activity_types": ["spacecraft_operation"],
            "orbit_regime": "LEO",
            "mass_kg": 550,
            "has_propulsion": True,
            "entity_size": entity_size,
            "establishment": "eu",
        },
        Framework.EU_SPACE_ACT,
    )


class TestStatusPrecedence:
    def test_empty_module_is_not_applicable(self):
        status = compute_module_status(DEBRIS, [], is_light_regime=False)
        assert status.status == ModuleStatusType.NOT_APPLICABLE
        assert status.article_count == 0

    def test_mandatory_is_required(self):
        reqs = [_article(62, "mandatory_pre_activity"), _article(65, "mandatory_ongoing")]
        status = compute_module_status(DEBRIS, reqs, is_light_regime=False)
        assert status.status == ModuleStatusType.REQUIRED
        assert status.summary == "Full compliance required with 2 articles."

    def test_light_regime_mixed_module_is_simplified(self):
        reqs = [_article(62, "mandatory"), _article(103, "conditional_simplification")]
        status = compute_module_status(DEBRIS, reqs, is_light_regime=True)
        assert status.status == ModuleStatusType.SIMPLIFIED
        assert "Light Regime" in status.summary

    def test_mixed_module_outside_light_regime_is_required(self):
        reqs = [_article(62, "mandatory"), _article(103, "conditional_simplification")]
        status = compute_module_status(DEBRIS, reqs, is_light_regime=False)
        assert status.status == ModuleStatusType.REQUIRED

    def test_simplified_only_in_light_regime(self):
        reqs = [_article(103, "conditional_simplified")]
        assert compute_module_status(DEBRIS, reqs, True).status == ModuleStatusType.SIMPLIFIED
        assert compute_module_status(DEBRIS, reqs, False).status == ModuleStatusType.RECOMMENDED

    def test_informational_only_is_recommended(self):
        status = compute_module_status(DEBRIS, [_article(102, "voluntary")], is_light_regime=False)
        assert status.status == ModuleStatusType.RECOMMENDED
        assert status.summary == "1 relevant article for your operation."

    def test_articles_outside_range_ignored(self):
        status = compute_module_status(DEBRIS, [_article(40, "mandatory")], is_light_regime=False)
        assert status.status == ModuleStatusType.NOT_APPLICABLE

    def test_compliance_type_aliases(self):
        assert normalize_compliance_type("mandatory_ongoing") == "mandatory"
        assert normalize_compliance_type("conditional_simplification") == "conditional_simplified"
        assert normalize_compliance_type(None) == ""
        assert normalize_compliance_type("informational") == "informational"


class TestCatalogModules:
    def test_eight_modules_in_order(self):
        statuses = compute_module_statuses([], is_light_regime=False)
        assert [s.id for s in statuses] == ["01", "02", "03", "04", "05", "06", "07", "08"]
        assert all(s.status == ModuleStatusType.NOT_APPLICABLE for s in statuses)

    def test_debris_required_in_standard_regime(self):
        profile = _eu_profile("medium")
        applicable = match(profile, load_catalog(Framework.EU_SPACE_ACT))
        statuses = {s.id: s for s in compute_module_statuses(applicable, profile.is_light_regime)}
        assert statuses["05"].status == ModuleStatusType.REQUIRED

    def test_debris_simplified_in_light_regime(self):
        profile = _eu_profile("small")
        assert profile.is_light_regime
        applicable = match(profile, load_catalog(Framework.EU_SPACE_ACT))
        statuses = {s.id: s for s in compute_module_statuses(applicable, profile.is_light_regime)}
        assert statuses["05"].status == ModuleStatusType.SIMPLIFIED
