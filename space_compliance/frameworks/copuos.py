"""
UN COPUOS / IADC / ISO 24113 — international technical guidelines.

Non-binding guidance, so no licences and no licensing override in the risk
chain. Adds mission-specific recommendations and the mapping between the
guidelines and the EU Space Act debris module.
"""

from __future__ import annotations

from space_compliance.frameworks.base_framework import BaseFramework, address_high_priority
from space_compliance.models.enums import AssessmentStatus, Framework, OrbitRegime
from space_compliance.models.schemas import AssessmentResult, Requirement
from space_compliance.rules.cross_reference import group_by_source, requirements_referencing

REGISTRATION_GUIDELINE = "copuos-lts-a5"

DEBRIS_CATEGORIES = ("space_debris", "disposal", "design_passivation")

# EU Space Act debris-module articles with COPUOS/IADC/ISO counterparts
EU_DEBRIS_ARTICLES = (
    "Art. 63",  # trackability
    "Art. 64",  # collision avoidance service
    "Art. 65",  # collision avoidance procedures
    "Art. 66",  # maneuverability
    "Art. 67",  # debris mitigation
    "Art. 72",  # end-of-life disposal
    "Art. 73",  # re-entry
)


class CopuosFramework(BaseFramework):
    framework = Framework.COPUOS
    max_recommendations = 8

    def _real_process(self, result: AssessmentResult) -> AssessmentResult:
        profile = result.profile
        by_category = result.score.by_category
        recs: list[str] = []

        if profile.orbit_regime == OrbitRegime.LEO and by_category.get("disposal", 100) < 80:
            recs.append(
                "Priority: Develop 25-year deorbit compliance plan as per IADC 5.3.2 "
                "and ISO 24113:2024 §6.4.2"
            )
        if profile.orbit_regime == OrbitRegime.GEO and by_category.get("disposal", 100) < 80:
            recs.append(
                "Priority: Ensure propellant budget includes graveyard orbit transfer reserve (~11 m/s)"
            )

        if by_category.get("collision_avoidance", 100) < 70:
            recs.append("Subscribe to a conjunction warning service (EUSST, LeoLabs, or equivalent)")
            if profile.has_propulsion:
                recs.append("Develop and document collision avoidance maneuver procedures")

        if by_category.get("design_passivation", 100) < 80:
            recs.append("Develop comprehensive passivation plan for all stored energy sources")

        if any(
            g.requirement_id == REGISTRATION_GUIDELINE and g.status != AssessmentStatus.COMPLIANT
            for g in result.gap_analysis
        ):
            recs.append("Complete UN space object registration through UNOOSA")

        recs.extend(address_high_priority(result.gap_analysis))

        if (
            profile.is_constellation
            and (profile.constellation_size or 0) > 10
            and by_category.get("collision_avoidance", 100) < 90
        ):
            recs.append("Implement automated constellation-wide collision avoidance system")

        result.recommendations = recs
        return result

    # ── EU cross-reference views ─────────────────────────

    def guidelines_for_article(self, article: str) -> dict[str, list[Requirement]]:
        """Guidelines citing an EU Space Act article, keyed by source (COPUOS, IADC, ISO)."""
        found = requirements_referencing(self.catalog, Framework.EU_SPACE_ACT, article)
        grouped = group_by_source(found)
        return {source: grouped.get(source, []) for source in self.catalog.sources}

    def debris_guidelines(self) -> list[Requirement]:
        return [r for r in self.catalog.requirements if r.category in DEBRIS_CATEGORIES]

    def eu_debris_module_mapping(self) -> dict[str, list[Requirement]]:
        """Each EU debris article → every guideline citing it, COPUOS then IADC then ISO."""
        mapping = {}
        for article in EU_DEBRIS_ARTICLES:
            grouped = self.guidelines_for_article(article)
            mapping[article] = [r for source in grouped.values() for r in source]
        return mapping
