"""
EU Space Act — authorization regime for EU and third-country operators.

Extras: status of the eight product modules, regime details (light or
standard, key dates, authorization cost and path), the operator's NIS2
entity classification and a phased compliance checklist for its operator
type.
"""

from __future__ import annotations

from datetime import date

from space_compliance.frameworks.base_framework import BaseFramework, address_high_priority
from space_compliance.models.enums import Establishment, Framework, ModuleStatusType, Nis2Classification
from space_compliance.models.schemas import (
    AssessmentResult,
    Catalog,
    KeyDate,
    OperatorChecklist,
    OperatorProfile,
    RegimeDetails,
)
from space_compliance.rules.module_status import MODULES, compute_module_statuses
from space_compliance.rules.nis2_scoping import classify_nis2
from space_compliance.rules.scoring import round_half_up

TOTAL_ARTICLES = 119

LAUNCH_OPERATOR_TYPES = ("launch_operator", "launch_site_operator")

MODULE_CATEGORIES = {m.id: m.slug for m in MODULES}

# checklist key -> phases, in the order they are worked through
CHECKLIST_PHASES: dict[str, tuple[str, ...]] = {
    "third_country_operator": ("pre_registration", "ongoing"),
    "spacecraft_operator_eu": ("pre_authorization", "ongoing", "end_of_life"),
    "launch_operator_eu": ("pre_authorization", "operational"),
}


def key_dates(is_light_regime: bool) -> list[KeyDate]:
    dates = [
        KeyDate(on=date(2030, 1, 1), description="EU Space Act enters into application"),
        KeyDate(on=date(2031, 12, 31), description="End of transitional period for existing operators"),
    ]
    if is_light_regime:
        dates.append(KeyDate(
            on=date(2031, 12, 31),
            description="EFD deadline for small enterprises & research institutions",
        ))
    dates.append(KeyDate(on=date(2035, 1, 1), description="Five-year regulatory review"))
    return dates


def authorization_cost(profile: OperatorProfile) -> str:
    primary = profile.operator_types[0]
    if profile.is_third_country:
        return "Registration fee (TBD by EUSPA)"
    if primary == "spacecraft_operator":
        return "~€100,000 per satellite platform"
    if primary in LAUNCH_OPERATOR_TYPES:
        return "~€150,000-300,000 per launch system"
    return "€50,000-100,000 estimated"


def authorization_path(profile: OperatorProfile) -> str:
    if profile.is_third_country:
        return "EUSPA Registration → Commission Decision"
    if profile.establishment == Establishment.EU:
        return "National Authority (NCA) → URSO Registration"
    return "Determine establishment status"


def operator_checklist(catalog: Catalog, profile: OperatorProfile) -> OperatorChecklist:
    """Checklist for the operator's primary type; third-country operators get the registration track."""
    primary = profile.operator_types[0]
    if profile.is_third_country:
        key, phases = "third_country_operator", CHECKLIST_PHASES["third_country_operator"]
    elif primary == "spacecraft_operator":
        key, phases = "spacecraft_operator_eu", CHECKLIST_PHASES["spacecraft_operator_eu"]
    elif primary in LAUNCH_OPERATOR_TYPES:
        key, phases = "launch_operator_eu", CHECKLIST_PHASES["launch_operator_eu"]
    else:
        # other EU operator types follow the spacecraft track without end-of-life
        key, phases = "spacecraft_operator_eu", ("pre_authorization", "ongoing")

    available = catalog.operator_checklists.get(key, {})
    return OperatorChecklist(
        operator_type=key,
        phases={phase: list(available.get(phase, ())) for phase in phases},
    )


class EuSpaceActFramework(BaseFramework):
    framework = Framework.EU_SPACE_ACT
    max_recommendations = 8

    def _real_process(self, result: AssessmentResult) -> AssessmentResult:
        profile = result.profile
        result.module_statuses = compute_module_statuses(
            result.applicable_requirements, profile.is_light_regime
        )
        result.regime = self.regime_details(profile, len(result.applicable_requirements))
        result.nis2 = classify_nis2(profile)
        result.operator_checklist = operator_checklist(self.catalog, profile)
        result.recommendations = self._recommendations(result)
        return result

    def regime_details(self, profile: OperatorProfile, applicable_count: int) -> RegimeDetails:
        total = self.catalog.total_articles or TOTAL_ARTICLES
        light = profile.is_light_regime
        return RegimeDetails(
            operator_roles=list(profile.operator_roles),
            offers_eu_services=profile.offers_eu_services or profile.is_third_country,
            regime="light" if light else "standard",
            regime_label="Light Regime" if light else "Standard (Full Requirements)",
            regime_reason=(
                "Eligible for simplified resilience and delayed EFD (Art. 10)"
                if light
                else "Full compliance required across all pillars"
            ),
            constellation_tier=profile.constellation_tier,
            applicable_count=applicable_count,
            total_articles=total,
            applicable_percentage=round_half_up(applicable_count / total * 100),
            key_dates=key_dates(light),
            estimated_authorization_cost=authorization_cost(profile),
            authorization_path=authorization_path(profile),
        )

    def _recommendations(self, result: AssessmentResult) -> list[str]:
        recs: list[str] = []
        for module in result.module_statuses:
            if module.status == ModuleStatusType.REQUIRED:
                category_score = result.score.by_category.get(MODULE_CATEGORIES[module.id], 100)
                if category_score < 80:
                    recs.append(f"Priority: Close {module.name} gaps ({module.article_range})")
        if result.regime and result.regime.regime == "light":
            recs.append(
                "Use Light Regime simplifications (Art. 10) and plan the environmental footprint "
                "declaration before 31 December 2031"
            )
        if result.nis2 and result.nis2.classification != Nis2Classification.OUT_OF_SCOPE:
            recs.append(
                f"Align cybersecurity measures with NIS2 obligations as {result.nis2.classification.value} "
                f"entity ({result.nis2.article_ref})"
            )
        recs.extend(address_high_priority(result.gap_analysis))
        return recs
