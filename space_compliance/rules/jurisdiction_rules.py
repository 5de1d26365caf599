"""
Jurisdiction Rules — national space law applicability, favorability and
side-by-side comparison.

Each jurisdiction is judged on its own: does its law reach this operator,
and how attractive is it as a licensing venue (a 0-100 favorability score
with the factors that produced it). The comparison matrix scores every
selected jurisdiction 1-5 on the same ten criteria.
"""

from __future__ import annotations

import logging
from typing import Callable, NamedTuple, Optional

from space_compliance.models.enums import EuRelationship, LiabilityRegime, LicensingStatus
from space_compliance.models.schemas import (
    ComparisonCriterion,
    CriterionValue,
    EuSpaceActPreview,
    Jurisdiction,
    JurisdictionNote,
    JurisdictionResult,
    OperatorProfile,
)
from space_compliance.rules.rules_config import RulesConfigStore, get_rules_store

logger = logging.getLogger(__name__)


class Favorability(NamedTuple):
    score: int
    factors: list[str]


# ── Applicability ────────────────────────────────────────

def check_applicability(
    jurisdiction: Jurisdiction, profile: OperatorProfile, covered: bool = True
) -> tuple[bool, str]:
    """
    Whether the jurisdiction's law reaches the operator, with the reason.

    ``covered`` says whether any of the jurisdiction's requirements matched
    the profile's activities. A limited-scope law is reported before that,
    and explicit exclusion rules after it.
    """
    activities = set(profile.activity_types)

    scope = jurisdiction.limited_scope
    if scope is not None and not activities & set(scope.activity_types):
        return False, scope.reason

    if not covered:
        return False, not_covered_reason(jurisdiction)

    for rule in jurisdiction.applicability_rules:
        if rule.activity_types is not None and not activities & set(rule.activity_types):
            continue
        if (
            profile.entity_nationality is not None
            and rule.entity_types is not None
            and profile.entity_nationality not in rule.entity_types
        ):
            continue
        if not rule.applies:
            return False, rule.description

    return True, f"Authorization required under {jurisdiction.legislation.name}."


def not_covered_reason(jurisdiction: Jurisdiction) -> str:
    return (
        f"{jurisdiction.name}'s space law does not specifically address this activity type. "
        "Additional regulatory consultation may be needed."
    )


# ── Costs ────────────────────────────────────────────────

def format_cost(jurisdiction: Jurisdiction) -> str:
    parts = []
    if jurisdiction.timeline.application_fee:
        parts.append(f"Application: {jurisdiction.timeline.application_fee}")
    if jurisdiction.timeline.annual_fee:
        parts.append(f"Annual: {jurisdiction.timeline.annual_fee}")
    if not parts:
        return "Contact authority for fee schedule"
    return " · ".join(parts)


# ── Comparison criteria ──────────────────────────────────

_EU_LABELS = {
    EuRelationship.SUPERSEDED: "Will be superseded",
    EuRelationship.COMPLEMENTARY: "Complementary",
    EuRelationship.PARALLEL: "Independent",
    EuRelationship.GAP: "Fills regulatory gap",
}
_EU_SCORES = {
    EuRelationship.COMPLEMENTARY: 5,
    EuRelationship.PARALLEL: 4,
    EuRelationship.SUPERSEDED: 3,
    EuRelationship.GAP: 2,
}
_LIABILITY_SCORES = {
    LiabilityRegime.CAPPED: 5,
    LiabilityRegime.NEGOTIABLE: 4,
    LiabilityRegime.TIERED: 3,
    LiabilityRegime.UNLIMITED: 2,
}


def _processing_time(j: Jurisdiction, reference_year: int) -> CriterionValue:
    weeks = j.timeline.processing_weeks
    avg = weeks.average
    score = 5 if avg <= 10 else 4 if avg <= 14 else 3 if avg <= 18 else 2 if avg <= 24 else 1
    return CriterionValue(value=f"{weeks.min}–{weeks.max} weeks", score=score)


def _application_fee(j: Jurisdiction, reference_year: int) -> CriterionValue:
    fee = j.timeline.application_fee or "Not specified"
    return CriterionValue(value=fee, score=5 if fee in ("Not specified", "None") else 3)


def _insurance_minimum(j: Jurisdiction, reference_year: int) -> CriterionValue:
    if not j.insurance.mandatory:
        return CriterionValue(value="Not mandatory", score=5)
    return CriterionValue(value=j.insurance.minimum_coverage or "Case-by-case", score=3)


def _indemnification(j: Jurisdiction, reference_year: int) -> CriterionValue:
    available = j.insurance.government_indemnification
    return CriterionValue(value="Yes" if available else "No", score=5 if available else 2)


def _liability_regime(j: Jurisdiction, reference_year: int) -> CriterionValue:
    regime = j.insurance.liability_regime
    return CriterionValue(value=regime.value.capitalize(), score=_LIABILITY_SCORES[regime])


def _deorbit(j: Jurisdiction, reference_year: int) -> CriterionValue:
    if not j.debris.deorbit_required:
        return CriterionValue(value="No requirement", score=4)
    return CriterionValue(value=j.debris.deorbit_timeline or "Required", score=3)


def _debris_plan(j: Jurisdiction, reference_year: int) -> CriterionValue:
    return CriterionValue(value="Mandatory" if j.debris.mitigation_plan else "Not required", score=3)


def _maturity(j: Jurisdiction, reference_year: int) -> CriterionValue:
    if j.legislation.status == "none":
        return CriterionValue(value="No law", score=1)
    age = reference_year - j.legislation.year_enacted
    if age >= 15:
        return CriterionValue(value="Very mature", score=5)
    if age >= 8:
        return CriterionValue(value="Mature", score=4)
    if age >= 4:
        return CriterionValue(value="Established", score=3)
    return CriterionValue(value="Recent", score=2)


def _remote_sensing(j: Jurisdiction, reference_year: int) -> CriterionValue:
    required = j.data_sensing.remote_sensing_license
    return CriterionValue(value="Required" if required else "Not required", score=3 if required else 4)


def _eu_impact(j: Jurisdiction, reference_year: int) -> CriterionValue:
    relation = j.eu_space_act
    return CriterionValue(
        value=_EU_LABELS[relation.relationship],
        score=_EU_SCORES[relation.relationship],
        notes=relation.transition_notes,
    )


class Criterion(NamedTuple):
    id: str
    label: str
    category: str
    evaluate: Callable[[Jurisdiction, int], CriterionValue]


CRITERIA: tuple[Criterion, ...] = (
    Criterion("processing_time", "Processing Time", "timeline", _processing_time),
    Criterion("application_fee", "Application Fee", "cost", _application_fee),
    Criterion("insurance_min", "Min. Insurance", "insurance", _insurance_minimum),
    Criterion("govt_indemnification", "Govt. Indemnification", "insurance", _indemnification),
    Criterion("liability_regime", "Liability Regime", "liability", _liability_regime),
    Criterion("deorbit_timeline", "Deorbit Requirement", "debris", _deorbit),
    Criterion("debris_plan", "Debris Mitigation Plan", "debris", _debris_plan),
    Criterion("regulatory_maturity", "Regulatory Maturity", "regulatory", _maturity),
    Criterion("remote_sensing", "Remote Sensing License", "regulatory", _remote_sensing),
    Criterion("eu_space_act", "EU Space Act Impact", "regulatory", _eu_impact),
)


# ── EU Space Act preview ─────────────────────────────────

OVERALL_GAP = (
    "The EU Space Act will fill significant regulatory gaps in some of your selected jurisdictions "
    "and harmonize requirements across all EU member states by 2030."
)
OVERALL_PARALLEL = (
    "Your selected jurisdictions maintain independent regimes from the EU Space Act. "
    "Separate compliance may be required for EU market access."
)
OVERALL_HARMONIZED = (
    "The EU Space Act (effective 2030) will harmonize authorization requirements across EU member "
    "states. National provisions will be gradually superseded or complemented by the unified EU "
    "framework."
)


def eu_space_act_preview(jurisdictions: list[Jurisdiction]) -> EuSpaceActPreview:
    notes: dict[str, JurisdictionNote] = {}
    for j in jurisdictions:
        relation = j.eu_space_act
        notes[j.code] = JurisdictionNote(
            relationship=relation.relationship,
            description=relation.description,
            key_changes=[f"{article}: {relation.relationship.value}" for article in relation.key_articles[:4]],
        )

    relationships = [j.eu_space_act.relationship for j in jurisdictions]
    if EuRelationship.GAP in relationships:
        overall = OVERALL_GAP
    elif relationships and all(r == EuRelationship.PARALLEL for r in relationships):
        overall = OVERALL_PARALLEL
    else:
        overall = OVERALL_HARMONIZED
    return EuSpaceActPreview(overall_relationship=overall, jurisdiction_notes=notes)


# ── Rule class ───────────────────────────────────────────

class JurisdictionRules:
    """Favorability scoring, comparison and advice across national jurisdictions."""

    def __init__(self, config_store: Optional[RulesConfigStore] = None):
        self._config_store = config_store or get_rules_store()

    def favorability(self, jurisdiction: Jurisdiction, profile: OperatorProfile) -> Favorability:
        config = self._config_store.get_jurisdiction_config()
        if jurisdiction.legislation.status == "none":
            return Favorability(config.no_law_score, [
                "No comprehensive space law — regulatory uncertainty",
                "EU Space Act (2030) will provide framework",
            ])

        score = config.base_score
        factors: list[str] = []

        avg = jurisdiction.timeline.processing_weeks.average
        if avg <= config.fast_weeks:
            score += config.fast_points
            factors.append("Fast licensing timeline")
        elif avg <= config.moderate_weeks:
            score += config.moderate_points
            factors.append("Moderate licensing timeline")
        else:
            score += config.slow_points
            factors.append("Longer licensing timeline")

        if jurisdiction.insurance.government_indemnification:
            score += config.indemnification_points
            factors.append("Government indemnification available")

        regime = jurisdiction.insurance.liability_regime
        if regime.value in config.liability_points:
            score += config.liability_points[regime.value]
            factors.append(
                "Capped liability regime" if regime == LiabilityRegime.CAPPED
                else f"{regime.value.capitalize()} liability terms"
            )

        year = jurisdiction.legislation.year_enacted
        if year <= config.mature_year:
            score += config.mature_points
            factors.append("Mature regulatory framework")
        elif year <= config.established_year:
            score += config.established_points
            factors.append("Established regulatory framework")

        for bonus in jurisdiction.favorability_bonuses:
            if bonus.activity_type is not None and bonus.activity_type not in profile.activity_types:
                continue
            if bonus.entity_size is not None and bonus.entity_size != profile.entity_size:
                continue
            score += bonus.points
            factors.append(bonus.factor)

        if jurisdiction.registration.national_registry:
            score += config.registry_points
            factors.append("National space registry maintained")

        return Favorability(max(0, min(100, score)), factors)

    def comparison_matrix(self, jurisdictions: list[Jurisdiction]) -> list[ComparisonCriterion]:
        reference_year = self._config_store.get_jurisdiction_config().reference_year
        return [
            ComparisonCriterion(
                id=c.id,
                label=c.label,
                category=c.category,
                values={j.code: c.evaluate(j, reference_year) for j in jurisdictions},
            )
            for c in CRITERIA
        ]

    def recommendations(self, results: list[JurisdictionResult], profile: OperatorProfile) -> list[str]:
        config = self._config_store.get_jurisdiction_config()
        recs: list[str] = []
        if not results:
            return recs

        ranked = sorted(results, key=lambda r: r.favorability_score, reverse=True)
        if len(ranked) > 1:
            top = ranked[0]
            recs.append(
                f"{top.name} scores highest ({top.favorability_score}/100) for your profile — "
                f"consider it as your primary jurisdiction."
            )
            fastest = min(
                ranked,
                key=lambda r: r.estimated_timeline.average if r.estimated_timeline else float("inf"),
            )
            if fastest.estimated_timeline is not None:
                recs.append(
                    f"For the fastest timeline, {fastest.name} offers "
                    f"{fastest.estimated_timeline.min}–{fastest.estimated_timeline.max} week processing."
                )

        if any(r.insurance_mandatory for r in results):
            recs.append(
                "Prepare insurance documentation early — most jurisdictions require mandatory "
                "third-party liability coverage before authorization."
            )

        if any(r.code not in config.non_eu_codes for r in results):
            recs.append(
                "Plan for EU Space Act transition by 2030 — EU member state national regimes will be "
                "harmonized under the new framework."
            )

        if profile.licensing_status == LicensingStatus.NEW_APPLICATION:
            recs.append(
                "For new applications, engage with the licensing authority early. Most NCAs offer "
                "pre-application consultations to discuss requirements and timelines."
            )

        if (profile.constellation_size or 0) > config.blanket_license_fleet:
            recs.append(
                "For constellation deployments, inquire about blanket licensing options — some "
                "jurisdictions allow a single authorization covering multiple identical spacecraft."
            )

        for r in results:
            if not r.is_applicable and r.legislation_status == "none":
                recs.append(
                    f"{r.name} currently lacks a comprehensive space law. Consider alternative "
                    f"jurisdictions for authorization, or monitor legislative developments there."
                )

        logger.debug(f"{len(recs)} jurisdiction recommendations before cap")
        return recs[: config.max_recommendations]
