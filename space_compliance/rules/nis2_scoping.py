"""
NIS2 Scoping — essential / important / out-of-scope entity classification
for space operators (NIS2 Annex I, Sector 11).

Rules are evaluated in order; the first whose condition holds decides.
"""

from __future__ import annotations

import logging
from typing import Callable, NamedTuple

from space_compliance.models.enums import EntitySize, Establishment, Nis2Classification
from space_compliance.models.schemas import Nis2Result, OperatorProfile

logger = logging.getLogger(__name__)


class ScopingRule(NamedTuple):
    applies: Callable[[OperatorProfile], bool]
    classification: Nis2Classification
    reason: str
    article_ref: str


def _non_eu(p: OperatorProfile) -> bool:
    return p.establishment is not None and p.establishment != Establishment.EU


def _critical_service(p: OperatorProfile) -> bool:
    return p.operates_ground_infra or p.operates_satcom or p.provides_launch_services


SCOPING_RULES: tuple[ScopingRule, ...] = (
    ScopingRule(
        _non_eu,
        Nis2Classification.OUT_OF_SCOPE,
        "NIS2 primarily applies to entities established in EU member states. Non-EU entities "
        "providing services in the EU may need to designate an EU representative under Art. 26.",
        "NIS2 Art. 2, Art. 26",
    ),
    ScopingRule(
        lambda p: p.entity_size == EntitySize.MICRO and p.operates_satcom,
        Nis2Classification.IMPORTANT,
        "Although micro enterprises are generally excluded, satellite communications providers "
        "may be designated as important entities by member states under Art. 2(2)(b) due to the "
        "critical nature of SATCOM services.",
        "NIS2 Art. 2(2)(b)",
    ),
    ScopingRule(
        lambda p: p.entity_size == EntitySize.MICRO,
        Nis2Classification.OUT_OF_SCOPE,
        "Micro enterprises (< 10 employees, < €2M turnover) are generally excluded from NIS2 "
        "scope under Art. 2(1). However, member states may designate critical space operators "
        "regardless of size under Art. 2(2).",
        "NIS2 Art. 2(1)",
    ),
    ScopingRule(
        lambda p: p.entity_size == EntitySize.LARGE,
        Nis2Classification.ESSENTIAL,
        "Large entities (> 250 employees or > €50M turnover) operating in the space sector "
        "(NIS2 Annex I, Sector 11) are classified as essential entities under Art. 3(1).",
        "NIS2 Art. 3(1)(a)",
    ),
    ScopingRule(
        lambda p: p.entity_size == EntitySize.MEDIUM and (p.operates_ground_infra or p.operates_satcom),
        Nis2Classification.ESSENTIAL,
        "Medium entities operating critical space infrastructure (ground stations, SATCOM) may "
        "be classified as essential entities by member states under Art. 3(1)(e) due to the "
        "criticality of space infrastructure services.",
        "NIS2 Art. 3(1)(e)",
    ),
    ScopingRule(
        lambda p: p.entity_size == EntitySize.MEDIUM,
        Nis2Classification.IMPORTANT,
        "Medium entities (50-250 employees) in the space sector (NIS2 Annex I) are classified as "
        "important entities under Art. 3(2). This means full NIS2 compliance is required, with "
        "lighter supervisory measures than essential entities.",
        "NIS2 Art. 3(2)",
    ),
    ScopingRule(
        lambda p: p.entity_size == EntitySize.SMALL and _critical_service(p),
        Nis2Classification.IMPORTANT,
        "Small entities providing critical space services (ground infrastructure, SATCOM, "
        "launch services) may be designated as important entities by member states under "
        "Art. 2(2)(b), as disruption could have significant impact on public safety or "
        "national security.",
        "NIS2 Art. 2(2)(b)",
    ),
    ScopingRule(
        lambda p: p.entity_size == EntitySize.SMALL,
        Nis2Classification.OUT_OF_SCOPE,
        "Small enterprises (< 50 employees, < €10M turnover) are generally excluded from NIS2 "
        "under Art. 2(1), unless designated by a member state under Art. 2(2). Monitor your "
        "national authority's designations.",
        "NIS2 Art. 2(1), Art. 2(2)",
    ),
    ScopingRule(
        lambda p: True,
        Nis2Classification.OUT_OF_SCOPE,
        "Based on your organization's profile, you do not appear to fall within the scope of "
        "NIS2. However, member states may designate additional space operators under Art. 2(2). "
        "Consult your national competent authority.",
        "NIS2 Art. 2",
    ),
)


def classify_nis2(profile: OperatorProfile) -> Nis2Result:
    rule = next(r for r in SCOPING_RULES if r.applies(profile))
    logger.debug(f"NIS2 classification: {rule.classification.value} ({rule.article_ref})")
    return Nis2Result(
        classification=rule.classification,
        reason=rule.reason,
        article_ref=rule.article_ref,
    )
