"""
Base class that every regulatory framework inherits.

Design:
  - `assess()` runs the shared pipeline: match, score, classify risk,
    analyse gaps, collect cross-framework overlaps.
  - `_real_process()` is the single abstract method; each framework adds
    its recommendations and extras to the result there.
  - Required licences and agencies default to none; frameworks that issue
    licences override `required_licenses()` / `required_agencies()`.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from space_compliance.catalog.loader import load_catalog
from space_compliance.models.enums import AssessmentStatus, DocumentStatus, Framework, Priority
from space_compliance.models.schemas import (
    AssessmentResult,
    Catalog,
    ChecklistItem,
    GapAnalysisResult,
    LicenseSummary,
    OperatorProfile,
    Requirement,
    RequirementAssessment,
)
from space_compliance.rules.applicability import match
from space_compliance.rules.cross_reference import overlaps
from space_compliance.rules.gap_rules import GapRules
from space_compliance.rules.risk_rules import RiskRules
from space_compliance.rules.rules_config import RulesConfigStore, get_rules_store
from space_compliance.rules.scoring import ScoringRules, assessment_map

logger = logging.getLogger(__name__)

_DOCUMENT_ORDER = {DocumentStatus.MISSING: 0, DocumentStatus.PARTIAL: 1, DocumentStatus.COMPLETE: 2}


class BaseFramework(ABC):
    """Abstract base for all regulatory frameworks."""

    framework: Framework  # set in each subclass
    max_recommendations: int = 8

    def __init__(self, config_store: Optional[RulesConfigStore] = None):
        self.config_store = config_store or get_rules_store()
        self.scoring = ScoringRules(self.config_store)
        self.risk = RiskRules(self.config_store)
        self.gaps = GapRules(self.config_store)

    @property
    def catalog(self) -> Catalog:
        return load_catalog(self.framework)

    # ── Public entry point ───────────────────────────────

    def assess(
        self,
        profile: OperatorProfile,
        assessments: Iterable[RequirementAssessment] = (),
    ) -> AssessmentResult:
        """Full assessment of one profile against this framework's catalog."""
        t0 = time.perf_counter()
        catalog = self.catalog
        assessments = list(assessments)
        logger.info(f"▶ [{self.framework.value}] assessing {len(assessments)} assessment record(s)")

        applicable = match(profile, catalog)
        score = self.scoring.score(applicable, assessments, catalog)
        result = AssessmentResult(
            framework=self.framework,
            catalog_version=catalog.version,
            catalog_fingerprint=catalog.fingerprint,
            profile=profile,
            applicable_requirements=applicable,
            assessments=assessments,
            score=score,
            risk_level=self.risk.classify_risk(
                score, applicable, assessments, catalog.licensing_category
            ),
            gap_analysis=self.gaps.analyze_gaps(applicable, assessments, self.framework),
            overlaps=overlaps(applicable),
            required_licenses=self.required_licenses(profile),
            required_agencies=self.required_agencies(profile),
        )

        result = self._real_process(result)
        result.recommendations = result.recommendations[: self.max_recommendations]

        elapsed = time.perf_counter() - t0
        logger.info(
            f"✔ [{self.framework.value}] {len(applicable)}/{len(catalog.requirements)} applicable, "
            f"score {score.overall}, risk {result.risk_level.value}, "
            f"{len(result.gap_analysis)} gaps in {elapsed:.3f}s"
        )
        return result

    # ── Hooks ────────────────────────────────────────────

    def required_licenses(self, profile: OperatorProfile) -> list[str]:
        return []

    def required_agencies(self, profile: OperatorProfile) -> list[str]:
        return []

    def license_summary(
        self,
        result: AssessmentResult,
        license_type: str,
        agency: Optional[str] = None,
        cfr_part: Optional[str] = None,
    ) -> LicenseSummary:
        """Score and gaps over the applicable requirements one licence covers."""
        scoped = [r for r in result.applicable_requirements if license_type in r.license_types]
        return LicenseSummary(
            license_type=license_type,
            agency=agency,
            cfr_part=cfr_part,
            requirement_ids=[r.id for r in scoped],
            compliance_score=self.scoring.group_score(scoped, assessment_map(result.assessments)),
            gaps=self.gaps.analyze_gaps(scoped, result.assessments, self.framework),
        )

    @abstractmethod
    def _real_process(self, result: AssessmentResult) -> AssessmentResult:
        """Add recommendations and framework extras. Must be overridden."""
        raise NotImplementedError(f"{self.framework.value} has no assessment extras")


# ── Shared helpers ───────────────────────────────────────


def address_high_priority(
    gaps: list[GapAnalysisResult], limit: int = 3, with_agency: bool = False
) -> list[str]:
    """``Address: ...`` lines for the first high-priority gaps."""
    lines = []
    for gap in [g for g in gaps if g.priority == Priority.HIGH][:limit]:
        if with_agency:
            lines.append(f"Address: {gap.recommendation} ({gap.agency})")
        else:
            lines.append(f"Address: {gap.recommendation}")
    return lines


def document_status(status: AssessmentStatus) -> DocumentStatus:
    if status == AssessmentStatus.COMPLIANT:
        return DocumentStatus.COMPLETE
    if status == AssessmentStatus.PARTIAL:
        return DocumentStatus.PARTIAL
    return DocumentStatus.MISSING


def documentation_checklist(
    requirements: Iterable[Requirement],
    assessments: Iterable[RequirementAssessment],
    agency: Optional[str] = None,
) -> list[ChecklistItem]:
    """
    One entry per unique evidence document across the requirements.

    A document is required when any mandatory requirement asks for it. Its
    status comes from the assessment of the requirements citing it and only
    moves up from missing. Sorted required first, then missing → complete.
    """
    amap = assessment_map(assessments)
    items: dict[str, ChecklistItem] = {}

    for requirement in requirements:
        found = amap.get(requirement.id)
        status = document_status(found.status) if found else DocumentStatus.MISSING
        for document in requirement.evidence_required:
            existing = items.get(document)
            if existing is None:
                items[document] = ChecklistItem(
                    document=document,
                    required=requirement.is_mandatory,
                    status=status,
                    agency=agency,
                )
                continue
            existing.required = existing.required or requirement.is_mandatory
            if existing.status == DocumentStatus.MISSING and status != DocumentStatus.MISSING:
                existing.status = status

    return sorted(
        items.values(),
        key=lambda item: (not item.required, _DOCUMENT_ORDER[item.status]),
    )
