"""
Catalog linter — data-quality checks over shipped catalogs.

Problems are collected as ``CatalogWarning`` records, never raised. The
test suite asserts the shipped catalogs lint clean and
``python -m space_compliance lint`` prints whatever is found.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Iterable, NamedTuple, Optional

from space_compliance.models.enums import Framework
from space_compliance.models.schemas import Catalog
from space_compliance.rules.article_ranges import RangeParseWarning, article_number_of, parse_ranges
from space_compliance.rules.module_status import MODULES, ModuleDefinition


class CatalogWarning(NamedTuple):
    framework: str
    requirement_id: Optional[str]
    check: str
    message: str


REFERENCE_PATTERNS: dict[Framework, re.Pattern[str]] = {
    Framework.EU_SPACE_ACT: re.compile(r"^Art\. \d+(\([a-z]\))?$"),
    Framework.COPUOS: re.compile(r"^(LTS-(\d+|[A-D]\.\d+)|IADC(-\d+(\.\d+)*)?|ISO-\d+)$"),
    Framework.UK_SPACE_ACT: re.compile(r"^(SIA s\.\d+|SIR Reg\.\d+)$"),
    Framework.US_REGULATORY: re.compile(r"^(\d+ (CFR|USC) .+|ORBITS Act § \d+)$"),
}

# Highest EU article number; cited articles beyond it do not exist
EU_ARTICLE_COUNT = 119


def lint_module_ranges(modules: Iterable[ModuleDefinition] = MODULES) -> list[CatalogWarning]:
    found: list[CatalogWarning] = []
    for module in modules:
        warnings: list[RangeParseWarning] = []
        parse_ranges(module.article_range, warnings)
        for w in warnings:
            found.append(CatalogWarning(
                Framework.EU_SPACE_ACT.value, None, "module_range",
                f"Module {module.id} range '{w.text}': segment '{w.segment}' ({w.reason})",
            ))
    return found


def lint_jurisdictions(catalog: Catalog) -> list[CatalogWarning]:
    """Every national requirement belongs to exactly one declared jurisdiction."""
    fw = catalog.framework.value
    declared = {j.code for j in catalog.jurisdictions}
    found: list[CatalogWarning] = []
    for r in catalog.requirements:
        if r.jurisdiction not in declared:
            found.append(CatalogWarning(fw, r.id, "unknown_jurisdiction", f"jurisdiction '{r.jurisdiction}' not declared"))
        elif r.applicability.jurisdictions != (r.jurisdiction,):
            found.append(CatalogWarning(
                fw, r.id, "jurisdiction_mismatch",
                f"applies to {list(r.applicability.jurisdictions or ())}, listed under {r.jurisdiction}",
            ))
    for j in catalog.jurisdictions:
        weeks = j.timeline.processing_weeks
        if weeks.min > weeks.max:
            found.append(CatalogWarning(fw, None, "processing_weeks", f"{j.code}: {weeks.min} > {weeks.max} weeks"))
    return found


def lint_operator_checklists(catalog: Catalog) -> list[CatalogWarning]:
    fw = catalog.framework.value
    total = catalog.total_articles or EU_ARTICLE_COUNT
    found: list[CatalogWarning] = []
    for key, phases in catalog.operator_checklists.items():
        for phase, actions in phases.items():
            for action in actions:
                warnings: list[RangeParseWarning] = []
                ranges = parse_ranges(action.article_reference, warnings)
                if warnings or not ranges or max(end for _, end in ranges) > total:
                    found.append(CatalogWarning(
                        fw, None, "checklist_reference",
                        f"{key}/{phase}: '{action.article_reference}' is not a valid article reference",
                    ))
    return found


def lint_catalog(catalog: Catalog) -> list[CatalogWarning]:
    """Collect every data-quality problem in one catalog."""
    fw = catalog.framework.value
    found: list[CatalogWarning] = []

    counts = Counter(r.id for r in catalog.requirements)
    for requirement_id, n in counts.items():
        if n > 1:
            found.append(CatalogWarning(fw, requirement_id, "duplicate_id", f"id appears {n} times"))

    for r in catalog.requirements:
        if catalog.categories and r.category not in catalog.categories:
            found.append(CatalogWarning(fw, r.id, "unknown_category", f"category '{r.category}' not declared"))

        for lt in r.license_types:
            if lt not in catalog.license_types:
                found.append(CatalogWarning(fw, r.id, "unknown_license_type", f"licence type '{lt}' not declared"))

        if r.agency and catalog.agencies and r.agency not in catalog.agencies:
            found.append(CatalogWarning(fw, r.id, "unknown_agency", f"agency '{r.agency}' not declared"))

        if not r.implementation_guidance and not r.title.strip():
            found.append(CatalogWarning(fw, r.id, "no_recommendation", "no guidance entry and no title to fall back on"))

        for target, refs in r.cross_references.items():
            if target == catalog.framework:
                found.append(CatalogWarning(fw, r.id, "self_reference", "cross-references its own framework"))
            pattern = REFERENCE_PATTERNS.get(target)
            if pattern is None:
                found.append(CatalogWarning(
                    fw, r.id, "unknown_cross_reference_target", f"no reference format for {target.value}",
                ))
                continue
            for ref in refs:
                if not pattern.match(ref):
                    found.append(CatalogWarning(
                        fw, r.id, "malformed_cross_reference", f"{target.value} reference '{ref}'",
                    ))
                elif target == Framework.EU_SPACE_ACT and not 1 <= article_number_of(ref) <= EU_ARTICLE_COUNT:
                    found.append(CatalogWarning(
                        fw, r.id, "dangling_cross_reference", f"no EU Space Act article '{ref}'",
                    ))

    if catalog.framework == Framework.NATIONAL_SPACE_LAW:
        found.extend(lint_jurisdictions(catalog))

    if catalog.framework == Framework.EU_SPACE_ACT:
        found.extend(lint_module_ranges())
        found.extend(lint_operator_checklists(catalog))
        total = catalog.total_articles or EU_ARTICLE_COUNT
        for r in catalog.requirements:
            number = r.article_number if r.article_number is not None else article_number_of(r.reference)
            if not 1 <= number <= total:
                found.append(CatalogWarning(fw, r.id, "article_number", f"article {number} out of range"))

    return found
