"""
Cross-Reference Resolver — links requirements to sibling frameworks.
Works on any framework: references are plain strings keyed by target.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from space_compliance.models.enums import Framework
from space_compliance.models.schemas import Catalog, Requirement


def cross_references(
    requirements: Iterable[Requirement], target: Optional[Framework] = None
) -> list[str]:
    """Deduplicated, sorted references into ``target`` (every target when None)."""
    found: set[str] = set()
    for requirement in requirements:
        for fw, refs in requirement.cross_references.items():
            if target is None or fw == target:
                found.update(refs)
    return sorted(found)


def overlaps(requirements: Iterable[Requirement]) -> dict[Framework, list[str]]:
    """Per-target map of sorted, deduplicated references."""
    grouped: dict[Framework, set[str]] = {}
    for requirement in requirements:
        for fw, refs in requirement.cross_references.items():
            grouped.setdefault(fw, set()).update(refs)
    return {fw: sorted(refs) for fw, refs in grouped.items()}


def references_match(cited: str, wanted: str) -> bool:
    """Exact match, or ``cited`` is a sub-point of ``wanted`` (``Art. 67(c)`` → ``Art. 67``)."""
    cited, wanted = cited.strip(), wanted.strip()
    if cited == wanted:
        return True
    return re.match(re.escape(wanted) + r"\(", cited) is not None


def requirements_referencing(
    catalog: Catalog | Iterable[Requirement], target: Framework, reference: str
) -> list[Requirement]:
    """Requirements citing ``reference`` in ``target``, in catalog order."""
    requirements = catalog.requirements if isinstance(catalog, Catalog) else catalog
    return [
        r
        for r in requirements
        if any(references_match(ref, reference) for ref in r.cross_references.get(target, ()))
    ]


def group_by_source(requirements: Iterable[Requirement]) -> dict[str, list[Requirement]]:
    grouped: dict[str, list[Requirement]] = {}
    for requirement in requirements:
        grouped.setdefault(requirement.source or "", []).append(requirement)
    return grouped
