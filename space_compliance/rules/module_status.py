"""
Module Status Calculator — EU Space Act modules.

Applicable EU articles are bucketed into the eight product modules by
article number. Each module's status comes from the first matching rule in
``STATUS_RULES``; the order of that list is the precedence.
"""

from __future__ import annotations

from typing import Callable, NamedTuple

from space_compliance.models.enums import ModuleStatusType
from space_compliance.models.schemas import ModuleStatus, Requirement
from space_compliance.rules.article_ranges import article_number_of, is_in_ranges, parse_ranges


class ModuleDefinition(NamedTuple):
    id: str
    slug: str
    name: str
    article_range: str


MODULES: tuple[ModuleDefinition, ...] = (
    ModuleDefinition("01", "authorization", "Authorization & Licensing", "Art. 6–16, 32–39, 105–108"),
    ModuleDefinition("02", "registration", "Registration", "Art. 24"),
    ModuleDefinition("03", "environmental", "Environmental Footprint", "Art. 96–100"),
    ModuleDefinition("04", "cybersecurity", "Cybersecurity", "Art. 74–95"),
    ModuleDefinition("05", "debris", "Debris Mitigation & Safety", "Art. 58–72, 101–103"),
    ModuleDefinition("06", "insurance", "Insurance & Liability", "Art. 44–51"),
    ModuleDefinition("07", "supervision", "Supervision & Reporting", "Art. 26–31, 40–57, 73"),
    ModuleDefinition("08", "regulatory_intelligence", "Regulatory Intelligence", "Art. 104, 114–119"),
)

MANDATORY = "mandatory"
CONDITIONAL_SIMPLIFIED = "conditional_simplified"

COMPLIANCE_TYPE_MAP: dict[str, str] = {
    "mandatory": MANDATORY,
    "mandatory_pre_activity": MANDATORY,
    "mandatory_ongoing": MANDATORY,
    "conditional_simplification": CONDITIONAL_SIMPLIFIED,
    "conditional_simplified": CONDITIONAL_SIMPLIFIED,
}


def normalize_compliance_type(compliance_type: str | None) -> str:
    if not compliance_type:
        return ""
    return COMPLIANCE_TYPE_MAP.get(compliance_type, compliance_type)


def article_number(requirement: Requirement) -> int:
    if requirement.article_number is not None:
        return requirement.article_number
    return article_number_of(requirement.reference)


def _plural(count: int) -> str:
    return "article" if count == 1 else "articles"


class ModuleFacts(NamedTuple):
    count: int
    has_mandatory: bool
    has_simplified: bool
    is_light_regime: bool


class StatusRule(NamedTuple):
    applies: Callable[[ModuleFacts], bool]
    status: ModuleStatusType
    summary: Callable[[ModuleFacts], str]


STATUS_RULES: tuple[StatusRule, ...] = (
    StatusRule(
        lambda f: f.count == 0,
        ModuleStatusType.NOT_APPLICABLE,
        lambda f: "No specific requirements for your operator type.",
    ),
    StatusRule(
        lambda f: f.has_mandatory and f.is_light_regime and f.has_simplified,
        ModuleStatusType.SIMPLIFIED,
        lambda f: "Simplified requirements apply under the Light Regime.",
    ),
    StatusRule(
        lambda f: f.has_mandatory,
        ModuleStatusType.REQUIRED,
        lambda f: f"Full compliance required with {f.count} {_plural(f.count)}.",
    ),
    StatusRule(
        lambda f: f.has_simplified and f.is_light_regime,
        ModuleStatusType.SIMPLIFIED,
        lambda f: "Simplified requirements available.",
    ),
    StatusRule(
        lambda f: True,
        ModuleStatusType.RECOMMENDED,
        lambda f: f"{f.count} relevant {_plural(f.count)} for your operation.",
    ),
)


def module_requirements(
    module: ModuleDefinition, requirements: list[Requirement]
) -> list[Requirement]:
    ranges = parse_ranges(module.article_range)
    return [r for r in requirements if is_in_ranges(article_number(r), ranges)]


def compute_module_status(
    module: ModuleDefinition, requirements: list[Requirement], is_light_regime: bool
) -> ModuleStatus:
    matched = module_requirements(module, requirements)
    types = {normalize_compliance_type(r.compliance_type) for r in matched}
    facts = ModuleFacts(
        count=len(matched),
        has_mandatory=MANDATORY in types,
        has_simplified=CONDITIONAL_SIMPLIFIED in types,
        is_light_regime=is_light_regime,
    )
    rule = next(r for r in STATUS_RULES if r.applies(facts))
    return ModuleStatus(
        id=module.id,
        name=module.name,
        article_range=module.article_range,
        status=rule.status,
        article_count=facts.count,
        summary=rule.summary(facts),
    )


def compute_module_statuses(
    applicable_requirements: list[Requirement], is_light_regime: bool
) -> list[ModuleStatus]:
    """Status of every EU module for the applicable requirement set."""
    return [
        compute_module_status(module, applicable_requirements, is_light_regime)
        for module in MODULES
    ]
