"""
Applicability Matcher — selects the requirements that apply to a profile.

Every framework's applicability predicate is the same kind of object, so a
single interpreter evaluates them all. Each populated field of a
requirement's ``Applicability`` is looked up in ``CONSTRAINTS`` and checked
against the corresponding profile attribute; all of them must hold.

A profile attribute that is ``None`` does not restrict set-membership or
numeric constraints (an unknown altitude or orbit regime passes), but never
satisfies a flag: a missing capability counts as absent.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from space_compliance.models.enums import OrbitRegime
from space_compliance.models.schemas import Applicability, Catalog, OperatorProfile, Requirement

logger = logging.getLogger(__name__)


def _value(v: Any) -> Any:
    return v.value if hasattr(v, "value") else v


class Constraint:
    """One predicate kind bound to a constraint field and a profile attribute."""

    def __init__(
        self,
        field: str,
        attribute: str,
        check: Callable[[Any, Any], bool],
        missing_passes: bool = True,
    ):
        self.field = field
        self.attribute = attribute
        self._check = check
        self.missing_passes = missing_passes

    def is_set(self, applicability: Applicability) -> bool:
        rule = getattr(applicability, self.field)
        return rule is not None and rule is not False

    def holds(self, applicability: Applicability, profile: OperatorProfile) -> bool:
        rule = getattr(applicability, self.field)
        actual = getattr(profile, self.attribute)
        if actual is None:
            return self.missing_passes
        return self._check(rule, actual)

    def __repr__(self) -> str:
        return f"Constraint({self.field} ~ profile.{self.attribute})"


# ── Predicate kinds ──────────────────────────────────────

def member_of(rule: Iterable[Any], actual: Any) -> bool:
    return _value(actual) in {_value(r) for r in rule}


def any_of(rule: Iterable[Any], actual: Iterable[Any]) -> bool:
    allowed = {_value(r) for r in rule}
    return any(_value(a) in allowed for a in actual)


def none_of(rule: Iterable[Any], actual: Iterable[Any]) -> bool:
    return not any_of(rule, actual)


def at_least(rule: float, actual: float) -> bool:
    return actual >= rule


def at_most(rule: float, actual: float) -> bool:
    return actual <= rule


def flag(rule: bool, actual: bool) -> bool:
    return bool(actual) or not rule


def leo(rule: bool, actual: Any) -> bool:
    return actual == OrbitRegime.LEO or not rule


CONSTRAINTS: tuple[Constraint, ...] = (
    Constraint("operator_types", "operator_roles", any_of),
    Constraint("excluded_operator_types", "operator_roles", none_of),
    Constraint("activity_types", "activity_types", any_of),
    Constraint("agencies", "agencies", any_of),
    Constraint("jurisdictions", "jurisdictions", any_of),
    Constraint("orbit_regimes", "orbit_regime", member_of),
    Constraint("mission_types", "mission_type", member_of),
    Constraint("satellite_categories", "satellite_category", member_of),
    Constraint("constellation_tiers", "constellation_tier", member_of),
    Constraint("entity_sizes", "entity_size", member_of),
    Constraint("establishments", "establishment", member_of),
    Constraint("min_mass_kg", "mass_kg", at_least),
    Constraint("max_mass_kg", "mass_kg", at_most),
    Constraint("min_altitude_km", "altitude_km", at_least),
    Constraint("max_altitude_km", "altitude_km", at_most),
    Constraint("min_constellation_size", "constellation_size", at_least),
    Constraint("constellations_only", "is_constellation", flag, missing_passes=False),
    Constraint("requires_propulsion", "has_propulsion", flag, missing_passes=False),
    Constraint("requires_maneuverability", "has_maneuverability", flag, missing_passes=False),
    Constraint("leo_only", "orbit_regime", leo, missing_passes=False),
    Constraint("ngso_only", "is_ngso", flag, missing_passes=False),
    Constraint("remote_sensing_only", "provides_remote_sensing", flag, missing_passes=False),
    Constraint("launch_from_uk_only", "launch_from_uk", flag, missing_passes=False),
    Constraint("orbital_only", "launch_to_orbit", flag, missing_passes=False),
    Constraint("suborbital_only", "is_suborbital", flag, missing_passes=False),
    Constraint("human_spaceflight_only", "involves_people", flag, missing_passes=False),
    Constraint("commercial_only", "is_commercial", flag, missing_passes=False),
)


def is_applicable(requirement: Requirement, profile: OperatorProfile) -> bool:
    applicability = requirement.applicability
    return all(
        c.holds(applicability, profile)
        for c in CONSTRAINTS
        if c.is_set(applicability)
    )


def failed_constraints(requirement: Requirement, profile: OperatorProfile) -> list[str]:
    """Names of the constraints that exclude a requirement (for explanations)."""
    applicability = requirement.applicability
    return [
        c.field
        for c in CONSTRAINTS
        if c.is_set(applicability) and not c.holds(applicability, profile)
    ]


def match(
    profile: OperatorProfile, catalog: Catalog | Iterable[Requirement]
) -> list[Requirement]:
    """Requirements from the catalog that apply to the profile, in catalog order."""
    requirements = catalog.requirements if isinstance(catalog, Catalog) else catalog
    seen: set[str] = set()
    matched: list[Requirement] = []
    for requirement in requirements:
        if requirement.id in seen:
            continue
        if is_applicable(requirement, profile):
            seen.add(requirement.id)
            matched.append(requirement)
    logger.debug(f"Matched {len(matched)} requirements")
    return matched
