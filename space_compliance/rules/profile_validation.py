"""
Operator profile validation.

Builds an ``OperatorProfile`` from caller input, rejecting profiles with no
operator or activity type. When a framework is given, operator types are
checked against that framework's vocabulary and the framework's defaults
fill in fields the caller left out. National space law assessments also
need at least one jurisdiction the national catalog covers.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import ValidationError

from space_compliance.catalog.loader import load_catalog, resolve_framework
from space_compliance.exceptions import ProfileValidationError
from space_compliance.models.enums import Framework
from space_compliance.models.schemas import OperatorProfile

logger = logging.getLogger(__name__)


# ── Operator vocabularies (None = any value accepted) ────

OPERATOR_TYPES: dict[Framework, Optional[frozenset[str]]] = {
    Framework.EU_SPACE_ACT: frozenset({
        "spacecraft_operator",
        "launch_operator",
        "launch_site_operator",
        "isos_provider",
        "primary_data_provider",
    }),
    Framework.UK_SPACE_ACT: frozenset({
        "launch_operator",
        "return_operator",
        "satellite_operator",
        "spaceport_operator",
        "range_control",
    }),
    Framework.US_REGULATORY: frozenset({
        "satellite_operator",
        "spectrum_user",
        "launch_operator",
        "reentry_operator",
        "spaceport_operator",
        "remote_sensing_operator",
    }),
    Framework.COPUOS: None,
    Framework.NATIONAL_SPACE_LAW: None,
}


# ── Framework defaults ───────────────────────────────────

COMMON_DEFAULTS: dict[str, Any] = {
    "has_propulsion": False,
    "has_maneuverability": False,
    "is_constellation": False,
}

FRAMEWORK_DEFAULTS: dict[Framework, dict[str, Any]] = {
    Framework.US_REGULATORY: {
        "is_us_entity": True,
        "us_nexus": "us_licensed",
        "provides_remote_sensing": False,
    },
    Framework.UK_SPACE_ACT: {
        "launch_from_uk": False,
        "launch_to_orbit": False,
        "is_suborbital": False,
        "has_uk_nexus": True,
        "involves_people": False,
        "is_commercial": True,
    },
    Framework.COPUOS: {
        "mission_duration_years": 5,
    },
    Framework.EU_SPACE_ACT: {},
    Framework.NATIONAL_SPACE_LAW: {},
}

US_AGENCY_BY_OPERATOR: dict[str, str] = {
    "satellite_operator": "FCC",
    "spectrum_user": "FCC",
    "launch_operator": "FAA",
    "reentry_operator": "FAA",
    "spaceport_operator": "FAA",
    "remote_sensing_operator": "NOAA",
}


def us_agencies_for(operator_types: list[str], provides_remote_sensing: bool) -> list[str]:
    """Agencies with jurisdiction over a US operator, in FCC, FAA, NOAA order."""
    found = {US_AGENCY_BY_OPERATOR[t] for t in operator_types if t in US_AGENCY_BY_OPERATOR}
    if provides_remote_sensing:
        found.add("NOAA")
    return [a for a in ("FCC", "FAA", "NOAA") if a in found]


def check_jurisdictions(codes: list[str]) -> list[str]:
    """Upper-cased, de-duplicated country codes, all covered by the national catalog."""
    if not codes:
        logger.warning("Profile rejected: no jurisdiction selected")
        raise ProfileValidationError("missing_jurisdiction", "At least one jurisdiction is required")
    normalized = list(dict.fromkeys(str(c).strip().upper() for c in codes))
    catalog = load_catalog(Framework.NATIONAL_SPACE_LAW)
    unknown = [c for c in normalized if catalog.jurisdiction(c) is None]
    if unknown:
        logger.warning(f"Profile rejected: unknown jurisdictions {unknown}")
        raise ProfileValidationError(
            "unknown_jurisdiction", f"No national space law data for: {', '.join(unknown)}"
        )
    return normalized


def validate_profile(
    raw: dict[str, Any] | OperatorProfile, framework: Optional[Framework | str] = None
) -> OperatorProfile:
    """Validate caller input into an ``OperatorProfile``.

    Raises:
        ProfileValidationError: ``missing_operator_type``,
            ``missing_activity_type``, ``unknown_operator_type``,
            ``missing_jurisdiction``, ``unknown_jurisdiction`` or
            ``invalid_profile``.
    """
    data = raw.model_dump(exclude_unset=True) if isinstance(raw, OperatorProfile) else dict(raw or {})
    fw = resolve_framework(framework) if framework is not None else None

    if not data.get("operator_types"):
        logger.warning("Profile rejected: no operator type")
        raise ProfileValidationError("missing_operator_type", "At least one operator type is required")
    if not data.get("activity_types"):
        logger.warning("Profile rejected: no activity type")
        raise ProfileValidationError("missing_activity_type", "At least one activity type is required")

    if fw is not None:
        vocabulary = OPERATOR_TYPES[fw]
        if vocabulary is not None:
            unknown = [t for t in data["operator_types"] if t not in vocabulary]
            if unknown:
                logger.warning(f"Profile rejected: unknown {fw.value} operator types {unknown}")
                raise ProfileValidationError(
                    "unknown_operator_type",
                    f"Unknown operator type(s) for {fw.value}: {', '.join(unknown)}",
                )

        for key, value in {**COMMON_DEFAULTS, **FRAMEWORK_DEFAULTS[fw]}.items():
            if data.get(key) is None:
                data[key] = value

        if fw == Framework.NATIONAL_SPACE_LAW:
            data["jurisdictions"] = check_jurisdictions(data.get("jurisdictions") or [])

        if fw == Framework.US_REGULATORY and not data.get("agencies"):
            data["agencies"] = us_agencies_for(
                data["operator_types"], bool(data.get("provides_remote_sensing"))
            )

    try:
        return OperatorProfile(**data)
    except ValidationError as e:
        logger.warning(f"Profile rejected: {e.error_count()} invalid field(s)")
        raise ProfileValidationError("invalid_profile", str(e)) from e
