"""Regulatory frameworks — one BaseFramework subclass per catalog."""

from __future__ import annotations

from typing import Optional

from space_compliance.catalog.loader import resolve_framework
from space_compliance.models.enums import Framework
from space_compliance.rules.rules_config import RulesConfigStore

from .base_framework import BaseFramework
from .copuos import CopuosFramework
from .eu_space_act import EuSpaceActFramework
from .national_space_law import NationalSpaceLawFramework
from .uk_space import UkSpaceFramework
from .us_regulatory import UsRegulatoryFramework

FRAMEWORKS: dict[Framework, type[BaseFramework]] = {
    Framework.EU_SPACE_ACT: EuSpaceActFramework,
    Framework.COPUOS: CopuosFramework,
    Framework.UK_SPACE_ACT: UkSpaceFramework,
    Framework.US_REGULATORY: UsRegulatoryFramework,
    Framework.NATIONAL_SPACE_LAW: NationalSpaceLawFramework,
}


def get_framework(
    framework: Framework | str, config_store: Optional[RulesConfigStore] = None
) -> BaseFramework:
    return FRAMEWORKS[resolve_framework(framework)](config_store)


__all__ = [
    "BaseFramework",
    "CopuosFramework",
    "EuSpaceActFramework",
    "NationalSpaceLawFramework",
    "UkSpaceFramework",
    "UsRegulatoryFramework",
    "FRAMEWORKS",
    "get_framework",
]
