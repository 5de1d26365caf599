"""
Requirement catalog loader.

Catalogs are JSON documents shipped in ``catalog/data`` (or the directory
named by ``CATALOG_DIR``). Each is parsed once per process into a frozen
``Catalog`` and cached; callers share the same immutable instance.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from space_compliance.config import get_settings
from space_compliance.exceptions import UnknownFrameworkError
from space_compliance.models.enums import Framework
from space_compliance.models.schemas import Catalog
from space_compliance.utils.hashing import fingerprint

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).resolve().parent / "data"

CATALOG_FILES: dict[Framework, str] = {
    Framework.EU_SPACE_ACT: "eu_space_act.json",
    Framework.COPUOS: "copuos_iadc.json",
    Framework.UK_SPACE_ACT: "uk_space_act.json",
    Framework.US_REGULATORY: "us_regulatory.json",
    Framework.NATIONAL_SPACE_LAW: "national_space_law.json",
}


def resolve_framework(framework: Framework | str) -> Framework:
    """Coerce a framework name into the enum, raising for unknown names."""
    if isinstance(framework, Framework):
        return framework
    try:
        return Framework(str(framework).strip().lower())
    except ValueError:
        raise UnknownFrameworkError(str(framework)) from None


def catalog_path(framework: Framework | str) -> Path:
    fw = resolve_framework(framework)
    settings = get_settings()
    base = Path(settings.catalog_dir) if settings.catalog_dir else _DATA_DIR
    return base / CATALOG_FILES[fw]


def parse_catalog(document: dict[str, Any]) -> Catalog:
    """Build a Catalog from its JSON document."""
    framework = resolve_framework(document["framework"])
    requirements = [
        {**item, "framework": framework.value}
        for item in document.get("requirements", [])
    ]
    return Catalog(
        **{k: v for k, v in document.items() if k not in ("requirements", "framework")},
        framework=framework,
        requirements=requirements,
        fingerprint=fingerprint(document),
    )


@lru_cache(maxsize=None)
def _load(framework: Framework) -> Catalog:
    path = catalog_path(framework)
    with open(path, "r", encoding="utf-8") as f:
        document = json.load(f)
    catalog = parse_catalog(document)
    logger.info(
        f"Loaded {framework.value} catalog v{catalog.version}: "
        f"{len(catalog.requirements)} requirements (sha256 {catalog.fingerprint[:12]})"
    )
    return catalog


def load_catalog(framework: Framework | str) -> Catalog:
    """Return the cached catalog for a framework (loaded on first use)."""
    return _load(resolve_framework(framework))


def load_all_catalogs() -> dict[Framework, Catalog]:
    return {fw: load_catalog(fw) for fw in Framework}
