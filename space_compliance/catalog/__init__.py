from .loader import load_catalog, load_all_catalogs, resolve_framework
from .lint import CatalogWarning, lint_catalog

__all__ = [
    "load_catalog",
    "load_all_catalogs",
    "resolve_framework",
    "CatalogWarning",
    "lint_catalog",
]
