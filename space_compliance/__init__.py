"""
space_compliance — applicability matching and compliance scoring for space
operators across the EU Space Act, UK Space Industry Act, US (FCC / FAA /
NOAA) and UN COPUOS / IADC / ISO 24113 frameworks.
"""

from space_compliance.catalog.loader import load_catalog
from space_compliance.exceptions import ProfileValidationError, UnknownFrameworkError
from space_compliance.models.enums import Framework
from space_compliance.orchestration.runner import generate_compliance_summary, perform_assessment
from space_compliance.rules.applicability import match
from space_compliance.rules.profile_validation import validate_profile

__all__ = [
    "Framework",
    "ProfileValidationError",
    "UnknownFrameworkError",
    "generate_compliance_summary",
    "load_catalog",
    "match",
    "perform_assessment",
    "validate_profile",
]
