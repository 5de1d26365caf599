"""
Errors raised by the engine.

Only caller mistakes raise: a malformed operator profile or an unsupported
framework name. Catalog data problems are collected as lint warnings instead.
"""

from __future__ import annotations


class ProfileValidationError(ValueError):
    """Operator profile is missing required classification fields."""

    def __init__(self, code: str, detail: str = ""):
        self.code = code
        self.detail = detail or code
        super().__init__(f"{code}: {self.detail}")


class UnknownFrameworkError(ValueError):
    """Framework name does not match any shipped catalog."""

    def __init__(self, framework: str):
        self.framework = framework
        super().__init__(f"Unknown framework: {framework}")
