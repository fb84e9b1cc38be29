"""
Exceptions raised while building, converting, or validating specs.
"""


class SpecError(Exception):
    """Base class for specification errors."""


class InvalidSpecError(SpecError, ValueError):
    """A specification violates one or more structural invariants."""

    def __init__(self, violations: list[str]):
        self.violations = list(violations)
        super().__init__("invalid spec: " + "; ".join(self.violations))


class MissingLinuxSectionError(SpecError):
    """The spec has no linux section, so it cannot be made rootless."""

    def __init__(self):
        super().__init__("spec has no linux section; rootless conversion requires one")
