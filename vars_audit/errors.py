"""Exception types raised by the variable audit engine."""

from typing import Any


class VarsAuditError(Exception):
    """Base class for all audit errors."""


class ConfigError(VarsAuditError):
    """Raised when the run configuration is unusable (bad regex, bad list, ...)."""


class AuditFailure(VarsAuditError):
    """A failed audit concern, raised only when the caller escalates it."""

    def __init__(self, concern: str, message: str, evidence: dict[str, Any]) -> None:
        """Store the failing concern and the evidence behind the verdict."""
        super().__init__(message)
        self.concern = concern
        self.evidence = evidence


class UndefinedVariableError(AuditFailure):
    """Selected variables resolved to the unresolved marker."""

    def __init__(self, names: list[str], evidence: dict[str, Any]) -> None:
        """Keep the residual, sorted list of undefined names."""
        self.names = sorted(set(names))
        super().__init__(
            "definitions",
            f"undefined variable(s): {', '.join(self.names)}",
            evidence,
        )


class OverrideWarning(AuditFailure):
    """Variables are declared in too many layers."""


class NamespaceWarning(AuditFailure):
    """Variable names do not follow the namespace-prefix convention."""
