"""Data models for the outcome of resolving one variable."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Defined:
    """The variable resolved to a value."""

    value: str


@dataclass(frozen=True)
class Undefined:
    """The variable could not be resolved."""

    reason: str = ""


ResolutionOutcome = Defined | Undefined
