"""Data model for a single variable declaration."""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Occurrence:
    """One textual declaration of a variable name in one layer."""

    name: str
    layer: str  # layer source as given, e.g. group_vars/all.yml
