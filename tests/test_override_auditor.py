"""Tests for the override auditor."""

from collections import Counter

from vars_audit.override_auditor import audit_overrides


def test_double_declaration_is_acceptable() -> None:
    """Verify that one override of a base value is reported but passes."""
    result = audit_overrides(Counter(["a", "a", "b"]))
    assert result.passed
    assert result.evidence["duplicates"] == {"a": 2}
    assert result.evidence["multicates"] == {}
    assert result.evidence["singly_declared"] == 1


def test_triple_declaration_always_fails() -> None:
    """Verify that a name declared three times fails regardless of totals."""
    counts = Counter(["a", "a", "a"])
    counts.update(f"name_{i}" for i in range(500))
    result = audit_overrides(counts)
    assert not result.passed
    assert result.evidence["multicates"] == {"a": 3}
    assert "a" in result.message


def test_many_duplicates_fail_both_thresholds() -> None:
    """Verify rule A: more than 10 duplicates and more than 10% of all names."""
    counts = Counter()
    for i in range(11):
        counts[f"dup_{i}"] = 2
    for i in range(50):
        counts[f"one_{i}"] = 1
    result = audit_overrides(counts)
    assert not result.passed
    assert len(result.evidence["duplicates"]) == 11  # noqa: PLR2004


def test_many_duplicates_below_relative_threshold_pass() -> None:
    """Verify rule A needs the relative threshold too (11 of 200 is 5.5%)."""
    counts = Counter()
    for i in range(11):
        counts[f"dup_{i}"] = 2
    for i in range(189):
        counts[f"one_{i}"] = 1
    assert audit_overrides(counts).passed


def test_few_duplicates_below_absolute_threshold_pass() -> None:
    """Verify rule A needs the absolute threshold too (10 of 10 is 100%)."""
    counts = Counter({f"dup_{i}": 2 for i in range(10)})
    assert audit_overrides(counts).passed


def test_empty_inventory_passes() -> None:
    """Verify that an empty variable set passes."""
    result = audit_overrides(Counter())
    assert result.passed
    assert result.evidence["total"] == 0
