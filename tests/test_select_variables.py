"""Tests for choosing the variables a run validates."""

import logging

import pytest

from vars_audit.errors import ConfigError
from vars_audit.select_variables import parse_variable_list, select_variables

NAMES = ["x", "y", "z", "zz", "app_port"]


def test_parse_free_text_list() -> None:
    """Verify comma/whitespace splitting, dedup, sorting and empty-token removal."""
    text = "foo, bar baz ,, ,  foobaz foo,foobar, "
    assert parse_variable_list(text) == ["bar", "baz", "foo", "foobar", "foobaz"]


def test_parse_structured_list() -> None:
    """Verify that list input is deduplicated, sorted and stripped of blanks."""
    assert parse_variable_list(["b", "a", "", "b", " c "]) == ["a", "b", "c"]
    assert parse_variable_list([]) == []
    assert parse_variable_list(None) == []


@pytest.mark.parametrize("bad", [42, {"a": 1}, ["ok", 3]])
def test_parse_rejects_invalid_list(bad: object) -> None:
    """Verify that non-string list input is a configuration error."""
    with pytest.raises(ConfigError):
        parse_variable_list(bad)  # type: ignore[arg-type]


def test_defaults_to_all_names() -> None:
    """Verify that without overrides every declared name is selected."""
    assert select_variables(["b", "a", "b"]) == ("a", "b")


def test_explicit_list_wins_over_pattern() -> None:
    """Verify that an explicit list takes precedence over the regex filter."""
    assert select_variables(NAMES, from_list=["x", "y"], from_pattern="z") == (
        "x",
        "y",
    )


def test_pattern_filters_names() -> None:
    """Verify regex filtering by search."""
    assert select_variables(NAMES, from_pattern="z") == ("z", "zz")
    assert select_variables(NAMES, from_pattern="^app_") == ("app_port",)


def test_empty_list_falls_back_to_pattern() -> None:
    """Verify that an empty explicit list does not hide the regex filter."""
    assert select_variables(NAMES, from_list=" , ", from_pattern="^z$") == ("z",)


def test_undeclared_listed_names_are_dropped(caplog: pytest.LogCaptureFixture) -> None:
    """Verify that selection never fabricates names absent from every layer."""
    with caplog.at_level(logging.WARNING):
        selected = select_variables(NAMES, from_list="x ghost")
    assert selected == ("x",)
    assert "ghost" in caplog.text


def test_invalid_pattern_raises() -> None:
    """Verify that a syntactically invalid regex is a configuration error."""
    with pytest.raises(ConfigError, match="from_pattern"):
        select_variables(NAMES, from_pattern="(unclosed")
