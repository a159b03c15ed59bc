"""Tests for scanning layer files for declarations."""

from pathlib import Path

from vars_audit.collect_occurrences import collect_occurrences, count_occurrences
from vars_audit.occurrence import Occurrence


def write_layer(path: Path, text: str) -> Path:
    """Write a layer file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_collects_top_level_keys_only(tmp_path: Path) -> None:
    """Verify that only column-0 identifiers followed by ':' are declarations."""
    layer = write_layer(
        tmp_path / "group_vars" / "all.yml",
        "---\n"
        "app_port: 80\n"
        "# commented: 1\n"
        "app_users:\n"
        "  nested_key: value\n"
        "Upper_case: 1\n"
        "no_colon here\n",
    )
    occurrences = collect_occurrences([layer])
    assert [o.name for o in occurrences] == ["app_port", "app_users"]
    assert all(o.layer == str(layer) for o in occurrences)


def test_missing_layers_are_ignored(tmp_path: Path) -> None:
    """Verify that absent layer files contribute nothing and do not raise."""
    layer = write_layer(tmp_path / "all.yml", "foo: 1\n")
    occurrences = collect_occurrences([tmp_path / "missing.yml", layer, tmp_path])
    assert occurrences == [Occurrence("foo", str(layer))]


def test_duplicates_in_one_layer_count_twice(tmp_path: Path) -> None:
    """Verify that a name declared twice in the same file is counted twice."""
    layer = write_layer(tmp_path / "all", "foo: 1\nfoo: 2\nbar: 3\n")
    counts = count_occurrences(collect_occurrences([layer]))
    assert counts["foo"] == 2  # noqa: PLR2004
    assert counts["bar"] == 1


def test_counts_across_layers_and_sorted_output(tmp_path: Path) -> None:
    """Verify that occurrences are sorted and counted across layers."""
    base = write_layer(tmp_path / "group_vars" / "all.yml", "web_port: 80\nzeta: 1\n")
    host = write_layer(tmp_path / "host_vars" / "web1.yml", "web_port: 8080\n")
    occurrences = collect_occurrences([host, base])

    assert occurrences == sorted(occurrences)
    assert count_occurrences(occurrences) == {"web_port": 2, "zeta": 1}


def test_collection_is_idempotent(tmp_path: Path) -> None:
    """Verify that scanning unchanged sources twice gives identical results."""
    layers = [
        write_layer(tmp_path / "a.yml", "foo: 1\nbar: 2\n"),
        write_layer(tmp_path / "b.yml", "bar: 3\n"),
    ]
    assert collect_occurrences(layers) == collect_occurrences(layers)


def test_custom_name_pattern_without_group(tmp_path: Path) -> None:
    """Verify that a pattern without capture group uses the whole match."""
    layer = write_layer(tmp_path / "vars.yml", "Foo: 1\nbar: 2\n")
    occurrences = collect_occurrences([layer], r"^[A-Za-z]+:")
    assert [o.name for o in occurrences] == ["Foo", "bar"]
