"""Logic for loading, merging and validating the audit configuration."""

import copy
from pathlib import Path
from typing import Any

import yaml

from vars_audit.collect_occurrences import DEFAULT_NAME_PATTERN
from vars_audit.compile_pattern import compile_pattern
from vars_audit.deep_merge import deep_merge
from vars_audit.errors import ConfigError
from vars_audit.select_variables import parse_variable_list

DEFAULT_CONFIG: dict[str, Any] = {
    "thresholds": {
        "error_assume": 0,
        "pfx_min_uses": 4,
        "pfx_max_none": 10,
        "pfx_max_once": 10,
    },
    "rules": {
        "error_filter": "",
        "from_pattern": "",
        "from_list": [],
        "name_pattern": DEFAULT_NAME_PATTERN,
    },
    "run": {
        "remote_facts": False,
        "workers": 1,
    },
    "fatal": {
        "definitions": True,
        "override": False,
        "namespace": False,
    },
}


def load_config(path: str | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file and merge it with defaults."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path:
        p = Path(path)
        if p.exists():
            try:
                user_config = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
            except (OSError, yaml.YAMLError) as exc:
                msg = f"Cannot read configuration {path}: {exc}"
                raise ConfigError(msg) from exc
            if not isinstance(user_config, dict):
                msg = f"Configuration {path} must be a mapping"
                raise ConfigError(msg)
            config = deep_merge(config, user_config)
    validate_config(config)
    return config


def validate_config(config: dict[str, Any]) -> None:
    """Raise ConfigError when a threshold, regex or variable list is invalid."""
    for section in DEFAULT_CONFIG:
        if not isinstance(config.get(section), dict):
            msg = f"{section} must be a mapping, got {config.get(section)!r}"
            raise ConfigError(msg)

    for key, value in config["thresholds"].items():
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            msg = f"thresholds.{key} must be a non-negative integer, got {value!r}"
            raise ConfigError(msg)

    workers = config["run"].get("workers", 1)
    if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
        msg = f"run.workers must be a positive integer, got {workers!r}"
        raise ConfigError(msg)

    rules = config["rules"]
    for key in ("error_filter", "from_pattern", "name_pattern"):
        compile_pattern(rules.get(key), f"rules.{key}")
    parse_variable_list(rules.get("from_list"))
