"""Orchestration logic for auditing a layered variable store."""

import logging
from collections import Counter
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from vars_audit.audit_report import AuditReport
from vars_audit.collect_occurrences import (
    DEFAULT_NAME_PATTERN,
    collect_occurrences,
    count_occurrences,
)
from vars_audit.compute_config_hash import compute_config_hash
from vars_audit.definition_resolver import DefinitionResolver, Evaluator
from vars_audit.layered_evaluator import LayeredEvaluator
from vars_audit.load_config import validate_config
from vars_audit.namespace_auditor import NamespaceAuditor
from vars_audit.override_auditor import audit_overrides
from vars_audit.select_variables import select_variables

logger = logging.getLogger(__name__)


def run_audit(
    layer_sources: Sequence[str | Path],
    config: dict[str, Any],
    evaluator: Evaluator | None = None,
    facts: Mapping[str, Any] | None = None,
) -> AuditReport:
    """Execute the full audit pipeline and return the aggregated report.

    Configuration problems raise ConfigError before any auditor runs. Audit
    findings never raise; they are recorded in the report.
    """
    validate_config(config)
    thresholds, rules = config["thresholds"], config["rules"]

    counts = _collect(layer_sources, rules.get("name_pattern") or DEFAULT_NAME_PATTERN)
    variables = select_variables(
        counts, from_list=rules.get("from_list"), from_pattern=rules.get("from_pattern")
    )
    logger.info("Selected %d of %d variable(s)", len(variables), len(counts))

    if evaluator is None:
        evaluator = _build_evaluator(layer_sources, config, facts)

    report = AuditReport(compute_config_hash(config, layer_sources), variables)
    report.override_audit = audit_overrides(counts)

    namespace = NamespaceAuditor(
        pfx_min_uses=thresholds["pfx_min_uses"],
        pfx_max_none=thresholds["pfx_max_none"],
        pfx_max_once=thresholds["pfx_max_once"],
    )
    report.namespace_audit, report.namespace_signals = namespace.audit(counts)

    resolver = DefinitionResolver(evaluator, workers=config["run"].get("workers", 1))
    report.definition_audit = resolver.audit(
        variables,
        error_filter=rules.get("error_filter"),
        error_assume=thresholds["error_assume"],
    )
    return report


def fatal_concerns(config: dict[str, Any]) -> list[str]:
    """Return the concerns whose failure should fail the run."""
    return sorted(k for k, v in config.get("fatal", {}).items() if v)


def _collect(layer_sources: Sequence[str | Path], name_pattern: str) -> Counter[str]:
    """Scan the layers and count declarations per name."""
    occurrences = collect_occurrences(layer_sources, name_pattern)
    logger.info(
        "Found %d declaration(s) in %d layer source(s)",
        len(occurrences),
        len(layer_sources),
    )
    return count_occurrences(occurrences)


def _build_evaluator(
    layer_sources: Sequence[str | Path],
    config: dict[str, Any],
    facts: Mapping[str, Any] | None,
) -> LayeredEvaluator:
    """Create the default YAML/Jinja2 evaluator; facts only when enabled."""
    if facts and not config["run"].get("remote_facts"):
        logger.info("Remote facts disabled, ignoring %d fact(s)", len(facts))
        facts = None
    return LayeredEvaluator(layer_sources, facts, verbose=True)
