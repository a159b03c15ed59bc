"""Logic for aggregating audit verdicts into one report."""

import json
import time
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from vars_audit.audit_result import AuditResult
from vars_audit.errors import (
    AuditFailure,
    NamespaceWarning,
    OverrideWarning,
    UndefinedVariableError,
)


class AuditReport:
    """Collects the verdict of every concern of one run."""

    def __init__(self, config_hash: str, variables: Iterable[str]) -> None:
        """Initialize the report with the run's selected variables."""
        self.config_hash = config_hash
        self.variables: list[str] = sorted(set(variables))
        self.override_audit: AuditResult | None = None
        self.namespace_audit: AuditResult | None = None
        self.namespace_signals: list[AuditResult] = []
        self.definition_audit: AuditResult | None = None
        self.start_time = time.time()

    def results(self) -> dict[str, AuditResult]:
        """Return every recorded result keyed by concern."""
        collected = [
            self.override_audit,
            self.namespace_audit,
            *self.namespace_signals,
            self.definition_audit,
        ]
        return {r.concern: r for r in collected if r is not None}

    def passed(self, concern: str) -> bool:
        """Return whether a concern passed; unrecorded concerns count as passed."""
        result = self.results().get(concern)
        return result is None or result.passed

    def failures(self, fatal: Iterable[str]) -> list[AuditFailure]:
        """Return an exception for each failed concern the caller treats as fatal."""
        results = self.results()
        failures: list[AuditFailure] = []
        for concern in sorted(set(fatal)):
            result = results.get(concern)
            if result is None or result.passed:
                continue
            if concern == "definitions":
                failures.append(
                    UndefinedVariableError(result.evidence["errors"], result.evidence)
                )
            elif concern == "override":
                failures.append(
                    OverrideWarning(concern, result.message, result.evidence)
                )
            else:
                failures.append(
                    NamespaceWarning(concern, result.message, result.evidence)
                )
        return failures

    def summary_lines(self) -> list[str]:
        """Render a human-readable summary, evidence included for failures."""
        lines = [f"variables ({len(self.variables)}): {', '.join(self.variables)}"]

        if self.override_audit is not None:
            r = self.override_audit
            lines.append(f"[{_status(r)}] override: {r.message}")
            if not r.passed:
                lines.append(f"    duplicates: {_inline(r.evidence['duplicates'])}")

        if self.namespace_audit is not None:
            r = self.namespace_audit
            lines.append(f"[{_status(r)}] namespace: {r.message}")
            lines.extend(
                f"    [{_status(s)}] {s.concern}: {s.message}"
                for s in self.namespace_signals
            )
            if r.evidence["failed_signals"]:
                lines.append(f"    prefix usage: {_inline(r.evidence['prefix_usage'])}")
                lines.append(f"    one-words: {', '.join(r.evidence['one_words'])}")
                lines.extend(f"    {remark}" for remark in r.remarks)

        if self.definition_audit is not None:
            r = self.definition_audit
            lines.append(f"[{_status(r)}] definitions: {r.message}")
            if not r.passed:
                lines.extend(f"    {name}" for name in r.evidence["errors"])

        return lines

    def to_dict(self) -> dict[str, Any]:
        """Return the machine-readable report."""
        return {
            "meta": {
                "timestamp": time.time(),
                "duration": time.time() - self.start_time,
                "config_hash": self.config_hash,
                "total_variables": len(self.variables),
            },
            "variables": self.variables,
            "override_audit": _as_dict(self.override_audit),
            "namespace_audit": _as_dict(self.namespace_audit),
            "namespace_signals": [s.to_dict() for s in self.namespace_signals],
            "definition_audit": _as_dict(self.definition_audit),
        }

    def generate_report(self, path: str) -> None:
        """Write the report to a JSON file."""
        Path(path).write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")


def _status(result: AuditResult) -> str:
    return "PASS" if result.passed else "FAIL"


def _inline(mapping: dict[str, Any]) -> str:
    return ", ".join(f"{k}={v}" for k, v in mapping.items()) or "-"


def _as_dict(result: AuditResult | None) -> dict[str, Any] | None:
    return result.to_dict() if result is not None else None
