"""Logic for evaluating selected variables and deciding the definitions verdict."""

import logging
import re
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor

from vars_audit.audit_result import AuditResult
from vars_audit.compile_pattern import compile_pattern
from vars_audit.resolution_outcome import Defined, ResolutionOutcome, Undefined

logger = logging.getLogger(__name__)

UNRESOLVED_MARKER = "VARIABLE IS NOT DEFINED!"
# Anchored: a legitimate value merely containing the marker is still Defined.
UNRESOLVED_RE = re.compile(r"^" + re.escape(UNRESOLVED_MARKER) + r":?\s*(.*)$", re.S)

Evaluator = Callable[[str], str]


def classify_value(text: str) -> ResolutionOutcome:
    """Turn the evaluator's textual answer into a resolution outcome."""
    match = UNRESOLVED_RE.match(text)
    if match:
        return Undefined(reason=(match.group(1) or "").strip())
    return Defined(value=text)


def success_summary(count: int, error_filter: str | None) -> str:
    """Return the summary line printed when every variable is defined."""
    summary = f"all variables ({count}) are defined"
    if error_filter:
        summary += f" - or filtered by this regex: `{error_filter}`"
    return summary


class DefinitionResolver:
    """Evaluates variables one by one and applies the error budget."""

    def __init__(self, evaluator: Evaluator, workers: int = 1) -> None:
        """Initialize the resolver with an evaluator and its parallelism."""
        self.evaluator = evaluator
        self.workers = max(1, workers)

    def resolve(self, name: str) -> ResolutionOutcome:
        """Resolve a single variable."""
        return classify_value(str(self.evaluator(name)))

    def resolve_all(self, names: Iterable[str]) -> dict[str, ResolutionOutcome]:
        """Resolve every name, returning outcomes keyed and sorted by name."""
        ordered = sorted(set(names))
        if self.workers == 1 or len(ordered) < 2:  # noqa: PLR2004
            outcomes = [self.resolve(n) for n in ordered]
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                outcomes = list(pool.map(self.resolve, ordered))
        return dict(zip(ordered, outcomes, strict=True))

    def audit(
        self,
        variables: Iterable[str],
        error_filter: str | None = "",
        error_assume: int = 0,
    ) -> AuditResult:
        """Fail when more non-exempted variables are undefined than assumed."""
        exempt = compile_pattern(error_filter, "error_filter")
        outcomes = self.resolve_all(variables)

        undefined = {n: o for n, o in outcomes.items() if isinstance(o, Undefined)}
        errors = sorted(n for n in undefined if not (exempt and exempt.search(n)))
        exempted = sorted(n for n in undefined if n not in errors)
        for name in errors:
            logger.info("Undefined variable %s: %s", name, undefined[name].reason)

        passed = len(errors) <= error_assume
        if passed:
            message = success_summary(len(outcomes), error_filter)
        else:
            message = f"UNDEFINED VARIABLE(S) [{len(errors)}/{len(outcomes)}]"

        return AuditResult(
            concern="definitions",
            passed=passed,
            message=message,
            evidence={
                "checked": len(outcomes),
                "errors": errors,
                "exempted": exempted,
                "reasons": {n: undefined[n].reason for n in errors},
                "error_assume": error_assume,
                "error_filter": error_filter or "",
            },
        )
