"""Logic for auditing variable names against the namespace-prefix convention."""

from collections import Counter
from collections.abc import Iterable

from vars_audit.audit_result import AuditResult
from vars_audit.exceeds_limit import exceeds_limit
from vars_audit.prefix_token import prefix_token

SIMPLIFY_REMARK = (
    "If two of these three checks fail, variable names are confusing: "
    "group them under fewer, shared prefixes (e.g. role__name or app_name)."
)


class NamespaceAuditor:
    """Counts namespace prefixes over the whole variable inventory."""

    def __init__(
        self, pfx_min_uses: int = 4, pfx_max_none: int = 10, pfx_max_once: int = 10
    ) -> None:
        """Initialize the auditor with its thresholds."""
        self.pfx_min_uses = pfx_min_uses
        self.pfx_max_none = pfx_max_none
        self.pfx_max_once = pfx_max_once

        self.names: list[str] = []
        self.one_words: list[str] = []
        self.prefix_counts: Counter[str] = Counter()

    def analyze(self, names: Iterable[str]) -> None:
        """Derive the prefix of every distinct name and count prefix usage."""
        self.names = sorted(set(names))
        self.one_words = []
        self.prefix_counts = Counter()
        for name in self.names:
            token = prefix_token(name)
            if token is None:
                self.one_words.append(name)
            else:
                self.prefix_counts[token] += 1

    def used_once(self) -> list[str]:
        """Return the prefixes carried by a single name."""
        return sorted(t for t, c in self.prefix_counts.items() if c == 1)

    def average_use(self) -> float:
        """Return the mean number of names sharing each prefix."""
        if not self.prefix_counts:
            return 0.0
        return sum(self.prefix_counts.values()) / len(self.prefix_counts)

    def check_one_words(self) -> AuditResult:
        """Fail when too many names carry no prefix at all."""
        count = len(self.one_words)
        passed = not exceeds_limit(count, len(self.names), self.pfx_max_none)
        return AuditResult(
            concern="namespace-onewords",
            passed=passed,
            message=f"{count} variable(s) without prefix",
            evidence={"one_words": list(self.one_words)},
        )

    def check_prefix_once(self) -> AuditResult:
        """Fail when too many prefixes are used by a single name."""
        once = self.used_once()
        passed = not exceeds_limit(len(once), len(self.names), self.pfx_max_once)
        return AuditResult(
            concern="namespace-prefixonce",
            passed=passed,
            message=f"{len(once)} prefix(es) used only once",
            evidence={"used_once": once},
        )

    def check_average_use(self) -> AuditResult:
        """Fail when prefixes are shared by too few names on average."""
        avg = self.average_use()
        return AuditResult(
            concern="namespace-avguse",
            passed=avg >= self.pfx_min_uses,
            message=f"prefixes used {avg:.2f} time(s) on average "
            f"(minimum {self.pfx_min_uses})",
            evidence={
                "average_use": avg,
                "distinct_prefixes": len(self.prefix_counts),
            },
        )

    def audit(self, names: Iterable[str]) -> tuple[AuditResult, list[AuditResult]]:
        """Run the three checks and return the overall verdict with each signal.

        The overall verdict fails only when at least two signals fail.
        """
        self.analyze(names)
        signals = [
            self.check_one_words(),
            self.check_prefix_once(),
            self.check_average_use(),
        ]
        failed = [s.concern for s in signals if not s.passed]
        passed = len(failed) < 2  # noqa: PLR2004

        if passed:
            message = "variable names are namespaced"
            if failed:
                message += f" ({failed[0]} failed alone)"
        else:
            message = f"confusing variables: {', '.join(failed)} failed"

        overall = AuditResult(
            concern="namespace",
            passed=passed,
            message=message,
            evidence={
                "total": len(self.names),
                "failed_signals": failed,
                "prefix_usage": dict(sorted(self.prefix_counts.items())),
                "one_words": list(self.one_words),
            },
            remarks=[SIMPLIFY_REMARK],
        )
        return overall, signals
