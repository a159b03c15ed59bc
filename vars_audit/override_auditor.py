"""Logic for detecting variables declared in too many layers."""

from collections import Counter

from vars_audit.audit_result import AuditResult
from vars_audit.exceeds_limit import exceeds_limit

MAX_DUPLICATES = 10


def audit_overrides(
    counts: Counter[str], max_duplicates: int = MAX_DUPLICATES
) -> AuditResult:
    """Classify names by declaration count and decide the override verdict.

    A name declared twice (a base value plus one override) is normal, but many
    of them hints at missing factorization. A name declared three times or more
    fails the audit on its own.
    """
    all_names = sorted(counts)
    singly = [n for n in all_names if counts[n] == 1]
    duplicates = {n: counts[n] for n in all_names if counts[n] > 1}
    multicates = {n: counts[n] for n in all_names if counts[n] > 2}

    too_many_duplicates = exceeds_limit(len(duplicates), len(all_names), max_duplicates)
    passed = not too_many_duplicates and not multicates

    if passed:
        message = (
            f"{len(duplicates)} of {len(all_names)} variable(s) overridden once, "
            "none declared more than twice"
        )
    elif multicates:
        message = (
            f"{len(multicates)} variable(s) declared in more than two places: "
            f"{', '.join(multicates)}"
        )
    else:
        message = (
            f"too many overridden variables: {len(duplicates)} "
            f"of {len(all_names)}"
        )

    return AuditResult(
        concern="override",
        passed=passed,
        message=message,
        evidence={
            "total": len(all_names),
            "singly_declared": len(singly),
            "duplicates": duplicates,
            "multicates": multicates,
        },
    )
