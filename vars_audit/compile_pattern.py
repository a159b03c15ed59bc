"""Logic for compiling user-supplied regular expressions."""

import re

from vars_audit.errors import ConfigError


def compile_pattern(pattern: str | None, option: str) -> re.Pattern[str] | None:
    """Compile a regex option; an empty pattern means "no filter" and gives None."""
    if not pattern:
        return None
    if not isinstance(pattern, str):
        msg = f"{option} must be a regular expression string, got {pattern!r}"
        raise ConfigError(msg)
    try:
        return re.compile(pattern)
    except re.error as exc:
        msg = f"{option} is not a valid regular expression: {pattern!r} ({exc})"
        raise ConfigError(msg) from exc
