"""Logic for choosing which variables a run validates."""

import logging
import re
from collections.abc import Iterable

from vars_audit.compile_pattern import compile_pattern
from vars_audit.errors import ConfigError

logger = logging.getLogger(__name__)

LIST_SEPARATORS_RE = re.compile(r"[,\s]+")


def parse_variable_list(value: str | list[str] | tuple[str, ...] | None) -> list[str]:
    """Parse an explicit variable list given as a list or as free text.

    Free text is split on commas and whitespace. Empty tokens are dropped and
    the result is deduplicated and sorted.
    """
    if value is None:
        return []
    if isinstance(value, str):
        tokens = LIST_SEPARATORS_RE.split(value)
    elif isinstance(value, (list, tuple)):
        tokens = []
        for item in value:
            if not isinstance(item, str):
                msg = f"from_list entries must be strings, got {item!r}"
                raise ConfigError(msg)
            tokens.extend(LIST_SEPARATORS_RE.split(item))
    else:
        msg = f"from_list must be a list or a string, got {type(value).__name__}"
        raise ConfigError(msg)
    return sorted({t for t in tokens if t})


def select_variables(
    names: Iterable[str],
    from_list: str | list[str] | None = None,
    from_pattern: str | None = "",
) -> tuple[str, ...]:
    """Return the sorted, deduplicated set of names to validate this run.

    An explicit list wins over the regex filter. Listed names that are not
    declared in any layer are dropped.
    """
    known = set(names)
    pattern = compile_pattern(from_pattern, "from_pattern")
    explicit = parse_variable_list(from_list)

    if explicit:
        unknown = [n for n in explicit if n not in known]
        if unknown:
            logger.warning(
                "Ignoring %d listed variable(s) not declared in any layer: %s",
                len(unknown),
                ", ".join(unknown),
            )
        return tuple(n for n in explicit if n in known)
    if pattern is not None:
        return tuple(sorted(n for n in known if pattern.search(n)))
    return tuple(sorted(known))
