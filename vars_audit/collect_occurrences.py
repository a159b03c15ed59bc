"""Logic for scanning layer files for variable declarations."""

import logging
import re
from collections import Counter
from collections.abc import Iterable
from pathlib import Path

from vars_audit.occurrence import Occurrence

logger = logging.getLogger(__name__)

# Top-level YAML key: identifier at column 0 followed by the key terminator.
DEFAULT_NAME_PATTERN = r"^([a-z][_a-zA-Z0-9]*):"


def collect_occurrences(
    layer_sources: Iterable[str | Path],
    name_pattern: str | re.Pattern[str] = DEFAULT_NAME_PATTERN,
) -> list[Occurrence]:
    """Scan layers in order and return every declaration found, sorted.

    Missing or unreadable layers contribute nothing. A name declared twice in
    the same layer is reported twice.
    """
    pattern = re.compile(name_pattern) if isinstance(name_pattern, str) else name_pattern
    occurrences: list[Occurrence] = []
    for source in layer_sources:
        layer = str(source)
        try:
            text = Path(source).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Skipping layer %s: %s", layer, exc)
            continue
        for line in text.splitlines():
            match = pattern.match(line)
            if not match:
                continue
            name = match.group(1) if pattern.groups else match.group(0).rstrip(":")
            occurrences.append(Occurrence(name=name, layer=layer))
    occurrences.sort()
    return occurrences


def count_occurrences(occurrences: Iterable[Occurrence]) -> Counter[str]:
    """Return the number of declarations per variable name."""
    return Counter(o.name for o in occurrences)
