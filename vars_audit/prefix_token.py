"""Logic for deriving the namespace prefix of a variable name."""

import re

# role__name or role_sub__name: the namespace runs up to the double underscore.
DOUBLE_UNDERSCORE_RE = re.compile(r"^[A-Za-z0-9]+(?:_[A-Za-z0-9]+)?__(?=[A-Za-z0-9])")
# app_name: the namespace is the first word.
SINGLE_UNDERSCORE_RE = re.compile(r"^[A-Za-z0-9]+_(?=[A-Za-z0-9])")


def prefix_token(name: str) -> str | None:
    """Return the namespace prefix of a name (trailing underscores included).

    The double-underscore form is checked first. Returns None for a one-word
    name, i.e. a name that carries no namespace.
    """
    match = DOUBLE_UNDERSCORE_RE.match(name) or SINGLE_UNDERSCORE_RE.match(name)
    return match.group(0) if match else None
