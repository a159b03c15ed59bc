"""Logic for the absolute-and-relative threshold check shared by the auditors."""


def exceeds_limit(count: int, total: int, limit: int) -> bool:
    """Return True when count is above limit both absolutely and as a percentage.

    The same limit value is used for both comparisons, e.g. a limit of 10 means
    "more than 10 names, and more than 10% of all names".
    """
    if total <= 0:
        return False
    return count > limit and count * 100 / total > limit
