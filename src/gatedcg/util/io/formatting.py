"""
Human-readable formatting helpers.
"""


def elapsedTime(t):
    """
    Format a duration in seconds using the most fitting unit.

    Example:
        elapsedTime(0.05) -> "   50 ms"
        elapsedTime(125.5) -> "2.092 m"
    """
    if t < 1.0:
        return "%5.4g ms" % (t * 1000.0)
    elif t < 60.0:
        return "%5.4g s" % (t)
    elif t < 3600.0:
        return "%5.4g m" % (t / 60.0)
    else:
        return "%5.4g h" % (t / 3600.0)


def pluralize(count, noun):
    """Return ``"1 edge"`` / ``"3 edges"`` style counts."""
    return "%d %s%s" % (count, noun, "" if count == 1 else "s")
