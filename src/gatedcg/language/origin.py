"""
Source locations of program-model nodes.

Locations are only used for diagnostics and reports; they never take part
in edge identity.
"""

from collections import namedtuple


def originString(origin):
    """Format a location as a human-readable string.

    Returns:
        A string like ``'File "src/main.rs", line 10:5'`` or
        ``"<unknown origin>"`` if origin is None.
    """
    if origin is None:
        return "<unknown origin>"

    if origin.filename:
        s = 'File "%s"' % origin.filename
    else:
        s = ""

    if origin.lineno is None or origin.lineno < 0:
        return s or "<unknown origin>"

    if s:
        s += ", "

    if origin.col is None or origin.col < 0:
        return "%sline %d" % (s, origin.lineno)
    return "%sline %d:%d" % (s, origin.lineno, origin.col)


class SourceLocation(namedtuple("SourceLocation", "filename lineno col end_lineno end_col")):
    """File plus span of a node.

    Fields:
        filename: Source path as exported by the frontend.
        lineno, col: Start (1-indexed line, 0-indexed column).
        end_lineno, end_col: End of the span, may equal the start.
    """

    __slots__ = ()

    originString = originString

    def __str__(self):
        return originString(self)


UNKNOWN_LOCATION = SourceLocation(None, -1, -1, -1, -1)
