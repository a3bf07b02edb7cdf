"""
Phase timing for analysis runs.

The console keeps a tree of named scopes (``load``, ``extract``, ``report``)
and writes a begin/end line with the elapsed time of each one. Output goes
to a stream (stderr by default) so that reports written to stdout stay
machine readable.
"""

import sys
import time

from gatedcg.util.io import formatting


class Scope(object):
    """A timed node in the console's scope tree."""

    def __init__(self, parent, name):
        self.parent = parent
        self.name = name
        self._start = None
        self._end = None

    def begin(self):
        self._start = time.perf_counter()

    def end(self):
        self._end = time.perf_counter()

    @property
    def elapsed(self):
        return self._end - self._start

    def path(self):
        """Names from the root (exclusive) down to this scope."""
        if self.parent is None:
            return ()
        else:
            return self.parent.path() + (self.name,)

    def child(self, name):
        return Scope(self, name)


class ConsoleScopeManager(object):
    """``with console.scope("extract"): ...``"""

    __slots__ = "console", "name"

    def __init__(self, console, name):
        self.console = console
        self.name = name

    def __enter__(self):
        self.console.begin(self.name)

    def __exit__(self, type, value, tb):
        self.console.end()


class Console(object):
    """Hierarchical, timed progress output.

    Attributes:
        out: Output stream.
        root: Root scope.
        current: Innermost open scope.
        verbose: If False, only ``output`` with ``force=True`` is written.
        timings: ``(path, seconds)`` of every closed scope, in closing order.
    """

    def __init__(self, out=None, verbose=False):
        if out is None:
            out = sys.stderr
        self.out = out

        self.root = Scope(None, "root")
        self.current = self.root

        self.verbose = verbose
        self.timings = []

    def path(self):
        return "[ %s ]" % " | ".join(self.current.path())

    def begin(self, name):
        scope = self.current.child(name)
        scope.begin()
        self.current = scope

        self.output("begin %s" % self.path(), 0)

    def end(self):
        self.current.end()
        self.timings.append((self.current.path(), self.current.elapsed))
        self.output(
            "end   %s %s" % (self.path(), formatting.elapsedTime(self.current.elapsed)),
            0,
        )
        self.current = self.current.parent

    def scope(self, name):
        return ConsoleScopeManager(self, name)

    def output(self, s, tabs=1, force=False):
        if not (self.verbose or force):
            return

        if tabs:
            self.out.write("\t" * tabs)
        self.out.write(s)
        self.out.write("\n")
