"""
Diagnostic collection for an analysis run.

Non-fatal findings (e.g. method calls whose target could not be resolved)
are recorded as warnings; errors make ``finalize()`` abort the run. Records
are buffered and reported through ``logging`` when flushed.
"""

import logging

from gatedcg.application.errors import AnalysisAbort

LOG = logging.getLogger(__name__)


class ErrorScopeManager(object):
    """Context manager isolating error counts of a nested phase.

    Example:
        with handler.scope():
            handler.warn(...)
    """

    __slots__ = "handler"

    def __init__(self, handler):
        self.handler = handler

    def __enter__(self):
        self.handler._push()

    def __exit__(self, type, value, tb):
        self.handler._pop()


class ShowStatusManager(object):
    """Context manager reporting the run status on exit.

    Flushes buffered diagnostics and logs success or abort. An
    ``AnalysisAbort`` raised inside the block is reported and suppressed.
    """

    __slots__ = "handler"

    def __init__(self, handler):
        self.handler = handler

    def __enter__(self):
        pass

    def __exit__(self, type, value, tb):
        self.handler.flush()

        if type is not None:
            LOG.error("Analysis aborted - %s", self.handler.statusString())
        else:
            LOG.info("Analysis finished - %s", self.handler.statusString())

        return type is AnalysisAbort


class Diagnostic(object):
    """A single buffered error or warning."""

    __slots__ = "level", "classification", "message", "trace"

    def __init__(self, level, classification, message, trace):
        self.level = level
        self.classification = classification
        self.message = message
        self.trace = trace

    def __repr__(self):
        return "Diagnostic(%s, %r, %r)" % (
            logging.getLevelName(self.level),
            self.classification,
            self.message,
        )


class ErrorHandler(object):
    """Collects errors and warnings produced during one analysis run.

    Attributes:
        stack: Saved counters of enclosing scopes.
        errorCount: Errors recorded in the current scope.
        warningCount: Warnings recorded in the current scope.
        defered: If True, diagnostics are buffered until ``flush()``.
        buffer: Pending diagnostics.
        history: Every diagnostic recorded so far, flushed or not.
    """

    def __init__(self, defered=True):
        self.stack = []

        self.errorCount = 0
        self.warningCount = 0

        self.defered = defered
        self.buffer = []
        self.history = []

    def error(self, classification, message, trace=()):
        """Record an error.

        Args:
            classification: Short category, e.g. ``"invariant"``.
            message: Human readable description.
            trace: SourceLocation objects pointing at the offending code.
        """
        self._record(Diagnostic(logging.ERROR, classification, message, tuple(trace)))
        self.errorCount += 1

    def warn(self, classification, message, trace=()):
        """Record a warning. Same arguments as ``error``."""
        self._record(Diagnostic(logging.WARNING, classification, message, tuple(trace)))
        self.warningCount += 1

    def _record(self, diagnostic):
        self.history.append(diagnostic)
        if self.defered:
            self.buffer.append(diagnostic)
        else:
            self.display(diagnostic)

    def display(self, diagnostic):
        where = "; ".join(
            "<unknown origin>" if origin is None else origin.originString()
            for origin in diagnostic.trace
        )
        if where:
            LOG.log(diagnostic.level, "%s: %s (%s)", diagnostic.classification, diagnostic.message, where)
        else:
            LOG.log(diagnostic.level, "%s: %s", diagnostic.classification, diagnostic.message)

    def warnings(self, classification=None):
        """Return recorded warnings, optionally filtered by classification."""
        return [
            d
            for d in self.history
            if d.level == logging.WARNING
            and (classification is None or d.classification == classification)
        ]

    def statusString(self):
        return "%d errors, %d warnings" % (self.errorCount, self.warningCount)

    def finalize(self):
        """Raise ``AnalysisAbort`` if any error was recorded."""
        if self.errorCount > 0:
            raise AnalysisAbort(self.statusString())

    def flush(self):
        for diagnostic in self.buffer:
            self.display(diagnostic)
        self.buffer = []

    def _push(self):
        self.stack.append((self.errorCount, self.warningCount))
        self.errorCount = 0
        self.warningCount = 0

    def _pop(self):
        errorCount, warningCount = self.stack.pop()
        self.errorCount += errorCount
        self.warningCount += warningCount

    def scope(self):
        return ErrorScopeManager(self)

    def statusManager(self):
        return ShowStatusManager(self)
