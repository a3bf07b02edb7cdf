"""Analysis pipeline.

Runs the phases of a call graph extraction on an ``AnalysisContext``:

1. load - decode the frontend's JSON export into a ``Program``
2. extract - one traversal building the ``CallGraph``
3. finalize - report diagnostics, abort if errors were recorded

Phases are timed through the context's console.
"""

import logging

from gatedcg.analysis.callgraph import extract_call_graph
from gatedcg.language.model import load_program
from gatedcg.util.io.formatting import pluralize
from .context import AnalysisContext
from .errors import AnalysisAbort, InternalError

LOG = logging.getLogger(__name__)


def analyze(program, context=None):
    """
    Extract the call graph of an already loaded program.

    Raises:
        AnalysisAbort: On an internal invariant violation or if errors were
            recorded; diagnostics are flushed first.
    """
    if context is None:
        context = AnalysisContext()

    with context.console.scope("extract"), context.errors.scope():
        try:
            graph = extract_call_graph(program, context.config, context.errors)
        except InternalError as e:
            context.errors.error("internal", str(e))
            context.errors.flush()
            raise AnalysisAbort(context.errors.statusString()) from e

        LOG.debug("extract: %s", context.errors.statusString())

        context.console.output(
            "%s, %s"
            % (pluralize(len(graph.functions), "function"), pluralize(len(graph), "call edge"))
        )

    context.errors.flush()
    context.errors.finalize()
    LOG.info("Call graph of %r: %s", program.crate, context.errors.statusString())
    return graph


def analyze_file(path, config=None, context=None):
    """
    Load the export at ``path`` and extract its call graph.

    Raises:
        ModelError: If the export is malformed.
        AnalysisAbort: See ``analyze``.
    """
    if context is None:
        context = AnalysisContext(config)
    elif config is not None:
        context.config = config

    with context.console.scope("load"):
        program = load_program(path)

    return analyze(program, context)
