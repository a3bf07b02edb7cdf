"""
Pluggable node predicates used by the traversal.

- generated code: nodes whose span comes from macro expansion or other code
  generation, or carries no real location, are not analyzed at all.
- debug assertions: conditionals whose source text is a debug-only
  assertion do not add a constraint level.
- desugared matches: matches the compiler synthesized for error
  propagation, suspension points, iteration or formatting are not source
  level branches.

Each predicate is a plain callable so a ``Heuristics`` bundle can be
assembled with replacements without touching the traversal.
"""

import re

from gatedcg.language.model.nodes import MatchSource

DEFAULT_DEBUG_ASSERT_MACROS = ("debug_assert", "debug_assert_eq", "debug_assert_ne")

DEFAULT_DESUGARED_MATCH_SOURCES = frozenset(
    [
        MatchSource.TRY_DESUGAR,
        MatchSource.AWAIT_DESUGAR,
        MatchSource.FOR_LOOP_DESUGAR,
        MatchSource.FORMAT_ARGS,
    ]
)


def isGeneratedCode(node):
    span = node.span
    return span.from_expansion() or span.is_dummy()


def neverGenerated(node):
    return False


class DebugAssertionMatcher(object):
    """Matches source text starting with an invocation of one of ``macros``."""

    def __init__(self, program, macros=DEFAULT_DEBUG_ASSERT_MACROS):
        self.program = program
        self.macros = tuple(macros)
        if self.macros:
            names = "|".join(re.escape(m) for m in sorted(self.macros, key=len, reverse=True))
            self._pattern = re.compile(r"\s*(?:%s)\s*!" % names)
        else:
            self._pattern = None

    def __call__(self, node):
        if self._pattern is None:
            return False
        text = self.program.source_text(node.span)
        return self._pattern.match(text) is not None


class DesugaredMatchMatcher(object):
    def __init__(self, sources=DEFAULT_DESUGARED_MATCH_SOURCES):
        self.sources = frozenset(sources)

    def __call__(self, node):
        return node.source in self.sources


class Heuristics(object):
    """
    The predicates consulted by the traversal.

    Attributes:
        isGenerated: node -> bool, True if the node must be skipped.
        suppressesIncrement: if-node -> bool, True for debug assertions.
        isDesugared: match-node -> bool, True for compiler-made matches.
    """

    __slots__ = "isGenerated", "suppressesIncrement", "isDesugared"

    def __init__(self, isGenerated, suppressesIncrement, isDesugared):
        self.isGenerated = isGenerated
        self.suppressesIncrement = suppressesIncrement
        self.isDesugared = isDesugared

    @classmethod
    def forProgram(
        cls,
        program,
        debug_assert_macros=DEFAULT_DEBUG_ASSERT_MACROS,
        desugared_match_sources=DEFAULT_DESUGARED_MATCH_SOURCES,
        skip_generated=True,
    ):
        return cls(
            isGeneratedCode if skip_generated else neverGenerated,
            DebugAssertionMatcher(program, debug_assert_macros),
            DesugaredMatchMatcher(desugared_match_sources),
        )

    def replace(self, **predicates):
        """Return a copy with some predicates swapped out."""
        current = {name: getattr(self, name) for name in self.__slots__}
        current.update(predicates)
        return Heuristics(**current)
