"""
Call graph extraction over a typed program model.

``CallGraphExtractor`` performs one depth-first pass over a ``Program``:
items feed the ``DeclarationCollector``, bodies are walked with a
``DepthContext`` whose depth the ``ConstraintDepthTracker`` adjusts at
conditionals, logical operators, loops and matches, and every call site is
turned into a candidate edge by the ``CallClassifier`` and merged into the
``CallGraph``.

Generated code is skipped before any other rule applies. Node kinds without
a handler are traversed structurally and have no effect of their own.
"""

import logging

from gatedcg.application import config as analysisconfig
from gatedcg.language.model import nodes
from gatedcg.util.typedispatch import TypeDispatcher, defaultdispatch, dispatch
from .classifier import CallClassifier
from .declarations import DeclarationCollector
from .depth import ConstraintDepthTracker, DepthContext
from .heuristics import Heuristics
from .store import CallGraph

LOG = logging.getLogger(__name__)


class CallGraphExtractor(TypeDispatcher):
    """
    Traversal driver. Calling ``extractor(node, ctx)`` visits one node and
    returns the depth that follows it; use ``visit`` to honor skip rules.

    Attributes:
        program: The analyzed ``Program``.
        graph: The ``CallGraph`` being built.
        heuristics: Skip and desugaring predicates.
        tracker: Depth rules.
        classifier: Call site classification.
        collector: Function/declaration collection.
    """

    def __init__(self, program, config=None, errors=None, heuristics=None):
        if config is None:
            config = analysisconfig.AnalysisConfig()

        self.program = program
        self.graph = CallGraph()
        self.heuristics = heuristics or Heuristics.forProgram(
            program,
            debug_assert_macros=config.debug_assert_macros,
            desugared_match_sources=config.desugared_match_sources,
            skip_generated=config.skip_generated,
        )
        self.tracker = ConstraintDepthTracker(self.heuristics, config.branch_policy)
        self.classifier = CallClassifier(program, errors, config.report_unresolved)
        self.collector = DeclarationCollector(program, self.graph, self.heuristics.isGenerated)

    def extract(self):
        outer = DepthContext.enter(None)
        for item in self.program.items():
            self.visit(item, outer)

        LOG.info(
            "Extracted %d functions, %d declarations, %d static / %d dynamic / %d non-local calls",
            len(self.graph.functions),
            len(self.graph.method_decls),
            len(self.graph.static_calls),
            len(self.graph.dynamic_calls),
            len(self.graph.nonlocal_calls),
        )
        return self.graph

    def visit(self, node, ctx):
        if self.heuristics.isGenerated(node):
            return ctx.depth
        return self(node, ctx)

    def visitBody(self, body, def_id):
        if body is not None:
            self.visit(body, DepthContext.enter(def_id))

    # ------------------------------------------------------------------ items

    @dispatch(nodes.Function)
    def visitFunction(self, node, ctx):
        self.collector.function(node)
        self.visitBody(node.body, node.def_id)
        return ctx.depth

    @dispatch(nodes.Trait)
    def visitTrait(self, node, ctx):
        for method in node.methods:
            self.visit(method, ctx)
        return ctx.depth

    @dispatch(nodes.TraitMethod)
    def visitTraitMethod(self, node, ctx):
        self.collector.traitMethod(node)
        self.visitBody(node.body, node.def_id)
        return ctx.depth

    @dispatch(nodes.Impl)
    def visitImpl(self, node, ctx):
        for method in node.methods:
            if self.heuristics.isGenerated(method):
                continue
            self.collector.implMethod(node, method)
            self.visitBody(method.body, method.def_id)
        return ctx.depth

    @dispatch(nodes.Module)
    def visitModule(self, node, ctx):
        for item in node.items:
            self.visit(item, ctx)
        return ctx.depth

    @dispatch(nodes.Const)
    def visitConst(self, node, ctx):
        self.visitBody(node.body, None)
        return ctx.depth

    @dispatch(nodes.ItemStmt)
    def visitItemStmt(self, node, ctx):
        # The nested item is its own callable; the enclosing context resumes.
        self.visit(node.item, DepthContext.enter(None))
        return ctx.depth

    # ------------------------------------------------------------- statements

    @dispatch(nodes.Block)
    def visitBlock(self, node, ctx):
        return self.tracker.sequence(node.stmts, node.tail, ctx, self.visit)

    @dispatch(nodes.ExprStmt)
    def visitExprStmt(self, node, ctx):
        return self.visit(node.expr, ctx)

    @dispatch(nodes.Let)
    def visitLet(self, node, ctx):
        if node.init is None:
            return ctx.depth
        return self.visit(node.init, ctx)

    # ------------------------------------------------------------ expressions

    @dispatch(nodes.If)
    def visitIf(self, node, ctx):
        return self.tracker.conditional(node, ctx, self.visit)

    @dispatch(nodes.Binary)
    def visitBinary(self, node, ctx):
        if ctx.in_condition:
            if node.op is nodes.BinOp.AND:
                return self.tracker.conjunction(node, ctx, self.visit)
            elif node.op is nodes.BinOp.OR:
                return self.tracker.disjunction(node, ctx, self.visit)
        return self.visitChildren(node, ctx)

    @dispatch(nodes.Unary)
    def visitUnary(self, node, ctx):
        if ctx.in_condition and node.op is nodes.UnOp.NOT:
            return self.visit(node.operand, ctx)
        return self.visitChildren(node, ctx)

    @dispatch(nodes.Paren)
    def visitParen(self, node, ctx):
        if ctx.in_condition:
            return self.visit(node.expr, ctx)
        return self.visitChildren(node, ctx)

    @dispatch(nodes.Loop)
    def visitLoop(self, node, ctx):
        return self.tracker.loop(node, ctx, self.visit)

    @dispatch(nodes.Match)
    def visitMatch(self, node, ctx):
        return self.tracker.match(node, ctx, self.visit)

    @dispatch(nodes.Call)
    def visitCall(self, node, ctx):
        edge = self.classifier.classifyCall(node, ctx)
        if edge is not None:
            self.graph.merge(edge)
        return self.visitChildren(node, ctx)

    @dispatch(nodes.MethodCall)
    def visitMethodCall(self, node, ctx):
        self.graph.merge(self.classifier.classifyMethodCall(node, ctx))
        return self.visitChildren(node, ctx)

    @defaultdispatch
    def visitChildren(self, node, ctx):
        inner = ctx.plain()
        for child in node.children():
            self.visit(child, inner)
        return ctx.depth


def extract_call_graph(program, config=None, errors=None):
    """Extract the call graph of ``program``; see ``CallGraphExtractor``."""
    return CallGraphExtractor(program, config, errors).extract()
