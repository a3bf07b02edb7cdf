import os
from os.path import abspath, dirname
from unittest import TestCase

from gatedcg.analysis.callgraph import DispatchKind, extract_call_graph
from gatedcg.language.model import nodes
from gatedcg.language.model.loader import load_program
from gatedcg.language.model.program import DeclarationTarget, DefInfo, ImplementationTarget, Program
from gatedcg.util.application.errorhandler import ErrorHandler

SCRIPT_DIR = dirname(abspath(__file__))


# Expression shorthands for building bodies in tests.


def local(name):
    return nodes.Local(name)


def lit(value):
    return nodes.Literal(value)


def call(def_id, *args, span=nodes.NO_SPAN):
    return nodes.Call(nodes.Path(def_id), args, span=span)


def eq(name, value):
    return nodes.Binary(nodes.BinOp.EQ, local(name), lit(value))


def and_(lhs, rhs):
    return nodes.Binary(nodes.BinOp.AND, lhs, rhs)


def or_(lhs, rhs):
    return nodes.Binary(nodes.BinOp.OR, lhs, rhs)


def not_(operand):
    return nodes.Unary(nodes.UnOp.NOT, operand)


def block(*stmts, tail=None):
    return nodes.Block([s if isinstance(s, nodes.Stmt) else nodes.ExprStmt(s) for s in stmts], tail)


def if_(cond, *then, else_=None, span=nodes.NO_SPAN):
    return nodes.If(cond, block(*then), else_, span=span)


def loop(*body):
    return nodes.Loop(block(*body))


def method(name, resolution, fallback=None, receiver="x", span=nodes.NO_SPAN):
    return nodes.MethodCall(name, local(receiver), method=fallback, resolution=resolution, span=span)


def dynamic(decl):
    return DeclarationTarget(decl, True)


def concrete(impl, is_local=True):
    return ImplementationTarget(impl, is_local)


class ProgramBuilder(object):
    """Assembles a ``Program`` in memory, handing out fresh callable ids."""

    def __init__(self, crate="example"):
        self.crate = crate
        self.items = []
        self.defs = []
        self.files = {}
        self._next = 0

    def newId(self, path, crate=None):
        crate = crate or self.crate
        self._next += 1
        def_id = nodes.CallableId(crate, self._next)
        self.defs.append(DefInfo(def_id, path, crate == self.crate))
        return def_id

    def function(self, path, *stmts, span=nodes.NO_SPAN):
        def_id = self.newId(path)
        self.items.append(nodes.Function(def_id, path.rsplit("::", 1)[-1], block(*stmts), span=span))
        return def_id

    def extern(self, path, crate="std"):
        """A callable of another compilation unit."""
        return self.newId(path, crate)

    def trait(self, path, *methods, span=nodes.NO_SPAN):
        """
        Declare an interface. ``methods`` are names, or ``(name, body)``
        pairs for methods with a default body.

        Returns:
            ``(trait_id, {name: declaration id})``
        """
        trait_id = self.newId(path)
        decls = {}
        members = []
        for m in methods:
            name, body = (m, None) if isinstance(m, str) else m
            decls[name] = self.newId("%s::%s" % (path, name))
            members.append(nodes.TraitMethod(decls[name], name, body, span=span))
        self.items.append(nodes.Trait(trait_id, path, members))
        return trait_id, decls

    def impl(self, self_ty, methods, trait=None, path=None, span=nodes.NO_SPAN):
        """
        An implementation block; ``methods`` maps names to bodies.

        Returns:
            ``{name: method id}``
        """
        ids = {}
        members = []
        for name, body in methods.items():
            ids[name] = self.newId("%s::%s" % (path or self_ty, name))
            members.append(nodes.ImplMethod(ids[name], name, body, span=span))
        self.items.append(nodes.Impl(self_ty, members, trait=trait))
        return ids

    def build(self):
        return Program(self.crate, self.items, self.defs, files=self.files)


class TestBase(TestCase):
    def setUp(self):
        self.snippets_path = os.path.join(SCRIPT_DIR, "snippets")
        self.b = ProgramBuilder()
        self.errors = ErrorHandler()

    def extract(self, config=None):
        self.program = self.b.build()
        return extract_call_graph(self.program, config, self.errors)

    def load_snippet(self, name):
        return load_program(os.path.join(self.snippets_path, name))

    def assertEdge(self, graph, kind, caller, callee, depth):
        edge = graph.get(kind, caller, callee)
        self.assertIsNotNone(edge, "no %s edge %s -> %s" % (kind.value, caller, callee))
        self.assertEqual(edge.constraint_depth, depth, edge.describe())
        for other in DispatchKind:
            if other is not kind:
                self.assertIsNone(graph.get(other, caller, callee))
        return edge

    def staticDepth(self, graph, caller, callee):
        edge = graph.get(DispatchKind.STATIC, caller, callee)
        self.assertIsNotNone(edge, "no static edge %s -> %s" % (caller, callee))
        return edge.constraint_depth
