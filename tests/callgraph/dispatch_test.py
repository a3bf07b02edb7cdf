import unittest

from gatedcg.analysis.callgraph import DispatchKind, classify
from gatedcg.application.config import AnalysisConfig
from gatedcg.application.errors import InternalError
from gatedcg.language.model import nodes
from gatedcg.language.model.program import DeclarationTarget, ImplementationTarget

from .base import TestBase, block, call, concrete, dynamic, local, method


class ClassifyTest(unittest.TestCase):
    decl = nodes.CallableId("example", 1)
    impl = nodes.CallableId("example", 2)
    foreign = nodes.CallableId("core", 3)

    def test_declaration_is_dynamic(self):
        self.assertEqual(classify(DeclarationTarget(self.decl, True), None), (DispatchKind.DYNAMIC, self.decl))

    def test_nonlocal_declaration_is_still_dynamic(self):
        self.assertEqual(
            classify(DeclarationTarget(self.foreign, False), None), (DispatchKind.DYNAMIC, self.foreign)
        )

    def test_local_implementation_is_static(self):
        self.assertEqual(classify(ImplementationTarget(self.impl, True), None), (DispatchKind.STATIC, self.impl))

    def test_foreign_implementation_is_nonlocal(self):
        self.assertEqual(
            classify(ImplementationTarget(self.foreign, False), None), (DispatchKind.NONLOCAL, self.foreign)
        )

    def test_unresolved_falls_back_to_dynamic(self):
        self.assertEqual(classify(None, self.decl), (DispatchKind.DYNAMIC, self.decl))

    def test_nothing_to_fall_back_to(self):
        with self.assertRaises(InternalError):
            classify(None, None)


class DispatchTest(TestBase):
    def setUp(self):
        super().setUp()
        self.trait_id, decls = self.b.trait("T", "bla")
        self.decl = decls["bla"]

    def test_interface_call_with_single_implementation_is_dynamic(self):
        self.b.impl("S", {"bla": block()}, trait=self.trait_id)
        virt = self.b.function("_virt", method("bla", dynamic(self.decl), self.decl))
        graph = self.extract()

        self.assertEqual(len(graph.implementations_of(self.decl)), 1)
        self.assertEdge(graph, DispatchKind.DYNAMIC, virt, self.decl, 0)

    def test_concrete_receiver_is_static(self):
        impl = self.b.impl("S", {"bla": block()}, trait=self.trait_id)["bla"]
        main = self.b.function("main", method("bla", concrete(impl), self.decl, receiver="s"))
        graph = self.extract()

        self.assertEqual(graph.implementations_of(self.decl), [impl])
        self.assertEdge(graph, DispatchKind.STATIC, main, impl, 0)
        self.assertIsNone(graph.get(DispatchKind.DYNAMIC, main, self.decl))

    def test_foreign_body_is_nonlocal(self):
        clone = self.b.extern("alloc::string::String::clone", crate="alloc")
        main = self.b.function("main", method("clone", concrete(clone, is_local=False)))
        graph = self.extract()
        edge = self.assertEdge(graph, DispatchKind.NONLOCAL, main, clone, 0)
        self.assertEqual(edge.callee_path, "alloc::string::String::clone")

    def test_path_calls_are_static(self):
        # T::bla(&s) and a foreign free function named by path.
        foreign = self.b.extern("std::mem::drop")
        main = self.b.function("main", call(self.decl, local("s")), call(foreign, local("s")))
        graph = self.extract()
        self.assertEdge(graph, DispatchKind.STATIC, main, self.decl, 0)
        self.assertEdge(graph, DispatchKind.STATIC, main, foreign, 0)

    def test_unresolved_path_yields_no_edge(self):
        main = self.b.function("main", nodes.Call(local("callback")), nodes.Call(nodes.Path(None, "f")))
        graph = self.extract()
        self.assertEqual(len(graph), 0)
        self.assertIn(main, graph.functions)

    def test_unresolved_method_is_dynamic_with_warning(self):
        main = self.b.function("main", method("bla", None, self.decl))
        graph = self.extract()

        self.assertEdge(graph, DispatchKind.DYNAMIC, main, self.decl, 0)
        warnings = self.errors.warnings("unresolved-method")
        self.assertEqual(len(warnings), 1)
        self.assertIn("bla", warnings[0].message)
        self.assertEqual(self.errors.errorCount, 0)

    def test_unresolved_warning_can_be_disabled(self):
        self.b.function("main", method("bla", None, self.decl))
        self.extract(AnalysisConfig(report_unresolved=False))
        self.assertEqual(self.errors.warnings(), [])

    def test_unresolvable_method_aborts(self):
        self.b.function("main", method("mystery", None, None))
        with self.assertRaises(InternalError):
            self.extract()

    def test_same_pair_in_different_sets(self):
        impl = self.b.impl("S", {"bla": block()}, trait=self.trait_id)["bla"]
        main = self.b.function(
            "main",
            method("bla", dynamic(impl)),
            method("bla", concrete(impl)),
        )
        graph = self.extract()
        self.assertIsNotNone(graph.get(DispatchKind.DYNAMIC, main, impl))
        self.assertIsNotNone(graph.get(DispatchKind.STATIC, main, impl))
        self.assertEqual(len(graph), 2)
