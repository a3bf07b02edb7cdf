import json
import unittest

import pytest

from gatedcg.application.errors import ModelError
from gatedcg.language.model import nodes
from gatedcg.language.model.loader import load_program, program_from_dict
from gatedcg.language.model.program import DeclarationTarget, ImplementationTarget


def export(*items, **extra):
    data = {"crate": "demo", "items": list(items)}
    data.update(extra)
    return data


def fn(index, *stmts, **extra):
    item = {"kind": "fn", "id": index, "name": "f%d" % index, "body": {"kind": "block", "stmts": list(stmts)}}
    item.update(extra)
    return item


class LoaderTest(unittest.TestCase):
    def body(self, program, index=0):
        return program.items()[index].body

    def test_ids(self):
        program = program_from_dict(export(fn(1), fn(2)))
        first, second = program.items()
        self.assertEqual(first.def_id, nodes.CallableId("demo", 1))
        self.assertEqual(second.def_id, nodes.CallableId("demo", 2))

    def test_foreign_ids_and_defs(self):
        program = program_from_dict(
            export(defs=[{"id": ["core", 4], "path": "core::mem::drop"}, {"id": 1, "path": "demo::f1"}])
        )
        core = nodes.CallableId("core", 4)
        self.assertEqual(program.def_path(core), "core::mem::drop")
        self.assertFalse(program.is_local(core))
        self.assertTrue(program.is_local(nodes.CallableId("demo", 1)))
        self.assertEqual(program.def_path(nodes.CallableId("demo", 9)), "demo[9]")

    def test_expressions(self):
        cond = {"kind": "binary", "op": "&&", "lhs": {"kind": "local", "name": "a"}, "rhs": {"kind": "lit", "value": True}}
        stmt = {
            "kind": "if",
            "cond": {"kind": "unary", "op": "!", "operand": cond},
            "then": {"kind": "block", "tail": {"kind": "call", "func": {"kind": "path", "res": 2}}},
            "else": {"kind": "loop", "source": "while", "body": {"kind": "block"}},
        }
        program = program_from_dict(export(fn(1, stmt)))
        expr = self.body(program).stmts[0].expr

        self.assertIsInstance(expr, nodes.If)
        self.assertIs(expr.cond.op, nodes.UnOp.NOT)
        self.assertIs(expr.cond.operand.op, nodes.BinOp.AND)
        self.assertEqual(expr.then.tail.func.res, nodes.CallableId("demo", 2))
        self.assertIs(expr.else_.source, nodes.LoopSource.WHILE)

    def test_method_resolution(self):
        calls = [
            {"kind": "method_call", "name": "m", "receiver": {"kind": "local", "name": "x"}, "method": 3,
             "resolution": {"target": 3, "kind": "declaration"}},
            {"kind": "method_call", "name": "m", "receiver": {"kind": "local", "name": "x"},
             "resolution": {"target": ["alloc", 5], "kind": "implementation"}},
            {"kind": "method_call", "name": "m", "receiver": {"kind": "local", "name": "x"}, "method": 3},
        ]
        program = program_from_dict(export(fn(1, *calls)))
        decl, impl, failed = [s.expr for s in self.body(program).stmts]

        self.assertEqual(program.inferred_callee(decl), DeclarationTarget(nodes.CallableId("demo", 3), True))
        self.assertEqual(program.inferred_callee(impl), ImplementationTarget(nodes.CallableId("alloc", 5), False))
        self.assertIsNone(program.inferred_callee(failed))
        self.assertEqual(failed.method, nodes.CallableId("demo", 3))

    def test_locality_from_defs(self):
        call = {"kind": "method_call", "name": "m", "receiver": {"kind": "local", "name": "x"},
                "resolution": {"target": ["sibling", 5], "kind": "implementation"}}
        explicit = dict(call, resolution=dict(call["resolution"], local=False))
        program = program_from_dict(
            export(fn(1, call, explicit), defs=[{"id": ["sibling", 5], "path": "sibling::m", "local": True}])
        )
        inferred, flagged = [s.expr for s in self.body(program).stmts]

        self.assertEqual(program.inferred_callee(inferred), ImplementationTarget(nodes.CallableId("sibling", 5), True))
        self.assertEqual(program.inferred_callee(flagged), ImplementationTarget(nodes.CallableId("sibling", 5), False))

    def test_match(self):
        match = {
            "kind": "match",
            "source": "try",
            "scrutinee": {"kind": "local", "name": "r"},
            "arms": [{"body": {"kind": "lit", "value": 1}, "guard": {"kind": "local", "name": "g"}}],
        }
        program = program_from_dict(export(fn(1, match)))
        m = self.body(program).stmts[0].expr
        self.assertIs(m.source, nodes.MatchSource.TRY_DESUGAR)
        self.assertIsInstance(m.arms[0].guard, nodes.Local)

    def test_spans(self):
        span = {"file": "src/lib.rs", "lo": [3, 4], "hi": [3, 9], "expansion": "vec"}
        program = program_from_dict(export(fn(1, span=span), fn(2, span={"dummy": True})))
        first, second = program.items()

        self.assertTrue(first.span.from_expansion())
        self.assertEqual(first.span.location().lineno, 3)
        self.assertTrue(second.span.is_dummy())

    def test_unknown_expression_is_opaque(self):
        expr = {"kind": "inline_asm", "operands": [{"kind": "call", "func": {"kind": "path", "res": 2}}]}
        program = program_from_dict(export(fn(1, expr)))
        opaque = self.body(program).stmts[0].expr

        self.assertIsInstance(opaque, nodes.Opaque)
        self.assertEqual(opaque.label, "inline_asm")
        self.assertIsInstance(list(opaque.children())[0], nodes.Call)

    def test_traits_and_modules(self):
        trait = {"kind": "trait", "id": 1, "name": "T", "methods": [{"id": 2, "name": "m"}]}
        impl = {"kind": "impl", "self_ty": "S", "trait": 1, "methods": [{"id": 3, "name": "m", "body": {"kind": "block"}}]}
        program = program_from_dict(export({"kind": "mod", "name": "inner", "items": [trait, impl]}))

        module = program.items()[0]
        self.assertIsInstance(module, nodes.Module)
        impl_node = module.items[1]
        decl = program.declaring_interface_of(impl_node, impl_node.methods[0])
        self.assertEqual(decl, nodes.CallableId("demo", 2))

    def test_foreign_trait_table(self):
        impl = {"kind": "impl", "self_ty": "S", "trait": ["core", 7],
                "methods": [{"id": 3, "name": "fmt", "body": {"kind": "block"}}]}
        program = program_from_dict(export(impl, traits=[{"id": ["core", 7], "methods": {"fmt": ["core", 8]}}]))
        impl_node = program.items()[0]
        self.assertEqual(
            program.declaring_interface_of(impl_node, impl_node.methods[0]), nodes.CallableId("core", 8)
        )


class LoaderErrorTest(unittest.TestCase):
    def assertModelError(self, data, fragment):
        with self.assertRaises(ModelError) as cm:
            program_from_dict(data)
        self.assertIn(fragment, str(cm.exception))

    def test_missing_crate(self):
        self.assertModelError({"items": []}, "missing 'crate'")

    def test_not_an_object(self):
        self.assertModelError([], "expected an object")

    def test_unknown_item(self):
        self.assertModelError(export({"kind": "union", "name": "U"}), "unknown item kind")

    def test_bad_id(self):
        self.assertModelError(export({"kind": "fn", "id": "one", "name": "f"}), "invalid callable id")

    def test_missing_field_reports_location(self):
        self.assertModelError(export(fn(1, {"kind": "if", "cond": {"kind": "lit"}})), "items/f1")

    def test_unknown_operator(self):
        binary = {"kind": "binary", "op": "<=>", "lhs": {"kind": "lit"}, "rhs": {"kind": "lit"}}
        self.assertModelError(export(fn(1, binary)), "unknown binary operator")

    def test_non_string_kind(self):
        self.assertModelError(export({"kind": ["fn"], "id": 1}), "kind must be a string")
        self.assertModelError(export(fn(1, {"kind": {"call": 1}})), "kind must be a string")

    def test_unknown_resolution_kind(self):
        call = {"kind": "method_call", "receiver": {"kind": "lit"}, "resolution": {"target": 1, "kind": "virtual"}}
        self.assertModelError(export(fn(1, call)), "unknown resolution kind")


def test_load_program(tmp_path):
    path = tmp_path / "export.json"
    path.write_text(json.dumps(export(fn(1))), encoding="utf-8")
    program = load_program(path)
    assert program.crate == "demo"
    assert len(program.items()) == 1


def test_load_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{", encoding="utf-8")
    try:
        load_program(path)
    except ModelError as e:
        assert "invalid JSON" in str(e)
    else:
        raise AssertionError("ModelError not raised")


def test_load_undecodable_bytes(tmp_path):
    path = tmp_path / "latin1.json"
    path.write_bytes(b'{"crate": "x\xff", "items": []}')
    with pytest.raises(ModelError, match="invalid JSON"):
        load_program(path)
