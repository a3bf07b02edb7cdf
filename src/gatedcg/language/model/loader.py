"""
Loading program models from a frontend's JSON export.

The export is a single JSON document::

    {
      "crate": "example",
      "files": {"src/main.rs": "fn main() { ... }"},
      "defs": [{"id": 3, "path": "a::S::met", "local": true}],
      "traits": [{"id": ["core", 7], "methods": {"fmt": ["core", 8]}}],
      "items": [{"kind": "fn", "id": 3, "name": "met", "body": {...}}]
    }

Callable ids are either a bare integer (an index in the exported crate) or a
``[crate, index]`` pair. Items and expressions are objects tagged with
``"kind"``; expression kinds the loader does not know become ``Opaque``
nodes whose ``"operands"`` are still traversed. Spans are optional::

    "span": {"file": "src/main.rs", "lo": [4, 8], "hi": [4, 20],
             "expansion": "println", "dummy": false}
"""

import json
import logging
from pathlib import Path

from gatedcg.application.errors import ModelError
from . import nodes
from .program import DeclarationTarget, DefInfo, ImplementationTarget, Program

LOG = logging.getLogger(__name__)


_BINOPS = {op.value: op for op in nodes.BinOp}
_UNOPS = {op.value: op for op in nodes.UnOp}
_LOOP_SOURCES = {s.value: s for s in nodes.LoopSource}
_MATCH_SOURCES = {s.value: s for s in nodes.MatchSource}


class ModelLoader(object):
    """Builds ``nodes`` objects from decoded JSON for one crate."""

    def __init__(self, crate):
        self.crate = crate
        self._path = []

    # ----------------------------------------------------------------- errors

    def fail(self, message):
        where = "/".join(self._path) or "<root>"
        raise ModelError("%s: %s" % (where, message))

    def _require(self, data, key):
        if not isinstance(data, dict):
            self.fail("expected an object, got %s" % type(data).__name__)
        if key not in data:
            self.fail("missing %r" % key)
        return data[key]

    # ------------------------------------------------------------- primitives

    def callableId(self, raw):
        if raw is None:
            return None
        if isinstance(raw, bool):
            self.fail("invalid callable id %r" % (raw,))
        if isinstance(raw, int):
            return nodes.CallableId(self.crate, raw)
        if isinstance(raw, (list, tuple)) and len(raw) == 2:
            crate, index = raw
            if isinstance(crate, str) and isinstance(index, int) and not isinstance(index, bool):
                return nodes.CallableId(crate, index)
        self.fail("invalid callable id %r" % (raw,))

    def span(self, data):
        raw = data.get("span") if isinstance(data, dict) else None
        if raw is None:
            return nodes.NO_SPAN
        if not isinstance(raw, dict):
            self.fail("span must be an object")

        lo = raw.get("lo", [-1, -1])
        hi = raw.get("hi", lo)
        try:
            lo_line, lo_col = (int(v) for v in lo)
            hi_line, hi_col = (int(v) for v in hi)
        except (TypeError, ValueError):
            self.fail("span positions must be [line, column] pairs")

        return nodes.Span(
            raw.get("file"),
            lo_line,
            lo_col,
            hi_line,
            hi_col,
            expansion=raw.get("expansion"),
            dummy=bool(raw.get("dummy", False)),
        )

    def _enum(self, table, value, what):
        try:
            return table[value]
        except (KeyError, TypeError):
            self.fail("unknown %s %r" % (what, value))

    # ------------------------------------------------------------------ items

    def _kind(self, data):
        kind = self._require(data, "kind")
        if not isinstance(kind, str):
            self.fail("kind must be a string, got %s" % type(kind).__name__)
        return kind

    def item(self, data):
        kind = self._kind(data)
        self._path.append(str(data.get("name", kind)))
        try:
            handler = self._itemHandlers.get(kind)
            if handler is None:
                self.fail("unknown item kind %r" % (kind,))
            return handler(self, data, self.span(data))
        finally:
            self._path.pop()

    def _fn(self, data, span):
        return nodes.Function(
            self.callableId(self._require(data, "id")),
            data.get("name", ""),
            self.optExpr(data.get("body")),
            span=span,
        )

    def _trait(self, data, span):
        methods = []
        for m in data.get("methods", ()):
            methods.append(
                nodes.TraitMethod(
                    self.callableId(self._require(m, "id")),
                    self._require(m, "name"),
                    self.optExpr(m.get("body")),
                    span=self.span(m),
                )
            )
        return nodes.Trait(self.callableId(self._require(data, "id")), data.get("name", ""), methods, span=span)

    def _impl(self, data, span):
        methods = []
        for m in data.get("methods", ()):
            methods.append(
                nodes.ImplMethod(
                    self.callableId(self._require(m, "id")),
                    self._require(m, "name"),
                    self.optExpr(m.get("body")),
                    span=self.span(m),
                )
            )
        return nodes.Impl(
            data.get("self_ty", ""),
            methods,
            trait=self.callableId(data.get("trait")),
            span=span,
        )

    def _mod(self, data, span):
        return nodes.Module(data.get("name", ""), [self.item(i) for i in data.get("items", ())], span=span)

    def _const(self, data, span):
        return nodes.Const(data.get("name", ""), self.optExpr(data.get("body")), span=span)

    _itemHandlers = {
        "fn": _fn,
        "trait": _trait,
        "impl": _impl,
        "mod": _mod,
        "const": _const,
        "static": _const,
    }

    # ------------------------------------------------------------ expressions

    def optExpr(self, data):
        if data is None:
            return None
        return self.expr(data)

    def exprs(self, items):
        return [self.expr(e) for e in items or ()]

    def expr(self, data):
        kind = self._kind(data)
        handler = self._exprHandlers.get(kind)
        span = self.span(data)
        if handler is None:
            LOG.debug("Exporting unknown expression kind %r as opaque", kind)
            return nodes.Opaque(kind, self.exprs(data.get("operands")), span=span)
        return handler(self, data, span)

    def stmt(self, data):
        kind = self._kind(data)
        span = self.span(data)
        if kind == "let":
            return nodes.Let(self.optExpr(data.get("init")), data.get("pattern", "_"), span=span)
        elif kind == "item":
            return nodes.ItemStmt(self.item(self._require(data, "item")), span=span)
        elif kind == "expr":
            return nodes.ExprStmt(self.expr(self._require(data, "expr")), span=span)
        # A bare expression used as a statement.
        return nodes.ExprStmt(self.expr(data), span=span)

    def resolution(self, data):
        if data is None:
            return None
        target = self.callableId(self._require(data, "target"))
        kind = self._require(data, "kind")
        local = data.get("local")
        if local is not None:
            local = bool(local)
        if kind == "declaration":
            return DeclarationTarget(target, local)
        elif kind == "implementation":
            return ImplementationTarget(target, local)
        self.fail("unknown resolution kind %r" % (kind,))

    def _block(self, data, span):
        return nodes.Block([self.stmt(s) for s in data.get("stmts", ())], self.optExpr(data.get("tail")), span=span)

    def _if(self, data, span):
        return nodes.If(
            self.expr(self._require(data, "cond")),
            self.expr(self._require(data, "then")),
            self.optExpr(data.get("else")),
            span=span,
        )

    def _binary(self, data, span):
        return nodes.Binary(
            self._enum(_BINOPS, self._require(data, "op"), "binary operator"),
            self.expr(self._require(data, "lhs")),
            self.expr(self._require(data, "rhs")),
            span=span,
        )

    def _unary(self, data, span):
        return nodes.Unary(
            self._enum(_UNOPS, self._require(data, "op"), "unary operator"),
            self.expr(self._require(data, "operand")),
            span=span,
        )

    def _paren(self, data, span):
        return nodes.Paren(self.expr(self._require(data, "expr")), span=span)

    def _dropTemps(self, data, span):
        return nodes.DropTemps(self.expr(self._require(data, "expr")), span=span)

    def _loop(self, data, span):
        source = self._enum(_LOOP_SOURCES, data.get("source", "loop"), "loop source")
        return nodes.Loop(self.expr(self._require(data, "body")), source, span=span)

    def _match(self, data, span):
        arms = [
            nodes.Arm(self.expr(self._require(a, "body")), self.optExpr(a.get("guard")), span=self.span(a))
            for a in data.get("arms", ())
        ]
        source = self._enum(_MATCH_SOURCES, data.get("source", "normal"), "match source")
        return nodes.Match(self.expr(self._require(data, "scrutinee")), arms, source, span=span)

    def _path(self, data, span):
        return nodes.Path(
            self.callableId(data.get("res")),
            data.get("name", ""),
            bool(data.get("type_relative", False)),
            span=span,
        )

    def _call(self, data, span):
        return nodes.Call(self.expr(self._require(data, "func")), self.exprs(data.get("args")), span=span)

    def _methodCall(self, data, span):
        return nodes.MethodCall(
            data.get("name", ""),
            self.expr(self._require(data, "receiver")),
            self.exprs(data.get("args")),
            method=self.callableId(data.get("method")),
            resolution=self.resolution(data.get("resolution")),
            span=span,
        )

    def _closure(self, data, span):
        return nodes.Closure(self.expr(self._require(data, "body")), span=span)

    def _return(self, data, span):
        return nodes.Return(self.optExpr(data.get("value")), span=span)

    def _break(self, data, span):
        return nodes.Break(self.optExpr(data.get("value")), span=span)

    def _assign(self, data, span):
        return nodes.Assign(
            self.expr(self._require(data, "target")), self.expr(self._require(data, "value")), span=span
        )

    def _field(self, data, span):
        return nodes.Field(self.expr(self._require(data, "base")), data.get("name", ""), span=span)

    def _index(self, data, span):
        return nodes.Index(
            self.expr(self._require(data, "base")), self.expr(self._require(data, "index")), span=span
        )

    def _tuple(self, data, span):
        return nodes.Tuple(self.exprs(data.get("elements")), span=span)

    def _array(self, data, span):
        return nodes.Array(self.exprs(data.get("elements")), span=span)

    def _struct(self, data, span):
        return nodes.Struct(data.get("name", ""), self.exprs(data.get("fields")), span=span)

    def _lit(self, data, span):
        return nodes.Literal(data.get("value"), span=span)

    def _local(self, data, span):
        return nodes.Local(data.get("name", ""), span=span)

    _exprHandlers = {
        "block": _block,
        "if": _if,
        "binary": _binary,
        "unary": _unary,
        "paren": _paren,
        "drop_temps": _dropTemps,
        "loop": _loop,
        "match": _match,
        "path": _path,
        "call": _call,
        "method_call": _methodCall,
        "closure": _closure,
        "return": _return,
        "break": _break,
        "assign": _assign,
        "field": _field,
        "index": _index,
        "tuple": _tuple,
        "array": _array,
        "struct": _struct,
        "lit": _lit,
        "local": _local,
    }

    # ---------------------------------------------------------------- program

    def program(self, data):
        defs = []
        for d in data.get("defs", ()):
            def_id = self.callableId(self._require(d, "id"))
            defs.append(DefInfo(def_id, d.get("path", str(def_id)), bool(d.get("local", def_id.crate == self.crate))))

        traits = {}
        for t in data.get("traits", ()):
            methods = self._require(t, "methods")
            if not isinstance(methods, dict):
                self.fail("trait methods must map names to ids")
            traits[self.callableId(self._require(t, "id"))] = {
                name: self.callableId(raw) for name, raw in methods.items()
            }

        self._path.append("items")
        try:
            items = [self.item(i) for i in data.get("items", ())]
        finally:
            self._path.pop()

        files = data.get("files", {})
        if not isinstance(files, dict):
            self.fail("files must map names to source text")

        return Program(self.crate, items, defs, traits, files)


def program_from_dict(data):
    """Build a ``Program`` from an already decoded export document."""
    if not isinstance(data, dict):
        raise ModelError("<root>: expected an object, got %s" % type(data).__name__)
    crate = data.get("crate")
    if not isinstance(crate, str) or not crate:
        raise ModelError("<root>: missing 'crate'")
    return ModelLoader(crate).program(data)


def load_program(path):
    """Read and decode a JSON export from ``path``."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ModelError("%s: invalid JSON: %s" % (path, e)) from e

    program = program_from_dict(data)
    LOG.info("Loaded %r from %s (%d items)", program.crate, path, len(program.items()))
    return program
