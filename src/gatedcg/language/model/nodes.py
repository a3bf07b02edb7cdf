"""Node classes of the typed program model.

The model mirrors what a type-checking frontend exports for one compilation
unit: items (functions, interfaces, implementation blocks, modules, constant
initializers) and the expression trees of their bodies. Name resolution and
type inference have already happened; their results are stored on the nodes
(``Path.res``, ``MethodCall.method``, ``MethodCall.resolution``).

Every node carries a ``Span``. A span produced by macro expansion or other
code generation names its origin in ``expansion``; compiler-synthesized
nodes may carry a dummy span.

Child slots are listed in ``__fields__``; ``children()`` is the structural
descent primitive used by every traversal.
"""

import enum
from collections import namedtuple

from gatedcg.language.origin import SourceLocation, UNKNOWN_LOCATION


class CallableId(namedtuple("CallableId", "crate index")):
    """Identity of a callable, unique and stable within one analysis run.

    Two callables whose printed paths coincide (e.g. inherent and trait
    methods both named ``S::bla``) still have distinct ids.
    """

    __slots__ = ()

    def __str__(self):
        return "%s[%d]" % (self.crate, self.index)


class Span(object):
    """Source span of a node plus its provenance."""

    __slots__ = "filename", "lo_line", "lo_col", "hi_line", "hi_col", "expansion", "dummy"

    def __init__(
        self,
        filename=None,
        lo_line=-1,
        lo_col=-1,
        hi_line=None,
        hi_col=None,
        expansion=None,
        dummy=False,
    ):
        self.filename = filename
        self.lo_line = lo_line
        self.lo_col = lo_col
        self.hi_line = lo_line if hi_line is None else hi_line
        self.hi_col = lo_col if hi_col is None else hi_col
        self.expansion = expansion
        self.dummy = dummy

    def from_expansion(self):
        return self.expansion is not None

    def is_dummy(self):
        return self.dummy

    def location(self):
        if self.filename is None and self.lo_line < 0:
            return UNKNOWN_LOCATION
        return SourceLocation(self.filename, self.lo_line, self.lo_col, self.hi_line, self.hi_col)

    def __repr__(self):
        s = "Span(%r, %d:%d-%d:%d" % (self.filename, self.lo_line, self.lo_col, self.hi_line, self.hi_col)
        if self.expansion is not None:
            s += ", expansion=%r" % self.expansion
        if self.dummy:
            s += ", dummy"
        return s + ")"


NO_SPAN = Span()
DUMMY_SPAN = Span(dummy=True)


class ModelNode(object):
    __slots__ = ("span",)
    __fields__ = ()

    def children(self):
        """Yield direct child nodes in evaluation order."""
        for name in self.__fields__:
            child = getattr(self, name)
            if child is None:
                continue
            if isinstance(child, (list, tuple)):
                for c in child:
                    if c is not None:
                        yield c
            else:
                yield child

    def __repr__(self):
        fields = ", ".join("%s=%r" % (name, getattr(self, name)) for name in self._reprFields())
        return "%s(%s)" % (type(self).__name__, fields)

    def _reprFields(self):
        return self.__fields__


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------


class Item(ModelNode):
    __slots__ = ()


class Function(Item):
    """A free function definition."""

    __slots__ = "def_id", "name", "body"
    __fields__ = ("body",)

    def __init__(self, def_id, name, body, span=NO_SPAN):
        self.def_id = def_id
        self.name = name
        self.body = body
        self.span = span

    def _reprFields(self):
        return ("def_id", "name")


class Trait(Item):
    """An interface definition and its method declarations."""

    __slots__ = "def_id", "name", "methods"
    __fields__ = ("methods",)

    def __init__(self, def_id, name, methods=(), span=NO_SPAN):
        self.def_id = def_id
        self.name = name
        self.methods = list(methods)
        self.span = span

    def _reprFields(self):
        return ("def_id", "name")


class TraitMethod(ModelNode):
    """An interface method declaration; ``body`` is its default body, if any."""

    __slots__ = "def_id", "name", "body"
    __fields__ = ("body",)

    def __init__(self, def_id, name, body=None, span=NO_SPAN):
        self.def_id = def_id
        self.name = name
        self.body = body
        self.span = span

    def isProvided(self):
        return self.body is not None

    def _reprFields(self):
        return ("def_id", "name")


class Impl(Item):
    """An implementation block.

    ``trait`` is the id of the implemented interface, or None for an
    inherent block.
    """

    __slots__ = "trait", "self_ty", "methods"
    __fields__ = ("methods",)

    def __init__(self, self_ty, methods=(), trait=None, span=NO_SPAN):
        self.self_ty = self_ty
        self.methods = list(methods)
        self.trait = trait
        self.span = span

    def _reprFields(self):
        return ("self_ty", "trait")


class ImplMethod(ModelNode):
    """A method with a concrete body inside an implementation block."""

    __slots__ = "def_id", "name", "body"
    __fields__ = ("body",)

    def __init__(self, def_id, name, body, span=NO_SPAN):
        self.def_id = def_id
        self.name = name
        self.body = body
        self.span = span

    def _reprFields(self):
        return ("def_id", "name")


class Module(Item):
    __slots__ = "name", "items"
    __fields__ = ("items",)

    def __init__(self, name, items=(), span=NO_SPAN):
        self.name = name
        self.items = list(items)
        self.span = span

    def _reprFields(self):
        return ("name",)


class Const(Item):
    """A constant/static initializer, evaluated outside any callable."""

    __slots__ = "name", "body"
    __fields__ = ("body",)

    def __init__(self, name, body, span=NO_SPAN):
        self.name = name
        self.body = body
        self.span = span

    def _reprFields(self):
        return ("name",)


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


class Stmt(ModelNode):
    __slots__ = ()


class Let(Stmt):
    __slots__ = "pattern", "init"
    __fields__ = ("init",)

    def __init__(self, init=None, pattern="_", span=NO_SPAN):
        self.init = init
        self.pattern = pattern
        self.span = span


class ExprStmt(Stmt):
    __slots__ = ("expr",)
    __fields__ = ("expr",)

    def __init__(self, expr, span=NO_SPAN):
        self.expr = expr
        self.span = span


class ItemStmt(Stmt):
    """An item declared inside a body; it is its own callable."""

    __slots__ = ("item",)
    __fields__ = ("item",)

    def __init__(self, item, span=NO_SPAN):
        self.item = item
        self.span = span


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


class BinOp(enum.Enum):
    AND = "&&"
    OR = "||"
    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    REM = "%"
    BIT_AND = "&"
    BIT_OR = "|"
    BIT_XOR = "^"
    SHL = "<<"
    SHR = ">>"


class UnOp(enum.Enum):
    NOT = "!"
    NEG = "-"
    DEREF = "*"


class LoopSource(enum.Enum):
    LOOP = "loop"
    WHILE = "while"
    FOR = "for"


class MatchSource(enum.Enum):
    """Where a match came from; only ``NORMAL`` is written by the user."""

    NORMAL = "normal"
    TRY_DESUGAR = "try"
    AWAIT_DESUGAR = "await"
    FOR_LOOP_DESUGAR = "for_loop"
    FORMAT_ARGS = "format_args"


class Expr(ModelNode):
    __slots__ = ()


class Block(Expr):
    __slots__ = "stmts", "tail"
    __fields__ = ("stmts", "tail")

    def __init__(self, stmts=(), tail=None, span=NO_SPAN):
        self.stmts = list(stmts)
        self.tail = tail
        self.span = span


class If(Expr):
    __slots__ = "cond", "then", "else_"
    __fields__ = ("cond", "then", "else_")

    def __init__(self, cond, then, else_=None, span=NO_SPAN):
        self.cond = cond
        self.then = then
        self.else_ = else_
        self.span = span


class Binary(Expr):
    __slots__ = "op", "lhs", "rhs"
    __fields__ = ("lhs", "rhs")

    def __init__(self, op, lhs, rhs, span=NO_SPAN):
        self.op = op
        self.lhs = lhs
        self.rhs = rhs
        self.span = span

    def _reprFields(self):
        return ("op", "lhs", "rhs")


class Unary(Expr):
    __slots__ = "op", "operand"
    __fields__ = ("operand",)

    def __init__(self, op, operand, span=NO_SPAN):
        self.op = op
        self.operand = operand
        self.span = span

    def _reprFields(self):
        return ("op", "operand")


class Paren(Expr):
    __slots__ = ("expr",)
    __fields__ = ("expr",)

    def __init__(self, expr, span=NO_SPAN):
        self.expr = expr
        self.span = span


class DropTemps(Paren):
    """Wrapper the frontend puts around lowered conditions."""

    __slots__ = ()


class Loop(Expr):
    __slots__ = "body", "source"
    __fields__ = ("body",)

    def __init__(self, body, source=LoopSource.LOOP, span=NO_SPAN):
        self.body = body
        self.source = source
        self.span = span

    def _reprFields(self):
        return ("source", "body")


class Arm(ModelNode):
    __slots__ = "guard", "body"
    __fields__ = ("guard", "body")

    def __init__(self, body, guard=None, span=NO_SPAN):
        self.body = body
        self.guard = guard
        self.span = span


class Match(Expr):
    __slots__ = "scrutinee", "arms", "source"
    __fields__ = ("scrutinee", "arms")

    def __init__(self, scrutinee, arms=(), source=MatchSource.NORMAL, span=NO_SPAN):
        self.scrutinee = scrutinee
        self.arms = list(arms)
        self.source = source
        self.span = span

    def _reprFields(self):
        return ("source", "scrutinee", "arms")


class Path(Expr):
    """A resolved path expression; ``res`` is the callable it names, if any."""

    __slots__ = "res", "name", "type_relative"
    __fields__ = ()

    def __init__(self, res=None, name="", type_relative=False, span=NO_SPAN):
        self.res = res
        self.name = name
        self.type_relative = type_relative
        self.span = span

    def _reprFields(self):
        return ("name", "res", "type_relative")


class Call(Expr):
    __slots__ = "func", "args"
    __fields__ = ("func", "args")

    def __init__(self, func, args=(), span=NO_SPAN):
        self.func = func
        self.args = list(args)
        self.span = span


class MethodCall(Expr):
    """``receiver.name(args)``.

    Attributes:
        method: The method the type checker attached to the call (often the
            interface method itself), or None.
        resolution: The frontend's instance resolution for the call, a
            ``DeclarationTarget``/``ImplementationTarget``, or None when it
            failed.
    """

    __slots__ = "name", "method", "receiver", "args", "resolution"
    __fields__ = ("receiver", "args")

    def __init__(self, name, receiver, args=(), method=None, resolution=None, span=NO_SPAN):
        self.name = name
        self.receiver = receiver
        self.args = list(args)
        self.method = method
        self.resolution = resolution
        self.span = span

    def _reprFields(self):
        return ("name", "method", "resolution")


class Closure(Expr):
    __slots__ = ("body",)
    __fields__ = ("body",)

    def __init__(self, body, span=NO_SPAN):
        self.body = body
        self.span = span


class Return(Expr):
    __slots__ = ("value",)
    __fields__ = ("value",)

    def __init__(self, value=None, span=NO_SPAN):
        self.value = value
        self.span = span


class Break(Return):
    __slots__ = ()


class Assign(Expr):
    __slots__ = "target", "value"
    __fields__ = ("target", "value")

    def __init__(self, target, value, span=NO_SPAN):
        self.target = target
        self.value = value
        self.span = span


class Field(Expr):
    __slots__ = "base", "name"
    __fields__ = ("base",)

    def __init__(self, base, name, span=NO_SPAN):
        self.base = base
        self.name = name
        self.span = span


class Index(Expr):
    __slots__ = "base", "index"
    __fields__ = ("base", "index")

    def __init__(self, base, index, span=NO_SPAN):
        self.base = base
        self.index = index
        self.span = span


class Tuple(Expr):
    __slots__ = ("elements",)
    __fields__ = ("elements",)

    def __init__(self, elements=(), span=NO_SPAN):
        self.elements = list(elements)
        self.span = span


class Array(Tuple):
    __slots__ = ()


class Struct(Expr):
    __slots__ = "name", "fields"
    __fields__ = ("fields",)

    def __init__(self, name, fields=(), span=NO_SPAN):
        self.name = name
        self.fields = list(fields)
        self.span = span

    def _reprFields(self):
        return ("name", "fields")


class Literal(Expr):
    __slots__ = ("value",)
    __fields__ = ()

    def __init__(self, value, span=NO_SPAN):
        self.value = value
        self.span = span

    def _reprFields(self):
        return ("value",)


class Local(Expr):
    __slots__ = ("name",)
    __fields__ = ()

    def __init__(self, name, span=NO_SPAN):
        self.name = name
        self.span = span

    def _reprFields(self):
        return ("name",)


class Opaque(Expr):
    """An expression kind the frontend exported without a dedicated node."""

    __slots__ = "label", "operands"
    __fields__ = ("operands",)

    def __init__(self, label, operands=(), span=NO_SPAN):
        self.label = label
        self.operands = list(operands)
        self.span = span

    def _reprFields(self):
        return ("label", "operands")
