"""
Call site classification.

Turns a call node into a candidate ``CallEdge``:

- a call through a resolved path (``f(x)``, ``S::new()``, ``T::m(&x)``)
  names its callee directly and is always static;
- a method call (``x.m()``) uses the frontend's instance resolution:
  an interface method declaration means the receiver's concrete type is
  unknown at the site (dynamic); a concrete body is static if it is part of
  the analyzed unit and non-local otherwise. When resolution failed the
  call degrades to dynamic on the method the type checker attached to it.
"""

import logging

from gatedcg.application.errors import InternalError
from gatedcg.language.model import nodes
from gatedcg.language.model.program import DeclarationTarget, ImplementationTarget
from .types import UNKNOWN_CALLER, CallEdge, DispatchKind

LOG = logging.getLogger(__name__)


def classify(resolution, fallback):
    """
    Dispatch kind and callee of a method call.

    Args:
        resolution: The frontend's resolution result, or None if it failed.
        fallback: The interface method id the call was type checked against,
            used when ``resolution`` is None.

    Returns:
        ``(DispatchKind, CallableId)``

    Raises:
        InternalError: If neither a resolution nor a fallback exists.
    """
    if resolution is None:
        if fallback is None:
            raise InternalError("method call with neither a resolution nor a type-checked method")
        return DispatchKind.DYNAMIC, fallback

    if isinstance(resolution, DeclarationTarget):
        return DispatchKind.DYNAMIC, resolution.def_id

    if isinstance(resolution, ImplementationTarget):
        if resolution.local:
            return DispatchKind.STATIC, resolution.def_id
        return DispatchKind.NONLOCAL, resolution.def_id

    raise InternalError("unrecognized method resolution %r" % (resolution,))


def calleePath(func):
    """The resolved ``Path`` a call goes through, looking through parentheses."""
    while isinstance(func, nodes.Paren):
        func = func.expr
    if isinstance(func, nodes.Path) and func.res is not None:
        return func
    return None


class CallClassifier(object):
    """Builds candidate edges for call sites of one program."""

    def __init__(self, program, errors=None, report_unresolved=True):
        self.program = program
        self.errors = errors
        self.report_unresolved = report_unresolved

    def edge(self, ctx, callee, dispatch, node):
        return CallEdge(
            caller=ctx.caller,
            callee=callee,
            callee_path=self.program.def_path(callee),
            dispatch=dispatch,
            constraint_depth=ctx.depth,
            site=node.span.location(),
            caller_path=UNKNOWN_CALLER if ctx.caller is None else self.program.def_path(ctx.caller),
        )

    def classifyCall(self, node, ctx):
        """Edge for ``f(args)``, or None if the callee is not a named item."""
        path = calleePath(node.func)
        if path is None:
            return None
        return self.edge(ctx, path.res, DispatchKind.STATIC, node)

    def classifyMethodCall(self, node, ctx):
        """Edge for ``receiver.name(args)``."""
        resolution = self.program.inferred_callee(node)
        dispatch, callee = classify(resolution, node.method)

        if resolution is None:
            LOG.debug(
                "Unresolved method call %r at %s, using %s",
                node.name,
                node.span.location(),
                self.program.def_path(callee),
            )
            if self.errors is not None and self.report_unresolved:
                self.errors.warn(
                    "unresolved-method",
                    "could not resolve %r, recorded as dynamic call to %s"
                    % (node.name, self.program.def_path(callee)),
                    [node.span.location()],
                )

        return self.edge(ctx, callee, dispatch, node)
