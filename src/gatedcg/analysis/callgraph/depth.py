"""
Constraint depth tracking.

The constraint depth of a call site counts the independent boolean
conditions that must all hold for control flow to reach it. The traversal
carries it in an immutable ``DepthContext``; every visit receives a context
and returns the depth that follows the visited node, so no save/restore of
shared state is needed.

Rules, each scoped to the construct's sub-tree:

- ``if c {A} else {B}``: ``c`` is visited as a condition at the entry depth,
  ``A`` one level below the depth ``c`` ends at, ``B`` at the entry depth.
  Conditionals whose source is a debug-only assertion do not add a level.
- ``l && r`` inside a condition: ``r`` is one level below the depth ``l``
  ends at. Each conjunct is one more constraint.
- ``l || r`` inside a condition: both start at the entry depth; the
  shallower result wins, since one disjunct suffices.
- ``loop``: the body is at least at depth 1; nested loops do not stack.
- ``match``: arms are one level below the scrutinee, unless the match was
  synthesized by desugaring. A guard is a condition on its arm.

Outside conditions boolean operators gate nothing. How a construct affects
the statements after it in the same block is the ``BranchDepthPolicy``.
"""

import enum
from dataclasses import dataclass, replace
from typing import Optional

from gatedcg.language.model.nodes import CallableId


class BranchDepthPolicy(enum.Enum):
    """Depth seen by statements following an ``if``/``match``/``loop``.

    SCOPED: the construct's levels apply to its own sub-tree only; the next
        statement starts at the block's entry depth.
    PERSISTENT: the next statements in the enclosing block start at the
        construct's raised depth; the block still restores on exit.
    """

    SCOPED = "scoped"
    PERSISTENT = "persistent"


@dataclass(frozen=True)
class DepthContext:
    """Traversal state for one node: enclosing callable, depth, condition flag."""

    caller: Optional[CallableId] = None
    depth: int = 0
    in_condition: bool = False

    @classmethod
    def enter(cls, caller: Optional[CallableId]) -> "DepthContext":
        """Context at the start of a callable body."""
        return cls(caller, 0, False)

    def at(self, depth: int) -> "DepthContext":
        if depth == self.depth:
            return self
        return replace(self, depth=depth)

    def condition(self) -> "DepthContext":
        if self.in_condition:
            return self
        return replace(self, in_condition=True)

    def plain(self) -> "DepthContext":
        if not self.in_condition:
            return self
        return replace(self, in_condition=False)


class ConstraintDepthTracker(object):
    """
    Depth rules of the depth-owning constructs.

    Each rule receives the node, the entry context and the traversal's
    ``visit`` callback, visits the node's children with the contexts the
    rule prescribes and returns the depth following the node.
    """

    def __init__(self, heuristics, policy=BranchDepthPolicy.SCOPED):
        self.heuristics = heuristics
        self.policy = policy

    def following(self, ctx, raised):
        if self.policy is BranchDepthPolicy.PERSISTENT:
            return raised
        return ctx.depth

    def conditional(self, node, ctx, visit):
        entry = ctx.plain()
        after_cond = visit(node.cond, entry.condition())

        bump = 0 if self.heuristics.suppressesIncrement(node) else 1
        visit(node.then, entry.at(after_cond + bump))

        if node.else_ is not None:
            visit(node.else_, entry)

        return self.following(ctx, ctx.depth + bump)

    def conjunction(self, node, ctx, visit):
        after_lhs = visit(node.lhs, ctx)
        return visit(node.rhs, ctx.at(after_lhs + 1))

    def disjunction(self, node, ctx, visit):
        after_lhs = visit(node.lhs, ctx)
        after_rhs = visit(node.rhs, ctx)
        return min(after_lhs, after_rhs)

    def loop(self, node, ctx, visit):
        entered = max(ctx.depth, 1)
        visit(node.body, ctx.plain().at(entered))
        return self.following(ctx, entered)

    def match(self, node, ctx, visit):
        entry = ctx.plain()
        visit(node.scrutinee, entry)

        bump = 0 if self.heuristics.isDesugared(node) else 1
        arm_ctx = entry.at(ctx.depth + bump)

        for arm in node.arms:
            if self.heuristics.isGenerated(arm):
                continue
            if arm.guard is not None:
                after_guard = visit(arm.guard, arm_ctx.condition())
                visit(arm.body, arm_ctx.at(after_guard + 1))
            else:
                visit(arm.body, arm_ctx)

        return self.following(ctx, ctx.depth + bump)

    def sequence(self, stmts, tail, ctx, visit):
        """Visit a block's statements and tail; the block restores on exit."""
        entry = ctx.plain()
        current = entry

        for stmt in stmts:
            after = visit(stmt, current)
            if self.policy is BranchDepthPolicy.PERSISTENT:
                current = entry.at(after)

        if tail is not None:
            visit(tail, current)

        return ctx.depth
