"""
Call graph records.

A ``CallEdge`` is one caller -> callee witness together with how the call
dispatches and how deeply it is gated by conditions. Its identity is the
``EdgeKey`` (caller id, callee id); printable paths are carried for reports
only and never compared.
"""

import enum
from collections import namedtuple
from dataclasses import dataclass
from typing import Optional

from gatedcg.language.model.nodes import CallableId
from gatedcg.language.origin import SourceLocation, UNKNOWN_LOCATION


class DispatchKind(enum.Enum):
    """How a call site reaches its callee."""

    STATIC = "static"
    DYNAMIC = "dynamic"
    NONLOCAL = "nonlocal"

    @property
    def title(self) -> str:
        return _TITLES[self]


_TITLES = {
    DispatchKind.STATIC: "Static Calls",
    DispatchKind.DYNAMIC: "Dynamic Calls",
    DispatchKind.NONLOCAL: "Non-Local Calls",
}


class EdgeKey(namedtuple("EdgeKey", "caller callee")):
    __slots__ = ()


UNKNOWN_CALLER = "<unknown caller>"


@dataclass(frozen=True)
class CallEdge:
    """A call from ``caller`` (None outside any callable) to ``callee``."""

    caller: Optional[CallableId]
    callee: CallableId
    callee_path: str
    dispatch: DispatchKind
    constraint_depth: int
    site: SourceLocation = UNKNOWN_LOCATION
    caller_path: str = UNKNOWN_CALLER

    def __post_init__(self):
        if self.constraint_depth < 0:
            raise ValueError("constraint depth must be >= 0, got %d" % self.constraint_depth)

    @property
    def key(self) -> EdgeKey:
        return EdgeKey(self.caller, self.callee)

    def describe(self) -> str:
        return "%s --- %s (constraint depth: %d)" % (self.caller_path, self.callee_path, self.constraint_depth)
