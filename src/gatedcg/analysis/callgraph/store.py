"""
The call graph store.

Holds the function set, the interface declaration -> implementations map and
three disjoint edge sets, one per ``DispatchKind``. Edges are merged as they
are discovered; for each (caller, callee) pair a set keeps the witness with
the smallest constraint depth, i.e. the easiest call site to trigger.
"""

import logging
from typing import Dict, Iterator, List, Optional

from gatedcg.language.model.nodes import CallableId
from gatedcg.language.origin import SourceLocation
from .types import UNKNOWN_CALLER, CallEdge, DispatchKind, EdgeKey

LOG = logging.getLogger(__name__)


class CallGraph:
    """
    Functions, declarations and dispatch-partitioned call edges of one run.

    Insertion order is preserved everywhere, so reports built from a graph
    are deterministic for a given program model.
    """

    def __init__(self) -> None:
        self._calls: Dict[DispatchKind, Dict[EdgeKey, CallEdge]] = {kind: {} for kind in DispatchKind}
        self._functions: Dict[CallableId, SourceLocation] = {}
        self._method_impls: Dict[CallableId, List[CallableId]] = {}
        self._paths: Dict[CallableId, str] = {}

    # ------------------------------------------------------------ collection
    def add_function(self, def_id: CallableId, location: SourceLocation, path: Optional[str] = None) -> None:
        """Record a callable with a body."""
        self._functions.setdefault(def_id, location)
        if path is not None:
            self._paths[def_id] = path

    def add_declaration(self, decl_id: CallableId, path: Optional[str] = None) -> None:
        """Record an interface method declaration (no implementations yet)."""
        self._method_impls.setdefault(decl_id, [])
        if path is not None:
            self._paths[decl_id] = path

    def add_implementation(self, decl_id: CallableId, impl_id: CallableId) -> None:
        """Link an implementation to the declaration it satisfies."""
        impls = self._method_impls.setdefault(decl_id, [])
        if impl_id not in impls:
            impls.append(impl_id)

    # ----------------------------------------------------------------- edges
    def merge(self, edge: CallEdge) -> bool:
        """
        Merge a candidate edge into the set of its dispatch kind.

        An existing edge with the same key is replaced only by a strictly
        shallower one. Sets of different dispatch kinds never interact.

        Returns:
            True if the store changed.
        """
        calls = self._calls[edge.dispatch]
        key = edge.key
        existing = calls.get(key)

        if existing is None:
            calls[key] = edge
            self.remember_path(edge.callee, edge.callee_path)
            LOG.debug("Inserted %s call %s", edge.dispatch.value, edge.describe())
            return True

        if edge.constraint_depth < existing.constraint_depth:
            calls[key] = edge
            LOG.debug(
                "Replaced %s call %s (was depth %d)",
                edge.dispatch.value,
                edge.describe(),
                existing.constraint_depth,
            )
            return True

        return False

    def get(self, kind: DispatchKind, caller: Optional[CallableId], callee: CallableId) -> Optional[CallEdge]:
        return self._calls[kind].get(EdgeKey(caller, callee))

    def calls(self, kind: DispatchKind) -> List[CallEdge]:
        return list(self._calls[kind].values())

    @property
    def static_calls(self) -> List[CallEdge]:
        return self.calls(DispatchKind.STATIC)

    @property
    def dynamic_calls(self) -> List[CallEdge]:
        return self.calls(DispatchKind.DYNAMIC)

    @property
    def nonlocal_calls(self) -> List[CallEdge]:
        return self.calls(DispatchKind.NONLOCAL)

    def edges(self) -> Iterator[CallEdge]:
        """Iterate over every edge, static first, then dynamic, then non-local."""
        for kind in DispatchKind:
            yield from self._calls[kind].values()

    def __len__(self) -> int:
        return sum(len(calls) for calls in self._calls.values())

    # --------------------------------------------------------------- queries
    @property
    def functions(self) -> Dict[CallableId, SourceLocation]:
        return dict(self._functions)

    @property
    def method_decls(self) -> List[CallableId]:
        return list(self._method_impls)

    @property
    def method_impls(self) -> Dict[CallableId, List[CallableId]]:
        return {decl: list(impls) for decl, impls in self._method_impls.items()}

    def implementations_of(self, decl_id: CallableId) -> List[CallableId]:
        return list(self._method_impls.get(decl_id, ()))

    def path_of(self, def_id: Optional[CallableId]) -> str:
        if def_id is None:
            return UNKNOWN_CALLER
        return self._paths.get(def_id, str(def_id))

    def remember_path(self, def_id: CallableId, path: str) -> None:
        self._paths.setdefault(def_id, path)
