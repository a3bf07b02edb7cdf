"""
Reachability queries over an extracted call graph.

The call graph is converted into a ``networkx.DiGraph`` whose nodes are
callable ids and whose edge weight is the constraint depth of the call.
The minimal cumulative weight from an entry point then approximates how
many conditions a caller has to satisfy to drive execution into a target.

Calls made outside any callable start at the ``UNKNOWN_CALLER`` node.
"""

import logging
from typing import Dict, Iterable, List

import networkx as nx

from .store import CallGraph
from .types import UNKNOWN_CALLER, DispatchKind

LOG = logging.getLogger(__name__)


def _node(def_id):
    return UNKNOWN_CALLER if def_id is None else def_id


def _addEdge(g, caller, callee, depth, kind):
    data = g.get_edge_data(caller, callee)
    if data is None or depth < data["weight"]:
        g.add_edge(caller, callee, weight=depth, dispatch=kind)


def to_networkx(call_graph: CallGraph, expand_dynamic=True) -> nx.DiGraph:
    """
    Build a weighted digraph from ``call_graph``.

    Args:
        call_graph: The extracted graph.
        expand_dynamic: Redirect each dynamic call to every known
            implementation of its declaration. Declarations without known
            implementations stay as targets.

    Returns:
        A DiGraph with ``path`` node attributes and ``weight``/``dispatch``
        edge attributes. Parallel calls of different dispatch kinds keep the
        shallowest one.
    """
    g = nx.DiGraph()

    for def_id, location in call_graph.functions.items():
        g.add_node(def_id, path=call_graph.path_of(def_id), location=location)

    for edge in call_graph.edges():
        caller = _node(edge.caller)
        for node, path in ((caller, edge.caller_path), (edge.callee, edge.callee_path)):
            if node not in g:
                g.add_node(node, path=path)

        targets = [edge.callee]
        if expand_dynamic and edge.dispatch is DispatchKind.DYNAMIC:
            targets = call_graph.implementations_of(edge.callee) or targets

        for target in targets:
            if target not in g:
                g.add_node(target, path=call_graph.path_of(target))
            _addEdge(g, caller, target, edge.constraint_depth, edge.dispatch)

    LOG.debug("Built reachability graph: %d nodes, %d edges", g.number_of_nodes(), g.number_of_edges())
    return g


def resolve_entry(g: nx.DiGraph, entry) -> List:
    """
    Nodes denoted by ``entry``: a callable id, or a printable path that may
    name several callables.

    Raises:
        KeyError: If nothing matches.
    """
    if entry in g:
        return [entry]

    matches = [n for n, path in g.nodes(data="path") if path == entry]
    if not matches:
        raise KeyError("no callable named %r" % (entry,))
    return matches


def _sources(call_graph, entry, expand_dynamic):
    g = to_networkx(call_graph, expand_dynamic)
    return g, resolve_entry(g, entry)


def min_depth_from(call_graph: CallGraph, entry, expand_dynamic=True, cutoff=None) -> Dict:
    """
    Minimal cumulative constraint depth of every callable reachable from
    ``entry`` (the entry itself is at 0).
    """
    g, sources = _sources(call_graph, entry, expand_dynamic)
    return dict(nx.multi_source_dijkstra_path_length(g, set(sources), cutoff=cutoff, weight="weight"))


def shallow_targets(call_graph: CallGraph, entry, budget, expand_dynamic=True) -> Dict:
    """Callables reachable from ``entry`` within a cumulative depth of ``budget``."""
    if budget < 0:
        raise ValueError("budget must be >= 0, got %r" % (budget,))
    return min_depth_from(call_graph, entry, expand_dynamic, cutoff=budget)


def detect_cycles(call_graph: CallGraph, expand_dynamic=True) -> List[List]:
    """List the recursion cycles of the graph, each starting at its smallest id."""
    g = to_networkx(call_graph, expand_dynamic)
    cycles = []
    for cycle in nx.simple_cycles(g):
        start = min(range(len(cycle)), key=lambda i: str(cycle[i]))
        cycles.append(cycle[start:] + cycle[:start])
    cycles.sort(key=lambda c: [str(n) for n in c])
    return cycles


def describe_depths(call_graph: CallGraph, depths: Dict) -> Iterable[str]:
    """Report lines ``path (depth N)``, shallowest first."""
    g_paths = {n: call_graph.path_of(None if n == UNKNOWN_CALLER else n) for n in depths}
    for node in sorted(depths, key=lambda n: (depths[n], g_paths[n], str(n))):
        yield "%s (depth %d)" % (g_paths[node], depths[node])
