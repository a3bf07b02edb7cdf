"""
Call graph output format generators.

This module renders a ``CallGraph`` as text, DOT (Graphviz) or JSON. Every
listing is sorted by printable path and then by callable id, so two runs on
the same program model produce identical reports.
"""

import json
from typing import Any, Dict, List

from .store import CallGraph
from .types import CallEdge, DispatchKind

_DOT_STYLES = {
    DispatchKind.STATIC: 'style=solid, color="black"',
    DispatchKind.DYNAMIC: 'style=dashed, color="blue"',
    DispatchKind.NONLOCAL: 'style=dotted, color="gray40"',
}


def _idKey(def_id):
    if def_id is None:
        return ("", -1)
    return (def_id.crate, def_id.index)


def _edgeKey(edge: CallEdge):
    return (edge.caller_path, edge.callee_path, _idKey(edge.caller), _idKey(edge.callee))


def sorted_functions(call_graph: CallGraph):
    functions = call_graph.functions
    return sorted(functions, key=lambda f: (call_graph.path_of(f), _idKey(f)))


def sorted_declarations(call_graph: CallGraph):
    return sorted(call_graph.method_decls, key=lambda d: (call_graph.path_of(d), _idKey(d)))


def sorted_calls(call_graph: CallGraph, kind: DispatchKind) -> List[CallEdge]:
    return sorted(call_graph.calls(kind), key=_edgeKey)


def generate_text_output(call_graph: CallGraph, args=None) -> str:
    """Generate text output for the call graph."""
    output = []
    output.append("Call Graph Analysis")
    output.append("=" * 50)
    output.append("")

    functions = call_graph.functions
    output.append(f"Functions ({len(functions)}):")
    for def_id in sorted_functions(call_graph):
        output.append(f"  - {call_graph.path_of(def_id)} ({functions[def_id]})")
    output.append("")

    declarations = sorted_declarations(call_graph)
    output.append(f"Method Declarations ({len(declarations)}):")
    for decl in declarations:
        output.append(f"  - {call_graph.path_of(decl)}")
    output.append("")

    output.append("Method Implementations:")
    for decl in declarations:
        impls = call_graph.implementations_of(decl)
        if impls:
            names = sorted(call_graph.path_of(i) for i in impls)
            output.append(f"  {call_graph.path_of(decl)} -> {', '.join(names)}")
        else:
            output.append(f"  {call_graph.path_of(decl)} -> (no implementations)")

    for kind in DispatchKind:
        calls = sorted_calls(call_graph, kind)
        output.append("")
        output.append(f"{kind.title} ({len(calls)}):")
        for edge in calls:
            output.append(f"  {edge.describe()}")

    return "\n".join(output)


def _escape(name: str) -> str:
    return name.replace("\\", "\\\\").replace('"', '\\"')


def _nodeName(def_id) -> str:
    return "<root>" if def_id is None else str(def_id)


def generate_dot_output(call_graph: CallGraph, args=None) -> str:
    """Generate DOT format output for the call graph."""
    lines = []
    lines.append("digraph CallGraph {")
    lines.append("    rankdir=TB;")
    lines.append("    node [shape=box, style=filled, fillcolor=lightblue];")
    lines.append("")

    # Nodes are keyed by id; paths are only labels.
    nodes = {}
    for def_id in sorted_functions(call_graph):
        nodes[_nodeName(def_id)] = call_graph.path_of(def_id)
    for edge in sorted(call_graph.edges(), key=_edgeKey):
        nodes.setdefault(_nodeName(edge.caller), edge.caller_path)
        nodes.setdefault(_nodeName(edge.callee), edge.callee_path)

    for name, label in nodes.items():
        lines.append(f'    "{_escape(name)}" [label="{_escape(label)}"];')

    lines.append("")

    for kind in DispatchKind:
        for edge in sorted_calls(call_graph, kind):
            caller = _escape(_nodeName(edge.caller))
            callee = _escape(_nodeName(edge.callee))
            lines.append(
                f'    "{caller}" -> "{callee}" [label="{edge.constraint_depth}", {_DOT_STYLES[kind]}];'
            )

    lines.append("}")
    return "\n".join(lines)


def _idData(def_id):
    if def_id is None:
        return None
    return [def_id.crate, def_id.index]


def _edgeData(edge: CallEdge) -> Dict[str, Any]:
    return {
        "caller": _idData(edge.caller),
        "caller_path": edge.caller_path,
        "callee": _idData(edge.callee),
        "callee_path": edge.callee_path,
        "constraint_depth": edge.constraint_depth,
        "site": str(edge.site),
    }


def graph_to_dict(call_graph: CallGraph) -> Dict[str, Any]:
    functions = call_graph.functions
    data: Dict[str, Any] = {
        "functions": [
            {"id": _idData(f), "path": call_graph.path_of(f), "location": str(functions[f])}
            for f in sorted_functions(call_graph)
        ],
        "method_declarations": [],
    }

    for decl in sorted_declarations(call_graph):
        impls = sorted(call_graph.implementations_of(decl), key=lambda i: (call_graph.path_of(i), _idKey(i)))
        data["method_declarations"].append(
            {
                "id": _idData(decl),
                "path": call_graph.path_of(decl),
                "implementations": [{"id": _idData(i), "path": call_graph.path_of(i)} for i in impls],
            }
        )

    data["calls"] = {kind.value: [_edgeData(e) for e in sorted_calls(call_graph, kind)] for kind in DispatchKind}
    return data


def generate_json_output(call_graph: CallGraph, args=None) -> str:
    """Generate JSON output for the call graph."""
    return json.dumps(graph_to_dict(call_graph), indent=2)


GENERATORS = {
    "text": generate_text_output,
    "json": generate_json_output,
    "dot": generate_dot_output,
}
