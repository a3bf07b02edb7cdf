"""
Call graph extraction with constraint depth.

The package is organized into focused components:
- types: call edges and dispatch kinds
- store: the ``CallGraph`` with min-depth merging
- depth: the constraint depth rules
- heuristics: generated code, debug assertions, desugared matches
- classifier: Static / Dynamic / Non-Local classification of call sites
- declarations: functions and interface declarations
- extractor: the traversal tying them together
- formats, reachability: reports and queries over a finished graph
"""

from .types import CallEdge, DispatchKind, EdgeKey, UNKNOWN_CALLER
from .store import CallGraph
from .depth import BranchDepthPolicy, ConstraintDepthTracker, DepthContext
from .heuristics import Heuristics
from .classifier import CallClassifier, classify
from .extractor import CallGraphExtractor, extract_call_graph
from .formats import generate_text_output, generate_dot_output, generate_json_output

__all__ = [
    "BranchDepthPolicy",
    "CallClassifier",
    "CallEdge",
    "CallGraph",
    "CallGraphExtractor",
    "ConstraintDepthTracker",
    "DepthContext",
    "DispatchKind",
    "EdgeKey",
    "Heuristics",
    "UNKNOWN_CALLER",
    "classify",
    "extract_call_graph",
    "generate_text_output",
    "generate_dot_output",
    "generate_json_output",
]
