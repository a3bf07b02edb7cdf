"""gatedcg - call graph extraction with constraint depth.

Builds the call graph of a type-checked compilation unit from a frontend's
program-model export. Every edge is classified as Static, Dynamic or
Non-Local and carries the number of conditions guarding its call site.
"""

__version__ = "0.1.0"

# Import main components for easy access
from .analysis.callgraph import CallGraph, DispatchKind, extract_call_graph
from .application.config import AnalysisConfig, load_config
from .application.pipeline import analyze, analyze_file
from .language.model import Program, load_program

__all__ = [
    "AnalysisConfig",
    "CallGraph",
    "DispatchKind",
    "Program",
    "analyze",
    "analyze_file",
    "extract_call_graph",
    "load_config",
    "load_program",
    "__version__",
]
