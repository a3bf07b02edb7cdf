"""
gatedcg CLI tools.

This package contains the command-line tools:
- callgraph: extract a call graph with constraint depths and print a report
- reach: query callables reachable from an entry point within a depth budget
"""

from .main import main

__all__ = ["main"]
