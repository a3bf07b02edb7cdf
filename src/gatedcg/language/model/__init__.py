"""Typed program model consumed by the call graph extractor.

- nodes: item, statement and expression node classes
- program: the queryable ``Program`` and method-resolution results
- loader: reading a frontend's JSON export into a ``Program``
"""

from .nodes import CallableId, Span
from .program import DeclarationTarget, DefInfo, ImplementationTarget, Program
from .loader import load_program, program_from_dict

__all__ = [
    "CallableId",
    "Span",
    "DeclarationTarget",
    "ImplementationTarget",
    "DefInfo",
    "Program",
    "load_program",
    "program_from_dict",
]
