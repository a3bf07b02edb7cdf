"""
Collection of callables and interface declarations.

Every callable with a body is recorded in the function set. Interface
method declarations are recorded with the list of implementations that
satisfy them; a default body counts as an implementation of its own
declaration. Implementations are matched to declarations by name within
the interface their block implements.
"""

import logging

from gatedcg.language.model import nodes
from .store import CallGraph

LOG = logging.getLogger(__name__)


class DeclarationCollector(object):
    def __init__(self, program, graph: CallGraph, isGenerated=None):
        self.program = program
        self.graph = graph
        self.hidden = set()
        if isGenerated is not None:
            self._hide(program.items(), isGenerated, False)

    def _hide(self, items, isGenerated, generated):
        # Declarations of generated interfaces are never reported.
        for item in items:
            inner = generated or isGenerated(item)
            if isinstance(item, nodes.Trait):
                for method in item.methods:
                    if inner or isGenerated(method):
                        self.hidden.add(method.def_id)
            elif isinstance(item, nodes.Module):
                self._hide(item.items, isGenerated, inner)

    def _function(self, node):
        self.graph.add_function(node.def_id, node.span.location(), self.program.def_path(node.def_id))

    def function(self, node):
        """A free function definition."""
        self._function(node)

    def traitMethod(self, node):
        """An interface method declaration, with or without a default body."""
        self.graph.add_declaration(node.def_id, self.program.def_path(node.def_id))

        if node.isProvided():
            self._function(node)
            self.graph.add_implementation(node.def_id, node.def_id)

    def implMethod(self, impl, node):
        """
        A method of an implementation block.

        Returns:
            The id of the declaration it implements, or None.
        """
        self._function(node)

        decl_id = self.program.declaring_interface_of(impl, node)
        if decl_id in self.hidden:
            LOG.debug("%s implements generated %s", self.program.def_path(node.def_id), self.program.def_path(decl_id))
            return None
        if decl_id is not None:
            self.graph.remember_path(decl_id, self.program.def_path(decl_id))
            self.graph.add_implementation(decl_id, node.def_id)
        elif impl.trait is not None:
            LOG.debug(
                "%s implements no declaration of %s",
                self.program.def_path(node.def_id),
                self.program.def_path(impl.trait),
            )
        return decl_id
