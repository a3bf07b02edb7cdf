"""
Queryable program model for one compilation unit.

``Program`` answers the questions the call graph extractor asks of the
frontend: which items exist, what a method call resolved to, which
interface method an implementation satisfies, how a callable prints and
what source text a span covers. It is read-only once built.
"""

from collections import namedtuple

from . import nodes


class DeclarationTarget(namedtuple("DeclarationTarget", "def_id local")):
    """A method call resolved only to an interface method declaration."""

    __slots__ = ()


class ImplementationTarget(namedtuple("ImplementationTarget", "def_id local")):
    """A method call resolved to a concrete body (method or free item)."""

    __slots__ = ()


class DefInfo(namedtuple("DefInfo", "def_id path local")):
    __slots__ = ()


class Program(object):
    """
    A type-checked compilation unit.

    Attributes:
        crate: Name of the analyzed compilation unit.
        files: Mapping of file name to its source text.
    """

    __slots__ = "crate", "files", "_items", "_defs", "_traits"

    def __init__(self, crate, items=(), defs=(), traits=None, files=None):
        """
        Args:
            crate: Name of the compilation unit.
            items: Top-level items in export order.
            defs: ``DefInfo`` records for every callable that is referenced.
            traits: Mapping of interface id to ``{method name: declaration id}``
                for interfaces defined outside ``items``.
            files: Mapping of file name to source text.
        """
        self.crate = crate
        self.files = dict(files or {})
        self._items = list(items)
        self._defs = {}
        self._traits = {}

        for info in defs:
            self.addDef(info)

        for trait_id, methods in (traits or {}).items():
            self._traits[trait_id] = dict(methods)

        for trait in self._localTraits(self._items):
            table = self._traits.setdefault(trait.def_id, {})
            for method in trait.methods:
                table.setdefault(method.name, method.def_id)

    def _localTraits(self, items):
        for item in items:
            if isinstance(item, nodes.Trait):
                yield item
            elif isinstance(item, nodes.Module):
                yield from self._localTraits(item.items)

    def addDef(self, info):
        self._defs[info.def_id] = info

    # ---------------------------------------------------------------- queries

    def items(self):
        """Top-level items of the compilation unit, in export order."""
        return list(self._items)

    def def_path(self, def_id):
        """Printable qualified path of a callable (not unique)."""
        info = self._defs.get(def_id)
        if info is None:
            return str(def_id)
        return info.path

    def is_local(self, def_id):
        if def_id.crate == self.crate:
            return True
        info = self._defs.get(def_id)
        return info is not None and info.local

    def inferred_callee(self, call):
        """
        The frontend's resolution of a method call, or None if it failed.

        A resolution exported without a locality flag takes it from
        ``is_local``.
        """
        resolution = call.resolution
        if resolution is None or resolution.local is not None:
            return resolution
        return resolution._replace(local=self.is_local(resolution.def_id))

    def declaring_interface_of(self, impl, method):
        """
        The interface method declaration ``method`` implements, if any.

        Matching is by name inside the interface implemented by ``impl``;
        inherent implementation blocks implement nothing.
        """
        if impl.trait is None:
            return None
        return self._traits.get(impl.trait, {}).get(method.name)

    def source_text(self, span):
        """
        Source text covered by ``span``, or "" if the file is unknown.

        Lines are 1-indexed, columns 0-indexed, the end column exclusive.
        """
        text = self.files.get(span.filename)
        if text is None or span.lo_line < 1:
            return ""

        lines = text.splitlines()
        if span.lo_line > len(lines):
            return ""

        hi_line = min(max(span.hi_line, span.lo_line), len(lines))
        selected = lines[span.lo_line - 1 : hi_line]
        lo_col = max(span.lo_col, 0)

        if len(selected) == 1:
            if span.hi_col > lo_col and hi_line == span.hi_line:
                return selected[0][lo_col : span.hi_col]
            return selected[0][lo_col:]

        selected[0] = selected[0][lo_col:]
        if hi_line == span.hi_line and span.hi_col >= 0:
            selected[-1] = selected[-1][: span.hi_col]
        return "\n".join(selected)

    def __repr__(self):
        return "Program(%r, %d items)" % (self.crate, len(self._items))
