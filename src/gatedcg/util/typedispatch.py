"""Type-based dispatch for program-model visitors.

A ``TypeDispatcher`` subclass routes ``visitor(node, *args)`` to the method
registered for ``type(node)``. Lookups walk the MRO so a handler registered
for a base node class also serves its subclasses, and the resolved handler is
cached per concrete type.

    class Counter(TypeDispatcher):
        @dispatch(nodes.Call, nodes.MethodCall)
        def visitCall(self, node):
            return 1

        @defaultdispatch
        def visitOther(self, node):
            return 0
"""

__all__ = [
    "TypeDispatcher",
    "defaultdispatch",
    "dispatch",
    "TypeDispatchError",
    "TypeDispatchDeclarationError",
]


class TypeDispatchError(Exception):
    """A dispatcher was called with a node it has no handler for."""


class TypeDispatchDeclarationError(Exception):
    """A dispatcher class declares its handlers inconsistently."""


def _flattenTypes(types, result):
    for t in types:
        if isinstance(t, (list, tuple)):
            _flattenTypes(t, result)
        elif isinstance(t, type):
            result.append(t)
        else:
            raise TypeDispatchDeclarationError("Expected a type, got %r instead." % (t,))
    return result


def dispatch(*types):
    """Register the decorated method as the handler for ``types``."""

    def mark(f):
        f.__dispatch__ = tuple(_flattenTypes(types, []))
        return f

    return mark


def defaultdispatch(f):
    """Register the decorated method as the fallback handler."""
    f.__dispatch__ = (None,)
    return f


def exceptionDefault(self, node, *args):
    raise TypeDispatchError("%r cannot handle %r\n%r" % (type(self), type(node), node))


exceptionDefault.__dispatch__ = (None,)


class typedispatcher(type):
    """Metaclass collecting ``@dispatch`` handlers into a lookup table.

    Handlers declared on the class win over inherited ones; every dispatcher
    must end up with a default handler.
    """

    def __new__(mcs, name, bases, d):
        lut = {}

        for attr, value in d.items():
            for t in getattr(value, "__dispatch__", ()):
                if t in lut:
                    raise TypeDispatchDeclarationError(
                        "%s has multiple handlers for %r (%s)" % (name, t, attr)
                    )
                lut[t] = value

        for base in bases:
            for t, handler in getattr(base, "__typeDispatchTable__", {}).items():
                lut.setdefault(t, handler)

        if None not in lut:
            raise TypeDispatchDeclarationError("%s has no default dispatch" % (name,))

        d["__typeDispatchTable__"] = lut
        return type.__new__(mcs, name, bases, d)


class TypeDispatcher(object, metaclass=typedispatcher):
    exceptionDefault = exceptionDefault

    def __call__(self, node, *args):
        table = self.__typeDispatchTable__
        t = type(node)
        func = table.get(t)

        if func is None:
            for supercls in t.mro():
                func = table.get(supercls)
                if func is not None:
                    break
            else:
                func = table[None]
            table[t] = func

        return func(self, node, *args)
