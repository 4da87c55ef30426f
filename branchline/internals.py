"""
Record plumbing shared by every immutable model in the package.

RecordType is the metaclass behind descriptors, parameters, command nodes,
plans and matching outcomes. It gives each class:

- __typename__: hyphenated lower-case class name ("OptionalPositional" ->
  "optional-positional"), used in messages.
- read-only properties for every name listed in __introspectable__, backed by
  private "_{name}" fields (see mirror()).
- a stable __repr__ / __rich_repr__ limited to __displayable__ (falls back to
  __introspectable__).
- structural __eq__ / __hash__ over the introspectable fields, so two builds of
  the same descriptor sequence compare equal. Mapping fields hash by their items.
- sealing: classes created with sealed=True reject subclassing, which is how
  the closed variant families (parameters, nodes, outcomes) stay closed.
"""
import functools
import operator
import re
from collections.abc import Mapping

from .utils import *


def _hashable(object, /):
    # Mapping fields are stored as read-only proxies, which do not hash.
    if isinstance(object, Mapping):
        return tuple(object.items())
    return object


class RecordType(type):
    """
    Metaclass for immutable, introspectable records.

    Options (class construction-time)
    - sealed: when True, the class cannot be subclassed.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, *, sealed=False, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
            **options
        )

        if "__repr__" not in namespace:
            def __repr__(self):
                return f"{type(self).__typename__}({
                    ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
                })"
            self.__repr__ = __repr__

        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        if "__eq__" not in namespace:
            def __eq__(self, other):
                if type(self) is not type(other):
                    return NotImplemented
                return all(
                    getattr(self, name) == getattr(other, name) for name in type(self).__introspectable__
                )
            self.__eq__ = __eq__

        if "__hash__" not in namespace:
            def __hash__(self):
                return hash((type(self), *(
                    _hashable(getattr(self, name)) for name in type(self).__introspectable__
                )))
            self.__hash__ = __hash__

        if sealed:
            def __init_subclass__(cls, **options):  # NOQA: F-841
                raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
            self.__init_subclass__ = classmethod(__init_subclass__)

        return self

    def __record__(cls, self, /, **fields):
        """
        Store already-sanitized fields on a fresh instance (frozen, Unset preserved).
        """
        for name, object in fields.items():
            setattr(self, "_" + name, freeze(object))
        return self


__all__ = ("RecordType",)
