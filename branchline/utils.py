"""
Branchline utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the descriptor, tree, matching and help layers.

Overview
- UnsetType / Unset
  • Singleton sentinel for "value not provided" (absent description, short form, default...).
  • Falsey, printable as "Unset", non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, preserving legitimate falsey values like "" or 0.

- freeze(object)
  • Recursively turn containers into read-only equivalents (tuple, mappingproxy, frozenset).

- mirror("attr")
  • Read-only property exposing a private backing field (self._attr).

- kebabize(identifier)
  • Default command-name derivation: "CheckoutBranch" -> "checkout-branch".

- ordinal(number)
  • Human-friendly 1-based position labels used in diagnostics ("third position").

Usage guidance
- Prefer Unset for API defaults when None or "" is a meaningful user value.
- Names not in __all__ are internal and may change without notice.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce("", "fallback")
    ''
    >>> kebabize("listRemotes")
    'list-remotes'
"""
import functools
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    The descriptor model is full of optional values (descriptions, short forms,
    default literals, provided names). The empty string is meaningful for some
    of them (a provided name of "" attaches a method to its parent path), so
    None and "" cannot stand for "absent". A single instance, Unset, does.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and "".
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a singleton per process.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        Support reversed PEP 604 unions when Unset appears on the right.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns object unless it is Unset, in which case default is returned.
    Falsey values like None, 0 or "" are preserved as-is.
    """
    return object if object is not Unset else default


def freeze(object, /):
    """
    Recursively materialize read-only copies of containers.

    - Sequence (non-string): tuple of frozen items.
    - Mapping: mappingproxy over a dict of frozen values (keys and order preserved).
    - Set: frozenset of frozen items.
    - Anything else: returned as-is.
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(map(freeze, object))
    elif isinstance(object, Mapping):
        return MappingProxyType(dict(zip(object.keys(), map(freeze, object.values()))))
    elif isinstance(object, Set):
        return frozenset(map(freeze, object))
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the private attribute "_{name}".

    Values are stored already frozen (see freeze()), so the getter hands them
    out directly without copying.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    def getter(self):
        return getattr(self, "_" + name)

    getter.__name__ = getter.__qualname__ = name
    return property(getter)


@functools.cache
def kebabize(identifier, /):
    """
    Derive a default command name from an identifier.

    The identifier is split into words on case changes, digits boundaries,
    underscores, hyphens and whitespace; the words are lower-cased and joined
    with hyphens.

    Examples
    - kebabize("CheckoutBranch") -> "checkout-branch"
    - kebabize("listRemotes")    -> "list-remotes"
    - kebabize("HTTPServer")     -> "http-server"
    - kebabize("add_remote")     -> "add-remote"
    - kebabize("checkout")       -> "checkout"
    """
    if not isinstance(identifier, str):
        raise TypeError("kebabize() argument must be a string")
    words = re.findall(r"[A-Z]+(?=[A-Z][a-z]|\d|\b|_|$)|[A-Z]?[a-z]+|[A-Z]+|\d+", identifier)
    return "-".join(word.lower() for word in words)


@functools.cache
def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return (
            "first", "second", "third", "fourth", "fifth",
            "sixth", "seventh", "eighth", "ninth", "tenth",
        )[number - 1] if number > 0 else str(number)
    except IndexError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, 113th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f"{number}%s" % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


Unset = UnsetType()
"""
Internal sentinel for "not provided".

Notes
- Singleton: there is only one Unset instance.
- Distinct from None and "": identity checks must not treat it as either.
- Typical pattern: value = coalesce(user_value, default).
"""


__all__ = (
    # Functions
    "coalesce",
    "freeze",
    "mirror",
    "kebabize",
    "ordinal",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
