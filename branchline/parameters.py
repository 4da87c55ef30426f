r"""
Branchline parameters and the classifier.

Overview
- Variants (a closed family; nothing outside this module may subclass Parameter)
  • Positional: mandatory, order-significant value.
  • OptionalPositional: order-significant value that falls back to a default literal.
  • Option: named value ("--name value" or "-n value").
  • Flag: named, presence-only boolean ("--name" or "-n").

- classify(argument): the pure policy turning an ArgumentDescriptor into one variant.
  • boolean → Flag (keeping the short form)
  • has default, explicit named marker → Option
  • has default → OptionalPositional
  • otherwise → Positional

- describe(parameter): the first-column label used by the help tables.

Markers
- Named variants expose `markers`, the exact tokens the matching engine looks for:
  "--{name}" and, when a short form is declared, "-{short}".

Quick example:
    >>> classify(ArgumentDescriptor("force", "bool", boolean=True, short="f"))
    flag(name='force', short='f', description=Unset)
    >>> classify(ArgumentDescriptor("branchName"))
    positional(name='branchName', type='str', description=Unset)
"""
from .descriptors import ArgumentDescriptor
from .internals import RecordType
from .utils import *

LONG_PREFIX = "--"
SHORT_PREFIX = "-"


class Parameter(metaclass=RecordType):
    """
    Abstract base of the classified parameter variants.

    Consumers are expected to handle every variant (a `match` over
    Flag / Option / OptionalPositional / Positional), which is why the family
    is closed: subclasses may only be declared in this module.
    """

    def __new__(cls, *args, **kwargs):
        if cls is Parameter:
            raise TypeError("type 'Parameter' cannot be instantiated directly")
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        if cls.__module__ != __name__:
            raise TypeError("type 'Parameter' is not an acceptable base type")
        super().__init_subclass__(**options)

    @property
    def named(self):
        """
        True for variants matched by name (Option and Flag).
        """
        return isinstance(self, Option | Flag)

    @property
    def optional(self):
        """
        True when matching may complete without the parameter being supplied.
        """
        return not isinstance(self, Positional)


def _markers(name, short, /):
    return (LONG_PREFIX + name,) + ((SHORT_PREFIX + short,) if short else ())


class Positional(Parameter, sealed=True):
    """
    Mandatory positional parameter.
    """

    __introspectable__ = (
        "name",
        "type",
        "choices",
        "description",
    )

    __displayable__ = (
        "name",
        "type",
        "description",
    )

    def __new__(cls, name, type="str", /, *, choices=(), description=Unset):
        return cls.__record__(
            super().__new__(cls),
            name=name,
            type=type,
            choices=choices,
            description=description,
        )


class OptionalPositional(Parameter, sealed=True):
    """
    Positional parameter that binds its default literal when no token is left.
    """

    __introspectable__ = (
        "name",
        "type",
        "default",
        "choices",
        "description",
    )

    __displayable__ = (
        "name",
        "type",
        "default",
        "description",
    )

    def __new__(cls, name, type="str", default="", /, *, choices=(), description=Unset):
        return cls.__record__(
            super().__new__(cls),
            name=name,
            type=type,
            default=default,
            choices=choices,
            description=description,
        )


class Option(Parameter, sealed=True):
    """
    Named, value-bearing parameter: its marker must be followed by one value token.

    The default literal (if any) is not bound by the engine; hosts apply it
    downstream when the marker is absent.
    """

    __introspectable__ = (
        "name",
        "type",
        "short",
        "default",
        "choices",
        "description",
    )

    __displayable__ = (
        "name",
        "type",
        "short",
        "description",
    )

    def __new__(cls, name, type="str", /, *, short=Unset, default=Unset, choices=(), description=Unset):
        return cls.__record__(
            super().__new__(cls),
            name=name,
            type=type,
            short=short,
            default=default,
            choices=choices,
            description=description,
        )

    @property
    def markers(self):
        return _markers(self.name, self.short)


class Flag(Parameter, sealed=True):
    """
    Named, presence-only boolean parameter.
    """

    __introspectable__ = (
        "name",
        "short",
        "description",
    )

    def __new__(cls, name, /, *, short=Unset, description=Unset):
        return cls.__record__(
            super().__new__(cls),
            name=name,
            short=short,
            description=description,
        )

    @property
    def type(self):
        return "bool"

    @property
    def markers(self):
        return _markers(self.name, self.short)


def classify(argument, /):
    """
    Classify one argument descriptor into a Parameter variant.

    Total over well-formed descriptors and referentially transparent.
    Short forms are only meaningful for named variants; positionals drop them.
    """
    if not isinstance(argument, ArgumentDescriptor):
        raise TypeError("classify() argument must be an argument descriptor")

    if argument.boolean:
        return Flag(argument.name, short=argument.short, description=argument.description)

    if argument.has_default and argument.named:
        return Option(
            argument.name,
            argument.type,
            short=argument.short,
            default=argument.default,
            choices=argument.choices,
            description=argument.description,
        )

    if argument.has_default:
        return OptionalPositional(
            argument.name,
            argument.type,
            argument.default,
            choices=argument.choices,
            description=argument.description,
        )

    if argument.named:
        # Named without a default: still an option, the host decides what absence means.
        return Option(
            argument.name,
            argument.type,
            short=argument.short,
            choices=argument.choices,
            description=argument.description,
        )

    return Positional(argument.name, argument.type, choices=argument.choices, description=argument.description)


def describe(parameter, /):
    """
    Return the help-table label of a parameter.

    - Positional / OptionalPositional: the name, or "<a|b>" for enumerated types.
    - Option: "-s | --name=<name>" (or "=a|b" for enumerated types).
    - Flag: "-s | --name".
    """
    match parameter:
        case Flag():
            return " | ".join(reversed(parameter.markers))
        case Option():
            names = " | ".join(reversed(parameter.markers))
            if parameter.choices:
                return f"{names}={"|".join(parameter.choices)}"
            return f"{names}=<{parameter.name}>"
        case Positional() | OptionalPositional():
            if parameter.choices:
                return f"<{"|".join(parameter.choices)}>"
            return parameter.name
        case _:
            raise TypeError("describe() argument must be a parameter")


__all__ = (
    # Variants
    "Parameter",
    "Positional",
    "OptionalPositional",
    "Option",
    "Flag",

    # Functions
    "classify",
    "describe",

    # Constants
    "LONG_PREFIX",
    "SHORT_PREFIX",
)
