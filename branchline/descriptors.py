r"""
Branchline method descriptors (the input contract).

Overview
- CommandPathItem: one segment of a dotted grouping path (name + optional description).
- ArgumentDescriptor: one raw argument of an annotated function.
- MethodDescriptor: one annotated function: its name, optional provided command
  name, grouping path, owner handle, arguments and description.

Descriptors are produced once per build by an external discovery step and are
immutable afterward. Construction only checks structure; classification,
naming and conflict detection happen downstream (see parameters.classify and
tree.build).

Validation highlights
- Names are non-empty strings after trimming.
- Path segments, and method names a command name is derived from, hold at
  least one letter or digit.
- Argument names are identifiers as written by the host ("branchName",
  "remote_name"), matched verbatim by the engine ("--branchName").
- Short forms are a single non-hyphen, non-whitespace character.
- Default literals are strings (the engine binds them verbatim).
- A method's arguments have pairwise distinct names and short forms.
- Choices reject duplicates.

Quick example:
    >>> MethodDescriptor(
    ...     "CheckoutBranch",
    ...     "samples.git.CheckoutActions",
    ...     (
    ...         ArgumentDescriptor("branchName", "str"),
    ...         ArgumentDescriptor("force", "bool", boolean=True, short="f"),
    ...     ),
    ...     (CommandPathItem("checkout", "Checking out branches and files"),),
    ...     name="",
    ... )
"""
import re

from rich.text import Text

from .internals import RecordType
from .utils import *


def _sanitize_name(cls, name, field="name", /, *, empty=False):
    """
    Internal: validate a required string field, trimming whitespace.

    Raises
    - TypeError: when the value is not a string.
    - ValueError: when the value is empty after trimming (unless empty=True).
    """
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} {field!r} must be a string")
    elif not (name := name.strip()) and not empty:
        raise ValueError(f"{cls.__typename__} {field!r} cannot be empty")
    return name


def _sanitize_command(cls, name, field="name", /):
    """
    Internal: validate a name that a command name is derived from.

    Raises
    - ValueError: when the derived name would be empty (no letter or digit).
    """
    if not kebabize(name := _sanitize_name(cls, name, field)):
        raise ValueError(f"{cls.__typename__} {field!r} must contain a letter or a digit")
    return name


def _sanitize_description(cls, description, /):
    """
    Internal: validate an optional description (Unset, str or rich Text).

    Strings are trimmed; empty strings are rejected so that "absent" is
    always spelled Unset.
    """
    if not isinstance(description, str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'description' must be a string")
    elif isinstance(description, str) and not (description := description.strip()):
        raise ValueError(f"{cls.__typename__} 'description' cannot be empty")
    return description


class CommandPathItem(metaclass=RecordType):
    """
    One segment of a grouping path, ordered from the root to the leaf.

    The description, when present, becomes the description of the group node
    the first time that segment is created (first-seen wins).
    """

    __introspectable__ = (
        "name",
        "description",
    )

    def __new__(cls, name, description=Unset, /):
        return cls.__record__(
            super().__new__(cls),
            name=_sanitize_command(cls, name),
            description=_sanitize_description(cls, description),
        )


class ArgumentDescriptor(metaclass=RecordType):
    """
    One raw argument of an annotated function.

    Parameters
    - name: str
      Argument name as declared on the function.
    - type: str
      Opaque identifier naming the target-side type ("str", "int", "path"...).
      The engine never interprets it; converters do.
    - boolean: bool
      The declared type is boolean. Boolean arguments always classify as flags.
    - short: Unset | str
      Optional single-character short form ("f" for "-f").
    - default: Unset | str
      Default literal. Its presence makes the argument optional.
    - named: bool
      Explicit named-option marker: an optional, non-boolean argument with this
      marker classifies as an option ("--name value") instead of an optional
      positional.
    - choices: Iterable[str]
      Enumerated values of the target type (rendered as "<a|b>" in help).
    - description: Unset | str
      Short help text.
    """

    __introspectable__ = (
        "name",
        "type",
        "boolean",
        "short",
        "default",
        "named",
        "choices",
        "description",
    )

    __displayable__ = (
        "name",
        "type",
        "boolean",
        "short",
        "default",
        "named",
    )

    def __new__(
            cls,
            name,
            type="str",
            /,
            *,
            boolean=False,
            short=Unset,
            default=Unset,
            named=False,
            choices=(),
            description=Unset,
    ):
        name = _sanitize_name(cls, name)
        type = _sanitize_name(cls, type, "type")

        if not isinstance(short, str | Unset):
            raise TypeError(f"{cls.__typename__} 'short' must be a string")
        elif isinstance(short, str) and not re.fullmatch(r"[^\s-]", short):
            raise ValueError(f"{cls.__typename__} 'short' must be a single non-hyphen character")

        if not isinstance(default, str | Unset):
            raise TypeError(f"{cls.__typename__} 'default' must be a string literal")

        sanitized = []
        for choice in choices:
            if not isinstance(choice, str):
                raise TypeError(f"{cls.__typename__} 'choices' must be strings")
            if choice in sanitized:
                raise ValueError(f"{cls.__typename__} 'choices' cannot contain duplicates")
            sanitized.append(choice)

        return cls.__record__(
            super().__new__(cls),
            name=name,
            type=type,
            boolean=bool(boolean),
            short=short,
            default=default,
            named=bool(named),
            choices=sanitized,
            description=_sanitize_description(cls, description),
        )

    @property
    def has_default(self):
        """
        True when a default literal was declared.
        """
        return self.default is not Unset


class MethodDescriptor(metaclass=RecordType):
    """
    Normalized record describing one invocable function and its placement.

    Parameters
    - method: str
      The function's own name (e.g., "CheckoutBranch").
    - owner: str
      Opaque handle to whatever holds the callable (e.g., "samples.git.CheckoutActions").
    - arguments: Iterable[ArgumentDescriptor]
      Declared arguments in declaration order.
    - path: Iterable[CommandPathItem | str]
      Grouping path from the root; plain strings are promoted to CommandPathItem.
    - name: Unset | str
      Provided command name. Unset derives it from 'method'; "" attaches the
      method directly to the end of 'path' with no extra segment.
    - description: Unset | str
      Short help text for the command.
    """

    __introspectable__ = (
        "method",
        "owner",
        "arguments",
        "path",
        "name",
        "description",
    )

    def __new__(cls, method, owner, arguments=(), path=(), /, *, name=Unset, description=Unset):
        owner = _sanitize_name(cls, owner, "owner")

        if not isinstance(name, str | Unset):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        elif isinstance(name, str):
            name = _sanitize_name(cls, name, "name", empty=True)
            method = _sanitize_name(cls, method, "method")
        else:
            method = _sanitize_command(cls, method, "method")

        segments = []
        for segment in path:
            if isinstance(segment, str):
                segment = CommandPathItem(segment)
            if not isinstance(segment, CommandPathItem):
                raise TypeError(f"{cls.__typename__} 'path' must contain command path items")
            segments.append(segment)

        names = set()
        shorts = set()
        for argument in (arguments := tuple(arguments)):
            if not isinstance(argument, ArgumentDescriptor):
                raise TypeError(f"{cls.__typename__} 'arguments' must contain argument descriptors")
            if argument.name in names:
                raise ValueError(f"{cls.__typename__} argument {argument.name!r} is declared twice")
            if argument.short and argument.short in shorts:
                raise ValueError(f"{cls.__typename__} short form {argument.short!r} is declared twice")
            names.add(argument.name)
            shorts.add(argument.short)

        return cls.__record__(
            super().__new__(cls),
            method=method,
            owner=owner,
            arguments=arguments,
            path=segments,
            name=name,
            description=_sanitize_description(cls, description),
        )


__all__ = (
    "CommandPathItem",
    "ArgumentDescriptor",
    "MethodDescriptor",
)
