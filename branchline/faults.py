"""
Branchline faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue,
  grouped by domain so logs and searches stay predictable.
- CommandException / CommandWarning: base types carrying a message plus options
  that know how to render themselves (rich) in a short, actionable way.
- BuildExit: aggregate of every build-time conflict for strict builds.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful/deferred).
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Position-first messages where a position exists ("missing value for option
  '--remote' at second position").
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).

Integration
- Matching produces Diagnostic outcomes; Diagnostic.fault() turns them into the
  exceptions below and the host calls trigger(fault, **options).
- In non-shell mode, exceptions are raised and warnings go through warnings.warn;
  in shell mode, they are rendered via rich (errors then exit with status 1).
"""
import copy
import inspect
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the package (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • UNKNOWN_COMMAND
    - options (1111x)
      • MISSING_OPTION_VALUE
    - positionals (1112x)
      • MISSING_POSITIONAL
    - conversion (1113x)
      • CONVERSION_FAILED
    - leftovers (1114x)
      • UNRECOGNIZED_ARGUMENTS
    - build (131xx)
      • DUPLICATE_COMMAND (raised in strict builds, warned otherwise)

    normalize() lets the host remap codes to custom labels through a
    __codes__ mapping in __main__ while keeping the numbers stable.
    """
    # --- routing errors (11xxx) ---
    UNKNOWN_COMMAND             = 11101

    # --- option errors (11xxx) ---
    MISSING_OPTION_VALUE        = 11111

    # --- positional errors (11xxx) ---
    MISSING_POSITIONAL          = 11121

    # --- conversion errors (11xxx) ---
    CONVERSION_FAILED           = 11131

    # --- leftover errors (11xxx) ---
    UNRECOGNIZED_ARGUMENTS      = 11141

    # --- build errors/warnings (13xxx) ---
    DUPLICATE_COMMAND           = 13101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, title):
    """
    Internal: shared rich rendering of a single fault.

    Layout
    - header: "[ prog — code | title ]"
    - message
    - " → hint"
    Wrapped in a Panel when options["fancy"] is True.
    """
    options = fault.options
    colorful = options.get("colorful", True)
    fancy = options.get("fancy", False)
    main = __import__("__main__")

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    prog = text(getattr(main, "__prog__", options.get("prog") or "branchline"), styler("prog-name"))

    code = options.get("code", Unset)
    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(code.normalize() if code else "", styler("code")),
        " | ",
        text(str(options.get("title", "")).title(), styler(title)),
        " ]"
    )
    message = text(fault.message, styler(title.replace("title", "message")))
    hint = Text.assemble(text(" → ", styler("hint-arrow")), text(options.get("hint", ""), styler("hint")))

    if fancy:
        width = console.width - 4
        try:
            width = int(width * options["ratio"])
        except KeyError:
            width = None
        return Panel(Group(message, hint), title=header, title_align="left", width=width)

    return Group(header, message, hint)


class CommandException(Exception):
    """
    Base of every user-facing error.

    Options commonly carried (all optional)
    - prog, shell, fancy, colorful, deferred: rendering/runtime switches.
    - title, code, hint, docs: copy shown to the user.
    - path, input, index, parameter, tokens...: structured context for reporters.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        }, "error-title")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownCommandError(CommandException): ...
class MissingOptionValueError(CommandException): ...
class MissingPositionalError(CommandException): ...
class ConversionFailedError(CommandException): ...
class UnrecognizedArgumentsError(CommandException): ...
class DuplicateCommandError(CommandException): ...


class CommandWarning(ABC, Warning):
    """
    Base of every user-facing, non-fatal issue.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "warning-message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        }, "warning-title")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DuplicateCommandWarning(CommandWarning): ...


class BuildExit(ExceptionGroup[CommandException]):
    """
    Every build-time conflict of a strict build, surfaced at once.
    """

    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad build", tuple(exceptions))

    def __init__(self, exceptions, **options):
        super().__init__("bad build", tuple(exceptions))
        self.options = MappingProxyType(options)

    def __rich__(self):
        colorful = self.options.get("colorful", True)
        main = __import__("__main__")

        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "title": "bold #FF4DA6",  # friendly pinky group title (Bad Build)
        } | getattr(main, "__styles__", {}))

        def text(fragment, style):
            return Text(str(fragment), styles[style] if colorful else "")

        prog = text(getattr(main, "__prog__", self.options.get("prog") or "branchline"), "prog-name")
        header = Text.assemble("[ ", prog, " — ", text(self.message.title(), "title"), " ]")

        renders = [copy.replace(exception, ratio=2/3, **self.options) for exception in self.exceptions]

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the rich console; otherwise, exceptions
      are raised and warnings are emitted through the warnings module.

    typical options
    - prog, shell, fancy, colorful, deferred, title, code, hint, docs, and any other
      context the reporter may want to show (path, parameter, tokens...).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "CommandException",
    "UnknownCommandError",
    "MissingOptionValueError",
    "MissingPositionalError",
    "ConversionFailedError",
    "UnrecognizedArgumentsError",
    "DuplicateCommandError",
    "CommandWarning",
    "DuplicateCommandWarning",
    "BuildExit",
    "FaultCode",
    "trigger",
    "getdoc",
)
