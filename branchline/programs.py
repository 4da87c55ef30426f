"""
Branchline host integration.

A Program binds an assembled CommandTree to the runtime:

    tree = assemble(descriptors)
    app = Program(tree, "git", converter=TypeConverter())
    invoke(app, "checkout main --force")

Runtime contract for each outcome of match()
- Dispatch: options left out of the vector that declare a default literal
  get its converted value; then (owner, method) is resolved to a callable
  and called with the values as keyword arguments. Its return value is returned.
- ShowHelp: render the help of the resolved node; nothing is called.
- Diagnostic: build the fault and trigger it. In shell mode it is printed and
  the process exits with status 1; otherwise the exception is raised.

Resolvers
- A resolver is any callable (owner, method) -> callable.
- The default one treats owner as a dotted import path ("pkg.module.Class"):
  the longest importable module prefix is imported and the rest is walked with
  getattr, then the method is looked up on the result.
"""
import importlib
import os
import shlex
import sys
from collections.abc import Iterable

from .conversion import ConversionError, passthrough
from .faults import FaultCode, trigger
from .help import helper
from .logs import get_logger
from .matching import Diagnostic, Dispatch, ShowHelp, match
from .parameters import Option
from .plans import CommandTree, assemble
from .utils import *

logger = get_logger(__name__)


def _progname():
    if sys.argv and sys.argv[0]:
        return os.path.basename(sys.argv[0])
    return "branchline"


def resolve(owner, method, /):
    """
    Default resolver: import the dotted owner and fetch `method` from it.

    Raises
    - LookupError: when no prefix of owner is importable or an attribute is missing.
    - ImportError: raised while importing a module that does exist.
    """
    parts = owner.split(".")
    for index in range(len(parts), 0, -1):
        prefix = ".".join(parts[:index])
        try:
            holder = importlib.import_module(prefix)
        except ModuleNotFoundError as error:
            # Only a missing prefix moves on; failures inside an existing module propagate.
            if error.name != prefix and not prefix.startswith(f"{error.name}."):
                raise
            continue
        try:
            for name in (*parts[index:], method):
                holder = getattr(holder, name)
        except AttributeError as error:
            raise LookupError(f"cannot resolve {owner}.{method}: {error}") from error
        return holder
    raise LookupError(f"cannot resolve {owner}.{method}: no importable module in {owner!r}")


class Program:
    """
    Runnable command-line program over an assembled command tree.

    Parameters
    - tree: CommandTree
    - prog: Unset | str
      Program name shown in help and faults (defaults to the basename of sys.argv[0]).
    - shell: bool
      True: print faults and exit(1). False: raise them (embedding, tests).
    - fancy / colorful: bool
      Rendering switches shared by help and faults.
    - converter: object with convert(type, raw, /, choices=())
    - resolver: Unset | Callable[[str, str], Callable]
    - console: Unset | rich.console.Console
      Where help is printed (stdout by default).
    """

    def __init__(self, tree, /, prog=Unset, *, shell=True, fancy=False, colorful=True,
                 converter=passthrough, resolver=Unset, console=Unset):
        if not isinstance(tree, CommandTree):
            raise TypeError("Program() argument must be a command tree")
        if not callable(getattr(converter, "convert", None)):
            raise TypeError("Program() converter must provide a convert() method")
        if resolver is not Unset and not callable(resolver):
            raise TypeError("Program() resolver must be callable")

        self._tree = tree
        self._prog = coalesce(prog, _progname())
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._converter = converter
        self._resolver = coalesce(resolver, resolve)
        self._console = console

    tree = mirror("tree")
    prog = mirror("prog")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")
    converter = mirror("converter")
    resolver = mirror("resolver")

    def __repr__(self):
        return f"program(prog={self.prog!r}, depth={self.tree.depth})"

    @property
    def options(self):
        """
        Rendering options forwarded to trigger().
        """
        return dict(prog=self.prog, shell=self.shell, fancy=self.fancy, colorful=self.colorful)

    def match(self, argv, /):
        """
        Match a token vector without running anything.

        Dispatch outcomes come back with option defaults applied.
        """
        match (outcome := match(self.tree, argv, self.converter)):
            case Dispatch():
                return self.complete(outcome)
            case _:
                return outcome

    def complete(self, outcome, /):
        """
        Apply the default literal of every option absent from a Dispatch.

        Returns a new Dispatch in declaration order, or a CONVERSION_FAILED
        Diagnostic when a default literal does not convert.
        """
        bound = {}
        values = {}
        for parameter in self.tree.plan(outcome.path).method.parameters:
            if parameter.name in outcome.values:
                bound[parameter.name] = outcome.bound[parameter.name]
                values[parameter.name] = outcome.values[parameter.name]
            elif isinstance(parameter, Option) and parameter.default is not Unset:
                try:
                    values[parameter.name] = self.converter.convert(
                        parameter.type, parameter.default, parameter.choices
                    )
                except ConversionError as error:
                    return Diagnostic(FaultCode.CONVERSION_FAILED, {
                        "parameter": parameter.name,
                        "type": parameter.type,
                        "value": parameter.default,
                        "reason": error.reason,
                    }, outcome.path)
                bound[parameter.name] = parameter.default
        return Dispatch(outcome.owner, outcome.method, outcome.path, bound, values)

    def __invoke__(self, prompt=Unset):
        """
        Execute the program with a token stream.

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; will be split via shlex.split.
          • Iterable[str]: pre-tokenized sequence; each element is trimmed.

        Returns
        - whatever the dispatched callable returns; None for help and for
          faults that did not exit or raise.
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            tokens = []
            for item in prompt:
                if not isinstance(item, str):
                    raise TypeError("__invoke__() argument must be a string or an iterable of strings")
                if item := item.strip():
                    tokens.append(item)
        else:
            raise TypeError("__invoke__() argument must be a string or an iterable of strings")

        match self.match(tokens):
            case Dispatch() as outcome:
                target = self.resolver(outcome.owner, outcome.method)
                logger.debug("dispatching %r to %s.%s", outcome.route or "(root)", outcome.owner, outcome.method)
                return target(**outcome.values)
            case ShowHelp() as outcome:
                helper(self.tree, outcome.path, self.prog,
                       console=self._console, colorful=self.colorful, fancy=self.fancy)
                return None
            case Diagnostic() as outcome:
                logger.debug("matching failed with %s for %r", outcome.kind.name, outcome.route or "(root)")
                trigger(outcome.fault(self.prog), **self.options)
                return None


def program(descriptors, /, prog=Unset, *, strict=False, **options):
    """
    Assemble descriptors and wrap the tree in a Program in one call.

    Build conflicts are reported with the same prog/shell/fancy/colorful
    options the program will use.
    """
    prog = coalesce(prog, _progname())
    settings = Program.__init__.__kwdefaults__ | options
    tree = assemble(
        descriptors,
        strict=strict,
        prog=prog,
        shell=settings["shell"],
        fancy=settings["fancy"],
        colorful=settings["colorful"],
    )
    return Program(tree, prog, **options)


def invoke(object, prompt=Unset, /):
    """
    Convenience runner for programs.

    Parameters
    - object: an instance providing __invoke__(prompt).
    - prompt: Unset (sys.argv[1:]), a shell-like string, or an iterable of strings.

    Raises
    - TypeError: when 'object' does not implement __invoke__.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt)

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method") from None


__all__ = (
    "Program",
    "program",
    "invoke",
    "resolve",
)
