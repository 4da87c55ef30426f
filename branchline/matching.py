r"""
Branchline argument matching engine.

match(tree, argv) turns a raw argument vector into exactly one outcome:

- Dispatch: a command method was found and every parameter was bound.
- ShowHelp: help was asked for (or a group without a handler was reached).
- Diagnostic: something is wrong with the vector (kind is a FaultCode).

Phases
1. path resolution
   • from the root, descend while the token at the cursor equals the name of a
     child of the current node (exact string equality); each step consumes one token.
   • a help marker (--help, -h, -?) anywhere after the consumed path → ShowHelp
     for the deepest node reached.
   • a node without a method → ShowHelp when it groups children, otherwise
     UNKNOWN_COMMAND. A node with a method is matched even if it also has
     children that the next token did not select.
2. parameter binding, in plan order (flags, options, positionals), over the
   whole vector with a claimed/unclaimed mask where path tokens start claimed:
   • flag: first unclaimed "--name" / "-s" token; claims it, binds True. Absent → False.
   • option: first unclaimed "--name" / "-s" token; the next position must
     exist, be unclaimed and not start with "-", else MISSING_OPTION_VALUE.
     Both positions are claimed. Absent → left unbound.
   • positional: first unclaimed token not starting with "-". None left →
     MISSING_POSITIONAL (mandatory) or the default literal (optional).
   • every claimed value goes through the converter; failure → CONVERSION_FAILED.
3. leftovers: any unclaimed position → UNRECOGNIZED_ARGUMENTS (wins over Dispatch).

Claiming by value lets named parameters appear anywhere while positionals are
still consumed strictly left to right among whatever remains.

Concurrency
- The tree is only read. The mask and the binding maps are local to one call,
  so any number of calls may share one tree.
"""
from .conversion import ConversionError, passthrough
from .faults import (
    ConversionFailedError,
    FaultCode,
    MissingOptionValueError,
    MissingPositionalError,
    UnknownCommandError,
    UnrecognizedArgumentsError,
    getdoc,
)
from .internals import RecordType
from .logs import get_logger
from .parameters import SHORT_PREFIX, Flag, Option, OptionalPositional, Positional
from .plans import CommandTree
from .utils import *

logger = get_logger(__name__)

HELP_MARKERS = ("--help", "-h", "-?")


class MatchOutcome(metaclass=RecordType):
    """
    Abstract base of Dispatch, ShowHelp and Diagnostic (a closed family).
    """

    def __new__(cls, *args, **kwargs):
        if cls is MatchOutcome:
            raise TypeError("type 'MatchOutcome' cannot be instantiated directly")
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        if cls.__module__ != __name__:
            raise TypeError("type 'MatchOutcome' is not an acceptable base type")
        super().__init_subclass__(**options)

    @property
    def route(self):
        """
        Space-separated command path of the node the outcome is about.
        """
        return " ".join(self.path)


class Dispatch(MatchOutcome, sealed=True):
    """
    A fully-bound call.

    - bound: parameter name → raw string (flags → bool, missing optional
      positionals → default literal). Options whose marker was absent are not
      present; Program.complete() applies their default.
    - values: same keys, converted through the converter.
    """

    __introspectable__ = (
        "owner",
        "method",
        "path",
        "bound",
        "values",
    )

    def __new__(cls, owner, method, path, bound, values, /):
        return cls.__record__(
            super().__new__(cls),
            owner=owner,
            method=method,
            path=path,
            bound=bound,
            values=values,
        )

    def __hash__(self):
        return hash((type(self), self.owner, self.method, self.path))


class ShowHelp(MatchOutcome, sealed=True):
    """
    Render help for `node` (reached through `path`) and stop without side effects.
    """

    __introspectable__ = (
        "node",
        "path",
    )

    __displayable__ = (
        "path",
    )

    def __new__(cls, node, path, /):
        return cls.__record__(super().__new__(cls), node=node, path=path)

    def __hash__(self):
        return hash((type(self), self.path))


class Diagnostic(MatchOutcome, sealed=True):
    """
    A user-facing matching failure.

    - kind: FaultCode (UNKNOWN_COMMAND, MISSING_OPTION_VALUE, MISSING_POSITIONAL,
      CONVERSION_FAILED, UNRECOGNIZED_ARGUMENTS).
    - detail: read-only mapping with the context of that kind
      (parameter, marker, index, value, reason, tokens...).
    - path: command path resolved before the failure.
    """

    __introspectable__ = (
        "kind",
        "detail",
        "path",
    )

    def __new__(cls, kind, detail, path=(), /):
        if not isinstance(kind, FaultCode):
            raise TypeError("Diagnostic() kind must be a fault-code")
        return cls.__record__(super().__new__(cls), kind=kind, detail=detail, path=path)

    def __hash__(self):
        return hash((type(self), self.kind, self.path))

    def fault(self, prog="", /):
        """
        Build the CommandException describing this diagnostic.

        Messages lead with the ordinal position of the offending token when
        one exists; hints point at the help of the command that was reached.
        """
        detail = self.detail
        command = " ".join(filter(None, (prog, self.route)))
        helper = "run '%s --help'" % command if command else "run with '--help'"

        match self.kind:
            case FaultCode.UNKNOWN_COMMAND:
                tokens = detail.get("tokens", ())
                if tokens:
                    message = "unknown command %r at %s position" % (tokens[0], ordinal(len(self.path) + 1))
                else:
                    message = "no command to run"
                return UnknownCommandError(
                    message,
                    title="unknown command",
                    code=self.kind,
                    path=self.path,
                    tokens=tokens,
                    hint="%s to see available commands" % helper,
                    docs=getdoc(self.kind),
                )
            case FaultCode.MISSING_OPTION_VALUE:
                return MissingOptionValueError(
                    "option %r at %s position requires a value" % (detail["marker"], ordinal(detail["index"] + 1)),
                    title="missing option value",
                    code=self.kind,
                    path=self.path,
                    input=detail["marker"],
                    index=detail["index"],
                    parameter=detail["option"],
                    hint="use '%s <%s>' or %s to see the expected usage" % (detail["marker"], detail["option"], helper),
                    docs=getdoc(self.kind),
                )
            case FaultCode.MISSING_POSITIONAL:
                return MissingPositionalError(
                    "missing value for argument %r" % detail["parameter"],
                    title="missing positional",
                    code=self.kind,
                    path=self.path,
                    parameter=detail["parameter"],
                    hint="add the missing value; %s to see the expected order" % helper,
                    docs=getdoc(self.kind),
                )
            case FaultCode.CONVERSION_FAILED:
                if (index := detail.get("index", Unset)) is not Unset:
                    where = " at %s position" % ordinal(index + 1)
                else:
                    where = ""
                return ConversionFailedError(
                    "invalid value %r for %r%s: %s" % (detail["value"], detail["parameter"], where, detail["reason"]),
                    title="invalid value",
                    code=self.kind,
                    path=self.path,
                    input=detail["value"],
                    index=index,
                    parameter=detail["parameter"],
                    hint="pass a valid %s; %s to see the expected usage" % (detail["type"], helper),
                    docs=getdoc(self.kind),
                )
            case FaultCode.UNRECOGNIZED_ARGUMENTS:
                return UnrecognizedArgumentsError(
                    "unrecognized arguments: %s" % ", ".join(detail["tokens"]),
                    title="unrecognized arguments",
                    code=self.kind,
                    path=self.path,
                    tokens=detail["tokens"],
                    leftover=detail["indices"],
                    hint="remove the extra inputs; %s to see valid forms" % helper,
                    docs=getdoc(self.kind),
                )
            case _:
                raise ValueError(f"diagnostic kind {self.kind!r} has no runtime fault")


def _seek(tokens, claimed, markers, /):
    """
    Index of the first unclaimed token equal to one of the markers, or None.
    """
    for index, token in enumerate(tokens):
        if not claimed[index] and token in markers:
            return index
    return None


def _next_value(tokens, claimed, /):
    """
    Index of the first unclaimed token that does not look like a marker, or None.
    """
    for index, token in enumerate(tokens):
        if not claimed[index] and not token.startswith(SHORT_PREFIX):
            return index
    return None


def match(tree, argv, /, converter=passthrough):
    """
    Match a raw argument vector against a compiled command tree.

    Parameters
    - tree: CommandTree
    - argv: Iterable[str]
      The raw process arguments (program name excluded), unparsed.
    - converter: object with convert(type, raw, /, choices=())
      String conversion capability (see branchline.conversion).

    Returns
    - Dispatch | ShowHelp | Diagnostic

    Raises
    - TypeError: when tree is not a CommandTree or argv holds non-strings.
    """
    if not isinstance(tree, CommandTree):
        raise TypeError("match() first argument must be a command tree")

    tokens = tuple(argv)
    if not all(isinstance(token, str) for token in tokens):
        raise TypeError("match() second argument must be an iterable of strings")

    # Phase 1: path resolution.
    node = tree.root
    path = ()
    cursor = 0
    while cursor < len(tokens) and tokens[cursor] in node:
        node = node[tokens[cursor]]
        path += (tokens[cursor],)
        cursor += 1

    if any(token in HELP_MARKERS for token in tokens[cursor:]):
        logger.debug("help requested for %r", " ".join(path) or "(root)")
        return ShowHelp(node, path)

    if not node.invocable:
        if len(node):
            logger.debug("group %r has no handler, showing its commands", " ".join(path) or "(root)")
            return ShowHelp(node, path)
        return Diagnostic(FaultCode.UNKNOWN_COMMAND, {"tokens": tokens[cursor:]}, path)

    # Phase 2: parameter binding.
    plan = tree.plan(path)
    claimed = [index < cursor for index in range(len(tokens))]
    bound = {}
    values = {}

    def claim(parameter, index, raw, /):
        logger.debug("%s: %r claimed by %r at index %d", plan.method.qualname, raw, parameter.name, index)
        try:
            values[parameter.name] = converter.convert(parameter.type, raw, parameter.choices)
        except ConversionError as error:
            return Diagnostic(FaultCode.CONVERSION_FAILED, {
                "parameter": parameter.name,
                "type": parameter.type,
                "value": raw,
                "reason": error.reason,
                "index": index,
            }, path)
        bound[parameter.name] = raw
        return None

    for step in plan:
        match (parameter := step.parameter):
            case Flag():
                if (index := _seek(tokens, claimed, parameter.markers)) is not None:
                    claimed[index] = True
                    logger.debug("%s: flag %r set at index %d", plan.method.qualname, parameter.name, index)
                bound[parameter.name] = values[parameter.name] = index is not None

            case Option():
                if (index := _seek(tokens, claimed, parameter.markers)) is None:
                    continue
                following = index + 1
                if following >= len(tokens) or claimed[following] or tokens[following].startswith(SHORT_PREFIX):
                    return Diagnostic(FaultCode.MISSING_OPTION_VALUE, {
                        "option": parameter.name,
                        "marker": tokens[index],
                        "index": index,
                    }, path)
                claimed[index] = claimed[following] = True
                if diagnostic := claim(parameter, following, tokens[following]):
                    return diagnostic

            case Positional() | OptionalPositional():
                if (index := _next_value(tokens, claimed)) is not None:
                    claimed[index] = True
                    if diagnostic := claim(parameter, index, tokens[index]):
                        return diagnostic
                elif isinstance(parameter, Positional):
                    return Diagnostic(FaultCode.MISSING_POSITIONAL, {"parameter": parameter.name}, path)
                else:
                    try:
                        values[parameter.name] = converter.convert(parameter.type, parameter.default, parameter.choices)
                    except ConversionError as error:
                        return Diagnostic(FaultCode.CONVERSION_FAILED, {
                            "parameter": parameter.name,
                            "type": parameter.type,
                            "value": parameter.default,
                            "reason": error.reason,
                        }, path)
                    bound[parameter.name] = parameter.default

            case _:
                raise TypeError(f"unexpected parameter {parameter!r}")

    # Phase 3: leftovers.
    if indices := tuple(index for index, taken in enumerate(claimed) if not taken):
        return Diagnostic(FaultCode.UNRECOGNIZED_ARGUMENTS, {
            "tokens": tuple(tokens[index] for index in indices),
            "indices": indices,
        }, path)

    method = plan.method
    order = {parameter.name: position for position, parameter in enumerate(method.parameters)}
    return Dispatch(
        method.owner,
        method.method,
        path,
        dict(sorted(bound.items(), key=lambda item: order[item[0]])),
        dict(sorted(values.items(), key=lambda item: order[item[0]])),
    )


__all__ = (
    "MatchOutcome",
    "Dispatch",
    "ShowHelp",
    "Diagnostic",
    "match",
    "HELP_MARKERS",
)
