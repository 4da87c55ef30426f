"""
Branchline matching plans.

A matching plan is the fixed order in which the engine tries to claim tokens
for one command method:

    rank 0  flags       (claimed by exact marker anywhere in the vector)
    rank 1  options     (marker + following value, anywhere in the vector)
    rank 2  positionals (first unclaimed non-marker token, left to right)

Within a rank, declaration order is preserved (stable sort). Named parameters
must claim their tokens before positional matching starts, otherwise a flag
placed before a positional value would be consumed as that value.

CommandTree bundles the built root with the plan of every invocable node;
assemble() produces it from descriptors and reports build conflicts.
"""
from .faults import BuildExit, DuplicateCommandError, DuplicateCommandWarning, FaultCode, getdoc, trigger
from .internals import RecordType
from .logs import get_logger
from .parameters import Flag, Option, Positional, OptionalPositional
from .tree import CommandMethod, Root, build

logger = get_logger(__name__)

FLAG_RANK = 0
OPTION_RANK = 1
POSITIONAL_RANK = 2


def rank(parameter, /):
    """
    Return the evaluation rank of a parameter (0 flags, 1 options, 2 positionals).
    """
    match parameter:
        case Flag():
            return FLAG_RANK
        case Option():
            return OPTION_RANK
        case Positional() | OptionalPositional():
            return POSITIONAL_RANK
        case _:
            raise TypeError("rank() argument must be a parameter")


class Step(metaclass=RecordType, sealed=True):
    """
    One (parameter, rank) entry of a plan.
    """

    __introspectable__ = (
        "parameter",
        "rank",
    )

    def __new__(cls, parameter, rank, /):
        return cls.__record__(super().__new__(cls), parameter=parameter, rank=rank)

    def __iter__(self):
        yield self.parameter
        yield self.rank


class MatchingPlan(metaclass=RecordType, sealed=True):
    """
    Immutable, ordered sequence of steps for one command method.
    """

    __introspectable__ = (
        "method",
        "steps",
    )

    __displayable__ = (
        "steps",
    )

    def __new__(cls, method, steps, /):
        return cls.__record__(super().__new__(cls), method=method, steps=steps)

    def __getitem__(self, index, /):
        return self.steps[index]

    def __len__(self):
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)

    @property
    def parameters(self):
        """
        Parameters in evaluation order.
        """
        return tuple(step.parameter for step in self.steps)


def compile(method, /):
    """
    Compile the matching plan of a command method (stable sort by rank).

    Pure and total: every CommandMethod compiles.
    """
    if not isinstance(method, CommandMethod):
        raise TypeError("compile() argument must be a command method")

    plan = MatchingPlan(method, sorted((Step(parameter, rank(parameter)) for parameter in method.parameters),
                                       key=lambda step: step.rank))
    logger.debug("compiled plan for %s: %s", method.qualname,
                 ", ".join(step.parameter.name for step in plan) or "(no parameters)")
    return plan


class CommandTree(metaclass=RecordType, sealed=True):
    """
    The compiled unit: a frozen Root, the plan of every invocable node, and
    the conflicts found while building.

    Shared read-only by every matching call; nothing here is mutated after
    assemble() returns.

    Access
    - tree.root / tree.conflicts
    - tree[path] → node at that path (KeyError when missing)
    - tree.plan(path) → MatchingPlan of the node at that path (KeyError when
      the node is missing or not invocable)
    - tree.plans → read-only mapping path tuple → MatchingPlan
    """

    __introspectable__ = (
        "root",
        "plans",
        "conflicts",
    )

    __displayable__ = (
        "root",
        "conflicts",
    )

    def __new__(cls, root, /, conflicts=()):
        if not isinstance(root, Root):
            raise TypeError("CommandTree() argument must be a root node")
        plans = {path: compile(node.method) for path, node in root.walk() if node.invocable}
        return cls.__record__(super().__new__(cls), root=root, plans=plans, conflicts=conflicts)

    def __getitem__(self, path, /):
        return self.root.resolve(path)

    def plan(self, path, /):
        return self.plans[tuple(path)]

    @property
    def depth(self):
        return self.root.depth


def assemble(descriptors, /, *, strict=False, **options):
    """
    Build the command tree and compile every plan in one pass.

    Conflicts
    - non-strict (default): each DuplicateCommand is triggered as a
      DuplicateCommandWarning and the tree is returned without the later descriptor.
    - strict: all conflicts are triggered together as one BuildExit.

    Parameters
    - descriptors: Iterable[MethodDescriptor]
    - strict: bool
    - **options: forwarded to trigger() (prog, shell, fancy, colorful...).

    Returns
    - CommandTree
    """
    root, conflicts = build(descriptors)

    faults = []
    for conflict in conflicts:
        first, second = conflict.descriptors
        route = conflict.route or "(root)"
        faults.append((
            "command %r is declared by both %s.%s and %s.%s" % (
                route, first.owner, first.method, second.owner, second.method
            ),
            dict(
                title="duplicate command",
                code=FaultCode.DUPLICATE_COMMAND,
                path=conflict.path,
                conflict=conflict,
                hint="give one of them a distinct name; %s.%s is the one kept" % (first.owner, first.method),
                docs=getdoc(FaultCode.DUPLICATE_COMMAND),
            ),
        ))

    if faults and strict:
        trigger(BuildExit([DuplicateCommandError(message, **context) for message, context in faults]), **options)
    else:
        for message, context in faults:
            trigger(DuplicateCommandWarning(message, **context), **options)

    return CommandTree(root, conflicts)


__all__ = (
    "Step",
    "MatchingPlan",
    "rank",
    "CommandTree",
    "assemble",
    "FLAG_RANK",
    "OPTION_RANK",
    "POSITIONAL_RANK",
)
