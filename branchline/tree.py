r"""
Branchline command tree: nodes, methods and the builder.

What this module provides
- CommandMethod: the invocable part of a node (owner handle, method name,
  classified parameters, description) with derived `mandatory` and `options`.
- Root / SubCommand: the node variants. Exactly one Root; every SubCommand is
  reached by a unique sequence of names from it. A node may carry a method and
  children at the same time (it is invocable and also groups subcommands).
- DuplicateCommand: build-time conflict naming both descriptors that resolved
  to the same command path.
- build(descriptors): group flat method descriptors into one rooted tree.

Building rules
- Each descriptor walks its grouping path from the root, creating a SubCommand
  per missing segment. Segment names are kebab-cased ("SomeParent" -> "some-parent").
- The terminal segment is the provided name (verbatim) or, when absent, the
  kebab-cased method name. A provided name of "" attaches the method to the end
  of the grouping path itself (possibly the root).
- The first description seen for a node wins.
- Children keep first-insertion order; names are compared by exact string
  equality after derivation (no case folding, no merging).
- When a node already holds a method, the later descriptor is reported as a
  DuplicateCommand and left out of the tree; the first one keeps the slot.
  Every conflict is collected; building never stops at the first one.

Immutability
- Nodes are assembled inside build() and never mutated afterward; `children`
  is exposed as a read-only, insertion-ordered mapping.
"""
from .descriptors import MethodDescriptor
from .internals import RecordType
from .logs import get_logger
from .parameters import Positional, Option, classify
from .utils import *

logger = get_logger(__name__)


class CommandMethod(metaclass=RecordType, sealed=True):
    """
    Invocable payload attached to a command node.

    Parameters
    - owner: str
      Opaque handle to the callable's holder (copied from the descriptor).
    - method: str
      The callable's name on its owner.
    - parameters: Iterable[Parameter]
      Classified parameters in declaration order.
    - description: Unset | str
      Short help text.
    """

    __introspectable__ = (
        "owner",
        "method",
        "parameters",
        "description",
    )

    def __new__(cls, owner, method, parameters=(), /, description=Unset):
        return cls.__record__(
            super().__new__(cls),
            owner=owner,
            method=method,
            parameters=parameters,
            description=description,
        )

    @classmethod
    def from_descriptor(cls, descriptor, /):
        """
        Build a method from a descriptor, classifying each of its arguments.
        """
        return cls(
            descriptor.owner,
            descriptor.method,
            tuple(map(classify, descriptor.arguments)),
            descriptor.description,
        )

    @property
    def qualname(self):
        """
        Fully-qualified callable name ("owner.method").
        """
        return f"{self.owner}.{self.method}"

    @property
    def mandatory(self):
        """
        Positional parameters, in declaration order.
        """
        return tuple(parameter for parameter in self.parameters if isinstance(parameter, Positional))

    @property
    def options(self):
        """
        Option parameters, in declaration order.
        """
        return tuple(parameter for parameter in self.parameters if isinstance(parameter, Option))


class CommandNode(metaclass=RecordType):
    """
    Abstract base of Root and SubCommand.

    Mapping-like access goes through `children`:
    - node[name] → child node (KeyError when missing)
    - name in node
    - iter(node) → child nodes in insertion order
    """

    def __new__(cls, *args, **kwargs):
        if cls is CommandNode:
            raise TypeError("type 'CommandNode' cannot be instantiated directly")
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        if cls.__module__ != __name__:
            raise TypeError("type 'CommandNode' is not an acceptable base type")
        super().__init_subclass__(**options)

    def __getitem__(self, name, /):
        return self._children[name]

    def __contains__(self, name, /):
        return name in self._children

    def __iter__(self):
        return iter(self._children.values())

    def __len__(self):
        return len(self._children)

    def __bool__(self):
        return True

    @property
    def invocable(self):
        """
        True when a method is attached.
        """
        return self._method is not Unset

    @property
    def depth(self):
        """
        Length of the longest command path below this node (0 for a bare node).
        """
        return max((1 + child.depth for child in self), default=0)

    def walk(self, path=(), /):
        """
        Yield (path, node) pairs depth-first, parents before children, in insertion order.
        """
        yield path, self
        for child in self:
            yield from child.walk(path + (child.name,))

    def resolve(self, path, /):
        """
        Follow a sequence of command names from this node (KeyError when missing).
        """
        node = self
        for name in path:
            node = node[name]
        return node


class Root(CommandNode, sealed=True):
    """
    The unnamed top of a command tree.
    """

    __introspectable__ = (
        "children",
        "method",
    )

    def __new__(cls, children=(), /, method=Unset):
        return cls.__record__(
            super().__new__(cls),
            children={child.name: child for child in children},
            method=method,
        )

    @property
    def name(self):
        return ""

    @property
    def description(self):
        return self.method.description if self.method else Unset


class SubCommand(CommandNode, sealed=True):
    """
    A named node below the root.
    """

    __introspectable__ = (
        "name",
        "children",
        "method",
        "description",
    )

    __displayable__ = (
        "name",
        "method",
        "description",
        "children",
    )

    def __new__(cls, name, children=(), /, method=Unset, description=Unset):
        return cls.__record__(
            super().__new__(cls),
            name=name,
            children={child.name: child for child in children},
            method=method,
            description=description,
        )


class DuplicateCommand(metaclass=RecordType, sealed=True):
    """
    Build-time conflict: two descriptors resolved to the same command path.

    `first` kept the slot in the tree; `second` was left out.
    """

    __introspectable__ = (
        "path",
        "first",
        "second",
    )

    def __new__(cls, path, first, second, /):
        return cls.__record__(super().__new__(cls), path=path, first=first, second=second)

    @property
    def descriptors(self):
        return self.first, self.second

    @property
    def route(self):
        """
        Space-separated command path, as typed on a command line.
        """
        return " ".join(self.path)


class _Draft:
    """
    Mutable node under construction (never escapes build()).
    """

    __slots__ = ("name", "children", "method", "description", "descriptor")

    def __init__(self, name=Unset, description=Unset):
        self.name = name
        self.children = {}
        self.method = Unset
        self.description = description
        self.descriptor = Unset

    def child(self, name, description=Unset, /):
        draft = self.children.setdefault(name, _Draft(name, description))
        if draft.description is Unset:
            draft.description = description
        return draft

    def seal(self):
        children = tuple(child.seal() for child in self.children.values())
        if self.name is Unset:
            return Root(children, self.method)
        return SubCommand(self.name, children, self.method, self.description)


def build(descriptors, /):
    """
    Group method descriptors into a single rooted command tree.

    Returns
    - (root, conflicts): the frozen Root and a tuple of DuplicateCommand, in the
      order the conflicting descriptors were supplied. The tree is usable even
      when conflicts were found; conflicting descriptors are simply absent.

    Raises
    - TypeError: when an item is not a MethodDescriptor.

    Notes
    - Pure apart from debug logging: the same descriptor sequence always yields
      an equal tree with the same child order and the same conflicts.
    """
    root = _Draft()
    conflicts = []

    for descriptor in descriptors:
        if not isinstance(descriptor, MethodDescriptor):
            raise TypeError("build() argument must be an iterable of method descriptors")

        node = root
        path = []
        for segment in descriptor.path:
            node = node.child(name := kebabize(segment.name), segment.description)
            path.append(name)

        if (name := coalesce(descriptor.name, kebabize(descriptor.method))) != "":
            node = node.child(name, descriptor.description)
            path.append(name)
        elif node.description is Unset:
            node.description = descriptor.description

        if node.method is not Unset:
            conflict = DuplicateCommand(path, node.descriptor, descriptor)
            logger.warning(
                "duplicate command %r: %s.%s already attached, %s.%s left out",
                conflict.route or "(root)",
                node.descriptor.owner, node.descriptor.method,
                descriptor.owner, descriptor.method,
            )
            conflicts.append(conflict)
            continue

        node.method = CommandMethod.from_descriptor(descriptor)
        node.descriptor = descriptor

    tree = root.seal()
    logger.debug("built command tree: %d node(s), depth %d, %d conflict(s)",
                 sum(1 for _ in tree.walk()), tree.depth, len(conflicts))
    return tree, tuple(conflicts)


__all__ = (
    "CommandMethod",
    "CommandNode",
    "Root",
    "SubCommand",
    "DuplicateCommand",
    "build",
)
