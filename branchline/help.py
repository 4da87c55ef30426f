"""
Branchline help renderer.

Pure presentation over an assembled CommandTree: nothing here changes how
arguments are matched.

Layout (top to bottom)
- program line: the program name, followed by the command path when one was resolved.
- description of the node, when it has one.
- usage line: "usage: prog path... <inputs>", wrapped with a hanging indent.
- parameters: positionals in declaration order (two columns: label, description).
- options: options then flags, always ending with "-h | --help".
- commands: one row per child with its inline signature and description.

Inline forms
- positional           <name>        (<a|b> for enumerated types)
- optional positional  [<name>]
- option               [-r | --remote <remote>]
- flag                 [-f | --force]
"""
from collections import defaultdict, deque

from rich.box import ROUNDED
from rich.console import Console, Group
from rich.containers import Lines
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .parameters import Flag, Option, OptionalPositional, Positional, describe
from .plans import CommandTree
from .utils import *

HELP_LABEL = "-h | --help"
HELP_DESCRIPTION = "show this help message and exit"


def _metavar(parameter, /):
    if parameter.choices:
        return "<%s>" % "|".join(parameter.choices)
    return "<%s>" % parameter.name


def _inline(parameter, /):
    match parameter:
        case Flag():
            return "[%s]" % " | ".join(reversed(parameter.markers))
        case Option():
            return "[%s %s]" % (" | ".join(reversed(parameter.markers)), _metavar(parameter))
        case OptionalPositional():
            return "[%s]" % _metavar(parameter)
        case Positional():
            return _metavar(parameter)
        case _:
            raise TypeError("expected a parameter")


def signature(node, /):
    """
    Return the inline inputs of a node as a tuple of strings.

    Positionals come first in declaration order, then options, then flags,
    matching how a user would most naturally type them. A node with children
    appends "<command>" ("[<command>]" when it is also invocable itself).
    """
    inputs = []
    if node.invocable:
        parameters = node.method.parameters
        inputs.extend(_inline(parameter) for parameter in parameters if not parameter.named)
        inputs.extend(_inline(parameter) for parameter in parameters if isinstance(parameter, Option))
        inputs.extend(_inline(parameter) for parameter in parameters if isinstance(parameter, Flag))
    if len(node):
        inputs.append("[<command>]" if node.invocable else "<command>")
    return tuple(inputs)


def usage(tree, path=(), /, prog=""):
    """
    Plain usage line for the node at `path`.

        >>> usage(tree, ["checkout"], "git")
        'git checkout <branch> [-r | --remote <remote>] [-f | --force]'
    """
    if not isinstance(tree, CommandTree):
        raise TypeError("usage() first argument must be a command tree")
    path = tuple(path)
    return " ".join(filter(None, (prog, *path, *signature(tree[path]))))


def render(tree, path=(), /, prog="", *, colorful=True, fancy=False, width=Unset):
    """
    Build the rich renderable describing the node at `path`.

    Palette keys
    - usage-label, program-name, command-path, description-section
    - group-label, argument-description, positional-name, option-name, flag-name, metavar
    - children-title, children-table, children, children-signature, children-description
    - panel-title

    Customization
    - Define a mapping named __styles__ in __main__ to override any palette entry.
    - When colorful is False, styling is suppressed.
    """
    if not isinstance(tree, CommandTree):
        raise TypeError("render() first argument must be a command tree")

    path = tuple(path)
    node = tree[path]
    prog = getattr(__import__("__main__"), "__prog__", prog) or "branchline"

    styles = defaultdict(str, {
        # === Head sections ===
        "usage-label": "bold #00E6FF",  # cyan signature label
        "program-name": "bold #FF4D94",  # magenta-pink brand
        "command-path": "bold #36C5F0",  # sky-blue route
        "description-section": "italic #A3A3A3",  # neutral gray

        # === Groups / arguments ===
        "group-label": "bold #FFFFFF",
        "argument-description": "#9CA3AF",
        "positional-name": "bold #FFD600",  # amber positionals
        "option-name": "bold #00E6FF",  # cyan options
        "flag-name": "bold #22C55E",  # green flags
        "metavar": "bold #FFD600",

        # === Children table ===
        "children-title": "bold #FFFFFF",
        "children-table": "#4B5563",  # slate border
        "children": "bold #36C5F0",
        "children-signature": "#FFD600",
        "children-description": "#9CA3AF",

        # === Fancy panel ===
        "panel-title": "bold #FF4D94",
    } | getattr(__import__("__main__"), "__styles__", {}))

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

    width = coalesce(width, Console().width) - 4 * bool(fancy)
    renders = []

    # Program line and description
    head = Text.assemble(text(prog, styler("program-name")))
    if path:
        head.append(" ").append(text(" ".join(path), styler("command-path")))
    renders.append(head)

    if node.description:
        renders.append(text(node.description, styler("description-section")))

    # Usage line with hanging indent
    line = Text()
    line.append("usage", styler("usage-label")).append(": ")
    line.append(text(prog, styler("program-name")))
    for name in path:
        line.append(" ").append(text(name, styler("command-path")))
    offset = len(line) + 1

    inputs = deque(text(item, styler("metavar")) for item in signature(node))
    lines = Lines([Text()])
    while inputs:
        item = inputs.popleft()
        if lines[-1] and len(lines[-1]) + 1 + len(item) > width - offset:
            lines.append(item)
        else:
            lines[-1].append(Text(" ") + item if lines[-1] else item)
    if lines[0]:
        line.append(" ").append(lines.pop(0))
        for extra in lines:
            line.append("\n").append(" " * offset).append(extra)
    renders.append(Text("\n").append(line).append("\n"))

    # Parameter groups as aligned two-column grids
    def section(title, rows, /):
        grid = Table.grid(padding=(0, 4))
        grid.add_column(no_wrap=True)
        grid.add_column()
        for label, style, description in rows:
            grid.add_row(
                Text("  ").append(text(label, styler(style))),
                text(coalesce(description, ""), styler("argument-description")),
            )
        return Group(text(title, styler("group-label")).append(":"), grid, Text(""))

    parameters = node.method.parameters if node.invocable else ()

    if positionals := [parameter for parameter in parameters if not parameter.named]:
        renders.append(section("parameters", [
            (describe(parameter), "positional-name", parameter.description) for parameter in positionals
        ]))

    options = [
        (describe(parameter), "option-name", parameter.description)
        for parameter in parameters if isinstance(parameter, Option)
    ] + [
        (describe(parameter), "flag-name", parameter.description)
        for parameter in parameters if isinstance(parameter, Flag)
    ]
    options.append((HELP_LABEL, "flag-name", HELP_DESCRIPTION))
    renders.append(section("options", options))

    # Children table
    if len(node):
        table = Table(
            "name", "usage", "help",
            title=text("subcommands" if path else "commands", styler("children-title")),
            box=ROUNDED,
            style=styler("children-table"),
            header_style=styler("children-title"),
        )
        for child in node:
            if child.description:
                description = text(child.description, styler("children-description"))
            else:
                route = " ".join(filter(None, (prog, *path, child.name)))
                description = text("no description, run '%s --help' for details" % route, styler("children-description"))
            table.add_row(
                text(child.name, styler("children")),
                text(" ".join(signature(child)), styler("children-signature")),
                description,
            )
        renders.append(table)

    renderable = Group(*renders)

    if fancy:
        renderable = Panel(
            renderable,
            title=Text.assemble("[ ", f"{prog} help".upper(), " ]", style=styler("panel-title")),
            title_align="left",
        )

    return renderable


def helper(tree, path=(), /, prog="", *, console=Unset, **options):
    """
    Print the help of the node at `path` (to stdout unless a console is given).
    """
    console = coalesce(console, Console())
    console.print(render(tree, path, prog, width=console.width, **options))


__all__ = (
    "usage",
    "render",
    "helper",
    "signature",
)
