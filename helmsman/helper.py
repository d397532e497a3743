"""
Help collection and rendering for command trees.

Collection walks a node (usually the root, or the subtree a user asked help for)
and yields one HelpEntry per node that carries a description:
- a Group with a `help` string → its hyphenated path, input placeholder and options;
- an Action leaf → its path and docstring (or "No description available").
Pure structural groups (no `help`) contribute nothing but are still descended, and
a group's `execute` never produces an entry on its own. A group's own line sits
where its `help` key sat among its children (Group.position). Global options declared
on the root are collected first as a header-level entry whose command is None.

Rendering aligns the command column to a fixed tab width and lists each entry's
options as an indented sub-list:

    create <name>                           create a new project
       -f, --force                          overwrite an existing project

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- colorful=False strips all styling.
"""
from collections import defaultdict
from typing import NamedTuple

from rich.console import Group as Renderables
from rich.text import Text

from .casing import to_display
from .nodes import Action, Group
from .utils import Unset, coalesce

NO_DESCRIPTION = "No description available"


class HelpEntry(NamedTuple):
    command: str | None
    description: str | None
    options: tuple = ()
    input: str | None = None


def _command(path):
    # Segments are converted one by one so "someDeep nested" stays "some-deep nested".
    return " ".join(filter(None, map(to_display, path)))


def _walk(node, path, entries):
    match node:
        case Action():
            entries.append(HelpEntry(_command(path), node.descr or NO_DESCRIPTION))
        case Group():
            children = list(node.children.items())
            for index in range(len(children) + 1):
                if index == node.position and node.help is not None:
                    entries.append(HelpEntry(_command(path), node.help, node.options, node.input))
                if index < len(children):
                    name, child = children[index]
                    _walk(child, path + (name,), entries)
        case _:
            raise TypeError(f"collect() unexpected node {node!r}")


def collect(node, path=(), /):
    """
    Return the ordered help entries of a node.

    Parameters
    - node: Action | Group
    - path: identifiers leading to node (empty for the root); used as display prefix.
    """
    path = tuple(path)
    entries = []
    if isinstance(node, Group) and not path and node.help is None and node.options:
        entries.append(HelpEntry(None, None, node.options))
    _walk(node, path, entries)
    return entries


class HelpRenderer:
    """
    Formats collected entries into aligned columns with optional header/footer.

    The renderer keeps no entries between calls: every render() works on the list
    it is given, so repeated help invocations never accumulate duplicates.
    """

    def __init__(self, *, tab=40, header=Unset, footer=Unset, colorful=True):
        if not isinstance(tab, int) or tab < 1:
            raise TypeError("HelpRenderer() 'tab' must be a positive integer")
        self.tab = tab
        self.header = coalesce(header)
        self.footer = coalesce(footer)
        self.colorful = bool(colorful)

    def _styles(self):
        return defaultdict(str, {
            "header": "bold #FFFFFF",
            "footer": "#737373",
            "command": "bold #36C5F0",
            "input": "bold #FFD600",
            "description": "#9CA3AF",
            "option-name": "bold #22C55E",
            "option-description": "#9CA3AF",
            "globals-label": "bold #FFFFFF",
        } | getattr(__import__("__main__"), "__styles__", {}))

    def lines(self, entries):
        """
        Build the styled lines (one Text per output line) for the given entries.
        """
        styles = self._styles()

        def styler(style):
            return styles[style] if self.colorful else ""

        def column(left, description, style):
            line = Text.assemble(left)
            line.append(" " * max(self.tab - len(line), 1))
            if description:
                line.append(description, styler(style))
            return line

        def switches(options, indent):
            for option in options:
                names = Text(", ").join(Text(name, styler("option-name")) for name in option.names)
                yield column(Text(" " * indent) + names, option.descr, "option-description")

        lines = []
        if self.header:
            lines.append(Text(self.header, styler("header")))

        for entry in entries:
            if entry.command is None:
                lines.append(Text("options:", styler("globals-label")))
                lines.extend(switches(entry.options, 2))
                continue
            left = Text(entry.command, styler("command"))
            if entry.input:
                left.append(" ").append(entry.input, styler("input"))
            lines.append(column(left, entry.description, "description"))
            lines.extend(switches(entry.options, 3))

        if self.footer:
            lines.append(Text(self.footer, styler("footer")))
        return lines

    def render(self, entries):
        return Renderables(*self.lines(entries))

    def print(self, entries, console, /):
        console.print(self.render(entries))


__all__ = (
    "HelpEntry",
    "HelpRenderer",
    "collect",
)
