"""
Helmsman command tree: the tagged node types a dispatcher walks.

What this module provides
- Action: wraps a plain or async callable; invoked with a single Context.
- Group: a named mapping of identifier → node with optional metadata:
  • execute: fallback/terminal Action of the group itself.
  • help: one-line description (the only thing that makes a group show up in help).
  • options: ordered Switch descriptions rendered beneath the group's help line.
  • input: placeholder label shown next to the command name (e.g. "<app-name>").
- Switch: a short and/or long flag spelling plus its description (help metadata only).
- tree(mapping): build a tagged tree from the plain nested-mapping form.

Plain-mapping form
    commands = tree({
        "create": {
            "execute": create,
            "help": "create a new project",
            "input": "<name>",
            "options": [{"option": {"short": "f", "long": "force"}, "help": "overwrite"}],
        },
        "deep": {"nesting": {"works": lambda context: ...}},
    })

Keys named execute/help/options/input are metadata, every other key is a child.
Keys are expected in identifier form (camel-joined), user input is converted
before lookup (see helmsman.casing).
"""
import inspect
from collections.abc import Mapping, Iterable
from types import MappingProxyType

from .utils import Unset, UnsetType, coalesce

RESERVED = frozenset({"help", "h"})
METADATA = frozenset({"execute", "help", "options", "input"})


class Action:
    """
    Executable leaf of a command tree.

    The callback receives one positional Context (argument, options, session) and
    may be a coroutine function; the dispatcher awaits whatever it returns when
    that is awaitable.
    """
    __slots__ = ("_callback", "_descr")

    def __init__(self, callback, /, *, descr=Unset):
        if not callable(callback):
            raise TypeError("Action() argument must be callable")
        if not isinstance(descr, str | UnsetType):
            raise TypeError("Action() 'descr' must be a string")
        self._callback = callback
        self._descr = descr

    @property
    def callback(self):
        return self._callback

    @property
    def descr(self):
        """
        Explicit description, falling back to the callback's docstring (or None).
        """
        return coalesce(self._descr, inspect.getdoc(self._callback))

    def __call__(self, context, /):
        return self._callback(context)

    def __repr__(self):
        return f"action({getattr(self._callback, '__qualname__', self._callback)!s})"


class Switch:
    """
    Help metadata for one option: short and/or long spelling plus description.
    """
    __slots__ = ("_short", "_long", "_descr")

    def __init__(self, short=Unset, long=Unset, /, descr=Unset):
        for name, value in (("short", short), ("long", long), ("descr", descr)):
            if not isinstance(value, str | UnsetType):
                raise TypeError(f"Switch() {name!r} must be a string")
        if not short and not long:
            raise ValueError("Switch() requires a short or a long spelling")
        self._short = short.lstrip("-") if short else None
        self._long = long.lstrip("-") if long else None
        self._descr = coalesce(descr)

    short = property(lambda self: self._short)
    long = property(lambda self: self._long)
    descr = property(lambda self: self._descr)

    @property
    def names(self):
        """
        Display spellings, short first: ("-s", "--silly").
        """
        return tuple(name for name in (
            f"-{self._short}" if self._short else None,
            f"--{self._long}" if self._long else None,
        ) if name)

    def __eq__(self, other):
        if not isinstance(other, Switch):
            return NotImplemented
        return (self._short, self._long, self._descr) == (other._short, other._long, other._descr)

    def __hash__(self):
        return hash((self._short, self._long, self._descr))

    def __repr__(self):
        return f"switch({', '.join(self.names)}, descr={self._descr!r})"


class Group:
    """
    Navigable node of a command tree.

    Children are exposed read-only. The only mutation allowed during a run is the
    session's attach/detach of its synthetic help entries at the root.
    """
    __slots__ = ("_children", "_execute", "_help", "_options", "_input", "_position")

    def __init__(self, children=(), /, *, execute=Unset, help=Unset, options=(), input=Unset, position=0):
        children = dict(children)
        for name, child in children.items():
            if not isinstance(name, str) or not name:
                raise TypeError("Group() child names must be non-empty strings")
            if name in METADATA:
                raise ValueError(f"Group() child name {name!r} is reserved for metadata")
            if not isinstance(child, Action | Group):
                raise TypeError(f"Group() child {name!r} must be an action or a group")
        if execute is not Unset and not isinstance(execute, Action):
            if not callable(execute):
                raise TypeError("Group() 'execute' must be callable")
            execute = Action(execute)
        if not isinstance(help, str | UnsetType):
            raise TypeError("Group() 'help' must be a string")
        if not isinstance(input, str | UnsetType):
            raise TypeError("Group() 'input' must be a string")
        options = tuple(options)
        if not all(isinstance(option, Switch) for option in options):
            raise TypeError("Group() 'options' must be switches")
        if not isinstance(position, int) or position < 0:
            raise TypeError("Group() 'position' must be a non-negative integer")

        self._children = children
        self._execute = coalesce(execute)
        self._help = coalesce(help)
        self._options = options
        self._input = coalesce(input)
        self._position = min(position, len(children))

    @property
    def children(self):
        return MappingProxyType(self._children)

    execute = property(lambda self: self._execute)
    help = property(lambda self: self._help)
    options = property(lambda self: self._options)
    input = property(lambda self: self._input)

    @property
    def position(self):
        """
        Number of children listed before the group's own help line.
        """
        return self._position

    @property
    def described(self):
        """
        Description-only leaf: has help, nothing to execute and nothing to navigate.
        """
        return self._help is not None and self._execute is None and not self._children

    def get(self, identifier, default=None, /):
        return self._children.get(identifier, default)

    def __contains__(self, identifier):
        return identifier in self._children

    def __iter__(self):
        return iter(self._children)

    def __len__(self):
        return len(self._children)

    def _attach(self, name, node, /):
        if not isinstance(node, Action | Group):
            raise TypeError("Group._attach() node must be an action or a group")
        self._children[name] = node

    def _detach(self, name, /):
        return self._children.pop(name, None)

    def __repr__(self):
        fields = [f"children={list(self._children)!r}"]
        for name in ("execute", "help", "input"):
            if (value := getattr(self, name)) is not None:
                fields.append(f"{name}={value!r}")
        if self._options:
            fields.append(f"options={list(self._options)!r}")
        return f"group({', '.join(fields)})"


def _switch(item):
    """
    Build a Switch from any of the accepted plain spellings.
    """
    match item:
        case Switch():
            return item
        case {"option": str(short), **rest} | {"flag": str(short), **rest}:
            return Switch(short, descr=rest.get("help", rest.get("description", Unset)))
        case {"option": {**spelling}, **rest} | {"flag": {**spelling}, **rest}:
            return Switch(
                spelling.get("short", Unset),
                spelling.get("long", Unset),
                descr=rest.get("help", rest.get("description", Unset)),
            )
        case _:
            raise TypeError(f"tree() unsupported option description {item!r}")


def _build(source, path):
    match source:
        case Action() | Group():
            return source
        case Mapping():
            pass
        case _ if callable(source):
            return Action(source)
        case _:
            route = " ".join(path) or "<root>"
            raise TypeError(f"tree() node at {route!r} must be a mapping or a callable")

    children = {}
    metadata = {}
    for key, value in source.items():
        if not isinstance(key, str):
            raise TypeError(f"tree() keys must be strings, not {type(key).__name__!r}")
        match key:
            case "execute":
                metadata["execute"] = value
            case "help" if isinstance(value, str):
                metadata["help"] = value
                metadata["position"] = len(children)
            case "help":
                raise TypeError(f"tree() 'help' at {' '.join(path) or '<root>'!r} must be a string")
            case "input":
                metadata["input"] = value
            case "options":
                if isinstance(value, str | bytes) or not isinstance(value, Iterable):
                    raise TypeError("tree() 'options' must be a sequence")
                metadata["options"] = tuple(map(_switch, value))
            case _:
                children[key] = _build(value, path + (key,))
    return Group(children, **metadata)


def tree(source, /):
    """
    Build the root Group of a command tree from its plain nested-mapping form.

    The root may carry global `options` (rendered as a help header block) but must
    not define `help`/`h` itself: the session injects those at run time.
    """
    if isinstance(source, Group):
        root = source
    elif isinstance(source, Mapping):
        root = _build(source, ())
    else:
        raise TypeError("tree() argument must be a mapping or a group")
    if root.help is not None or RESERVED & root.children.keys():
        raise ValueError("tree() root must not define 'help' or 'h'; it is injected by the session")
    return root


__all__ = (
    "Action",
    "Group",
    "Switch",
    "tree",
)
