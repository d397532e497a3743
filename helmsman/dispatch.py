"""
Token dispatch: resolve a token sequence against a command tree and run one action.

Algorithm (one pass over the tokens plus a virtual trailing position so a group
can execute with no argument):

1. help short-circuit
   • the last token spelled "help" (or "h" while interactive, or "-h"), or
   • non-interactively, a help/h flag in the options map once no positional
     token remains,
   renders help for the node reached so far and stops.
2. end of tokens on a group with `execute` → execute(None).
3. the token names a child of the current group:
   • a description-only child delegates to the current group's `execute`, with
     the matched token (display form) as argument;
   • otherwise descend; an action with nothing after it runs immediately, a group
     with `execute` keeps consuming, and anything else must be followed by the
     help trigger or by one of its own children (else NeedsMoreArgumentsError).
4. no child matches: the group's `execute` receives the raw token unchanged
   (flag tokens included; their values also travel in the options map);
   without an `execute` the token is a ParameterInvalidError when the dispatcher
   forbids free-form arguments, a CommandInvalidError otherwise.

Flag tokens ("-x", "--name") are never matched against children.
"""
import inspect
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import NamedTuple, Any

from rich.console import Console

from .casing import to_display, to_identifier, is_flag
from .faults import CommandInvalidError, NeedsMoreArgumentsError, ParameterInvalidError
from .helper import HelpRenderer, collect
from .nodes import Action, Group
from .utils import Unset, coalesce


class Context(NamedTuple):
    """
    What every action receives: the free-form argument (or None), the read-only
    options map, and the session that is running the dispatch (or None).
    """
    argument: str | None
    options: Mapping[str, Any]
    session: Any = None


def tokenize(tokens, /):
    """
    Normalize a command line into a list of tokens.

    - str → split on whitespace
    - a single-element sequence whose item contains spaces → that item split
    - any other iterable of strings → list
    """
    if isinstance(tokens, str):
        return tokens.split()
    if not isinstance(tokens, Iterable):
        raise TypeError("tokenize() argument must be a string or an iterable of strings")
    tokens = list(tokens)
    if not all(isinstance(token, str) for token in tokens):
        raise TypeError("tokenize() argument must be a string or an iterable of strings")
    if len(tokens) == 1 and " " in tokens[0]:
        return tokens[0].split()
    return [token for token in tokens if token]


def _show(node, path):
    HelpRenderer().print(collect(node, path), Console())


class Dispatcher:
    """
    Resolve token sequences against one command tree.

    Parameters
    - root: Group: the tree to dispatch against.
    - interactive: bool: enables the bare "h" help trigger and disables the
      options-map help trigger.
    - bound: bool: free-form arguments are never accepted (ParameterInvalidError
      instead of CommandInvalidError when no child matches).
    - helper: callable(node, path) used when help is requested; may be async.
    """

    def __init__(self, root, /, *, interactive=False, bound=False, helper=Unset):
        if not isinstance(root, Group):
            raise TypeError("Dispatcher() root must be a group")
        helper = coalesce(helper, _show)
        if not callable(helper):
            raise TypeError("Dispatcher() 'helper' must be callable")
        self.root = root
        self.interactive = bool(interactive)
        self.bound = bool(bound)
        self.helper = helper

    def _helping(self, tokens, index, options):
        if index < len(tokens):
            if index == len(tokens) - 1:
                identifier = to_identifier(tokens[index])
                if identifier in ("help", "-h") or (self.interactive and identifier == "h"):
                    return True
            if not is_flag(tokens[index]):
                return False
        if self.interactive:
            return False
        if any(not is_flag(token) for token in tokens[index:]):
            return False
        return any(options.get(name) not in (None, False) for name in ("help", "h"))

    async def _help(self, node, path):
        result = self.helper(node, tuple(path))
        if inspect.isawaitable(result):
            await result

    @staticmethod
    async def _call(action, argument, options, session):
        result = action(Context(argument, options, session))
        if inspect.isawaitable(result):
            await result

    async def resolve(self, tokens, options=None, /, *, session=None):
        """
        Execute exactly one action for the given tokens, or raise a DispatchError.
        """
        tokens = tokenize(tokens)
        options = MappingProxyType(dict(options or {}))
        accumulator = self.root
        path = []

        for index in range(len(tokens) + 1):
            token = tokens[index] if index < len(tokens) else None
            following = tokens[index + 1] if index + 1 < len(tokens) else None

            if self._helping(tokens, index, options):
                return await self._help(accumulator, path)

            if token is None:
                if accumulator.execute is not None:
                    return await self._call(accumulator.execute, None, options, session)
                break

            identifier = to_identifier(token)
            child = None if is_flag(token) else accumulator.get(identifier)

            if child is None:
                if accumulator.execute is not None:
                    return await self._call(accumulator.execute, token, options, session)
                if self.bound:
                    raise ParameterInvalidError(
                        "command has parameter which is invalid",
                        title="parameter invalid",
                        token=token,
                        index=index,
                    )
                raise CommandInvalidError(
                    "command invalid",
                    title="command not found",
                    token=token,
                    index=index,
                )

            if isinstance(child, Group) and child.described:
                if accumulator.execute is None:
                    raise CommandInvalidError(
                        "command %r has nothing to execute" % token,
                        title="command not found",
                        token=token,
                        index=index,
                    )
                return await self._call(accumulator.execute, to_display(identifier), options, session)

            accumulator = child
            path.append(identifier)

            match accumulator:
                case Action() if following is None:
                    return await self._call(accumulator, None, options, session)
                case Group(execute=Action()):
                    continue
                case _ if self._helping(tokens, index + 1, options):
                    continue
                case Group() if following is not None and not is_flag(following) and to_identifier(following) in accumulator:
                    continue
                case _:
                    raise NeedsMoreArgumentsError(
                        "command is invalid and needs more arguments",
                        title="incomplete command",
                        token=token,
                        index=index,
                    )

        raise NeedsMoreArgumentsError(
            "command is invalid and needs more arguments",
            title="incomplete command",
            index=len(tokens),
        )


__all__ = (
    "Context",
    "Dispatcher",
    "tokenize",
)
