"""
Helmsman session: run-mode selection, the read-eval loop and exit policy.

What this module provides
- Session: owns one command tree for one run and decides how to drive it:
  • interactive: no positional tokens and no flags were given (and interactive
    mode is enabled) → prompt, dispatch, repeat until an exit is requested.
  • one-shot: anything else → dispatch positionals + flag tokens once, then
    terminate the process with the resulting status.
- SessionState: IDLE → MODE_SELECT → {INTERACTIVE, ONESHOT} → EXECUTING →
  {INTERACTIVE (loop), TERMINATED}.
- PageInfo: mutable cursor used by Session.paginate().
- invoke(commands, argv, **config): synchronous convenience runner.

Error boundary
- Every dispatch runs inside Session.execute(): DispatchError and any other
  Exception raised by an action are rendered as one line on stderr (plus a rich
  traceback when debug is on) and turned into status 1. They never escape the
  interactive loop; in one-shot mode the status becomes the process exit code.

Helpers exposed to actions (through context.session)
- success()/error(): styled output that exits in one-shot mode unless noexit=True.
- exit(code, override): ignored while interactive unless override; ignored while
  paginating; interactive overrides stop the loop between iterations.
- ask()/confirm()/select(): awaited prompts.
- paginate(): interactive paging over results.
- help(): contextual help for any subtree.
- actions: application helpers mounted with the session and bound arguments.

Quick start
    from helmsman import invoke

    def create(context):
        context.session.success(f"created {context.argument}")

    commands = {
        "create": {"execute": create, "help": "create a new project", "input": "<name>"},
    }

    if __name__ == "__main__":
        raise SystemExit(invoke(commands, header="my tool", binary="my-tool"))
"""
import asyncio
import enum
import inspect
import os
import sys
from collections.abc import Mapping, Sequence
from types import MappingProxyType

from rich.console import Console
from rich.json import JSON
from rich.text import Text
from rich.traceback import Traceback

from . import prompts
from .arguments import parse, split
from .dispatch import Dispatcher, tokenize
from .faults import DispatchError, DelegatedError, trigger
from .helper import HelpRenderer, collect
from .nodes import Action, tree
from .utils import Unset, UnsetType, coalesce

DEBUG = "HELMSMAN_DEBUG"


class SessionState(enum.Enum):
    IDLE = "idle"
    MODE_SELECT = "mode-select"
    INTERACTIVE = "interactive"
    ONESHOT = "one-shot"
    EXECUTING = "executing"
    TERMINATED = "terminated"


class PageInfo:
    """
    Cursor over paged results: offset/limit of the query, current page number and order.
    """
    __slots__ = ("offset", "limit", "number", "order")

    def __init__(self, offset=1, limit=1, number=1, order="asc"):
        if order not in ("asc", "desc"):
            raise ValueError("PageInfo() 'order' must be 'asc' or 'desc'")
        self.offset = offset
        self.limit = limit
        self.number = number
        self.order = order

    def __eq__(self, other):
        if not isinstance(other, PageInfo):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.__slots__)

    def __repr__(self):
        return "page(%s)" % ", ".join(f"{name}={getattr(self, name)!r}" for name in self.__slots__)


def _debugging():
    return os.environ.get(DEBUG, "").strip().lower() in ("1", "true", "yes", "on")


class Session:
    """
    One run of a command tree.

    Parameters
    - commands: plain mapping or Group (see helmsman.nodes.tree); may also be given to run().
    - interactive: bool: allow interactive mode (default True).
    - header, footer: str: printed verbatim around help output.
    - binary: str: executable name used in the one-shot "run <binary> --help" hint.
    - bound: Sequence: static arguments prepended to every mounted action; when
      non-empty, free-form arguments are rejected (ParameterInvalidError).
    - actions: Mapping[str, Callable]: helpers exposed as session.actions[name].
    - argv: Sequence[str]: argument vector (sys.argv[1:] when omitted).
    - prompt: str: interactive prompt marker (default ">").
    - tab: int: help column width (default 40).
    - colorful: bool: styled output (default True).
    - debug: bool: print tracebacks for caught errors (default: $HELMSMAN_DEBUG).
    - console: rich Console used for every output (default: stdout/stderr consoles).
    - reader: async callable(message, secret) returning one line of input.
    """

    def __init__(
            self,
            commands=Unset,
            /,
            *,
            interactive=True,
            header=Unset,
            footer=Unset,
            binary=Unset,
            bound=(),
            actions=Unset,
            argv=Unset,
            prompt=">",
            tab=40,
            colorful=True,
            debug=Unset,
            console=Unset,
            reader=Unset,
    ):
        if not isinstance(binary, str | UnsetType):
            raise TypeError("Session() 'binary' must be a string")
        if not isinstance(prompt, str):
            raise TypeError("Session() 'prompt' must be a string")
        if isinstance(bound, str) or not isinstance(bound, Sequence):
            raise TypeError("Session() 'bound' must be a sequence")
        actions = coalesce(actions, {})
        if not isinstance(actions, Mapping) or not all(map(callable, actions.values())):
            raise TypeError("Session() 'actions' must map names to callables")
        if reader is not Unset and not callable(reader):
            raise TypeError("Session() 'reader' must be callable")

        self._commands = Unset if commands is Unset else tree(commands)
        self._arguments = parse(argv)
        self._enabled = bool(interactive)
        self._binary = coalesce(binary)
        self._bound = tuple(bound)
        self._prompt = prompt
        self._colorful = bool(colorful)
        self._debug = bool(coalesce(debug, _debugging()))
        self._renderer = HelpRenderer(tab=tab, header=header, footer=footer, colorful=colorful)
        self._console = coalesce(console, Console())
        self._stderr = coalesce(console, Console(stderr=True))
        self._reader = coalesce(reader, self._read)
        self._actions = {name: self._bind(name, action) for name, action in actions.items()}

        self._state = SessionState.IDLE
        self._interactive = False
        self._paginating = False
        self._exit = None

    # ── Introspection ─────────────────────────────────────────────────────────

    state = property(lambda self: self._state)
    interactive = property(lambda self: self._interactive)
    paginating = property(lambda self: self._paginating)
    arguments = property(lambda self: self._arguments)
    commands = property(lambda self: coalesce(self._commands))
    bound = property(lambda self: self._bound)

    @property
    def actions(self):
        return MappingProxyType(self._actions)

    def _bind(self, name, action):
        def bound(*args, **kwargs):
            return action(self, *self._bound, *args, **kwargs)
        bound.__name__ = bound.__qualname__ = name
        bound.__doc__ = action.__doc__
        return bound

    def _styles(self):
        styles = {
            "success": "bold #22C55E",
            "error": "bold #FF4D4D",
            "page": "#9CA3AF",
        } | getattr(__import__("__main__"), "__styles__", {})
        return {name: style if self._colorful else "" for name, style in styles.items()}

    # ── Mode selection / loop ─────────────────────────────────────────────────

    def _select(self):
        # Interactive only when the parsed mapping holds nothing but the (empty) positional list.
        arguments = self._arguments
        return not arguments.positionals and not arguments.flags and self._enabled

    def _mount(self):
        def help(context):
            """show all available commands"""
            self.help()

        names = ("help", "h") if self._interactive else ("help",)
        for name in names:
            self._commands._attach(name, Action(help))

    def _dispatcher(self):
        return Dispatcher(
            self._commands,
            interactive=self._interactive,
            bound=bool(self._bound),
            helper=self.help,
        )

    async def run(self, commands=Unset, /):
        """
        Select the run mode and drive the session.

        Returns the exit status of an interactive session once it stops; one-shot
        sessions terminate the process through exit() (unless pagination is active,
        in which case the status is returned).
        """
        if commands is not Unset:
            self._commands = tree(commands)
        if self._commands is Unset:
            raise TypeError("Session.run() requires a command tree")

        self._state = SessionState.MODE_SELECT
        self._interactive = self._select()
        self._mount()

        if self._interactive:
            self._state = SessionState.INTERACTIVE
            return await self._loop()

        self._state = SessionState.ONESHOT
        code = await self.execute(self._arguments.tokens, self._arguments.flags)
        self._state = SessionState.TERMINATED
        self.exit(code)
        return code

    async def _loop(self):
        while self._exit is None:
            try:
                line = await self._reader(self._prompt, False)
            except (EOFError, KeyboardInterrupt, asyncio.CancelledError):
                self._exit = 0
                break
            if not line or not line.strip():
                continue
            await self.execute(line)
        self._state = SessionState.TERMINATED
        return self._exit

    async def execute(self, command, options=None, /):
        """
        Dispatch one command line (str) or token list inside the error boundary.

        Returns 0 on success and 1 when an error was reported.
        """
        if isinstance(command, str):
            arguments = split(command)
            tokens = arguments.tokens
            options = {**arguments.flags, **(options or {})}
        else:
            tokens = tokenize(command)
            options = dict(options or {})

        previous = self._state
        self._state = SessionState.EXECUTING
        try:
            await self._dispatcher().resolve(tokens, options, session=self)
        except DispatchError as fault:
            self._report(fault)
            return 1
        except Exception as exception:
            self._report(DelegatedError(str(exception) or type(exception).__name__, cause=exception), exception)
            return 1
        finally:
            self._state = previous
        return 0

    def _report(self, fault, exception=None):
        if isinstance(fault, DelegatedError):
            hint = None
        elif self._interactive:
            hint = "type help to see all available commands"
        else:
            hint = "run '%s--help' to see all available commands" % (f"{self._binary} " if self._binary else "")

        trigger(fault, shell=True, console=self._stderr, colorful=self._colorful, hint=hint)

        if self._debug:
            exception = exception or fault
            self._stderr.print(Traceback.from_exception(type(exception), exception, exception.__traceback__))

    # ── Help ──────────────────────────────────────────────────────────────────

    def help(self, node=Unset, path=(), /):
        """
        Print help for a node (the whole tree by default) with the synthetic
        help entries detached so they never list themselves.
        """
        root = self.commands
        if root is None:
            raise TypeError("Session.help() requires a command tree")
        node = coalesce(node, root)
        detached = {name: root._detach(name) for name in ("help", "h")}
        try:
            self._renderer.print(collect(node, path), self._console)
        finally:
            for name, child in detached.items():
                if child is not None:
                    root._attach(name, child)

    # ── Output / exit ─────────────────────────────────────────────────────────

    def success(self, output, prefix="", noexit=False):
        """
        Print a bold green message (mappings/sequences as JSON); exit(0) unless noexit.
        """
        style = self._styles()["success"]
        if prefix and isinstance(prefix, str):
            self._console.print(Text(prefix.upper(), style))
        if isinstance(output, Mapping) or isinstance(output, Sequence) and not isinstance(output, str):
            self._console.print(JSON.from_data(output, default=str))
        else:
            self._console.print(Text(str(output), style))
        if noexit:
            return
        self.exit(0)

    def error(self, message, code=None, noexit=False):
        """
        Print a bold red single-line error; exit(code or 1) unless noexit.
        """
        style = self._styles()["error"]
        self._stderr.print(Text.assemble(("Error: ", style), (str(message), style)))
        if noexit:
            return
        self.exit(code or 1)

    def exit(self, code=0, override=False):
        """
        Request termination.

        - interactive without override: ignored (the loop keeps running)
        - while paginating: ignored
        - interactive with override: the loop stops before reading the next line
        - one-shot: the process terminates with the given status
        """
        if self._interactive and not override:
            return
        if self._paginating:
            return
        if self._interactive:
            self._exit = code
            return
        self._state = SessionState.TERMINATED
        sys.exit(code)

    # ── Prompts ───────────────────────────────────────────────────────────────

    async def _read(self, message, secret=False):
        return await prompts.ask(message, secret=secret, console=self._console)

    async def ask(self, message, secret=False):
        return await self._reader(message, secret)

    async def confirm(self, message, default=Unset):
        return await prompts.confirm(message, default=default, console=self._console)

    async def select(self, message, choices=(), default=Unset):
        return await prompts.select(message, choices, default=default, console=self._console)

    # ── Pagination ────────────────────────────────────────────────────────────

    async def _browse(self):
        while True:
            try:
                answer = (await self._reader(self._prompt, False) or "").strip().lower()
            except (EOFError, KeyboardInterrupt):
                return "q"
            if not answer:
                continue
            if answer in ("q", "quit", "exit"):
                return "q"
            if answer in ("p", "previous", "back"):
                return "p"
            if answer in ("n", "next"):
                return "n"
            if answer in ("o", "order"):
                return "o"
            if answer in ("h", "help"):
                self._console.print("previous (p)   -- to go to the previous page")
                self._console.print("next (n)       -- to go to the next page")
                self._console.print("order (o)      -- to reverse the order")
                self._console.print("quit (q)       -- to stop browsing the pages")
                continue
            self.error("Input not recognized", noexit=True)

    async def paginate(self, output, page=Unset, increments=1, fn=Unset, /, *args):
        """
        Present output one page at a time and let the user browse.

        Reads n/next, p/previous/back, o/order, q/quit/exit and h/help. Every
        answer but quit updates the page cursor and calls fn(*args) (returning its
        result, or the page when no fn was given). Quit reports "Exiting
        pagination..." and returns None.

        Exit requests are deferred only while the pages are displayed: the flag is
        cleared as soon as an answer was read, before fn runs.
        """
        page = coalesce(page, None) or PageInfo()
        styles = self._styles()

        self._paginating = True
        try:
            self._console.clear()
            self.success(output, noexit=True)
            self._console.print(Text(f"Paged output: previous (p)        {page.number}         next (n)", styles["page"]))
            self._console.print(Text("Quit (q)", styles["page"]))
            action = await self._browse()
        finally:
            self._paginating = False

        match action:
            case "n":
                page.offset += increments
                page.number += 1
            case "p" if page.number != 1:
                page.offset -= increments
                page.number -= 1
            case "o":
                page.order = "desc" if page.order == "asc" else "asc"
            case "q":
                self.success("Exiting pagination...")
                return None

        if fn is Unset:
            return page
        result = fn(*args)
        if inspect.isawaitable(result):
            result = await result
        return result


def invoke(commands, argv=Unset, /, **config):
    """
    Build a Session for commands and run it to completion on a fresh event loop.

    Returns the exit status (one-shot runs terminate the process before returning).
    Ctrl-C while the loop waits for input ends the run with status 0.
    """
    session = Session(commands, argv=argv, **config)
    try:
        return asyncio.run(session.run())
    except KeyboardInterrupt:
        # asyncio.run re-raises the interrupt after the interactive loop stopped cleanly
        if not session.interactive:
            raise
        return 0


__all__ = (
    "PageInfo",
    "Session",
    "SessionState",
    "invoke",
)
