"""
Prompt primitives used by interactive sessions and by actions.

Each helper is a coroutine: the blocking rich prompt runs on a daemon thread so
the session loop stays a single cooperative task whose only suspension points
are reading input and awaiting actions. Cancelling the awaiting task (Ctrl-C
under asyncio.run) returns immediately; the abandoned read never holds the
interpreter open.

- ask(message, secret=False): one line of text ("" for an empty line)
- confirm(message, default=Unset): yes/no
- select(message, choices, default=Unset): one of the given choices
"""
import asyncio
import threading

from rich.prompt import Prompt, Confirm

from .utils import Unset


class LinePrompt(Prompt):
    """
    Free-form line prompt without the trailing colon (the marker is the prompt).
    """
    prompt_suffix = " "


def _settle(future, result, exception):
    if future.done():
        return
    if exception is not None:
        future.set_exception(exception)
    else:
        future.set_result(result)


async def threaded(function, /, *args, **kwargs):
    """
    Run a blocking call on a daemon thread and await its outcome.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def work():
        try:
            result = function(*args, **kwargs)
        except BaseException as exception:
            outcome = (None, exception)
        else:
            outcome = (result, None)
        try:
            loop.call_soon_threadsafe(_settle, future, *outcome)
        except RuntimeError:
            # event loop already closed; nobody awaits this read anymore
            return

    threading.Thread(target=work, name="helmsman-prompt", daemon=True).start()
    return await future


async def ask(message, /, *, secret=False, console=None):
    if not isinstance(message, str):
        raise TypeError("ask() argument must be a string")
    return await threaded(
        LinePrompt.ask, message, console=console, password=bool(secret), default="", show_default=False
    )


async def confirm(message, /, *, default=Unset, console=None):
    if not isinstance(message, str):
        raise TypeError("confirm() argument must be a string")
    options = {} if default is Unset else {"default": bool(default)}
    return await threaded(Confirm.ask, message, console=console, **options)


async def select(message, choices=(), /, *, default=Unset, console=None):
    if not isinstance(message, str):
        raise TypeError("select() argument must be a string")
    choices = [str(choice) for choice in choices]
    if not choices:
        raise ValueError("select() requires at least one choice")
    options = {} if default is Unset else {"default": str(default)}
    return await threaded(Prompt.ask, message, console=console, choices=choices, **options)


__all__ = (
    "ask",
    "confirm",
    "select",
    "threaded",
)
