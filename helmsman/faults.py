"""
Helmsman faults (dispatch errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for user-facing dispatch issues.
- DispatchError: base type that carries message + options and knows how to render
  itself as a single, visually distinguished line.
- CommandInvalidError / NeedsMoreArgumentsError / ParameterInvalidError: the three
  ways resolving a token sequence against a command tree can fail.
- ConversionError: case conversion invoked with a non-string (programmer error).
- trigger(): central entry point to surface a fault (raise or print).

Integration
- The dispatcher raises faults; the session catches them once per iteration and
  calls trigger(fault, shell=True, console=...) to print them instead of raising.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console
from rich.text import Text

from .utils import Unset, UnsetType

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the dispatcher (stable identifiers).

    grouping
    - routing (1110x)
      • COMMAND_INVALID, NEEDS_MORE_ARGUMENTS, PARAMETER_INVALID
    - delegated (1113x)
      • DELEGATED_ERROR: anything raised by a user action
    """
    COMMAND_INVALID             = 11101
    NEEDS_MORE_ARGUMENTS        = 11102
    PARAMETER_INVALID           = 11103

    DELEGATED_ERROR             = 11131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class DispatchError(Exception):
    """
    Base for everything the dispatcher can raise about user input.

    The message is the technical, lowercased summary; everything else (code, title,
    hint, token, index, colorful, shell, console) travels in a read-only options
    mapping so the same fault can be re-rendered with different runtime flags.
    """
    code = FaultCode.COMMAND_INVALID

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | UnsetType)
        super().__init__(message or "")
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message or ""

    @property
    def hint(self):
        return self.options.get("hint")

    def __rich__(self):
        styles = defaultdict(str, {
            "error-label": "bold #FF4DA6",
            "error-message": "bold #FF4D4D",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        } | getattr(__import__("__main__"), "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def styler(style):
            return styles[style] if colorful else ""

        line = Text.assemble(("Error: ", styler("error-label")), (str(self), styler("error-message")))
        if hint := self.options.get("hint"):
            line.append(" → ", styler("hint-arrow")).append(str(hint), styler("hint"))
        return line

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        self.options.get("console", console).print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class CommandInvalidError(DispatchError):
    code = FaultCode.COMMAND_INVALID


class NeedsMoreArgumentsError(DispatchError):
    code = FaultCode.NEEDS_MORE_ARGUMENTS


class ParameterInvalidError(DispatchError):
    code = FaultCode.PARAMETER_INVALID


class ConversionError(TypeError):
    """
    Raised when token casing is asked to convert something that is not a string.
    """


class DelegatedError(DispatchError):
    """
    Wraps an arbitrary exception raised inside a user action so the session can
    render it through the same single-line channel.
    """
    code = FaultCode.DELEGATED_ERROR

    def __init__(self, message=Unset, /, **options):
        super().__init__(message, **options)
        self.__cause__ = options.get("cause")


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see DispatchError).
    - options are merged into the fault via __replace__(**options) before triggering.
    - shell=True prints the fault on the given console; otherwise it is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "DispatchError",
    "CommandInvalidError",
    "NeedsMoreArgumentsError",
    "ParameterInvalidError",
    "DelegatedError",
    "ConversionError",
    "FaultCode",
    "trigger",
)
