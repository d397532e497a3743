r"""
Raw argument parsing: split an argv-like sequence into positional tokens and a
flag mapping.

Grammar
- "--name=value" → flags["name"] = "value"
- "--name"       → flags["name"] = True
- "--no-name"    → flags["name"] = False
- "-abc"         → flags["a"] = flags["b"] = flags["c"] = True
- "-k=value"     → flags["k"] = "value"
- "--"           → every following token is positional
- anything else (including negative numbers such as "-5") is positional.

Flags never consume the token that follows them: command paths stay positional
("tool --verbose create app" routes "create app"). Values are attached inline.

Quick example:
    >>> parse(["wallet", "send", "--to=alice", "-v"])
    Arguments(positionals=('wallet', 'send'), flags={'to': 'alice', 'v': True})
"""
import re
import sys
from collections.abc import Iterable, Mapping
from typing import NamedTuple

from .utils import Unset

_NUMBER = re.compile(r"-\d+(\.\d+)?")


class Arguments(NamedTuple):
    positionals: tuple
    flags: Mapping

    @property
    def tokens(self):
        """
        Positionals followed by one flag token per flag ("--name" / "-n").
        """
        return list(self.positionals) + [
            f"--{name}" if len(name) > 1 else f"-{name}" for name in self.flags
        ]


def parse(argv=Unset, /):
    """
    Parse an argument vector (sys.argv[1:] when omitted).

    Raises
    - TypeError: when argv is not an iterable of strings.
    """
    if argv is Unset:
        argv = sys.argv[1:]
    if isinstance(argv, str) or not isinstance(argv, Iterable):
        raise TypeError("parse() argument must be an iterable of strings")

    positionals = []
    flags = {}
    terminated = False

    for token in argv:
        if not isinstance(token, str):
            raise TypeError("parse() argument must be an iterable of strings")
        if terminated:
            positionals.append(token)
        elif token == "--":
            terminated = True
        elif token.startswith("--") and len(token) > 2:
            name, separator, value = token[2:].partition("=")
            if separator:
                flags[name] = value
            elif name.startswith("no-") and len(name) > 3:
                flags[name[3:]] = False
            else:
                flags[name] = True
        elif token.startswith("-") and len(token) > 1 and not _NUMBER.fullmatch(token):
            letters, separator, value = token[1:].partition("=")
            for letter in letters[:-1] if separator else letters:
                flags[letter] = True
            if separator and letters:
                flags[letters[-1]] = value
        elif token:
            positionals.append(token)

    return Arguments(tuple(positionals), flags)


def split(line, /):
    """
    Split one line of interactive input on whitespace and parse it.
    """
    if not isinstance(line, str):
        raise TypeError("split() argument must be a string")
    return parse(line.split())


__all__ = (
    "Arguments",
    "parse",
    "split",
)
