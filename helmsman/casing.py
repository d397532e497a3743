"""
Token casing: hyphen-delimited display form <-> camel-joined identifier form.

The display form is what users type and read ("known-command"); the identifier
form is the key used in the command tree ("knownCommand"). For every identifier
made of lowercase-initial words the two conversions are exact inverses:

    >>> to_display("testingASmallerArgument")
    'testing-a-smaller-argument'
    >>> to_identifier("testing-a-smaller-argument")
    'testingASmallerArgument'

Flag-looking tokens are not folded: "--dry-run" becomes the literal flag name
"dry-run" and "-v" is returned unchanged, so callers can recognize option-style
tokens that were typed into the command path.
"""
import re

from .faults import ConversionError

_BOUNDARY = re.compile(r"(?<=[A-Za-z0-9])(?=[A-Z])")
_HYPHENATED = re.compile(r"-(.)")


def _check(token, caller):
    if not isinstance(token, str):
        raise ConversionError(f"{caller}() argument must be a string, not {type(token).__name__!r}")


def to_display(identifier, /):
    """
    Convert an identifier to its hyphenated display form.

    Returns None for an empty string; raises ConversionError for non-strings.
    """
    if identifier is None or identifier == "":
        return None
    _check(identifier, "to_display")
    return _BOUNDARY.sub("-", identifier).lower()


def to_identifier(token, /):
    """
    Convert a display token to its identifier form.

    - "--name" → "name" (literal flag name, never camel-folded)
    - "-x"     → "-x"   (unchanged)
    - "a-b-c"  → "aBC"

    Returns None for an empty string; raises ConversionError for non-strings.
    """
    if token is None or token == "":
        return None
    _check(token, "to_identifier")
    if token.startswith("--"):
        return token[2:]
    if token.startswith("-"):
        return token
    return _HYPHENATED.sub(lambda match: match[1].upper(), token)


def is_flag(token, /):
    """
    Whether a raw token is option-shaped ("-x" or "--name").
    """
    return isinstance(token, str) and len(token) > 1 and token.startswith("-")


__all__ = (
    "to_display",
    "to_identifier",
    "is_flag",
)
