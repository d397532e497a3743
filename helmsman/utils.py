"""
Helmsman internals: the "not provided" marker and its resolver.

An Action receives None as its argument when no token was left, and a session
may legitimately be configured with None/""/0 values, so keyword defaults use a
dedicated marker instead:

    >>> coalesce(Unset, ">")
    '>'
    >>> coalesce(None, ">") is None
    True
"""
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker. There is exactly one instance; it is falsy and
    survives copying unchanged so frozen defaults can be copied freely.

    Use `str | UnsetType` in isinstance checks for "a string or not given".
    """
    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


def coalesce(object, default=None, /):
    """
    Return object, or default when object is the Unset marker.
    """
    return default if object is Unset else object


Unset = UnsetType()


__all__ = (
    "coalesce",
    "UnsetType",
    "Unset",
)
