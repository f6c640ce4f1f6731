"""
Small helpers shared by the registry and the faults.

- Unset: "argument omitted" marker, distinct from None (None and 0 are
  legitimate option defaults).
- coalesce(value, fallback): swap Unset for a fallback.
- rename(): give generated callbacks readable names in tracebacks and reprs.
- mirror(): read-only property over a "_name" field; lists, sets and dicts
  are handed out as tuples, frozensets and fresh dicts.
"""
import builtins
import functools
from collections.abc import Mapping, Sequence, Set
from typing import final


@final
class UnsetType:
    """
    type of the Unset marker (one instance per process, always falsy).
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")

    # lets `str | Unset` work in isinstance checks
    def __or__(self, other, /):
        try:
            return UnsetType | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | UnsetType
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self


def coalesce(value, fallback=None, /):
    """
    Return `fallback` when `value` is Unset, else `value` untouched.
    """
    return fallback if value is Unset else value


def rename(*arguments):
    """
    Rename a callable (rename(function, "name")) or build a renaming
    decorator (@rename("name")).
    """
    if len(arguments) == 1:
        name, = arguments
        if not isinstance(name, str):
            raise TypeError("@rename() expects a string name")

        def decorator(function):
            return rename(function, name)

        return decorator

    if len(arguments) != 2:
        raise TypeError("rename() expects 1 or 2 arguments, got %d" % len(arguments))

    function, name = arguments
    if not builtins.callable(function) or not isinstance(name, str):
        raise TypeError("rename() expects a callable and a string name")
    try:
        function.__name__ = function.__qualname__ = name
    except (AttributeError, TypeError):
        raise TypeError("cannot rename %r" % function) from None
    return function


def _snapshot(value):
    match value:
        case str():
            return value
        case Sequence():
            return tuple(_snapshot(item) for item in value)
        case Mapping():
            return {key: _snapshot(item) for key, item in value.items()}
        case Set():
            return frozenset(_snapshot(item) for item in value)
        case _:
            return value


def mirror(name, /):
    """
    Build a read-only property exposing a snapshot of self._<name>.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() expects a string name")

    @rename(name)
    def getter(self):
        return _snapshot(getattr(self, "_" + name))

    return property(getter)


Unset = UnsetType()


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "UnsetType",
    "Unset",
)
