"""
Easyopts faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing
  processing issue. Codes are grouped by domain so logs and searches stay
  predictable.
- OptionException / OptionWarning: base types that carry a message plus
  context options (option, input, value, index, ...) and know how to render
  themselves with rich.
- trigger(): central entry point to surface any fault.
- getdoc(): optional description lookup for a code from the host application.

Behavior
- Outside shell mode, exceptions are raised and warnings are emitted through
  the warnings module.
- In shell mode, faults are rendered on standard error; exceptions then exit
  the process with status 1.

Registration mistakes (duplicate names, missing assign callback, calls on a
freed store) are programming errors and surface as TypeError/ValueError/
RuntimeError at the call site instead.
"""
import copy
import inspect
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes used during command-line processing.

    grouping
    - values (1111x)
      • UNCASTABLE_VALUE, OUT_OF_RANGE_VALUE, MISSING_VALUE, SWITCH_ASSIGNMENT
    - occurrences (1112x)
      • DUPLICATED_OPTION, MISSING_REQUIRED
    - delegated (1113x)
      • REJECTED_VALUE
    - warnings (12xxx)
      • DEPRECATED_OPTION
    """
    # --- value errors (11xxx) ---
    UNCASTABLE_VALUE    = 11111
    OUT_OF_RANGE_VALUE  = 11112
    MISSING_VALUE       = 11113
    SWITCH_ASSIGNMENT   = 11114

    # --- occurrence errors (11xxx) ---
    DUPLICATED_OPTION   = 11121
    MISSING_REQUIRED    = 11122

    # --- delegated errors (11xxx) ---
    REJECTED_VALUE      = 11131

    # --- warnings (12xxx) ---
    DEPRECATED_OPTION   = 12111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault):
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", False)
    styles = defaultdict(str, type(fault).__palette__ | getattr(main, "__styles__", {}))

    def styled(fragment, style):
        return Text(str(fragment), styles[style] if colorful else "")

    prog = getattr(main, "__prog__", getattr(options.get("store"), "prog", None) or "easyopts")
    code = options["code"].normalize() if "code" in options else ""

    header = Text.assemble(
        "[ ",
        styled(prog, "prog-name"),
        " · ",
        styled(code, "code"),
        " | ",
        styled(options.get("title", "").title(), "title"),
        " ]",
    )
    body = [styled(fault.message, "message")]
    if hint := options.get("hint"):
        body.append(Text.assemble(styled(" → ", "hint-arrow"), styled(hint, "hint")))

    if options.get("fancy", False):
        return Panel(Group(*body), title=header, title_align="left")
    return Group(header, *body)


class _Fault:
    """
    shared shape of faults: a positional message plus keyword context.

    the context (code, title, hint, option, input, value, index, exception,
    store, colorful, fancy, shell) is exposed as the read-only `options`.
    """
    __palette__ = {}

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "context must be given by keyword"
        return type(self)(self.message, **self.options | overrides)


class OptionException(_Fault, Exception):
    """
    base class of every processing fault.
    """
    __palette__ = {
        "prog-name": "bold #F5F5F5",
        "code": "bold #4FC3F7",  # light blue
        "title": "bold #EF5350",  # red
        "message": "#E0E0E0",
        "hint-arrow": "dim #81C784",
        "hint": "italic #81C784",  # green
    }

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from self.options.get("exception")
        Console(stderr=True).print(self)
        sys.exit(1)


class UncastableValueError(OptionException): ...
class OutOfRangeValueError(UncastableValueError): ...
class MissingValueError(OptionException): ...
class SwitchAssignmentError(OptionException): ...
class DuplicatedOptionError(OptionException): ...
class MissingRequiredError(OptionException): ...
class RejectedValueError(OptionException): ...


class OptionWarning(_Fault, ABC, Warning):
    """
    base class of processing warnings (non-fatal).
    """
    __palette__ = {
        "prog-name": "bold #F5F5F5",
        "code": "bold #FFB74D",  # orange
        "title": "bold #FFD54F",  # yellow
        "message": "#E0E0E0",
        "hint-arrow": "dim #81C784",
        "hint": "italic #81C784",
    }

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        Console(stderr=True).print(self)


class DeprecatedOptionWarning(OptionWarning): ...


def trigger(fault, /, **options):
    """
    copy `fault` with the extra context `options`, then raise, warn or render it.
    """
    if not (callable(getattr(fault, "__trigger__", None)) and callable(getattr(fault, "__replace__", None))):
        raise TypeError("trigger() expects an OptionException or an OptionWarning")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ keyed by
    FaultCode; returns None when absent.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "OptionException",
    "UncastableValueError",
    "OutOfRangeValueError",
    "MissingValueError",
    "SwitchAssignmentError",
    "DuplicatedOptionError",
    "MissingRequiredError",
    "RejectedValueError",
    "OptionWarning",
    "DeprecatedOptionWarning",
    "trigger",
    "getdoc",
)
