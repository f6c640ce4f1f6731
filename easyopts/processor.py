"""
Easyopts command-line processing: match, coerce, validate, assign.

What this module provides
- process(store, argv, destination): consume argv against the registry and
  return an Outcome (remaining arguments + optional exit code). Faults are
  raised as OptionException subclasses.
- run(store, argv, destination): top-level driver. Renders faults and
  warnings on standard error, exits with status 1 on faults, exits with the
  requested code when an assign callback returned Terminate, and otherwise
  hands back the remaining arguments.

Phases of process()
- scan: walk tokens left to right.
  • "--" ends scanning; every later token is kept verbatim.
  • "--name" / "--name=value" match long forms; "-c" / "-cvalue" match
    short forms. Anything else (including "-" and unknown names) is kept
    verbatim, in order.
  • switches take no value; value-bearing options take the inline value or
    the next token, coerced to the option's kind.
  • options of deprecated sections emit a DeprecatedOptionWarning.
  • a terminator option stops scanning right away.
- presence: absent options fall back to their default; absent required
  options without default are a MissingRequiredError.
- validation: every validate callback runs, in section-then-registration
  order, before any assignment.
- assignment: assign callbacks run in the same order; a Terminate result
  stops the remaining assignments.

Any fault aborts the call before the assignment phase, so no assign
callback ever observes a partially valid command line.
"""
import shlex
import sys
import warnings
from collections import deque, namedtuple
from collections.abc import Iterable

from .faults import *
from .kinds import Requiredness
from .registry import RemainingArguments, State, Terminate
from .utils import Unset

Outcome = namedtuple("Outcome", ("remaining", "exitcode"))
Outcome.__doc__ = """
result of process(): RemainingArguments and an exit code (None unless an
assign callback returned Terminate).
"""


def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def _tokenize(store, argv, /):
    """
    normalize argv into a list of tokens.

    - Unset: the store's argv without the program name.
    - str: shell-like string split with shlex.split.
    - Iterable[str]: used as-is (tokens are never trimmed or dropped).
    """
    if argv is Unset:
        return list(store.argv[1:])
    if isinstance(argv, str):
        return shlex.split(argv)
    if isinstance(argv, Iterable):
        tokens = list(argv)
        if all(isinstance(token, str) for token in tokens):
            return tokens
    raise TypeError("process() argument must be a string or an iterable of strings")


def _resolve_token(store, token, /):
    """
    split a token into (option, input, value).

    returns (None, None, None) when the token does not name a registered
    option. value is None when no inline value was attached.
    """
    if token.startswith("--"):
        input, separator, value = token.partition("=")
        return store.lookup(input), input, (value if separator else None)
    if token.startswith("-") and len(token) > 1:
        input = token[:2]
        return store.lookup(input), input, (token[2:] or None)
    return None, None, None


def process(store, argv=Unset, /, destination=None):
    """
    Process a command line against `store`.

    Parameters
    - store: Store
    - argv: Unset | str | Iterable[str]
      Tokens without the program name; defaults to store.argv[1:].
    - destination: Any
      Opaque handle passed as the second argument to every assign callback.

    Returns
    - Outcome(remaining, exitcode)

    Raises
    - UncastableValueError / OutOfRangeValueError: value does not coerce.
    - MissingValueError: value-bearing option at the end of argv.
    - SwitchAssignmentError: switch given an inline value.
    - DuplicatedOptionError: option given twice.
    - MissingRequiredError: required option absent and without default.
    - RejectedValueError: validate callback rejected the value.
    - RuntimeError: the store has been freed.
    - TypeError: argv is not a string or an iterable of strings.
    """
    if store.state is State.FREED:
        raise RuntimeError("cannot process: the store has been freed")

    tokens = deque(_tokenize(store, argv))
    remaining = []
    matches = {}
    terminator = None
    index = 0

    while tokens:
        token = tokens.popleft()
        index += 1
        start = index

        if token == "--":
            remaining.extend(tokens)
            tokens.clear()
            break

        option, input, value = _resolve_token(store, token)
        if option is None:
            remaining.append(token)
            continue

        if option in matches:
            store.trigger(DuplicatedOptionError(
                "option %r at %s position was already given" % (input, _ordinal(start)),
                title="duplicated option",
                code=FaultCode.DUPLICATED_OPTION,
                hint="give %r only once" % "/".join(option.names),
                option=option,
                input=input,
                index=start,
                docs=getdoc(FaultCode.DUPLICATED_OPTION),
            ))

        if option.switch:
            if value is not None:
                store.trigger(SwitchAssignmentError(
                    "switch %r at %s position cannot take a value" % (input, _ordinal(start)),
                    title="switch cannot take a value",
                    code=FaultCode.SWITCH_ASSIGNMENT,
                    hint="remove the value (for example: %s)" % input,
                    option=option,
                    input=input,
                    value=value,
                    index=start,
                    docs=getdoc(FaultCode.SWITCH_ASSIGNMENT),
                ))
            value = True
        else:
            if value is None:
                if not tokens:
                    store.trigger(MissingValueError(
                        "option %r at %s position requires a value" % (input, _ordinal(start)),
                        title="missing value",
                        code=FaultCode.MISSING_VALUE,
                        hint="pass a value (for example: --%s=<%s>)" % (option.long, option.kind.label.lower()),
                        option=option,
                        input=input,
                        index=start,
                        docs=getdoc(FaultCode.MISSING_VALUE),
                    ))
                value = tokens.popleft()
                index += 1

            try:
                value = option.kind.coerce(value)
            except OverflowError as exception:
                low, high = option.kind.bounds or (None, None)
                store.trigger(OutOfRangeValueError(
                    "value %r for option %r at %s position is out of range" % (value, input, _ordinal(start)),
                    title="value out of range",
                    code=FaultCode.OUT_OF_RANGE_VALUE,
                    hint=("use a value between %d and %d" % (low, high)) if low is not None
                    else "use a value that fits a %s" % option.kind.label.lower(),
                    option=option,
                    input=input,
                    value=value,
                    index=start,
                    exception=exception,
                    docs=getdoc(FaultCode.OUT_OF_RANGE_VALUE),
                ))
            except ValueError as exception:
                store.trigger(UncastableValueError(
                    "value %r for option %r at %s position is not a valid %s" % (
                        value, input, _ordinal(start), option.kind.label.lower()
                    ),
                    title="invalid value",
                    code=FaultCode.UNCASTABLE_VALUE,
                    hint="check the value format; expected %s" % option.kind.label.lower(),
                    option=option,
                    input=input,
                    value=value,
                    index=start,
                    exception=exception,
                    docs=getdoc(FaultCode.UNCASTABLE_VALUE),
                ))

        if option.section.deprecated:
            store.trigger(DeprecatedOptionWarning(
                "option %r at %s position is deprecated" % (input, _ordinal(start)),
                title="deprecated option",
                code=FaultCode.DEPRECATED_OPTION,
                hint="section %r is deprecated; avoid relying on its options" % option.section.name,
                option=option,
                input=input,
                index=start,
                docs=getdoc(FaultCode.DEPRECATED_OPTION),
            ))

        matches[option] = value

        if option.terminator:
            terminator = option
            remaining.extend(tokens)
            tokens.clear()

    # presence: defaults and required options (terminators skip the check)
    if terminator is not None:
        scheduled = [(terminator, matches[terminator])]
    else:
        scheduled = []
        for option in store:
            if option in matches:
                scheduled.append((option, matches[option]))
            elif option.default is not Unset:
                scheduled.append((option, option.default))
            elif option.requiredness is Requiredness.REQUIRED:
                store.trigger(MissingRequiredError(
                    "required option %r is missing" % ("--" + option.long),
                    title="missing required option",
                    code=FaultCode.MISSING_REQUIRED,
                    hint="pass it (for example: --%s=<%s>)" % (option.long, option.kind.label.lower()),
                    option=option,
                    input="--" + option.long,
                    docs=getdoc(FaultCode.MISSING_REQUIRED),
                ))

    # validation: all of it before any assignment
    for option, value in scheduled:
        if option.validate is None:
            continue
        try:
            accepted, cause = option.validate(value), None
        except Exception as exception:
            accepted, cause = False, exception
        if not accepted:
            store.trigger(RejectedValueError(
                "value %r for option %r was rejected" % (value, "--" + option.long),
                title="rejected value",
                code=FaultCode.REJECTED_VALUE,
                hint="check the accepted values in '%s --help'" % (store.prog or "program"),
                option=option,
                input="--" + option.long,
                value=value,
                exception=cause,
                docs=getdoc(FaultCode.REJECTED_VALUE),
            ))

    store._state = State.PROCESSED

    exitcode = None
    for option, value in scheduled:
        if isinstance(signal := option.assign(value, destination), Terminate):
            exitcode = signal.code
            break

    return Outcome(RemainingArguments(remaining), exitcode)


def run(store, argv=Unset, /, destination=None):
    """
    Process a command line and act on the outcome.

    Behavior
    - warnings raised while processing are rendered on standard error
      (OptionWarning) or re-emitted (anything else).
    - faults are rendered on standard error and the process exits with 1.
    - when an assign callback returned Terminate(code), exits with code.
    - otherwise returns the RemainingArguments.
    """
    fault = outcome = None
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        try:
            outcome = process(store, argv, destination)
        except OptionException as exception:
            fault = exception

    for warning in caught:
        if isinstance(warning.message, OptionWarning):
            store.trigger(warning.message, shell=True)
        else:
            warnings.warn_explicit(warning.message, warning.category, warning.filename, warning.lineno)

    if fault is not None:
        store.trigger(fault, shell=True)

    if outcome.exitcode is not None:
        sys.exit(outcome.exitcode)
    return outcome.remaining


__all__ = (
    "Outcome",
    "process",
    "run",
)
