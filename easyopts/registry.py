r"""
Easyopts registry: program option store, sections and options.

Overview
- Store: explicit program option store. Holds the argument vector, the
  program description and the ordered sections. Built-in help/version
  options are registered on construction (see _install_builtins).
- Section: named, ordered group of options with a shared visibility. The
  section object is the handle used to register options into it.
- Option: one declarable flag (short/long names, kind, requiredness,
  validate/assign callbacks, description, optional default).
- RemainingArguments: ordered tokens left unconsumed by processing; owned
  by the caller until freed.
- Terminate: signal an assign callback returns to ask the top-level driver
  to exit with a code once processing is over.

Ordering
- Sections keep registration order; options keep registration order within
  their section. Iterating a store yields options section-then-registration,
  which is also validation and assignment order.

Uniqueness
- Long names are unique across the whole store, as are short names.
  Duplicates raise ValueError at registration.

Lifecycle
    INITIALIZED -> REGISTERING -> PROCESSED -> FREED
- Registration is refused once the store has been processed or freed.
- free() is safe on an empty store and idempotent.

Validation highlights
- Long names must match r"[^\W_][\w-]*" (no leading dash, no '=', no spaces).
- Short names are a single character other than '-', '=' or whitespace.
- assign must be callable; validate must be None or callable.
"""
import functools
import operator
import re
import sys
from collections import namedtuple
from collections.abc import Iterable, Sequence
from enum import IntEnum

from .kinds import Kind, Requiredness, Visibility
from .faults import trigger
from .rendering import print_help, print_json, print_version
from .utils import *


Terminate = namedtuple("Terminate", ("code",), defaults=(0,))
Terminate.__doc__ = """
signal returned by an assign callback: stop assigning and exit with `code`.
"""


class State(IntEnum):
    """
    store lifecycle states.
    """
    INITIALIZED = 1
    REGISTERING = 2
    PROCESSED   = 3
    FREED       = 4


class RegistryType(type):
    """
    Metaclass exposing registry fields as read-only properties.

    - Every name listed in __introspectable__ becomes a property mirroring
      the private "_{name}" field (see mirror()).
    - __displayable__ (if set) narrows which fields __repr__/__rich_repr__
      show; otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_section_metadata(metadata, /):
    """
    Internal: validate section name/descr/visibility in place.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError("section 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError("section 'name' cannot be empty")
    metadata["name"] = name

    if not isinstance(metadata["descr"], str):
        raise TypeError("section 'descr' must be a string")

    if not isinstance(visibility := metadata["visibility"], Visibility):
        raise TypeError("section 'visibility' must be a Visibility")
    elif visibility is Visibility.INVALID:
        raise ValueError("section 'visibility' cannot be INVALID")


def _sanitize_option_metadata(metadata, /):
    r"""
    Internal: validate and normalize option metadata in place.

    Responsibilities
    - short: None or a single character (not '-', '=' or whitespace).
    - long: non-empty, matching r"[^\W_][\w-]*".
    - kind/requiredness: enum members other than INVALID.
    - validate: None or callable. assign: callable.
    - descr: string.
    - default: Unset or a value of the option's kind. Strings given for
      non-string kinds are coerced; other values are admitted as typed
      values (type and range checked). Switches cannot carry a default.
    - terminator: coerced to bool.

    Raises
    - TypeError: wrong types (including a missing assign callback).
    - ValueError / OverflowError: malformed names, INVALID enums, or a
      default that cannot be coerced.
    """
    if (short := metadata["short"]) is not None:
        if not isinstance(short, str):
            raise TypeError("option 'short' must be a string or None")
        elif len(short) != 1 or short in "-=" or short.isspace():
            raise ValueError("option 'short' must be a single character other than '-', '=' or a space")

    if not isinstance(long := metadata["long"], str):
        raise TypeError("option 'long' must be a string")
    elif not long:
        raise ValueError("option 'long' cannot be empty")
    elif not re.fullmatch(r"[^\W_][\w-]*", long):
        raise ValueError("option 'long' must be a valid name without leading dashes (got %r)" % long)

    if not isinstance(kind := metadata["kind"], Kind):
        raise TypeError("option 'kind' must be a Kind")
    elif kind is Kind.INVALID:
        raise ValueError("option 'kind' cannot be INVALID")

    if not isinstance(requiredness := metadata["requiredness"], Requiredness):
        raise TypeError("option 'requiredness' must be a Requiredness")
    elif requiredness is Requiredness.INVALID:
        raise ValueError("option 'requiredness' cannot be INVALID")

    if metadata["validate"] is not None and not callable(metadata["validate"]):
        raise TypeError("option 'validate' must be callable or None")

    if not callable(metadata["assign"]):
        raise TypeError("option 'assign' must be callable")

    if not isinstance(metadata["descr"], str):
        raise TypeError("option 'descr' must be a string")

    if (default := metadata["default"]) is not Unset:
        if requiredness is Requiredness.NONE:
            raise TypeError("switch option %r cannot have a default" % long)
        if isinstance(default, str) and kind is not Kind.STRING:
            metadata["default"] = kind.coerce(default)
        else:
            metadata["default"] = kind.admit(default)

    metadata["terminator"] = bool(metadata["terminator"])


class Option(metaclass=RegistryType):
    """
    A single declarable command-line flag.

    Options are created through Store.add_option (or Section.add_option) and
    are owned by their section. All fields are read-only.
    """

    __introspectable__ = (
        "short",
        "long",
        "kind",
        "requiredness",
        "validate",
        "assign",
        "descr",
        "default",
        "terminator",
    )

    __displayable__ = (
        "short",
        "long",
        "kind",
        "requiredness",
        "descr",
    )

    def __init__(self, section, metadata, /):
        self._section = section
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def section(self):
        return self._section

    @property
    def switch(self):
        """
        True when the option takes no value (Requiredness.NONE).
        """
        return self._requiredness is Requiredness.NONE

    @property
    def names(self):
        """
        command-line spellings, short form first (e.g., ("-c", "--count")).
        """
        names = ("--" + self._long,)
        if self._short is not None:
            names = ("-" + self._short,) + names
        return names


class Section(metaclass=RegistryType):
    """
    Named, ordered group of options sharing one visibility.

    The section returned by Store.add_section is the handle for registering
    its options.
    """

    __introspectable__ = (
        "name",
        "descr",
        "visibility",
        "options",
    )

    def __init__(self, store, metadata, /):
        self._store = store
        self._options = []
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def store(self):
        return self._store

    @property
    def hidden(self):
        return self._visibility is Visibility.HIDDEN

    @property
    def deprecated(self):
        return self._visibility is Visibility.DEPRECATED

    def add_option(self, *args, **kwargs):
        """
        Register an option into this section; see Store.add_option.
        """
        return self._store.add_option(self, *args, **kwargs)


class RemainingArguments(Sequence):
    """
    Tokens left unconsumed by processing, in their original order.

    Owned by the caller; free() releases the contained strings.
    """

    def __init__(self, arguments=(), /):
        if not isinstance(arguments, Iterable):
            raise TypeError("remaining arguments must be an iterable of strings")
        self._arguments = []
        for argument in arguments:
            if not isinstance(argument, str):
                raise TypeError("remaining arguments must be an iterable of strings")
            self._arguments.append(argument)

    @property
    def count(self):
        return len(self._arguments)

    def free(self):
        self._arguments.clear()

    def __getitem__(self, index, /):
        return self._arguments[index]

    def __len__(self):
        return len(self._arguments)

    def __repr__(self):
        return "remaining-arguments(%r)" % self._arguments


class Store(metaclass=RegistryType):
    """
    Program option store: argv, description and ordered sections.

    Parameters
    - argv: Unset | Iterable[str]
      Full argument vector including the program name. Defaults to sys.argv.
    - descr: Unset | str
      Program description printed at the top of help output.
    - colorful: bool
      Style help and fault output (palette overridable via __main__.__styles__).
    - fancy: bool
      Render faults inside a panel.
    - builtins: bool
      Register the built-in Common/Common Hidden sections (help, version).

    Notes
    - Multiple independent stores may coexist; easyopts.program keeps the
      process-wide default one.
    - The store is not thread-safe; callers serialize access themselves.
    """

    __introspectable__ = (
        "argv",
        "descr",
        "sections",
        "state",
        "colorful",
        "fancy",
    )

    __displayable__ = (
        "descr",
        "sections",
        "state",
    )

    def __init__(self, argv=Unset, descr=Unset, /, *, colorful=False, fancy=False, builtins=True):
        argv = coalesce(argv, sys.argv)
        if isinstance(argv, str) or not isinstance(argv, Iterable):
            raise TypeError("store 'argv' must be an iterable of strings")
        self._argv = list(argv)
        if not all(isinstance(argument, str) for argument in self._argv):
            raise TypeError("store 'argv' must be an iterable of strings")

        if not isinstance(descr := coalesce(descr, ""), str):
            raise TypeError("store 'descr' must be a string")
        self._descr = descr

        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._sections = []
        self._longs = {}
        self._shorts = {}
        self._state = State.INITIALIZED

        if builtins:
            _install_builtins(self)

    @property
    def prog(self):
        """
        program name as given in argv[0] ("" when argv is empty).
        """
        return self._argv[0] if self._argv else ""

    def _ensure(self, *states, action):
        if self._state is State.FREED:
            raise RuntimeError("cannot %s: the store has been freed" % action)
        if self._state not in states:
            raise RuntimeError("cannot %s in %s state" % (action, self._state.name.lower()))

    def add_section(self, name, descr, visibility=Visibility.PUBLIC, /):
        """
        Append a new section and return it as the handle for add_option.

        Raises
        - RuntimeError: the store was already processed or freed.
        - TypeError / ValueError: invalid name, descr or visibility.
        """
        self._ensure(State.INITIALIZED, State.REGISTERING, action="add a section")
        metadata = {
            "name": name,
            "descr": descr,
            "visibility": visibility,
        }
        _sanitize_section_metadata(metadata)

        section = Section(self, metadata)
        self._sections.append(section)
        self._state = State.REGISTERING
        return section

    def add_option(
            self,
            section,
            short,
            long,
            kind,
            requiredness,
            validate,
            assign,
            descr,
            /,
            *,
            default=Unset,
            terminator=False
    ):
        """
        Append an option to the given section.

        Parameters
        - section: Section returned by this store's add_section.
        - short: None | str
          Single-character short form (matched as -c).
        - long: str
          Long form without dashes (matched as --long); unique in the store.
        - kind: Kind
          Declared value kind; raw text is coerced to it during processing.
        - requiredness: Requiredness
          NONE (switch), REQUIRED or OPTIONAL.
        - validate: None | Callable[[value], bool]
          Receives the typed value; a falsy result (or an exception) rejects it.
        - assign: Callable[[value, destination], None | Terminate]
          Receives the typed value and the destination handle given to
          process(). May return Terminate(code) to stop after this option.
        - descr: str
          Help description.
        - default: Unset | Any
          Value supplied when the option is absent; spares a required option
          from the missing-required fault.
        - terminator: bool
          When matched, scanning stops and only this option is validated and
          assigned (used by the help options).

        Raises
        - RuntimeError: the store was already processed or freed.
        - TypeError / ValueError: invalid metadata, or the section belongs to
          another store.
        - ValueError: the long or short name is already registered.
        """
        self._ensure(State.INITIALIZED, State.REGISTERING, action="add an option")
        if not isinstance(section, Section):
            raise TypeError("add_option() first argument must be a section")
        elif section.store is not self or section not in self._sections:
            raise ValueError("add_option() section does not belong to this store")

        metadata = {
            "short": short,
            "long": long,
            "kind": kind,
            "requiredness": requiredness,
            "validate": validate,
            "assign": assign,
            "descr": descr,
            "default": default,
            "terminator": terminator,
        }
        _sanitize_option_metadata(metadata)

        if metadata["long"] in self._longs:
            raise ValueError("option '--%s' is already registered" % metadata["long"])
        if metadata["short"] is not None and metadata["short"] in self._shorts:
            raise ValueError("option '-%s' is already registered" % metadata["short"])

        option = Option(section, metadata)
        section._options.append(option)
        self._longs[option.long] = option
        if option.short is not None:
            self._shorts[option.short] = option
        self._state = State.REGISTERING
        return option

    def lookup(self, name, /):
        """
        Return the option spelled `name` ("--long" or "-c"), or None.
        """
        if not isinstance(name, str):
            raise TypeError("lookup() argument must be a string")
        if name.startswith("--"):
            return self._longs.get(name[2:])
        if name.startswith("-") and len(name) == 2:
            return self._shorts.get(name[1])
        return None

    def __iter__(self):
        """
        Yield every option in section-then-registration order.
        """
        for section in self._sections:
            yield from section._options

    def trigger(self, fault, /, **options):
        """
        Surface a fault carrying this store's rendering options.
        """
        trigger(fault, **options, store=self, colorful=self._colorful, fancy=self._fancy)

    def process(self, argv=Unset, /, destination=None):
        """
        Process argv against the registry; see easyopts.processor.process.
        """
        from .processor import process
        return process(self, argv, destination)

    def run(self, argv=Unset, /, destination=None):
        """
        Process argv and act on faults and terminate signals; see easyopts.processor.run.
        """
        from .processor import run
        return run(self, argv, destination)

    def free(self, remaining=None, /):
        """
        Release every option, then every section, then the store, then the
        given remaining arguments. Safe on an empty store; idempotent.
        """
        if remaining is not None and not isinstance(remaining, RemainingArguments):
            raise TypeError("free() argument must be remaining arguments or None")
        for section in self._sections:
            section._options.clear()
        self._sections.clear()
        self._longs.clear()
        self._shorts.clear()
        self._state = State.FREED
        if remaining is not None:
            remaining.free()


def _install_builtins(store, /):
    """
    Internal: register the Common and Common Hidden sections.
    """
    @rename("assign_version")
    def assign_version(value, destination, /):
        print_version(store)

    @rename("assign_help")
    def assign_help(value, destination, /):
        print_help(store)
        return Terminate(0)

    @rename("assign_help_json")
    def assign_help_json(value, destination, /):
        print_json(store)
        return Terminate(0)

    @rename("assign_help_hidden")
    def assign_help_hidden(value, destination, /):
        print_help(store, hidden=True)
        return Terminate(0)

    @rename("assign_help_hidden_json")
    def assign_help_hidden_json(value, destination, /):
        print_json(store, hidden=True)
        return Terminate(0)

    common = store.add_section("Common", "Provide Common Arguments for help and versioning", Visibility.PUBLIC)
    common.add_option("v", "version", Kind.STRING, Requiredness.NONE, None, assign_version,
                      "Print the library's version information")
    common.add_option("h", "help", Kind.STRING, Requiredness.NONE, None, assign_help,
                      "Print program usage and exit.", terminator=True)
    common.add_option(None, "help-json", Kind.STRING, Requiredness.NONE, None, assign_help_json,
                      "Print program usage in Json format and exit.", terminator=True)

    hidden = store.add_section("Common Hidden", "Provide Common Arguments for help and versioning (Hidden)", Visibility.HIDDEN)
    hidden.add_option(None, "help-hidden", Kind.STRING, Requiredness.NONE, None, assign_help_hidden,
                      "Print program usage (including hidden options) and exit.", terminator=True)
    hidden.add_option(None, "help-hidden-json", Kind.STRING, Requiredness.NONE, None, assign_help_hidden_json,
                      "Print program usage in Json format (including hidden options) and exit.", terminator=True)


__all__ = (
    "Store",
    "Section",
    "Option",
    "RemainingArguments",
    "Terminate",
    "State",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports.
del RegistryType
