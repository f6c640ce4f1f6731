"""
Process-wide default store.

Most programs need exactly one option store; this module keeps it and
exposes module-level entry points that forward to it:

    import easyopts.program as opts

    opts.init_program_options(sys.argv, "Frobnicate things")
    section = opts.add_section("Frobbing", "How hard to frob", Visibility.PUBLIC)
    opts.add_option(section, "n", "count", Kind.SIGNED_INT, Requiredness.REQUIRED,
                    None, lambda value, destination: destination.update(count=value),
                    "Number of frobs")
    remaining = opts.run(destination=settings)
    ...
    opts.free(remaining)

init_program_options() must be called first; every other call raises
RuntimeError until then. Calling it again replaces the default store.
Independent Store objects remain available for tests and embedding.
"""
from .registry import Store
from .rendering import print_help, print_json
from .utils import Unset

_store = None


def current_store():
    """
    Return the default store.

    Raises
    - RuntimeError: init_program_options() was not called.
    """
    if _store is None:
        raise RuntimeError("init_program_options() must be called first")
    return _store


def init_program_options(argv=Unset, descr=Unset, /, **options):
    """
    Create the default store (built-in help/version options included).

    Keyword options are forwarded to Store (colorful, fancy, builtins).
    """
    global _store
    _store = Store(argv, descr, **options)
    return _store


def add_section(name, descr, visibility, /):
    return current_store().add_section(name, descr, visibility)


def add_option(section, short, long, kind, requiredness, validate, assign, descr, /, **options):
    return current_store().add_option(section, short, long, kind, requiredness, validate, assign, descr, **options)


def process(argv=Unset, /, destination=None):
    return current_store().process(argv, destination)


def run(argv=Unset, /, destination=None):
    return current_store().run(argv, destination)


def free(remaining=None, /):
    """
    Release the default store and the given remaining arguments.

    A no-op for the store when init_program_options() was never called.
    """
    if _store is not None:
        _store.free(remaining)
    elif remaining is not None:
        remaining.free()


def show_help():
    print_help(current_store())


def show_help_hidden():
    print_help(current_store(), hidden=True)


def show_help_json():
    print_json(current_store())


def show_help_hidden_json():
    print_json(current_store(), hidden=True)


def get_version():
    """
    Return the library version string.
    """
    from . import __version__
    return __version__


__all__ = (
    "current_store",
    "init_program_options",
    "add_section",
    "add_option",
    "process",
    "run",
    "free",
    "show_help",
    "show_help_hidden",
    "show_help_json",
    "show_help_hidden_json",
    "get_version",
)
