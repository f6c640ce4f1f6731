"""
Easyopts help rendering (plain/styled text and JSON).

Text layout (one block per visible section, in registration order)

    <program description>

    Usage: <argv[0]> --<required>=X [--<optional>=X] ...
    [<section name>: Options are <public|hidden|deprecated>]
    <section description>
    --<long>=[<Kind Label>] <option description>
    <blank line>

- Hidden sections are omitted wholesale (header, description, options)
  unless hidden=True. Deprecated sections are always shown.
- Short forms and defaults are not printed.
- The synopsis marks only REQUIRED options as mandatory; switches and
  optional options appear bracketed.

JSON layout mirrors the same data:

    {"description", "program", "usage": [...],
     "sections": [{"name", "visibility", "description",
                   "options": [{"short", "long", "kind", "requiredness", "description"}]}]}

Styling
- When the store is colorful, palette entries apply; override any of them
  with a __styles__ mapping in __main__. Styles never change the plain text.
"""
import json
from collections import defaultdict

from rich.console import Console
from rich.text import Text

from .kinds import Requiredness


def _palette(store):
    styles = defaultdict(str, {
        # === Head ===
        "description-section": "italic #A3A3A3",  # Neutral gray
        "usage-label": "bold #00E6FF",  # CYAN
        "program-name": "bold #FF4D94",  # MAGENTA-PINK
        "required-option": "bold #00E6FF",
        "optional-option": "#36C5F0",  # SKY-BLUE

        # === Sections ===
        "section-header": "bold #FFFFFF",
        "deprecated-section": "bold #F97316 strike",  # ORANGE strike
        "visibility-label": "#9CA3AF",
        "section-description": "italic #9CA3AF",

        # === Options ===
        "option-name": "bold #22C55E",
        "deprecated-name": "bold #F97316 strike",
        "kind-label": "bold #FFD600",  # AMBER
        "option-description": "#D1D5DB",

        # === Version ===
        "version-label": "bold #FF4D94",
        "version-number": "bold #00E6FF",
    } | getattr(__import__('__main__'), "__styles__", {}))

    def styler(style):
        return styles[style] if store.colorful else ""

    return styler


def _visible(store, hidden):
    return [section for section in store.sections if hidden or not section.hidden]


def _synopsis(option):
    if option.requiredness is Requiredness.REQUIRED:
        return "--%s=X" % option.long
    return "[--%s=X]" % option.long


def render_help(store, /, hidden=False):
    """
    Build the help text for `store` as a rich Text.

    Parameters
    - store: Store
    - hidden: bool
      Include HIDDEN sections.

    Returns
    - Text whose .plain is the exact help output.
    """
    styler = _palette(store)
    sections = _visible(store, hidden)

    help = Text()
    help.append(store.descr, styler("description-section")).append("\n\n")

    help.append("Usage:", styler("usage-label")).append(" ")
    help.append(store.prog, styler("program-name"))
    for section in sections:
        for option in section.options:
            style = "required-option" if option.requiredness is Requiredness.REQUIRED else "optional-option"
            help.append(" ").append(_synopsis(option), styler(style))
    help.append("\n")

    for section in sections:
        help.append("[")
        help.append(section.name, styler("deprecated-section" if section.deprecated else "section-header"))
        help.append(": ")
        help.append(section.visibility.label, styler("visibility-label"))
        help.append("]\n")
        help.append(section.descr, styler("section-description")).append("\n")
        for option in section.options:
            help.append("--" + option.long, styler("deprecated-name" if section.deprecated else "option-name"))
            help.append("=[")
            help.append(option.kind.label, styler("kind-label"))
            help.append("] ")
            help.append(option.descr, styler("option-description")).append("\n")
        help.append("\n")

    return help


def render_json(store, /, hidden=False):
    """
    Build the structured (JSON-ready) help for `store`.

    Carries the same fields as the text form plus the short names and
    requiredness of every option.
    """
    sections = _visible(store, hidden)
    return {
        "description": store.descr,
        "program": store.prog,
        "usage": [_synopsis(option) for section in sections for option in section.options],
        "sections": [
            {
                "name": section.name,
                "visibility": section.visibility.name.lower(),
                "description": section.descr,
                "options": [
                    {
                        "short": option.short,
                        "long": option.long,
                        "kind": option.kind.label,
                        "requiredness": option.requiredness.name.lower(),
                        "description": option.descr,
                    }
                    for option in section.options
                ],
            }
            for section in sections
        ],
    }


def print_help(store, /, hidden=False):
    """
    Print the help text to standard output.
    """
    Console(highlight=False).print(render_help(store, hidden=hidden), soft_wrap=True, end="")


def print_json(store, /, hidden=False):
    """
    Print the JSON help to standard output.
    """
    Console().print_json(json.dumps(render_json(store, hidden=hidden)), highlight=store.colorful)


def print_version(store, /):
    """
    Print the library version line ("Easyopts Version <version>").
    """
    from . import __version__

    styler = _palette(store)
    Console(highlight=False).print(Text.assemble(
        ("Easyopts Version", styler("version-label")),
        " ",
        (__version__, styler("version-number")),
    ))


__all__ = (
    "render_help",
    "render_json",
    "print_help",
    "print_json",
    "print_version",
)
