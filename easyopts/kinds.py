"""
Easyopts value kinds, requiredness and section visibility.

Scope
- Kind: the declared value kind of an option (integers of five widths in
  signed/unsigned flavors, float, double, string) and the typed coercion
  of raw command-line text into that kind.
- Requiredness: whether an option is a switch (NONE), must appear
  (REQUIRED), or may appear (OPTIONAL).
- Visibility: section status controlling help output (PUBLIC, HIDDEN,
  DEPRECATED).

Coercion rules
- integers: strict decimal text (optional sign, digits only). Trailing
  garbage, whitespace and digit separators are rejected with ValueError;
  values outside the declared width/signedness raise OverflowError.
  Widths: char 8, short 16, int 32, long 64, long long 64 bits.
- FLOAT/DOUBLE: standard float parsing (float()). Surrounding whitespace
  and digit separators are rejected. FLOAT is rounded to single precision
  and finite values beyond its range raise OverflowError.
- STRING: text is passed through unchanged.
- Kind.admit() applies the same type and range rules to values that are
  already typed (registration-time defaults).

The INVALID members exist so numeric values line up with the historical
C enumerations; they are never accepted at registration time.
"""
import math
import re
import struct
from enum import IntEnum

_DECIMAL = re.compile(r"[+-]?[0-9]+")


class Kind(IntEnum):
    """
    declared value kind of an option (stable numeric identifiers).
    """
    INVALID             = 0
    SIGNED_CHAR         = 1
    UNSIGNED_CHAR       = 2
    SIGNED_SHORT        = 3
    UNSIGNED_SHORT      = 4
    SIGNED_INT          = 5
    UNSIGNED_INT        = 6
    SIGNED_LONG         = 7
    UNSIGNED_LONG       = 8
    SIGNED_LONG_LONG    = 9
    UNSIGNED_LONG_LONG  = 10
    FLOAT               = 11
    DOUBLE              = 12
    STRING              = 13

    @property
    def label(self):
        """
        human-readable name used in help output (e.g., "Signed Integer").
        """
        return _LABELS[self]

    @property
    def integral(self):
        return self in _WIDTHS

    @property
    def bounds(self):
        """
        inclusive (low, high) range for integer kinds, None otherwise.
        """
        try:
            bits, signed = _WIDTHS[self]
        except KeyError:
            return None
        if signed:
            return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
        return 0, (1 << bits) - 1

    def coerce(self, text, /):
        """
        convert raw command-line text into a typed value of this kind.

        Raises
        - TypeError: text is not a string, or the kind is INVALID.
        - ValueError: text is not a valid literal for this kind.
        - OverflowError: the literal does not fit this kind's range.
        """
        if not isinstance(text, str):
            raise TypeError("coerce() argument must be a string")

        match self:
            case Kind.INVALID:
                raise TypeError("cannot coerce into an invalid kind")
            case Kind.STRING:
                return text
            case Kind.FLOAT | Kind.DOUBLE:
                if text != text.strip() or "_" in text:
                    raise ValueError("invalid literal for %s: %r" % (self.label.lower(), text))
                try:
                    value = float(text)
                except ValueError:
                    raise ValueError("invalid literal for %s: %r" % (self.label.lower(), text)) from None
                return self.admit(value)
            case _:
                if not _DECIMAL.fullmatch(text):
                    raise ValueError("invalid literal for %s: %r" % (self.label.lower(), text))
                # no supported width holds more than 20 digits
                if len(text.lstrip("+-").lstrip("0")) > 20:
                    raise OverflowError("%r is out of range for %s" % (text, self.label.lower()))
                return self.admit(int(text))

    def admit(self, value, /):
        """
        check an already typed value against this kind and return it.

        integers must be int (not bool) within bounds; FLOAT/DOUBLE take int
        or float and return a float (single precision for FLOAT); STRING
        takes str.

        Raises
        - TypeError: the value has the wrong type, or the kind is INVALID.
        - OverflowError: the value does not fit this kind's range.
        """
        match self:
            case Kind.INVALID:
                raise TypeError("cannot admit values into an invalid kind")
            case Kind.STRING:
                if not isinstance(value, str):
                    raise TypeError("%s value must be a str, not %s" % (self.label.lower(), type(value).__name__))
                return value
            case Kind.FLOAT | Kind.DOUBLE:
                if isinstance(value, bool) or not isinstance(value, int | float):
                    raise TypeError("%s value must be a number, not %s" % (self.label.lower(), type(value).__name__))
                value = float(value)
                if self is Kind.FLOAT and math.isfinite(value):
                    try:
                        value, = struct.unpack("f", struct.pack("f", value))
                    except OverflowError:
                        raise OverflowError("%r is out of range for %s" % (value, self.label.lower())) from None
                return value
            case _:
                if isinstance(value, bool) or not isinstance(value, int):
                    raise TypeError("%s value must be an int, not %s" % (self.label.lower(), type(value).__name__))
                low, high = self.bounds
                if not low <= value <= high:
                    raise OverflowError("%d is out of range for %s [%d, %d]" % (value, self.label.lower(), low, high))
                return value


class Requiredness(IntEnum):
    """
    whether an option carries a value and must be present.
    """
    INVALID     = 0
    NONE        = 1
    REQUIRED    = 2
    OPTIONAL    = 3


class Visibility(IntEnum):
    """
    section status; controls help output and deprecation warnings.
    """
    INVALID     = 0
    PUBLIC      = 1
    HIDDEN      = 2
    DEPRECATED  = 3

    @property
    def label(self):
        """
        help header label (e.g., "Options are public").
        """
        return _VISIBILITIES[self]


_LABELS = {
    Kind.INVALID: "Invalid",
    Kind.SIGNED_CHAR: "Signed Char",
    Kind.UNSIGNED_CHAR: "Unsigned Char",
    Kind.SIGNED_SHORT: "Signed Short",
    Kind.UNSIGNED_SHORT: "Unsigned Short",
    Kind.SIGNED_INT: "Signed Integer",
    Kind.UNSIGNED_INT: "Unsigned Integer",
    Kind.SIGNED_LONG: "Signed Long",
    Kind.UNSIGNED_LONG: "Unsigned Long",
    Kind.SIGNED_LONG_LONG: "Signed Long Long",
    Kind.UNSIGNED_LONG_LONG: "Unsigned Long Long",
    Kind.FLOAT: "Float",
    Kind.DOUBLE: "Double",
    Kind.STRING: "String",
}

# kind -> (bits, signed)
_WIDTHS = {
    Kind.SIGNED_CHAR: (8, True),
    Kind.UNSIGNED_CHAR: (8, False),
    Kind.SIGNED_SHORT: (16, True),
    Kind.UNSIGNED_SHORT: (16, False),
    Kind.SIGNED_INT: (32, True),
    Kind.UNSIGNED_INT: (32, False),
    Kind.SIGNED_LONG: (64, True),
    Kind.UNSIGNED_LONG: (64, False),
    Kind.SIGNED_LONG_LONG: (64, True),
    Kind.UNSIGNED_LONG_LONG: (64, False),
}

_VISIBILITIES = {
    Visibility.INVALID: "Options are Unknown",
    Visibility.PUBLIC: "Options are public",
    Visibility.HIDDEN: "Options are hidden",
    Visibility.DEPRECATED: "Options are deprecated",
}


__all__ = (
    "Kind",
    "Requiredness",
    "Visibility",
)
