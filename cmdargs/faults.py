"""
cmdargs faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
- ArgumentException: base error carrying a message plus read-only options
  (code, title, hint, argument, token, index, ...), renderable with rich.
- ArgumentWarning: base warning with the same shape, surfaced via warnings.warn.

Taxonomy
- RegistrationError      → a declaration without any usable name (add time).
- MissingValueError      → a value-requiring name with no following value.
- InvalidValueError      → a supplied token failed type conversion.
- UnknownArgumentError   → an unmatched token, only when the parser is strict.
- ConversionError        → raised by the conversion layer; declarations always
                           wrap it into InvalidValueError before it leaves them.
- DuplicateNameWarning   → a later declaration took over an indexed name.

Rendering
- Faults never print themselves. Applications catch them and print with
  rich, e.g. `Console(stderr=True).print(fault)`, which renders a
  "[ prog — code | title ]" header, the message, and a hint line.
- Host overrides looked up on __main__:
  • __prog__   program name shown in the header (defaults to argv[0] basename)
  • __codes__  mapping FaultCode -> label used instead of the numeric value
  • __styles__ mapping palette key -> rich style
"""
import os.path
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - registration errors (1110x): NAMELESS_ARGUMENT
    - parsing errors (1111x): MISSING_VALUE, INVALID_VALUE, UNKNOWN_ARGUMENT
    - conversion errors (1112x): CONVERSION_FAILURE
    - warnings (12xxx): DUPLICATED_NAME
    """
    # --- registration errors (11xxx) ---
    NAMELESS_ARGUMENT  = 11101

    # --- parsing errors (11xxx) ---
    MISSING_VALUE      = 11111
    INVALID_VALUE      = 11112
    UNKNOWN_ARGUMENT   = 11113

    # --- conversion errors (11xxx) ---
    CONVERSION_FAILURE = 11121

    # --- warnings (12xxx) ---
    DUPLICATED_NAME    = 12101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


_PALETTES = {
    "error": {
        "prog-name": "bold #E6E6F0",
        "code": "bold #00E5FF",
        "title": "bold #FF4DA6",
        "message": "#C8C8D0",
        "hint-arrow": "#9CE19C dim",
        "hint": "italic #9CE19C",
    },
    "warning": {
        "prog-name": "bold #E6E6F0",
        "code": "bold #FFB400",
        "title": "bold #FFC2E0",
        "message": "#D6D6DE",
        "hint-arrow": "#B8EFAF dim",
        "hint": "italic #B8EFAF",
    },
}


def _render(fault, kind):
    """
    shared rich rendering for errors and warnings.

    the palette is chosen by kind ("error" or "warning") and can be
    overridden per key through __styles__ in __main__ (keys are prefixed by
    kind, e.g. "error-title", "warning-hint").
    """
    main = __import__("__main__")
    overrides = getattr(main, "__styles__", {})
    styles = defaultdict(str, {
        key: overrides.get(kind + "-" + key, style) for key, style in _PALETTES[kind].items()
    })
    colorful = fault.options.get("colorful", True)

    def text(fragment, style):
        if not fragment:
            return Text("")
        return Text(str(fragment), styles[style] if colorful else "")

    prog = getattr(main, "__prog__", None) or os.path.basename(sys.argv[0] if sys.argv else "") or "prog"
    code = fault.code.normalize() if isinstance(fault.code, FaultCode) else "-"

    header = Text.assemble(
        "[ ",
        text(prog, "prog-name"),
        " — ",
        text(code, "code"),
        " | ",
        text(fault.title.title(), "title"),
        " ]",
    )
    renders = [header, text(fault.message, "message")]
    if fault.hint:
        renders.append(Text.assemble(text(" → ", "hint-arrow"), text(fault.hint, "hint")))
    return Group(*renders)


class ArgumentException(Exception):
    """
    base class of every error raised by cmdargs.

    a fault is a message plus a frozen mapping of options. subclasses fix the
    default code and title; any option can be overridden at construction.
    """
    __faultcode__ = Unset
    __title__ = "argument error"

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError("fault message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message

    @property
    def code(self):
        return self.options.get("code", type(self).__faultcode__)

    @property
    def title(self):
        return self.options.get("title", type(self).__title__)

    @property
    def hint(self):
        return self.options.get("hint")

    @property
    def argument(self):
        """the declaration involved, or None for registry-level faults."""
        return self.options.get("argument")

    @property
    def token(self):
        """the raw token involved, or None."""
        return self.options.get("token")

    @property
    def index(self):
        """the position of the token in the parsed sequence, when known."""
        return self.options.get("index")

    def __rich__(self):
        return _render(self, "error")


class RegistrationError(ArgumentException):
    __faultcode__ = FaultCode.NAMELESS_ARGUMENT
    __title__ = "nameless argument"


class MissingValueError(ArgumentException):
    __faultcode__ = FaultCode.MISSING_VALUE
    __title__ = "missing value"


class InvalidValueError(ArgumentException):
    __faultcode__ = FaultCode.INVALID_VALUE
    __title__ = "invalid value"


class UnknownArgumentError(ArgumentException):
    __faultcode__ = FaultCode.UNKNOWN_ARGUMENT
    __title__ = "unknown argument"

    @property
    def suggestions(self):
        return tuple(self.options.get("suggestions", ()))


class ConversionError(ArgumentException):
    """
    conversion-layer failure: `raw` could not be read as `type`.

    internal to the conversion layer; declarations wrap it into
    InvalidValueError (keeping it as __cause__).
    """
    __faultcode__ = FaultCode.CONVERSION_FAILURE
    __title__ = "conversion failure"

    @property
    def type(self):
        return self.options.get("type")


class ArgumentWarning(Warning):
    """
    base class of every warning issued by cmdargs.

    same shape as ArgumentException; issued through warnings.warn so hosts
    can filter, record, or escalate them with the standard warnings filters.
    """
    __faultcode__ = Unset
    __title__ = "argument warning"

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError("fault message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message

    code = ArgumentException.code
    title = ArgumentException.title
    hint = ArgumentException.hint
    argument = ArgumentException.argument

    def __rich__(self):
        return _render(self, "warning")


class DuplicateNameWarning(ArgumentWarning):
    __faultcode__ = FaultCode.DUPLICATED_NAME
    __title__ = "duplicated name"

    @property
    def name(self):
        return self.options.get("name")

    @property
    def previous(self):
        """the declaration that lost the name."""
        return self.options.get("previous")


__all__ = (
    "FaultCode",
    "ArgumentException",
    "RegistrationError",
    "MissingValueError",
    "InvalidValueError",
    "UnknownArgumentError",
    "ConversionError",
    "ArgumentWarning",
    "DuplicateNameWarning",
)
