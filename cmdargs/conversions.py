r"""
cmdargs type conversion layer.

Overview
- convert(raw, type) turns a raw command-line token into a value of an
  enumerated element type, or raises ConversionError.
- Element types are an explicit registry, not open-ended: a declaration whose
  type is not registered is rejected when it is declared (TypeError), never at
  parse time.

Enumerated types
- str      → identity; every token is accepted.
- bool     → case-insensitive; "true"/"1" → True, "false"/"0" → False.
- int      → r"[+-]?[0-9]+"
- float    → decimal literal with optional exponent ("3.14", ".5", "1e-3").
- Decimal  → same lexical form as float, exact value.
- Fraction → integer, "p/q", or the float form.
- complex  → Python complex literal ("1+2j", "3j", "-1.5").

Strictness
- The whole token must be the literal. Python's numeric constructors accept
  surrounding whitespace and digit-grouping underscores, and some accept
  non-ASCII digits; all of those are rejected here so that "12abc", " 12" or
  "1_0" never convert.
- float and complex results must be finite: "1e999" overflows to inf and is
  rejected like "inf" itself.

Extending
- register(type, converter, zero=None) adds an element type; the converter
  signals bad input by raising ValueError, TypeError, or ArithmeticError.
"""
import builtins
import cmath
import math
import re
from decimal import Decimal
from fractions import Fraction

from .faults import ConversionError
from .utils import rename

_converters = {}
_zeros = {}

_INTEGER = re.compile(r"[+-]?[0-9]+", re.ASCII)
_DECIMAL = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?", re.ASCII)
_RATIONAL = re.compile(r"[+-]?[0-9]+/[0-9]+", re.ASCII)
_COMPLEX = re.compile(r"\(?[0-9eEjJ.+-]+\)?", re.ASCII)

_TRUTHS = ("true", "1")
_FALSITIES = ("false", "0")


def register(type, converter, /, *, zero=None):
    """
    register (or replace) the converter for an element type.

    parameters
    - type: the element type declarations will name with `type=`.
    - converter: callable taking the raw token and returning the value.
    - zero: the value a declaration of this type holds before it is defined.

    returns the converter unchanged.
    """
    if not isinstance(type, builtins.type):
        raise TypeError("register() first argument must be a type")
    if not callable(converter):
        raise TypeError("register() second argument must be callable")
    _converters[type] = converter
    _zeros[type] = zero
    return converter


def _enumerated(type, zero):
    def decorator(converter):
        return register(type, rename(converter, "convert_" + type.__name__.lower()), zero=zero)
    return decorator


def _literal(pattern, raw):
    if not pattern.fullmatch(raw):
        raise ValueError("not a literal")


@_enumerated(str, "")
def _(raw):
    return raw


@_enumerated(bool, False)
def _(raw):
    if (lowered := raw.lower()) in _TRUTHS:
        return True
    if lowered in _FALSITIES:
        return False
    raise ValueError("not a boolean")


@_enumerated(int, 0)
def _(raw):
    _literal(_INTEGER, raw)
    return int(raw)


@_enumerated(float, 0.0)
def _(raw):
    _literal(_DECIMAL, raw)
    if not math.isfinite(value := float(raw)):
        raise ValueError("not a finite number")
    return value


@_enumerated(Decimal, Decimal(0))
def _(raw):
    _literal(_DECIMAL, raw)
    return Decimal(raw)


@_enumerated(Fraction, Fraction(0))
def _(raw):
    if not _RATIONAL.fullmatch(raw):
        _literal(_DECIMAL, raw)
    return Fraction(raw)


@_enumerated(complex, 0j)
def _(raw):
    _literal(_COMPLEX, raw)
    if not cmath.isfinite(value := complex(raw)):
        raise ValueError("not a finite number")
    return value


def supported(type, /):
    """
    tell whether `type` has a registered converter.
    """
    return type in _converters


def zero(type, /):
    """
    return the value a declaration of `type` holds before it is defined.
    """
    try:
        return _zeros[type]
    except KeyError:
        raise TypeError("unsupported element type %r" % getattr(type, "__name__", type)) from None


def convert(raw, type, /):
    """
    convert a raw token into a value of `type`.

    raises
    - TypeError when `raw` is not a string or `type` is not registered.
    - ConversionError when `raw` cannot be read as `type`; the original
      converter exception is chained as __cause__.
    """
    if not isinstance(raw, str):
        raise TypeError("convert() first argument must be a string")
    try:
        converter = _converters[type]
    except KeyError:
        raise TypeError("unsupported element type %r" % getattr(type, "__name__", type)) from None
    try:
        return converter(raw)
    except (ValueError, TypeError, ArithmeticError) as exception:
        raise ConversionError(
            "couldn't convert %r to type %s" % (raw, type.__name__),
            token=raw,
            type=type,
            hint="pass a %s literal" % type.__name__,
        ) from exception


def render(value, /):
    """
    render a value back to token text (used for help defaults).

    booleans render as "true"/"false" so they read back through convert().
    """
    if isinstance(value, bool):
        return _TRUTHS[0] if value else _FALSITIES[0]
    return str(value)


__all__ = (
    "register",
    "supported",
    "zero",
    "convert",
    "render",
)
