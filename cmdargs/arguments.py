r"""
cmdargs argument declarations.

Overview
- Variants (closed set, see Variant)
  • FlagArg: presence-only boolean switch; False until its name appears.
  • ValueArg[_T]: named argument that must be followed by a value whenever
    its name appears; optionally carries a default.
  • ImplicitArg[_T]: named argument whose value may be omitted; the declared
    set-value is used then. An optional absent-default applies when the name
    never appears.

- Dispatch
  • Each operation that differs per variant (parse, helpstring) is a table
    keyed by Variant. The variant classes are sealed by the ArgumentType
    metaclass, so the set of behaviors is exactly the tables' keys.

- State (read-only properties)
  • value: the typed payload.
  • isdefined: a value is held, from the command line or from a default.
  • isset: the value came from an actual command-line token (implies isdefined).
  • fault: the fault raised by the last parse() call, None otherwise.

Metadata (sanitized on construction)
- short/long: names without their prefix ("v", "val1") or with it ("-v",
  "--val1"); normalized to "-v" and "--val1". Leading dashes are replaced by
  the slot's own prefix ("--x" as a short name is "-x"). Empty means "no such name",
  and at least one must be given (RegistrationError otherwise).
- descr: free text (may be empty).
- visibility: Visibility.VISIBLE | HIDDEN | INVISIBLE.
- type: element type; inferred from the default when omitted, else str.
  Must be registered in cmdargs.conversions.
  Declared defaults and set-values must be instances of it; an int widens to
  float, complex, Fraction or Decimal.

Quick example:
    >>> val1 = ValueArg("v", "val1", "value argument 1", 3.14)
    >>> val1.parse("2.5")
    >>> val1.value, val1.isset
    (2.5, True)
    >>> imp1 = ImplicitArg("i", "imp1", "implicit argument 1", 10)
    >>> imp1.parse()
    >>> imp1.value, imp1.isset
    (10, False)

Public API
- Enums: Variant, Visibility
- Classes: Argument (common base), FlagArg, ValueArg, ImplicitArg
- Construction: build(variant, ...) -> Built(argument, fault)
"""
import builtins
import functools
import operator
import re
from collections import namedtuple
from decimal import Decimal
from enum import Enum
from fractions import Fraction

from . import conversions
from .faults import *
from .utils import *

PREFIX = "-"


class Variant(Enum):
    FLAG = "flag"
    VALUE = "value"
    IMPLICIT = "implicit"


class Visibility(Enum):
    """
    where a declaration shows up in the help listing.

    - VISIBLE: the allowed-arguments section.
    - HIDDEN: the hidden-arguments section, rendered only on request.
    - INVISIBLE: never listed; still parsed.
    """
    VISIBLE = "visible"
    HIDDEN = "hidden"
    INVISIBLE = "invisible"


class ArgumentType(type):
    """
    Metaclass that makes declarations introspectable and closes the variant set.

    Responsibilities
    - Derive __typename__ from the class name ("ValueArg" -> "value-arg") for
      messages.
    - Expose every name in __introspectable__ as a read-only property over its
      "_name" backing field (see mirror()).
    - Provide stable __repr__/__rich_repr__ for diagnostics.
    - Seal classes created with `sealed=True` against subclassing; the three
      variant classes are sealed, so no fourth variant can appear.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, *, sealed=False, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
            **options,
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        if sealed:
            @rename("__init_subclass__")
            def __init_subclass__(cls, **options):  # NOQA: F-841
                raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
            self.__init_subclass__ = classmethod(__init_subclass__)

        return self


_WIDENED = (float, complex, Fraction, Decimal)


def _prefixed(name, prefix, /):
    if not isinstance(name, str):
        raise TypeError("argument names must be strings")
    if not (name := name.strip().lstrip(PREFIX)):
        return ""
    return prefix + name


def _sanitize_names(cls, metadata, /):
    """
    Internal: normalize short/long names, and report a nameless declaration.

    Returns the RegistrationError to raise (without raising it) when both
    names are empty, None otherwise.
    """
    metadata["short"] = _prefixed(metadata["short"], PREFIX)
    metadata["long"] = _prefixed(metadata["long"], PREFIX * 2)

    if not (metadata["short"] or metadata["long"]):
        return RegistrationError(
            "%s needs a short or a long name" % cls.__typename__,
            hint="give at least one of the two names, e.g. %s('v', 'verbose')" % cls.__name__,
        )
    return None


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate the description and the visibility.
    """
    if not isinstance(descr := metadata["descr"], str):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    metadata["descr"] = descr.strip()

    if not isinstance(visibility := metadata["visibility"], Visibility):
        try:
            visibility = Visibility(visibility)
        except ValueError:
            raise ValueError(f"{cls.__typename__} 'visibility' must be one of "
                             f"{", ".join(repr(x.value) for x in Visibility)}") from None
    metadata["visibility"] = visibility


def _sanitize_typed_metadata(cls, metadata, /):
    """
    Internal: resolve the element type.

    An explicit type wins; otherwise the type of the first declared default
    (the default for values, the set-value for implicits); otherwise str.
    Declared defaults must be instances of the type; an int is widened where
    a float, complex, Fraction or Decimal is expected.
    """
    type = metadata["type"]
    if type is Unset:
        seed = coalesce(metadata.get("setvalue", Unset), metadata.get("default", Unset))
        type = builtins.type(seed) if seed is not Unset else str

    if not isinstance(type, builtins.type):
        raise TypeError(f"{cls.__typename__} 'type' must be a type")
    if not conversions.supported(type):
        raise TypeError(f"{cls.__typename__} element type {type.__name__!r} has no registered converter")
    metadata["type"] = type

    for key in ("default", "setvalue"):
        if (value := metadata.get(key, Unset)) is not Unset:
            metadata[key] = _typed(cls, key, value, type)


def _typed(cls, key, value, type, /):
    if isinstance(value, type) and (type is bool or not isinstance(value, bool)):
        return value
    if type in _WIDENED and isinstance(value, int) and not isinstance(value, bool):
        return type(value)
    raise TypeError(f"{cls.__typename__} '{key}' must be a {type.__name__}, not {builtins.type(value).__name__}")


class Argument[_T](metaclass=ArgumentType):
    """
    Common base of the three declaration variants.

    Holds identity (names, descr, visibility), the element type, the declared
    defaults, and the post-parse state. Per-variant behavior is looked up in
    the dispatch tables by `variant`; do not subclass outside this module.
    """

    __introspectable__ = (
        "short",
        "long",
        "descr",
        "visibility",
        "type",
        "default",
        "value",
        "isdefined",
        "isset",
    )

    variant = None

    def __new__(cls, metadata, /):
        if cls.variant is None:
            raise TypeError(f"{cls.__typename__} is abstract; declare a FlagArg, ValueArg, or ImplicitArg")
        if fault := _sanitize_names(cls, metadata):
            raise fault
        _sanitize_metadata(cls, metadata)
        _sanitize_typed_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self.reset()
        return self

    @property
    def names(self):
        """the non-empty prefixed names, short first."""
        return tuple(name for name in (self._short, self._long) if name)

    @property
    def label(self):
        """display name used in messages: "-v,--val1", "--val2", "-x"."""
        return ",".join(self.names)

    @property
    def fault(self):
        return self._fault

    @property
    def failed(self):
        """whether the last parse() call raised."""
        return self._fault is not None

    @property
    def helpstring(self):
        """the default-value suffix shown after the names in help listings."""
        return _helpstrings[self.variant](self)

    def reset(self):
        """
        restore the state right after construction.

        the value becomes the declared default (the zero value of the element
        type when there is none), isdefined tracks whether a default was
        declared, isset is cleared, and so is the recorded fault.
        """
        self._value = coalesce(self._default, conversions.zero(self._type))
        self._isdefined = self._default is not Unset
        self._isset = False
        self._fault = None

    def parse(self, token=None, /, *, index=None):
        """
        update this declaration for one occurrence of its name.

        `token` is the text following the name, or None when there is none.
        An empty token, or one that starts with the name-prefix character, is
        another argument's name, and also counts as no value.

        `index` is the position of the name in the scanned sequence; when
        given, fault messages lead with it ("at second position").

        raises MissingValueError or InvalidValueError; the fault is also
        recorded in `fault` and the state mutated so far is kept.
        """
        if token is not None and not isinstance(token, str):
            raise TypeError("parse() argument must be a string or None")
        if token is not None and (not token or token.startswith(PREFIX)):
            token = None

        self._fault = None
        try:
            _parsers[self.variant](self, token, index)
        except ArgumentException as fault:
            self._fault = fault
            raise

    def _convert(self, token, index):
        try:
            return conversions.convert(token, self._type)
        except ConversionError as exception:
            raise InvalidValueError(
                "invalid value %r for argument %r%s" % (token, self.label, _where(index)),
                argument=self,
                token=token,
                index=index,
                hint="%s expects a %s value" % (self.label, self._type.__name__),
            ) from exception


class FlagArg(Argument[bool], sealed=True):
    """
    Presence-only boolean switch.

    Defined from construction with value False; becomes True (and set) when
    its name appears. A token following the name is never consumed.
    """

    variant = Variant.FLAG

    def __new__(cls, short="", long="", descr="", *, visibility=Visibility.VISIBLE):
        return super().__new__(cls, {
            "short": short,
            "long": long,
            "descr": descr,
            "visibility": visibility,
            "type": bool,
            "default": False,
        })


class ValueArg[_T](Argument[_T], sealed=True):
    """
    Named argument that requires a value whenever its name appears.

    With a default it is defined from construction; without one it stays
    undefined (holding the zero value of its type) until parsed.
    """

    variant = Variant.VALUE

    def __new__(cls, short="", long="", descr="", default=Unset, *, type=Unset, visibility=Visibility.VISIBLE):
        return super().__new__(cls, {
            "short": short,
            "long": long,
            "descr": descr,
            "visibility": visibility,
            "type": type,
            "default": default,
        })


class ImplicitArg[_T](Argument[_T], sealed=True):
    """
    Named argument with an implicit value.

    `setvalue` is used when the name appears without a value (defined, not
    set); `default` is used when the name never appears (defined only when
    declared).
    """

    __introspectable__ = Argument.__introspectable__ + ("setvalue",)

    variant = Variant.IMPLICIT

    def __new__(cls, short, long, descr, setvalue, default=Unset, *, type=Unset, visibility=Visibility.VISIBLE):
        if setvalue is Unset:
            raise TypeError(f"{cls.__typename__} requires a set-value")
        return super().__new__(cls, {
            "short": short,
            "long": long,
            "descr": descr,
            "visibility": visibility,
            "type": type,
            "default": default,
            "setvalue": setvalue,
        })


def _where(index):
    return "" if index is None else " at %s position" % ordinal(index)


def _parse_flag(argument, token, index):
    argument._value = True
    argument._isdefined = True
    argument._isset = True


def _parse_value(argument, token, index):
    if token is None:
        raise MissingValueError(
            "missing value for argument %r%s" % (argument.label, _where(index)),
            argument=argument,
            index=index,
            hint="pass a value after %s" % argument.names[-1],
        )
    argument._value = argument._convert(token, index)
    argument._isdefined = True
    argument._isset = True


def _parse_implicit(argument, token, index):
    if token is None:
        argument._value = argument._setvalue
        argument._isdefined = True
        return
    argument._value = argument._convert(token, index)
    argument._isdefined = True
    argument._isset = True


def _helpstring_flag(argument):
    return ""


def _helpstring_value(argument):
    if argument._default is Unset:
        return ""
    return "=" + conversions.render(argument._default)


def _helpstring_implicit(argument):
    return "=arg(=%s)" % conversions.render(argument._setvalue)


_parsers = {
    Variant.FLAG: _parse_flag,
    Variant.VALUE: _parse_value,
    Variant.IMPLICIT: _parse_implicit,
}

_helpstrings = {
    Variant.FLAG: _helpstring_flag,
    Variant.VALUE: _helpstring_value,
    Variant.IMPLICIT: _helpstring_implicit,
}

_variants = {
    Variant.FLAG: FlagArg,
    Variant.VALUE: ValueArg,
    Variant.IMPLICIT: ImplicitArg,
}


Built = namedtuple("Built", ("argument", "fault"))


def resolve(variant, /):
    """
    Map a Variant member, its value ("flag", ...), or a variant class to the
    variant class.
    """
    if isinstance(variant, builtins.type) and variant in _variants.values():
        return variant
    try:
        return _variants[Variant(variant)]
    except ValueError:
        raise TypeError("unknown argument variant %r" % (variant,)) from None


def build(variant, /, *args, **kwargs):
    """
    Construct a declaration without raising on a missing name.

    Returns Built(argument, None) on success, or Built(None, fault) with the
    RegistrationError describing a nameless declaration. Malformed parameters
    (wrong types, unsupported element type) still raise TypeError/ValueError.
    """
    cls = resolve(variant)
    short = _prefixed(args[0] if len(args) > 0 else kwargs.get("short", ""), PREFIX)
    long = _prefixed(args[1] if len(args) > 1 else kwargs.get("long", ""), PREFIX * 2)
    if not (short or long):
        return Built(None, _sanitize_names(cls, {"short": short, "long": long}))
    return Built(cls(*args, **kwargs), None)


__all__ = (
    "PREFIX",
    "Variant",
    "Visibility",
    "Argument",
    "FlagArg",
    "ValueArg",
    "ImplicitArg",
    "Built",
    "resolve",
    "build",
)

del ArgumentType
