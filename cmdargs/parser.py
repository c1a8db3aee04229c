"""
cmdargs registry: declare, parse, and describe named arguments.

What this module provides
- ArgParser: owns every declaration, indexes them by "-short" and "--long"
  name, scans an argv-like token sequence, and renders a help listing.

Parsing rules
- Index 0 is the program path and is always skipped; empty tokens are skipped.
- A token equal to a declared name dispatches to that declaration with the
  next token as its value, unless there is no next token or it starts with
  "-" (then the value is absent).
- Matching is exact: no abbreviations and no "--name=value" splitting.
- Unmatched tokens are ignored, unless the parser is strict: then any token
  that is neither a name nor the value taken by the preceding name raises
  UnknownArgumentError with close-match suggestions.
- The first fault aborts the pass; declarations keep what earlier tokens set.
- Last occurrence wins; declarations are not reset between passes (call
  reset() for a fresh pass).

Help layout
    [[Allowed Arguments]]
      -h, --help            prints a help message
      -v, --val1=3.14       value argument 1
          --val2            value argument 2
      -i, --imp1=arg(=10)   implicit argument 1
    [[Hidden Arguments]]
      ...

  Column widths are computed over the union of the sections being rendered,
  so visible and hidden rows line up. Invisible declarations never appear.
  A name taken over by a later declaration is dropped from the earlier row,
  and a declaration left without names is not listed.

Quick start
    from cmdargs import ArgParser, FlagArg, ValueArg, ImplicitArg

    parser = ArgParser()
    helpflag = parser.add(FlagArg, "h", "help", "prints a help message")
    val1 = parser.add(ValueArg, "v", "val1", "value argument 1", 3.14)
    imp1 = parser.add(ImplicitArg, "i", "imp1", "implicit argument 1", 10)
    parser.parse(sys.argv)
    if helpflag.value:
        parser.printhelp()
"""
import difflib
import logging
import warnings
from collections import defaultdict
from types import MappingProxyType

from rich.console import Console
from rich.text import Text

from .arguments import PREFIX, Variant, Visibility, build
from .faults import *
from .utils import ordinal

logger = logging.getLogger(__name__)

_SECTIONS = {
    Visibility.VISIBLE: "Allowed Arguments",
    Visibility.HIDDEN: "Hidden Arguments",
}

_INDENT = 2
_GUTTER = 2


class ArgParser:
    """
    Registry and scanner for named arguments.

    Parameters
    - strict: bool
      Report unmatched tokens with UnknownArgumentError instead of ignoring them.
    - colorful: bool
      Style the rich rendering of the help listing (render()/printhelp()).
      helpmessage() is always plain text.
    """

    def __init__(self, *, strict=False, colorful=True):
        self.strict = bool(strict)
        self.colorful = bool(colorful)
        self._arguments = []
        self._switches = {}
        self._sections = {visibility: [] for visibility in _SECTIONS}

    @property
    def arguments(self):
        """every registered declaration, in registration order."""
        return tuple(self._arguments)

    @property
    def switches(self):
        """read-only view of the name index ("-v"/"--val1" -> declaration)."""
        return MappingProxyType(self._switches)

    @property
    def visible(self):
        return tuple(self._sections[Visibility.VISIBLE])

    @property
    def hidden(self):
        return tuple(self._sections[Visibility.HIDDEN])

    def add(self, variant, /, *args, **kwargs):
        """
        declare an argument and return it.

        `variant` is FlagArg, ValueArg or ImplicitArg (or the matching Variant
        member); the remaining parameters go to its constructor.

        raises RegistrationError when both names are empty; nothing is stored
        then. A name already indexed is taken over by the new declaration and
        a DuplicateNameWarning is issued.
        """
        argument, fault = build(variant, *args, **kwargs)
        if fault is not None:
            raise fault

        for name in argument.names:
            if (previous := self._switches.get(name)) is not None:
                warnings.warn(DuplicateNameWarning(
                    "name %r of %r now refers to %r" % (name, previous.label, argument.label),
                    name=name,
                    argument=argument,
                    previous=previous,
                    hint="rename one of the two declarations",
                ), stacklevel=2)
            self._switches[name] = argument

        self._arguments.append(argument)
        if argument.visibility in self._sections:
            self._sections[argument.visibility].append(argument)

        logger.debug("registered %s %r (%s)", argument.variant.value, argument.label, argument.visibility.value)
        return argument

    def get(self, name, default=None, /):
        """look a declaration up by its prefixed name."""
        return self._switches.get(name, default)

    def __getitem__(self, name):
        return self._switches[name]

    def __contains__(self, name):
        return name in self._switches

    def __iter__(self):
        return iter(self._arguments)

    def __len__(self):
        return len(self._arguments)

    def reset(self):
        """restore every declaration to its construction state."""
        for argument in self._arguments:
            argument.reset()

    def parse(self, tokens, /):
        """
        scan argv-like tokens and dispatch every declared name.

        returns the parser itself. raises MissingValueError or
        InvalidValueError from the matched declaration, and
        UnknownArgumentError in strict mode.
        """
        tokens = list(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() tokens must be strings")

        consumed = set()
        for index in range(1, len(tokens)):
            if not (token := tokens[index]):
                continue

            if (argument := self._switches.get(token)) is None:
                if self.strict and index not in consumed:
                    self._unknown(token, index)
                continue

            value = tokens[index + 1] if index + 1 < len(tokens) else None
            if value is not None and (not value or value.startswith(PREFIX)):
                value = None

            logger.debug("dispatching %r at index %d with value %r", token, index, value)
            argument.parse(value, index=index)
            if value is not None and argument.variant is not Variant.FLAG:
                consumed.add(index + 1)

        return self

    def _unknown(self, token, index):
        suggestions = difflib.get_close_matches(token, self._switches.keys(), 5)
        try:
            hint = "did you mean %r?" % suggestions[0]
        except IndexError:
            hint = "see the help listing for the allowed arguments"
        raise UnknownArgumentError(
            "unknown argument %r at %s position" % (token, ordinal(index)),
            token=token,
            index=index,
            suggestions=suggestions,
            hint=hint,
        )

    def _styler(self):
        styles = defaultdict(str, {
            "section-label": "bold #FFFFFF",
            "short-name": "bold #22C55E",
            "long-name": "bold #00E6FF",
            "default": "bold #FFD600",
            "description": "#9CA3AF",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self.colorful else ""

        return styler

    def render(self, hidden=False):
        """
        build the help listing as a rich Text.

        the visible section is always rendered; the hidden section follows
        when `hidden` is true. Widths are shared by both sections.
        """
        styler = self._styler()
        sections = [Visibility.VISIBLE] + [Visibility.HIDDEN] * bool(hidden)
        rows = {section: self._rows(section) for section in sections}
        every = [row for section in sections for row in rows[section]]

        shortwidth = max((len(short) for _, short, _ in every), default=0)
        longwidth = max((len(long) for _, _, long in every), default=0)
        defaultwidth = max((len(argument.helpstring) for argument, _, _ in every), default=0)
        separator = _GUTTER if shortwidth and longwidth else 0
        column = shortwidth + separator + longwidth + defaultwidth

        text = Text()
        for section in sections:
            text.append("[[%s]]" % _SECTIONS[section], styler("section-label")).append("\n")
            for argument, short, long in rows[section]:
                line = Text(" " * _INDENT)
                line.append(short.rjust(shortwidth), styler("short-name"))
                if long:
                    line.append(", " if short else " " * separator)
                    line.append(long, styler("long-name"))
                line.append(argument.helpstring, styler("default"))
                if argument.descr:
                    line.append(" " * (_INDENT + column - len(line) + _GUTTER))
                    line.append(argument.descr, styler("description"))
                text.append(line).append("\n")
        return text

    def _rows(self, section):
        """
        (argument, short, long) per listed declaration of `section`.

        names taken over by a later declaration are left out, and so are
        declarations that lost both of them.
        """
        rows = []
        for argument in self._sections[section]:
            short, long = (name if self._switches.get(name) is argument else "" for name in (argument.short, argument.long))
            if short or long:
                rows.append((argument, short, long))
        return rows

    def helpmessage(self, hidden=False):
        """return the help listing as plain text (one line per declaration)."""
        return self.render(hidden).plain

    def printhelp(self, hidden=False, *, console=None):
        """print the help listing with rich (stdout unless a console is given)."""
        (console or Console()).print(self.render(hidden), end="")

    def __repr__(self):
        return "%s(arguments=%d, strict=%r)" % (type(self).__name__, len(self._arguments), self.strict)


__all__ = (
    "ArgParser",
)
