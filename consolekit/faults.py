"""
consolekit faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain to keep copy consistent and make logs/searches
  predictable.
- ConsoleException: base type that carries message + options and knows how to
  render itself in a friendly, lowercased and actionable way.
- The taxonomy:
  • ValidationError            build-time structural violations (also ValueError)
  • NoSuchArgumentError,
    NoSuchOptionError          format lookups (also KeyError)
  • NoSuchCommandError,
    AmbiguousCommandError      command resolution
  • ParseError and subclasses  argument parsing
  • RenderError                irrecoverable layout situations
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Position-first messages for parse errors (“at third position”, etc.).
- Soft but technical language: short titles, one-sentence bodies, a single hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).

Integration
- Builders, the resolver and the parser raise these exceptions synchronously.
- The application run loop catches ConsoleException, attaches the program name
  via copy.replace() and renders it to the error output.
"""
import copy
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - validation (101xx)
      • INVALID_DESCRIPTOR, DUPLICATE_ARGUMENT, ARGUMENT_AFTER_MULTI_VALUED,
        REQUIRED_AFTER_OPTIONAL, DUPLICATE_OPTION, DUPLICATE_COMMAND,
        FROZEN_STATE, INVALID_ROW
    - lookups (102xx)
      • NO_SUCH_ARGUMENT, NO_SUCH_OPTION
    - routing (111xx)
      • UNKNOWN_COMMAND, AMBIGUOUS_COMMAND
    - switches (options) (1111x)
      • MALFORMED_OPTION, UNKNOWN_OPTION, MISSING_VALUE, MISSING_REQUIRED_OPTION,
        INVALID_VALUE
    - positionals (1112x)
      • TOO_MANY_ARGUMENTS, MISSING_REQUIRED_ARGUMENT
    - handlers (1113x)
      • HANDLER_FAILURE
    - rendering (131xx)
      • LAYOUT_OVERFLOW

    normalize() allows the host to remap codes to custom labels while keeping
    code-stability.
    """
    # --- validation errors (10xxx) ---
    INVALID_DESCRIPTOR          = 10101
    DUPLICATE_ARGUMENT          = 10111
    ARGUMENT_AFTER_MULTI_VALUED = 10112
    REQUIRED_AFTER_OPTIONAL     = 10113
    DUPLICATE_OPTION            = 10121
    DUPLICATE_COMMAND           = 10131
    FROZEN_STATE                = 10141
    INVALID_ROW                 = 10151

    # --- lookup errors (10xxx) ---
    NO_SUCH_ARGUMENT            = 10201
    NO_SUCH_OPTION              = 10202

    # --- routing errors (11xxx) ---
    UNKNOWN_COMMAND             = 11101
    AMBIGUOUS_COMMAND           = 11103

    # --- option errors (11xxx) ---
    MALFORMED_OPTION            = 11111
    UNKNOWN_OPTION              = 11112
    MISSING_VALUE               = 11117
    MISSING_REQUIRED_OPTION     = 11119
    INVALID_VALUE               = 11124

    # --- positional errors (11xxx) ---
    TOO_MANY_ARGUMENTS          = 11121
    MISSING_REQUIRED_ARGUMENT   = 11125

    # --- handler errors (11xxx) ---
    HANDLER_FAILURE             = 11131

    # --- rendering errors (13xxx) ---
    LAYOUT_OVERFLOW             = 13101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ConsoleException(Exception):
    """
    Base class of every consolekit fault.

    The message is positional; everything else travels as keyword options and
    is exposed read-only through self.options. Subclasses provide a default
    fault code and title; both can be overridden per instance.

    Common options
    - code: FaultCode (defaults to the class' __fault__)
    - title: short lowercased title (defaults to the class' __title__)
    - hint: one actionable sentence
    - prog: program name shown in the rendered header
    - colorful: render with the palette (default True)
    """
    __fault__ = FaultCode.HANDLER_FAILURE
    __title__ = "console error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*([] if message is Unset else [message]))
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if self.message is not Unset else ""

    @property
    def code(self):
        return self.options.get("code", type(self).__fault__)

    @property
    def title(self):
        return self.options.get("title", type(self).__title__)

    @property
    def hint(self):
        return self.options.get("hint")

    def segments(self):
        """
        Build the rendered lines of this fault as rich Text objects.

        Layout
        - header: "[ prog — code | Title ]" (program part omitted when unknown)
        - message
        - hint: " → hint" (omitted when there is no hint)
        """
        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(__import__("__main__"), "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment if colorful else Text(fragment.plain)
            return Text(str(fragment), styles[style] if colorful else "")

        parts = ["[ "]
        if prog := self.options.get("prog"):
            parts.extend((text(prog, "prog-name"), " — "))
        parts.extend((
            text(self.code.normalize(), "code"),
            " | ",
            text(self.title.title(), "error-title"),
            " ]",
        ))

        segments = [Text.assemble(*parts), text(self.message if self.message is not Unset else "", "error-message")]
        if self.hint:
            segments.append(Text.assemble(text(" → ", "hint-arrow"), text(self.hint, "hint")))
        return segments

    def __rich__(self):
        return Group(*self.segments())

    def render(self, output, /):
        """
        Write this fault to an Output capability, one segment per line.
        """
        for segment in self.segments():
            output.write(segment.append("\n"))

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ValidationError(ConsoleException, ValueError):
    __fault__ = FaultCode.INVALID_DESCRIPTOR
    __title__ = "invalid definition"


class NoSuchArgumentError(ConsoleException, KeyError):
    __fault__ = FaultCode.NO_SUCH_ARGUMENT
    __title__ = "no such argument"


class NoSuchOptionError(ConsoleException, KeyError):
    __fault__ = FaultCode.NO_SUCH_OPTION
    __title__ = "no such option"


class ResolveError(ConsoleException):
    """
    Base of resolution failures; carries 'token' and 'alternatives'.
    """
    __fault__ = FaultCode.UNKNOWN_COMMAND
    __title__ = "cannot resolve command"

    @property
    def token(self):
        return self.options.get("token")

    @property
    def alternatives(self):
        return tuple(self.options.get("alternatives", ()))


class NoSuchCommandError(ResolveError):
    __fault__ = FaultCode.UNKNOWN_COMMAND
    __title__ = "unknown command"


class AmbiguousCommandError(ResolveError):
    __fault__ = FaultCode.AMBIGUOUS_COMMAND
    __title__ = "ambiguous command"


class ParseError(ConsoleException):
    """
    Base of argument parsing failures; carries 'token' and 'position'.
    """
    __fault__ = FaultCode.MALFORMED_OPTION
    __title__ = "cannot parse arguments"

    @property
    def token(self):
        return self.options.get("token")

    @property
    def position(self):
        return self.options.get("position")


class UnknownOptionError(ParseError):
    __fault__ = FaultCode.UNKNOWN_OPTION
    __title__ = "unknown option"


class MissingValueError(ParseError):
    __fault__ = FaultCode.MISSING_VALUE
    __title__ = "missing option value"


class MalformedOptionError(ParseError):
    __fault__ = FaultCode.MALFORMED_OPTION
    __title__ = "malformed option"


class MissingRequiredArgumentError(ParseError):
    __fault__ = FaultCode.MISSING_REQUIRED_ARGUMENT
    __title__ = "missing required argument"


class MissingRequiredOptionError(ParseError):
    __fault__ = FaultCode.MISSING_REQUIRED_OPTION
    __title__ = "missing required option"


class TooManyArgumentsError(ParseError):
    __fault__ = FaultCode.TOO_MANY_ARGUMENTS
    __title__ = "too many arguments"


class InvalidValueError(ParseError):
    __fault__ = FaultCode.INVALID_VALUE
    __title__ = "invalid value"


class RenderError(ConsoleException):
    __fault__ = FaultCode.LAYOUT_OVERFLOW
    __title__ = "cannot render layout"


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


def replace(fault, /, **options):
    """
    return a copy of the fault with extra options merged in (see __replace__).
    """
    if not isinstance(fault, ConsoleException):
        raise TypeError("replace() argument must be a console exception")
    return copy.replace(fault, **options)


__all__ = (
    "FaultCode",
    "ConsoleException",
    "ValidationError",
    "NoSuchArgumentError",
    "NoSuchOptionError",
    "ResolveError",
    "NoSuchCommandError",
    "AmbiguousCommandError",
    "ParseError",
    "UnknownOptionError",
    "MissingValueError",
    "MalformedOptionError",
    "MissingRequiredArgumentError",
    "MissingRequiredOptionError",
    "TooManyArgumentsError",
    "InvalidValueError",
    "RenderError",
    "getdoc",
    "replace",
)
