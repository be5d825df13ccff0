r"""
consolekit argument descriptors.

Overview
- Descriptors
  • Argument: positional parameter (required/optional, single or multi-valued).
  • Option: named parameter with a long name and an optional short name.
  • CommandName: a command token plus its aliases.
  • CommandOption: an option-like token that selects a command (e.g., --add/-a).

- Converters
  • boolean(): "", "false", "0", "no", "off" -> False; "true", "1", "yes", "on" -> True.
  • type=bool is mapped to boolean() so "--force=no" reads as expected.

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes the
    fields listed in __introspectable__ as read-only properties.

Metadata (sanitized on construction)
- Names
  • argument names: start with a letter, then letters, digits and hyphens.
  • long option names: at least two characters, same alphabet; a leading "--" is stripped.
  • short option names: a single letter; a leading "-" is stripped.
  • command names and aliases: letters, digits and hyphens.
- description: Unset | str (non-empty after trimming), None when omitted.
- flags: integer bit sets validated against the class constants.
- type: converter callable applied to every bound string.
- nullable: the literal "null" binds None.

Validation highlights
- REQUIRED and OPTIONAL arguments are mutually exclusive; REQUIRED arguments
  reject defaults; MULTI_VALUED defaults must be sequences.
- NO_VALUE options cannot be combined with a value flag or MULTI_VALUED and cannot
  carry a default; OPTIONAL_VALUE cannot be combined with MULTI_VALUED.
- PREFER_SHORT_NAME requires a short name.

Quick example:
    >>> from consolekit.arguments import Argument, Option
    >>> Argument("file", Argument.REQUIRED).is_required()
    True
    >>> Option("--count", "-c", Option.REQUIRED_VALUE, type=int).parse_value("3")
    3
"""
import builtins
import functools
import operator
import re
from collections.abc import Sequence

from rich.text import Text

from .faults import FaultCode, ValidationError
from .utils import *


class ArgumentType(type):
    """
    Metaclass that turns descriptors into introspectable value objects.

    Responsibilities
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and help output.
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    """
    __introspectable__ = ()

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
            """
            Return a concise, stable representation with key metadata.

            Example
            - option(long_name='verbose', short_name='v', ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers.
            """
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def boolean(value, /):
    """
    Convert a command-line string into a bool.

    Accepted spellings
    - False: "", "false", "0", "no", "off"
    - True: "true", "1", "yes", "on"
    bool values pass through unchanged; anything else raises ValueError.
    """
    if isinstance(value, bool):
        return value
    match str(value).lower():
        case "" | "false" | "0" | "no" | "off":
            return False
        case "true" | "1" | "yes" | "on":
            return True
    raise ValueError(f"the value {value!r} cannot be parsed as boolean")


def _typename(converter, /):
    return {
        boolean: "boolean",
        int: "integer",
        float: "float",
        str: "string",
    }.get(converter, getattr(converter, "__name__", "value"))


def _sanitize_name(cls, name, /, *, field="name", minimum=1):
    """
    Internal: validate a name made of letters, digits and hyphens that starts with a letter.
    """
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} {field!r} must be a string")
    elif not name:
        raise ValueError(f"{cls.__typename__} {field!r} cannot be empty")
    elif not name[0].isascii() or not name[0].isalpha():
        raise ValueError(f"{cls.__typename__} {field!r} must start with a letter, got {name!r}")
    elif not re.fullmatch(r"[a-zA-Z0-9-]+", name):
        raise ValueError(f"{cls.__typename__} {field!r} must contain letters, digits and hyphens only, got {name!r}")
    elif len(name) < minimum:
        raise ValueError(f"{cls.__typename__} {field!r} must be at least {minimum} characters long, got {name!r}")
    return name


def _sanitize_short_name(cls, name, /, *, field="short_name"):
    """
    Internal: validate a single-letter short name (a leading "-" is stripped).
    """
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} {field!r} must be a string")
    name = name.removeprefix("-")
    if not re.fullmatch(r"[a-zA-Z]", name):
        raise ValueError(f"{cls.__typename__} {field!r} must be exactly one letter, got {name!r}")
    return name


def _sanitize_long_name(cls, name, /, *, field="long_name"):
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} {field!r} must be a string")
    return _sanitize_name(cls, name.removeprefix("--"), field=field, minimum=2)


def _sanitize_description(cls, description, /):
    """
    Internal: description is Unset (-> None), a non-empty string, or a rich Text.
    """
    if not isinstance(description, str | Text | Unset | None):
        raise TypeError(f"{cls.__typename__} 'description' must be a string")
    elif isinstance(description, str) and not (description := description.strip()):
        raise ValueError(f"{cls.__typename__} 'description' cannot be empty")
    return coalesce(description)


def _sanitize_flags(cls, flags, /, *known):
    if not isinstance(flags, int) or isinstance(flags, bool):
        raise TypeError(f"{cls.__typename__} 'flags' must be an integer")
    if flags & ~functools.reduce(operator.or_, known, 0):
        raise ValueError(f"{cls.__typename__} 'flags' contains unknown bits: {flags!r}")
    return flags


def _sanitize_converter(cls, converter, /):
    if not callable(converter):
        raise TypeError(f"{cls.__typename__} 'type' must be callable")
    return boolean if converter is bool else converter


def _parse(self, value, /):
    """
    Internal: shared parse_value() of Argument and Option.
    """
    if self._nullable and (value is None or value == "null"):
        return None
    try:
        return self._type(value)
    except (TypeError, ValueError) as error:
        raise ValueError(f"the value {value!r} cannot be parsed as {_typename(self._type)}") from error


def _sanitize_default(cls, default, /, *, multi_valued):
    if not multi_valued:
        return coalesce(default)
    if default is Unset or default is None:
        return []
    if isinstance(default, str | bytes) or not isinstance(default, Sequence):
        raise ValidationError(
            f"the default value of a multi-valued {cls.__typename__} must be a sequence, got {default!r}",
            code=FaultCode.INVALID_DESCRIPTOR,
        )
    return list(default)


class Argument(metaclass=ArgumentType):
    """
    Positional parameter descriptor.

    Flags
    - REQUIRED: the argument must be given; no default is accepted.
    - OPTIONAL: the argument may be omitted (the default).
    - MULTI_VALUED: collects every remaining positional token; the default must be
      a sequence and an omitted default becomes [].

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    """
    REQUIRED = 1
    OPTIONAL = 2
    MULTI_VALUED = 4

    __introspectable__ = (
        "name",
        "flags",
        "description",
        "default",
        "type",
        "nullable",
    )

    def __init__(self, name, /, flags=0, description=Unset, default=Unset, *, type=str, nullable=False):
        cls = builtins.type(self)
        flags = _sanitize_flags(cls, flags, cls.REQUIRED, cls.OPTIONAL, cls.MULTI_VALUED)
        if flags & cls.REQUIRED and flags & cls.OPTIONAL:
            raise ValidationError(
                f"{cls.__typename__} flags REQUIRED and OPTIONAL cannot be combined",
                code=FaultCode.INVALID_DESCRIPTOR,
            )
        if not flags & (cls.REQUIRED | cls.OPTIONAL):
            flags |= cls.OPTIONAL

        self._name = _sanitize_name(cls, name)
        self._flags = flags
        self._description = _sanitize_description(cls, description)
        self._type = _sanitize_converter(cls, type)
        self._nullable = bool(nullable)

        if flags & cls.REQUIRED and default is not Unset:
            raise ValidationError(
                f"required {cls.__typename__} {name!r} does not accept a default value",
                code=FaultCode.INVALID_DESCRIPTOR,
            )
        self._default = _sanitize_default(cls, default, multi_valued=bool(flags & cls.MULTI_VALUED))

    def is_required(self):
        return bool(self._flags & Argument.REQUIRED)

    def is_optional(self):
        return bool(self._flags & Argument.OPTIONAL)

    def is_multi_valued(self):
        return bool(self._flags & Argument.MULTI_VALUED)

    def parse_value(self, value, /):
        """
        Convert a raw string with the descriptor's converter.

        Raises ValueError when the converter rejects the value.
        """
        return _parse(self, value)


class Option(metaclass=ArgumentType):
    """
    Named parameter descriptor (--long-name / -s).

    Flags
    - PREFER_LONG_NAME (default) / PREFER_SHORT_NAME: which name help shows first.
    - NO_VALUE (default): a switch; binds True when given, False otherwise.
    - REQUIRED_VALUE: a value must follow the option.
    - OPTIONAL_VALUE: a value may follow the option; the default is bound otherwise.
    - MULTI_VALUED: each occurrence appends a value (implies REQUIRED_VALUE).
    - REQUIRED: the option itself must be given (value-accepting options only).
    """
    PREFER_LONG_NAME = 1
    PREFER_SHORT_NAME = 2
    NO_VALUE = 4
    REQUIRED_VALUE = 8
    OPTIONAL_VALUE = 16
    MULTI_VALUED = 32
    REQUIRED = 64

    __introspectable__ = (
        "long_name",
        "short_name",
        "flags",
        "description",
        "default",
        "value_name",
        "type",
        "nullable",
    )

    def __init__(
            self,
            long_name,
            short_name=None,
            /,
            flags=0,
            description=Unset,
            default=Unset,
            value_name="...",
            *,
            type=str,
            nullable=False
    ):
        cls = builtins.type(self)
        flags = _sanitize_flags(
            cls, flags,
            cls.PREFER_LONG_NAME, cls.PREFER_SHORT_NAME,
            cls.NO_VALUE, cls.REQUIRED_VALUE, cls.OPTIONAL_VALUE, cls.MULTI_VALUED, cls.REQUIRED,
        )
        self._long_name = _sanitize_long_name(cls, long_name)
        self._short_name = None if short_name is None else _sanitize_short_name(cls, short_name)

        def reject(message):
            raise ValidationError(f"{cls.__typename__} {self._long_name!r}: {message}", code=FaultCode.INVALID_DESCRIPTOR)

        if flags & cls.NO_VALUE:
            if flags & cls.REQUIRED_VALUE:
                reject("flags NO_VALUE and REQUIRED_VALUE cannot be combined")
            if flags & cls.OPTIONAL_VALUE:
                reject("flags NO_VALUE and OPTIONAL_VALUE cannot be combined")
            if flags & cls.MULTI_VALUED:
                reject("flags NO_VALUE and MULTI_VALUED cannot be combined")
        if flags & cls.OPTIONAL_VALUE and flags & cls.MULTI_VALUED:
            reject("flags OPTIONAL_VALUE and MULTI_VALUED cannot be combined")
        if flags & cls.REQUIRED_VALUE and flags & cls.OPTIONAL_VALUE:
            reject("flags REQUIRED_VALUE and OPTIONAL_VALUE cannot be combined")
        if flags & cls.PREFER_LONG_NAME and flags & cls.PREFER_SHORT_NAME:
            reject("flags PREFER_LONG_NAME and PREFER_SHORT_NAME cannot be combined")

        if not flags & (cls.NO_VALUE | cls.REQUIRED_VALUE | cls.OPTIONAL_VALUE | cls.MULTI_VALUED):
            flags |= cls.NO_VALUE
        if flags & cls.MULTI_VALUED and not flags & cls.REQUIRED_VALUE:
            flags |= cls.REQUIRED_VALUE
        if not flags & (cls.PREFER_LONG_NAME | cls.PREFER_SHORT_NAME):
            flags |= cls.PREFER_LONG_NAME
        if flags & cls.PREFER_SHORT_NAME and self._short_name is None:
            reject("flag PREFER_SHORT_NAME requires a short name")

        if flags & cls.NO_VALUE:
            if default is not Unset:
                reject("options with NO_VALUE cannot carry a default value")
            if flags & cls.REQUIRED:
                reject("options with NO_VALUE cannot be required")
        if flags & cls.REQUIRED and default is not Unset:
            reject("required options do not accept a default value")

        if not isinstance(value_name, str):
            raise TypeError(f"{cls.__typename__} 'value_name' must be a string")
        elif not value_name:
            raise ValueError(f"{cls.__typename__} 'value_name' cannot be empty")

        self._flags = flags
        self._description = _sanitize_description(cls, description)
        self._value_name = value_name
        self._type = _sanitize_converter(cls, type)
        self._nullable = bool(nullable)
        self._default = _sanitize_default(cls, default, multi_valued=bool(flags & cls.MULTI_VALUED))

    @property
    def preferred_name(self):
        """
        The name shown first in help, including its dash prefix.
        """
        if self.is_short_name_preferred():
            return "-" + self._short_name
        return "--" + self._long_name

    @property
    def alternative_name(self):
        """
        The other name (with dash prefix), or None when there is none.
        """
        if self._short_name is None:
            return None
        if self.is_short_name_preferred():
            return "--" + self._long_name
        return "-" + self._short_name

    def accepts_value(self):
        return not self._flags & Option.NO_VALUE

    def is_value_required(self):
        return bool(self._flags & Option.REQUIRED_VALUE)

    def is_value_optional(self):
        return bool(self._flags & Option.OPTIONAL_VALUE)

    def is_multi_valued(self):
        return bool(self._flags & Option.MULTI_VALUED)

    def is_required(self):
        return bool(self._flags & Option.REQUIRED)

    def is_long_name_preferred(self):
        return bool(self._flags & Option.PREFER_LONG_NAME)

    def is_short_name_preferred(self):
        return bool(self._flags & Option.PREFER_SHORT_NAME)

    def parse_value(self, value, /):
        """
        Convert a raw string with the descriptor's converter.

        Raises ValueError when the converter rejects the value.
        """
        return _parse(self, value)


class CommandName(metaclass=ArgumentType):
    """
    A command token and its aliases.

    str() gives the canonical name; match() accepts the name or any alias.
    """
    __introspectable__ = (
        "string",
        "aliases",
    )

    def __init__(self, string, /, aliases=()):
        cls = builtins.type(self)
        for name in (string, *aliases):
            if not isinstance(name, str):
                raise TypeError(f"{cls.__typename__} names must be strings")
            elif not re.fullmatch(r"[a-zA-Z0-9-]+", name):
                raise ValueError(f"{cls.__typename__} names must contain letters, digits and hyphens only, got {name!r}")
        if len({string, *aliases}) != len(aliases) + 1:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        self._string = string
        self._aliases = tuple(aliases)

    def match(self, string, /):
        return string == self._string or string in self._aliases

    def __str__(self):
        return self._string


class CommandOption(metaclass=ArgumentType):
    """
    An option-like token that selects a command (e.g., `server --add`).

    Aliases of one letter are short aliases, longer ones long aliases; dash
    prefixes are stripped. match() takes bare names (without dashes).
    """
    PREFER_LONG_NAME = Option.PREFER_LONG_NAME
    PREFER_SHORT_NAME = Option.PREFER_SHORT_NAME

    __introspectable__ = (
        "long_name",
        "short_name",
        "long_aliases",
        "short_aliases",
        "flags",
        "description",
    )

    def __init__(self, long_name, short_name=None, /, aliases=(), flags=0, description=Unset):
        cls = builtins.type(self)
        flags = _sanitize_flags(cls, flags, cls.PREFER_LONG_NAME, cls.PREFER_SHORT_NAME)
        self._long_name = _sanitize_long_name(cls, long_name)
        self._short_name = None if short_name is None else _sanitize_short_name(cls, short_name)

        long_aliases, short_aliases = [], []
        for alias in aliases:
            if not isinstance(alias, str):
                raise TypeError(f"{cls.__typename__} aliases must be strings")
            bare = alias.removeprefix("--") if alias.startswith("--") else alias.removeprefix("-")
            if len(bare) == 1:
                short_aliases.append(_sanitize_short_name(cls, bare, field="aliases"))
            else:
                long_aliases.append(_sanitize_long_name(cls, bare, field="aliases"))

        if flags & cls.PREFER_LONG_NAME and flags & cls.PREFER_SHORT_NAME:
            raise ValidationError(
                f"{cls.__typename__} flags PREFER_LONG_NAME and PREFER_SHORT_NAME cannot be combined",
                code=FaultCode.INVALID_DESCRIPTOR,
            )
        if not flags & (cls.PREFER_LONG_NAME | cls.PREFER_SHORT_NAME):
            flags |= cls.PREFER_LONG_NAME
        if flags & cls.PREFER_SHORT_NAME and self._short_name is None:
            raise ValidationError(
                f"{cls.__typename__} {self._long_name!r}: flag PREFER_SHORT_NAME requires a short name",
                code=FaultCode.INVALID_DESCRIPTOR,
            )

        self._long_aliases = tuple(long_aliases)
        self._short_aliases = tuple(short_aliases)
        self._flags = flags
        self._description = _sanitize_description(cls, description)

    @property
    def long_names(self):
        """
        The long name followed by the long aliases (without dashes).
        """
        return (self._long_name, *self._long_aliases)

    @property
    def short_names(self):
        return ((self._short_name,) if self._short_name else ()) + self._short_aliases

    @property
    def preferred_name(self):
        if self.is_short_name_preferred():
            return "-" + self._short_name
        return "--" + self._long_name

    def is_long_name_preferred(self):
        return bool(self._flags & CommandOption.PREFER_LONG_NAME)

    def is_short_name_preferred(self):
        return bool(self._flags & CommandOption.PREFER_SHORT_NAME)

    def match(self, string, /):
        return string in self.long_names or string in self.short_names

    def __str__(self):
        return self._long_name


__all__ = (
    # Descriptors
    "Argument",
    "Option",
    "CommandName",
    "CommandOption",

    # Converters
    "boolean",
)

# The metaclass is an implementation detail of this module.
del ArgumentType
