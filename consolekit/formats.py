"""
consolekit argument formats.

Scope
- ArgsFormat: immutable grammar of one command node. It is made of
  • ordered command names (CommandName),
  • ordered command options (CommandOption),
  • options keyed by long name (short names resolve uniquely),
  • ordered positional arguments,
  • an optional base format (the parent node's grammar).
- ArgsFormatBuilder: mutable buffer that validates every addition immediately
  and freezes on get_format().

Conventions
- Every query takes include_base=True by default. The base is consulted, never
  copied: command names and arguments list base entries first, options and
  command options list own entries first.
- Names can be given with or without dash prefixes ("--verbose", "verbose", "-v", "v").
- Argument lookups accept a name or a 0-based position over arguments(include_base).

Validation (raised as ValidationError)
- duplicate argument name (own or base),
- an argument after a multi-valued one,
- a required argument after an optional one,
- a long or short name used twice across options and command options,
- any mutation of a frozen builder.
"""
import copy
import math
from collections.abc import Iterable

from .arguments import *
from .faults import FaultCode, NoSuchArgumentError, NoSuchOptionError, ValidationError


def _bare(name, /):
    if not isinstance(name, str):
        raise TypeError(f"option names must be strings, got {type(name).__name__}")
    if not (name := name.removeprefix("--") if name.startswith("--") else name.removeprefix("-")):
        raise ValueError("option names cannot be empty")
    return name


class _Queries:
    """
    Read-only queries shared by ArgsFormat and ArgsFormatBuilder.

    Subclasses hold _base, _command_names (list), _command_options (dict by long
    name), _command_options_by_short_name, _arguments (dict by name), _options
    (dict by long name) and _options_by_short_name.
    """

    @property
    def base(self):
        return self._base

    # command names

    def command_names(self, include_base=True):
        names = list(self._command_names)
        if include_base and self._base is not None:
            names[:0] = self._base.command_names()
        return names

    def has_command_names(self, include_base=True):
        return bool(self.command_names(include_base))

    # command options

    def command_options(self, include_base=True):
        options = list(self._command_options.values())
        if include_base and self._base is not None:
            options.extend(self._base.command_options())
        return options

    def get_command_option(self, name, /, include_base=True):
        name = _bare(name)
        if option := self._command_options.get(name) or self._command_options_by_short_name.get(name):
            return option
        for option in self._command_options.values():
            if option.match(name):
                return option
        if include_base and self._base is not None:
            return self._base.get_command_option(name)
        raise NoSuchOptionError(
            f"the command option {name!r} does not exist",
            code=FaultCode.NO_SUCH_OPTION,
        )

    def has_command_option(self, name, /, include_base=True):
        try:
            self.get_command_option(name, include_base)
        except NoSuchOptionError:
            return False
        return True

    def has_command_options(self, include_base=True):
        return bool(self.command_options(include_base))

    # arguments

    def arguments(self, include_base=True):
        arguments = list(self._arguments.values())
        if include_base and self._base is not None:
            arguments[:0] = self._base.arguments()
        return arguments

    def get_argument(self, name, /, include_base=True):
        """
        Return the argument with the given name or 0-based position.
        """
        if isinstance(name, int) and not isinstance(name, bool):
            arguments = self.arguments(include_base)
            if 0 <= name < len(arguments):
                return arguments[name]
            raise NoSuchArgumentError(
                f"there is no argument at position {name}",
                code=FaultCode.NO_SUCH_ARGUMENT,
            )
        if not isinstance(name, str):
            raise TypeError(f"argument names must be strings or positions, got {type(name).__name__}")
        if argument := self._arguments.get(name):
            return argument
        if include_base and self._base is not None:
            return self._base.get_argument(name)
        raise NoSuchArgumentError(
            f"the argument {name!r} does not exist",
            code=FaultCode.NO_SUCH_ARGUMENT,
        )

    def has_argument(self, name, /, include_base=True):
        try:
            self.get_argument(name, include_base)
        except NoSuchArgumentError:
            return False
        return True

    def has_arguments(self, include_base=True):
        return bool(self.arguments(include_base))

    def has_multi_valued_argument(self, include_base=True):
        return any(argument.is_multi_valued() for argument in self.arguments(include_base))

    def has_optional_argument(self, include_base=True):
        return any(argument.is_optional() for argument in self.arguments(include_base))

    def has_required_argument(self, include_base=True):
        return any(argument.is_required() for argument in self.arguments(include_base))

    def number_of_arguments(self, include_base=True):
        """
        Maximum count of positional values; math.inf with a multi-valued argument.
        """
        if self.has_multi_valued_argument(include_base):
            return math.inf
        return len(self.arguments(include_base))

    def number_of_required_arguments(self, include_base=True):
        return sum(argument.is_required() for argument in self.arguments(include_base))

    # options

    def options(self, include_base=True):
        options = list(self._options.values())
        if include_base and self._base is not None:
            options.extend(option for option in self._base.options() if option.long_name not in self._options)
        return options

    def get_option(self, name, /, include_base=True):
        name = _bare(name)
        if option := self._options.get(name) or self._options_by_short_name.get(name):
            return option
        if include_base and self._base is not None:
            return self._base.get_option(name)
        raise NoSuchOptionError(
            f"the option {name!r} does not exist",
            code=FaultCode.NO_SUCH_OPTION,
        )

    def has_option(self, name, /, include_base=True):
        try:
            self.get_option(name, include_base)
        except NoSuchOptionError:
            return False
        return True

    def has_options(self, include_base=True):
        return bool(self.options(include_base))


class ArgsFormat(_Queries):
    """
    Immutable grammar of one command node.

    Formats are created by ArgsFormatBuilder.get_format() (or ArgsFormat.build()).
    Passing an Iterable of descriptors builds a format in one call:

        >>> ArgsFormat([Argument("file"), Option("verbose", "v")])
    """

    def __init__(self, elements=(), /, base=None):
        if isinstance(elements, ArgsFormatBuilder):
            builder = elements
        else:
            if not isinstance(elements, Iterable):
                raise TypeError("args-format elements must be iterable")
            builder = ArgsFormatBuilder(base)
            for element in elements:
                builder.add(element)
        self._base = builder.base
        self._command_names = tuple(builder.command_names(False))
        self._command_options = dict(builder._command_options)
        self._command_options_by_short_name = dict(builder._command_options_by_short_name)
        self._arguments = dict(builder._arguments)
        self._options = dict(builder._options)
        self._options_by_short_name = dict(builder._options_by_short_name)

    @staticmethod
    def build(base=None, /):
        """
        Return a new builder whose base is the given format.
        """
        return ArgsFormatBuilder(base)

    def __setattr__(self, name, value):
        if hasattr(self, "_options_by_short_name"):
            raise AttributeError(f"args-format is immutable, cannot set {name!r}")
        super().__setattr__(name, value)

    def __repr__(self):
        return "args-format(%s)" % ", ".join(
            [str(name) for name in self.command_names()]
            + ["--" + option.long_name for option in self.command_options()]
            + ["<%s>" % argument.name for argument in self.arguments()]
            + ["--" + option.long_name for option in self.options()]
        )


class ArgsFormatBuilder(_Queries):
    """
    Mutable, validating buffer for an ArgsFormat.

    Every add_* validates against the buffer and the base format and returns the
    builder (for chaining). get_format() freezes the buffer: further mutations
    raise ValidationError. Use copy() to keep editing a frozen buffer.
    """

    def __init__(self, base=None, /):
        if base is not None and not isinstance(base, ArgsFormat):
            raise TypeError("args-format-builder 'base' must be an args-format")
        self._base = base
        self._frozen = False
        self._command_names = []
        self._command_options = {}
        self._command_options_by_short_name = {}
        self._arguments = {}
        self._options = {}
        self._options_by_short_name = {}

    def _check_mutable(self):
        if self._frozen:
            raise ValidationError(
                "the args-format-builder is frozen, create a new one or copy() it",
                code=FaultCode.FROZEN_STATE,
            )

    def _taken(self, name, /):
        return (
            name in self._options
            or name in self._options_by_short_name
            or any(command_option.match(name) for command_option in self._command_options.values())
            or self._base is not None and (self._base.has_option(name) or self._base.has_command_option(name))
        )

    def _check_names(self, entity, long_name, names, /):
        for name in names:
            if self._taken(name):
                spelling = ("--" if len(name) > 1 else "-") + name
                raise ValidationError(
                    f"{entity} '--{long_name}' cannot be added: an option named '{spelling}' exists already",
                    code=FaultCode.DUPLICATE_OPTION,
                )

    def copy(self):
        """
        Return an unfrozen copy of this builder (same base, same entries).
        """
        builder = copy.copy(self)
        builder._frozen = False
        builder._command_names = list(self._command_names)
        for name in ("_command_options", "_command_options_by_short_name", "_arguments", "_options", "_options_by_short_name"):
            setattr(builder, name, dict(getattr(self, name)))
        return builder

    def add(self, element, /):
        """
        Add any descriptor, dispatching on its type.
        """
        match element:
            case CommandName():
                return self.add_command_name(element)
            case CommandOption():
                return self.add_command_option(element)
            case Argument():
                return self.add_argument(element)
            case Option():
                return self.add_option(element)
            case _:
                raise TypeError(f"cannot add {type(element).__name__!r} to an args-format")

    # command names

    def add_command_name(self, command_name, /):
        self._check_mutable()
        if not isinstance(command_name, CommandName):
            raise TypeError("add_command_name() argument must be a command-name")
        self._command_names.append(command_name)
        return self

    def add_command_names(self, command_names, /):
        for command_name in command_names:
            self.add_command_name(command_name)
        return self

    def set_command_names(self, command_names, /):
        self._check_mutable()
        self._command_names = []
        return self.add_command_names(command_names)

    # command options

    def add_command_option(self, command_option, /):
        self._check_mutable()
        if not isinstance(command_option, CommandOption):
            raise TypeError("add_command_option() argument must be a command-option")
        self._check_names("command option", command_option.long_name, (*command_option.long_names, *command_option.short_names))
        self._command_options[command_option.long_name] = command_option
        if command_option.short_name is not None:
            self._command_options_by_short_name[command_option.short_name] = command_option
        return self

    def add_command_options(self, command_options, /):
        for command_option in command_options:
            self.add_command_option(command_option)
        return self

    def set_command_options(self, command_options, /):
        self._check_mutable()
        self._command_options = {}
        self._command_options_by_short_name = {}
        return self.add_command_options(command_options)

    # arguments

    def add_argument(self, argument, /):
        self._check_mutable()
        if not isinstance(argument, Argument):
            raise TypeError("add_argument() argument must be an argument")
        if self.has_argument(argument.name):
            raise ValidationError(
                f"argument {argument.name!r} cannot be added: an argument with that name exists already",
                code=FaultCode.DUPLICATE_ARGUMENT,
            )
        if self.has_multi_valued_argument():
            raise ValidationError(
                f"argument {argument.name!r} cannot be added after a multi-valued argument",
                code=FaultCode.ARGUMENT_AFTER_MULTI_VALUED,
            )
        if argument.is_required() and self.has_optional_argument():
            raise ValidationError(
                f"required argument {argument.name!r} cannot be added after an optional one",
                code=FaultCode.REQUIRED_AFTER_OPTIONAL,
            )
        self._arguments[argument.name] = argument
        return self

    def add_arguments(self, arguments, /):
        for argument in arguments:
            self.add_argument(argument)
        return self

    def set_arguments(self, arguments, /):
        self._check_mutable()
        self._arguments = {}
        return self.add_arguments(arguments)

    # options

    def add_option(self, option, /):
        self._check_mutable()
        if not isinstance(option, Option):
            raise TypeError("add_option() argument must be an option")
        self._check_names("option", option.long_name, (option.long_name, option.short_name) if option.short_name else (option.long_name,))
        self._options[option.long_name] = option
        if option.short_name is not None:
            self._options_by_short_name[option.short_name] = option
        return self

    def add_options(self, options, /):
        for option in options:
            self.add_option(option)
        return self

    def set_options(self, options, /):
        self._check_mutable()
        self._options = {}
        self._options_by_short_name = {}
        return self.add_options(options)

    def get_format(self):
        """
        Freeze the buffer and return the immutable ArgsFormat.
        """
        self._frozen = True
        return ArgsFormat(self)

    def is_frozen(self):
        return self._frozen


__all__ = (
    "ArgsFormat",
    "ArgsFormatBuilder",
)
