"""
consolekit raw and bound arguments.

Scope
- RawArgs: the unmodified token sequence of one invocation (argv without the
  script name, or a tokenized command line).
- Args: values bound against exactly one ArgsFormat. Mutable, but every write
  goes through the format's name lookup and the descriptor's rules.

Read semantics
- get_option(): the set value; otherwise the declared default when the option
  accepts a value; otherwise False.
- get_argument(): the set value; otherwise the declared default.
- get_options()/get_arguments() include defaults unless include_defaults=False.
"""
import shlex
import sys
from collections.abc import Sequence

from .faults import FaultCode, ValidationError
from .formats import ArgsFormat


class RawArgs:
    """
    Immutable token sequence of one invocation.

    Resolvers and parsers read slices of tokens and never mutate them.
    """

    def __init__(self, tokens=(), /, script=None):
        tokens = tuple(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("raw-args tokens must be strings")
        self._tokens = tokens
        self._script = script

    @classmethod
    def from_argv(cls, argv=None, /):
        """
        Build from an argv list (sys.argv by default); argv[0] is the script name.
        """
        argv = list(sys.argv if argv is None else argv)
        return cls(argv[1:], script=argv[0] if argv else None)

    @classmethod
    def from_string(cls, line, /, script=None):
        """
        Tokenize a command line with shell-like quoting.
        """
        if not isinstance(line, str):
            raise TypeError("from_string() argument must be a string")
        return cls(shlex.split(line), script=script)

    @property
    def tokens(self):
        return self._tokens

    @property
    def script(self):
        return self._script

    def has_token(self, token, /):
        return token in self._tokens

    def to_string(self, script=True):
        """
        Join the tokens back into a shell-quoted command line.
        """
        parts = list(self._tokens)
        if script and self._script:
            parts.insert(0, self._script)
        return shlex.join(parts)

    def __iter__(self):
        return iter(self._tokens)

    def __len__(self):
        return len(self._tokens)

    def __eq__(self, other):
        if not isinstance(other, RawArgs):
            return NotImplemented
        return self._tokens == other._tokens and self._script == other._script

    def __hash__(self):
        return hash((self._tokens, self._script))

    def __repr__(self):
        return f"raw-args({list(self._tokens)!r})"


class Args:
    """
    Values bound against one ArgsFormat.

    Options are stored by long name and arguments by name, so "-v", "--verbose"
    and "verbose" address the same slot.
    """

    def __init__(self, format, /, raw_args=None):
        if not isinstance(format, ArgsFormat):
            raise TypeError("args 'format' must be an args-format")
        if raw_args is not None and not isinstance(raw_args, RawArgs):
            raise TypeError("args 'raw_args' must be raw-args")
        self._format = format
        self._raw_args = raw_args
        self._options = {}
        self._arguments = {}

    @property
    def format(self):
        return self._format

    @property
    def raw_args(self):
        return self._raw_args

    @property
    def script(self):
        return self._raw_args.script if self._raw_args is not None else None

    @property
    def command_names(self):
        return self._format.command_names()

    @property
    def command_options(self):
        return self._format.command_options()

    # options

    def get_option(self, name, /):
        option = self._format.get_option(name)
        if option.long_name in self._options:
            value = self._options[option.long_name]
            return list(value) if option.is_multi_valued() else value
        if option.accepts_value():
            return option.default
        return False

    def get_options(self, include_defaults=True):
        """
        Return {long_name: value}, including unset options unless include_defaults is False.
        """
        return {
            option.long_name: self.get_option(option.long_name)
            for option in self._format.options()
            if include_defaults or option.long_name in self._options
        }

    def set_option(self, name, /, value=True):
        """
        Bind an option.

        - NO_VALUE options: a truthy value sets the switch, False unsets it.
        - multi-valued options: value must be a sequence; it replaces the bound values.
        - strings are converted with the option's converter.
        """
        option = self._format.get_option(name)
        if not option.accepts_value():
            return self._bind_option(option, bool(value))
        if option.is_multi_valued():
            if isinstance(value, str) or not isinstance(value, Sequence):
                raise ValidationError(
                    f"multi-valued option '--{option.long_name}' expects a sequence, got {value!r}",
                    code=FaultCode.INVALID_VALUE,
                )
            self._options.pop(option.long_name, None)
            for item in value:
                self._bind_option(option, self._convert(option, item))
            return self
        return self._bind_option(option, self._convert(option, value))

    def add_option(self, name, /, value):
        """
        Append a value to a multi-valued option, or set a single-valued one.
        """
        option = self._format.get_option(name)
        if not option.is_multi_valued():
            return self.set_option(name, value)
        return self._bind_option(option, self._convert(option, value))

    def _bind_option(self, option, value, /):
        """
        Store an already converted value (multi-valued options append).
        """
        if not option.accepts_value():
            if value:
                self._options[option.long_name] = True
            else:
                self._options.pop(option.long_name, None)
        elif option.is_multi_valued():
            self._options.setdefault(option.long_name, []).append(value)
        else:
            self._options[option.long_name] = value
        return self

    def is_option_set(self, name, /):
        return self._format.get_option(name).long_name in self._options

    def is_option_defined(self, name, /):
        return self._format.has_option(name)

    def unset_option(self, name, /):
        self._options.pop(self._format.get_option(name).long_name, None)
        return self

    # arguments

    def get_argument(self, name, /):
        argument = self._format.get_argument(name)
        if argument.name in self._arguments:
            value = self._arguments[argument.name]
            return list(value) if argument.is_multi_valued() else value
        return argument.default

    def get_arguments(self, include_defaults=True):
        return {
            argument.name: self.get_argument(argument.name)
            for argument in self._format.arguments()
            if include_defaults or argument.name in self._arguments
        }

    def set_argument(self, name, /, value):
        argument = self._format.get_argument(name)
        if argument.is_multi_valued():
            if isinstance(value, str) or not isinstance(value, Sequence):
                raise ValidationError(
                    f"multi-valued argument {argument.name!r} expects a sequence, got {value!r}",
                    code=FaultCode.INVALID_VALUE,
                )
            return self._bind_argument(argument, [self._convert(argument, item) for item in value])
        return self._bind_argument(argument, self._convert(argument, value))

    def _bind_argument(self, argument, value, /):
        """
        Store an already converted value (a list for multi-valued arguments).
        """
        self._arguments[argument.name] = list(value) if argument.is_multi_valued() else value
        return self

    def is_argument_set(self, name, /):
        return self._format.get_argument(name).name in self._arguments

    def is_argument_defined(self, name, /):
        return self._format.has_argument(name)

    @staticmethod
    def _convert(descriptor, value, /):
        if isinstance(value, str):
            return descriptor.parse_value(value)
        return value

    def __eq__(self, other):
        if not isinstance(other, Args):
            return NotImplemented
        return (
            self._format is other._format
            and self.get_options() == other.get_options()
            and self.get_arguments() == other.get_arguments()
        )

    __hash__ = None

    def __repr__(self):
        return f"args(options={self.get_options(False)!r}, arguments={self.get_arguments(False)!r})"


__all__ = (
    "RawArgs",
    "Args",
)
