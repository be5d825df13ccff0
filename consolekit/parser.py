r"""
consolekit GNU-style argument parser.

Overview
- ArgsParser.parse(tokens, format) binds raw tokens to an Args instance.

Token grammar
- "--"                 ends option parsing; every later token is positional.
- "--name=value"       long option with an inline value.
- "--name [value]"     long option; the next non-option token is consumed as the
                       value when the option accepts one.
- "-x", "-xvalue"      short option; the rest of the token is the value when the
                       option accepts one.
- "-abc"               combined short options; the first value-accepting option
                       takes the rest of the token (or the next token).
- "-"                  a positional token (conventionally stdin).
- anything else        positional; the multi-valued argument collects the tail.

Strict vs lenient
- strict (default): unknown options and surplus positionals fail.
- lenient: unknown option tokens are discarded whole (never value-absorbing, and
  the rest of a combined short cluster is ignored); surplus positionals are ignored.
  Required arguments and options are checked in both modes.

UX
- Messages lead with the ordinal position of the token in the raw argument list
  ("unknown option '--colr' at third position"); `offset` shifts positions when
  the tokens are the tail left over by command resolution.
- Unknown options get a "did you mean ...?" hint from difflib close matches.
"""
import difflib
import re

from .args import Args, RawArgs
from .faults import *
from .formats import ArgsFormat
from .logs import get_logger
from .utils import *

logger = get_logger(__name__)


def _looks_like_option(token, /):
    return len(token) > 1 and token.startswith("-")


class ArgsParser:
    """
    Parse token sequences against an ArgsFormat.

    The parser is stateless between calls; `lenient` sets the default mode and
    can be overridden per parse() call.
    """

    def __init__(self, lenient=False):
        self._lenient = bool(lenient)

    @property
    def lenient(self):
        return self._lenient

    def parse(self, raw_args, format, /, lenient=Unset, offset=0):
        """
        Bind tokens to a new Args.

        Parameters
        - raw_args: RawArgs | Iterable[str]
        - format: ArgsFormat the tokens are bound against.
        - lenient: overrides the parser's default mode when given.
        - offset: number of raw tokens preceding these tokens (for messages).

        Raises
        - ParseError subclasses (see consolekit.faults).
        """
        if not isinstance(format, ArgsFormat):
            raise TypeError("parse() second argument must be an args-format")
        if not isinstance(raw_args, RawArgs):
            raw_args = RawArgs(raw_args)
        return _Session(raw_args, format, coalesce(lenient, self._lenient), offset).run()


class _Session:
    """
    One parse() run: token cursor, positional cursor and the Args being filled.
    """

    def __init__(self, raw_args, format, lenient, offset):
        self.tokens = raw_args.tokens
        self.format = format
        self.lenient = lenient
        self.offset = offset
        self.args = Args(format, raw_args)
        self.arguments = format.arguments()
        self.index = 0
        self.argument_index = 0
        self.collected = []

    def position(self, index=Unset, /):
        return ordinal(self.offset + coalesce(index, self.index) + 1)

    def help_command(self):
        return " ".join([*map(str, self.format.command_names()), "--help"])

    def run(self):
        options_ended = False
        while self.index < len(self.tokens):
            token = self.tokens[self.index]
            if options_ended or not _looks_like_option(token):
                self.positional(token)
            elif token == "--":
                options_ended = True
            elif token.startswith("--"):
                self.long_option(token)
            else:
                self.short_options(token)
            self.index += 1

        if self.collected:
            self.args._bind_argument(self.arguments[self.argument_index], self.collected)
        self.check_required()
        logger.debug("parsed %r into %r", self.tokens, self.args)
        return self.args

    def value_follows(self):
        return self.index + 1 < len(self.tokens) and not _looks_like_option(self.tokens[self.index + 1])

    def convert(self, descriptor, value, token, index=Unset, /):
        try:
            return descriptor.parse_value(value)
        except ValueError as error:
            raise InvalidValueError(
                "%s for %r at %s position" % (error, token, self.position(index)),
                token=token,
                position=self.offset + coalesce(index, self.index) + 1,
                hint="run '%s' to see the expected values" % self.help_command(),
                docs=getdoc(FaultCode.INVALID_VALUE),
            ) from error

    def positional(self, token):
        if self.argument_index >= len(self.arguments):
            if self.lenient:
                logger.debug("ignoring surplus positional %r", token)
                return
            raise TooManyArgumentsError(
                "too many arguments, %r at %s position is not expected" % (token, self.position()),
                token=token,
                position=self.offset + self.index + 1,
                hint="run '%s' to see the expected arguments" % self.help_command(),
                docs=getdoc(FaultCode.TOO_MANY_ARGUMENTS),
            )
        argument = self.arguments[self.argument_index]
        value = self.convert(argument, token, token)
        if argument.is_multi_valued():
            self.collected.append(value)
            return
        self.args._bind_argument(argument, value)
        self.argument_index += 1

    def unknown(self, name, token):
        if re.fullmatch(r"[a-zA-Z][a-zA-Z0-9-]*", name) and self.format.has_command_option(name):
            # command options were consumed by the resolver; repeating one is harmless
            return
        if self.lenient:
            logger.debug("discarding unknown option %r", token)
            return
        spellings = [
            spelling
            for option in self.format.options()
            for spelling in ("--" + option.long_name, "-" + (option.short_name or ""))
            if len(spelling) > 1
        ]
        input = token.partition("=")[0] if token.startswith("--") else "-" + name
        if suggestions := difflib.get_close_matches(input, spellings, 5):
            hint = "did you mean %r? you can also run '%s' to see all options" % (suggestions[0], self.help_command())
        else:
            hint = "try '%s' to see all available options" % self.help_command()
        raise UnknownOptionError(
            "unknown option %r at %s position" % (input, self.position()),
            token=token,
            position=self.offset + self.index + 1,
            suggestions=suggestions,
            hint=hint,
            docs=getdoc(FaultCode.UNKNOWN_OPTION),
        )

    def long_option(self, token):
        if not (match := re.fullmatch(r"--(?P<name>[a-zA-Z][a-zA-Z0-9-]*)(=(?P<value>.*))?", token, re.DOTALL)):
            if self.lenient:
                logger.debug("discarding malformed option %r", token)
                return
            raise MalformedOptionError(
                "bad form of option %r at %s position" % (token, self.position()),
                token=token,
                position=self.offset + self.index + 1,
                hint="try '%s' to see valid spellings and forms (e.g., --name=value)" % self.help_command(),
                docs=getdoc(FaultCode.MALFORMED_OPTION),
            )
        name, value = match["name"], match["value"]
        if not self.format.has_option(name):
            return self.unknown(name, token)
        option = self.format.get_option(name)

        if not option.accepts_value():
            if value is not None:
                raise MalformedOptionError(
                    "option '--%s' at %s position cannot have a value" % (option.long_name, self.position()),
                    token=token,
                    position=self.offset + self.index + 1,
                    hint="remove everything from '=' (for example: --%s)" % option.long_name,
                    docs=getdoc(FaultCode.MALFORMED_OPTION),
                )
            self.args._bind_option(option, True)
            return

        if value is None:
            return self.take_value(option, token)
        self.args._bind_option(option, self.convert(option, value, token))

    def short_options(self, token):
        body = token[1:]
        for cursor, name in enumerate(body):
            if not re.fullmatch(r"[a-zA-Z]", name) or not self.format.has_option(name):
                # the rest of the cluster goes with the unknown option
                return self.unknown(name, token)
            option = self.format.get_option(name)
            if not option.accepts_value():
                self.args._bind_option(option, True)
                continue
            if rest := body[cursor + 1:]:
                self.args._bind_option(option, self.convert(option, rest, token))
            else:
                self.take_value(option, token)
            return

    def take_value(self, option, token):
        """
        Bind the value of a value-accepting option from the next token, or its default.
        """
        if self.value_follows():
            self.index += 1
            value = self.tokens[self.index]
            self.args._bind_option(option, self.convert(option, value, value))
        elif option.is_value_required():
            raise MissingValueError(
                "option %r at %s position requires a value" % (token, self.position()),
                token=token,
                position=self.offset + self.index + 1,
                hint="provide a value (e.g., --%s=value)" % option.long_name,
                docs=getdoc(FaultCode.MISSING_VALUE),
            )
        else:
            self.args._bind_option(option, option.default)

    def check_required(self):
        for argument in self.arguments:
            if argument.is_required() and not self.args.is_argument_set(argument.name):
                raise MissingRequiredArgumentError(
                    "missing required argument <%s>" % argument.name,
                    argument=argument.name,
                    hint="run '%s' to see the expected arguments" % self.help_command(),
                    docs=getdoc(FaultCode.MISSING_REQUIRED_ARGUMENT),
                )
        for option in self.format.options():
            if option.is_required() and not self.args.is_option_set(option.long_name):
                raise MissingRequiredOptionError(
                    "missing required option '--%s'" % option.long_name,
                    option=option.long_name,
                    hint="provide it (e.g., --%s=%s)" % (option.long_name, option.value_name),
                    docs=getdoc(FaultCode.MISSING_REQUIRED_OPTION),
                )


__all__ = (
    "ArgsParser",
)
