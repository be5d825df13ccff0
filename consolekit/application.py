"""
consolekit application: the root of the command hierarchy and the run loop.

Run loop (Application.run)
1. Resolve the raw tokens to a command (CommandResolver).
2. "-h"/"--help" before "--" renders the help page of the resolved command
   (the application page when no token selected a command).
3. "-V"/"--version" at the application level prints the name and version.
4. Otherwise the remaining tokens are parsed strictly and the handler of the
   command runs; a command without handler renders its help page.
5. A ConsoleException raised on the way is rendered to the error output and
   becomes exit status 1 (or the fault's own "status" option, within 1..255).
   With catch_exceptions disabled it propagates instead.
6. With terminate enabled, the process exits with the status.

Verbosity
- "-q"/"--quiet" selects Verbosity.QUIET and "--verbose" Verbosity.VERBOSE
  ("--verbose --verbose" selects DEBUG). When configure_logging is enabled the
  package diagnostics are routed through a RichHandler at that level.
"""
import sys

from .args import RawArgs
from .commands import ApplicationConfig, Command
from .faults import ConsoleException, replace
from .help import ApplicationHelp, CommandHelp
from .logs import Verbosity, configure, get_logger
from .parser import ArgsParser
from .resolver import CommandResolver
from .streams import IO

logger = get_logger(__name__)


def _raw_args(raw_args, /):
    match raw_args:
        case None:
            return RawArgs.from_argv()
        case RawArgs():
            return raw_args
        case str():
            return RawArgs.from_string(raw_args)
        case _:
            return RawArgs(raw_args)


def _given(format, name, tokens, /):
    """
    Tell whether an option of the format is spelled out among the tokens.
    """
    if not format.has_option(name):
        return False
    option = format.get_option(name)
    return "--" + option.long_name in tokens or option.short_name is not None and "-" + option.short_name in tokens


class Application(Command):
    """
    Root of a command hierarchy.

    Built by ApplicationBuilder.build(). Its own options and arguments form the
    global format that every command inherits; it contributes no command token.
    """

    def __init__(self, config, /):
        if not isinstance(config, ApplicationConfig):
            raise TypeError(f"{type(self).__typename__} 'config' must be an application-config")
        self._resolver = CommandResolver()
        self._parser = ArgsParser()
        super().__init__(config)

        # option clashes across levels only show up in the effective formats
        nodes = [self]
        while nodes:
            node = nodes.pop()
            node.args_format
            nodes.extend(node.commands)

    def _make_token(self):
        return None

    @property
    def display_name(self):
        return self._config.get_display_name() or self._name or "console"

    @property
    def version(self):
        return self._config.version

    def resolve(self, raw_args, /):
        """
        Resolve tokens to the most specific command (see CommandResolver).
        """
        return self._resolver.resolve(_raw_args(raw_args), self)

    def run(self, raw_args=None, io=None, /):
        """
        Run the command selected by raw_args and return its exit status.

        raw_args: RawArgs, a command line string, an iterable of tokens, or
        None for sys.argv. io: IO, console streams when None.
        """
        io = io if io is not None else IO()
        try:
            status = self._run(_raw_args(raw_args), io)
        except ConsoleException as error:
            if not self._config.catch_exceptions:
                raise
            logger.debug("run failed with %r", error)
            replace(error, prog=self._name or "console", colorful=io.error_output.supports_styled_output()).render(io.error_output)
            status = min(max(int(error.options.get("status", 1)), 1), 255)
        if self._config.terminate:
            sys.exit(status)
        return status

    def _run(self, raw_args, io, /):
        resolved = self.resolve(raw_args)
        command = resolved.command
        tokens = resolved.remaining_tokens
        head = tokens[:tokens.index("--")] if "--" in tokens else tokens
        format = command.args_format

        io.verbosity = self._verbosity(head, format)
        if self._config.configure_logging:
            configure(io.verbosity, console=getattr(io.error_output, "console", None))

        if _given(format, "help", head):
            self._render_help(command, resolved, io)
            return 0
        if resolved.cursor == 0 and _given(format, "version", head):
            io.output.write("%s version [em]%s[/em]\n" % (self.display_name, self.version or "UNKNOWN"))
            return 0

        args = resolved.parse(self._parser)
        if command.handler is None:
            self._render_help(command, resolved, io)
            return 0
        return command.handle(args, io)

    @staticmethod
    def _verbosity(head, format, /):
        verbosity = Verbosity.NORMAL
        if _given(format, "quiet", head):
            return Verbosity.QUIET
        if format.has_option("verbose"):
            verbosity = Verbosity(min(Verbosity.NORMAL + head.count("--verbose"), Verbosity.DEBUG))
        return verbosity

    def _render_help(self, command, resolved, io, /):
        if command is self or resolved.cursor == 0:
            ApplicationHelp(self).render(io.output)
        else:
            CommandHelp(command).render(io.output)


__all__ = (
    "Application",
)
