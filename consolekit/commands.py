"""
consolekit command hierarchy.

Overview
- CommandKind: NAMED (top-level `server`), SUB (`server add`), OPTION (`server --add`).
- CommandConfig / ApplicationConfig: mutable declarations collected by the builders.
- CommandBuilder / ApplicationBuilder: fluent builders. command(), sub_command()
  and option_command() open a child builder; finish() returns to the parent;
  build() (from any level) freezes the whole tree into an Application.
- Command: frozen node of the built hierarchy.

Effective formats
- A node's ArgsFormat is computed lazily and cached: the base is the parent's
  format (the application's global format for top-level commands); the own part
  is its CommandName (named/sub kinds) or CommandOption (option kind), then its
  own options and arguments. Anonymous default commands contribute no token.

Invariants
- Disabled commands are never built into the hierarchy.
- At most one default child per node; anonymous commands are always the default.
- Child names, aliases and option names are unique among siblings.
- Parents are non-owning back references used for lookups only.
- A built Command refuses attribute writes.

Quick example:
    >>> app = (
    ...     ApplicationBuilder("git", "2.0")
    ...         .command("remote").describe("Manage remotes")
    ...             .sub_command("add").argument("name", Argument.REQUIRED).finish()
    ...         .finish()
    ...     .build()
    ... )
"""
import enum
import functools
import operator
import re

from .arguments import *
from .faults import FaultCode, NoSuchCommandError, ValidationError
from .formats import ArgsFormat, ArgsFormatBuilder
from .handlers import *
from .utils import *


class CommandKind(enum.Enum):
    NAMED = "named"
    SUB = "sub"
    OPTION = "option"


class CommandConfig:
    """
    Declaration of one command node, filled in by a CommandBuilder.

    Attributes are plain and mutable until the hierarchy is built.
    """

    def __init__(self, name=None, /, kind=CommandKind.NAMED, *, short_name=None, parent=None):
        if not isinstance(kind, CommandKind):
            raise TypeError("command-config 'kind' must be a command kind")
        if name is None and kind is CommandKind.OPTION:
            raise ValidationError("option commands must have a long name", code=FaultCode.INVALID_DESCRIPTOR)
        if short_name is not None and kind is not CommandKind.OPTION:
            raise ValidationError(
                f"only option commands can have a short name, {name!r} is a {kind.value} command",
                code=FaultCode.INVALID_DESCRIPTOR,
            )
        self.kind = kind
        self.name = name.removeprefix("--") if isinstance(name, str) and kind is CommandKind.OPTION else name
        self.short_name = short_name.removeprefix("-") if isinstance(short_name, str) else short_name
        self.aliases = []
        self.description = None
        self.help = None
        self.enabled = True
        self.default = name is None
        self.handler = None
        self.arguments = []
        self.options = []
        self.commands = []
        self.parent = parent

    def __repr__(self):
        return f"command-config(name={self.name!r}, kind={self.kind.value!r})"


class ApplicationConfig(CommandConfig):
    """
    Declaration of the application (the root node).

    Attributes
    - name: program name used in usage lines ("console" when None).
    - display_name: human-readable title of the help page (derived from name).
    - version: shown by --version and on the help page.
    - catch_exceptions: render ConsoleException to the error output instead of raising.
    - terminate: call sys.exit() with the exit status after run().
    - configure_logging: let run() install the rich log handler for --quiet/--verbose.
    """

    def __init__(self, name=None, /, version=None):
        super().__init__(name)
        self.default = False
        self.display_name = None
        self.version = version
        self.catch_exceptions = True
        self.terminate = True
        self.configure_logging = True

    def get_display_name(self):
        if self.display_name:
            return self.display_name
        if self.name:
            return " ".join(part.capitalize() for part in re.split(r"[-_\s]+", self.name) if part)
        return None

    def __repr__(self):
        return f"application-config(name={self.name!r}, version={self.version!r})"


class CommandBuilder:
    """
    Fluent builder of one CommandConfig.

    Every setter returns the builder; command openers return the child builder
    and finish() returns the parent builder.
    """

    def __init__(self, config, /, parent=None):
        if not isinstance(config, CommandConfig):
            raise TypeError("command-builder 'config' must be a command-config")
        self._config = config
        self._parent = parent

    @property
    def config(self):
        return self._config

    def argument(self, name, /, flags=0, description=Unset, default=Unset, **options):
        """
        Add a positional argument (an Argument or the arguments to build one).
        """
        self._config.arguments.append(name if isinstance(name, Argument) else Argument(name, flags, description, default, **options))
        return self

    def option(self, long_name, short_name=None, /, flags=0, description=Unset, default=Unset, value_name="...", **options):
        """
        Add an option (an Option or the arguments to build one).
        """
        self._config.options.append(
            long_name if isinstance(long_name, Option) else
            Option(long_name, short_name, flags, description, default, value_name, **options)
        )
        return self

    def alias(self, *aliases):
        for alias in aliases:
            if not isinstance(alias, str):
                raise TypeError("command aliases must be strings")
            self._config.aliases.append(alias)
        return self

    def describe(self, description, /):
        self._config.description = description
        return self

    def help(self, help, /):
        self._config.help = help
        return self

    def handler(self, handler, /):
        """
        Set the handler: a Handler variant, or a callable(args, io, command).
        """
        if not isinstance(handler, Handler):
            handler = CallbackHandler(handler)
        self._config.handler = handler
        return self

    def callback(self, callback, /):
        return self.handler(CallbackHandler(callback))

    def delegate(self, target, /):
        return self.handler(DelegatingHandler(target))

    def enable(self, enabled=True, /):
        self._config.enabled = bool(enabled)
        return self

    def disable(self):
        return self.enable(False)

    def mark_default(self):
        self._config.default = True
        return self

    def _child(self, config, /):
        config.parent = self._config
        self._config.commands.append(config)
        return CommandBuilder(config, self)

    def sub_command(self, name, /):
        """
        Open a sub-command (`server add`); None opens an anonymous default sub-command.
        """
        return self._child(CommandConfig(name, CommandKind.SUB))

    def option_command(self, long_name, short_name=None, /):
        """
        Open an option-command (`server --add` / `server -a`).
        """
        return self._child(CommandConfig(long_name, CommandKind.OPTION, short_name=short_name))

    def finish(self):
        if self._parent is None:
            raise ValidationError("finish() called on the application builder", code=FaultCode.INVALID_DESCRIPTOR)
        return self._parent

    def build(self):
        builder = self
        while builder._parent is not None:
            builder = builder._parent
        return builder.build()


class ApplicationBuilder(CommandBuilder):
    """
    Builder of the application: global options, top-level commands and settings.

    The default global options (-h/--help, -q/--quiet, --verbose, -V/--version)
    and the built-in `help` command are added unless defaults=False.
    """

    def __init__(self, name=None, /, version=None, *, defaults=True):
        super().__init__(ApplicationConfig(name, version))
        if defaults:
            (
                self.option("help", "h", Option.NO_VALUE, "Display help about the command")
                    .option("quiet", "q", Option.NO_VALUE, "Do not output any message")
                    .option("verbose", None, Option.NO_VALUE, "Increase the verbosity of messages")
                    .option("version", "V", Option.NO_VALUE, "Display this application version")
                    .command("help")
                        .describe("Display the manual of a command")
                        .argument("command", Argument.OPTIONAL, "The command name")
                        .argument("sub-command", Argument.OPTIONAL, "The sub command name")
                        .callback(_help)
                    .finish()
            )

    def display_name(self, display_name, /):
        self._config.display_name = display_name
        return self

    def version(self, version, /):
        self._config.version = version
        return self

    def catch_exceptions(self, catch=True, /):
        self._config.catch_exceptions = bool(catch)
        return self

    def terminate(self, terminate=True, /):
        self._config.terminate = bool(terminate)
        return self

    def configure_logging(self, configure=True, /):
        self._config.configure_logging = bool(configure)
        return self

    def command(self, name, /):
        """
        Open a top-level command; None opens an anonymous default command.
        """
        return self._child(CommandConfig(name, CommandKind.NAMED))

    def finish(self):
        return self

    def build(self):
        from .application import Application
        return Application(self._config)


def _help(args, io, command):
    """
    Handler of the built-in `help` command.
    """
    from .help import ApplicationHelp, CommandHelp
    application = command.application
    target = application
    for name in (args.get_argument("command"), args.get_argument("sub-command")):
        if name is None:
            break
        target = target.get_command(name)
    if target is application:
        ApplicationHelp(application).render(io.output)
    else:
        CommandHelp(target).render(io.output)
    return 0


class CommandType(type):
    """
    Metaclass of frozen command nodes.

    - __typename__ is derived from the class name (camel-case split with hyphens).
    - Names listed in __introspectable__ become read-only properties.
    - __displayable__ narrows what __repr__/__rich_repr__ show (parents and
      children are left out to keep representations finite).
    """
    __introspectable__ = ()
    __displayable__ = Unset

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
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Command(metaclass=CommandType):
    """
    Frozen node of the command hierarchy.

    Built from a CommandConfig by the Application; children that are disabled
    in their config are skipped. Lookups (get_command) accept names, aliases,
    long option names and short option names, with or without dashes.
    """
    __introspectable__ = (
        "name",
        "aliases",
        "short_name",
        "kind",
        "description",
        "help",
        "config",
        "parent",
        "commands",
        "default_command",
        "handler",
    )

    __displayable__ = (
        "name",
        "aliases",
        "short_name",
        "kind",
        "description",
    )

    def __init__(self, config, /, parent=None):
        if not isinstance(config, CommandConfig):
            raise TypeError(f"{type(self).__typename__} 'config' must be a command-config")
        self._config = config
        self._parent = parent
        self._name = config.name
        self._aliases = tuple(config.aliases)
        self._short_name = config.short_name
        self._kind = config.kind
        self._description = config.description
        self._help = config.help
        self._handler = config.handler

        # Validate the own token early so that bad names fail at build time.
        self._token = self._make_token()

        children = []
        for child in config.commands:
            if child.enabled:
                children.append(Command(child, self))
        self._commands = tuple(children)
        self._check_children()

        defaults = [child for child in self._commands if child._config.default]
        if len(defaults) > 1:
            raise ValidationError(
                "%s %r cannot have more than one default command, got %s" % (
                    type(self).__typename__, self.display_path, ", ".join(repr(child.display_name) for child in defaults)
                ),
                code=FaultCode.DUPLICATE_COMMAND,
            )
        self._default_command = defaults[0] if defaults else None
        self._frozen = True

    def _make_token(self):
        match self._kind:
            case CommandKind.OPTION:
                return CommandOption(self._name, self._short_name, self._aliases, 0, self._description)
            case CommandKind.NAMED | CommandKind.SUB if self._name is not None:
                return CommandName(self._name, self._aliases)
        if self._aliases:
            raise ValidationError(
                f"anonymous {type(self).__typename__} cannot have aliases",
                code=FaultCode.INVALID_DESCRIPTOR,
            )
        return None

    def _check_children(self):
        taken = {}
        for child in self._commands:
            if child._kind is CommandKind.OPTION:
                names = ["--" + name for name in child._token.long_names] + ["-" + name for name in child._token.short_names]
            elif child._name is not None:
                names = [child._name, *child._aliases]
            else:
                names = []
            for name in names:
                if taken.setdefault(name, child) is not child:
                    raise ValidationError(
                        f"command name {name!r} is already in use under {self.display_path!r}",
                        code=FaultCode.DUPLICATE_COMMAND,
                    )

    def __setattr__(self, name, value):
        if getattr(self, "_frozen", False):
            raise AttributeError(f"{type(self).__typename__} {self.display_path!r} is frozen, cannot set {name!r}")
        super().__setattr__(name, value)

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__typename__} is frozen, cannot delete {name!r}")

    @property
    def token(self):
        """
        The CommandName or CommandOption this node contributes (None when anonymous).
        """
        return self._token

    @property
    def enabled(self):
        return self._config.enabled

    @property
    def root(self):
        """
        The topmost node (the Application).
        """
        node = self
        while node._parent is not None:
            node = node._parent
        return node

    @property
    def application(self):
        return self.root

    @property
    def path(self):
        """
        Nodes from the root to this node, both included.
        """
        path = [node := self]
        while node._parent is not None:
            path.append(node := node._parent)
        return tuple(reversed(path))

    @property
    def display_name(self):
        if self._kind is CommandKind.OPTION:
            return self._token.preferred_name
        return self._name

    @property
    def display_path(self):
        return " ".join(node.display_name for node in self.path[1:] if node.display_name) or str(self.root.display_name)

    @property
    def named_commands(self):
        return tuple(child for child in self._commands if child._kind is not CommandKind.OPTION)

    @property
    def option_commands(self):
        return tuple(child for child in self._commands if child._kind is CommandKind.OPTION)

    @property
    def names(self):
        """
        Every spelling that selects this node from its parent.
        """
        if self._kind is CommandKind.OPTION:
            return tuple(["--" + name for name in self._token.long_names] + ["-" + name for name in self._token.short_names])
        if self._name is None:
            return ()
        return (self._name, *self._aliases)

    def is_default(self):
        return self._parent is not None and self._parent._default_command is self

    def is_anonymous(self):
        return self._name is None

    def has_commands(self):
        return bool(self._commands)

    def get_command(self, name, /):
        """
        Return the child selected by a name, alias or option spelling.
        """
        if isinstance(name, str):
            spellings = (name,) if name.startswith("-") else (name, "--" + name, "-" + name)
            for child in self._commands:
                if any(spelling in child.names for spelling in spellings):
                    return child
        raise NoSuchCommandError(
            f"the command {name!r} is not defined under {self.display_path!r}",
            token=name,
            code=FaultCode.UNKNOWN_COMMAND,
        )

    def has_command(self, name, /):
        try:
            self.get_command(name)
        except NoSuchCommandError:
            return False
        return True

    @functools.cached_property
    def args_format(self):
        """
        The effective ArgsFormat (cached).
        """
        base = self._parent.args_format if self._parent is not None else None
        builder = ArgsFormatBuilder(base)
        match self._token:
            case CommandName():
                builder.add_command_name(self._token)
            case CommandOption():
                builder.add_command_option(self._token)
        builder.add_options(self._config.options)
        builder.add_arguments(self._config.arguments)
        return builder.get_format()

    def parse(self, raw_args, /, lenient=False):
        """
        Parse tokens against this node's format.
        """
        from .parser import ArgsParser
        return ArgsParser(lenient).parse(raw_args, self.args_format)

    def handle(self, args, io, /):
        """
        Dispatch the handler with bound args and return the exit status.
        """
        return dispatch(self._handler, args, io, self)


__all__ = (
    "CommandKind",
    "CommandConfig",
    "ApplicationConfig",
    "CommandBuilder",
    "ApplicationBuilder",
    "Command",
)
