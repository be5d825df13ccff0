# python
"""
Command hierarchy behavioral tests.

Scope
- Validate builders: chaining, finish(), build() from any level, handler
  variants and the default global options and help command.
- Validate built commands: frozen nodes, disabled children, default and
  anonymous commands, duplicate detection, lookups and effective formats.
- Validate handler dispatch (callback, delegation, null).

Conventions
- Test method names follow CamelCase per project convention.
- Applications never terminate the process and never configure logging.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from consolekit import (
    Application,
    ApplicationBuilder,
    Argument,
    CallbackHandler,
    CommandConfig,
    CommandKind,
    DelegatingHandler,
    FaultCode,
    IO,
    NoSuchCommandError,
    NullHandler,
    Option,
    ValidationError,
    dispatch,
)


def serverBuilder():
    return (
        ApplicationBuilder("tool", "1.0")
            .terminate(False)
            .configure_logging(False)
            .command("server").alias("srv")
                .describe("Manage servers")
                .option("force", "f", Option.NO_VALUE, "Force it")
                .sub_command("add").argument("host", Argument.REQUIRED).finish()
                .option_command("delete", "d").argument("host", Argument.REQUIRED).finish()
            .finish()
    )


class TestBuilders(TestCase):
    """Fluent declaration of a hierarchy."""

    def testBuildFromNestedBuilder(self):
        application = ApplicationBuilder("tool").command("list").build()
        self.assertIsInstance(application, Application)
        self.assertTrue(application.has_command("list"))

    def testDefaultGlobalOptions(self):
        application = ApplicationBuilder("tool").build()
        self.assertEqual(
            [option.long_name for option in application.args_format.options()],
            ["help", "quiet", "verbose", "version"],
        )
        self.assertTrue(application.has_command("help"))

    def testWithoutDefaults(self):
        application = ApplicationBuilder("tool", defaults=False).build()
        self.assertFalse(application.args_format.has_options())
        self.assertFalse(application.has_commands())

    def testFinishOnApplicationBuilderReturnsItself(self):
        builder = ApplicationBuilder("tool")
        self.assertIs(builder.finish(), builder)

    def testCallableBecomesCallbackHandler(self):
        def run(args, io, command):
            return 0

        command = ApplicationBuilder("tool").command("run").handler(run).build().get_command("run")
        self.assertIsInstance(command.handler, CallbackHandler)
        self.assertIs(command.handler.callback, run)

    def testOnlyOptionCommandsHaveShortNames(self):
        with self.assertRaises(ValidationError):
            CommandConfig("add", CommandKind.SUB, short_name="a")

    def testOptionCommandsNeedNames(self):
        with self.assertRaises(ValidationError):
            CommandConfig(None, CommandKind.OPTION)

    def testDisplayNameDerivedFromName(self):
        application = ApplicationBuilder("package-manager").build()
        self.assertEqual(application.display_name, "Package Manager")
        self.assertEqual(ApplicationBuilder("pm").display_name("PM").build().display_name, "PM")


class TestCommand(TestCase):
    """Built, frozen command nodes."""

    def setUp(self):
        self.application = serverBuilder().build()
        self.server = self.application.get_command("server")

    def testLookupByNameAliasAndOptionSpellings(self):
        self.assertIs(self.application.get_command("srv"), self.server)
        for name in ("delete", "--delete", "-d", "d"):
            with self.subTest(name=name):
                self.assertEqual(self.server.get_command(name).display_name, "--delete")

    def testUnknownLookupRaises(self):
        with self.assertRaises(NoSuchCommandError) as context:
            self.server.get_command("missing")
        self.assertEqual(context.exception.code, FaultCode.UNKNOWN_COMMAND)

    def testKindsAndPaths(self):
        add = self.server.get_command("add")
        delete = self.server.get_command("delete")
        self.assertIs(self.server.kind, CommandKind.NAMED)
        self.assertIs(add.kind, CommandKind.SUB)
        self.assertIs(delete.kind, CommandKind.OPTION)
        self.assertEqual(add.path, (self.application, self.server, add))
        self.assertEqual(delete.display_path, "server --delete")
        self.assertIs(add.application, self.application)

    def testNamedAndOptionCommands(self):
        self.assertEqual([command.name for command in self.server.named_commands], ["add"])
        self.assertEqual([command.name for command in self.server.option_commands], ["delete"])
        self.assertEqual(self.server.get_command("delete").names, ("--delete", "-d"))

    def testEffectiveFormatChainsParents(self):
        format = self.server.get_command("add").args_format
        self.assertEqual([str(name) for name in format.command_names()], ["server", "add"])
        self.assertEqual([argument.name for argument in format.arguments()], ["host"])
        self.assertTrue(format.has_option("force"))
        self.assertTrue(format.has_option("help"))
        self.assertFalse(format.has_option("force", False))
        self.assertIs(format.base, self.server.args_format)

    def testOptionCommandFormat(self):
        format = self.server.get_command("delete").args_format
        self.assertEqual([option.long_name for option in format.command_options()], ["delete"])

    def testEffectiveFormatIsCached(self):
        self.assertIs(self.server.args_format, self.server.args_format)

    def testCommandsAreFrozen(self):
        with self.assertRaises(AttributeError):
            self.server._name = "other"
        with self.assertRaises(AttributeError):
            del self.server._name
        with self.assertRaises(AttributeError):
            self.server.name = "other"

    def testAliasesAreTuples(self):
        aliases = self.server.aliases
        self.assertEqual(aliases, ("srv",))

    def testReprIsFinite(self):
        self.assertEqual(
            repr(self.server),
            "command(name='server', aliases=('srv',), short_name=None, kind=<CommandKind.NAMED: 'named'>, description='Manage servers')",
        )

    def testParseAgainstEffectiveFormat(self):
        args = self.server.get_command("add").parse(["example.org", "-f"])
        self.assertEqual(args.get_argument("host"), "example.org")
        self.assertIs(args.get_option("force"), True)


class TestHierarchyValidation(TestCase):
    """Structural checks performed when the hierarchy is built."""

    def testDisabledCommandsAreNotBuilt(self):
        application = ApplicationBuilder("tool").command("hidden").disable().finish().build()
        self.assertFalse(application.has_command("hidden"))

    def testDuplicateNamesRejected(self):
        builder = ApplicationBuilder("tool").command("list").finish().command("list").finish()
        with self.assertRaises(ValidationError) as context:
            builder.build()
        self.assertEqual(context.exception.code, FaultCode.DUPLICATE_COMMAND)

    def testAliasClashingWithSiblingRejected(self):
        builder = ApplicationBuilder("tool").command("list").finish().command("show").alias("list").finish()
        with self.assertRaises(ValidationError):
            builder.build()

    def testTwoDefaultsRejected(self):
        builder = (
            ApplicationBuilder("tool")
                .command("list").mark_default().finish()
                .command("show").mark_default().finish()
        )
        with self.assertRaises(ValidationError):
            builder.build()

    def testAnonymousCommandIsDefault(self):
        application = ApplicationBuilder("tool").command(None).finish().build()
        self.assertTrue(application.default_command.is_anonymous())
        self.assertTrue(application.default_command.is_default())

    def testAnonymousCommandRejectsAliases(self):
        with self.assertRaises(ValidationError):
            ApplicationBuilder("tool").command(None).alias("x").finish().build()

    def testOptionClashingWithGlobalOptionRejected(self):
        builder = ApplicationBuilder("tool").command("list").option("help", "x").finish()
        with self.assertRaises(ValidationError) as context:
            builder.build()
        self.assertEqual(context.exception.code, FaultCode.DUPLICATE_OPTION)

    def testApplicationNeedsApplicationConfig(self):
        with self.assertRaises(TypeError):
            Application(CommandConfig("tool"))


class TestHandlers(TestCase):
    """Dispatch of the handler variants."""

    def setUp(self):
        self.calls = []
        self.application = (
            ApplicationBuilder("tool")
                .terminate(False)
                .configure_logging(False)
                .command("run").callback(self.record).finish()
                .command("go").delegate("run").finish()
                .command("noop").handler(NullHandler()).finish()
                .build()
        )
        self.io = IO.buffered()

    def record(self, args, io, command):
        self.calls.append(command.name)
        return 3

    def testCallbackHandler(self):
        command = self.application.get_command("run")
        self.assertEqual(command.handle(command.parse([]), self.io), 3)
        self.assertEqual(self.calls, ["run"])

    def testDelegatingHandler(self):
        command = self.application.get_command("go")
        self.assertEqual(command.handle(command.parse([]), self.io), 3)
        self.assertEqual(self.calls, ["run"])

    def testNullHandler(self):
        command = self.application.get_command("noop")
        self.assertEqual(command.handle(command.parse([]), self.io), 0)

    def testCallbackReturningNoneIsSuccess(self):
        command = self.application.get_command("run")
        self.assertEqual(dispatch(CallbackHandler(lambda args, io, command: None), command.parse([]), self.io, command), 0)

    def testDelegationLoopRaises(self):
        application = (
            ApplicationBuilder("tool")
                .command("ping").delegate("pong").finish()
                .command("pong").delegate("ping").finish()
                .build()
        )
        command = application.get_command("ping")
        with self.assertRaises(RecursionError):
            command.handle(command.parse([]), self.io)

    def testHandlerCannotBeSubclassedOutside(self):
        with self.assertRaises(TypeError):
            type("Custom", (NullHandler,), {})

    def testDelegatingHandlerAcceptsPaths(self):
        self.assertEqual(DelegatingHandler(("server", "add")).target, ("server", "add"))


if __name__ == "__main__":
    unittest.main()
