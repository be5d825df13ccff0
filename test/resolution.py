# python
"""
CommandResolver behavioral tests.

Scope
- Validate the walk over named, sub and option commands (exact names, aliases,
  unique abbreviations, default commands, "--").
- Validate option-commands spelled after the options of their parent.
- Validate ambiguity and unknown-command failures with their alternatives.
- Validate similar_names() suggestions and ResolvedCommand parsing offsets.

Conventions
- Test method names follow CamelCase per project convention.
- Hierarchies are built with ApplicationBuilder(defaults=False) so that the
  built-in help command does not take part in abbreviations.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from consolekit import (
    AmbiguousCommandError,
    ApplicationBuilder,
    Argument,
    CommandResolver,
    NoSuchCommandError,
    Option,
    UnknownOptionError,
    similar_names,
)


def packageApplication():
    return (
        ApplicationBuilder("tool", defaults=False)
            .terminate(False)
            .configure_logging(False)
            .option("verbose", "v")
            .command("package").alias("package-alias")
                .sub_command("add").alias("add-alias")
                    .argument("name")
                .finish()
                .sub_command("addon").finish()
                .option_command("remove", "r").argument("name").finish()
            .finish()
            .command("pack").finish()
            .build()
    )


class TestCommandResolver(TestCase):
    """Walk of the resolver over a fixed hierarchy."""

    def setUp(self):
        self.application = packageApplication()
        self.resolver = CommandResolver()

    def resolve(self, *tokens):
        return self.resolver.resolve(list(tokens), self.application)

    def testSubCommandWithRemainingTokens(self):
        resolved = self.resolve("package", "add", "arg")
        self.assertEqual(resolved.command.display_path, "package add")
        self.assertEqual(resolved.remaining_tokens, ("arg",))
        self.assertEqual(resolved.cursor, 2)

    def testUniqueAbbreviation(self):
        resolved = self.resolve("packa")
        self.assertIs(resolved.command, self.application.get_command("package"))
        self.assertEqual(resolved.remaining_tokens, ())

    def testAmbiguousAbbreviation(self):
        with self.assertRaises(AmbiguousCommandError) as context:
            self.resolve("pac")
        self.assertEqual(context.exception.alternatives, ("pack", "package"))
        self.assertIn("at first position", str(context.exception))

    def testExactNameBeatsAbbreviation(self):
        self.assertEqual(self.resolve("pack").command.name, "pack")
        self.assertEqual(self.resolve("package", "add").command.name, "add")

    def testAliasSelectsCommand(self):
        resolved = self.resolve("package-alias", "add-alias")
        self.assertEqual(resolved.command.display_path, "package add")

    def testAmbiguousSubCommandAbbreviation(self):
        with self.assertRaises(AmbiguousCommandError) as context:
            self.resolve("package", "ad")
        self.assertEqual(context.exception.alternatives, ("add", "addon"))

    def testOptionCommandByLongAndShortName(self):
        for token in ("--remove", "-r", "--rem"):
            with self.subTest(token=token):
                resolved = self.resolve("package", token, "demo")
                self.assertEqual(resolved.command.display_path, "package --remove")
                self.assertEqual(resolved.remaining_tokens, ("demo",))

    def testOptionStopsTheWalk(self):
        resolved = self.resolve("package", "-v", "add")
        self.assertEqual(resolved.command.name, "package")
        self.assertEqual(resolved.remaining_tokens, ("-v", "add"))

    def testDoubleDashStopsTheWalk(self):
        resolved = self.resolve("package", "--", "add")
        self.assertEqual(resolved.command.name, "package")
        self.assertEqual(resolved.remaining_tokens, ("--", "add"))

    def testNoTokensResolveToApplication(self):
        resolved = self.resolve()
        self.assertIs(resolved.command, self.application)
        self.assertEqual(resolved.cursor, 0)

    def testUnknownCommandSuggestsSimilarNames(self):
        with self.assertRaises(NoSuchCommandError) as context:
            self.resolve("packge")
        self.assertEqual(context.exception.alternatives, ("package", "pack"))
        self.assertIn("did you mean 'package'?", context.exception.hint)

    def testUnknownCommandWithoutSuggestions(self):
        with self.assertRaises(NoSuchCommandError) as context:
            self.resolve("zzz")
        self.assertEqual(context.exception.alternatives, ())
        self.assertEqual(context.exception.hint, "run 'tool --help' to see available commands")

    def testResolutionIsDeterministic(self):
        first = self.resolve("package", "add", "arg")
        second = self.resolve("package", "add", "arg")
        self.assertEqual(first, second)

    def testParsePositionsIncludeConsumedTokens(self):
        resolved = self.resolve("package", "add", "--colour")
        with self.assertRaises(UnknownOptionError) as context:
            resolved.parse()
        self.assertIn("at third position", str(context.exception))

    def testParseBindsRemainingTokens(self):
        args = self.resolve("package", "add", "demo", "-v").parse()
        self.assertEqual(args.get_argument("name"), "demo")
        self.assertIs(args.get_option("verbose"), True)


class TestOptionCommandsAfterOptions(TestCase):
    """Option-commands spelled after the ordinary options of their parent."""

    def setUp(self):
        self.application = (
            ApplicationBuilder("tool", defaults=False)
                .terminate(False)
                .configure_logging(False)
                .command("package")
                    .option("option", "o")
                    .option("value", "v", Option.REQUIRED_VALUE)
                    .sub_command("add").finish()
                    .option_command("delete", "d").argument("arg").finish()
                .finish()
                .build()
        )
        self.resolver = CommandResolver()

    def resolve(self, *tokens):
        return self.resolver.resolve(list(tokens), self.application)

    def testOptionCommandAfterOptions(self):
        for spelling in ("--delete", "-d"):
            for options in (["-o"], ["--option"], ["-v1"], ["-v", "1"], ["--value=1"], ["--value", "1"]):
                with self.subTest(tokens=[*options, spelling]):
                    resolved = self.resolve("package", *options, spelling)
                    self.assertEqual(resolved.command.display_path, "package --delete")
                    self.assertEqual(resolved.remaining_tokens, (*options, spelling))
                    self.assertIsNone(resolved.parse().get_argument("arg"))

    def testOptionCommandBetweenOptionsAndArguments(self):
        args = self.resolve("package", "-v", "1", "--delete", "name").parse()
        self.assertEqual(args.get_option("value"), "1")
        self.assertEqual(args.get_argument("arg"), "name")

    def testOptionCommandBeforeOptions(self):
        resolved = self.resolve("package", "--delete", "-o", "name")
        self.assertEqual(resolved.remaining_tokens, ("-o", "name"))
        args = resolved.parse()
        self.assertIs(args.get_option("option"), True)
        self.assertEqual(args.get_argument("arg"), "name")

    def testDoubleDashHidesOptionCommand(self):
        resolved = self.resolve("package", "-o", "--", "--delete")
        self.assertEqual(resolved.command.name, "package")

    def testSubCommandAfterOptionsIsNotSelected(self):
        resolved = self.resolve("package", "-o", "add")
        self.assertEqual(resolved.command.name, "package")
        self.assertEqual(resolved.remaining_tokens, ("-o", "add"))


class TestDefaultCommands(TestCase):
    """Descent into default commands when no token selects a child."""

    def setUp(self):
        self.application = (
            ApplicationBuilder("server", defaults=False)
                .terminate(False)
                .configure_logging(False)
                .command("list").mark_default().option("all", "a").finish()
                .command("add").argument("host", Argument.REQUIRED).finish()
                .build()
        )
        self.resolver = CommandResolver()

    def testNoTokenSelectsDefault(self):
        self.assertEqual(self.resolver.resolve([], self.application).command.name, "list")

    def testOptionsGoToDefault(self):
        resolved = self.resolver.resolve(["--all"], self.application)
        self.assertEqual(resolved.command.name, "list")
        self.assertIs(resolved.parse().get_option("all"), True)

    def testNamedCommandStillWins(self):
        self.assertEqual(self.resolver.resolve(["add", "example.org"], self.application).command.name, "add")

    def testAnonymousDefaultSubCommand(self):
        application = (
            ApplicationBuilder("tool", defaults=False)
                .terminate(False)
                .command("remote")
                    .sub_command(None).argument("name").finish()
                    .sub_command("add").argument("url", Argument.REQUIRED).finish()
                .finish()
                .build()
        )
        resolved = CommandResolver().resolve(["remote", "origin"], application)
        self.assertTrue(resolved.command.is_anonymous())
        self.assertEqual(resolved.parse().get_argument("name"), "origin")


class TestSimilarNames(TestCase):
    """Suggestions for mistyped command names."""

    def setUp(self):
        self.application = packageApplication()

    def testEditDistance(self):
        self.assertEqual(similar_names("packs", self.application.named_commands), ["pack"])

    def testSubstring(self):
        self.assertEqual(similar_names("alias", self.application.named_commands), ["package-alias"])

    def testOneNamePerCommand(self):
        self.assertEqual(similar_names("package", self.application.named_commands), ["package"])

    def testNoSuggestions(self):
        self.assertEqual(similar_names("xyz", self.application.named_commands), [])


if __name__ == "__main__":
    unittest.main()
