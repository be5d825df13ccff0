# python
"""
ArgsFormat and ArgsFormatBuilder behavioral tests.

Scope
- Validate builder checks: duplicate names, argument ordering rules, freezing.
- Validate queries with and without the base format (ordering, lookups by
  name, short name and position, counts).

Conventions
- Test method names follow CamelCase per project convention.
- Formats are built through the builder unless the test is about ArgsFormat(...).
"""

from __future__ import annotations

import math
import unittest
from unittest import TestCase

from consolekit import (
    Argument,
    ArgsFormat,
    ArgsFormatBuilder,
    CommandName,
    CommandOption,
    FaultCode,
    NoSuchArgumentError,
    NoSuchOptionError,
    Option,
    ValidationError,
)


def globalFormat():
    return (
        ArgsFormatBuilder()
            .add_option(Option("help", "h"))
            .add_option(Option("verbose"))
            .add_argument(Argument("target", Argument.REQUIRED))
            .get_format()
    )


class TestArgsFormatBuilder(TestCase):
    """Validation performed while a format is being built."""

    def testDuplicateArgumentRejected(self):
        builder = ArgsFormatBuilder().add_argument(Argument("file"))
        with self.assertRaises(ValidationError) as context:
            builder.add_argument(Argument("file"))
        self.assertEqual(context.exception.code, FaultCode.DUPLICATE_ARGUMENT)

    def testDuplicateArgumentInBaseRejected(self):
        builder = ArgsFormatBuilder(globalFormat())
        with self.assertRaises(ValidationError):
            builder.add_argument(Argument("target"))

    def testArgumentAfterMultiValuedRejected(self):
        builder = ArgsFormatBuilder().add_argument(Argument("files", Argument.MULTI_VALUED))
        with self.assertRaises(ValidationError) as context:
            builder.add_argument(Argument("other"))
        self.assertEqual(context.exception.code, FaultCode.ARGUMENT_AFTER_MULTI_VALUED)

    def testRequiredAfterOptionalRejected(self):
        builder = ArgsFormatBuilder().add_argument(Argument("first"))
        with self.assertRaises(ValidationError) as context:
            builder.add_argument(Argument("second", Argument.REQUIRED))
        self.assertEqual(context.exception.code, FaultCode.REQUIRED_AFTER_OPTIONAL)

    def testDuplicateLongNameRejected(self):
        builder = ArgsFormatBuilder().add_option(Option("verbose", "v"))
        with self.assertRaises(ValidationError) as context:
            builder.add_option(Option("verbose", "x"))
        self.assertEqual(context.exception.code, FaultCode.DUPLICATE_OPTION)

    def testDuplicateShortNameRejected(self):
        builder = ArgsFormatBuilder().add_option(Option("verbose", "v"))
        with self.assertRaises(ValidationError):
            builder.add_option(Option("version", "v"))

    def testOptionClashingWithBaseRejected(self):
        builder = ArgsFormatBuilder(globalFormat())
        with self.assertRaises(ValidationError):
            builder.add_option(Option("hello", "h"))

    def testCommandOptionClashingWithOptionRejected(self):
        builder = ArgsFormatBuilder().add_option(Option("add", "a"))
        with self.assertRaises(ValidationError):
            builder.add_command_option(CommandOption("add"))

    def testCommandOptionAliasClashingWithOptionRejected(self):
        builder = ArgsFormatBuilder().add_option(Option("remove", "r"))
        with self.assertRaises(ValidationError) as context:
            builder.add_command_option(CommandOption("delete", "d", aliases=("remove",)))
        self.assertEqual(context.exception.code, FaultCode.DUPLICATE_OPTION)
        self.assertIn("'--remove'", str(context.exception))

    def testCommandOptionAliasClashingWithBaseRejected(self):
        base = ArgsFormatBuilder().add_option(Option("remove")).get_format()
        with self.assertRaises(ValidationError):
            ArgsFormatBuilder(base).add_command_option(CommandOption("delete", aliases=("remove",)))

    def testOptionClashingWithCommandOptionAliasRejected(self):
        builder = ArgsFormatBuilder().add_command_option(CommandOption("delete", "d", aliases=("remove",)))
        with self.assertRaises(ValidationError) as context:
            builder.add_option(Option("remove"))
        self.assertEqual(context.exception.code, FaultCode.DUPLICATE_OPTION)

    def testFrozenBuilderRejectsMutations(self):
        builder = ArgsFormatBuilder()
        builder.get_format()
        self.assertTrue(builder.is_frozen())
        with self.assertRaises(ValidationError) as context:
            builder.add_option(Option("verbose"))
        self.assertEqual(context.exception.code, FaultCode.FROZEN_STATE)

    def testCopyOfFrozenBuilderIsMutable(self):
        builder = ArgsFormatBuilder().add_option(Option("verbose"))
        format = builder.get_format()
        copy = builder.copy().add_option(Option("quiet"))
        self.assertFalse(copy.is_frozen())
        self.assertEqual([option.long_name for option in copy.options()], ["verbose", "quiet"])
        self.assertEqual([option.long_name for option in format.options()], ["verbose"])

    def testAddDispatchesOnType(self):
        format = (
            ArgsFormatBuilder()
                .add(CommandName("server"))
                .add(CommandOption("add", "a"))
                .add(Option("force", "f"))
                .add(Argument("name"))
                .get_format()
        )
        self.assertEqual([str(name) for name in format.command_names()], ["server"])
        self.assertTrue(format.has_command_option("-a"))
        self.assertTrue(format.has_option("force"))
        self.assertTrue(format.has_argument("name"))

    def testAddRejectsUnknownElements(self):
        with self.assertRaises(TypeError):
            ArgsFormatBuilder().add("--force")

    def testSetArgumentsReplaces(self):
        builder = ArgsFormatBuilder().add_argument(Argument("first"))
        builder.set_arguments([Argument("second")])
        self.assertEqual([argument.name for argument in builder.arguments()], ["second"])


class TestArgsFormat(TestCase):
    """Queries on frozen formats and their base."""

    def setUp(self):
        self.base = globalFormat()
        self.format = (
            ArgsFormat.build(self.base)
                .add_command_name(CommandName("server"))
                .add_command_option(CommandOption("add", "a", ["--append"]))
                .add_option(Option("force", "f"))
                .add_argument(Argument("name"))
                .add_argument(Argument("rest", Argument.MULTI_VALUED))
                .get_format()
        )

    def testArgumentsListBaseFirst(self):
        self.assertEqual([argument.name for argument in self.format.arguments()], ["target", "name", "rest"])
        self.assertEqual([argument.name for argument in self.format.arguments(False)], ["name", "rest"])

    def testOptionsListOwnFirst(self):
        self.assertEqual([option.long_name for option in self.format.options()], ["force", "help", "verbose"])
        self.assertEqual([option.long_name for option in self.format.options(False)], ["force"])

    def testOptionLookupBySpellings(self):
        for name in ("help", "--help", "h", "-h"):
            with self.subTest(name=name):
                self.assertEqual(self.format.get_option(name).long_name, "help")

    def testOptionLookupWithoutBase(self):
        self.assertFalse(self.format.has_option("help", False))
        with self.assertRaises(NoSuchOptionError):
            self.format.get_option("help", False)

    def testMissingOptionIsKeyError(self):
        with self.assertRaises(KeyError):
            self.format.get_option("missing")

    def testArgumentLookupByPosition(self):
        self.assertEqual(self.format.get_argument(0).name, "target")
        self.assertEqual(self.format.get_argument(1, False).name, "rest")
        with self.assertRaises(NoSuchArgumentError):
            self.format.get_argument(3)

    def testCommandOptionLookupByAlias(self):
        self.assertEqual(self.format.get_command_option("--append").long_name, "add")
        self.assertEqual(self.format.get_command_option("a").long_name, "add")

    def testCounts(self):
        self.assertEqual(self.format.number_of_arguments(), math.inf)
        self.assertEqual(self.format.number_of_required_arguments(), 1)
        self.assertEqual(self.base.number_of_arguments(), 1)
        self.assertTrue(self.format.has_multi_valued_argument())
        self.assertTrue(self.format.has_multi_valued_argument(False))
        self.assertFalse(self.base.has_multi_valued_argument())

    def testCommandNamesIncludeBase(self):
        child = ArgsFormat([CommandName("add")], self.format)
        self.assertEqual([str(name) for name in child.command_names()], ["server", "add"])
        self.assertEqual([str(name) for name in child.command_names(False)], ["add"])

    def testFormatIsImmutable(self):
        with self.assertRaises(AttributeError):
            self.format._base = None

    def testFormatFromIterable(self):
        format = ArgsFormat([Argument("file"), Option("verbose", "v")])
        self.assertTrue(format.has_argument("file"))
        self.assertTrue(format.has_option("-v"))
        self.assertIsNone(format.base)


if __name__ == "__main__":
    unittest.main()
