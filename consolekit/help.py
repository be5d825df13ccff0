"""
consolekit help pages.

Overview
- ApplicationHelp(application): name/version line, USAGE, ARGUMENTS,
  GLOBAL OPTIONS, AVAILABLE COMMANDS and DESCRIPTION.
- CommandHelp(command): USAGE (one synopsis per runnable form, aliases),
  ARGUMENTS, COMMANDS, OPTIONS, GLOBAL OPTIONS and DESCRIPTION.

Both build a BlockLayout of paragraphs in rich markup and render it to an
Output, so a page is byte-reproducible for a given width.

Markup
- [h]   section headers
- [em]  argument, option and command names
- [tt]  program and command names in synopses
Option values are joined to their option with a non-breaking space so that
wrapping never separates "--output" from "<file>".
"""
import json

from rich.markup import escape
from rich.text import Text

from .arguments import Argument
from .commands import CommandKind
from .formats import ArgsFormatBuilder
from .layout import *

NBSP = "\u00a0"


def _markup(text, /):
    if text is None:
        return ""
    if isinstance(text, Text):
        return text.markup
    return text


def _value(value, /):
    return escape(json.dumps(value, ensure_ascii=False, default=str))


def _has_value(value, /):
    return value is not None and not (isinstance(value, list | tuple) and not value)


class _Help:
    """
    Sections shared by the application and command pages.
    """

    def render(self, output, /, indentation=0):
        layout = BlockLayout()
        self._render(layout)
        layout.render(output, indentation)

    def _render(self, layout, /):
        raise NotImplementedError

    @staticmethod
    def _render_argument(layout, argument, /):
        description = _markup(argument.description)
        if _has_value(argument.default):
            description += "[h] (default: %s)[/h]" % _value(argument.default)
        layout.add(LabeledParagraph("[em]<%s>[/em]" % argument.name, description))

    def _render_arguments(self, layout, arguments, /):
        layout.add(Paragraph("[h]ARGUMENTS[/h]"))
        layout.begin_block()
        for argument in arguments:
            self._render_argument(layout, argument)
        layout.end_block()
        layout.add(EmptyLine())

    @staticmethod
    def _render_option(layout, option, /):
        description = _markup(option.description)
        if option.accepts_value() and _has_value(option.default):
            description += " (default: %s)" % _value(option.default)
        if option.is_multi_valued():
            description += " (multiple values allowed)"
        name = "[em]%s[/em]" % option.preferred_name
        if option.alternative_name:
            name += " (%s)" % option.alternative_name
        layout.add(LabeledParagraph(name, description))

    def _render_options(self, layout, options, /, title="OPTIONS"):
        layout.add(Paragraph("[h]%s[/h]" % title))
        layout.begin_block()
        for option in options:
            self._render_option(layout, option)
        layout.end_block()
        layout.add(EmptyLine())

    @staticmethod
    def _render_synopsis(layout, format, name, /, prefix="", last_optional=False):
        names = ["[tt]%s[/tt]" % (name or "console")]
        names.extend("[tt]%s[/tt]" % command_name for command_name in format.command_names())
        names.extend(command_option.preferred_name for command_option in format.command_options())
        if last_optional:
            names[-1] = "[%s]" % names[-1]

        parts = []
        for option in format.options(False):
            if option.is_value_required():
                parts.append("[%s%s<%s>]" % (option.preferred_name, NBSP, option.value_name))
            elif option.is_value_optional():
                parts.append("[%s%s[<%s>]]" % (option.preferred_name, NBSP, option.value_name))
            else:
                parts.append("[%s]" % option.preferred_name)
        for argument in format.arguments():
            spelling = argument.name + ("1" if argument.is_multi_valued() else "")
            part = ("<%s>" if argument.is_required() else "[<%s>]") % spelling
            if argument.is_multi_valued():
                part += "%s...%s[<%sN>]" % (NBSP, NBSP, argument.name)
            parts.append(part)

        layout.add(LabeledParagraph(prefix + " ".join(names), " ".join(parts), 1, False))

    @staticmethod
    def _render_description(layout, help, /):
        (
            layout
                .add(Paragraph("[h]DESCRIPTION[/h]"))
                .begin_block()
                    .add(Paragraph(help))
                .end_block()
                .add(EmptyLine())
        )


class ApplicationHelp(_Help):
    """
    Help page of an application.
    """

    def __init__(self, application, /):
        self._application = application

    @property
    def application(self):
        return self._application

    def _render(self, layout, /):
        application = self._application
        format = (
            ArgsFormatBuilder()
                .add_argument(Argument("command", Argument.REQUIRED, "The command to execute"))
                .add_argument(Argument("arg", Argument.MULTI_VALUED, "The arguments of the command"))
                .add_options(application.args_format.options())
                .get_format()
        )

        self._render_name(layout)
        layout.add(Paragraph("[h]USAGE[/h]"))
        layout.begin_block()
        self._render_synopsis(layout, format, application.name)
        layout.end_block()
        layout.add(EmptyLine())

        self._render_arguments(layout, format.arguments())
        if format.has_options():
            self._render_options(layout, format.options(), "GLOBAL OPTIONS")
        if commands := [command for command in application.named_commands if command.name is not None]:
            layout.add(Paragraph("[h]AVAILABLE COMMANDS[/h]"))
            layout.begin_block()
            for command in sorted(commands, key=lambda command: command.name):
                layout.add(LabeledParagraph("[em]%s[/em]" % command.name, _markup(command.description)))
            layout.end_block()
            layout.add(EmptyLine())
        if application.help:
            self._render_description(layout, application.help)

    def _render_name(self, layout, /):
        config = self._application.config
        display_name = config.get_display_name()
        if display_name and config.version:
            layout.add(Paragraph("%s version [em]%s[/em]" % (display_name, config.version)))
        elif display_name:
            layout.add(Paragraph(display_name))
        else:
            layout.add(Paragraph("Console Tool"))
        layout.add(EmptyLine())


class CommandHelp(_Help):
    """
    Help page of one command.
    """

    def __init__(self, command, /):
        self._command = command

    @property
    def command(self):
        return self._command

    def _render(self, layout, /):
        command = self._command
        format = command.args_format
        named = [child for child in command.named_commands if child.name is not None]
        options = command.option_commands

        self._render_usage(layout)
        if format.has_arguments():
            self._render_arguments(layout, format.arguments())
        if named or options:
            layout.add(Paragraph("[h]COMMANDS[/h]"))
            layout.begin_block()
            for child in [*named, *options]:
                self._render_command(layout, child)
            layout.end_block()
        if format.has_options(False):
            self._render_options(layout, format.options(False))
        if format.base is not None and format.base.has_options():
            self._render_options(layout, format.base.options(), "GLOBAL OPTIONS")
        if command.help:
            self._render_description(layout, command.help)

    def _render_usage(self, layout, /):
        command = self._command
        forms = {}
        if (default := command.default_command) is not None:
            forms[default] = (default.args_format, default.name is not None)
        else:
            forms[command] = (command.args_format, False)
        for child in command.commands:
            if child.name is not None and child not in forms:
                forms[child] = (child.args_format, False)

        name = command.application.name
        prefix = "    " if len(forms) > 1 else ""
        layout.add(Paragraph("[h]USAGE[/h]"))
        layout.begin_block()
        for format, last_optional in forms.values():
            self._render_synopsis(layout, format, name, prefix, last_optional)
            prefix = "or: "
        if command.kind is not CommandKind.OPTION and command.aliases:
            layout.add(EmptyLine())
            layout.add(Paragraph("aliases: %s" % ", ".join(command.aliases)))
        layout.end_block()
        layout.add(EmptyLine())

    def _render_command(self, layout, command, /):
        if command.kind is CommandKind.OPTION:
            token = command.token
            name = token.preferred_name
            if token.is_long_name_preferred() and token.short_name:
                name += " (-%s)" % token.short_name
            elif token.is_short_name_preferred():
                name += " (--%s)" % token.long_name
        else:
            name = command.name

        format = command.args_format
        layout.add(Paragraph("[tt]%s[/tt]" % name))
        layout.begin_block()
        for text in (command.description, command.help):
            if text:
                layout.add(Paragraph(text))
                layout.add(EmptyLine())
        if arguments := format.arguments(False):
            for argument in arguments:
                self._render_argument(layout, argument)
            layout.add(EmptyLine())
        if options := format.options(False):
            for option in options:
                self._render_option(layout, option)
            layout.add(EmptyLine())
        layout.end_block()


__all__ = (
    "ApplicationHelp",
    "CommandHelp",
)
