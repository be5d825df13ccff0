"""
consolekit command resolution.

Overview
- CommandResolver.resolve(tokens, application) walks the command tree from the
  root and returns the most specific command the leading tokens select, with
  the tokens left for the parser.

Walk
- At every node the candidates are the named children (name and aliases) and
  the option-command children (--long, --alias, -s).
- An exact spelling descends and consumes one token.
- Otherwise a token that abbreviates exactly one child descends; named tokens
  abbreviate names and aliases, "--" tokens abbreviate long names and aliases.
  Abbreviating two or more children raises AmbiguousCommandError.
- Nothing matched at an option token: the option tokens up to "--" are scanned
  for an exact option-command spelling ("package -o --delete" selects
  "--delete"); the walk descends into it without consuming, and the parser
  skips the option-command token later on.
- Nothing matched otherwise: descend into the default child without consuming,
  or stop.
- "--" always stops the walk.

Notes
- Command names must come before options. In "server -f add" there is no way
  to know whether "add" is the value of "-f" without the format of the command
  first; the walk stops at "-f" and "add" is left to the parser.
- The walk is pure: the same tokens and the same hierarchy resolve the same way.
"""
from .args import RawArgs
from .commands import CommandKind
from .faults import *
from .logs import get_logger
from .parser import ArgsParser
from .utils import *

logger = get_logger(__name__)


def similar_names(token, commands, /):
    """
    Return names of the given commands that resemble the token.

    A name is similar when its Levenshtein distance to the token is at most a
    third of the token's length, or when it contains the token. Results are
    ranked by distance and keep one name per command.
    """
    distances = []
    for command in commands:
        for name in command.names:
            distance = levenshtein(token, name)
            if distance <= len(token) / 3 or token in name:
                distances.append((distance, name, command))
    distances.sort(key=lambda entry: entry[0])

    names, seen = [], []
    for distance, name, command in distances:
        if not any(command is other for other in seen):
            seen.append(command)
            names.append(name)
    return names


class ResolvedCommand:
    """
    Outcome of a resolution: the command, its format and the unconsumed tokens.
    """

    def __init__(self, command, /, remaining_tokens=(), raw_args=None, cursor=0):
        self._command = command
        self._remaining_tokens = tuple(remaining_tokens)
        self._raw_args = raw_args
        self._cursor = cursor

    @property
    def command(self):
        return self._command

    @property
    def args_format(self):
        return self._command.args_format

    @property
    def remaining_tokens(self):
        return self._remaining_tokens

    @property
    def raw_args(self):
        return self._raw_args

    @property
    def cursor(self):
        """
        Number of raw tokens consumed by the walk.
        """
        return self._cursor

    def parse(self, parser=None, lenient=Unset):
        """
        Parse the remaining tokens against the resolved format.
        """
        if parser is None:
            parser = ArgsParser()
        return parser.parse(
            RawArgs(self._remaining_tokens, script=self._raw_args.script if self._raw_args is not None else None),
            self.args_format,
            lenient=lenient,
            offset=self._cursor,
        )

    def __eq__(self, other):
        if not isinstance(other, ResolvedCommand):
            return NotImplemented
        return self._command is other._command and self._remaining_tokens == other._remaining_tokens

    __hash__ = None

    def __repr__(self):
        return f"resolved-command({self._command.display_path!r}, remaining_tokens={list(self._remaining_tokens)!r})"


class CommandResolver:
    """
    Resolve raw tokens to the most specific command of a hierarchy.
    """

    def resolve(self, raw_args, application, /):
        if not isinstance(raw_args, RawArgs):
            raw_args = RawArgs(raw_args)
        tokens = raw_args.tokens

        node, cursor = application, 0
        while True:
            token = tokens[cursor] if cursor < len(tokens) else None
            if token == "--":
                break
            if token is not None and (child := self._match(node, token, cursor)) is not None:
                logger.debug("token %r selects %r", token, child.display_path)
                node, cursor = child, cursor + 1
            elif token is not None and token.startswith("-") and (child := self._scan(node, tokens, cursor)) is not None:
                logger.debug("option-command %r found after the options of %r", child.display_name, node.display_path)
                node = child
            elif node.default_command is not None:
                logger.debug("descending into the default command of %r", node.display_path)
                node = node.default_command
            else:
                break

        if (
            node is application
            and cursor < len(tokens)
            and not tokens[cursor].startswith("-")
            and not application.args_format.has_arguments()
        ):
            raise self._unknown(application, tokens[cursor], cursor)

        logger.debug("resolved %r with remaining tokens %r", node.display_path, tokens[cursor:])
        return ResolvedCommand(node, tokens[cursor:], raw_args, cursor)

    @staticmethod
    def _scan(node, tokens, cursor, /):
        """
        First option-command of node spelled out among the option tokens from cursor on.
        """
        for token in tokens[cursor:]:
            if token == "--":
                break
            if not token.startswith("-"):
                continue
            for child in node.option_commands:
                if token in child.names:
                    return child
        return None

    @staticmethod
    def _candidates(node, token, /):
        """
        Children spelled exactly as the token, else children the token abbreviates.
        """
        if exact := [child for child in node.commands if token in child.names]:
            return exact, True
        if token.startswith("--"):
            if len(token) == 2:
                return [], False
            spellings = lambda child: ["--" + name for name in child.token.long_names] if child.kind is CommandKind.OPTION else []
        elif token.startswith("-"):
            return [], False
        else:
            spellings = lambda child: child.names if child.kind is not CommandKind.OPTION else []
        return [
            child
            for child in node.commands
            if any(spelling.startswith(token) for spelling in spellings(child))
        ], False

    def _match(self, node, token, cursor, /):
        if not token:
            return None
        candidates, exact = self._candidates(node, token)
        if len(candidates) > 1 and not exact:
            names = sorted(child.display_name for child in candidates)
            raise AmbiguousCommandError(
                "the command %r at %s position is ambiguous" % (token, ordinal(cursor + 1)),
                token=token,
                alternatives=names,
                hint="did you mean one of %s?" % ", ".join(map(repr, names)),
                docs=getdoc(FaultCode.AMBIGUOUS_COMMAND),
            )
        return candidates[0] if candidates else None

    @staticmethod
    def _unknown(application, token, cursor, /):
        suggestions = similar_names(token, application.named_commands)
        if suggestions:
            hint = "did you mean %r? you can also run '%s --help' to see available commands" % (
                suggestions[0],
                application.name or "console",
            )
        else:
            hint = "run '%s --help' to see available commands" % (application.name or "console")
        return NoSuchCommandError(
            "the command %r is not defined" % token,
            token=token,
            position=cursor + 1,
            alternatives=suggestions,
            hint=hint,
            docs=getdoc(FaultCode.UNKNOWN_COMMAND),
        )


__all__ = (
    "CommandResolver",
    "ResolvedCommand",
    "similar_names",
)
