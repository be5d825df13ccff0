"""
consolekit input/output capabilities.

Scope
- Output: write(text), supports_styled_output(), width. Texts are rich markup
  strings or rich Text objects; markup never reaches a stream as literal tags.
- Input: read_line() returning a line without its terminator, or None at EOF.
- ConsoleOutput / ConsoleInput: the terminal, through a rich Console.
- BufferedOutput / BufferedInput: in-memory variants for tests and capturing.
- IO: the bundle handed to handlers (input, output, error output, verbosity).

Notes
- BufferedOutput keeps plain text by default so that help pages can be
  compared byte by byte; styled=True keeps the markup instead.
"""
import io as _io
import sys

from rich.console import Console
from rich.text import Text

from .logs import Verbosity
from .styles import get_theme


def _text(text, /):
    if isinstance(text, Text):
        return text
    if not isinstance(text, str):
        raise TypeError(f"output can only write strings or texts, got {type(text).__name__!r}")
    return Text.from_markup(text)


class Output:
    """
    Base of the output capabilities.
    """

    def write(self, text, /):
        raise NotImplementedError

    def supports_styled_output(self):
        return False

    @property
    def width(self):
        raise NotImplementedError


class Input:
    """
    Base of the input capabilities.
    """

    def read_line(self):
        raise NotImplementedError


class ConsoleOutput(Output):
    """
    Output to the terminal through a rich Console themed with the help styles.
    """

    def __init__(self, console=None, /, stderr=False):
        if console is None:
            console = Console(theme=get_theme(), stderr=stderr, highlight=False)
        elif not isinstance(console, Console):
            raise TypeError("console-output 'console' must be a rich console")
        self._console = console

    @property
    def console(self):
        return self._console

    @property
    def width(self):
        return self._console.width

    def supports_styled_output(self):
        return self._console.color_system is not None

    def write(self, text, /):
        self._console.print(_text(text), end="", soft_wrap=True, highlight=False)


class BufferedOutput(Output):
    """
    Output collected in memory.

    - styled=False (default): markup is stripped, fetch() returns plain text.
    - styled=True: markup is kept, fetch() returns markup strings.
    """

    def __init__(self, width=80, /, styled=False):
        if not isinstance(width, int) or width < 1:
            raise ValueError("buffered-output 'width' must be a positive integer")
        self._width = width
        self._styled = bool(styled)
        self._buffer = []

    @property
    def width(self):
        return self._width

    def supports_styled_output(self):
        return self._styled

    def write(self, text, /):
        text = _text(text)
        self._buffer.append(text.markup if self._styled else text.plain)

    def fetch(self):
        return "".join(self._buffer)

    def clear(self):
        self._buffer.clear()

    def __repr__(self):
        return f"buffered-output(width={self._width!r}, styled={self._styled!r})"


class ConsoleInput(Input):
    """
    Input from a text stream (sys.stdin by default).
    """

    def __init__(self, stream=None, /):
        self._stream = stream

    def read_line(self):
        line = (self._stream or sys.stdin).readline()
        if not line:
            return None
        return line.removesuffix("\n").removesuffix("\r")


class BufferedInput(ConsoleInput):
    """
    Input read from a string.
    """

    def __init__(self, data="", /):
        super().__init__(_io.StringIO(data))


class IO:
    """
    What a handler receives to talk to the user.

    write()/error() honour --quiet: regular messages are dropped when the
    verbosity is QUIET, errors never are.
    """

    def __init__(self, input=None, output=None, error_output=None, /, verbosity=Verbosity.NORMAL):
        self.input = input if input is not None else ConsoleInput()
        self.output = output if output is not None else ConsoleOutput()
        self.error_output = error_output if error_output is not None else ConsoleOutput(stderr=True)
        self.verbosity = Verbosity(verbosity)

    @classmethod
    def buffered(cls, width=80, /, input="", styled=False):
        """
        Build an IO whose output and error output are BufferedOutput instances.
        """
        return cls(BufferedInput(input), BufferedOutput(width, styled=styled), BufferedOutput(width, styled=styled))

    def is_quiet(self):
        return self.verbosity is Verbosity.QUIET

    def is_verbose(self):
        return self.verbosity >= Verbosity.VERBOSE

    def is_debug(self):
        return self.verbosity >= Verbosity.DEBUG

    def write(self, text, /):
        if not self.is_quiet():
            self.output.write(text)

    def write_line(self, text="", /):
        if not self.is_quiet():
            self.output.write(Text.assemble(_text(text), "\n"))

    def error(self, text, /):
        self.error_output.write(text)

    def error_line(self, text="", /):
        self.error_output.write(Text.assemble(_text(text), "\n"))

    def read_line(self):
        return self.input.read_line()

    def __repr__(self):
        return f"io(verbosity={self.verbosity.name.lower()!r})"


__all__ = (
    "Output",
    "Input",
    "ConsoleOutput",
    "ConsoleInput",
    "BufferedOutput",
    "BufferedInput",
    "IO",
)
