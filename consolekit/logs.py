"""
consolekit diagnostics logging.

Scope
- One package logger named "consolekit"; modules log through children of it
  (consolekit.resolver, consolekit.parser, ...).
- Library use is silent: a NullHandler is attached on import.
- Applications opt in with configure(), which installs a single RichHandler
  and maps a Verbosity to a logging level.

Conventions
- Diagnostics only (resolution steps, parser bindings, column fitting, dispatch).
  User-facing output goes through consolekit.streams, never through logging.
"""
import logging
from enum import IntEnum

from rich.logging import RichHandler


class Verbosity(IntEnum):
    """Verbosity levels selected by --quiet / --verbose."""

    QUIET = 0  # errors only
    NORMAL = 1  # warnings and errors (default)
    VERBOSE = 2  # informational records
    DEBUG = 3  # internal execution steps

    @property
    def level(self):
        return VERBOSITY_TO_LEVEL[self]


VERBOSITY_TO_LEVEL = {
    Verbosity.QUIET: logging.ERROR,
    Verbosity.NORMAL: logging.WARNING,
    Verbosity.VERBOSE: logging.INFO,
    Verbosity.DEBUG: logging.DEBUG,
}


def get_logger(name=None, /):
    """
    Return the package logger, or one of its children.

    Both "consolekit.parser" and "parser" name the same child.
    """
    base = logging.getLogger("consolekit")
    if not name or name == "consolekit":
        return base
    return base.getChild(name.removeprefix("consolekit."))


def configure(verbosity=Verbosity.NORMAL, /, console=None):
    """
    Route package diagnostics to a RichHandler at the level of verbosity.

    Calling configure() again only updates the level (and the console of the
    installed handler when one is given); no second handler is added.
    """
    verbosity = Verbosity(verbosity)
    logger = get_logger()
    for handler in logger.handlers:
        if isinstance(handler, RichHandler):
            if console is not None:
                handler.console = console
            break
    else:
        handler = RichHandler(console=console, show_path=False, markup=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(verbosity.level)
    handler.setLevel(verbosity.level)
    return logger


get_logger().addHandler(logging.NullHandler())


__all__ = (
    "Verbosity",
    "VERBOSITY_TO_LEVEL",
    "get_logger",
    "configure",
)
