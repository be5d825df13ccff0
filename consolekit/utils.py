"""
consolekit utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the descriptors, formats, parser, resolver and
  renderers, so that all layers speak the same "not provided" language.

Overview
- UnsetType / Unset
  • Singleton sentinel for “value not provided”, distinct from None (which is a
    legitimate default for options and arguments).
  • Falsey, printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default while preserving None/0/""/[].

- rename(callable, name) / @rename("name")
  • Stable __name__/__qualname__ for generated callables.

- mirror("attr")
  • Read-only property exposing self._attr; mutable containers are copied so the
    frozen state of formats and commands cannot be changed through the API.

- ordinal(number)
  • "first", "second", ..., "11th", "22nd" for position-first messages.

- levenshtein(source, target)
  • Edit distance used to suggest similar command names.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
    >>> ordinal(3), ordinal(12), ordinal(23)
    ('third', '12th', '23rd')
"""
import builtins
import functools
from collections.abc import Mapping, MutableSequence, Set
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    A single instance, Unset, is used as the default of parameters where None
    is a meaningful user value (option defaults, descriptions, parents).

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a process-wide singleton.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns object unless it is Unset, in which case default is returned.
    Falsey values like None, 0, "" or [] are preserved as-is.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable
    - rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    """
    Copy mutable containers, recursively.

    - MutableSequence: a new list with each element processed.
    - Mapping: a new dict, keys preserved, values processed.
    - Set: a new set.
    - Tuples, strings and everything else are returned as-is (already immutable
      or not a container).
    """
    if isinstance(object, MutableSequence):
        return list(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set) and not isinstance(object, frozenset):
        return set(map(_immortalize, object))
    else:
        return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" on the instance and hands out copies
    of mutable containers, so callers cannot reach into frozen state.

    Example
    - Given self._aliases, declare aliases = mirror("aliases").
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


@functools.lru_cache(maxsize=1024)
def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, 113th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


@functools.lru_cache(maxsize=1024)
def levenshtein(source, target, /):
    """
    Compute the Levenshtein edit distance between two strings.

    Insertions, deletions and substitutions all cost 1. Only two rows of the
    dynamic-programming matrix are kept.
    """
    if len(source) < len(target):
        source, target = target, source
    previous = list(range(len(target) + 1))
    for row, left in enumerate(source, 1):
        current = [row]
        for column, right in enumerate(target, 1):
            current.append(min(
                previous[column] + 1,
                current[column - 1] + 1,
                previous[column - 1] + (left != right),
            ))
        previous = current
    return previous[-1]


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Typical pattern: value = coalesce(user_value, default) to materialize a fallback
only when user_value is Unset (None and other falsey values are preserved).
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "ordinal",
    "levenshtein",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
