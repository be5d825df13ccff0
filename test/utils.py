# python
"""
Tests for the shared utilities.

This module verifies:
- The `Unset` sentinel: singleton identity, falsy semantics, representation,
  copying, pickling, thread safety and finality.
- coalesce(), rename(), mirror(), ordinal() and levenshtein().

Conventions
- Test method names follow CamelCase per project convention.
"""
import copy
import pickle
import unittest
from threading import Lock, Thread
from unittest import TestCase

from consolekit.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `UnsetType` singleton.

    This suite asserts that:
    - UnsetType() always returns the exported `Unset` instance.
    - The sentinel is falsy but not equal to other falsy values.
    - Copy/deepcopy/pickle round-trips preserve identity.
    - The type is final and supports PEP 604 unions.
    """

    def testSingleton(self) -> None:
        """
        The constructor returns the exported instance on every call.
        """
        self.assertIs(UnsetType(), Unset)
        self.assertIs(UnsetType(), UnsetType())

    def testRepr(self) -> None:
        """
        repr() and str() are the literal 'Unset'.
        """
        self.assertEqual(repr(Unset), "Unset")
        self.assertEqual(str(Unset), "Unset")

    def testFalsy(self) -> None:
        """
        The sentinel is falsy without being equal to None or False.
        """
        self.assertFalse(Unset)
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, False)  # noqa: E712

    def testCopyDeepcopyPreserveSingleton(self) -> None:
        """
        copy() and deepcopy() preserve the identity of the singleton.
        """
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy([Unset])[0], Unset)

    def testPickleRoundTrip(self) -> None:
        """
        Pickle round-trips preserve the identity of the singleton.
        """
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testThreadSafetySingleton(self) -> None:
        """
        Concurrent constructions return the same instance.
        """
        results: list[UnsetType] = []
        lock = Lock()

        def worker():
            instance = UnsetType()
            with lock:
                results.append(instance)

        threads = [Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(results), 16)
        for instance in results:
            self.assertIs(instance, Unset)

    def testUnion(self) -> None:
        """
        `str | Unset` can be used in isinstance() checks.
        """
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("text", str | Unset)
        self.assertNotIsInstance(1, Unset | str)

    def testFinalClass(self) -> None:
        """
        The class is final: attempts to subclass must fail with TypeError.
        """
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class HelpersTest(TestCase):
    """
    Test suite for the small helper functions.
    """

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        for value in (None, 0, "", []):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)

    def testRenameDirect(self) -> None:
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testRenameDecorator(self) -> None:
        @rename("decorated")
        def function():
            pass

        self.assertEqual(function.__name__, "decorated")

    def testRenameRejectsBadArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename(lambda: None, 1)
        with self.assertRaises(TypeError):
            rename()

    def testMirrorCopiesMutableContainers(self) -> None:
        class Holder:
            items = mirror("items")
            names = mirror("names")

            def __init__(self):
                self._items = [{"key": [1]}]
                self._names = ("a", "b")

        holder = Holder()
        items = holder.items
        items[0]["key"].append(2)
        self.assertEqual(holder._items, [{"key": [1]}])
        self.assertIs(holder.names, holder._names)
        with self.assertRaises(AttributeError):
            holder.items = []
        self.assertEqual(Holder.items.fget.__name__, "items")

    def testOrdinal(self) -> None:
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")
        self.assertEqual([ordinal(number) for number in (11, 12, 13, 21, 22, 23, 101, 111)], [
            "11th", "12th", "13th", "21st", "22nd", "23rd", "101st", "111th",
        ])

    def testLevenshtein(self) -> None:
        self.assertEqual(levenshtein("kitten", "sitting"), 3)
        self.assertEqual(levenshtein("pack", "packge"), 2)
        self.assertEqual(levenshtein("", "abc"), 3)
        self.assertEqual(levenshtein("same", "same"), 0)
        self.assertEqual(levenshtein("ab", "ba"), 2)

    def testMemoizationIsBounded(self) -> None:
        self.assertEqual(levenshtein.cache_info().maxsize, 1024)
        self.assertEqual(ordinal.cache_info().maxsize, 1024)


if __name__ == '__main__':
    unittest.main()
