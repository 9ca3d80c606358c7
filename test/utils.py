"""
Utilities behavioral tests (Unset, coalesce, rename, mirror, ReflectiveType).

Scope
- Validate the Unset sentinel: singleton, falsy, sealed, usable in unions.
- Validate coalesce() and both forms of rename().
- Validate mirror() snapshots and the generated typename, repr and rich repr.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import importlib
import unittest
from types import MappingProxyType
from unittest import TestCase

from sextant.utils import ReflectiveType, Unset, UnsetType, coalesce, mirror, rename


class Sample(metaclass=ReflectiveType):
    __introspectable__ = ("items", "mapping")

    def __init__(self):
        self._items = ["a", "b"]
        self._mapping = {"k": ["v"]}


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsyAndPrintable(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")
        self.assertIsNot(Unset, None)

    def testSealed(self):
        with self.assertRaises(TypeError):
            class Derived(UnsetType):
                pass

    def testUnion(self):
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertFalse(isinstance(3, str | Unset))


class TestHelpers(TestCase):
    """Behavioral tests for coalesce() and rename()."""

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce("", "fallback"), "")
        self.assertIsNone(coalesce(Unset))

    def testRenameDirect(self):
        renamed = rename(lambda: 1, "named")
        self.assertEqual(renamed.__name__, "named")
        self.assertEqual(renamed.__qualname__, "named")

    def testRenameDecorator(self):
        @rename("decorated")
        def function():
            pass

        self.assertEqual(function.__name__, "decorated")

    def testRenameFailures(self):
        with self.assertRaises(TypeError):
            rename(5, "x")
        with self.assertRaises(TypeError):
            rename(lambda: 1, 5)
        with self.assertRaises(TypeError):
            rename()


class TestReflection(TestCase):
    """Behavioral tests for mirror() and ReflectiveType."""

    def testPackageImportsCleanly(self):
        package = importlib.import_module("sextant")
        self.assertIs(package.utils.Unset, Unset)
        self.assertIs(package.utils.ReflectiveType.__displayable__, Unset)

    def testDisplayableDefaultsToUnset(self):
        self.assertIs(ReflectiveType.__displayable__, Unset)
        self.assertIs(Sample.__displayable__, Unset)

    def testTypename(self):
        self.assertEqual(Sample.__typename__, "sample")

    def testMirrorSnapshots(self):
        sample = Sample()
        self.assertEqual(sample.items, ("a", "b"))
        self.assertIsInstance(sample.mapping, MappingProxyType)
        self.assertEqual(sample.mapping["k"], ("v",))

    def testMirrorIsReadOnly(self):
        with self.assertRaises(AttributeError):
            Sample().items = ()

    def testMirrorNameMustBeString(self):
        with self.assertRaises(TypeError):
            mirror(3)

    def testGeneratedRepr(self):
        self.assertEqual(repr(Sample()), "sample(items=('a', 'b'), mapping=mappingproxy({'k': ('v',)}))")

    def testRichRepr(self):
        self.assertEqual([name for name, value in Sample().__rich_repr__()], ["items", "mapping"])


if __name__ == "__main__":
    unittest.main()
