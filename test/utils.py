"""
Tests for the Unset sentinel and the shared helpers.

This module verifies:
- Singleton identity, falsy semantics, representation of `Unset`.
- Copying and pickling preserve identity; the type is final.
- coalesce() only replaces Unset.
- rename() in both forms, mirror() copies, shape() contracts.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from flexibility.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` singleton.
    """

    def testSingleton(self) -> None:
        self.assertIs(UnsetType(), Unset)
        self.assertIs(UnsetType(), UnsetType())

    def testFalsely(self) -> None:
        self.assertFalse(bool(Unset))

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")
        self.assertEqual(str(Unset), "Unset")

    def testNotEqualToNoneOrFalse(self) -> None:
        """
        Falsy does not imply equality with other falsy values (None/False).
        """
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, False)  # noqa: E712

    def testCopyDeepcopyPreserveSingleton(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(copy.deepcopy([Unset])[0], Unset)

    def testPickleRoundTrip(self) -> None:
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testUnionWithTypes(self) -> None:
        self.assertIsInstance("text", str | Unset)
        self.assertIsInstance(Unset, str | Unset)
        self.assertNotIsInstance(3, str | Unset)

    def testFinalClass(self) -> None:
        with self.assertRaises(TypeError):
            type("UnsetSubtype", (UnsetType,), {})


class CoalesceTest(TestCase):

    def testReplacesUnset(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testPreservesFalsyValues(self) -> None:
        for value in (None, 0, "", [], False):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


class RenameTest(TestCase):

    def testFunctionForm(self) -> None:
        def work():
            pass

        self.assertIs(rename(work, "do_work"), work)
        self.assertEqual(work.__name__, "do_work")
        self.assertEqual(work.__qualname__, "do_work")

    def testDecoratorForm(self) -> None:
        @rename("do_work")
        def work():
            pass

        self.assertEqual(work.__name__, "do_work")

    def testRejectsBadArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(42, "name")
        with self.assertRaises(TypeError):
            rename(lambda: None, 42)
        with self.assertRaises(TypeError):
            rename()


class MirrorTest(TestCase):

    def testMirrorReturnsCopies(self) -> None:
        class Holder:
            _items = [1, 2]
            items = mirror("items")

        holder = Holder()
        self.assertEqual(holder.items, (1, 2))
        self.assertIsNot(holder.items, Holder._items)

    def testMirrorIsReadOnly(self) -> None:
        class Holder:
            _name = "x"
            name = mirror("name")

        with self.assertRaises(AttributeError):
            Holder().name = "y"


class ShapeTest(TestCase):

    def testPositionalArity(self) -> None:
        self.assertEqual(shape(lambda self, value: value), Shape(2, False, False, False))
        self.assertEqual(shape(lambda: None).arity, 0)

    def testVariadic(self) -> None:
        def body(self, *args):
            pass

        self.assertTrue(shape(body).variadic)
        self.assertEqual(shape(body).arity, 1)

    def testKeywords(self) -> None:
        def body(self, **kwargs):
            pass

        self.assertTrue(shape(body).keywords)

    def testKeywordOnlyBlock(self) -> None:
        def body(self, value, *, block):
            pass

        def other(self, value, *, flag=False):
            pass

        self.assertTrue(shape(body).block)
        self.assertEqual(shape(body).arity, 2)
        self.assertFalse(shape(other).block)

    def testBoundMethodExcludesReceiver(self) -> None:
        class Holder:
            def method(self, value):
                pass

        self.assertEqual(shape(Holder().method).arity, 1)
        self.assertEqual(shape(Holder.method).arity, 2)

    def testRejectsNonCallable(self) -> None:
        with self.assertRaises(TypeError):
            shape(42)


if __name__ == '__main__':
    unittest.main()
