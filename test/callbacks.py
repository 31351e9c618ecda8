"""
Callbacks module behavioral tests (generators and specifications).

Scope
- default/required/validate/transform contracts, including the slots each user
  function receives and the faults they raise.
- Specification normalization: bare entries, chains, callables, method names.

Conventions
- Test method names follow CamelCase per project convention.
- Callbacks are called directly with the six slots:
  (context, value, key, results, original, block).
"""
import unittest
from types import MappingProxyType
from unittest import TestCase

from flexibility import (
    Callback,
    Specification,
    Unset,
    default,
    required,
    validate,
    transform,
    InvalidArityError,
    InvalidValueError,
    MissingRequiredError,
    UnrecognizedCallbackError,
)

EMPTY = MappingProxyType({})


class Receiver:
    def __init__(self, width=40):
        self.width = width

    def shout(self, value):
        return str(value).upper()


def call(callback, value=Unset, key="key", results=EMPTY, original=Unset, block=None, *, context=None):
    return callback(context, value, key, results, original, block)


class TestDefault(TestCase):
    """Behavioral tests for default()."""

    def testConstantReplacesUnset(self):
        self.assertEqual(call(default(5)), 5)

    def testConstantNeverOverridesSuppliedValues(self):
        for value in (7, False, 0, "", None):
            with self.subTest(value=value):
                self.assertIs(call(default(5), value), value)

    def testFactoryIsBoundToContext(self):
        self.assertEqual(call(default(factory=lambda self: self.width), context=Receiver(12)), 12)

    def testFactoryReceivesSlotsWithoutValue(self):
        received = []
        results = MappingProxyType({"a": 1})
        block = object()
        context = Receiver()

        def factory(*args):
            received.append(args)
            return 5

        self.assertEqual(call(default(factory=factory), Unset, "b", results, "orig", block, context=context), 5)
        self.assertEqual(received, [(context, "b", results, "orig", block)])

    def testFactoryTruncatedToDeclaredParameters(self):
        factory = default(factory=lambda self, key, results: (key, dict(results)))
        self.assertEqual(call(factory, Unset, "b", MappingProxyType({"a": 1})), ("b", {"a": 1}))

    def testFactoryNotCalledForSuppliedValues(self):
        calls = []
        callback = default(factory=lambda self: calls.append(1))
        self.assertEqual(call(callback, 7), 7)
        self.assertFalse(call(callback, False))
        self.assertEqual(calls, [])

    def testFactoryReceivesBlockByKeyword(self):
        def factory(self, *, block):
            return block() if block else None

        self.assertEqual(call(default(factory=factory), block=lambda: 12), 12)
        self.assertIsNone(call(default(factory=factory)))

    def testBothOrNeitherRejected(self):
        with self.assertRaises(InvalidArityError):
            default()
        with self.assertRaises(InvalidArityError):
            default(5, factory=lambda self: 6)

    def testInvalidArityIsTypeError(self):
        with self.assertRaises(TypeError):
            default()

    def testFactoryMustBeCallable(self):
        with self.assertRaises(TypeError):
            default(factory=5)

    def testIndependentInstances(self):
        self.assertIsNot(default(5), default(5))
        self.assertEqual(default(5).kind, "default")


class TestRequired(TestCase):
    """Behavioral tests for required()."""

    def testUnsetRejected(self):
        with self.assertRaises(MissingRequiredError) as context:
            call(required(), key="message")
        self.assertEqual(context.exception.key, "message")
        self.assertEqual(str(context.exception), "required argument 'message' not given")

    def testExplicitNoneRejected(self):
        with self.assertRaises(MissingRequiredError):
            call(required(), None)

    def testFalsyValuesAccepted(self):
        for value in (False, 0, "", []):
            with self.subTest(value=value):
                self.assertIs(call(required(), value), value)

    def testValuePassesThrough(self):
        self.assertEqual(call(required(), 5), 5)


class TestValidate(TestCase):
    """Behavioral tests for validate()."""

    def testTruthyPredicatePassesValue(self):
        self.assertEqual(call(validate(lambda self, value: True), 7), 7)
        self.assertIs(call(validate(lambda self, value: True), None), None)
        self.assertIs(call(validate(lambda self, value: True), False), False)

    def testFalsyPredicateRaises(self):
        for value in (7, None, False):
            with self.subTest(value=value):
                with self.assertRaises(InvalidValueError):
                    call(validate(lambda self, value: False), value, original=value)

    def testFaultCarriesKeyAndOriginalValue(self):
        with self.assertRaises(InvalidValueError) as context:
            call(validate(lambda self, n: n > 0), -1, "width", original="-1")
        self.assertEqual(context.exception.key, "width")
        self.assertEqual(context.exception.value, "-1")
        self.assertEqual(str(context.exception), "invalid value '-1' given for argument 'width'")

    def testInvalidValueIsValueError(self):
        with self.assertRaises(ValueError):
            call(validate(lambda self, n: n > 0), -1, "width", original=-1)

    def testPredicateReceivesAllSlots(self):
        received = []
        results = MappingProxyType({"a": 1})
        block = object()
        context = Receiver()

        def predicate(*args):
            received.append(args)
            return True

        call(validate(predicate), 7, "b", results, "7", block, context=context)
        self.assertEqual(received, [(context, 7, "b", results, "7", block)])

    def testUnsetSkipsPredicate(self):
        calls = []
        self.assertIs(call(validate(lambda self, value: calls.append(value))), Unset)
        self.assertEqual(calls, [])

    def testPredicateBoundToContext(self):
        callback = validate(lambda self, value: value <= self.width)
        self.assertEqual(call(callback, 10, context=Receiver(40)), 10)
        with self.assertRaises(InvalidValueError):
            call(callback, 50, context=Receiver(40))

    def testMissingPredicateRejected(self):
        with self.assertRaises(InvalidArityError):
            validate()

    def testNonCallablePredicateRejected(self):
        with self.assertRaises(TypeError):
            validate(5)


class TestTransform(TestCase):
    """Behavioral tests for transform()."""

    def testResultReplacesValue(self):
        self.assertEqual(call(transform(lambda self, value: value * 2), 4), 8)

    def testResultUsedUnconditionally(self):
        self.assertIs(call(transform(lambda self, value: Unset), 4), Unset)
        self.assertIsNone(call(transform(lambda self, value: None), 4))

    def testRunsOnUnset(self):
        self.assertEqual(call(transform(lambda self, value: repr(value))), "Unset")

    def testTruncatedToDeclaredParameters(self):
        self.assertEqual(call(transform(lambda self, value, key: (value, key)), 1, "a"), (1, "a"))
        self.assertEqual(call(transform(lambda self: "constant"), 1), "constant")

    def testMissingFunctionRejected(self):
        with self.assertRaises(InvalidArityError):
            transform()

    def testKind(self):
        self.assertEqual(transform(lambda self, value: value).kind, "transform")


class TestSpecification(TestCase):
    """Behavioral tests for Specification normalization."""

    def testPreservesOrder(self):
        spec = Specification({"c": [], "a": [], "b": []})
        self.assertEqual(list(spec), ["c", "a", "b"])

    def testKeywordEntriesFollowMapping(self):
        spec = Specification({"a": []}, b=[], c=[])
        self.assertEqual(list(spec), ["a", "b", "c"])

    def testBareEntryBecomesChain(self):
        unit = required()
        self.assertEqual(Specification({"a": unit})["a"], (unit,))

    def testListEntryKeepsOrder(self):
        first, second = required(), default(5)
        self.assertEqual(Specification({"a": [first, second]})["a"], (first, second))

    def testEmptyChain(self):
        self.assertEqual(Specification({"a": []})["a"], ())

    def testPlainCallableBecomesTransform(self):
        chain = Specification({"a": lambda self, value: value})["a"]
        self.assertIsInstance(chain[0], Callback)
        self.assertEqual(chain[0].kind, "transform")

    def testMethodNamesStayPendingUntilBound(self):
        spec = Specification({"a": ["shout", required()]})
        self.assertFalse(spec.bound)
        bound = spec.bind(Receiver)
        self.assertTrue(bound.bound)
        self.assertEqual(bound["a"][0].kind, "method")
        self.assertEqual(call(bound["a"][0], "hi", context=Receiver()), "HI")

    def testBindIsNoopWhenBound(self):
        spec = Specification({"a": required()})
        self.assertIs(spec.bind(Receiver), spec)

    def testUnknownMethodRejectedWhenBound(self):
        spec = Specification({"a": "missing"})
        with self.assertRaises(UnrecognizedCallbackError) as context:
            spec.bind(Receiver)
        self.assertEqual(context.exception.key, "a")
        self.assertEqual(context.exception.value, "missing")

    def testNonCallableAttributeRejected(self):
        class Holder:
            label = "text"

        with self.assertRaises(UnrecognizedCallbackError):
            Specification({"a": "label"}).bind(Holder)

    def testUnrecognizedEntryRejected(self):
        with self.assertRaises(UnrecognizedCallbackError) as context:
            Specification({"width": [required(), 42]})
        self.assertEqual(context.exception.key, "width")
        self.assertEqual(context.exception.value, 42)

    def testInvalidMethodNameRejected(self):
        with self.assertRaises(UnrecognizedCallbackError):
            Specification({"a": "not a name"})

    def testNonStringKeyRejected(self):
        with self.assertRaises(TypeError):
            Specification({1: []})

    def testImmutable(self):
        spec = Specification({"a": []})
        with self.assertRaises(TypeError):
            spec["b"] = []  # type: ignore[index]

    def testCopyFromSpecificationSharesChains(self):
        spec = Specification({"a": required()})
        self.assertEqual(Specification(spec), spec)


if __name__ == "__main__":
    unittest.main()
