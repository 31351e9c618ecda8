"""
Flexibility utilities (internal helpers, carefully exposed)

Scope
- Core building blocks shared by the callbacks, resolver and operations layers.
- Public-but-internal leaning: stable enough for consumers, designed primarily
  to support the higher-level layers.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not supplied” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.
  • This is the absence marker seen by every callback in a chain.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated wrappers for clean tracebacks.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr) with defensive
    copies for containers.

- shape(callable)
  • Read the declared calling contract of a callable once: how many leading positional
    slots it takes (None when it declares *args) and whether it takes a keyword-only 'block'.

Quick examples
    >>> one = coalesce(Unset, "fallback")  # "fallback"
    >>> two = coalesce(None, "fallback")    # None  (None is preserved)
    >>> shape(lambda self, value: value)
    Shape(arity=2, variadic=False, keywords=False, block=False)
"""
import builtins
import functools
import inspect
from collections import namedtuple
from collections.abc import Sequence, Mapping, Set
from inspect import Parameter
from typing import final


@final
class UnsetType:
    """
    Sentinel type representing a value that was not supplied.

    This is used when None is a legitimate user value, but the engine needs a way
    to distinguish “not supplied” from “supplied as None”. A single instance,
    Unset, is exposed and handed to callbacks whenever no value was given.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.
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
        """
        Support reversed PEP 604 unions when Unset appears on the right.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        """
        Ensure a single instance for this sentinel type.
        """
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        """
        Disallow subclassing to preserve sentinel semantics.
        """
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    This returns the given object unless it is the Unset sentinel, in which case
    the provided default is returned. Falsey values like None, 0, "", or [] are
    preserved as-is; they are not treated as “unset”.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None   # None is preserved, not replaced
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - Function form: rename(callable, name) -> callable
    - Decorator form: rename(name) -> (decorator)

    Notes
    - This utility does not alter behavior beyond metadata.
    - Some built-in or C-implemented callables are not updatable and will
      raise TypeError.
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
    Recursively copy container values.

    - Sequence (non-string): a new tuple with each element processed.
    - Mapping: a new dict, preserving keys and order.
    - Set: a new frozenset.
    - Anything else: returned as-is.
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return frozenset(map(_immortalize, object))
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads from "_{name}" on the instance and hands out a
    fresh copy of container values so public state cannot be mutated in place.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


Shape = namedtuple("Shape", ("arity", "variadic", "keywords", "block"))
Shape.__doc__ = """
Declared calling contract of a callable.

- arity: number of leading positional parameters (positional-only and
  positional-or-keyword), not counting *args.
- variadic: the callable declares *args.
- keywords: the callable declares **kwargs.
- block: the callable declares a keyword-only parameter named 'block'.
"""


def shape(callable, /):
    """
    Read the declared calling contract of a callable.

    This is evaluated once, when a callback or an operation body is built, so the
    per-call path never introspects anything.

    Raises
    - TypeError: when the object is not callable.
    - ValueError: when the callable has no inspectable signature.
    """
    if not builtins.callable(callable):
        raise TypeError("shape() argument must be callable")

    arity = 0
    variadic = keywords = block = False

    for parameter in inspect.signature(callable).parameters.values():
        match parameter.kind:
            case Parameter.POSITIONAL_ONLY | Parameter.POSITIONAL_OR_KEYWORD:
                arity += 1
            case Parameter.VAR_POSITIONAL:
                variadic = True
            case Parameter.VAR_KEYWORD:
                keywords = True
            case Parameter.KEYWORD_ONLY if parameter.name == "block":
                block = True

    return Shape(arity, variadic, keywords, block)


Unset = UnsetType()
"""
Sentinel for “not supplied”.

Callbacks receive Unset as their value (and original value) whenever neither a
positional nor a named argument was given for their key. It is distinct from
None: an explicit None is a supplied value.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "shape",

    # Types
    "UnsetType",
    "Shape",

    # Constants
    "Unset",
)
