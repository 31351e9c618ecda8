"""
Flexibility callbacks and specifications.

Overview
- Callback
  • One resolution step of a parameter's chain. Every callback is invoked with the
    same six slots: (context, value, key, results, original, block).
  • Wraps a user function and forwards only the leading slots its signature declares,
    so `lambda self, value: ...` and `lambda self, value, key, results, original, block: ...`
    are both valid. The slice is decided once, when the callback is built.
  • A keyword-only parameter named `block` receives the deferred block by keyword.

- Generators
  • default(constant) / default(factory=fn): substitute a value when nothing was supplied.
  • required(): fail when nothing (or None) was supplied.
  • validate(predicate): fail when the predicate is falsy on a supplied value.
  • transform(function): replace the value with whatever the function returns.

- Specification
  • Immutable ordered mapping from parameter key to a tuple of callbacks (a chain).
  • Entries may be a Callback, any callable (treated as a transform), the name of a
    method on the receiving class, or a list/tuple of those.
  • Method names are resolved once, against the class, through bind(owner).

Quick example
    >>> from flexibility.callbacks import Specification, default, required, validate
    >>> spec = Specification({
    ...     "message": required(),
    ...     "width": [default(factory=lambda self: self.width), validate(lambda self, n: n >= 0)],
    ...     "symbol": default("*"),
    ... })
    >>> list(spec)
    ['message', 'width', 'symbol']
"""
import builtins
from collections.abc import Mapping

from .faults import *
from .utils import *


class Callback:
    """
    One step of a parameter chain.

    Calling convention
    - callback(context, value, key, results, original, block) -> new value
    - context: the receiving object (explicit, never ambient).
    - value: the chain value so far (Unset when nothing was supplied).
    - key: the parameter key being resolved.
    - results: read-only view of the keys already resolved, in order.
    - original: the value before the first callback of the chain ran.
    - block: the deferred block supplied by the caller, or None.
    """
    __slots__ = ("_function", "_kind", "_shape", "_skip")

    def __init__(self, function, /, kind="transform", *, skip=0):
        if not builtins.callable(function):
            raise TypeError("callback function must be callable")
        self._function = function
        self._kind = kind
        self._shape = shape(function)
        self._skip = skip  # leading slots after the context that the function never sees

    @property
    def function(self):
        return self._function

    @property
    def kind(self):
        return self._kind

    def invoke(self, context, /, *slots):
        """
        Forward the declared slice of (context, *slots) to the wrapped function.
        """
        arguments = (context, *slots[self._skip:])
        if not self._shape.variadic:
            arguments = arguments[:self._shape.arity]
        if self._shape.block:
            return self._function(*arguments, block=slots[-1])
        return self._function(*arguments)

    def __call__(self, context, value, key, results, original, block, /):
        return self.invoke(context, value, key, results, original, block)

    def __repr__(self):
        return f"callback(kind={self._kind!r}, function={getattr(self._function, '__qualname__', self._function)!r})"

    def __rich_repr__(self):
        yield "kind", self._kind
        yield "function", self._function


class _Default(Callback):
    __slots__ = ("_constant",)

    def __init__(self, constant=Unset, factory=Unset):
        if factory is Unset:
            super().__init__(lambda context: constant, "default")
        else:
            # factory receives (context, key, results, original, block)
            super().__init__(factory, "default", skip=1)
        self._constant = constant

    def __call__(self, context, value, key, results, original, block, /):
        if value is not Unset:
            return value
        return self.invoke(context, value, key, results, original, block)

    def __rich_repr__(self):
        yield "kind", self._kind
        if self._constant is not Unset:
            yield "constant", self._constant
        else:
            yield "factory", self._function


class _Required(Callback):
    __slots__ = ()

    def __init__(self):
        super().__init__(lambda context, value: value, "required")

    def __call__(self, context, value, key, results, original, block, /):
        if value is Unset or value is None:
            trigger(MissingRequiredError(
                "required argument %r not given" % (key,),
                title="missing required argument",
                code=FaultCode.MISSING_REQUIRED,
                hint="pass %r positionally or by name" % (key,),
                key=key,
                docs=getdoc(FaultCode.MISSING_REQUIRED),
            ))
        return value

    def __rich_repr__(self):
        yield "kind", self._kind


class _Validate(Callback):
    __slots__ = ()

    def __init__(self, predicate):
        super().__init__(predicate, "validate")

    def __call__(self, context, value, key, results, original, block, /):
        # nothing supplied: nothing to validate, the key stays absent
        if value is Unset:
            return value
        if not self.invoke(context, value, key, results, original, block):
            trigger(InvalidValueError(
                "invalid value %r given for argument %r" % (original, key),
                title="invalid value",
                code=FaultCode.INVALID_VALUE,
                hint="check the accepted values for %r" % (key,),
                key=key,
                value=original,
                docs=getdoc(FaultCode.INVALID_VALUE),
            ))
        return value


def _invalid_arity(message):
    trigger(InvalidArityError(
        message,
        title="invalid callback arguments",
        code=FaultCode.INVALID_ARITY,
        hint="check how the callback generator is called",
        docs=getdoc(FaultCode.INVALID_ARITY),
    ))


def default(constant=Unset, /, *, factory=Unset):
    """
    Build a callback that substitutes a value when nothing was supplied.

    Exactly one of `constant` or `factory` must be given:
    - default(5): use 5.
    - default(factory=fn): call fn(context, key, results, original, block), truncated to
      the positional parameters fn declares, and use its result.

    Explicitly supplied values, including None, False and 0, are never replaced.

    Raises
    - InvalidArityError: when both or neither of constant/factory are given.
    - TypeError: when factory is not callable.
    """
    if (constant is Unset) == (factory is Unset):
        _invalid_arity("default() takes either a constant or a factory, not %s" % (
            "both" if constant is not Unset else "neither"
        ))
    if factory is not Unset and not builtins.callable(factory):
        raise TypeError("default() 'factory' must be callable")
    return _Default(constant, factory)


def required():
    """
    Build a callback that fails with MissingRequiredError when the value is Unset or None.

    Every other value, falsy ones included, passes through unchanged.
    """
    return _Required()


def validate(predicate=Unset, /):
    """
    Build a callback that checks supplied values with `predicate`.

    The predicate is called with (context, value, key, results, original, block),
    truncated to what it declares. A falsy result fails with InvalidValueError
    carrying the key and the original value; otherwise the value passes through.
    Unset (nothing supplied) is passed through without calling the predicate.
    """
    if predicate is Unset:
        _invalid_arity("validate() missing the predicate")
    if not builtins.callable(predicate):
        raise TypeError("validate() argument must be callable")
    return _Validate(predicate)


def transform(function=Unset, /):
    """
    Build a callback whose result unconditionally becomes the new chain value.

    The function is called with (context, value, key, results, original, block),
    truncated to what it declares. Returning Unset makes the key absent again.
    """
    if function is Unset:
        _invalid_arity("transform() missing the function")
    if not builtins.callable(function):
        raise TypeError("transform() argument must be callable")
    return Callback(function, "transform")


class _Reference(Callback):
    """
    A method name waiting to be resolved against the receiving class.
    """
    __slots__ = ("_name",)

    def __init__(self, name):
        super().__init__(lambda context: Unset, "reference")
        self._name = name

    @property
    def name(self):
        return self._name

    def resolve(self, owner, key):
        try:
            method = getattr(owner, self._name)
        except AttributeError:
            _unrecognized(key, self._name, "%r has no method %r" % (getattr(owner, "__name__", owner), self._name))
        if not builtins.callable(method):
            _unrecognized(key, self._name, "%r attribute %r is not callable" % (getattr(owner, "__name__", owner), self._name))
        return Callback(method, "method")

    def __call__(self, context, value, key, results, original, block, /):
        # unbound specifications resolve against the context's class on demand
        return self.resolve(type(context), key)(context, value, key, results, original, block)

    def __repr__(self):
        return f"callback(kind='reference', name={self._name!r})"

    def __rich_repr__(self):
        yield "kind", self._kind
        yield "name", self._name


def _unrecognized(key, value, hint):
    trigger(UnrecognizedCallbackError(
        "unrecognized callback %r for argument %r" % (value, key),
        title="unrecognized callback",
        code=FaultCode.UNRECOGNIZED_CALLBACK,
        hint=hint,
        key=key,
        value=value,
        docs=getdoc(FaultCode.UNRECOGNIZED_CALLBACK),
    ))


def _normalize(key, entry):
    """
    Normalize one specification entry into a chain (tuple of callbacks).
    """
    entries = entry if isinstance(entry, list | tuple) else (entry,)
    chain = []

    for entry in entries:
        if isinstance(entry, Callback):
            chain.append(entry)
        elif isinstance(entry, str):
            if not entry.isidentifier():
                _unrecognized(key, entry, "method names must be valid identifiers")
            chain.append(_Reference(entry))
        elif builtins.callable(entry):
            try:
                chain.append(Callback(entry))
            except ValueError:
                _unrecognized(key, entry, "wrap callables without an inspectable signature in a function")
        else:
            _unrecognized(
                key, entry,
                "use a callback, a callable, a method name, or a list of those"
            )

    return tuple(chain)


class Specification(Mapping):
    """
    Immutable, ordered mapping from parameter key to its chain of callbacks.

    Construction normalizes every entry once; a bare entry becomes a one-element
    chain. Method-name entries stay pending until bind(owner) resolves them.
    """
    __slots__ = ("_chains",)

    def __init__(self, source=(), /, **entries):
        if isinstance(source, Specification) and not entries:
            self._chains = source._chains
            return

        chains = {}
        for key, entry in (dict(source) | entries).items():
            if not isinstance(key, str):
                raise TypeError("specification keys must be strings, not %s" % type(key).__name__)
            chains[key] = _normalize(key, entry)
        self._chains = chains

    @property
    def bound(self):
        """
        True when no method-name entry is left to resolve.
        """
        return not any(isinstance(callback, _Reference) for chain in self._chains.values() for callback in chain)

    def bind(self, owner, /):
        """
        Return a specification with every method-name entry resolved against `owner`.

        Raises
        - UnrecognizedCallbackError: when owner has no such method.
        """
        if self.bound:
            return self

        new = object.__new__(type(self))
        new._chains = {
            key: tuple(
                callback.resolve(owner, key) if isinstance(callback, _Reference) else callback
                for callback in chain
            )
            for key, chain in self._chains.items()
        }
        return new

    def __getitem__(self, key):
        return self._chains[key]

    def __iter__(self):
        return iter(self._chains)

    def __len__(self):
        return len(self._chains)

    def __repr__(self):
        return f"specification({", ".join(f"{key}={list(chain)!r}" for key, chain in self._chains.items())})"

    def __rich_repr__(self):
        for key, chain in self._chains.items():
            yield key, list(chain)


__all__ = (
    "Callback",
    "Specification",
    "default",
    "required",
    "validate",
    "transform",
)
