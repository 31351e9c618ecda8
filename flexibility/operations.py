"""
Flexibility operations: methods that take positional, named, or mixed arguments.

What this module provides
- Operation: a descriptor wrapping a specification and a body. Accessed through an
  instance it behaves like a bound method; every call resolves the arguments
  (see flexibility.resolver) and then hands them to the body.
- define(owner, name, spec, body): build an Operation and attach it to a class.
- operation(spec, **entries): decorator form, for use inside a class body.
- Flexible: mixin exposing define() as a class method and options() as an
  instance method (direct resolution against the instance).

Body contract
- The body's first positional parameter is the receiving object.
- Its remaining positional parameters decide how results are delivered: with n of
  them, the first n - 1 specified keys arrive positionally and a dict holding
  everything else arrives last. A body taking only the receiver and one more
  parameter receives the whole result dict.
- A keyword-only parameter named `block` receives the block passed at call time.
- *args / **kwargs are not supported, and at most len(spec) + 1 parameters may
  follow the receiver.

Quick start
    from flexibility import Flexible, operation, default, required, validate

    class Banner(Flexible):
        def __init__(self):
            self.width = 40

        @operation(
            message=required(),
            width=[default(factory=lambda self: self.width), validate(lambda self, n: 0 <= n)],
            symbol=default("*"),
        )
        def show(self, message, width, symbol, options):
            width = max(width, len(message) + 4)
            return "\\n".join((symbol * width, f"{symbol} {message.ljust(width - 4)} {symbol}", symbol * width))

    Banner().show("HELLO", symbol="#")
    Banner().show(message="HELLO", width=10)
"""
import builtins
import functools
import logging
from types import MethodType

from .callbacks import Specification
from .faults import *
from .resolver import resolve
from .utils import *

logger = logging.getLogger(__name__)


class Operation:
    """
    Descriptor turning a specification and a body into a flexible method.

    Definition-time checks (the operation is never created when they fail)
    - ReservedKeyError: the specification uses the key 'block'.
    - UnsupportedVariadicError: the body declares *args or **kwargs.
    - ExcessBodyArityError: the body declares more than len(spec) + 1 parameters
      after the receiver.
    - TypeError: the body is not callable or takes no receiver.

    Calling
    - operation(context, *args, block=..., **kwargs), or instance.name(*args, block=..., **kwargs).
    - Named arguments may also be given as a trailing Mapping.
    """
    __introspectable__ = ("name", "arity", "keys")

    def __init__(self, spec, body, /, name=Unset):
        spec = Specification(spec)

        if "block" in spec:
            trigger(ReservedKeyError(
                "argument name 'block' is reserved for the deferred block",
                title="reserved argument name",
                code=FaultCode.RESERVED_KEY,
                hint="rename the 'block' argument",
                key="block",
                docs=getdoc(FaultCode.RESERVED_KEY),
            ))

        if not builtins.callable(body):
            raise TypeError("operation body must be callable")
        try:
            contract = shape(body)
        except ValueError:
            raise ValueError("operation body must have an inspectable signature") from None

        if contract.variadic or contract.keywords:
            trigger(UnsupportedVariadicError(
                "splats are not supported in operation bodies",
                title="unsupported variadic body",
                code=FaultCode.UNSUPPORTED_VARIADIC,
                hint="declare one parameter per leading key plus one for the remaining arguments",
                docs=getdoc(FaultCode.UNSUPPORTED_VARIADIC),
            ))
        if not contract.arity:
            raise TypeError("operation body must accept the receiving object")

        arity = contract.arity - 1
        if arity > len(spec) + 1:
            trigger(ExcessBodyArityError(
                "more positional parameters in the body (%d) than specified arguments allow (%d)" % (
                    arity, len(spec) + 1
                ),
                title="excess body arity",
                code=FaultCode.EXCESS_BODY_ARITY,
                hint="the body may take at most one parameter per key plus one for the remaining arguments",
                given=arity,
                expected=len(spec) + 1,
                docs=getdoc(FaultCode.EXCESS_BODY_ARITY),
            ))

        functools.update_wrapper(self, body)
        self._name = coalesce(name, getattr(body, "__name__", "operation"))
        self._spec = spec
        self._body = body
        self._arity = arity
        self._block = contract.block
        self._keys = tuple(spec)[:max(arity - 1, 0)]
        self._owner = Unset

    name = mirror("name")
    arity = mirror("arity")
    keys = mirror("keys")

    @property
    def spec(self):
        return self._spec

    @property
    def body(self):
        return self._body

    @property
    def owner(self):
        return coalesce(self._owner)

    def __set_name__(self, owner, name):
        self._owner = owner
        self._name = name
        # method names in the specification are resolved once, against the owner
        self._spec = self._spec.bind(owner)
        logger.debug(
            "defined %s.%s (arity=%d, positional=%r)",
            getattr(owner, "__qualname__", owner), name, self._arity, self._keys
        )

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return MethodType(self, instance)

    def __call__(self, context, /, *args, block=Unset, **kwargs):
        results = resolve((*args, kwargs) if kwargs else args, self._spec, context=context, block=block)

        positionals = [results.pop(key, None) for key in self._keys]
        values = (*positionals, results)[:self._arity]

        if self._block:
            return self._body(context, *values, block=coalesce(block))
        return self._body(context, *values)

    def __repr__(self):
        return f"operation({", ".join(f"{name}={value!r}" for name, value in self.__rich_repr__())})"

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)


def define(owner, name, spec, body, /):
    """
    Build an Operation from `spec` and `body` and attach it to `owner` as `name`.

    Returns
    - the Operation (already bound to the owner, method names resolved).
    """
    if not isinstance(owner, type):
        raise TypeError("define() first argument must be a class")
    if not isinstance(name, str) or not name.isidentifier():
        raise TypeError("define() second argument must be a valid identifier")

    self = Operation(spec, body, name=name)
    self.__set_name__(owner, name)
    setattr(owner, name, self)
    return self


def operation(spec=Unset, /, **entries):
    """
    Decorator building an Operation from the decorated body.

    The specification is given as a mapping, as keyword entries (kept in order), or both:
        @operation(message=required(), width=default(40))
        def show(self, message, width, options): ...
    """
    @rename("operation")
    def wrapper(body, /):
        return Operation(Specification(coalesce(spec, ()), **entries), body)

    return wrapper


class Flexible:
    """
    Mixin giving a class flexible methods.

    - cls.define(name, spec, body): attach a new operation; without `body`, returns
      a decorator.
    - self.options(arguments, spec, block=...): resolve arguments against a
      specification with this instance as the receiving object.
    """
    __slots__ = ()

    @classmethod
    def define(cls, name, spec, body=Unset, /):
        if body is Unset:
            return rename(lambda body, /: define(cls, name, spec, body), "define")
        return define(cls, name, spec, body)

    def options(self, arguments, spec, /, *, block=Unset):
        return resolve(arguments, spec, context=self, block=block)


__all__ = (
    "Operation",
    "Flexible",
    "define",
    "operation",
)
