"""
Flexibility argument resolution.

resolve(arguments, spec, context=..., block=...) reconciles positional and named
arguments against an ordered specification and threads every value through its
chain of callbacks.

Algorithm
1. A trailing Mapping in `arguments` is the trailing map (named arguments); the
   rest are positionals.
2. More positionals than specified keys fails with TooManyArgumentsError.
3. Keys are visited in specification order. The i-th key takes the i-th positional
   when there is one, otherwise the trailing map's entry, otherwise Unset. The
   positional always wins; a shadowed named value only raises a warning.
4. The chain is folded left to right. Each callback sees the read-only results of
   the keys resolved before it, the original value and the block. Any failure
   aborts resolution.
5. Keys whose final value is Unset are left out of the result.
6. Trailing-map entries whose key is not specified are passed through unchanged,
   after the specified keys.

Example
    >>> from flexibility import resolve, required, default
    >>> resolve((5, {"c": 1, "extra": True}), {"a": required(), "b": default(10), "c": []})
    {'a': 5, 'b': 10, 'c': 1, 'extra': True}
"""
import functools
from collections.abc import Mapping
from types import MappingProxyType

from .callbacks import Specification
from .faults import *
from .utils import *


def _split(arguments):
    """
    Separate positionals from the trailing map without touching the caller's sequence.
    """
    arguments = tuple(arguments)
    if arguments and isinstance(arguments[-1], Mapping):
        return arguments[:-1], arguments[-1]
    return arguments, MappingProxyType({})


def resolve(arguments, spec, /, *, context=None, block=Unset):
    """
    Resolve call-time arguments against a specification.

    Parameters
    - arguments: sequence of positional values, optionally ending in a Mapping of
      named values.
    - spec: Specification or any mapping accepted by Specification().
    - context: the receiving object handed to every callback (and the class method
      names are resolved against, when the specification still has pending names).
    - block: the deferred block handed to every callback (None when not supplied).

    Returns
    - dict: ordered key -> value mapping (specified keys first, then pass-through names).

    Raises
    - TooManyArgumentsError: when there are more positionals than specified keys.
    - Any failure raised by a callback (MissingRequiredError, InvalidValueError, ...).
    """
    spec = Specification(spec)
    if not spec.bound:
        spec = spec.bind(type(context))

    positionals, trailing = _split(arguments)

    if len(positionals) > len(spec):
        trigger(TooManyArgumentsError(
            "got %d arguments, but only know how to handle %d" % (len(positionals), len(spec)),
            title="too many arguments",
            code=FaultCode.TOO_MANY_ARGUMENTS,
            hint="pass at most %d positionally (%s)" % (len(spec), ", ".join(map(repr, spec)) or "none"),
            given=len(positionals),
            expected=len(spec),
            docs=getdoc(FaultCode.TOO_MANY_ARGUMENTS),
        ))

    block = coalesce(block)
    results = {}
    view = MappingProxyType(results)

    for index, (key, chain) in enumerate(spec.items()):
        if index < len(positionals):
            original = positionals[index]
            if key in trailing:
                trigger(ShadowedArgumentWarning(
                    "argument %r given both positionally and by name, the named value is ignored" % (key,),
                    title="shadowed argument",
                    code=FaultCode.SHADOWED_ARGUMENT,
                    hint="drop %s=%r or the positional value" % (key, trailing[key]),
                    key=key,
                    value=trailing[key],
                    docs=getdoc(FaultCode.SHADOWED_ARGUMENT),
                ))
        else:
            original = trailing.get(key, Unset)

        value = functools.reduce(
            lambda value, callback: callback(context, value, key, view, original, block),
            chain,
            original,
        )

        if value is not Unset:
            results[key] = value

    for key, value in trailing.items():
        if key not in spec:
            results[key] = value

    return results


__all__ = (
    "resolve",
)
