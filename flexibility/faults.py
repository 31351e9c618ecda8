"""
Flexibility faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every failure the engine
  can surface. Codes are grouped by the layer that raises them.
- FlexibilityException / FlexibilityWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault.
- getdoc(): optional description lookup for a code from the host application.

Layers
- definition time (211xx): raised once while building callbacks, specifications or
  operations; the operation is never created.
- call time (2112x): raised synchronously to the caller of one invocation; nothing
  shared is mutated.

Integration
- Every fault also derives from the builtin exception a Python caller would expect
  (TypeError for arity problems, ValueError for bad values), so plain `except TypeError`
  keeps working.
- Faults are raised; printing one through a rich console renders header, message and hint.
"""
import copy
import inspect
import logging
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

logger = logging.getLogger(__name__)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the engine (stable identifiers).

    grouping
    - definition (2110x/2111x)
      • INVALID_ARITY, UNRECOGNIZED_CALLBACK, UNSUPPORTED_VARIADIC,
        EXCESS_BODY_ARITY, RESERVED_KEY
    - resolution (2112x)
      • TOO_MANY_ARGUMENTS, MISSING_REQUIRED, INVALID_VALUE
    - warnings (22xxx)
      • SHADOWED_ARGUMENT
    """
    # --- definition errors (211xx) ---
    INVALID_ARITY               = 21101
    UNRECOGNIZED_CALLBACK       = 21102
    UNSUPPORTED_VARIADIC        = 21111
    EXCESS_BODY_ARITY           = 21112
    RESERVED_KEY                = 21113

    # --- resolution errors (2112x) ---
    TOO_MANY_ARGUMENTS          = 21121
    MISSING_REQUIRED            = 21122
    INVALID_VALUE               = 21123

    # --- warnings (22xxx) ---
    SHADOWED_ARGUMENT           = 22121

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _payload(name):
    """
    Expose one entry of a fault's options as a read-only attribute.
    """
    return property(lambda self: self.options.get(name), doc=f"the {name!r} carried by this fault")


def _render(fault, palette):
    """
    Shared rich rendering for errors and warnings.

    Options read from the fault
    - title, code, hint: header and footer parts.
    - fancy: wrap in a Panel instead of plain lines (defaults to __main__.__fancy__).
    - colorful: apply the palette (defaults to __main__.__colorful__).
    """
    main = __import__("__main__")
    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    colorful = fault.options.get("colorful", getattr(main, "__colorful__", True))
    fancy = fault.options.get("fancy", getattr(main, "__fancy__", False))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style] if colorful else "")

    header = Text.assemble(
        "[ ",
        text(getattr(main, "__prog__", "flexibility"), "prog-name"),
        " — ",
        text(fault.options["code"].normalize() if "code" in fault.options else "", "code"),
        " | ",
        text(str(fault.options.get("title", type(fault).__name__)).title(), "title"),
        " ]",
    )
    message = text(fault.message, "message")
    hint = Text.assemble(text(" → ", "hint-arrow"), text(fault.options.get("hint"), "hint"))

    if fancy:
        return Panel(Group(message, hint), title=header, title_align="left")
    return Group(header, message, hint)


class FlexibilityException(Exception):
    """
    Base error raised by the engine.

    Carries a lowercased one-sentence message and a read-only options mapping
    (title, code, hint and the payload such as key/value/given/expected).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    code = _payload("code")
    hint = _payload("hint")

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # friendly pinky title
            "message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

    def __trigger__(self) -> None:
        logger.debug("raising %s (%s): %s", type(self).__name__, self.options.get("code"), self.message)
        raise self from None

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class InvalidArityError(FlexibilityException, TypeError): ...
class UnrecognizedCallbackError(FlexibilityException, TypeError):
    key = _payload("key")
    value = _payload("value")
class UnsupportedVariadicError(FlexibilityException, NotImplementedError): ...
class ExcessBodyArityError(FlexibilityException, TypeError):
    given = _payload("given")
    expected = _payload("expected")
class ReservedKeyError(FlexibilityException, ValueError):
    key = _payload("key")
class TooManyArgumentsError(FlexibilityException, TypeError):
    given = _payload("given")
    expected = _payload("expected")
class MissingRequiredError(FlexibilityException, TypeError):
    key = _payload("key")
class InvalidValueError(FlexibilityException, ValueError):
    key = _payload("key")
    value = _payload("value")


class FlexibilityWarning(UserWarning):
    """
    Base warning emitted by the engine; rendered like FlexibilityException.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    code = _payload("code")
    hint = _payload("hint")

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "title": "bold #FFC2E0",  # softer pinky title for warnings
            "message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        })

    def __trigger__(self) -> None:
        logger.debug("warning %s (%s): %s", type(self).__name__, self.options.get("code"), self.message)
        warnings.warn(self, stacklevel=len(inspect.stack()))

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ShadowedArgumentWarning(FlexibilityWarning):
    key = _payload("key")
    value = _payload("value")


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - errors are raised, warnings are emitted through the warnings module.

    typical options
    - title, code, hint, docs, and the payload (key, value, given, expected, operation).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FlexibilityException",
    "InvalidArityError",
    "UnrecognizedCallbackError",
    "UnsupportedVariadicError",
    "ExcessBodyArityError",
    "ReservedKeyError",
    "TooManyArgumentsError",
    "MissingRequiredError",
    "InvalidValueError",
    "FlexibilityWarning",
    "ShadowedArgumentWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
