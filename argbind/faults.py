"""
argbind faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every parse failure and
  configuration warning. Errors live in 211xx, warnings in 221xx.
- ParseError / ArgumentWarning: base types that carry the offending argument,
  the reason code and rendering options, and know how to render themselves.
- trigger(): central entry point to surface any fault (raise/warn, or render
  and exit in shell mode).
- getdoc(): optional description lookup for a code from the host application.

Taxonomy (closed)
- MandatoryNotProvidedError: a mandatory argument has no binding after a full scan.
- MissingParamsError: a single-parameter argument is the last token, or is
  followed by another known alias.
- InvalidParamsError: reserved. The scanner never raises it; it is kept so that
  extension validation (e.g. checking parameter values) has a stable code.
- DuplicateAliasWarning: two arguments declared the same alias; the later one wins.

Integration
- The parser raises ParseError subclasses directly (fail-fast).
- CLI entry points call trigger(error, shell=True) to render the error on stderr
  with rich and exit with status 1.
- Hosts may customize output through __prog__, __styles__, __codes__ and
  __docs__ attributes of their __main__ module.
"""
import copy
import functools
import os.path
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)

_package = os.path.dirname(__file__) + os.sep


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - parse errors (211xx)
      • MANDATORY_NOT_PROVIDED, MISSING_PARAMS, INVALID_PARAMS
    - configuration warnings (221xx)
      • DUPLICATE_ALIAS
    """
    # --- parse errors (211xx) ---
    MANDATORY_NOT_PROVIDED      = 21101
    MISSING_PARAMS              = 21102
    INVALID_PARAMS              = 21103

    # --- warnings (221xx) ---
    DUPLICATE_ALIAS             = 22101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _progname():
    return getattr(__import__("__main__"), "__prog__", os.path.basename(sys.argv[0]) or "argbind")


def _render(fault, palette):
    """
    shared rich rendering: "[ prog — code | title ]", the message, and a hint line.

    the palette provides default styles; __main__.__styles__ overrides them.
    """
    options = defaultdict(bool, fault.options)
    styles = defaultdict(str, palette | getattr(__import__("__main__"), "__styles__", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment if options["colorful"] else Text(fragment.plain)
        return Text(str(fragment), styles[style] if options["colorful"] else "")

    header = Text.assemble(
        "[ ",
        text(_progname(), "prog-name"),
        " — ",
        text(fault.reason.normalize(), "code"),
        " | ",
        text(fault.title.title(), "title"),
        " ]"
    )
    message = text(fault.message, "message")
    hint = Text.assemble(text(" → ", "hint-arrow"), text(fault.hint, "hint"))

    if options["fancy"]:
        return Panel(Group(message, hint), title=header, title_align="left")

    return Group(header, message, hint)


class ParseError(Exception):
    """
    failure of a parse, carrying the offending argument and the reason code.

    attributes
    - argument: the Argument that failed.
    - reason: FaultCode identifying the failure.
    - message: human-readable, lower-cased description (also str(error)).
    - hint: one actionable sentence.
    - options: read-only rendering options (shell, colorful, fancy).
    """
    __reason__ = Unset
    __title__ = "parse error"

    def __init__(self, argument, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.argument = argument
        self.reason = type(self).__reason__
        self.message = message if message else self._describe()
        self.options = MappingProxyType(options)
        super().__init__(self.message)

    @property
    def title(self):
        return type(self).__title__

    @property
    def hint(self):
        return self._suggest()

    def _describe(self):
        return f"argument {self.argument.name!r} cannot be parsed"

    def _suggest(self):
        return getdoc(self.reason) or "check the command line and try again"

    @classmethod
    def for_reason(cls, argument, reason, /, **options):
        """
        build the concrete error for a reason code.

        the lookup covers `cls` itself and all of its descendants.
        """
        pending = [cls]
        while pending:
            subclass = pending.pop(0)
            if subclass.__reason__ == reason:
                return subclass(argument, **options)
            pending.extend(subclass.__subclasses__())
        raise ValueError(f"{reason!r} is not a {cls.__name__} reason")

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "title": "bold #FF4DA6",
            "message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.argument, self.message, **{**self.options, **overrides})

    def __reduce__(self):
        # args hold only the message; rebuild from the argument and plain-dict options
        return functools.partial(type(self), **self.options), (self.argument, self.message)


class MandatoryNotProvidedError(ParseError):
    __reason__ = FaultCode.MANDATORY_NOT_PROVIDED
    __title__ = "mandatory argument not provided"

    def _describe(self):
        return f"argument {self.argument.name!r} is mandatory but was not provided"

    def _suggest(self):
        return getdoc(self.reason) or f"specify it with one of: {", ".join(self.argument.aliases)}"


class MissingParamsError(ParseError):
    __reason__ = FaultCode.MISSING_PARAMS
    __title__ = "missing parameter"

    def _describe(self):
        return f"argument {self.argument.name!r} requires a parameter"

    def _suggest(self):
        return getdoc(self.reason) or f"pass a value right after {self.argument.name!r}"


class InvalidParamsError(ParseError):
    __reason__ = FaultCode.INVALID_PARAMS
    __title__ = "invalid parameters"

    def _describe(self):
        return f"argument {self.argument.name!r} received invalid parameters"


class ArgumentWarning(Warning):
    """
    configuration warning about declared arguments.
    """
    __reason__ = Unset
    __title__ = "argument warning"

    def __init__(self, argument, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.argument = argument
        self.reason = type(self).__reason__
        self.message = message if message else f"argument {argument.name!r} is misconfigured"
        self.options = MappingProxyType(options)
        super().__init__(self.message)

    @property
    def title(self):
        return type(self).__title__

    @property
    def hint(self):
        return getdoc(self.reason) or "review the declared arguments"

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "title": "bold #FFC2E0",
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            # attributed to the first frame outside of this package
            return warnings.warn(self, stacklevel=2, skip_file_prefixes=(_package,))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.argument, self.message, **{**self.options, **overrides})

    def __reduce__(self):
        return functools.partial(type(self), **self.options), (self.argument, self.message)


class DuplicateAliasWarning(ArgumentWarning):
    """
    an alias was declared by more than one argument; the later declaration wins.

    `argument` is the winning argument, `alias` the contested token and
    `shadowed` the argument that lost it.
    """
    __reason__ = FaultCode.DUPLICATE_ALIAS
    __title__ = "duplicate alias"

    def __init__(self, argument, message=Unset, /, **options):
        self.alias = options.get("alias")
        self.shadowed = options.get("shadowed")
        if not message and self.shadowed is not None:
            message = f"alias {self.alias!r} of {self.shadowed.name!r} is overridden by {argument.name!r}"
        super().__init__(argument, message, **options)

    @property
    def hint(self):
        return getdoc(self.reason) or "give every argument its own aliases"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise errors are
      raised and warnings are emitted through the warnings module.

    typical options
    - shell, fancy, colorful, and any other context the renderer may use.
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
    are FaultCode instances and values are short hint strings. when not found,
    returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ParseError",
    "MandatoryNotProvidedError",
    "MissingParamsError",
    "InvalidParamsError",
    "ArgumentWarning",
    "DuplicateAliasWarning",
    "trigger",
    "getdoc",
)
