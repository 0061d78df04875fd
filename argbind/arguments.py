r"""
argbind argument specifications.

Overview
- Arity: the parameter-count contract of an argument.
  • NONE: presence-only (e.g. -v/--verbose).
  • SINGLE: exactly one parameter (e.g. -o out.txt).
  • MULTIPLE: zero or more parameters, greedily bounded by the next known alias
    (e.g. -f a.txt b.txt).

- Argument: immutable descriptor of one declarable argument (aliases, arity,
  mandatory flag, default parameters, optional description).

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes the
    fields listed in __introspectable__ via read-only properties.

Metadata (sanitized on construction)
- aliases: one or more non-empty strings without whitespace; duplicates within a
  single argument are rejected. Order is preserved; the first alias is the display name.
- arity: Arity member or its name/value as a string ("none", "single", "multiple").
- mandatory: bool.
- defaults: iterable of strings (a bare string is rejected), kept as a tuple.
- descr: Unset | str | Text (short help), non-empty when provided.

Identity
- Arguments hash and compare by identity. Parsed results are keyed by the very
  Argument instances that were declared, so callers keep and reuse them for queries.

Quick example:
    >>> from argbind import Argument, Arity
    >>> verbose = Argument("-v", "--verbose")
    >>> output = Argument("-o", "--output", arity=Arity.SINGLE, defaults=["out.txt"])
    >>> files = Argument("-f", "--files", arity="multiple", mandatory=True)
"""
import functools
import operator
import re
from collections.abc import Iterable
from enum import Enum

from rich.text import Text

from .utils import *


class Arity(Enum):
    """
    parameter-count contract of an argument.

    the string values are accepted wherever an Arity is expected, matched
    case-insensitively (Arity("Single") is Arity.SINGLE).
    """
    NONE = "none"
    SINGLE = "single"
    MULTIPLE = "multiple"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            value = value.strip().lower()
            for member in cls:
                if member.value == value:
                    return member
        return None


class ArgumentType(type):
    """
    Metaclass that turns specs into introspectable descriptors.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics (rich.pretty understands __rich_repr__).

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - argument(aliases=('-v', '--verbose'), arity=<Arity.NONE: 'none'>, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize the optional 'descr' field.

    - descr: if omitted (Unset) it becomes None; if provided it must be a
      non-empty string after trimming (or a rich Text).

    Raises
    - TypeError: when 'descr' is neither a string, a Text, nor Unset.
    - ValueError: when 'descr' is empty after trimming.
    """
    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")

    metadata["descr"] = coalesce(descr)


def _sanitize_aliases(cls, metadata, /):
    """
    Internal: validate the aliases of an argument.

    Aliases are matched literally against tokens, so they are never rewritten:
    each one must be a non-empty string without any whitespace (leading and
    trailing included) and unique within the argument. Declaration order is
    preserved.

    Raises
    - TypeError: when no alias is given or an alias is not a string.
    - ValueError: when an alias is empty, contains whitespace, or is repeated.
    """
    aliases = []
    if not metadata["aliases"]:
        raise TypeError(f"{cls.__typename__} must specify at least one alias")

    for alias in metadata["aliases"]:
        if not isinstance(alias, str):
            raise TypeError(f"{cls.__typename__} aliases must be strings")
        elif not alias.strip():
            raise ValueError(f"{cls.__typename__} aliases cannot be empty-strings")
        elif re.search(r"\s", alias):
            raise ValueError(f"{cls.__typename__} aliases cannot contain whitespaces")
        elif alias in aliases:
            raise ValueError(f"{cls.__typename__} aliases cannot contain duplicates")
        aliases.append(alias)

    metadata["aliases"] = tuple(aliases)


def _sanitize_parametric_metadata(cls, metadata, /):
    """
    Internal: validate arity, mandatory and defaults.

    - arity: Arity member or a string naming one (case-insensitive).
    - mandatory: coerced to bool.
    - defaults: iterable of strings; a bare string is rejected because it would
      otherwise be split into characters.
    """
    if not isinstance(arity := metadata["arity"], Arity | str):
        raise TypeError(f"{cls.__typename__} 'arity' must be an Arity or a string")
    try:
        metadata["arity"] = Arity(arity)
    except ValueError:
        raise ValueError(f"{cls.__typename__} 'arity' must be one of 'none', 'single', or 'multiple'") from None

    metadata["mandatory"] = bool(metadata["mandatory"])

    if isinstance(defaults := metadata["defaults"], str) or not isinstance(defaults, Iterable):
        raise TypeError(f"{cls.__typename__} 'defaults' must be an iterable of strings")
    defaults = tuple(defaults)
    if not all(isinstance(default, str) for default in defaults):
        raise TypeError(f"{cls.__typename__} 'defaults' must contain only strings")
    metadata["defaults"] = defaults


class Argument(metaclass=ArgumentType):
    """
    Named argument specification.

    Argument declares the aliases under which an argument is recognized, how
    many parameters follow it, whether it must be present, and which parameters
    to report when it is absent.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes
      on instances, mirroring the sanitized metadata values.
    """

    __introspectable__ = (
        "aliases",
        "arity",
        "mandatory",
        "defaults",
        "descr",
    )

    def __new__(
            cls,
            *aliases,
            arity=Arity.NONE,
            mandatory=False,
            defaults=(),
            descr=Unset,
    ):
        """
        Construct an Argument spec with the provided metadata.

        Parameters
        - aliases: one or more str
          Tokens identifying the argument on the command line, e.g. "-o", "--output".
        - arity: Arity | str
          NONE (default), SINGLE or MULTIPLE.
        - mandatory: bool
          When True, parsing with validation fails if the argument is absent.
        - defaults: Iterable[str]
          Parameters reported for the argument when it is absent.
        - descr: Unset | str | Text
          Short description used in diagnostics. None when Unset.
        """
        metadata = {
            "aliases": aliases,
            "arity": arity,
            "mandatory": mandatory,
            "defaults": defaults,
            "descr": descr,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_aliases(cls, metadata)
        _sanitize_parametric_metadata(cls, metadata)

        self = super().__new__(cls)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        return self

    @property
    def name(self):
        """
        display name: the first declared alias.
        """
        return self._aliases[0]

    # parsed results are keyed by identity: copies are the argument itself
    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return functools.partial(
            type(self),
            arity=self._arity,
            mandatory=self._mandatory,
            defaults=self._defaults,
            descr=Unset if self._descr is None else self._descr,
        ), self._aliases

    def __argument__(self):
        """
        Introspection hook: identify this spec as an Argument.
        """
        return self


__all__ = (
    "Arity",
    "Argument",
)

# Not part of the public API.
del ArgumentType
