"""
argbind registry: alias to argument lookup.

A Registry indexes every alias of every declared Argument. It is built once
and is read-only afterward.

Collisions
- Duplicate aliases across arguments are not rejected: the argument declared
  later overwrites the earlier mapping (last write wins). Each overwrite emits
  a DuplicateAliasWarning so the ambiguity is visible at configuration time.
- An argument whose aliases were all taken over is no longer reachable, and is
  therefore not part of `arguments` (nor of the mandatory check).
"""
from collections.abc import Iterable

from .arguments import Argument
from .faults import DuplicateAliasWarning, trigger
from .utils import mirror


class Registry:
    """
    alias → Argument mapping.

    properties
    - aliases: read-only mapping alias -> Argument.
    - arguments: distinct reachable arguments, ordered by first insertion.

    keyword options (shell, colorful, fancy) are forwarded to trigger() for
    the collision warnings.
    """

    aliases = mirror("aliases")

    def __init__(self, arguments, /, **options):
        if isinstance(arguments, Argument) or not isinstance(arguments, Iterable):
            raise TypeError("registry arguments must be an iterable of arguments")

        self._aliases = {}
        for argument in arguments:
            if not isinstance(argument, Argument):
                raise TypeError(f"registry arguments must be arguments, not {type(argument).__name__!r}")
            for alias in argument.aliases:
                shadowed = self._aliases.get(alias)
                if shadowed is not None and shadowed is not argument:
                    trigger(DuplicateAliasWarning(argument, alias=alias, shadowed=shadowed), **options)
                self._aliases[alias] = argument

        # ordered by the first alias slot each argument still owns
        self._arguments = tuple(dict.fromkeys(self._aliases.values()))

    @classmethod
    def build(cls, arguments, /, **options):
        return cls(arguments, **options)

    @property
    def arguments(self):
        return self._arguments

    def lookup(self, token, /):
        """
        return the argument owning `token`, or None when it is not a known alias.
        """
        return self._aliases.get(token)

    def __contains__(self, token, /):
        return token in self._aliases

    def __getitem__(self, token, /):
        return self._aliases[token]

    def __iter__(self):
        return iter(self._aliases)

    def __len__(self):
        return len(self._aliases)

    def __rich_repr__(self):
        yield "aliases", dict(self._aliases)

    def __repr__(self):
        return f"registry(aliases={self._aliases!r})"


__all__ = (
    "Registry",
)
