"""
argbind parsing: bind raw command-line tokens to declared arguments.

Scan
- The cursor is a plain index into the token tuple.
- Unknown tokens are skipped (traced, never an error).
- Arity.NONE binds an empty tuple.
- Arity.SINGLE binds the next token, which must exist and must not be a known
  alias; otherwise the parse fails with MissingParamsError.
- Arity.MULTIPLE binds every following token up to the end of input or the next
  known alias (possibly none). The cursor is left on that alias so it is
  reconsidered as a fresh argument.
- A repeated argument keeps its last binding.

Diagnostics
- The parser reports what it does to a sink: sink(event, token, /, *, index, argument).
  The default sink logs through the "argbind.parsing" logger at DEBUG level;
  sink=None disables tracing. Sinks never influence the scan.

Entry points
- Arguments(tokens, arguments, validate=False, /, *, sink=Unset): parse and query.
- parse(arguments, tokens=Unset, /, *, validate=True, shell=False, ...): CLI
  helper reading sys.argv and rendering failures in shell mode.
"""
import logging
import sys
from collections.abc import Iterable
from enum import Enum

from .arguments import Argument, Arity
from .faults import MandatoryNotProvidedError, MissingParamsError, ParseError, trigger
from .registry import Registry
from .utils import *

logger = logging.getLogger(__name__)


class Trace(Enum):
    """
    diagnostic events reported to the sink.
    """
    UNKNOWN = "unknown"
    MATCHED = "matched"
    PARAMETER = "parameter"


def logsink(logger, /, level=logging.DEBUG):
    """
    build a sink that forwards trace events to a stdlib logger.
    """
    messages = {
        Trace.UNKNOWN: "unknown argument %r at %d, skipping it",
        Trace.MATCHED: "found known argument %r at %d",
        Trace.PARAMETER: "|__ param: %r at %d",
    }

    @rename("sink")
    def sink(event, token, /, *, index, argument):
        logger.log(level, messages[event], token, index)

    return sink


class Arguments:
    """
    Parsed command line: the bindings of declared arguments to their parameters.

    Construction runs the scan to completion or raises the first ParseError met
    in token order. The instance is immutable afterward and every query is pure.

    Parameters
    - tokens: Iterable[str]
      The raw argument vector, conventionally without the program name.
    - arguments: Iterable[Argument] | Registry
      The declared arguments recognized for this invocation.
    - validate: bool
      When True, the mandatory check runs at the end of construction.
    - sink: Unset | None | callable
      Diagnostic trace sink (see logsink). Unset selects the module logger.

    Queries
    - parameters(argument) → bound parameters, or the argument defaults.
    - parameter(argument)  → first of parameters(argument), or None.
    - contains(argument) / argument in self → whether it was given.
    - validate()          → mandatory check (MandatoryNotProvidedError).
    """

    tokens = mirror("tokens")
    bindings = mirror("bindings")
    unknown = mirror("unknown")

    def __init__(self, tokens, arguments, validate=False, /, *, sink=Unset):
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("arguments tokens must be an iterable of strings")
        self._tokens = tuple(tokens)
        if not all(isinstance(token, str) for token in self._tokens):
            raise TypeError("arguments tokens must contain only strings")

        self._registry = arguments if isinstance(arguments, Registry) else Registry(arguments)
        self._sink = coalesce(sink, logsink(logger))
        self._bindings = {}
        self._unknown = []

        self._scan()

        if validate:
            self.validate()

    @property
    def registry(self):
        return self._registry

    def _trace(self, event, index, argument=None):
        if self._sink is not None:
            self._sink(event, self._tokens[index], index=index, argument=argument)

    def _scan(self):
        tokens = self._tokens
        registry = self._registry
        index = 0

        while index < len(tokens):
            argument = registry.lookup(tokens[index])
            if argument is None:
                self._trace(Trace.UNKNOWN, index)
                self._unknown.append(tokens[index])
                index += 1
                continue

            self._trace(Trace.MATCHED, index, argument)

            match argument.arity:
                case Arity.NONE:
                    self._bindings[argument] = ()
                    index += 1
                case Arity.SINGLE:
                    index += 1
                    if index >= len(tokens) or tokens[index] in registry:
                        raise MissingParamsError(argument)
                    self._trace(Trace.PARAMETER, index, argument)
                    self._bindings[argument] = (tokens[index],)
                    index += 1
                case Arity.MULTIPLE:
                    index += 1
                    parameters = []
                    while index < len(tokens) and tokens[index] not in registry:
                        self._trace(Trace.PARAMETER, index, argument)
                        parameters.append(tokens[index])
                        index += 1
                    # the cursor stays on the alias that ended the run, if any
                    self._bindings[argument] = tuple(parameters)

    @staticmethod
    def _check(argument):
        if not isinstance(argument, Argument):
            raise TypeError(f"expected an argument, not {type(argument).__name__!r}")
        return argument

    def parameters(self, argument, /):
        """
        return the parameters bound to `argument`.

        when the argument was not given, its declared defaults are returned
        (an empty tuple when it declares none).
        """
        self._check(argument)
        try:
            return self._bindings[argument]
        except KeyError:
            return argument.defaults

    def parameter(self, argument, /):
        """
        return the first parameter of `argument`, or None.
        """
        parameters = self.parameters(argument)
        return parameters[0] if parameters else None

    def contains(self, argument, /):
        """
        whether `argument` was given on the command line.

        only Arity.MULTIPLE arguments can be given with no parameters, so this
        is how "-f" alone is told apart from no "-f" at all.
        """
        return self._check(argument) in self._bindings

    def validate(self):
        """
        raise MandatoryNotProvidedError for the first mandatory argument
        (in registry order) that was not given.
        """
        for argument in self._registry.arguments:
            if argument.mandatory and argument not in self._bindings:
                raise MandatoryNotProvidedError(argument)

    def __contains__(self, argument, /):
        return isinstance(argument, Argument) and argument in self._bindings

    def __iter__(self):
        return iter(tuple(self._bindings))

    def __len__(self):
        return len(self._bindings)

    def __rich_repr__(self):
        yield "bindings", {argument.name: parameters for argument, parameters in self._bindings.items()}
        if self._unknown:
            yield "unknown", tuple(self._unknown)

    def __repr__(self):
        return "arguments(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


def parse(arguments, tokens=Unset, /, *, validate=True, shell=False, colorful=True, fancy=False, sink=Unset):
    """
    parse a command line, surfacing failures the way a CLI entry point does.

    parameters
    - arguments: Iterable[Argument] | Registry
    - tokens: Iterable[str]; defaults to sys.argv[1:].
    - validate: run the mandatory check (default True).
    - shell: when True, a ParseError is rendered on stderr with rich and the
      process exits with status 1; otherwise the error propagates. Collision
      warnings of a registry built here are rendered the same way.
    - colorful, fancy: rendering options forwarded to trigger().
    - sink: diagnostic sink forwarded to Arguments.
    """
    if not isinstance(arguments, Registry):
        arguments = Registry(arguments, shell=shell, colorful=colorful, fancy=fancy)
    try:
        return Arguments(coalesce(tokens, sys.argv[1:]), arguments, validate, sink=sink)
    except ParseError as error:
        if not shell:
            raise
        trigger(error, shell=True, colorful=colorful, fancy=fancy)


__all__ = (
    "Trace",
    "Arguments",
    "logsink",
    "parse",
)
