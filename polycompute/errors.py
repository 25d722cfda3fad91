"""Errors raised by the automata engine.

Every error derives from ValueError so callers can report any engine failure
with a single ``except ValueError`` clause.
"""


class AutomatonError(ValueError):
    """Base class for engine errors."""


class MalformedPattern(AutomatonError):
    """Unbalanced parentheses, an operator without operands, or a pattern
    that does not reduce to a single fragment."""


class NoInitialState(AutomatonError):
    """An algorithm was run on an automaton with no initial state."""


class InvalidPersistedAutomaton(AutomatonError):
    """A supplied automaton failed structural validation."""


class AutomatonNotReady(AutomatonError):
    """The builder does not yet hold a state and an initial state."""


class BuilderError(AutomatonError):
    """An interactive builder action was rejected."""
