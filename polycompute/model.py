import re
from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from .config import EPSILON
from .errors import InvalidPersistedAutomaton


@dataclass(frozen=True)
class State:
    """Represents a state in the automaton."""
    id: str
    label: str = ''
    is_initial: bool = False
    is_final: bool = False

    def __post_init__(self):
        if not self.label:
            object.__setattr__(self, 'label', self.id)

    def __repr__(self):
        return self.id


@dataclass(frozen=True)
class Transition:
    """A move from ``source`` to ``target`` on ``symbol`` (or on epsilon)."""
    source: str
    target: str
    symbol: str

    @property
    def is_epsilon(self):
        return self.symbol == EPSILON

    def __repr__(self):
        return f"δ({self.source}, {self.symbol}) → {self.target}"


@dataclass(frozen=True)
class Automaton:
    """Represents an automaton with states, transitions and an alphabet.

    Values are immutable: algorithms return new automata rather than editing
    the ones they are given. ``states`` keeps creation order, which is only
    used for display.
    """
    states: Tuple[State, ...]
    transitions: Tuple[Transition, ...]
    alphabet: Tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(self, 'states', tuple(self.states))
        object.__setattr__(self, 'transitions', tuple(self.transitions))
        object.__setattr__(self, 'alphabet', tuple(self.alphabet))

    @property
    def state_ids(self) -> Tuple[str, ...]:
        return tuple(state.id for state in self.states)

    @property
    def initial(self) -> Optional[State]:
        for state in self.states:
            if state.is_initial:
                return state
        return None

    @property
    def initial_id(self) -> Optional[str]:
        initial = self.initial
        return initial.id if initial else None

    @property
    def final_ids(self) -> FrozenSet[str]:
        return frozenset(state.id for state in self.states if state.is_final)

    @property
    def symbols(self) -> Tuple[str, ...]:
        """Alphabet members without epsilon, in alphabet order."""
        return tuple(symbol for symbol in self.alphabet if symbol != EPSILON)

    def state(self, state_id) -> State:
        for state in self.states:
            if state.id == state_id:
                return state
        raise KeyError(state_id)

    def transitions_from(self, state_id, symbol=None):
        return [t for t in self.transitions
                if t.source == state_id and (symbol is None or t.symbol == symbol)]

    def has_epsilon_transitions(self):
        return any(t.is_epsilon for t in self.transitions)

    def is_deterministic(self):
        """No epsilon moves and at most one move per (state, symbol)."""
        seen = set()
        for t in self.transitions:
            if t.is_epsilon or (t.source, t.symbol) in seen:
                return False
            seen.add((t.source, t.symbol))
        return True


@dataclass(frozen=True)
class DFA(Automaton):
    """An automaton produced by subset construction.

    ``initial_state`` and ``final_states`` repeat what the state flags say,
    as flat ids. ``subsets`` maps each DFA state id to the NFA states it
    stands for.
    """
    initial_state: str = ''
    final_states: Tuple[str, ...] = ()
    subsets: Dict[str, FrozenSet[str]] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, 'final_states', tuple(self.final_states))

    def step(self, state_id, symbol) -> Optional[str]:
        for t in self.transitions:
            if t.source == state_id and t.symbol == symbol:
                return t.target
        return None


def natural_key(state_id):
    """Sort key that orders ``q2`` before ``q10``."""
    return [int(part) if part.isdigit() else part
            for part in re.split(r'(\d+)', state_id)]


def sorted_ids(state_ids: Iterable[str]):
    return sorted(state_ids, key=natural_key)


def with_flags(state, is_initial=None, is_final=None):
    """Copy of ``state`` with the given flags replaced."""
    changes = {}
    if is_initial is not None:
        changes['is_initial'] = is_initial
    if is_final is not None:
        changes['is_final'] = is_final
    return replace(state, **changes)


def validate(automaton):
    """Reject automata that the algorithms cannot run on.

    Raises InvalidPersistedAutomaton on an empty state set, duplicate state
    ids, more than one initial state, a transition touching an unknown state
    or a non-epsilon transition symbol missing from the alphabet.
    """
    if not automaton.states:
        raise InvalidPersistedAutomaton("Automaton has no states.")

    ids = set()
    for state in automaton.states:
        if state.id in ids:
            raise InvalidPersistedAutomaton(f"Duplicate state id '{state.id}'.")
        ids.add(state.id)

    initials = [state.id for state in automaton.states if state.is_initial]
    if len(initials) > 1:
        raise InvalidPersistedAutomaton(
            f"Automaton has more than one initial state: {', '.join(initials)}.")

    alphabet = set(automaton.alphabet)
    for t in automaton.transitions:
        for end in (t.source, t.target):
            if end not in ids:
                raise InvalidPersistedAutomaton(
                    f"Transition {t!r} references unknown state '{end}'.")
        if not t.is_epsilon and t.symbol not in alphabet:
            raise InvalidPersistedAutomaton(
                f"Transition {t!r} uses symbol '{t.symbol}' outside the alphabet.")
    return automaton
