from collections import defaultdict

from .config import EPSILON


def epsilon_moves(automaton):
    """Map each state id to the targets of its epsilon transitions."""
    moves = defaultdict(list)
    for t in automaton.transitions:
        if t.symbol == EPSILON:
            moves[t.source].append(t.target)
    return moves


def epsilon_closure(states, automaton):
    """Compute the epsilon closure of a set of state ids."""
    moves = epsilon_moves(automaton)
    stack = list(states)
    closure = set(stack)

    while stack:
        current_state = stack.pop()
        for next_state in moves.get(current_state, ()):
            if next_state not in closure:
                closure.add(next_state)
                stack.append(next_state)
    return frozenset(closure)


def taken_transitions(states, symbol, automaton):
    """Transitions on ``symbol`` leaving any state in ``states``, in automaton order."""
    return tuple(t for t in automaton.transitions
                 if t.source in states and t.symbol == symbol)


def move(states, symbol, automaton):
    """States reachable from ``states`` by one transition on ``symbol``."""
    return frozenset(t.target for t in taken_transitions(states, symbol, automaton))
