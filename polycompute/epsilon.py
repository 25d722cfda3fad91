from .closure import epsilon_closure
from .config import EPSILON
from .model import Automaton, Transition, validate, with_flags


def remove_epsilon_transitions(nfa):
    """Convert an NFA with epsilon transitions to an equivalent one without.

    Every state keeps its id. A state gains the symbol transitions of all
    states in its epsilon closure, and becomes final when its closure
    contains a final state.
    """
    validate(nfa)
    finals = nfa.final_ids
    closures = {state.id: epsilon_closure({state.id}, nfa) for state in nfa.states}

    transitions = []
    seen = set()
    for state in nfa.states:
        for t in nfa.transitions:
            if t.is_epsilon or t.source not in closures[state.id]:
                continue
            key = (state.id, t.target, t.symbol)
            if key not in seen:
                seen.add(key)
                transitions.append(Transition(*key))

    states = tuple(with_flags(state, is_final=bool(closures[state.id] & finals))
                   for state in nfa.states)
    alphabet = tuple(symbol for symbol in nfa.alphabet if symbol != EPSILON)
    return Automaton(states, tuple(transitions), alphabet)
