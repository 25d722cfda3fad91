import logging
from collections import deque

from .closure import epsilon_closure, move
from .config import EMPTY_SET
from .errors import NoInitialState
from .model import DFA, State, Transition, sorted_ids, validate

logger = logging.getLogger(__name__)


def canonical_name(states):
    """Deterministic DFA state name for a set of NFA state ids."""
    if not states:
        return EMPTY_SET
    return '{' + ','.join(sorted_ids(states)) + '}'


def _unique_name(states, taken):
    # ids containing ',' can make two different sets print the same way
    name = canonical_name(states)
    suffix = 2
    candidate = name
    while candidate in taken:
        candidate = f"{name}#{suffix}"
        suffix += 1
    return candidate


def nfa_to_dfa(nfa):
    """Convert an NFA to a DFA using subset construction.

    States are explored breadth first from the epsilon closure of the
    initial state; symbols are tried in alphabet order, so the same NFA
    always yields the same DFA. A move that reaches no NFA state goes to the
    ``∅`` reject sink, which loops to itself.
    """
    validate(nfa)
    initial = nfa.initial_id
    if initial is None:
        raise NoInitialState("NFA has no initial state.")

    symbols = nfa.symbols
    finals = nfa.final_ids
    initial_closure = epsilon_closure({initial}, nfa)
    initial_name = canonical_name(initial_closure)

    names = {initial_closure: initial_name}
    subsets = {initial_name: initial_closure}
    transitions = []
    queue = deque([initial_closure])

    while queue:
        current = queue.popleft()
        for symbol in symbols:
            target = epsilon_closure(move(current, symbol, nfa), nfa)
            if target not in names:
                target_name = _unique_name(target, subsets)
                names[target] = target_name
                subsets[target_name] = target
                queue.append(target)
            transitions.append(Transition(names[current], names[target], symbol))

    states = tuple(
        State(name, is_initial=name == initial_name, is_final=bool(subset & finals))
        for name, subset in subsets.items())
    final_states = tuple(state.id for state in states if state.is_final)

    logger.info("Subset construction: %d NFA states -> %d DFA states",
                len(nfa.states), len(states))
    return DFA(states, tuple(transitions), symbols,
               initial_state=initial_name,
               final_states=final_states,
               subsets=subsets)
