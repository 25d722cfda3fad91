import logging
from collections import deque

from .config import DFA_CLASS_PREFIX, STATE_PREFIX
from .model import DFA, State, Transition

logger = logging.getLogger(__name__)


def reachable_states(dfa):
    """State ids reachable from the initial state, in breadth-first order."""
    order = [dfa.initial_state]
    queue = deque(order)
    seen = set(order)
    while queue:
        current = queue.popleft()
        for symbol in dfa.alphabet:
            target = dfa.step(current, symbol)
            if target is not None and target not in seen:
                seen.add(target)
                order.append(target)
                queue.append(target)
    return order


def rename_states(dfa, prefix=DFA_CLASS_PREFIX, start=1):
    """Give DFA states short names (``e1``, ``e2``...) in discovery order."""
    mapping = {state.id: f'{prefix}{i}' for i, state in enumerate(dfa.states, start=start)}
    states = tuple(State(mapping[s.id], is_initial=s.is_initial, is_final=s.is_final)
                   for s in dfa.states)
    transitions = tuple(Transition(mapping[t.source], mapping[t.target], t.symbol)
                        for t in dfa.transitions)
    subsets = {mapping[old]: subset for old, subset in dfa.subsets.items() if old in mapping}
    return DFA(states, transitions, dfa.alphabet,
               initial_state=mapping[dfa.initial_state],
               final_states=tuple(mapping[s] for s in dfa.final_states),
               subsets=subsets)


def minimize_dfa(dfa):
    """Minimize the DFA by partition refinement.

    Start from the final / non-final split and keep splitting blocks whose
    states disagree, for some symbol, on the block they move into. Missing
    moves count as moving to a shared missing target.
    """
    reachable = reachable_states(dfa)
    final_states = set(dfa.final_states)

    partitions = [block for block in (
        [s for s in reachable if s in final_states],
        [s for s in reachable if s not in final_states],
    ) if block]

    # Repeatedly refine the partition until no more refinements are possible
    prev_partition_count = 0
    while len(partitions) != prev_partition_count:
        prev_partition_count = len(partitions)
        block_of = {state: i for i, block in enumerate(partitions) for state in block}
        new_partitions = []
        for partition in partitions:
            groups = {}
            for state in partition:
                signature = tuple(block_of.get(dfa.step(state, symbol), -1)
                                  for symbol in dfa.alphabet)
                groups.setdefault(signature, []).append(state)
            new_partitions.extend(groups.values())
        partitions = new_partitions

    block_of = {state: i for i, block in enumerate(partitions) for state in block}

    # Name blocks in breadth-first order from the initial block
    names = {}
    queue = deque([block_of[dfa.initial_state]])
    while queue:
        block = queue.popleft()
        if block in names:
            continue
        names[block] = f'{STATE_PREFIX}{len(names)}'
        representative = partitions[block][0]
        for symbol in dfa.alphabet:
            target = dfa.step(representative, symbol)
            if target is not None and block_of[target] not in names:
                queue.append(block_of[target])

    ordered = list(names)
    states = tuple(State(names[block],
                         is_initial=block == block_of[dfa.initial_state],
                         is_final=partitions[block][0] in final_states)
                   for block in ordered)
    transitions = []
    for block in ordered:
        representative = partitions[block][0]
        for symbol in dfa.alphabet:
            target = dfa.step(representative, symbol)
            if target is not None:
                transitions.append(Transition(names[block], names[block_of[target]], symbol))

    subsets = {names[block]: frozenset(partitions[block]) for block in ordered}
    minimized = DFA(states, tuple(transitions), dfa.alphabet,
                    initial_state=names[block_of[dfa.initial_state]],
                    final_states=tuple(s.id for s in states if s.is_final),
                    subsets=subsets)
    logger.info("DFA minimization complete: reduced from %d to %d states.",
                len(dfa.states), len(minimized.states))
    return minimized
