import graphviz
import pandas as pd

from .config import (ACTIVE_BORDER, ACTIVE_FILL, EDGE_COLOR, EMPTY_SET, EPSILON,
                     FINAL_COLOR, INITIAL_COLOR, INITIAL_FINAL_COLOR, NODE_BORDER, NODE_FILL)
from .model import sorted_ids

START_NODE = '__start__'


def to_digraph(automaton, active_states=(), active_transitions=(), title=None):
    """Create a graphical representation of the automaton using Graphviz.

    ``active_states`` and ``active_transitions`` are highlighted, which is
    how the simulator shows the current step.
    """
    active_states = set(active_states)
    active_transitions = {(t.source, t.target, t.symbol) for t in active_transitions}

    dot = graphviz.Digraph(comment=title or 'Automaton')
    dot.attr(rankdir='LR')  # Left to right layout
    dot.attr('node', shape='circle', style='filled', fillcolor=NODE_FILL, fontname='Arial')

    initial = automaton.initial_id
    if initial is not None:
        dot.node(START_NODE, label='', shape='point', width='0.1', color='gray')
        dot.edge(START_NODE, initial, color='gray', penwidth='2')

    for state in automaton.states:
        color, fillcolor = NODE_BORDER, NODE_FILL
        if state.id in active_states:
            color, fillcolor = ACTIVE_BORDER, ACTIVE_FILL
        elif state.is_initial and state.is_final:
            color = INITIAL_FINAL_COLOR
        elif state.is_final:
            color = FINAL_COLOR
        elif state.is_initial:
            color = INITIAL_COLOR
        dot.node(state.id, label=state.label,
                 peripheries='2' if state.is_final else '1',
                 color=color, fillcolor=fillcolor)

    for t in automaton.transitions:
        active = (t.source, t.target, t.symbol) in active_transitions
        dot.edge(t.source, t.target, label=t.symbol,
                 color=INITIAL_COLOR if active else EDGE_COLOR,
                 fontcolor=INITIAL_COLOR if active else EDGE_COLOR,
                 penwidth='3.5' if active else '2.2')

    return dot


def _marked(state):
    name = state.label
    if state.is_initial:
        name += " (Start)"
    if state.is_final:
        name += " (Final)"
    return name


def transition_table(automaton):
    """One row per (state, symbol) pair that has at least one target."""
    symbols = list(automaton.alphabet)
    if EPSILON not in symbols and automaton.has_epsilon_transitions():
        symbols.append(EPSILON)

    rows = []
    for state in automaton.states:
        for symbol in symbols:
            targets = [t.target for t in automaton.transitions_from(state.id, symbol)]
            if targets:
                rows.append({
                    "State": state.label,
                    "Input Symbol": symbol,
                    "Next State(s)": ', '.join(targets),
                    "Initial": state.is_initial,
                    "Final": state.is_final,
                })
    return pd.DataFrame(rows, columns=["State", "Input Symbol", "Next State(s)", "Initial", "Final"])


def dfa_table(dfa):
    """Display the DFA's transition table with start and final state markers."""
    rows = []
    for state in dfa.states:
        row = {"State": _marked(state)}
        for symbol in dfa.alphabet:
            target = dfa.step(state.id, symbol)
            row[symbol] = target if target is not None else "-"  # Indicate no transition
        rows.append(row)
    return pd.DataFrame(rows, columns=["State"] + list(dfa.alphabet))


def subset_table(dfa):
    """Which NFA states each DFA state stands for."""
    rows = []
    for state in dfa.states:
        subset = dfa.subsets.get(state.id, frozenset())
        rows.append({
            "DFA State": state.id,
            "NFA States": '{' + ', '.join(sorted_ids(subset)) + '}' if subset else EMPTY_SET,
            "Is DFA Final State?": "Yes" if state.is_final else "No",
        })
    return pd.DataFrame(rows, columns=["DFA State", "NFA States", "Is DFA Final State?"])
