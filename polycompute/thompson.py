"""Thompson construction of an epsilon-NFA from postfix regex tokens.

Each fragment has exactly one initial and one final state. Fresh state ids
come from an integer counter that every constructor takes and returns, so a
``build`` call owns its numbering and two calls on the same tokens produce
identical automata.
"""
import logging

from .config import EPSILON, STATE_PREFIX
from .errors import MalformedPattern
from .model import Automaton, State, Transition, with_flags
from .regex import CONCAT, STAR, SYMBOL, UNION, parse

logger = logging.getLogger(__name__)


def allocate(counter):
    """Return a fresh state id and the advanced counter."""
    return f'{STATE_PREFIX}{counter}', counter + 1


def merge_alphabets(*alphabets):
    merged = []
    for alphabet in alphabets:
        for symbol in alphabet:
            if symbol not in merged:
                merged.append(symbol)
    return tuple(merged)


def empty_string_automaton(counter=0):
    """A single state that is both initial and final."""
    state_id, counter = allocate(counter)
    state = State(state_id, is_initial=True, is_final=True)
    return Automaton((state,), (), ()), counter


def literal(symbol, counter):
    s0, counter = allocate(counter)
    s1, counter = allocate(counter)
    states = (State(s0, is_initial=True), State(s1, is_final=True))
    transitions = (Transition(s0, s1, symbol),)
    alphabet = () if symbol == EPSILON else (symbol,)
    return Automaton(states, transitions, alphabet), counter


def concatenate(left, right, counter):
    right_initial = right.initial_id
    states = (tuple(with_flags(s, is_final=False) for s in left.states)
              + tuple(with_flags(s, is_initial=False) for s in right.states))
    transitions = (left.transitions + right.transitions
                   + tuple(Transition(s.id, right_initial, EPSILON)
                           for s in left.states if s.is_final))
    return Automaton(states, transitions, merge_alphabets(left.alphabet, right.alphabet)), counter


def union(left, right, counter):
    start, counter = allocate(counter)
    end, counter = allocate(counter)
    states = ((State(start, is_initial=True),)
              + tuple(with_flags(s, is_initial=False, is_final=False) for s in left.states)
              + tuple(with_flags(s, is_initial=False, is_final=False) for s in right.states)
              + (State(end, is_final=True),))
    transitions = ((Transition(start, left.initial_id, EPSILON),
                    Transition(start, right.initial_id, EPSILON))
                   + left.transitions + right.transitions
                   + tuple(Transition(s.id, end, EPSILON) for s in left.states if s.is_final)
                   + tuple(Transition(s.id, end, EPSILON) for s in right.states if s.is_final))
    return Automaton(states, transitions, merge_alphabets(left.alphabet, right.alphabet)), counter


def kleene_star(operand, counter):
    start, counter = allocate(counter)
    end, counter = allocate(counter)
    operand_initial = operand.initial_id
    finals = [s.id for s in operand.states if s.is_final]
    states = ((State(start, is_initial=True),)
              + tuple(with_flags(s, is_initial=False, is_final=False) for s in operand.states)
              + (State(end, is_final=True),))
    transitions = ((Transition(start, operand_initial, EPSILON),
                    Transition(start, end, EPSILON))
                   + operand.transitions
                   + tuple(Transition(f, operand_initial, EPSILON) for f in finals)
                   + tuple(Transition(f, end, EPSILON) for f in finals))
    return Automaton(states, transitions, operand.alphabet), counter


def build(tokens):
    """Build an epsilon-NFA from postfix tokens (see ``regex.parse``).

    Raises MalformedPattern when an operator is missing operands or the
    tokens do not reduce to exactly one fragment.
    """
    counter = 0
    if not tokens:
        nfa, counter = empty_string_automaton(counter)
        return nfa

    stack = []
    for token in tokens:
        if token.kind == SYMBOL:
            fragment, counter = literal(token.value, counter)
        elif token.kind == STAR:
            if not stack:
                raise MalformedPattern("Invalid regular expression: * requires one operand.")
            fragment, counter = kleene_star(stack.pop(), counter)
        elif token.kind in (UNION, CONCAT):
            if len(stack) < 2:
                name = 'Union' if token.kind == UNION else 'Concatenation'
                raise MalformedPattern(
                    f"Invalid regular expression: {name} requires two operands.")
            right, left = stack.pop(), stack.pop()
            combine = union if token.kind == UNION else concatenate
            fragment, counter = combine(left, right, counter)
        else:
            raise MalformedPattern(f"Invalid regular expression: unexpected token {token}.")
        stack.append(fragment)

    if len(stack) != 1:
        raise MalformedPattern("Invalid regular expression: incorrect syntax.")

    nfa = stack.pop()
    logger.debug("Thompson construction produced %d states and %d transitions",
                 len(nfa.states), len(nfa.transitions))
    return nfa


def regex_to_nfa(pattern):
    """Convert a regular expression to an epsilon-NFA using Thompson's construction."""
    return build(parse(pattern))
