import pytest

from polycompute.closure import epsilon_closure, move, taken_transitions
from polycompute.model import Automaton, State, Transition
from polycompute.subset import nfa_to_dfa
from polycompute.thompson import regex_to_nfa


def test_closure_of_star_start():
    nfa = regex_to_nfa("a*")
    assert epsilon_closure({"q2"}, nfa) == {"q2", "q0", "q3"}
    assert epsilon_closure({"q1"}, nfa) == {"q1", "q0", "q3"}


def test_closure_without_epsilon_moves_is_identity():
    nfa = regex_to_nfa("a")
    assert epsilon_closure({"q0"}, nfa) == {"q0"}
    assert epsilon_closure(set(), nfa) == frozenset()


def test_closure_terminates_on_epsilon_cycles():
    states = (State("p", is_initial=True), State("q"), State("r", is_final=True))
    transitions = (Transition("p", "q", "ε"), Transition("q", "p", "ε"),
                   Transition("q", "r", "ε"), Transition("r", "r", "ε"))
    automaton = Automaton(states, transitions, ())
    assert epsilon_closure({"p"}, automaton) == {"p", "q", "r"}


@pytest.mark.parametrize("pattern", ["(a|b)*abb", "(a*|b)*", "ε|a(b|ε)*", "((a|ε)*)*"])
def test_closure_is_idempotent_superset(pattern):
    nfa = regex_to_nfa(pattern)
    sets = [frozenset({s}) for s in nfa.state_ids]
    sets += list(nfa_to_dfa(nfa).subsets.values())
    for states in sets:
        closed = epsilon_closure(states, nfa)
        assert closed >= states
        assert epsilon_closure(closed, nfa) == closed


def test_move_and_taken_transitions():
    nfa = regex_to_nfa("a|b")
    closure = epsilon_closure({"q4"}, nfa)
    assert move(closure, "a", nfa) == {"q1"}
    assert move(closure, "c", nfa) == frozenset()
    assert taken_transitions(closure, "b", nfa) == (Transition("q2", "q3", "b"),)
