from polycompute.epsilon import remove_epsilon_transitions
from polycompute.minimize import minimize_dfa, reachable_states, rename_states
from polycompute.model import DFA, State, Transition
from polycompute.simulate import accepts
from polycompute.subset import nfa_to_dfa
from polycompute.thompson import regex_to_nfa


def test_remove_epsilon_transitions_from_star():
    nfa = regex_to_nfa("a*")
    result = remove_epsilon_transitions(nfa)
    assert not result.has_epsilon_transitions()
    assert result.state_ids == nfa.state_ids
    assert result.final_ids == {"q2", "q1", "q3"}
    assert set(result.transitions) == {
        Transition("q2", "q1", "a"),
        Transition("q0", "q1", "a"),
        Transition("q1", "q1", "a"),
    }


def test_remove_epsilon_transitions_keeps_initial_and_drops_epsilon_symbol():
    nfa = regex_to_nfa("ε|a")
    result = remove_epsilon_transitions(nfa)
    assert result.initial_id == nfa.initial_id
    assert "ε" not in result.alphabet
    assert accepts(result, "")
    assert accepts(result, "a")
    assert not accepts(result, "aa")


def test_rename_states():
    dfa = rename_states(nfa_to_dfa(regex_to_nfa("ab")))
    assert dfa.state_ids == ("e1", "e2", "e3", "e4")
    assert dfa.initial_state == "e1"
    assert dfa.final_states == ("e4",)
    assert dfa.subsets["e3"] == frozenset()
    assert Transition("e1", "e2", "a") in dfa.transitions
    assert accepts(dfa, "ab")
    assert not accepts(dfa, "a")


def test_minimize_textbook_example():
    dfa = nfa_to_dfa(regex_to_nfa("(a|b)*abb"))
    minimal = minimize_dfa(dfa)
    assert len(minimal.states) == 4
    assert minimal.initial_state == "q0"
    assert len(minimal.final_states) == 1
    assert minimal.is_deterministic()


def test_minimize_keeps_sink_distinct():
    minimal = minimize_dfa(nfa_to_dfa(regex_to_nfa("ab")))
    assert len(minimal.states) == 4
    assert minimal.state_ids == ("q0", "q1", "q2", "q3")


def test_minimize_merges_equivalent_states():
    dfa = nfa_to_dfa(regex_to_nfa("a*"))
    minimal = minimize_dfa(dfa)
    assert len(minimal.states) == 1
    assert minimal.transitions == (Transition("q0", "q0", "a"),)
    assert minimal.subsets["q0"] == frozenset(dfa.state_ids)


def test_minimize_drops_unreachable_states():
    states = (State("p", is_initial=True), State("f", is_final=True), State("x"))
    transitions = (Transition("p", "f", "a"), Transition("f", "f", "a"),
                   Transition("x", "p", "a"))
    dfa = DFA(states, transitions, ("a",), initial_state="p", final_states=("f",))
    assert reachable_states(dfa) == ["p", "f"]
    minimal = minimize_dfa(dfa)
    assert len(minimal.states) == 2
    assert accepts(minimal, "a")
    assert not accepts(minimal, "")


def test_minimize_incomplete_dfa():
    states = (State("p", is_initial=True), State("f", is_final=True))
    dfa = DFA(states, (Transition("p", "f", "a"),), ("a", "b"),
              initial_state="p", final_states=("f",))
    minimal = minimize_dfa(dfa)
    assert len(minimal.states) == 2
    assert accepts(minimal, "a")
    assert not accepts(minimal, "b")
