import pytest

from polycompute.errors import InvalidPersistedAutomaton, NoInitialState
from polycompute.model import Automaton, State, Transition
from polycompute.simulate import accepts, simulate, trace_table
from polycompute.thompson import regex_to_nfa


def test_single_literal():
    nfa = regex_to_nfa("a")
    assert len(nfa.states) == 2
    assert len(nfa.transitions) == 1
    assert accepts(nfa, "a")
    assert not accepts(nfa, "")
    assert not accepts(nfa, "b")


def test_union():
    nfa = regex_to_nfa("a|b")
    assert accepts(nfa, "a")
    assert accepts(nfa, "b")
    assert not accepts(nfa, "ab")


def test_star():
    nfa = regex_to_nfa("a*")
    for text in ["", "a", "aaaa"]:
        assert accepts(nfa, text)
    assert not accepts(nfa, "b")


@pytest.mark.parametrize("text, expected", [
    ("a", True),
    ("ba", True),
    ("abba", True),
    ("", False),
    ("b", False),
    ("aab", False),
])
def test_strings_ending_in_a(text, expected):
    assert accepts(regex_to_nfa("(a|b)*a"), text) is expected


def test_result_unpacks_to_trace_and_verdict():
    trace, verdict = simulate(regex_to_nfa("a*"), "aa")
    assert verdict is True
    assert len(trace.steps) == 2
    assert not trace.halted


def test_trace_records_taken_transitions():
    nfa = regex_to_nfa("ab")
    trace, accepted = simulate(nfa, "ab")
    assert accepted
    assert trace.initial == {"q0"}
    first, second = trace.steps
    assert first.symbol == "a"
    assert first.before == {"q0"}
    assert first.taken == (Transition("q0", "q1", "a"),)
    assert first.after == {"q1", "q2"}
    assert second.taken == (Transition("q2", "q3", "b"),)
    assert second.after == {"q3"}


def test_halts_when_live_set_empties():
    trace, accepted = simulate(regex_to_nfa("a"), "bab")
    assert not accepted
    assert trace.halted
    assert len(trace.steps) == 1
    assert trace.steps[0].after == frozenset()
    assert trace.steps[0].taken == ()
    assert trace.final == frozenset()


def test_acceptance_is_decided_after_all_input():
    # "a" reaches a final state after the first symbol but "ab" must still be rejected
    assert not accepts(regex_to_nfa("a"), "ab")


def test_epsilon_input_is_empty_string():
    assert accepts(regex_to_nfa("a*"), "ε")
    assert not accepts(regex_to_nfa("a"), "ε")
    trace, _ = simulate(regex_to_nfa("a*"), "ε")
    assert trace.steps == ()


def test_embedded_epsilon_consumes_nothing():
    assert accepts(regex_to_nfa("ab"), "aεb")


def test_frames_follow_steps():
    trace, _ = simulate(regex_to_nfa("a*"), "a")
    frames = trace.frames
    assert len(frames) == 2
    assert frames[0] == (trace.initial, ())
    assert frames[1][1] == (Transition("q0", "q1", "a"),)


def test_no_initial_state():
    automaton = Automaton((State("p", is_final=True),), (), ())
    with pytest.raises(NoInitialState):
        simulate(automaton, "")


def test_invalid_automaton_is_rejected_before_running():
    automaton = Automaton((State("p", is_initial=True), State("q", is_initial=True)), (), ())
    with pytest.raises(InvalidPersistedAutomaton):
        simulate(automaton, "a")


def test_trace_table():
    table = trace_table(simulate(regex_to_nfa("a"), "a"))
    assert list(table["Step"]) == [0, 1]
    assert table.iloc[1]["Input"] == "a"
    assert table.iloc[1]["Transitions Taken"] == "q0 → q1"
    assert table.iloc[1]["States After"] == "{q1}"
