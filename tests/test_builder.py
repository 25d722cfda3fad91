import pytest

from polycompute.builder import AutomatonBuilder
from polycompute.errors import AutomatonNotReady, BuilderError
from polycompute.simulate import accepts
from polycompute.subset import nfa_to_dfa


@pytest.fixture
def builder():
    builder = AutomatonBuilder()
    builder.add_symbols("a, b")
    for name in ("q0", "q1"):
        builder.add_state(name)
    return builder


def test_not_ready_without_initial_state(builder):
    assert not builder.is_ready
    with pytest.raises(AutomatonNotReady):
        builder.build()


def test_not_ready_without_states():
    builder = AutomatonBuilder()
    assert not builder.is_ready
    with pytest.raises(AutomatonNotReady):
        builder.build()


def test_build(builder):
    builder.add_transition("q0", "q1", "a")
    builder.add_transition("q1", "q1", "b")
    builder.set_initial("q0")
    assert builder.toggle_final("q1") is True
    nfa = builder.build()
    assert nfa.initial_id == "q0"
    assert nfa.final_ids == {"q1"}
    assert nfa.alphabet == ("a", "b")
    assert accepts(nfa, "abb")
    assert accepts(nfa_to_dfa(nfa), "abb")


def test_set_initial_moves_the_designation(builder):
    builder.set_initial("q0")
    builder.set_initial("q1")
    nfa = builder.build()
    assert [s.id for s in nfa.states if s.is_initial] == ["q1"]


def test_toggle_final_twice_clears_it(builder):
    builder.toggle_final("q0")
    assert builder.toggle_final("q0") is False
    builder.set_initial("q0")
    assert builder.build().final_ids == frozenset()


def test_symbols_are_deduplicated(builder):
    assert builder.add_symbols("b, c,, a") == ["c"]
    builder.add_epsilon()
    builder.add_epsilon()
    assert builder.alphabet == ["a", "b", "c", "ε"]


def test_transition_symbol_joins_alphabet(builder):
    builder.add_transition("q0", "q1", "z")
    builder.add_transition("q0", "q1", "ε")
    assert builder.alphabet == ["a", "b", "z"]


@pytest.mark.parametrize("name", ["", "   ", "q0"])
def test_rejected_state_names(builder, name):
    with pytest.raises(BuilderError):
        builder.add_state(name)


def test_rejected_transitions(builder):
    with pytest.raises(BuilderError):
        builder.add_transition("q0", "missing", "a")
    with pytest.raises(BuilderError):
        builder.add_transition("q0", "q1", " ")
    with pytest.raises(BuilderError):
        builder.set_initial("missing")
    with pytest.raises(BuilderError):
        builder.toggle_final("missing")
