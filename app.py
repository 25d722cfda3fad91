import logging
import time

import pandas as pd
import streamlit as st

from polycompute.builder import AutomatonBuilder
from polycompute.config import (DEFAULT_DESCRIPTION, DEFAULT_NAME, EPSILON, FILE_EXTENSION,
                               STEP_DELAY, Settings, configure_logging)
from polycompute.epsilon import remove_epsilon_transitions
from polycompute.minimize import minimize_dfa, rename_states
from polycompute.patterns import PatternBook, build_alphabet
from polycompute.persistence import Metadata, dumps, file_name, loads
from polycompute.regex import parse, to_postfix_string
from polycompute.render import dfa_table, subset_table, to_digraph, transition_table
from polycompute.simulate import format_states, simulate, trace_table
from polycompute.subset import nfa_to_dfa
from polycompute.thompson import build

logger = logging.getLogger(__name__)

TOOLS = ("Regex to NFA", "NFA Simulator", "NFA to DFA", "NFA Constructor", "Pattern Tester")

EXAMPLES = [
    ("(a|b)*abb", "Strings ending with 'abb'"),
    ("a*b*", "Any number of a's followed by any number of b's"),
    ("(a|b)*a", "Strings ending with 'a'"),
    ("ε|aa*bb*", "Empty string or a's followed by b's"),
    ("(0|1)*101(0|1)*", "Binary strings containing '101'"),
    ("(ab|ba)*", "Concatenations of 'ab' and 'ba'"),
    ("(a|ε)(b|ε)(c|ε)", "Optional a, b and c in order"),
    ("(aa)*", "Strings of even length containing only a's"),
]


def init_session():
    defaults = {
        "nfa": None,
        "metadata": Metadata(),
        "frame": 0,
        "result": None,
        "builder": AutomatonBuilder(),
        "book": PatternBook(),
        "editing": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def set_current(nfa, metadata):
    st.session_state.nfa = nfa
    st.session_state.metadata = metadata
    st.session_state.result = None
    st.session_state.frame = 0


def upload_automaton(key):
    """Load an uploaded .nfa file into the session once per upload."""
    uploaded = st.file_uploader("Drag and drop an NFA file here, or click to select",
                                type=[FILE_EXTENSION.lstrip('.')], key=key)
    if uploaded is None:
        return
    try:
        nfa, metadata = loads(uploaded.getvalue())
    except ValueError as e:
        st.error(f"Error: {e}")
        return
    if st.session_state.get(f"{key}_loaded") != uploaded.file_id:
        st.session_state[f"{key}_loaded"] = uploaded.file_id
        set_current(nfa, metadata)
    st.success(f"Loaded '{metadata.name}' with {len(nfa.states)} states")


def show_automaton(automaton, title):
    col1, col2 = st.columns([1, 2])
    with col1:
        st.write("#### Transition Table:")
        st.table(transition_table(automaton))
        st.write("**Alphabet:** " + (', '.join(automaton.alphabet) or EPSILON))
    with col2:
        st.graphviz_chart(to_digraph(automaton, title=title))


def regex_page():
    st.header("Regular Expression to NFA")
    st.markdown("""
    Supported operations: concatenation (`ab`), union (`a|b`), Kleene star (`a*`),
    grouping with parentheses and `ε` for the empty string.
    """)

    example = st.selectbox("Try an example:", ["-"] + [f"{p}  ({d})" for p, d in EXAMPLES])
    default = example.split("  (")[0] if example != "-" else st.session_state.metadata.regex
    regex = st.text_input("Enter Regular Expression:", value=default,
                          placeholder="e.g., (a|b)*abb")
    name = st.text_input("NFA Name", placeholder="Enter NFA name")
    description = st.text_area("Description", placeholder="Enter description", height=80)

    if st.button("Convert"):
        if not regex:
            st.error("Please enter a regular expression")
        else:
            try:
                tokens = parse(regex)
                nfa = build(tokens)
            except ValueError as e:
                st.error(f"Error: {e}")
            else:
                st.info(f"Postfix notation: `{to_postfix_string(tokens) or EPSILON}`")
                set_current(nfa, Metadata(name=name or DEFAULT_NAME,
                                          description=description or DEFAULT_DESCRIPTION,
                                          regex=regex))

    upload_automaton("regex_upload")

    nfa = st.session_state.nfa
    if nfa is None:
        return

    without_epsilon = st.checkbox("Remove ε-transitions", value=False,
                                  help="Show the equivalent NFA without ε-transitions")
    shown = remove_epsilon_transitions(nfa) if without_epsilon else nfa
    show_automaton(shown, st.session_state.metadata.regex)

    metadata = st.session_state.metadata
    st.download_button("Export NFA", data=dumps(shown, metadata),
                       file_name=file_name(metadata), mime="application/json")


def simulator_page():
    st.header("NFA Simulator")
    upload_automaton("simulator_upload")
    nfa = st.session_state.nfa
    if nfa is None:
        st.info("Load an NFA file or build one with another tool first.")
        return

    col1, col2 = st.columns([3, 1])
    with col1:
        text = st.text_input("Input String", placeholder="Enter input string",
                             help=f"Leave empty or type {EPSILON} for the empty string")
    with col2:
        st.write("")
        run = st.button("Simulate")

    if run:
        try:
            st.session_state.result = simulate(nfa, text)
            st.session_state.frame = 0
        except ValueError as e:
            st.error(f"Error: {e}")
            st.session_state.result = None

    result = st.session_state.result
    if result is None:
        st.graphviz_chart(to_digraph(nfa))
        return

    frames = result.trace.frames
    prev_col, next_col, play_col = st.columns(3)
    if prev_col.button("Previous Step", disabled=st.session_state.frame == 0):
        st.session_state.frame -= 1
    if next_col.button("Next Step", disabled=st.session_state.frame >= len(frames) - 1):
        st.session_state.frame += 1
    play = play_col.button("Play", disabled=len(frames) <= 1)

    chart = st.empty()
    caption = st.empty()
    start = 0 if play else st.session_state.frame
    stop = len(frames) if play else st.session_state.frame + 1
    for index in range(start, stop):
        active_states, active_transitions = frames[index]
        chart.graphviz_chart(to_digraph(nfa, active_states, active_transitions))
        caption.caption(f"Step {index}/{len(frames) - 1}: {format_states(active_states)}")
        if play:
            time.sleep(STEP_DELAY)
    if play:
        st.session_state.frame = len(frames) - 1

    if result.accepted:
        st.success("Input accepted!")
    else:
        st.error("Input rejected!")
    if result.trace.halted:
        last = result.trace.steps[-1]
        st.warning(f"No transition from current states on input '{last.symbol}'")

    with st.expander("Show Processing Trace"):
        st.table(trace_table(result))


def dfa_page():
    st.header("NFA to DFA Converter")
    st.markdown("""
    Using the **Subset Construction Algorithm**, each DFA state stands for the set of NFA
    states the NFA could be in after reading the same input.
    """)
    upload_automaton("dfa_upload")
    nfa = st.session_state.nfa
    if nfa is None:
        st.info("Load an NFA file or build one with another tool first.")
        return

    short_names = st.checkbox("Use short state names (e1, e2, ...)", value=True)
    try:
        dfa = nfa_to_dfa(nfa)
    except ValueError as e:
        st.error(f"Error: {e}")
        return
    if short_names:
        dfa = rename_states(dfa)

    with st.expander("Show NFA to DFA Subset Construction Steps"):
        st.table(subset_table(dfa))

    col1, col2 = st.columns([1, 2])
    with col1:
        st.markdown("### DFA Details:")
        st.table(dfa_table(dfa))
    with col2:
        st.graphviz_chart(to_digraph(dfa, title="DFA"))

    st.subheader("Minimize DFA")
    min_dfa = minimize_dfa(dfa)
    col1, col2 = st.columns([1, 2])
    with col1:
        st.table(dfa_table(min_dfa))
        original_states = len(dfa.states)
        minimized_states = len(min_dfa.states)
        if original_states > minimized_states:
            reduction = ((original_states - minimized_states) / original_states) * 100
            st.success(f"State reduction: {reduction:.1f}% (from {original_states} to {minimized_states} states)")
        else:
            st.info("The DFA was already minimal - no state reduction possible.")
    with col2:
        st.graphviz_chart(to_digraph(min_dfa, title="Minimized DFA"))

    metadata = st.session_state.metadata
    dfa_metadata = Metadata(name=f"{metadata.name} (DFA)", description=metadata.description,
                            regex=metadata.regex)
    st.download_button("Export DFA", data=dumps(dfa, dfa_metadata),
                       file_name=file_name(dfa_metadata), mime="application/json")


def constructor_page():
    st.header("NFA Constructor")
    st.markdown("Build your own NFA by adding states, transitions, and alphabet symbols. "
                "Mark the initial and final states, and visualize your automaton below.")
    builder = st.session_state.builder

    try:
        col1, col2 = st.columns(2)
        with col1:
            symbols = st.text_input("Alphabet symbols", placeholder="e.g. a, b")
            if st.button("Add symbols"):
                builder.add_symbols(symbols)
            if st.button(f"Add {EPSILON}"):
                builder.add_epsilon()
            st.write("**Alphabet:** " + (', '.join(builder.alphabet) or "-"))

            state_name = st.text_input("State name", placeholder="State name (e.g. q0)")
            if st.button("Add state"):
                builder.add_state(state_name)
        with col2:
            if builder.states:
                source = st.selectbox("From", builder.state_ids)
                target = st.selectbox("To", builder.state_ids)
                symbol = st.selectbox("Symbol", builder.alphabet or [EPSILON])
                if st.button("Add transition"):
                    builder.add_transition(source, target, symbol)

                initial = st.selectbox("Initial state", builder.state_ids)
                if st.button("Set initial"):
                    builder.set_initial(initial)
                final = st.selectbox("Final state", builder.state_ids)
                if st.button("Toggle final"):
                    builder.toggle_final(final)
    except ValueError as e:
        st.error(str(e))

    if builder.states:
        st.table(pd.DataFrame({
            "State": builder.state_ids,
            "Initial": [s == builder.initial_state for s in builder.state_ids],
            "Final": [s in builder.final_states for s in builder.state_ids],
        }))

    if not builder.is_ready:
        st.info("Add at least one state and choose an initial state to see the diagram.")
        return

    nfa = builder.build()
    st.graphviz_chart(to_digraph(nfa, title="Constructed NFA"))
    col1, col2 = st.columns(2)
    col1.download_button("Download NFA", data=dumps(nfa), file_name="nfa.nfa",
                         mime="application/json")
    if col2.button("Use in simulator and converter"):
        set_current(nfa, Metadata())
        st.success("The constructed NFA is now the current automaton.")


def pattern_page():
    st.header("Regex Pattern Tester")
    book = st.session_state.book

    st.write("Allowed characters:")
    cols = st.columns(4)
    book.alphabet = build_alphabet(
        lowercase=cols[0].checkbox("a-z", value=True),
        uppercase=cols[1].checkbox("A-Z", value=True),
        digits=cols[2].checkbox("0-9", value=True),
        printable=cols[3].checkbox("Printable ASCII", value=False),
    )

    editing = st.session_state.editing
    current = book.patterns[editing] if editing is not None else None
    name = st.text_input("Pattern name", value=current.name if current else "")
    pattern = st.text_input("Pattern", value=current.pattern if current else "")
    if st.button("Update Pattern" if current else "Add Pattern"):
        try:
            if current:
                book.update(editing, name, pattern)
                st.session_state.editing = None
            else:
                book.add(name, pattern)
        except ValueError as e:
            st.error(str(e))

    test_string = st.text_input("Test string")
    results = {}
    if st.button("Test"):
        if not test_string:
            st.error("Please enter a string to test")
        else:
            results = book.test(test_string)

    for index, entry in enumerate(book.patterns):
        col1, col2, col3, col4 = st.columns([3, 3, 1, 1])
        col1.write(f"**{entry.name}**")
        col2.code(entry.pattern, language="text")
        if col3.button("Edit", key=f"edit_{index}"):
            st.session_state.editing = index
            st.rerun()
        if col4.button("Delete", key=f"delete_{index}"):
            book.delete(index)
            st.session_state.editing = None
            st.rerun()
        if index in results:
            if results[index]:
                col1.success("Match")
            else:
                col1.error("No match")


def main():
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    st.set_page_config(
        page_title=settings.page_title,
        page_icon="🧠",
        layout="wide"
    )
    init_session()

    st.title("PolyCompute: Finite Automata Workbench")
    with st.sidebar:
        tool = st.radio("Select Tool:", TOOLS)
        nfa = st.session_state.nfa
        if nfa is not None:
            st.caption(f"Current automaton: {st.session_state.metadata.name} "
                       f"({len(nfa.states)} states)")

    try:
        if tool == "Regex to NFA":
            regex_page()
        elif tool == "NFA Simulator":
            simulator_page()
        elif tool == "NFA to DFA":
            dfa_page()
        elif tool == "NFA Constructor":
            constructor_page()
        else:
            pattern_page()
    except Exception as e:
        logger.exception("Unexpected error in %s", tool)
        st.error(f"Unexpected error: {str(e)}")
        st.exception(e)


if __name__ == "__main__":
    main()
