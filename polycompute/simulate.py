import logging
from dataclasses import dataclass
from typing import FrozenSet, NamedTuple, Tuple

import pandas as pd

from .closure import epsilon_closure, move, taken_transitions
from .config import EMPTY_SET, EPSILON
from .errors import NoInitialState
from .model import Transition, sorted_ids, validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Step:
    """One consumed input symbol."""
    symbol: str
    before: FrozenSet[str]
    taken: Tuple[Transition, ...]
    after: FrozenSet[str]


@dataclass(frozen=True)
class Trace:
    initial: FrozenSet[str]
    steps: Tuple[Step, ...]
    halted: bool = False

    @property
    def frames(self):
        """Live-state-set and highlighted transitions for each playback frame.

        Frame 0 is the initial closure; frame ``i`` follows step ``i``.
        """
        frames = [(self.initial, ())]
        frames.extend((step.after, step.taken) for step in self.steps)
        return frames

    @property
    def final(self):
        return self.steps[-1].after if self.steps else self.initial


class SimulationResult(NamedTuple):
    trace: Trace
    accepted: bool


def effective_input(text):
    """Input symbols to consume.

    An input of just ``ε`` is the empty string. ``ε`` characters inside a
    longer input are skipped as well, which is an extension: they consume
    nothing instead of being read as a symbol.
    """
    return [symbol for symbol in text if symbol != EPSILON]


def simulate(automaton, text):
    """Run ``automaton`` on ``text`` and return the trace and the verdict.

    The live-state-set starts as the epsilon closure of the initial state.
    Each symbol moves every live state and closes the result again. If the
    live set becomes empty the run stops early. Acceptance is decided only at
    the end: accept iff some live state is final. An input of just ``ε`` is
    the empty string.
    """
    validate(automaton)
    initial = automaton.initial_id
    if initial is None:
        raise NoInitialState("Automaton has no initial state.")

    finals = automaton.final_ids
    current = epsilon_closure({initial}, automaton)
    start = current
    steps = []
    halted = False

    for symbol in effective_input(text):
        before = epsilon_closure(current, automaton)
        taken = taken_transitions(before, symbol, automaton)
        current = epsilon_closure(move(before, symbol, automaton), automaton)
        steps.append(Step(symbol, before, taken, current))
        if not current:
            logger.debug("No transition from %s on input '%s'", set(before), symbol)
            halted = True
            break

    accepted = bool(current & finals)
    logger.debug("Input %r %s after %d step(s)", text,
                 'accepted' if accepted else 'rejected', len(steps))
    return SimulationResult(Trace(start, tuple(steps), halted), accepted)


def accepts(automaton, text):
    return simulate(automaton, text).accepted


def format_states(states):
    return '{' + ', '.join(sorted_ids(states)) + '}' if states else EMPTY_SET


def trace_table(result):
    """Tabulate a simulation trace, one row per step."""
    trace = result.trace
    rows = [{
        "Step": 0,
        "Input": "",
        "States Before": "",
        "Transitions Taken": "",
        "States After": format_states(trace.initial),
    }]
    for i, step in enumerate(trace.steps, start=1):
        rows.append({
            "Step": i,
            "Input": step.symbol,
            "States Before": format_states(step.before),
            "Transitions Taken": ', '.join(f"{t.source} → {t.target}" for t in step.taken) or "-",
            "States After": format_states(step.after),
        })
    return pd.DataFrame(rows)
