from .config import EPSILON
from .errors import AutomatonNotReady, BuilderError
from .model import Automaton, State, Transition


class AutomatonBuilder:
    """Working set of states, transitions and symbols edited step by step.

    ``build`` only succeeds once at least one state exists and an initial
    state has been designated.
    """

    def __init__(self):
        self.states = []
        self.transitions = []
        self.alphabet = []
        self.initial_state = None
        self.final_states = []

    def _require_state(self, state_id):
        if state_id not in self.state_ids:
            raise BuilderError(f"Unknown state '{state_id}'.")

    @property
    def state_ids(self):
        return [s.id for s in self.states]

    def add_state(self, name):
        name = (name or '').strip()
        if not name:
            raise BuilderError("State name must not be empty.")
        if name in self.state_ids:
            raise BuilderError("State name must be unique.")
        self.states.append(State(name))
        return name

    def add_transition(self, source, target, symbol):
        symbol = (symbol or '').strip()
        if not symbol:
            raise BuilderError("Transition symbol must not be empty.")
        self._require_state(source)
        self._require_state(target)
        transition = Transition(source, target, symbol)
        self.transitions.append(transition)
        if symbol != EPSILON and symbol not in self.alphabet:
            self.alphabet.append(symbol)
        return transition

    def add_symbols(self, text):
        """Add comma-separated symbols, ignoring blanks and duplicates."""
        added = []
        for symbol in (text or '').split(','):
            symbol = symbol.strip()
            if symbol and symbol not in self.alphabet:
                self.alphabet.append(symbol)
                added.append(symbol)
        return added

    def add_epsilon(self):
        if EPSILON not in self.alphabet:
            self.alphabet.append(EPSILON)

    def set_initial(self, state_id):
        self._require_state(state_id)
        self.initial_state = state_id

    def toggle_final(self, state_id):
        self._require_state(state_id)
        if state_id in self.final_states:
            self.final_states.remove(state_id)
        else:
            self.final_states.append(state_id)
        return state_id in self.final_states

    @property
    def is_ready(self):
        return bool(self.states) and self.initial_state is not None

    def build(self):
        if not self.is_ready:
            raise AutomatonNotReady("Add at least one state and choose an initial state.")
        states = tuple(State(s.id, s.label,
                             is_initial=s.id == self.initial_state,
                             is_final=s.id in self.final_states)
                       for s in self.states)
        return Automaton(states, tuple(self.transitions), tuple(self.alphabet))
