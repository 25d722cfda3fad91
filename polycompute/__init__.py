"""Finite automata and regular expression workbench."""
from .closure import epsilon_closure, move
from .errors import (AutomatonError, AutomatonNotReady, BuilderError,
                     InvalidPersistedAutomaton, MalformedPattern, NoInitialState)
from .model import DFA, Automaton, State, Transition, validate
from .regex import parse
from .simulate import SimulationResult, simulate
from .subset import nfa_to_dfa
from .thompson import build, regex_to_nfa

__version__ = '0.1.0'
