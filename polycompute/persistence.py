"""Reading and writing ``.nfa`` files.

A file is a JSON record::

    {
      "nfa": {"states": [...], "transitions": [...], "alphabet": [...]},
      "metadata": {"name": ..., "description": ..., "created": ..., "regex": ...}
    }

States are ``{"id", "label", "isInitial", "isFinal"}`` and transitions
``{"from", "to", "symbol"}``. DFAs also carry ``initialState`` and
``finalStates`` inside ``"nfa"``. ``metadata`` may be missing.
"""
import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .config import DEFAULT_DESCRIPTION, DEFAULT_NAME, FILE_EXTENSION
from .errors import InvalidPersistedAutomaton
from .model import DFA, Automaton, State, Transition, validate

logger = logging.getLogger(__name__)


def _now():
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Metadata:
    name: str = DEFAULT_NAME
    description: str = DEFAULT_DESCRIPTION
    created: str = field(default_factory=_now)
    regex: str = ''

    def to_dict(self):
        return {
            "name": self.name,
            "description": self.description,
            "created": self.created,
            "regex": self.regex,
        }

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise InvalidPersistedAutomaton("Metadata must be an object.")
        return cls(
            name=str(data.get("name") or DEFAULT_NAME),
            description=str(data.get("description") or DEFAULT_DESCRIPTION),
            created=str(data.get("created") or _now()),
            regex=str(data.get("regex") or ''),
        )


def automaton_to_dict(automaton):
    data = {
        "states": [
            {"id": s.id, "label": s.label, "isInitial": s.is_initial, "isFinal": s.is_final}
            for s in automaton.states
        ],
        "transitions": [
            {"from": t.source, "to": t.target, "symbol": t.symbol}
            for t in automaton.transitions
        ],
        "alphabet": list(automaton.alphabet),
    }
    if isinstance(automaton, DFA):
        data["initialState"] = automaton.initial_state
        data["finalStates"] = list(automaton.final_states)
    return data


def _flag(record, key):
    value = record.get(key, False)
    if not isinstance(value, bool):
        raise InvalidPersistedAutomaton(f"'{key}' must be true or false, got {value!r}.")
    return value


def automaton_from_dict(data):
    """Rebuild and validate an automaton from its record."""
    try:
        states = tuple(
            State(str(s["id"]), label=str(s.get("label") or s["id"]),
                  is_initial=_flag(s, "isInitial"),
                  is_final=_flag(s, "isFinal"))
            for s in data["states"])
        transitions = tuple(
            Transition(str(t["from"]), str(t["to"]), str(t["symbol"]))
            for t in data.get("transitions", []))
        alphabet = tuple(str(symbol) for symbol in data.get("alphabet", []))
    except (KeyError, TypeError, AttributeError) as e:
        raise InvalidPersistedAutomaton(f"Invalid NFA file format: {e}") from e

    if "initialState" in data:
        initial = str(data["initialState"])
        finals = tuple(str(s) for s in data.get("finalStates", []))
        automaton = DFA(states, transitions, alphabet,
                        initial_state=initial, final_states=finals)
        validate(automaton)
        flagged = automaton.initial_id
        if flagged != initial or set(finals) != automaton.final_ids:
            raise InvalidPersistedAutomaton(
                "DFA initialState/finalStates disagree with the state flags.")
        return automaton

    return validate(Automaton(states, transitions, alphabet))


def dumps(automaton, metadata=None):
    """Serialize an automaton and its metadata to a JSON string."""
    validate(automaton)
    record = {
        "nfa": automaton_to_dict(automaton),
        "metadata": (metadata or Metadata()).to_dict(),
    }
    return json.dumps(record, indent=2, ensure_ascii=False)


def loads(text):
    """Parse a JSON record back into ``(automaton, metadata)``."""
    try:
        record = json.loads(text)
    except (ValueError, TypeError) as e:
        raise InvalidPersistedAutomaton(f"Invalid NFA file format: {e}") from e

    if not isinstance(record, dict) or not isinstance(record.get("nfa"), dict):
        raise InvalidPersistedAutomaton("Invalid NFA file format: missing 'nfa' object.")

    automaton = automaton_from_dict(record["nfa"])
    metadata = Metadata.from_dict(record["metadata"]) if "metadata" in record else Metadata()
    logger.info("Loaded automaton '%s' with %d states", metadata.name, len(automaton.states))
    return automaton, metadata


def file_name(metadata):
    name = re.sub(r'[^\w.-]+', '_', metadata.name.strip()) or 'nfa'
    return f"{name}{FILE_EXTENSION}"
