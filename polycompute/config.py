import logging
import os
from dataclasses import dataclass

EPSILON = 'ε'
EMPTY_SET = '∅'
STATE_PREFIX = 'q'
DFA_CLASS_PREFIX = 'e'
FILE_EXTENSION = '.nfa'

DEFAULT_NAME = 'Untitled NFA'
DEFAULT_DESCRIPTION = 'No description'

# Diagram colours
NODE_FILL = '#ffffcc'
NODE_BORDER = '#888888'
INITIAL_COLOR = '#2563eb'
FINAL_COLOR = '#22c55e'
INITIAL_FINAL_COLOR = '#0ea5e9'
ACTIVE_FILL = '#3b82f6'
ACTIVE_BORDER = '#1d4ed8'
EDGE_COLOR = '#333333'

# Seconds between frames when the simulator plays a trace back
STEP_DELAY = 0.7

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


@dataclass(frozen=True)
class Settings:
    """Runtime settings read from the environment."""
    log_level: str = 'INFO'
    page_title: str = 'PolyCompute | Automata Workbench'

    @classmethod
    def from_env(cls):
        level = os.environ.get('POLYCOMPUTE_LOG_LEVEL', cls.log_level).upper()
        if not isinstance(logging.getLevelName(level), int):
            level = cls.log_level
        return cls(
            log_level=level,
            page_title=os.environ.get('POLYCOMPUTE_PAGE_TITLE', cls.page_title),
        )


def configure_logging(level='INFO'):
    logging.basicConfig(level=getattr(logging, level), format=LOG_FORMAT)
