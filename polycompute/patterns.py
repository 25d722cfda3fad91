import string
from dataclasses import dataclass

from .config import EPSILON
from .errors import MalformedPattern
from .simulate import accepts
from .thompson import regex_to_nfa

OPERATOR_CHARS = '|*()'


def build_alphabet(lowercase=True, uppercase=True, digits=True, printable=False):
    """Symbols a pattern may use, in a fixed order."""
    alphabet = []
    if lowercase:
        alphabet.extend(string.ascii_lowercase)
    if uppercase:
        alphabet.extend(string.ascii_uppercase)
    if digits:
        alphabet.extend(string.digits)
    if printable:
        for code in range(32, 127):
            char = chr(code)
            if char not in OPERATOR_CHARS and char not in alphabet:
                alphabet.append(char)
    return alphabet


def validate_pattern(pattern, alphabet):
    """Check parentheses balance and that every character is allowed."""
    depth = 0
    for char in pattern:
        if char == '(':
            depth += 1
        elif char == ')':
            depth -= 1
            if depth < 0:
                return False
    if depth != 0:
        return False

    allowed = set(alphabet) | set(OPERATOR_CHARS) | {EPSILON}
    return all(char in allowed for char in pattern)


@dataclass(frozen=True)
class NamedPattern:
    name: str
    pattern: str


class PatternBook:
    """A list of named patterns tested together against one input string."""

    def __init__(self, alphabet=None):
        self.alphabet = list(alphabet) if alphabet is not None else build_alphabet()
        self.patterns = []

    def _checked(self, name, pattern):
        name, pattern = (name or '').strip(), (pattern or '').strip()
        if not name or not pattern:
            raise MalformedPattern("Please provide both name and pattern.")
        if not validate_pattern(pattern, self.alphabet):
            raise MalformedPattern("Invalid regex pattern. Check parentheses and characters.")
        regex_to_nfa(pattern)
        return NamedPattern(name, pattern)

    def add(self, name, pattern):
        entry = self._checked(name, pattern)
        self.patterns.append(entry)
        return entry

    def update(self, index, name, pattern):
        entry = self._checked(name, pattern)
        self.patterns[index] = entry
        return entry

    def delete(self, index):
        del self.patterns[index]

    def test(self, text):
        """Map each pattern index to whether it matches the whole of ``text``."""
        return {i: accepts(regex_to_nfa(entry.pattern), text)
                for i, entry in enumerate(self.patterns)}
