import logging
from dataclasses import dataclass

from .errors import MalformedPattern

logger = logging.getLogger(__name__)

SYMBOL = 'symbol'
UNION = 'union'
CONCAT = 'concat'
STAR = 'star'
LPAREN = 'lparen'
RPAREN = 'rparen'

_OPERATORS = {'|': UNION, '*': STAR, '(': LPAREN, ')': RPAREN}
_DISPLAY = {UNION: '|', CONCAT: '·', STAR: '*', LPAREN: '(', RPAREN: ')'}


@dataclass(frozen=True)
class Token:
    kind: str
    value: str = ''

    @property
    def is_operator(self):
        return self.kind in (UNION, CONCAT, STAR)

    def __str__(self):
        return self.value if self.kind == SYMBOL else _DISPLAY[self.kind]


def precedence(kind):
    """Defines operator precedence."""
    if kind == STAR:
        return 3
    elif kind == CONCAT:
        return 2
    elif kind == UNION:
        return 1
    return 0


def tokenize(pattern):
    return [Token(_OPERATORS[char]) if char in _OPERATORS else Token(SYMBOL, char)
            for char in pattern]


def insert_concat_operators(tokens):
    """Insert explicit concatenation tokens where concatenation is implied."""
    output = []
    for i, token in enumerate(tokens):
        output.append(token)
        if i + 1 == len(tokens):
            break
        following = tokens[i + 1]
        # ab -> a.b, a*b -> a*.b, (a)(b) -> (a).(b); never after ( or |, never before ) | *
        if token.kind not in (LPAREN, UNION) and following.kind not in (RPAREN, UNION, STAR):
            output.append(Token(CONCAT))
    return output


def infix_to_postfix(tokens):
    """Convert infix tokens to postfix (RPN) with the shunting-yard algorithm."""
    output = []
    stack = []
    previous = None

    for token in tokens:
        if token.kind == SYMBOL:
            output.append(token)
        elif token.kind == LPAREN:
            stack.append(token)
        elif token.kind == RPAREN:
            if previous is not None and previous.kind == LPAREN:
                raise MalformedPattern("Invalid regular expression: empty group '()'.")
            while stack and stack[-1].kind != LPAREN:
                output.append(stack.pop())
            if not stack:
                raise MalformedPattern("Invalid regular expression: unbalanced ')'.")
            stack.pop()  # Discard the '('
        else:
            while (stack and stack[-1].kind != LPAREN
                   and precedence(stack[-1].kind) >= precedence(token.kind)):
                output.append(stack.pop())
            stack.append(token)
        previous = token

    while stack:
        token = stack.pop()
        if token.kind == LPAREN:
            raise MalformedPattern("Invalid regular expression: unbalanced '('.")
        output.append(token)

    return output


def parse(pattern):
    """Parse ``pattern`` into postfix tokens.

    Supported syntax: literal symbols, ``|`` for union, juxtaposition for
    concatenation, ``*`` for Kleene star, parentheses and ``ε`` as an
    explicit empty-string operand. An empty pattern gives an empty token
    list. Operand checks happen when the tokens are built into an automaton.
    """
    postfix = infix_to_postfix(insert_concat_operators(tokenize(pattern)))
    logger.debug("Postfix notation for %r: %s", pattern, to_postfix_string(postfix))
    return postfix


def to_postfix_string(tokens):
    return ''.join(str(token) for token in tokens)
