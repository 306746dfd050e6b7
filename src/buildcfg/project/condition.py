"""
MSBuild condition evaluation.

Conditions on vcxproj elements look like:
    '$(Configuration)|$(Platform)'=='Debug|Win32'

Evaluation substitutes the build axis macros, parses the result into an
expression tree and checks for an equality node whose two operands are the
same text. Only equality is understood. Other operators (and, or, !=,
parentheses) are parsed but not evaluated, so a compound condition is true as
soon as any equality inside it holds.

The parser is injectable: anything implementing ExpressionParser can replace
the built-in EqualityExpressionParser.
"""

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, List, Optional, Protocol, Tuple

if TYPE_CHECKING:
    from buildcfg.project.vcxproj import ProjectConfiguration

logger = logging.getLogger(__name__)


class ExpressionSyntaxError(Exception):
    """Exception raised when condition text cannot be tokenized or parsed."""

    pass


@dataclass(frozen=True)
class ExpressionNode:
    """Node of a parsed condition.

    Operators carry the operator text ('==', 'and', '!', '()') and their
    operands, literals carry their source text including quotes.
    """

    text: str
    operands: Tuple["ExpressionNode", ...] = ()

    @property
    def operand1(self) -> Optional["ExpressionNode"]:
        return self.operands[0] if self.operands else None

    @property
    def operand2(self) -> Optional["ExpressionNode"]:
        return self.operands[1] if len(self.operands) > 1 else None

    def walk(self) -> Iterator["ExpressionNode"]:
        """Yield this node and all descendants, depth first."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.operands))


class ExpressionParser(Protocol):
    """Capability that turns condition text into an expression tree."""

    def parse(self, text: str) -> Optional[ExpressionNode]:
        """Return the root node, or None if the text does not parse."""
        ...


_TOKEN_RE = re.compile(
    r"""
    \s*(?:
        (?P<string>'[^']*'|"[^"]*")
      | (?P<op>==|!=|<=|>=|<|>|!|\(|\)|,)
      | (?P<name>[^\s'"=!<>(),]+)
    )
    """,
    re.VERBOSE,
)

_KEYWORDS = {"and", "or"}

# Deepest run of nested parentheses and "!" operators accepted
MAX_NESTING = 100

# Binding power of binary operators
_BINARY_PRECEDENCE = {
    "or": 1,
    "and": 2,
    "==": 3,
    "!=": 3,
    "<": 3,
    "<=": 3,
    ">": 3,
    ">=": 3,
}


def tokenize(text: str) -> List[Tuple[str, str]]:
    """
    Split condition text into (kind, text) tokens.

    Args:
        text: Condition text

    Returns:
        List of tokens, kind is 'string', 'op' or 'name'

    Raises:
        ExpressionSyntaxError: On unterminated strings or stray characters
    """
    tokens = []
    pos = 0
    end = len(text.rstrip())
    while pos < end:
        match = _TOKEN_RE.match(text, pos)
        if match is None or match.end() == pos:
            raise ExpressionSyntaxError(f"Unexpected character at {pos}: {text[pos:]!r}")
        kind = match.lastgroup
        value = match.group(kind)
        if kind == "name" and value.lower() in _KEYWORDS:
            kind, value = "op", value.lower()
        tokens.append((kind, value))
        pos = match.end()
    return tokens


class _Parser:
    """Precedence climbing parser over a token list."""

    def __init__(self, tokens: List[Tuple[str, str]]):
        self.tokens = tokens
        self.pos = 0
        self.depth = 0

    def peek(self) -> Optional[Tuple[str, str]]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def advance(self) -> Tuple[str, str]:
        token = self.peek()
        if token is None:
            raise ExpressionSyntaxError("Unexpected end of condition")
        self.pos += 1
        return token

    def expect(self, text: str) -> None:
        kind, value = self.advance()
        if kind != "op" or value != text:
            raise ExpressionSyntaxError(f"Expected '{text}', found '{value}'")

    def parse(self) -> ExpressionNode:
        node = self.expression(0)
        if self.peek() is not None:
            raise ExpressionSyntaxError(f"Unexpected token '{self.peek()[1]}'")
        return node

    def expression(self, min_precedence: int) -> ExpressionNode:
        left = self.unary()
        while True:
            token = self.peek()
            if token is None or token[0] != "op":
                break
            precedence = _BINARY_PRECEDENCE.get(token[1])
            if precedence is None or precedence <= min_precedence:
                break
            self.advance()
            right = self.expression(precedence)
            left = ExpressionNode(token[1], (left, right))
        return left

    def unary(self) -> ExpressionNode:
        self.depth += 1
        if self.depth > MAX_NESTING:
            raise ExpressionSyntaxError("Condition is nested too deeply")
        try:
            return self.operand()
        finally:
            self.depth -= 1

    def operand(self) -> ExpressionNode:
        kind, value = self.advance()
        if kind == "op" and value == "!":
            return ExpressionNode("!", (self.unary(),))
        if kind == "op" and value == "(":
            node = self.expression(0)
            self.expect(")")
            return node
        if kind == "op":
            raise ExpressionSyntaxError(f"Unexpected operator '{value}'")
        node = ExpressionNode(value)
        # Function call, e.g. Exists('file.props')
        if kind == "name" and self.peek() == ("op", "("):
            self.advance()
            args = [node]
            if self.peek() != ("op", ")"):
                args.append(self.expression(0))
                while self.peek() == ("op", ","):
                    self.advance()
                    args.append(self.expression(0))
            self.expect(")")
            node = ExpressionNode("()", tuple(args))
        return node


class EqualityExpressionParser:
    """Built-in ExpressionParser for MSBuild condition syntax."""

    def parse(self, text: str) -> Optional[ExpressionNode]:
        try:
            return _Parser(tokenize(text)).parse()
        except ExpressionSyntaxError as e:
            logger.debug(f"Condition does not parse: {text!r}: {e}")
            return None


_MACRO_RE = re.compile(r"\$\((Configuration|Platform)\)")


def substitute_macros(condition: str, project_configuration: "ProjectConfiguration") -> str:
    """
    Replace $(Configuration) and $(Platform) in a condition.

    Replacement values are never scanned for macros again.

    Args:
        condition: Raw condition text
        project_configuration: Build axis entry supplying the values

    Returns:
        Condition text with macros substituted
    """
    values = {
        "Configuration": project_configuration.configuration,
        "Platform": project_configuration.platform,
    }
    return _MACRO_RE.sub(lambda match: values[match.group(1)], condition)


class ConditionEvaluator:
    """
    Evaluates vcxproj conditions against a build axis entry.

    Usage:
        evaluator = ConditionEvaluator()
        evaluator.is_true("'$(Platform)'=='Win32'", ProjectConfiguration("Debug", "Win32"))
        # True
    """

    def __init__(self, parser: Optional[ExpressionParser] = None):
        self.parser = parser or EqualityExpressionParser()

    def is_true(self, condition: str, project_configuration: "ProjectConfiguration") -> bool:
        """
        Check whether a condition holds for a build axis entry.

        Args:
            condition: Raw condition text (may reference $(Configuration), $(Platform))
            project_configuration: Build axis entry

        Returns:
            True if an '==' node compares identical operand text, False otherwise
        """
        root = self.parser.parse(substitute_macros(condition, project_configuration))
        if root is None:
            return False
        for node in root.walk():
            if node.text != "==":
                continue
            left, right = node.operand1, node.operand2
            if left is not None and right is not None and left.text == right.text:
                return True
        return False
