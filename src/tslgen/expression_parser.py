"""
Expression parser for TSL conditions (the text inside [if ...]).

Syntax:
    !    NOT, binds to the immediately following atom or parenthesized group
    &&   AND
    ||   OR
    ( )  grouping

Precedence, lowest first: OR, AND, NOT. Both binary operators are left
associative, so

    A && B || C      parses as   (A && B) || C
    A || !B && !C    parses as   A || ((!B) && (!C))

Every property name must already exist in the property table handed to the
parser. Undefined names are reported here, never at generation time.
"""

import re
from typing import List, Mapping, Optional, Tuple

from tslgen.errors import ExpressionParseError
from tslgen.expressions import (
    Expression,
    BinaryExpression,
    BinaryOperator,
    PropertyReference,
    negate,
)
from tslgen.model import Property


_TOKEN_RE = re.compile(r"\s*(&&|\|\||!|\(|\)|[^\s()!&|]+|&|\|)")

_OPERATORS = {
    "&&": BinaryOperator.AND,
    "||": BinaryOperator.OR,
}


def _tokenize(text: str) -> List[str]:
    """Split expression text into operator, parenthesis and name tokens."""
    tokens = []
    pos = 0
    stripped = text.rstrip()
    while pos < len(stripped):
        match = _TOKEN_RE.match(stripped, pos)
        if match is None:
            raise ValueError(f"Cannot tokenize expression at position {pos}")
        tokens.append(match.group(1))
        pos = match.end()
    return tokens


class ExpressionParser:
    """
    Recursive-descent parser producing Expression trees.

    One instance parses one expression. Use parse_expression() instead of
    instantiating this class directly.
    """

    def __init__(
        self,
        text: str,
        properties: Mapping[str, Property],
        file_path: Optional[str] = None,
        line_number: Optional[int] = None,
        line_content: Optional[str] = None,
    ):
        self.text = text.strip()
        self.properties = properties
        self.file_path = file_path
        self.line_number = line_number
        self.line_content = line_content
        self.tokens: List[str] = []

    def error(self, message: str) -> ExpressionParseError:
        return ExpressionParseError(
            f'Error in expression "{self.text}": {message}',
            file_path=self.file_path,
            line_number=self.line_number,
            line_content=self.line_content,
        )

    def parse(self) -> Expression:
        if not self.text:
            raise self.error("Empty expression")

        try:
            self.tokens = _tokenize(self.text)
        except ValueError as e:
            raise self.error(str(e))

        for token in self.tokens:
            if token in ("&", "|"):
                raise self.error(f"Invalid operator '{token}', use '&&' or '||'")

        expr, pos = self._parse_or_expression(0)

        if pos < len(self.tokens):
            if self.tokens[pos] == ")":
                raise self.error("Unmatched closing parenthesis")
            raise self.error(f"Unexpected token '{self.tokens[pos]}'")

        return expr

    def _parse_or_expression(self, pos: int) -> Tuple[Expression, int]:
        """Parse OR expression (lowest precedence)."""
        left, pos = self._parse_and_expression(pos)

        while pos < len(self.tokens) and self.tokens[pos] == "||":
            right, pos = self._parse_and_expression(pos + 1)
            left = BinaryExpression(BinaryOperator.OR, left, right)

        return left, pos

    def _parse_and_expression(self, pos: int) -> Tuple[Expression, int]:
        """Parse AND expression."""
        left, pos = self._parse_unary_expression(pos)

        while pos < len(self.tokens) and self.tokens[pos] == "&&":
            right, pos = self._parse_unary_expression(pos + 1)
            left = BinaryExpression(BinaryOperator.AND, left, right)

        return left, pos

    def _parse_unary_expression(self, pos: int) -> Tuple[Expression, int]:
        """Parse NOT expression."""
        if pos < len(self.tokens) and self.tokens[pos] == "!":
            if pos + 1 >= len(self.tokens):
                raise self.error("Missing operand after negation (!)")
            operand, pos = self._parse_unary_expression(pos + 1)
            return negate(operand), pos

        return self._parse_primary_expression(pos)

    def _parse_primary_expression(self, pos: int) -> Tuple[Expression, int]:
        """Parse a property name or a parenthesized expression."""
        if pos >= len(self.tokens):
            raise self.error("Empty operand")

        token = self.tokens[pos]

        if token == "(":
            if pos + 1 < len(self.tokens) and self.tokens[pos + 1] == ")":
                raise self.error("Empty parentheses")
            expr, pos = self._parse_or_expression(pos + 1)
            if pos >= len(self.tokens) or self.tokens[pos] != ")":
                raise self.error("Unmatched opening parenthesis")
            return expr, pos + 1

        if token == ")":
            if pos > 0 and self.tokens[pos - 1] in _OPERATORS:
                raise self.error(f"Operator '{self.tokens[pos - 1]}' is missing its right operand")
            raise self.error("Unmatched closing parenthesis")

        if token in _OPERATORS:
            raise self.error(f"Operator '{token}' is missing its left operand")

        prop = self.properties.get(token)
        if prop is None:
            raise ExpressionParseError(
                f'The property "{token}" is not defined',
                file_path=self.file_path,
                line_number=self.line_number,
                line_content=self.line_content,
            )
        return PropertyReference(prop), pos + 1


def parse_expression(
    text: str,
    properties: Mapping[str, Property],
    file_path: Optional[str] = None,
    line_number: Optional[int] = None,
    line_content: Optional[str] = None,
) -> Expression:
    """
    Parse TSL condition text into an Expression tree.

    Args:
        text: Condition text, e.g. "!emptyfile && (A || B)"
        properties: Property table used to resolve names
        file_path, line_number, line_content: Location for error messages

    Returns:
        Expression AST

    Raises:
        ExpressionParseError: If the text is malformed or names an
            undefined property
    """
    parser = ExpressionParser(
        text,
        properties,
        file_path=file_path,
        line_number=line_number,
        line_content=line_content,
    )
    return parser.parse()


def format_expression(expr: Expression) -> str:
    """
    Render an Expression tree back into TSL syntax.

    Nested binary operands are always parenthesized, so the output parses
    back into the same tree regardless of precedence.
    """
    if isinstance(expr, PropertyReference):
        return f"{'!' if expr.negated else ''}{expr.property.name}"

    if isinstance(expr, BinaryExpression):
        text = f"{_format_operand(expr.left)} {expr.operator.value} {_format_operand(expr.right)}"
        if expr.negated:
            return f"!({text})"
        return text

    raise TypeError(f"Unsupported Expression type: {type(expr)}")


def _format_operand(expr: Expression) -> str:
    if isinstance(expr, BinaryExpression) and not expr.negated:
        return f"({format_expression(expr)})"
    return format_expression(expr)


__all__ = [
    "ExpressionParser",
    "parse_expression",
    "format_expression",
]
