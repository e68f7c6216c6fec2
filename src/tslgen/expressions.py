"""
Expression System for TSL

Conditional constraints ([if ...]) are represented as Abstract Syntax
Trees over properties, never as strings.

The tree is a tagged variant:
    PropertyReference(property, negated)
    BinaryExpression(operator, left, right, negated)

Negation is folded into every node. There is no unary wrapper node and no
placeholder operand: "!A" is a negated PropertyReference and "!(A || B)" is
a negated BinaryExpression.

ARCHITECTURAL RULE:
    Nodes are structure only.
    Evaluation lives in tslgen.evaluator.
    Text parsing and formatting live in tslgen.expression_parser.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tslgen.model import Property


class Expression(ABC):
    """
    Base class for all expression nodes.

    Every concrete node carries a `negated` flag.
    """
    pass


class BinaryOperator(Enum):
    """
    Logical operators supported in TSL conditions.

    The value is the TSL spelling of the operator.
    """

    AND = "&&"
    OR = "||"


@dataclass(frozen=True)
class PropertyReference(Expression):
    """
    Leaf node: reads a single property.

    Example:
        !emptyfile

    Becomes:
        PropertyReference(property=<Property emptyfile>, negated=True)

    IMPORTANT:
        The property object is shared with the specification's property
        table. The reference itself is immutable; the property's value is
        not, and is only changed by the frame generator.
    """

    property: "Property"
    negated: bool = False


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """
    Represents an AND / OR combination of two sub-expressions.

    Example:
        !(A && B) || C

    Becomes:
        BinaryExpression(
            operator=BinaryOperator.OR,
            left=BinaryExpression(
                operator=BinaryOperator.AND,
                left=PropertyReference(A),
                right=PropertyReference(B),
                negated=True,
            ),
            right=PropertyReference(C),
        )
    """

    operator: BinaryOperator
    left: Expression
    right: Expression
    negated: bool = False


def negate(expr: Expression) -> Expression:
    """Return a copy of `expr` with its negation flag flipped."""
    return replace(expr, negated=not expr.negated)


__all__ = [
    "Expression",
    "BinaryOperator",
    "PropertyReference",
    "BinaryExpression",
    "negate",
]
