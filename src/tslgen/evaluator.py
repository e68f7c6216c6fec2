"""
Expression evaluation.

Reads Property.value only. Never mutates anything, so both operands are
always evaluated and the order of evaluation does not matter.
"""

from typing import Iterator, List

from tslgen.expressions import (
    Expression,
    BinaryExpression,
    BinaryOperator,
    PropertyReference,
)
from tslgen.model import Property


def evaluate(expr: Expression) -> bool:
    """
    Evaluate an expression against the current property values.

    Args:
        expr: PropertyReference or BinaryExpression

    Returns:
        The boolean value, with the node's own negation applied

    Raises:
        TypeError: If expr is not a known expression node
    """
    if isinstance(expr, PropertyReference):
        return expr.property.value != expr.negated

    if isinstance(expr, BinaryExpression):
        left = evaluate(expr.left)
        right = evaluate(expr.right)
        if expr.operator == BinaryOperator.AND:
            value = left and right
        else:
            value = left or right
        return value != expr.negated

    raise TypeError(f"Unsupported Expression type: {type(expr)}")


def iter_property_references(expr: Expression) -> Iterator[Property]:
    """Every property object read by `expr`, left to right, repeats included."""
    stack = [expr]
    while stack:
        node = stack.pop()
        if isinstance(node, PropertyReference):
            yield node.property
        elif isinstance(node, BinaryExpression):
            stack.append(node.right)
            stack.append(node.left)


def referenced_properties(expr: Expression) -> List[Property]:
    """Properties read by `expr`, left to right, without duplicates."""
    found: List[Property] = []
    for prop in iter_property_references(expr):
        if prop not in found:
            found.append(prop)
    return found


__all__ = ["evaluate", "iter_property_references", "referenced_properties"]
