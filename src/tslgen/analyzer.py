"""
Specification Analyzer: early diagnostics and inventory of a Specification.

This module provides lightweight analysis of Specification objects:
    - Category / choice / property inventory
    - Frame type tagging counts
    - Expression complexity metrics
    - Unused properties
    - An upper bound on the number of normal frames
    - Warning flags for specifications likely to misbehave

IMPORTANT: This is read-only. It does NOT modify the specification and it
does NOT run the generator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Set

from tslgen.expressions import Expression, BinaryExpression, PropertyReference
from tslgen.model import FrameType, Specification

MAX_REASONABLE_DEPTH = 5
MAX_REASONABLE_COMBINATIONS = 100_000


@dataclass
class ExpressionMetrics:
    """Metrics about a single expression tree."""
    depth: int = 0
    node_count: int = 0
    property_references: Set[str] = field(default_factory=set)


def _analyze_expression(expr: Expression | None) -> ExpressionMetrics:
    """Recursively analyze an expression tree."""
    if expr is None:
        return ExpressionMetrics()

    metrics = ExpressionMetrics(node_count=1)

    if isinstance(expr, BinaryExpression):
        left = _analyze_expression(expr.left)
        right = _analyze_expression(expr.right)
        metrics.depth = 1 + max(left.depth, right.depth)
        metrics.node_count += left.node_count + right.node_count
        metrics.property_references.update(left.property_references)
        metrics.property_references.update(right.property_references)

    elif isinstance(expr, PropertyReference):
        metrics.property_references.add(expr.property.name)

    return metrics


@dataclass
class SpecificationReport:
    """Analysis report for a specification."""

    total_categories: int = 0
    total_choices: int = 0
    total_properties: int = 0

    # Tagging
    conditional_choices: int = 0
    single_choices: int = 0
    error_choices: int = 0
    branch_frame_choices: int = 0

    # Properties
    unused_properties: Set[str] = field(default_factory=set)

    # Expression complexity
    max_expression_depth: int = 0
    total_expression_nodes: int = 0

    # Upper bound on normal frames (ignores conditions)
    max_combinations: int = 1

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_specification(spec: Specification) -> SpecificationReport:
    """
    Analyze a Specification.

    Returns a SpecificationReport with metrics and warnings.
    """
    report = SpecificationReport()

    report.total_categories = len(spec.categories)
    report.total_choices = spec.total_choices
    report.total_properties = len(spec.properties)

    # =========================================================================
    # 1. CHOICE TAGGING AND EXPRESSIONS
    # =========================================================================

    referenced: Set[str] = set()

    for category in spec.categories:
        normal_count = 0
        for choice in category.choices:
            if choice.frame_type == FrameType.SINGLE:
                report.single_choices += 1
            elif choice.frame_type == FrameType.ERROR:
                report.error_choices += 1
            else:
                normal_count += 1

            if choice.if_expression is None:
                continue

            report.conditional_choices += 1
            if choice.if_frame_type != FrameType.NORMAL or (
                choice.has_else and choice.else_frame_type != FrameType.NORMAL
            ):
                report.branch_frame_choices += 1

            metrics = _analyze_expression(choice.if_expression)
            report.max_expression_depth = max(report.max_expression_depth, metrics.depth)
            report.total_expression_nodes += metrics.node_count
            referenced.update(metrics.property_references)

        report.max_combinations *= max(normal_count, 1)

    report.unused_properties = set(spec.properties) - referenced

    # =========================================================================
    # 2. WARNING FLAGS
    # =========================================================================

    if report.unused_properties:
        report.add_warning(
            f"Properties never used in a condition: {', '.join(sorted(report.unused_properties))}"
        )

    if report.max_expression_depth > MAX_REASONABLE_DEPTH:
        report.add_warning(
            f"High expression complexity: max depth {report.max_expression_depth}"
        )

    if report.max_combinations > MAX_REASONABLE_COMBINATIONS:
        report.add_warning(
            f"Up to {report.max_combinations} normal frames may be generated"
        )

    return report


__all__ = ["ExpressionMetrics", "SpecificationReport", "analyze_specification"]
