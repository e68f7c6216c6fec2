"""
Demo: Build the "find" specification, analyze it and generate its test frames.
"""

from tslgen.analyzer import analyze_specification
from tslgen.examples import build_find_specification
from tslgen.generator import FrameGenerator
from tslgen.serialization import result_to_yaml


def print_report(report):
    """Pretty-print a SpecificationReport."""
    print()
    print("=" * 70)
    print("SPECIFICATION ANALYSIS REPORT")
    print("=" * 70)
    print()

    print("📊 BASIC METRICS")
    print(f"  Categories:             {report.total_categories}")
    print(f"  Choices:                {report.total_choices}")
    print(f"  Properties:             {report.total_properties}")
    print()

    print("🏷  TAGGING")
    print(f"  Conditional Choices:    {report.conditional_choices}")
    print(f"  Single Choices:         {report.single_choices}")
    print(f"  Error Choices:          {report.error_choices}")
    print(f"  Branch-tagged Choices:  {report.branch_frame_choices}")
    print()

    print("📐 EXPRESSION COMPLEXITY")
    print(f"  Max Expression Depth:   {report.max_expression_depth}")
    print(f"  Total Expression Nodes: {report.total_expression_nodes}")
    print(f"  Max Normal Frames:      {report.max_combinations}")
    print()

    if report.warnings:
        print("⚠️  WARNINGS")
        for warning in report.warnings:
            print(f"  - {warning}")
        print()


if __name__ == "__main__":
    spec = build_find_specification()

    print("TSL source:")
    print(spec.to_tsl_string())

    print_report(analyze_specification(spec))

    result = FrameGenerator.from_specification(spec).generate()
    print(result)

    print("=" * 70)
    print("YAML listing:")
    print("=" * 70)
    print(result_to_yaml(result))
