"""
TSL Generator Package

Derives test frames from category-partition test specifications
written in the Test Specification Language (TSL).

LAYERS:
-------
    - Model:      Property, Choice, Category, Specification, expressions
    - Parsing:    TSL text -> Specification (tsl_parser, expression_parser)
    - Generation: Specification -> ordered test frames (generator)
    - Output:     text rendering, JSON/YAML frame listings, CLI

The model never parses text and the generator never prints.
"""

__version__ = "1.0.0"
