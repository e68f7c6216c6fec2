"""
Example specification builder.

Builds the classic "find a pattern in a file" specification in code,
without going through the TSL parser:

    Size:
        Empty.      [property emptyfile]
        Not empty.
    Count:
        None.       [if !emptyfile] [property noOccurences]
        One.        [if !emptyfile]
        Many.       [if !emptyfile]
"""
from tslgen.model import Category, Choice, Specification
from tslgen.expressions import PropertyReference


def build_find_specification() -> Specification:
    spec = Specification()
    emptyfile = spec.create_property("emptyfile")
    no_occurrences = spec.create_property("noOccurences")

    not_empty_file = PropertyReference(emptyfile, negated=True)

    size = Category("Size")
    size.add_choice(Choice("Empty.", properties=[emptyfile]))
    size.add_choice(Choice("Not empty."))

    count = Category("Count")
    count.add_choice(
        Choice("None.", if_expression=not_empty_file, if_properties=[no_occurrences])
    )
    count.add_choice(Choice("One.", if_expression=not_empty_file))
    count.add_choice(Choice("Many.", if_expression=not_empty_file))

    spec.add_category(size)
    spec.add_category(count)

    return spec
