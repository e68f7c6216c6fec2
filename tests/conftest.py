"""
Shared TSL fixtures: the "find a pattern in a file" family of samples.
"""

import pytest


SIMPLE_FIND_TSL = """\
# File
  Size:
      Empty.\t\t\t[property emptyfile]
      Not empty.
  Number of occurrences of the pattern in the file:
      None.\t\t\t[if !emptyfile] [property noOccurences]
      One.\t\t\t\t[if !emptyfile]
      Many.\t\t\t\t[if !emptyfile]
  Number of occurrences of the pattern in one line:
      One.\t\t\t\t[if !noOccurences && !emptyfile]
      Many.\t\t\t[if !noOccurences && !emptyfile]
  Position of the pattern in the file:
      First line.\t\t[if !emptyfile]
      Last line.\t\t[if !emptyfile]
      Any.\t\t\t\t[if !emptyfile]
"""

UNCONSTRAINED_FIND_TSL = """\
# File
  Size:
      Empty.
      Not empty.
  Number of occurrences of the pattern in the file:
      None.
      One.
      Many.
  Number of occurrences of the pattern in one line:
      One.
      Many.
  Position of the pattern in the file:
      First line.
      Last line.
      Any.

# Pattern
  Length of the pattern:
      Empty.
      One.
      More than one.
      Longer than the file.
  Presence of enclosing quotes:
      Not enclosed.
      Enclosed.
      Incorrect.
  Presence of blanks:
      None.
      One.
      Many.
  Presence of quotes within the pattern:
      None.
      One.
      Many.

# Filename
  Presence of a file corresponding to the name:
      Not present.
      Present.
"""

_CONSTRAINED_FIND_TEMPLATE = """\
# File
  Size:
      Empty.\t\t\t{empty_file}[property emptyfile]
      Not empty.
  Number of occurrences of the pattern in the file:
      None.\t\t\t{no_occurrences}[if !emptyfile] [property noOccurences]
      One.\t\t\t\t[if !emptyfile]
      Many.\t\t\t\t[if !emptyfile]
  Number of occurrences of the pattern in one line:
      One.\t\t\t\t[if !noOccurences && !emptyfile]
      Many.\t\t\t{many_per_line}[if !noOccurences && !emptyfile]
  Position of the pattern in the file:
      First line.\t\t{first_line}[if !emptyfile]
      Last line.\t\t{last_line}[if !emptyfile]
      Any.\t\t\t\t[if !emptyfile]

# Pattern
  Length of the pattern:
      Empty.\t\t\t{empty_pattern}[property emptypattern]
      One.\t\t\t{one_char}
      More than one.\t\t[property patternlengthgt1]
      Longer than the file.\t{longer}
  Presence of enclosing quotes:
      Not enclosed.\t\t[if !emptypattern]
      Enclosed.
      Incorrect.\t\t{incorrect}
  Presence of blanks:
      None.
      One.\t\t\t\t[if !emptypattern]
      Many.\t\t\t\t[if !emptypattern && patternlengthgt1]
  Presence of quotes within the pattern:
      None.
      One.\t\t\t\t[if !emptypattern]
      Many.\t\t\t{many_quotes}[if !emptypattern && patternlengthgt1]

# Filename
  Presence of a file corresponding to the name:
      Not present.\t\t{not_present}
      Present.
"""

_NO_TAGS = dict(
    empty_file="",
    no_occurrences="",
    many_per_line="",
    first_line="",
    last_line="",
    empty_pattern="",
    one_char="",
    longer="",
    incorrect="",
    many_quotes="",
    not_present="",
)

CONSTRAINED_FIND_TSL = _CONSTRAINED_FIND_TEMPLATE.format(**_NO_TAGS)

ERROR_FIND_TSL = _CONSTRAINED_FIND_TEMPLATE.format(
    **dict(_NO_TAGS, incorrect="[error]", not_present="[error]")
)

SINGLES_FIND_TSL = _CONSTRAINED_FIND_TEMPLATE.format(
    **dict(
        _NO_TAGS,
        empty_file="[single]",
        no_occurrences="[single]",
        many_per_line="[single]",
        first_line="[single]",
        last_line="[single]",
        empty_pattern="[single]",
        one_char="[single]",
        longer="[single]",
        incorrect="[error]",
        many_quotes="[single]",
        not_present="[error]",
    )
)

SIZE_COUNT_TSL = """\
Size:
    Empty.      [property emptyfile]
    Not empty.
Count:
    None.       [if !emptyfile] [property noOcc]
    One.        [if !emptyfile]
    Many.       [if !emptyfile]
"""


@pytest.fixture
def size_count_tsl():
    return SIZE_COUNT_TSL


@pytest.fixture
def simple_find_tsl():
    return SIMPLE_FIND_TSL


@pytest.fixture
def tsl_file(tmp_path):
    """Write TSL text to a temporary file and return its path as a string."""

    def _write(content, name="spec.tsl"):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _write
