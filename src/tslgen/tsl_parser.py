"""
TSL Parser (Raw Input -> Specification).

Converts Test Specification Language text into a Specification object.

TSL Format:
    # File                          category header (comment-style)
      Size:                         category header
          Empty.    [property emptyfile]
          Not empty.
      Occurrences:
          None.     [if !emptyfile] [property noOccurences]
          Many.     [if !emptyfile] [single]
          Broken.   [error]

Syntax Notes:
    - The choice name is everything up to and including the first period
    - Constraints follow the name, each enclosed in square brackets
    - [property a, b] after [if ...] or [else] belongs to that branch
    - [single] / [error] after [if ...] or [else] tags that branch
    - Properties must be defined before an expression uses them
    - Categories that end up without choices are dropped
"""

import logging
import os
import re
from typing import List, Optional

from tslgen.errors import TslErrorType, TslParseError
from tslgen.expression_parser import parse_expression
from tslgen.model import Category, Choice, FrameType, Specification

logger = logging.getLogger(__name__)


MAX_TOTAL_CATEGORIES = 100
MAX_TOTAL_PROPERTIES = 100
MAX_CATEGORY_NAME_LENGTH = 80
MAX_CHOICES_PER_CATEGORY = 50
MAX_CHOICE_NAME_LENGTH = 80
MAX_PROPERTIES_PER_CHOICE = 10
MAX_PROPERTY_NAME_LENGTH = 32

SINGLE_KEYWORD = "single"
ERROR_KEYWORD = "error"
PROPERTY_KEYWORD = "property"
IF_KEYWORD = "if"
ELSE_KEYWORD = "else"

_CONSTRAINT_RE = re.compile(r"\[(.*?)\]")


class _LineContext:
    """Location of the line being parsed, for error reporting."""

    def __init__(self, file_path: str, line_number: int, line_content: str):
        self.file_path = file_path
        self.line_number = line_number
        self.line_content = line_content

    def error(self, message: str, error_type: TslErrorType = TslErrorType.SYNTAX) -> TslParseError:
        return TslParseError(
            message,
            error_type=error_type,
            file_path=self.file_path,
            line_number=self.line_number,
            line_content=self.line_content,
        )


def _new_category(spec: Specification, name: str, ctx: _LineContext) -> Category:
    if not name:
        raise ctx.error("Category name cannot be empty")
    if len(name) > MAX_CATEGORY_NAME_LENGTH:
        raise ctx.error(
            f'Category name "{name}" exceeds maximum length of {MAX_CATEGORY_NAME_LENGTH} characters'
        )
    if len(spec.categories) >= MAX_TOTAL_CATEGORIES:
        raise ctx.error(f"Too many categories (maximum {MAX_TOTAL_CATEGORIES})")

    category = Category(name)
    spec.categories.append(category)
    return category


def _define_property(spec: Specification, choice: Choice, name: str, ctx: _LineContext):
    if len(name) > MAX_PROPERTY_NAME_LENGTH:
        raise ctx.error(
            f'Property name "{name}" exceeds maximum length of {MAX_PROPERTY_NAME_LENGTH} characters',
            TslErrorType.PROPERTY,
        )
    if name not in spec.properties and len(spec.properties) >= MAX_TOTAL_PROPERTIES:
        raise ctx.error(f"Too many properties (maximum {MAX_TOTAL_PROPERTIES})", TslErrorType.PROPERTY)
    if len(choice.all_properties()) >= MAX_PROPERTIES_PER_CHOICE:
        raise ctx.error(
            f'Choice "{choice.name}" has more than {MAX_PROPERTIES_PER_CHOICE} properties',
            TslErrorType.PROPERTY,
        )
    return spec.create_property(name)


def _set_frame_type(choice: Choice, frame_type: FrameType) -> None:
    """[single] / [error] applies to the most recently opened branch."""
    if choice.has_else:
        choice.else_frame_type = frame_type
    elif choice.has_if_expression:
        choice.if_frame_type = frame_type
    else:
        choice.frame_type = frame_type


def _apply_constraint(spec: Specification, choice: Choice, constraint: str, ctx: _LineContext) -> None:
    """
    Apply one bracketed constraint to a choice.

    Args:
        spec: Specification being built (owns the property table)
        choice: Choice the constraint belongs to
        constraint: Text between the brackets, trimmed
        ctx: Line location for errors

    Raises:
        TslParseError: For empty, unknown or misplaced constraints
        ExpressionParseError: For invalid [if ...] expressions
    """
    if not constraint:
        raise ctx.error("Empty constraint", TslErrorType.CONSTRAINT)

    if constraint == SINGLE_KEYWORD:
        _set_frame_type(choice, FrameType.SINGLE)
        return

    if constraint == ERROR_KEYWORD:
        _set_frame_type(choice, FrameType.ERROR)
        return

    parts = constraint.split(None, 1)
    keyword = parts[0]
    rest = parts[1].strip() if len(parts) > 1 else ""

    if keyword == PROPERTY_KEYWORD:
        names = [name.strip() for name in rest.split(",") if name.strip()]
        if not names:
            raise ctx.error('Property name missing after "property" keyword', TslErrorType.PROPERTY)
        if choice.has_else:
            held, add = choice.else_properties, choice.add_else_property
        elif choice.has_if_expression:
            held, add = choice.if_properties, choice.add_if_property
        else:
            held, add = choice.properties, choice.add_property
        for name in names:
            # Repeats are dropped before they count toward the per-choice limit
            if any(prop.name == name for prop in held):
                continue
            add(_define_property(spec, choice, name, ctx))
        return

    if keyword == IF_KEYWORD:
        if not rest:
            raise ctx.error('Expression missing after "if" keyword', TslErrorType.EXPRESSION)
        if choice.has_if_expression:
            raise ctx.error("Choice already has an [if] constraint", TslErrorType.CONSTRAINT)
        choice.if_expression = parse_expression(
            rest,
            spec.properties,
            file_path=ctx.file_path,
            line_number=ctx.line_number,
            line_content=ctx.line_content,
        )
        return

    if constraint == ELSE_KEYWORD:
        if not choice.has_if_expression:
            raise ctx.error('"else" constraint requires a preceding "if" constraint', TslErrorType.CONSTRAINT)
        choice.has_else = True
        return

    raise ctx.error(f"Unknown constraint: {constraint}", TslErrorType.CONSTRAINT)


def _parse_choice_line(spec: Specification, line: str, category: Category, ctx: _LineContext) -> None:
    """Parse a choice line and add the choice to `category`."""
    period_index = line.index(".")
    name = line[: period_index + 1].strip()

    if name == ".":
        raise ctx.error("Choice name cannot be empty")
    if len(name) > MAX_CHOICE_NAME_LENGTH:
        raise ctx.error(
            f'Choice name "{name}" exceeds maximum length of {MAX_CHOICE_NAME_LENGTH} characters'
        )
    if len(category.choices) >= MAX_CHOICES_PER_CATEGORY:
        raise ctx.error(
            f'Category "{category.name}" has more than {MAX_CHOICES_PER_CATEGORY} choices'
        )

    choice = Choice(name)
    constraint_text = line[period_index + 1:].strip()

    # Everything after the name must be bracketed constraints
    if _CONSTRAINT_RE.sub("", constraint_text).strip():
        raise ctx.error(
            "Invalid constraint format, constraints must be enclosed in square brackets",
            TslErrorType.CONSTRAINT,
        )

    for match in _CONSTRAINT_RE.finditer(constraint_text):
        _apply_constraint(spec, choice, match.group(1).strip(), ctx)

    category.add_choice(choice)


def parse_tsl_string(content: str, file_path: str = "<string>") -> Specification:
    """
    Parse TSL content into a Specification object.

    Args:
        content: TSL text
        file_path: Name used in error messages

    Returns:
        Specification with non-empty categories and a resolved property table

    Raises:
        TslParseError: If parsing fails (ExpressionParseError for conditions)
    """
    spec = Specification()
    current: Optional[Category] = None

    for line_number, raw_line in enumerate(content.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue

        ctx = _LineContext(file_path, line_number, raw_line)

        if line.startswith("#"):
            current = _new_category(spec, line[1:].replace(":", "").strip(), ctx)
        elif line.endswith(":"):
            current = _new_category(spec, line[:-1].strip(), ctx)
        elif "." in line:
            if current is None:
                raise ctx.error("Choice must be preceded by a category")
            _parse_choice_line(spec, line, current, ctx)

    dropped = [c.name for c in spec.categories if not c.has_choices]
    if dropped:
        logger.debug("Dropping categories without choices: %s", ", ".join(dropped))
    spec.categories = [c for c in spec.categories if c.has_choices]

    if not spec.categories:
        raise TslParseError("No valid categories found", file_path=file_path)

    logger.debug(
        "Parsed %s: %d categories, %d choices, %d properties",
        file_path,
        len(spec.categories),
        spec.total_choices,
        len(spec.properties),
    )
    return spec


def parse_tsl_file(filepath: str) -> Specification:
    """
    Parse a TSL file into a Specification object.

    Args:
        filepath: Path to TSL file

    Returns:
        Specification

    Raises:
        TslParseError: If the file cannot be read or parsing fails
    """
    if not os.path.isfile(filepath):
        raise TslParseError(
            f"Input file does not exist: {filepath}",
            error_type=TslErrorType.FILE_SYSTEM,
            file_path=filepath,
        )

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise TslParseError(
            f"Failed to read file: {e}",
            error_type=TslErrorType.FILE_SYSTEM,
            file_path=filepath,
        )

    return parse_tsl_string(content, file_path=filepath)


__all__ = [
    "parse_tsl_string",
    "parse_tsl_file",
]
