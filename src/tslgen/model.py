"""
Core Specification Model Objects

Defines the data structures of a category-partition test specification:
    - Properties (named boolean flags)
    - Choices (options within a category)
    - Categories (partition dimensions)
    - Specification (root container)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about TSL text syntax
        - Know nothing about frame generation order
        - Represent structure, not behavior

The only mutable state that matters at generation time is Property.value.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .expressions import Expression


class FrameType(Enum):
    """Kind of test frame a choice (or one of its branches) produces."""

    NORMAL = "normal"
    SINGLE = "single"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


@dataclass(eq=False)
class Property:
    """
    A named boolean flag.

    Properties are set by selecting choices and read by expressions.
    Identity is the name: two Property objects with the same name are
    equal and hash the same.

    Properties:
        name: Property identifier (e.g., "emptyfile")
        value: Current value, False outside of frame generation
    """

    name: str
    value: bool = False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Property):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"Property({self.name}: {self.value})"


@dataclass(eq=False)
class Choice:
    """
    One option within a category.

    Properties:
        name:
            Choice name as written in TSL, including the trailing period
            (e.g., "Not empty.")

        properties:
            Regular properties, set whenever the choice is selected and it
            has no if_expression

        if_expression:
            Optional condition. When present, the choice only takes part in
            a normal frame if the condition holds (or it has an else branch)

        if_properties / else_properties:
            Properties set when the condition is true / false

        has_else:
            Whether an [else] branch exists

        frame_type / if_frame_type / else_frame_type:
            Frame type for the choice itself and for each branch

    INVARIANTS:
        - if_frame_type, if_properties and has_else require if_expression
        - else_frame_type and else_properties require has_else

    Choices compare by identity. Two choices with the same name in
    different categories are different choices.
    """

    name: str
    properties: List[Property] = field(default_factory=list)
    if_expression: Optional[Expression] = None
    if_properties: List[Property] = field(default_factory=list)
    else_properties: List[Property] = field(default_factory=list)
    has_else: bool = False
    frame_type: FrameType = FrameType.NORMAL
    if_frame_type: FrameType = FrameType.NORMAL
    else_frame_type: FrameType = FrameType.NORMAL

    @property
    def has_if_expression(self) -> bool:
        return self.if_expression is not None

    def add_property(self, prop: Property) -> None:
        self.properties.append(prop)

    def add_if_property(self, prop: Property) -> None:
        self.if_properties.append(prop)

    def add_else_property(self, prop: Property) -> None:
        self.else_properties.append(prop)

    def all_properties(self) -> List[Property]:
        """Regular, if and else properties, in that order."""
        return self.properties + self.if_properties + self.else_properties

    def __repr__(self) -> str:
        return f"Choice({self.name})"


@dataclass(eq=False)
class Category:
    """
    A partition dimension: a named, ordered list of mutually exclusive choices.

    Properties:
        name: Category name (e.g., "Size")
        choices: Choices in declaration order

    Categories compare by identity and are used as keys in TestFrame entries.
    """

    name: str
    choices: List[Choice] = field(default_factory=list)

    def add_choice(self, choice: Choice) -> None:
        self.choices.append(choice)

    @property
    def has_choices(self) -> bool:
        return bool(self.choices)

    def __repr__(self) -> str:
        return f"Category({self.name}: {len(self.choices)} choices)"


@dataclass
class Specification:
    """
    Root container for a category-partition test specification.

    Properties:
        categories:
            All categories in declaration order

        properties:
            Property table, keyed by name. Every property referenced by a
            choice or an expression is in this table.

    INVARIANTS:
        - Property names are unique
        - Categories reaching the generator are non-empty
    """

    categories: List[Category] = field(default_factory=list)
    properties: Dict[str, Property] = field(default_factory=dict)

    @classmethod
    def from_categories(cls, categories: List[Category]) -> "Specification":
        """Build a specification, collecting the property table from the choices."""
        spec = cls()
        for category in categories:
            spec.add_category(category)
        return spec

    def add_category(self, category: Category) -> None:
        self.categories.append(category)
        for choice in category.choices:
            for prop in choice.all_properties():
                self.properties.setdefault(prop.name, prop)

    def create_property(self, name: str) -> Property:
        """
        Return the property named `name`, creating it if needed.

        Args:
            name: Property name (surrounding whitespace is ignored)

        Returns:
            The single Property object for that name
        """
        normalized = name.strip()
        if normalized not in self.properties:
            self.properties[normalized] = Property(normalized)
        return self.properties[normalized]

    def get_property(self, name: str) -> Optional[Property]:
        return self.properties.get(name)

    def reset_properties(self) -> None:
        """Set every property back to False."""
        for prop in self.properties.values():
            prop.value = False

    def get_category(self, name: str) -> Optional[Category]:
        """
        Retrieve a category by name.

        Returns:
            The first category with that name, or None
        """
        for category in self.categories:
            if category.name == name:
                return category
        return None

    @property
    def total_choices(self) -> int:
        return sum(len(category.choices) for category in self.categories)

    @property
    def max_category_name_length(self) -> int:
        return max((len(category.name) for category in self.categories), default=0)

    @property
    def is_empty(self) -> bool:
        return not self.categories

    def to_tsl_string(self) -> str:
        """
        Render the specification as TSL text.

        Parsing the result yields an equivalent specification, as long as
        every property used in an expression is defined by an earlier
        choice (which a parsed specification guarantees).
        """
        from .expression_parser import format_expression

        lines: List[str] = []
        for category in self.categories:
            lines.append(f"{category.name}:")
            for choice in category.choices:
                name = choice.name if choice.name.endswith(".") else f"{choice.name}."
                parts = [f"  {name}"]
                if choice.properties:
                    parts.append(_property_constraint(choice.properties))
                if choice.frame_type != FrameType.NORMAL:
                    parts.append(f"[{choice.frame_type.value}]")
                if choice.if_expression is not None:
                    parts.append(f"[if {format_expression(choice.if_expression)}]")
                    if choice.if_properties:
                        parts.append(_property_constraint(choice.if_properties))
                    if choice.if_frame_type != FrameType.NORMAL:
                        parts.append(f"[{choice.if_frame_type.value}]")
                    if choice.has_else:
                        parts.append("[else]")
                        if choice.else_properties:
                            parts.append(_property_constraint(choice.else_properties))
                        if choice.else_frame_type != FrameType.NORMAL:
                            parts.append(f"[{choice.else_frame_type.value}]")
                lines.append(" ".join(parts))
            lines.append("")
        return "\n".join(lines)


def _property_constraint(properties: List[Property]) -> str:
    return "[property " + ", ".join(p.name for p in properties) + "]"
