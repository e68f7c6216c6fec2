"""
Test frames produced by the generator.

A normal frame holds one entry per category (a choice, or None for
"no selection") plus a key such as "2.1.0.3". A single or error frame holds
exactly one entry and no key.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from tslgen.model import Category, Choice, FrameType

IF_BRANCH = "if"
ELSE_BRANCH = "else"

NO_CHOICE = "<n/a>"


@dataclass
class TestFrame:
    """
    One generated test case.

    Properties:
        number: 1-based sequence number across all frames
        frame_type: NORMAL, SINGLE or ERROR
        key: Dot-joined 1-based choice indices, normal frames only
        entries: Category -> selected Choice (None if nothing was selectable),
            in category order
        branch: "if" / "else" when a conditional branch produced this frame
    """

    __test__ = False  # not a pytest test class

    number: int
    frame_type: FrameType = FrameType.NORMAL
    key: str = ""
    entries: Dict[Category, Optional[Choice]] = field(default_factory=dict)
    branch: Optional[str] = None

    @property
    def from_if_else(self) -> bool:
        return self.branch is not None

    def add_entry(self, category: Category, choice: Optional[Choice]) -> None:
        self.entries[category] = choice

    def set_single_frame(
        self,
        category: Category,
        choice: Choice,
        frame_type: FrameType,
        branch: Optional[str] = None,
    ) -> None:
        """Turn this frame into a single/error frame for one choice."""
        self.entries = {category: choice}
        self.frame_type = frame_type
        self.branch = branch

    def __str__(self) -> str:
        header = f"Test Case {self.number:<3}"

        if self.frame_type != FrameType.NORMAL:
            header += f"\t\t<{self.frame_type.value}>"
            if self.branch is not None:
                header += f"  (follows [{self.branch}])"
            if not self.entries:
                return f"{header}\n   <No category/choice>"
            category, choice = next(iter(self.entries.items()))
            return f"{header}\n   {category.name} :  {_choice_name(choice)}"

        header += f"\t\t(Key = {self.key})"
        if not self.entries:
            return f"{header}\n   <No categories/choices>"

        width = max(len(category.name) for category in self.entries)
        lines: List[str] = [header]
        for category, choice in self.entries.items():
            lines.append(f"   {category.name.ljust(width)} :  {_choice_name(choice)}")
        return "\n".join(lines)


def _choice_name(choice: Optional[Choice]) -> str:
    return choice.name if choice is not None else NO_CHOICE


__all__ = ["TestFrame", "IF_BRANCH", "ELSE_BRANCH", "NO_CHOICE"]
