"""
Frame Generator: Specification -> ordered test frames.

Generation runs in two phases:

1. Single/error extraction.
   Every choice tagged [single] or [error] yields one frame. Every choice
   with an [if ...] condition is evaluated against a baseline (regular
   properties of unconditional choices set, everything else unset); if the
   taken branch is tagged [single] or [error] it yields one frame too.

2. Normal enumeration.
   Depth-first search over categories in declaration order. At each
   category every selectable choice is tried in declaration order, its
   properties are assumed true for the deeper categories, and restored
   afterwards. A category where nothing is selectable contributes
   "no selection" (key digit 0).

Frame order, keys and numbers are deterministic and part of the output
contract.

The generator is the only writer of Property.value while generate() runs.
Property values are restored before generate() returns or raises.
"""

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from tslgen.errors import ContractViolation, GenerationLimitExceeded
from tslgen.evaluator import evaluate, iter_property_references
from tslgen.frames import ELSE_BRANCH, IF_BRANCH, TestFrame
from tslgen.model import Category, Choice, FrameType, Property, Specification
from tslgen.result import GeneratorResult

logger = logging.getLogger(__name__)


class FrameGenerator:
    """
    Generates test frames from an ordered list of categories.

    Attributes:
        categories: Categories in declaration order (each non-empty)
        max_steps: Optional budget of search nodes for normal enumeration.
            None means unbounded.
        frames: Frames produced by the last generate() call

    Example:
        >>> spec = parse_tsl_file("find.tsl")
        >>> result = FrameGenerator.from_specification(spec).generate()
        >>> print(result.to_summary_string())
    """

    def __init__(self, categories: List[Category], max_steps: Optional[int] = None):
        self.categories = list(categories)
        self.max_steps = max_steps
        self.frames: List[TestFrame] = []
        self._steps = 0

    @classmethod
    def from_specification(cls, spec: Specification, max_steps: Optional[int] = None) -> "FrameGenerator":
        return cls(spec.categories, max_steps=max_steps)

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def generate(self) -> GeneratorResult:
        """
        Generate all single/error frames, then all normal frames.

        Returns:
            GeneratorResult over the ordered frames

        Raises:
            ContractViolation: If the category/choice graph is malformed
            GenerationLimitExceeded: If max_steps is exceeded
        """
        self._check_invariants()

        properties = self._collect_properties()
        saved = {prop: prop.value for prop in properties}

        self.frames = []
        self._steps = 0
        try:
            self._reset(properties)
            self._generate_single_frames(properties)
            single_count = len(self.frames)
            logger.debug("Extracted %d single/error frames", single_count)

            self._reset(properties)
            self._generate_normal_frames(0, [None] * len(self.categories))
            logger.debug(
                "Enumerated %d normal frames in %d steps",
                len(self.frames) - single_count,
                self._steps,
            )
        except GenerationLimitExceeded:
            self.frames = []
            raise
        finally:
            for prop, value in saved.items():
                prop.value = value

        logger.info("Generated %d test frames", len(self.frames))
        return GeneratorResult(list(self.frames))

    # =========================================================================
    # PRECONDITIONS
    # =========================================================================

    def _check_invariants(self) -> None:
        """Reject object graphs the generator cannot interpret."""
        for category in self.categories:
            if not category.choices:
                raise ContractViolation(f'Category "{category.name}" has no choices')

            for choice in category.choices:
                where = f'Choice "{choice.name}" in category "{category.name}"'
                if choice.if_expression is None:
                    if choice.has_else:
                        raise ContractViolation(f"{where} has an else branch but no if expression")
                    if choice.if_frame_type != FrameType.NORMAL:
                        raise ContractViolation(f"{where} has an if frame type but no if expression")
                    if choice.if_properties:
                        raise ContractViolation(f"{where} has if properties but no if expression")
                if not choice.has_else:
                    if choice.else_frame_type != FrameType.NORMAL:
                        raise ContractViolation(f"{where} has an else frame type but no else branch")
                    if choice.else_properties:
                        raise ContractViolation(f"{where} has else properties but no else branch")

    def _iter_properties(self) -> Iterator[Property]:
        """Every property object a choice sets or an expression reads, repeats included."""
        for category in self.categories:
            for choice in category.choices:
                yield from choice.all_properties()
                if choice.if_expression is not None:
                    yield from iter_property_references(choice.if_expression)

    def _collect_properties(self) -> List[Property]:
        """
        The graph's property table, one object per name.

        Raises:
            ContractViolation: If two distinct objects share a name
        """
        seen: Dict[str, Property] = {}
        for prop in self._iter_properties():
            known = seen.setdefault(prop.name, prop)
            if known is not prop:
                raise ContractViolation(
                    f'Property "{prop.name}" is represented by more than one object'
                )
        return list(seen.values())

    @staticmethod
    def _reset(properties: List[Property]) -> None:
        for prop in properties:
            prop.value = False

    # =========================================================================
    # PHASE 1: SINGLE / ERROR FRAMES
    # =========================================================================

    def _baseline_properties(self) -> List[Property]:
        """Regular properties of every choice without a condition."""
        baseline: List[Property] = []
        for category in self.categories:
            for choice in category.choices:
                if choice.if_expression is None:
                    baseline.extend(choice.properties)
        return baseline

    def _generate_single_frames(self, properties: List[Property]) -> None:
        baseline = self._baseline_properties()

        for category in self.categories:
            for choice in category.choices:
                if choice.frame_type != FrameType.NORMAL:
                    self._add_single_frame(category, choice, choice.frame_type)

                if choice.if_expression is None:
                    continue

                for prop in baseline:
                    prop.value = True
                try:
                    condition = evaluate(choice.if_expression)
                finally:
                    self._reset(properties)

                if condition and choice.if_frame_type != FrameType.NORMAL:
                    self._add_single_frame(category, choice, choice.if_frame_type, IF_BRANCH)
                elif not condition and choice.has_else and choice.else_frame_type != FrameType.NORMAL:
                    self._add_single_frame(category, choice, choice.else_frame_type, ELSE_BRANCH)

    def _add_single_frame(
        self,
        category: Category,
        choice: Choice,
        frame_type: FrameType,
        branch: Optional[str] = None,
    ) -> None:
        frame = TestFrame(len(self.frames) + 1)
        frame.set_single_frame(category, choice, frame_type, branch=branch)
        self.frames.append(frame)

    # =========================================================================
    # PHASE 2: NORMAL FRAMES
    # =========================================================================

    @staticmethod
    def is_selectable(choice: Choice) -> Optional[List[Property]]:
        """
        Decide whether `choice` can take part in a normal frame right now.

        Evaluates the choice's condition against the live property values.

        Returns:
            The properties to assume while the choice is selected (possibly
            empty), or None if the choice must be skipped
        """
        if choice.frame_type != FrameType.NORMAL:
            return None

        if choice.if_expression is None:
            return choice.properties

        if evaluate(choice.if_expression):
            if choice.if_frame_type != FrameType.NORMAL:
                return None
            return choice.if_properties

        if choice.has_else and choice.else_frame_type == FrameType.NORMAL:
            return choice.else_properties

        return None

    @contextmanager
    def _assume(self, properties: List[Property]) -> Iterator[None]:
        """Set `properties` true for the duration of the block, then undo exactly those flips."""
        flipped: List[Property] = []
        try:
            for prop in properties:
                if not prop.value:
                    prop.value = True
                    flipped.append(prop)
            yield
        finally:
            for prop in flipped:
                prop.value = False

    def _count_step(self) -> None:
        self._steps += 1
        if self.max_steps is not None and self._steps > self.max_steps:
            raise GenerationLimitExceeded(
                f"Frame generation exceeded the step budget of {self.max_steps}"
            )

    def _generate_normal_frames(self, depth: int, selections: List[Optional[int]]) -> None:
        """
        Recursively enumerate normal frames.

        Args:
            depth: Index of the category being decided
            selections: Chosen choice index per category so far (None = no selection)
        """
        self._count_step()

        if depth == len(self.categories):
            self._add_normal_frame(selections)
            return

        category = self.categories[depth]
        made_selection = False

        for index, choice in enumerate(category.choices):
            assumed = self.is_selectable(choice)
            if assumed is None:
                continue

            made_selection = True
            with self._assume(assumed):
                selections[depth] = index
                self._generate_normal_frames(depth + 1, selections)
                selections[depth] = None

        if not made_selection:
            self._generate_normal_frames(depth + 1, selections)

    def _add_normal_frame(self, selections: List[Optional[int]]) -> None:
        frame = TestFrame(len(self.frames) + 1)
        key_parts = []

        for category, index in zip(self.categories, selections):
            if index is None:
                frame.add_entry(category, None)
                key_parts.append("0")
            else:
                frame.add_entry(category, category.choices[index])
                key_parts.append(str(index + 1))

        frame.key = ".".join(key_parts)
        self.frames.append(frame)


__all__ = ["FrameGenerator"]
