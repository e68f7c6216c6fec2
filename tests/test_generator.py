"""
Tests for the frame generator (Specification -> ordered test frames).

These tests verify:
    - Single/error extraction against the baseline property assignment
    - Normal enumeration order, keys and "no selection" entries
    - Exact restoration of property values on every exit path
    - Precondition checks on the category/choice graph
    - The step budget
    - Frame counts of the "find" sample family
"""

import pytest
from conftest import (
    CONSTRAINED_FIND_TSL,
    ERROR_FIND_TSL,
    SIMPLE_FIND_TSL,
    SINGLES_FIND_TSL,
    UNCONSTRAINED_FIND_TSL,
)
from tslgen.errors import ContractViolation, GenerationLimitExceeded
from tslgen.examples import build_find_specification
from tslgen.expressions import BinaryExpression, BinaryOperator, PropertyReference
from tslgen.frames import ELSE_BRANCH, IF_BRANCH
from tslgen.generator import FrameGenerator
from tslgen.model import Category, Choice, FrameType, Property
from tslgen.tsl_parser import parse_tsl_string


def _category(name, *choices):
    category = Category(name)
    for choice in choices:
        category.add_choice(choice)
    return category


def _generate(tsl):
    return FrameGenerator.from_specification(parse_tsl_string(tsl)).generate()


class TestScenario:
    """Size / Count: the smallest conditional specification."""

    def test_keys(self, size_count_tsl):
        result = _generate(size_count_tsl)
        assert result.keys == ["1.0", "2.1", "2.2", "2.3"]
        assert result.single_frames == 0
        assert result.error_frames == 0

    def test_no_selection_entry(self, size_count_tsl):
        """Empty file: nothing in Count is selectable."""
        first = _generate(size_count_tsl)[0]
        size, count = list(first.entries)
        assert first.entries[size].name == "Empty."
        assert first.entries[count] is None

    def test_programmatic_specification(self):
        """The same specification built in code gives the same keys."""
        result = FrameGenerator.from_specification(build_find_specification()).generate()
        assert result.keys == ["1.0", "2.1", "2.2", "2.3"]


class TestNormalFrames:
    """Depth-first enumeration of normal frames."""

    def test_product_without_conditions(self):
        """3 * 2 * 2 = 12 frames in lexicographic key order."""
        categories = [
            _category("Category1", *(Choice(f"C1_{i}.") for i in range(1, 4))),
            _category("Category2", *(Choice(f"C2_{i}.") for i in range(1, 3))),
            _category("Category3", *(Choice(f"C3_{i}.") for i in range(1, 3))),
        ]
        result = FrameGenerator(categories).generate()
        assert len(result) == 12
        assert result.keys[:3] == ["1.1.1", "1.1.2", "1.2.1"]
        assert result.keys[-1] == "3.2.2"

    def test_entries_follow_category_order(self):
        categories = [
            _category("First", Choice("A.")),
            _category("Second", Choice("B.")),
        ]
        frame = FrameGenerator(categories).generate()[0]
        assert [c.name for c in frame.entries] == ["First", "Second"]
        assert [c.name for c in frame.entries.values()] == ["A.", "B."]

    def test_tagged_choices_excluded(self):
        """A category with only single/error choices contributes "0"."""
        categories = [
            _category("Broken", Choice("Bad.", frame_type=FrameType.ERROR)),
            _category("Other", Choice("X."), Choice("Y.")),
        ]
        result = FrameGenerator(categories).generate()
        assert result.keys == ["0.1", "0.2"]
        assert result.error_frames == 1

    def test_condition_on_earlier_property(self):
        a = Property("A")
        categories = [
            _category("Category1", Choice("Choice1.", properties=[a])),
            _category(
                "Category2",
                Choice("Choice2.", if_expression=PropertyReference(a)),
                Choice("Choice3."),
            ),
        ]
        result = FrameGenerator(categories).generate()
        assert result.keys == ["1.1", "1.2"]

    def test_and_condition(self):
        """Only the choice setting both properties unlocks the conditional one."""
        a, b = Property("A"), Property("B")
        both = BinaryExpression(BinaryOperator.AND, PropertyReference(a), PropertyReference(b))
        categories = [
            _category(
                "Category1",
                Choice("Choice1.", properties=[a]),
                Choice("Choice3.", properties=[b]),
            ),
            _category("Category2", Choice("Choice2.", if_expression=both)),
        ]
        result = FrameGenerator(categories).generate()
        assert result.keys == ["1.0", "2.0"]

    def test_properties_scoped_to_branch(self):
        """A property set on one path is not visible on a sibling path."""
        result = _generate(
            "Pick:\n"
            "  Set. [property p]\n"
            "  Unset.\n"
            "Check:\n"
            "  Needs p. [if p]\n"
            "  Needs not p. [if !p]\n"
        )
        assert result.keys == ["1.1", "2.2"]

    def test_else_branch_properties(self):
        result = _generate(
            "Pick:\n"
            "  Set. [property a]\n"
            "  Unset.\n"
            "Branch:\n"
            "  Either. [if a] [property fromif] [else] [property fromelse]\n"
            "Check:\n"
            "  If side. [if fromif]\n"
            "  Else side. [if fromelse]\n"
        )
        assert result.keys == ["1.1.1", "2.1.2"]

    def test_already_true_property_survives_sibling(self):
        """Re-asserting a property that is already true must not clear it."""
        result = _generate(
            "First:\n"
            "  Set. [property p]\n"
            "Second:\n"
            "  Again. [property p]\n"
            "  Plain.\n"
            "Third:\n"
            "  Needs p. [if p]\n"
        )
        assert result.keys == ["1.1.1", "1.2.1"]


class TestSingleFrames:
    """Single/error extraction."""

    def test_tagged_choices_come_first(self):
        category = _category(
            "TestCategory",
            Choice("Choice1."),
            Choice("Choice2.", frame_type=FrameType.SINGLE),
            Choice("Choice3.", frame_type=FrameType.ERROR),
        )
        result = FrameGenerator([category]).generate()
        assert len(result) == 3
        assert result[0].frame_type == FrameType.SINGLE
        assert result[1].frame_type == FrameType.ERROR
        assert result[2].frame_type == FrameType.NORMAL
        assert result[2].key == "1"
        assert [frame.number for frame in result] == [1, 2, 3]

    def test_single_frame_has_one_entry_and_no_key(self):
        category = _category("Cat", Choice("Bad.", frame_type=FrameType.ERROR), Choice("Ok."))
        frame = FrameGenerator([category]).generate()[0]
        assert frame.key == ""
        assert list(frame.entries.values())[0].name == "Bad."
        assert frame.branch is None

    def test_if_branch_tag(self):
        """The if branch is taken against the baseline and tagged single."""
        a = Property("A")
        category = _category(
            "Category",
            Choice("Choice1.", properties=[a]),
            Choice(
                "Choice2.",
                if_expression=PropertyReference(a),
                has_else=True,
                if_frame_type=FrameType.SINGLE,
            ),
        )
        result = FrameGenerator([category]).generate()
        single = result.single_frames_list
        assert len(single) == 1
        assert single[0].branch == IF_BRANCH
        assert single[0].from_if_else is True
        assert result.keys == ["1", "2"]

    def test_else_branch_tag(self):
        """Nothing sets the property, so the else branch is evaluated."""
        result = _generate(
            "Init:\n"
            "  Unrelated. [property other]\n"
            "  Maybe. [if other] [property a]\n"
            "Cat:\n"
            "  Branchy. [if a] [else] [error]\n"
            "  Plain.\n"
        )
        errors = result.error_frames_list
        assert len(errors) == 1
        assert errors[0].branch == ELSE_BRANCH

    def test_baseline_ignores_conditional_properties(self):
        """Properties set by conditional choices are not part of the baseline."""
        result = _generate(
            "Seed:\n"
            "  Set. [property a]\n"
            "Middle:\n"
            "  Cond. [if a] [property b]\n"
            "Last:\n"
            "  Check. [if b] [error]\n"
            "  Plain.\n"
        )
        assert result.error_frames == 0

    def test_baseline_includes_tagged_choices(self):
        """Regular properties of tagged choices count toward the baseline."""
        result = _generate(
            "Seed:\n"
            "  Broken. [property a] [error]\n"
            "  Fine.\n"
            "Last:\n"
            "  Check. [if a] [single]\n"
            "  Plain.\n"
        )
        assert result.error_frames == 1
        assert result.single_frames == 1

    def test_base_tag_and_branch_tag_both_count(self):
        result = _generate(
            "Seed:\n"
            "  Set. [property a]\n"
            "Cat:\n"
            "  Double. [single] [if a] [error]\n"
            "  Plain.\n"
        )
        assert result.single_frames == 1
        assert result.error_frames == 1

    def test_single_branch_excluded_from_normal_frames(self):
        """On a path where the taken branch is single, the choice is skipped."""
        result = _generate(
            "Pick:\n"
            "  Set. [property a]\n"
            "  Unset.\n"
            "Cat:\n"
            "  Maybe. [if a] [single] [else]\n"
            "  Other.\n"
        )
        assert result.keys == ["1.2", "2.1", "2.2"]
        assert result.single_frames == 1


class TestPropertyState:
    """Property values are restored after generation."""

    def test_all_false_after_generate(self):
        spec = parse_tsl_string(SIMPLE_FIND_TSL)
        FrameGenerator.from_specification(spec).generate()
        assert all(prop.value is False for prop in spec.properties.values())

    def test_entry_values_restored(self, size_count_tsl):
        spec = parse_tsl_string(size_count_tsl)
        spec.get_property("noOcc").value = True
        result = FrameGenerator.from_specification(spec).generate()
        assert spec.get_property("noOcc").value is True
        assert spec.get_property("emptyfile").value is False
        assert result.keys == ["1.0", "2.1", "2.2", "2.3"]

    def test_idempotent(self):
        generator = FrameGenerator.from_specification(parse_tsl_string(CONSTRAINED_FIND_TSL))
        first = generator.generate()
        second = generator.generate()
        assert first.keys == second.keys
        assert str(first) == str(second)


class TestContractViolations:
    """Malformed graphs are rejected before any frame is produced."""

    @pytest.mark.parametrize(
        "choice",
        [
            Choice("Else only.", has_else=True),
            Choice("If type only.", if_frame_type=FrameType.SINGLE),
            Choice("If props only.", if_properties=[Property("x")]),
            Choice(
                "Else type only.",
                if_expression=PropertyReference(Property("x")),
                else_frame_type=FrameType.ERROR,
            ),
            Choice("Else props only.", else_properties=[Property("x")]),
        ],
    )
    def test_inconsistent_choice(self, choice):
        generator = FrameGenerator([_category("Cat", Choice("Ok.", frame_type=FrameType.ERROR), choice)])
        with pytest.raises(ContractViolation):
            generator.generate()
        assert generator.frames == []

    def test_empty_category(self):
        with pytest.raises(ContractViolation, match="has no choices"):
            FrameGenerator([_category("Ok", Choice("A.")), Category("Empty")]).generate()

    def test_same_name_distinct_objects(self):
        """One name must map to one Property object across the graph."""
        categories = [
            _category("Size", Choice("Empty.", properties=[Property("emptyfile")]), Choice("Not empty.")),
            _category("Count", Choice("One.", if_expression=PropertyReference(Property("emptyfile")))),
        ]
        generator = FrameGenerator(categories)
        with pytest.raises(ContractViolation, match='"emptyfile" is represented by more than one object'):
            generator.generate()
        assert generator.frames == []

    def test_same_name_within_one_expression(self):
        a, other_a = Property("A"), Property("A")
        both = BinaryExpression(BinaryOperator.OR, PropertyReference(a), PropertyReference(other_a))
        with pytest.raises(ContractViolation):
            FrameGenerator([_category("Cat", Choice("X.", if_expression=both))]).generate()

    def test_shared_object_accepted(self):
        """The same object used by a choice and a condition is fine."""
        emptyfile = Property("emptyfile")
        categories = [
            _category("Size", Choice("Empty.", properties=[emptyfile]), Choice("Not empty.")),
            _category("Count", Choice("One.", if_expression=PropertyReference(emptyfile))),
        ]
        assert FrameGenerator(categories).generate().keys == ["1.1", "2.0"]

    def test_properties_untouched(self):
        a = Property("A")
        categories = [
            _category("Ok", Choice("A.", properties=[a])),
            _category("Bad", Choice("B.", has_else=True)),
        ]
        with pytest.raises(ContractViolation):
            FrameGenerator(categories).generate()
        assert a.value is False


class TestStepBudget:
    """max_steps bounds normal enumeration."""

    def _categories(self):
        return [
            _category("Category1", *(Choice(f"C1_{i}.") for i in range(1, 4))),
            _category("Category2", *(Choice(f"C2_{i}.") for i in range(1, 3))),
            _category("Category3", *(Choice(f"C3_{i}.") for i in range(1, 3))),
        ]

    def test_exact_budget_succeeds(self):
        """1 + 3 + 6 + 12 search nodes."""
        assert len(FrameGenerator(self._categories(), max_steps=22).generate()) == 12

    def test_exceeded_budget(self):
        generator = FrameGenerator(self._categories(), max_steps=21)
        with pytest.raises(GenerationLimitExceeded):
            generator.generate()
        assert generator.frames == []

    def test_state_restored_after_limit(self):
        spec = parse_tsl_string(SIMPLE_FIND_TSL)
        with pytest.raises(GenerationLimitExceeded):
            FrameGenerator.from_specification(spec, max_steps=3).generate()
        assert all(prop.value is False for prop in spec.properties.values())


class TestIsSelectable:
    """The eligibility predicate used at each category."""

    def test_plain_choice(self):
        a = Property("A")
        assert FrameGenerator.is_selectable(Choice("X.", properties=[a])) == [a]

    def test_tagged_choice(self):
        assert FrameGenerator.is_selectable(Choice("X.", frame_type=FrameType.SINGLE)) is None

    def test_condition_false_without_else(self):
        choice = Choice("X.", if_expression=PropertyReference(Property("A")))
        assert FrameGenerator.is_selectable(choice) is None

    def test_condition_true(self):
        a, b = Property("A", value=True), Property("B")
        choice = Choice("X.", if_expression=PropertyReference(a), if_properties=[b])
        assert FrameGenerator.is_selectable(choice) == [b]

    def test_else_branch(self):
        c = Property("C")
        choice = Choice(
            "X.",
            if_expression=PropertyReference(Property("A")),
            has_else=True,
            else_properties=[c],
        )
        assert FrameGenerator.is_selectable(choice) == [c]


@pytest.mark.parametrize(
    "tsl, total, normal, single, error",
    [
        (SIMPLE_FIND_TSL, 16, 16, 0, 0),
        (UNCONSTRAINED_FIND_TSL, 7776, 7776, 0, 0),
        (CONSTRAINED_FIND_TSL, 1696, 1696, 0, 0),
        (ERROR_FIND_TSL, 562, 560, 0, 2),
        (SINGLES_FIND_TSL, 35, 24, 9, 2),
    ],
)
def test_find_sample_counts(tsl, total, normal, single, error):
    result = _generate(tsl)
    assert result.total_frames == total
    assert result.normal_frames == normal
    assert result.single_frames == single
    assert result.error_frames == error
    assert [frame.number for frame in result] == list(range(1, total + 1))
