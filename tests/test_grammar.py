"""Tests for parsing textual system outlines."""

from __future__ import annotations

import pytest
from conftest import PROJECT_OUTLINE

from jdindex.exceptions import DuplicateError, GrammarError, MismatchError, RangeShapeError
from jdindex.grammar import LINE_PATTERNS, parse_system
from jdindex.system import JDSystem

FLAT_OUTLINE = """10-19_finance
12_payroll
12.01_oct_payroll
20-29_admin
22_contracts
22.01_cleaning_contract
22.02_office_lease"""

INDENTED_OUTLINE = """10-19_finance
    12_payroll
        12.01_oct_payroll
20-29_admin
    22_contracts
        22.01_cleaning_contract
        22.02_office_lease"""


class TestLinePatterns:
    def test_area_line(self) -> None:
        m = LINE_PATTERNS["area"].fullmatch("10-19 area name2")
        assert m.groups() == ("10", "19", " area name2")

    def test_category_line_is_not_an_area(self) -> None:
        assert LINE_PATTERNS["category"].fullmatch("12 Category").groups() == ("12", " Category")
        assert LINE_PATTERNS["category"].fullmatch("10-19_area") is None
        assert LINE_PATTERNS["category"].fullmatch("some_giberish") is None

    def test_project_line_is_not_a_project_area(self) -> None:
        assert LINE_PATTERNS["project"].fullmatch("502_project2").groups() == ("502", "_project2")
        assert LINE_PATTERNS["project"].fullmatch("500-599_project_area") is None

    def test_project_line_is_not_a_category(self) -> None:
        assert LINE_PATTERNS["category"].fullmatch("101_year_1") is None

    def test_jd_line(self) -> None:
        assert LINE_PATTERNS["jd"].fullmatch("50.42 Test label").groups() == (
            None, "50", "42", " Test label",
        )
        assert LINE_PATTERNS["jd"].fullmatch("104.10.53_testing").groups() == (
            "104", "10", "53", "_testing",
        )

    def test_project_area_line(self) -> None:
        m = LINE_PATTERNS["project_area"].fullmatch("100-199_Project_1")
        assert m.groups() == ("100", "199", "_Project_1")
        assert LINE_PATTERNS["project_area"].fullmatch("50-59 area") is None


class TestParseSystem:
    def test_without_projects(self) -> None:
        numbers = parse_system(FLAT_OUTLINE)
        assert [str(n) for n in numbers] == [
            "12.01_oct_payroll",
            "22.01_cleaning_contract",
            "22.02_office_lease",
        ]
        first = numbers[0]
        assert (first.area_label, first.category_label) == ("_finance", "_payroll")
        assert first.project is None
        assert str(first.path) == ""

    def test_indentation_is_ignored(self) -> None:
        assert parse_system(INDENTED_OUTLINE) == parse_system(FLAT_OUTLINE)

    def test_blank_lines_are_ignored(self) -> None:
        text = "\n10-19_finance\n\n   12_payroll\n\n12.01_oct_payroll\n\n"
        assert [n.number for n in parse_system(text)] == ["12.01"]

    def test_with_projects(self) -> None:
        numbers = parse_system(PROJECT_OUTLINE)
        assert [str(n) for n in numbers] == [
            "101.12.01_oct_payroll",
            "101.22.01_cleaning_contract",
            "101.22.02_office_lease",
        ]
        assert all(n.project_label == "_project_name" for n in numbers)
        assert numbers[1].area_label == "_admin"

    def test_nested_example(self) -> None:
        text = """100-199_school
    101_year_1
        10-19_math
            12_algebra
                101.12.03_worksheet"""
        (n,) = parse_system(text)
        assert (n.project, n.category, n.id) == (101, 12, 3)
        assert (n.project_label, n.area_label, n.category_label, n.label) == (
            "_year_1", "_math", "_algebra", "_worksheet",
        )

    def test_several_projects(self) -> None:
        text = """100-199_school
101_year_1
10-19_math
12_algebra
101.12.03_worksheet
102_year_2
10-19_math
12_algebra
102.12.01_quiz
200-299_work
201_client
20-29_admin
22_contracts
201.22.01_nda"""
        assert [n.number for n in parse_system(text)] == ["101.12.03", "102.12.01", "201.22.01"]

    def test_every_item_line_is_kept(self) -> None:
        text = "10-19_f\n12_c\n12.01_a\n12.02_b\n12.03_c\n13_d\n13.01_e"
        numbers = parse_system(text)
        assert [n.number for n in numbers] == ["12.01", "12.02", "12.03", "13.01"]
        assert [n.label for n in numbers] == ["_a", "_b", "_c", "_e"]

    def test_empty_labels(self) -> None:
        (n,) = parse_system("10-19\n12\n12.01")
        assert (n.area_label, n.category_label, n.label) == ("", "", "")

    def test_trailing_input_is_ignored(self) -> None:
        text = "10-19_f\n12_c\n12.01_y\nthis is not a line\n12.02_z"
        assert [n.number for n in parse_system(text)] == ["12.01"]

    def test_gibberish(self) -> None:
        with pytest.raises(GrammarError) as exc:
            parse_system("this is some giberish")
        assert exc.value.message == "Could not parse system."

    def test_empty_text(self) -> None:
        with pytest.raises(GrammarError):
            parse_system("")


class TestSemanticChecks:
    def test_area_shape(self) -> None:
        with pytest.raises(RangeShapeError) as exc:
            parse_system("11-20_f\n12_c\n12.01_y")
        assert exc.value.message == "First area number is not a multiple of 10."

    def test_area_width(self) -> None:
        with pytest.raises(RangeShapeError) as exc:
            parse_system("10-20_f\n12_c\n12.01_y")
        assert exc.value.message == "Second area number is not 9 more than the first number."

    def test_project_shape(self) -> None:
        with pytest.raises(RangeShapeError) as exc:
            parse_system("150-249_p\n151_x\n10-19_f\n12_c\n151.12.01_y")
        assert exc.value.message == "First project number is not a multiple of 100."

    def test_category_outside_area(self) -> None:
        with pytest.raises(GrammarError) as exc:
            parse_system("10-19_f\n22_c\n22.01_x")
        assert exc.value.message == "Category not between area limits"

    def test_project_outside_range(self) -> None:
        with pytest.raises(GrammarError) as exc:
            parse_system("100-199_p\n201_x\n10-19_f\n12_c\n201.12.01_y")
        assert exc.value.message == "Project not between project ranges"

    def test_item_project_differs(self) -> None:
        with pytest.raises(GrammarError) as exc:
            parse_system("100-199_p\n101_x\n10-19_f\n12_c\n102.12.01_y")
        assert exc.value.message == "Project numbers do not match"

    def test_item_project_without_project_block(self) -> None:
        with pytest.raises(GrammarError) as exc:
            parse_system("10-19_f\n12_c\n101.12.01_y")
        assert exc.value.message == "Project numbers do not match"

    def test_item_category_differs(self) -> None:
        with pytest.raises(MismatchError):
            parse_system("10-19_f\n12_c\n13.01_y")


class TestSystemParse:
    def test_builds_sorted_index(self) -> None:
        system = JDSystem.parse("20-29_admin\n22_c\n22.02_b\n22.01_a\n10-19_f\n12_c\n12.01_y")
        assert [n.number for n in system] == ["12.01", "22.01", "22.02"]
        assert system.path == ""

    def test_duplicates_are_rejected(self) -> None:
        with pytest.raises(DuplicateError) as exc:
            JDSystem.parse("10-19_f\n12_c\n12.01_a\n12.01_b")
        assert exc.value.message == "Element already exists."
