import re
from pathlib import Path
from typing import Optional

from jdindex.exceptions import RangeShapeError, GrammarError

# Path components. Labels must start with a non-digit so "102_x" is never read
# as category 10, and project/category labels may not start with "." so an
# item folder is never mistaken for either. Area, category and item labels are
# optional here so a missing name can be reported as such.
PROJECT_AREA_RE = re.compile(r"(\d{3})-(\d{3})(\D.*)")
AREA_RE = re.compile(r"(\d{2})-(\d{2})(\D.*)?")
JD_RE = re.compile(r"(?:(\d{3})\.)?(\d{2})\.(\d{2})(\D.*)?")
PROJECT_RE = re.compile(r"(?!\d{3}-\d{3})(\d{3})([^\d.].*)")
CATEGORY_RE = re.compile(r"(?!\d{2}-\d{2})(\d{2})([^\d.].*)?")

# Typed input: "12.01" or "101.12.01"
SHORT_RE = re.compile(r"(?:(\d{3})\.)?(\d{2})\.(\d{2})")

# Partial numbers accepted by show/add; full ones use SHORT_RE
PARTIAL_CATEGORY_RE = re.compile(r"(?:(\d{3})\.)?(\d{2})")
PARTIAL_PROJECT_RE = re.compile(r"(\d{3})")


def _int_or_none(value: Optional[str]) -> Optional[int]:
    return int(value) if value is not None else None


def parse_jd_input(text: Optional[str]) -> tuple[Optional[int], Optional[int], Optional[int]]:
    """
    Parse a full or partial JD number into (project, category, id).

    Accepts PRO.AC.ID, AC.ID, PRO.AC, AC and PRO. Anything else, including
    None, gives (None, None, None).
    """
    if not text:
        return None, None, None
    m = SHORT_RE.fullmatch(text)
    if m:
        return _int_or_none(m.group(1)), int(m.group(2)), int(m.group(3))
    m = PARTIAL_CATEGORY_RE.fullmatch(text)
    if m:
        return _int_or_none(m.group(1)), int(m.group(2)), None
    m = PARTIAL_PROJECT_RE.fullmatch(text)
    if m:
        return int(m.group(1)), None, None
    return None, None, None


def format_jd_id(category: int, id_: int, project: Optional[int] = None) -> str:
    """Format a JD number: (26, 1) -> '26.01', (26, 1, 101) -> '101.26.01'."""
    if project is None:
        return f"{category:02d}.{id_:02d}"
    return f"{project:03d}.{category:02d}.{id_:02d}"


def area_bounds(category: int) -> tuple[int, int]:
    """The area range a category belongs to: 26 -> (20, 29)."""
    first = (category // 10) * 10
    return first, first + 9


def check_area_range(first: int, second: int):
    if first % 10 != 0:
        raise RangeShapeError("First area number is not a multiple of 10.")
    if second != first + 9:
        raise RangeShapeError("Second area number is not 9 more than the first number.")


def check_project_range(first: int, second: int):
    if first % 100 != 0:
        raise RangeShapeError("First project number is not a multiple of 100.")
    if second != first + 99:
        raise RangeShapeError("Second project number is not 99 more than the first number.")


def check_category_in_area(category: int, first: int, second: int):
    if not first <= category <= second:
        raise GrammarError("Category not between area limits")


def check_project_in_range(project: int, first: int, second: int):
    if not first <= project <= second:
        raise GrammarError("Project not between project ranges")


def is_hidden(name: str) -> bool:
    """Dot-prefixed names are invisible to the indexer."""
    return name.startswith(".")


def walk_up(start_path: Path):
    """Yield start_path and each of its parents, innermost first."""
    path = start_path
    yield path
    yield from path.parents
