"""
Parser for a textual outline of a whole Johnny.Decimal system.

The outline has one entry per line; indentation is decorative:

    100-199_school
        101_year_1
            10-19_math
                12_algebra
                    101.12.03_worksheet

Systems without projects simply start at the area lines. Two productions are
tried against the same lines:

    with projects:    (project-area, (project, (area, (category, jd*)*)*)*)+
    without projects: (area, (category, jd*)*)+

Whichever consumes more lines wins, the projects form on a tie. Lines after
the last one a production could consume are ignored.
"""

import logging
import re

from jdindex.exceptions import GrammarError, MismatchError
from jdindex.models import JDNumber
from jdindex.util import (
    check_area_range, check_category_in_area, check_project_in_range,
    check_project_range,
)

logger = logging.getLogger(__name__)

# A label is whatever follows the number; it may be empty but never starts
# with a digit, so "101_x" is a project and not category 10.
LINE_PATTERNS = {
    "project_area": re.compile(r"(\d{3})-(\d{3})(\D.*)?"),
    "project": re.compile(r"(?!\d{3}-\d{3})(\d{3})([^\d.].*)?"),
    "area": re.compile(r"(\d{2})-(\d{2})(\D.*)?"),
    "category": re.compile(r"(?!\d{2}-\d{2})(\d{2})([^\d.].*)?"),
    "jd": re.compile(r"(?:(\d{3})\.)?(\d{2})\.(\d{2})(\D.*)?"),
}


class _Cursor:
    def __init__(self, lines):
        self.lines = lines
        self.pos = 0

    def take(self, kind):
        """Consume the next line if it is of the given kind."""
        if self.pos >= len(self.lines):
            return None
        m = LINE_PATTERNS[kind].fullmatch(self.lines[self.pos])
        if m:
            self.pos += 1
        return m


def _many(cursor, kind, children=None):
    """Matches of consecutive `kind` lines; (match, children) pairs if a child parser is given."""
    nodes = []
    while True:
        m = cursor.take(kind)
        if m is None:
            return nodes
        nodes.append((m, children(cursor)) if children else m)


def _categories(cursor):
    return _many(cursor, "category", lambda c: _many(c, "jd"))


def _areas(cursor):
    return _many(cursor, "area", _categories)


def _project_areas(cursor):
    return _many(cursor, "project_area", lambda c: _many(c, "project", _areas))


def _label(m, group):
    return m.group(group) or ""


def _reduce_areas(areas, project=None, project_label=None):
    for area_m, categories in areas:
        first, last = int(area_m.group(1)), int(area_m.group(2))
        check_area_range(first, last)
        for category_m, jds in categories:
            category = int(category_m.group(1))
            check_category_in_area(category, first, last)
            for jd_m in jds:
                jd_project = int(jd_m.group(1)) if jd_m.group(1) else None
                if jd_project != project:
                    raise GrammarError("Project numbers do not match")
                if int(jd_m.group(2)) != category:
                    raise MismatchError("Category numbers do not match")
                yield JDNumber(
                    _label(area_m, 3),
                    _label(category_m, 2),
                    category,
                    int(jd_m.group(3)),
                    project=project,
                    project_label=project_label,
                    label=_label(jd_m, 4),
                )


def _reduce_project_areas(project_areas):
    for range_m, projects in project_areas:
        first, last = int(range_m.group(1)), int(range_m.group(2))
        check_project_range(first, last)
        for project_m, areas in projects:
            project = int(project_m.group(1))
            check_project_in_range(project, first, last)
            yield from _reduce_areas(areas, project, _label(project_m, 2))


def parse_system(text: str) -> list[JDNumber]:
    """
    Parse an outline into JD numbers, in the order they appear.

    Raises GrammarError if neither production matches the start of the text,
    or when a range, category or project is inconsistent with its parents.
    """
    lines = [line.lstrip() for line in text.splitlines() if line.strip()]

    with_cursor = _Cursor(lines)
    with_projects = _project_areas(with_cursor)
    without_cursor = _Cursor(lines)
    without_projects = _areas(without_cursor)

    if not with_projects and not without_projects:
        raise GrammarError("Could not parse system.")

    if with_projects and with_cursor.pos >= without_cursor.pos:
        consumed = with_cursor.pos
        numbers = list(_reduce_project_areas(with_projects))
    else:
        consumed = without_cursor.pos
        numbers = list(_reduce_areas(without_projects))

    if consumed < len(lines):
        logger.debug("Stopped parsing at line %r, %d line(s) ignored",
                     lines[consumed], len(lines) - consumed)
    return numbers
