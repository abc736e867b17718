import copy
from functools import total_ordering
from pathlib import PurePath, PurePosixPath
from typing import Optional

from jdindex.exceptions import (
    MismatchError, MissingFieldError, OutOfRangeError, ParseError,
)
from jdindex.util import (
    AREA_RE, CATEGORY_RE, JD_RE, PROJECT_AREA_RE, PROJECT_RE, SHORT_RE,
    area_bounds, check_area_range, check_category_in_area,
    check_project_in_range, check_project_range, format_jd_id,
)


class Location:
    """Where a JD number lives. Serialized as {"<Kind>": value}."""

    kinds = {}

    def __init_subclass__(cls, kind=None, **kwargs):
        super().__init_subclass__(**kwargs)
        if kind:
            cls.kind = kind
            Location.kinds[kind] = cls

    @classmethod
    def from_dict(cls, data: dict) -> "Location":
        if len(data) != 1:
            raise ValueError(f"Expected a single location kind, got {sorted(data)}")
        (kind, value), = data.items()
        try:
            return cls.kinds[kind](value)
        except KeyError:
            raise ValueError(f"Unknown location kind: {kind}") from None


class PathLocation(Location, kind="Path"):
    def __init__(self, path):
        self.path = str(path)

    def to_dict(self):
        return {self.kind: self.path}

    def __eq__(self, other):
        return isinstance(other, PathLocation) and self.path == other.path

    def __hash__(self):
        return hash((self.kind, self.path))

    def __repr__(self):
        return f"PathLocation({self.path!r})"

    def __str__(self):
        return self.path


@total_ordering
class JDNumber:
    """
    A Johnny.Decimal number, either AC.ID or PRO.AC.ID, with the labels of
    the folders it is filed under.

    Numbers compare and hash on (project, category, id) only; a number without
    a project sorts before every number with one.
    """

    def __init__(self, area_label: str, category_label: str, category: int, id: int,
                 project: Optional[int] = None, project_label: Optional[str] = None,
                 label: str = "", path=""):
        if not 0 <= category <= 99 or not 0 <= id <= 99:
            raise OutOfRangeError()
        if project is not None and not 0 <= project <= 999:
            raise OutOfRangeError()
        self.project = project
        self.project_label = project_label
        self.category = category
        self.id = id
        self.label = label
        self.area_label = area_label
        self.category_label = category_label
        self.path = path if isinstance(path, Location) else PathLocation(path)

    @classmethod
    def from_str(cls, text: str) -> "JDNumber":
        """
        Build a lookup key from a typed number like '12.01' or '101.12.01'.
        Labels are left empty.
        """
        m = SHORT_RE.fullmatch(text.strip())
        if not m:
            raise ParseError(text)
        project = int(m.group(1)) if m.group(1) else None
        return cls("", "", int(m.group(2)), int(m.group(3)), project=project,
                   project_label="" if project is not None else None)

    @classmethod
    def from_path(cls, path) -> "JDNumber":
        """
        Build a JD number from a folder path such as
        '20-29_testing/20_good_testing/20.35_test' or
        '100-199_school/102_grade-10/20-29_RHS/22-ap_biology/102.22.02_oreo_project'.
        """
        project_range = project = project_label = None
        area = area_label = None
        category = category_label = None
        jd = None

        for part in PurePath(path).parts:
            m = PROJECT_AREA_RE.fullmatch(part)
            if m:
                project_range = int(m.group(1)), int(m.group(2))
                continue
            m = AREA_RE.fullmatch(part)
            if m:
                area = int(m.group(1)), int(m.group(2))
                area_label = m.group(3)
                continue
            m = JD_RE.fullmatch(part)
            if m:
                jd = m
                continue
            m = PROJECT_RE.fullmatch(part)
            if m:
                project, project_label = int(m.group(1)), m.group(2)
                continue
            m = CATEGORY_RE.fullmatch(part)
            if m:
                category, category_label = int(m.group(1)), m.group(2)

        if area_label is None:
            raise MissingFieldError("Could not find area name")
        if category is None:
            raise MissingFieldError("Could not find category")
        if category_label is None:
            raise MissingFieldError("Could not find category name")
        if jd is None:
            raise MissingFieldError("Could not find id")
        if not jd.group(4):
            raise MissingFieldError("Could not find JD name")

        check_area_range(*area)
        if project_range is not None:
            check_project_range(*project_range)
            if project is not None:
                check_project_in_range(project, *project_range)

        jd_project = int(jd.group(1)) if jd.group(1) else None
        if jd_project != project:
            raise MismatchError("Project numbers do not match")
        if int(jd.group(2)) != category:
            raise MismatchError("Category numbers do not match")
        check_category_in_area(category, *area)

        return cls(area_label, category_label, category, int(jd.group(3)),
                   project=project, project_label=project_label,
                   label=jd.group(4), path=path)

    @property
    def number(self) -> str:
        """The bare dotted number, e.g. '101.22.02'."""
        return format_jd_id(self.category, self.id, self.project)

    @property
    def area(self) -> str:
        first, last = area_bounds(self.category)
        return f"{first:02d}-{last:02d}{self.area_label}"

    @property
    def relative_path(self) -> PurePosixPath:
        """Where this number is filed relative to the system root."""
        parts = []
        if self.project is not None and self.project_label is not None:
            parts.append(f"{self.project:03d}{self.project_label}")
        parts.append(self.area)
        parts.append(f"{self.category:02d}{self.category_label}")
        parts.append(f"{self.number}{self.label}")
        return PurePosixPath(*parts)

    def _key(self):
        return (self.project is not None, self.project or 0, self.category, self.id)

    def __eq__(self, other):
        if not isinstance(other, JDNumber):
            return NotImplemented
        return (self.project, self.category, self.id) == (other.project, other.category, other.id)

    def __lt__(self, other):
        if not isinstance(other, JDNumber):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self):
        return hash((self.project, self.category, self.id))

    def __str__(self):
        return f"{self.number}{self.label}"

    def __repr__(self):
        return f"JDNumber({str(self)!r}, path={str(self.path)!r})"

    def copy(self) -> "JDNumber":
        return copy.copy(self)

    @staticmethod
    def check_exactly_equal(a: "JDNumber", b: "JDNumber") -> bool:
        """Compare every field, labels and path included."""
        return a.to_dict() == b.to_dict()

    def to_dict(self):
        return {
            "project": self.project,
            "project_label": self.project_label,
            "category": self.category,
            "id": self.id,
            "label": self.label,
            "area_label": self.area_label,
            "category_label": self.category_label,
            "path": self.path.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "JDNumber":
        return cls(
            data["area_label"],
            data["category_label"],
            data["category"],
            data["id"],
            project=data.get("project"),
            project_label=data.get("project_label"),
            label=data.get("label", ""),
            path=Location.from_dict(data["path"]),
        )
