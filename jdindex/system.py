import bisect
import logging
from pathlib import Path
from typing import Iterator, Optional

from jdindex.exceptions import DuplicateError, MissingFieldError, NotFoundError
from jdindex.grammar import parse_system
from jdindex.models import JDNumber, PathLocation
from jdindex.util import parse_jd_input

logger = logging.getLogger(__name__)


class JDSystem:
    """
    An index of a Johnny.Decimal filing system: its root path and every JD
    number in it, kept sorted and free of duplicates.
    """

    def __init__(self, path=""):
        self.path = str(path)
        self.ids: list[JDNumber] = []

    def __iter__(self) -> Iterator[JDNumber]:
        return iter(self.ids)

    def __len__(self):
        return len(self.ids)

    def __eq__(self, other):
        if not isinstance(other, JDSystem):
            return NotImplemented
        return self.path == other.path and self.ids == other.ids

    def _find(self, number: JDNumber) -> Optional[int]:
        pos = bisect.bisect_left(self.ids, number)
        if pos < len(self.ids) and self.ids[pos] == number:
            return pos
        return None

    def add_id(self, number: JDNumber):
        """Insert a JD number, keeping the index sorted."""
        pos = bisect.bisect_left(self.ids, number)
        if pos < len(self.ids) and self.ids[pos] == number:
            raise DuplicateError()
        self.ids.insert(pos, number)

    def filter_ids(self, project: Optional[int], category: Optional[int] = None,
                   id_: Optional[int] = None) -> list[JDNumber]:
        """JD numbers in a project, optionally narrowed to a category and id."""
        return [
            n for n in self.ids
            if n.project == project
            and (category is None or n.category == category)
            and (id_ is None or n.id == id_)
        ]

    def add_id_from_str(self, partial: str, label: str) -> JDNumber:
        """
        Add the next JD number in a category.

        `partial` is 'AC' or 'PRO.AC'. The new number takes the labels of its
        siblings and is filed under the system root.
        """
        project, category, _ = parse_jd_input(partial)
        if category is None:
            raise MissingFieldError("Could not find category.")

        siblings = sorted(self.filter_ids(project, category))
        if not siblings:
            raise NotFoundError("Could not find category.")
        last = siblings[-1]

        number = JDNumber(
            last.area_label,
            last.category_label,
            last.category,
            last.id + 1,
            project=last.project,
            project_label=last.project_label,
            label=label,
        )
        number.path = PathLocation(Path(self.path) / number.relative_path)
        self.add_id(number)
        logger.debug("Added %s at %s", number, number.path)
        return number

    def get_id(self, number: JDNumber) -> JDNumber:
        """Look up the stored JD number equal to `number`."""
        pos = self._find(number)
        if pos is None:
            raise NotFoundError("Could not find JD")
        return self.ids[pos].copy()

    def select(self, partial: Optional[str] = None) -> list[JDNumber]:
        """The JD numbers a full or partial number refers to; all of them if none."""
        project, category, id_ = parse_jd_input(partial)
        if category is not None and id_ is not None:
            key = JDNumber("", "", category, id_, project=project,
                           project_label="" if project is not None else None)
            pos = self._find(key)
            if pos is None:
                raise NotFoundError("Cannot find JD number.")
            return [self.ids[pos]]
        if category is not None:
            return self.filter_ids(project, category)
        if project is not None:
            return self.filter_ids(project)
        return list(self.ids)

    def display(self, partial: Optional[str] = None) -> str:
        """
        Render part or all of the system as an indented tree.

        `partial` can be PRO.AC.ID, AC.ID, PRO.AC, AC or PRO. If it is None,
        empty or anything else, the whole system is shown.
        """
        lines = []
        project_label = None
        area_label = None
        category_label = None
        for n in self.select(partial):
            if n.project is not None and n.project_label != project_label:
                project_label = n.project_label
                lines.append(f"{n.project:03d}{n.project_label}")
            if n.area_label != area_label:
                area_label = n.area_label
                lines.append(f"  {n.area}")
            if n.category_label != category_label:
                category_label = n.category_label
                lines.append(f"    {n.category:02d}{n.category_label}")
            lines.append(f"      {n}")
        return "".join(line + "\n" for line in lines)

    def __str__(self):
        return self.display()

    @classmethod
    def parse(cls, text: str) -> "JDSystem":
        """Build a system from a textual outline (see jdindex.grammar)."""
        system = cls()
        for number in parse_system(text):
            system.add_id(number)
        return system

    def to_dict(self):
        """Machine-readable representation for the index file."""
        return {
            "path": self.path,
            "ids": [n.to_dict() for n in self.ids],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "JDSystem":
        system = cls(data.get("path", ""))
        for item in data.get("ids", []):
            system.add_id(JDNumber.from_dict(item))
        return system
