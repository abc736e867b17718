import json
import logging
import os
from pathlib import Path
from typing import Callable, Optional

from jdindex.config import DEFAULTS
from jdindex.exceptions import DuplicateError, IndexFileError, JDError
from jdindex.models import JDNumber, PathLocation
from jdindex.system import JDSystem
from jdindex.util import JD_RE, is_hidden, walk_up

logger = logging.getLogger(__name__)

DEFAULT_INDEX_FILENAME = DEFAULTS["index_filename"]


def walk_item_dirs(root: Path):
    """
    Yield every folder under root named like a JD number, skipping
    dot-prefixed folders. JD folders are leaves: their contents are not walked.
    """
    for dirpath, dirnames, _ in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not is_hidden(d))
        for name in list(dirnames):
            if JD_RE.fullmatch(name):
                dirnames.remove(name)
                yield Path(dirpath) / name


def index_directory(root: Path,
                    on_add: Optional[Callable[[JDNumber], None]] = None) -> JDSystem:
    """
    Build an index of every JD folder under root.

    Only the part of each path below root is matched. Folders that are not
    JD numbers are skipped, as are later folders that repeat a number
    already seen.
    """
    root = Path(root).resolve()
    if not root.is_dir():
        raise IndexFileError(root, f"The path {root} is not a directory.")
    system = JDSystem(root)
    for path in walk_item_dirs(root):
        try:
            number = JDNumber.from_path(path.relative_to(root))
        except JDError as e:
            logger.debug("Skipping %s: %s", path, e)
            continue
        number.path = PathLocation(path)
        try:
            system.add_id(number)
        except DuplicateError as e:
            logger.warning("%s %s (%s)", e.message, number, path)
            continue
        if on_add is not None:
            on_add(number)
    return system


def write_index(system: JDSystem, path: Path):
    try:
        Path(path).write_text(json.dumps(system.to_dict(), indent=2) + "\n")
    except OSError as e:
        raise IndexFileError(path, "Cannot write to file.") from e
    logger.debug("Wrote %d JD number(s) to %s", len(system), path)


def read_index(path: Path) -> JDSystem:
    try:
        data = json.loads(Path(path).read_text())
        return JDSystem.from_dict(data)
    except (OSError, ValueError, KeyError, TypeError, JDError) as e:
        raise IndexFileError(path, "Cannot read index file.") from e


def find_index(start_path: Path, filename: str = DEFAULT_INDEX_FILENAME) -> Path:
    """Find the index file in start_path or the nearest parent holding one."""
    for directory in walk_up(Path(start_path).resolve()):
        candidate = directory / filename
        if candidate.is_file():
            return candidate
    raise IndexFileError(start_path, "Not in a valid Johnny Decimal system")


def find_index_for_write(start_path: Path, filename: str = DEFAULT_INDEX_FILENAME) -> Path:
    try:
        return find_index(start_path, filename)
    except IndexFileError:
        raise IndexFileError(start_path, "Could not find index file to write to.") from None


def get_system(start_path: Path, filename: str = DEFAULT_INDEX_FILENAME) -> JDSystem:
    """Load the index of the JD system start_path is in."""
    return read_index(find_index(start_path, filename))
