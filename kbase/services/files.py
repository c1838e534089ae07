"""Recursive listing of the content root."""

import logging
from pathlib import Path
from typing import List, NamedTuple

logger = logging.getLogger(__name__)


class Entry(NamedTuple):
    path: Path
    is_dir: bool
    is_file: bool
    mtime: float


def list_entries(root: Path, pattern: str = "**/*") -> List[Entry]:
    """Return every entry under *root* matching *pattern*, in lexical path order.

    Hidden entries (any path component starting with ``.``) are skipped.
    A missing root yields an empty list.
    """
    if not root.is_dir():
        logger.warning("Content root %s does not exist", root)
        return []

    entries: List[Entry] = []
    for path in sorted(root.glob(pattern), key=lambda p: p.relative_to(root).parts):
        relative = path.relative_to(root)
        if any(part.startswith(".") for part in relative.parts):
            continue
        try:
            stat = path.lstat()
        except OSError as exc:
            logger.warning("Skipping unreadable entry %s: %s", path, exc)
            continue
        entries.append(Entry(path, path.is_dir(), path.is_file(), stat.st_mtime))
    return entries


def relative_slug_path(path: Path, root: Path) -> str:
    """Return *path* relative to *root* with forward slashes."""
    return path.relative_to(root).as_posix()
