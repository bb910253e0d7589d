# tspw/locator.py
from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union

import structlog

from .config import CONFIG_FILENAME
from .exceptions import InvalidPathError, NotFoundError

logger = structlog.get_logger()


def find_projects(directory: Path, results: Optional[List[Path]] = None) -> List[Path]:
    """
    Depth-first walk of `directory` collecting every tsconfig.json.

    A config file does not prune the walk: child directories of a project
    directory are still examined. Entries are visited in name order so an
    unchanged tree always yields the same list. Symlinked directories are
    followed without cycle protection.
    """
    if results is None:
        results = []

    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as e:
        logger.warning("directory_unreadable", path=str(directory), error=str(e))
        return results

    child_dirs: List[Path] = []
    for entry in entries:
        if entry.name == CONFIG_FILENAME and entry.is_file():
            results.append(entry)
            continue
        if entry.is_dir():
            child_dirs.append(entry)

    for child in child_dirs:
        find_projects(child, results)
    return results


def resolve_path(path: Union[str, Path], cwd: Optional[Path] = None) -> List[Path]:
    """
    Resolve a user-supplied directory or tsconfig.json into project paths.
    Relative paths are taken against `cwd` (defaults to the process cwd).
    """
    p = Path(path)
    if not p.is_absolute():
        p = (cwd or Path.cwd()) / p
    p = p.resolve()

    if not p.exists():
        raise NotFoundError(f"path doesn't exist: {p}")

    if p.is_dir():
        projects = find_projects(p)
        logger.debug("projects_discovered", root=str(p), count=len(projects))
        return projects

    if p.name != CONFIG_FILENAME:
        raise InvalidPathError(f"not a {CONFIG_FILENAME} file or a directory: {p}")
    return [p]
