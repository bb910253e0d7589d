# tspw/compiler_path.py
"""
Compiler location.

Pure functions over explicit inputs (install dir, user data dir, and an
`is_file` predicate) so the default search can be tested without touching
the real environment.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from .config import COMPILER_NAME, DEPENDENCY_DIRNAME
from .exceptions import InvalidPathError, NoCompilerFoundError

IsFile = Callable[[Path], bool]

# <node_modules>/typescript/bin/tsc
_PACKAGE_RELPATH = Path("typescript") / "bin" / COMPILER_NAME


def _is_file(p: Path) -> bool:
    return p.is_file()


def find_local_compiler(install_dir: Path, *, is_file: IsFile = _is_file) -> Optional[Path]:
    """Nearest ancestor `node_modules` of install_dir that holds typescript/bin/tsc."""
    for ancestor in (install_dir, *install_dir.parents):
        if ancestor.name != DEPENDENCY_DIRNAME:
            continue
        candidate = ancestor / _PACKAGE_RELPATH
        if is_file(candidate):
            return candidate
    return None


def global_compiler_path(user_data_dir: Path) -> Path:
    return user_data_dir / "npm" / DEPENDENCY_DIRNAME / _PACKAGE_RELPATH


def default_compiler_path(
    install_dir: Path,
    user_data_dir: Path,
    *,
    is_file: IsFile = _is_file,
) -> Path:
    local = find_local_compiler(install_dir, is_file=is_file)
    if local is not None:
        return local

    fallback = global_compiler_path(user_data_dir)
    if not is_file(fallback):
        raise NoCompilerFoundError("No tsc installation found. Try npm install -g typescript")
    return fallback


def validate_compiler(path: Path) -> Path:
    """An explicit compiler must be an existing file named `tsc`."""
    p = path.resolve()
    if not p.exists() or p.is_dir() or p.name != COMPILER_NAME:
        raise InvalidPathError(f"tsc is not valid: {p}")
    return p
