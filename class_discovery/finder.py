"""Source file enumeration for class discovery."""

import fnmatch
import os
from collections.abc import Iterable, Iterator
from pathlib import Path

DEFAULT_PATTERN = "*.py"
DEFAULT_EXCLUDES = ("__main__.py", "conftest.py", "setup.py")


def _is_hidden(path: Path, root: Path) -> bool:
    return any(part.startswith(".") for part in path.relative_to(root).parts)


class FileFinder:
    """Enumerate source files below a set of directories.

    Handles:
    - Flat scans of the configured directories (``recursive(False)``)
    - Recursive scans of all subdirectories (the default)

    Automatically skips:
    - Files and directories starting with a dot
    - Files matching an exclude pattern (``__main__.py``, ``conftest.py``
      and ``setup.py`` by default)

    Files are yielded as resolved absolute paths, sorted within each
    directory, directories in the order they were added.

    Examples:
        >>> finder = FileFinder().in_("src").recursive(False)
        >>> for path in finder:
        ...     print(path.name)
    """

    def __init__(self, pattern: str = DEFAULT_PATTERN, exclude: Iterable[str] = DEFAULT_EXCLUDES):
        self._directories: list[Path] = []
        self._pattern = pattern
        self._exclude = list(exclude)
        self._recursive = True

    def in_(self, *directories: str | os.PathLike[str]) -> "FileFinder":
        for directory in directories:
            path = Path(directory).resolve()
            if path not in self._directories:
                self._directories.append(path)
        return self

    def name(self, pattern: str) -> "FileFinder":
        self._pattern = pattern
        return self

    def exclude(self, *patterns: str) -> "FileFinder":
        self._exclude.extend(patterns)
        return self

    def recursive(self, recursive: bool = True) -> "FileFinder":
        self._recursive = recursive
        return self

    @property
    def pattern(self) -> str:
        return self._pattern

    @property
    def is_recursive(self) -> bool:
        return self._recursive

    def directories(self) -> list[Path]:
        return list(self._directories)

    def __iter__(self) -> Iterator[Path]:
        seen: set[Path] = set()
        for directory in self._directories:
            for path in self._scan(directory):
                resolved = path.resolve()
                if resolved in seen:
                    continue
                seen.add(resolved)
                yield resolved

    def _scan(self, directory: Path) -> Iterator[Path]:
        if self._recursive:
            candidates = directory.rglob(self._pattern)
        else:
            candidates = directory.glob(self._pattern)

        for path in sorted(candidates):
            if not path.is_file() or _is_hidden(path, directory):
                continue
            if any(fnmatch.fnmatch(path.name, pattern) for pattern in self._exclude):
                continue
            yield path
