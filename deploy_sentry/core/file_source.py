# deploy_sentry/core/file_source.py
"""Local file discovery"""

import os
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Pattern, Union

from ..api.exceptions import DiscoveryError
from ..constants import DEFAULT_FILE_PATTERN
from ..utils.async_utils import sync_to_async


class FileSource(ABC):
    """Abstract source of files to upload"""

    @property
    @abstractmethod
    def root(self) -> Path:
        """Directory the discovered paths are relative to"""
        pass

    @abstractmethod
    async def discover(self) -> List[str]:
        """
        Discover files

        Returns:
            Sorted POSIX-style paths relative to ``root``

        Raises:
            DiscoveryError: If the directory cannot be traversed
        """
        pass

    def resolve(self, relative_path: str) -> Path:
        """Absolute path of a discovered file"""
        return self.root / relative_path


def _expand_braces(pattern: str) -> List[str]:
    """Expand the first ``{a,b}`` group recursively"""
    match = re.search(r"\{([^{}]*)\}", pattern)
    if not match:
        return [pattern]

    expanded = []
    for option in match.group(1).split(","):
        expanded.extend(
            _expand_braces(pattern[:match.start()] + option + pattern[match.end():])
        )
    return expanded


def _translate(pattern: str) -> str:
    """Translate one brace-free glob into a regular expression"""
    i, n = 0, len(pattern)
    out = []
    while i < n:
        if pattern.startswith("**/", i):
            out.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            out.append(".*")
            i += 2
        elif pattern[i] == "*":
            out.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            out.append("[^/]")
            i += 1
        else:
            out.append(re.escape(pattern[i]))
            i += 1
    return "".join(out)


def compile_pattern(pattern: str) -> Pattern:
    """
    Compile a glob pattern into a regex matching relative POSIX paths

    Supports ``*``, ``?``, ``**`` globstar (``**/`` also matches zero
    directories) and ``{a,b}`` alternatives. A leading ``/`` is ignored so
    patterns written relative to the dist directory work unchanged.

    Args:
        pattern: Glob pattern

    Returns:
        Compiled regular expression
    """
    pattern = pattern.lstrip("/")
    if not pattern:
        raise ValueError("Empty file pattern")

    alternatives = [_translate(p) for p in _expand_braces(pattern)]
    return re.compile("^(?:" + "|".join(alternatives) + ")$")


class GlobFileSource(FileSource):
    """Discover files below a directory by glob pattern"""

    def __init__(self, root: Union[str, Path], pattern: str = DEFAULT_FILE_PATTERN):
        self._root = Path(root)
        self.pattern = pattern
        self._regex = compile_pattern(pattern)

    @property
    def root(self) -> Path:
        return self._root

    def matches(self, relative_path: str) -> bool:
        """Check a relative POSIX path against the pattern"""
        return self._regex.match(relative_path) is not None

    def discover_sync(self) -> List[str]:
        """Blocking discovery, see ``discover``"""
        if not self._root.is_dir():
            raise DiscoveryError(f"Not a directory: {self._root}", path=str(self._root))

        def on_error(error: OSError):
            raise DiscoveryError(
                f"Failed to scan {error.filename}: {error.strerror or error}",
                path=error.filename
            ) from error

        found = []
        # Symlinked directories are not entered so link cycles cannot recurse
        for dirpath, _dirnames, filenames in os.walk(self._root, onerror=on_error, followlinks=False):
            for filename in filenames:
                relative = Path(dirpath, filename).relative_to(self._root).as_posix()
                if self.matches(relative):
                    found.append(relative)

        return sorted(found)

    async def discover(self) -> List[str]:
        return await sync_to_async(self.discover_sync)()
