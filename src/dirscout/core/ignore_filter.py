"""
IgnoreFilter module for dirscout.

Wraps an ordered list of gitignore-style rules and answers whether a
relative path is ignored. Supports:
- Default directory names expanded to "this directory at any depth"
- Rules loaded from a project ignore file (e.g. .gitignore)
- Pattern precedence (later patterns override earlier ones)
- Negation patterns (!)
- Directory-only patterns (trailing /)
"""

import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Iterable

import pathspec

logger = logging.getLogger(__name__)


class IgnoreMatchMode(str, Enum):
    """How a crawled entry is turned into the path tested against ignore rules."""

    # The entry's own name, relative to its immediate parent directory
    SEGMENT = "segment"
    # The entry's path relative to the scan root
    ROOT = "root"


def expand_directory_pattern(name: str) -> str:
    """
    Expand a bare directory name into a rule matching that directory at any depth.

    Examples:
        node_modules       -> **/node_modules/
        target/dependency  -> **/target/dependency/
    """
    name = name.strip().strip("/")
    return f"**/{name}/"


def read_ignore_file(ignore_path: Path) -> list[str]:
    """
    Read rules from an ignore file, one pattern per line.

    Blank lines and comments are skipped. Read errors are logged and
    produce an empty list.

    Args:
        ignore_path: Path to the ignore file

    Returns:
        Patterns in file order
    """
    try:
        content = ignore_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug(f"Ignore file not found: {ignore_path}")
        return []
    except UnicodeDecodeError as e:
        logger.warning(f"Invalid UTF-8 encoding in {ignore_path}: {e}")
        return []
    except PermissionError as e:
        logger.warning(f"Permission denied reading {ignore_path}: {e}")
        return []
    except OSError as e:
        logger.warning(f"Error reading {ignore_path}: {e}")
        return []

    patterns = []
    for line in content.splitlines():
        # Leading spaces and an escaped trailing space belong to the pattern
        if not line.strip() or line.startswith("#"):
            continue
        patterns.append(line)

    logger.debug(f"Loaded {len(patterns)} patterns from {ignore_path}")
    return patterns


class IgnoreFilter:
    """
    Ordered set of gitignore-style rules with last-match-wins precedence.

    Paths passed to ignores() are relative; which base they are relative to
    is decided by the caller (see IgnoreMatchMode). Directories are matched
    with a trailing slash so directory-only rules apply to them.
    """

    def __init__(self, patterns: Iterable[str] = (), case_sensitive: bool | None = None):
        """
        Initialize the IgnoreFilter.

        Args:
            patterns: Gitignore-style patterns in precedence order
            case_sensitive: Override case sensitivity (None = auto-detect from platform)
        """
        if case_sensitive is None:
            # Windows is case-insensitive, POSIX is case-sensitive
            self._case_sensitive = sys.platform != "win32"
        else:
            self._case_sensitive = case_sensitive

        self._patterns: list[str] = []
        self._spec: pathspec.GitIgnoreSpec | None = None
        self.add(patterns)

    @classmethod
    def from_defaults(
        cls,
        default_dirs: Iterable[str],
        ignore_file: Path | None = None,
        case_sensitive: bool | None = None,
    ) -> "IgnoreFilter":
        """
        Build a filter from default directory names plus an optional ignore file.

        Default directories come first so that rules from the ignore file can
        re-include them with negation.

        Args:
            default_dirs: Directory names to ignore at any depth
            ignore_file: Optional project ignore file whose rules are appended
            case_sensitive: Override case sensitivity

        Returns:
            IgnoreFilter instance
        """
        patterns = [expand_directory_pattern(d) for d in default_dirs if d.strip()]
        ignore_filter = cls(patterns, case_sensitive=case_sensitive)

        if ignore_file is not None:
            try:
                is_file = ignore_file.is_file()
            except OSError as e:
                logger.warning(f"Cannot access {ignore_file}: {e}")
                is_file = False
            if is_file:
                ignore_filter.add(read_ignore_file(ignore_file))

        return ignore_filter

    def add(self, patterns: Iterable[str]) -> "IgnoreFilter":
        """
        Append patterns after the existing ones.

        Returns:
            Self for method chaining
        """
        added = []
        for pattern in patterns:
            if not pattern.strip() or pattern.lstrip().startswith("#"):
                continue
            try:
                pathspec.GitIgnoreSpec.from_lines([pattern])
            except ValueError as e:
                logger.warning(f"Malformed ignore pattern '{pattern}': {e}")
                continue
            added.append(pattern)

        if added:
            self._patterns.extend(added)
            self._spec = None
        return self

    @property
    def patterns(self) -> list[str]:
        """Return a copy of the loaded patterns."""
        return list(self._patterns)

    @property
    def pattern_count(self) -> int:
        """Return the number of loaded patterns."""
        return len(self._patterns)

    def _compiled(self) -> pathspec.GitIgnoreSpec:
        if self._spec is None:
            lines = self._patterns
            if not self._case_sensitive:
                lines = [p.lower() for p in lines]
            self._spec = pathspec.GitIgnoreSpec.from_lines(lines)
        return self._spec

    def ignores(self, relative_path: str, is_dir: bool = False) -> bool:
        """
        Check if a relative path is ignored.

        Args:
            relative_path: Path relative to the matching base, any separator style
            is_dir: True if the path is a directory

        Returns:
            True if the last matching rule excludes the path
        """
        if not self._patterns:
            return False

        candidate = relative_path.replace("\\", "/").lstrip("/")
        if candidate in ("", "."):
            return False

        if is_dir and not candidate.endswith("/"):
            candidate += "/"
        elif not is_dir:
            candidate = candidate.rstrip("/")

        if not self._case_sensitive:
            candidate = candidate.lower()

        return self._compiled().match_file(candidate)
