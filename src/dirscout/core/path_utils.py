"""
Path utilities for dirscout.

Provides path equality, filesystem-root and home-directory detection,
and separator normalization used by the listing entry point and crawler.
"""

import os
import sys
from pathlib import Path, PurePath
from typing import Optional


def _is_case_insensitive_platform() -> bool:
    return sys.platform == "win32"


def normalize_path(path: str | PurePath) -> str:
    """
    Normalize a path for comparison.

    Resolves to an absolute, normalized form and strips trailing separators,
    except for a bare filesystem root which keeps its separator.

    Args:
        path: Path to normalize.

    Returns:
        Normalized path string.
    """
    normalized = os.path.normpath(os.path.abspath(os.fspath(path)))
    anchor = PurePath(normalized).anchor
    if normalized != anchor:
        normalized = normalized.rstrip("/\\")
    return normalized


def are_paths_equal(path1: Optional[str | PurePath], path2: Optional[str | PurePath]) -> bool:
    """
    Check whether two paths refer to the same location lexically.

    Comparison is case-insensitive on Windows and case-sensitive elsewhere.
    No filesystem access is performed.

    Args:
        path1: First path (may be None).
        path2: Second path (may be None).

    Returns:
        True if both are None or both normalize to the same path.
    """
    if path1 is None or path2 is None:
        return path1 is None and path2 is None

    left = normalize_path(path1)
    right = normalize_path(path2)

    if _is_case_insensitive_platform():
        return left.lower() == right.lower()
    return left == right


def get_filesystem_root(path: str | PurePath) -> str:
    """Return the filesystem root for a path: '/' on POSIX, the drive anchor on Windows."""
    if sys.platform == "win32":
        return PurePath(os.path.abspath(os.fspath(path))).anchor
    return "/"


def is_filesystem_root(path: str | PurePath) -> bool:
    """Check if a path is exactly the filesystem root."""
    return are_paths_equal(path, get_filesystem_root(path))


def is_home_directory(path: str | PurePath) -> bool:
    """Check if a path is exactly the current user's home directory."""
    return are_paths_equal(path, Path.home())


def to_posix(path: str) -> str:
    """Replace native path separators with forward slashes."""
    if os.sep != "/":
        path = path.replace(os.sep, "/")
    if os.altsep and os.altsep != "/":
        path = path.replace(os.altsep, "/")
    return path
