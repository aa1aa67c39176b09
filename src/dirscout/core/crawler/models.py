"""
Data models for the directory crawler.
"""

from dataclasses import dataclass, field
from typing import Iterator

from dirscout.core.ignore_filter import IgnoreMatchMode

# Fixed timeout applied by list_files unless configuration overrides it
DEFAULT_TIMEOUT_MS = 10_000


@dataclass(frozen=True)
class ScanRequest:
    """
    Parameters of one scan. Immutable for the duration of the scan.

    Attributes:
        root_path: Absolute path of the directory to scan
        recursive: Descend into subdirectories
        limit: Maximum number of result entries
        timeout_ms: Wall-clock budget for the walk in milliseconds
        ignore_rules: Gitignore-style patterns in precedence order
        max_concurrency: Maximum number of filesystem calls in flight
        follow_symlinks: Treat symlinks to directories as directories
        match_mode: Which relative path ignore rules are evaluated against
    """

    root_path: str
    recursive: bool
    limit: int
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    ignore_rules: tuple[str, ...] = ()
    max_concurrency: int = 64
    follow_symlinks: bool = True
    match_mode: IgnoreMatchMode = IgnoreMatchMode.SEGMENT

    def __post_init__(self) -> None:
        if self.limit <= 0:
            raise ValueError(f"limit must be positive, got {self.limit}")
        if self.timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be positive, got {self.timeout_ms}")
        if self.max_concurrency <= 0:
            raise ValueError(f"max_concurrency must be positive, got {self.max_concurrency}")
        # Accept any iterable of rules and plain strings for the mode
        object.__setattr__(self, "ignore_rules", tuple(self.ignore_rules))
        object.__setattr__(self, "match_mode", IgnoreMatchMode(self.match_mode))


@dataclass
class ScanResult:
    """
    Outcome of one scan.

    Unpacks as ``(paths, limit_reached)``.

    Attributes:
        paths: Normalized paths; directories end with '/'
        limit_reached: True if the number of paths reached the limit
        timed_out: True if the walk was cut short by the timeout
    """

    paths: list[str] = field(default_factory=list)
    limit_reached: bool = False
    timed_out: bool = False

    def __iter__(self) -> Iterator:
        yield self.paths
        yield self.limit_reached


class CrawlState:
    """Cancellation flag shared by every concurrent branch of one scan."""

    def __init__(self) -> None:
        self._cancelled = False
        self._timed_out = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def timed_out(self) -> bool:
        return self._timed_out

    def cancel(self, timed_out: bool = False) -> None:
        """Set the flag. Once set it stays set."""
        self._cancelled = True
        if timed_out:
            self._timed_out = True
