"""
Crawler implementation for bounded, level-by-level directory listing.
"""

import asyncio
import logging
import os
import stat
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Iterable

from dirscout.core.ignore_filter import IgnoreFilter, IgnoreMatchMode
from dirscout.core.path_utils import to_posix

from .cache import DirectoryTypeCache
from .models import CrawlState, ScanRequest, ScanResult

logger = logging.getLogger(__name__)


def _read_directory(directory: str, follow_symlinks: bool) -> list[tuple[str, bool | None]]:
    """
    List the immediate children of a directory.

    Returns absolute paths paired with the entry type when scandir already
    knows it (None when it could not be determined).
    """
    children: list[tuple[str, bool | None]] = []
    with os.scandir(directory) as entries:
        for entry in entries:
            try:
                is_dir: bool | None = entry.is_dir(follow_symlinks=follow_symlinks)
            except OSError:
                is_dir = None
            children.append((entry.path, is_dir))
    return children


def _stat_is_dir(path: str, follow_symlinks: bool) -> bool:
    """Stat a path; anything that cannot be stat'd counts as a file."""
    try:
        st = os.stat(path) if follow_symlinks else os.lstat(path)
    except OSError as e:
        logger.debug(f"Cannot stat {path}, treating as file: {e}")
        return False
    return stat.S_ISDIR(st.st_mode)


class Crawler:
    """
    Breadth-first, depth-limited, concurrency-bounded directory crawler.

    Each level is read with a depth-1 listing and every child is processed
    concurrently. The walk shares one result set, one directory type cache
    and one cancellation flag across all branches, and stops admitting
    entries once the limit is reached or the timeout fires.

    A Crawler performs a single scan.
    """

    def __init__(
        self,
        ignore_filter: IgnoreFilter | None = None,
        cache: DirectoryTypeCache | None = None,
    ):
        """
        Initialize the Crawler.

        Args:
            ignore_filter: Filter applied to entries in recursive mode.
                          If None, one is built from the request's ignore_rules.
            cache: Directory type cache to use. If None, a private one is created.
        """
        self._ignore_filter = ignore_filter
        self._cache = cache if cache is not None else DirectoryTypeCache()
        self._results: dict[str, None] = {}
        self._state = CrawlState()
        self._request: ScanRequest | None = None
        self._io_gate: asyncio.Semaphore | None = None
        self._executor: ThreadPoolExecutor | None = None

    @property
    def results(self) -> list[str]:
        """Snapshot of the paths collected so far."""
        return list(self._results)

    @property
    def cancelled(self) -> bool:
        return self._state.cancelled

    @property
    def cache(self) -> DirectoryTypeCache:
        return self._cache

    def cancel(self) -> None:
        """Stop scheduling new work; the running scan returns what it has collected."""
        self._state.cancel()

    async def scan(self, request: ScanRequest) -> ScanResult:
        """
        Walk request.root_path and collect normalized entry paths.

        Filesystem errors and the timeout never propagate; the result holds
        whatever was collected.

        Args:
            request: Scan parameters

        Returns:
            ScanResult with paths, limit_reached and timed_out
        """
        if self._request is not None:
            raise RuntimeError("Crawler instances perform a single scan")

        self._request = request
        self._io_gate = asyncio.Semaphore(request.max_concurrency)
        if self._ignore_filter is None:
            self._ignore_filter = IgnoreFilter(request.ignore_rules)

        # Abandoned syscalls must not hold up shutdown of the loop's default executor
        self._executor = ThreadPoolExecutor(
            max_workers=request.max_concurrency, thread_name_prefix="dirscout-io"
        )
        try:
            await asyncio.wait_for(self._crawl_root(), timeout=request.timeout_ms / 1000.0)
        except asyncio.TimeoutError:
            self._state.cancel(timed_out=True)
            logger.debug(
                f"File scanning of {request.root_path} timed out after {request.timeout_ms}ms, "
                f"returning {len(self._results)} entries"
            )
        finally:
            self._executor.shutdown(wait=False, cancel_futures=True)

        paths = list(self._results)
        limit_reached = len(paths) >= request.limit
        logger.debug(
            f"Scanned {request.root_path}: {len(paths)} entries "
            f"(limit_reached={limit_reached}, timed_out={self._state.timed_out})"
        )
        return ScanResult(paths=paths, limit_reached=limit_reached, timed_out=self._state.timed_out)

    async def _crawl_root(self) -> None:
        root = self._req.root_path
        try:
            children = await self._list_children(root)
            await self._crawl_chunk(children)
        except Exception as e:
            # Whatever was collected before the failure is kept
            logger.warning(f"Error during file scanning of {root}: {e}")

    @property
    def _req(self) -> ScanRequest:
        assert self._request is not None
        return self._request

    async def _run_io(self, func: Callable[..., Any], *args: Any) -> Any:
        """Run a blocking filesystem call in the scan's thread pool, bounded by the I/O gate."""
        assert self._io_gate is not None and self._executor is not None
        async with self._io_gate:
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(self._executor, func, *args)

    async def _list_children(self, directory: str) -> list[str]:
        """Depth-1 listing; entry types reported by scandir are stored in the cache."""
        children = await self._run_io(_read_directory, directory, self._req.follow_symlinks)
        paths = []
        for path, is_dir in children:
            if is_dir is not None and path not in self._cache:
                self._cache.set(path, is_dir)
            paths.append(path)
        return paths

    async def _is_directory(self, path: str) -> bool:
        cached = self._cache.get(path)
        if cached is not None:
            return cached
        is_dir = await self._run_io(_stat_is_dir, path, self._req.follow_symlinks)
        self._cache.set(path, is_dir)
        return is_dir

    def _limit_reached(self) -> bool:
        return len(self._results) >= self._req.limit

    def _relative_path(self, path: str) -> str:
        if self._req.match_mode is IgnoreMatchMode.ROOT:
            return os.path.relpath(path, self._req.root_path)
        return os.path.basename(path)

    async def _crawl_chunk(self, paths: Iterable[str]) -> None:
        await asyncio.gather(*(self._crawl_entry(path) for path in paths))

    async def _crawl_entry(self, path: str) -> None:
        if self._state.cancelled:
            return

        if not await self._process_entry(path):
            return

        if not self._req.recursive or not await self._is_directory(path):
            return

        if self._state.cancelled or self._limit_reached():
            return

        try:
            children = await self._list_children(path)
        except OSError as e:
            logger.warning(f"Error scanning directory {path}: {e}")
            return

        await self._crawl_chunk(children)

    async def _process_entry(self, path: str) -> bool:
        """Admit one entry into the result set. Returns False if it was rejected."""
        if self._limit_reached():
            return False

        is_dir = await self._is_directory(path)

        assert self._ignore_filter is not None
        if self._req.recursive and self._ignore_filter.ignores(self._relative_path(path), is_dir):
            logger.debug(f"Ignoring: {path}")
            return False

        normalized = to_posix(path)
        if is_dir:
            normalized += "/"

        # Siblings may have filled the set while the stat was pending
        if self._limit_reached() or self._state.cancelled:
            return False

        self._results[normalized] = None
        return True
