"""
Entry point for listing the files of a directory.

Resolves the requested path, refuses to crawl the filesystem root or the
user's home directory, assembles ignore rules and runs the crawler.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Optional

from dirscout.core.config import DirscoutConfig, load_config
from dirscout.core.crawler import Crawler, DirectoryTypeCache, ScanRequest
from dirscout.core.ignore_filter import IgnoreFilter
from dirscout.core.path_utils import (
    get_filesystem_root,
    is_filesystem_root,
    is_home_directory,
)

logger = logging.getLogger(__name__)


def build_ignore_filter(
    root_path: Path, recursive: bool, config: DirscoutConfig
) -> IgnoreFilter:
    """
    Assemble the ignore rules for a scan.

    Default directory rules always come first. The project ignore file at the
    root is only consulted for recursive scans.
    """
    ignore_file = root_path / config.crawler.ignore_file if recursive else None
    return IgnoreFilter.from_defaults(config.crawler.default_ignore_dirs, ignore_file)


async def list_files(
    dir_path: str | os.PathLike,
    recursive: bool,
    limit: int,
    *,
    config: Optional[DirscoutConfig] = None,
    cache: Optional[DirectoryTypeCache] = None,
    timeout_ms: Optional[int] = None,
) -> tuple[list[str], bool]:
    """
    List the entries of a directory, bounded by a limit and a timeout.

    Scanning the filesystem root or the home directory returns that path
    alone without crawling; both are almost always a mistake.

    Args:
        dir_path: Directory to list (relative paths resolve against the cwd)
        recursive: Descend into subdirectories
        limit: Maximum number of entries to return
        config: Configuration; loaded from defaults and environment if None
        cache: Directory type cache to share across calls; a fresh one per call if None
        timeout_ms: Override of the configured timeout

    Returns:
        Tuple of (paths, limit_reached). Directory paths end with '/'.

    Raises:
        ValueError: If limit is not positive
    """
    if limit <= 0:
        raise ValueError(f"limit must be positive, got {limit}")

    absolute_path = os.path.abspath(os.fspath(dir_path))

    if is_filesystem_root(absolute_path):
        logger.debug(f"Refusing to crawl filesystem root: {absolute_path}")
        return [get_filesystem_root(absolute_path)], False

    if is_home_directory(absolute_path):
        logger.debug(f"Refusing to crawl home directory: {absolute_path}")
        return [str(Path.home())], False

    if config is None:
        config = load_config()
    crawler_config = config.crawler

    ignore_filter = build_ignore_filter(Path(absolute_path), recursive, config)
    if cache is None:
        cache = DirectoryTypeCache(max_entries=crawler_config.cache_max_entries)

    request = ScanRequest(
        root_path=absolute_path,
        recursive=recursive,
        limit=limit,
        timeout_ms=timeout_ms if timeout_ms is not None else crawler_config.timeout_ms,
        ignore_rules=tuple(ignore_filter.patterns),
        max_concurrency=crawler_config.max_concurrency,
        follow_symlinks=crawler_config.follow_symlinks,
        match_mode=crawler_config.match_mode,
    )

    crawler = Crawler(ignore_filter=ignore_filter, cache=cache)
    result = await crawler.scan(request)
    return result.paths, result.limit_reached


def list_files_sync(
    dir_path: str | os.PathLike,
    recursive: bool,
    limit: int,
    **kwargs,
) -> tuple[list[str], bool]:
    """Synchronous wrapper around list_files for callers without an event loop."""
    return asyncio.run(list_files(dir_path, recursive, limit, **kwargs))
