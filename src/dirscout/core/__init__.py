"""
Core module for dirscout.

Contains the directory crawler, ignore filter, configuration and the
list_files entry point.
"""

from dirscout.core.config import (
    CrawlerConfig,
    DirscoutConfig,
    ListingConfig,
    LoggingConfig,
    load_config,
)
from dirscout.core.crawler import (
    CrawlState,
    Crawler,
    DirectoryTypeCache,
    ScanRequest,
    ScanResult,
)
from dirscout.core.ignore_filter import IgnoreFilter, IgnoreMatchMode
from dirscout.core.listing import list_files, list_files_sync
from dirscout.core.path_utils import are_paths_equal

__all__ = [
    # Config
    "DirscoutConfig",
    "CrawlerConfig",
    "ListingConfig",
    "LoggingConfig",
    "load_config",
    # Crawler
    "Crawler",
    "CrawlState",
    "DirectoryTypeCache",
    "ScanRequest",
    "ScanResult",
    # Ignore rules
    "IgnoreFilter",
    "IgnoreMatchMode",
    # Entry points
    "list_files",
    "list_files_sync",
    "are_paths_equal",
]
