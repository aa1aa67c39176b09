"""
Crawler module for dirscout.

Provides bounded, concurrent, level-by-level directory enumeration with
ignore-rule filtering, a result limit and a wall-clock timeout.
"""

from .cache import DirectoryTypeCache
from .crawler import Crawler
from .models import DEFAULT_TIMEOUT_MS, CrawlState, ScanRequest, ScanResult

__all__ = [
    "Crawler",
    "CrawlState",
    "DirectoryTypeCache",
    "ScanRequest",
    "ScanResult",
    "DEFAULT_TIMEOUT_MS",
]
