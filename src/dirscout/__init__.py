"""
dirscout: bounded, fast directory listing.
"""

from dirscout.core.listing import list_files, list_files_sync

__version__ = "0.1.0"

__all__ = ["list_files", "list_files_sync", "__version__"]
