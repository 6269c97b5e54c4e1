#!/usr/bin/env python3
"""
Configuration for the Disk Usage Check Tool.

There is no configuration file: options come from the command line and are resolved
once at startup. Report limits live here as constants.
"""

from dataclasses import dataclass
from typing import Optional

DEFAULT_FILESYSTEM = "/"

BANNER_WIDTH = 60

# Largest Directories
DIRECTORY_MAX_DEPTH = 2
DIRECTORY_TOP = 10

# Largest Files
FILE_TOP = 20

# Open deleted files
DELETED_MIN_BYTES = 524288000
DELETED_TOP = 5

# Top inode consumers
INODE_MAX_DEPTH = 5
INODE_TOP = 20


def resolve_filesystem(value: Optional[str]) -> str:
    """Return the target path, falling back to the root filesystem."""
    if not value:
        return DEFAULT_FILESYSTEM
    return value


@dataclass(frozen=True)
class ReportOptions:
    """Resolved command line options."""

    filesystem: str = DEFAULT_FILESYSTEM
    inode: bool = False
    verbose: bool = False
