#!/usr/bin/env python3
"""
Mount table helpers: mount point resolution and backing device lookup.
"""

import os
import re
import logging
from collections import namedtuple
from typing import List, Optional

from ..exceptions import DiskCheckError

logger = logging.getLogger("diskcheck.modules.mounts")

MOUNTS_FILE = "/proc/self/mounts"

MountEntry = namedtuple("MountEntry", ["source", "target", "fstype"])

_OCTAL_ESCAPE = re.compile(r"\\([0-7]{3})")


def unescape_mount_field(field: str) -> str:
    """Decode the octal escapes (``\\040`` for space etc.) used in the mount table."""
    return _OCTAL_ESCAPE.sub(lambda match: chr(int(match.group(1), 8)), field)


def parse_mounts(content: str) -> List[MountEntry]:
    """Parse the contents of /proc/mounts into entries, in mount order."""
    entries = []
    for line in content.splitlines():
        parts = line.split()
        if len(parts) < 3:
            continue
        entries.append(MountEntry(
            unescape_mount_field(parts[0]),
            unescape_mount_field(parts[1]),
            parts[2]
        ))
    return entries


def read_mounts(mounts_file: str = MOUNTS_FILE) -> List[MountEntry]:
    try:
        with open(mounts_file, "r") as f:
            entries = parse_mounts(f.read())
    except OSError as e:
        raise DiskCheckError(f"Cannot read mount table {mounts_file}: {e}")
    logger.debug(f"Read {len(entries)} mount entries from {mounts_file}")
    return entries


def find_mount_point(path: str) -> str:
    """Return the mount point of the filesystem holding path."""
    path = os.path.realpath(path)
    while not os.path.ismount(path):
        parent = os.path.dirname(path)
        if parent == path:
            break
        path = parent
    return path


def device_for_mount(mount_point: str, entries: List[MountEntry]) -> Optional[str]:
    """Return the source device of the last filesystem mounted on mount_point."""
    device = None
    for entry in entries:
        if entry.target == mount_point:
            device = entry.source
    return device
