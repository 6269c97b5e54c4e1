#!/usr/bin/env python3
"""
Inode report: inode usage of the mount point, the directories holding the most
inodes and the bytes-per-inode ratio the filesystem was created with.
"""

import os
import stat
import logging
from collections import namedtuple
from typing import Dict, Iterable, List, Tuple

from .base import ReportModule
from .mounts import find_mount_point, device_for_mount, read_mounts
from ..config import INODE_MAX_DEPTH, INODE_TOP
from ..exceptions import DiskCheckError
from ..ui.report import ReportWriter

logger = logging.getLogger("diskcheck.modules.inodes")

SuperblockInfo = namedtuple("SuperblockInfo", ["inode_count", "block_count", "block_size"])

SUPERBLOCK_FIELDS = {
    "Inode count": "inode_count",
    "Block count": "block_count",
    "Block size": "block_size",
}


def parse_superblock(output: str) -> SuperblockInfo:
    """
    Pull the inode count, block count and block size out of ``tune2fs -l`` output.

    Raises:
        DiskCheckError: If any of the three fields is missing or not a number
    """
    values = {}
    for line in output.splitlines():
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        field = SUPERBLOCK_FIELDS.get(key.strip())
        if field:
            try:
                values[field] = int(value.strip())
            except ValueError:
                raise DiskCheckError(f"Unexpected {key.strip()} value: {value.strip()}")

    missing = [key for key, field in SUPERBLOCK_FIELDS.items() if field not in values]
    if missing:
        raise DiskCheckError(f"Superblock information lacks: {', '.join(missing)}")
    return SuperblockInfo(**values)


def bytes_per_inode(info: SuperblockInfo) -> float:
    """Kilobytes of capacity per inode, to one decimal place."""
    if info.inode_count <= 0:
        raise DiskCheckError("Superblock reports no inodes")
    return round(info.block_count * info.block_size / info.inode_count / 1024, 1)


def count_inode_consumers(mount_point: str, skip: Iterable[str] = (),
                          max_depth: int = INODE_MAX_DEPTH,
                          top: int = INODE_TOP) -> List[Tuple[int, str]]:
    """
    Rank directories under mount_point by the number of entries beneath them.

    The walk stays on the device of mount_point. Every directory at depth 0 to
    max_depth is a candidate unless its path is in skip. A candidate's count
    includes the directory itself and every entry below it; entries on another
    device count once and are not descended into.

    Returns:
        Up to ``top`` ``(count, path)`` pairs, largest first
    """
    skip = set(skip)
    root_dev = os.lstat(mount_point).st_dev
    totals: Dict[str, int] = {}
    depths: Dict[str, int] = {mount_point: 0}
    order = []

    for dirpath, dirnames, filenames in os.walk(mount_point):
        totals[dirpath] = 1 + len(filenames) + len(dirnames)
        order.append(dirpath)

        descend = []
        for name in dirnames:
            full_path = os.path.join(dirpath, name)
            try:
                st = os.lstat(full_path)
            except OSError:
                continue
            if stat.S_ISDIR(st.st_mode) and st.st_dev == root_dev:
                descend.append(name)
                depths[full_path] = depths[dirpath] + 1
        dirnames[:] = descend

    # Children come after their parents in walk order
    for dirpath in reversed(order[1:]):
        parent = os.path.dirname(dirpath)
        if parent in totals:
            totals[parent] += totals[dirpath] - 1

    logger.debug(f"Counted {totals.get(mount_point, 0)} entries under {mount_point}")

    ranked = [
        (count, path) for path, count in totals.items()
        if depths.get(path, max_depth + 1) <= max_depth and path not in skip
    ]
    ranked.sort(key=lambda item: (-item[0], item[1]))
    return ranked[:top]


class InodeReportModule(ReportModule):
    """Inode usage breakdown for the filesystem holding the target path."""

    def __init__(self, filesystem: str):
        super().__init__(
            "inode_report",
            "Inode Report",
            filesystem
        )

    def run(self, writer: ReportWriter) -> None:
        mount_point = find_mount_point(self.filesystem)
        writer.line(f"Inode Information for [ {mount_point} ]")
        writer.text_table(self.run_command(["df", "-PTi", "--", mount_point]))

        mounts = read_mounts()

        writer.header(f"Storage device behind filesystem [ {mount_point} ]")
        device = self.resolve_device(mounts)
        writer.line(device)

        writer.header(f"Top inode Consumers on [ {mount_point} ]")
        consumers = count_inode_consumers(mount_point, skip=[entry.target for entry in mounts])
        writer.line("%11s \t %-30s" % ("inode-Count", "Path"))
        for count, path in consumers:
            writer.line("%11s \t %-30s" % (f"{count:,}", path))

        writer.header(f"Bytes per Inode format for [ {mount_point} ]")
        info = parse_superblock(self.run_command(["tune2fs", "-l", device]))
        writer.line(f"{bytes_per_inode(info):.1f} KB per inode!")

        writer.header(f"Disk space [ {mount_point} ]")

    def resolve_device(self, mounts) -> str:
        """Return the device behind the current working directory."""
        try:
            cwd = os.getcwd()
        except OSError as e:
            raise DiskCheckError(f"Cannot resolve the working directory: {e}")
        cwd_mount = find_mount_point(cwd)
        if cwd_mount != find_mount_point(self.filesystem):
            logger.debug(f"Device taken from the working directory mount {cwd_mount}, "
                         f"not from {self.filesystem}")

        device = device_for_mount(cwd_mount, mounts)
        if not device:
            raise DiskCheckError(f"No device found for mount point {cwd_mount}")
        return device
