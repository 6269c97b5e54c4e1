#!/usr/bin/env python3
"""
File and directory size report.
"""

import os
import stat
import heapq
import logging
from collections import namedtuple
from typing import Dict, Iterator, List, Sequence, Tuple

from .base import ReportModule
from ..config import (
    DIRECTORY_MAX_DEPTH, DIRECTORY_TOP, FILE_TOP, DELETED_MIN_BYTES, DELETED_TOP
)
from ..ui.report import ReportWriter, human_size

logger = logging.getLogger("diskcheck.modules.files")

DeletedHandle = namedtuple("DeletedHandle", ["size", "name"])

MIB = 1048576


def disk_usage(st: os.stat_result) -> int:
    """Bytes actually allocated on disk for a stat result."""
    return st.st_blocks * 512


def walk_device(root: str) -> Iterator[Tuple[str, os.stat_result, List[Tuple[str, os.stat_result]]]]:
    """
    Walk root without leaving its device.

    Yields ``(dirpath, dir_stat, entries)`` for every directory reached, where
    entries are the ``(path, stat)`` pairs of its non-directory children.
    Entries that vanish or cannot be read are skipped.
    """
    root_dev = os.lstat(root).st_dev
    for dirpath, dirnames, filenames in os.walk(root):
        try:
            dir_stat = os.lstat(dirpath)
        except OSError:
            dirnames[:] = []
            continue

        entries = []
        descend = set()
        for name in dirnames + filenames:
            full_path = os.path.join(dirpath, name)
            try:
                st = os.lstat(full_path)
            except OSError:
                continue
            if st.st_dev != root_dev:
                continue
            if stat.S_ISDIR(st.st_mode):
                descend.add(name)
            else:
                entries.append((full_path, st))
        dirnames[:] = [name for name in dirnames if name in descend]

        yield dirpath, dir_stat, entries


def largest_directories(root: str, max_depth: int = DIRECTORY_MAX_DEPTH,
                        top: int = DIRECTORY_TOP) -> List[Tuple[int, str]]:
    """
    Cumulative disk usage of the directories up to max_depth below root.

    Hard-linked files are counted once. Returns up to ``top`` ``(bytes, path)``
    pairs, largest first.
    """
    root = os.path.normpath(root)
    seen = set()
    totals: Dict[str, int] = {}
    order = []

    for dirpath, dir_stat, entries in walk_device(root):
        total = disk_usage(dir_stat)
        for _, st in entries:
            if st.st_nlink > 1:
                key = (st.st_dev, st.st_ino)
                if key in seen:
                    continue
                seen.add(key)
            total += disk_usage(st)
        totals[dirpath] = total
        order.append(dirpath)

    for dirpath in reversed(order[1:]):
        parent = os.path.dirname(dirpath)
        if parent in totals:
            totals[parent] += totals[dirpath]
    logger.debug(f"Measured {len(totals)} directories under {root}")

    ranked = []
    for path, total in totals.items():
        relative = os.path.relpath(path, root)
        depth = 0 if relative == "." else relative.count(os.sep) + 1
        if depth <= max_depth:
            ranked.append((total, path))
    ranked.sort(key=lambda item: (-item[0], item[1]))
    return ranked[:top]


def largest_files(root: str, top: int = FILE_TOP) -> List[Tuple[int, str]]:
    """Return up to ``top`` ``(kilobytes, path)`` pairs for the biggest regular files."""
    files = (
        ((st.st_blocks + 1) // 2, path)
        for _, _, entries in walk_device(root)
        for path, st in entries
        if stat.S_ISREG(st.st_mode)
    )
    return heapq.nlargest(top, files, key=lambda item: item[0])


def parse_deleted_handles(output: str) -> List[DeletedHandle]:
    """
    Pick open regular files that have been deleted out of ``lsof`` output.

    Matching lines end in ``SIZE/OFF NODE NAME (deleted)``.
    """
    handles = []
    for line in output.splitlines():
        if "REG" not in line or "deleted" not in line:
            continue
        fields = line.split()
        if len(fields) < 4:
            continue
        try:
            size = int(fields[-4])
        except ValueError:
            continue
        handles.append(DeletedHandle(size, fields[-2]))
    return handles


def select_deleted_handles(handles: Sequence[DeletedHandle], min_bytes: int = DELETED_MIN_BYTES,
                           top: int = DELETED_TOP) -> List[DeletedHandle]:
    """Unique handles larger than min_bytes, biggest first, at most ``top`` of them."""
    unique = sorted(set(handles), reverse=True)
    return [handle for handle in unique if handle.size > min_bytes][:top]


class FileSizeReportModule(ReportModule):
    """Largest directories, largest files and space held by deleted files."""

    def __init__(self, filesystem: str):
        super().__init__(
            "file_report",
            "File and Directory Size Report",
            filesystem
        )

    def run(self, writer: ReportWriter) -> None:
        writer.header("Largest Directories")
        writer.table([
            [human_size(total), path] for total, path in largest_directories(self.filesystem)
        ])

        writer.header("Largest Files")
        writer.table([
            [f"{kilobytes / 1024:.2f}M", path] for kilobytes, path in largest_files(self.filesystem)
        ])

        writer.header(f"Top {DELETED_TOP} Open DELETED Files over {DELETED_MIN_BYTES // MIB}MB")
        # lsof exits 1 when some files could not be inspected
        output = self.run_command(["lsof", "-nP"], ok_codes=(0, 1), quiet=True)
        for handle in select_deleted_handles(parse_deleted_handles(output)):
            writer.line(f"{handle.size // MIB} MB  {handle.name}")
