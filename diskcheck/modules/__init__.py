#!/usr/bin/env python3
"""
Module initialization - imports all report modules and provides a function to get the
modules for a run.
"""

from .base import ReportModule, run_command
from .overview import FilesystemOverviewModule
from .inodes import InodeReportModule
from .files import FileSizeReportModule


def get_report_modules(filesystem: str, inode: bool = False):
    """Return the report modules to run, in order, for the selected mode."""
    if inode:
        report = InodeReportModule(filesystem)
    else:
        report = FileSizeReportModule(filesystem)
    return [
        report,
        FilesystemOverviewModule(filesystem)
    ]
