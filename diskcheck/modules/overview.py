#!/usr/bin/env python3
"""
Filesystem overview shared by both reports.
"""

from .base import ReportModule
from ..ui.report import ReportWriter


class FilesystemOverviewModule(ReportModule):
    """Space and inode usage of the filesystem, straight from df."""

    def __init__(self, filesystem: str):
        super().__init__(
            "filesystem_overview",
            "Filesystem Overview",
            filesystem
        )

    def run(self, writer: ReportWriter) -> None:
        writer.header(self.description)
        writer.line(self.run_command(["df", "-PTh", "--", self.filesystem]))
        writer.line(self.run_command(["df", "-PTi", "--", self.filesystem]))
