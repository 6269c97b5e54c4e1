#!/usr/bin/env python3
"""
Custom exceptions for the Disk Usage Check Tool.
"""

from typing import List


class DiskCheckError(Exception):
    """Base exception class for diskcheck errors."""

    pass


class InvalidFilesystemError(DiskCheckError):
    """Raised when the requested filesystem path is missing or not a directory."""

    def __init__(self, path: str):
        super().__init__(f"Invalid Filesystem: {path}")
        self.path = path


class CommandError(DiskCheckError):
    """Raised when an external command exits with a status that is not accepted."""

    def __init__(self, command: List[str], returncode: int):
        super().__init__(f"Command {' '.join(command)} exited with status {returncode}")
        self.command = command
        self.returncode = returncode
