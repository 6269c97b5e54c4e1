#!/usr/bin/env python3
"""
Base module for all report modules, and the command runner they share.
"""

import subprocess
import logging
from typing import List, Sequence

from ..exceptions import CommandError
from ..ui.report import ReportWriter

logger = logging.getLogger("diskcheck.modules")

# Exit statuses a shell reports for commands it cannot find or execute
COMMAND_NOT_FOUND = 127
COMMAND_NOT_EXECUTABLE = 126


def run_command(command: List[str], ok_codes: Sequence[int] = (0,), quiet: bool = False) -> str:
    """
    Run an external command and return its trimmed standard output.

    Args:
        command: Program and arguments as a list of strings
        ok_codes: Exit statuses that count as success
        quiet: Discard the command's standard error instead of passing it through

    Returns:
        Command output with surrounding whitespace removed

    Raises:
        CommandError: If the command cannot be started or exits with another status
    """
    logger.debug(f"Running command: {' '.join(command)}")
    try:
        result = subprocess.run(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL if quiet else None,
            text=True,
            errors="replace",
            check=False
        )
    except FileNotFoundError:
        logger.debug(f"Command not found: {command[0]}")
        raise CommandError(command, COMMAND_NOT_FOUND)
    except PermissionError:
        raise CommandError(command, COMMAND_NOT_EXECUTABLE)

    if result.returncode not in ok_codes:
        raise CommandError(command, result.returncode)

    return result.stdout.strip()


class ReportModule:
    """Base class for all report modules."""

    def __init__(self, name: str, description: str, filesystem: str):
        self.name = name
        self.description = description
        self.filesystem = filesystem

    def run(self, writer: ReportWriter) -> None:
        """Run the report and write its sections."""
        raise NotImplementedError("Subclasses must implement this method")

    def run_command(self, command: List[str], ok_codes: Sequence[int] = (0,),
                    quiet: bool = False) -> str:
        """Run an external command through run_command; failures end the report."""
        return run_command(command, ok_codes=ok_codes, quiet=quiet)
