#!/usr/bin/env python3
"""
Report output for the Disk Usage Check Tool.
"""

import sys
import math
from typing import List, Optional, Sequence, TextIO

from ..config import BANNER_WIDTH

HUMAN_UNITS = ["K", "M", "G", "T", "P", "E"]


def human_size(num_bytes: int) -> str:
    """
    Format a byte count the way ``du -h`` does.

    Values are rounded up; one decimal is shown below 10 of a unit,
    whole numbers above (e.g. ``4.0K``, ``12K``, ``1.5G``).
    """
    if num_bytes < 1024:
        return str(num_bytes)

    value = float(num_bytes)
    unit = ""
    for unit in HUMAN_UNITS:
        value /= 1024.0
        if math.ceil(value) < 1024 or unit == HUMAN_UNITS[-1]:
            break

    if value < 10:
        tenths = math.ceil(value * 10) / 10
        if tenths < 10:
            return f"{tenths:.1f}{unit}"
        value = tenths
    return f"{math.ceil(value)}{unit}"


def format_table(rows: Sequence[Sequence[str]]) -> List[str]:
    """Left-align whitespace separated columns, two spaces apart."""
    rows = [list(row) for row in rows if row]
    if not rows:
        return []

    widths = {}
    for row in rows:
        for index, cell in enumerate(row[:-1]):
            widths[index] = max(widths.get(index, 0), len(cell))

    lines = []
    for row in rows:
        cells = [cell.ljust(widths[index]) for index, cell in enumerate(row[:-1])]
        cells.append(row[-1])
        lines.append("  ".join(cells))
    return lines


class ReportWriter:
    """Writes report sections to a text stream."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout

    def header(self, title: str) -> None:
        """Write a banner-delimited section title."""
        banner = "=" * BANNER_WIDTH
        self.line(f"{banner}\n\t{title}\n{banner}")

    def line(self, text: str = "") -> None:
        print(text, file=self.stream, flush=True)

    def table(self, rows: Sequence[Sequence[str]]) -> None:
        for text in format_table(rows):
            self.line(text)

    def text_table(self, text: str) -> None:
        """Re-align command output whose columns are separated by whitespace."""
        self.table([line.split() for line in text.splitlines()])
