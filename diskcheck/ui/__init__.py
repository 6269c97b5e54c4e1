#!/usr/bin/env python3
"""
UI module initialization for the Disk Usage Check Tool.
"""

from .report import ReportWriter, format_table, human_size
