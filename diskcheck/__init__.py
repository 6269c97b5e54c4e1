#!/usr/bin/env python3
"""
Disk Usage Check Tool

Reports disk and inode usage for a filesystem path: capacity, largest directories and
files, top inode consumers and open file handles whose files have been deleted.
"""

__version__ = "1.0.0"
