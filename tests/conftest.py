"""
Pytest configuration and shared fixtures.
"""

import io
import os
import stat

import pytest

from diskcheck.ui.report import ReportWriter


def write_file(path, size):
    with open(path, "wb") as f:
        f.write(b"x" * size)


@pytest.fixture
def temp_tree(tmp_path):
    """
    Create a small directory tree with files of known sizes.

    Layout::

        root/
            big.bin          200 KiB
            small.txt        10 bytes
            sub/
                mid.bin      50 KiB
                deep/
                    deeper/
                        tiny.txt
    """
    root = tmp_path / "root"
    deeper = root / "sub" / "deep" / "deeper"
    os.makedirs(deeper)

    write_file(root / "big.bin", 200 * 1024)
    write_file(root / "small.txt", 10)
    write_file(root / "sub" / "mid.bin", 50 * 1024)
    write_file(deeper / "tiny.txt", 3)

    return str(root)


@pytest.fixture
def output():
    """In-memory stream for report output."""
    return io.StringIO()


@pytest.fixture
def writer(output):
    return ReportWriter(output)


@pytest.fixture
def lstat_with():
    """Factory for os.lstat stand-ins that move paths to another device or make them vanish."""
    real_lstat = os.lstat

    def make_lstat(other_device=(), vanished=()):
        def fake_lstat(path, *args, **kwargs):
            if str(path) in vanished:
                raise FileNotFoundError(path)
            st = real_lstat(path, *args, **kwargs)
            if str(path) in other_device:
                values = list(st)
                values[stat.ST_DEV] = st.st_dev + 1
                return os.stat_result(values)
            return st

        return fake_lstat

    return make_lstat
