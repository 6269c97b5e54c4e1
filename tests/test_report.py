"""
Tests for report output helpers.
"""

import pytest

from diskcheck.ui.report import format_table, human_size


class TestReportWriter:
    """Test cases for ReportWriter."""

    def test_header_is_banner_delimited(self, writer, output):
        writer.header("Largest Files")

        banner = "=" * 60
        assert output.getvalue() == f"{banner}\n\tLargest Files\n{banner}\n"

    def test_line_defaults_to_blank(self, writer, output):
        writer.line()

        assert output.getvalue() == "\n"

    def test_text_table_realigns_columns(self, writer, output):
        writer.text_table("Filesystem Inodes\n/dev/sda1   10")

        assert output.getvalue().splitlines() == [
            "Filesystem  Inodes",
            "/dev/sda1   10",
        ]

    def test_empty_table_writes_nothing(self, writer, output):
        writer.table([])

        assert output.getvalue() == ""


class TestFormatTable:
    """Test cases for format_table."""

    def test_columns_padded_to_widest_cell(self):
        lines = format_table([["1.5G", "/var"], ["12K", "/etc"]])

        assert lines == ["1.5G  /var", "12K   /etc"]

    def test_last_column_not_padded(self):
        lines = format_table([["a", "short"], ["bb", "much longer"]])

        assert lines[0] == "a   short"

    def test_rows_of_different_length(self):
        lines = format_table([["Mounted", "on"], ["/"]])

        assert lines == ["Mounted  on", "/"]


class TestHumanSize:
    """Test cases for du style sizes."""

    @pytest.mark.parametrize("num_bytes, expected", [
        (0, "0"),
        (512, "512"),
        (1024, "1.0K"),
        (1536, "1.5K"),
        (4096, "4.0K"),
        (10239, "10K"),
        (12288, "12K"),
        (1048575, "1.0M"),
        (1048576, "1.0M"),
        (1610612736, "1.5G"),
    ])
    def test_formats_like_du(self, num_bytes, expected):
        assert human_size(num_bytes) == expected

    def test_rounds_up(self):
        assert human_size(1025) == "1.1K"
