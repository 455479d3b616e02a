"""
Tests for the Report Writer

Covers:
    - Filename layout and sanitization
    - Degraded identifying fields
    - Output directory resolution
    - UTF-8 output and overwrite behaviour
"""

import pytest
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.report_writer import ReportWriter
from src.utils import get_default_config

RUN_TIME = datetime(2024, 3, 5, 14, 7, 42)


class TestFilename:
    """Tests for filename construction."""

    def test_layout(self, config_with_temp_dir):
        writer = ReportWriter(config_with_temp_dir)
        name = writer.build_filename("DESKTOP-01", RUN_TIME, "ASUS, Inc.", "PRIME B550-PLUS", "MB-1234/5")
        assert name == "DESKTOP-01_2024-03-05_14-07_ASUS--Inc-_PRIME-B550-PLUS_MB-1234-5.txt"

    def test_missing_fields_give_empty_segments(self, config_with_temp_dir):
        writer = ReportWriter(config_with_temp_dir)
        name = writer.build_filename("PC", RUN_TIME, None, "", None)
        assert name == "PC_2024-03-05_14-07___.txt"

    def test_everything_missing(self, config_with_temp_dir):
        writer = ReportWriter(config_with_temp_dir)
        assert writer.build_filename(None, RUN_TIME, None, None, None) == "_2024-03-05_14-07___.txt"

    def test_same_minute_same_name(self, config_with_temp_dir):
        """Seconds do not appear in the name."""
        writer = ReportWriter(config_with_temp_dir)
        first = writer.build_filename("PC", datetime(2024, 3, 5, 14, 7, 0), "A", "B", "C")
        second = writer.build_filename("PC", datetime(2024, 3, 5, 14, 7, 59), "A", "B", "C")
        assert first == second

    def test_deterministic(self, config_with_temp_dir):
        writer = ReportWriter(config_with_temp_dir)
        args = ("PC", RUN_TIME, "Dell Inc.", "0KWVT8", "/ABC123/")
        assert writer.build_filename(*args) == writer.build_filename(*args)


class TestOutputDirectory:
    """Tests for output directory resolution."""

    def test_configured_directory(self, config_with_temp_dir, temp_output_dir):
        writer = ReportWriter(config_with_temp_dir)
        assert writer.output_dir == temp_output_dir

    def test_explicit_directory_wins(self, config_with_temp_dir, tmp_path):
        writer = ReportWriter(config_with_temp_dir, output_dir=tmp_path / "other")
        assert writer.output_dir == tmp_path / "other"

    def test_defaults_to_program_directory(self, tmp_path):
        with patch("src.report_writer.get_project_root", return_value=tmp_path):
            writer = ReportWriter(get_default_config())
        assert writer.output_dir == tmp_path


class TestWrite:
    """Tests for writing report files."""

    def test_write_utf8(self, config_with_temp_dir, temp_output_dir):
        writer = ReportWriter(config_with_temp_dir)
        path = writer.write("Café – résumé\n", "report.txt")

        assert path == (temp_output_dir / "report.txt").resolve()
        assert path.read_text(encoding="utf-8") == "Café – résumé\n"

    def test_overwrites_existing(self, config_with_temp_dir, temp_output_dir):
        existing = temp_output_dir / "report.txt"
        existing.write_text("old contents that are longer", encoding="utf-8")

        writer = ReportWriter(config_with_temp_dir)
        writer.write("new\n", "report.txt")

        assert existing.read_text(encoding="utf-8") == "new\n"

    def test_creates_directory(self, tmp_path):
        writer = ReportWriter(get_default_config(), output_dir=tmp_path / "nested" / "reports")
        path = writer.write("x\n", "r.txt")
        assert path.exists()

    def test_unwritable_directory_raises(self, tmp_path):
        """Failing to create the output location is fatal."""
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        writer = ReportWriter(get_default_config(), output_dir=blocker / "reports")
        with pytest.raises(OSError):
            writer.write("x\n", "r.txt")
