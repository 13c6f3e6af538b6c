"""
Tests for logging setup and console rendering.
"""

from __future__ import annotations

import logging

import pytest

from wrfbuild.core.observability.display import banner, section, success, tagged
from wrfbuild.core.observability.logging_config import setup_logging
from wrfbuild.ui.cli.console import ClickConsoleHandler, record_tag, render


def _record(msg, level=logging.INFO, tag=None):
    record = logging.LogRecord("t", level, __file__, 1, msg, (), None)
    if tag:
        record.tag = tag
    return record


@pytest.mark.usefixtures("restore_logging")
class TestSetupLogging:
    def test_files_truncated_and_split(self, tmp_path):
        info_log = tmp_path / "wrf_install.log"
        error_log = tmp_path / "wrf_error.log"
        info_log.write_text("previous run\n")
        error_log.write_text("previous error\n")

        setup_logging(log_file=info_log, error_log_file=error_log,
                      console=logging.NullHandler())
        log = logging.getLogger("wrfbuild.test")
        section(log, "Compiling WRF")
        success(log, "WRF compiled successfully!")
        log.error("Failed to compile WRF.")
        for handler in logging.getLogger().handlers:
            handler.flush()

        info_text = info_log.read_text()
        error_text = error_log.read_text()
        assert "previous run" not in info_text
        assert "=== Compiling WRF ===" in info_text
        assert "[SUCCESS] WRF compiled successfully!" in info_text
        assert "Failed to compile WRF." in info_text

        assert "previous error" not in error_text
        assert "ERROR: Failed to compile WRF." in error_text
        assert "compiled successfully" not in error_text

    def test_banner_reaches_file_but_not_console(self, tmp_path, capsys):
        info_log = tmp_path / "wrf_install.log"
        setup_logging(log_file=info_log, console=ClickConsoleHandler(color=False))
        banner(logging.getLogger("wrfbuild.test"), "WRF has been successfully installed!")
        for handler in logging.getLogger().handlers:
            handler.flush()

        text = info_log.read_text()
        assert "INFO - WRF has been successfully installed!" in text
        assert "[BANNER]" not in text
        out, err = capsys.readouterr()
        assert "successfully installed" not in out + err

    def test_creates_log_directory(self, tmp_path):
        target = tmp_path / "logs" / "nested" / "wrf_install.log"
        setup_logging(log_file=target, console=logging.NullHandler())
        assert target.parent.is_dir()

    def test_debug_level_reaches_file(self, tmp_path):
        info_log = tmp_path / "wrf_install.log"
        setup_logging(level="DEBUG", log_file=info_log, console=logging.NullHandler())
        logging.getLogger("wrfbuild.test").debug("Executing: ./compile")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "Executing: ./compile" in info_log.read_text()

    def test_bad_level_falls_back_to_info(self, tmp_path):
        setup_logging(level="LOUD", console=logging.NullHandler())
        assert logging.getLogger().level == logging.INFO


class TestConsoleRendering:
    def test_tags(self):
        assert record_tag(_record("x")) == "INFO"
        assert record_tag(_record("x", logging.WARNING)) == "WARNING"
        assert record_tag(_record("x", logging.ERROR)) == "ERROR"
        assert record_tag(_record("x", tag="FIX")) == "FIX"

    def test_render_plain(self):
        assert render(_record("Found main/wrf.exe", tag="OK"), color=False) == \
            "[OK] Found main/wrf.exe"
        assert render(_record("Verifying Installation", tag="SECTION"), color=False) == \
            "\n=== Verifying Installation ==="

    def test_handler_routes_errors_to_stderr(self, capsys):
        handler = ClickConsoleHandler(color=False)
        handler.emit(_record("all good"))
        handler.emit(_record("broken", logging.ERROR))
        out, err = capsys.readouterr()
        assert "[INFO] all good" in out
        assert "[ERROR] broken" in err

    def test_tagged_helper(self, caplog):
        tagged(logging.getLogger("wrfbuild.test"), "LINK", "Forum: %s", "https://x")
        assert caplog.records[-1].tag == "LINK"
        assert caplog.records[-1].getMessage() == "Forum: https://x"
