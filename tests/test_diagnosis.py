"""
Tests for failure classification, build-log scanning and the
troubleshooting menu.
"""

from __future__ import annotations

import pytest

from wrfbuild.core.models.result import StageResult
from wrfbuild.core.services.build.domain.error_analysis import (
    classify_failure,
    scan_build_log,
    tail_lines,
)
from wrfbuild.core.services.build.orchestration.troubleshooting import (
    ACTION_ABORT,
    ACTION_REENTER_DEPS,
    ACTION_REENTER_ENV,
    diagnose,
    troubleshoot,
)
from tests.build.scripted_prompter import ScriptedPrompter


class TestClassifyFailure:
    @pytest.mark.parametrize("text,category", [
        ("fatal error: netcdf.h: No such file or directory", "netcdf"),
        ("NetCDF library not resolved: install NetCDF", "netcdf"),
        ("mpif90: command not found", "mpi"),
        ("cannot find -lmpich", "mpi"),
        ("Open MPI: mpirun was unable to launch", "mpi"),
        ("WRF configuration failed: configure.wrf was not created", "configuration"),
        ("WPS configuration failed: configure.wps was not created", "configuration"),
        ("/home/u/WRF: No such file or directory", "missing_file"),
        ("mkdir: cannot create directory: Permission denied", "permission"),
        ("something odd happened", "unknown"),
        ("", "unknown"),
    ])
    def test_categories(self, text, category):
        assert classify_failure(text).category == category

    def test_netcdf_before_mpi(self):
        text = "fatal error: mpi.h: missing\nfatal error: netcdf.h: missing"
        assert classify_failure(text).category == "netcdf"

    def test_compile_is_not_mpi(self):
        assert classify_failure("Failed to compile WRF").category == "unknown"

    @pytest.mark.parametrize("text", [
        "/home/u/mpi-runs/WRF: No such file or directory",
        "cd /data/mpi/WRF: No such file or directory",
    ])
    def test_mpi_path_segment_is_not_mpi(self, text):
        assert classify_failure(text).category == "missing_file"

    def test_bare_mpi_word_is_mpi(self):
        assert classify_failure("MPI initialization failed").category == "mpi"

    def test_fixes_are_listed(self):
        diagnosis = classify_failure("netcdf.h")
        assert diagnosis.title == "NetCDF-related error detected:"
        assert len(diagnosis.fixes) == 3

    def test_unknown_has_no_fixes(self):
        assert classify_failure("???").fixes == []


class TestScanBuildLog:
    def test_no_signature(self):
        assert scan_build_log("all good\n") is None
        assert scan_build_log("") is None

    def test_order(self):
        log = "Error copying file\nmpi.h: not found\nmake: *** Error 2\n"
        assert scan_build_log(log)["signature"] == "mpi.h"

    def test_header_lines_are_context(self):
        log = "cc -c a.c\nfatal error: netcdf.h: missing\ncc -c b.c\n"
        assert scan_build_log(log)["context"] == ["fatal error: netcdf.h: missing"]

    def test_make_context_limited(self):
        log = "\n".join(["make: *** [all] Error 2"] + [str(i) for i in range(10)])
        found = scan_build_log(log)
        assert found["context"] == ["make: *** [all] Error 2", "0", "1", "2", "3", "4"]

    def test_overlapping_make_markers_not_duplicated(self):
        log = "make: *** a\nx\nmake: *** b\ny"
        found = scan_build_log(log)
        assert found["context"] == ["make: *** a", "x", "make: *** b", "y"]


class TestTailLines:
    def test_tail(self):
        assert tail_lines("a\nb\nc", 2) == ["b", "c"]

    def test_empty(self):
        assert tail_lines("", 5) == []
        assert tail_lines("a", 0) == []


class TestDiagnose:
    def test_prints_diagnosis_fixes_and_links(self, tmp_path, caplog):
        result = StageResult.failure(
            "compile_main", "NetCDF library issue detected.",
            kind="build_artifact_missing", log_excerpt="netcdf.h",
        )
        diagnosis = diagnose(result, tmp_path / "wrf_error.log")

        assert diagnosis.category == "netcdf"
        tags = [getattr(r, "tag", None) for r in caplog.records]
        assert tags.count("FIX") == 3
        assert "DIAGNOSIS" in tags
        assert tags.count("LINK") == 2
        assert "forum.mmm.ucar.edu" in caplog.text

    def test_install_root_does_not_decide_category(self, tmp_path):
        root = tmp_path / "mpicc-builds"
        result = StageResult.failure(
            "configure_main", f"WRF source directory {root}/WRF does not exist",
            kind="configuration_missing",
            log_excerpt=f"{root}/WRF: No such file or directory",
        )
        diagnosis = diagnose(result, tmp_path / "wrf_error.log", install_root=root)
        assert diagnosis.category == "missing_file"

    def test_unknown_points_at_logs(self, tmp_path, caplog):
        result = StageResult.failure(
            "compile_main", "strange", kind="build_artifact_missing",
            log_path=str(tmp_path / "compile.log"),
        )
        diagnose(result, tmp_path / "wrf_error.log")
        assert "Error log:" in caplog.text
        assert "Build log:" in caplog.text


class TestTroubleshootMenu:
    def _run(self, tmp_path, answers):
        error_log = tmp_path / "wrf_error.log"
        error_log.write_text("2024-01-01 00:00:00 - ERROR: Failed to compile WRF.\n")
        prompter = ScriptedPrompter(answers=answers)
        action = troubleshoot(prompter, tmp_path / "wrf_install.log", error_log)
        return action, prompter

    def test_default_is_abort(self, tmp_path, caplog):
        action, _ = self._run(tmp_path, [""])
        assert action == ACTION_ABORT
        assert "wrf_install.log" in caplog.text

    def test_reenter_choices(self, tmp_path):
        assert self._run(tmp_path, ["2"])[0] == ACTION_REENTER_ENV
        assert self._run(tmp_path, ["3"])[0] == ACTION_REENTER_DEPS

    def test_show_log_returns_to_menu(self, tmp_path):
        action, prompter = self._run(tmp_path, ["1", "4"])
        assert action == ACTION_ABORT
        assert "Failed to compile WRF" in prompter.shown[0]
        assert prompter.pauses == 1

    def test_invalid_input_reprompts(self, tmp_path, caplog):
        action, prompter = self._run(tmp_path, ["9", "x", "2"])
        assert action == ACTION_REENTER_ENV
        assert caplog.text.count("Invalid option") == 2
        assert len(prompter.questions) == 3
