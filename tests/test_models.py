"""
Tests for the core models.
"""

from __future__ import annotations

from pathlib import Path

from wrfbuild.core.models import InstallationContext, StageResult, SystemProfile


class TestInstallationContext:
    def test_root_made_absolute(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        ctx = InstallationContext(install_root=Path("rel"))
        assert ctx.install_root == (tmp_path / "rel").resolve()

    def test_core_count_floor(self, tmp_path: Path):
        assert InstallationContext(install_root=tmp_path, core_count=0).core_count == 1
        assert InstallationContext(install_root=tmp_path).core_count >= 1

    def test_all_libraries_start_unresolved(self, tmp_path: Path):
        ctx = InstallationContext(install_root=tmp_path)
        assert ctx.unresolved_libraries() == [
            "netcdf", "netcdf-fortran", "hdf5", "jasper-include", "jasper-lib",
        ]
        assert not ctx.wants_preprocessing
        assert not ctx.companion_built


class TestStageResult:
    def test_success(self):
        r = StageResult.success("verify")
        assert r.ok and not r.failed
        assert r.kind is None

    def test_failure(self):
        r = StageResult.failure("acquire_main", "no wget", kind="transport_unavailable")
        assert r.failed
        assert r.kind == "transport_unavailable"
        assert r.finished_at


class TestSystemProfile:
    def test_summary_lines(self):
        profile = SystemProfile(
            os_id="debian", distribution="ubuntu", architecture="x86_64",
            compilers=frozenset({"intel", "gnu"}),
        )
        lines = profile.summary_lines()
        assert lines[0] == "Operating System: debian (ubuntu)"
        assert lines[2] == "Available Compilers: gnu, intel"
        assert lines[3] == "Available MPI: none detected"
