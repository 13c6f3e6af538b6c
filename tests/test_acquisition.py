"""
Tests for source acquisition (download → extract → rename).
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from wrfbuild.core.services.build.execution import acquisition

_MOD = "wrfbuild.core.services.build.execution.acquisition"


def _fake_transfer(root: Path, extracted: str = "WRF-4.4.1", *, download_ok=True,
                   extract_ok=True):
    """run_command stand-in that creates what wget and tar would."""
    def run(cmd, **kwargs):
        if cmd[0] in ("wget", "curl"):
            if download_ok:
                dest = cmd[cmd.index("-O") + 1] if "-O" in cmd else cmd[cmd.index("-o") + 1]
                Path(dest).write_bytes(b"tarball")
                return {"ok": True, "returncode": 0}
            return {"ok": False, "returncode": 8, "error": "Command failed (exit 8)"}
        if cmd[0] == "tar":
            if extract_ok:
                (root / extracted / "main").mkdir(parents=True)
                return {"ok": True, "returncode": 0, "stdout": "", "stderr": ""}
            return {"ok": False, "returncode": 2, "stdout": "",
                    "stderr": "gzip: stdin: not in gzip format"}
        raise AssertionError(f"unexpected command {cmd}")
    return run


class TestDownloadCommand:
    def test_prefers_wget(self, tmp_path):
        with patch(f"{_MOD}.shutil.which", side_effect=lambda b: f"/usr/bin/{b}"):
            cmd = acquisition.download_command("https://x/y.tar.gz", tmp_path / "y.tar.gz")
        assert cmd[0] == "wget"
        assert "--show-progress" in cmd

    def test_falls_back_to_curl(self, tmp_path):
        with patch(f"{_MOD}.shutil.which",
                   side_effect=lambda b: "/usr/bin/curl" if b == "curl" else None):
            cmd = acquisition.download_command("https://x/y.tar.gz", tmp_path / "y.tar.gz")
        assert cmd[:2] == ["curl", "-L"]

    def test_none_available(self, tmp_path):
        with patch(f"{_MOD}.shutil.which", return_value=None):
            assert acquisition.download_command("u", tmp_path / "f") is None


class TestAcquire:
    def test_success_leaves_canonical_directory(self, ctx, settings):
        root = ctx.install_root
        with patch(f"{_MOD}.shutil.which", return_value="/usr/bin/wget"), \
             patch(f"{_MOD}.run_command", side_effect=_fake_transfer(root)) as run:
            result = acquisition.acquire(ctx, "main", settings)

        assert result.ok
        assert (root / "WRF" / "main").is_dir()
        assert not (root / "WRF-4.4.1").exists()
        url = run.call_args_list[0].args[0][-1]
        assert url == "https://github.com/wrf-model/WRF/archive/v4.4.1.tar.gz"

    def test_companion_uses_its_own_version(self, ctx, settings):
        settings = settings.model_copy(update={"companion_version": "4.5"})
        root = ctx.install_root
        with patch(f"{_MOD}.shutil.which", return_value="/usr/bin/wget"), \
             patch(f"{_MOD}.run_command",
                   side_effect=_fake_transfer(root, extracted="WPS-4.5")) as run:
            result = acquisition.acquire(ctx, "companion", settings)

        assert result.ok
        assert (root / "WPS").is_dir()
        assert run.call_args_list[0].args[0][-1].endswith("/WPS/archive/v4.5.tar.gz")

    def test_tolerates_existing_tree(self, ctx, settings):
        root = ctx.install_root
        stale = root / "WRF" / "stale.txt"
        stale.parent.mkdir()
        stale.write_text("old")
        with patch(f"{_MOD}.shutil.which", return_value="/usr/bin/wget"), \
             patch(f"{_MOD}.run_command", side_effect=_fake_transfer(root)):
            result = acquisition.acquire(ctx, "main", settings)

        assert result.ok
        assert not stale.exists()
        assert (root / "WRF" / "main").is_dir()

    def test_no_transport(self, ctx, settings):
        with patch(f"{_MOD}.shutil.which", return_value=None), \
             patch(f"{_MOD}.run_command") as run:
            result = acquisition.acquire(ctx, "main", settings)

        assert result.failed
        assert result.kind == "transport_unavailable"
        run.assert_not_called()

    def test_download_failure_reported_as_download(self, ctx, settings):
        with patch(f"{_MOD}.shutil.which", return_value="/usr/bin/wget"), \
             patch(f"{_MOD}.run_command",
                   side_effect=_fake_transfer(ctx.install_root, download_ok=False)):
            result = acquisition.acquire(ctx, "main", settings)

        assert result.failed
        assert result.details["step"] == "download"

    def test_extract_failure_reported_as_extract(self, ctx, settings):
        with patch(f"{_MOD}.shutil.which", return_value="/usr/bin/wget"), \
             patch(f"{_MOD}.run_command",
                   side_effect=_fake_transfer(ctx.install_root, extract_ok=False)):
            result = acquisition.acquire(ctx, "main", settings)

        assert result.failed
        assert result.details["step"] == "extract"
        assert "not in gzip format" in result.log_excerpt

    def test_unexpected_top_level_directory(self, ctx, settings):
        with patch(f"{_MOD}.shutil.which", return_value="/usr/bin/wget"), \
             patch(f"{_MOD}.run_command",
                   side_effect=_fake_transfer(ctx.install_root, extracted="WRF-master")):
            result = acquisition.acquire(ctx, "main", settings)

        assert result.failed
        assert result.details["step"] == "extract"
        assert "No such file or directory" in result.log_excerpt

    def test_rename_failure_reported_as_rename(self, ctx, settings):
        with patch(f"{_MOD}.shutil.which", return_value="/usr/bin/wget"), \
             patch(f"{_MOD}.run_command", side_effect=_fake_transfer(ctx.install_root)), \
             patch.object(Path, "rename", side_effect=PermissionError("Permission denied")):
            result = acquisition.acquire(ctx, "main", settings)

        assert result.failed
        assert result.details["step"] == "rename"
