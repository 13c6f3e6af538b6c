"""
Tests for the artifact verifier.
"""

from __future__ import annotations

from wrfbuild.core.services.build.execution.verification import expected_artifacts, verify

_MAIN = ("main/wrf.exe", "main/real.exe", "main/ndown.exe", "main/tc.exe")
_COMPANION = ("geogrid.exe", "metgrid.exe", "ungrib.exe")


def _touch(root, rels):
    for rel in rels:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("")


class TestVerify:
    def test_all_present(self, ctx, settings, caplog):
        _touch(ctx.install_root / "WRF", _MAIN)
        result = verify(ctx, settings)
        assert result.ok
        assert "Found WRF/main/wrf.exe" in caplog.text

    def test_one_missing_is_failure(self, ctx, settings):
        _touch(ctx.install_root / "WRF", _MAIN[:-1])
        result = verify(ctx, settings)
        assert result.failed
        assert result.kind == "verification_gap"
        assert result.details["missing"] == ["WRF/main/tc.exe"]
        assert result.reason.startswith("1 expected")

    def test_companion_checked_only_when_built(self, ctx, settings):
        _touch(ctx.install_root / "WRF", _MAIN)
        (ctx.install_root / "WPS").mkdir()

        assert verify(ctx, settings).ok

        ctx.companion_built = True
        result = verify(ctx, settings)
        assert result.failed
        assert len(result.details["missing"]) == 3

    def test_companion_present(self, ctx, settings):
        _touch(ctx.install_root / "WRF", _MAIN)
        _touch(ctx.install_root / "WPS", _COMPANION)
        ctx.companion_built = True
        assert verify(ctx, settings).ok

    def test_expected_list(self, ctx, settings):
        assert len(expected_artifacts(ctx, settings)) == 4
        ctx.companion_built = True
        assert expected_artifacts(ctx, settings)[-1] == "WPS/ungrib.exe"
