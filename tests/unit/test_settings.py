"""Tests for ProgressSettings — env-driven settings."""

from __future__ import annotations

from progresslog.config import ProgressSettings


class TestProgressSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PROGRESS_STEP_ID", raising=False)
        settings = ProgressSettings(_env_file=None)
        assert settings.step_id is None
        assert settings.squelch is None
        assert settings.precision is None
        assert settings.log_level == "WARNING"
        assert settings.refresh_hz == 2.0

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("PROGRESS_STEP_ID", "job.sub")
        monkeypatch.setenv("PROGRESS_SQUELCH", "0.05")
        monkeypatch.setenv("PROGRESS_REFRESH_HZ", "5")
        settings = ProgressSettings(_env_file=None)
        assert settings.step_id == "job.sub"
        assert settings.squelch == 0.05
        assert settings.refresh_hz == 5.0
