"""Tests for settings read from the environment."""

import pytest
from pydantic import ValidationError

from deprun.analysis import PYPI_URL
from deprun.config import UpdaterSettings


class TestUpdaterSettings:
    """Test DEPRUN_* environment handling."""

    def test_defaults(self, monkeypatch):
        for name in ("API_URL", "JOB_ID", "PYPI_URL", "TIMEOUT", "PACKAGE_MANAGER", "LOG_LEVEL"):
            monkeypatch.delenv(f"DEPRUN_{name}", raising=False)

        settings = UpdaterSettings()

        assert settings.api_url is None
        assert settings.job_id is None
        assert settings.pypi_url == PYPI_URL
        assert settings.timeout == 30.0
        assert settings.package_manager == "pip"
        assert settings.log_level == "INFO"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("DEPRUN_API_URL", "https://api.example")
        monkeypatch.setenv("DEPRUN_JOB_ID", "42")
        monkeypatch.setenv("DEPRUN_TIMEOUT", "5")

        settings = UpdaterSettings()

        assert settings.api_url == "https://api.example"
        assert settings.job_id == "42"
        assert settings.timeout == 5.0

    def test_invalid_timeout(self, monkeypatch):
        monkeypatch.setenv("DEPRUN_TIMEOUT", "soon")

        with pytest.raises(ValidationError):
            UpdaterSettings()
