"""Pytest configuration and fixtures."""

import json

import pytest


@pytest.fixture
def job_data():
    """Minimal job payload updating everything in /src."""
    return {
        "package-manager": "pip",
        "source": {"provider": "github", "repo": "test/repo", "directory": "/src"},
        "allowed-updates": [{"update-type": "all"}],
    }


@pytest.fixture
def job_file(tmp_path, job_data):
    """Write the job wrapper to a temporary file."""
    path = tmp_path / "job.json"
    path.write_text(json.dumps({"job": job_data}))
    return path


@pytest.fixture
def repo(tmp_path):
    """Repository checkout with one requirements file in /src."""
    root = tmp_path / "repo"
    (root / "src").mkdir(parents=True)
    (root / "src" / "requirements.txt").write_text("fastapi==1.0.0\nuvicorn>=0.18.0\n")
    return root
