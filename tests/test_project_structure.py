"""Test that project structure is correct and modules can be imported."""

import deprun.api
import deprun.discovery
import deprun.job
import deprun.models
import deprun.pipeline
from deprun.job import Job, JobSource
from deprun.models import DependencyFile, RunResult


def test_core_modules_importable():
    """Ensure core modules can be imported."""
    assert hasattr(deprun.models, "RunResult")
    assert hasattr(deprun.models, "ReportedDependency")
    assert hasattr(deprun.job, "load_job")
    assert hasattr(deprun.pipeline, "UpdateRunner")
    assert hasattr(deprun.discovery, "DiscoveryResult")
    assert hasattr(deprun.api, "ApiHandler")


def test_model_creation():
    """Test that basic models can be instantiated."""
    job = Job(package_manager="pip", source=JobSource(directory="/src"))
    assert job.package_manager == "pip"
    assert job.source.directory == "/src"

    result = RunResult(
        base64_dependency_files=[DependencyFile(name="requirements.txt", content="")],
        base_commit_sha="abc123",
    )
    assert result.base_commit_sha == "abc123"
    assert len(result.base64_dependency_files) == 1
