"""Job description: what to update, where, and how to report it."""

import logging
from pathlib import Path

from packaging.utils import canonicalize_name
from pydantic import ConfigDict, Field, JsonValue, ValidationError

from .errors import JobParseError, PackageManagerMismatchError
from .models import WireModel
from .serialization import DEFAULT_WIRE_FORMAT, WireFormat

logger = logging.getLogger(__name__)

PACKAGE_MANAGER = "pip"
DEFAULT_DIRECTORY = "/"
UPDATE_TYPE_ALL = "all"


class JobModel(WireModel):
    """Job payloads are read-only once parsed."""

    model_config = ConfigDict(frozen=True)


class JobSource(JobModel):
    provider: str = "github"
    repo: str = ""
    directory: str | None = None
    directories: list[str] | None = None
    branch: str | None = None
    commit: str | None = None
    hostname: str | None = None
    api_endpoint: str | None = None


class AllowedUpdate(JobModel):
    dependency_type: str | None = None  # direct, indirect, all, production, development
    dependency_name: str | None = None
    update_type: str | None = None  # all, security


class DependencyGroup(JobModel):
    name: str
    applies_to: str | None = None
    rules: dict[str, JsonValue] = Field(default_factory=dict)


class ExistingPullRequestDependency(JobModel):
    dependency_name: str
    dependency_version: str | None = None
    directory: str | None = None


class ExistingGroupPullRequest(JobModel):
    dependency_group_name: str
    dependencies: list[ExistingPullRequestDependency] = Field(default_factory=list)


class IgnoreCondition(JobModel):
    dependency_name: str
    source: str | None = None
    version_requirement: str | None = None
    update_types: list[str] | None = None
    updated_at: str | None = None


class SecurityAdvisory(JobModel):
    dependency_name: str
    affected_versions: list[str] = Field(default_factory=list)
    patched_versions: list[str] = Field(default_factory=list)
    unaffected_versions: list[str] = Field(default_factory=list)


class CommitMessageOptions(JobModel):
    prefix: str | None = None
    prefix_development: str | None = None
    include_scope: bool | None = None


class CredentialMetadata(JobModel):
    type: str
    host: str | None = None
    url: str | None = None
    registry: str | None = None
    replaces_base: bool | None = None


class Job(JobModel):
    """Immutable configuration for one update run."""

    package_manager: str
    source: JobSource
    allowed_updates: list[AllowedUpdate] = Field(default_factory=list)
    debug: bool = False
    dependency_groups: list[DependencyGroup] | None = None
    dependencies: list[str] | None = None
    dependency_group_to_refresh: str | None = None
    existing_pull_requests: list[list[ExistingPullRequestDependency]] | None = None
    existing_group_pull_requests: list[ExistingGroupPullRequest] | None = None
    experiments: dict[str, bool | int | str] | None = None
    ignore_conditions: list[IgnoreCondition] | None = None
    lockfile_only: bool = False
    requirements_update_strategy: str | None = None
    security_advisories: list[SecurityAdvisory] | None = None
    security_updates_only: bool = False
    update_subdependencies: bool = False
    updating_a_pull_request: bool = False
    vendor_dependencies: bool = False
    reject_external_code: bool = False
    repo_private: bool = False
    commit_message_options: CommitMessageOptions | None = None
    credentials_metadata: list[CredentialMetadata] | None = None
    max_updater_run_time: int = 0

    def all_directories(self) -> list[str]:
        """Directories to process, in declaration order; never empty."""
        directories: list[str] = []
        if self.source.directory is not None:
            directories.append(self.source.directory)
        directories.extend(self.source.directories or [])

        if not directories:
            directories.append(DEFAULT_DIRECTORY)
        return directories

    def updates_all(self) -> bool:
        """True when the job asks for a full, non-targeted update."""
        return any(update.update_type == UPDATE_TYPE_ALL for update in self.allowed_updates)

    def ignored_versions(self, dependency_name: str) -> list[str]:
        name = canonicalize_name(dependency_name)
        return [
            condition.version_requirement
            for condition in self.ignore_conditions or []
            if condition.version_requirement
            and canonicalize_name(condition.dependency_name) == name
        ]

    def vulnerabilities(self, dependency_name: str) -> list[SecurityAdvisory]:
        name = canonicalize_name(dependency_name)
        return [
            advisory
            for advisory in self.security_advisories or []
            if canonicalize_name(advisory.dependency_name) == name
        ]


class JobFile(JobModel):
    """Wire-level wrapper around a job."""

    job: Job


def load_job(
    text: str | bytes,
    wire_format: WireFormat = DEFAULT_WIRE_FORMAT,
    package_manager: str = PACKAGE_MANAGER,
) -> JobFile:
    """Parse a job wrapper and check it targets this updater.

    Args:
        text: JSON job wrapper ``{"job": {...}}``
        wire_format: Serialization settings
        package_manager: Identifier this updater implements

    Returns:
        Parsed job file

    Raises:
        JobParseError: The text is not a valid job wrapper
        PackageManagerMismatchError: The job targets another package manager
    """
    try:
        job_file = wire_format.load(JobFile, text)
    except ValidationError as e:
        raise JobParseError(f"Unable to deserialize job wrapper: {e}") from e

    check_package_manager(job_file.job, package_manager)
    logger.debug("Loaded job for %s", job_file.job.all_directories())
    return job_file


def check_package_manager(job: Job, package_manager: str = PACKAGE_MANAGER) -> None:
    """Raise PackageManagerMismatchError unless ``job`` targets ``package_manager``."""
    if job.package_manager != package_manager:
        raise PackageManagerMismatchError(package_manager, job.package_manager)


def read_job_file(
    path: Path,
    wire_format: WireFormat = DEFAULT_WIRE_FORMAT,
    package_manager: str = PACKAGE_MANAGER,
) -> JobFile:
    """Read and validate a job file from disk."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise JobParseError(f"Unable to read job file {path}: {e}") from e

    return load_job(text, wire_format, package_manager)
