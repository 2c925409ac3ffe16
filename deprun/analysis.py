"""Update analysis: can a dependency be upgraded, and to what version."""

import logging
from pathlib import Path
from typing import Protocol

import httpx
from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.utils import canonicalize_name
from packaging.version import InvalidVersion, Version
from pydantic import Field

from .discovery import DiscoveryResult
from .errors import ConfigurationError
from .job import SecurityAdvisory
from .models import ErrorType, WireModel

logger = logging.getLogger(__name__)

PYPI_URL = "https://pypi.org/pypi"


class DependencyInfo(WireModel):
    """The unit submitted to analysis, derived from one direct dependency."""

    name: str
    version: str
    is_vulnerable: bool = False
    ignored_versions: list[str] = Field(default_factory=list)
    vulnerabilities: list[SecurityAdvisory] = Field(default_factory=list)


class UpdatedDependency(WireModel):
    name: str
    version: str
    is_transitive: bool = False
    info_url: str | None = None


class AnalysisResult(WireModel):
    updated_version: str = ""
    can_update: bool = False
    version_comes_from_multi_dependency_property: bool = False
    updated_dependencies: list[UpdatedDependency] = Field(default_factory=list)
    error_type: ErrorType | None = None
    error_details: str | None = None


class Analyzer(Protocol):
    async def analyze(
        self, repo_root: Path, discovery: DiscoveryResult, info: DependencyInfo
    ) -> AnalysisResult: ...


class PackageNotFound(Exception):
    """The package index has no project with the requested name."""


class InvalidIndexResponse(Exception):
    """The package index answered with something other than project metadata."""


class PypiAnalyzer:
    """Analyzer backed by the PyPI JSON API."""

    def __init__(
        self,
        python_version: str | None = None,
        index_url: str = PYPI_URL,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize PyPI analyzer.

        Args:
            python_version: Target Python version (e.g., "3.11")
            index_url: Base URL of a PyPI-compatible JSON API
            timeout: Request timeout in seconds
            client: Optional shared HTTP client

        Raises:
            ConfigurationError: If ``python_version`` is not a valid version
        """
        self.target_python: Version | None = None
        if python_version:
            try:
                self.target_python = Version(python_version)
            except InvalidVersion:
                raise ConfigurationError(f"Invalid target Python version {python_version!r}")

        self.index_url = index_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._cache: dict[str, dict] = {}

    async def analyze(
        self, repo_root: Path, discovery: DiscoveryResult, info: DependencyInfo
    ) -> AnalysisResult:
        """Find the newest acceptable release of ``info.name``.

        Args:
            repo_root: Local checkout of the repository (unused for PyPI)
            discovery: Discovery result of the directory being updated
            info: Dependency to analyze

        Returns:
            Analysis result; lookup failures are classified, never raised
        """
        try:
            metadata = await self._fetch_package_metadata(info.name)
        except PackageNotFound:
            return AnalysisResult(
                error_type=ErrorType.UPDATE_NOT_POSSIBLE,
                error_details=f"Package {info.name} not found",
            )
        except (httpx.HTTPError, InvalidIndexResponse) as e:
            logger.warning("Unable to fetch metadata for %s: %s", info.name, e)
            return AnalysisResult(error_type=ErrorType.UNKNOWN, error_details=str(e))

        try:
            current = Version(info.version)
        except InvalidVersion:
            return AnalysisResult(
                error_type=ErrorType.UPDATE_NOT_POSSIBLE,
                error_details=f"Invalid version {info.version} for {info.name}",
            )

        candidates = self._candidate_versions(metadata, info.ignored_versions)
        if not candidates:
            return AnalysisResult(updated_version=info.version)

        latest = max(candidates)
        if latest <= current:
            return AnalysisResult(updated_version=info.version)

        return AnalysisResult(
            updated_version=str(latest),
            can_update=True,
            updated_dependencies=[
                UpdatedDependency(
                    name=info.name,
                    version=str(latest),
                    info_url=self._info_url(metadata, info.name),
                )
            ],
        )

    def _candidate_versions(self, metadata: dict, ignored_versions: list[str]) -> list[Version]:
        ignored: list[SpecifierSet] = []
        for requirement in ignored_versions:
            try:
                ignored.append(SpecifierSet(requirement))
            except InvalidSpecifier:
                logger.warning("Skipping invalid ignore condition %r", requirement)

        versions = []
        for version_str, files in metadata.get("releases", {}).items():
            try:
                version = Version(version_str)
            except InvalidVersion:
                continue  # Skip invalid versions

            if version.is_prerelease:
                continue
            if files and all(f.get("yanked", False) for f in files):
                continue
            if not self._is_compatible_with_python(files):
                continue
            if any(version in spec for spec in ignored):
                continue

            versions.append(version)

        return versions

    async def _fetch_package_metadata(self, package_name: str) -> dict:
        """Fetch package metadata from the index, caching per normalized name."""
        key = canonicalize_name(package_name)
        if key in self._cache:
            return self._cache[key]

        url = f"{self.index_url}/{package_name}/json"
        if self._client is not None:
            response = await self._client.get(url)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url)

        if response.status_code == 404:
            raise PackageNotFound(package_name)
        response.raise_for_status()

        try:
            metadata = response.json()
        except ValueError:
            raise InvalidIndexResponse(f"Metadata for {package_name} is not valid JSON")
        if not isinstance(metadata, dict) or not isinstance(metadata.get("releases", {}), dict):
            raise InvalidIndexResponse(f"Unexpected metadata shape for {package_name}")

        self._cache[key] = metadata
        return metadata

    def _is_compatible_with_python(self, release_files: list[dict]) -> bool:
        """Check if a release is compatible with the target Python version."""
        if self.target_python is None:
            return True  # No filtering if no target Python version

        target_version = self.target_python
        for file_info in release_files:
            requires_python = file_info.get("requires_python")
            if not requires_python:
                continue
            try:
                if target_version not in SpecifierSet(requires_python):
                    return False
            except InvalidSpecifier:
                continue  # Skip invalid requires_python specs

        return True

    def _info_url(self, metadata: dict, package_name: str) -> str:
        info = metadata.get("info") or {}
        return info.get("project_url") or info.get("package_url") or (
            f"https://pypi.org/project/{package_name}/"
        )
