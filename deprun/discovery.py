"""Dependency discovery for a repository directory."""

import logging
from pathlib import Path
from typing import Protocol

from pydantic import Field

from .detect import CENTRAL_VERSIONS, GLOBAL_CONFIG, MANIFEST, TOOL_VERSIONS, file_role
from .models import ErrorType, WireModel
from .paths import canonical_path
from .requirements import parse_requirements

logger = logging.getLogger(__name__)

# Pseudo-dependency standing for the interpreter itself; never updatable
TOOLCHAIN_DEPENDENCY = "python"


class Dependency(WireModel):
    name: str
    version: str | None = None
    is_transitive: bool = False


class ProjectDiscoveryResult(WireModel):
    """A manifest file and the dependencies it declares."""

    file_path: str  # relative to DiscoveryResult.path
    dependencies: list[Dependency] = Field(default_factory=list)


class AuxiliaryFile(WireModel):
    file_path: str


class DiscoveryResult(WireModel):
    """Snapshot of one repository directory."""

    path: str
    projects: list[ProjectDiscoveryResult] = Field(default_factory=list)
    tool_versions_file: AuxiliaryFile | None = None
    global_config_file: AuxiliaryFile | None = None
    central_versions_file: AuxiliaryFile | None = None
    error_type: ErrorType | None = None
    error_details: str | None = None


class Discoverer(Protocol):
    async def discover(self, repo_root: Path, directory: str) -> DiscoveryResult: ...


class RequirementsDiscoverer:
    """Discover requirements files in a single directory (non-recursive)."""

    async def discover(self, repo_root: Path, directory: str) -> DiscoveryResult:
        """Enumerate the manifests and auxiliary files in ``directory``.

        Args:
            repo_root: Local checkout of the repository
            directory: Repository-relative directory to inspect

        Returns:
            Discovery result; failures are reported through ``error_type``
        """
        path = canonical_path(directory)
        local_dir = Path(repo_root) / path.lstrip("/")
        if not local_dir.is_dir():
            logger.warning("Directory %s not found in %s", path, repo_root)
            return DiscoveryResult(
                path=path,
                error_type=ErrorType.MISSING_FILE,
                error_details=path,
            )

        result = DiscoveryResult(path=path)
        manifests: list[Path] = []
        for child in sorted(local_dir.iterdir(), key=lambda p: p.name):
            if not child.is_file():
                continue

            role = file_role(child.name)
            if role == MANIFEST:
                manifests.append(child)
            elif role == TOOL_VERSIONS:
                result.tool_versions_file = AuxiliaryFile(file_path=child.name)
            elif role == GLOBAL_CONFIG:
                result.global_config_file = AuxiliaryFile(file_path=child.name)
            elif role == CENTRAL_VERSIONS:
                result.central_versions_file = AuxiliaryFile(file_path=child.name)

        toolchain = self._toolchain_dependency(local_dir, result)

        for manifest in manifests:
            try:
                content = manifest.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Unable to read %s: %s", manifest, e)
                result.error_type = ErrorType.DEPENDENCY_FILE_NOT_PARSEABLE
                result.error_details = canonical_path(manifest.name, path)
                continue

            dependencies = [
                Dependency(name=entry.name, version=entry.pinned_version)
                for entry in parse_requirements(content)
            ]
            if toolchain:
                dependencies.append(toolchain)

            result.projects.append(
                ProjectDiscoveryResult(file_path=manifest.name, dependencies=dependencies)
            )

        return result

    def _toolchain_dependency(
        self, local_dir: Path, result: DiscoveryResult
    ) -> Dependency | None:
        if result.tool_versions_file is None:
            return None

        try:
            lines = (local_dir / result.tool_versions_file.file_path).read_text().splitlines()
        except OSError:
            return None

        version = lines[0].strip() if lines else ""
        return Dependency(name=TOOLCHAIN_DEPENDENCY, version=version or None)
