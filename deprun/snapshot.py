"""Current dependency list reported before any update is attempted."""

from .discovery import DiscoveryResult
from .errors import MissingReportedDependencyError
from .models import ReportedDependency, ReportedRequirement, UpdatedDependencyList
from .paths import canonical_path

DEPENDENCY_GROUP = "dependencies"


def build_dependency_list(discovery: DiscoveryResult) -> UpdatedDependencyList:
    """Convert a discovery result into the wire-level dependency list.

    Every dependency with a known version is reported. Direct dependencies
    carry one requirement pointing at their canonical file; transitive ones
    carry none since they cannot be edited directly.

    Args:
        discovery: Discovery result for one directory

    Returns:
        Dependency list plus every dependency file path, canonicalized
    """
    dependencies: list[ReportedDependency] = []
    for project in discovery.projects:
        file = canonical_path(project.file_path, discovery.path)
        for dependency in project.dependencies:
            if dependency.version is None:
                continue

            requirements = []
            if not dependency.is_transitive:
                requirements.append(
                    ReportedRequirement(
                        requirement=dependency.version,
                        file=file,
                        groups=[DEPENDENCY_GROUP],
                    )
                )

            dependencies.append(
                ReportedDependency(
                    name=dependency.name,
                    version=dependency.version,
                    requirements=requirements,
                )
            )

    dependency_files = [
        canonical_path(project.file_path, discovery.path) for project in discovery.projects
    ]
    for auxiliary in (
        discovery.tool_versions_file,
        discovery.global_config_file,
        discovery.central_versions_file,
    ):
        if auxiliary is not None:
            dependency_files.append(canonical_path(auxiliary.file_path, discovery.path))

    return UpdatedDependencyList(dependencies=dependencies, dependency_files=dependency_files)


def find_reported(
    dependency_list: UpdatedDependencyList, name: str, file: str
) -> ReportedDependency:
    """Find the single reported direct dependency ``name`` declared in ``file``."""
    matches = [
        dependency
        for dependency in dependency_list.dependencies
        if dependency.name == name
        and len(dependency.requirements) == 1
        and dependency.requirements[0].file == file
    ]
    if len(matches) != 1:
        raise MissingReportedDependencyError(name, file, len(matches))
    return matches[0]
