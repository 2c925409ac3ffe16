"""Multi-directory update orchestration.

For every directory named by a job: discover, report the current dependency
list, analyze and apply updates one dependency at a time, detect which files
actually changed, submit a pull request payload, and mark the directory as
processed. Per-directory results are then merged into one run result.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from packaging.utils import canonicalize_name

from . import messages
from .analysis import AnalysisResult, Analyzer, DependencyInfo
from .api import ApiHandler
from .apply import Applier
from .discovery import TOOLCHAIN_DEPENDENCY, Discoverer, DiscoveryResult
from .job import PACKAGE_MANAGER, Job, read_job_file
from .models import (
    CreatePullRequest,
    DependencyFile,
    IncrementMetric,
    MarkAsProcessed,
    ReportedDependency,
    ReportedRequirement,
    RequirementSource,
    RunResult,
    UpdatedDependencyList,
    is_error,
)
from .paths import canonical_path, split_canonical
from .serialization import DEFAULT_WIRE_FORMAT, WireFormat
from .snapshot import build_dependency_list, find_reported

logger = logging.getLogger(__name__)

METRIC_STARTED = "updater.started"
METRIC_DISCOVERY_FAILED = "updater.discovery_failed"
OPERATION_UPDATE_ALL = "group_update_all_versions"


@dataclass
class DirectoryOutcome:
    """Everything one directory produced; nothing here is shared across directories."""

    directory: str
    run_result: RunResult
    updated_dependencies: list[ReportedDependency] = field(default_factory=list)
    updated_files: list[DependencyFile] = field(default_factory=list)
    pull_request: CreatePullRequest | None = None


def merge_results(results: Iterable[RunResult], base_commit_sha: str) -> RunResult:
    """Merge per-directory results; a later file with the same name wins."""
    files: dict[str, DependencyFile] = {}
    for result in results:
        for dependency_file in result.base64_dependency_files:
            files[dependency_file.name] = dependency_file

    return RunResult(
        base64_dependency_files=list(files.values()),
        base_commit_sha=base_commit_sha,
    )


class UpdateRunner:
    """Run a job's update workflow across all of its directories."""

    def __init__(
        self,
        api: ApiHandler,
        discoverer: Discoverer,
        analyzer: Analyzer,
        applier: Applier,
        wire_format: WireFormat = DEFAULT_WIRE_FORMAT,
    ):
        self.api = api
        self.discoverer = discoverer
        self.analyzer = analyzer
        self.applier = applier
        self.wire_format = wire_format

    async def run_file(
        self,
        job_path: Path,
        repo_root: Path,
        base_commit_sha: str,
        output_path: Path,
        package_manager: str = PACKAGE_MANAGER,
    ) -> RunResult:
        """Load a job file, run it, and write the result JSON to ``output_path``."""
        job_file = read_job_file(job_path, self.wire_format, package_manager)
        result = await self.run(job_file.job, repo_root, base_commit_sha)
        Path(output_path).write_text(self.wire_format.dump(result), encoding="utf-8")
        return result

    async def run(self, job: Job, repo_root: Path, base_commit_sha: str) -> RunResult:
        """Process every job directory in order and merge their results."""
        results = []
        for directory in job.all_directories():
            outcome = await self.run_directory(job, repo_root, directory, base_commit_sha)
            results.append(outcome.run_result)

        return merge_results(results, base_commit_sha)

    async def run_directory(
        self, job: Job, repo_root: Path, directory: str, base_commit_sha: str
    ) -> DirectoryOutcome:
        """Run the update workflow for a single directory.

        Args:
            job: Job being run
            repo_root: Local checkout of the repository
            directory: Repository-relative directory to update
            base_commit_sha: Commit the changes apply against

        Returns:
            The directory's outcome; its run result holds the original
            content of every project file that was considered for update
        """
        repo_root = Path(repo_root)
        discovery = await self.discoverer.discover(repo_root, directory)
        logger.debug("Discovery JSON content:\n%s", self.wire_format.dump(discovery))

        dependency_list = build_dependency_list(discovery)
        await self.api.update_dependency_list(dependency_list)

        original_contents: dict[str, str] = {}
        updated_dependencies: list[ReportedDependency] = []
        updated_files: list[DependencyFile] = []
        pull_request = None

        if is_error(discovery.error_type):
            logger.warning(
                "Discovery failed in %s (%s: %s), skipping updates",
                discovery.path,
                discovery.error_type.value,
                discovery.error_details,
            )
            await self.api.increment_metric(
                IncrementMetric(
                    metric=METRIC_DISCOVERY_FAILED,
                    tags={"error-type": discovery.error_type.value},
                )
            )
        elif job.updates_all():
            await self.api.increment_metric(
                IncrementMetric(metric=METRIC_STARTED, tags={"operation": OPERATION_UPDATE_ALL})
            )

            # track original contents for change detection
            for project in discovery.projects:
                path = canonical_path(project.file_path, discovery.path)
                original_contents[path] = self._read(repo_root, path)

            logger.info("Running update in directory %s", discovery.path)
            updated_dependencies = await self._update_dependencies(
                job, repo_root, discovery, dependency_list
            )
            updated_files = self._changed_files(repo_root, discovery, original_contents)

            if updated_files:
                pull_request = CreatePullRequest(
                    dependencies=updated_dependencies,
                    updated_dependency_files=updated_files,
                    base_commit_sha=base_commit_sha,
                    commit_message=messages.commit_message(
                        updated_dependencies, discovery.path, job.commit_message_options
                    ),
                    pr_title=messages.pr_title(
                        updated_dependencies, discovery.path, job.commit_message_options
                    ),
                    pr_body=messages.pr_body(updated_dependencies, discovery.path),
                )
                await self.api.create_pull_request(pull_request)
                logger.info(
                    "Updated %d dependencies in %s: %s",
                    len(updated_dependencies),
                    discovery.path,
                    ", ".join(f"{d.name} {d.version}" for d in updated_dependencies),
                )
            else:
                logger.info("No dependency files changed in %s", discovery.path)
        else:
            logger.info("Job does not request a full update, not updating %s", discovery.path)

        await self.api.mark_as_processed(MarkAsProcessed(base_commit_sha=base_commit_sha))

        files = []
        for path, content in original_contents.items():
            file_directory, name = split_canonical(path)
            files.append(DependencyFile.from_text(name, content, file_directory, encode=True))

        return DirectoryOutcome(
            directory=directory,
            run_result=RunResult(base64_dependency_files=files, base_commit_sha=base_commit_sha),
            updated_dependencies=updated_dependencies,
            updated_files=updated_files,
            pull_request=pull_request,
        )

    async def _update_dependencies(
        self,
        job: Job,
        repo_root: Path,
        discovery: DiscoveryResult,
        dependency_list: UpdatedDependencyList,
    ) -> list[ReportedDependency]:
        updated: list[ReportedDependency] = []
        for project in discovery.projects:
            file = canonical_path(project.file_path, discovery.path)
            for dependency in project.dependencies:
                if dependency.is_transitive:
                    continue
                if dependency.name.lower() == TOOLCHAIN_DEPENDENCY:
                    # the toolchain itself can't be updated
                    continue
                if dependency.version is None:
                    # if we don't know the version, there's nothing we can do
                    logger.debug("Skipping %s in %s: unknown version", dependency.name, file)
                    continue

                vulnerabilities = job.vulnerabilities(dependency.name)
                info = DependencyInfo(
                    name=dependency.name,
                    version=dependency.version,
                    is_vulnerable=bool(vulnerabilities),
                    ignored_versions=job.ignored_versions(dependency.name),
                    vulnerabilities=vulnerabilities,
                )
                analysis = await self.analyzer.analyze(repo_root, discovery, info)
                if is_error(analysis.error_type):
                    logger.warning(
                        "Analysis of %s failed (%s): %s",
                        dependency.name,
                        analysis.error_type.value,
                        analysis.error_details,
                    )
                    continue
                if not analysis.can_update:
                    logger.debug("%s %s is up to date", dependency.name, dependency.version)
                    continue

                previous = find_reported(dependency_list, dependency.name, file)
                updated_dependency = ReportedDependency(
                    name=dependency.name,
                    version=analysis.updated_version,
                    requirements=[
                        ReportedRequirement(
                            requirement=analysis.updated_version,
                            file=file,
                            groups=previous.requirements[0].groups,
                            source=RequirementSource(
                                source_url=self._source_url(analysis, dependency.name)
                            ),
                        )
                    ],
                    previous_version=dependency.version,
                    previous_requirements=previous.requirements,
                )

                result = await self.applier.apply(
                    repo_root,
                    file,
                    dependency.name,
                    dependency.version,
                    analysis.updated_version,
                    is_transitive=False,
                )
                # every error type is treated alike: the dependency is not counted
                if is_error(result.error_type):
                    logger.warning(
                        "Unable to update %s in %s (%s): %s",
                        dependency.name,
                        file,
                        result.error_type.value,
                        result.error_details,
                    )
                    continue

                updated.append(updated_dependency)

        return updated

    def _changed_files(
        self, repo_root: Path, discovery: DiscoveryResult, original_contents: dict[str, str]
    ) -> list[DependencyFile]:
        changed = []
        for project in discovery.projects:
            path = canonical_path(project.file_path, discovery.path)
            updated_content = self._read(repo_root, path)
            if updated_content != original_contents[path]:
                changed.append(
                    DependencyFile(
                        name=canonical_path(project.file_path).lstrip("/"),
                        content=updated_content,
                        directory=canonical_path(discovery.path),
                    )
                )
        return changed

    def _read(self, repo_root: Path, path: str) -> str:
        return (repo_root / path.lstrip("/")).read_bytes().decode("utf-8")

    def _source_url(self, analysis: AnalysisResult, name: str) -> str | None:
        for candidate in analysis.updated_dependencies:
            if canonicalize_name(candidate.name) == canonicalize_name(name):
                return candidate.info_url
        return None
