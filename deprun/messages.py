"""Commit message and pull request text for a set of updates."""

from .job import CommitMessageOptions
from .models import ReportedDependency


def _source_url(dependency: ReportedDependency) -> str | None:
    for requirement in dependency.requirements:
        if requirement.source and requirement.source.source_url:
            return requirement.source.source_url
    return None


def pr_title(
    dependencies: list[ReportedDependency],
    directory: str,
    options: CommitMessageOptions | None = None,
) -> str:
    """Title shared by the pull request and the commit."""
    if not dependencies:
        title = f"Update dependency files in {directory}"
    elif len(dependencies) == 1:
        dep = dependencies[0]
        title = f"Bump {dep.name} from {dep.previous_version} to {dep.version}"
    else:
        title = f"Bump {len(dependencies)} dependencies in {directory}"

    if directory != "/" and len(dependencies) == 1:
        title += f" in {directory}"

    if options and options.prefix:
        prefix = options.prefix.rstrip(":")
        if options.include_scope:
            prefix += "(deps)"
        title = f"{prefix}: {title}"

    return title


def commit_message(
    dependencies: list[ReportedDependency],
    directory: str,
    options: CommitMessageOptions | None = None,
) -> str:
    lines = [pr_title(dependencies, directory, options), ""]
    for dep in dependencies:
        lines.append(f"Updates {dep.name} from {dep.previous_version} to {dep.version}")
    return "\n".join(lines)


def pr_body(dependencies: list[ReportedDependency], directory: str) -> str:
    """Markdown body listing every update."""
    body = f"""## Dependency Updates

Updates the requirements on `{directory}`:

"""
    for dep in dependencies:
        line = f"- **{dep.name}** from `{dep.previous_version}` to `{dep.version}`"
        url = _source_url(dep)
        if url:
            line += f" ([release info]({url}))"
        body += line + "\n"

    body += """
---
*Created automatically by DepRun*
"""
    return body
