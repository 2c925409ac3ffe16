"""Tests for commit message and pull request text."""

from deprun.job import CommitMessageOptions
from deprun.messages import commit_message, pr_body, pr_title
from deprun.models import ReportedDependency, ReportedRequirement, RequirementSource


def _dependency(name: str, previous: str, version: str, url: str | None = None):
    return ReportedDependency(
        name=name,
        version=version,
        previous_version=previous,
        requirements=[
            ReportedRequirement(
                requirement=version,
                file="/requirements.txt",
                source=RequirementSource(source_url=url),
            )
        ],
    )


class TestMessages:
    """Test generated pull request text."""

    def test_single_dependency_title(self):
        deps = [_dependency("flask", "2.0.0", "3.0.0")]
        assert pr_title(deps, "/") == "Bump flask from 2.0.0 to 3.0.0"
        assert pr_title(deps, "/api") == "Bump flask from 2.0.0 to 3.0.0 in /api"

    def test_group_title(self):
        deps = [_dependency("flask", "2.0.0", "3.0.0"), _dependency("click", "7.0", "8.1.7")]
        assert pr_title(deps, "/api") == "Bump 2 dependencies in /api"

    def test_title_without_counted_updates(self):
        assert pr_title([], "/api") == "Update dependency files in /api"
        assert pr_title([], "/", CommitMessageOptions(prefix="deps")) == (
            "deps: Update dependency files in /"
        )

    def test_prefix(self):
        deps = [_dependency("flask", "2.0.0", "3.0.0")]
        assert pr_title(deps, "/", CommitMessageOptions(prefix="deps:")) == (
            "deps: Bump flask from 2.0.0 to 3.0.0"
        )
        assert pr_title(deps, "/", CommitMessageOptions(prefix="chore", include_scope=True)) == (
            "chore(deps): Bump flask from 2.0.0 to 3.0.0"
        )

    def test_commit_message_lists_updates(self):
        deps = [_dependency("flask", "2.0.0", "3.0.0"), _dependency("click", "7.0", "8.1.7")]

        message = commit_message(deps, "/")

        assert message.splitlines() == [
            "Bump 2 dependencies in /",
            "",
            "Updates flask from 2.0.0 to 3.0.0",
            "Updates click from 7.0 to 8.1.7",
        ]

    def test_body_links_sources(self):
        deps = [
            _dependency("flask", "2.0.0", "3.0.0", "https://pypi.org/project/flask/"),
            _dependency("click", "7.0", "8.1.7"),
        ]

        body = pr_body(deps, "/")

        assert "**flask** from `2.0.0` to `3.0.0`" in body
        assert "(https://pypi.org/project/flask/)" in body
        assert "**click** from `7.0` to `8.1.7`\n" in body
