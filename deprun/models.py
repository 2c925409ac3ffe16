"""Core data models for DepRun.

These are the payloads exchanged with the reporting API and written to the
run output file. Field names are snake_case in Python and kebab-case on the
wire.
"""

import base64
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, JsonValue

from .serialization import to_kebab


class WireModel(BaseModel):
    """Base for every model that is serialized to or from JSON."""

    model_config = ConfigDict(
        alias_generator=to_kebab,
        populate_by_name=True,
        extra="ignore",
    )


class ErrorType(str, Enum):
    """Failure classification reported by discovery, analysis and apply."""

    NONE = "None"
    AUTHENTICATION_FAILURE = "AuthenticationFailure"
    MISSING_FILE = "MissingFile"
    UPDATE_NOT_POSSIBLE = "UpdateNotPossible"
    DEPENDENCY_FILE_NOT_PARSEABLE = "DependencyFileNotParseable"
    UNKNOWN = "Unknown"


def is_error(error_type: ErrorType | None) -> bool:
    """True when a collaborator reported anything other than success."""
    return error_type is not None and error_type != ErrorType.NONE


class DependencyFile(WireModel):
    """A dependency file as sent to the API or written to the run output."""

    name: str
    content: str
    directory: str = "/"
    type: str = "file"
    support_file: bool = False
    content_encoding: str = "utf-8"  # utf-8, base64
    deleted: bool = False
    operation: str = "update"  # update, create, delete

    @classmethod
    def from_text(
        cls, name: str, content: str, directory: str = "/", encode: bool = False
    ) -> "DependencyFile":
        if encode:
            return cls(
                name=name,
                content=base64.b64encode(content.encode("utf-8")).decode("ascii"),
                directory=directory,
                content_encoding="base64",
            )
        return cls(name=name, content=content, directory=directory)

    def decoded_content(self) -> str:
        if self.content_encoding == "base64":
            return base64.b64decode(self.content).decode("utf-8")
        return self.content


class RunResult(WireModel):
    """Terminal artifact of a run: the files it touched and the base commit."""

    base64_dependency_files: list[DependencyFile] = Field(default_factory=list)
    base_commit_sha: str


class RequirementSource(WireModel):
    source_url: str | None = None


class ReportedRequirement(WireModel):
    """One requirement string for a dependency in one file."""

    requirement: str
    file: str
    groups: list[str] = Field(default_factory=list)
    source: RequirementSource | None = None


class ReportedDependency(WireModel):
    """Current or updated state of one dependency, unique by (name, file)."""

    name: str
    version: str | None = None
    requirements: list[ReportedRequirement] = Field(default_factory=list)
    previous_version: str | None = None
    previous_requirements: list[ReportedRequirement] | None = None


class UpdatedDependencyList(WireModel):
    dependencies: list[ReportedDependency] = Field(default_factory=list)
    dependency_files: list[str] = Field(default_factory=list)


class CreatePullRequest(WireModel):
    """Payload submitted when at least one file in a directory changed."""

    dependencies: list[ReportedDependency]
    updated_dependency_files: list[DependencyFile]
    base_commit_sha: str
    commit_message: str
    pr_title: str
    pr_body: str
    dependency_group: dict[str, JsonValue] | None = None


class MarkAsProcessed(WireModel):
    base_commit_sha: str


class IncrementMetric(WireModel):
    metric: str
    tags: dict[str, str] = Field(default_factory=dict)
