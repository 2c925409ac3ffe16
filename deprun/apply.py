"""Rewriting manifests to apply a chosen version change."""

import logging
import re
from pathlib import Path
from typing import Protocol

from .models import ErrorType, WireModel
from .paths import canonical_path
from .requirements import RequirementsParser

logger = logging.getLogger(__name__)


class UpdateOperationResult(WireModel):
    error_type: ErrorType | None = None
    error_details: str | None = None


class Applier(Protocol):
    async def apply(
        self,
        repo_root: Path,
        file_path: str,
        dependency_name: str,
        previous_version: str,
        new_version: str,
        is_transitive: bool,
    ) -> UpdateOperationResult: ...


class RequirementsApplier:
    """Apply pin updates to requirements files in place."""

    def __init__(self):
        self.parser = RequirementsParser()

    async def apply(
        self,
        repo_root: Path,
        file_path: str,
        dependency_name: str,
        previous_version: str,
        new_version: str,
        is_transitive: bool,
    ) -> UpdateOperationResult:
        """Rewrite ``dependency_name==previous_version`` to ``new_version``.

        Args:
            repo_root: Local checkout of the repository
            file_path: Canonical path of the requirements file
            dependency_name: Dependency to update
            previous_version: Currently pinned version
            new_version: Version to pin
            is_transitive: Whether the dependency is transitive

        Returns:
            Result with ``error_type`` set when nothing could be applied
        """
        path = canonical_path(file_path)
        local_path = Path(repo_root) / path.lstrip("/")
        if not local_path.is_file():
            return UpdateOperationResult(error_type=ErrorType.MISSING_FILE, error_details=path)

        if is_transitive:
            # requirements files only list direct dependencies
            return UpdateOperationResult(
                error_type=ErrorType.UPDATE_NOT_POSSIBLE,
                error_details=f"{dependency_name} is not declared in {path}",
            )

        try:
            content = local_path.read_bytes().decode("utf-8")
        except UnicodeDecodeError as e:
            return UpdateOperationResult(
                error_type=ErrorType.DEPENDENCY_FILE_NOT_PARSEABLE, error_details=str(e)
            )

        updated_content, replaced = self.update_content(
            content, dependency_name, previous_version, new_version
        )
        if not replaced:
            return UpdateOperationResult(
                error_type=ErrorType.UPDATE_NOT_POSSIBLE,
                error_details=f"No pin {dependency_name}=={previous_version} in {path}",
            )

        if updated_content != content:
            local_path.write_bytes(updated_content.encode("utf-8"))
            logger.info(
                "Updated %s from %s to %s in %s",
                dependency_name,
                previous_version,
                new_version,
                path,
            )

        return UpdateOperationResult(error_type=ErrorType.NONE)

    def update_content(
        self, content: str, dependency_name: str, previous_version: str, new_version: str
    ) -> tuple[str, int]:
        """Return the rewritten content and the number of pins replaced."""
        pin = re.compile(r"(===?\s*)" + re.escape(previous_version) + r"(?=[\s;,#]|$)")
        updated_lines = []
        replaced = 0

        for number, line in enumerate(content.splitlines(keepends=True), start=1):
            body = line.rstrip("\r\n")
            ending = line[len(body):]

            entry = self.parser.parse_line(body, number)
            if (
                entry is None
                or not entry.matches(dependency_name)
                or entry.pinned_version != previous_version
            ):
                updated_lines.append(line)
                continue

            # Preserve any trailing comments
            requirement, sep, comment = body.partition(" #")
            requirement, count = pin.subn(rf"\g<1>{new_version}", requirement, count=1)
            if count:
                logger.debug(
                    "Pinning %s to %s on line %d", entry.name, new_version, entry.line_number
                )
            replaced += count
            updated_lines.append(requirement + sep + comment + ending)

        return "".join(updated_lines), replaced
