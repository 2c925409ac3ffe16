"""Python requirements.txt parsing."""

import re
from dataclasses import dataclass

from packaging.requirements import InvalidRequirement, Requirement
from packaging.utils import canonicalize_name


@dataclass
class RequirementLine:
    """A single registry requirement found in a requirements file."""

    name: str
    line_number: int
    spec: str | None = None

    @property
    def pinned_version(self) -> str | None:
        """The exact version for ``name==X`` pins, otherwise None."""
        if not self.spec or "," in self.spec:
            return None
        match = re.fullmatch(r"===?\s*([^\s*]+)", self.spec)
        return match.group(1) if match else None

    def matches(self, name: str) -> bool:
        return canonicalize_name(self.name) == canonicalize_name(name)


class RequirementsParser:
    """Parser for Python requirements.txt files."""

    def __init__(self):
        # Patterns for lines to skip
        self.skip_patterns = [
            r"^\s*#",  # Comment lines
            r"^-e\s+",  # Editable installs
            r"^(git|hg|svn|bzr)\+",  # VCS URLs
            r"^(https?|file)://",  # Direct URLs
            r"^\.{0,2}/",  # Local paths
            r"^-[rcf]\s+",  # Includes, constraints, find links
            r"^--",  # Other pip options
        ]

    def _should_skip_line(self, line: str) -> bool:
        stripped = line.strip()
        if not stripped:
            return True

        return any(re.match(pattern, stripped) for pattern in self.skip_patterns)

    def parse_line(self, line: str, line_number: int = 0) -> RequirementLine | None:
        """Parse one line, returning None for anything that is not a registry requirement."""
        if self._should_skip_line(line):
            return None

        # Inline comments stay in the file, they just aren't part of the requirement
        line_for_parsing = line.split(" #")[0].split("\t#")[0].strip()
        if not line_for_parsing:
            return None

        try:
            req = Requirement(line_for_parsing)
        except InvalidRequirement:
            return None

        if req.url:
            return None

        return RequirementLine(
            name=req.name,
            line_number=line_number,
            spec=str(req.specifier) if req.specifier else None,
        )

    def parse(self, content: str) -> list[RequirementLine]:
        entries: list[RequirementLine] = []

        for line_number, line in enumerate(content.splitlines(), start=1):
            entry = self.parse_line(line, line_number)
            if entry:
                entries.append(entry)

        return entries


def parse_requirements(content: str) -> list[RequirementLine]:
    """Parse requirements.txt content into its registry requirements.

    Args:
        content: The requirements.txt file content

    Returns:
        Requirements in file order
    """
    parser = RequirementsParser()
    return parser.parse(content)
