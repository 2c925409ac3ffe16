"""Dependency file detection for pip directories."""

import re

MANIFEST = "manifest"
TOOL_VERSIONS = "tool-versions"
GLOBAL_CONFIG = "global-config"
CENTRAL_VERSIONS = "central-versions"

_AUXILIARY_FILES = {
    ".python-version": TOOL_VERSIONS,
    "pip.conf": GLOBAL_CONFIG,
    "constraints.txt": CENTRAL_VERSIONS,
}

_MANIFEST_PATTERNS = [
    r"requirements\.txt",  # requirements.txt
    r"requirements[-_.][\w.-]+\.txt",  # requirements-dev.txt, requirements_test.txt
    r"[\w.-]+[-_]requirements\.txt",  # dev-requirements.txt
]


def file_role(filename: str) -> str | None:
    """Classify a file name found in a discovery directory.

    Args:
        filename: Bare file name, no directory

    Returns:
        One of 'manifest', 'tool-versions', 'global-config',
        'central-versions', or None for unrelated files
    """
    # Auxiliary names take precedence, constraints.txt is never a project
    if filename in _AUXILIARY_FILES:
        return _AUXILIARY_FILES[filename]

    if any(re.fullmatch(pattern, filename) for pattern in _MANIFEST_PATTERNS):
        return MANIFEST

    return None
