"""Repository path canonicalization.

Every file identity that crosses component boundaries (discovery, analysis,
apply, reporting) uses the canonical form produced here: forward slashes,
no redundant segments, exactly one leading slash.
"""

import posixpath


def canonical_path(path: str, base: str | None = None) -> str:
    """Return the canonical repository path of ``path`` under ``base``.

    Args:
        path: Path relative to ``base``; may use either separator
        base: Repository-relative directory the path was discovered in

    Returns:
        Canonical repository-absolute path, e.g. ``/src/requirements.txt``
    """
    joined = f"/{base or ''}/{path or ''}".replace("\\", "/")
    # normpath keeps a leading "//", so strip the whole run of slashes
    normalized = posixpath.normpath(joined).lstrip("/")
    return f"/{normalized}"


def split_canonical(path: str) -> tuple[str, str]:
    """Split a path into its canonical directory and file name."""
    directory, name = posixpath.split(canonical_path(path))
    return directory, name
